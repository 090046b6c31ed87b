from __future__ import annotations

import dataclasses
import datetime as dt
import re

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
SECONDS_PER_DAY = 24 * 60 * 60

_DATE_LABEL_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class InvalidDateFormat(ValueError):
    pass


class InvalidRange(ValueError):
    pass


@dataclasses.dataclass(frozen=True)
class DateWindow:
    since: dt.datetime  # inclusive
    until: dt.datetime  # inclusive
    since_label: dt.date
    until_label: dt.date

    @property
    def since_iso(self) -> str:
        return self.since_label.isoformat()

    @property
    def until_iso(self) -> str:
        return self.until_label.isoformat()

    @property
    def since_ts(self) -> float:
        return self.since.timestamp()

    @property
    def until_ts(self) -> float:
        return self.until.timestamp()

    def contains(self, timestamp: float | None) -> bool:
        if timestamp is None:
            return False
        return self.since_ts <= timestamp <= self.until_ts


def parse_date_label(value: str, *, flag: str = "date", today: dt.date | None = None) -> dt.date:
    """
    Parse a strict YYYY-MM-DD calendar date.

    Dates that only exist after normalization (2025-02-30, 2025-13-01) are
    rejected: the parsed date must format back to exactly the input.
    """
    s = (value or "").strip()
    example = (today or dt.date.today()).isoformat()
    message = f"Invalid {flag} date format: {value!r}. Use YYYY-MM-DD (e.g., {example})"
    if not _DATE_LABEL_RE.match(s):
        raise InvalidDateFormat(message)
    try:
        parsed = dt.date(int(s[0:4]), int(s[5:7]), int(s[8:10]))
    except ValueError:
        raise InvalidDateFormat(message) from None
    if parsed.isoformat() != s:
        raise InvalidDateFormat(message)
    return parsed


def start_of_day(d: dt.date) -> dt.datetime:
    return dt.datetime.combine(d, dt.time(0, 0, 0))


def end_of_day(d: dt.date) -> dt.datetime:
    return dt.datetime.combine(d, dt.time(23, 59, 59))


def resolve_window(
    days: int | None,
    since: str | None = None,
    until: str | None = None,
    *,
    now: dt.datetime | None = None,
) -> DateWindow:
    if now is None:
        now = dt.datetime.now()
    today = now.date()

    since_dt: dt.datetime | None = None
    if since:
        since_dt = start_of_day(parse_date_label(since, flag="--since", today=today))

    if until:
        until_day = parse_date_label(until, flag="--until", today=today)
        until_dt = end_of_day(until_day)
        # a days-based start counts back from the beginning of the --until day
        anchor = start_of_day(until_day)
    else:
        until_dt = now
        anchor = now

    if since_dt is None:
        if days is None:
            raise ValueError("days is required when --since is not given")
        since_dt = anchor - dt.timedelta(days=days)

    if since_dt > until_dt:
        raise InvalidRange(
            f"--since date ({since_dt.date().isoformat()}) must not be after --until date ({until_dt.date().isoformat()})"
        )

    return DateWindow(since=since_dt, until=until_dt, since_label=since_dt.date(), until_label=until_dt.date())


def day_name(label: str) -> str:
    return DAY_NAMES[dt.date.fromisoformat(label).weekday()]


def days_between(earlier_ts: float, later_ts: float) -> int:
    return abs(int((later_ts - earlier_ts) // SECONDS_PER_DAY))


def format_timestamp_date(timestamp: float) -> str:
    return dt.datetime.fromtimestamp(timestamp).date().isoformat()
