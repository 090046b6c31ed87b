from __future__ import annotations

import datetime as dt

from git_did.classify import REBASE_THRESHOLD_S, classify_commits, is_rebased_commit
from git_did.dates import resolve_window
from git_did.models import CommitRecord

WINDOW = resolve_window(None, "2025-01-10", "2025-01-20")


def _rec(sha: str, authored: dt.datetime, committed: dt.datetime, message: str = "change") -> CommitRecord:
    return CommitRecord(
        hash=sha,
        message=message,
        author_date=authored.date().isoformat(),
        author_timestamp=int(authored.timestamp()),
        author_time=authored.strftime("%H:%M"),
        commit_date=committed.date().isoformat(),
        commit_timestamp=int(committed.timestamp()),
        commit_time=committed.strftime("%H:%M"),
    )


def test_rebased_batch_is_summarized_by_recorded_date() -> None:
    records = [
        _rec("aaaaaaa", dt.datetime(2025, 1, 2, 9, 0), dt.datetime(2025, 1, 15, 14, 5), "second"),
        _rec("bbbbbbb", dt.datetime(2025, 1, 1, 16, 0), dt.datetime(2025, 1, 15, 14, 5), "first"),
    ]
    out = classify_commits(records, WINDOW)
    assert out.commits == ()
    assert len(out.rebase_summaries) == 1
    s = out.rebase_summaries[0]
    assert s.count == 2
    assert s.first_author_date == "2025-01-01"
    assert s.last_author_date == "2025-01-02"
    assert s.commit_date == "2025-01-15"
    assert s.commit_time == "14:05"
    assert s.author_date_range == "2025-01-01 to 2025-01-02"
    assert [c.hash for c in s.commits] == ["aaaaaaa", "bbbbbbb"]
    assert s.commits[1].date == "2025-01-01"
    assert s.commits[1].message == "first"


def test_same_day_commit_in_window_is_individual() -> None:
    rec = _rec("ccccccc", dt.datetime(2025, 1, 12, 10, 0), dt.datetime(2025, 1, 12, 10, 3))
    out = classify_commits([rec], WINDOW)
    assert out.rebase_summaries == ()
    assert len(out.commits) == 1
    c = out.commits[0]
    assert c.record == rec
    assert c.is_rebased is False
    assert c.author_in_range is True
    assert c.commit_in_range is True


def test_authored_in_window_wins_over_rebase() -> None:
    rec = _rec("ddddddd", dt.datetime(2025, 1, 11, 10, 0), dt.datetime(2025, 1, 19, 18, 0))
    out = classify_commits([rec], WINDOW)
    assert len(out.commits) == 1
    assert out.commits[0].is_rebased is True
    assert out.rebase_summaries == ()


def test_authored_in_window_recorded_after_window_still_listed() -> None:
    rec = _rec("eeeeeee", dt.datetime(2025, 1, 20, 9, 0), dt.datetime(2025, 2, 3, 9, 0))
    out = classify_commits([rec], WINDOW)
    assert [c.hash for c in out.commits] == ["eeeeeee"]
    assert out.commits[0].commit_in_range is False


def test_recorded_in_window_without_rebase_gap_is_dropped() -> None:
    # authored just before the window, committed a couple of hours later
    rec = _rec("fffffff", dt.datetime(2025, 1, 9, 23, 0), dt.datetime(2025, 1, 10, 1, 0))
    out = classify_commits([rec], WINDOW)
    assert out.commits == ()
    assert out.rebase_summaries == ()


def test_entirely_outside_window_is_dropped() -> None:
    before = _rec("1111111", dt.datetime(2024, 12, 1, 9, 0), dt.datetime(2024, 12, 20, 9, 0))
    after = _rec("2222222", dt.datetime(2025, 2, 1, 9, 0), dt.datetime(2025, 2, 1, 9, 0))
    out = classify_commits([before, after], WINDOW)
    assert out.commits == ()
    assert out.rebase_summaries == ()


def test_different_recorded_dates_give_separate_summaries() -> None:
    records = [
        _rec("3333333", dt.datetime(2025, 1, 1, 9, 0), dt.datetime(2025, 1, 18, 9, 0)),
        _rec("4444444", dt.datetime(2025, 1, 3, 9, 0), dt.datetime(2025, 1, 12, 20, 0)),
        _rec("5555555", dt.datetime(2025, 1, 2, 9, 0), dt.datetime(2025, 1, 12, 20, 1)),
    ]
    out = classify_commits(records, WINDOW)
    assert [(s.commit_date, s.count) for s in out.rebase_summaries] == [("2025-01-12", 2), ("2025-01-18", 1)]
    single = out.rebase_summaries[1]
    assert single.first_author_date == single.last_author_date == "2025-01-01"
    assert single.author_date_range == "2025-01-01"


def test_categories_partition_the_input() -> None:
    records = [
        _rec("a000001", dt.datetime(2025, 1, 12, 9, 0), dt.datetime(2025, 1, 12, 9, 0)),
        _rec("a000002", dt.datetime(2025, 1, 13, 9, 0), dt.datetime(2025, 1, 17, 9, 0)),
        _rec("a000003", dt.datetime(2025, 1, 2, 9, 0), dt.datetime(2025, 1, 15, 9, 0)),
        _rec("a000004", dt.datetime(2025, 1, 3, 9, 0), dt.datetime(2025, 1, 15, 9, 30)),
        _rec("a000005", dt.datetime(2024, 11, 3, 9, 0), dt.datetime(2024, 11, 30, 9, 0)),
        _rec("a000006", dt.datetime(2025, 1, 9, 22, 0), dt.datetime(2025, 1, 10, 2, 0)),
    ]
    out = classify_commits(records, WINDOW)
    individual = {c.hash for c in out.commits}
    summarized = {ref.hash for s in out.rebase_summaries for ref in s.commits}
    dropped = {r.hash for r in records} - individual - summarized
    assert individual == {"a000001", "a000002"}
    assert summarized == {"a000003", "a000004"}
    assert dropped == {"a000005", "a000006"}
    assert not individual & summarized
    assert len(individual) + len(summarized) + len(dropped) == len(records)
    assert sum(s.count for s in out.rebase_summaries) == len(summarized)


def test_classify_is_idempotent() -> None:
    records = [
        _rec("b000001", dt.datetime(2025, 1, 12, 9, 0), dt.datetime(2025, 1, 12, 9, 0)),
        _rec("b000002", dt.datetime(2025, 1, 2, 9, 0), dt.datetime(2025, 1, 15, 9, 0)),
    ]
    assert classify_commits(records, WINDOW) == classify_commits(records, WINDOW)
    assert classify_commits(tuple(records), WINDOW) == classify_commits(list(records), WINDOW)


def test_empty_input() -> None:
    out = classify_commits([], WINDOW)
    assert out.commits == ()
    assert out.rebase_summaries == ()


def test_rebase_threshold_is_strictly_more_than_one_day() -> None:
    assert REBASE_THRESHOLD_S == 86400
    assert is_rebased_commit(1_000_000, 1_000_000 + 86400) is False
    assert is_rebased_commit(1_000_000, 1_000_000 + 86401) is True
    assert is_rebased_commit(1_000_000 + 86401, 1_000_000) is True
