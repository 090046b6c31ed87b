from __future__ import annotations

import subprocess
from pathlib import Path

from .dates import DateWindow
from .models import CommitRecord, GitLogResult

# short hash|subject|author date|author unix ts|author ISO|commit date|commit unix ts|commit ISO
LOG_FORMAT = "%h|%s|%as|%at|%aI|%cs|%ct|%cI"
LOG_TAIL_FIELDS = 6
LOG_MIN_FIELDS = 1 + 1 + LOG_TAIL_FIELDS


def run_git(args: list[str], cwd: Path, timeout_s: int = 300) -> tuple[int, str, str]:
    try:
        proc = subprocess.run(
            ["git", *args],
            cwd=str(cwd),
            capture_output=True,
            text=True,
            # subjects without an encoding header come back as raw bytes
            encoding="utf-8",
            errors="replace",
            timeout=timeout_s,
        )
    except FileNotFoundError as e:
        return 127, "", str(e)
    except subprocess.TimeoutExpired:
        return 124, "", f"git {' '.join(args)} timed out after {timeout_s}s"
    except OSError as e:
        return 126, "", str(e)
    return proc.returncode, proc.stdout, proc.stderr


def is_git_repository(path: Path) -> bool:
    try:
        return (path / ".git").is_dir()
    except OSError:
        return False


def get_last_commit_times(repo: Path) -> tuple[int | None, int | None]:
    code, out, _ = run_git(["log", "-1", "--all", "--format=%at|%ct"], cwd=repo)
    if code != 0:
        return None, None
    line = out.strip()
    if not line:
        return None, None
    parts = line.split("|", 1)
    if len(parts) != 2:
        return None, None
    try:
        return int(parts[0].strip()), int(parts[1].strip())
    except ValueError:
        return None, None


def has_recent_activity(repo: Path, window: DateWindow) -> bool:
    author_ts, commit_ts = get_last_commit_times(repo)
    if author_ts is None and commit_ts is None:
        return False
    return window.contains(author_ts) or window.contains(commit_ts)


def _time_of_day(iso: str) -> str:
    if "T" not in iso:
        return ""
    return iso.split("T", 1)[1][:5]


def parse_log_line(line: str) -> CommitRecord | None:
    parts = line.rstrip("\n").split("|")
    if len(parts) < LOG_MIN_FIELDS:
        return None
    # the subject is the only free-text field, so it absorbs any extra separators
    head = parts[0]
    subject = "|".join(parts[1:-LOG_TAIL_FIELDS])
    author_date, author_ts_s, author_iso, commit_date, commit_ts_s, commit_iso = parts[-LOG_TAIL_FIELDS:]
    try:
        author_ts = int(author_ts_s)
        commit_ts = int(commit_ts_s)
    except ValueError:
        return None
    return CommitRecord(
        hash=head.strip(),
        message=subject,
        author_date=author_date.strip(),
        author_timestamp=author_ts,
        author_time=_time_of_day(author_iso.strip()),
        commit_date=commit_date.strip(),
        commit_timestamp=commit_ts,
        commit_time=_time_of_day(commit_iso.strip()),
    )


def parse_log_output(text: str) -> list[CommitRecord]:
    records: list[CommitRecord] = []
    for line in text.splitlines():
        if not line.strip():
            continue
        rec = parse_log_line(line)
        if rec is not None:
            records.append(rec)
    return records


def get_user_commits(repo: Path, author: str) -> GitLogResult:
    code, out, err = run_git(
        ["log", "--all", f"--author={author}", "--abbrev=7", f"--format={LOG_FORMAT}"],
        cwd=repo,
    )
    if code != 0:
        return GitLogResult(commits=(), error=f"git log exited {code}: {err.strip()[:500]}")
    return GitLogResult(commits=tuple(parse_log_output(out)))


def get_current_user_email(cwd: Path | None = None) -> str | None:
    code, out, _ = run_git(["config", "user.email"], cwd=cwd or Path.cwd())
    if code != 0:
        return None
    return out.strip() or None


def get_git_config(key: str, cwd: Path | None = None) -> str | None:
    code, out, _ = run_git(["config", f"did.{key}"], cwd=cwd or Path.cwd())
    if code != 0:
        return None
    return out.strip() or None
