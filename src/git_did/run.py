from __future__ import annotations

import datetime as dt
import sys
import time
from pathlib import Path

from .config import Settings
from .dates import DateWindow, resolve_window
from .git import get_current_user_email
from .models import ScanResult
from .patterns import IGNORE_FILENAME, load_ignore_patterns
from .render_json import render_json
from .render_markdown import render_markdown
from .render_text import plural, render_text
from .report import Report, build_repo_entries, collect_activity, group_by_date
from .scanner import scan_active_repos
from .terminal import TerminalCaps


def _warn(message: str) -> None:
    print(f"Warning: {message}", file=sys.stderr)


def format_activity_header(settings: Settings, window: DateWindow) -> str:
    if settings.since or settings.until:
        return f"📅 Activity from {window.since_iso} to {window.until_iso}"
    return f"📅 Activity in the last {plural(settings.days, 'day')}"


def _emit(report: Report, settings: Settings, caps: TerminalCaps, cwd: Path) -> None:
    if settings.format == "json":
        print(render_json(report))
    elif settings.format == "markdown":
        print(render_markdown(report))
    else:
        print(render_text(report, caps, cwd), end="")


def run_report(
    settings: Settings,
    *,
    caps: TerminalCaps,
    jobs: int = 8,
    cwd: Path | None = None,
    now: dt.datetime | None = None,
) -> int:
    cwd = cwd or Path.cwd()
    text = settings.format == "text"

    try:
        window = resolve_window(settings.days, settings.since, settings.until, now=now)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    root = settings.path
    if not root.is_dir():
        print(f"Error: not a directory: {root}", file=sys.stderr)
        return 1

    patterns, pattern_warnings = load_ignore_patterns(root)
    for w in pattern_warnings:
        _warn(w)

    if text:
        if patterns:
            print(f"🚫 Loaded {len(patterns)} ignore pattern(s) from {IGNORE_FILENAME}\n")
        print(f"🔍 Searching for active Git repositories in: {root}")
        print(format_activity_header(settings, window) + "\n")

    started = time.perf_counter()
    scan: ScanResult = scan_active_repos(root, window, patterns, jobs=jobs)
    for w in scan.warnings:
        _warn(w)
    repos = list(scan.repos)

    report = Report(
        mode=settings.mode,
        days=settings.days,
        since=window.since_iso,
        until=window.until_iso,
        explicit_range=bool(settings.since or settings.until),
        start_path=str(root),
    )

    if not repos:
        report.duration = f"{time.perf_counter() - started:.2f}"
        if text:
            print("❌ No active Git repositories found.")
        else:
            _emit(report, settings, caps, cwd)
        return 0

    if text:
        suffix = "ies" if len(repos) > 1 else "y"
        print(f"✅ {len(repos)} active Git repositor{suffix} found:\n")

    author: str | None = None
    if settings.mode != "short":
        if settings.author:
            author = settings.author
            if text:
                print(f"👤 Filtering commits for author: {author}\n")
        else:
            author = get_current_user_email(cwd)
            if not author:
                _warn("unable to retrieve current Git user email")
                print("    Make sure git config user.email is configured", file=sys.stderr)
                print("    Or use the --author option to specify an author\n", file=sys.stderr)
    report.author = author

    activities = collect_activity(repos, author, window, jobs=jobs) if author else []
    for act in activities:
        if act.error:
            _warn(f"{act.path}: {act.error}")

    if report.mode == "default":
        report.commits_by_date, report.rebase_summaries_by_date = group_by_date(activities)
    else:
        report.repos = build_repo_entries(
            repos,
            activities if report.mode == "project" else None,
            jobs=jobs,
            now=now,
        )

    report.duration = f"{time.perf_counter() - started:.2f}"
    _emit(report, settings, caps, cwd)
    return 0
