from __future__ import annotations

from pathlib import Path

from .dates import day_name
from .models import ClassifiedCommit, RebaseSummary
from .report import Report, RepoEntry, format_repo_path
from .terminal import (
    TerminalCaps,
    colorize,
    days_ago_color,
    hash_color,
    message_color,
    note_color,
    rebase_color,
    time_color,
)

SEPARATOR_LENGTH = 60


def separator(length: int = SEPARATOR_LENGTH, char: str = "─") -> str:
    return char * length


def plural(n: int, word: str) -> str:
    return f"{n} {word}{'' if n == 1 else 's'}"


def render_commit_line(c: ClassifiedCommit, caps: TerminalCaps, indent: str) -> str:
    t = colorize(c.time, time_color(c.time, caps), caps)
    h = colorize(c.hash, hash_color(caps), caps)
    m = colorize(c.message, message_color(caps), caps)
    note = colorize(f" (rebased on {c.record.commit_date})", note_color(caps), caps) if c.is_rebased else ""
    return f"{indent}{t} {h} - {m}{note}"


def render_summary_line(s: RebaseSummary, caps: TerminalCaps, indent: str) -> str:
    t = colorize(s.commit_time, time_color(s.commit_time, caps), caps)
    icon = colorize("⟲", rebase_color(caps), caps)
    text = colorize(f"Rebased {plural(s.count, 'commit')} from {s.author_date_range}", note_color(caps), caps)
    return f"{indent}{t} {icon} {text}"


def render_chronological(report: Report, caps: TerminalCaps, cwd: Path) -> str:
    lines: list[str] = []
    for date in report.dates:
        lines.append(f"📅 {date} ({day_name(date)})")
        lines.append(separator())
        commits = report.commits_by_date.get(date, {})
        summaries = report.rebase_summaries_by_date.get(date, {})
        repos = list(commits)
        repos.extend(r for r in summaries if r not in commits)
        for repo in repos:
            lines.append("")
            lines.append(f"  📁 {format_repo_path(repo, cwd)}")
            for s in summaries.get(repo, []):
                lines.append(render_summary_line(s, caps, "     "))
            for c in commits.get(repo, []):
                lines.append(render_commit_line(c, caps, "     "))
        lines.append("")
    return "\n".join(lines) + ("\n" if lines else "")


def render_repo_commits(entry: RepoEntry, caps: TerminalCaps) -> list[str]:
    by_date: dict[str, tuple[list[RebaseSummary], list[ClassifiedCommit]]] = {}
    for s in entry.rebase_summaries:
        by_date.setdefault(s.commit_date, ([], []))[0].append(s)
    for c in entry.commits:
        by_date.setdefault(c.date, ([], []))[1].append(c)

    lines = ["", "     Your commits:"]
    for date in sorted(by_date):
        summaries, commits = by_date[date]
        lines.append("")
        lines.append(f"        📅 {date} ({day_name(date)})")
        for s in summaries:
            lines.append(render_summary_line(s, caps, "           "))
        for c in commits:
            lines.append(render_commit_line(c, caps, "           "))
    lines.append("")
    return lines


def render_repo_list(report: Report, caps: TerminalCaps, cwd: Path) -> str:
    lines: list[str] = []
    for entry in report.repos:
        lines.append(f"  📁 {format_repo_path(entry.path, cwd)}")
        if entry.days_ago is None:
            lines.append("     └─ Last commit: unknown")
        else:
            ago = colorize(f"{plural(entry.days_ago, 'day')} ago", days_ago_color(entry.days_ago, caps), caps)
            when = colorize(entry.last_commit_date or "", message_color(caps), caps)
            lines.append(f"     └─ Last commit: {ago} ({when})")
        if report.mode == "project" and (entry.commits or entry.rebase_summaries):
            lines.extend(render_repo_commits(entry, caps))
    return "\n".join(lines) + ("\n" if lines else "")


def render_text(report: Report, caps: TerminalCaps, cwd: Path) -> str:
    if report.mode == "default":
        if not report.dates:
            return "❌ No commits found for this author in the specified period.\n"
        return render_chronological(report, caps, cwd)
    return render_repo_list(report, caps, cwd)
