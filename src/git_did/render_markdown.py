from __future__ import annotations

from .dates import day_name
from .models import ClassifiedCommit, RebaseSummary
from .report import Report


def _commit_item(c: ClassifiedCommit) -> str:
    note = f" *(rebased on {c.record.commit_date})*" if c.is_rebased else ""
    return f"- **{c.time}** `{c.hash}` - {c.message}{note}"


def _summary_item(s: RebaseSummary) -> str:
    word = "commit" if s.count == 1 else "commits"
    return f"- **{s.commit_time}** ⟲ Rebased {s.count} {word} from {s.author_date_range}"


def render_markdown(report: Report) -> str:
    lines: list[str] = ["# Git Activity Report", ""]
    if report.explicit_range:
        lines.append(f"- **Period**: {report.since} to {report.until}")
    else:
        lines.append(f"- **Period**: Last {report.days} day{'' if report.days == 1 else 's'}")
    lines.append(f"- **Mode**: {report.mode}")
    if report.author:
        lines.append(f"- **Author**: {report.author}")
    lines.append(f"- **Repositories found**: {report.repo_count}")
    lines.append(f"- **Execution time**: {report.duration}s")
    lines.append("")

    if report.repo_count == 0:
        lines.append("No active repositories found.")
        return "\n".join(lines) + "\n"

    lines.append("---")
    lines.append("")

    if report.mode == "default":
        for date in report.dates:
            lines.append(f"## {date} ({day_name(date)})")
            lines.append("")
            commits = report.commits_by_date.get(date, {})
            summaries = report.rebase_summaries_by_date.get(date, {})
            repos = list(commits)
            repos.extend(r for r in summaries if r not in commits)
            for repo in repos:
                lines.append(f"### {repo}")
                lines.append("")
                lines.extend(_summary_item(s) for s in summaries.get(repo, []))
                lines.extend(_commit_item(c) for c in commits.get(repo, []))
                lines.append("")
        return "\n".join(lines)

    for entry in report.repos:
        lines.append(f"## {entry.path}")
        lines.append("")
        if entry.days_ago is None:
            lines.append("- **Last commit**: unknown")
        else:
            lines.append(
                f"- **Last commit**: {entry.days_ago} day{'' if entry.days_ago == 1 else 's'} ago ({entry.last_commit_date})"
            )
        lines.append("")
        if report.mode == "short" or not (entry.commits or entry.rebase_summaries):
            continue

        lines.append("### Your commits")
        lines.append("")
        dates = sorted({c.date for c in entry.commits} | {s.commit_date for s in entry.rebase_summaries})
        for date in dates:
            lines.append(f"#### {date} ({day_name(date)})")
            lines.append("")
            lines.extend(_summary_item(s) for s in entry.rebase_summaries if s.commit_date == date)
            lines.extend(_commit_item(c) for c in entry.commits if c.date == date)
            lines.append("")
    return "\n".join(lines)
