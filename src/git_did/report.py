from __future__ import annotations

import dataclasses
import datetime as dt
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from .classify import classify_commits
from .dates import DateWindow, days_between, format_timestamp_date
from .git import get_last_commit_times, get_user_commits
from .models import ClassifiedCommit, RebaseSummary

CommitsByDate = dict[str, dict[str, list[ClassifiedCommit]]]
SummariesByDate = dict[str, dict[str, list[RebaseSummary]]]


@dataclasses.dataclass(frozen=True)
class RepoActivity:
    path: Path
    commits: tuple[ClassifiedCommit, ...] = ()
    rebase_summaries: tuple[RebaseSummary, ...] = ()
    error: str = ""


@dataclasses.dataclass(frozen=True)
class RepoEntry:
    path: str
    last_commit_date: str | None
    days_ago: int | None
    commits: tuple[ClassifiedCommit, ...] = ()
    rebase_summaries: tuple[RebaseSummary, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "path": self.path,
            "last_commit_date": self.last_commit_date,
            "days_ago": self.days_ago,
            "commits": [c.to_dict() for c in self.commits],
            "rebase_summaries": [s.to_dict() for s in self.rebase_summaries],
        }


@dataclasses.dataclass
class Report:
    mode: str
    days: int
    since: str
    until: str
    explicit_range: bool
    start_path: str
    duration: str = "0.00"
    author: str | None = None
    repos: list[RepoEntry] = dataclasses.field(default_factory=list)
    commits_by_date: CommitsByDate = dataclasses.field(default_factory=dict)
    rebase_summaries_by_date: SummariesByDate = dataclasses.field(default_factory=dict)

    @property
    def dates(self) -> list[str]:
        return sorted(set(self.commits_by_date) | set(self.rebase_summaries_by_date))

    @property
    def repo_count(self) -> int:
        if self.mode == "default":
            seen: set[str] = set()
            for by_repo in (*self.commits_by_date.values(), *self.rebase_summaries_by_date.values()):
                seen.update(by_repo)
            return len(seen)
        return len(self.repos)

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {
            "mode": self.mode,
            "days": self.days,
            "since": self.since,
            "until": self.until,
            "start_path": self.start_path,
            "duration": self.duration,
        }
        if self.author:
            out["author"] = self.author
        if self.mode == "default":
            out["repos"] = default_mode_repo_paths(self.commits_by_date, self.rebase_summaries_by_date)
            out["commits_by_date"] = {
                date: {repo: [c.to_dict() for c in commits] for repo, commits in by_repo.items()}
                for date, by_repo in sorted(self.commits_by_date.items())
            }
            out["rebase_summaries_by_date"] = {
                date: {repo: [s.to_dict() for s in sums] for repo, sums in by_repo.items()}
                for date, by_repo in sorted(self.rebase_summaries_by_date.items())
            }
        else:
            out["repos"] = [r.to_dict() for r in self.repos]
        return out


def format_repo_path(repo_path: str, cwd: Path) -> str:
    if repo_path == ".":
        return f". ({cwd.name})"
    return repo_path


def fetch_repo_activity(repo: Path, author: str, window: DateWindow) -> RepoActivity:
    log = get_user_commits(repo, author)
    if log.error:
        return RepoActivity(path=repo, error=log.error)
    classified = classify_commits(log.commits, window)
    return RepoActivity(path=repo, commits=classified.commits, rebase_summaries=classified.rebase_summaries)


def collect_activity(repos: list[Path], author: str, window: DateWindow, *, jobs: int = 8) -> list[RepoActivity]:
    if not repos:
        return []
    by_path: dict[Path, RepoActivity] = {}
    with ThreadPoolExecutor(max_workers=max(1, int(jobs))) as ex:
        futs = [ex.submit(fetch_repo_activity, repo, author, window) for repo in repos]
        for fut in as_completed(futs):
            res = fut.result()
            by_path[res.path] = res
    return [by_path[repo] for repo in repos]


def _sorted_commits(commits: list[ClassifiedCommit]) -> list[ClassifiedCommit]:
    return sorted(commits, key=lambda c: (c.record.author_timestamp, c.record.hash))


def group_by_date(activities: list[RepoActivity]) -> tuple[CommitsByDate, SummariesByDate]:
    commits_by_date: CommitsByDate = {}
    summaries_by_date: SummariesByDate = {}
    for act in activities:
        repo = str(act.path)
        for c in act.commits:
            commits_by_date.setdefault(c.date, {}).setdefault(repo, []).append(c)
        for s in act.rebase_summaries:
            summaries_by_date.setdefault(s.commit_date, {}).setdefault(repo, []).append(s)
    for by_repo in commits_by_date.values():
        for repo in by_repo:
            by_repo[repo] = _sorted_commits(by_repo[repo])
    return dict(sorted(commits_by_date.items())), dict(sorted(summaries_by_date.items()))


def default_mode_repo_paths(commits_by_date: CommitsByDate, summaries_by_date: SummariesByDate) -> list[str]:
    out: list[str] = []
    for date in sorted(set(commits_by_date) | set(summaries_by_date)):
        for repo in [*commits_by_date.get(date, {}), *summaries_by_date.get(date, {})]:
            if repo not in out:
                out.append(repo)
    return out


def repo_recency(repo: Path, *, now: dt.datetime | None = None) -> tuple[str | None, int | None]:
    author_ts, commit_ts = get_last_commit_times(repo)
    ts = commit_ts if commit_ts is not None else author_ts
    if ts is None:
        return None, None
    now_ts = (now or dt.datetime.now()).timestamp()
    days_ago = days_between(ts, now_ts) if ts <= now_ts else 0
    return format_timestamp_date(ts), days_ago


def build_repo_entries(
    repos: list[Path],
    activities: list[RepoActivity] | None,
    *,
    jobs: int = 8,
    now: dt.datetime | None = None,
) -> list[RepoEntry]:
    by_path = {a.path: a for a in (activities or [])}
    recency: dict[Path, tuple[str | None, int | None]] = {}
    with ThreadPoolExecutor(max_workers=max(1, int(jobs))) as ex:
        futs = {ex.submit(repo_recency, repo, now=now): repo for repo in repos}
        for fut in as_completed(futs):
            recency[futs[fut]] = fut.result()

    entries: list[RepoEntry] = []
    for repo in repos:
        last_date, days_ago = recency.get(repo, (None, None))
        act = by_path.get(repo)
        entries.append(
            RepoEntry(
                path=str(repo),
                last_commit_date=last_date,
                days_ago=days_ago,
                commits=tuple(_sorted_commits(list(act.commits))) if act else (),
                rebase_summaries=act.rebase_summaries if act else (),
            )
        )
    return entries
