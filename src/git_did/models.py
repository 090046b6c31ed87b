from __future__ import annotations

import dataclasses
from pathlib import Path


@dataclasses.dataclass(frozen=True)
class CommitRecord:
    hash: str
    message: str
    author_date: str  # YYYY-MM-DD
    author_timestamp: int
    author_time: str  # HH:MM, author's local time
    commit_date: str  # YYYY-MM-DD
    commit_timestamp: int
    commit_time: str  # HH:MM, committer's local time


@dataclasses.dataclass(frozen=True)
class ClassifiedCommit:
    record: CommitRecord
    is_rebased: bool
    author_in_range: bool
    commit_in_range: bool

    @property
    def hash(self) -> str:
        return self.record.hash

    @property
    def message(self) -> str:
        return self.record.message

    @property
    def date(self) -> str:
        return self.record.author_date

    @property
    def time(self) -> str:
        return self.record.author_time

    def to_dict(self) -> dict[str, object]:
        return {
            "hash": self.record.hash,
            "message": self.record.message,
            "date": self.record.author_date,
            "time": self.record.author_time,
            "timestamp": self.record.author_timestamp,
            "commit_date": self.record.commit_date,
            "commit_timestamp": self.record.commit_timestamp,
            "is_rebase": self.is_rebased,
        }


@dataclasses.dataclass(frozen=True)
class RebasedCommitRef:
    hash: str
    date: str
    message: str


@dataclasses.dataclass(frozen=True)
class RebaseSummary:
    commit_date: str
    commit_time: str
    count: int
    first_author_date: str
    last_author_date: str
    commits: tuple[RebasedCommitRef, ...] = ()

    @property
    def author_date_range(self) -> str:
        if self.first_author_date == self.last_author_date:
            return self.first_author_date
        return f"{self.first_author_date} to {self.last_author_date}"

    def to_dict(self) -> dict[str, object]:
        return {
            "type": "rebase-summary",
            "count": self.count,
            "commit_date": self.commit_date,
            "commit_time": self.commit_time,
            "first_author_date": self.first_author_date,
            "last_author_date": self.last_author_date,
            "commits": [dataclasses.asdict(c) for c in self.commits],
        }


@dataclasses.dataclass(frozen=True)
class Classification:
    commits: tuple[ClassifiedCommit, ...]
    rebase_summaries: tuple[RebaseSummary, ...]


@dataclasses.dataclass(frozen=True)
class ScanResult:
    repos: tuple[Path, ...]
    warnings: tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class GitLogResult:
    commits: tuple[CommitRecord, ...]
    error: str = ""
