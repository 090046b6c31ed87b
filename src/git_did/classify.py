from __future__ import annotations

from collections import defaultdict

from .dates import SECONDS_PER_DAY, DateWindow
from .models import Classification, ClassifiedCommit, CommitRecord, RebasedCommitRef, RebaseSummary

REBASE_THRESHOLD_S = SECONDS_PER_DAY


def is_rebased_commit(author_ts: int, commit_ts: int, threshold_s: int = REBASE_THRESHOLD_S) -> bool:
    return abs(commit_ts - author_ts) > threshold_s


def classify_commit(record: CommitRecord, window: DateWindow) -> ClassifiedCommit:
    return ClassifiedCommit(
        record=record,
        is_rebased=is_rebased_commit(record.author_timestamp, record.commit_timestamp),
        author_in_range=window.contains(record.author_timestamp),
        commit_in_range=window.contains(record.commit_timestamp),
    )


def summarize_rebases(rebased: list[ClassifiedCommit]) -> list[RebaseSummary]:
    by_commit_date: dict[str, list[ClassifiedCommit]] = defaultdict(list)
    for c in rebased:
        by_commit_date[c.record.commit_date].append(c)

    summaries: list[RebaseSummary] = []
    for commit_date in sorted(by_commit_date):
        batch = by_commit_date[commit_date]
        # zero-padded ISO dates sort chronologically as strings
        author_dates = sorted(c.record.author_date for c in batch)
        summaries.append(
            RebaseSummary(
                commit_date=commit_date,
                commit_time=batch[0].record.commit_time,
                count=len(batch),
                first_author_date=author_dates[0],
                last_author_date=author_dates[-1],
                commits=tuple(
                    RebasedCommitRef(hash=c.record.hash, date=c.record.author_date, message=c.record.message)
                    for c in batch
                ),
            )
        )
    return summaries


def classify_commits(records: list[CommitRecord] | tuple[CommitRecord, ...], window: DateWindow) -> Classification:
    """
    Split raw commits into the ones authored inside the window and per-day
    summaries of commits that were only rewritten (rebased, amended) inside it.

    A commit whose authored timestamp is in the window is always reported
    individually, even when it was rebased later. A commit authored outside
    the window is summarized only if it looks rebased (recorded more than a
    day away from authored) and its recorded timestamp is in the window.
    Everything else is dropped.
    """
    individual: list[ClassifiedCommit] = []
    rebased: list[ClassifiedCommit] = []
    for rec in records:
        c = classify_commit(rec, window)
        if c.author_in_range:
            individual.append(c)
        elif c.is_rebased and c.commit_in_range:
            rebased.append(c)
    return Classification(commits=tuple(individual), rebase_summaries=tuple(summarize_rebases(rebased)))
