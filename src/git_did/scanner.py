from __future__ import annotations

import dataclasses
import errno
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from .dates import DateWindow
from .git import has_recent_activity, is_git_repository
from .models import ScanResult
from .patterns import IgnorePattern, matches_any

_PERMISSION_ERRNOS = frozenset({errno.EACCES, errno.EPERM})


@dataclasses.dataclass(frozen=True)
class DirInspection:
    path: Path
    is_repo: bool = False
    active: bool = False
    children: tuple[Path, ...] = ()
    warning: str = ""


def is_permission_error(err: OSError) -> bool:
    return isinstance(err, PermissionError) or err.errno in _PERMISSION_ERRNOS


def canonical_path(path: Path) -> str | None:
    try:
        os.stat(path)
        return os.path.realpath(path)
    except OSError:
        return None


def relative_to_root(path: Path, root: Path) -> str:
    try:
        rel = path.relative_to(root).as_posix()
    except ValueError:
        rel = os.path.relpath(path, root).replace(os.sep, "/")
    return "" if rel == "." else rel


def list_subdirectories(path: Path) -> list[Path]:
    out: list[Path] = []
    with os.scandir(path) as it:
        for entry in it:
            if entry.name.startswith("."):
                continue
            try:
                if entry.is_dir():
                    out.append(Path(entry.path))
            except OSError:
                continue
    out.sort(key=lambda p: p.name)
    return out


def inspect_directory(path: Path, window: DateWindow) -> DirInspection:
    if is_git_repository(path):
        return DirInspection(path=path, is_repo=True, active=has_recent_activity(path, window))
    try:
        children = list_subdirectories(path)
    except OSError as e:
        if is_permission_error(e):
            return DirInspection(path=path)
        return DirInspection(path=path, warning=f"Error reading {path}: {e.strerror or e}")
    return DirInspection(path=path, children=tuple(children))


def scan_active_repos(
    root: Path,
    window: DateWindow,
    ignore_patterns: list[IgnorePattern],
    *,
    jobs: int = 8,
) -> ScanResult:
    """
    Find repositories under `root` whose last commit (by authored or recorded
    timestamp) falls inside `window`.

    The tree is walked one depth level at a time. This thread owns the visited
    set and the ignore check; the per-directory work (repository probe, git
    query, listing children) runs on the pool and each task returns its own
    `DirInspection`, merged here. Repository directories are leaves: nothing
    below a `.git` parent is scanned, active or not.
    """
    root = Path(root)
    visited: set[str] = set()
    found: list[Path] = []
    warnings: list[str] = []

    frontier: list[Path] = [root]
    with ThreadPoolExecutor(max_workers=max(1, int(jobs))) as ex:
        while frontier:
            admitted: list[Path] = []
            for d in frontier:
                # ignored aliases must not claim the canonical path of their target
                rel = relative_to_root(d, root)
                if rel and matches_any(rel, ignore_patterns):
                    continue
                canon = canonical_path(d)
                if canon is None or canon in visited:
                    continue
                visited.add(canon)
                admitted.append(d)

            futs = [ex.submit(inspect_directory, d, window) for d in admitted]
            next_frontier: list[Path] = []
            for fut in as_completed(futs):
                res = fut.result()
                if res.warning:
                    warnings.append(res.warning)
                if res.is_repo:
                    if res.active:
                        found.append(res.path)
                    continue
                next_frontier.extend(res.children)

            next_frontier.sort(key=lambda p: p.as_posix())
            frontier = next_frontier

    found.sort(key=lambda p: p.as_posix())
    warnings.sort()
    return ScanResult(repos=tuple(found), warnings=tuple(warnings))
