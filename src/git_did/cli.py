from __future__ import annotations

import argparse
import os
import re
import sys
from pathlib import Path
from typing import Mapping

from . import __version__
from .config import FORMATS, load_git_config, merge_config, parse_config
from .run import run_report
from .terminal import apply_color_override, detect_terminal_capabilities

_INT_RE = re.compile(r"^[+-]?\d+$")


def prog_name(env: Mapping[str, str]) -> str:
    # git exports GIT_EXEC_PATH when it runs `git did` as a subcommand
    return "git did" if "GIT_EXEC_PATH" in env else "git-did"


def _build_parser(prog: str = "git-did") -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Show what you did: recent commits across every active git repository under a directory.",
    )
    parser.add_argument("first", nargs="?", default=None, metavar="days", help="Number of days to look back (default: 7).")
    parser.add_argument("second", nargs="?", default=None, metavar="path", help="Directory to scan (default: current directory).")
    parser.add_argument("--since", type=str, default=None, help="Start date (YYYY-MM-DD, inclusive).")
    parser.add_argument("--until", type=str, default=None, help="End date (YYYY-MM-DD, inclusive).")
    parser.add_argument("--project", action="store_const", const=True, default=None, help="Group commits by project.")
    parser.add_argument("--short", action="store_const", const=True, default=None, help="Only list active projects and their last commit.")
    parser.add_argument("--author", type=str, default=None, help="Author pattern (default: git config user.email).")
    parser.add_argument("--format", dest="fmt", choices=list(FORMATS), default=None, help="Output format (default: text).")
    parser.add_argument("--color", dest="color", action="store_const", const=True, default=None, help="Force colored output.")
    parser.add_argument("--no-color", dest="color", action="store_const", const=False, help="Disable colored output.")
    parser.add_argument(
        "--jobs",
        type=int,
        default=max(1, min(8, (os.cpu_count() or 4))),
        help="Parallel directory and git jobs.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _is_int(value: str | None) -> bool:
    return value is not None and bool(_INT_RE.match(value.strip()))


def _days(value: str) -> int:
    days = int(value)
    if days < 1:
        raise SystemExit(f"Error: number of days must be at least 1, got {value.strip()}")
    return days


def parse_arguments(first: str | None, second: str | None) -> tuple[int | None, str]:
    """Days and path may be given in either order; both are optional."""
    if _is_int(first):
        return _days(str(first)), second or "."
    if first and _is_int(second):
        return _days(str(second)), first
    if first:
        return None, first
    return None, "."


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    env = os.environ

    parser = _build_parser(prog_name(env))
    args = parser.parse_args(argv)
    days, path = parse_arguments(args.first, args.second)

    git_config = parse_config(load_git_config())
    settings = merge_config(
        path=Path(path),
        days=days,
        since=args.since,
        until=args.until,
        project=args.project,
        short=args.short,
        author=args.author,
        fmt=args.fmt,
        color=args.color,
        git_config=git_config,
    )

    caps = apply_color_override(detect_terminal_capabilities(env, is_tty=sys.stdout.isatty()), settings.color)
    return run_report(settings, caps=caps, jobs=int(args.jobs))


if __name__ == "__main__":
    raise SystemExit(main())
