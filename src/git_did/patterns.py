from __future__ import annotations

import dataclasses
import re
from pathlib import Path

IGNORE_FILENAME = ".didignore"


class InvalidPatternError(ValueError):
    pass


@dataclasses.dataclass(frozen=True)
class IgnorePattern:
    """
    One compiled `.didignore` rule, matched against a scan-root-relative path
    with forward-slash separators.

      - `/name`  anchored: only matches from the start of the relative path
      - `name/`  directory-only: matches the directory and everything beneath it
      - `*`, `?` any run of characters / any single character
    """

    source: str
    anchored: bool
    directory_only: bool
    regex: re.Pattern[str]

    def matches(self, path: str, *, is_dir: bool = True) -> bool:
        m = self.regex.search(normalize_relative_path(path))
        if m is None:
            return False
        if self.directory_only and not is_dir and not m.group("rest"):
            # `build/` never matches a plain file called "build"
            return False
        return True


def normalize_relative_path(path: str) -> str:
    p = str(path).replace("\\", "/")
    while p.startswith("./"):
        p = p[2:]
    return p.rstrip("/")


def _translate(body: str) -> str:
    out: list[str] = []
    for ch in body:
        if ch == "*":
            out.append(".*")
        elif ch == "?":
            out.append(".")
        else:
            out.append(re.escape(ch))
    return "".join(out)


def compile_pattern(pattern: str) -> IgnorePattern:
    raw = (pattern or "").strip()
    anchored = raw.startswith("/")
    directory_only = raw.endswith("/")

    body = raw
    if directory_only:
        body = body.rstrip("/")
    if anchored:
        body = body.lstrip("/")
    if not body:
        raise InvalidPatternError(f"Invalid pattern in {IGNORE_FILENAME}: {pattern!r} (empty after stripping '/')")

    prefix = "^" if anchored else "(?:^|/)"
    try:
        regex = re.compile(f"{prefix}{_translate(body)}(?P<rest>/.*)?$")
    except (re.error, RecursionError, OverflowError) as e:
        raise InvalidPatternError(f"Invalid pattern in {IGNORE_FILENAME}: {pattern!r} ({e})") from None
    return IgnorePattern(source=raw, anchored=anchored, directory_only=directory_only, regex=regex)


def compile_patterns(patterns: list[str]) -> tuple[list[IgnorePattern], list[str]]:
    compiled: list[IgnorePattern] = []
    warnings: list[str] = []
    for pat in patterns:
        try:
            compiled.append(compile_pattern(pat))
        except InvalidPatternError as e:
            warnings.append(str(e))
    return compiled, warnings


def matches_any(path: str, patterns: list[IgnorePattern], *, is_dir: bool = True) -> bool:
    return any(p.matches(path, is_dir=is_dir) for p in patterns)


def parse_ignore_text(text: str) -> list[str]:
    out: list[str] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        out.append(line)
    return out


def read_ignore_file(path: Path) -> list[str]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return []
    return parse_ignore_text(text)


def load_ignore_patterns(scan_root: Path) -> tuple[list[IgnorePattern], list[str]]:
    return compile_patterns(read_ignore_file(scan_root / IGNORE_FILENAME))
