from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Callable, Optional

from .git import get_git_config

CONFIG_KEYS = ("defaultDays", "defaultMode", "colors", "defaultFormat", "defaultAuthor")
MODES = ("default", "project", "short")
COLOR_MODES = ("auto", "always", "never")
FORMATS = ("text", "json", "markdown")
DEFAULT_DAYS = 7


@dataclasses.dataclass(frozen=True)
class Settings:
    path: Path
    days: int
    since: str | None
    until: str | None
    mode: str
    author: str | None
    format: str
    color: bool | None  # None = decide from the terminal

    @property
    def project(self) -> bool:
        return self.mode == "project"

    @property
    def short(self) -> bool:
        return self.mode == "short"


def load_git_config(
    cwd: Path | None = None,
    *,
    getter: Callable[[str, Optional[Path]], Optional[str]] = get_git_config,
) -> dict[str, str]:
    """Read the raw `did.*` values git knows about (local, global and system scopes)."""
    config: dict[str, str] = {}
    for key in CONFIG_KEYS:
        value = getter(key, cwd)
        if value is not None:
            config[key] = value
    return config


def parse_config(raw: dict[str, str]) -> dict[str, object]:
    parsed: dict[str, object] = {}

    days_s = str(raw.get("defaultDays", "") or "").strip()
    if days_s:
        try:
            days = int(days_s)
        except ValueError:
            days = 0
        if days > 0:
            parsed["defaultDays"] = days

    mode = str(raw.get("defaultMode", "") or "").strip().lower()
    if mode in MODES:
        parsed["defaultMode"] = mode

    colors = str(raw.get("colors", "") or "").strip().lower()
    if colors in COLOR_MODES:
        parsed["colors"] = colors

    fmt = str(raw.get("defaultFormat", "") or "").strip().lower()
    if fmt in FORMATS:
        parsed["defaultFormat"] = fmt

    author = str(raw.get("defaultAuthor", "") or "").strip()
    if author:
        parsed["defaultAuthor"] = author

    return parsed


def merge_config(
    *,
    path: Path,
    days: int | None,
    since: str | None,
    until: str | None,
    project: bool | None,
    short: bool | None,
    author: str | None,
    fmt: str | None,
    color: bool | None,
    git_config: dict[str, object],
) -> Settings:
    default_mode = str(git_config.get("defaultMode", "default"))
    is_project = project if project is not None else default_mode == "project"
    is_short = short if short is not None else default_mode == "short"
    if is_project:
        mode = "project"
    elif is_short:
        mode = "short"
    else:
        mode = "default"

    if color is None:
        colors = git_config.get("colors")
        if colors == "always":
            color = True
        elif colors == "never":
            color = False

    cfg_days = git_config.get("defaultDays")
    return Settings(
        path=path,
        days=days if days is not None else (int(cfg_days) if isinstance(cfg_days, int) else DEFAULT_DAYS),
        since=since or None,
        until=until or None,
        mode=mode,
        author=author or (str(git_config["defaultAuthor"]) if git_config.get("defaultAuthor") else None),
        format=fmt or str(git_config.get("defaultFormat", "text")),
        color=color,
    )
