from __future__ import annotations

import dataclasses
from typing import Mapping

RESET = "\x1b[0m"
CYAN = "\x1b[36m"
GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
MAGENTA = "\x1b[35m"
GRAY = "\x1b[90m"


def color256(code: int) -> str:
    return f"\x1b[38;5;{code}m"


def rgb(r: int, g: int, b: int) -> str:
    return f"\x1b[38;2;{r};{g};{b}m"


@dataclasses.dataclass(frozen=True)
class TerminalCaps:
    colors: bool = False
    truecolor: bool = False
    colors256: bool = False


NO_COLOR_CAPS = TerminalCaps()


def detect_terminal_capabilities(env: Mapping[str, str], *, is_tty: bool) -> TerminalCaps:
    colorterm = env.get("COLORTERM", "")
    term = env.get("TERM", "")
    if "NO_COLOR" in env:
        return NO_COLOR_CAPS
    truecolor = colorterm in ("truecolor", "24bit")
    colors256 = "256" in term or "xterm" in term
    if "FORCE_COLOR" in env:
        return TerminalCaps(colors=True, truecolor=truecolor, colors256=colors256)
    return TerminalCaps(colors=bool(is_tty), truecolor=truecolor, colors256=colors256)


def apply_color_override(caps: TerminalCaps, color: bool | None) -> TerminalCaps:
    if color is True:
        return dataclasses.replace(caps, colors=True)
    if color is False:
        return NO_COLOR_CAPS
    return caps


def _pick(caps: TerminalCaps, truecolor: str, c256: str, basic: str) -> str:
    if not caps.colors:
        return ""
    if caps.truecolor:
        return truecolor
    if caps.colors256:
        return c256
    return basic


def hash_color(caps: TerminalCaps) -> str:
    return _pick(caps, rgb(135, 206, 250), color256(117), CYAN)


def message_color(caps: TerminalCaps) -> str:
    return _pick(caps, rgb(180, 180, 180), color256(250), GRAY)


def note_color(caps: TerminalCaps) -> str:
    return _pick(caps, rgb(136, 136, 136), color256(244), GRAY)


def rebase_color(caps: TerminalCaps) -> str:
    return _pick(caps, rgb(255, 165, 0), color256(214), YELLOW)


def time_color(time: str, caps: TerminalCaps) -> str:
    try:
        hours = int((time or "").split(":", 1)[0])
    except ValueError:
        hours = 0
    if 6 <= hours < 12:
        return _pick(caps, rgb(255, 215, 0), color256(220), YELLOW)
    if 12 <= hours < 18:
        return _pick(caps, rgb(144, 238, 144), color256(120), GREEN)
    if 18 <= hours < 22:
        return _pick(caps, rgb(255, 165, 100), color256(215), YELLOW)
    return _pick(caps, rgb(147, 112, 219), color256(141), MAGENTA)


def days_ago_color(days_ago: int, caps: TerminalCaps) -> str:
    if days_ago <= 1:
        return _pick(caps, rgb(50, 255, 50), color256(46), GREEN)
    if days_ago <= 7:
        return _pick(caps, rgb(144, 238, 144), color256(120), GREEN)
    if days_ago <= 14:
        return _pick(caps, rgb(255, 215, 0), color256(220), YELLOW)
    if days_ago <= 30:
        return _pick(caps, rgb(255, 165, 0), color256(214), YELLOW)
    return _pick(caps, rgb(255, 100, 100), color256(203), MAGENTA)


def colorize(text: str, code: str, caps: TerminalCaps) -> str:
    if not caps.colors or not code:
        return text
    return f"{code}{text}{RESET}"
