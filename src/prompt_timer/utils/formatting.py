"""Prompt rendering for command annotations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from prompt_timer.core.models import PromptAnnotation

ANSI_COLORS: dict[str, int] = {
    "black": 30,
    "red": 31,
    "green": 32,
    "yellow": 33,
    "blue": 34,
    "magenta": 35,
    "cyan": 36,
    "white": 37,
}
ANSI_RESET = "\033[0m"


class PromptStyle(str, Enum):
    ZSH = "zsh"
    BASH = "bash"
    ANSI = "ansi"
    PLAIN = "plain"


@dataclass
class PromptColors:
    duration: str = "yellow"
    ok: str = "green"
    fail: str = "red"


def colorize(text: str, color: str, style: PromptStyle) -> str:
    """Wrap text in the color escapes understood by the given prompt style."""
    if not text or style is PromptStyle.PLAIN:
        return text
    if style is PromptStyle.ZSH:
        return f"%F{{{color}}}{text}%f"

    code = ANSI_COLORS.get(color.lower())
    if code is None:
        return text
    start = f"\033[{code}m"
    if style is PromptStyle.BASH:
        # Non-printing markers keep readline's cursor math right
        return f"\\[{start}\\]{text}\\[{ANSI_RESET}\\]"
    return f"{start}{text}{ANSI_RESET}"


def render_annotation(
    annotation: PromptAnnotation,
    style: PromptStyle = PromptStyle.PLAIN,
    colors: PromptColors | None = None,
) -> str:
    """Render an annotation as ``[ <hours><minutes><seconds><status> ]``."""
    colors = colors or PromptColors()
    status_color = colors.ok if annotation.succeeded else colors.fail

    duration = colorize(annotation.duration, colors.duration, style)
    status = colorize(annotation.status_label, status_color, style)
    return f"[ {duration}{status} ]"


def format_elapsed(seconds: int) -> str:
    """Format whole seconds as ``1h 1m 5s``."""
    if seconds < 60:
        return f"{seconds}s"
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes or hours:
        parts.append(f"{minutes}m")
    parts.append(f"{secs}s")
    return " ".join(parts)
