"""Data models for prompt-timer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CommandExecutionRecord:
    """Timing state for the command currently running in the shell."""

    start_time: float | None = None
    exit_code: int = 0


@dataclass(frozen=True)
class PromptAnnotation:
    """Duration and status fragment shown in the prompt."""

    hours_label: str = ""
    minutes_label: str = ""
    seconds_label: str = ""
    status_label: str = "ok"
    exit_code: int = 0
    elapsed: int | None = None

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    @property
    def duration(self) -> str:
        return f"{self.hours_label}{self.minutes_label}{self.seconds_label}"
