"""Command timer driven by the shell's pre-execution and pre-prompt hooks."""

from __future__ import annotations

import logging
import math
import time
from typing import Callable

from prompt_timer.core.models import CommandExecutionRecord, PromptAnnotation

logger = logging.getLogger(__name__)


def status_label(exit_code: int) -> str:
    """Return the status text for an exit code."""
    if exit_code == 0:
        return "ok"
    return f"fail status {exit_code}"


class CommandTimer:
    """Track command start time across hooks and build prompt annotations.

    The timer is either idle (no start time recorded) or timing. The
    pre-execution hook always (re-)arms it; the pre-prompt hook consumes the
    pending start time, if any, and returns to idle.
    """

    def __init__(
        self,
        record: CommandExecutionRecord | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.record = record if record is not None else CommandExecutionRecord()
        self._clock = clock or time.time

    @property
    def is_timing(self) -> bool:
        return self.record.start_time is not None

    def on_pre_execution(self) -> None:
        """Record the start of a command, replacing any unconsumed start time."""
        if self.is_timing:
            logger.debug("Re-arming timer, dropping start time %s", self.record.start_time)
        self.record.start_time = self._clock()

    def on_pre_prompt(self, exit_code: int) -> PromptAnnotation:
        """Consume the pending start time and describe the finished command."""
        self.record.exit_code = exit_code
        status = status_label(exit_code)

        if self.record.start_time is None:
            return PromptAnnotation(status_label=status, exit_code=exit_code)

        elapsed = math.floor(self._clock() - self.record.start_time)
        self.record.start_time = None

        hours = f"{elapsed // 3600}h " if elapsed >= 3600 else ""
        minutes = f"{(elapsed % 3600) // 60}m " if elapsed >= 60 else ""
        seconds = f"{elapsed % 60}s " if elapsed > 1 else ""

        return PromptAnnotation(
            hours_label=hours,
            minutes_label=minutes,
            seconds_label=seconds,
            status_label=status,
            exit_code=exit_code,
            elapsed=elapsed,
        )
