"""Shell hook snippets and rc file management."""

from __future__ import annotations

import logging
import shlex
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

SUPPORTED_SHELLS = ("zsh", "bash")
DEFAULT_RC_FILES: dict[str, str] = {
    "zsh": "~/.zshrc",
    "bash": "~/.bashrc",
}

START_MARKER = "# >>> prompt-timer >>>"
END_MARKER = "# <<< prompt-timer <<<"

ZSH_TEMPLATE = """\
# prompt-timer: command duration and exit status in RPROMPT
autoload -Uz add-zsh-hook

__prompt_timer_preexec() {{
  __prompt_timer_start="$({exe} preexec)"
}}

__prompt_timer_precmd() {{
  local exit_code=$?
  RPROMPT="$({exe} precmd --style {style} --status "$exit_code" --start "${{__prompt_timer_start:-}}")"
  unset __prompt_timer_start
}}

add-zsh-hook preexec __prompt_timer_preexec
# First in line so $? still holds the command's exit status
add-zsh-hook -d precmd __prompt_timer_precmd
precmd_functions=(__prompt_timer_precmd $precmd_functions)
"""

BASH_TEMPLATE = """\
# prompt-timer: command duration and exit status in PS1
# Armed only by the last PROMPT_COMMAND step, so the DEBUG trap sees the
# typed command and not the rest of PROMPT_COMMAND
__prompt_timer_preexec() {{
  [[ -n "${{__prompt_timer_at_prompt:-}}" ]] || return
  unset __prompt_timer_at_prompt
  __prompt_timer_start="$({exe} preexec)"
}}

__prompt_timer_precmd() {{
  local exit_code=$?
  PS1="$({exe} precmd --style {style} --status "$exit_code" --start "${{__prompt_timer_start:-}}") ${{__prompt_timer_ps1}}"
  unset __prompt_timer_start
}}

__prompt_timer_arm() {{
  __prompt_timer_at_prompt=1
}}

__prompt_timer_ps1="${{__prompt_timer_ps1:-$PS1}}"
trap '__prompt_timer_preexec' DEBUG
case "${{PROMPT_COMMAND:-}}" in
  *__prompt_timer_precmd*) ;;
  *) PROMPT_COMMAND="__prompt_timer_precmd
${{PROMPT_COMMAND:+$PROMPT_COMMAND
}}__prompt_timer_arm" ;;
esac
"""


class UnsupportedShellError(ValueError):
    """Raised for shells without hook support."""

    def __init__(self, shell: str) -> None:
        super().__init__(f"Unsupported shell: {shell} (supported: {', '.join(SUPPORTED_SHELLS)})")
        self.shell = shell


def _check_shell(shell: str) -> None:
    if shell not in SUPPORTED_SHELLS:
        raise UnsupportedShellError(shell)


def build_init_script(
    shell: str,
    executable: str = "prompt-timer",
    style: str | None = None,
    plugin_sources: list[Path] | None = None,
) -> str:
    """Build the snippet that wires the shell's hooks to the timer."""
    _check_shell(shell)
    template = ZSH_TEMPLATE if shell == "zsh" else BASH_TEMPLATE
    script = template.format(exe=shlex.quote(executable), style=shlex.quote(style or shell))

    if plugin_sources:
        if shell == "zsh":
            script += "".join(f"source {shlex.quote(str(p))}\n" for p in plugin_sources)
        else:
            logger.debug("Skipping %d zsh plugin(s) for %s", len(plugin_sources), shell)
    return script


def _build_block(shell: str) -> str:
    return f'{START_MARKER}\neval "$(prompt-timer init {shell})"\n{END_MARKER}'


def _read_rc(rc_path: Path) -> str:
    if not rc_path.exists():
        return ""
    return rc_path.read_text()


def _has_block(content: str) -> bool:
    return START_MARKER in content and END_MARKER in content


def _remove_block(content: str) -> str:
    """Remove the managed block from content."""
    result = []
    inside = False
    for line in content.splitlines(keepends=True):
        if line.rstrip() == START_MARKER:
            inside = True
            continue
        if line.rstrip() == END_MARKER:
            inside = False
            continue
        if not inside:
            result.append(line)
    return "".join(result)


def _backup(rc_path: Path) -> Path | None:
    """Create a one-time backup of the rc file. Returns backup path or None if already backed up."""
    backup_path = rc_path.parent / f"{rc_path.name}.prompt-timer-backup"
    if not backup_path.exists() and rc_path.exists():
        shutil.copy2(rc_path, backup_path)
        return backup_path
    return None


def install_hook(shell: str, rc_path: Path) -> bool:
    """Add the managed eval block to an rc file. Returns True if modified."""
    _check_shell(shell)
    content = _read_rc(rc_path)
    if _has_block(content):
        return False

    _backup(rc_path)

    if content and not content.endswith("\n"):
        content += "\n"
    content += f"\n{_build_block(shell)}\n"
    rc_path.parent.mkdir(parents=True, exist_ok=True)
    rc_path.write_text(content)
    logger.info("Installed prompt-timer hook in %s", rc_path)
    return True


def remove_hook(rc_path: Path) -> bool:
    """Remove the managed block from an rc file. Returns True if modified."""
    content = _read_rc(rc_path)
    if not _has_block(content):
        return False

    rc_path.write_text(_remove_block(content))
    logger.info("Removed prompt-timer hook from %s", rc_path)
    return True
