"""Tests for shell hook generation and rc file management."""

from __future__ import annotations

import os
import re
import shlex
import shutil
import subprocess
import sys
from pathlib import Path

import pytest

import prompt_timer
from prompt_timer.shell.hooks import (
    END_MARKER,
    START_MARKER,
    UnsupportedShellError,
    build_init_script,
    install_hook,
    remove_hook,
)


class TestInitScript:
    def test_zsh_hooks(self):
        script = build_init_script("zsh")
        assert "add-zsh-hook preexec __prompt_timer_preexec" in script
        assert "precmd_functions=(__prompt_timer_precmd $precmd_functions)" in script
        assert 'RPROMPT="$(prompt-timer precmd --style zsh --status "$exit_code"' in script
        assert "unset __prompt_timer_start" in script

    def test_zsh_captures_status_first(self):
        script = build_init_script("zsh")
        body = script.split("__prompt_timer_precmd() {", 1)[1]
        assert body.lstrip().startswith("local exit_code=$?")

    def test_bash_hooks(self):
        script = build_init_script("bash")
        assert "trap '__prompt_timer_preexec' DEBUG" in script
        assert "PROMPT_COMMAND=" in script
        assert "--style bash" in script
        assert "__prompt_timer_at_prompt=1" in script

    def test_executable_is_quoted(self):
        script = build_init_script("zsh", executable="/opt/my tools/prompt-timer")
        assert "$('/opt/my tools/prompt-timer' preexec)" in script

    def test_style_override(self):
        assert "--style plain" in build_init_script("zsh", style="plain")

    def test_zsh_sources_plugins(self, tmp_path):
        entry = tmp_path / "demo" / "demo.zsh"
        script = build_init_script("zsh", plugin_sources=[entry])
        assert script.endswith(f"source {entry}\n")

    def test_bash_ignores_zsh_plugins(self, tmp_path):
        script = build_init_script("bash", plugin_sources=[tmp_path / "demo.zsh"])
        assert "source" not in script

    def test_unsupported_shell(self):
        with pytest.raises(UnsupportedShellError, match="fish"):
            build_init_script("fish")

    def test_unsupported_shell_is_value_error(self):
        with pytest.raises(ValueError):
            build_init_script("tcsh")


class TestRcFile:
    def test_install_creates_block(self, tmp_path):
        rc = tmp_path / ".zshrc"
        rc.write_text("export EDITOR=vim")

        assert install_hook("zsh", rc)
        content = rc.read_text()
        assert content.startswith("export EDITOR=vim\n")
        assert f'{START_MARKER}\neval "$(prompt-timer init zsh)"\n{END_MARKER}\n' in content

    def test_install_is_idempotent(self, tmp_path):
        rc = tmp_path / ".bashrc"
        assert install_hook("bash", rc)
        assert not install_hook("bash", rc)
        assert rc.read_text().count(START_MARKER) == 1

    def test_install_backs_up_once(self, tmp_path):
        rc = tmp_path / ".zshrc"
        rc.write_text("original\n")
        install_hook("zsh", rc)
        remove_hook(rc)
        install_hook("zsh", rc)

        backup = tmp_path / ".zshrc.prompt-timer-backup"
        assert backup.read_text() == "original\n"

    def test_install_unsupported_shell(self, tmp_path):
        with pytest.raises(UnsupportedShellError):
            install_hook("fish", tmp_path / "config.fish")

    def test_remove_keeps_other_lines(self, tmp_path):
        rc = tmp_path / ".zshrc"
        rc.write_text("alias ll='ls -l'\n")
        install_hook("zsh", rc)
        with rc.open("a") as f:
            f.write("setopt autocd\n")

        assert remove_hook(rc)
        content = rc.read_text()
        assert START_MARKER not in content
        assert "alias ll='ls -l'" in content
        assert "setopt autocd" in content

    def test_remove_without_block(self, tmp_path):
        rc = tmp_path / ".zshrc"
        assert not remove_hook(rc)
        rc.write_text("echo hi\n")
        assert not remove_hook(rc)
        assert rc.read_text() == "echo hi\n"


BASH = shutil.which("bash")


def run_bash_session(tmp_path: Path, commands: list[str], prompt_command: str = "") -> list[str]:
    """Feed commands to an interactive bash with the hooks loaded; return PS1 after each."""
    wrapper = tmp_path / "prompt-timer"
    wrapper.write_text(f'#!/bin/sh\nexec {shlex.quote(sys.executable)} -m prompt_timer.cli "$@"\n')
    wrapper.chmod(0o755)

    setup = "PS1='$ '\n"
    if prompt_command:
        setup += f"PROMPT_COMMAND={shlex.quote(prompt_command)}\n"
    else:
        setup += "unset PROMPT_COMMAND\n"
    rc = tmp_path / "bashrc"
    rc.write_text(setup + build_init_script("bash", executable=str(wrapper), style="plain"))

    src_dir = str(Path(prompt_timer.__file__).resolve().parents[1])
    env = {**os.environ, "TERM": "dumb"}
    env["PYTHONPATH"] = os.pathsep.join(p for p in (src_dir, env.get("PYTHONPATH", "")) if p)

    stdin = "".join(f'{command}\necho "PS1=$PS1"\n' for command in commands) + "exit\n"
    result = subprocess.run(
        [BASH, "--noprofile", "--rcfile", str(rc), "-i"],
        input=stdin,
        capture_output=True,
        text=True,
        timeout=120,
        env=env,
    )
    return [line[len("PS1="):] for line in result.stdout.splitlines() if line.startswith("PS1=")]


@pytest.mark.skipif(BASH is None, reason="bash not installed")
class TestBashSession:
    def test_times_typed_command_only(self, tmp_path):
        # The existing PROMPT_COMMAND takes 2s; it must not count towards the command
        prompts = run_bash_session(tmp_path, ["sleep 2"], prompt_command="sleep 2;")
        assert len(prompts) == 1
        assert re.match(r"\[ [23]s ok \] \$ $", prompts[0]), prompts[0]

    def test_times_without_prompt_command(self, tmp_path):
        prompts = run_bash_session(tmp_path, ["sleep 2"])
        assert re.match(r"\[ [23]s ok \] \$ $", prompts[0]), prompts[0]

    def test_exit_status_reaches_prompt(self, tmp_path):
        prompts = run_bash_session(tmp_path, ["false", "true"], prompt_command="true")
        assert prompts[0] == "[ fail status 1 ] $ "
        assert prompts[1] == "[ ok ] $ "
