"""Shared test fixtures."""

from __future__ import annotations

import pytest

from prompt_timer.config import AppConfig, LoggingConfig, PluginsConfig, PluginSpec, PromptConfig, reset_config


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep config, logs and plugins out of the real home directory."""
    import prompt_timer.cli as cli_module
    import prompt_timer.config as cfg_module

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "PROMPT_TIMER_STYLE",
        "PROMPT_TIMER_PLUGINS_ENABLED",
        "PROMPT_TIMER_PLUGIN_DIR",
        "PROMPT_TIMER_GIT_TIMEOUT",
        "PROMPT_TIMER_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)

    config_dir = home / ".prompt-timer"
    monkeypatch.setattr(cfg_module, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(cfg_module, "CONFIG_FILE", config_dir / "config.toml")
    monkeypatch.setattr(cli_module, "CONFIG_FILE", config_dir / "config.toml")
    reset_config()
    yield home
    reset_config()


@pytest.fixture
def app_config(tmp_path):
    """Create a test configuration."""
    return AppConfig(
        prompt=PromptConfig(style="plain"),
        plugins=PluginsConfig(
            enabled=True,
            dir=str(tmp_path / "plugins"),
            git_timeout=5,
            repos=[PluginSpec(name="demo", url="https://example.com/demo.git", entry="demo.zsh")],
        ),
        logging=LoggingConfig(level="DEBUG", file=str(tmp_path / "test.log")),
    )
