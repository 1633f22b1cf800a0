"""Configuration management using TOML + environment variables."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]

import tomli_w

CONFIG_DIR = Path.home() / ".prompt-timer"
CONFIG_FILE = CONFIG_DIR / "config.toml"

TRUE_VALUES = ("true", "1", "yes")


@dataclass
class PluginSpec:
    name: str
    url: str
    entry: str = ""


DEFAULT_PLUGINS: list[PluginSpec] = [
    PluginSpec(
        name="zsh-syntax-highlighting",
        url="https://github.com/zsh-users/zsh-syntax-highlighting.git",
        entry="zsh-syntax-highlighting.zsh",
    ),
    PluginSpec(
        name="zsh-autosuggestions",
        url="https://github.com/zsh-users/zsh-autosuggestions.git",
        entry="zsh-autosuggestions.zsh",
    ),
]


@dataclass
class PromptConfig:
    style: str = "zsh"
    duration_color: str = "yellow"
    ok_color: str = "green"
    fail_color: str = "red"


@dataclass
class PluginsConfig:
    enabled: bool = True
    dir: str = "~/.prompt-timer/plugins"
    git_timeout: int = 120
    repos: list[PluginSpec] = field(default_factory=lambda: [replace(p) for p in DEFAULT_PLUGINS])


@dataclass
class LoggingConfig:
    level: str = "WARNING"
    file: str = "~/.prompt-timer/prompt-timer.log"


@dataclass
class AppConfig:
    prompt: PromptConfig = field(default_factory=PromptConfig)
    plugins: PluginsConfig = field(default_factory=PluginsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def ensure_config_dir() -> None:
    """Create config directory with secure permissions."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    os.chmod(CONFIG_DIR, 0o700)


def load_config() -> AppConfig:
    """Load configuration from TOML file with env var overrides."""
    config = AppConfig()

    if CONFIG_FILE.exists():
        with open(CONFIG_FILE, "rb") as f:
            data = tomllib.load(f)

        prompt = data.get("prompt", {})
        config.prompt.style = prompt.get("style", config.prompt.style)
        config.prompt.duration_color = prompt.get("duration_color", config.prompt.duration_color)
        config.prompt.ok_color = prompt.get("ok_color", config.prompt.ok_color)
        config.prompt.fail_color = prompt.get("fail_color", config.prompt.fail_color)

        plugins = data.get("plugins", {})
        config.plugins.enabled = plugins.get("enabled", config.plugins.enabled)
        config.plugins.dir = plugins.get("dir", config.plugins.dir)
        config.plugins.git_timeout = plugins.get("git_timeout", config.plugins.git_timeout)
        if "repos" in plugins:
            config.plugins.repos = [
                PluginSpec(name=r["name"], url=r["url"], entry=r.get("entry", "")) for r in plugins["repos"]
            ]

        logging_cfg = data.get("logging", {})
        config.logging.level = logging_cfg.get("level", config.logging.level)
        config.logging.file = logging_cfg.get("file", config.logging.file)

    # Environment variable overrides
    if env_style := os.environ.get("PROMPT_TIMER_STYLE"):
        config.prompt.style = env_style
    if env_enabled := os.environ.get("PROMPT_TIMER_PLUGINS_ENABLED"):
        config.plugins.enabled = env_enabled.lower() in TRUE_VALUES
    if env_dir := os.environ.get("PROMPT_TIMER_PLUGIN_DIR"):
        config.plugins.dir = env_dir
    if env_timeout := os.environ.get("PROMPT_TIMER_GIT_TIMEOUT"):
        config.plugins.git_timeout = int(env_timeout)
    if env_log_level := os.environ.get("PROMPT_TIMER_LOG_LEVEL"):
        config.logging.level = env_log_level

    return config


def save_config(config: AppConfig) -> None:
    """Save configuration to TOML file."""
    ensure_config_dir()

    data = {
        "prompt": {
            "style": config.prompt.style,
            "duration_color": config.prompt.duration_color,
            "ok_color": config.prompt.ok_color,
            "fail_color": config.prompt.fail_color,
        },
        "plugins": {
            "enabled": config.plugins.enabled,
            "dir": config.plugins.dir,
            "git_timeout": config.plugins.git_timeout,
            "repos": [{"name": r.name, "url": r.url, "entry": r.entry} for r in config.plugins.repos],
        },
        "logging": {
            "level": config.logging.level,
            "file": config.logging.file,
        },
    }

    with open(CONFIG_FILE, "wb") as f:
        tomli_w.dump(data, f)

    os.chmod(CONFIG_FILE, 0o600)


# Global singleton
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or load the global config singleton."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the global config (for testing)."""
    global _config
    _config = None
