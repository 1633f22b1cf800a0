"""One-time plugin provisioning via git clone."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from prompt_timer.config import AppConfig, PluginSpec

logger = logging.getLogger(__name__)


@dataclass
class ProvisionResult:
    """Outcome of provisioning a single plugin."""

    name: str
    ok: bool = True
    installed: bool = False
    cloned: bool = False
    message: str = ""


class PluginProvisioner:
    """Clone configured shell plugins into the plugin directory when missing."""

    def __init__(self, plugins: list[PluginSpec], plugin_dir: str, git_timeout: int = 120) -> None:
        self.plugins = plugins
        self.plugin_dir = Path(plugin_dir).expanduser().resolve()
        self.git_timeout = git_timeout

    @classmethod
    def from_config(cls, config: AppConfig) -> PluginProvisioner:
        return cls(config.plugins.repos, config.plugins.dir, config.plugins.git_timeout)

    def path_for(self, spec: PluginSpec) -> Path:
        return self.plugin_dir / spec.name

    def is_installed(self, spec: PluginSpec) -> bool:
        return self.path_for(spec).is_dir()

    def provision(self, spec: PluginSpec) -> ProvisionResult:
        """Clone a plugin unless it is already present."""
        target = self.path_for(spec)
        if target.is_dir():
            return ProvisionResult(name=spec.name, installed=True)

        self.plugin_dir.mkdir(parents=True, exist_ok=True)
        cmd = ["git", "clone", "--depth", "1", spec.url, str(target)]
        logger.info("Cloning %s from %s", spec.name, spec.url)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.git_timeout,
            )
        except FileNotFoundError:
            logger.error("git not found, cannot install %s", spec.name)
            return ProvisionResult(name=spec.name, ok=False, message="git not found")
        except subprocess.TimeoutExpired:
            logger.error("Cloning %s timed out after %ss", spec.name, self.git_timeout)
            return ProvisionResult(
                name=spec.name,
                ok=False,
                message=f"git clone timed out after {self.git_timeout}s",
            )

        if result.returncode != 0:
            error = result.stderr.strip() or f"git exited with status {result.returncode}"
            logger.error("Failed to clone %s: %s", spec.name, error)
            return ProvisionResult(name=spec.name, ok=False, message=error)

        return ProvisionResult(name=spec.name, installed=True, cloned=True)

    def provision_all(self) -> list[ProvisionResult]:
        return [self.provision(spec) for spec in self.plugins]

    def entry_points(self) -> list[Path]:
        """Entry files of installed plugins, in configured order."""
        entries: list[Path] = []
        for spec in self.plugins:
            if not spec.entry or not self.is_installed(spec):
                continue
            entry = self.path_for(spec) / spec.entry
            if entry.is_file():
                entries.append(entry)
            else:
                logger.warning("Plugin %s has no entry file %s", spec.name, entry)
        return entries
