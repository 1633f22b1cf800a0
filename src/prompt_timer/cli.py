"""CLI entry point using typer."""

from __future__ import annotations

import logging
import shutil
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from prompt_timer import __version__
from prompt_timer.config import (
    CONFIG_FILE,
    TRUE_VALUES,
    AppConfig,
    get_config,
    load_config,
    save_config,
)
from prompt_timer.core.models import CommandExecutionRecord
from prompt_timer.core.timer import CommandTimer
from prompt_timer.services.plugins import PluginProvisioner
from prompt_timer.shell.hooks import (
    DEFAULT_RC_FILES,
    SUPPORTED_SHELLS,
    UnsupportedShellError,
    build_init_script,
    install_hook,
    remove_hook,
)
from prompt_timer.utils.formatting import PromptColors, PromptStyle, format_elapsed, render_annotation
from prompt_timer.utils.system import check_git

app = typer.Typer(
    name="prompt-timer",
    help="Show command duration and exit status in your shell prompt.",
    add_completion=False,
)
console = Console()

logger = logging.getLogger(__name__)


def setup_logging(config: AppConfig) -> None:
    """Log to the configured file only; hook output becomes the prompt."""
    log_path = Path(config.logging.file).expanduser().resolve()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.FileHandler(str(log_path))],
    )


def _parse_start(start: str) -> float | None:
    if not start:
        return None
    try:
        return float(start)
    except ValueError:
        logger.warning("Ignoring malformed start time: %r", start)
        return None


@app.command()
def init(
    shell: str = typer.Argument(..., help="Shell to generate hooks for (zsh, bash)"),
    no_plugins: bool = typer.Option(False, "--no-plugins", help="Skip plugin provisioning"),
) -> None:
    """Print the shell snippet that wires up the prompt hooks."""
    if shell not in SUPPORTED_SHELLS:
        typer.echo(str(UnsupportedShellError(shell)), err=True)
        raise typer.Exit(1)

    config = get_config()
    setup_logging(config)

    plugin_sources: list[Path] = []
    # The bundled plugins are zsh plugins
    if shell == "zsh" and config.plugins.enabled and not no_plugins:
        provisioner = PluginProvisioner.from_config(config)
        for result in provisioner.provision_all():
            if not result.ok:
                # stdout is eval'd by the shell, so report on stderr
                typer.echo(f"prompt-timer: could not install {result.name}: {result.message}", err=True)
        plugin_sources = provisioner.entry_points()

    script = build_init_script(
        shell,
        executable=shutil.which("prompt-timer") or "prompt-timer",
        plugin_sources=plugin_sources,
    )

    typer.echo(script, nl=False)


@app.command()
def preexec() -> None:
    """Record the start of a command and print its timestamp."""
    timer = CommandTimer()
    timer.on_pre_execution()
    typer.echo(repr(timer.record.start_time))


@app.command()
def precmd(
    status: int = typer.Option(0, "--status", "-s", help="Exit status of the last command"),
    start: str = typer.Option("", "--start", help="Timestamp printed by 'preexec'"),
    style: str = typer.Option(None, "--style", help="Prompt style (zsh, bash, ansi, plain)"),
) -> None:
    """Print the prompt annotation for the command that just finished."""
    config = get_config()
    setup_logging(config)

    try:
        prompt_style = PromptStyle(style or config.prompt.style)
    except ValueError:
        logger.warning("Unknown prompt style %r, using plain", style or config.prompt.style)
        prompt_style = PromptStyle.PLAIN

    timer = CommandTimer(CommandExecutionRecord(start_time=_parse_start(start)))
    annotation = timer.on_pre_prompt(status)
    if annotation.elapsed is not None:
        logger.debug("Command finished in %s with status %d", format_elapsed(annotation.elapsed), status)

    colors = PromptColors(
        duration=config.prompt.duration_color,
        ok=config.prompt.ok_color,
        fail=config.prompt.fail_color,
    )
    typer.echo(render_annotation(annotation, prompt_style, colors))


@app.command()
def install(
    shell: str = typer.Argument(..., help="Shell to install hooks for (zsh, bash)"),
    rc: Path = typer.Option(None, "--rc", help="Shell rc file (default: ~/.zshrc or ~/.bashrc)"),
) -> None:
    """Add prompt-timer to your shell rc file."""
    if shell not in SUPPORTED_SHELLS:
        console.print(f"[red]Unsupported shell: {shell}[/red]")
        raise typer.Exit(1)

    rc_path = rc or Path(DEFAULT_RC_FILES[shell]).expanduser()
    if install_hook(shell, rc_path):
        console.print(f"[green]Installed hook in {rc_path}[/green]")
        console.print("Restart your shell or run: [bold]exec $SHELL[/bold]")
    else:
        console.print(f"[yellow]Hook already present in {rc_path}.[/yellow]")


@app.command()
def uninstall(
    shell: str = typer.Argument(..., help="Shell whose rc file to clean up (zsh, bash)"),
    rc: Path = typer.Option(None, "--rc", help="Shell rc file (default: ~/.zshrc or ~/.bashrc)"),
) -> None:
    """Remove prompt-timer from your shell rc file."""
    if shell not in SUPPORTED_SHELLS:
        console.print(f"[red]Unsupported shell: {shell}[/red]")
        raise typer.Exit(1)

    rc_path = rc or Path(DEFAULT_RC_FILES[shell]).expanduser()
    if remove_hook(rc_path):
        console.print(f"[green]Removed hook from {rc_path}[/green]")
    else:
        console.print(f"[dim]No hook found in {rc_path}.[/dim]")


@app.command()
def plugins(
    fetch: bool = typer.Option(False, "--fetch", "-f", help="Clone missing plugins"),
) -> None:
    """List configured shell plugins."""
    config = load_config()
    setup_logging(config)
    provisioner = PluginProvisioner.from_config(config)

    failed = False
    if fetch:
        installed, git_info = check_git()
        if not installed:
            console.print(f"[red]{git_info}[/red]")
            raise typer.Exit(1)
        for result in provisioner.provision_all():
            if not result.ok:
                failed = True
                console.print(f"[red]{result.name}: {result.message}[/red]")
            elif result.cloned:
                console.print(f"[green]{result.name}: cloned[/green]")

    table = Table(title=f"Plugins ({provisioner.plugin_dir})")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Installed")
    table.add_column("URL", style="dim")
    for spec in provisioner.plugins:
        state = "[green]yes[/green]" if provisioner.is_installed(spec) else "[yellow]no[/yellow]"
        table.add_row(spec.name, state, spec.url)
    console.print(table)

    if failed:
        raise typer.Exit(1)


@app.command()
def config(
    key: str = typer.Argument(None, help="Config key (e.g., prompt.style)"),
    value: str = typer.Argument(None, help="New value"),
) -> None:
    """View or modify configuration."""
    cfg = load_config()

    if key is None:
        # Show all config
        table = Table(title="Configuration")
        table.add_column("Key", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("prompt.style", cfg.prompt.style)
        table.add_row("prompt.duration_color", cfg.prompt.duration_color)
        table.add_row("prompt.ok_color", cfg.prompt.ok_color)
        table.add_row("prompt.fail_color", cfg.prompt.fail_color)
        table.add_row("plugins.enabled", str(cfg.plugins.enabled))
        table.add_row("plugins.dir", cfg.plugins.dir)
        table.add_row("plugins.git_timeout", str(cfg.plugins.git_timeout))
        table.add_row("plugins.repos", ", ".join(r.name for r in cfg.plugins.repos) or "(none)")
        table.add_row("logging.level", cfg.logging.level)
        table.add_row("logging.file", cfg.logging.file)

        console.print(table)
        return

    if value is None:
        console.print("[red]Usage: prompt-timer config <key> <value>[/red]")
        raise typer.Exit(1)

    parts = key.split(".")
    if len(parts) != 2:
        console.print("[red]Key format: section.key (e.g., prompt.style)[/red]")
        raise typer.Exit(1)

    section, attr = parts
    section_map = {"prompt": cfg.prompt, "plugins": cfg.plugins, "logging": cfg.logging}

    if section not in section_map:
        console.print(f"[red]Unknown section: {section}[/red]")
        raise typer.Exit(1)

    obj = section_map[section]
    if not hasattr(obj, attr) or isinstance(getattr(obj, attr), list):
        console.print(f"[red]Unknown key: {key}[/red]")
        raise typer.Exit(1)

    # Type coercion
    current = getattr(obj, attr)
    try:
        if isinstance(current, bool):
            typed_value = value.lower() in TRUE_VALUES
        elif isinstance(current, int):
            typed_value = int(value)
        else:
            typed_value = value
    except ValueError:
        console.print(f"[red]Invalid value type for {key}[/red]")
        raise typer.Exit(1)

    if key == "prompt.style" and typed_value not in {s.value for s in PromptStyle}:
        console.print(f"[red]Unknown prompt style: {typed_value}[/red]")
        raise typer.Exit(1)

    setattr(obj, attr, typed_value)
    save_config(cfg)
    console.print(f"[green]{key} = {typed_value}[/green]")


@app.command()
def logs(
    lines: int = typer.Option(50, "--lines", "-n", help="Number of lines"),
) -> None:
    """View the prompt-timer log."""
    log_path = Path(load_config().logging.file).expanduser().resolve()
    if not log_path.exists():
        console.print("[dim]No log file found.[/dim]")
        return

    log_lines = log_path.read_text().strip().split("\n")
    for line in log_lines[-lines:]:
        console.print(line, markup=False)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"prompt-timer v{__version__}")

    installed, version_info = check_git()
    if installed:
        console.print(f"git: {version_info}")
    else:
        console.print("git: [yellow]not installed[/yellow]")

    console.print(f"Python: {sys.version.split()[0]}")
    console.print(f"Config: {CONFIG_FILE}")


if __name__ == "__main__":
    app()
