"""CLI entrypoint for webtop-session."""

from __future__ import annotations

from pathlib import Path

import typer

from ui.cli import commands

app = typer.Typer(help="Browser desktop window and virtual-desktop session manager")
config_app = typer.Typer(help="Configuration commands")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
) -> None:
    """Configure logging before any command runs."""
    if verbose:
        commands.configure_logging("DEBUG")


@app.command("run-scenario")
def run_scenario_cmd(
    path: Path = typer.Argument(..., help="YAML file with a list of steps"),
    check: bool = typer.Option(False, "--check", help="Validate every snapshot"),
    root: Path = typer.Option(Path("."), help="Directory holding config/default.yaml"),
) -> None:
    """Replay scripted window and desktop operations."""
    commands.run_scenario(path=path, check=check, root=root)


@app.command("demo")
def demo_cmd() -> None:
    """Replay the built-in walkthrough."""
    commands.demo()


@app.command("clock")
def clock_cmd(ticks: int = typer.Option(3, min=1, max=3600)) -> None:
    """Run the session clock."""
    commands.clock(ticks=ticks)


@config_app.command("show")
def config_show_cmd(
    root: Path = typer.Option(Path("."), help="Directory holding config/default.yaml"),
) -> None:
    """Show effective configuration."""
    commands.config_show(root=root)


app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
