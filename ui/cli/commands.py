"""Typer command handlers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import typer
import yaml

from chrome.session_chrome import CLOCK_TICK
from core.session import SessionBuilder, SessionBundle
from core.state_store import SNAPSHOT_EVENT
from ui.cli.scenario import ScenarioError, load_scenario, run_step
from ui.cli.text_view import TextView
from windowing.invariants import validate_state

logger = logging.getLogger("webtop.cli")

DEMO_STEPS: list[dict[str, Any]] = [
    {"op": "open_window", "id": "A", "title": "Notes"},
    {"op": "open_window", "id": "B", "title": "Terminal"},
    {"op": "focus_window", "id": "A"},
    {"op": "close_window", "id": "A"},
    {"op": "create_desktop", "switch": True},
    {"op": "open_window", "id": "C", "title": "Calculator"},
    {"op": "begin_move", "id": "C", "x": 150, "y": 145},
    {"op": "pointer_move", "x": 400, "y": 10},
    {"op": "pointer_up"},
    {"op": "delete_desktop", "id": 1},
]


def _session(config: dict[str, Any] | None = None, root: Path | None = None) -> SessionBundle:
    bundle = SessionBuilder(root=root, overrides=config).build()
    # No-op when --verbose already configured logging.
    configure_logging(str(bundle.config.get("logging", {}).get("level", "WARNING")))
    return bundle


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def replay(
    steps: list[Any],
    config: dict[str, Any] | None = None,
    check: bool = False,
    root: Path | None = None,
) -> None:
    """Run steps against a fresh session, printing each resulting snapshot."""
    try:
        bundle = _session(config, root)
    except ValueError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    view = TextView(bundle.event_bus, typer.echo)
    violations: list[str] = []
    if check:
        menu_bar = float(bundle.config["shell"]["menu_bar_height"])

        # Check every intermediate snapshot, not just the one after each step.
        def _check(payload: dict[str, Any]) -> None:
            result = validate_state(payload["state"], menu_bar)
            violations.extend(f"{payload['operation']}: {error}" for error in result.errors)

        bundle.event_bus.subscribe(SNAPSHOT_EVENT, _check)

    try:
        for index, step in enumerate(steps, start=1):
            result = run_step(bundle, step)
            label = f"{index}. {step['op']}"
            if result is not None and not hasattr(result, "id"):
                label += f" -> {result}"
            typer.echo(label)
            view.show(bundle.chrome.state)
    except ScenarioError as exc:
        typer.echo(f"Scenario error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    finally:
        view.close()
        bundle.close()

    if violations:
        for violation in violations:
            typer.echo(f"Invariant violated: {violation}", err=True)
        raise typer.Exit(code=1)


def run_scenario(path: Path, check: bool, root: Path | None = None) -> None:
    """Replay a YAML scenario file."""
    try:
        scenario = load_scenario(path)
    except ScenarioError as exc:
        typer.echo(f"Scenario error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    replay(scenario["steps"], scenario["config"], check=check, root=root)


def demo() -> None:
    """Replay the built-in walkthrough."""
    replay(DEMO_STEPS, check=True)


def config_show(root: Path | None = None) -> None:
    """Show effective configuration."""
    bundle = _session(root=root)
    typer.echo(yaml.safe_dump(bundle.config, sort_keys=False).rstrip())


def clock(ticks: int) -> None:
    """Run the session clock for a number of ticks."""
    bundle = _session()
    bundle.event_bus.subscribe(CLOCK_TICK, lambda payload: typer.echo(payload["time"]))
    bundle.clock.run(ticks)
