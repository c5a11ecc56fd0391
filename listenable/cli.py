"""listenable CLI: explore listener categories and try the demo session.

Usage:
    listenable categories                       # List listener categories and hooks
    listenable descriptors                      # List operation-to-event rules
    listenable inspect module.path:Listener     # Show categories a listener implements
    listenable demo                             # Run the offline demo session
    listenable demo --settings listenable.json --verbose
"""

from __future__ import annotations

import importlib
import json
import logging
from pathlib import Path

import click
from pydantic import ValidationError

from listenable.config import InterceptionSettings
from listenable.events.api import (
    CATEGORIES,
    Listener,
    event_names,
    implemented_categories,
)
from listenable.events.descriptors import DEFAULT_DESCRIPTORS


def import_listener(listener_path: str) -> type[Listener]:
    """Import a listener class from a dotted path.

    Args:
        listener_path: ``"module.path:ClassName"`` string.

    Returns:
        The listener class.

    Raises:
        click.BadParameter: If the format is invalid, the import fails or
            the object is not a listener class.
    """
    if ":" not in listener_path:
        raise click.BadParameter(
            f"Invalid listener path '{listener_path}'. "
            "Expected format: 'module.path:ClassName'"
        )

    module_path, class_name = listener_path.rsplit(":", 1)
    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise click.BadParameter(
            f"Could not import module '{module_path}': {e}"
        ) from e

    try:
        cls = getattr(module, class_name)
    except AttributeError as e:
        raise click.BadParameter(
            f"Module '{module_path}' has no class '{class_name}'"
        ) from e

    if not (isinstance(cls, type) and issubclass(cls, Listener)):
        raise click.BadParameter(f"'{listener_path}' is not a Listener class")
    return cls


@click.group()
@click.version_option(package_name="listenable")
def cli() -> None:
    """Event-firing interception for automation drivers."""


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output JSON.")
def categories(as_json: bool) -> None:
    """List listener categories and the hooks each declares."""
    table = {c.__name__: list(event_names(c)) for c in CATEGORIES}
    if as_json:
        click.echo(json.dumps(table, indent=2))
        return
    for name, hooks in table.items():
        click.echo(name)
        for hook in hooks:
            click.echo(f"  {hook}")


@cli.command()
def descriptors() -> None:
    """List which operations fire which events."""
    for d in DEFAULT_DESCRIPTORS:
        roles = ",".join(sorted(r.value for r in d.roles))
        methods = ",".join(sorted(d.methods))
        click.echo(
            f"{d.name:<20} {d.category.__name__:<25} "
            f"[{roles}] {methods} -> {d.before} / {d.after}"
        )


@cli.command()
@click.argument("listener_path")
def inspect(listener_path: str) -> None:
    """Show which categories LISTENER_PATH implements and overrides."""
    cls = import_listener(listener_path)
    click.echo(f"{cls.__module__}.{cls.__qualname__}")
    for category in implemented_categories(cls):
        overridden = [
            hook
            for hook in event_names(category)
            if getattr(cls, hook) is not getattr(category, hook)
        ]
        suffix = f" ({', '.join(overridden)})" if overridden else ""
        click.echo(f"  {category.__name__}{suffix}")


@cli.command()
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file with InterceptionSettings.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every event.")
def demo(settings_path: Path | None, verbose: bool) -> None:
    """Run a scripted session against the offline demo shop."""
    from listenable.demo.session import run_demo
    from listenable.events.listeners import RecordingListener

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = (
            InterceptionSettings.from_file(settings_path)
            if settings_path is not None
            else InterceptionSettings()
        )
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="--settings") from e

    recorder = RecordingListener()
    run_demo([recorder], settings=settings)
    for event in recorder.events:
        click.echo(event.name)
    click.echo(f"Total: {len(recorder.events)} events")
