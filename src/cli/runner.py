# src/cli/runner.py

"""Headless runners: on-demand update, daily schedule, snapshot display."""

import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from src.clients.gemini_client import GeminiClient
from src.models.errors import GenerationError, LoadError, UpdateError
from src.services.price_updater import FailurePolicy, PriceUpdater
from src.services.scheduler import DailyScheduler
from src.services.snapshot_loader import SnapshotLoader, is_url
from src.storage.snapshot_store import SnapshotStore
from src.ui.view import render

logger = logging.getLogger("gold_rates.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def build_updater(
    snapshot_path: str | None,
    fallback: bool,
) -> PriceUpdater:
    """Wire a PriceUpdater to Gemini and the snapshot file."""
    if snapshot_path is not None and is_url(snapshot_path):
        raise SystemExit("The updater writes a local file; pass a path, not a URL.")
    store = SnapshotStore(Path(snapshot_path) if snapshot_path else None)
    policy = FailurePolicy.FALLBACK_ZERO if fallback else FailurePolicy.PROPAGATE
    return PriceUpdater(GeminiClient(), store, on_failure=policy)


def run_update(
    snapshot_path: str | None = None,
    fallback: bool = False,
    updater: PriceUpdater | None = None,
) -> int:
    """Run one update and return an exit code (0=ok, 1=fail)."""
    if updater is None:
        updater = build_updater(snapshot_path, fallback)
    _err.print("[bold]Fetching gold prices from Gemini...[/bold]")

    try:
        outcome = updater.update_with_outcome()
    except UpdateError as exc:
        logger.error("Update failed: %s", exc)
        _err.print(f"[red]⚠️  Update failed: {exc}[/red]")
        return 1

    if outcome.used_fallback:
        _err.print(f"[yellow]⚠️  {outcome.error}[/yellow]")
        _err.print(
            "[yellow]Wrote fallback snapshot so the build can continue.[/yellow]"
        )
    else:
        _err.print("[green]✓ Gold prices updated successfully[/green]")
    _err.print(f"[dim]Saved → {updater.store.path}[/dim]")

    json.dump(outcome.snapshot.to_dict(), sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


def run_daily(
    snapshot_path: str | None = None,
    fallback: bool = False,
    at: str | None = None,
) -> int:
    """Run the updater now and then once a day until interrupted."""
    updater = build_updater(snapshot_path, fallback)
    try:
        scheduler = DailyScheduler(updater, at=at)
    except ValueError as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1

    _err.print(
        f"[bold]Gold price scheduler started[/bold] "
        f"[dim](daily at {scheduler.at}, Ctrl+C to stop)[/dim]"
    )
    try:
        scheduler.run_forever()
    except KeyboardInterrupt:
        _err.print("[dim]Scheduler stopped.[/dim]")
    return 0


def run_show(location: str | None = None) -> int:
    """Load the snapshot and print it as a table."""
    loader = SnapshotLoader(location)
    try:
        snapshot = loader.load()
    except LoadError as exc:
        _err.print(f"[red]Unable to load gold prices: {exc}[/red]")
        return 1

    view = render(snapshot)
    table = Table(
        title="Today's Gold Rates",
        caption=f"{view.location} · Last Updated: {view.last_updated}",
        show_lines=True,
        title_style="bold yellow",
    )
    table.add_column("Purity", style="bold")
    table.add_column("Per Gram", justify="right", style="yellow")
    table.add_column("vs Yesterday", justify="right")
    table.add_column("10 Grams", justify="right")
    table.add_column("100 Grams", justify="right")

    for karat in view.karats:
        style = "green" if karat.direction == "up" else "red"
        arrow = "▲" if karat.direction == "up" else "▼"
        table.add_row(
            karat.label,
            karat.per_gram,
            f"[{style}]{arrow} {karat.change_text}[/{style}]",
            karat.per_10g,
            karat.per_100g,
        )

    Console().print(table)
    return 0


def run_list_models() -> int:
    """Print the Gemini models usable for price generation."""
    try:
        names = GeminiClient().list_models()
    except GenerationError as exc:
        _err.print(f"[red]Could not list models: {exc}[/red]")
        return 1

    table = Table(title="Gemini Models", title_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Model")
    for idx, name in enumerate(names, 1):
        table.add_row(str(idx), name)
    Console().print(table)
    return 0
