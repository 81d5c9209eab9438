"""
Command-Line Interface for FinCast.

Purpose
-------
Edit the monthly rules, planned events and real movements of a year,
inspect the forecast and real lines, and export/import snapshots without
writing Python code.

Commands
--------
- show: headline numbers (final balances, lowest point, current difference)
- list: the three input lists
- set-year / set-balance: year and balance on January 1st
- rule|event|movement add/edit/remove: edit the input lists
- export / import: JSON snapshots (finances-<year>.json)
- feed: sampled chart feed as a table or CSV
- plot: forecast chart as an image
- info: versions and settings

Example Usage
-------------
    $ fincast rule add --amount 2100 --day 31 --from 2025-01-01 --title Salary
    $ fincast movement add --amount -42.10 --date 2025-03-14 --note Dentist
    $ fincast show
    $ fincast export --output backups/
    $ fincast import backups/finances-2025.json

Amounts are options rather than arguments so that negative values
(``--amount -750``) parse without a ``--`` separator. List positions are
1-based, as printed by ``fincast list``.
"""

from __future__ import annotations

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

import click
import pandas as pd
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from .config import AppSettings
from .exceptions import FinCastError, ParseError
from .model import ForecastModel
from .serialization import read_import, write_export
from .store import EntityStore
from .utils import format_amount, parse_iso_date

# Version
__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _store(ctx: click.Context) -> EntityStore:
    return ctx.obj["store"]


def _money(ctx: click.Context, value) -> str:
    return format_amount(value, symbol=ctx.obj["settings"].currency_symbol)


def _parse_today(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return parse_iso_date(value, name="--today")
    except FinCastError as e:
        raise click.BadParameter(str(e)) from None


def _done(ctx: click.Context, message: str) -> None:
    if ctx.obj.get("quiet"):
        return
    ctx.obj["console"].print(f"[green]{message}[/green]")


@click.group()
@click.version_option(version=__version__, prog_name="fincast")
@click.option(
    "--store", "-s", "store_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="State file (default: FINCAST_STORE_PATH or ~/.local/share/fincast/financial_data.json)"
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def main(ctx: click.Context, store_path: Optional[Path], quiet: bool) -> None:
    """
    FinCast - Yearly balance forecast and reconciliation.

    Projects your balance day by day from monthly rules and planned
    events, and compares it with the real line built from recorded
    movements.

    Use 'fincast COMMAND --help' for command-specific help.
    """
    settings = AppSettings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["quiet"] = quiet
    ctx.obj["console"] = Console()
    ctx.obj["store"] = EntityStore.from_settings(settings, path=store_path)


# ---------------------------------------------------------------------------
# Overview
# ---------------------------------------------------------------------------

@main.command()
@click.option("--today", "today_str", default=None, help="Reference date YYYY-MM-DD (default: today)")
@click.pass_context
def show(ctx: click.Context, today_str: Optional[str]) -> None:
    """
    Show the headline numbers of the year.

    Example:
        fincast show --today 2025-06-15
    """
    today = _parse_today(today_str)
    try:
        state = _store(ctx).state
        summary = ForecastModel(state).summary(today)
    except FinCastError as e:
        _fail(str(e))

    table = Table(title=f"Financial forecast {summary.year}", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")

    table.add_row("Initial balance (1 Jan)", _money(ctx, summary.initial_balance))
    table.add_row("Monthly rules", str(len(state.rules)))
    table.add_row("Planned events", str(len(state.events)))
    table.add_row("Real movements", str(len(state.movements)))
    table.add_row("", "")
    table.add_row("Forecast on 31 Dec", _money(ctx, summary.final_forecast))
    table.add_row("Real on 31 Dec", _money(ctx, summary.final_real))
    table.add_row(
        "Lowest forecast",
        f"{_money(ctx, summary.min_forecast)} (day {summary.min_forecast_day})",
    )
    if summary.current_difference is not None:
        table.add_row("Current difference", _money(ctx, summary.current_difference))

    ctx.obj["console"].print(table)


@main.command("list")
@click.pass_context
def list_entries(ctx: click.Context) -> None:
    """List monthly rules, planned events and real movements."""
    try:
        state = _store(ctx).state
    except FinCastError as e:
        _fail(str(e))
    console = ctx.obj["console"]

    rules = Table(title="Monthly rules")
    for col in ("#", "Title", "Amount", "Day", "Active from"):
        rules.add_column(col)
    for i, rule in enumerate(state.rules, start=1):
        rules.add_row(
            str(i), rule.title, _money(ctx, rule.amount),
            str(rule.day_of_month), rule.active_from.isoformat(),
        )
    console.print(rules)

    events = Table(title="Planned events")
    for col in ("#", "Title", "Amount", "Date", "Description"):
        events.add_column(col)
    for i, event in enumerate(state.events, start=1):
        events.add_row(
            str(i), event.title, _money(ctx, event.amount),
            event.date.isoformat(), event.description,
        )
    console.print(events)

    movements = Table(title="Real movements")
    for col in ("#", "Title", "Amount", "Date", "Note"):
        movements.add_column(col)
    for i, movement in enumerate(state.movements, start=1):
        movements.add_row(
            str(i), movement.title, _money(ctx, movement.amount),
            movement.date.isoformat(), movement.note,
        )
    console.print(movements)


@main.command("set-year")
@click.argument("year", type=int)
@click.pass_context
def set_year(ctx: click.Context, year: int) -> None:
    """Set the projected YEAR."""
    try:
        _store(ctx).set_year(year)
    except FinCastError as e:
        _fail(str(e))
    _done(ctx, f"Year set to {year}")


@main.command("set-balance")
@click.argument("amount", type=str)
@click.pass_context
def set_balance(ctx: click.Context, amount: str) -> None:
    """
    Set the balance on January 1st.

    Negative amounts need a separator:
        fincast set-balance -- -250
    """
    try:
        state = _store(ctx).set_initial_balance(amount)
    except FinCastError as e:
        _fail(str(e))
    _done(ctx, f"Initial balance set to {_money(ctx, state.initial_balance)}")


# ---------------------------------------------------------------------------
# Monthly rules
# ---------------------------------------------------------------------------

@main.group()
def rule() -> None:
    """Add, edit or remove monthly rules."""


@rule.command("add")
@click.option("--amount", "-a", type=str, required=True, help="Signed amount (negative: expense)")
@click.option("--day", "-d", type=int, required=True, help="Day of month 1-31 (clamped in short months)")
@click.option("--from", "active_from", type=str, default=None, help="Active from YYYY-MM-DD (default: today)")
@click.option("--title", "-t", type=str, default=None, help="Optional title")
@click.pass_context
def rule_add(ctx, amount, day, active_from, title) -> None:
    """
    Add a monthly rule.

    Example:
        fincast rule add -a -750 -d 1 --from 2025-01-01 -t Rent
    """
    active_from = active_from or date.today().isoformat()
    try:
        _store(ctx).add_rule(amount=amount, day_of_month=day, active_from=active_from, title=title)
    except FinCastError as e:
        _fail(str(e))
    _done(ctx, "Monthly rule added")


@rule.command("edit")
@click.argument("number", type=int)
@click.option("--amount", "-a", type=str, default=None)
@click.option("--day", "-d", type=int, default=None)
@click.option("--from", "active_from", type=str, default=None)
@click.option("--title", "-t", type=str, default=None)
@click.pass_context
def rule_edit(ctx, number, amount, day, active_from, title) -> None:
    """Edit monthly rule NUMBER (1-based); omitted options keep their value."""
    try:
        _store(ctx).update_rule(
            number - 1, amount=amount, day_of_month=day, active_from=active_from, title=title
        )
    except FinCastError as e:
        _fail(str(e))
    _done(ctx, f"Monthly rule {number} updated")


@rule.command("remove")
@click.argument("number", type=int)
@click.pass_context
def rule_remove(ctx, number) -> None:
    """Remove monthly rule NUMBER (1-based)."""
    try:
        _store(ctx).remove_rule(number - 1)
    except FinCastError as e:
        _fail(str(e))
    _done(ctx, f"Monthly rule {number} removed")


# ---------------------------------------------------------------------------
# Planned events
# ---------------------------------------------------------------------------

@main.group()
def event() -> None:
    """Add, edit or remove planned events."""


@event.command("add")
@click.option("--amount", "-a", type=str, required=True, help="Signed amount")
@click.option("--date", "event_date", type=str, default=None, help="Date YYYY-MM-DD (default: 1 Jan of the year)")
@click.option("--title", "-t", type=str, default=None, help="Optional title")
@click.option("--description", type=str, default=None, help="Optional description")
@click.pass_context
def event_add(ctx, amount, event_date, title, description) -> None:
    """
    Add a planned event.

    Example:
        fincast event add -a -480 --date 2025-09-15 -t "Car insurance"
    """
    try:
        store = _store(ctx)
        event_date = event_date or f"{store.state.year:04d}-01-01"
        store.add_event(amount=amount, date=event_date, title=title, description=description)
    except FinCastError as e:
        _fail(str(e))
    _done(ctx, "Planned event added")


@event.command("edit")
@click.argument("number", type=int)
@click.option("--amount", "-a", type=str, default=None)
@click.option("--date", "event_date", type=str, default=None)
@click.option("--title", "-t", type=str, default=None)
@click.option("--description", type=str, default=None)
@click.pass_context
def event_edit(ctx, number, amount, event_date, title, description) -> None:
    """Edit planned event NUMBER (1-based); omitted options keep their value."""
    try:
        _store(ctx).update_event(
            number - 1, amount=amount, date=event_date, title=title, description=description
        )
    except FinCastError as e:
        _fail(str(e))
    _done(ctx, f"Planned event {number} updated")


@event.command("remove")
@click.argument("number", type=int)
@click.pass_context
def event_remove(ctx, number) -> None:
    """Remove planned event NUMBER (1-based)."""
    try:
        _store(ctx).remove_event(number - 1)
    except FinCastError as e:
        _fail(str(e))
    _done(ctx, f"Planned event {number} removed")


# ---------------------------------------------------------------------------
# Real movements
# ---------------------------------------------------------------------------

@main.group()
def movement() -> None:
    """Add, edit or remove real movements."""


@movement.command("add")
@click.option("--amount", "-a", type=str, required=True, help="Signed amount")
@click.option("--date", "movement_date", type=str, default=None, help="Date YYYY-MM-DD (default: today)")
@click.option("--title", "-t", type=str, default=None, help="Optional title")
@click.option("--note", type=str, default=None, help="Optional note")
@click.pass_context
def movement_add(ctx, amount, movement_date, title, note) -> None:
    """
    Record a real movement.

    Example:
        fincast movement add -a -42.10 --date 2025-03-14 --note Dentist
    """
    movement_date = movement_date or date.today().isoformat()
    try:
        _store(ctx).add_movement(amount=amount, date=movement_date, title=title, note=note)
    except FinCastError as e:
        _fail(str(e))
    _done(ctx, "Real movement added")


@movement.command("edit")
@click.argument("number", type=int)
@click.option("--amount", "-a", type=str, default=None)
@click.option("--date", "movement_date", type=str, default=None)
@click.option("--title", "-t", type=str, default=None)
@click.option("--note", type=str, default=None)
@click.pass_context
def movement_edit(ctx, number, amount, movement_date, title, note) -> None:
    """Edit real movement NUMBER (1-based); omitted options keep their value."""
    try:
        _store(ctx).update_movement(
            number - 1, amount=amount, date=movement_date, title=title, note=note
        )
    except FinCastError as e:
        _fail(str(e))
    _done(ctx, f"Real movement {number} updated")


@movement.command("remove")
@click.argument("number", type=int)
@click.pass_context
def movement_remove(ctx, number) -> None:
    """Remove real movement NUMBER (1-based)."""
    try:
        _store(ctx).remove_movement(number - 1)
    except FinCastError as e:
        _fail(str(e))
    _done(ctx, f"Real movement {number} removed")


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------

@main.command("export")
@click.option(
    "--output", "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Directory for finances-<year>.json (default: current directory)"
)
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the snapshot instead of writing a file")
@click.pass_context
def export_cmd(ctx: click.Context, output: Path, to_stdout: bool) -> None:
    """Export the current state as a JSON snapshot."""
    try:
        store = _store(ctx)
        if to_stdout:
            click.echo(store.export_snapshot())
            return
        path = write_export(store.state, output)
    except FinCastError as e:
        _fail(str(e))
    _done(ctx, f"Exported to {path}")


@main.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def import_cmd(ctx: click.Context, file: Path) -> None:
    """
    Import a JSON snapshot.

    Only the top-level fields present in FILE replace the current ones. A
    malformed file changes nothing.
    """
    store = _store(ctx)
    try:
        current = store.state
    except FinCastError as e:
        _fail(str(e))
    try:
        merged = read_import(file, current)
    except ParseError as e:
        logger.debug("Import of %s failed: %s", file, e)
        _fail(f"Could not import {file}. Check that the file is correct. ({e})")
    except FinCastError as e:
        _fail(str(e))
    store.save(merged)
    _done(ctx, "Data imported")


# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------

@main.command()
@click.option("--stride", type=int, default=None, help="Keep one point every N days (default: FINCAST_CHART_STRIDE or 2)")
@click.option(
    "--csv", "csv_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the feed to a CSV file instead of printing it"
)
@click.pass_context
def feed(ctx: click.Context, stride: Optional[int], csv_path: Optional[Path]) -> None:
    """Print the sampled forecast/real feed used by the chart."""
    stride = ctx.obj["settings"].chart_stride if stride is None else stride
    try:
        points = ForecastModel(_store(ctx).state).feed(stride=stride)
    except FinCastError as e:
        _fail(str(e))

    if csv_path is not None:
        frame = pd.DataFrame([p.to_dict() for p in points], columns=["day", "label", "forecast", "real"])
        csv_path.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(csv_path, index=False)
        _done(ctx, f"Feed saved to {csv_path}")
        return

    table = Table(title="Chart feed")
    table.add_column("Day", justify="right")
    table.add_column("Date")
    table.add_column("Forecast", justify="right")
    table.add_column("Real", justify="right")
    for p in points:
        table.add_row(str(p.day), p.label, f"{p.forecast:.2f}", f"{p.real:.2f}")
    ctx.obj["console"].print(table)


@main.command()
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("forecast.png"),
    help="Image file (default: forecast.png)"
)
@click.option(
    "--mode",
    type=click.Choice(["lines", "difference"]),
    default="lines",
    help="Chart type (default: lines)"
)
@click.option("--today", "today_str", default=None, help="Date to mark YYYY-MM-DD (default: today)")
@click.pass_context
def plot(ctx: click.Context, output: Path, mode: str, today_str: Optional[str]) -> None:
    """Save the forecast chart as an image."""
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    today = _parse_today(today_str)
    settings = ctx.obj["settings"]
    try:
        model = ForecastModel(_store(ctx).state)
        output.parent.mkdir(parents=True, exist_ok=True)
        model.plot(mode, today=today, stride=settings.chart_stride, save_path=str(output))
    except FinCastError as e:
        _fail(str(e))
    finally:
        plt.close("all")
    _done(ctx, f"Chart saved to {output}")


@main.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """
    Display system and package information.

    Shows version numbers, installed dependencies and the active settings.
    """
    settings = ctx.obj["settings"]
    info_lines = [
        f"FinCast Version: {__version__}",
        f"Python: {sys.version.split()[0]}",
        f"Store: {ctx.obj['store'].path}",
        f"Chart stride: {settings.chart_stride}",
        f"Log level: {settings.log_level}",
    ]

    dependencies = ["numpy", "pandas", "matplotlib", "pydantic", "click", "rich"]
    for name in dependencies:
        try:
            mod = __import__(name)
            info_lines.append(f"{name}: {getattr(mod, '__version__', 'installed')}")
        except ImportError:
            info_lines.append(f"{name}: not installed")

    ctx.obj["console"].print(Panel("\n".join(info_lines), title="System Information"))


if __name__ == "__main__":
    main()
