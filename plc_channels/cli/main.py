"""Command-line interface for the PLC channel assignment engine."""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.panel import Panel

from .. import __version__
from ..config import ConfigError, load_settings
from ..parsers import SnapshotLoadError, load_snapshot, points_to_dataframe
from ..engine import (
    auto_assign_all,
    detect_conflicts,
    get_card_utilization,
    get_controller_utilization,
    summarize_io_system,
    suggest_card_configuration,
    total_cards,
)
from ..models import UtilizationStatus

console = Console()

STATUS_STYLES = {
    UtilizationStatus.LOW: "green",
    UtilizationStatus.MEDIUM: "yellow",
    UtilizationStatus.HIGH: "dark_orange",
    UtilizationStatus.FULL: "red",
}


def snapshot_options(func):
    """Attach the --points/--cards/--snapshot options to a command."""
    func = click.option(
        "--snapshot", "-s",
        type=click.Path(exists=True, dir_okay=False),
        default=None,
        help="YAML file holding both 'cards' and 'points'"
    )(func)
    func = click.option(
        "--cards", "-c",
        type=click.Path(exists=True, dir_okay=False),
        default=None,
        help="PLC card list (.xlsx, .xls or .csv)"
    )(func)
    func = click.option(
        "--points", "-p",
        type=click.Path(exists=True, dir_okay=False),
        default=None,
        help="I/O point list (.xlsx, .xls or .csv)"
    )(func)
    return func


def _load(points, cards, snapshot):
    """Load a snapshot, print validation problems, exit 2 on load errors."""
    try:
        loaded = load_snapshot(points_path=points, cards_path=cards, snapshot_path=snapshot)
    except SnapshotLoadError as e:
        console.print(f"[red]Error loading snapshot: {e}[/red]")
        sys.exit(2)

    result = loaded.validation_result
    if result.errors:
        console.print("[red]Validation errors found:[/red]")
        for error in result.errors:
            row = f"Row {error.row}: " if error.row is not None else ""
            console.print(f"  - {row}{error.message}")
    if result.warnings:
        console.print("[yellow]Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  - {warning.message}")

    return loaded


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(dir_okay=False),
    default=None,
    help="Engine settings YAML (card sizes, utilization bands)"
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, config, verbose):
    """PLC I/O channel assignment and conflict checking.

    Assign I/O points to PLC card channels, audit existing assignments and
    plan additional hardware.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )

    try:
        ctx.obj = load_settings(config)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(2)


@cli.command()
@snapshot_options
def audit(points, cards, snapshot):
    """Detect channel conflicts in an existing assignment."""
    loaded = _load(points, cards, snapshot)
    report = detect_conflicts(loaded.points, loaded.cards)

    if not report.has_conflicts:
        console.print(f"[green]✓ No conflicts across {len(loaded.points)} I/O points[/green]")
        return

    table = Table(title=f"Conflicts ({len(report.conflicts)})")
    table.add_column("Type", style="red")
    table.add_column("I/O Point", style="cyan")
    table.add_column("Card")
    table.add_column("Channel", justify="right")
    table.add_column("Message")

    for conflict in report.conflicts:
        table.add_row(
            conflict.conflict_type.value,
            conflict.point_tag,
            str(conflict.location),
            "" if conflict.channel is None else str(conflict.channel),
            conflict.message,
        )

    console.print(table)
    sys.exit(1)


@cli.command()
@snapshot_options
@click.option("--by-controller", is_flag=True, help="Also show utilization per controller")
@click.pass_obj
def utilization(settings, points, cards, snapshot, by_controller):
    """Show channel utilization per PLC card."""
    loaded = _load(points, cards, snapshot)

    if not loaded.cards:
        console.print("[yellow]No PLC cards defined[/yellow]")
        return

    table = Table(title="PLC Card Utilization")
    table.add_column("Card", style="cyan")
    table.add_column("Location")
    table.add_column("Type")
    table.add_column("Used", justify="right")
    table.add_column("Free", justify="right")
    table.add_column("%", justify="right")
    table.add_column("Status")

    for row in get_card_utilization(loaded.cards, loaded.points, settings):
        style = STATUS_STYLES[row.status]
        signal = f" {row.card.signal_type.value}" if row.card.signal_type else ""
        table.add_row(
            row.card.label,
            str(row.card.location),
            f"{row.card.io_type.value}{signal}",
            str(row.used_channels),
            str(row.available_channels),
            str(row.utilization_percentage),
            f"[{style}]{row.status.value}[/{style}]",
        )
    console.print(table)

    if by_controller:
        ctl_table = Table(title="Controller Utilization")
        ctl_table.add_column("PLC", style="cyan")
        ctl_table.add_column("Cards", justify="right")
        ctl_table.add_column("Used / Total", justify="right")
        ctl_table.add_column("%", justify="right")
        for row in get_controller_utilization(loaded.cards, loaded.points):
            ctl_table.add_row(
                row.plc_name,
                str(row.card_count),
                f"{row.used_channels} / {row.total_channels}",
                str(row.utilization_percentage),
            )
        console.print(ctl_table)


@cli.command()
@snapshot_options
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the updated I/O point list to this CSV file"
)
def assign(points, cards, snapshot, output):
    """Auto-assign channels to every unassigned I/O point."""
    loaded = _load(points, cards, snapshot)
    batch = auto_assign_all(loaded.points, loaded.cards)

    if not batch.results:
        console.print("[green]All I/O points are already assigned[/green]")
    else:
        table = Table(title="Channel Assignment")
        table.add_column("I/O Point", style="cyan")
        table.add_column("Result")
        table.add_column("Card")
        table.add_column("Channel", justify="right")

        for point, result in batch.results:
            if result.success:
                table.add_row(point.tag, "[green]assigned[/green]", result.card.name,
                              str(result.assigned_channel))
            else:
                table.add_row(point.tag, f"[red]{result.failure.value}[/red]", result.message, "")
        console.print(table)

        console.print(
            f"\nAssigned: [green]{batch.assigned_count}[/green]  "
            f"Unplaced: [red]{batch.failed_count}[/red]"
        )

    # Re-audit after a batch; placements are provisional until checked
    report = detect_conflicts(batch.assigned_points, loaded.cards)
    if report.has_conflicts:
        console.print(
            f"[yellow]Snapshot still has {len(report.conflicts)} conflicts; "
            f"run 'audit' for details[/yellow]"
        )

    if output:
        points_to_dataframe(batch.assigned_points).to_csv(output, index=False)
        console.print(f"[green]✓ Updated I/O list saved to: {output}[/green]")


@cli.command()
@snapshot_options
@click.pass_obj
def suggest(settings, points, cards, snapshot):
    """Suggest PLC cards for I/O points that cannot be placed."""
    loaded = _load(points, cards, snapshot)

    if loaded.cards:
        unplaced = auto_assign_all(loaded.points, loaded.cards).unplaced
    else:
        unplaced = [p for p in loaded.points if not p.is_assigned]

    suggestions = suggest_card_configuration(unplaced, settings)
    if not suggestions:
        console.print("[green]✓ Existing cards cover every I/O point[/green]")
        return

    table = Table(title="Suggested PLC Cards")
    table.add_column("I/O Type", style="cyan")
    table.add_column("Signal")
    table.add_column("Channels", justify="right")
    table.add_column("Cards", justify="right")
    table.add_column("Points Served", justify="right")
    table.add_column("Reason")

    for s in suggestions:
        table.add_row(
            s.io_type.value,
            s.signal_type.value if s.signal_type else "generic",
            str(s.channel_count),
            str(s.cards_needed),
            str(s.io_points_served),
            s.reason,
        )
    console.print(table)
    console.print(f"Total additional cards: [bold]{total_cards(suggestions)}[/bold]")


@cli.command()
@snapshot_options
@click.pass_obj
def summary(settings, points, cards, snapshot):
    """Summarize I/O points and channel usage."""
    loaded = _load(points, cards, snapshot)
    info = summarize_io_system(loaded.points, loaded.cards, settings)

    console.print(Panel.fit(
        f"[bold]{info.total_points}[/bold] I/O points, "
        f"[bold]{info.unassigned_points}[/bold] unassigned\n"
        f"{len(info.card_utilization)} cards, "
        f"{info.used_channels} / {info.total_channels} channels used",
        title="I/O System",
        border_style="blue"
    ))

    for title, counts in [("By I/O Type", info.points_by_io_type),
                          ("By Signal Type", info.points_by_signal_type)]:
        table = Table(title=title)
        table.add_column("Type", style="cyan")
        table.add_column("Count", justify="right")
        for key, count in sorted(counts.items()):
            table.add_row(key, str(count))
        console.print(table)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
