"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..config import ExclusionConfig, get_default_config_path
from ..domain.models import WEEKDAY_NAMES
from ..services.exclusion_service import ExclusionService

app = typer.Typer(
    name="timeexclusions",
    help="Expand exclusion rules into untrackable and trackable time",
    add_completion=False
)

console = Console()


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Configure logging for all commands.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_service(config_file: Optional[Path]) -> ExclusionService:
    config_path = config_file or get_default_config_path()
    config = ExclusionConfig.load_from_yaml(config_path)
    return ExclusionService.from_config(config)


def _determine_time_range(
    *,
    tz: str,
    this_week: bool,
    next_week: bool,
    start_option: Optional[str],
    end_option: Optional[str]
):
    """
    Resolve the query window based on shortcut flags or explicit dates.

    The window is half-open: --end names the last day that is included.
    Returns (start_date, end_date).
    """
    if this_week and next_week:
        console.print("[red]Error: --this-week and --next-week cannot be combined.[/red]")
        raise typer.Exit(1)

    now = pendulum.now(tz)

    if this_week:
        monday = now.start_of("week")
        return monday, monday.add(days=7)

    if next_week:
        next_monday = now.next(pendulum.MONDAY).start_of("day")
        return next_monday, next_monday.add(days=7)

    if start_option:
        try:
            start_date = pendulum.from_format(start_option, "YYYY-MM-DD", tz=tz).start_of("day")
        except Exception as e:
            console.print(f"[red]Could not parse start date: {escape(str(e))}[/red]")
            raise typer.Exit(1)
    else:
        start_date = now.start_of("day")

    if end_option:
        try:
            end_date = pendulum.from_format(end_option, "YYYY-MM-DD", tz=tz).start_of("day").add(days=1)
        except Exception as e:
            console.print(f"[red]Could not parse end date: {escape(str(e))}[/red]")
            raise typer.Exit(1)
    else:
        end_date = start_date.add(days=7)

    return start_date, end_date


def _format_range(time_range) -> str:
    weekday = WEEKDAY_NAMES[time_range.start.weekday()]
    return f"{weekday[:3]} {time_range}"


@app.command()
def check(
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./exclusions.yaml")] = None,
):
    """
    Validate the configured exclusions and list them.
    """
    try:
        service = _load_service(config_file)

        if not service.rules:
            console.print("[yellow]No exclusions defined in the config file.[/yellow]")
            return

        table = Table(
            title="Configured exclusions",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("#", style="dim")
        table.add_column("Rule", style="bold yellow")
        table.add_column("Kind")
        table.add_column("Additive")

        for position, rule in enumerate(service.rules, 1):
            table.add_row(
                str(position),
                escape(rule.serialize()),
                rule.kind.value,
                "yes" if rule.additive else "no"
            )

        console.print()
        console.print(table)
        console.print()

    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def expand(
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./exclusions.yaml")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="Last included date (YYYY-MM-DD)")] = None,
    this_week: Annotated[bool, typer.Option("--this-week", help="Expand over the current week (Monday-Sunday).")] = False,
    next_week: Annotated[bool, typer.Option("--next-week", help="Expand over the coming week (Monday-Sunday).")] = False,
):
    """
    Show the ranges every exclusion rule yields in a window.

    Examples:

        timeexclusions expand --this-week

        timeexclusions expand --start 2024-03-01 --end 2024-03-31
    """
    try:
        service = _load_service(config_file)

        start_date, end_date = _determine_time_range(
            tz=service.timezone,
            this_week=this_week,
            next_week=next_week,
            start_option=start,
            end_option=end
        )

        console.print(
            f"\n[bold cyan]Window:[/bold cyan] "
            f"{start_date.format('YYYY-MM-DD HH:mm')} - {end_date.format('YYYY-MM-DD HH:mm')}\n"
        )

        for rule, ranges in service.expand(start_date, end_date):
            console.print(f"[bold yellow]{escape(rule.serialize())}[/bold yellow]")
            if not ranges:
                console.print("  [dim]no ranges[/dim]")
            for time_range in ranges:
                console.print(f"  {_format_range(time_range)}")

        console.print()

    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def trackable(
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./exclusions.yaml")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="Last included date (YYYY-MM-DD)")] = None,
    this_week: Annotated[bool, typer.Option("--this-week", help="Use the current week (Monday-Sunday).")] = False,
    next_week: Annotated[bool, typer.Option("--next-week", help="Use the coming week (Monday-Sunday).")] = False,
):
    """
    Show excluded and trackable time in a window.
    """
    try:
        service = _load_service(config_file)

        start_date, end_date = _determine_time_range(
            tz=service.timezone,
            this_week=this_week,
            next_week=next_week,
            start_option=start,
            end_option=end
        )

        excluded = service.excluded(start_date, end_date)
        free = service.trackable(start_date, end_date)

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Status")
        table.add_column("Range")
        table.add_column("Minutes", justify="right")

        rows = [("excluded", r) for r in excluded] + [("trackable", r) for r in free]
        for status, time_range in sorted(rows, key=lambda row: row[1].start):
            style = "red" if status == "excluded" else "green"
            table.add_row(
                f"[{style}]{status}[/{style}]",
                _format_range(time_range),
                str(time_range.duration_minutes())
            )

        total = sum(r.duration_minutes() for r in free)

        console.print()
        console.print(table)
        console.print(f"\n[bold green]Trackable:[/bold green] {total // 60}h {total % 60:02d}m\n")

    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]timeexclusions[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
