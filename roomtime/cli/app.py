"""
Main CLI application using Typer.
"""

import asyncio
import logging
import re
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from pendulum import DateTime
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.json_store import JsonStore
from ..config import AppConfig, get_default_config_path
from ..domain.duration import attendance_duration
from ..domain.exceptions import BookingConflictError, RoomtimeError, SelectionError
from ..domain.models import NetDuration, SlotStatus, TimeRange
from ..services.attendance import AttendanceService
from ..services.booking import BookingService

app = typer.Typer(
    name="roomtime",
    help="Meeting room slots and attendance durations",
    add_completion=False
)

console = Console()

_TIME_OF_DAY = re.compile(r"^\d{1,2}:\d{2}$")

STATUS_STYLES = {
    SlotStatus.AVAILABLE: "green",
    SlotStatus.PAST: "dim",
    SlotStatus.BOOKED: "red",
}

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]
DataOption = Annotated[
    Optional[Path],
    typer.Option("--data", help="JSON data file. Overrides data_file from the config.")
]
DateOption = Annotated[Optional[str], typer.Option("--date", help="Day (YYYY-MM-DD). Defaults to today.")]
NowOption = Annotated[Optional[str], typer.Option("--now", help="Reference instant (ISO 8601). Defaults to the clock.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """Explicit config must exist; the default location is optional."""
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)

    return AppConfig()


def _open_store(config: AppConfig, data_file: Optional[Path]) -> JsonStore:
    return JsonStore(data_file=data_file or config.data_file, timezone=config.timezone)


def _resolve_day(date_option: Optional[str], tz: str) -> DateTime:
    if date_option:
        return pendulum.from_format(date_option, "YYYY-MM-DD", tz=tz).start_of("day")
    return pendulum.now(tz).start_of("day")


def _resolve_now(now_option: Optional[str], tz: str) -> DateTime:
    if now_option:
        return pendulum.parse(now_option, tz=tz)
    return pendulum.now(tz)


def _parse_instant(value: str, day: DateTime, tz: str) -> DateTime:
    """Accept either ``HH:mm`` on ``day`` or a full ISO 8601 timestamp."""
    if _TIME_OF_DAY.match(value):
        hour, minute = (int(part) for part in value.split(":"))
        return day.set(hour=hour, minute=minute, second=0, microsecond=0)
    return pendulum.parse(value, tz=tz)


def _parse_break(value: str, day: DateTime, tz: str) -> TimeRange:
    """Parse ``START/END`` or ``HH:mm-HH:mm`` into a range."""
    separator = "/" if "/" in value else "-"
    if separator == "-" and not re.match(r"^\d{1,2}:\d{2}-\d{1,2}:\d{2}$", value):
        raise typer.BadParameter(f"Break must be HH:mm-HH:mm or START/END, got '{value}'")
    start, end = value.split(separator, 1)
    return TimeRange(start=_parse_instant(start, day, tz), end=_parse_instant(end, day, tz))


def _build_booking_service(config: AppConfig, store: JsonStore) -> BookingService:
    return BookingService(
        reservation_source=store,
        booking_submitter=store,
        operating_hours=config.office_hours.to_operating_hours(),
        slot_minutes=config.booking.slot_minutes,
        require_contiguous=config.booking.require_contiguous,
    )


@app.command()
def slots(
    room: Annotated[str, typer.Argument(help="Meeting room id")],
    date: DateOption = None,
    now: NowOption = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    available_only: Annotated[bool, typer.Option("--available-only", help="Hide past and booked slots.")] = False,
    verbose: VerboseOption = False,
):
    """
    Show the slot grid of a room for one day.
    """
    _configure_logging(verbose)
    try:
        config = _load_config(config_file)
        tz = config.timezone
        day = _resolve_day(date, tz)
        service = _build_booking_service(config, _open_store(config, data_file))

        classified = asyncio.run(
            service.get_slots(resource_id=room, day=day, now=_resolve_now(now, tz))
        )
    except (RoomtimeError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    shown = [s for s in classified if s.is_available] if available_only else classified

    if not shown:
        console.print(
            "[yellow]No available slots for the selected date.[/yellow]\n"
            "Please choose another date or check back later."
        )
        return

    table = Table(
        title=f"{room} – {day.format('dddd, MMMM Do YYYY')}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Slot", style="bold")
    table.add_column("Status")

    for slot in shown:
        style = STATUS_STYLES[slot.status]
        table.add_row(slot.label, f"[{style}]{slot.status.value}[/{style}]")

    console.print()
    console.print(table)
    console.print()


@app.command()
def book(
    room: Annotated[str, typer.Argument(help="Meeting room id")],
    picks: Annotated[List[str], typer.Argument(help="Slot start times in pick order, e.g. 09:00 09:30")],
    title: Annotated[str, typer.Option("--title", "-t", help="Meeting title")],
    notes: Annotated[str, typer.Option("--notes", help="Optional notes")] = "",
    owner: Annotated[Optional[str], typer.Option("--owner", help="Booking owner id")] = None,
    contiguous: Annotated[
        Optional[bool],
        typer.Option("--contiguous/--allow-gaps", help="Require adjacent slots. Defaults to the config.")
    ] = None,
    date: DateOption = None,
    now: NowOption = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    verbose: VerboseOption = False,
):
    """
    Book a room for the selected slots.

    Examples:

        roomtime book room-a 09:00 09:30 --title "Standup" --date 2024-11-25
    """
    _configure_logging(verbose)
    try:
        config = _load_config(config_file)
        if contiguous is not None:
            config.booking.require_contiguous = contiguous
        tz = config.timezone
        day = _resolve_day(date, tz)
        reference = _resolve_now(now, tz)
        service = _build_booking_service(config, _open_store(config, data_file))

        grid = asyncio.run(service.get_slots(resource_id=room, day=day, now=reference))
        by_start = {slot.time_range.start.format("HH:mm"): slot for slot in grid}

        selection = []
        for pick in picks:
            normalized = _parse_instant(pick, day, tz).format("HH:mm")
            if normalized not in by_start:
                raise ValueError(f"No slot starts at {pick}")
            selection.append(by_start[normalized])

        reservation = asyncio.run(
            service.book(
                resource_id=room,
                day=day,
                selection=selection,
                now=reference,
                title=title,
                notes=notes,
                owner_id=owner,
            )
        )
    except SelectionError as e:
        console.print(f"[bold yellow]Selection:[/bold yellow] {e}")
        raise typer.Exit(1)
    except BookingConflictError as e:
        console.print(f"[bold red]Conflict:[/bold red] {e}")
        raise typer.Exit(1)
    except (RoomtimeError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold green]✓ Booking successful![/bold green]\n\n"
        f"[bold]Room:[/bold] {reservation.resource_id}\n"
        f"[bold]Time:[/bold] {reservation.time_range}\n"
        f"[bold]Title:[/bold] {reservation.title}\n"
        f"[bold]Id:[/bold] {reservation.id}",
        title="Booking"
    ))


@app.command()
def duration(
    clock_in: Annotated[str, typer.Option("--clock-in", help="HH:mm or ISO 8601")],
    clock_out: Annotated[Optional[str], typer.Option("--clock-out", help="HH:mm or ISO 8601")] = None,
    breaks: Annotated[
        Optional[List[str]],
        typer.Option("--break", "-b", help="HH:mm-HH:mm or START/END; repeatable")
    ] = None,
    date: DateOption = None,
    config_file: ConfigOption = None,
):
    """
    Compute net worked time of one session.
    """
    try:
        config = _load_config(config_file)
        tz = config.timezone
        day = _resolve_day(date, tz)

        result = attendance_duration(
            _parse_instant(clock_in, day, tz),
            _parse_instant(clock_out, day, tz) if clock_out else None,
            [_parse_break(value, day, tz) for value in breaks or []],
        )
    except (RoomtimeError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if result.is_complete:
        console.print(f"[bold green]{result.format_display()}[/bold green]")
    else:
        console.print(f"[yellow]{result.format_display()}[/yellow] ({result.reason})")


@app.command()
def attendance(
    user_id: Annotated[str, typer.Argument(help="User id")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    verbose: VerboseOption = False,
):
    """
    List attendance records of a user with their net durations.
    """
    _configure_logging(verbose)
    try:
        config = _load_config(config_file)
        service = AttendanceService(_open_store(config, data_file))
        rows = asyncio.run(service.rows_for_user(user_id))
    except (RoomtimeError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not rows:
        console.print("[yellow]No attendance records found.[/yellow]")
        return

    table = Table(title="Attendance History", show_header=True, header_style="bold cyan")
    for head in ("Date", "Clock In", "Clock Out", "Duration", "Status"):
        table.add_column(head)

    for row in rows:
        record = row.record
        table.add_row(
            record.clock_in.format("DD.MM.YYYY"),
            record.clock_in.format("HH:mm"),
            record.clock_out.format("HH:mm") if record.clock_out else "-",
            row.duration.format_display(),
            record.status or "-",
        )

    total: NetDuration = AttendanceService.total_worked(rows)
    console.print()
    console.print(table)
    console.print(f"Total: [bold]{total.format_display()}[/bold]\n")


@app.command()
def show_config(
    config_file: ConfigOption = None,
):
    """
    Show the effective configuration.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold]Timezone:[/bold] {config.timezone}\n"
        f"[bold]Office hours:[/bold] {config.office_hours.start_time.strftime('%H:%M')}"
        f" - {config.office_hours.end_time.strftime('%H:%M')}\n"
        f"[bold]Slot length:[/bold] {config.booking.slot_minutes} min\n"
        f"[bold]Contiguous selection:[/bold] {'required' if config.booking.require_contiguous else 'gaps allowed'}\n"
        f"[bold]Data file:[/bold] {config.data_file or '-'}",
        title="Configuration"
    ))


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]roomtime[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
