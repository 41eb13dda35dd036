#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
from rich.console import Console
from rich.table import Table
from rich.text import Text

from tablereplay.aliases import CapacityFilter
from tablereplay.constants import ALL_CAPACITIES, TIME_SLOT_MINUTES
from tablereplay.schemas import SimulationData
from tablereplay.simulation.replay_context import ReplayDiagnostics
from tablereplay.time_utils import format_stamp, offset_to_clock, shift_by
from tablereplay.timeline import (
    filtered_table_ids,
    summarise,
    table_status,
    time_slots,
    visible_occupancies,
)

OCCUPIED_CELL = Text("■", style="bold red")
FREE_CELL = Text("·", style="dim")


def display_timeline(
    data: SimulationData,
    at_minute: float | None = None,
    capacity_filter: CapacityFilter = ALL_CAPACITIES,
    step: int = TIME_SLOT_MINUTES,
    console: Console | None = None,
):
    """Display the occupancy of each table as a rich table with the following format

    ┏━━━━━━━┳━━━━━━━┳━━━━━━━┳━━━━━━━┓
    ┃ Table ┃ 13:00 ┃ 13:30 ┃ 14:00 ┃
    ┡━━━━━━━╇━━━━━━━╇━━━━━━━╇━━━━━━━┩
    │ 1 (4) │   ■   │   ■   │   ·   │

    Only the bookings created by `at_minute` of playback are drawn, all of them
    when `at_minute` is None.
    """  # noqa

    console = console or Console()
    at_minute = data.max_slider_val if at_minute is None else at_minute
    groups = visible_occupancies(data.occupancy_groups, at_minute)
    slots = time_slots(data.end_time, step)

    table = Table(
        title=(
            f"{data.restaurant_id} | {data.day} | {data.meal_shift} | "
            f"playback {format_stamp(shift_by(data.shift_start, at_minute))}"
        ),
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Table", justify="right", style="cyan", no_wrap=True)
    for slot in slots:
        table.add_column(offset_to_clock(slot, data.shift_start), justify="center")

    for table_id in filtered_table_ids(data.tables, capacity_filter):
        capacity = data.tables[table_id].max_capacity
        cells = [
            OCCUPIED_CELL if table_status(groups, table_id, slot).occupied else FREE_CELL
            for slot in slots
        ]
        table.add_row(f"{table_id} ({capacity})", *cells)

    console.print(table)


def display_summary(
    data: SimulationData,
    diagnostics: ReplayDiagnostics | None = None,
    console: Console | None = None,
):
    """Display the headline figures of a replay, and its diagnostics if given."""
    console = console or Console()
    summary = summarise(data)
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right")

    table.add_row("Shift start", format_stamp(data.shift_start))
    table.add_row("Tables", str(summary.tables))
    table.add_row("Reservations", str(summary.reservations))
    table.add_row("Occupancy groups", str(summary.occupancy_groups))
    if summary.average_duration is not None:
        table.add_row("Average duration", f"{summary.average_duration:.0f} min")
    if summary.average_advance is not None:
        table.add_row("Average advance", f"{summary.average_advance:.1f} h")
    if diagnostics is not None:
        for name, value in diagnostics.to_dict().items():
            table.add_row(name.replace("_", " ").capitalize(), str(value))

    console.print(table)
