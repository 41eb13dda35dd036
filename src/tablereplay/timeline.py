#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""Read-only queries over a finished replay, used to render and play it back."""

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict

from tablereplay.aliases import CapacityFilter, MinuteOffset, TableId
from tablereplay.constants import (
    ALL_CAPACITIES,
    PLAYBACK_STEP_MINUTES,
    TIME_SLOT_MINUTES,
)
from tablereplay.schemas import OccupancyGroup, SimulationData, Table


class TableStatus(NamedTuple):
    occupied: bool
    group: OccupancyGroup | None = None


class TimelineSummary(BaseModel):
    """Headline figures of a replayed shift.

    Attributes
    ----------
    average_duration
        Mean booked duration of the reservations, in minutes.
    average_advance
        Mean time between booking and arrival over the occupancy groups,
        in hours.
    """

    model_config = ConfigDict(frozen=True)

    tables: int
    reservations: int
    occupancy_groups: int
    average_duration: float | None
    average_advance: float | None


def filtered_table_ids(
    tables: dict[TableId, Table], capacity_filter: CapacityFilter
) -> list[TableId]:
    """Ids of the tables matching a capacity filter, in ascending order.

    Parameters
    ----------
    tables
        The table map.
    capacity_filter
        "All" to keep every table, otherwise the exact capacity to keep.
        Filters that are not an integer match nothing.
    """
    if capacity_filter == ALL_CAPACITIES:
        return sorted(table.table_id for table in tables.values())
    try:
        capacity = int(capacity_filter)
    except (TypeError, ValueError):
        return []
    return sorted(
        table.table_id for table in tables.values() if table.max_capacity == capacity
    )


def visible_occupancies(
    groups: list[OccupancyGroup], at_minute: float
) -> list[OccupancyGroup]:
    """Groups already known to the booking system at `at_minute` of playback."""
    return [group for group in groups if group.creation_rel <= at_minute]


def capacity_options(tables: dict[TableId, Table]) -> list[int]:
    """The distinct table capacities of the map, ascending."""
    return sorted({table.max_capacity for table in tables.values()})


def time_slots(
    end_time: MinuteOffset, step: int = TIME_SLOT_MINUTES
) -> list[MinuteOffset]:
    """Timeline columns: every `step` minutes from 0 up to `end_time` included."""
    if step <= 0:
        raise ValueError(f"Time slot step must be positive, got {step}")
    return list(range(0, end_time + 1, step))


def table_status(
    groups: list[OccupancyGroup], table_id: TableId, minute: MinuteOffset
) -> TableStatus:
    """Whether `table_id` is taken at `minute` according to `groups`.

    A group covers the minutes from its start (included) to its end (excluded).
    Pass the result of `visible_occupancies` to only account for the bookings
    known at a given playback time.
    """
    for group in groups:
        if table_id in group.table_ids and group.start <= minute < group.end:
            return TableStatus(occupied=True, group=group)
    return TableStatus(occupied=False)


def advance_playback(
    current: float, max_slider_val: float, step: float = PLAYBACK_STEP_MINUTES
) -> float:
    """The next playback position, clamped to the end of the playback."""
    return min(current + step, max_slider_val)


def summarise(data: SimulationData) -> TimelineSummary:
    reservations, groups = data.reservations, data.occupancy_groups
    average_duration = None
    if reservations:
        average_duration = sum(r.duration for r in reservations) / len(reservations)
    average_advance = None
    if groups:
        average_advance = sum(g.advance for g in groups) / len(groups) / 60
    return TimelineSummary(
        tables=len(data.tables),
        reservations=len(reservations),
        occupancy_groups=len(groups),
        average_duration=average_duration,
        average_advance=average_advance,
    )
