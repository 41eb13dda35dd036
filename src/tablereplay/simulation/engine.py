#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""Discrete-event replay of historical reservations.

The replay runs in two passes. Scheduling walks the reservations in arrival
order, skips those pointing at unknown tables, checks the rest for overlaps
with the reservations accepted before them and emits explicit occupy/release
event records. Interpretation then executes the records on a simpy clock,
strictly in time order, and folds the resulting table logs into
`OccupancyGroup`s.
"""

import datetime
import logging
from collections.abc import Generator
from enum import StrEnum, auto
from typing import NamedTuple

import simpy

from tablereplay.aliases import MinuteOffset, TableId
from tablereplay.config import ConflictPolicy
from tablereplay.schemas import (
    OccupancyGroup,
    OccupancyInterval,
    OccupancyKey,
    Reservation,
    SimulationData,
    Table,
)
from tablereplay.simulation.replay_context import ReplayContext, ReplayDiagnostics
from tablereplay.time_utils import minutes_between

logger = logging.getLogger(__name__)


class EventKind(StrEnum):
    OCCUPY = auto()
    RELEASE = auto()


class TimelineEvent(NamedTuple):
    """A scheduled change of table state.

    Events sort by time, then by the order in which they were scheduled.
    """

    time: MinuteOffset
    sequence: int
    kind: EventKind
    reservation_index: int


def schedule_events(
    context: ReplayContext,
    reservations: list[Reservation],
    policy: ConflictPolicy = ConflictPolicy.ACCEPT,
) -> list[TimelineEvent]:
    """Build the timeline of a replay.

    Parameters
    ----------
    context
        The run the timeline is built for. Its diagnostics are updated.
    reservations
        Reservations sorted by arrival time. Events refer to them by position.
    policy
        Whether conflicting reservations stay on the timeline.

    Returns
    -------
    The occupy and release events of every scheduled reservation, sorted.
    """
    diagnostics = context.diagnostics
    events: list[TimelineEvent] = []
    for index, reservation in enumerate(reservations):
        table_ids = reservation.table_ids
        if not context.has_tables(table_ids):
            diagnostics.nonexistent_tables += 1
            logger.warning(
                f"Reservation for tables {table_ids} includes non-existent tables"
            )
            continue
        start, end = reservation.arrival_time, reservation.departure_time
        clash = context.overlapping_table(table_ids, start, end)
        if clash is not None:
            diagnostics.conflicts += 1
            logger.warning(f"Table {clash} is already occupied during {start}-{end}")
            if policy == ConflictPolicy.REJECT:
                diagnostics.rejected += 1
                logger.info(
                    f"Cannot process reservation at {start} for tables {table_ids} "
                    f"due to overlapping reservations"
                )
                continue
        context.accept(table_ids, start, end)
        diagnostics.successful += 1
        events.append(TimelineEvent(start, len(events), EventKind.OCCUPY, index))
        events.append(TimelineEvent(end, len(events), EventKind.RELEASE, index))
    events.sort()
    return events


def _interpret(
    context: ReplayContext,
    events: list[TimelineEvent],
    reservations: list[Reservation],
    end_time: MinuteOffset,
) -> Generator[simpy.Event, None, None]:
    """simpy process executing the timeline. Events after `end_time` do not fire."""
    env = context.env
    for event in events:
        if event.time > end_time:
            context.diagnostics.events_dropped += 1
            continue
        if event.time > env.now:
            yield env.timeout(event.time - env.now)
        reservation = reservations[event.reservation_index]
        if event.kind == EventKind.OCCUPY:
            context.occupy(reservation.table_ids)
        else:
            context.release(
                reservation.table_ids,
                OccupancyInterval(
                    start=reservation.arrival_time,
                    end=reservation.departure_time,
                    creation=reservation.creation_datetime,
                    reservation=reservation.reservation_datetime,
                ),
            )
        context.diagnostics.events_fired += 1
        logger.debug(f"t={context.now}: {event.kind} tables {reservation.table_ids}")


def fold_occupancy_logs(
    tables: dict[TableId, Table], shift_start: datetime.datetime
) -> list[OccupancyGroup]:
    """Merge the logs of all tables into groups sorted by start.

    Tables whose log entries share start, end, creation and reservation time
    end up in the same group.
    """
    table_ids_by_key: dict[OccupancyKey, list[TableId]] = {}
    for table in tables.values():
        for interval in table.occupancy_log:
            table_ids_by_key.setdefault(interval.key, []).append(table.table_id)

    groups = [
        OccupancyGroup(
            table_ids=table_ids,
            start=start,
            duration=end - start,
            creation=creation,
            reservation=reservation,
            advance=minutes_between(creation, reservation),
            creation_rel=minutes_between(shift_start, creation),
        )
        for (start, end, creation, reservation), table_ids in table_ids_by_key.items()
    ]
    groups.sort(key=lambda group: group.start)
    return groups


def slider_bounds(
    groups: list[OccupancyGroup], end_time: MinuteOffset
) -> tuple[float, float]:
    """Playback bounds: the span of the groups' creation times, or the whole
    replay when nothing was booked."""
    if not groups:
        return 0, end_time
    creation_times = [group.creation_rel for group in groups]
    return min(creation_times), max(creation_times)


def replay(
    data: SimulationData, policy: ConflictPolicy = ConflictPolicy.ACCEPT
) -> tuple[SimulationData, ReplayDiagnostics]:
    """Replay the reservations of `data` on its tables.

    `data` is left untouched: the returned copy carries per-run tables with
    their occupancy logs, the occupancy groups and the recomputed slider
    bounds.
    """
    context = ReplayContext(data.tables)
    logger.info(
        f"Starting simulation with {len(data.reservations)} reservations "
        f"and {len(context.tables)} tables"
    )
    ordered = sorted(data.reservations, key=lambda r: r.arrival_time)
    events = schedule_events(context, ordered, policy)
    diagnostics = context.diagnostics
    logger.info(
        f"Timeline events setup: {len({e.time for e in events})} distinct time points"
    )
    logger.info(
        f"Reservations with non-existent tables: {diagnostics.nonexistent_tables}"
    )
    logger.info(f"Overlapping reservations detected: {diagnostics.conflicts}")

    context.env.process(_interpret(context, events, ordered, data.end_time))
    context.env.run()
    if diagnostics.events_dropped:
        logger.warning(
            f"{diagnostics.events_dropped} events fall after the end of the replay "
            f"({data.end_time}) and were not executed"
        )

    groups = fold_occupancy_logs(context.tables, data.shift_start)
    min_slider_val, max_slider_val = slider_bounds(groups, data.end_time)
    logger.info(
        f"Successful reservations: {diagnostics.successful}, "
        f"rejected: {diagnostics.rejected} ({policy} policy)"
    )
    logger.info(f"Generated {len(groups)} occupancy groups")
    result = data.model_copy(
        update={
            "tables": context.tables,
            "occupancy_groups": groups,
            "min_slider_val": min_slider_val,
            "max_slider_val": max_slider_val,
        }
    )
    return result, diagnostics


def run_simulation(
    data: SimulationData, policy: ConflictPolicy = ConflictPolicy.ACCEPT
) -> SimulationData:
    """Replay `data` and return the populated copy. See `replay`."""
    simulated, _ = replay(data, policy)
    return simulated
