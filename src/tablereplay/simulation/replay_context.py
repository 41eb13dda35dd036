#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
from dataclasses import asdict, dataclass
from typing import Any, Iterable

import simpy

from tablereplay.aliases import MinuteOffset, TableId
from tablereplay.schemas import OccupancyInterval, Table


@dataclass
class ReplayDiagnostics:
    """Counters collected during one replay. Observability only."""

    # reservations referencing a table missing from the map
    nonexistent_tables: int = 0
    # reservations overlapping an accepted reservation on one of their tables
    conflicts: int = 0
    # conflicting reservations left out of the timeline
    rejected: int = 0
    # reservations scheduled on the timeline
    successful: int = 0
    events_fired: int = 0
    # events scheduled after the end of the replay
    events_dropped: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class ReplayContext:
    """State of a single replay run.

    Each run owns a fresh copy of the table map, so the `occupied` flags and
    occupancy logs written during a replay never leak into the caller's tables
    or into another run. A context should not be reused across runs.

    Attributes
    ----------
    tables
        Per-run copies of the tables, with empty occupancy logs.
    env
        The simulation clock the timeline is interpreted on.
    diagnostics
        Counters of the run.
    """

    def __init__(self, tables: dict[TableId, Table]):
        self.tables: dict[TableId, Table] = {
            table_id: Table(table_id=table.table_id, max_capacity=table.max_capacity)
            for table_id, table in tables.items()
        }
        # intervals of the reservations accepted so far, per table
        self._accepted: dict[TableId, list[tuple[MinuteOffset, MinuteOffset]]] = {
            table_id: [] for table_id in self.tables
        }
        self.env = simpy.Environment()
        self.diagnostics = ReplayDiagnostics()

    @property
    def now(self) -> MinuteOffset:
        return int(self.env.now)

    def has_tables(self, table_ids: Iterable[TableId]) -> bool:
        return all(table_id in self.tables for table_id in table_ids)

    def overlapping_table(
        self, table_ids: Iterable[TableId], start: MinuteOffset, end: MinuteOffset
    ) -> TableId | None:
        """The first of `table_ids` already claimed by an accepted reservation
        during [start, end), or None if all of them are free."""
        for table_id in table_ids:
            for other_start, other_end in self._accepted[table_id]:
                if not (end <= other_start or start >= other_end):
                    return table_id
        return None

    def accept(
        self, table_ids: Iterable[TableId], start: MinuteOffset, end: MinuteOffset
    ) -> None:
        for table_id in table_ids:
            self._accepted[table_id].append((start, end))

    def occupy(self, table_ids: Iterable[TableId]) -> None:
        for table_id in table_ids:
            self.tables[table_id].occupied = True

    def release(
        self, table_ids: Iterable[TableId], interval: OccupancyInterval
    ) -> None:
        for table_id in table_ids:
            table = self.tables[table_id]
            table.occupied = False
            table.occupancy_log.append(interval)
