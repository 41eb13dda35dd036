#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""Typed records shared by the parser, the replay engine and the timeline queries."""

import datetime
from typing import Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    PositiveInt,
    model_validator,
)

from tablereplay.aliases import MinuteOffset, TableId
from tablereplay.constants import DEFAULT_DURATION_MINUTES, DEFAULT_PARTY_SIZE

OccupancyKey = tuple[MinuteOffset, MinuteOffset, datetime.datetime, datetime.datetime]


class OccupancyInterval(BaseModel):
    """A finished occupation of one table."""

    model_config = ConfigDict(frozen=True)

    start: MinuteOffset
    end: MinuteOffset
    creation: datetime.datetime
    reservation: datetime.datetime

    @property
    def key(self) -> OccupancyKey:
        return self.start, self.end, self.creation, self.reservation


class Table(BaseModel):
    """A physical table of the restaurant map.

    Attributes
    ----------
    table_id
    max_capacity
        Maximum number of covers the table seats.
    occupied
        Whether the table is taken at the current replay time. Only meaningful
        while a replay runs.
    occupancy_log
        Finished occupations, in the order the replay released them.
    """

    table_id: PositiveInt
    max_capacity: PositiveInt
    occupied: bool = False
    occupancy_log: list[OccupancyInterval] = Field(default_factory=list)


class Reservation(BaseModel):
    """A historical booking that materialised.

    Attributes
    ----------
    arrival_time
        Booked arrival, in minutes after the earliest booked arrival of the
        replayed shift.
    table_ids
        The tables the booking claims.
    creation_datetime
        When the booking was made.
    reservation_datetime
        The booked arrival wall-clock time.
    """

    model_config = ConfigDict(frozen=True)

    arrival_time: NonNegativeInt
    table_ids: list[TableId]
    party_size: PositiveInt = DEFAULT_PARTY_SIZE
    duration: PositiveInt = DEFAULT_DURATION_MINUTES
    creation_datetime: datetime.datetime
    reservation_datetime: datetime.datetime
    reservation_id: str | None = None

    @property
    def departure_time(self) -> MinuteOffset:
        return self.arrival_time + self.duration


class OccupancyGroup(BaseModel):
    """Tables sharing the same occupation interval and booking provenance.

    Attributes
    ----------
    start
        Minutes from the start of the shift.
    advance
        Minutes between the creation of the booking and the booked arrival.
        Negative when the booking was logged after the fact.
    creation_rel
        Minutes between the creation of the booking and the start of the
        shift. Playback reveals the group once it reaches this value.
    """

    model_config = ConfigDict(frozen=True)

    table_ids: list[TableId]
    start: MinuteOffset
    duration: MinuteOffset
    creation: datetime.datetime
    reservation: datetime.datetime
    advance: float
    creation_rel: float

    @property
    def end(self) -> MinuteOffset:
        return self.start + self.duration


class SimulationData(BaseModel):
    """Everything needed to replay and render one restaurant shift."""

    tables: dict[TableId, Table]
    reservations: list[Reservation]
    occupancy_groups: list[OccupancyGroup] = Field(default_factory=list)
    min_time: MinuteOffset
    max_time: MinuteOffset
    shift_start: datetime.datetime
    end_time: NonNegativeInt
    min_slider_val: float
    max_slider_val: float
    day: str
    meal_shift: str
    restaurant_id: str

    @model_validator(mode="after")
    def _check_slider_bounds(self) -> Self:
        if self.min_slider_val > self.max_slider_val:
            raise ValueError(
                f"Slider lower bound {self.min_slider_val} exceeds "
                f"upper bound {self.max_slider_val}"
            )
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serializes to a JSON compatible dictionary, reversible with `from_dict`."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, serialized_dict: dict[str, Any]) -> Self:
        return cls.model_validate(serialized_dict)


class PreparationFailure(BaseModel):
    """Returned instead of `SimulationData` when a shift cannot be replayed."""

    model_config = ConfigDict(frozen=True)

    reason: str
    day: str
    meal_shift: str
    restaurant_id: str
    tables_found: int = 0
    reservations_found: int = 0
