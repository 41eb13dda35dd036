#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
from enum import StrEnum, auto

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from tablereplay.constants import (
    CONFIRMED_STATUSES,
    DEFAULT_DURATION_MINUTES,
    DEFAULT_PARTY_SIZE,
    END_BUFFER_MINUTES,
    SHIFT_CODES,
)


class ConflictPolicy(StrEnum):
    """What the replay does with a reservation whose tables are already
    taken by an earlier accepted reservation."""

    # replay history as fact, conflicts are only counted and logged
    ACCEPT = auto()
    # exclude the later reservation from the occupancy timeline
    REJECT = auto()


class MissingTablePolicy(StrEnum):
    """What the parser does with a reservation without any table assigned."""

    DROP = auto()
    KEEP_EMPTY = auto()


class ReplayConfig(BaseModel):
    """Knobs of a replay run.

    Attributes
    ----------
    conflict_policy
        See `ConflictPolicy`. Applied to every reservation of a run.
    missing_tables
        See `MissingTablePolicy`.
    default_duration
        Minutes a party occupies its tables when the export has no duration.
    default_party_size
        Covers assumed when the export has no party size.
    end_buffer
        Minutes added after the last possible release when computing the end
        of the replay.
    confirmed_statuses
        Reservation status labels of bookings that actually materialised. Rows
        with any other status are ignored.
    shift_codes
        Numeric meal shift codes used by the layout export, mapped to the
        labels used by the reservation export.
    """

    model_config = ConfigDict(frozen=True)

    conflict_policy: ConflictPolicy = ConflictPolicy.ACCEPT
    missing_tables: MissingTablePolicy = MissingTablePolicy.DROP
    default_duration: PositiveInt = DEFAULT_DURATION_MINUTES
    default_party_size: PositiveInt = DEFAULT_PARTY_SIZE
    end_buffer: int = Field(default=END_BUFFER_MINUTES, ge=0)
    confirmed_statuses: tuple[str, ...] = CONFIRMED_STATUSES
    shift_codes: dict[str, str] = Field(default_factory=lambda: dict(SHIFT_CODES))
