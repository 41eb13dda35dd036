#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""Turn the layout and reservation exports into the records a replay runs on.

None of the functions in this module raise for bad data: malformed rows are
logged and skipped, and filters matching nothing produce empty results.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

import polars as pl

from tablereplay.aliases import CsvText, DayStr, MealShiftLabel, RestaurantId, TableId
from tablereplay.config import MissingTablePolicy, ReplayConfig
from tablereplay.constants import (
    LAYOUT_DATE_COLUMN,
    LAYOUT_RESTAURANT_COLUMN,
    LAYOUT_SHIFT_COLUMN,
    RESERVATION_DATE_COLUMN,
    RESERVATION_RESTAURANT_COLUMN,
    RESERVATION_SHIFT_COLUMN,
    RESERVATION_STATUS_COLUMN,
)
from tablereplay.frame_utils import (
    ROW_INDEX_COLUMN,
    exact_match_filter_dataframe,
    filter_dataframe,
    is_member_filter_dataframe,
    read_rows,
)
from tablereplay.parsing.row_schemas import (
    Decoded,
    DecodeFailure,
    RawRow,
    ReservationRow,
    decode_layout_row,
    decode_reservation_row,
)
from tablereplay.schemas import (
    PreparationFailure,
    Reservation,
    SimulationData,
    Table,
)

logger = logging.getLogger(__name__)


@dataclass
class ParsedReservations:
    """Reservations of one shift plus the counts of what was left out."""

    reservations: list[Reservation] = field(default_factory=list)
    filtered_rows: int = 0
    malformed_rows: int = 0
    without_tables: int = 0


def shift_aliases(
    meal_shift: MealShiftLabel, shift_codes: dict[str, str]
) -> list[str]:
    """The values a meal shift column may hold for `meal_shift`: the label
    itself and any numeric code mapped to it."""
    codes = [code for code, label in shift_codes.items() if label == meal_shift]
    return [meal_shift, *codes]


def _iter_rows(dataframe: pl.DataFrame) -> Iterator[tuple[int, RawRow]]:
    for row in dataframe.iter_rows(named=True):
        row_index = row.pop(ROW_INDEX_COLUMN)
        yield row_index, row


def parse_map_data(
    csv_text: CsvText,
    day: DayStr,
    meal_shift: MealShiftLabel,
    restaurant_id: RestaurantId,
    config: ReplayConfig | None = None,
) -> dict[TableId, Table]:
    """Build the table map of a restaurant shift from the layout export.

    Rows are filtered on date, meal shift and restaurant. Each matching row
    lists one or more tables; a table appearing in several rows keeps the
    values of the last one.
    """
    config = config or ReplayConfig()
    rows = filter_dataframe(
        read_rows(csv_text),
        filter_criteria=[
            (LAYOUT_DATE_COLUMN, day, exact_match_filter_dataframe),
            (
                LAYOUT_SHIFT_COLUMN,
                shift_aliases(meal_shift, config.shift_codes),
                is_member_filter_dataframe,
            ),
            (LAYOUT_RESTAURANT_COLUMN, restaurant_id, exact_match_filter_dataframe),
        ],
    )
    logger.info(
        f"Filtered map data: {len(rows)} entries for {day}, meal shift: {meal_shift}, "
        f"restaurant: {restaurant_id}"
    )
    tables: dict[TableId, Table] = {}
    for row_index, row in _iter_rows(rows):
        result = decode_layout_row(row_index, row)
        if isinstance(result, DecodeFailure):
            logger.warning(
                f"Skipping layout row {result.row_index}: {result.reason}"
            )
            continue
        for entry in result.value:
            tables[entry.id_table] = Table(
                table_id=entry.id_table, max_capacity=entry.max
            )
    logger.info(
        f"Parsed {len(tables)} tables for {day}, meal shift: {meal_shift}, "
        f"restaurant: {restaurant_id}"
    )
    return tables


def parse_reservation_data(
    csv_text: CsvText,
    day: DayStr,
    meal_shift: MealShiftLabel,
    restaurant_id: RestaurantId,
    config: ReplayConfig | None = None,
) -> ParsedReservations:
    """Extract the confirmed reservations of a restaurant shift.

    Arrival times are normalised so that the earliest booked time of the shift
    is 0. Reservations without any table are dropped or kept with an empty
    table list according to `config.missing_tables`.
    """
    config = config or ReplayConfig()
    rows = filter_dataframe(
        read_rows(csv_text),
        filter_criteria=[
            (RESERVATION_DATE_COLUMN, day, exact_match_filter_dataframe),
            (
                RESERVATION_SHIFT_COLUMN,
                shift_aliases(meal_shift, config.shift_codes),
                is_member_filter_dataframe,
            ),
            (
                RESERVATION_RESTAURANT_COLUMN,
                restaurant_id,
                exact_match_filter_dataframe,
            ),
            (
                RESERVATION_STATUS_COLUMN,
                config.confirmed_statuses,
                is_member_filter_dataframe,
            ),
        ],
    )
    parsed = ParsedReservations(filtered_rows=len(rows))
    logger.info(
        f"Filtered reservation data: {len(rows)} entries for {day}, "
        f"meal shift: {meal_shift}, restaurant: {restaurant_id}"
    )

    decoded: list[Decoded[ReservationRow]] = []
    for row_index, row in _iter_rows(rows):
        result = decode_reservation_row(
            row_index,
            row,
            default_duration=config.default_duration,
            default_party_size=config.default_party_size,
        )
        if isinstance(result, DecodeFailure):
            parsed.malformed_rows += 1
            logger.warning(
                f"Skipping malformed reservation row {result.row_index}: "
                f"{result.reason}"
            )
            continue
        decoded.append(result)
    if not decoded:
        logger.info(f"No reservations left for {day}, meal shift: {meal_shift}")
        return parsed

    shift_origin = min(item.value.clock_minutes for item in decoded)
    for item in decoded:
        row = item.value
        if not row.table_ids:
            parsed.without_tables += 1
            if config.missing_tables == MissingTablePolicy.DROP:
                logger.info(
                    f"Skipping reservation with no valid table IDs: "
                    f"{row.reservation_id or 'unknown'}"
                )
                continue
        parsed.reservations.append(
            Reservation(
                arrival_time=row.clock_minutes - shift_origin,
                table_ids=row.table_ids,
                party_size=row.party_size,
                duration=row.duration,
                creation_datetime=row.creation_datetime,
                reservation_datetime=row.reservation_datetime,
                reservation_id=row.reservation_id,
            )
        )
    logger.info(
        f"Valid reservations: {len(parsed.reservations)}, "
        f"reservations without tables: {parsed.without_tables}, "
        f"malformed rows: {parsed.malformed_rows}"
    )
    return parsed


def prepare_simulation_data(
    maps_csv: CsvText,
    reservations_csv: CsvText,
    day: DayStr,
    meal_shift: MealShiftLabel,
    restaurant_id: RestaurantId,
    config: ReplayConfig | None = None,
) -> SimulationData | PreparationFailure:
    """Parse both exports into the input of a replay.

    Returns
    -------
    A `SimulationData` with empty occupancy, or a `PreparationFailure` when the
    exports hold no table or no reservation for the requested shift.
    """
    config = config or ReplayConfig()
    tables = parse_map_data(maps_csv, day, meal_shift, restaurant_id, config)
    parsed = parse_reservation_data(
        reservations_csv, day, meal_shift, restaurant_id, config
    )
    reservations = parsed.reservations
    if not tables or not reservations:
        missing = "tables" if not tables else "reservations"
        logger.error(
            f"No valid {missing} found for {restaurant_id} on {day} ({meal_shift})"
        )
        return PreparationFailure(
            reason=f"No valid {missing} found",
            day=day,
            meal_shift=meal_shift,
            restaurant_id=restaurant_id,
            tables_found=len(tables),
            reservations_found=len(reservations),
        )

    # the longest stay is added to the latest arrival, so every release fires
    # even when the last arrival is not the longest reservation
    arrivals = [r.arrival_time for r in reservations]
    max_duration = max(r.duration for r in reservations)
    end_time = max(arrivals) + max_duration + config.end_buffer
    return SimulationData(
        tables=tables,
        reservations=reservations,
        occupancy_groups=[],
        min_time=min(arrivals),
        max_time=max(arrivals),
        shift_start=min(r.reservation_datetime for r in reservations),
        end_time=end_time,
        min_slider_val=0,
        max_slider_val=end_time,
        day=day,
        meal_shift=meal_shift,
        restaurant_id=restaurant_id,
    )
