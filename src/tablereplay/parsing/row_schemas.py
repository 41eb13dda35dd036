#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""Strict decoding of raw export rows.

Each row decodes to either `Decoded` (carrying the typed value) or
`DecodeFailure` (carrying the reason), so that callers can log and skip bad rows
without aborting the batch.
"""

import ast
import datetime
import json
import re
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    PositiveInt,
    TypeAdapter,
    ValidationError,
)

from tablereplay.aliases import TableId
from tablereplay.constants import (
    CREATION_DATE_COLUMN,
    CREATION_TIME_COLUMN,
    DEFAULT_DURATION_MINUTES,
    DEFAULT_PARTY_SIZE,
    DURATION_COLUMN,
    LAYOUT_TABLES_COLUMN,
    PARTY_SIZE_COLUMN,
    RESERVATION_DATE_COLUMN,
    RESERVATION_ID_COLUMN,
    RESERVATION_TIME_COLUMN,
    TABLE_COLUMN,
    TABLES_COLUMN,
)
from tablereplay.exceptions import DecodeError, ParseError
from tablereplay.time_utils import clock_to_minutes, combine_date_time

T = TypeVar("T")

RawRow = dict[str, str | None]

# Python literal tokens and their JSON spelling
_LITERAL_TOKENS = (
    (re.compile(r"\bNone\b"), "null"),
    (re.compile(r"\bTrue\b"), "true"),
    (re.compile(r"\bFalse\b"), "false"),
)
_TABLE_ID_PATTERN = re.compile(r"^\d+$", re.ASCII)


@dataclass(frozen=True)
class Decoded(Generic[T]):
    row_index: int
    value: T


@dataclass(frozen=True)
class DecodeFailure:
    row_index: int
    reason: str


class TableEntry(BaseModel):
    """One table of a layout row. Extra keys of the export are ignored."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id_table: PositiveInt
    max: PositiveInt


class ReservationRow(BaseModel):
    """A reservation row with its fields validated but its arrival time not yet
    normalised against the rest of the shift."""

    model_config = ConfigDict(frozen=True)

    clock_minutes: int
    table_ids: list[TableId]
    party_size: PositiveInt
    duration: PositiveInt
    creation_datetime: datetime.datetime
    reservation_datetime: datetime.datetime
    reservation_id: str | None = None


_TABLE_LIST_ADAPTER = TypeAdapter(list[TableEntry])


def _to_json(raw: str) -> str:
    for pattern, replacement in _LITERAL_TOKENS:
        raw = pattern.sub(replacement, raw)
    return raw.replace("'", '"')


def _load_literal(raw: str) -> Any:
    """Load a nested structure written either with Python or with JSON literals."""
    try:
        return ast.literal_eval(raw)
    except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError):
        pass
    try:
        return json.loads(_to_json(raw))
    except json.JSONDecodeError as e:
        raise DecodeError(f"Not a Python or JSON literal: {raw!r}") from e


def decode_table_list(raw: str | None) -> list[TableEntry]:
    """Decode the table-list field of a layout row.

    The field holds either a single mapping or a list of mappings, each with
    at least an `id_table` and a `max` key.

    Raises
    ------
    DecodeError
        If the field is empty, is not a literal, or does not match the
        expected structure.
    """
    if raw is None or not raw.strip():
        raise DecodeError("Empty table list")
    data = _load_literal(raw.strip())
    if isinstance(data, dict):
        data = [data]
    try:
        return _TABLE_LIST_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise DecodeError(f"Unexpected table list structure: {e}") from e


def parse_table_ids(raw: str | None) -> list[TableId]:
    """Parse a comma-separated list of table ids, ignoring anything that is not
    a plain non-negative integer."""
    if not raw:
        return []
    parts = (part.strip() for part in raw.split(","))
    return [int(part) for part in parts if _TABLE_ID_PATTERN.match(part)]


def _or_default(value: str | None, default: int) -> str | int:
    if value is None or not value.strip():
        return default
    return value.strip()


def decode_layout_row(
    row_index: int, row: RawRow
) -> Decoded[list[TableEntry]] | DecodeFailure:
    try:
        entries = decode_table_list(row.get(LAYOUT_TABLES_COLUMN))
    except DecodeError as e:
        return DecodeFailure(row_index=row_index, reason=str(e))
    return Decoded(row_index=row_index, value=entries)


def decode_reservation_row(
    row_index: int,
    row: RawRow,
    default_duration: int = DEFAULT_DURATION_MINUTES,
    default_party_size: int = DEFAULT_PARTY_SIZE,
) -> Decoded[ReservationRow] | DecodeFailure:
    """Decode one reservation row.

    Table ids are read from the comma-separated `tables` field, falling back to
    the `table` field when the former yields none. An empty table list is not a
    decoding failure: what to do with such reservations is up to the caller.
    """
    try:
        clock_minutes = clock_to_minutes(row.get(RESERVATION_TIME_COLUMN))
        creation_datetime = combine_date_time(
            row.get(CREATION_DATE_COLUMN), row.get(CREATION_TIME_COLUMN)
        )
        reservation_datetime = combine_date_time(
            row.get(RESERVATION_DATE_COLUMN), row.get(RESERVATION_TIME_COLUMN)
        )
        table_ids = parse_table_ids(row.get(TABLES_COLUMN)) or parse_table_ids(
            row.get(TABLE_COLUMN)
        )
        decoded = ReservationRow(
            clock_minutes=clock_minutes,
            table_ids=table_ids,
            party_size=_or_default(row.get(PARTY_SIZE_COLUMN), default_party_size),
            duration=_or_default(row.get(DURATION_COLUMN), default_duration),
            creation_datetime=creation_datetime,
            reservation_datetime=reservation_datetime,
            reservation_id=row.get(RESERVATION_ID_COLUMN) or None,
        )
    except (ParseError, ValidationError) as e:
        return DecodeFailure(row_index=row_index, reason=str(e))
    return Decoded(row_index=row_index, value=decoded)
