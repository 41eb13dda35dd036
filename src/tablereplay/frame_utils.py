#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import io
import logging
from typing import Any, Collection, Protocol, runtime_checkable

import polars as pl
from polars.exceptions import PolarsError

from tablereplay.aliases import CsvText

logger = logging.getLogger(__name__)

ROW_INDEX_COLUMN = "__row_index"


@runtime_checkable
class DataframeFilterMethodType(Protocol):
    """Callable type def for Dataframe filtering functions."""

    def __call__(
        self,
        dataframe: pl.DataFrame,
        column_name: str,
        value: Any,
    ) -> pl.DataFrame: ...


def read_rows(csv_text: CsvText) -> pl.DataFrame:
    """Read a CSV export with a header row, keeping every column as a string.

    The position of each data row in the export is kept in `ROW_INDEX_COLUMN`
    so that diagnostics can point back at the offending line. Empty or
    unreadable input yields an empty frame.
    """
    if not csv_text or not csv_text.strip():
        return pl.DataFrame()
    try:
        dataframe = pl.read_csv(
            csv_text.encode("utf-8"),
            infer_schema_length=0,
            truncate_ragged_lines=True,
        )
    except PolarsError as e:
        logger.error(f"Could not read CSV export: {e}")
        return pl.DataFrame()
    return dataframe.with_row_index(ROW_INDEX_COLUMN)


def exact_match_filter_dataframe(
    dataframe: pl.DataFrame, column_name: str, value: Any
) -> pl.DataFrame:
    """Filter dataframe by exact matching value on 1 column

    Parameters
    ----------
        dataframe:      Dataframe to filter
        column_name:    Name of column
        value:          Value to match against

    Returns
    -------
        Filtered dataframe

    """
    if value is None:
        return dataframe.filter(pl.col(column_name).is_null())
    return dataframe.filter(pl.col(column_name) == value)


def is_member_filter_dataframe(
    dataframe: pl.DataFrame, column_name: str, value: Collection[Any]
) -> pl.DataFrame:
    """Filter dataframe for rows whose column_name is in value."""
    return dataframe.filter(pl.col(column_name).is_in(list(value)))


def filter_dataframe(
    dataframe: pl.DataFrame,
    filter_criteria: list[tuple[str, Any, DataframeFilterMethodType]],
) -> pl.DataFrame:
    """Filter dataframe given a filter method, column name and target value

    Parameters
    ----------
    dataframe
        Dataframe to filter
    filter_criteria
        A list of filter constraints on each column,
        each tuple contains [column_name, value, filter_method]

    Returns
    -------
        Filtered dataframe. Empty when any of the filtered columns is missing
        from `dataframe`.
    """
    missing = [name for name, _, _ in filter_criteria if name not in dataframe.columns]
    if missing:
        if not dataframe.is_empty():
            logger.error(f"Export is missing columns {missing}")
        return dataframe.clear()
    for column_name, filter_value, filter_method in filter_criteria:
        dataframe = filter_method(
            dataframe=dataframe,
            column_name=column_name,
            value=filter_value,
        )
    return dataframe


def unique_values(dataframe: pl.DataFrame, column_name: str) -> list[str]:
    """Sorted distinct non-null values of a column, empty if the column is missing."""
    if column_name not in dataframe.columns:
        return []
    return sorted(dataframe.get_column(column_name).drop_nulls().unique().to_list())
