#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""Discover what can be replayed from a reservation export."""

from rapidfuzz import fuzz, process, utils

from tablereplay.aliases import CsvText, DayStr, RestaurantId
from tablereplay.constants import (
    RESERVATION_DATE_COLUMN,
    RESERVATION_RESTAURANT_COLUMN,
)
from tablereplay.frame_utils import (
    exact_match_filter_dataframe,
    filter_dataframe,
    read_rows,
    unique_values,
)

_RESTAURANT_PREFIXES = ("restaurante-", "restauerante-")


def available_restaurants(csv_text: CsvText) -> list[RestaurantId]:
    """Restaurants appearing in a reservation export, sorted."""
    return unique_values(read_rows(csv_text), RESERVATION_RESTAURANT_COLUMN)


def available_dates(
    csv_text: CsvText, restaurant_id: RestaurantId | None = None
) -> list[DayStr]:
    """Days with at least one reservation, optionally for a single restaurant."""
    rows = read_rows(csv_text)
    if restaurant_id is not None:
        rows = filter_dataframe(
            rows,
            filter_criteria=[
                (
                    RESERVATION_RESTAURANT_COLUMN,
                    restaurant_id,
                    exact_match_filter_dataframe,
                )
            ],
        )
    return unique_values(rows, RESERVATION_DATE_COLUMN)


def format_restaurant_name(restaurant_id: RestaurantId) -> str:
    """Human readable name of a restaurant slug.

    Example
    -------
        "restaurante-saona-ciscar" -> "Saona Ciscar"
    """
    name = restaurant_id
    for prefix in _RESTAURANT_PREFIXES:
        name = name.replace(prefix, "")
    return " ".join(word[:1].upper() + word[1:] for word in name.split("-"))


def search_restaurants(
    term: str, restaurants: list[RestaurantId], threshold: int = 80
) -> list[RestaurantId]:
    """Restaurants whose slug or display name matches `term`.

    Case-insensitive substring matches come first, in input order, followed by
    fuzzy matches scoring at least `threshold` (backed by fuzz.WRatio).
    """
    if not restaurants:
        return []
    if not term.strip():
        return list(restaurants)
    needle = term.lower()
    names = [format_restaurant_name(r) for r in restaurants]
    matches = [
        restaurant
        for restaurant, name in zip(restaurants, names)
        if needle in restaurant.lower() or needle in name.lower()
    ]
    # process.extract returns a tuple of (string, score, index)
    fuzzy = process.extract(
        query=term,
        choices=names,
        processor=utils.default_process,
        scorer=fuzz.WRatio,
        score_cutoff=threshold,
        limit=len(names),
    )
    for _, _, index in fuzzy:
        if restaurants[index] not in matches:
            matches.append(restaurants[index])
    return matches
