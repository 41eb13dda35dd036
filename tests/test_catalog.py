#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import pytest

from tablereplay.catalog import (
    available_dates,
    available_restaurants,
    format_restaurant_name,
    search_restaurants,
)

RESTAURANTS = [
    "restaurante-turqueta",
    "restaurante-saona-ciscar",
    "restauerante-saona-viveros",
    "restaurante-la-mar",
]


def test_available_restaurants(reservations_csv):
    assert available_restaurants(reservations_csv) == [
        "restaurante-saona-ciscar",
        "restaurante-turqueta",
    ]


def test_available_dates(reservations_csv):
    csv_text = reservations_csv + (
        "r9,2024-05-05,Comida,restaurante-saona-ciscar,Sentada,13:00,"
        "2024-05-01,10:00,7,,2,\n"
    )
    assert available_dates(csv_text) == ["2024-05-03", "2024-05-05"]
    assert available_dates(csv_text, "restaurante-turqueta") == ["2024-05-03"]
    assert available_dates(csv_text, "restaurante-viveros") == []


def test_catalog_of_empty_export():
    assert available_restaurants("") == []
    assert available_dates("", "restaurante-turqueta") == []


@pytest.mark.parametrize(
    "restaurant_id, expected",
    [
        ("restaurante-saona-ciscar", "Saona Ciscar"),
        ("restauerante-saona-viveros", "Saona Viveros"),
        ("turqueta", "Turqueta"),
    ],
)
def test_format_restaurant_name(restaurant_id, expected):
    assert format_restaurant_name(restaurant_id) == expected


def test_search_restaurants_substring():
    assert search_restaurants("saona", RESTAURANTS) == [
        "restaurante-saona-ciscar",
        "restauerante-saona-viveros",
    ]
    assert search_restaurants("LA MAR", RESTAURANTS) == ["restaurante-la-mar"]


def test_search_restaurants_fuzzy():
    assert search_restaurants("turqeta", RESTAURANTS)[0] == "restaurante-turqueta"


@pytest.mark.parametrize("term", ["", "  "])
def test_search_restaurants_blank_term(term):
    assert search_restaurants(term, RESTAURANTS) == RESTAURANTS


def test_search_restaurants_no_candidates():
    assert search_restaurants("turqueta", []) == []
    assert search_restaurants("sushi", RESTAURANTS) == []
