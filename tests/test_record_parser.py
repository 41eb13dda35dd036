#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import datetime

import pytest

from tablereplay.config import MissingTablePolicy, ReplayConfig
from tablereplay.frame_utils import read_rows
from tablereplay.parsing.record_parser import (
    parse_map_data,
    parse_reservation_data,
    prepare_simulation_data,
    shift_aliases,
)
from tablereplay.schemas import PreparationFailure, SimulationData
from tablereplay.simulation.engine import replay
from tests.replay_utils import DAY, RESTAURANT


def test_read_rows_keeps_strings():
    rows = read_rows("a,b\n1,x\n2,\n")
    assert rows.columns == ["__row_index", "a", "b"]
    assert rows.get_column("a").to_list() == ["1", "2"]
    assert rows.get_column("b").to_list()[0] == "x"


@pytest.mark.parametrize("csv_text", ["", "   \n"])
def test_read_rows_empty_input(csv_text: str):
    assert read_rows(csv_text).is_empty()


def test_shift_aliases():
    assert shift_aliases("Comida", {"1": "Comida", "2": "Cena"}) == ["Comida", "1"]
    assert shift_aliases("Brunch", {"1": "Comida", "2": "Cena"}) == ["Brunch"]


def test_parse_map_data(maps_csv: str):
    tables = parse_map_data(maps_csv, DAY, "Comida", RESTAURANT)
    assert sorted(tables) == [1, 2, 3]
    assert {t.table_id: t.max_capacity for t in tables.values()} == {1: 2, 2: 4, 3: 4}
    assert all(not t.occupied and not t.occupancy_log for t in tables.values())


def test_parse_map_data_dinner_code(maps_csv: str):
    tables = parse_map_data(maps_csv, DAY, "Cena", RESTAURANT)
    assert list(tables) == [9]


def test_parse_map_data_last_row_wins():
    csv_text = (
        "date,meal,restaurant_name,tables\n"
        "2024-05-03,Comida,r,\"[{'id_table': 2, 'max': 4}]\"\n"
        "2024-05-03,1,r,\"[{'id_table': 2, 'max': 6}]\"\n"
    )
    tables = parse_map_data(csv_text, DAY, "Comida", "r")
    assert tables[2].max_capacity == 6


@pytest.mark.parametrize(
    "csv_text",
    [
        "",
        "date,meal,restaurant_name\n2024-05-03,1,restaurante-turqueta\n",
        "date,meal,restaurant_name,tables\n2024-05-03,1,restaurante-turqueta,[oops\n",
    ],
)
def test_parse_map_data_degenerate_input(csv_text: str):
    assert parse_map_data(csv_text, DAY, "Comida", RESTAURANT) == {}


def test_parse_reservation_data(reservations_csv: str):
    parsed = parse_reservation_data(reservations_csv, DAY, "Comida", RESTAURANT)
    # r1, r2, r4, r5 and r7 match the filters; r7 has a malformed time
    assert parsed.filtered_rows == 5
    assert parsed.malformed_rows == 1
    assert parsed.without_tables == 1
    by_id = {r.reservation_id: r for r in parsed.reservations}
    assert list(by_id) == ["r1", "r2", "r4"]

    assert by_id["r1"].arrival_time == 0
    assert by_id["r1"].table_ids == [1]
    assert by_id["r1"].party_size == 2
    assert by_id["r1"].duration == 60
    assert by_id["r1"].creation_datetime == datetime.datetime(2024, 5, 1, 10, 15)
    assert by_id["r1"].reservation_datetime == datetime.datetime(2024, 5, 3, 13, 30)

    assert by_id["r2"].arrival_time == 30
    assert by_id["r2"].table_ids == [2, 3]
    assert by_id["r2"].duration == 90

    # table list falls back to the single table column
    assert by_id["r4"].arrival_time == 90
    assert by_id["r4"].table_ids == [3]


def test_parse_reservation_data_keep_empty(reservations_csv: str):
    config = ReplayConfig(missing_tables=MissingTablePolicy.KEEP_EMPTY)
    parsed = parse_reservation_data(
        reservations_csv, DAY, "Comida", RESTAURANT, config=config
    )
    by_id = {r.reservation_id: r for r in parsed.reservations}
    assert parsed.without_tables == 1
    assert by_id["r5"].table_ids == []
    assert by_id["r5"].arrival_time == 60


def test_parse_reservation_data_custom_statuses(reservations_csv: str):
    config = ReplayConfig(confirmed_statuses=("Cancelada",))
    parsed = parse_reservation_data(
        reservations_csv, DAY, "Comida", RESTAURANT, config=config
    )
    assert [r.reservation_id for r in parsed.reservations] == ["r3"]
    assert parsed.reservations[0].arrival_time == 0


def test_parse_reservation_data_no_match(reservations_csv: str):
    parsed = parse_reservation_data(reservations_csv, "2030-01-01", "Comida", RESTAURANT)
    assert parsed.reservations == []
    assert parsed.filtered_rows == 0


def test_prepare_simulation_data(maps_csv: str, reservations_csv: str):
    data = prepare_simulation_data(maps_csv, reservations_csv, DAY, "Comida", RESTAURANT)
    assert isinstance(data, SimulationData)
    assert sorted(data.tables) == [1, 2, 3]
    assert len(data.reservations) == 3
    assert data.occupancy_groups == []
    assert data.shift_start == datetime.datetime(2024, 5, 3, 13, 30)
    assert (data.min_time, data.max_time) == (0, 90)
    # latest arrival + longest duration + buffer
    assert data.end_time == 90 + 90 + 10
    assert (data.min_slider_val, data.max_slider_val) == (0, data.end_time)
    assert (data.day, data.meal_shift, data.restaurant_id) == (
        DAY,
        "Comida",
        RESTAURANT,
    )


def test_prepare_simulation_data_end_buffer(maps_csv: str, reservations_csv: str):
    data = prepare_simulation_data(
        maps_csv,
        reservations_csv,
        DAY,
        "Comida",
        RESTAURANT,
        config=ReplayConfig(end_buffer=0),
    )
    assert data.end_time == 180


@pytest.mark.parametrize(
    "day, restaurant, missing",
    [
        ("2024-05-04", RESTAURANT, "reservations"),
        (DAY, "restaurante-viveros", "tables"),
    ],
)
def test_prepare_simulation_data_failure(
    maps_csv: str, reservations_csv: str, day: str, restaurant: str, missing: str
):
    result = prepare_simulation_data(maps_csv, reservations_csv, day, "Comida", restaurant)
    assert isinstance(result, PreparationFailure)
    assert missing in result.reason
    assert result.restaurant_id == restaurant


def test_reservation_with_utc_offset_is_malformed():
    csv_text = (
        "id,date,meal_shift,restaurant,status_long,time,date_add,time_add,"
        "tables,table,for,duration\n"
        "a,2024-05-03,Comida,r,Sentada,13:30,2024-05-01,10:15Z,1,,2,60\n"
        "b,2024-05-03,Comida,r,Sentada,14:00,2024-05-01,10:15,2,,2,60\n"
    )
    maps = "date,meal,restaurant_name,tables\n2024-05-03,1,r,\"[{'id_table': 1, 'max': 2}, {'id_table': 2, 'max': 2}]\"\n"  # noqa
    parsed = parse_reservation_data(csv_text, DAY, "Comida", "r")
    assert parsed.malformed_rows == 1
    assert [r.reservation_id for r in parsed.reservations] == ["b"]

    data = prepare_simulation_data(maps, csv_text, DAY, "Comida", "r")
    simulated, _ = replay(data)
    assert [g.table_ids for g in simulated.occupancy_groups] == [[2]]
