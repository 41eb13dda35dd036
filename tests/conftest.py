#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
from typing import Callable

import pytest

from tablereplay.schemas import Reservation, SimulationData, Table
from tests.replay_utils import DAY, MAPS_CSV, RESERVATIONS_CSV, RESTAURANT


@pytest.fixture
def maps_csv() -> str:
    return MAPS_CSV


@pytest.fixture
def reservations_csv() -> str:
    return RESERVATIONS_CSV


@pytest.fixture
def make_simulation_data() -> Callable[..., SimulationData]:
    """Build replay input the way the parser would, from a {table id: capacity}
    map and a list of reservations."""

    def _make(
        capacities: dict[int, int],
        reservations: list[Reservation],
        end_time: int | None = None,
    ) -> SimulationData:
        arrivals = [r.arrival_time for r in reservations]
        if end_time is None:
            end_time = max(arrivals) + max(r.duration for r in reservations) + 10
        return SimulationData(
            tables={
                table_id: Table(table_id=table_id, max_capacity=capacity)
                for table_id, capacity in capacities.items()
            },
            reservations=reservations,
            min_time=min(arrivals),
            max_time=max(arrivals),
            shift_start=min(r.reservation_datetime for r in reservations),
            end_time=end_time,
            min_slider_val=0,
            max_slider_val=end_time,
            day=DAY,
            meal_shift="Comida",
            restaurant_id=RESTAURANT,
        )

    return _make
