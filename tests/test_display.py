#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import io

import pytest
from rich.console import Console

from tablereplay.display import display_summary, display_timeline
from tablereplay.simulation.engine import replay
from tests.replay_utils import RESTAURANT, reservation


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200)


@pytest.fixture
def replayed(make_simulation_data):
    data = make_simulation_data({1: 2, 2: 4}, [reservation(0, [1])])
    return replay(data)


def test_display_timeline(replayed, console):
    simulated, _ = replayed
    display_timeline(simulated, console=console)
    output = console.file.getvalue()
    assert RESTAURANT in output
    assert "11:30" in output and "12:30" in output
    assert "1 (2)" in output and "2 (4)" in output
    assert "■" in output


def test_display_timeline_before_bookings(replayed, console):
    simulated, _ = replayed
    display_timeline(simulated, at_minute=simulated.min_slider_val - 1, console=console)
    assert "■" not in console.file.getvalue()


def test_display_timeline_capacity_filter(replayed, console):
    simulated, _ = replayed
    display_timeline(simulated, capacity_filter="4", console=console)
    output = console.file.getvalue()
    assert "2 (4)" in output
    assert "1 (2)" not in output


def test_display_summary(replayed, console):
    simulated, diagnostics = replayed
    display_summary(simulated, diagnostics, console=console)
    output = console.file.getvalue()
    assert "Occupancy groups" in output
    assert "Events fired" in output
    assert "60 min" in output
