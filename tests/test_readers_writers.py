#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
from tablereplay.readers import load_simulation, load_text
from tablereplay.simulation.engine import run_simulation
from tablereplay.writers import save_simulation
from tests.replay_utils import reservation


def test_save_and_load_simulation(tmp_path, make_simulation_data):
    simulated = run_simulation(
        make_simulation_data({1: 2, 2: 4}, [reservation(0, [1, 2])])
    )
    path = tmp_path / "replays" / "turqueta.json"
    save_simulation(simulated, path)
    assert load_simulation(path) == simulated


def test_load_text_drops_byte_order_mark(tmp_path, reservations_csv):
    path = tmp_path / "reservations.csv"
    path.write_bytes(b"\xef\xbb\xbf" + reservations_csv.encode("utf-8"))
    assert load_text(path) == reservations_csv
