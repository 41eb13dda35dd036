#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import json
from pathlib import Path
from typing import Any

from tablereplay.schemas import SimulationData


def save_json(data: Any, path: str | Path, indent: int = 4):
    with open(path, "w") as f:
        json.dump(data, f, indent=indent)


def save_simulation(data: SimulationData, path: str | Path, indent: int = 4):
    """Save a replay so that `readers.load_simulation` can restore it."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    save_json(data.to_dict(), path, indent=indent)
