#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import json
import logging
from pathlib import Path

from tablereplay.aliases import CsvText
from tablereplay.schemas import SimulationData

logger = logging.getLogger(__name__)


def load_json(path: str | Path):
    with open(path, "r") as f:
        data = json.load(f)
    return data


def load_text(path: str | Path) -> CsvText:
    """Read an export as text. A leading byte order mark is dropped."""
    with open(path, "r", encoding="utf-8-sig") as f:
        return f.read()


def load_simulation(path: str | Path) -> SimulationData:
    """Load a replay saved with `writers.save_simulation`."""
    logger.debug(f"Loading simulation from {path}")
    return SimulationData.from_dict(load_json(path))
