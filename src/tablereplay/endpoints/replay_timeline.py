#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import logging

import hydra
from hydra.utils import instantiate, to_absolute_path
from omegaconf import DictConfig, OmegaConf

from tablereplay.config import ReplayConfig
from tablereplay.constants import CONFIGS_ROOT
from tablereplay.display import display_summary, display_timeline
from tablereplay.parsing.record_parser import prepare_simulation_data
from tablereplay.readers import load_text
from tablereplay.schemas import PreparationFailure
from tablereplay.simulation.engine import replay
from tablereplay.writers import save_simulation

logger = logging.getLogger(__name__)


@hydra.main(config_name="default", config_path=CONFIGS_ROOT, version_base=None)
def replay_timeline(cfg: DictConfig):
    if cfg.debug:
        logger.info(OmegaConf.to_yaml(cfg, resolve=True))
    config: ReplayConfig = instantiate(cfg.replay)
    maps_csv = load_text(to_absolute_path(cfg.maps_file))
    reservations_csv = load_text(to_absolute_path(cfg.reservations_file))
    logger.info(
        f"Replaying {cfg.restaurant} on {cfg.day} ({cfg.meal_shift}) "
        f"with the {config.conflict_policy} conflict policy"
    )
    prepared = prepare_simulation_data(
        maps_csv,
        reservations_csv,
        day=str(cfg.day),
        meal_shift=str(cfg.meal_shift),
        restaurant_id=str(cfg.restaurant),
        config=config,
    )
    if isinstance(prepared, PreparationFailure):
        logger.error(
            f"Cannot simulate: {prepared.reason} "
            f"({prepared.tables_found} tables, "
            f"{prepared.reservations_found} reservations)"
        )
        return
    simulated, diagnostics = replay(prepared, config.conflict_policy)
    display_summary(simulated, diagnostics)
    display_timeline(
        simulated,
        at_minute=cfg.at_minute,
        capacity_filter=str(cfg.capacity),
        step=cfg.step,
    )
    if cfg.out_file:
        out_file = to_absolute_path(cfg.out_file)
        save_simulation(simulated, out_file)
        logger.info(f"Replay written to {out_file}")


if __name__ == "__main__":
    replay_timeline()
