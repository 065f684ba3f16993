import logging
import random
from dataclasses import dataclass
from typing import Optional

from .log import GenerationLog
from .rng import get_seeded_rng
from .state import GalaxyState
from ..generation.load import GalaxyConfig, GenerationTables
from ..generation.model import StarSystem
from ..generation.system_gen import generate_galaxy
from ..generation.lane_gen import count_components
from ..factions.generator import generate_initial_factions
from ..placement.starting_system import choose_starting_system

logger = logging.getLogger(__name__)


@dataclass
class NewGame:
    state: GalaxyState
    starting_system: StarSystem
    log: GenerationLog


def generate_new_game(
    seed: Optional[int] = None,
    config: Optional[GalaxyConfig] = None,
    tables: Optional[GenerationTables] = None,
) -> NewGame:
    """
    Runs galaxy, faction and starting-system generation with one random source.

    The same seed always yields the same galaxy; without one a seed is drawn and kept on
    the returned state.
    """
    if seed is None:
        seed = random.randint(0, 2**32 - 1)
    rng = get_seeded_rng(seed)
    log = GenerationLog()

    galaxy = generate_galaxy(rng, config, tables)
    star_ids = [star.id for star in galaxy.stars]
    log.add_entry("galaxy.stars", count=len(galaxy.stars), star_id=star_ids[0], reason="Stars placed; first is the galactic centre.")
    log.add_entry(
        "galaxy.lanes",
        count=len(galaxy.hyperspace_lanes),
        reason="Spanning tree plus local lanes.",
        details={"components": count_components(star_ids, galaxy.hyperspace_lanes)},
    )

    factions = generate_initial_factions(galaxy.stars, rng, tables)
    for faction in factions:
        log.add_entry(
            "factions.territory",
            count=len(faction.controlled_systems),
            star_id=faction.home_system_id,
            faction_id=faction.id,
            reason=f"{faction.name} ({faction.type.value})",
            details={"relations": dict(faction.relations)},
        )

    choice = choose_starting_system(galaxy.star_systems, factions, rng)
    log.add_entry(
        "start.selected",
        star_id=choice.system.star.id,
        reason=f"Player starts at {choice.system.star.name}.",
        details={"tier": choice.tier, "planets": len(choice.system.planets)},
    )
    logger.info("New game %d: start at %s (%s tier)", seed, choice.system.star.name, choice.tier)

    state = GalaxyState.from_galaxy(galaxy, factions, seed=seed)
    return NewGame(state=state, starting_system=choice.system, log=log)
