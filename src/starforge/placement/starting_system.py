from __future__ import annotations
import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
from scipy.spatial.distance import cdist

from ..core.rng import ensure_rng
from ..factions.model import Faction
from ..generation.model import EXOTIC_STAR_TYPES, StarSystem

logger = logging.getLogger(__name__)

MIN_DISTANCE_FROM_FACTIONS = 300.0
RELAXED_DISTANCE_FACTOR = 0.75
MIN_PLANETS = 2
TOP_CANDIDATES = 5

TIER_STRICT = "strict"
TIER_RELAXED = "relaxed"
TIER_FALLBACK = "fallback"


@dataclass
class StartingChoice:
    system: StarSystem
    tier: str


def is_habitable_star(system: StarSystem) -> bool:
    return system.star.type not in EXOTIC_STAR_TYPES


def desirability(system: StarSystem) -> int:
    return len(system.planets) * 2 + len(system.resources)


def faction_distances(systems: Sequence[StarSystem], factions: Sequence[Faction]) -> np.ndarray:
    """
    Distance from each system's star to the nearest faction-controlled system.

    Controlled ids that match no system in the list are ignored; with no controlled
    systems at all every distance is infinite.
    """
    controlled = np.array(
        [
            (s.star.position.x, s.star.position.y) for s in systems
            if any(faction.controls(s.star.id) for faction in factions)
        ],
        dtype=float,
    ).reshape(-1, 2)

    if controlled.size == 0:
        return np.full(len(systems), math.inf)
    positions = np.array([(s.star.position.x, s.star.position.y) for s in systems], dtype=float).reshape(-1, 2)
    return cdist(positions, controlled).min(axis=1)


def choose_starting_system(systems: Sequence[StarSystem], factions: Sequence[Faction], rng: Optional[random.Random] = None) -> StartingChoice:
    """
    Picks the player's starting system, relaxing the rules until something qualifies.

    1. strict: ordinary star, at least two planets, 300 units clear of every faction
       system; one of the five most desirable, at random.
    2. relaxed: ordinary star, 225 units clear; any of them at random.
    3. fallback: the ordinary-star system farthest from all faction systems.

    Raises:
        ValueError: if systems is empty.
    """
    if not systems:
        raise ValueError("Cannot choose a starting system from an empty galaxy.")
    rng = ensure_rng(rng)
    min_distances = faction_distances(systems, factions)

    strict: List[StarSystem] = [
        system for system, clearance in zip(systems, min_distances)
        if is_habitable_star(system)
        and len(system.planets) >= MIN_PLANETS
        and clearance >= MIN_DISTANCE_FROM_FACTIONS
    ]
    if strict:
        ranked = sorted(strict, key=desirability, reverse=True)
        top_systems = ranked[:TOP_CANDIDATES]
        return StartingChoice(system=top_systems[int(rng.random() * len(top_systems))], tier=TIER_STRICT)

    logger.warning("No ideal starting systems found, relaxing constraints...")
    relaxed_distance = MIN_DISTANCE_FROM_FACTIONS * RELAXED_DISTANCE_FACTOR
    relaxed = [
        system for system, clearance in zip(systems, min_distances)
        if is_habitable_star(system) and clearance >= relaxed_distance
    ]
    if relaxed:
        return StartingChoice(system=relaxed[int(rng.random() * len(relaxed))], tier=TIER_RELAXED)

    logger.warning("No safe starting systems found, selecting furthest available system...")
    best_system = systems[0]
    max_min_distance = -math.inf
    for system, clearance in zip(systems, min_distances):
        if not is_habitable_star(system):
            continue
        if clearance > max_min_distance:
            max_min_distance = clearance
            best_system = system
    return StartingChoice(system=best_system, tier=TIER_FALLBACK)


def select_starting_system(systems: Sequence[StarSystem], factions: Sequence[Faction], rng: Optional[random.Random] = None) -> StarSystem:
    """Returns one member of systems for the player to start in."""
    return choose_starting_system(systems, factions, rng).system
