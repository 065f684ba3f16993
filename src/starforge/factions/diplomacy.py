from __future__ import annotations
from typing import Dict, List, Sequence, TYPE_CHECKING

import numpy as np
from scipy.spatial.distance import cdist

from ..core.ids import StarId

if TYPE_CHECKING:
    from ..generation.model import Star
    from .model import Faction

DIPLOMATIC_WEIGHT = 20.0
AGGRESSION_WEIGHT = 15.0
SAME_TYPE_BONUS = 20.0
SHARED_BORDER_PENALTY = 15.0
SHARED_BORDER_DISTANCE = 300.0 # Any two systems closer than this make the factions neighbours

MIN_RELATION = -100.0
MAX_RELATION = 100.0


def _territory_coords(faction: "Faction", positions: Dict[StarId, "Star"]) -> np.ndarray:
    points = [
        (positions[star_id].position.x, positions[star_id].position.y)
        for star_id in faction.controlled_systems
        if star_id in positions
    ]
    return np.array(points, dtype=float).reshape(-1, 2)


def shares_border(faction: "Faction", other: "Faction", stars_by_id: Dict[StarId, "Star"]) -> bool:
    own = _territory_coords(faction, stars_by_id)
    theirs = _territory_coords(other, stars_by_id)
    if own.size == 0 or theirs.size == 0:
        return False
    return bool((cdist(own, theirs) < SHARED_BORDER_DISTANCE).any())


def compute_relation(faction: "Faction", other: "Faction", stars_by_id: Dict[StarId, "Star"]) -> float:
    """
    Starting relation of faction towards other.

    Diplomatic traits on either side raise it, aggressive traits lower it, matching
    archetypes get along and neighbouring territories add tension.
    """
    score = DIPLOMATIC_WEIGHT * (faction.traits.diplomatic + other.traits.diplomatic)
    score -= AGGRESSION_WEIGHT * (faction.traits.aggressive + other.traits.aggressive)
    if faction.type == other.type:
        score += SAME_TYPE_BONUS
    if shares_border(faction, other, stars_by_id):
        score -= SHARED_BORDER_PENALTY
    return max(MIN_RELATION, min(MAX_RELATION, score))


def initialize_relations(factions: List["Faction"], stars: Sequence["Star"]):
    """Fills every faction's relations map; each ordered pair is scored on its own."""
    stars_by_id = {star.id: star for star in stars}
    for faction in factions:
        for other in factions:
            if faction.id == other.id:
                continue
            faction.relations[other.id] = compute_relation(faction, other, stars_by_id)
