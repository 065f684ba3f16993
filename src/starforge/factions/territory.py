from __future__ import annotations
import logging
from typing import Dict, List, Optional, Sequence, TYPE_CHECKING

import numpy as np
from scipy.spatial.distance import cdist

from ..core.ids import FactionId, StarId
from ..generation.lane_gen import star_coordinates

if TYPE_CHECKING:
    from ..generation.model import Star
    from .model import Faction

logger = logging.getLogger(__name__)

MAX_EXPANSION_DISTANCE = 150.0 # Keeps territories in tight clusters
ADJACENT_DISTANCE = 100.0

ADJACENT_WEIGHT = 2000.0
NEARBY_WEIGHT = 500.0
AVG_DISTANCE_PENALTY = 2.0
MIN_DISTANCE_PENALTY = 3.0


def target_territory_size(stars: Sequence["Star"]) -> int:
    """Ten percent of the galaxy, not counting the centre black hole."""
    return (len(stars) - 1) // 10


class ClaimRegistry:
    """
    Which faction owns which star.

    One registry is shared by every expansion pass, so a star claimed by an earlier
    faction is never offered to a later one.
    """

    def __init__(self):
        self._owners: Dict[StarId, FactionId] = {}

    def claim(self, star_id: StarId, faction_id: FactionId) -> bool:
        if star_id in self._owners:
            return False
        self._owners[star_id] = faction_id
        return True

    def owner(self, star_id: StarId) -> Optional[FactionId]:
        return self._owners.get(star_id)

    def claimed_by(self, faction_id: FactionId) -> List[StarId]:
        return [star_id for star_id, owner in self._owners.items() if owner == faction_id]

    def __contains__(self, star_id: StarId) -> bool:
        return star_id in self._owners

    def __len__(self) -> int:
        return len(self._owners)


def distance_matrix(stars: Sequence["Star"]) -> np.ndarray:
    coords = star_coordinates(stars)
    return cdist(coords, coords)


def expand_faction_territory(
    faction: "Faction",
    stars: Sequence["Star"],
    registry: ClaimRegistry,
    target_size: int,
    distances: Optional[np.ndarray] = None,
) -> int:
    """
    Grows a faction greedily, one star at a time, until it reaches target_size.

    Each round scores every unclaimed star that has a controlled star within
    MAX_EXPANSION_DISTANCE:
        2000 * adjacent + 500 * nearby - 2 * mean distance - 3 * min distance
    and claims the best one (first in star order on ties). When no star is close enough
    the unclaimed star nearest the territory's centroid is claimed instead.

    Args:
        faction: Faction to grow; its controlled_systems set is updated in place.
        stars: All stars of the galaxy, in generation order.
        registry: Claims shared with every other faction.
        target_size: Territory size to stop at.
        distances: Optional precomputed star-to-star distance matrix in star order.

    Returns:
        Number of stars claimed by this call.
    """
    if distances is None:
        distances = distance_matrix(stars)
    coords = star_coordinates(stars)
    index = {star.id: idx for idx, star in enumerate(stars)}

    for star_id in faction.controlled_systems:
        registry.claim(star_id, faction.id)

    controlled = sorted(index[star_id] for star_id in faction.controlled_systems if star_id in index)
    unclaimed = [idx for idx, star in enumerate(stars) if star.id not in registry]

    claimed = 0
    while len(faction.controlled_systems) < target_size and unclaimed and controlled:
        sub = distances[np.ix_(unclaimed, controlled)]
        nearby_mask = sub < MAX_EXPANSION_DISTANCE
        nearby = nearby_mask.sum(axis=1)

        if nearby.any():
            adjacent = (sub < ADJACENT_DISTANCE).sum(axis=1)
            avg_distance = np.where(nearby_mask, sub, 0.0).sum(axis=1) / np.maximum(nearby, 1)
            min_distance = np.where(nearby_mask, sub, np.inf).min(axis=1)
            scores = (
                ADJACENT_WEIGHT * adjacent
                + NEARBY_WEIGHT * nearby
                - AVG_DISTANCE_PENALTY * avg_distance
                - MIN_DISTANCE_PENALTY * np.where(nearby > 0, min_distance, 0.0)
            )
            scores = np.where(nearby > 0, scores, -np.inf)
            pick = int(np.argmax(scores))
        else:
            centroid = coords[controlled].mean(axis=0)
            gaps = np.hypot(coords[unclaimed, 0] - centroid[0], coords[unclaimed, 1] - centroid[1])
            pick = int(np.argmin(gaps))
            logger.debug("Faction %s has no star within %.0f, falling back to nearest-to-centroid", faction.id, MAX_EXPANSION_DISTANCE)

        star_idx = unclaimed.pop(pick)
        star_id = stars[star_idx].id
        registry.claim(star_id, faction.id)
        faction.controlled_systems.add(star_id)
        controlled.append(star_idx)
        claimed += 1

    return claimed
