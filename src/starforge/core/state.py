from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .ids import StarId, SystemId, LaneId, FactionId
from ..generation.model import Galaxy, Star, StarSystem, HyperspaceLane
from ..factions.model import Faction


@dataclass
class GalaxyState:
    seed: Optional[int] = None
    stars: Dict[StarId, Star] = field(default_factory=dict)
    systems: Dict[SystemId, StarSystem] = field(default_factory=dict)
    lanes: Dict[LaneId, HyperspaceLane] = field(default_factory=dict)
    factions: Dict[FactionId, Faction] = field(default_factory=dict)

    # Derived indexes, rebuilt from the collections above
    _adj: Dict[StarId, List[LaneId]] = field(default_factory=dict, init=False, repr=False)
    _system_by_star: Dict[StarId, SystemId] = field(default_factory=dict, init=False, repr=False)
    _owner_by_star: Dict[StarId, FactionId] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        self.rebuild_adjacency()
        self.rebuild_indexes()

    @classmethod
    def from_galaxy(cls, galaxy: Galaxy, factions: Sequence[Faction] = (), seed: Optional[int] = None) -> "GalaxyState":
        return cls(
            seed=seed,
            stars={star.id: star for star in galaxy.stars},
            systems={system.id: system for system in galaxy.star_systems},
            lanes={lane.id: lane for lane in galaxy.hyperspace_lanes},
            factions={faction.id: faction for faction in factions},
        )

    def rebuild_adjacency(self):
        self._adj = {star_id: [] for star_id in self.stars}
        for lane_id, lane in self.lanes.items():
            if lane.from_star_id in self._adj:
                self._adj[lane.from_star_id].append(lane_id)
            if lane.to_star_id in self._adj:
                self._adj[lane.to_star_id].append(lane_id)

    def rebuild_indexes(self):
        self._system_by_star = {system.star.id: system_id for system_id, system in self.systems.items()}
        self._owner_by_star = {}
        for faction_id, faction in self.factions.items():
            for star_id in faction.controlled_systems:
                self._owner_by_star.setdefault(star_id, faction_id)

    def neighbors(self, star_id: StarId) -> List[StarId]:
        return [self.lanes[lane_id].other_end(star_id) for lane_id in self._adj.get(star_id, [])]

    def lanes_from(self, star_id: StarId) -> List[HyperspaceLane]:
        return [self.lanes[lane_id] for lane_id in self._adj.get(star_id, [])]

    def system_for_star(self, star_id: StarId) -> Optional[StarSystem]:
        system_id = self._system_by_star.get(star_id)
        return self.systems.get(system_id) if system_id is not None else None

    def controlling_faction(self, star_id: StarId) -> Optional[Faction]:
        faction_id = self._owner_by_star.get(star_id)
        return self.factions.get(faction_id) if faction_id is not None else None

    def unclaimed_star_ids(self) -> List[StarId]:
        return [star_id for star_id in self.stars if star_id not in self._owner_by_star]
