from __future__ import annotations
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, Set

from ..core.ids import FactionId, StarId


class FactionType(str, Enum):
    CORPORATE = "CORPORATE" # Profit-driven megacorporations
    SCIENTIFIC = "SCIENTIFIC" # Research-focused societies
    MILITARISTIC = "MILITARISTIC" # War-focused empires
    PEACEFUL = "PEACEFUL" # Diplomatic traders
    XENOPHOBIC = "XENOPHOBIC" # Isolationist societies
    RELIGIOUS = "RELIGIOUS" # Faith-driven civilizations
    HIVE_MIND = "HIVE_MIND" # Collective consciousness species


@dataclass
class FactionTraits:
    expansionist: float = 0.5 # Tendency to expand territory
    diplomatic: float = 0.5 # Willingness to form alliances
    aggressive: float = 0.5 # Likelihood to engage in conflict
    technological: float = 0.5 # Focus on research and development
    economic: float = 0.5 # Trading and resource management capability

    def adjust(self, adjustments: Dict[str, float]):
        for trait, delta in adjustments.items():
            setattr(self, trait, getattr(self, trait) + delta)

    def clamp(self):
        for f in fields(self):
            setattr(self, f.name, max(0.0, min(1.0, getattr(self, f.name))))

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class Faction:
    id: FactionId
    name: str
    type: FactionType
    traits: FactionTraits
    color: str
    home_system_id: StarId # Star id of the home system
    controlled_systems: Set[StarId] = field(default_factory=set)
    # Scores towards other factions, -100 (hostile) to 100 (allied)
    relations: Dict[FactionId, float] = field(default_factory=dict)

    def __post_init__(self):
        self.controlled_systems.add(self.home_system_id)

    def controls(self, star_id: StarId) -> bool:
        return star_id in self.controlled_systems

    def relation_with(self, other_id: FactionId) -> float:
        return self.relations.get(other_id, 0.0)
