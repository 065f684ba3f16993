from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ..core.ids import StarId, SystemId, PlanetId, LaneId, PatchId


class StarType(str, Enum):
    RED_DWARF = "RED_DWARF"
    YELLOW_DWARF = "YELLOW_DWARF"
    BLUE_GIANT = "BLUE_GIANT"
    RED_GIANT = "RED_GIANT"
    NEUTRON = "NEUTRON"
    PULSAR = "PULSAR"
    BLACK_HOLE = "BLACK_HOLE"


# Star types nobody can settle around
EXOTIC_STAR_TYPES = frozenset({StarType.BLACK_HOLE, StarType.NEUTRON, StarType.PULSAR})


class PlanetType(str, Enum):
    ROCKY = "ROCKY"
    GAS_GIANT = "GAS_GIANT"
    ICE = "ICE"
    DESERT = "DESERT"
    OCEAN = "OCEAN"


class ResourceType(str, Enum):
    IRON = "IRON"
    COPPER = "COPPER"
    GOLD = "GOLD"
    SILVER = "SILVER"
    PLATINUM = "PLATINUM"
    RARE_EARTH = "RARE_EARTH"
    TITANIUM = "TITANIUM"
    URANIUM = "URANIUM"
    PLUTONIUM = "PLUTONIUM"
    HELIUM_3 = "HELIUM_3"
    DEUTERIUM = "DEUTERIUM"
    ANTIMATTER = "ANTIMATTER"
    EXOTIC_MATTER = "EXOTIC_MATTER"
    DARK_MATTER = "DARK_MATTER"
    QUANTUM_PARTICLES = "QUANTUM_PARTICLES"
    GRAVITONIUM = "GRAVITONIUM"
    WATER = "WATER"
    ICE = "ICE"
    METHANE = "METHANE"
    AMMONIA = "AMMONIA"
    FOOD = "FOOD"
    ORGANICS = "ORGANICS"
    FUEL = "FUEL"
    PLASMA = "PLASMA"
    CRYSTALS = "CRYSTALS"
    SILICON = "SILICON"
    CARBON = "CARBON"
    LITHIUM = "LITHIUM"
    COBALT = "COBALT"
    IRIDIUM = "IRIDIUM"
    HYDROGEN = "HYDROGEN"


class BuildingType(str, Enum):
    RESOURCE_EXTRACTOR = "RESOURCE_EXTRACTOR"
    RESEARCH_LAB = "RESEARCH_LAB"
    MANUFACTURING_FACILITY = "MANUFACTURING_FACILITY"
    AGRICULTURAL_COMPLEX = "AGRICULTURAL_COMPLEX"
    POWER_PLANT = "POWER_PLANT"


class PlaceableOn(str, Enum):
    RESOURCE_PATCH = "RESOURCE_PATCH"
    LAND = "LAND"
    WATER = "WATER"


@dataclass(frozen=True)
class Vector2D:
    x: float
    y: float


@dataclass(frozen=True)
class Vector3D:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class StarTypeInfo:
    type: StarType
    color: str
    size: float
    probability: float


@dataclass(frozen=True)
class PlanetTypeInfo:
    type: PlanetType
    probability: float


@dataclass(frozen=True)
class ResourceTypeInfo:
    type: ResourceType
    probability: float


@dataclass
class Star:
    id: StarId
    position: Vector2D
    name: str
    type: StarType
    size: float
    color: str


@dataclass
class Resource:
    type: ResourceType
    amount: float
    regeneration_rate: float


@dataclass
class ResourcePatch:
    id: PatchId
    resource_type: ResourceType
    resource: Resource
    position: Vector3D = field(default_factory=Vector3D)
    normal: Vector3D = field(default_factory=Vector3D)


@dataclass
class Building:
    id: int
    type: BuildingType
    resource_type: str
    planet_id: PlanetId
    star_id: StarId
    placeable_on: PlaceableOn
    position: Vector3D = field(default_factory=Vector3D)
    normal: Vector3D = field(default_factory=Vector3D)
    rotation: Vector3D = field(default_factory=Vector3D) # Euler angles


@dataclass
class Planet:
    id: PlanetId
    name: str
    type: PlanetType
    size: float
    orbit_speed: float
    star_id: StarId # Owning star by id; no back-pointer to the system
    resources: List[Resource] = field(default_factory=list)
    buildings: List[Building] = field(default_factory=list)
    resource_patches: List[ResourcePatch] = field(default_factory=list)


@dataclass
class StarSystem:
    id: SystemId
    star: Star
    planets: List[Planet] = field(default_factory=list)
    # Display list copied from the first planet, not an aggregate of all planets
    resources: List[Resource] = field(default_factory=list)


@dataclass
class HyperspaceLane:
    id: LaneId
    from_star_id: StarId
    to_star_id: StarId
    distance: float

    def connects(self, star_id: StarId) -> bool:
        return star_id == self.from_star_id or star_id == self.to_star_id

    def other_end(self, star_id: StarId) -> StarId:
        if star_id == self.from_star_id:
            return self.to_star_id
        if star_id == self.to_star_id:
            return self.from_star_id
        raise ValueError(f"Lane '{self.id}' does not touch star '{star_id}'.")


@dataclass
class Galaxy:
    stars: List[Star] = field(default_factory=list)
    star_systems: List[StarSystem] = field(default_factory=list)
    hyperspace_lanes: List[HyperspaceLane] = field(default_factory=list)
