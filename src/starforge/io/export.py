import json
from typing import Any, Dict, Optional

from ..core.state import GalaxyState
from ..generation.model import Planet, Resource, Star, StarSystem
from ..generation.buildings import BuildingCatalog


def _resource_dict(resource: Resource) -> Dict[str, Any]:
    return {
        "type": resource.type.value,
        "amount": resource.amount,
        "regeneration_rate": resource.regeneration_rate,
    }


def _star_dict(star: Star) -> Dict[str, Any]:
    return {
        "id": star.id,
        "name": star.name,
        "type": star.type.value,
        "x": star.position.x,
        "y": star.position.y,
        "size": star.size,
        "color": star.color,
    }


def _planet_dict(planet: Planet) -> Dict[str, Any]:
    return {
        "id": planet.id,
        "name": planet.name,
        "type": planet.type.value,
        "size": planet.size,
        "orbit_speed": planet.orbit_speed,
        "star_id": planet.star_id,
        "resources": [_resource_dict(r) for r in planet.resources],
        "building_count": len(planet.buildings),
        "resource_patch_count": len(planet.resource_patches),
    }


def system_to_dict(system: StarSystem) -> Dict[str, Any]:
    return {
        "id": system.id,
        "star_id": system.star.id,
        "planets": [_planet_dict(p) for p in system.planets],
        "resources": [_resource_dict(r) for r in system.resources],
    }


def to_dict(state: GalaxyState, starting_system: Optional[StarSystem] = None) -> Dict[str, Any]:
    """Converts a generated GalaxyState to a JSON-ready dictionary."""
    stars_data = [_star_dict(star) for star in state.stars.values()]
    systems_data = [system_to_dict(system) for system in state.systems.values()]

    lanes_data = [
        {
            "id": lane.id,
            "from_star_id": lane.from_star_id,
            "to_star_id": lane.to_star_id,
            "distance": lane.distance,
        }
        for lane in state.lanes.values()
    ]

    factions_data = [
        {
            "id": faction.id,
            "name": faction.name,
            "type": faction.type.value,
            "color": faction.color,
            "traits": faction.traits.to_dict(),
            "home_system_id": faction.home_system_id,
            "controlled_systems": sorted(faction.controlled_systems),
            "relations": dict(faction.relations),
        }
        for faction in state.factions.values()
    ]

    data = {
        "seed": state.seed,
        "stars": stars_data,
        "star_systems": systems_data,
        "hyperspace_lanes": lanes_data,
        "factions": factions_data,
    }
    if starting_system is not None:
        data["starting_system_id"] = starting_system.id
        data["starting_star_id"] = starting_system.star.id
    return data


def catalog_to_dict(catalog: BuildingCatalog) -> Dict[str, Any]:
    return {
        definition.type.value: {
            "name": definition.name,
            "description": definition.description,
            "placeable_on": definition.placeable_on.value,
            "cost": {r_type.value: qty for r_type, qty in definition.cost.items()},
        }
        for definition in catalog.all_definitions()
    }


def save_to_json(state: GalaxyState, path: str, starting_system: Optional[StarSystem] = None):
    """Writes a generated galaxy snapshot to a JSON file."""
    with open(path, 'w') as f:
        json.dump(to_dict(state, starting_system), f, indent=2)
