from __future__ import annotations
import dataclasses
import logging
import random
from typing import List, Optional

import numpy as np

from ..core.ids import StarId, SystemId, PlanetId, new_id
from ..core.rng import ensure_rng
from .model import (
    Galaxy, Planet, PlanetType, Resource, Star, StarSystem, StarType, StarTypeInfo, Vector2D,
)
from .load import GalaxyConfig, GenerationTables, get_default_config, get_default_tables
from .names import generate_star_name, generate_planet_name
from .sampling import weighted_choice, calculate_distance, spiral_position, disk_position
from .lane_gen import generate_hyperspace_lanes

logger = logging.getLogger(__name__)

# Core stars favour massive types
CORE_SIZE_THRESHOLD = 1.2
CORE_LARGE_WEIGHT = 2.0
CORE_SMALL_WEIGHT = 0.5

MAX_RESOURCES_PER_PLANET = 3


def core_star_types(star_types: List[StarTypeInfo]) -> List[StarTypeInfo]:
    """Re-weights the star table towards large stars. The result is not renormalised."""
    return [
        dataclasses.replace(
            info,
            probability=info.probability * (CORE_LARGE_WEIGHT if info.size > CORE_SIZE_THRESHOLD else CORE_SMALL_WEIGHT),
        )
        for info in star_types
    ]


def min_star_distance(position: Vector2D, config: GalaxyConfig) -> float:
    """Minimum spacing around a new star; stars may sit a little closer towards the core."""
    distance_ratio = calculate_distance(position, config.center) / config.radius
    return config.base_min_star_distance * (0.8 + distance_ratio * 0.4)


def generate_center_black_hole(rng: random.Random, config: GalaxyConfig) -> Star:
    return Star(
        id=StarId(new_id(rng)),
        position=config.center,
        name=config.center_name,
        type=StarType.BLACK_HOLE,
        size=config.center_size,
        color=config.center_color,
    )


def generate_core_stars(rng: random.Random, config: GalaxyConfig, tables: GenerationTables, count: Optional[int] = None) -> List[Star]:
    """
    Places the dense cluster around the galactic centre.

    Candidates closer than the core spacing to an accepted core star are dropped. After
    count * attempts_per_star draws the cluster is returned as is, possibly short.
    """
    target = config.core_star_count if count is None else count
    weighted_types = core_star_types(tables.star_types)
    spacing = config.min_core_star_distance

    core_stars: List[Star] = []
    attempts = 0
    max_attempts = target * config.attempts_per_star
    while len(core_stars) < target and attempts < max_attempts:
        attempts += 1
        position = disk_position(rng, config.center, config.core_radius)
        if any(calculate_distance(position, existing.position) < spacing for existing in core_stars):
            continue

        star_type_info = weighted_choice(weighted_types, rng)
        core_stars.append(Star(
            id=StarId(new_id(rng)),
            position=position,
            name=generate_star_name(star_type_info.type, rng, tables.names),
            type=star_type_info.type,
            size=star_type_info.size * (0.9 + rng.random() * 0.2),
            color=star_type_info.color,
        ))

    if len(core_stars) < target:
        logger.info("Core cluster stopped at %d of %d stars after %d attempts", len(core_stars), target, attempts)
    return core_stars


def generate_star(rng: random.Random, config: GalaxyConfig, tables: GenerationTables) -> Star:
    position = spiral_position(rng, config)
    star_type_info = weighted_choice(tables.star_types, rng)
    return Star(
        id=StarId(new_id(rng)),
        position=position,
        name=generate_star_name(star_type_info.type, rng, tables.names),
        type=star_type_info.type,
        size=star_type_info.size * (0.8 + rng.random() * 0.4), # Some size variation
        color=star_type_info.color,
    )


def generate_stars(rng: random.Random, config: GalaxyConfig, tables: GenerationTables) -> List[Star]:
    """
    Generates the centre black hole, the core cluster and the spiral population, in that order.

    The first star is always the centre black hole. Spiral stars that land too close to an
    existing star or outside the rim are rejected; generation stops at max_stars or after
    max_stars * attempts_per_star spiral draws, whichever comes first.
    """
    stars: List[Star] = [generate_center_black_hole(rng, config)]
    core_count = min(config.core_star_count, config.max_stars - 1)
    stars.extend(generate_core_stars(rng, config, tables, count=core_count))

    coords = np.empty((max(config.max_stars, len(stars)), 2), dtype=float)
    for idx, star in enumerate(stars):
        coords[idx] = (star.position.x, star.position.y)
    n_placed = len(stars)

    attempts = 0
    max_attempts = config.max_stars * config.attempts_per_star
    while len(stars) < config.max_stars and attempts < max_attempts:
        attempts += 1
        new_star = generate_star(rng, config, tables)
        position = new_star.position

        if calculate_distance(position, config.center) > config.radius:
            continue
        gaps = np.hypot(coords[:n_placed, 0] - position.x, coords[:n_placed, 1] - position.y)
        if gaps.min() < min_star_distance(position, config):
            continue

        coords[n_placed] = (position.x, position.y)
        n_placed += 1
        stars.append(new_star)

    if len(stars) < config.max_stars:
        logger.info("Star placement stopped at %d of %d stars after %d attempts", len(stars), config.max_stars, attempts)
    else:
        logger.debug("Placed %d stars in %d attempts", len(stars), attempts)
    return stars


def generate_resources(planet_type: PlanetType, rng: random.Random, tables: GenerationTables) -> List[Resource]:
    """
    Draws 1-3 distinct resources for a planet of the given type.

    Candidates are drawn uniformly without replacement from the type's table; amount and
    regeneration ranges depend on the resource's category.
    """
    available = list(tables.planet_resources.get(planet_type, []))
    num_resources = 1 + int(rng.random() * MAX_RESOURCES_PER_PLANET)

    resources: List[Resource] = []
    for _ in range(num_resources):
        if not available:
            break
        resource_type_info = available.pop(int(rng.random() * len(available)))
        yield_range = tables.resource_yields.for_type(resource_type_info.type)
        resources.append(Resource(
            type=resource_type_info.type,
            amount=rng.uniform(*yield_range.amount),
            regeneration_rate=rng.uniform(*yield_range.regeneration),
        ))
    return resources


def generate_planet(star: Star, index: int, rng: random.Random, tables: GenerationTables) -> Planet:
    planet_type = weighted_choice(tables.planet_types, rng).type
    return Planet(
        id=PlanetId(new_id(rng)),
        name=generate_planet_name(planet_type, star.name, index, tables.names),
        type=planet_type,
        size=0.5 + rng.random() * 1.5,
        orbit_speed=0.1 + rng.random() * 0.5,
        star_id=star.id,
        resources=generate_resources(planet_type, rng, tables),
    )


def generate_star_system(star: Star, rng: random.Random, config: GalaxyConfig, tables: GenerationTables) -> StarSystem:
    num_planets = 1 + int(rng.random() * config.max_planets_per_system)
    planets = [generate_planet(star, i, rng, tables) for i in range(num_planets)]
    return StarSystem(
        id=SystemId(new_id(rng)),
        star=star,
        planets=planets,
        resources=[dataclasses.replace(resource) for resource in planets[0].resources],
    )


def generate_galaxy(
    rng: Optional[random.Random] = None,
    config: Optional[GalaxyConfig] = None,
    tables: Optional[GenerationTables] = None,
) -> Galaxy:
    """
    Generates a complete galaxy: stars, one system per star and a connected lane graph.

    Args:
        rng: Random source; a fresh unseeded one when omitted.
        config: Galaxy shape settings; the packaged galaxy.yaml when omitted.
        tables: Star, planet, resource and name tables; the packaged ones when omitted.

    Returns:
        A Galaxy whose first star is the centre black hole.
    """
    rng = ensure_rng(rng)
    config = config or get_default_config()
    tables = tables or get_default_tables()

    stars = generate_stars(rng, config, tables)
    hyperspace_lanes = generate_hyperspace_lanes(
        stars,
        rng,
        max_lane_distance=config.max_hyperlane_distance,
        extra_connections_factor=config.extra_connections_factor,
    )
    star_systems = [generate_star_system(star, rng, config, tables) for star in stars]

    logger.info("Generated galaxy with %d stars, %d systems and %d lanes", len(stars), len(star_systems), len(hyperspace_lanes))
    return Galaxy(stars=stars, star_systems=star_systems, hyperspace_lanes=hyperspace_lanes)
