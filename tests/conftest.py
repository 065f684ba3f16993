import dataclasses

import pytest

from starforge.core.ids import StarId, SystemId, PlanetId
from starforge.core.rng import get_seeded_rng
from starforge.generation.load import get_default_config, get_default_tables
from starforge.generation.model import Planet, PlanetType, Star, StarSystem, StarType, Vector2D
from starforge.generation.system_gen import generate_galaxy

SMALL_GALAXY_STARS = 120


@pytest.fixture
def rng():
    return get_seeded_rng(1234)


@pytest.fixture
def tables():
    return get_default_tables()


@pytest.fixture
def small_config():
    return dataclasses.replace(get_default_config(), max_stars=SMALL_GALAXY_STARS)


@pytest.fixture
def small_galaxy(small_config, tables):
    return generate_galaxy(get_seeded_rng(7), small_config, tables)


@pytest.fixture
def make_star():
    def _make_star(star_id: str, x: float, y: float, star_type: StarType = StarType.YELLOW_DWARF) -> Star:
        return Star(
            id=StarId(star_id),
            position=Vector2D(x, y),
            name=f"Star {star_id}",
            type=star_type,
            size=1.0,
            color="#ffd93d",
        )
    return _make_star


@pytest.fixture
def make_system(make_star):
    def _make_system(star_id: str, x: float, y: float, star_type: StarType = StarType.YELLOW_DWARF, n_planets: int = 2) -> StarSystem:
        star = make_star(star_id, x, y, star_type)
        planets = [
            Planet(
                id=PlanetId(f"{star_id}-p{i}"),
                name=f"{star.name} {chr(ord('B') + i)}",
                type=PlanetType.ROCKY,
                size=1.0,
                orbit_speed=0.2,
                star_id=star.id,
            )
            for i in range(n_planets)
        ]
        return StarSystem(id=SystemId(f"sys-{star_id}"), star=star, planets=planets)
    return _make_system
