import random

import pytest

from starforge.generation.load import get_default_tables
from starforge.generation.model import PlanetType, StarType
from starforge.generation.names import generate_planet_name, generate_star_name, is_catalog_name


@pytest.mark.parametrize("star_type", [StarType.NEUTRON, StarType.PULSAR])
def test_compact_stars_get_catalog_names(star_type):
    names = get_default_tables().names
    rng = random.Random(11)
    for _ in range(50):
        name = generate_star_name(star_type, rng)
        prefix, designation = name.split(" ")
        assert prefix in names.catalog_names[star_type]["prefixes"]
        assert "+" in designation or "-" in designation
        assert is_catalog_name(name)


def test_regular_star_names_use_constellation_roots():
    names = get_default_tables().names
    rng = random.Random(12)
    for _ in range(100):
        name = generate_star_name(StarType.YELLOW_DWARF, rng)
        words = name.split(" ")
        assert 1 <= len(words) <= 3
        assert any(word in names.star_roots for word in words)
        assert not is_catalog_name(name)


def test_star_names_are_deterministic():
    first = [generate_star_name(StarType.RED_DWARF, random.Random(3)) for _ in range(5)]
    second = [generate_star_name(StarType.RED_DWARF, random.Random(3)) for _ in range(5)]
    assert first == second


def test_greek_prefixed_name_is_not_a_catalog_name():
    assert not is_catalog_name("Beta Lyrae")
    assert is_catalog_name("B 0531+21")
    assert is_catalog_name("PSR 1919+21")


def test_planet_names_follow_exoplanet_convention():
    assert generate_planet_name(PlanetType.ROCKY, "Alpha Centauri", 0) == "Alpha Centauri B"
    assert generate_planet_name(PlanetType.OCEAN, "Vega", 1) == "Vega-C"
    assert generate_planet_name(PlanetType.ICE, "Beta Lyrae Prime", 2) == "Beta Lyrae Prime D"


def test_catalog_star_planets_use_lowercase_letters():
    assert generate_planet_name(PlanetType.GAS_GIANT, "PSR 1919+21", 0) == "PSR 1919+21 a"
    assert generate_planet_name(PlanetType.DESERT, "MSP 0833-65", 3) == "MSP 0833-65 d"


def test_planet_letters_saturate_at_last_letter():
    assert generate_planet_name(PlanetType.ROCKY, "Vega", 20) == "Vega-J"
