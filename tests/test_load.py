import shutil

import pytest
import yaml

from starforge.generation.load import (
    DATA_PATH,
    GenerationSchemaError,
    get_default_config,
    get_default_tables,
    load_galaxy_config,
    load_generation_tables,
    load_star_types,
)
from starforge.generation.model import PlanetType, ResourceType, StarType, Vector2D


def _write_yaml(path, data):
    with open(path, 'w') as f:
        yaml.safe_dump(data, f)
    return path


def test_default_config_matches_packaged_galaxy():
    config = get_default_config()
    assert config.radius == 3000.0
    assert config.max_stars == 500
    assert config.base_min_star_distance == 100.0
    assert config.min_core_star_distance == 80.0
    assert config.max_hyperlane_distance == 200.0
    assert config.spiral_arms == 3
    assert config.center == Vector2D(3000.0, 3000.0)
    assert config.core_radius == pytest.approx(300.0)


def test_default_tables_cover_every_type():
    tables = get_default_tables()
    assert {info.type for info in tables.star_types} == set(StarType)
    assert {info.type for info in tables.planet_types} == set(PlanetType)
    assert sum(info.probability for info in tables.star_types) == pytest.approx(1.0)
    for candidates in tables.planet_resources.values():
        assert candidates


def test_resource_yield_categories():
    yields = get_default_tables().resource_yields
    assert yields.for_type(ResourceType.WATER).amount == (5000.0, 20000.0)
    assert yields.for_type(ResourceType.IRON).amount == (500.0, 2500.0)
    # Uncategorised resources use the default range
    assert yields.for_type(ResourceType.SILICON) == yields.default


def test_galaxy_config_overrides(tmp_path):
    path = _write_yaml(tmp_path / "galaxy.yaml", {"galaxy": {"radius": 1000, "max_stars": 50}})
    config = load_galaxy_config(path)
    assert config.radius == 1000.0
    assert config.max_stars == 50
    assert config.spiral_arms == 3


@pytest.mark.parametrize("galaxy", [
    {"radius": 0},
    {"radius": -10},
    {"max_stars": 0},
    {"max_stars": 2.5},
    {"spiral_arms": 0},
    {"center_density_boost": 0},
    {"radius": True},
    {"center_name": ""},
    {"unknown_setting": 1},
])
def test_invalid_galaxy_config_raises(tmp_path, galaxy):
    path = _write_yaml(tmp_path / "galaxy.yaml", {"galaxy": galaxy})
    with pytest.raises(GenerationSchemaError):
        load_galaxy_config(path)


def test_missing_galaxy_key_raises(tmp_path):
    path = _write_yaml(tmp_path / "galaxy.yaml", {"radius": 1000})
    with pytest.raises(GenerationSchemaError):
        load_galaxy_config(path)


def test_empty_yaml_raises(tmp_path):
    path = tmp_path / "galaxy.yaml"
    path.write_text("")
    with pytest.raises(GenerationSchemaError):
        load_galaxy_config(path)


def test_unknown_star_type_raises(tmp_path):
    path = _write_yaml(tmp_path / "star_types.yaml", {"star_types": [
        {"type": "WHITE_DWARF", "color": "#ffffff", "size": 1.0, "probability": 0.5},
    ]})
    with pytest.raises(GenerationSchemaError):
        load_star_types(path)


def test_star_type_missing_key_raises(tmp_path):
    path = _write_yaml(tmp_path / "star_types.yaml", {"star_types": [
        {"type": "RED_DWARF", "color": "#ff6b6b", "size": 1.0},
    ]})
    with pytest.raises(GenerationSchemaError):
        load_star_types(path)


def test_load_generation_tables_from_directory(tmp_path):
    data_dir = tmp_path / "data"
    shutil.copytree(DATA_PATH, data_dir)
    tables = load_generation_tables(data_dir)
    assert len(tables.star_types) == 7
    assert len(tables.factions.archetypes) == 7


def test_unknown_trait_adjustment_raises(tmp_path):
    data_dir = tmp_path / "data"
    shutil.copytree(DATA_PATH, data_dir)
    with open(data_dir / "factions.yaml") as f:
        factions = yaml.safe_load(f)
    factions["archetypes"]["CORPORATE"]["trait_adjustments"] = {"charisma": 0.2}
    _write_yaml(data_dir / "factions.yaml", factions)

    with pytest.raises(GenerationSchemaError):
        load_generation_tables(data_dir)


def test_planet_type_without_resources_raises(tmp_path):
    data_dir = tmp_path / "data"
    shutil.copytree(DATA_PATH, data_dir)
    with open(data_dir / "planet_types.yaml") as f:
        planet_types = yaml.safe_load(f)
    planet_types["planet_types"][0]["resources"] = []
    _write_yaml(data_dir / "planet_types.yaml", planet_types)

    with pytest.raises(GenerationSchemaError):
        load_generation_tables(data_dir)
