from __future__ import annotations
import math
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, List, Any, Optional, Tuple
import yaml

from .model import (
    StarType, PlanetType, ResourceType, StarTypeInfo, PlanetTypeInfo, ResourceTypeInfo, Vector2D,
)

DATA_PATH = Path(__file__).resolve().parent.parent / "data"

TRAIT_NAMES = ("expansionist", "diplomatic", "aggressive", "technological", "economic")


class GenerationSchemaError(Exception):
    """Custom exception for schema validation errors."""
    pass


@dataclass(frozen=True)
class GalaxyConfig:
    radius: float = 3000.0
    base_min_star_distance: float = 100.0
    min_core_star_distance: float = 80.0
    max_stars: int = 500
    max_planets_per_system: int = 5
    max_hyperlane_distance: float = 200.0
    extra_connections_factor: float = 0.3
    spiral_arms: int = 3
    spiral_tightness: float = 0.5
    density_dropoff: float = 0.7
    center_density_boost: float = 2.0
    core_star_count: int = 20
    core_radius_fraction: float = 0.1
    attempts_per_star: int = 10
    center_name: str = "Sagittarius A*"
    center_size: float = 3.0
    center_color: str = "#000000"

    @property
    def center(self) -> Vector2D:
        return Vector2D(self.radius, self.radius)

    @property
    def arm_offset(self) -> float:
        return (2 * math.pi) / self.spiral_arms

    @property
    def core_radius(self) -> float:
        return self.radius * self.core_radius_fraction


@dataclass(frozen=True)
class YieldRange:
    amount: Tuple[float, float]
    regeneration: Tuple[float, float]


@dataclass
class ResourceYields:
    default: YieldRange
    by_type: Dict[ResourceType, YieldRange] = field(default_factory=dict)
    category_of: Dict[ResourceType, str] = field(default_factory=dict)

    def for_type(self, resource_type: ResourceType) -> YieldRange:
        return self.by_type.get(resource_type, self.default)


@dataclass
class NameParts:
    star_prefixes: List[str]
    star_roots: List[str]
    star_suffixes: List[str]
    prefix_chance: float
    suffix_chance: float
    catalog_names: Dict[StarType, Dict[str, List[str]]]
    planet_letters: List[str]

    @property
    def catalog_prefixes(self) -> frozenset:
        return frozenset(p for parts in self.catalog_names.values() for p in parts["prefixes"])


@dataclass
class ArchetypeTable:
    prefixes: List[str]
    suffixes: List[str]
    trait_adjustments: Dict[str, float] = field(default_factory=dict)


@dataclass
class FactionTables:
    colors: List[str]
    base_trait_range: Tuple[float, float]
    archetypes: Dict[str, ArchetypeTable]


@dataclass
class GenerationTables:
    star_types: List[StarTypeInfo]
    planet_types: List[PlanetTypeInfo]
    planet_resources: Dict[PlanetType, List[ResourceTypeInfo]]
    resource_yields: ResourceYields
    names: NameParts
    factions: FactionTables


def _read_yaml(path: Path) -> Any:
    with open(path, 'r') as f:
        data = yaml.safe_load(f)
    if data is None:
        raise GenerationSchemaError(f"YAML file '{path}' is empty or malformed.")
    return data


def _parse_enum(enum_cls, value: Any, path: Path, what: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise GenerationSchemaError(f"Unknown {what} '{value}' in {path}") from None


def _validate_word_list(words: Any, path: Path, what: str) -> List[str]:
    if not (isinstance(words, list) and len(words) > 0 and all(isinstance(w, str) and w for w in words)):
        raise GenerationSchemaError(f"'{what}' in {path} must be a non-empty list of strings: {words}")
    return list(words)


def _validate_probability(value: Any, path: Path, what: str) -> float:
    if not (isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0):
        raise GenerationSchemaError(f"Invalid probability for '{what}' in {path}: {value}")
    return float(value)


def _validate_range(data: Any, path: Path, what: str) -> Tuple[float, float]:
    if not (isinstance(data, dict) and "range" in data):
        raise GenerationSchemaError(f"'{what}' in {path} must define a 'range': {data}")
    r_data = data["range"]
    if not (isinstance(r_data, list) and len(r_data) == 2 and all(isinstance(x, (int, float)) for x in r_data) and r_data[0] <= r_data[1]):
        raise GenerationSchemaError(f"Invalid range for '{what}' in {path}: {r_data}")
    return float(r_data[0]), float(r_data[1])


def validate_galaxy_config(data: Dict[str, Any], path: Path) -> GalaxyConfig:
    """Validates the 'galaxy' mapping of galaxy.yaml and builds a GalaxyConfig from it."""
    if not isinstance(data, dict):
        raise GenerationSchemaError(f"'galaxy' in {path} must be a mapping.")

    known = {f.name: f for f in fields(GalaxyConfig)}
    for key in data:
        if key not in known:
            raise GenerationSchemaError(f"Unknown galaxy setting '{key}' in {path}")

    values: Dict[str, Any] = {}
    defaults = GalaxyConfig()
    for name, value in data.items():
        expected = type(getattr(defaults, name))
        if expected is str:
            if not (isinstance(value, str) and value):
                raise GenerationSchemaError(f"Invalid '{name}' in {path}: {value}")
        elif expected is int:
            if not (isinstance(value, int) and not isinstance(value, bool) and value >= 0):
                raise GenerationSchemaError(f"Invalid '{name}' in {path}: {value}")
        else:
            if not (isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0):
                raise GenerationSchemaError(f"Invalid '{name}' in {path}: {value}")
            value = float(value)
        values[name] = value

    config = GalaxyConfig(**values)
    if config.radius <= 0:
        raise GenerationSchemaError(f"'radius' in {path} must be positive.")
    if config.center_density_boost <= 0:
        raise GenerationSchemaError(f"'center_density_boost' in {path} must be positive.")
    if config.spiral_arms < 1:
        raise GenerationSchemaError(f"'spiral_arms' in {path} must be at least 1.")
    if config.max_planets_per_system < 1:
        raise GenerationSchemaError(f"'max_planets_per_system' in {path} must be at least 1.")
    if config.max_stars < 1:
        raise GenerationSchemaError(f"'max_stars' in {path} must be at least 1.")
    return config


def validate_star_type_schema(data: List[Dict[str, Any]], path: Path) -> List[StarTypeInfo]:
    """Validates the schema for star_types.yaml."""
    if not (isinstance(data, list) and len(data) > 0):
        raise GenerationSchemaError(f"Top level of {path} must be a non-empty list of star types.")

    star_types = []
    for st_data in data:
        for key in ["type", "color", "size", "probability"]:
            if key not in st_data:
                raise GenerationSchemaError(f"Missing key '{key}' in star type '{st_data.get('type', 'N/A')}' in {path}")
        star_type = _parse_enum(StarType, st_data["type"], path, "star type")
        if not (isinstance(st_data["color"], str) and st_data["color"].startswith("#")):
            raise GenerationSchemaError(f"Invalid 'color' in star type '{star_type.value}' in {path}: {st_data['color']}")
        if not (isinstance(st_data["size"], (int, float)) and st_data["size"] > 0):
            raise GenerationSchemaError(f"Invalid 'size' in star type '{star_type.value}' in {path}: {st_data['size']}")
        probability = _validate_probability(st_data["probability"], path, star_type.value)
        star_types.append(StarTypeInfo(type=star_type, color=st_data["color"], size=float(st_data["size"]), probability=probability))
    return star_types


def validate_planet_type_schema(data: List[Dict[str, Any]], path: Path) -> Tuple[List[PlanetTypeInfo], Dict[PlanetType, List[ResourceTypeInfo]]]:
    """Validates the schema for planet_types.yaml."""
    if not (isinstance(data, list) and len(data) > 0):
        raise GenerationSchemaError(f"Top level of {path} must be a non-empty list of planet types.")

    planet_types: List[PlanetTypeInfo] = []
    planet_resources: Dict[PlanetType, List[ResourceTypeInfo]] = {}
    for pt_data in data:
        for key in ["type", "probability", "resources"]:
            if key not in pt_data:
                raise GenerationSchemaError(f"Missing key '{key}' in planet type '{pt_data.get('type', 'N/A')}' in {path}")
        planet_type = _parse_enum(PlanetType, pt_data["type"], path, "planet type")
        if planet_type in planet_resources:
            raise GenerationSchemaError(f"Duplicate planet type '{planet_type.value}' in {path}")
        probability = _validate_probability(pt_data["probability"], path, planet_type.value)

        if not (isinstance(pt_data["resources"], list) and len(pt_data["resources"]) > 0):
            raise GenerationSchemaError(f"Planet type '{planet_type.value}' in {path} must list at least one resource.")
        candidates = []
        for r_data in pt_data["resources"]:
            if not (isinstance(r_data, dict) and "type" in r_data and "probability" in r_data):
                raise GenerationSchemaError(f"Invalid resource entry in planet type '{planet_type.value}' in {path}: {r_data}")
            resource_type = _parse_enum(ResourceType, r_data["type"], path, "resource type")
            candidates.append(ResourceTypeInfo(type=resource_type, probability=_validate_probability(r_data["probability"], path, resource_type.value)))

        planet_types.append(PlanetTypeInfo(type=planet_type, probability=probability))
        planet_resources[planet_type] = candidates
    return planet_types, planet_resources


def validate_resource_yield_schema(data: Dict[str, Any], path: Path) -> ResourceYields:
    """Validates the schema for resources.yaml."""
    if not (isinstance(data, dict) and "default" in data and "categories" in data):
        raise GenerationSchemaError(f"'resource_yields' in {path} must define 'default' and 'categories'.")

    default = YieldRange(
        amount=_validate_range(data["default"].get("amount"), path, "default.amount"),
        regeneration=_validate_range(data["default"].get("regeneration"), path, "default.regeneration"),
    )
    yields = ResourceYields(default=default)
    for category in data["categories"]:
        for key in ["id", "types", "amount", "regeneration"]:
            if key not in category:
                raise GenerationSchemaError(f"Missing key '{key}' in resource category '{category.get('id', 'N/A')}' in {path}")
        yield_range = YieldRange(
            amount=_validate_range(category["amount"], path, f"{category['id']}.amount"),
            regeneration=_validate_range(category["regeneration"], path, f"{category['id']}.regeneration"),
        )
        for type_str in category["types"]:
            resource_type = _parse_enum(ResourceType, type_str, path, "resource type")
            if resource_type in yields.by_type:
                raise GenerationSchemaError(f"Resource '{resource_type.value}' belongs to more than one category in {path}")
            yields.by_type[resource_type] = yield_range
            yields.category_of[resource_type] = category["id"]
    return yields


def validate_name_schema(data: Dict[str, Any], path: Path) -> NameParts:
    """Validates the schema for names.yaml."""
    for key in ["star_names", "catalog_names", "planet_letters"]:
        if key not in data:
            raise GenerationSchemaError(f"Missing key '{key}' in {path}")

    star_names = data["star_names"]
    for key in ["prefix_chance", "suffix_chance"]:
        chance = star_names.get(key)
        if not (isinstance(chance, (int, float)) and 0.0 <= chance <= 1.0):
            raise GenerationSchemaError(f"Invalid '{key}' in {path}: {chance}")

    catalog_names: Dict[StarType, Dict[str, List[str]]] = {}
    for type_str, parts in data["catalog_names"].items():
        star_type = _parse_enum(StarType, type_str, path, "star type")
        catalog_names[star_type] = {
            part: _validate_word_list(parts.get(part), path, f"catalog_names.{type_str}.{part}")
            for part in ("prefixes", "roots", "suffixes")
        }

    return NameParts(
        star_prefixes=_validate_word_list(star_names.get("prefixes"), path, "star_names.prefixes"),
        star_roots=_validate_word_list(star_names.get("roots"), path, "star_names.roots"),
        star_suffixes=_validate_word_list(star_names.get("suffixes"), path, "star_names.suffixes"),
        prefix_chance=float(star_names["prefix_chance"]),
        suffix_chance=float(star_names["suffix_chance"]),
        catalog_names=catalog_names,
        planet_letters=_validate_word_list(data["planet_letters"], path, "planet_letters"),
    )


def validate_faction_schema(data: Dict[str, Any], path: Path) -> FactionTables:
    """Validates the schema for factions.yaml."""
    for key in ["colors", "base_trait_range", "archetypes"]:
        if key not in data:
            raise GenerationSchemaError(f"Missing key '{key}' in {path}")

    colors = _validate_word_list(data["colors"], path, "colors")
    trait_range = data["base_trait_range"]
    if not (isinstance(trait_range, list) and len(trait_range) == 2 and all(isinstance(x, (int, float)) and 0.0 <= x <= 1.0 for x in trait_range) and trait_range[0] <= trait_range[1]):
        raise GenerationSchemaError(f"Invalid 'base_trait_range' in {path}: {trait_range}")

    if not (isinstance(data["archetypes"], dict) and len(data["archetypes"]) > 0):
        raise GenerationSchemaError(f"'archetypes' in {path} must be a non-empty mapping.")
    archetypes: Dict[str, ArchetypeTable] = {}
    for archetype, a_data in data["archetypes"].items():
        adjustments = a_data.get("trait_adjustments", {}) or {}
        for trait, delta in adjustments.items():
            if trait not in TRAIT_NAMES:
                raise GenerationSchemaError(f"Unknown trait '{trait}' in archetype '{archetype}' in {path}")
            if not isinstance(delta, (int, float)):
                raise GenerationSchemaError(f"Invalid adjustment for '{trait}' in archetype '{archetype}' in {path}: {delta}")
        archetypes[archetype] = ArchetypeTable(
            prefixes=_validate_word_list(a_data.get("prefixes"), path, f"{archetype}.prefixes"),
            suffixes=_validate_word_list(a_data.get("suffixes"), path, f"{archetype}.suffixes"),
            trait_adjustments={trait: float(delta) for trait, delta in adjustments.items()},
        )

    return FactionTables(colors=colors, base_trait_range=(float(trait_range[0]), float(trait_range[1])), archetypes=archetypes)


def load_galaxy_config(path: Path = DATA_PATH / "galaxy.yaml") -> GalaxyConfig:
    """Loads and validates the galaxy shape settings from a YAML file."""
    data = _read_yaml(path)
    if "galaxy" not in data:
        raise GenerationSchemaError(f"Missing 'galaxy' key in {path}")
    return validate_galaxy_config(data["galaxy"], path)


def load_star_types(path: Path) -> List[StarTypeInfo]:
    """Loads and validates star types from a YAML file."""
    data = _read_yaml(path)
    if "star_types" not in data:
        raise GenerationSchemaError(f"Missing 'star_types' key in {path}")
    return validate_star_type_schema(data["star_types"], path)


def load_planet_types(path: Path) -> Tuple[List[PlanetTypeInfo], Dict[PlanetType, List[ResourceTypeInfo]]]:
    """Loads and validates planet types and their resource candidate tables from a YAML file."""
    data = _read_yaml(path)
    if "planet_types" not in data:
        raise GenerationSchemaError(f"Missing 'planet_types' key in {path}")
    return validate_planet_type_schema(data["planet_types"], path)


def load_resource_yields(path: Path) -> ResourceYields:
    """Loads and validates resource amount/regeneration ranges from a YAML file."""
    data = _read_yaml(path)
    if "resource_yields" not in data:
        raise GenerationSchemaError(f"Missing 'resource_yields' key in {path}")
    return validate_resource_yield_schema(data["resource_yields"], path)


def load_name_parts(path: Path) -> NameParts:
    """Loads and validates star and planet naming components from a YAML file."""
    return validate_name_schema(_read_yaml(path), path)


def load_faction_tables(path: Path) -> FactionTables:
    """Loads and validates faction palettes, archetype names and trait adjustments from a YAML file."""
    return validate_faction_schema(_read_yaml(path), path)


def load_generation_tables(data_dir: Path = DATA_PATH) -> GenerationTables:
    """Loads every generation table from a data directory."""
    planet_types, planet_resources = load_planet_types(data_dir / "planet_types.yaml")
    return GenerationTables(
        star_types=load_star_types(data_dir / "star_types.yaml"),
        planet_types=planet_types,
        planet_resources=planet_resources,
        resource_yields=load_resource_yields(data_dir / "resources.yaml"),
        names=load_name_parts(data_dir / "names.yaml"),
        factions=load_faction_tables(data_dir / "factions.yaml"),
    )


_default_tables: Optional[GenerationTables] = None
_default_config: Optional[GalaxyConfig] = None


def get_default_tables() -> GenerationTables:
    """Returns the packaged generation tables, loading them on first use."""
    global _default_tables
    if _default_tables is None:
        _default_tables = load_generation_tables(DATA_PATH)
    return _default_tables


def get_default_config() -> GalaxyConfig:
    """Returns the packaged galaxy settings, loading them on first use."""
    global _default_config
    if _default_config is None:
        _default_config = load_galaxy_config(DATA_PATH / "galaxy.yaml")
    return _default_config
