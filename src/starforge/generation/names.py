import random
from typing import Optional

from .model import StarType, PlanetType
from .load import NameParts, get_default_tables


def _parts(names: Optional[NameParts]) -> NameParts:
    return names if names is not None else get_default_tables().names


def generate_star_name(star_type: StarType, rng: random.Random, names: Optional[NameParts] = None) -> str:
    """
    Generates a star name.

    Neutron stars and pulsars get catalog designations such as "PSR 1919+21". Every other
    type gets an optional Greek-letter prefix, a constellation root and an optional suffix.
    """
    names = _parts(names)
    catalog = names.catalog_names.get(star_type)
    if catalog is not None:
        prefix = rng.choice(catalog["prefixes"])
        root = rng.choice(catalog["roots"])
        suffix = rng.choice(catalog["suffixes"])
        return f"{prefix} {root}{suffix}"

    use_prefix = rng.random() < names.prefix_chance
    use_suffix = rng.random() < names.suffix_chance

    words = []
    if use_prefix:
        words.append(rng.choice(names.star_prefixes))
    words.append(rng.choice(names.star_roots))
    if use_suffix:
        words.append(rng.choice(names.star_suffixes))
    return " ".join(words)


def is_catalog_name(star_name: str, names: Optional[NameParts] = None) -> bool:
    """True when the name starts with a catalog prefix such as PSR or MSP."""
    first_word = star_name.split(" ", 1)[0]
    return first_word in _parts(names).catalog_prefixes


def generate_planet_name(planet_type: PlanetType, star_name: str, index: int, names: Optional[NameParts] = None) -> str:
    """
    Names the index-th planet of a star.

    Compact objects with catalog names get lowercase letters ("PSR 1919+21 a"). Other stars
    follow the exoplanet convention starting at "B", space-joined when the star name already
    has a space ("Alpha Centauri B") and hyphen-joined otherwise ("Vega-B"). The planet type
    does not change the name today.
    """
    names = _parts(names)
    if is_catalog_name(star_name, names):
        return f"{star_name} {chr(ord('a') + index)}"

    letters = names.planet_letters
    letter = letters[index] if index < len(letters) else letters[-1]
    if " " in star_name:
        return f"{star_name} {letter}"
    return f"{star_name}-{letter}"
