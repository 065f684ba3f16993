from __future__ import annotations
import logging
import math
import random
from typing import List, Optional, Sequence, Set

from ..core.ids import FactionId, StarId, new_id
from ..core.rng import ensure_rng
from ..generation.load import FactionTables, GenerationTables, get_default_tables
from ..generation.model import Star
from ..generation.sampling import calculate_distance
from .model import Faction, FactionTraits, FactionType
from .territory import ClaimRegistry, distance_matrix, expand_faction_territory, target_territory_size
from .diplomacy import initialize_relations

logger = logging.getLogger(__name__)

FACTION_COUNT = 3
HOME_CANDIDATE_ATTEMPTS = 10


def generate_faction_name(faction_type: FactionType, rng: random.Random, tables: FactionTables) -> str:
    archetype = tables.archetypes[faction_type.value]
    return f"{rng.choice(archetype.prefixes)} {rng.choice(archetype.suffixes)}"


def generate_traits(faction_type: FactionType, rng: random.Random, tables: FactionTables) -> FactionTraits:
    """Base traits in the configured range, shifted by the archetype, then clamped to [0, 1]."""
    low, high = tables.base_trait_range
    traits = FactionTraits(
        expansionist=rng.uniform(low, high),
        diplomatic=rng.uniform(low, high),
        aggressive=rng.uniform(low, high),
        technological=rng.uniform(low, high),
        economic=rng.uniform(low, high),
    )
    traits.adjust(tables.archetypes[faction_type.value].trait_adjustments)
    traits.clamp()
    return traits


def choose_color(used_colors: Set[str], rng: random.Random, tables: FactionTables) -> str:
    """Random palette colour, preferring unused ones; repeats once the palette runs out."""
    palette = tables.colors
    color = rng.choice(palette)
    while color in used_colors and len(used_colors) < len(palette):
        color = rng.choice(palette)
    return color


def choose_home_star(stars: Sequence[Star], used: Set[StarId], rng: random.Random, attempts: int = HOME_CANDIDATE_ATTEMPTS) -> Star:
    """
    Picks a home star far from the homes already chosen.

    Samples a handful of random candidates (never the first star, which is the galactic
    centre) and keeps the unused one whose nearest existing home is farthest away.

    Raises:
        ValueError: if every candidate star is already used.
    """
    candidates = stars[1:]
    remaining = [star for star in candidates if star.id not in used]
    if not remaining:
        raise ValueError("No unused star left for a faction home system.")

    used_stars = [star for star in stars if star.id in used]
    best_star: Optional[Star] = None
    max_min_distance = -math.inf
    for _ in range(attempts):
        candidate = candidates[int(rng.random() * len(candidates))]
        if candidate.id in used:
            continue
        min_distance = min((calculate_distance(candidate.position, s.position) for s in used_stars), default=math.inf)
        if min_distance > max_min_distance:
            max_min_distance = min_distance
            best_star = candidate

    if best_star is None:
        best_star = rng.choice(remaining)
    return best_star


def generate_faction(faction_type: FactionType, home_star: Star, used_colors: Set[str], rng: random.Random, tables: FactionTables) -> Faction:
    color = choose_color(used_colors, rng, tables)
    return Faction(
        id=FactionId(new_id(rng)),
        name=generate_faction_name(faction_type, rng, tables),
        type=faction_type,
        traits=generate_traits(faction_type, rng, tables),
        color=color,
        home_system_id=home_star.id,
    )


def generate_initial_factions(
    stars: Sequence[Star],
    rng: Optional[random.Random] = None,
    tables: Optional[GenerationTables] = None,
    faction_count: int = FACTION_COUNT,
) -> List[Faction]:
    """
    Creates the starting factions, grows their territories and seeds their relations.

    Args:
        stars: All stars, with the galactic centre first (as generate_galaxy returns them).
        rng: Random source; a fresh unseeded one when omitted.
        tables: Generation tables; the packaged ones when omitted.
        faction_count: Number of factions to create.

    Returns:
        The factions in creation order. Territories are grown in that order, so earlier
        factions get first pick of contested stars.
    """
    rng = ensure_rng(rng)
    faction_tables = (tables or get_default_tables()).factions
    faction_types = list(FactionType)

    factions: List[Faction] = []
    used_colors: Set[str] = set()
    used_stars: Set[StarId] = set()
    for _ in range(faction_count):
        home_star = choose_home_star(stars, used_stars, rng)
        used_stars.add(home_star.id)

        faction_type = faction_types[int(rng.random() * len(faction_types))]
        faction = generate_faction(faction_type, home_star, used_colors, rng, faction_tables)
        used_colors.add(faction.color)
        factions.append(faction)

    # Every home is claimed before anyone expands
    registry = ClaimRegistry()
    for faction in factions:
        registry.claim(faction.home_system_id, faction.id)

    target_size = target_territory_size(stars)
    distances = distance_matrix(stars)
    for faction in factions:
        claimed = expand_faction_territory(faction, stars, registry, target_size, distances)
        logger.debug("Faction '%s' (%s) claimed %d stars around home %s", faction.name, faction.type.value, claimed, faction.home_system_id)

    initialize_relations(factions, stars)
    logger.info("Generated %d factions with target territory size %d", len(factions), target_size)
    return factions
