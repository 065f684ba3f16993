import dataclasses
import logging

import pytest

from starforge.core.pipeline import generate_new_game
from starforge.generation.lane_gen import is_connected
from starforge.generation.load import get_default_config
from starforge.generation.model import EXOTIC_STAR_TYPES, StarType
from starforge.generation.sampling import calculate_distance
from starforge.io.export import to_dict
from starforge.placement.starting_system import MIN_DISTANCE_FROM_FACTIONS, RELAXED_DISTANCE_FACTOR


def test_same_seed_same_game(small_config):
    first = generate_new_game(seed=2024, config=small_config)
    second = generate_new_game(seed=2024, config=small_config)
    assert to_dict(first.state, first.starting_system) == to_dict(second.state, second.starting_system)


def test_different_seeds_differ(small_config):
    first = generate_new_game(seed=1, config=small_config)
    second = generate_new_game(seed=2, config=small_config)
    assert [s.position for s in first.state.stars.values()] != [s.position for s in second.state.stars.values()]


def test_seed_is_drawn_when_missing(small_config):
    game = generate_new_game(config=dataclasses.replace(small_config, max_stars=40))
    assert isinstance(game.state.seed, int)
    assert 0 <= game.state.seed <= 2**32 - 1


def test_generation_log_records_each_stage(small_config):
    game = generate_new_game(seed=5, config=small_config)
    assert [entry.type for entry in game.log.entries[:2]] == ["galaxy.stars", "galaxy.lanes"]
    assert game.log.of_type("galaxy.stars")[0].count == len(game.state.stars)
    assert game.log.of_type("galaxy.lanes")[0].details["components"] == 1

    territory = game.log.of_type("factions.territory")
    assert len(territory) == 3
    assert {entry.faction_id for entry in territory} == set(game.state.factions)

    start = game.log.of_type("start.selected")
    assert len(start) == 1
    assert start[0].star_id == game.starting_system.star.id
    assert start[0].details["tier"] in ("strict", "relaxed", "fallback")


def test_state_indexes_match_factions(small_config):
    game = generate_new_game(seed=9, config=small_config)
    state = game.state
    for faction in state.factions.values():
        for star_id in faction.controlled_systems:
            assert state.controlling_faction(star_id) is faction
    assert state.system_for_star(game.starting_system.star.id) is game.starting_system


def test_new_game_scenario():
    game = generate_new_game(seed=31337)
    state = game.state
    config = get_default_config()
    stars = list(state.stars.values())

    assert len(stars) >= 1
    center = stars[0]
    assert center.type == StarType.BLACK_HOLE
    assert center.position == config.center
    assert is_connected(stars, state.lanes.values())

    factions = list(state.factions.values())
    assert len(factions) == 3
    assert all(len(faction.controlled_systems) >= 1 for faction in factions)

    start = game.starting_system
    assert start.star.type not in EXOTIC_STAR_TYPES
    tier = game.log.of_type("start.selected")[0].details["tier"]
    controlled = [state.stars[star_id] for faction in factions for star_id in faction.controlled_systems]
    nearest = min(calculate_distance(start.star.position, star.position) for star in controlled)
    if tier == "strict":
        assert nearest >= MIN_DISTANCE_FROM_FACTIONS
        assert len(start.planets) >= 2
    elif tier == "relaxed":
        assert nearest >= MIN_DISTANCE_FROM_FACTIONS * RELAXED_DISTANCE_FACTOR


def test_pipeline_logs_progress(small_config, caplog):
    with caplog.at_level(logging.INFO, logger="starforge"):
        generate_new_game(seed=12, config=small_config)
    assert any("New game 12" in record.getMessage() for record in caplog.records)
