import pytest

from starforge.core.ids import FactionId, LaneId, StarId
from starforge.core.state import GalaxyState
from starforge.factions.model import Faction, FactionTraits, FactionType
from starforge.generation.model import Galaxy, HyperspaceLane


@pytest.fixture
def state(make_system):
    systems = [make_system(name, i * 100.0, 0.0) for i, name in enumerate(["a", "b", "c", "d"])]
    lanes = [
        HyperspaceLane(id=LaneId("l1"), from_star_id=StarId("a"), to_star_id=StarId("b"), distance=100.0),
        HyperspaceLane(id=LaneId("l2"), from_star_id=StarId("b"), to_star_id=StarId("c"), distance=100.0),
        HyperspaceLane(id=LaneId("l3"), from_star_id=StarId("c"), to_star_id=StarId("d"), distance=100.0),
    ]
    galaxy = Galaxy(stars=[s.star for s in systems], star_systems=systems, hyperspace_lanes=lanes)
    faction = Faction(
        id=FactionId("f1"),
        name="Nova Corp",
        type=FactionType.CORPORATE,
        traits=FactionTraits(),
        color="#FFD700",
        home_system_id=StarId("a"),
        controlled_systems={StarId("b")},
    )
    return GalaxyState.from_galaxy(galaxy, [faction], seed=42)


def test_from_galaxy_indexes_everything(state):
    assert state.seed == 42
    assert set(state.stars) == {"a", "b", "c", "d"}
    assert len(state.systems) == 4
    assert len(state.lanes) == 3
    assert set(state.factions) == {"f1"}


def test_neighbors_and_lanes(state):
    assert sorted(state.neighbors(StarId("b"))) == ["a", "c"]
    assert state.neighbors(StarId("d")) == ["c"]
    assert state.neighbors(StarId("unknown")) == []
    assert {lane.id for lane in state.lanes_from(StarId("c"))} == {"l2", "l3"}


def test_system_for_star(state):
    assert state.system_for_star(StarId("c")).star.id == "c"
    assert state.system_for_star(StarId("unknown")) is None


def test_controlling_faction(state):
    assert state.controlling_faction(StarId("a")).id == "f1"
    assert state.controlling_faction(StarId("b")).id == "f1"
    assert state.controlling_faction(StarId("c")) is None
    assert sorted(state.unclaimed_star_ids()) == ["c", "d"]


def test_rebuild_adjacency_after_adding_lane(state):
    state.lanes[LaneId("l4")] = HyperspaceLane(id=LaneId("l4"), from_star_id=StarId("a"), to_star_id=StarId("d"), distance=300.0)
    state.rebuild_adjacency()
    assert sorted(state.neighbors(StarId("a"))) == ["b", "d"]


def test_lane_other_end(state):
    lane = state.lanes[LaneId("l1")]
    assert lane.connects(StarId("a"))
    assert lane.other_end(StarId("a")) == "b"
    assert lane.other_end(StarId("b")) == "a"
    with pytest.raises(ValueError):
        lane.other_end(StarId("c"))


def test_empty_state():
    state = GalaxyState()
    assert state.neighbors(StarId("a")) == []
    assert state.unclaimed_star_ids() == []
