import dataclasses
import importlib

import pytest

from starforge.generation.load import get_default_config


def _reset_visualizer_state():
    vis = importlib.import_module("visualizer.app")
    if vis.controller is not None:
        vis.controller.wait(timeout=120)
    vis.controller = None
    vis.galaxy_config = dataclasses.replace(get_default_config(), max_stars=80)
    return vis


@pytest.fixture
def vis():
    module = _reset_visualizer_state()
    yield module
    if module.controller is not None:
        module.controller.wait(timeout=120)


def _ready_client(vis):
    client = vis.app.test_client()
    resp = client.get("/status")
    assert resp.status_code == 200
    assert vis.controller.wait(timeout=120)
    return client


def test_first_request_starts_generation(vis):
    client = vis.app.test_client()
    resp = client.get("/status")
    assert resp.status_code == 200
    assert vis.controller is not None
    vis.controller.wait(timeout=120)

    status = client.get("/status").get_json()
    assert status["running"] is False
    assert status["generation"] == 1
    assert status["seed"] == vis.DEFAULT_SEED
    assert status["error"] is None


def test_galaxy_endpoint(vis):
    client = _ready_client(vis)
    resp = client.get("/galaxy")
    assert resp.status_code == 200
    payload = resp.get_json()
    assert payload["seed"] == vis.DEFAULT_SEED
    assert payload["stars"][0]["type"] == "BLACK_HOLE"
    assert len(payload["hyperspace_lanes"]) >= len(payload["stars"]) - 1
    assert payload["starting_star_id"] in {star["id"] for star in payload["stars"]}


def test_factions_endpoint(vis):
    client = _ready_client(vis)
    payload = client.get("/factions").get_json()
    assert len(payload["factions"]) == 3
    for faction in payload["factions"]:
        assert faction["home_system_id"] in faction["controlled_systems"]


def test_start_and_system_endpoints(vis):
    client = _ready_client(vis)
    start = client.get("/start").get_json()
    assert start["tier"] in ("strict", "relaxed", "fallback")
    assert start["star"]["type"] not in ("BLACK_HOLE", "NEUTRON", "PULSAR")

    resp = client.get(f"/systems/{start['star']['id']}")
    assert resp.status_code == 200
    system = resp.get_json()
    assert system["star_id"] == start["star"]["id"]
    assert system["planets"]
    assert isinstance(system["neighbors"], list) and system["neighbors"]


def test_unknown_system_is_404(vis):
    client = _ready_client(vis)
    assert client.get("/systems/not-a-star").status_code == 404


def test_buildings_endpoint(vis):
    client = vis.app.test_client()
    payload = client.get("/buildings").get_json()
    assert len(payload["buildings"]) == 5


def test_regenerate_with_seed(vis):
    client = _ready_client(vis)
    resp = client.post("/regenerate", json={"seed": 5})
    assert resp.status_code == 202
    assert resp.get_json()["seed"] == 5
    vis.controller.wait(timeout=120)

    status = client.get("/status").get_json()
    assert status["seed"] == 5
    assert status["generation"] == 2
    assert client.get("/galaxy").get_json()["seed"] == 5


def test_regenerate_rejects_bad_seed(vis):
    client = _ready_client(vis)
    resp = client.post("/regenerate", json={"seed": "abc"})
    assert resp.status_code == 400


def test_regenerate_while_running_is_rejected(vis):
    client = _ready_client(vis)
    with vis.controller.lock():
        first = client.post("/regenerate", json={"seed": 6})
        # The worker cannot publish its result while the lock is held
        second = client.post("/regenerate", json={"seed": 7})
    assert first.status_code == 202
    assert second.status_code == 409
