import sys
import logging
import threading
from pathlib import Path
from typing import Optional

# Add the source tree to the Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from flask import Flask, jsonify, request

from starforge.core.pipeline import NewGame, generate_new_game
from starforge.generation.buildings import load_building_catalog
from starforge.generation.load import GalaxyConfig
from starforge.io.export import catalog_to_dict, system_to_dict, to_dict

logger = logging.getLogger(__name__)

app = Flask(__name__)

DEFAULT_SEED = 40 # Fixed seed for consistent first generation

# Building definitions are static; load them once on startup
BUILDING_CATALOG = load_building_catalog()

# Global generation state; None until the first request arrives
galaxy_config: Optional[GalaxyConfig] = None
controller = None


class GenerationController:
    """
    Runs galaxy generation in a background thread and holds the latest finished game.

    Only one generation runs at a time and a running one cannot be cancelled; the
    previous game stays readable until the new one replaces it.
    """

    def __init__(self, config: Optional[GalaxyConfig] = None):
        self._lock = threading.RLock()
        self._thread: Optional[threading.Thread] = None
        self._config = config
        self._game: Optional[NewGame] = None
        self._error: Optional[str] = None
        self._pending_seed: Optional[int] = None
        self._generation_count = 0

    def lock(self):
        return self._lock

    def get_game(self) -> Optional[NewGame]:
        with self._lock:
            return self._game

    def error(self) -> Optional[str]:
        with self._lock:
            return self._error

    def is_running(self) -> bool:
        with self._lock:
            return self._thread is not None and self._thread.is_alive()

    def generation_count(self) -> int:
        with self._lock:
            return self._generation_count

    def start(self, seed: Optional[int] = None) -> bool:
        """Starts a generation; returns False when one is already running."""
        with self._lock:
            if self.is_running():
                return False
            self._pending_seed = seed
            self._error = None
            self._thread = threading.Thread(target=self._run, args=(seed,), daemon=True)
            self._thread.start()
            return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Blocks until the running generation finishes; True when nothing is running afterwards."""
        with self._lock:
            thread = self._thread
        if thread is not None:
            thread.join(timeout)
        return not self.is_running()

    def _run(self, seed: Optional[int]):
        try:
            game = generate_new_game(seed=seed, config=self._config)
        except Exception as exc:
            logger.exception("Galaxy generation failed for seed %s", seed)
            with self._lock:
                self._error = f"{type(exc).__name__}: {exc}"
            return
        with self._lock:
            self._game = game
            self._generation_count += 1
        logger.info("Galaxy generation %d finished (seed %d)", self._generation_count, game.state.seed)

    def status(self) -> dict:
        with self._lock:
            game = self._game
            return {
                "running": self.is_running(),
                "generation": self._generation_count,
                "seed": game.state.seed if game is not None else None,
                "pending_seed": self._pending_seed if self.is_running() else None,
                "error": self._error,
            }


def _ensure_controller():
    global controller
    if controller is None:
        controller = GenerationController(galaxy_config)
        controller.start(DEFAULT_SEED)
    return controller


def _game_or_error():
    """Returns (game, None) or (None, error response) while nothing has been generated yet."""
    game = controller.get_game()
    if game is not None:
        return game, None
    if controller.error() is not None:
        return None, (jsonify({"error": controller.error()}), 500)
    return None, (jsonify({"status": "generating"}), 503)


@app.before_request
def before_first_request():
    _ensure_controller()


@app.route('/status')
def get_status():
    return jsonify(controller.status())


@app.route('/galaxy')
def get_galaxy():
    game, error_response = _game_or_error()
    if error_response:
        return error_response
    data = to_dict(game.state, game.starting_system)
    return jsonify({
        "seed": data["seed"],
        "stars": data["stars"],
        "hyperspace_lanes": data["hyperspace_lanes"],
        "starting_star_id": data["starting_star_id"],
    })


@app.route('/factions')
def get_factions():
    game, error_response = _game_or_error()
    if error_response:
        return error_response
    return jsonify({"factions": to_dict(game.state)["factions"]})


@app.route('/start')
def get_start():
    game, error_response = _game_or_error()
    if error_response:
        return error_response
    system = game.starting_system
    tier_entries = game.log.of_type("start.selected")
    return jsonify({
        "star": {"id": system.star.id, "name": system.star.name, "type": system.star.type.value},
        "system": system_to_dict(system),
        "tier": tier_entries[-1].details.get("tier") if tier_entries else None,
    })


@app.route('/systems/<star_id>')
def get_system(star_id):
    game, error_response = _game_or_error()
    if error_response:
        return error_response
    state = game.state
    system = state.system_for_star(star_id)
    if system is None:
        return jsonify({"error": f"Unknown star '{star_id}'"}), 404

    owner = state.controlling_faction(star_id)
    payload = system_to_dict(system)
    payload["star_name"] = system.star.name
    payload["controlled_by"] = owner.id if owner is not None else None
    payload["neighbors"] = state.neighbors(star_id)
    return jsonify(payload)


@app.route('/buildings')
def get_buildings():
    return jsonify({"buildings": catalog_to_dict(BUILDING_CATALOG)})


@app.route('/regenerate', methods=['POST'])
def regenerate():
    data = request.get_json(silent=True) or {}
    seed = data.get("seed")
    if seed is not None:
        try:
            seed = int(seed)
        except (TypeError, ValueError):
            return jsonify({"error": "seed must be an integer"}), 400

    if not controller.start(seed):
        return jsonify({"error": "Generation already in progress"}), 409
    return jsonify({"status": "generating", "seed": seed}), 202


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True)
