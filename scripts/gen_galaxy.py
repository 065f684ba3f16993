import argparse
import dataclasses
import logging
import sys
from pathlib import Path

# Add the source tree to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from starforge.core.pipeline import generate_new_game
from starforge.generation.load import load_galaxy_config
from starforge.io.export import save_to_json


def main():
    parser = argparse.ArgumentParser(description="Generate a Starforge galaxy.")
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for galaxy generation; drawn at random when omitted.",
    )
    parser.add_argument(
        "--out",
        type=str,
        default="galaxy_generated.json",
        help="Output path for the generated galaxy JSON file.",
    )
    parser.add_argument(
        "--max-stars",
        type=int,
        default=None,
        help="Override the star count from galaxy.yaml.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to an alternative galaxy.yaml.",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    config = load_galaxy_config(Path(args.config)) if args.config else load_galaxy_config()
    if args.max_stars is not None:
        if args.max_stars < 1:
            parser.error("--max-stars must be at least 1")
        config = dataclasses.replace(config, max_stars=args.max_stars)

    game = generate_new_game(seed=args.seed, config=config)

    save_to_json(game.state, args.out, starting_system=game.starting_system)
    print(f"Generated galaxy (seed {game.state.seed}) with {len(game.state.stars)} stars saved to '{args.out}'.")
    print(f"Starting system: {game.starting_system.star.name}")


if __name__ == "__main__":
    main()
