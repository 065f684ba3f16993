import random
from typing import Optional


def get_seeded_rng(seed: int) -> random.Random:
    """Returns a new random.Random instance seeded with the given integer."""
    return random.Random(seed)


def ensure_rng(rng: Optional[random.Random] = None) -> random.Random:
    """Returns the given source, or a fresh unseeded one when the caller has none."""
    if rng is None:
        return random.Random()
    return rng
