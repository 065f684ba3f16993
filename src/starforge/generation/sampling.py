import math
import random
from typing import Callable, Sequence, TypeVar

from .model import Vector2D
from .load import GalaxyConfig

T = TypeVar("T")


def _probability_of(option) -> float:
    return option.probability


def weighted_choice(options: Sequence[T], rng: random.Random, weight: Callable[[T], float] = _probability_of) -> T:
    """
    Picks one option by walking the cumulative weights against a single uniform draw.

    Weights need not sum to 1. When the draw lands past the cumulative total the first
    option is returned.
    """
    if not options:
        raise ValueError("weighted_choice needs at least one option.")
    r = rng.random()
    cumulative = 0.0
    for option in options:
        cumulative += weight(option)
        if r <= cumulative:
            return option
    return options[0]


def calculate_distance(p1: Vector2D, p2: Vector2D) -> float:
    """Calculates the Euclidean distance between two 2D points."""
    return math.sqrt((p2.x - p1.x)**2 + (p2.y - p1.y)**2)


def spiral_position(rng: random.Random, config: GalaxyConfig) -> Vector2D:
    """
    Draws a star position with an exponential falloff from the centre, bent onto one of the spiral arms.

    Args:
        rng: Random source.
        config: Galaxy shape settings (radius, arms, tightness, falloff).

    Returns:
        A position in galaxy coordinates; the centre is at (radius, radius).
    """
    radius = config.radius
    while True:
        angle = rng.random() * 2 * math.pi
        raw_distance = rng.random() * radius

        density = math.exp(-config.density_dropoff * (raw_distance / radius)) * config.center_density_boost
        if rng.random() > density:
            continue

        arm_index = math.floor(rng.random() * config.spiral_arms)
        arm_offset = arm_index * config.arm_offset

        # Jitter grows towards the rim
        random_offset = (rng.random() - 0.5) * 0.3 * (raw_distance / radius)
        spiral_angle = angle + arm_offset + (raw_distance * config.spiral_tightness / radius) + random_offset

        return Vector2D(
            x=radius + raw_distance * math.cos(spiral_angle),
            y=radius + raw_distance * math.sin(spiral_angle),
        )


def disk_position(rng: random.Random, center: Vector2D, max_radius: float) -> Vector2D:
    """Uniform angle and uniform radius around a centre, so points bunch towards the middle."""
    angle = rng.random() * 2 * math.pi
    distance = rng.random() * max_radius
    return Vector2D(
        x=center.x + distance * math.cos(angle),
        y=center.y + distance * math.sin(angle),
    )
