import random
import uuid
from typing import NewType

StarId = NewType('StarId', str)
SystemId = NewType('SystemId', str)
PlanetId = NewType('PlanetId', str)
LaneId = NewType('LaneId', str)
FactionId = NewType('FactionId', str)
PatchId = NewType('PatchId', str)


def new_id(rng: random.Random) -> str:
    """Mints a UUID4 string from the given random source, so seeded runs repeat ids exactly."""
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))
