"""Random roll primitive for Year Zero dice."""

from __future__ import annotations

import random
from collections.abc import Callable

# Takes a face count, returns a value in [1, faces].
DieRoller = Callable[[int], int]


def roll_die(faces: int) -> int:
    """Roll a single die with ``faces`` sides."""
    return random.randint(1, faces)


def make_roller(seed: int | None = None) -> DieRoller:
    """Return a roller backed by its own generator.

    With no seed the module-level ``roll_die`` is returned so that patching
    ``random.randint`` keeps working.
    """
    if seed is None:
        return roll_die
    rng = random.Random(seed)

    def _roll(faces: int) -> int:
        return rng.randint(1, faces)

    return _roll
