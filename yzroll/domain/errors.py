"""Error types raised by the resolution engine."""

from __future__ import annotations

from collections.abc import Iterable


class YearZeroError(ValueError):
    """Base class for configuration errors in the engine."""


class GameTypeError(YearZeroError):
    def __init__(self, game: object, allowed: Iterable[str]) -> None:
        self.game = game
        self.allowed = list(allowed)
        super().__init__(
            f'Unknown game: "{game}". Allowed games are: {", ".join(self.allowed)}.'
        )


class DieTypeError(YearZeroError):
    def __init__(self, die: object, allowed: Iterable[str]) -> None:
        self.die = die
        self.allowed = list(allowed)
        super().__init__(
            f'Unknown die type: "{die}". Allowed types are: {", ".join(self.allowed)}.'
        )


class ModifierRangeError(RuntimeError):
    """A die left the size ladder while resolving a difficulty modifier.

    This signals a broken invariant, not bad input.
    """
