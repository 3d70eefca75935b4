"""Die type catalog for Year Zero games.

Each kind of die is a plain ``DieType`` record: face count, formula
denomination, semantic tag, the faces that survive a push, and an optional
success table for dice that can score more than one success.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from yzroll.domain.errors import DieTypeError

_DENOMINATION_PATTERN = re.compile(r"^([a-z]|\d+)$")

TYPE_TAGS = ("base", "skill", "gear", "neg", "stress", "arto", "ammo", "loc")

ARTIFACT_SUCCESSES = {6: 1, 7: 1, 8: 2, 9: 2, 10: 3, 11: 3, 12: 4}
TWILIGHT_SUCCESSES = {6: 1, 7: 1, 8: 1, 9: 1, 10: 2, 11: 2, 12: 2}
LOCATION_SUCCESSES = {face: 0 for face in range(1, 7)}


@dataclass(frozen=True, eq=False)
class DieType:
    key: str
    type_tag: str
    denomination: str
    faces: int = 6
    locked_values: frozenset[int] = frozenset({6})
    success_table: Mapping[int, int] | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.type_tag not in TYPE_TAGS:
            raise ValueError(
                f"Invalid type tag '{self.type_tag}' for die '{self.key}'. "
                f"Allowed tags are: {', '.join(TYPE_TAGS)}."
            )
        if not _DENOMINATION_PATTERN.match(self.denomination):
            raise ValueError(
                f"Invalid denomination '{self.denomination}' for die '{self.key}'"
            )
        if not isinstance(self.faces, int) or self.faces < 2:
            raise ValueError(f"Die '{self.key}' needs at least 2 faces, got {self.faces}")
        object.__setattr__(self, "locked_values", frozenset(self.locked_values))

    def successes(self, value: int) -> int:
        """Successes scored by one face, before the negative-die sign flip."""
        if self.success_table is not None:
            return self.success_table.get(value, 0)
        return 1 if value >= 6 else 0

    def is_locked(self, value: int) -> bool:
        return value in self.locked_values


def _locked_from_six(faces: int, *extra: int) -> frozenset[int]:
    return frozenset(range(6, faces + 1)) | frozenset(extra)


DIE_TYPES: dict[str, DieType] = {}


def _register(die_types: Iterable[DieType]) -> None:
    for die_type in die_types:
        DIE_TYPES[die_type.key] = die_type


_register([
    # Core Year Zero dice
    DieType("base", "base", "b", 6, frozenset({1, 6})),
    DieType("skill", "skill", "s", 6, frozenset({6})),
    DieType("gear", "gear", "g", 6, frozenset({1, 6})),
    DieType("neg", "neg", "n", 6, frozenset({6})),
    DieType("stress", "stress", "z", 6, frozenset({1, 6})),
    # Forbidden Lands artifact dice
    DieType("artoD8", "arto", "8", 8, _locked_from_six(8), ARTIFACT_SUCCESSES),
    DieType("artoD10", "arto", "10", 10, _locked_from_six(10), ARTIFACT_SUCCESSES),
    DieType("artoD12", "arto", "12", 12, _locked_from_six(12), ARTIFACT_SUCCESSES),
    # Twilight 2000
    DieType("a", "base", "12", 12, _locked_from_six(12, 1), TWILIGHT_SUCCESSES),
    DieType("b", "base", "10", 10, _locked_from_six(10, 1), TWILIGHT_SUCCESSES),
    DieType("c", "base", "8", 8, _locked_from_six(8, 1), TWILIGHT_SUCCESSES),
    DieType("d", "base", "6", 6, _locked_from_six(6, 1), TWILIGHT_SUCCESSES),
    DieType("ammo", "ammo", "m", 6, frozenset({1, 6})),
    DieType("loc", "loc", "l", 6, frozenset(range(1, 7)), LOCATION_SUCCESSES),
    # Blade Runner
    DieType("brD12", "base", "12", 12, frozenset({1, 10, 11, 12}), TWILIGHT_SUCCESSES),
    DieType("brD10", "base", "10", 10, frozenset({1, 10}), TWILIGHT_SUCCESSES),
    DieType("brD8", "base", "8", 8, frozenset({1, 6, 7, 8}), TWILIGHT_SUCCESSES),
    DieType("brD6", "base", "6", 6, frozenset({1, 6}), TWILIGHT_SUCCESSES),
])


def get_die_type(key: str) -> DieType:
    """Look up a die type by its catalog key."""
    die_type = DIE_TYPES.get(key)
    if die_type is None:
        raise DieTypeError(key, DIE_TYPES)
    return die_type
