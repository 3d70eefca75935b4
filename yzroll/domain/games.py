"""Game registry — binds die types to a Year Zero game variant."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from yzroll.domain import dice_types
from yzroll.domain.dice_types import DieType
from yzroll.domain.errors import DieTypeError, GameTypeError

logger = logging.getLogger("yzroll.games")

BANABLE_TYPES = ("base", "gear", "stress", "ammo")


class ModifierRule(str, Enum):
    LADDER = "ladder"  # die sizes step along d6 > d8 > d10 > d12
    ADVANTAGE = "advantage"  # add or drop the lowest die
    PAIRED = "paired"  # skill dice cancel out negative dice
    FLOOR = "floor"  # skill dice, never fewer than one


@dataclass(frozen=True)
class GameContext:
    """Everything a roll needs to know about the game it belongs to."""

    id: str
    title: str
    die_keys: tuple[str, ...]
    modifier_rule: ModifierRule = ModifierRule.FLOOR
    negative_tag: str | None = None
    fallback_die: str = "skill"
    banable_types: tuple[str, ...] = BANABLE_TYPES

    @property
    def die_types(self) -> list[DieType]:
        return [dice_types.get_die_type(key) for key in self.die_keys]

    def get_die_type(self, die: str) -> DieType:
        """Resolve a die by catalog key, then by formula denomination."""
        if die in self.die_keys:
            return dice_types.get_die_type(die)
        for die_type in self.die_types:
            if die_type.denomination == die:
                return die_type
        raise DieTypeError(die, self.die_keys)

    def find_by_denomination(self, denomination: str) -> DieType:
        for die_type in self.die_types:
            if die_type.denomination == denomination:
                return die_type
        raise DieTypeError(
            denomination, [die_type.denomination for die_type in self.die_types]
        )

    def find_die_type(self, type_tag: str, faces: int = 6) -> DieType:
        """Find the game's die with a given tag and face count."""
        for die_type in self.die_types:
            if die_type.type_tag == type_tag and die_type.faces == faces:
                return die_type
        raise DieTypeError(
            f"{type_tag} (d{faces})",
            [f"{t.type_tag} (d{t.faces})" for t in self.die_types],
        )


GAMES: dict[str, GameContext] = {}


def register_game(context: GameContext) -> GameContext:
    """Register a game variant; every die it names must already exist."""
    for key in context.die_keys:
        dice_types.get_die_type(key)
    if context.fallback_die not in context.die_keys:
        raise DieTypeError(context.fallback_die, context.die_keys)
    if context.id in GAMES:
        logger.warning("Overwriting game '%s' registration", context.id)
    GAMES[context.id] = context
    logger.debug("Registered game '%s' with dice %s", context.id, context.die_keys)
    return context


def register_die_type(die_type: DieType) -> DieType:
    if die_type.key in dice_types.DIE_TYPES:
        logger.warning("Overwriting die type '%s' registration", die_type.key)
    dice_types.DIE_TYPES[die_type.key] = die_type
    return die_type


def get_game(game: str | GameContext) -> GameContext:
    if isinstance(game, GameContext):
        return game
    context = GAMES.get(game)
    if context is None:
        raise GameTypeError(game, GAMES)
    return context


def list_games() -> list[GameContext]:
    return list(GAMES.values())


register_game(GameContext(
    "myz", "Mutant: Year Zero", ("base", "skill", "gear", "neg"),
    ModifierRule.PAIRED, negative_tag="neg",
))
register_game(GameContext(
    "fbl", "Forbidden Lands",
    ("base", "skill", "gear", "neg", "artoD8", "artoD10", "artoD12"),
    ModifierRule.PAIRED, negative_tag="neg",
))
register_game(GameContext("alien", "Alien RPG", ("skill", "stress")))
register_game(GameContext("tales", "Tales From the Loop", ("skill",)))
register_game(GameContext("cor", "Coriolis: The Third Horizon", ("skill",)))
register_game(GameContext("vae", "Vaesen", ("skill",)))
register_game(GameContext(
    "t2k", "Twilight: 2000", ("a", "b", "c", "d", "ammo", "loc"),
    ModifierRule.LADDER, fallback_die="d",
))
register_game(GameContext(
    "br", "Blade Runner", ("brD12", "brD10", "brD8", "brD6"),
    ModifierRule.ADVANTAGE, fallback_die="brD6",
))
