"""Year Zero roll — a dice pool that can be pushed and modified."""

from __future__ import annotations

import logging
import operator
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass

from yzroll.domain.dice_types import DieType
from yzroll.domain.die import DieResult, ResultState, YearZeroDie
from yzroll.domain.games import GameContext, get_game
from yzroll.domain.rules import modifiers
from yzroll.infra.config import settings
from yzroll.models.result import DieResultData, DieTermData, RollData
from yzroll.modules.dice import roller
from yzroll.modules.dice.parser import build_formula, parse_formula
from yzroll.modules.dice.roller import DieRoller

logger = logging.getLogger("yzroll.roll")

_COMPARISONS = {
    "=": operator.eq,
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
}


@dataclass
class DiceEntry:
    """One line of a dice manifest: which die, how many, and term options."""

    die: str  # catalog key or denomination
    quantity: int
    flavor: str | None = None
    max_push: int | None = None


@dataclass
class TermQuery:
    """Term search; fields left to None match anything."""

    type: str | None = None
    faces: int | None = None
    number: int | None = None
    flavor: str | None = None

    def matches(self, term: YearZeroDie) -> bool:
        if self.type is not None and term.type != self.type:
            return False
        if self.faces is not None and term.faces != self.faces:
            return False
        if self.number is not None and term.number != self.number:
            return False
        if self.flavor is not None and term.flavor != self.flavor:
            return False
        return True


class YearZeroRoll:
    """A pool of Year Zero dice terms for one resolution attempt.

    The roll goes ``unrolled -> evaluated`` on ``evaluate()``; ``push()``
    rerolls the eligible dice and leaves it evaluated again. ``add_dice``,
    ``remove_dice`` and ``modify`` change the pool in place, rolling any new
    dice straight away once the roll has been evaluated.
    """

    def __init__(
        self,
        game: str | GameContext | None = None,
        terms: Iterable[YearZeroDie] | None = None,
        *,
        name: str | None = None,
        max_push: int | None = None,
        rng: DieRoller | None = None,
    ) -> None:
        self.context = get_game(game if game is not None else settings.default_game)
        self.name = name
        self.rng = rng if rng is not None else roller.make_roller(settings.rng_seed)
        self.terms: list[YearZeroDie] = []
        self._max_push = settings.default_max_push if max_push is None else max_push
        self._evaluated = False
        for term in terms or []:
            self._append_term(term)

    def __repr__(self) -> str:
        return f"<YearZeroRoll {self.game} '{self.formula}' successes={self.success_count}>"

    # --- Construction ---

    @classmethod
    def forge(
        cls,
        dice: Mapping[str, int] | Iterable[DiceEntry],
        *,
        game: str | GameContext | None = None,
        name: str | None = None,
        max_push: int | None = None,
        rng: DieRoller | None = None,
    ) -> YearZeroRoll:
        """Build an unrolled roll from dice quantities.

        ``dice`` is either ``{"base": 3, "skill": 2}`` or a list of
        ``DiceEntry``. Dice are named by catalog key or by denomination.
        """
        roll = cls(game, name=name, max_push=max_push, rng=rng)
        if isinstance(dice, Mapping):
            entries = [DiceEntry(die, quantity) for die, quantity in dice.items()]
        else:
            entries = list(dice)

        for entry in entries:
            if entry.quantity <= 0:
                continue
            die_type = roll.context.get_die_type(entry.die)
            roll._append_term(roll._new_term(die_type, entry.quantity, entry.flavor, entry.max_push))

        if not roll.terms:
            fallback = roll.context.get_die_type(roll.context.fallback_die)
            logger.warning(
                "Empty dice pool for game '%s', rolling one %s die instead",
                roll.game, fallback.key,
            )
            roll._append_term(roll._new_term(fallback, 1))
        return roll

    @classmethod
    def from_formula(
        cls,
        formula: str,
        *,
        game: str | GameContext | None = None,
        name: str | None = None,
        max_push: int | None = None,
        rng: DieRoller | None = None,
    ) -> YearZeroRoll:
        """Build an unrolled roll from a formula such as ``3db + 2ds - 1dn``."""
        roll = cls(game, name=name, max_push=max_push, rng=rng)
        for parsed in parse_formula(formula):
            die_type = roll.context.find_by_denomination(parsed.denomination)
            roll._append_term(
                roll._new_term(die_type, parsed.number, parsed.flavor, parsed.max_push)
            )
        return roll

    @classmethod
    def from_data(cls, data: RollData | dict, rng: DieRoller | None = None) -> YearZeroRoll:
        if isinstance(data, dict):
            data = RollData.model_validate(data)
        roll = cls(data.game, name=data.name, max_push=data.max_push, rng=rng)
        for term_data in data.terms:
            term = YearZeroDie(
                roll.context.get_die_type(term_data.die),
                number=term_data.number,
                max_push=term_data.max_push,
                flavor=term_data.flavor,
            )
            term.results = [DieResult(**r.model_dump()) for r in term_data.results]
            roll._append_term(term)
        roll._evaluated = data.evaluated
        return roll

    def to_data(self) -> RollData:
        return RollData(
            game=self.game,
            name=self.name,
            max_push=self._max_push,
            evaluated=self._evaluated,
            terms=[
                DieTermData(
                    die=t.key,
                    number=t.number,
                    max_push=t.max_push,
                    flavor=t.flavor,
                    results=[DieResultData(**asdict(r)) for r in t.results],
                )
                for t in self.terms
            ],
        )

    def duplicate(self) -> YearZeroRoll:
        """Independent copy of this roll, histories included."""
        return type(self).from_data(self.to_data(), rng=self.rng)

    def _new_term(
        self,
        die_type: DieType,
        number: int,
        flavor: str | None = None,
        max_push: int | None = None,
    ) -> YearZeroDie:
        if max_push is None:
            max_push = self.max_push if self.terms else self._max_push
        return YearZeroDie(die_type, number, max_push=max_push, flavor=flavor, rng=self.rng)

    def _append_term(self, term: YearZeroDie) -> None:
        if term.rng is None:
            term.rng = self.rng
        self.terms.append(term)

    # --- State ---

    @property
    def game(self) -> str:
        return self.context.id

    @property
    def evaluated(self) -> bool:
        return self._evaluated

    @property
    def max_push(self) -> int:
        return max((t.max_push for t in self.terms), default=0)

    @max_push.setter
    def max_push(self, n: int) -> None:
        self._max_push = n
        for t in self.terms:
            t.max_push = n

    @property
    def size(self) -> int:
        return sum(t.number for t in self.terms)

    @property
    def push_count(self) -> int:
        return max((t.push_count for t in self.terms), default=0)

    @property
    def pushed(self) -> bool:
        return self.push_count > 0

    @property
    def pushable(self) -> bool:
        return self.push_count < self.max_push and any(t.pushable for t in self.terms)

    @property
    def formula(self) -> str:
        return build_formula((t.expression, t.type == "neg") for t in self.terms)

    # --- Evaluation ---

    def evaluate(self) -> YearZeroRoll:
        self._evaluate_pending()
        self._evaluated = True
        return self

    def _evaluate_pending(self) -> None:
        """Roll the terms that have never been rolled, in the current push row."""
        index_push = self.push_count
        for t in self.terms:
            if not t.evaluated:
                t.evaluate(index_push)

    def _reroll_eligible(self) -> None:
        index_push = self.push_count + 1
        for t in self.terms:
            t.push(index_push)

    def push(self) -> YearZeroRoll:
        """Push the roll: reroll every die not showing a locked value."""
        if not self._evaluated:
            self.evaluate()
        if not self.pushable:
            logger.debug("Roll '%s' cannot be pushed", self.formula)
            return self
        self._reroll_eligible()
        self._evaluate_pending()
        logger.debug("Pushed roll '%s' (push %d)", self.formula, self.push_count)
        return self

    def modify(self, delta: int) -> YearZeroRoll:
        """Apply a difficulty modifier (positive is easier)."""
        if not delta:
            return self
        modifiers.apply_modifier(self, delta)
        if self._evaluated:
            self._evaluate_pending()
        return self

    # --- Pool utilities ---

    def get_terms(self, search: str | TermQuery) -> list[YearZeroDie]:
        query = TermQuery(type=search) if isinstance(search, str) else search
        return [t for t in self.terms if query.matches(t)]

    def count(self, type_tag: str, seed: int | None = None, comparison: str = "=") -> int:
        """Count dice of a type, or their active faces matching ``seed``."""
        terms = self.get_terms(type_tag)
        if seed is None:
            return sum(t.number for t in terms)
        compare = _COMPARISONS.get(comparison)
        if compare is None:
            raise ValueError(
                f"Invalid comparison '{comparison}'. Allowed are: {', '.join(_COMPARISONS)}"
            )
        return sum(1 for t in terms for value in t.values if compare(value, seed))

    def dice_quantities(self) -> dict[str, int]:
        quantities: dict[str, int] = {}
        for t in self.terms:
            quantities[t.key] = quantities.get(t.key, 0) + t.number
        return quantities

    def add_dice(
        self,
        quantity: int,
        type_tag: str,
        *,
        faces: int = 6,
        value: int | None = None,
        flavor: str | None = None,
        max_push: int | None = None,
    ) -> YearZeroRoll:
        """Add dice to the pool; a negative quantity removes dice instead.

        Dice join the first term with the same type and faces, or a new term.
        When the roll is already evaluated the new dice are rolled at once,
        and ``value`` (if given) replaces what they rolled.
        """
        if not quantity:
            return self
        query = TermQuery(type=type_tag, faces=faces, flavor=flavor)
        if quantity < 0:
            return self.remove_dice(-quantity, query)
        if value is not None:
            if not 1 <= value <= faces:
                raise ValueError(f"Preset value {value} is not a face of a d{faces}")
            if not self._evaluated:
                self.evaluate()

        matches = self.get_terms(query)
        if matches:
            term = matches[0]
            for _ in range(quantity):
                term.number += 1
                if self._evaluated:
                    result = term.roll(index_push=self.push_count)
                    if value is not None:
                        result.value = value
        else:
            die_type = self.context.find_die_type(type_tag, faces)
            term = self._new_term(die_type, quantity, flavor, max_push)
            if self._evaluated:
                term.evaluate(self.push_count)
                if value is not None:
                    for r in term.results:
                        r.value = value
            self._append_term(term)
        return self

    def remove_dice(
        self,
        quantity: int,
        search: str | TermQuery,
        *,
        discard: bool = False,
        disable: bool = False,
    ) -> YearZeroRoll:
        """Remove up to ``quantity`` dice matching ``search``.

        Stops quietly when no matching die is left. With ``discard`` or
        ``disable`` the rolled result is kept in the history but no longer
        counts.
        """
        for _ in range(quantity):
            matches = self.get_terms(search)
            if not matches:
                break
            term = matches[0]
            term.number -= 1
            if term.number <= 0:
                self.terms.remove(term)
            elif self._evaluated:
                result = next((r for r in term.results if r.active), None)
                if result is None:
                    break
                if discard:
                    result.state = ResultState.DISCARDED
                elif disable:
                    result.state = ResultState.DISABLED
                else:
                    term.results.remove(result)
        return self

    # --- Aggregates ---

    @property
    def success_count(self) -> int:
        return sum(t.success or 0 for t in self.terms)

    @property
    def bane_count(self) -> int:
        return sum(self.count(tag, 1) for tag in self.context.banable_types)

    @property
    def attribute_trauma(self) -> int:
        return self.count("base", 1)

    @property
    def gear_damage(self) -> int:
        return self.count("gear", 1)

    @property
    def stress(self) -> int:
        return self.count("stress")

    @property
    def panic(self) -> int:
        return self.count("stress", 1)

    @property
    def ammo_spent(self) -> int:
        return sum(sum(t.values) for t in self.get_terms("ammo"))

    @property
    def hit_count(self) -> int:
        return self.count("ammo", 6)

    @property
    def jam_count(self) -> int:
        n = self.count("ammo", 1)
        return n + self.attribute_trauma if n > 0 else 0

    @property
    def jammed(self) -> bool:
        return self.pushed and self.jam_count >= 2

    @property
    def base_success_qty(self) -> int:
        return self.success_count - self.hit_count

    @property
    def hit_locations(self) -> list[int]:
        return [value for t in self.get_terms("loc") for value in t.values]

    @property
    def best_hit_location(self) -> int | None:
        return max(self.hit_locations, default=None)

    @property
    def worst_hit_location(self) -> int | None:
        return min(self.hit_locations, default=None)
