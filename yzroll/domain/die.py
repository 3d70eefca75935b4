"""Year Zero dice terms — a group of same-type dice and its roll history."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from yzroll.domain.dice_types import DieType
from yzroll.modules.dice import roller
from yzroll.modules.dice.roller import DieRoller


class ResultState(str, Enum):
    ACTIVE = "active"
    PUSHED = "pushed"  # replaced by a reroll, kept for the push matrix
    DISCARDED = "discarded"
    DISABLED = "disabled"


@dataclass
class DieResult:
    value: int
    state: ResultState = ResultState.ACTIVE
    index_push: int = 0
    index_result: int = 0
    hidden: bool = False

    @property
    def active(self) -> bool:
        return self.state is ResultState.ACTIVE

    @property
    def discarded(self) -> bool:
        return self.state in (ResultState.PUSHED, ResultState.DISCARDED)


class YearZeroDie:
    """A dice term: ``number`` dice of one ``DieType``.

    Every roll is appended to ``results``. A push never deletes a result; it
    marks the rerolled ones as pushed and rolls their replacements in the
    same column (``index_result``) of the next row (``index_push``).
    """

    def __init__(
        self,
        die_type: DieType,
        number: int = 1,
        max_push: int = 1,
        flavor: str | None = None,
        rng: DieRoller | None = None,
    ) -> None:
        self.die_type = die_type
        self.number = number
        self.max_push = max_push
        self.flavor = flavor
        self.rng = rng
        self.results: list[DieResult] = []

    def __repr__(self) -> str:
        return f"<YearZeroDie {self.expression} results={[r.value for r in self.results]}>"

    @property
    def key(self) -> str:
        return self.die_type.key

    @property
    def type(self) -> str:
        return self.die_type.type_tag

    @property
    def denomination(self) -> str:
        return self.die_type.denomination

    @property
    def faces(self) -> int:
        return self.die_type.faces

    @property
    def evaluated(self) -> bool:
        return bool(self.results)

    @property
    def push_count(self) -> int:
        return max((r.index_push for r in self.results), default=0)

    @property
    def pushed(self) -> bool:
        return self.push_count > 0

    @property
    def pushable(self) -> bool:
        if self.push_count >= self.max_push:
            return False
        return any(
            r.active and not self.die_type.is_locked(r.value) for r in self.results
        )

    @property
    def values(self) -> list[int]:
        return [r.value for r in self.results if r.active]

    @property
    def success(self) -> int | None:
        """Successes rolled, negative for negative dice. None until rolled."""
        if not self.evaluated:
            return None
        total = sum(self.die_type.successes(value) for value in self.values)
        return -total if self.type == "neg" else total

    @property
    def failure(self) -> int | None:
        """Banes (ones) rolled. None until rolled."""
        if not self.evaluated:
            return None
        return self.count(1)

    @property
    def expression(self) -> str:
        expr = f"{self.number}d{self.denomination}"
        if self.max_push == 0:
            expr += "np"
        elif self.max_push > 1:
            expr += f"p{self.max_push}"
        if self.flavor:
            expr += f"[{self.flavor}]"
        return expr

    def count(self, value: int) -> int:
        return self.values.count(value)

    # --- Rolling ---

    def roll(
        self, index_result: int | None = None, index_push: int | None = None
    ) -> DieResult:
        """Roll one more die and append it to the history."""
        rng = self.rng or roller.roll_die
        if index_result is None:
            index_result = 1 + max((r.index_result for r in self.results), default=-1)
        if index_push is None:
            index_push = self.push_count
        result = DieResult(
            value=rng(self.faces),
            index_push=index_push,
            index_result=index_result,
        )
        self.results.append(result)
        return result

    def evaluate(self, index_push: int | None = None) -> YearZeroDie:
        if not self.evaluated:
            for _ in range(self.number):
                self.roll(index_push=index_push)
        return self

    def push(self, index_push: int | None = None) -> YearZeroDie:
        """Reroll every active die that does not show a locked value.

        Rerolls go in row ``index_push``, by default the row after this
        term's last push.
        """
        if not self.pushable:
            return self
        if index_push is None:
            index_push = self.push_count + 1
        rerolled = []
        for r in self.results:
            if not r.active:
                continue
            r.hidden = True
            if not self.die_type.is_locked(r.value):
                r.state = ResultState.PUSHED
                rerolled.append(r.index_result)

        for index_result in rerolled:
            self.roll(index_result=index_result, index_push=index_push)
        return self

    def push_matrix(self, rows: int | None = None) -> list[list[DieResult | None]]:
        """Results laid out as push index (rows) by result index (columns)."""
        if rows is None:
            rows = self.push_count + 1
        cols = max(
            self.number, 1 + max((r.index_result for r in self.results), default=-1)
        )
        matrix: list[list[DieResult | None]] = [[None] * cols for _ in range(rows)]
        for r in self.results:
            if r.index_push < rows:
                matrix[r.index_push][r.index_result] = r
        return matrix
