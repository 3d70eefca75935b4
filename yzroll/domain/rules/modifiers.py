"""Difficulty modifiers — turn a +/- modifier into dice added, removed or resized.

Each game family encodes difficulty differently:

- ladder (Twilight 2000): base dice step along d6 > d8 > d10 > d12.
- advantage (Blade Runner): add or drop a copy of the lowest die.
- paired (Mutant: Year Zero, Forbidden Lands): skill dice, with negative
  dice for the shortfall; skill and negative dice cancel out.
- floor (every other game): skill dice, never fewer than one.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from yzroll.domain.errors import ModifierRangeError
from yzroll.domain.games import ModifierRule

if TYPE_CHECKING:
    from yzroll.domain.die import YearZeroDie
    from yzroll.domain.roll import YearZeroRoll

logger = logging.getLogger("yzroll.modifiers")

LADDER = (6, 8, 10, 12)


def apply_modifier(roll: YearZeroRoll, delta: int) -> YearZeroRoll:
    """Mutate ``roll`` according to its game's modifier rule."""
    if not delta:
        return roll
    rule = roll.context.modifier_rule
    logger.debug("Applying modifier %+d to '%s' (%s)", delta, roll.formula, rule.value)
    if rule is ModifierRule.LADDER:
        faces = step_ladder(_base_faces(roll), delta)
        _rebuild_base(roll, faces)
    elif rule is ModifierRule.ADVANTAGE:
        faces = apply_advantage(_base_faces(roll), delta)
        _rebuild_base(roll, faces)
    elif rule is ModifierRule.PAIRED:
        _modify_paired(roll, delta, roll.context.negative_tag or "neg")
    else:
        _modify_floor(roll, delta)
    return roll


# --- Ladder & advantage ---


def _ladder_index(faces: int, delta: int) -> int:
    try:
        return LADDER.index(faces)
    except ValueError:
        raise ModifierRangeError(
            f"A d{faces} is out of the die size ladder {LADDER} (modifier: {delta})"
        ) from None


def step_ladder(dice: list[int], delta: int) -> list[int]:
    """Step die sizes along the ladder, one size per point of ``delta``.

    A bonus raises the smallest die; stepping past d12 keeps the d12 and adds
    a d6 while the pool has fewer than two dice. A malus lowers the largest
    die; stepping under d6 drops it, unless it is the last die.
    """
    dice = list(dice)
    top = len(LADDER) - 1
    while delta != 0:
        if delta > 0:
            delta -= 1
            if not dice:
                dice.append(LADDER[0])
                continue
            i = dice.index(min(dice))
            rung = _ladder_index(dice[i], delta) + 1
            if rung > top:
                if len(dice) < 2:
                    dice.append(LADDER[0])
                continue
        else:
            delta += 1
            if not dice:
                break
            i = dice.index(max(dice))
            rung = _ladder_index(dice[i], delta) - 1
            if rung < 0:
                if len(dice) > 1:
                    del dice[i]
                continue
        dice[i] = LADDER[rung]
    return dice


def apply_advantage(dice: list[int], delta: int) -> list[int]:
    """Advantage copies the lowest die, disadvantage drops it."""
    dice = list(dice)
    if not dice:
        return dice
    lowest = min(dice)
    if delta > 0:
        dice.append(lowest)
    elif delta < 0:
        dice.remove(lowest)
    return dice


def _base_faces(roll: YearZeroRoll) -> list[int]:
    return [t.faces for t in roll.get_terms("base") for _ in range(t.number)]


def _rebuild_base(roll: YearZeroRoll, faces: list[int]) -> None:
    """Replace every base term with one term per die in ``faces``.

    Rebuilt dice keep the flavor and push cap of the original terms: the
    first original term for the first die, and the second one for the
    following dice when the pool had several base terms.
    """
    originals: list[YearZeroDie] = roll.get_terms("base")
    roll.remove_dice(roll.count("base"), "base")

    several = len(originals) > 1 and len(faces) > 1
    for index, face in enumerate(faces):
        source = originals[min(index, 1 if several else 0)] if originals else None
        roll.add_dice(
            1,
            "base",
            faces=face,
            flavor=source.flavor if source else None,
            max_push=source.max_push if source else None,
        )


# --- Skill dice ---


def _modify_paired(roll: YearZeroRoll, delta: int, negative_tag: str) -> None:
    skill = roll.count("skill")
    shortfall = max(0, -delta - skill)
    roll.add_dice(delta, "skill")
    if shortfall > 0:
        roll.add_dice(shortfall, negative_tag)

    while roll.count("skill") > 0 and roll.count(negative_tag) > 0:
        roll.remove_dice(1, "skill")
        roll.remove_dice(1, negative_tag)


def _modify_floor(roll: YearZeroRoll, delta: int) -> None:
    if delta < 0:
        delta = max(1 - roll.count("skill"), delta)
    roll.add_dice(delta, "skill")
