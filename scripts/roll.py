"""Roll a Year Zero dice pool from the command line.

Usage:
    python scripts/roll.py <game> <formula> [--push N] [--modify DELTA]

Examples:
    python scripts/roll.py myz "3db + 2ds + 1dg" --push 1
    python scripts/roll.py t2k "1d10 + 1d8" --modify 1
"""

from __future__ import annotations

import logging
import sys

from yzroll.domain.roll import YearZeroRoll
from yzroll.infra.config import settings


def _describe(roll: YearZeroRoll) -> str:
    lines = [f"{roll.game}: {roll.formula}"]
    for term in roll.terms:
        rows = term.push_matrix(roll.push_count + 1)
        history = " | ".join(
            " ".join(str(r.value) if r is not None else "-" for r in row) for row in rows
        )
        lines.append(f"  {term.expression:<12} {history}")
    lines.append(f"  successes={roll.success_count} banes={roll.bane_count} "
                 f"pushes={roll.push_count}/{roll.max_push}")
    return "\n".join(lines)


def main(argv: list[str]) -> int:
    if len(argv) < 2:
        print(__doc__)
        return 1
    game, formula, options = argv[0], argv[1], argv[2:]

    pushes, delta = 0, 0
    try:
        while options:
            flag, value = options[0], options[1]
            if flag == "--push":
                pushes = int(value)
            elif flag == "--modify":
                delta = int(value)
            else:
                raise ValueError(f"Unknown option: {flag}")
            options = options[2:]
    except (IndexError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    try:
        roll = YearZeroRoll.from_formula(formula, game=game)
        roll.modify(delta)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    roll.evaluate()
    for _ in range(pushes):
        if not roll.pushable:
            print("Roll cannot be pushed further.")
            break
        roll.push()
    print(_describe(roll))
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level.upper())
    sys.exit(main(sys.argv[1:]))
