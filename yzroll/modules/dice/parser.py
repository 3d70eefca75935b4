"""Year Zero formula parser — supports NdX, NdXp, NdXpN, NdXnp, NdX[flavor]."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass
class ParsedTerm:
    """One dice term of a Year Zero formula."""

    number: int
    denomination: str  # single letter or digits, e.g. "b", "s", "12"
    max_push: int | None = None  # None when the formula sets no push modifier
    flavor: str | None = None


_TERM_PATTERN = re.compile(
    r"\s*([+-])?\s*"  # joining operator
    r"(\d*)d([a-z]|\d+)"  # NdX
    r"(np|p\d*)?"  # optional push modifier
    r"(?:\[([^\]]*)\])?\s*",  # optional [flavor]
    re.IGNORECASE,
)


def parse_formula(formula: str) -> list[ParsedTerm]:
    """Parse a Year Zero formula into its dice terms.

    Supported term formats:
        NdX        - e.g. 3db (three base dice)
        dX         - e.g. ds (shorthand for 1dX)
        NdXp       - pushable once
        NdXpN      - pushable N times, e.g. 2dsp2
        NdXnp      - never pushable
        NdX[text]  - term flavor, e.g. 3db[Strength]

    Terms are joined with ``+`` or ``-``; the sign carries no meaning of its
    own since negative dice are negative by type.

    Raises:
        ValueError: If the formula cannot be parsed.
    """
    if not formula.strip():
        raise ValueError("Empty dice formula")

    terms: list[ParsedTerm] = []
    pos = 0
    while pos < len(formula):
        match = _TERM_PATTERN.match(formula, pos)
        if not match or (terms and match.group(1) is None):
            raise ValueError(f"Invalid dice formula: {formula}")
        pos = match.end()

        _, count_str, denomination, modifier, flavor = match.groups()
        number = int(count_str) if count_str else 1
        if number <= 0:
            raise ValueError(f"Dice term '{match.group(0).strip()}' must roll at least one die")

        max_push = None
        if modifier:
            modifier = modifier.lower()
            if modifier == "np":
                max_push = 0
            else:
                max_push = int(modifier[1:]) if len(modifier) > 1 else 1

        terms.append(ParsedTerm(
            number=number,
            denomination=denomination.lower(),
            max_push=max_push,
            flavor=flavor or None,
        ))
    return terms


def build_formula(expressions: Iterable[tuple[str, bool]]) -> str:
    """Join term expressions into a formula.

    ``expressions`` yields ``(expression, negative)`` pairs; negative terms
    are joined with ``-`` instead of ``+``.
    """
    out = ""
    for expression, negative in expressions:
        if out:
            out += " - " if negative else " + "
        out += expression
    return out
