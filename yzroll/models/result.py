"""Roll schemas — serialized state and read-only views of Year Zero rolls."""

from __future__ import annotations

from pydantic import BaseModel

from yzroll.domain.die import ResultState


class DieResultData(BaseModel):
    value: int
    state: ResultState = ResultState.ACTIVE
    index_push: int = 0
    index_result: int = 0
    hidden: bool = False


class DieTermData(BaseModel):
    die: str  # catalog key, e.g. "base", "artoD10", "brD6"
    number: int
    max_push: int = 1
    flavor: str | None = None
    results: list[DieResultData] = []


class RollData(BaseModel):
    """Complete state of a roll, enough to rebuild it with its history."""

    game: str
    name: str | None = None
    max_push: int = 1
    evaluated: bool = False
    terms: list[DieTermData] = []


class DieTermView(BaseModel):
    die: str
    type: str
    denomination: str
    faces: int
    number: int
    expression: str
    flavor: str | None = None
    max_push: int
    push_count: int
    pushable: bool
    success: int | None = None
    banes: int | None = None
    results: list[DieResultData] = []
    matrix: list[list[DieResultData | None]] = []


class RollView(BaseModel):
    roll_id: str
    game: str
    name: str | None = None
    formula: str
    evaluated: bool
    size: int
    max_push: int
    push_count: int
    pushed: bool
    pushable: bool
    success_count: int
    bane_count: int
    attribute_trauma: int
    gear_damage: int
    stress: int
    panic: int
    ammo_spent: int
    hit_count: int
    jam_count: int
    jammed: bool
    base_success_qty: int
    hit_locations: list[int] = []
    best_hit_location: int | None = None
    worst_hit_location: int | None = None
    terms: list[DieTermView] = []


class DieTypeView(BaseModel):
    key: str
    type: str
    denomination: str
    faces: int
    locked_values: list[int]
    success_table: dict[int, int] | None = None


class GameView(BaseModel):
    id: str
    title: str
    modifier_rule: str
    dice: list[str]
