"""Rolls API — create, push, modify and inspect Year Zero rolls."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from yzroll.domain.die import YearZeroDie
from yzroll.domain.roll import DiceEntry, TermQuery, YearZeroRoll
from yzroll.infra.cache import roll_cache
from yzroll.models.result import DieResultData, DieTermView, RollView

logger = logging.getLogger("yzroll.api")

router = APIRouter(prefix="/api/rolls", tags=["rolls"])


# --- Request schemas ---


class DiceEntryRequest(BaseModel):
    die: str
    quantity: int
    flavor: str | None = None
    max_push: int | None = Field(default=None, ge=0)


class CreateRollRequest(BaseModel):
    game: str | None = None
    name: str | None = None
    dice: dict[str, int] | None = None
    entries: list[DiceEntryRequest] | None = None
    formula: str | None = None
    max_push: int | None = Field(default=None, ge=0)
    evaluate: bool = True


class ModifyRequest(BaseModel):
    delta: int


class AddDiceRequest(BaseModel):
    quantity: int
    type: str
    faces: int = 6
    value: int | None = None
    flavor: str | None = None


class RemoveDiceRequest(BaseModel):
    quantity: int = Field(ge=0)
    type: str
    faces: int | None = None
    flavor: str | None = None
    discard: bool = False
    disable: bool = False


# --- Views ---


def _result_data(term: YearZeroDie) -> list[DieResultData]:
    return [
        DieResultData(
            value=r.value,
            state=r.state,
            index_push=r.index_push,
            index_result=r.index_result,
            hidden=r.hidden,
        )
        for r in term.results
    ]


def term_view(term: YearZeroDie, rows: int) -> DieTermView:
    results = _result_data(term)
    by_id = {id(r): data for r, data in zip(term.results, results)}
    return DieTermView(
        die=term.key,
        type=term.type,
        denomination=term.denomination,
        faces=term.faces,
        number=term.number,
        expression=term.expression,
        flavor=term.flavor,
        max_push=term.max_push,
        push_count=term.push_count,
        pushable=term.pushable,
        success=term.success,
        banes=term.failure,
        results=results,
        matrix=[
            [by_id[id(r)] if r is not None else None for r in row]
            for row in term.push_matrix(rows)
        ],
    )


def roll_view(roll_id: str, roll: YearZeroRoll) -> RollView:
    rows = roll.push_count + 1
    return RollView(
        roll_id=roll_id,
        game=roll.game,
        name=roll.name,
        formula=roll.formula,
        evaluated=roll.evaluated,
        size=roll.size,
        max_push=roll.max_push,
        push_count=roll.push_count,
        pushed=roll.pushed,
        pushable=roll.pushable,
        success_count=roll.success_count,
        bane_count=roll.bane_count,
        attribute_trauma=roll.attribute_trauma,
        gear_damage=roll.gear_damage,
        stress=roll.stress,
        panic=roll.panic,
        ammo_spent=roll.ammo_spent,
        hit_count=roll.hit_count,
        jam_count=roll.jam_count,
        jammed=roll.jammed,
        base_success_qty=roll.base_success_qty,
        hit_locations=roll.hit_locations,
        best_hit_location=roll.best_hit_location,
        worst_hit_location=roll.worst_hit_location,
        terms=[term_view(t, rows) for t in roll.terms],
    )


def _get_roll(roll_id: str) -> YearZeroRoll:
    roll = roll_cache.get(roll_id)
    if roll is None:
        raise HTTPException(status_code=404, detail="Roll not found")
    return roll


# --- Endpoints ---


@router.post("")
async def create_roll(body: CreateRollRequest) -> RollView:
    """Create a roll from dice quantities, manifest entries or a formula.

    Exactly one of ``dice``, ``entries`` or ``formula`` may be given; with
    none of them the game's fallback die is rolled.
    """
    sources = [s for s in (body.dice, body.entries, body.formula) if s is not None]
    if len(sources) > 1:
        raise HTTPException(
            status_code=400, detail="Provide only one of dice, entries or formula"
        )

    try:
        if body.formula is not None:
            roll = YearZeroRoll.from_formula(
                body.formula, game=body.game, name=body.name, max_push=body.max_push
            )
        else:
            dice = body.dice or {}
            if body.entries is not None:
                dice = [DiceEntry(**entry.model_dump()) for entry in body.entries]
            roll = YearZeroRoll.forge(
                dice, game=body.game, name=body.name, max_push=body.max_push
            )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if body.evaluate:
        roll.evaluate()
    roll_id = roll_cache.add(roll)
    logger.debug("Created roll %s: %s", roll_id, roll.formula)
    return roll_view(roll_id, roll)


@router.get("/{roll_id}")
async def get_roll(roll_id: str) -> RollView:
    return roll_view(roll_id, _get_roll(roll_id))


@router.delete("/{roll_id}")
async def delete_roll(roll_id: str) -> dict:
    if not roll_cache.delete(roll_id):
        raise HTTPException(status_code=404, detail="Roll not found")
    return {"roll_id": roll_id, "deleted": True}


@router.post("/{roll_id}/push")
async def push_roll(roll_id: str) -> RollView:
    """Push the roll. Pushing an unpushable roll returns it unchanged."""
    roll = _get_roll(roll_id)
    roll.push()
    return roll_view(roll_id, roll)


@router.post("/{roll_id}/modify")
async def modify_roll(roll_id: str, body: ModifyRequest) -> RollView:
    roll = _get_roll(roll_id)
    try:
        roll.modify(body.delta)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return roll_view(roll_id, roll)


@router.post("/{roll_id}/dice")
async def add_dice(roll_id: str, body: AddDiceRequest) -> RollView:
    roll = _get_roll(roll_id)
    try:
        roll.add_dice(
            body.quantity, body.type,
            faces=body.faces, value=body.value, flavor=body.flavor,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return roll_view(roll_id, roll)


@router.post("/{roll_id}/dice/remove")
async def remove_dice(roll_id: str, body: RemoveDiceRequest) -> RollView:
    """Remove dice, as many as available up to ``quantity``."""
    roll = _get_roll(roll_id)
    query = TermQuery(type=body.type, faces=body.faces, flavor=body.flavor)
    roll.remove_dice(body.quantity, query, discard=body.discard, disable=body.disable)
    return roll_view(roll_id, roll)


@router.post("/{roll_id}/duplicate")
async def duplicate_roll(roll_id: str) -> RollView:
    copy = _get_roll(roll_id).duplicate()
    copy_id = roll_cache.add(copy)
    return roll_view(copy_id, copy)
