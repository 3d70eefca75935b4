"""Games API — the game registry and its die types."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from yzroll.domain import games
from yzroll.domain.dice_types import DieType
from yzroll.domain.errors import GameTypeError
from yzroll.models.result import DieTypeView, GameView

router = APIRouter(prefix="/api/games", tags=["games"])


def die_type_view(die_type: DieType) -> DieTypeView:
    return DieTypeView(
        key=die_type.key,
        type=die_type.type_tag,
        denomination=die_type.denomination,
        faces=die_type.faces,
        locked_values=sorted(die_type.locked_values),
        success_table=dict(die_type.success_table) if die_type.success_table else None,
    )


def game_view(context: games.GameContext) -> GameView:
    return GameView(
        id=context.id,
        title=context.title,
        modifier_rule=context.modifier_rule.value,
        dice=list(context.die_keys),
    )


def _get_game(game_id: str) -> games.GameContext:
    try:
        return games.get_game(game_id)
    except GameTypeError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("")
async def list_games() -> list[GameView]:
    return [game_view(context) for context in games.list_games()]


@router.get("/{game_id}")
async def get_game(game_id: str) -> GameView:
    return game_view(_get_game(game_id))


@router.get("/{game_id}/dice")
async def list_game_dice(game_id: str) -> list[DieTypeView]:
    """Die types available in a game, in registration order."""
    return [die_type_view(t) for t in _get_game(game_id).die_types]
