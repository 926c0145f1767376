from fastapi import APIRouter, HTTPException

from ..dependencies import TableManagerDep
from ..models.schemas import GameSummary

router = APIRouter(prefix="/games", tags=["games"])


def _get_game(manager, game: str):
    target = manager.get_game(game)
    if target is None:
        raise HTTPException(status_code=404, detail=f"Game {game} not found")
    return target


@router.get("", response_model=list[GameSummary])
async def list_games(manager: TableManagerDep):
    return manager.summaries()


@router.get("/{game}")
async def get_game(game: str, manager: TableManagerDep):
    return _get_game(manager, game).snapshot().model_dump(mode="json")


@router.post("/{game}/start")
async def start_round(game: str, manager: TableManagerDep):
    target = _get_game(manager, game)
    started = await manager.start_round(game)
    return {"game": game, "started": started, "phase": target.phase}


@router.post("/{game}/end")
async def end_round(game: str, manager: TableManagerDep):
    target = _get_game(manager, game)
    ended = await manager.end_round(game)
    return {
        "game": game,
        "ended": ended,
        "phase": target.phase,
        "winners": target.winners,
        "message": target.last_message,
    }
