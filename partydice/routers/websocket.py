import json
import logging

import anyio
from fastapi import APIRouter, WebSocket
from fastapi.websockets import WebSocketState
from pydantic import ValidationError

from ..dependencies import get_table_manager
from ..game import TableManager, resolve
from ..models.schemas import ChatLine, TableMessage

log = logging.getLogger(__name__)
router = APIRouter()


def control_params(msg: TableMessage) -> tuple[str, dict] | None:
    """Map a control frame onto the game method and its keyword arguments."""
    if msg.type == "set_dealer":
        return "set_dealer", {"name": msg.player}
    if msg.type == "split":
        return "split", {"key": resolve(msg.player)[0]}
    if msg.type == "set_team_mode" and msg.enabled is not None:
        return "set_team_mode", {"enabled": msg.enabled}
    if msg.type == "assign_team" and msg.player:
        if msg.game == "darts" and msg.team_id is not None:
            return "assign_team", {"name": msg.player, "team_id": msg.team_id}
        if msg.game == "beer_pong" and msg.team:
            return "assign_team", {"name": msg.player, "team_name": msg.team}
    if msg.type == "rename_team" and msg.team_id is not None and msg.name:
        return "rename_team", {"team_id": msg.team_id, "new_name": msg.name}
    if msg.type in ("reset_game", "clear_teams"):
        return msg.type, {}
    if msg.type == "set_challenger":
        return "set_challenger", {"name": msg.player}
    if msg.type == "set_opponent":
        return "set_opponent", {"name": msg.player}
    return None


async def process_message(msg: TableMessage, websocket: WebSocket, manager: TableManager) -> None:
    if msg.type == "chat":
        if msg.channel is None:
            raise ValueError("chat frame without channel")
        await manager.handle_chat(
            ChatLine(channel=msg.channel, sender=msg.sender, message=msg.message)
        )

    elif msg.type == "roster":
        if await manager.handle_roster(msg.players):
            await websocket.send_json(
                {"type": "roster", "players": [d for _, d in manager.roster.members]}
            )

    elif msg.type == "start_round":
        if not await manager.start_round(msg.game or ""):
            await websocket.send_json({"type": "ignored", "request": msg.type, "game": msg.game})

    elif msg.type == "end_round":
        if not await manager.end_round(msg.game or ""):
            await websocket.send_json({"type": "ignored", "request": msg.type, "game": msg.game})

    else:
        control = control_params(msg)
        if control is None:
            raise ValueError(f"unknown message type {msg.type}")
        action, params = control
        done = await manager.control(msg.game or "", action, **params)
        await websocket.send_json(
            {"type": "control", "request": action, "game": msg.game, "ok": done}
        )


async def websocket_receiver(websocket: WebSocket, manager: TableManager) -> None:
    async for message in websocket.iter_text():
        try:
            msg = TableMessage.model_validate(json.loads(message))
            await process_message(msg, websocket, manager)
        except (json.JSONDecodeError, ValidationError, ValueError) as e:
            log.error(f"Error processing table message: {e}")
            await websocket.send_json(
                {"type": "error", "message": "Invalid message format"}
            )


async def websocket_sender(websocket: WebSocket, manager: TableManager) -> None:
    async with manager.broadcast.subscribe(channel=manager.channel) as subscriber:
        async for event in subscriber:
            if websocket.client_state == WebSocketState.CONNECTED:
                await websocket.send_text(event.message)


@router.websocket("/ws/table")
async def websocket_endpoint(websocket: WebSocket) -> None:
    manager = get_table_manager()
    await websocket.accept()

    await websocket.send_json(
        {
            "type": "games",
            "games": [s.model_dump(mode="json") for s in manager.summaries()],
        }
    )

    try:
        async with anyio.create_task_group() as task_group:

            async def run_receiver() -> None:
                await websocket_receiver(websocket=websocket, manager=manager)
                task_group.cancel_scope.cancel()

            task_group.start_soon(run_receiver)
            await websocket_sender(websocket=websocket, manager=manager)

    except Exception as e:
        log.error(f"WebSocket error on table socket: {e}")
        raise
