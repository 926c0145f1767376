from .games import router as games_router
from .websocket import router as websocket_router

__all__ = ["games_router", "websocket_router"]
