import logging

from starlette.middleware.cors import CORSMiddleware

from .config import CORS_ORIGINS

log = logging.getLogger(__name__)


def add_cors_middleware(app):
    # the host overlay and any browser dashboard talk to the table cross-origin
    return CORSMiddleware(
        app=app,
        allow_origins=CORS_ORIGINS,
        allow_credentials="*" not in CORS_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )


def add_logging_middleware(app):
    async def middleware(scope, receive, send):
        if scope["type"] in ("http", "websocket"):
            log.debug(f"{scope['type'].upper()} {scope['path']}")
        await app(scope, receive, send)

    return middleware
