from contextlib import asynccontextmanager
import logging

from broadcaster import Broadcast
from fastapi import FastAPI

from .config import BROADCAST_URL, LOG_LEVEL
from .dependencies import init_table_manager
from .middleware import add_cors_middleware, add_logging_middleware
from .routers import games_router, websocket_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

broadcast = Broadcast(BROADCAST_URL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await broadcast.connect()
    await init_table_manager(broadcast)
    yield
    await broadcast.disconnect()
    log.info("shutting down")


app = FastAPI(title="partydice", lifespan=lifespan)
app.add_middleware(add_cors_middleware)
app.add_middleware(add_logging_middleware)

app.include_router(games_router)
app.include_router(websocket_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
