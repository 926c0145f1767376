from typing import Annotated
import random

from broadcaster import Broadcast
from fastapi import Depends

from .config import (
    ANNOUNCE_CHANNEL,
    BEER_PONG_SOLO_CUPS,
    BEER_PONG_TEAM_CUPS,
    DARTS_STARTING_SCORE,
    DEATHROLL_STARTING_MAX,
    RNG_SEED,
)
from .game import TableManager

# singleton pattern
_manager_instance: TableManager | None = None


async def init_table_manager(broadcast: Broadcast) -> TableManager:
    global _manager_instance
    rng = random.Random(int(RNG_SEED)) if RNG_SEED else random.Random()
    _manager_instance = TableManager(
        broadcast,
        channel=ANNOUNCE_CHANNEL,
        rng=rng,
        darts_starting_score=DARTS_STARTING_SCORE,
        deathroll_starting_max=DEATHROLL_STARTING_MAX,
        beer_pong_solo_cups=BEER_PONG_SOLO_CUPS,
        beer_pong_team_cups=BEER_PONG_TEAM_CUPS,
    )
    return _manager_instance


def get_table_manager() -> TableManager:
    """Get the singleton TableManager instance."""
    if _manager_instance is None:
        raise RuntimeError("Table manager not initialized")
    return _manager_instance


# convenience type alias for dependency injection
TableManagerDep = Annotated[TableManager, Depends(get_table_manager)]
