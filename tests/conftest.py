import random

import pytest
from fastapi.testclient import TestClient

from partydice.game import BeerPongGame, BlackjackGame, DartsGame, DeathrollGame


PARTY = ["Ann Lee", "Bob Ray", "Cid Poe"]


class RecordingBroadcast:
    """Stands in for the broadcaster so published frames can be inspected."""

    def __init__(self):
        self.published = []

    async def publish(self, channel, message):
        self.published.append((channel, message))


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def announcements():
    return []


@pytest.fixture
def blackjack(announcements):
    game = BlackjackGame(announce=announcements.append)
    game.sync_roster(PARTY)
    return game


@pytest.fixture
def darts(announcements):
    game = DartsGame(announce=announcements.append)
    game.sync_roster(PARTY[:2])
    return game


@pytest.fixture
def beer_pong(announcements):
    game = BeerPongGame(announce=announcements.append, rng=random.Random(7))
    game.sync_roster(PARTY[:2])
    return game


@pytest.fixture
def deathroll(announcements):
    game = DeathrollGame(announce=announcements.append)
    game.sync_roster(PARTY)
    game.set_challenger("Ann Lee")
    game.set_opponent("Bob Ray")
    return game


@pytest.fixture
def recording_broadcast():
    return RecordingBroadcast()


@pytest.fixture
def client():
    from partydice.main import app

    with TestClient(app) as test_client:
        yield test_client
