from dotenv import load_dotenv

import os

load_dotenv()

BROADCAST_URL = os.getenv("BROADCAST_URL", "memory://")
ANNOUNCE_CHANNEL = os.getenv("ANNOUNCE_CHANNEL", "party_announce")

DARTS_STARTING_SCORE = int(os.getenv("DARTS_STARTING_SCORE", "501"))
DEATHROLL_STARTING_MAX = int(os.getenv("DEATHROLL_STARTING_MAX", "1000"))
BEER_PONG_SOLO_CUPS = int(os.getenv("BEER_PONG_SOLO_CUPS", "10"))
BEER_PONG_TEAM_CUPS = int(os.getenv("BEER_PONG_TEAM_CUPS", "5"))

# unset -> system entropy for beer pong target picks
RNG_SEED = os.getenv("RNG_SEED")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# comma separated, "*" allows any origin
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
