# webapp/config.py

import os
from dotenv import load_dotenv

# Load .env into environment variables
load_dotenv()

# ---------------------------------------------------------------------------
# Module-level constants (scripts import these directly)
# ---------------------------------------------------------------------------

# Backend project selection, first one set wins
PROJECT_ID = (
    os.getenv("FIREBASE_PROJECT_ID")
    or os.getenv("GCLOUD_PROJECT")
    or os.getenv("GOOGLE_CLOUD_PROJECT")
)

DATABASE_URL = os.getenv("DATABASE_URL") or f"sqlite:///{PROJECT_ID or 'volley_stats'}.db"

DEFAULT_SEASON_ID = os.getenv("SEASON_ID", "s2")

SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

# Header set by the identity provider / proxy in front of the app
AUTH_USER_HEADER = os.getenv("AUTH_USER_HEADER", "X-User-Id")

# Minimum seconds between re-polls of live queries (writes from scripts)
LIVE_POLL_SECONDS = float(os.getenv("LIVE_POLL_SECONDS", "2"))

# ---------------------------------------------------------------------------
# Flask Config object (used by create_app)
# ---------------------------------------------------------------------------

class Config:
    PROJECT_ID = PROJECT_ID
    DATABASE_URL = DATABASE_URL
    DEFAULT_SEASON_ID = DEFAULT_SEASON_ID

    SECRET_KEY = SECRET_KEY
    AUTH_USER_HEADER = AUTH_USER_HEADER
    LIVE_POLL_SECONDS = LIVE_POLL_SECONDS
