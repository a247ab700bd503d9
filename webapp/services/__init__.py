# webapp/services/__init__.py

from .document_store import DocumentStore, WriteBatch
from .subscription_hub import SubscriptionHub
from .season_context import SeasonContext
from .live_state import LiveLeagueState, SeasonSnapshot
from .match_results import submit_match_result, delete_match
from .rosters import move_player

__all__ = [
    "DocumentStore",
    "WriteBatch",
    "SubscriptionHub",
    "SeasonContext",
    "LiveLeagueState",
    "SeasonSnapshot",
    "submit_match_result",
    "delete_match",
    "move_player",
]
