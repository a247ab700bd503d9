# analysis/__init__.py

from .constants import CATEGORIES, CATEGORY_LABELS, SORT_KEYS, PHASES
from .names import normalize_name, name_key, detect_player_type
from .models import Standing, Leader
from .standings import compute_standings
from .player_stats import (
    aggregate_player_stats,
    aggregate_team_stats,
    player_team_map,
    resolve_leader,
    category_leaders,
    team_leaders,
    best_team,
    build_player_rows,
    sort_player_rows,
)
from .schedule import (
    upcoming_matches,
    schedule_by_date,
    matches_by_phase,
    knockout_bracket,
)
from .legacy import (
    LEGACY_PLAYERS,
    LEGACY_TEAMS,
    merge_legacy_totals,
)

__all__ = [
    # constants
    "CATEGORIES",
    "CATEGORY_LABELS",
    "SORT_KEYS",
    "PHASES",

    # names
    "normalize_name",
    "name_key",
    "detect_player_type",

    # payloads
    "Standing",
    "Leader",

    # standings + schedule
    "compute_standings",
    "upcoming_matches",
    "schedule_by_date",
    "matches_by_phase",
    "knockout_bracket",

    # player / team stats
    "aggregate_player_stats",
    "aggregate_team_stats",
    "player_team_map",
    "resolve_leader",
    "category_leaders",
    "team_leaders",
    "best_team",
    "build_player_rows",
    "sort_player_rows",

    # legacy season
    "LEGACY_PLAYERS",
    "LEGACY_TEAMS",
    "merge_legacy_totals",
]
