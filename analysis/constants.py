from typing import Dict, List, Tuple

from models_canonical import STAT_KEYS

# Per-player stat categories, in display order (frontend also uses this)
CATEGORIES: List[str] = list(STAT_KEYS)

# Stat key -> label shown on the leader cards
CATEGORY_LABELS: Dict[str, str] = {
    "attack": "Attacks",
    "blocks": "Blocks",
    "assists": "Assists",
    "service": "Serves",
}

# Accepted ?sort= values for player tables
SORT_KEYS: Tuple[str, ...] = (*STAT_KEYS, "total")

# Knockout phases, in bracket order
PHASES: Tuple[str, ...] = ("semifinal", "third", "final")

# matchDates document ids used by the bracket view
BRACKET_SLOTS: Tuple[str, ...] = ("semifinal1", "semifinal2", "final")

UPCOMING_LIMIT = 3

# Prefix for players that only exist in the fixed legacy dataset
LEGACY_ID_PREFIX = "legacy:"
