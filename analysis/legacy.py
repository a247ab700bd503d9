# analysis/legacy.py

"""
Final totals of the first (pre-app) season.

That season was scored on paper; only these end-of-season totals exist.
`scripts/backfill_legacy_season.py` writes them into real season/team/
roster/playerStats documents once. Until that has run, the cumulative view
merges them in at read time with `merge_legacy_totals`.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Tuple

from models_canonical import Player, StatLine

from .constants import LEGACY_ID_PREFIX
from .names import name_key, normalize_name


LEGACY_SEASON_ID = "s1"
LEGACY_SEASON_NAME = "Season 1"
LEGACY_SEASON_START = "2025-01-01"
LEGACY_MATCH_ID = "s1_totals"


@dataclass(frozen=True)
class LegacyPlayerTotals:
    name: str
    team: str
    attack: int
    blocks: int
    assists: int
    service: int

    @property
    def stats(self) -> StatLine:
        return StatLine(
            attack=self.attack,
            blocks=self.blocks,
            assists=self.assists,
            service=self.service,
        )


LEGACY_TEAMS: List[Dict[str, str]] = [
    {"name": "Team Blue", "slug": "team-blue"},
    {"name": "Team Red", "slug": "team-red"},
    {"name": "Team Pink", "slug": "team-pink"},
    {"name": "Team Black", "slug": "team-black"},
]

LEGACY_PLAYERS: List[LegacyPlayerTotals] = [
    LegacyPlayerTotals("Rocco Lokee", "Team Blue", 23, 5, 0, 3),
    LegacyPlayerTotals("Mr. Hall", "Team Red", 24, 1, 0, 6),
    LegacyPlayerTotals("Lucas Wu", "Team Pink", 18, 2, 0, 4),
    LegacyPlayerTotals("Wilson Chen", "Team Black", 9, 6, 0, 5),
    LegacyPlayerTotals("Mr. Torres", "Team Pink", 10, 0, 0, 3),
    LegacyPlayerTotals("Mr. Solis", "Team Blue", 7, 0, 0, 5),
    LegacyPlayerTotals("Edgar Justavino", "Team Red", 6, 0, 0, 5),
    LegacyPlayerTotals("James De Gracia", "Team Blue", 4, 2, 0, 2),
    LegacyPlayerTotals("Willy Hou", "Team Red", 4, 1, 0, 2),
    LegacyPlayerTotals("Ferran Ponton", "Team Pink", 4, 0, 0, 0),
    LegacyPlayerTotals("Joel Pérez", "Team Black", 2, 0, 0, 2),
    LegacyPlayerTotals("Mr. Marmolejo", "Team Black", 2, 0, 0, 1),
    LegacyPlayerTotals("Mrs. Almanza", "Team Red", 1, 0, 0, 2),
    LegacyPlayerTotals("Rafael Romero", "Team Pink", 2, 1, 0, 0),
    LegacyPlayerTotals("Lauren Tapia", "Team Red", 0, 0, 0, 2),
    LegacyPlayerTotals("Mr. Pérez", "Team Pink", 1, 0, 0, 1),
    LegacyPlayerTotals("Mario Zhong", "Team Blue", 0, 0, 0, 2),
    LegacyPlayerTotals("Anny Deng", "Team Pink", 0, 0, 0, 2),
    LegacyPlayerTotals("William Chen", "Team Blue", 2, 0, 0, 0),
    LegacyPlayerTotals("Mr. Aguilera", "Team Blue", 0, 0, 0, 1),
    LegacyPlayerTotals("Dhruvin Ahir", "Team Blue", 0, 0, 0, 1),
    LegacyPlayerTotals("Mr. Vergara", "Team Black", 1, 0, 0, 0),
    LegacyPlayerTotals("Michell Qiu", "Team Pink", 0, 0, 0, 1),
    LegacyPlayerTotals("Mavielis Castillero", "Team Blue", 0, 0, 0, 1),
    LegacyPlayerTotals("Héctor Chen", "Team Black", 0, 0, 0, 1),
]


def legacy_player_id(name: str) -> str:
    return f"{LEGACY_ID_PREFIX}{normalize_name(name)}"


def players_by_name_key(players: Iterable[Player]) -> Dict[str, str]:
    """{name_key: player_id}; the first player seen for a key wins."""
    by_key: Dict[str, str] = {}
    for p in players:
        key = name_key(p.full_name)
        if key:
            by_key.setdefault(key, p.id)
    return by_key


def merge_legacy_totals(
    totals: Mapping[str, StatLine],
    players: Iterable[Player],
    legacy_rows: Iterable[LegacyPlayerTotals] = LEGACY_PLAYERS,
) -> Tuple[Dict[str, StatLine], Dict[str, str]]:
    """
    Add the legacy totals to live per-player totals.

    Legacy rows are matched to live players by name key; unmatched rows get a
    synthetic "legacy:<name>" id. Returns (merged totals, {id: legacy name})
    so unmatched ids can still be displayed.
    """
    by_key = players_by_name_key(players)
    merged: Dict[str, StatLine] = dict(totals)
    names: Dict[str, str] = {}

    for row in legacy_rows:
        player_id = by_key.get(name_key(row.name)) or legacy_player_id(row.name)
        names[player_id] = row.name
        merged[player_id] = merged.get(player_id, StatLine()).add(row.stats)

    return merged, names
