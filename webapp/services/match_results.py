# webapp/services/match_results.py
"""
Recording and deleting match results.

Re-submitting a result replaces the match's PlayerStat rows: the old rows are
deleted and the new ones inserted in the same transaction as the match
update.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from models_canonical import STATUS_COMPLETED, Match, PlayerStat, StatLine
from webapp.services.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

SCORE_ERROR = "You must enter a valid score for both teams."
STATS_ERROR = "You must enter at least one stat for a player."


def _score(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def validate_result(
    home_score: Any,
    away_score: Any,
    player_stats: Optional[Mapping[str, Any]],
) -> Tuple[int, int, Dict[str, StatLine]]:
    home = _score(home_score)
    away = _score(away_score)
    if home is None or away is None:
        raise ValidationError(SCORE_ERROR)

    if player_stats is not None and not isinstance(player_stats, Mapping):
        raise ValidationError(STATS_ERROR)

    lines: Dict[str, StatLine] = {}
    for player_id, raw in (player_stats or {}).items():
        line = StatLine.from_mapping(raw)
        if player_id and line.has_any():
            lines[str(player_id)] = line
    if not lines:
        raise ValidationError(STATS_ERROR)

    return home, away, lines


def _load_match(store, match_id: str) -> Match:
    doc = store.get("matches", match_id)
    match = Match.from_doc(doc) if doc else None
    if match is None:
        logger.warning("match %s not found", match_id)
        raise NotFoundError(f"Match {match_id} not found")
    return match


def submit_match_result(
    store,
    match_id: str,
    home_score: Any,
    away_score: Any,
    player_stats: Optional[Mapping[str, Any]],
    fallback_season_id: Optional[str] = None,
) -> Match:
    match = _load_match(store, match_id)
    home, away, lines = validate_result(home_score, away_score, player_stats)
    season_id = match.season_id or fallback_season_id

    batch = store.batch()
    batch.update(
        "matches",
        match_id,
        {
            "scores": {"home": home, "away": away},
            "status": STATUS_COMPLETED,
            "playersStats": {pid: line.to_dict() for pid, line in lines.items()},
        },
    )
    batch.delete_where("playerStats", {"matchId": match_id})
    for player_id, line in lines.items():
        row = PlayerStat(id="", season_id=season_id, match_id=match_id, player_id=player_id, stats=line)
        batch.add("playerStats", row.to_doc())
    batch.commit()

    logger.info("recorded result %s %d-%d (%d stat rows)", match_id, home, away, len(lines))
    return _load_match(store, match_id)


def delete_match(store, match_id: str) -> None:
    _load_match(store, match_id)

    batch = store.batch()
    batch.delete_where("playerStats", {"matchId": match_id})
    batch.delete("matches", match_id)
    batch.commit()

    logger.info("deleted match %s and its stat rows", match_id)
