# webapp/services/rosters.py

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from models_canonical import Roster, Trade
from webapp.services.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def roster_doc_id(season_id: str, team_id: str) -> str:
    return f"{season_id}_{team_id}"


def load_roster(store, season_id: str, team_id: str) -> Roster:
    """The team's roster for the season; an empty one if none is stored yet."""
    doc_id = roster_doc_id(season_id, team_id)
    doc = store.get("rosters", doc_id)
    roster = Roster.from_doc(doc) if doc else None
    if roster is None:
        roster = Roster(id=doc_id, season_id=season_id, team_id=team_id)
    return roster


def move_player(
    store,
    season_id: str,
    player_id: str,
    from_team_id: Optional[str],
    to_team_id: Optional[str],
    note: str = "",
) -> Optional[Trade]:
    """
    Move a player between two rosters of one season and log the trade.

    Both rosters and the trade record are written in one batch. Moving to
    the same team or to no team writes nothing and returns None.

    Without a source team the player is taken off whatever season rosters
    currently list them, and the first of those is logged as the source.
    """
    if not season_id:
        raise ValidationError("A season is required.")
    if not player_id:
        raise ValidationError("A player is required.")
    if not to_team_id or to_team_id == from_team_id:
        return None
    if store.get("teams", to_team_id) is None:
        raise NotFoundError(f"Team {to_team_id} not found")

    if from_team_id:
        source = load_roster(store, season_id, from_team_id)
        if player_id not in source.player_ids:
            raise ValidationError(f"Player {player_id} is not on the {from_team_id} roster.")
        sources = [source]
    else:
        docs = store.list("rosters", where={"seasonId": season_id}, array_contains=("playerIds", player_id))
        sources = [r for r in (Roster.from_doc(d) for d in docs) if r is not None]
        if any(r.team_id == to_team_id for r in sources):
            return None
        if sources:
            from_team_id = sources[0].team_id

    batch = store.batch()

    for source in sources:
        source.player_ids = [pid for pid in source.player_ids if pid != player_id]
        batch.set("rosters", source.id, source.to_doc(), merge=True)

    target = load_roster(store, season_id, to_team_id)
    if player_id not in target.player_ids:
        target.player_ids.append(player_id)
    batch.set("rosters", target.id, target.to_doc(), merge=True)

    trade = Trade(
        id="",
        season_id=season_id,
        player_id=player_id,
        from_team_id=from_team_id or "",
        to_team_id=to_team_id,
        note=note or "",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
    trade.id = batch.add("trades", trade.to_doc())
    batch.commit()

    logger.info("moved %s from %s to %s (%s)", player_id, from_team_id or "-", to_team_id, season_id)
    return trade
