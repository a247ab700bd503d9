# webapp/routes/helpers.py

from __future__ import annotations

from typing import Any, Dict, Tuple

from flask import current_app, request, session

from analysis.constants import SORT_KEYS
from models_canonical import Match, Team
from webapp.services.errors import ValidationError
from webapp.services.live_state import LiveLeagueState, SeasonSnapshot
from webapp.services.roles import ADMIN, current_role
from webapp.services.season_context import SeasonContext


def get_store():
    return current_app.extensions["volley"]["store"]


def get_state() -> LiveLeagueState:
    return current_app.extensions["volley"]["state"]


def caller_is_admin() -> bool:
    return current_role() == ADMIN


def season_context() -> SeasonContext:
    """
    The caller's season selection, backed by the session cookie.

    ?seasonId= overrides the stored selection for this request only (a copy
    of the session is used so the override is not persisted). The non-admin
    pin still applies.
    """
    storage: Any = session
    override = request.args.get("seasonId")
    if override:
        storage = {**dict(session), SeasonContext.STORAGE_KEY: override}

    ctx = SeasonContext(storage, is_admin=caller_is_admin())
    ctx.on_seasons(get_state().seasons())
    return ctx


def season_snapshot() -> Tuple[SeasonContext, SeasonSnapshot]:
    ctx = season_context()
    return ctx, get_state().snapshot(ctx.selected_season_id)


def sort_key_arg(default: str = "total") -> str:
    sort_key = request.args.get("sort", default)
    if sort_key not in SORT_KEYS:
        raise ValidationError(f"sort must be one of: {', '.join(SORT_KEYS)}")
    return sort_key


def json_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Expected a JSON object.")
    return body


def match_json(m: Match, teams_by_id: Dict[str, Team]) -> Dict[str, Any]:
    def team_name(team_id):
        team = teams_by_id.get(team_id) if team_id else None
        return team.display_name if team is not None else team_id

    return {
        **m.to_json(),
        "homeTeamName": team_name(m.home_team_id),
        "awayTeamName": team_name(m.away_team_id),
    }
