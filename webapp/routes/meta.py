# webapp/routes/meta.py

from typing import Any, Dict

from flask import Blueprint, jsonify, session

from webapp.routes.helpers import caller_is_admin, get_state, json_body, season_context
from webapp.services.errors import ValidationError
from webapp.services.season_context import SeasonContext

meta_bp = Blueprint("meta", __name__, url_prefix="/api/seasons")


def _payload(ctx: SeasonContext) -> Dict[str, Any]:
    selected = ctx.selected_season
    return {
        "seasons": [s.to_json() for s in ctx.seasons],
        "selectedSeasonId": ctx.selected_season_id,
        "selectedSeason": selected.to_json() if selected is not None else None,
        "isAdmin": ctx.is_admin,
        "loading": ctx.is_loading,
    }


@meta_bp.get("")
def seasons():
    """
    Seasons plus the caller's selection (defaulted on first visit and
    persisted in the session).
    """
    return jsonify(_payload(season_context()))


@meta_bp.post("/select")
def select_season():
    body = json_body()
    season_id = str(body.get("seasonId") or "").strip()
    if not season_id:
        raise ValidationError("seasonId is required.")

    ctx = SeasonContext(session, is_admin=caller_is_admin())
    ctx.on_seasons(get_state().seasons())
    ctx.select_season(season_id)
    return jsonify(_payload(ctx))
