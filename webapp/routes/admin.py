# webapp/routes/admin.py

from flask import Blueprint, current_app, g, jsonify

from webapp.routes.helpers import get_store, json_body, season_context
from webapp.services.errors import ValidationError
from webapp.services.match_results import delete_match, submit_match_result
from webapp.services.roles import ADMIN, SCOREKEEPER, require_role
from webapp.services.rosters import move_player

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@admin_bp.post("/matches/<match_id>/result")
@require_role(ADMIN, SCOREKEEPER)
def submit_result(match_id: str):
    """
    Body: {homeScore, awayScore, playerStats: {playerId: {attack, blocks, assists, service}}}
    """
    body = json_body()
    ctx = season_context()
    match = submit_match_result(
        get_store(),
        match_id,
        body.get("homeScore"),
        body.get("awayScore"),
        body.get("playerStats"),
        fallback_season_id=ctx.selected_season_id,
    )
    current_app.logger.info("result for %s submitted by %s", match_id, g.user_id)
    return jsonify({"match": match.to_json()})


@admin_bp.delete("/matches/<match_id>")
@require_role(ADMIN)
def remove_match(match_id: str):
    delete_match(get_store(), match_id)
    current_app.logger.info("match %s deleted by %s", match_id, g.user_id)
    return jsonify({"deleted": match_id})


@admin_bp.post("/rosters/move")
@require_role(ADMIN)
def roster_move():
    """
    Body: {playerId, fromTeamId, toTeamId, note?, seasonId?}
    """
    body = json_body()
    season_id = body.get("seasonId") or season_context().selected_season_id
    if not season_id:
        raise ValidationError("No season selected.")

    trade = move_player(
        get_store(),
        season_id,
        str(body.get("playerId") or ""),
        body.get("fromTeamId") or None,
        body.get("toTeamId") or None,
        note=str(body.get("note") or ""),
    )
    if trade is None:
        return jsonify({"moved": False, "trade": None})
    return jsonify({"moved": True, "trade": {"id": trade.id, **trade.to_doc()}})
