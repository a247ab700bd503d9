# webapp/routes/league.py

from __future__ import annotations

from typing import Any, Dict, List

from flask import Blueprint, jsonify, request

from analysis import (
    aggregate_team_stats,
    build_player_rows,
    knockout_bracket,
    matches_by_phase,
    schedule_by_date,
    sort_player_rows,
    team_leaders,
    upcoming_matches,
)
from analysis.constants import UPCOMING_LIMIT
from models_canonical import Match, PlayerStat, StatLine, load_records
from webapp.routes.helpers import get_state, get_store, match_json, season_snapshot
from webapp.services.errors import NotFoundError, ValidationError

league_bp = Blueprint("league", __name__, url_prefix="/api")


def _leaders_json(leaders, names: Dict[str, str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, leader in leaders.items():
        if leader is None:
            out[key] = None
        else:
            out[key] = {**leader.to_json(), "name": names.get(leader.id, leader.id)}
    return out


# ---------- teams ----------


@league_bp.get("/teams")
def teams():
    ctx, snap = season_snapshot()
    team_totals = aggregate_team_stats(snap.player_totals(), snap.team_of())

    rows: List[Dict[str, Any]] = []
    for team in sorted(snap.teams, key=lambda t: t.display_name.lower()):
        roster = snap.roster_for(team.id)
        line = team_totals.get(team.id, StatLine())
        rows.append(
            {
                **team.to_json(),
                "playerCount": len(roster.player_ids) if roster is not None else 0,
                "stats": {**line.to_dict(), "total": line.total},
            }
        )
    return jsonify({"seasonId": ctx.selected_season_id, "teams": rows})


@league_bp.get("/teams/<team_id>")
def team_detail(team_id: str):
    ctx, snap = season_snapshot()
    team = snap.teams_by_id.get(team_id)
    if team is None:
        raise NotFoundError(f"Team {team_id} not found")

    roster = snap.roster_for(team_id)
    roster_ids = roster.player_ids if roster is not None else []
    totals = snap.player_totals()

    # roster members without stats still get a row
    member_totals = {pid: totals.get(pid, StatLine()) for pid in roster_ids}
    players_by_id = snap.players_by_id
    rows = sort_player_rows(
        build_player_rows(member_totals, players_by_id, {pid: team_id for pid in roster_ids}),
        "total",
    )
    names = {row["playerId"]: row["name"] for row in rows}
    team_line = aggregate_team_stats(member_totals, {pid: team_id for pid in roster_ids}).get(team_id, StatLine())

    return jsonify(
        {
            "seasonId": ctx.selected_season_id,
            "team": team.to_json(),
            "players": rows,
            "leaders": _leaders_json(team_leaders(totals, roster_ids), names),
            "stats": {**team_line.to_dict(), "total": team_line.total},
        }
    )


# ---------- schedule / matches ----------


@league_bp.get("/schedule")
def schedule():
    ctx, snap = season_snapshot()
    teams_by_id = snap.teams_by_id
    days = [
        {"dateISO": day or None, "matches": [match_json(m, teams_by_id) for m in group]}
        for day, group in schedule_by_date(snap.matches)
    ]
    return jsonify({"seasonId": ctx.selected_season_id, "days": days})


@league_bp.get("/matches/upcoming")
def matches_upcoming():
    try:
        limit = int(request.args.get("limit", UPCOMING_LIMIT))
    except ValueError:
        raise ValidationError("limit must be an integer")
    if limit < 1:
        raise ValidationError("limit must be positive")

    ctx, snap = season_snapshot()
    teams_by_id = snap.teams_by_id
    upcoming = upcoming_matches(snap.matches, limit=limit)
    return jsonify(
        {
            "seasonId": ctx.selected_season_id,
            "matches": [match_json(m, teams_by_id) for m in upcoming],
        }
    )


@league_bp.get("/matches/<match_id>")
def match_detail(match_id: str):
    store = get_store()
    doc = store.get("matches", match_id)
    match = Match.from_doc(doc) if doc else None
    if match is None:
        raise NotFoundError(f"Match {match_id} not found")

    snap = get_state().snapshot(match.season_id)
    players_by_id = snap.players_by_id

    rows = load_records(PlayerStat, store.list("playerStats", where={"matchId": match_id}))
    if rows:
        lines = {r.player_id: r.stats for r in rows if r.player_id}
    else:
        # older results only carry the embedded map
        lines = dict(match.player_stats)

    stat_rows = sort_player_rows(build_player_rows(lines, players_by_id, snap.team_of()), "total")
    return jsonify({"match": match_json(match, snap.teams_by_id), "playerStats": stat_rows})


# ---------- standings ----------


@league_bp.get("/standings")
def standings():
    ctx, snap = season_snapshot()
    table = snap.standings()
    teams_by_id = snap.teams_by_id

    phases = {
        phase: [match_json(m, teams_by_id) for m in group]
        for phase, group in matches_by_phase(snap.matches).items()
    }
    return jsonify(
        {
            "seasonId": ctx.selected_season_id,
            "standings": [row.to_json() for row in table],
            "bracket": knockout_bracket(table, get_state().match_dates()),
            "phases": phases,
        }
    )
