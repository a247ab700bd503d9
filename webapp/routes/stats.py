# webapp/routes/stats.py

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Set

from flask import Blueprint, jsonify

from analysis import (
    aggregate_player_stats,
    aggregate_team_stats,
    best_team,
    build_player_rows,
    category_leaders,
    merge_legacy_totals,
    sort_player_rows,
)
from analysis.constants import CATEGORIES, CATEGORY_LABELS
from models_canonical import PlayerStat, Season, StatLine
from webapp.routes.helpers import get_state, season_snapshot, sort_key_arg
from webapp.services.errors import NotFoundError

stats_bp = Blueprint("stats", __name__, url_prefix="/api")


def _line_json(line: StatLine) -> Dict[str, int]:
    return {**line.to_dict(), "total": line.total}


def _with_team_names(rows: List[Dict[str, Any]], teams_by_id) -> List[Dict[str, Any]]:
    for row in rows:
        team = teams_by_id.get(row.get("teamId")) if row.get("teamId") else None
        row["teamName"] = team.display_name if team is not None else None
    return rows


def legacy_backfilled(seasons: Iterable[Season], rows: Iterable[PlayerStat]) -> bool:
    """True once a legacy-fixed season has real PlayerStat rows."""
    legacy_ids: Set[str] = {s.id for s in seasons if s.is_legacy}
    if not legacy_ids:
        return False
    return any(r.season_id in legacy_ids for r in rows)


@stats_bp.get("/players")
def players():
    sort_key = sort_key_arg()
    ctx, snap = season_snapshot()

    team_of = snap.team_of()
    totals = {pid: StatLine() for pid in team_of}
    totals.update(snap.player_totals())

    rows = build_player_rows(totals, snap.players_by_id, team_of)
    rows = _with_team_names(sort_player_rows(rows, sort_key), snap.teams_by_id)
    return jsonify({"seasonId": ctx.selected_season_id, "sort": sort_key, "players": rows})


@stats_bp.get("/players/<player_id>")
def player_detail(player_id: str):
    ctx, snap = season_snapshot()
    state = get_state()

    player = snap.players_by_id.get(player_id)
    season_line = snap.player_totals().get(player_id)
    career_line = aggregate_player_stats(state.all_player_stats()).get(player_id)
    if player is None and season_line is None and career_line is None:
        raise NotFoundError(f"Player {player_id} not found")

    team_id = snap.team_of().get(player_id)
    team = snap.teams_by_id.get(team_id) if team_id else None
    return jsonify(
        {
            "seasonId": ctx.selected_season_id,
            "player": player.to_json() if player is not None else {"id": player_id, "fullName": player_id},
            "team": team.to_json() if team is not None else None,
            "seasonTotals": _line_json(season_line or StatLine()),
            "cumulativeTotals": _line_json(career_line or StatLine()),
        }
    )


@stats_bp.get("/leaders")
def leaders():
    ctx, snap = season_snapshot()
    totals = snap.player_totals()
    team_totals = aggregate_team_stats(totals, snap.team_of())
    players_by_id = snap.players_by_id
    teams_by_id = snap.teams_by_id

    out: Dict[str, Any] = {}
    player_leaders = category_leaders(totals)
    for key in CATEGORIES:
        leader = player_leaders[key]
        team_leader = best_team(team_totals, key)
        player = players_by_id.get(leader.id) if leader is not None else None
        team = teams_by_id.get(team_leader.id) if team_leader is not None else None
        out[key] = {
            "label": CATEGORY_LABELS[key],
            "player": None
            if leader is None
            else {**leader.to_json(), "name": player.display_name if player is not None else leader.id},
            "team": None
            if team_leader is None
            else {**team_leader.to_json(), "name": team.display_name if team is not None else team_leader.id},
        }
    return jsonify({"seasonId": ctx.selected_season_id, "leaders": out})


@stats_bp.get("/stats/cumulative")
def cumulative():
    """
    All-seasons totals. Until the legacy season has been backfilled as real
    rows, its fixed final totals are merged in here.
    """
    sort_key = sort_key_arg()
    state = get_state()

    rows_in = state.all_player_stats()
    players = state.players()
    totals = aggregate_player_stats(rows_in)

    merged = not legacy_backfilled(state.seasons(), rows_in)
    fallback_names: Dict[str, str] = {}
    if merged:
        totals, fallback_names = merge_legacy_totals(totals, players)

    rows = build_player_rows(totals, {p.id: p for p in players}, None, fallback_names)
    return jsonify(
        {
            "sort": sort_key,
            "legacyMerged": merged,
            "players": sort_player_rows(rows, sort_key),
        }
    )
