from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional

import pandas as pd

from models_canonical import STAT_KEYS, Player, PlayerStat, Roster, StatLine

from .constants import SORT_KEYS
from .models import Leader


# ---------- Per-player totals ----------


def aggregate_player_stats(
    rows: Iterable[PlayerStat],
    season_id: Optional[str] = None,
) -> Dict[str, StatLine]:
    """
    Sum attack/blocks/assists/service per player id.

    season_id=None sums every row (the all-seasons view); otherwise only rows
    of that season. Rows without a player id are dropped. Missing numbers were
    already zeroed by the PlayerStat adapter.
    """
    records = [
        {"playerId": r.player_id, **r.stats.to_dict()}
        for r in rows
        if r.player_id and (season_id is None or r.season_id == season_id)
    ]
    if not records:
        return {}

    df = pd.DataFrame.from_records(records, columns=["playerId", *STAT_KEYS])
    grouped = df.groupby("playerId", sort=True)[list(STAT_KEYS)].sum()

    return {
        str(player_id): StatLine(**{key: int(row[key]) for key in STAT_KEYS})
        for player_id, row in grouped.iterrows()
    }


# ---------- Per-team totals ----------


def player_team_map(rosters: Iterable[Roster]) -> Dict[str, str]:
    """{player_id: team_id}; a player listed on two rosters keeps the first."""
    team_of: Dict[str, str] = {}
    for roster in rosters:
        for pid in roster.player_ids:
            team_of.setdefault(pid, roster.team_id)
    return team_of


def aggregate_team_stats(
    player_totals: Mapping[str, StatLine],
    team_of: Mapping[str, str],
) -> Dict[str, StatLine]:
    """
    Roll per-player totals up to their current roster team. Players on no
    roster contribute to no team.
    """
    totals: Dict[str, StatLine] = {}
    for player_id, line in player_totals.items():
        team_id = team_of.get(player_id)
        if not team_id:
            continue
        totals[team_id] = totals.get(team_id, StatLine()).add(line)
    return totals


# ---------- Leaders ----------


def resolve_leader(totals: Mapping[str, StatLine], stat_key: str) -> Optional[Leader]:
    """
    Highest value for one stat key. Ties go to the smallest id so the answer
    does not depend on dict order. None when there is no data at all.
    """
    if stat_key not in SORT_KEYS:
        raise ValueError(f"Unknown stat key: {stat_key}")

    best: Optional[Leader] = None
    for entity_id in sorted(totals):
        value = totals[entity_id].get(stat_key)
        if best is None or value > best.value:
            best = Leader(id=entity_id, value=value)
    return best


def category_leaders(totals: Mapping[str, StatLine]) -> Dict[str, Optional[Leader]]:
    return {key: resolve_leader(totals, key) for key in STAT_KEYS}


def team_leaders(
    player_totals: Mapping[str, StatLine],
    roster_player_ids: Iterable[str],
) -> Dict[str, Optional[Leader]]:
    """Leaders among one team's roster; members without stats count as zero."""
    roster_totals = {pid: player_totals.get(pid, StatLine()) for pid in roster_player_ids}
    return category_leaders(roster_totals)


def best_team(team_totals: Mapping[str, StatLine], stat_key: str) -> Optional[Leader]:
    return resolve_leader(team_totals, stat_key)


# ---------- Display rows ----------


def build_player_rows(
    totals: Mapping[str, StatLine],
    players_by_id: Mapping[str, Player],
    team_of: Optional[Mapping[str, str]] = None,
    fallback_names: Optional[Mapping[str, str]] = None,
) -> List[Dict]:
    """
    Table rows for the players / cumulative pages.

    Players may not be loaded yet (snapshots arrive independently), so the
    name falls back to the legacy name, then to the raw id.
    """
    team_of = team_of or {}
    fallback_names = fallback_names or {}

    rows: List[Dict] = []
    for player_id, line in totals.items():
        player = players_by_id.get(player_id)
        if player is not None:
            name = player.display_name
        else:
            name = fallback_names.get(player_id) or player_id
        rows.append(
            {
                "playerId": player_id,
                "name": name,
                "type": player.type if player is not None else None,
                "teamId": team_of.get(player_id),
                **line.to_dict(),
                "total": line.total,
            }
        )
    return rows


def sort_player_rows(rows: List[Dict], sort_key: str = "total") -> List[Dict]:
    if sort_key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {sort_key}")
    return sorted(rows, key=lambda r: (-int(r.get(sort_key) or 0), str(r.get("name") or "")))
