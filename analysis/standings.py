from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from models_canonical import Match, Team

from .models import Standing


def compute_standings(
    matches: Iterable[Match],
    teams: Optional[Iterable[Team]] = None,
) -> List[Standing]:
    """
    Win/loss table for one season.

    Only matches with both scores count. The higher score is credited a win,
    the other a loss; equal scores credit neither team (points still count).

    Teams passed in `teams` are seeded with an all-zero record so they show up
    before their first match. Teams never seeded and never mentioned in a
    scored match do not appear.

    Order: wins desc, point differential desc, points-for desc, team id.
    """
    table: Dict[str, Standing] = {}
    names: Dict[str, str] = {}

    def ensure(team_id: str) -> Standing:
        row = table.get(team_id)
        if row is None:
            row = Standing(teamId=team_id)
            table[team_id] = row
        return row

    for team in teams or []:
        names[team.id] = team.display_name
        ensure(team.id)

    for m in matches:
        if not m.has_result:
            continue
        if not m.home_team_id or not m.away_team_id:
            continue

        home = ensure(m.home_team_id)
        away = ensure(m.away_team_id)

        home.pointsFor += m.home_score
        home.pointsAgainst += m.away_score
        away.pointsFor += m.away_score
        away.pointsAgainst += m.home_score

        if m.home_score > m.away_score:
            home.wins += 1
            away.losses += 1
        elif m.away_score > m.home_score:
            away.wins += 1
            home.losses += 1

    for team_id, row in table.items():
        row.teamName = names.get(team_id)

    return sorted(
        table.values(),
        key=lambda s: (-s.wins, -s.pointDiff, -s.pointsFor, s.teamId),
    )
