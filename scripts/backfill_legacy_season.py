#!/usr/bin/env python3
# scripts/backfill_legacy_season.py
"""
One-time backfill of the first season's final totals as real documents.

Writes the legacy-fixed season (s1), its four teams (s1_<slug>), any
missing players, one playerStats row per player (s1_<playerId>, all under
the S1_STATS_MATCH_ID pseudo match) and the rosters. Safe to re-run: every
write is an upsert on a fixed id.

Once this has run, the cumulative view stops merging the hardcoded totals.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Dict, List

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from analysis.legacy import (  # noqa: E402
    LEGACY_MATCH_ID,
    LEGACY_PLAYERS,
    LEGACY_SEASON_ID,
    LEGACY_SEASON_NAME,
    LEGACY_SEASON_START,
    LEGACY_TEAMS,
    players_by_name_key,
)
from analysis.names import detect_player_type, name_key, normalize_name  # noqa: E402
from models_canonical import DATA_SOURCE_LEGACY_FIXED, Player, PlayerStat, load_records  # noqa: E402
from dotenv import load_dotenv  # noqa: E402

from webapp.config import DATABASE_URL  # noqa: E402
from webapp.services.document_store import DocumentStore  # noqa: E402
from webapp.services.rosters import roster_doc_id  # noqa: E402


def run(
    store,
    match_id: str = LEGACY_MATCH_ID,
    name: str = LEGACY_SEASON_NAME,
    start_date: str = LEGACY_SEASON_START,
) -> Dict[str, int]:
    season_id = LEGACY_SEASON_ID
    player_by_key = players_by_name_key(load_records(Player, store.list("players")))

    with store.batch() as batch:
        batch.set(
            "seasons",
            season_id,
            {
                "name": name,
                "startDate": start_date,
                "isActive": False,
                "dataSource": DATA_SOURCE_LEGACY_FIXED,
            },
            merge=True,
        )

        team_by_name: Dict[str, str] = {}
        for team in LEGACY_TEAMS:
            team_id = f"{season_id}_{team['slug']}"
            batch.set(
                "teams",
                team_id,
                {"seasonId": season_id, "name": team["name"], "slug": team["slug"]},
                merge=True,
            )
            team_by_name[team["name"].lower()] = team_id

        rosters: Dict[str, List[str]] = {}
        stats = 0
        created = 0
        for row in LEGACY_PLAYERS:
            team_id = team_by_name.get(row.team.lower())
            if team_id is None:
                print(f"[WARN] team not found for {row.name!r}: {row.team!r} (skipped)")
                continue

            key = name_key(row.name)
            player_id = player_by_key.get(key)
            if player_id is None:
                player_id = batch.add(
                    "players",
                    {"fullName": normalize_name(row.name), "type": detect_player_type(row.name)},
                )
                player_by_key[key] = player_id
                created += 1

            stat = PlayerStat(
                id=f"{season_id}_{player_id}",
                season_id=season_id,
                match_id=match_id,
                player_id=player_id,
                stats=row.stats,
            )
            batch.set("playerStats", stat.id, stat.to_doc(), merge=True)
            stats += 1

            members = rosters.setdefault(team_id, [])
            if player_id not in members:
                members.append(player_id)

        for team_id, player_ids in rosters.items():
            batch.set(
                "rosters",
                roster_doc_id(season_id, team_id),
                {"seasonId": season_id, "teamId": team_id, "playerIds": player_ids},
                merge=True,
            )

    print(f"[OK] seasons/{season_id} ensured ({DATA_SOURCE_LEGACY_FIXED})")
    print(f"[OK] players: created {created} docs")
    print(f"[OK] playerStats: upserted {stats} docs")
    print(f"[OK] rosters: upserted {len(rosters)} docs")
    return {"players": created, "playerStats": stats, "rosters": len(rosters)}


def main(argv=None) -> int:
    load_dotenv(ROOT / ".env", override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    ap = argparse.ArgumentParser(description="Backfill the legacy season's final totals.")
    ap.add_argument("--match-id", default=os.getenv("S1_STATS_MATCH_ID", LEGACY_MATCH_ID))
    ap.add_argument("--name", default=os.getenv("S1_NAME", LEGACY_SEASON_NAME))
    ap.add_argument("--start-date", default=os.getenv("S1_START_DATE", LEGACY_SEASON_START))
    ap.add_argument("--database-url", default=DATABASE_URL)
    args = ap.parse_args(argv)

    try:
        store = DocumentStore.from_url(args.database_url)
        try:
            run(store, args.match_id, args.name, args.start_date)
        finally:
            store.close()
    except Exception as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    print("[DONE] legacy season backfill complete")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
