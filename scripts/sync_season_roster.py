#!/usr/bin/env python3
# scripts/sync_season_roster.py
"""
Upsert one season's rosters from a roster file.

ROSTER_FILE formats:
  - JSON map:    {"<team>": ["Player One", "Player Two 8A", ...], ...}
  - JSON teams:  {"teams": [{"teamId": "...", "teamName": "...", "players": [...]}]}
  - CSV:         one "team,player" pair per line
Teams resolve by id, then name, then slug (case-insensitive). Players are
matched by name key and created when missing. Afterwards the season's
playerStats rows of players on no roster are pruned (PRUNE_STATS=false
skips that).
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from analysis.names import detect_player_type, name_key, normalize_name  # noqa: E402
from models_canonical import Player, PlayerStat, Roster, Team, load_records  # noqa: E402
from dotenv import load_dotenv  # noqa: E402

from webapp.config import DATABASE_URL  # noqa: E402
from webapp.services.document_store import DocumentStore  # noqa: E402
from webapp.services.errors import ValidationError  # noqa: E402
from webapp.services.rosters import roster_doc_id  # noqa: E402


PRUNE_BATCH_SIZE = 400

RosterInput = List[Tuple[str, List[str]]]


def parse_roster_text(raw: str, is_csv: bool) -> RosterInput:
    """[(team reference, [raw player names])] in file order."""
    if is_csv:
        grouped: Dict[str, List[str]] = {}
        for line in raw.splitlines():
            parts = [p.strip() for p in line.strip().split(",")]
            if len(parts) < 2 or not parts[0] or not parts[1]:
                continue
            grouped.setdefault(parts[0], []).append(parts[1])
        return list(grouped.items())

    data = json.loads(raw)
    if isinstance(data, dict) and isinstance(data.get("teams"), list):
        out: RosterInput = []
        for entry in data["teams"]:
            ref = str(entry.get("teamId") or entry.get("teamName") or "").strip()
            if not ref:
                print("[WARN] team entry without teamId/teamName skipped")
                continue
            out.append((ref, [str(n) for n in entry.get("players") or []]))
        return out
    if isinstance(data, dict):
        return [(str(team), [str(n) for n in names or []]) for team, names in data.items()]
    raise ValidationError("Roster JSON must be an object.")


def load_roster_file(path: Optional[str]) -> RosterInput:
    if not path:
        raise ValidationError("ROSTER_FILE env var is required.")
    raw = Path(path).read_text(encoding="utf-8")
    return parse_roster_text(raw, is_csv=path.lower().endswith(".csv"))


def resolve_team(ref: str, teams: List[Team]) -> Optional[Team]:
    wanted = ref.strip().lower()
    for attr in ("id", "name", "slug"):
        for team in teams:
            if str(getattr(team, attr) or "").lower() == wanted:
                return team
    return None


def run(store, season_id: str, roster: RosterInput, prune: bool = True) -> Dict[str, int]:
    if not roster:
        raise ValidationError("Roster input is empty.")

    # season teams first so name/slug lookups prefer them
    all_teams = load_records(Team, store.list("teams"))
    teams = [t for t in all_teams if t.season_id == season_id] + [
        t for t in all_teams if t.season_id != season_id
    ]

    player_by_key: Dict[str, str] = {}
    for p in load_records(Player, store.list("players")):
        key = name_key(p.full_name)
        if key:
            player_by_key.setdefault(key, p.id)

    created = 0
    synced = 0
    batch = store.batch()

    for ref, names in roster:
        team = resolve_team(ref, teams)
        if team is None:
            print(f"[WARN] team not found: {ref!r} (skipped)")
            continue

        player_ids: List[str] = []
        for raw_name in names:
            key = name_key(raw_name)
            if not key:
                continue
            player_id = player_by_key.get(key)
            if player_id is None:
                player_id = batch.add(
                    "players",
                    {"fullName": normalize_name(raw_name), "type": detect_player_type(raw_name)},
                )
                player_by_key[key] = player_id
                created += 1
            if player_id not in player_ids:
                player_ids.append(player_id)

        batch.set(
            "rosters",
            roster_doc_id(season_id, team.id),
            {"seasonId": season_id, "teamId": team.id, "playerIds": player_ids},
            merge=True,
        )
        synced += 1
        print(f"[OK] roster upserted: {team.id} ({len(player_ids)})")

    batch.commit()

    pruned = prune_season_stats(store, season_id) if prune else 0
    if not prune:
        print("[OK] PRUNE_STATS=false, skipping playerStats pruning")
    return {"rosters": synced, "playersCreated": created, "statsPruned": pruned}


def prune_season_stats(store, season_id: str, batch_size: int = PRUNE_BATCH_SIZE) -> int:
    rostered = set()
    for roster in load_records(Roster, store.list("rosters", where={"seasonId": season_id})):
        rostered.update(roster.player_ids)

    stale = [
        row.id
        for row in load_records(PlayerStat, store.list("playerStats", where={"seasonId": season_id}))
        if not row.player_id or row.player_id not in rostered
    ]
    if not stale:
        print("[OK] no season stats to prune")
        return 0

    for start in range(0, len(stale), batch_size):
        with store.batch() as batch:
            for stat_id in stale[start:start + batch_size]:
                batch.delete("playerStats", stat_id)

    print(f"[OK] pruned {len(stale)} playerStats docs for season {season_id}")
    return len(stale)


def main(argv=None) -> int:
    load_dotenv(ROOT / ".env", override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    ap = argparse.ArgumentParser(description="Sync one season's rosters from a JSON/CSV roster file.")
    ap.add_argument("--season", default=os.getenv("SEASON_ID", "s2"))
    ap.add_argument("--roster-file", default=os.getenv("ROSTER_FILE", ""))
    ap.add_argument("--database-url", default=DATABASE_URL)
    ap.add_argument(
        "--no-prune",
        action="store_true",
        default=os.getenv("PRUNE_STATS", "true").lower() == "false",
        help="Keep playerStats rows of players on no roster.",
    )
    args = ap.parse_args(argv)

    try:
        roster = load_roster_file(args.roster_file)
        store = DocumentStore.from_url(args.database_url)
        try:
            summary = run(store, args.season, roster, prune=not args.no_prune)
        finally:
            store.close()
    except Exception as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    print(f"[DONE] season roster sync complete: {summary}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
