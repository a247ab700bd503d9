#!/usr/bin/env python3
# scripts/seed_season.py
"""
Seed the current season: season doc (active), its six teams, and the
scheduled matches from a schedule JSON:

  {"dates": [{"dateISO": "2026-01-30", "matches": [{"time": "15:30", "home": "<teamId>", "away": "<teamId>"}]}]}
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from models_canonical import DATA_SOURCE_LIVE, STATUS_SCHEDULED, Match, Team  # noqa: E402
from dotenv import load_dotenv  # noqa: E402

from webapp.config import DATABASE_URL  # noqa: E402
from webapp.services.document_store import DocumentStore  # noqa: E402
from webapp.services.errors import ValidationError  # noqa: E402


DEFAULT_SCHEDULE = Path(__file__).resolve().parent / "season2-schedule.json"

SEASON_TEAMS: List[Dict[str, str]] = [
    {"id": "red-flame-dragons", "name": "Red Flame Dragons", "logoFile": "redflamedragons.png"},
    {"id": "black-wolves", "name": "Black Wolves", "logoFile": "blackwolves.png"},
    {"id": "white-sharks", "name": "White Sharks", "logoFile": "whitesharks.png"},
    {"id": "yellow-lions", "name": "The Roaring Yellow Lions", "logoFile": "yellowlions.png"},
    {"id": "green-vipers", "name": "Green Vipers", "logoFile": "greenvipers.png"},
    {"id": "blue-raptors", "name": "Blue Raptors", "logoFile": "blueraptors.png"},
]


def load_schedule(path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def run(
    store,
    schedule: Dict[str, Any],
    season_id: str = "s2",
    name: str = "Season 2",
    start_date: str = "2026-01-30",
) -> Dict[str, int]:
    dates = (schedule or {}).get("dates") or []
    if not dates:
        raise ValidationError("Schedule JSON is empty.")

    store.set(
        "seasons",
        season_id,
        {"name": name, "startDate": start_date, "isActive": True, "dataSource": DATA_SOURCE_LIVE},
        merge=True,
    )
    print(f"[OK] seasons/{season_id} ensured")

    with store.batch() as batch:
        for t in SEASON_TEAMS:
            team = Team(id=t["id"], season_id=season_id, name=t["name"], slug=t["id"], logo_file=t["logoFile"])
            batch.set("teams", team.id, team.to_doc(), merge=True)
    print(f"[OK] teams: upserted {len(SEASON_TEAMS)} docs")

    team_ids = {t["id"] for t in SEASON_TEAMS}
    created = 0
    with store.batch() as batch:
        for day in dates:
            for entry in day.get("matches") or []:
                home, away = entry.get("home"), entry.get("away")
                if home not in team_ids or away not in team_ids:
                    print(f"[WARN] unknown team in {day.get('dateISO')} {entry.get('time')}: {home} v {away} (skipped)")
                    continue
                match = Match(
                    id="",
                    season_id=season_id,
                    date_iso=day.get("dateISO"),
                    time_hhmm=entry.get("time"),
                    home_team_id=home,
                    away_team_id=away,
                    status=STATUS_SCHEDULED,
                )
                batch.add("matches", match.to_doc())
                created += 1
    print(f"[OK] matches: created {created} docs")

    return {"teams": len(SEASON_TEAMS), "matches": created}


def main(argv=None) -> int:
    load_dotenv(ROOT / ".env", override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    ap = argparse.ArgumentParser(description="Seed the season doc, teams and schedule.")
    ap.add_argument("--season", default="s2")
    ap.add_argument("--name", default=os.getenv("S2_NAME", "Season 2"))
    ap.add_argument("--start-date", default=os.getenv("S2_START_DATE", "2026-01-30"))
    ap.add_argument("--schedule", default=os.getenv("SEASON_SCHEDULE", str(DEFAULT_SCHEDULE)))
    ap.add_argument("--database-url", default=DATABASE_URL)
    args = ap.parse_args(argv)

    try:
        schedule = load_schedule(args.schedule)
        store = DocumentStore.from_url(args.database_url)
        try:
            run(store, schedule, args.season, args.name, args.start_date)
        finally:
            store.close()
    except Exception as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    print("[DONE] season seed complete")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
