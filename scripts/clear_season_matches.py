#!/usr/bin/env python3
# scripts/clear_season_matches.py
from __future__ import annotations

import argparse
import logging
import os
import sys
from collections import defaultdict
from pathlib import Path
from typing import Dict, List

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from dotenv import load_dotenv  # noqa: E402

from webapp.config import DATABASE_URL  # noqa: E402
from webapp.services.document_store import DocumentStore  # noqa: E402


CLEAR_BATCH_SIZE = 500


def run(store, season_id: str, batch_size: int = CLEAR_BATCH_SIZE) -> int:
    """
    Delete a season's matches (and their playerStats rows), batch_size
    matches per transaction. Returns the number of matches deleted.
    """
    stats_by_match: Dict[str, List[str]] = defaultdict(list)
    for row in store.list("playerStats", where={"seasonId": season_id}):
        stats_by_match[str(row.get("matchId") or "")].append(row["id"])

    deleted = 0
    while True:
        page = store.list("matches", where={"seasonId": season_id}, limit=batch_size)
        if not page:
            break
        with store.batch() as batch:
            for doc in page:
                for stat_id in stats_by_match.pop(doc["id"], []):
                    batch.delete("playerStats", stat_id)
                batch.delete("matches", doc["id"])
        deleted += len(page)

    print(f"[OK] matches: deleted {deleted} docs for season {season_id}")
    return deleted


def main(argv=None) -> int:
    load_dotenv(ROOT / ".env", override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    ap = argparse.ArgumentParser(description="Delete every match of one season.")
    ap.add_argument("--season", default=os.getenv("SEASON_ID", "s2"))
    ap.add_argument("--database-url", default=DATABASE_URL)
    args = ap.parse_args(argv)

    try:
        store = DocumentStore.from_url(args.database_url)
        try:
            run(store, args.season)
        finally:
            store.close()
    except Exception as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
