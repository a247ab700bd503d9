#!/usr/bin/env python3
# scripts/migrate_season_tags.py
"""
Stamp a seasonId on every teams/matches/rosters/playerStats doc that has none.

Documents written before seasons existed belong to the first season, so
SEASON_ID defaults to s1, and that season doc is ensured as a legacy-fixed,
inactive season first.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Dict, Iterable

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from analysis.legacy import LEGACY_SEASON_NAME, LEGACY_SEASON_START  # noqa: E402
from models_canonical import DATA_SOURCE_LEGACY_FIXED  # noqa: E402
from dotenv import load_dotenv  # noqa: E402

from webapp.config import DATABASE_URL  # noqa: E402
from webapp.services.document_store import DocumentStore  # noqa: E402


TAG_COLLECTIONS = ("teams", "matches", "rosters", "playerStats")
TAG_BATCH_SIZE = 400


def ensure_season_doc(store, season_id: str, name: str, start_date: str) -> None:
    store.set(
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
    print(f"[OK] seasons/{season_id} ensured")


def tag_collection(store, collection: str, season_id: str, batch_size: int = TAG_BATCH_SIZE) -> int:
    untagged = [doc["id"] for doc in store.list(collection) if not doc.get("seasonId")]
    if not untagged:
        print(f"[OK] {collection}: nothing to tag")
        return 0

    for start in range(0, len(untagged), batch_size):
        with store.batch() as batch:
            for doc_id in untagged[start:start + batch_size]:
                batch.update(collection, doc_id, {"seasonId": season_id})

    print(f"[OK] {collection}: updated {len(untagged)} docs")
    return len(untagged)


def run(
    store,
    season_id: str = "s1",
    name: str = LEGACY_SEASON_NAME,
    start_date: str = LEGACY_SEASON_START,
    collections: Iterable[str] = TAG_COLLECTIONS,
    batch_size: int = TAG_BATCH_SIZE,
) -> Dict[str, int]:
    ensure_season_doc(store, season_id, name, start_date)
    return {c: tag_collection(store, c, season_id, batch_size) for c in collections}


def main(argv=None) -> int:
    load_dotenv(ROOT / ".env", override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    ap = argparse.ArgumentParser(description="Tag untagged documents with a season id.")
    ap.add_argument("--season", default=os.getenv("SEASON_ID", "s1"))
    ap.add_argument("--name", default=os.getenv("S1_NAME", LEGACY_SEASON_NAME))
    ap.add_argument("--start-date", default=os.getenv("S1_START_DATE", LEGACY_SEASON_START))
    ap.add_argument("--database-url", default=DATABASE_URL)
    args = ap.parse_args(argv)

    try:
        store = DocumentStore.from_url(args.database_url)
        try:
            run(store, args.season, args.name, args.start_date)
        finally:
            store.close()
    except Exception as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    print("[DONE] season tag migration complete")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
