#!/usr/bin/env python3
# scripts/dedupe_players.py
"""
Merge player documents that share a name key.

The survivor of each group is the first player with a fullName (else the
first one). References in rosters, playerStats and trades are rewritten to
the survivor, then the duplicates are deleted, one batch per duplicate.

DRY_RUN defaults on; DRY_RUN=0 (or --apply) writes.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from analysis.names import name_key  # noqa: E402
from dotenv import load_dotenv  # noqa: E402

from webapp.config import DATABASE_URL  # noqa: E402
from webapp.services.document_store import DocumentStore  # noqa: E402


def duplicate_groups(players: List[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    groups: Dict[str, List[Dict[str, Any]]] = {}
    for doc in players:
        raw = doc.get("fullName") or doc.get("name")
        if not raw:
            continue
        groups.setdefault(name_key(str(raw)), []).append(doc)
    return {key: docs for key, docs in groups.items() if len(docs) > 1}


def pick_survivor(docs: List[Dict[str, Any]]) -> Dict[str, Any]:
    for doc in docs:
        if doc.get("fullName"):
            return doc
    return docs[0]


def _merge_one(store, dup_id: str, keep_id: str, dry_run: bool) -> int:
    """Rewrite every reference to dup_id. Returns the number of docs touched."""
    batch = store.batch()
    touched = 0

    for roster in store.list("rosters", array_contains=("playerIds", dup_id)):
        next_ids: List[str] = []
        for pid in roster.get("playerIds") or []:
            pid = keep_id if pid == dup_id else pid
            if pid not in next_ids:
                next_ids.append(pid)
        touched += 1
        if dry_run:
            print(f"[DRY-RUN] update roster {roster['id']} -> {dup_id} => {keep_id}")
        else:
            batch.update("rosters", roster["id"], {"playerIds": next_ids})

    for collection in ("playerStats", "trades"):
        for doc in store.list(collection, where={"playerId": dup_id}):
            touched += 1
            if dry_run:
                print(f"[DRY-RUN] update {collection} {doc['id']} -> {dup_id} => {keep_id}")
            else:
                batch.update(collection, doc["id"], {"playerId": keep_id})

    if dry_run:
        print(f"[DRY-RUN] delete player {dup_id}")
    else:
        batch.delete("players", dup_id)
        batch.commit()
    return touched


def run(store, dry_run: bool = True) -> Dict[str, Any]:
    groups = duplicate_groups(store.list("players"))
    if not groups:
        print("[OK] no duplicate player names found")
        return {"groups": 0, "removed": [], "references": 0}

    print(f"[OK] found {len(groups)} duplicate name group(s)")

    removed: List[str] = []
    references = 0
    for key, docs in groups.items():
        keep = pick_survivor(docs)
        dups = [d for d in docs if d["id"] != keep["id"]]
        print(f"- {key}: keep {keep['id']}, remove {', '.join(d['id'] for d in dups)}")
        for dup in dups:
            references += _merge_one(store, dup["id"], keep["id"], dry_run)
            removed.append(dup["id"])

    print("[OK] dry run complete" if dry_run else "[OK] deduplication complete")
    return {"groups": len(groups), "removed": removed, "references": references}


def main(argv=None) -> int:
    load_dotenv(ROOT / ".env", override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    ap = argparse.ArgumentParser(description="Merge duplicate player documents by normalized name.")
    ap.add_argument("--apply", action="store_true", help="Write changes (same as DRY_RUN=0).")
    ap.add_argument("--database-url", default=DATABASE_URL)
    args = ap.parse_args(argv)

    dry_run = os.getenv("DRY_RUN", "1") != "0" and not args.apply

    try:
        store = DocumentStore.from_url(args.database_url)
        try:
            run(store, dry_run=dry_run)
        finally:
            store.close()
    except Exception as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
