# webapp/services/subscription_hub.py
"""
Shared live queries.

One store watch per key (collection + season filter) no matter how many
consumers ask for it. The first subscriber opens the watch, later ones get
the cached snapshot replayed synchronously, and the last unsubscribe tears
the watch down.

The hub is built once by `create_app()` and handed to its consumers; it is
closed at shutdown.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from webapp.services.document_store import Callback, DocumentStore, Snapshot

logger = logging.getLogger(__name__)


def key_for(collection: str, season_id: Optional[str] = None) -> str:
    return f"{collection}:{season_id}" if season_id else f"{collection}:*"


def _noop() -> None:
    return None


@dataclass
class _Entry:
    key: str
    listeners: Dict[int, Callback] = field(default_factory=dict)
    snapshot: Optional[Snapshot] = None
    stop: Callable[[], None] = _noop


class SubscriptionHub:
    def __init__(self, store: DocumentStore):
        self._store = store
        self._entries: Dict[str, _Entry] = {}
        self._tokens = itertools.count(1)
        self._lock = threading.RLock()

    def subscribe(
        self,
        collection: str,
        callback: Callback,
        season_id: Optional[str] = None,
    ) -> Callable[[], None]:
        key = key_for(collection, season_id)

        with self._lock:
            token = next(self._tokens)
            entry = self._entries.get(key)

            if entry is None:
                entry = _Entry(key=key, listeners={token: callback})
                self._entries[key] = entry
                where: Optional[Dict[str, Any]] = {"seasonId": season_id} if season_id else None
                logger.debug("opening live query %s", key)
                # the store emits the first snapshot before watch() returns
                entry.stop = self._store.watch(collection, where, lambda docs: self._emit(entry, docs))
            else:
                entry.listeners[token] = callback
                if entry.snapshot is not None:
                    callback(entry.snapshot)

        def unsubscribe() -> None:
            self._release(key, token)

        return unsubscribe

    def subscribe_season(
        self,
        collection: str,
        season_id: Optional[str],
        callback: Callback,
    ) -> Callable[[], None]:
        """Season-scoped subscribe; no season means no query at all."""
        if not season_id:
            return _noop
        return self.subscribe(collection, callback, season_id=season_id)

    def _release(self, key: str, token: int) -> None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.listeners.pop(token, None) is None:
                return
            if entry.listeners:
                return
            del self._entries[key]
            # stop before releasing so a resubscribe cannot overlap the old watch
            logger.debug("closing live query %s", key)
            entry.stop()

    def _emit(self, entry: _Entry, docs: Snapshot) -> None:
        with self._lock:
            entry.snapshot = docs
            listeners: List[Callback] = list(entry.listeners.values())
        for cb in listeners:
            cb(docs)

    def active_keys(self) -> List[str]:
        with self._lock:
            return sorted(self._entries)

    def listener_count(self, key: str) -> int:
        with self._lock:
            entry = self._entries.get(key)
            return len(entry.listeners) if entry is not None else 0

    def close(self) -> None:
        with self._lock:
            entries = list(self._entries.values())
            self._entries.clear()
        for entry in entries:
            entry.stop()
        logger.debug("hub closed (%d live queries)", len(entries))
