# webapp/services/document_store.py
"""
Schemaless document collections on top of the SQLAlchemy `documents` table.

Every collection (seasons, teams, matches, rosters, players, playerStats,
trades, users, matchDates) is a set of JSON documents addressed by
(collection, doc_id). Reads hand back plain dicts with the id folded in as
"id". Writes go through one session per call/batch with the usual
commit / rollback / close pattern, and every committed write re-emits the
snapshots of the live watches on the collections it touched.
"""

from __future__ import annotations

import copy
import itertools
import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

from db import Document, init_db, make_engine, make_session_factory
from webapp.services.errors import NotFoundError

logger = logging.getLogger(__name__)

Snapshot = List[Dict[str, Any]]
Callback = Callable[[Snapshot], None]

OP_SET = "set"
OP_UPDATE = "update"
OP_DELETE = "delete"
OP_DELETE_WHERE = "delete_where"


def new_doc_id() -> str:
    return uuid.uuid4().hex[:20]


def _payload(data: Dict[str, Any]) -> Dict[str, Any]:
    payload = copy.deepcopy(dict(data or {}))
    # the id lives in the row, never in the payload
    payload.pop("id", None)
    return payload


def _season_of(payload: Dict[str, Any]) -> Optional[str]:
    season_id = payload.get("seasonId")
    return str(season_id) if season_id not in (None, "") else None


def _matches(
    data: Dict[str, Any],
    where: Optional[Dict[str, Any]],
    array_contains: Optional[Tuple[str, Any]] = None,
) -> bool:
    for key, value in (where or {}).items():
        if data.get(key) != value:
            return False
    if array_contains is not None:
        field_name, value = array_contains
        values = data.get(field_name)
        if not isinstance(values, list) or value not in values:
            return False
    return True


def _to_doc(row: Document) -> Dict[str, Any]:
    return {"id": row.doc_id, **copy.deepcopy(row.data or {})}


@dataclass
class _Watch:
    collection: str
    where: Optional[Dict[str, Any]]
    callback: Callback
    last: Optional[Snapshot] = None


@dataclass
class _Op:
    kind: str
    collection: str
    doc_id: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)
    merge: bool = False


class WriteBatch:
    """
    Queued writes applied in ONE transaction by `commit()`.

    Nothing is written until commit; a failure in any write rolls back all of
    them. As a context manager the batch commits on a clean exit and is
    discarded if the block raises.
    """

    def __init__(self, store: "DocumentStore"):
        self._store = store
        self._ops: List[_Op] = []
        self._committed = False

    def __len__(self) -> int:
        return len(self._ops)

    def set(self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = False) -> "WriteBatch":
        self._ops.append(_Op(OP_SET, collection, str(doc_id), _payload(data), merge))
        return self

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        doc_id = new_doc_id()
        self._ops.append(_Op(OP_SET, collection, doc_id, _payload(data)))
        return doc_id

    def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> "WriteBatch":
        self._ops.append(_Op(OP_UPDATE, collection, str(doc_id), _payload(data)))
        return self

    def delete(self, collection: str, doc_id: str) -> "WriteBatch":
        self._ops.append(_Op(OP_DELETE, collection, str(doc_id)))
        return self

    def delete_where(self, collection: str, where: Dict[str, Any]) -> "WriteBatch":
        """Delete every document of `collection` matching `where` at commit time."""
        self._ops.append(_Op(OP_DELETE_WHERE, collection, data=dict(where)))
        return self

    def commit(self) -> int:
        if self._committed:
            raise RuntimeError("batch already committed")
        self._committed = True
        if not self._ops:
            return 0
        self._store._apply(self._ops)
        return len(self._ops)

    def __enter__(self) -> "WriteBatch":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.commit()
        return False


class DocumentStore:
    def __init__(self, engine):
        self.engine = engine
        self._Session = make_session_factory(engine)
        init_db(engine)

        self._lock = threading.RLock()
        self._watches: Dict[int, _Watch] = {}
        self._tokens = itertools.count(1)

    @classmethod
    def from_url(cls, url: str) -> "DocumentStore":
        return cls(make_engine(url))

    def close(self) -> None:
        with self._lock:
            self._watches.clear()
        self.engine.dispose()

    # ---------- reads ----------

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        session = self._Session()
        try:
            row = (
                session.query(Document)
                .filter(Document.collection == collection, Document.doc_id == str(doc_id))
                .one_or_none()
            )
            return _to_doc(row) if row is not None else None
        finally:
            session.close()

    def list(
        self,
        collection: str,
        where: Optional[Dict[str, Any]] = None,
        array_contains: Optional[Tuple[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> Snapshot:
        """Documents of one collection, ordered by document id."""
        session = self._Session()
        try:
            q = session.query(Document).filter(Document.collection == collection)
            season_id = (where or {}).get("seasonId")
            if season_id is not None:
                q = q.filter(Document.season_id == str(season_id))

            docs: Snapshot = []
            for row in q.order_by(Document.doc_id).all():
                if not _matches(row.data or {}, where, array_contains):
                    continue
                docs.append(_to_doc(row))
                if limit is not None and len(docs) >= limit:
                    break
            return docs
        finally:
            session.close()

    # ---------- single writes ----------

    def set(self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = False) -> None:
        self.batch().set(collection, doc_id, data, merge=merge).commit()

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        batch = self.batch()
        doc_id = batch.add(collection, data)
        batch.commit()
        return doc_id

    def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self.batch().update(collection, doc_id, data).commit()

    def delete(self, collection: str, doc_id: str) -> None:
        self.batch().delete(collection, doc_id).commit()

    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    # ---------- transaction ----------

    def _apply(self, ops: Iterable[_Op]) -> None:
        ops = list(ops)
        touched: Set[str] = set()
        session = self._Session()
        try:
            for op in ops:
                self._apply_op(session, op)
                # later ops of the same batch must see this one
                session.flush()
                touched.add(op.collection)
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

        logger.info("committed %d write(s) to %s", len(ops), ", ".join(sorted(touched)))
        self._notify(touched)

    def _find(self, session, collection: str, doc_id: str) -> Optional[Document]:
        return (
            session.query(Document)
            .filter(Document.collection == collection, Document.doc_id == doc_id)
            .one_or_none()
        )

    def _apply_op(self, session, op: _Op) -> None:
        if op.kind == OP_DELETE_WHERE:
            for row in session.query(Document).filter(Document.collection == op.collection).all():
                if _matches(row.data or {}, op.data):
                    session.delete(row)
            return

        row = self._find(session, op.collection, op.doc_id)

        if op.kind == OP_DELETE:
            if row is not None:
                session.delete(row)
            return

        if op.kind == OP_UPDATE:
            if row is None:
                raise NotFoundError(f"{op.collection}/{op.doc_id} not found")
            merged = {**(row.data or {}), **op.data}
        elif row is not None and op.merge:
            merged = {**(row.data or {}), **op.data}
        else:
            merged = dict(op.data)

        if row is None:
            session.add(
                Document(
                    collection=op.collection,
                    doc_id=op.doc_id,
                    season_id=_season_of(merged),
                    data=merged,
                )
            )
            return

        # assign a new dict so the JSON column is marked dirty
        row.data = merged
        row.season_id = _season_of(merged)
        row.updated_at = datetime.utcnow()

    # ---------- live queries ----------

    def watch(
        self,
        collection: str,
        where: Optional[Dict[str, Any]],
        callback: Callback,
    ) -> Callable[[], None]:
        """
        Live query. `callback` gets the current snapshot right away, then a
        fresh one after every committed write to `collection`. Returns the
        unsubscribe callable.
        """
        w = _Watch(collection=collection, where=dict(where) if where else None, callback=callback)
        with self._lock:
            token = next(self._tokens)
            self._watches[token] = w

        self._emit(w, self.list(collection, w.where))

        def unsubscribe() -> None:
            with self._lock:
                self._watches.pop(token, None)

        return unsubscribe

    def poll(self) -> int:
        """
        Re-run every watch and emit the snapshots that changed since they were
        last emitted (writes from other processes). Returns how many emitted.
        """
        with self._lock:
            watches = list(self._watches.values())

        emitted = 0
        for w in watches:
            snapshot = self.list(w.collection, w.where)
            if snapshot != w.last:
                self._emit(w, snapshot)
                emitted += 1
        return emitted

    def _notify(self, collections: Set[str]) -> None:
        with self._lock:
            watches = [w for w in self._watches.values() if w.collection in collections]
        for w in watches:
            self._emit(w, self.list(w.collection, w.where))

    def _emit(self, w: _Watch, snapshot: Snapshot) -> None:
        w.last = snapshot
        try:
            w.callback(copy.deepcopy(snapshot))
        except Exception:
            logger.exception("watch callback failed for %s", w.collection)
