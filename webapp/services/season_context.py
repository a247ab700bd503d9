# webapp/services/season_context.py
"""
Which season the caller is looking at.

The selection is persisted in a caller-provided mapping (the Flask session
cookie in the web layer). Non-admins are always pinned to the active season.
"""

from __future__ import annotations

from typing import Callable, List, MutableMapping, Optional

from models_canonical import Season, load_records
from webapp.services.errors import NotFoundError


class SeasonContext:
    STORAGE_KEY = "seasonId"

    def __init__(self, storage: MutableMapping, is_admin: bool = False):
        self._storage = storage
        self._is_admin = bool(is_admin)
        self._seasons: List[Season] = []
        self._loaded = False
        self._selected_id: Optional[str] = storage.get(self.STORAGE_KEY) or None

    # ---------- inputs ----------

    def on_seasons(self, seasons: List[Season]) -> None:
        self._seasons = list(seasons)
        self._loaded = True
        self._initialize()
        self._pin()

    def set_admin(self, is_admin: bool) -> None:
        self._is_admin = bool(is_admin)
        self._pin()

    def select_season(self, season_id: str) -> None:
        if self._loaded and season_id not in {s.id for s in self._seasons}:
            raise NotFoundError(f"Season {season_id} not found")
        self._persist(season_id)
        self._pin()

    def bind(self, hub) -> Callable[[], None]:
        return hub.subscribe("seasons", lambda docs: self.on_seasons(load_records(Season, docs)))

    # ---------- outputs ----------

    @property
    def seasons(self) -> List[Season]:
        return list(self._seasons)

    @property
    def is_admin(self) -> bool:
        return self._is_admin

    @property
    def is_loading(self) -> bool:
        return not self._loaded

    @property
    def selected_season_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def selected_season(self) -> Optional[Season]:
        for s in self._seasons:
            if s.id == self._selected_id:
                return s
        return None

    def active_season(self) -> Optional[Season]:
        for s in self._seasons:
            if s.is_active:
                return s
        return None

    # ---------- policy ----------

    def _persist(self, season_id: Optional[str]) -> None:
        self._selected_id = season_id
        if season_id is None:
            self._storage.pop(self.STORAGE_KEY, None)
        elif self._storage.get(self.STORAGE_KEY) != season_id:
            self._storage[self.STORAGE_KEY] = season_id

    def _initialize(self) -> None:
        if not self._seasons:
            # nothing to select; the stored id is kept for when seasons arrive
            self._selected_id = None
            return
        if self._selected_id in {s.id for s in self._seasons}:
            return
        active = self.active_season()
        self._persist(active.id if active is not None else self._seasons[0].id)

    def _pin(self) -> None:
        if self._is_admin:
            return
        active = self.active_season()
        if active is not None and self._selected_id != active.id:
            self._persist(active.id)
