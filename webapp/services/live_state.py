# webapp/services/live_state.py
"""
Per-season view of the live collections, fed by hub subscriptions.

Subscriptions are opened lazily the first time a season (or a global
collection) is asked for and stay open until `close()`. Every snapshot
that arrives replaces the cached documents; adapted records are rebuilt on
next access.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from analysis import aggregate_player_stats, compute_standings, player_team_map
from analysis.models import Standing
from models_canonical import (
    Match,
    Player,
    PlayerStat,
    Roster,
    Season,
    StatLine,
    Team,
    load_records,
)
from webapp.services.subscription_hub import SubscriptionHub, key_for

logger = logging.getLogger(__name__)


@dataclass
class SeasonSnapshot:
    season_id: Optional[str]
    teams: List[Team] = field(default_factory=list)
    matches: List[Match] = field(default_factory=list)
    rosters: List[Roster] = field(default_factory=list)
    player_stats: List[PlayerStat] = field(default_factory=list)
    players: List[Player] = field(default_factory=list)

    @property
    def teams_by_id(self) -> Dict[str, Team]:
        return {t.id: t for t in self.teams}

    @property
    def players_by_id(self) -> Dict[str, Player]:
        return {p.id: p for p in self.players}

    def team_of(self) -> Dict[str, str]:
        return player_team_map(self.rosters)

    def roster_for(self, team_id: str) -> Optional[Roster]:
        for r in self.rosters:
            if r.team_id == team_id:
                return r
        return None

    def player_totals(self) -> Dict[str, StatLine]:
        return aggregate_player_stats(self.player_stats, self.season_id)

    def standings(self) -> List[Standing]:
        return compute_standings(self.matches, self.teams)


class LiveLeagueState:
    def __init__(self, hub: SubscriptionHub):
        self._hub = hub
        self._lock = threading.RLock()
        self._docs: Dict[str, List[Dict[str, Any]]] = {}
        self._records: Dict[str, list] = {}
        self._unsubs: Dict[str, Callable[[], None]] = {}

    def _on_docs(self, key: str, docs: List[Dict[str, Any]]) -> None:
        with self._lock:
            self._docs[key] = docs
            self._records.pop(key, None)

    def _ensure(self, collection: str, season_id: Optional[str] = None) -> str:
        key = key_for(collection, season_id)
        with self._lock:
            if key not in self._unsubs:
                self._unsubs[key] = self._hub.subscribe(
                    collection,
                    lambda docs: self._on_docs(key, docs),
                    season_id=season_id,
                )
        return key

    def _records_for(self, model, collection: str, season_id: Optional[str] = None) -> list:
        key = self._ensure(collection, season_id)
        with self._lock:
            records = self._records.get(key)
            if records is None:
                records = load_records(model, self._docs.get(key, []))
                self._records[key] = records
            return list(records)

    # ---------- global collections ----------

    def seasons(self) -> List[Season]:
        return self._records_for(Season, "seasons")

    def players(self) -> List[Player]:
        return self._records_for(Player, "players")

    def all_player_stats(self) -> List[PlayerStat]:
        return self._records_for(PlayerStat, "playerStats")

    def match_dates(self) -> Dict[str, Dict[str, Any]]:
        """Knockout slot dates keyed by slot id (semifinal1, semifinal2, final)."""
        key = self._ensure("matchDates")
        with self._lock:
            return {doc["id"]: doc for doc in self._docs.get(key, [])}

    # ---------- per season ----------

    def snapshot(self, season_id: Optional[str]) -> SeasonSnapshot:
        if not season_id:
            return SeasonSnapshot(season_id=None)
        return SeasonSnapshot(
            season_id=season_id,
            teams=self._records_for(Team, "teams", season_id),
            matches=self._records_for(Match, "matches", season_id),
            rosters=self._records_for(Roster, "rosters", season_id),
            player_stats=self._records_for(PlayerStat, "playerStats", season_id),
            players=self.players(),
        )

    def close(self) -> None:
        with self._lock:
            unsubs = list(self._unsubs.values())
            self._unsubs.clear()
            self._docs.clear()
            self._records.clear()
        for unsubscribe in unsubs:
            unsubscribe()
        logger.debug("live state closed (%d subscriptions)", len(unsubs))
