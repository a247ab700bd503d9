# models_canonical.py
"""
Canonical in-memory records.

Documents come out of the store in whatever shape they were written with
(current admin forms, older form revisions, import scripts). The `from_doc`
adapters below map every known shape into these dataclasses. Nothing past
this module reads a raw document.

Known legacy shapes:
- matches: scoreA/scoreB instead of scores{home,away}, teamA/teamB instead
  of homeTeamId/awayTeamId, `date` instead of dateISO, playersStats keyed by
  player name instead of player id
- players: `name` instead of `fullName`, Spanish type labels
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

STAT_KEYS = ("attack", "blocks", "assists", "service")

STATUS_SCHEDULED = "scheduled"
STATUS_COMPLETED = "completed"
STATUS_CANCELED = "canceled"
MATCH_STATUSES = (STATUS_SCHEDULED, STATUS_COMPLETED, STATUS_CANCELED)

DATA_SOURCE_LIVE = "live"
DATA_SOURCE_LEGACY_FIXED = "legacy-fixed"

_PLAYER_TYPES = {
    "teacher": "teacher",
    "profesor": "teacher",
    "student": "student",
    "estudiante": "student",
}


def _int(value: Any) -> int:
    """Coerce a stat value to int; anything unusable counts as 0."""
    if value is None or value == "":
        return 0
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def _str_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class StatLine:
    attack: int = 0
    blocks: int = 0
    assists: int = 0
    service: int = 0

    @classmethod
    def from_mapping(cls, data: Any) -> "StatLine":
        if not isinstance(data, dict):
            return cls()
        return cls(**{key: _int(data.get(key)) for key in STAT_KEYS})

    def add(self, other: "StatLine") -> "StatLine":
        return StatLine(**{key: getattr(self, key) + getattr(other, key) for key in STAT_KEYS})

    def get(self, key: str) -> int:
        if key == "total":
            return self.total
        return getattr(self, key)

    @property
    def total(self) -> int:
        return self.attack + self.blocks + self.assists + self.service

    def has_any(self) -> bool:
        return any(getattr(self, key) for key in STAT_KEYS)

    def to_dict(self) -> Dict[str, int]:
        return {key: getattr(self, key) for key in STAT_KEYS}


@dataclass
class Season:
    id: str
    name: str = ""
    start_date: str = ""
    is_active: bool = False
    data_source: str = DATA_SOURCE_LIVE

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> Optional["Season"]:
        season_id = _str_or_none(doc.get("id"))
        if season_id is None:
            return None
        data_source = doc.get("dataSource")
        if data_source not in (DATA_SOURCE_LIVE, DATA_SOURCE_LEGACY_FIXED):
            data_source = DATA_SOURCE_LIVE
        return cls(
            id=season_id,
            name=str(doc.get("name") or ""),
            start_date=str(doc.get("startDate") or ""),
            is_active=bool(doc.get("isActive")),
            data_source=data_source,
        )

    @property
    def is_legacy(self) -> bool:
        return self.data_source == DATA_SOURCE_LEGACY_FIXED

    def to_doc(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "startDate": self.start_date,
            "isActive": self.is_active,
            "dataSource": self.data_source,
        }

    def to_json(self) -> Dict[str, Any]:
        return {"id": self.id, **self.to_doc()}


@dataclass
class Team:
    id: str
    season_id: Optional[str] = None
    name: str = ""
    slug: str = ""
    logo_file: Optional[str] = None

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> Optional["Team"]:
        team_id = _str_or_none(doc.get("id"))
        if team_id is None:
            return None
        return cls(
            id=team_id,
            season_id=_str_or_none(doc.get("seasonId")),
            name=str(doc.get("name") or ""),
            slug=str(doc.get("slug") or ""),
            logo_file=_str_or_none(doc.get("logoFile")),
        )

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def to_doc(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {"seasonId": self.season_id, "name": self.name, "slug": self.slug}
        if self.logo_file:
            doc["logoFile"] = self.logo_file
        return doc

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "seasonId": self.season_id,
            "name": self.display_name,
            "slug": self.slug,
            "logoFile": self.logo_file,
        }


@dataclass
class Match:
    id: str
    season_id: Optional[str] = None
    date_iso: Optional[str] = None
    time_hhmm: Optional[str] = None
    home_team_id: Optional[str] = None
    away_team_id: Optional[str] = None
    status: str = STATUS_SCHEDULED
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    phase: Optional[str] = None
    # keyed by player id, or by player name in legacy documents
    player_stats: Dict[str, StatLine] = field(default_factory=dict)

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> Optional["Match"]:
        match_id = _str_or_none(doc.get("id"))
        if match_id is None:
            return None

        scores = doc.get("scores") if isinstance(doc.get("scores"), dict) else {}
        home = _optional_int(scores.get("home"))
        if home is None:
            home = _optional_int(doc.get("scoreA"))
        away = _optional_int(scores.get("away"))
        if away is None:
            away = _optional_int(doc.get("scoreB"))
        # both or neither
        if home is None or away is None:
            home = away = None

        date_iso = _str_or_none(doc.get("dateISO"))
        if date_iso is None and doc.get("date"):
            date_iso = str(doc["date"])[:10]

        status = doc.get("status")
        if status not in MATCH_STATUSES:
            status = STATUS_COMPLETED if home is not None else STATUS_SCHEDULED

        raw_stats = doc.get("playersStats")
        player_stats: Dict[str, StatLine] = {}
        if isinstance(raw_stats, dict):
            for key, value in raw_stats.items():
                player_stats[str(key)] = StatLine.from_mapping(value)

        return cls(
            id=match_id,
            season_id=_str_or_none(doc.get("seasonId")),
            date_iso=date_iso,
            time_hhmm=_str_or_none(doc.get("timeHHmm")),
            home_team_id=_str_or_none(doc.get("homeTeamId") or doc.get("teamA")),
            away_team_id=_str_or_none(doc.get("awayTeamId") or doc.get("teamB")),
            status=status,
            home_score=home,
            away_score=away,
            phase=_str_or_none(doc.get("phase")),
            player_stats=player_stats,
        )

    @property
    def has_result(self) -> bool:
        return self.home_score is not None and self.away_score is not None

    def starts_at(self) -> Optional[datetime]:
        if not self.date_iso:
            return None
        try:
            return datetime.strptime(f"{self.date_iso} {self.time_hhmm or '00:00'}", "%Y-%m-%d %H:%M")
        except ValueError:
            return None

    def to_doc(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "seasonId": self.season_id,
            "dateISO": self.date_iso,
            "timeHHmm": self.time_hhmm,
            "homeTeamId": self.home_team_id,
            "awayTeamId": self.away_team_id,
            "status": self.status,
            "scores": {"home": self.home_score, "away": self.away_score},
        }
        if self.phase:
            doc["phase"] = self.phase
        if self.player_stats:
            doc["playersStats"] = {key: line.to_dict() for key, line in self.player_stats.items()}
        return doc

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "seasonId": self.season_id,
            "dateISO": self.date_iso,
            "timeHHmm": self.time_hhmm,
            "homeTeamId": self.home_team_id,
            "awayTeamId": self.away_team_id,
            "status": self.status,
            "scores": {"home": self.home_score, "away": self.away_score},
            "phase": self.phase,
        }


@dataclass
class Roster:
    id: str
    season_id: Optional[str]
    team_id: str
    player_ids: List[str] = field(default_factory=list)

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> Optional["Roster"]:
        team_id = _str_or_none(doc.get("teamId"))
        if team_id is None:
            return None
        season_id = _str_or_none(doc.get("seasonId"))
        player_ids: List[str] = []
        raw_ids = doc.get("playerIds")
        for pid in raw_ids if isinstance(raw_ids, list) else []:
            pid = _str_or_none(pid)
            if pid and pid not in player_ids:
                player_ids.append(pid)
        return cls(
            id=_str_or_none(doc.get("id")) or f"{season_id}_{team_id}",
            season_id=season_id,
            team_id=team_id,
            player_ids=player_ids,
        )

    def to_doc(self) -> Dict[str, Any]:
        return {"seasonId": self.season_id, "teamId": self.team_id, "playerIds": list(self.player_ids)}


@dataclass
class Player:
    id: str
    full_name: str = ""
    type: Optional[str] = None
    photo_url: Optional[str] = None

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> Optional["Player"]:
        player_id = _str_or_none(doc.get("id"))
        if player_id is None:
            return None
        raw_type = str(doc.get("type") or "").strip().lower()
        return cls(
            id=player_id,
            full_name=str(doc.get("fullName") or doc.get("name") or "").strip(),
            type=_PLAYER_TYPES.get(raw_type),
            photo_url=_str_or_none(doc.get("photoUrl")),
        )

    @property
    def display_name(self) -> str:
        return self.full_name or self.id

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fullName": self.display_name,
            "type": self.type,
            "photoUrl": self.photo_url,
        }


@dataclass
class PlayerStat:
    id: str
    season_id: Optional[str]
    match_id: Optional[str]
    player_id: Optional[str]
    stats: StatLine = field(default_factory=StatLine)

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> Optional["PlayerStat"]:
        stat_id = _str_or_none(doc.get("id"))
        if stat_id is None:
            return None
        return cls(
            id=stat_id,
            season_id=_str_or_none(doc.get("seasonId")),
            match_id=_str_or_none(doc.get("matchId")),
            player_id=_str_or_none(doc.get("playerId")),
            stats=StatLine.from_mapping(doc),
        )

    def to_doc(self) -> Dict[str, Any]:
        return {
            "seasonId": self.season_id,
            "matchId": self.match_id,
            "playerId": self.player_id,
            **self.stats.to_dict(),
        }


@dataclass
class Trade:
    id: str
    season_id: str
    player_id: str
    from_team_id: str
    to_team_id: str
    note: str = ""
    timestamp: Optional[str] = None

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> Optional["Trade"]:
        trade_id = _str_or_none(doc.get("id"))
        player_id = _str_or_none(doc.get("playerId"))
        if trade_id is None or player_id is None:
            return None
        return cls(
            id=trade_id,
            season_id=str(doc.get("seasonId") or ""),
            player_id=player_id,
            from_team_id=str(doc.get("fromTeamId") or ""),
            to_team_id=str(doc.get("toTeamId") or ""),
            note=str(doc.get("note") or ""),
            timestamp=_str_or_none(doc.get("timestamp")),
        )

    def to_doc(self) -> Dict[str, Any]:
        return {
            "seasonId": self.season_id,
            "playerId": self.player_id,
            "fromTeamId": self.from_team_id,
            "toTeamId": self.to_team_id,
            "note": self.note,
            "timestamp": self.timestamp,
        }


def load_records(model, docs: Iterable[Dict[str, Any]]) -> list:
    """Adapt a snapshot; documents missing their identifiers are dropped."""
    records = []
    dropped = 0
    for doc in docs:
        record = model.from_doc(doc)
        if record is None:
            dropped += 1
            continue
        records.append(record)
    if dropped:
        logger.warning("dropped %d %s document(s) missing identifiers", dropped, model.__name__)
    return records
