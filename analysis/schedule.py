from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from models_canonical import Match

from .constants import BRACKET_SLOTS, PHASES, UPCOMING_LIMIT
from .models import Standing


def _chrono_key(m: Match) -> Tuple[int, datetime, str]:
    start = m.starts_at()
    # undated matches sort last
    return (0, start, m.id) if start is not None else (1, datetime.max, m.id)


def upcoming_matches(
    matches: Iterable[Match],
    now: Optional[datetime] = None,
    limit: int = UPCOMING_LIMIT,
) -> List[Match]:
    now = now or datetime.now()
    future = [m for m in matches if (m.starts_at() or now) > now]
    return sorted(future, key=_chrono_key)[:limit]


def schedule_by_date(matches: Iterable[Match]) -> List[Tuple[str, List[Match]]]:
    """
    [(dateISO, matches of that day)], days ascending, matches by kick-off
    time. Matches without a date are grouped under "" at the end.
    """
    grouped: Dict[str, List[Match]] = {}
    for m in matches:
        grouped.setdefault(m.date_iso or "", []).append(m)

    days = sorted(grouped.items(), key=lambda kv: (kv[0] == "", kv[0]))
    return [(day, sorted(group, key=_chrono_key)) for day, group in days]


def matches_by_phase(matches: Iterable[Match]) -> Dict[str, List[Match]]:
    by_phase: Dict[str, List[Match]] = {phase: [] for phase in PHASES}
    for m in matches:
        if m.phase in by_phase:
            by_phase[m.phase].append(m)
    for group in by_phase.values():
        group.sort(key=_chrono_key)
    return by_phase


def knockout_bracket(
    standings: List[Standing],
    match_dates: Mapping[str, Mapping[str, Any]],
) -> Optional[Dict[str, Any]]:
    """
    Top four seeds: semifinal 1 is 1st v 4th, semifinal 2 is 2nd v 3rd.
    Dates come from the matchDates collection (ids semifinal1/semifinal2/final).
    """
    if len(standings) < 4:
        return None

    s1, s2, s3, s4 = standings[:4]

    def slot_date(slot: str) -> Optional[Dict[str, Any]]:
        entry = match_dates.get(slot)
        if not entry:
            return None
        return {"date": entry.get("date"), "time": entry.get("time")}

    dates = {slot: slot_date(slot) for slot in BRACKET_SLOTS}
    return {
        "semifinal1": {"home": s1.to_json(), "away": s4.to_json(), "schedule": dates["semifinal1"]},
        "semifinal2": {"home": s2.to_json(), "away": s3.to_json(), "schedule": dates["semifinal2"]},
        "final": {"schedule": dates["final"]},
    }
