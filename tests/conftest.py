import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from webapp import create_app  # noqa: E402

ADMIN_UID = "admin-uid"
SCOREKEEPER_UID = "score-uid"


@pytest.fixture()
def app():
    # fresh in-memory database per test
    app = create_app(
        {
            "TESTING": True,
            "DATABASE_URL": "sqlite://",
            "SECRET_KEY": "test-secret",
            "LIVE_POLL_SECONDS": 0,
        }
    )
    yield app
    app.extensions["volley"]["shutdown"]()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def store(app):
    return app.extensions["volley"]["store"]


@pytest.fixture()
def league(store):
    """
    Season s2 (active) with four teams; s1 is the legacy-fixed season.

    m1: red 25 - 20 blue (completed)
    m2: green 18 - 25 gold (completed)
    m3: red v green, far in the future (scheduled)
    """
    store.set("seasons", "s1", {"name": "Season 1", "startDate": "2025-01-01", "isActive": False, "dataSource": "legacy-fixed"})
    store.set("seasons", "s2", {"name": "Season 2", "startDate": "2026-01-30", "isActive": True, "dataSource": "live"})

    for team_id, name in [("red", "Red"), ("blue", "Blue"), ("green", "Green"), ("gold", "Gold")]:
        store.set("teams", team_id, {"seasonId": "s2", "name": name, "slug": team_id})

    players = {
        "p1": "Alex Kim",
        "p2": "Mr. Hall",
        "p3": "Lucas Wu",
        "p4": "Rocco Lokee",
        "p5": "Ana Diaz",
        "p6": "Ben Ortiz",
    }
    for pid, name in players.items():
        store.set("players", pid, {"fullName": name, "type": "teacher" if name.startswith("Mr.") else "student"})

    rosters = {"red": ["p1", "p2"], "blue": ["p3"], "green": ["p4", "p5"], "gold": ["p6"]}
    for team_id, pids in rosters.items():
        store.set("rosters", f"s2_{team_id}", {"seasonId": "s2", "teamId": team_id, "playerIds": pids})

    store.set("matches", "m1", {
        "seasonId": "s2", "dateISO": "2026-01-30", "timeHHmm": "15:30",
        "homeTeamId": "red", "awayTeamId": "blue", "status": "completed",
        "scores": {"home": 25, "away": 20},
    })
    store.set("matches", "m2", {
        "seasonId": "s2", "dateISO": "2026-01-30", "timeHHmm": "16:15",
        "homeTeamId": "green", "awayTeamId": "gold", "status": "completed",
        "scores": {"home": 18, "away": 25},
    })
    store.set("matches", "m3", {
        "seasonId": "s2", "dateISO": "2099-02-06", "timeHHmm": "15:30",
        "homeTeamId": "red", "awayTeamId": "green", "status": "scheduled",
        "scores": {"home": None, "away": None},
    })

    stat_rows = [
        ("st1", "m1", "p1", 5, 1, 0, 2),
        ("st2", "m1", "p2", 3, 0, 1, 0),
        ("st3", "m1", "p3", 4, 2, 0, 1),
        ("st4", "m2", "p4", 6, 0, 0, 3),
        ("st5", "m2", "p6", 2, 3, 4, 0),
    ]
    for sid, mid, pid, attack, blocks, assists, service in stat_rows:
        store.set("playerStats", sid, {
            "seasonId": "s2", "matchId": mid, "playerId": pid,
            "attack": attack, "blocks": blocks, "assists": assists, "service": service,
        })

    store.set("users", ADMIN_UID, {"role": "admin"})
    store.set("users", SCOREKEEPER_UID, {"role": "scorekeeper"})
    return store


@pytest.fixture()
def as_admin():
    return {"X-User-Id": ADMIN_UID}


@pytest.fixture()
def as_scorekeeper():
    return {"X-User-Id": SCOREKEEPER_UID}
