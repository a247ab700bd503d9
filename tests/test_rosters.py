import pytest

from webapp.services.errors import NotFoundError, ValidationError
from webapp.services.rosters import move_player


@pytest.fixture()
def two_rosters(store):
    store.set("teams", "red", {"seasonId": "s2", "name": "Red"})
    store.set("teams", "blue", {"seasonId": "s2", "name": "Blue"})
    store.set("rosters", "s2_red", {"seasonId": "s2", "teamId": "red", "playerIds": ["p9", "p2"]})
    store.set("rosters", "s2_blue", {"seasonId": "s2", "teamId": "blue", "playerIds": ["p5"]})
    return store


def test_move_between_rosters(two_rosters):
    store = two_rosters
    before = set(store.get("rosters", "s2_red")["playerIds"]) | set(store.get("rosters", "s2_blue")["playerIds"])

    trade = move_player(store, "s2", "p9", "red", "blue", note="swap")

    red = store.get("rosters", "s2_red")["playerIds"]
    blue = store.get("rosters", "s2_blue")["playerIds"]
    assert red == ["p2"]
    assert blue == ["p5", "p9"]
    assert set(red) | set(blue) == before

    trades = store.list("trades")
    assert len(trades) == 1
    assert trades[0]["id"] == trade.id
    assert (trades[0]["fromTeamId"], trades[0]["toTeamId"], trades[0]["playerId"]) == ("red", "blue", "p9")
    assert trades[0]["note"] == "swap"
    assert trades[0]["timestamp"]


def test_same_team_or_empty_target_writes_nothing(two_rosters):
    store = two_rosters
    assert move_player(store, "s2", "p9", "red", "red") is None
    assert move_player(store, "s2", "p9", "red", None) is None
    assert store.list("trades") == []


def test_missing_target_roster_is_created(two_rosters):
    store = two_rosters
    store.set("teams", "green", {"seasonId": "s2", "name": "Green"})

    move_player(store, "s2", "p2", "red", "green")
    assert store.get("rosters", "s2_green") == {
        "id": "s2_green", "seasonId": "s2", "teamId": "green", "playerIds": ["p2"],
    }


def test_bad_moves_are_rejected_atomically(two_rosters):
    store = two_rosters
    with pytest.raises(ValidationError):
        move_player(store, "s2", "p5", "red", "blue")
    with pytest.raises(NotFoundError):
        move_player(store, "s2", "p9", "red", "purple")

    assert store.get("rosters", "s2_red")["playerIds"] == ["p9", "p2"]
    assert store.list("trades") == []


def test_move_without_source_team_takes_player_off_current_roster(two_rosters):
    store = two_rosters
    trade = move_player(store, "s2", "p9", None, "blue")

    assert store.get("rosters", "s2_red")["playerIds"] == ["p2"]
    assert store.get("rosters", "s2_blue")["playerIds"] == ["p5", "p9"]
    assert trade.from_team_id == "red"

    # already on the target roster: nothing to do
    assert move_player(store, "s2", "p9", None, "blue") is None
    assert len(store.list("trades")) == 1


def test_move_unrostered_player_without_source_team(two_rosters):
    store = two_rosters
    trade = move_player(store, "s2", "p7", None, "red")

    assert store.get("rosters", "s2_red")["playerIds"] == ["p9", "p2", "p7"]
    assert trade.from_team_id == ""
