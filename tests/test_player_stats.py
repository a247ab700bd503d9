import pytest

from analysis import (
    aggregate_player_stats,
    aggregate_team_stats,
    best_team,
    build_player_rows,
    player_team_map,
    resolve_leader,
    sort_player_rows,
    team_leaders,
)
from models_canonical import Player, PlayerStat, Roster, StatLine


def _row(sid, pid, season="s2", **stats):
    return PlayerStat.from_doc({"id": sid, "seasonId": season, "matchId": "m", "playerId": pid, **stats})


def test_sums_per_player_and_zeroes_missing_fields():
    rows = [_row("a", "p1", attack=3, blocks=1), _row("b", "p1", attack=2, blocks=0)]
    totals = aggregate_player_stats(rows, "s2")

    assert totals == {"p1": StatLine(attack=5, blocks=1, assists=0, service=0)}


def test_bad_values_and_missing_ids_are_dropped_not_raised():
    rows = [
        _row("a", "p1", attack="x", service="2"),
        PlayerStat.from_doc({"id": "b", "seasonId": "s2", "attack": 9}),
    ]
    assert aggregate_player_stats(rows) == {"p1": StatLine(service=2)}
    assert aggregate_player_stats([]) == {}


def test_idempotent_and_additive_over_seasons():
    rows = [
        _row("a", "p1", "s1", attack=1, service=4),
        _row("b", "p1", "s2", attack=2),
        _row("c", "p2", "s2", blocks=3),
        _row("d", "p2", "s1", assists=1),
    ]
    everything = aggregate_player_stats(rows)
    assert aggregate_player_stats(rows) == everything

    s1 = aggregate_player_stats(rows, "s1")
    s2 = aggregate_player_stats(rows, "s2")
    for pid, line in everything.items():
        assert s1.get(pid, StatLine()).add(s2.get(pid, StatLine())) == line


def test_team_totals_drop_players_without_roster():
    rosters = [
        Roster(id="s2_red", season_id="s2", team_id="red", player_ids=["p1", "p2"]),
        Roster(id="s2_blue", season_id="s2", team_id="blue", player_ids=["p3"]),
    ]
    totals = {
        "p1": StatLine(attack=1),
        "p2": StatLine(attack=2, blocks=1),
        "p3": StatLine(service=5),
        "ghost": StatLine(attack=50),
    }
    team_totals = aggregate_team_stats(totals, player_team_map(rosters))

    assert team_totals == {"red": StatLine(attack=3, blocks=1), "blue": StatLine(service=5)}


def test_leader_tie_goes_to_smallest_id():
    totals = {"zed": StatLine(attack=7), "amy": StatLine(attack=7), "bob": StatLine(attack=3)}

    leader = resolve_leader(totals, "attack")
    assert (leader.id, leader.value) == ("amy", 7)
    assert resolve_leader({}, "attack") is None
    with pytest.raises(ValueError):
        resolve_leader(totals, "kills")


def test_team_leaders_count_silent_members_as_zero():
    totals = {"p1": StatLine(attack=2), "p9": StatLine(blocks=9)}
    leaders = team_leaders(totals, ["p1", "p2"])

    assert leaders["attack"].id == "p1"
    # nobody on the roster blocked; tie at zero goes to the smallest id
    assert (leaders["blocks"].id, leaders["blocks"].value) == ("p1", 0)


def test_best_team():
    team_totals = {"red": StatLine(service=4), "blue": StatLine(service=6)}
    assert best_team(team_totals, "service").id == "blue"
    assert best_team({}, "service") is None


def test_rows_fall_back_to_raw_id_and_sort_by_any_key():
    totals = {"p1": StatLine(attack=1, service=9), "p2": StatLine(attack=5)}
    players = {"p2": Player(id="p2", full_name="Lucas Wu", type="student")}

    rows = build_player_rows(totals, players, {"p1": "red"})
    by_id = {r["playerId"]: r for r in rows}
    assert by_id["p1"]["name"] == "p1"
    assert by_id["p1"]["teamId"] == "red"
    assert by_id["p1"]["total"] == 10
    assert by_id["p2"]["type"] == "student"

    assert [r["playerId"] for r in sort_player_rows(rows, "attack")] == ["p2", "p1"]
    assert [r["playerId"] for r in sort_player_rows(rows, "total")] == ["p1", "p2"]
    with pytest.raises(ValueError):
        sort_player_rows(rows, "height")
