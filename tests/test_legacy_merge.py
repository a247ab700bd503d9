from analysis import LEGACY_PLAYERS, LEGACY_TEAMS, merge_legacy_totals
from analysis.legacy import LegacyPlayerTotals
from models_canonical import Player, StatLine


def test_dataset_shape():
    assert len(LEGACY_PLAYERS) == 25
    assert {t["name"] for t in LEGACY_TEAMS} == {row.team for row in LEGACY_PLAYERS}
    hall = next(r for r in LEGACY_PLAYERS if r.name == "Mr. Hall")
    assert hall.stats == StatLine(attack=24, blocks=1, assists=0, service=6)


def test_matches_live_players_by_name_key():
    rows = [
        LegacyPlayerTotals("Mr. Hall", "Team Red", 24, 1, 0, 6),
        LegacyPlayerTotals("Héctor Chen", "Team Black", 0, 0, 0, 1),
    ]
    players = [Player(id="p2", full_name="mr.  hall 10")]
    live = {"p2": StatLine(attack=3, service=1)}

    merged, names = merge_legacy_totals(live, players, rows)

    assert merged["p2"] == StatLine(attack=27, blocks=1, assists=0, service=7)
    assert merged["legacy:Héctor Chen"] == StatLine(service=1)
    assert names["legacy:Héctor Chen"] == "Héctor Chen"
    # input untouched
    assert live == {"p2": StatLine(attack=3, service=1)}


def test_full_dataset_merges_into_empty_totals():
    merged, names = merge_legacy_totals({}, [])

    assert len(merged) == 25
    assert all(pid.startswith("legacy:") for pid in merged)
    assert sum(line.attack for line in merged.values()) == sum(r.attack for r in LEGACY_PLAYERS)
