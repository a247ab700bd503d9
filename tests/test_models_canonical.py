from models_canonical import (
    Match,
    Player,
    PlayerStat,
    Roster,
    Season,
    StatLine,
    load_records,
)


def test_match_current_shape():
    m = Match.from_doc({
        "id": "m1", "seasonId": "s2", "dateISO": "2026-01-30", "timeHHmm": "15:30",
        "homeTeamId": "red", "awayTeamId": "blue", "status": "completed",
        "scores": {"home": 25, "away": 20},
        "playersStats": {"p1": {"attack": "3"}},
    })
    assert (m.home_score, m.away_score) == (25, 20)
    assert m.has_result
    assert m.player_stats == {"p1": StatLine(attack=3)}
    assert m.starts_at().hour == 15


def test_match_legacy_shape():
    m = Match.from_doc({"id": "m9", "teamA": "a", "teamB": "b", "scoreA": 21, "scoreB": "25",
                        "date": "2025-03-14T18:00:00Z"})
    assert (m.home_team_id, m.away_team_id) == ("a", "b")
    assert (m.home_score, m.away_score) == (21, 25)
    assert m.date_iso == "2025-03-14"
    assert m.status == "completed"


def test_one_sided_score_is_no_score():
    m = Match.from_doc({"id": "m", "scores": {"home": 25, "away": None}})
    assert not m.has_result
    assert m.status == "scheduled"


def test_roster_dedupes_and_defaults_id():
    r = Roster.from_doc({"seasonId": "s2", "teamId": "red", "playerIds": ["p1", "p2", "p1", None]})
    assert r.id == "s2_red"
    assert r.player_ids == ["p1", "p2"]


def test_player_legacy_name_and_type_labels():
    p = Player.from_doc({"id": "x", "name": "Mr. Solis", "type": "Profesor"})
    assert (p.full_name, p.type) == ("Mr. Solis", "teacher")
    assert Player.from_doc({"id": "y", "type": "estudiante"}).type == "student"
    assert Player.from_doc({"id": "z", "type": "coach"}).type is None


def test_season_data_source_defaults_live():
    assert Season.from_doc({"id": "s2", "isActive": True}).data_source == "live"
    assert Season.from_doc({"id": "s1", "dataSource": "legacy-fixed"}).is_legacy


def test_load_records_drops_docs_without_ids():
    stats = load_records(PlayerStat, [{"id": "a", "playerId": "p1", "attack": None}, {"playerId": "p2"}])
    assert [s.id for s in stats] == ["a"]
    assert stats[0].stats == StatLine()
