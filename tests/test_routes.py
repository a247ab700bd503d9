def test_seasons_default_to_active(client, league):
    res = client.get("/api/seasons")
    assert res.status_code == 200

    payload = res.json
    assert [s["id"] for s in payload["seasons"]] == ["s1", "s2"]
    assert payload["selectedSeasonId"] == "s2"
    assert payload["isAdmin"] is False


def test_non_admin_select_is_pinned(client, league):
    res = client.post("/api/seasons/select", json={"seasonId": "s1"})
    assert res.status_code == 200
    assert res.json["selectedSeasonId"] == "s2"


def test_admin_select_persists_in_session(client, league, as_admin):
    res = client.post("/api/seasons/select", json={"seasonId": "s1"}, headers=as_admin)
    assert res.json["selectedSeasonId"] == "s1"

    res = client.get("/api/seasons", headers=as_admin)
    assert res.json["selectedSeasonId"] == "s1"

    res = client.post("/api/seasons/select", json={"seasonId": "nope"}, headers=as_admin)
    assert res.status_code == 404
    assert "error" in res.json


def test_select_requires_season_id(client, league):
    assert client.post("/api/seasons/select", json={}).status_code == 400


def test_standings(client, league):
    payload = client.get("/api/standings").json

    table = payload["standings"]
    assert [row["teamId"] for row in table] == ["gold", "red", "blue", "green"]
    red = next(row for row in table if row["teamId"] == "red")
    assert (red["w"], red["l"], red["pointDiff"]) == (1, 0, 5)
    assert payload["bracket"]["semifinal1"]["home"]["teamId"] == "gold"
    assert payload["bracket"]["semifinal1"]["away"]["teamId"] == "green"
    assert set(payload["phases"]) == {"semifinal", "third", "final"}


def test_teams_and_team_detail(client, league):
    teams = client.get("/api/teams").json["teams"]
    assert [t["id"] for t in teams] == ["blue", "gold", "green", "red"]
    red = next(t for t in teams if t["id"] == "red")
    assert red["playerCount"] == 2
    assert red["stats"]["attack"] == 8

    detail = client.get("/api/teams/red").json
    assert [p["playerId"] for p in detail["players"]] == ["p1", "p2"]
    assert detail["leaders"]["attack"]["id"] == "p1"
    assert detail["leaders"]["attack"]["name"] == "Alex Kim"

    assert client.get("/api/teams/purple").status_code == 404


def test_schedule_and_upcoming(client, league):
    days = client.get("/api/schedule").json["days"]
    assert [d["dateISO"] for d in days] == ["2026-01-30", "2099-02-06"]
    assert days[0]["matches"][0]["homeTeamName"] == "Red"

    upcoming = client.get("/api/matches/upcoming").json["matches"]
    assert [m["id"] for m in upcoming] == ["m3"]
    assert client.get("/api/matches/upcoming?limit=x").status_code == 400


def test_match_detail(client, league):
    payload = client.get("/api/matches/m1").json
    assert payload["match"]["awayTeamName"] == "Blue"
    assert {row["playerId"] for row in payload["playerStats"]} == {"p1", "p2", "p3"}
    assert client.get("/api/matches/zzz").status_code == 404


def test_players_sorted(client, league):
    payload = client.get("/api/players?sort=attack").json
    ids = [p["playerId"] for p in payload["players"]]
    assert ids[:2] == ["p4", "p1"]
    # rostered player without stats still listed
    assert "p5" in ids
    assert client.get("/api/players?sort=height").status_code == 400


def test_player_detail(client, league):
    payload = client.get("/api/players/p1").json
    assert payload["team"]["id"] == "red"
    assert payload["seasonTotals"]["total"] == 8
    assert client.get("/api/players/nobody").status_code == 404


def test_leaders(client, league):
    leaders = client.get("/api/leaders").json["leaders"]
    assert leaders["attack"]["player"]["id"] == "p4"
    assert leaders["assists"]["player"]["name"] == "Ben Ortiz"
    assert leaders["blocks"]["team"]["id"] == "gold"


def test_cumulative_merges_legacy_until_backfilled(client, league, store):
    payload = client.get("/api/stats/cumulative").json
    assert payload["legacyMerged"] is True
    rows = {p["playerId"]: p for p in payload["players"]}
    # Mr. Hall (p2): 3 live attacks + 24 legacy
    assert rows["p2"]["attack"] == 27
    assert rows["legacy:Wilson Chen"]["name"] == "Wilson Chen"

    store.set("playerStats", "s1_p2", {"seasonId": "s1", "matchId": "s1_totals", "playerId": "p2", "attack": 24})
    payload = client.get("/api/stats/cumulative").json
    assert payload["legacyMerged"] is False
    assert {p["playerId"]: p for p in payload["players"]}["p2"]["attack"] == 27


def test_season_override_query(client, league, store, as_admin):
    store.set("teams", "s1_team-blue", {"seasonId": "s1", "name": "Team Blue"})

    teams = client.get("/api/teams?seasonId=s1", headers=as_admin).json["teams"]
    assert [t["id"] for t in teams] == ["s1_team-blue"]
    # not persisted
    assert client.get("/api/seasons", headers=as_admin).json["selectedSeasonId"] == "s2"


def test_admin_requires_auth(client, league, as_scorekeeper):
    assert client.delete("/api/admin/matches/m1").status_code == 401
    assert client.delete("/api/admin/matches/m1", headers=as_scorekeeper).status_code == 403
    assert client.delete("/api/admin/matches/m1", headers={"X-User-Id": "stranger"}).status_code == 403


def test_scorekeeper_submits_result(client, league, as_scorekeeper):
    body = {"homeScore": 25, "awayScore": 21, "playerStats": {"p1": {"attack": 3}}}
    res = client.post("/api/admin/matches/m3/result", json=body, headers=as_scorekeeper)
    assert res.status_code == 200
    assert res.json["match"]["status"] == "completed"

    red = next(r for r in client.get("/api/standings").json["standings"] if r["teamId"] == "red")
    assert red["w"] == 2

    bad = client.post(
        "/api/admin/matches/m3/result",
        json={"homeScore": 25, "awayScore": 21, "playerStats": {}},
        headers=as_scorekeeper,
    )
    assert bad.status_code == 400
    assert bad.json["error"] == "You must enter at least one stat for a player."


def test_admin_deletes_match(client, league, store, as_admin):
    res = client.delete("/api/admin/matches/m1", headers=as_admin)
    assert res.status_code == 200
    assert store.list("playerStats", where={"matchId": "m1"}) == []
    assert client.delete("/api/admin/matches/m1", headers=as_admin).status_code == 404


def test_admin_moves_player(client, league, store, as_admin):
    body = {"playerId": "p2", "fromTeamId": "red", "toTeamId": "blue", "note": "trade deadline"}
    res = client.post("/api/admin/rosters/move", json=body, headers=as_admin)
    assert res.status_code == 200
    assert res.json["moved"] is True
    assert res.json["trade"]["toTeamId"] == "blue"
    assert store.get("rosters", "s2_blue")["playerIds"] == ["p3", "p2"]

    same = client.post("/api/admin/rosters/move", json={**body, "fromTeamId": "blue"}, headers=as_admin)
    assert same.json["moved"] is False


def test_move_without_source_team_leaves_one_roster(client, league, store, as_admin):
    res = client.post("/api/admin/rosters/move", json={"playerId": "p1", "toTeamId": "blue"}, headers=as_admin)
    assert res.json["trade"]["fromTeamId"] == "red"
    assert store.get("rosters", "s2_red")["playerIds"] == ["p2"]
    assert store.get("rosters", "s2_blue")["playerIds"] == ["p3", "p1"]


def test_result_with_malformed_stats_is_rejected(client, league, as_scorekeeper):
    body = {"homeScore": 25, "awayScore": 20, "playerStats": ["p1"]}
    res = client.post("/api/admin/matches/m3/result", json=body, headers=as_scorekeeper)
    assert res.status_code == 400
    assert res.json["error"] == "You must enter at least one stat for a player."
