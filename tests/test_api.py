"""End-to-end tests for the HTTP routers."""

import pytest


def register(client, username):
    response = client.post("/api/users", json={"username": username})
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def players(client):
    return {name: register(client, name) for name in ("ana", "ben", "cid", "dee")}


class TestHealth:
    def test_root(self, client):
        assert client.get("/").json()["status"] == "ok"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestUsers:
    def test_register_uses_default_rating(self, client):
        user = register(client, "eve")
        assert user["rating"] == 1200.0
        assert client.get(f"/api/users/{user['id']}").json()["username"] == "eve"

    def test_duplicate_username(self, client):
        register(client, "eve")
        response = client.post("/api/users", json={"username": "eve"})
        assert response.status_code == 409

    def test_unknown_user(self, client):
        assert client.get("/api/users/nobody").status_code == 404


class TestSingleMatchFlow:
    def test_create_accept_score(self, client, players):
        ana, ben = players["ana"], players["ben"]

        created = client.post(
            "/api/games/single",
            json={"creator_user_id": ana["id"], "rival": ben["id"]},
        )
        assert created.status_code == 200
        game_id = created.json()["id"]
        assert created.json()["status"] == "pending"

        view = client.get(f"/api/games/{game_id}").json()
        assert view["team_players"] == 1
        assert [len(team["slots"]) for team in view["teams"]] == [1, 1]
        rival_slot = view["teams"][1]["slots"][0]
        assert rival_slot["user_id"] == ben["id"]
        assert rival_slot["is_vacant"] is True

        invitations = client.get(f"/api/users/{ben['id']}/invitations").json()
        assert [inv["slot_id"] for inv in invitations] == [rival_slot["slot_id"]]
        assert invitations[0]["game_id"] == game_id
        assert client.get(f"/api/users/{players['cid']['id']}/invitations").json() == []

        wrong = client.post(
            f"/api/slots/{rival_slot['slot_id']}/accept", json={"user_id": players["cid"]["id"]}
        )
        assert wrong.status_code == 409

        accepted = client.post(
            f"/api/slots/{rival_slot['slot_id']}/accept", json={"user_id": ben["id"]}
        )
        assert accepted.status_code == 200
        assert accepted.json()["is_vacant"] is False

        view = client.get(f"/api/games/{game_id}").json()
        assert view["status"] == "confirmed"
        assert client.get(f"/api/users/{ben['id']}/invitations").json() == []

        teams = [
            {"team_id": view["teams"][0]["team_id"], "score": 1},
            {"team_id": view["teams"][1]["team_id"], "score": 0},
        ]
        scored = client.post(f"/api/games/{game_id}/score", json={"teams": teams})
        assert scored.status_code == 200
        assert scored.json()["status"] == "finished"

        assert client.get(f"/api/users/{ana['id']}").json()["rating"] == 1216.0
        assert client.get(f"/api/users/{ben['id']}").json()["rating"] == 1184.0

        leaderboard = client.get("/api/users/leaderboard").json()
        assert leaderboard[0]["id"] == ana["id"]
        assert leaderboard[-1]["id"] == ben["id"]

        again = client.post(f"/api/games/{game_id}/score", json={"teams": teams})
        assert again.status_code == 409
        assert client.get(f"/api/users/{ana['id']}").json()["rating"] == 1216.0

        finished = client.get("/api/games", params={"status": "finished"}).json()
        assert [game["id"] for game in finished] == [game_id]

    def test_open_rival_listed_for_everyone(self, client, players):
        created = client.post(
            "/api/games/single", json={"creator_user_id": players["ana"]["id"], "rival": "all"}
        ).json()

        for name in ("ben", "cid"):
            invitations = client.get(f"/api/users/{players[name]['id']}/invitations").json()
            assert [inv["game_id"] for inv in invitations] == [created["id"]]
            assert invitations[0]["all_players_invited"] is True

    def test_unknown_creator(self, client):
        response = client.post("/api/games/single", json={"creator_user_id": "ghost"})
        assert response.status_code == 404


class TestDoubleMatchFlow:
    def test_full_flow(self, client, players):
        ana, ben, cid, dee = (players[n] for n in ("ana", "ben", "cid", "dee"))
        created = client.post(
            "/api/games/double",
            json={"creator_user_id": ana["id"], "partner": ben["id"], "rivals": ["all", "all"]},
        )
        assert created.status_code == 200
        game_id = created.json()["id"]

        view = client.get(f"/api/games/{game_id}").json()
        (_, partner_slot), (rival1_slot, rival2_slot) = (team["slots"] for team in view["teams"])

        for slot, user in ((partner_slot, ben), (rival1_slot, cid), (rival2_slot, dee)):
            response = client.post(
                f"/api/slots/{slot['slot_id']}/accept", json={"user_id": user["id"]}
            )
            assert response.status_code == 200

        view = client.get(f"/api/games/{game_id}").json()
        assert view["status"] == "confirmed"

        teams = [
            {"team_id": view["teams"][0]["team_id"], "score": 0},
            {"team_id": view["teams"][1]["team_id"], "score": 3},
        ]
        assert client.post(f"/api/games/{game_id}/score", json={"teams": teams}).status_code == 200

        ratings = {u["id"]: client.get(f"/api/users/{u['id']}").json()["rating"]
                   for u in (ana, ben, cid, dee)}
        assert ratings == {ana["id"]: 1168, ben["id"]: 1168, cid["id"]: 1232, dee["id"]: 1232}

    def test_wrong_rival_count(self, client, players):
        response = client.post(
            "/api/games/double",
            json={"creator_user_id": players["ana"]["id"], "partner": "all", "rivals": ["all"]},
        )
        assert response.status_code == 400
        assert client.get("/api/games").json() == []


class TestErrors:
    def test_unknown_game(self, client):
        assert client.get("/api/games/missing").status_code == 404

    def test_unknown_slot(self, client, players):
        response = client.post(
            "/api/slots/missing/accept", json={"user_id": players["ana"]["id"]}
        )
        assert response.status_code == 404

    def test_score_on_pending_game(self, client, players):
        game_id = client.post(
            "/api/games/single", json={"creator_user_id": players["ana"]["id"]}
        ).json()["id"]
        view = client.get(f"/api/games/{game_id}").json()
        teams = [{"team_id": team["team_id"], "score": i} for i, team in enumerate(view["teams"])]

        response = client.post(f"/api/games/{game_id}/score", json={"teams": teams})
        assert response.status_code == 409

    def test_tied_score(self, client, players):
        game_id = client.post(
            "/api/games/single", json={"creator_user_id": players["ana"]["id"]}
        ).json()["id"]
        view = client.get(f"/api/games/{game_id}").json()
        teams = [{"team_id": team["team_id"], "score": 2} for team in view["teams"]]

        response = client.post(f"/api/games/{game_id}/score", json={"teams": teams})
        assert response.status_code == 400

    def test_score_needs_two_teams(self, client):
        response = client.post(
            "/api/games/whatever/score", json={"teams": [{"team_id": "a", "score": 1}]}
        )
        assert response.status_code == 422
