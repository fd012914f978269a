"""
Tests for the HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from chipsim.config import Config
from chipsim.core.rules import STORAGE_KEY
from chipsim.server.app import create_app
from chipsim.storage import MemoryStore


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def client(store):
    return TestClient(create_app(store=store, config=Config()))


@pytest.fixture
def started(client):
    response = client.post("/start_game", json={
        "players": [{"name": "Alice", "buy_in": 100}, {"name": "Bob", "buy_in": 100}],
        "small_blind": 5,
        "big_blind": 10,
    })
    assert response.status_code == 200
    return client


def _act(client, action, **params):
    return client.post("/action", json={"action": action, "params": params})


class TestStartGame:
    """Tests for starting a game over HTTP."""

    def test_start_game(self, started):
        state = started.get("/state").json()
        assert state["table"]["phase"] == "betting"
        assert state["pot_total"] == 15
        assert state["can_undo"]

    def test_start_game_through_action(self, client):
        response = _act(client, "start_game", players=[{"name": "A", "buy_in": 100}, {"buy_in": 100}])
        data = response.json()

        assert data["success"]
        assert [p["name"] for p in data["state"]["table"]["players"]] == ["A", "Player 2"]

    def test_single_player(self, client):
        response = client.post("/start_game", json={"players": [{"name": "Solo", "buy_in": 100}]})
        data = response.json()

        assert response.status_code == 200
        assert not data["success"]
        assert data["error"]["code"] == "insufficient_players"
        assert data["state"]["table"]["phase"] == "setup"

    def test_bad_buy_in(self, client):
        response = client.post("/start_game", json={"players": [{"name": "A", "buy_in": 0}]})
        assert response.status_code == 422


class TestBettingActions:
    """Tests for POST /action."""

    def test_call_and_check(self, started):
        assert _act(started, "call").json()["message"] == "Alice called $5"
        data = _act(started, "check").json()

        table = data["state"]["table"]
        assert data["success"]
        assert table["street"] == "flop"
        assert table["burn_card_pending"]
        assert table["pot"] == 20

    def test_action_during_burn_rejected(self, started):
        _act(started, "call")
        _act(started, "check")

        data = _act(started, "fold").json()

        assert not data["success"]
        assert data["error"]["code"] == "illegal_action"

        assert _act(started, "acknowledge_burn_card").json()["success"]

    def test_raise_below_minimum(self, started):
        data = _act(started, "raise", amount=15).json()

        assert not data["success"]
        assert data["error"]["code"] == "invalid_amount"
        assert data["state"]["table"]["current_bet"] == 10

    def test_out_of_turn(self, started):
        data = _act(started, "call", player_index=1).json()
        assert data["error"]["code"] == "out_of_turn"

    def test_raise_without_amount(self, started):
        assert _act(started, "raise").status_code == 400

    def test_unknown_action(self, started):
        assert _act(started, "shuffle").status_code == 400

    def test_undo(self, started):
        _act(started, "raise", amount=40)
        data = _act(started, "undo").json()

        assert data["success"]
        assert data["state"]["table"]["current_bet"] == 10

    def test_state_is_saved(self, started, store):
        _act(started, "call")
        assert store.load(STORAGE_KEY)["players"][0]["bet"] == 10


class TestShowdown:
    """Tests for resolving a hand over HTTP."""

    def _to_showdown(self, client):
        _act(client, "all_in")
        _act(client, "call")
        for _ in range(3):
            _act(client, "acknowledge_burn_card")

    def test_split_pot(self, started):
        self._to_showdown(started)

        data = _act(started, "declare_winner", winner="tie").json()

        table = data["state"]["table"]
        assert data["success"]
        assert table["phase"] == "result"
        assert [p["bankroll"] for p in table["players"]] == [100, 100]

    def test_declare_and_new_hand(self, started):
        self._to_showdown(started)
        _act(started, "declare_winner", winner=1)

        data = _act(started, "new_hand").json()

        assert data["state"]["table"]["last_result"]["message"] == "Bob WINS THE GAME!"
        series = started.get("/series").json()["series"]
        assert series["Bob"]["series_wins"] == 1

    def test_bad_winner(self, started):
        assert _act(started, "declare_winner", winner="nobody").status_code == 400


class TestQueries:
    """Tests for the read-only endpoints."""

    def test_legal_actions(self, started):
        actions = started.get("/legal_actions").json()["actions"]
        assert [a["type"] for a in actions] == ["FOLD", "CALL", "RAISE", "ALL_IN"]

    def test_legal_actions_without_hand(self, client):
        assert client.get("/legal_actions").json()["actions"] == []

    def test_raises(self, started):
        data = started.get("/raises").json()

        assert [r["amount"] for r in data["raises"]] == [20, 30, 40, 50]
        assert data["pot_odds"]["to_call"] == 5

    def test_hand_log(self, started):
        _act(started, "call")
        data = started.get("/hand_log").json()

        assert len(data["entries"]) == 3
        assert data["text"].startswith("Pre-Flop:")
        assert data["last_action"] == "Alice called $5"
