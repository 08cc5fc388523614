"""
Integration tests for the BaghMate engine.

Covers:
- Engine vs engine games through the authoritative GameState
- Self-play with independent engines
- Engine wrapper (snapshots, reset, engine moves)
- REST API endpoints (FastAPI TestClient)
- Terminal CLI loop (patched input)
"""

from dataclasses import replace
from unittest.mock import patch

import pytest

from baghmate.core.board import Cell, Side
from baghmate.core.difficulty import FixedDepth, TimeBudget
from baghmate.core.moves import Capture, Place, Slide
from baghmate.core.search import SearchEngine
from baghmate.core.state import GameState
from baghmate.main import Engine, self_play

QUICK = FixedDepth(1, 1, 0.0)
SHALLOW = FixedDepth(2, 2, 0.0)


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE VS ENGINE GAME SIMULATIONS
# ════════════════════════════════════════════════════════════════════════════


class TestFullGame:
    """Engines play on the authoritative position using only apply_move."""

    def test_engine_vs_engine_moves_are_legal(self):
        goat_engine = SearchEngine(seed=1, log_iterations=False)
        tiger_engine = SearchEngine(seed=2, log_iterations=False)
        state = GameState()
        plies = 0

        while not state.is_game_over() and plies < 60:
            engine = goat_engine if state.turn is Side.GOAT else tiger_engine
            move = engine.choose_move(state, state.turn, QUICK)
            if move is None:
                break
            assert move in state.legal_moves(), f"Illegal move {move} at ply {plies}"
            turn_before = state.turn
            assert state.apply_move(move)
            if not state.is_game_over():
                assert state.turn is turn_before.opponent
            plies += 1

        assert plies >= 10
        assert state.goats_captured <= 5
        assert state.goats_to_place + state.goats_captured + state.board.count(Cell.GOAT) == 20

    def test_placement_completes_before_goats_slide(self):
        engine = SearchEngine(seed=3, log_iterations=False)
        state = GameState()
        for _ in range(50):
            if state.is_game_over():
                break
            move = engine.choose_move(state, state.turn, QUICK)
            if move is None:
                break
            if state.turn is Side.GOAT and state.goats_to_place > 0:
                assert isinstance(move, Place)
            if state.turn is Side.GOAT and state.goats_to_place == 0:
                assert isinstance(move, Slide)
            assert state.apply_move(move)

    def test_timed_engine_plays_a_few_plies(self):
        engine = SearchEngine(seed=4, log_iterations=False)
        state = GameState()
        for _ in range(4):
            move = engine.choose_move(state, state.turn, TimeBudget(300, 4))
            assert move is not None
            assert state.apply_move(move)
        assert state.goats_to_place == 18

    def test_tiger_converts_final_capture(self):
        state = GameState.from_cells(
            [Cell.TIGER, Cell.GOAT] + [Cell.EMPTY] * 2 + [Cell.TIGER]
            + [Cell.EMPTY] * 15 + [Cell.TIGER] + [Cell.EMPTY] * 3 + [Cell.TIGER],
            goats_to_place=0, goats_captured=4, turn=Side.TIGER,
        )
        engine = SearchEngine(log_iterations=False)
        move = engine.choose_move(state, Side.TIGER, "unbeatable")
        assert move == Capture(0, 1, 2)
        assert state.apply_move(move)
        assert state.winner is Side.TIGER


# ════════════════════════════════════════════════════════════════════════════
#  SELF-PLAY
# ════════════════════════════════════════════════════════════════════════════


class TestSelfPlay:
    def test_self_play_alternates_sides(self):
        state, history = self_play(QUICK, QUICK, max_plies=30, seed=9)
        assert history
        for i, (side, _move) in enumerate(history):
            assert side is (Side.GOAT if i % 2 == 0 else Side.TIGER)
        assert len(history) <= 30
        assert state.winner is not None or len(history) == 30 or not state.legal_moves()

    def test_self_play_with_noise(self):
        state, history = self_play("easy", "easy", max_plies=20, seed=5)
        assert 0 < len(history) <= 20

    def test_self_play_replays_on_fresh_state(self):
        final, history = self_play(QUICK, SHALLOW, max_plies=16, seed=2)
        replay = GameState()
        for _side, move in history:
            assert replay.apply_move(move)
        assert replay.snapshot() == final.snapshot()


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE WRAPPER
# ════════════════════════════════════════════════════════════════════════════


class TestEngineWrapper:
    def test_initial_snapshot(self):
        e = Engine(difficulty=QUICK, seed=1)
        snap = e.snapshot()
        assert snap.goats_to_place == 20
        assert snap.turn is Side.GOAT

    def test_make_move(self):
        e = Engine(difficulty=QUICK)
        assert e.make_move(Place(12)) is True
        assert e.make_move(Place(13)) is False

    def test_play_engine_move(self):
        e = Engine(difficulty=QUICK, seed=1)
        move = e.play_engine_move()
        assert isinstance(move, Place)
        assert e.state.turn is Side.TIGER

    def test_get_best_move_does_not_apply(self):
        e = Engine(difficulty=QUICK, seed=1)
        before = e.snapshot()
        assert e.get_best_move() is not None
        assert e.snapshot() == before

    def test_load_snapshot_and_reset(self):
        e = Engine(difficulty=QUICK)
        other = GameState()
        other.apply_move(Place(7))
        e.load_snapshot(other.snapshot())
        assert e.state.board[7] == Cell.GOAT
        e.play_engine_move(SHALLOW)
        assert len(e.search.tt) > 0
        e.reset()
        assert e.snapshot() == GameState().snapshot()
        assert len(e.search.tt) == 0

    def test_play_engine_move_on_finished_game(self):
        e = Engine(difficulty=QUICK)
        snap = e.snapshot()
        e.load_snapshot(replace(snap, goats_captured=5, winner=Side.TIGER))
        assert e.play_engine_move() is None


# ════════════════════════════════════════════════════════════════════════════
#  REST API INTEGRATION
# ════════════════════════════════════════════════════════════════════════════


class TestAPIIntegration:
    """Tests FastAPI REST API endpoints."""

    @pytest.fixture(autouse=True)
    def setup_client(self):
        from fastapi.testclient import TestClient
        from interface.api import app, engine, state

        self.client = TestClient(app)
        # Reset state before each test
        state.reset()
        engine.clear()

    def test_get_board_initial(self):
        response = self.client.get("/board")
        assert response.status_code == 200
        data = response.json()
        assert data["turn"] == "goat"
        assert data["goats_to_place"] == 20
        assert data["is_game_over"] is False
        assert data["winner"] is None
        assert len(data["board"]) == 25
        assert len(data["legal_moves"]) == 21

    def test_post_move_valid(self):
        response = self.client.post("/move", json={"type": "place", "to": 12})
        assert response.status_code == 200
        data = response.json()
        assert data["move"] == {"type": "place", "to": 12}
        assert data["board"][12] == 1
        assert data["turn"] == "tiger"

    def test_post_tiger_slide(self):
        self.client.post("/move", json={"type": "place", "to": 12})
        response = self.client.post("/move", json={"type": "move", "from": 0, "to": 1})
        assert response.status_code == 200
        assert response.json()["board"][1] == 2

    def test_post_move_illegal(self):
        response = self.client.post("/move", json={"type": "place", "to": 0})
        assert response.status_code == 400

    def test_post_move_malformed(self):
        response = self.client.post("/move", json={"type": "teleport", "to": 3})
        assert response.status_code == 400
        response = self.client.post("/move", json={"type": "capture", "from": 0})
        assert response.status_code == 400

    def test_search_returns_legal_move(self):
        response = self.client.post("/search", json={"difficulty": {"depthGoat": 1, "depthTiger": 1, "noise": 0}})
        assert response.status_code == 200
        data = response.json()
        assert data["best_move"] is not None
        assert data["best_move"]["type"] == "place"
        assert data["turn"] == "goat"

    def test_search_with_preset_and_budget(self):
        response = self.client.post("/search", json={"difficulty": {"timeMs": 200, "maxDepth": 2}})
        assert response.status_code == 200
        assert response.json()["depth"] >= 1

    def test_search_invalid_difficulty(self):
        response = self.client.post("/search", json={"difficulty": {"depthGoat": "deep"}})
        assert response.status_code == 400

    def test_set_position_valid(self):
        board = [2, 1] + [0] * 2 + [2] + [0] * 15 + [2] + [0] * 3 + [2]
        response = self.client.post("/position", json={
            "board": board, "goats_to_place": 0, "goats_captured": 4, "turn": "tiger",
        })
        assert response.status_code == 200
        assert {"type": "capture", "from": 0, "over": 1, "to": 2} in response.json()["legal_moves"]

    def test_set_position_invalid(self):
        response = self.client.post("/position", json={
            "board": [0] * 24, "goats_to_place": 0, "goats_captured": 0, "turn": "goat",
        })
        assert response.status_code == 400
        response = self.client.post("/position", json={
            "board": [0] * 25, "goats_to_place": 0, "goats_captured": 0, "turn": "wolf",
        })
        assert response.status_code == 400

    def test_search_game_over_returns_400(self):
        board = [2] + [0] * 3 + [2] + [0] * 15 + [2] + [0] * 3 + [2]
        self.client.post("/position", json={
            "board": board, "goats_to_place": 0, "goats_captured": 5, "turn": "goat", "winner": "tiger",
        })
        response = self.client.post("/search")
        assert response.status_code == 400

    def test_reset_board(self):
        self.client.post("/move", json={"type": "place", "to": 12})
        response = self.client.post("/reset")
        assert response.status_code == 200
        assert response.json()["goats_to_place"] == 20
        assert response.json()["turn"] == "goat"

    def test_full_api_game_flow(self):
        r = self.client.get("/board")
        assert r.json()["turn"] == "goat"

        self.client.post("/move", json={"type": "place", "to": 6})
        r = self.client.get("/board")
        assert r.json()["turn"] == "tiger"

        r = self.client.post("/search", json={"difficulty": {"depthGoat": 1, "depthTiger": 1}})
        best = r.json()["best_move"]
        assert best is not None
        r = self.client.post("/move", json=best)
        assert r.status_code == 200
        assert r.json()["turn"] == "goat"


# ════════════════════════════════════════════════════════════════════════════
#  CLI INTEGRATION
# ════════════════════════════════════════════════════════════════════════════


class TestCLIIntegration:
    def test_quit_immediately(self, capsys):
        from interface.cli import main

        with patch("builtins.input", side_effect=["goat", "q"]):
            assert main(difficulty=QUICK) is None
        assert "T . . . T" in capsys.readouterr().out

    def test_bad_and_illegal_input_reprompts(self, capsys):
        from interface.cli import main

        with patch("builtins.input", side_effect=["tiger", "garbage", "0-12", "q"]):
            main(difficulty=QUICK)
        out = capsys.readouterr().out
        assert "Engine plays: @" in out
        assert "Could not parse move" in out
        assert "Illegal move" in out
