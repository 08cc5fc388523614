"""FastAPI REST interface for the engine."""

import threading

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Union

from baghmate.core.board import Side
from baghmate.core.moves import move_from_dict, move_to_dict
from baghmate.core.search import SearchEngine
from baghmate.core.evaluator import Evaluator
from baghmate.core.state import GameState, PositionSnapshot
from baghmate.config import CONFIG

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# Shared engine instance (preserves TT across requests).
engine = SearchEngine(Evaluator())
state = GameState()
_state_lock = threading.Lock()
# One search at a time against the shared tables.
_search_lock = threading.Lock()


class MoveRequest(BaseModel):
    type: str
    from_: Optional[int] = Field(default=None, alias="from")
    over: Optional[int] = None
    to: Optional[int] = None


class PositionRequest(BaseModel):
    board: List[int]
    goats_to_place: int
    goats_captured: int
    turn: str
    winner: Optional[str] = None


class SearchRequest(BaseModel):
    # preset name or a {depthGoat, depthTiger, noise} / {timeMs, maxDepth} record
    difficulty: Optional[Union[str, Dict[str, Any]]] = None


def _board_payload() -> Dict[str, Any]:
    snap = state.snapshot()
    return {
        "board": [int(c) for c in snap.board],
        "goats_to_place": snap.goats_to_place,
        "goats_captured": snap.goats_captured,
        "turn": snap.turn.value,
        "winner": snap.winner.value if snap.winner else None,
        "legal_moves": [move_to_dict(m) for m in state.legal_moves()],
        "is_game_over": state.is_game_over(),
    }


@app.get("/board")
def get_board():
    with _state_lock:
        return _board_payload()


@app.post("/position")
def set_position(req: PositionRequest):
    with _state_lock:
        try:
            state.restore(PositionSnapshot(
                board=tuple(req.board),
                goats_to_place=req.goats_to_place,
                goats_captured=req.goats_captured,
                turn=req.turn,
                winner=req.winner,
            ))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid position: {e}")
        return _board_payload()


@app.post("/move")
def make_move(req: MoveRequest):
    raw = req.model_dump(by_alias=True, exclude_none=True)
    with _state_lock:
        try:
            move = move_from_dict(raw)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if not state.apply_move(move):
            raise HTTPException(status_code=400, detail=f"Illegal move: {move}")
        payload = _board_payload()
        payload["move"] = move_to_dict(move)
        return payload


@app.post("/search")
def search_move(req: SearchRequest = SearchRequest()):
    with _state_lock:
        if state.is_game_over():
            raise HTTPException(status_code=400, detail="Game is already over")
        search_state = state.copy()

    try:
        with _search_lock:
            result = engine.search(search_state, search_state.turn, req.difficulty)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid difficulty: {e}")
    return {
        "best_move": move_to_dict(result.move) if result.move else None,
        "score": result.score,
        "depth": result.depth,
        "nodes": result.nodes,
        "pv": [str(m) for m in result.pv],
        "turn": search_state.turn.value,
    }


@app.post("/reset")
def reset_board():
    with _state_lock:
        state.reset()
        with _search_lock:
            engine.clear()
        return _board_payload()
