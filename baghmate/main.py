import logging
from typing import List, Optional, Tuple

from baghmate.core.board import Side
from baghmate.core.evaluator import Evaluator
from baghmate.core.moves import Move
from baghmate.core.search import SearchEngine
from baghmate.core.state import GameState, PositionSnapshot

logger = logging.getLogger(__name__)

DEFAULT_MAX_PLIES = 200


class Engine:
    """Authoritative position plus the engine that plays on it."""

    def __init__(self, difficulty=None, seed: Optional[int] = None):
        self.state = GameState()
        self.search = SearchEngine(Evaluator(), seed=seed)
        self.difficulty = difficulty

    def get_best_move(self, difficulty=None) -> Optional[Move]:
        return self.search.choose_move(self.state, self.state.turn, difficulty or self.difficulty)

    def make_move(self, move: Move) -> bool:
        return self.state.apply_move(move)

    def play_engine_move(self, difficulty=None) -> Optional[Move]:
        """Search and apply a move for the side to move; None if there is nothing to play."""
        move = self.get_best_move(difficulty)
        if move is None:
            return None
        if not self.state.apply_move(move):
            raise RuntimeError(f"Engine produced an illegal move {move}")
        return move

    def snapshot(self) -> PositionSnapshot:
        return self.state.snapshot()

    def load_snapshot(self, snap: PositionSnapshot):
        self.state.restore(snap)

    def reset(self):
        self.state.reset()
        self.search.clear()


def self_play(goat_difficulty=None, tiger_difficulty=None, max_plies: int = DEFAULT_MAX_PLIES,
              seed: Optional[int] = None) -> Tuple[GameState, List[Tuple[Side, Move]]]:
    """Play two independent engines against each other from the start position.

    Stops on a result, when the side to move has nothing to play, or after
    ``max_plies``. Returns the final position and the ``(side, move)`` history.
    """
    state = GameState()
    engines = {
        Side.GOAT: (SearchEngine(seed=seed), goat_difficulty),
        Side.TIGER: (SearchEngine(seed=None if seed is None else seed + 1), tiger_difficulty),
    }
    history: List[Tuple[Side, Move]] = []

    for ply in range(max_plies):
        if state.is_game_over():
            break
        side = state.turn
        engine, difficulty = engines[side]
        move = engine.choose_move(state, side, difficulty)
        if move is None:
            logger.info("No move for %s at ply %d", side.value, ply)
            break
        if not state.apply_move(move):
            raise RuntimeError(f"Engine produced an illegal move {move} for {side.value}")
        history.append((side, move))

    if state.winner is not None:
        logger.info("Self-play finished after %d plies, %s wins", len(history), state.winner.value)
    return state, history
