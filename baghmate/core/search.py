import logging
import random
import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from baghmate.config import CONFIG
from baghmate.core.board import Side, center_distance
from baghmate.core.difficulty import Difficulty, FixedDepth, TimeBudget, resolve_difficulty
from baghmate.core.evaluator import Evaluator
from baghmate.core.moves import Capture, Move
from baghmate.core.state import GameState
from baghmate.core.transposition import TT_EXACT, TT_LOWER, TT_UPPER, TranspositionTable
from baghmate.core.utils import log_info

logger = logging.getLogger(__name__)

INF = float("inf")
WIN_SCORE = 100000
DECISIVE_SCORE = 90000
MATE_HORIZON = 10


class Deadline:
    """Time budget checked before every node; ``None`` never expires."""

    def __init__(self, time_ms: Optional[float] = None):
        self._end = None if time_ms is None else time.perf_counter() + time_ms / 1000.0

    def expired(self) -> bool:
        return self._end is not None and time.perf_counter() >= self._end


@dataclass
class SearchResult:
    move: Optional[Move]
    score: Optional[float] = None
    depth: int = 0  # deepest fully completed iteration
    nodes: int = 0
    pv: List[Move] = field(default_factory=list)
    random_pick: bool = False


class SearchEngine:
    """Negamax alpha-beta search over GameState copies.

    The transposition, killer and history tables live on the instance and
    persist across searches. One instance must not run two searches at once;
    use separate engines for concurrent or self-play games.

    A timed-out subtree returns ``None`` all the way up, never a score.
    """

    def __init__(self, evaluator: Optional[Evaluator] = None, seed: Optional[int] = None,
                 log_iterations: Optional[bool] = None):
        self.evaluator = evaluator or Evaluator()
        self.tt = TranspositionTable(seed)
        self.killers: Dict[int, List[Optional[Move]]] = {}
        self.history: Dict[Move, int] = defaultdict(int)
        self.rng = random.Random(seed)
        self.log_iterations = CONFIG.search.log_iterations if log_iterations is None else log_iterations
        self.nodes = 0

    def clear(self):
        self.tt.clear()
        self.killers.clear()
        self.history.clear()

    def choose_move(self, state: GameState, side: Side, difficulty=None) -> Optional[Move]:
        return self.search(state, side, difficulty).move

    def search(self, state: GameState, side: Side, difficulty=None) -> SearchResult:
        cfg: Difficulty = resolve_difficulty(difficulty)
        if state.winner is not None:
            return SearchResult(None)
        if side is not state.turn:
            logger.warning("Asked to move for %s but it is %s's turn", side.value, state.turn.value)
            return SearchResult(None)

        root = state.copy()
        self.nodes = 0
        if not root.legal_moves():
            return SearchResult(None)
        if isinstance(cfg, TimeBudget):
            return self._iterative_deepening(root, cfg)
        return self._fixed_depth(root, cfg)

    # ── Drivers ───────────────────────────────────────────────────────────

    def _fixed_depth(self, root: GameState, cfg: FixedDepth) -> SearchResult:
        moves = root.legal_moves()
        if cfg.noise > 0 and self.rng.random() < cfg.noise:
            move = self.rng.choice(moves)
            logger.debug("Noise pick %s", move)
            return SearchResult(move, random_pick=True)

        depth = cfg.depth_goat if root.turn is Side.GOAT else cfg.depth_tiger
        deadline = Deadline()
        start = time.perf_counter()

        # Full window per root move so equal scores are true ties.
        best_score = -INF
        best: List[Move] = []
        for move in self._order_moves(moves, depth):
            score = -self._negamax(root.successor(move), depth - 1, -INF, INF, deadline)
            if score > best_score:
                best_score, best = score, [move]
            elif score == best_score:
                best.append(move)

        move = self.rng.choice(best)
        pv = [move] + self.get_pv_line(root.successor(move), depth - 1)
        if self.log_iterations:
            log_info(depth, best_score, self.nodes, time.perf_counter() - start, pv, DECISIVE_SCORE)
        return SearchResult(move, best_score, depth, self.nodes, pv)

    def _iterative_deepening(self, root: GameState, cfg: TimeBudget) -> SearchResult:
        deadline = Deadline(cfg.time_ms)
        start = time.perf_counter()
        result = SearchResult(None)

        for d in range(1, cfg.max_depth + 1):
            outcome = self._search_root(root, d, deadline, result.move)
            if outcome is None:
                logger.debug("Depth %d timed out, keeping depth %d result", d, result.depth)
                break
            score, move = outcome
            pv = self.get_pv_line(root, d)
            result = SearchResult(move, score, d, self.nodes, pv)
            if self.log_iterations:
                log_info(d, score, self.nodes, time.perf_counter() - start, pv, DECISIVE_SCORE)
            if abs(score) >= DECISIVE_SCORE:
                break
            if deadline.expired():
                break

        result.nodes = self.nodes
        return result

    def _search_root(self, root: GameState, depth: int, deadline: Deadline,
                     prev_best: Optional[Move]) -> Optional[Tuple[float, Move]]:
        if deadline.expired():
            return None
        self.nodes += 1

        moves = self._order_moves(root.legal_moves(), depth)
        if prev_best in moves:
            moves.remove(prev_best)
            moves.insert(0, prev_best)

        alpha, beta = -INF, INF
        best_score = -INF
        best_move = None
        for move in moves:
            value = self._negamax(root.successor(move), depth - 1, -beta, -alpha, deadline)
            if value is None:
                return None
            score = -value
            if score > best_score:
                best_score, best_move = score, move
            if score > alpha:
                alpha = score

        self.tt.store(root, depth, best_score, TT_EXACT, best_move)
        return best_score, best_move

    # ── Negamax ───────────────────────────────────────────────────────────

    def _negamax(self, state: GameState, depth: int, alpha: float, beta: float,
                 deadline: Deadline) -> Optional[float]:
        if deadline.expired():
            return None
        self.nodes += 1

        if state.winner is not None:
            return self._terminal_score(state, depth)

        alpha_orig = alpha

        # TT Lookup
        tt_entry = self.tt.get(state)
        if tt_entry and tt_entry.depth >= depth:
            if tt_entry.flag == TT_EXACT:
                return tt_entry.value
            elif tt_entry.flag == TT_LOWER:
                alpha = max(alpha, tt_entry.value)
            elif tt_entry.flag == TT_UPPER:
                beta = min(beta, tt_entry.value)
            if alpha >= beta:
                return tt_entry.value

        if depth <= 0:
            return self._quiescence(state, alpha, beta, deadline)

        moves = state.legal_moves()
        if not moves:
            # goats boxed in while tigers can still move
            return self._static(state)

        best_score = -INF
        best_move = None
        for move in self._order_moves(moves, depth):
            value = self._negamax(state.successor(move), depth - 1, -beta, -alpha, deadline)
            if value is None:
                return None
            score = -value

            if score > best_score:
                best_score = score
                best_move = move
            if score > alpha:
                alpha = score
            if alpha >= beta:
                self._record_cutoff(move, depth)
                break

        if best_score <= alpha_orig:
            flag = TT_UPPER
        elif best_score >= beta:
            flag = TT_LOWER
        else:
            flag = TT_EXACT

        self.tt.store(state, depth, best_score, flag, best_move)
        return best_score

    def _quiescence(self, state: GameState, alpha: float, beta: float, deadline: Deadline) -> Optional[float]:
        if deadline.expired():
            return None
        self.nodes += 1

        if state.winner is not None:
            return self._terminal_score(state, 0)

        stand_pat = self._static(state)
        # goats never capture
        if state.turn is Side.GOAT:
            return stand_pat

        if stand_pat >= beta:
            return beta
        if stand_pat > alpha:
            alpha = stand_pat

        for move in state.captures():
            value = self._quiescence(state.successor(move), -beta, -alpha, deadline)
            if value is None:
                return None
            score = -value
            if score >= beta:
                return beta
            if score > alpha:
                alpha = score

        return alpha

    # ── Scoring ───────────────────────────────────────────────────────────

    def _terminal_score(self, state: GameState, depth: int) -> float:
        """Win/loss score adjusted so quicker wins and slower losses are preferred."""
        if state.winner is Side.TIGER:
            goat_score = -WIN_SCORE + (MATE_HORIZON - depth)
        else:
            goat_score = WIN_SCORE - (MATE_HORIZON - depth)
        return goat_score if state.turn is Side.GOAT else -goat_score

    def _static(self, state: GameState) -> float:
        score = self.evaluator.evaluate(state)
        return score if state.turn is Side.GOAT else -score

    # ── Move ordering ─────────────────────────────────────────────────────

    def _order_moves(self, moves: List[Move], depth: int) -> List[Move]:
        killers = self.killers.get(depth, [None, None])

        def priority(move: Move):
            if move == killers[0]:
                killer_rank = 2
            elif move == killers[1]:
                killer_rank = 1
            else:
                killer_rank = 0
            return (isinstance(move, Capture), killer_rank, self.history.get(move, 0), -center_distance(move.dst))

        return sorted(moves, key=priority, reverse=True)

    def _record_cutoff(self, move: Move, depth: int):
        if not isinstance(move, Capture):
            slots = self.killers.setdefault(depth, [None, None])
            if move != slots[0]:
                slots[1] = slots[0]
                slots[0] = move
        self.history[move] += depth * depth

    def get_pv_line(self, state: GameState, depth: int) -> List[Move]:
        pv_moves = []
        curr = state.copy()
        seen = {curr.key()}

        for _ in range(depth):
            entry = self.tt.get(curr)
            if not entry or not entry.best_move:
                break
            move = entry.best_move
            if move not in curr.legal_moves():
                break

            pv_moves.append(move)
            curr = curr.successor(move)

            # cycle detection
            k = curr.key()
            if k in seen:
                break
            seen.add(k)

        return pv_moves
