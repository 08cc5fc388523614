"""Game position with legal-move generation, move application and win detection."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from baghmate.core.board import (
    GOATS_TO_WIN,
    NUM_CELLS,
    SIZE,
    START_TIGER_CELLS,
    TOPOLOGY,
    TOTAL_GOATS,
    Cell,
    Side,
)
from baghmate.core.moves import Capture, Move, Place, Slide

logger = logging.getLogger(__name__)

PIECE_SYMBOLS = {Cell.EMPTY: ".", Cell.GOAT: "G", Cell.TIGER: "T"}


@dataclass(frozen=True)
class PositionSnapshot:
    """Behaviourless value handed to rendering and network layers."""

    board: Tuple[Cell, ...]
    goats_to_place: int
    goats_captured: int
    turn: Side
    winner: Optional[Side]


class GameState:
    def __init__(self):
        """Initialize to the canonical start position."""
        self.reset()

    def reset(self):
        self.board: List[Cell] = [Cell.EMPTY] * NUM_CELLS
        for cell in START_TIGER_CELLS:
            self.board[cell] = Cell.TIGER
        self.goats_to_place = TOTAL_GOATS
        self.goats_captured = 0
        self.turn = Side.GOAT
        self.winner: Optional[Side] = None

    def copy(self) -> "GameState":
        g = GameState.__new__(GameState)
        g.board = self.board[:]
        g.goats_to_place = self.goats_to_place
        g.goats_captured = self.goats_captured
        g.turn = self.turn
        g.winner = self.winner
        return g

    @property
    def is_placement_phase(self) -> bool:
        return self.goats_to_place > 0

    def is_game_over(self) -> bool:
        return self.winner is not None

    def key(self) -> Tuple:
        """Canonical transposition key: board, counters and side to move."""
        return (tuple(self.board), self.goats_to_place, self.goats_captured, self.turn)

    # ── Move generation ───────────────────────────────────────────────────

    def generate_moves(self, side: Side) -> List[Move]:
        if side is Side.GOAT:
            return self._goat_moves()
        return self._tiger_moves()

    def legal_moves(self) -> List[Move]:
        """Moves available to the side to move; empty once the game is over."""
        if self.winner is not None:
            return []
        return self.generate_moves(self.turn)

    def _goat_moves(self) -> List[Move]:
        board = self.board
        if self.is_placement_phase:
            return [Place(i) for i in range(NUM_CELLS) if board[i] == Cell.EMPTY]
        moves: List[Move] = []
        for i in range(NUM_CELLS):
            if board[i] != Cell.GOAT:
                continue
            for n in TOPOLOGY.adjacency(i):
                if board[n] == Cell.EMPTY:
                    moves.append(Slide(i, n))
        return moves

    def _tiger_moves(self) -> List[Move]:
        board = self.board
        moves: List[Move] = []
        for i in range(NUM_CELLS):
            if board[i] != Cell.TIGER:
                continue
            for n in TOPOLOGY.adjacency(i):
                if board[n] == Cell.EMPTY:
                    moves.append(Slide(i, n))
                elif board[n] == Cell.GOAT:
                    landing = TOPOLOGY.landing_from_jump(i, n)
                    if landing is not None and board[landing] == Cell.EMPTY:
                        moves.append(Capture(i, n, landing))
        return moves

    def captures(self) -> List[Capture]:
        return [m for m in self._tiger_moves() if isinstance(m, Capture)]

    # ── Move application ──────────────────────────────────────────────────

    def apply_move(self, move: Move) -> bool:
        """Validate and play ``move``. Returns False, leaving the position untouched, if illegal."""
        reason = self._rejection_reason(move)
        if reason is not None:
            logger.debug("Rejected %s: %s", move, reason)
            return False
        self._execute(move)
        return True

    def successor(self, move: Move) -> "GameState":
        """Copy of this position with a generated (already legal) move played."""
        child = self.copy()
        child._execute(move)
        return child

    def _rejection_reason(self, move: Move) -> Optional[str]:
        if self.winner is not None:
            return "game is over"
        board = self.board
        if isinstance(move, Place):
            if self.turn is not Side.GOAT:
                return "not goat's turn"
            if not self.is_placement_phase:
                return "no goats left to place"
            if not _on_board(move.dst) or board[move.dst] != Cell.EMPTY:
                return "target not empty"
            return None
        if isinstance(move, Slide):
            if not (_on_board(move.src) and _on_board(move.dst)):
                return "cell out of range"
            if board[move.src] != self.turn.piece:
                return "source is not the mover's piece"
            if self.turn is Side.GOAT and self.is_placement_phase:
                return "goats cannot move during placement"
            if board[move.dst] != Cell.EMPTY:
                return "target not empty"
            if not TOPOLOGY.is_adjacent(move.src, move.dst):
                return "cells not adjacent"
            return None
        if isinstance(move, Capture):
            if self.turn is not Side.TIGER:
                return "only tigers capture"
            if not all(_on_board(c) for c in (move.src, move.over, move.dst)):
                return "cell out of range"
            if board[move.src] != Cell.TIGER or board[move.over] != Cell.GOAT:
                return "capture needs a tiger jumping a goat"
            if board[move.dst] != Cell.EMPTY:
                return "landing not empty"
            if not TOPOLOGY.is_adjacent(move.src, move.over):
                return "jumped cell not adjacent"
            if TOPOLOGY.landing_from_jump(move.src, move.over) != move.dst:
                return "landing does not match jump geometry"
            return None
        return f"unknown move type {type(move).__name__}"

    def _execute(self, move: Move):
        board = self.board
        if isinstance(move, Place):
            board[move.dst] = Cell.GOAT
            self.goats_to_place -= 1
        elif isinstance(move, Slide):
            board[move.dst] = board[move.src]
            board[move.src] = Cell.EMPTY
        else:
            board[move.dst] = Cell.TIGER
            board[move.src] = Cell.EMPTY
            board[move.over] = Cell.EMPTY
            self.goats_captured += 1
        self.turn = self.turn.opponent
        self._update_winner()

    def _update_winner(self):
        # Runs after every ply, goat moves included.
        if self.goats_captured >= GOATS_TO_WIN:
            self.winner = Side.TIGER
        elif not self._tiger_moves():
            self.winner = Side.GOAT

    # ── Snapshots ─────────────────────────────────────────────────────────

    def snapshot(self) -> PositionSnapshot:
        return PositionSnapshot(
            board=tuple(self.board),
            goats_to_place=self.goats_to_place,
            goats_captured=self.goats_captured,
            turn=self.turn,
            winner=self.winner,
        )

    def restore(self, snap: PositionSnapshot):
        """Replace this position in place with a validated external snapshot."""
        other = GameState.from_snapshot(snap)
        self.board = other.board
        self.goats_to_place = other.goats_to_place
        self.goats_captured = other.goats_captured
        self.turn = other.turn
        self.winner = other.winner

    @classmethod
    def from_snapshot(cls, snap: PositionSnapshot) -> "GameState":
        """Rebuild a position from an external snapshot. Raises ValueError if malformed."""
        if len(snap.board) != NUM_CELLS:
            raise ValueError(f"Board must have {NUM_CELLS} cells, got {len(snap.board)}")
        try:
            board = [Cell(v) for v in snap.board]
            turn = Side(snap.turn)
            winner = Side(snap.winner) if snap.winner is not None else None
        except ValueError as e:
            raise ValueError(f"Invalid snapshot: {e}") from e
        if not 0 <= snap.goats_to_place <= TOTAL_GOATS:
            raise ValueError(f"goats_to_place out of range: {snap.goats_to_place}")
        if not 0 <= snap.goats_captured <= TOTAL_GOATS:
            raise ValueError(f"goats_captured out of range: {snap.goats_captured}")
        g = cls.__new__(cls)
        g.board = board
        g.goats_to_place = snap.goats_to_place
        g.goats_captured = snap.goats_captured
        g.turn = turn
        g.winner = winner
        return g

    @classmethod
    def from_cells(cls, cells: Sequence[Cell], goats_to_place: int = 0, goats_captured: int = 0,
                   turn: Side = Side.GOAT) -> "GameState":
        """Build a position from raw cells; the winner is derived from the board."""
        g = cls.from_snapshot(PositionSnapshot(tuple(cells), goats_to_place, goats_captured, turn, None))
        g._update_winner()
        return g

    def __str__(self) -> str:
        rows = []
        for r in range(SIZE):
            rows.append(" ".join(PIECE_SYMBOLS[self.board[r * SIZE + c]] for c in range(SIZE)))
        rows.append(f"to place {self.goats_to_place}  captured {self.goats_captured}  turn {self.turn.value}")
        return "\n".join(rows)


def _on_board(cell) -> bool:
    return isinstance(cell, int) and 0 <= cell < NUM_CELLS
