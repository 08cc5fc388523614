"""Zobrist hashing and a transposition table for Bagh-Chal positions.

- Zobrist: random 64-bit keys per (piece, cell), per side to move and per
  counter value. ``hash`` computes the key from scratch for a GameState.

- TranspositionTable: a dict keyed by zobrist keys. Each entry keeps the
  canonical position key (``GameState.key()``) for collision detection, the
  depth searched, the score, its bound type and the best move found.

Entries are overwritten unconditionally by the latest search of a position and
nothing is ever evicted. The state space of this board is small enough for
that, but a long-running process will keep growing the table until ``clear``.

Usage:

    tt = TranspositionTable()
    tt.store(state, depth=3, value=12.5, flag=TT_EXACT, best_move=Place(12))
    entry = tt.get(state)
"""
from __future__ import annotations

import random
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from baghmate.core.board import NUM_CELLS, TOTAL_GOATS, Cell, Side
from baghmate.core.moves import Move
from baghmate.core.state import GameState

TT_EXACT = 0
TT_LOWER = 1  # value is a lower bound (search failed high)
TT_UPPER = 2  # value is an upper bound (search failed low)


@dataclass
class TTEntry:
    key: Tuple
    depth: int
    value: float
    flag: int
    best_move: Optional[Move]


class Zobrist:
    def __init__(self, seed: Optional[int] = None):
        rng = random.Random(seed)
        self.pieces: Dict[Cell, List[int]] = {
            Cell.GOAT: [rng.getrandbits(64) for _ in range(NUM_CELLS)],
            Cell.TIGER: [rng.getrandbits(64) for _ in range(NUM_CELLS)],
        }
        self.tiger_to_move = rng.getrandbits(64)
        self.to_place = [rng.getrandbits(64) for _ in range(TOTAL_GOATS + 1)]
        self.captured = [rng.getrandbits(64) for _ in range(TOTAL_GOATS + 1)]

    def hash(self, state: GameState) -> int:
        h = 0
        for cell, piece in enumerate(state.board):
            if piece != Cell.EMPTY:
                h ^= self.pieces[piece][cell]
        if state.turn is Side.TIGER:
            h ^= self.tiger_to_move
        h ^= self.to_place[state.goats_to_place]
        h ^= self.captured[min(state.goats_captured, TOTAL_GOATS)]
        return h


class TranspositionTable:
    """Transposition table owned by a single SearchEngine.

    Methods:
      - get(state) -> Optional[TTEntry]
      - store(state, depth, value, flag, best_move)
      - clear()
      - key(state) -> int  (zobrist key)
    """

    def __init__(self, seed: Optional[int] = None):
        self.z = Zobrist(seed)
        self._table: Dict[int, TTEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._table)

    def key(self, state: GameState) -> int:
        return self.z.hash(state)

    def get(self, state: GameState) -> Optional[TTEntry]:
        k = self.key(state)
        with self._lock:
            entry = self._table.get(k)
        if entry is None:
            return None
        # verify the canonical key to avoid rare collisions
        if entry.key != state.key():
            return None
        return entry

    def store(self, state: GameState, depth: int, value: float, flag: int, best_move: Optional[Move]):
        k = self.key(state)
        entry = TTEntry(state.key(), depth, value, flag, best_move)
        with self._lock:
            self._table[k] = entry

    def clear(self):
        with self._lock:
            self._table.clear()
