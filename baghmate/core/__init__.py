"""Core engine components: board topology, game state, evaluator, search, and transposition table."""

from .board import TOPOLOGY, BoardTopology, Cell, Side
from .difficulty import PRESETS, FixedDepth, TimeBudget, resolve_difficulty
from .evaluator import Evaluator
from .moves import Capture, Move, Place, Slide, move_from_dict, move_to_dict
from .search import SearchEngine, SearchResult
from .state import GameState, PositionSnapshot
from .transposition import TranspositionTable
