"""Static heuristic evaluator, scores are always from the goats' point of view."""

from typing import Optional

from baghmate.config import CONFIG, EvalConfig
from baghmate.core.board import NUM_CELLS, TOPOLOGY, Cell, center_distance
from baghmate.core.state import GameState


class Evaluator:
    def __init__(self, cfg: Optional[EvalConfig] = None):
        self.cfg = cfg or CONFIG.eval

    def evaluate(self, state: GameState) -> float:
        """Return a static score, positive favors goats.

        Terminal positions are not special-cased here; the search scores those.
        """
        w = self.cfg
        board = state.board

        goat_count = 0
        goat_mob = tiger_mob = 0
        vulnerable_goats = 0
        semi_trapped_tigers = 0
        goat_central = tiger_central = 0
        cluster_penalty = 0

        for i in range(NUM_CELLS):
            piece = board[i]
            if piece == Cell.GOAT:
                goat_count += 1
                goat_central += 4 - center_distance(i)
                goat_neighbours = 0
                for n in TOPOLOGY.adjacency(i):
                    if board[n] == Cell.EMPTY:
                        goat_mob += 1
                    elif board[n] == Cell.GOAT:
                        goat_neighbours += 1
                if goat_neighbours >= 3:
                    cluster_penalty += goat_neighbours - 2
            elif piece == Cell.TIGER:
                tiger_central += 4 - center_distance(i)
                local_mob = 0
                can_capture = False
                for n in TOPOLOGY.adjacency(i):
                    if board[n] == Cell.EMPTY:
                        local_mob += 1
                    elif board[n] == Cell.GOAT:
                        landing = TOPOLOGY.landing_from_jump(i, n)
                        if landing is not None and board[landing] == Cell.EMPTY:
                            # counted once per tiger that threatens the goat
                            vulnerable_goats += 1
                            can_capture = True
                tiger_mob += local_mob
                if not can_capture and local_mob <= 1:
                    semi_trapped_tigers += 1

        score = 0.0
        score += goat_count * w.live_goat
        score += state.goats_captured * w.goat_captured
        score += goat_mob * w.goat_mobility
        score += tiger_mob * w.tiger_mobility
        score += vulnerable_goats * w.vulnerable_goat
        score += semi_trapped_tigers * w.semi_trapped_tiger
        score += goat_central * w.goat_centrality
        score += tiger_central * w.tiger_centrality
        if state.is_placement_phase:
            score += cluster_penalty * w.cluster_placement
            score += state.goats_to_place * w.goats_to_place
        else:
            score += cluster_penalty * w.cluster_movement
        return score
