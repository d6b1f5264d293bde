from __future__ import annotations

from typing import Optional

import numpy as np

from hexaclash.core import BoardState, Move, Side, all_legal_moves


class RandomAI:
    """Uniformly random legal move; the baseline opponent for evaluation runs."""

    def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
        self.rng = rng or np.random.default_rng()

    def spawn(self, seed: Optional[int] = None) -> "RandomAI":
        return RandomAI(np.random.default_rng(seed))

    def decide_move(self, state: BoardState, side: Side) -> Optional[Move]:
        moves = all_legal_moves(state, side)
        if not moves:
            return None
        return moves[int(self.rng.integers(len(moves)))]
