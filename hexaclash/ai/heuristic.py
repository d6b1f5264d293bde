"""One-ply heuristic opponent.

Every legal move of the side to play is simulated on a detached clone of the
board and the resulting position is scored with a weighted static
evaluator::

    piece_diff     * (own pieces - opponent pieces)
  - opp_mobility   * opponent legal move count
  - center_control * mean distance of own pieces from the centre
  - risk           * own pieces adjacent to an enemy piece
  + jitter         * uniform(-0.5, 0.5)

The highest score wins. Exact ties keep the earliest move in generation
order; the jitter term is what varies play between otherwise equal moves.
Difficulty profiles raise the first three weights and lower ``risk`` and
``jitter`` as they get stronger.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

import numpy as np
import yaml

from hexaclash.core import BoardState, Move, Side, all_legal_moves, apply_move, count_legal_moves

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeuristicWeights:
    piece_diff: float = 4.0
    opp_mobility: float = 2.5
    center_control: float = 1.2
    risk: float = 1.5
    jitter: float = 0.3

    @classmethod
    def from_mapping(cls, values: Mapping[str, float]) -> "HeuristicWeights":
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown heuristic weights: {sorted(unknown)}")
        return cls(**{name: float(value) for name, value in values.items()})

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


DIFFICULTY_ORDER = ("easy", "normal", "hard", "expert")

DIFFICULTY_PROFILES: Dict[str, HeuristicWeights] = {
    "easy": HeuristicWeights(piece_diff=3.0, opp_mobility=2.0, center_control=1.0, risk=1.8, jitter=0.6),
    "normal": HeuristicWeights(),
    "hard": HeuristicWeights(piece_diff=5.0, opp_mobility=3.0, center_control=1.5, risk=1.2, jitter=0.15),
    "expert": HeuristicWeights(piece_diff=6.0, opp_mobility=3.5, center_control=1.8, risk=1.0, jitter=0.05),
}


def load_profiles(path: Union[str, Path]) -> Dict[str, HeuristicWeights]:
    """Read named weight profiles from YAML, layered over the built-in ones.

    The file holds a ``profiles`` mapping of profile name to weights; weights
    left out of a profile keep the ``normal`` defaults.
    """
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    profiles = dict(DIFFICULTY_PROFILES)
    for name, values in (data.get("profiles") or {}).items():
        profiles[str(name)] = HeuristicWeights.from_mapping(values or {})
    return profiles


def get_profile(name: str, profiles: Optional[Mapping[str, HeuristicWeights]] = None) -> HeuristicWeights:
    table = profiles if profiles is not None else DIFFICULTY_PROFILES
    try:
        return table[name]
    except KeyError:
        raise ValueError(f"Unknown difficulty profile {name!r}; expected one of {sorted(table)}.") from None


@dataclass(frozen=True)
class ScoredMove:
    move: Move
    score: float


class AIEngine:
    def __init__(
        self,
        weights: Union[HeuristicWeights, str] = "normal",
        *,
        rng: Optional[np.random.Generator] = None,
        max_candidates: Optional[int] = None,
    ) -> None:
        self.weights = get_profile(weights) if isinstance(weights, str) else weights
        self.rng = rng or np.random.default_rng()
        if max_candidates is not None and max_candidates < 1:
            raise ValueError("max_candidates must be positive.")
        self.max_candidates = max_candidates

    def spawn(self, seed: Optional[int] = None) -> "AIEngine":
        return AIEngine(self.weights, rng=np.random.default_rng(seed), max_candidates=self.max_candidates)

    def decide_move(
        self,
        state: BoardState,
        side: Side,
        weights: Optional[HeuristicWeights] = None,
    ) -> Optional[Move]:
        scored = self.score_moves(state, side, weights)
        if not scored:
            return None
        best = scored[0]
        for candidate in scored[1:]:
            if candidate.score > best.score:
                best = candidate
        logger.debug(
            "Side %s chose %s -> %s (score %.3f of %d candidates)",
            Side(side).label,
            best.move.from_cell,
            best.move.to_cell,
            best.score,
            len(scored),
        )
        return best.move

    def score_moves(
        self,
        state: BoardState,
        side: Side,
        weights: Optional[HeuristicWeights] = None,
    ) -> List[ScoredMove]:
        side = Side(side)
        w = weights or self.weights
        moves = all_legal_moves(state, side)
        if self.max_candidates is not None:
            moves = moves[: self.max_candidates]
        scored: List[ScoredMove] = []
        for move in moves:
            simulated = apply_move(state, move, side)
            noise = float(self.rng.uniform(-0.5, 0.5))
            scored.append(ScoredMove(move, self.evaluate(simulated, side, w) + w.jitter * noise))
        return scored

    def evaluate(self, state: BoardState, side: Side, weights: Optional[HeuristicWeights] = None) -> float:
        w = weights or self.weights
        side = Side(side)
        grid = state.grid
        own_ids = state.piece_ids(side)
        opp_ids = state.piece_ids(side.opponent)
        enemy = int(side.opponent)

        piece_diff = len(own_ids) - len(opp_ids)
        opp_mobility = count_legal_moves(state, side.opponent)
        avg_distance = float(grid.center_distance[own_ids].mean()) if len(own_ids) else 0.0
        at_risk = sum(
            1 for idx in own_ids if any(state.cells[n] == enemy for n in grid.neighbor_ids(int(idx)))
        )
        return (
            w.piece_diff * piece_diff
            - w.opp_mobility * opp_mobility
            - w.center_control * avg_distance
            - w.risk * at_risk
        )
