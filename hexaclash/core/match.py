from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Protocol, Tuple, Union

import numpy as np

from .errors import IllegalMoveError, MatchStateError
from .grid import Cell, HexGrid
from .rules import (
    Move,
    MoveRecord,
    all_legal_moves,
    execute_move,
    has_any_legal_move,
    legal_moves_for,
    seeding_cells,
    setup_board,
)
from .snapshot import load_state_snapshot, move_from_dict, state_snapshot
from .state import BoardState, Side

logger = logging.getLogger(__name__)


class EndReason(Enum):
    NONE = "none"
    BOARD_FULL = "board_full"
    SIDE_ELIMINATED = "side_eliminated"
    STALEMATE = "stalemate"
    FORFEIT = "forfeit"


@dataclass(frozen=True)
class Outcome:
    ended: bool
    reason: EndReason = EndReason.NONE
    winner: Optional[Side] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "ended": self.ended,
            "reason": self.reason.value,
            "winning_side": self.winner.label if self.winner is not None else None,
        }


@dataclass
class MatchState:
    current_side: Side
    ended: bool = False
    end_reason: EndReason = EndReason.NONE
    winner: Optional[Side] = None
    ply_count: int = 0


@dataclass
class MatchConfig:
    radius: int = 4
    # None: the human side opens a single-player match, otherwise Side A.
    first_side: Optional[Side] = None
    ai_sides: FrozenSet[Side] = frozenset()
    multipliers: Dict[Side, int] = field(default_factory=dict)
    blocked_density: float = 0.0
    seed: Optional[int] = None


class Agent(Protocol):
    def decide_move(self, state: BoardState, side: Side) -> Optional[Move]:
        ...


def evaluate_termination(state: BoardState) -> EndReason:
    """Terminal check in fixed precedence: full board, then elimination, then mutual stalemate."""
    if state.is_full():
        return EndReason.BOARD_FULL
    if state.count_by_side(Side.A) == 0 or state.count_by_side(Side.B) == 0:
        return EndReason.SIDE_ELIMINATED
    if not has_any_legal_move(state, Side.A) and not has_any_legal_move(state, Side.B):
        return EndReason.STALEMATE
    return EndReason.NONE


def winner_by_count(state: BoardState) -> Optional[Side]:
    count_a = state.count_by_side(Side.A)
    count_b = state.count_by_side(Side.B)
    if count_a == count_b:
        return None
    return Side.A if count_a > count_b else Side.B


class MatchController:
    """Turn and termination state machine around a single :class:`BoardState`.

    ``submit_move`` is the only path that mutates the board; hosts must not
    call it concurrently. ``state`` is exposed for reading (rendering,
    highlighting) and should not be written to directly.
    """

    def __init__(
        self,
        config: Optional[MatchConfig] = None,
        *,
        state: Optional[BoardState] = None,
        current_side: Optional[Side] = None,
    ) -> None:
        self.config = config or MatchConfig()
        self.board_seed: Optional[int] = self.config.seed
        if state is None:
            if self.board_seed is None and self.config.blocked_density > 0.0:
                self.board_seed = int(np.random.default_rng().integers(0, 2**31 - 1))
            state = setup_board(self._build_grid(self.board_seed), self.config.multipliers)
        self._state = state
        self._match = MatchState(current_side=Side(current_side or self._resolve_first_side()))
        self._history: List[MoveRecord] = []
        self._check_terminal()

    def _resolve_first_side(self) -> Side:
        if self.config.first_side is not None:
            return Side(self.config.first_side)
        humans = [side for side in Side if side not in self.config.ai_sides]
        if len(humans) == 1:
            return humans[0]
        return Side.A

    def _build_grid(self, seed: Optional[int], density: Optional[float] = None) -> HexGrid:
        radius = self.config.radius
        density = self.config.blocked_density if density is None else density
        if seed is None or density <= 0.0:
            return HexGrid(radius)
        return HexGrid.regenerate(radius, seed, density, seeding_cells(radius))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def state(self) -> BoardState:
        return self._state

    @property
    def match_state(self) -> MatchState:
        return replace(self._match)

    @property
    def current_side(self) -> Side:
        return self._match.current_side

    @property
    def is_ended(self) -> bool:
        return self._match.ended

    @property
    def history(self) -> Tuple[MoveRecord, ...]:
        return tuple(self._history)

    def is_ai(self, side: Side) -> bool:
        return Side(side) in self.config.ai_sides

    def legal_moves_for(self, cell: Cell) -> List[Move]:
        return legal_moves_for(self._state, cell)

    def legal_moves(self) -> List[Move]:
        return all_legal_moves(self._state, self.current_side)

    def outcome(self) -> Outcome:
        return Outcome(
            ended=self._match.ended,
            reason=self._match.end_reason,
            winner=self._match.winner,
        )

    def snapshot(self) -> Dict[str, Any]:
        return state_snapshot(self._state, self.current_side)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def submit_move(self, move: Move) -> Outcome:
        self._require_in_progress()
        side = self.current_side
        record = execute_move(self._state, move, side)
        self._history.append(record)
        self._match.ply_count += 1
        logger.debug(
            "Side %s played %s %s -> %s, converted %d",
            side.label,
            move.kind.value,
            move.from_cell,
            move.to_cell,
            len(record.converted),
        )
        self._settle()
        return self.outcome()

    def receive_remote_move(self, payload: Union[Move, Mapping[str, Any]]) -> Optional[Outcome]:
        """Submit a move relayed by a peer; ``None`` means it was rejected and the board is unchanged."""
        if self._match.ended:
            logger.warning("Ignoring remote move after the match ended: %r", payload)
            return None
        try:
            move = payload if isinstance(payload, Move) else move_from_dict(payload)
            return self.submit_move(move)
        except IllegalMoveError as exc:
            logger.warning("Rejected remote move %r: %s", payload, exc)
            return None

    def skip_turn(self) -> Outcome:
        self._require_in_progress()
        side = self.current_side
        if self.is_ai(side):
            raise MatchStateError(f"Side {side.label} is computer-controlled and cannot skip.")
        logger.debug("Side %s skipped its turn", side.label)
        self._match.current_side = side.opponent
        return self.outcome()

    def forfeit(self, side: Optional[Side] = None) -> Outcome:
        self._require_in_progress()
        loser = Side(side) if side is not None else self.current_side
        self._end(EndReason.FORFEIT, loser.opponent)
        return self.outcome()

    def play_ai_turn(self, agent: Agent) -> Outcome:
        """Let ``agent`` move for the side to play; an agent without a move passes."""
        self._require_in_progress()
        side = self.current_side
        move = agent.decide_move(self._state.clone(), side)
        if move is not None:
            return self.submit_move(move)
        logger.debug("Side %s has no move and passes", side.label)
        reason = evaluate_termination(self._state)
        if reason is not EndReason.NONE:
            self._end(reason, winner_by_count(self._state))
        else:
            self._match.current_side = side.opponent
        return self.outcome()

    def load_snapshot(self, snapshot: Mapping[str, Any]) -> Outcome:
        """Replace the board and side to move wholesale (reconnection, resynchronisation)."""
        state, current_side = load_state_snapshot(snapshot)
        self._state = state
        self._match = MatchState(current_side=current_side)
        self._history = []
        self._check_terminal()
        return self.outcome()

    def regenerate_board(self, seed: int, density: Optional[float] = None) -> None:
        """Rebuild the blocked-cell layout and starting position from ``seed``.

        Both peers of a networked match call this with the same seed before
        the first move and end up with identical boards.
        """
        if self._history or self._match.ply_count:
            raise MatchStateError("The board can only be regenerated before the first move.")
        self._require_in_progress()
        grid = self._build_grid(seed, density)
        self._state = setup_board(grid, self.config.multipliers)
        self.board_seed = seed
        logger.info("Regenerated radius-%d board from seed %d with %d blocked cells", grid.radius, seed, len(grid.blocked))

    # ------------------------------------------------------------------
    def _require_in_progress(self) -> None:
        if self._match.ended:
            raise MatchStateError(f"The match has ended ({self._match.end_reason.value}).")

    def _check_terminal(self) -> None:
        reason = evaluate_termination(self._state)
        if reason is not EndReason.NONE:
            self._end(reason, winner_by_count(self._state))

    def _settle(self) -> None:
        reason = evaluate_termination(self._state)
        if reason is EndReason.NONE:
            self._match.current_side = self.current_side.opponent
            return
        self._end(reason, winner_by_count(self._state))

    def _end(self, reason: EndReason, winner: Optional[Side]) -> None:
        self._match.ended = True
        self._match.end_reason = reason
        self._match.winner = winner
        logger.info(
            "Match ended: %s, winner %s",
            reason.value,
            winner.label if winner is not None else "none",
        )
