"""Core game logic for Hexaclash."""

from .errors import (
    EmptyCellError,
    HexaclashError,
    IllegalMoveError,
    InvalidCellError,
    MatchStateError,
    OccupiedCellError,
)
from .grid import Cell, HexGrid, hex_distance
from .state import BoardState, Piece, Side
from .rules import (
    MAX_MULTIPLIER,
    Move,
    MoveKind,
    MoveRecord,
    action_space_size,
    all_legal_moves,
    apply_move,
    count_legal_moves,
    decode_move,
    encode_move,
    execute_move,
    has_any_legal_move,
    initial_placement,
    legal_moves_for,
    setup_board,
)
from .match import (
    Agent,
    EndReason,
    MatchConfig,
    MatchController,
    MatchState,
    Outcome,
    evaluate_termination,
    winner_by_count,
)
from .snapshot import load_state_snapshot, move_from_dict, move_to_dict, state_snapshot

__all__ = [
    "Cell",
    "HexGrid",
    "hex_distance",
    "BoardState",
    "Piece",
    "Side",
    "MAX_MULTIPLIER",
    "Move",
    "MoveKind",
    "MoveRecord",
    "action_space_size",
    "all_legal_moves",
    "apply_move",
    "count_legal_moves",
    "decode_move",
    "encode_move",
    "execute_move",
    "has_any_legal_move",
    "initial_placement",
    "legal_moves_for",
    "setup_board",
    "Agent",
    "EndReason",
    "MatchConfig",
    "MatchController",
    "MatchState",
    "Outcome",
    "evaluate_termination",
    "winner_by_count",
    "load_state_snapshot",
    "move_from_dict",
    "move_to_dict",
    "state_snapshot",
    "HexaclashError",
    "InvalidCellError",
    "OccupiedCellError",
    "EmptyCellError",
    "IllegalMoveError",
    "MatchStateError",
]
