from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

from .errors import EmptyCellError, IllegalMoveError, InvalidCellError, OccupiedCellError
from .grid import NEIGHBOR_OFFSETS, REACH_OFFSETS, Cell, HexGrid, hex_distance, hexagon_cells
from .state import EMPTY, BoardState, Side

logger = logging.getLogger(__name__)

MAX_MULTIPLIER = 4
REACH_INDEX: Dict[Cell, int] = {offset: i for i, offset in enumerate(REACH_OFFSETS)}


class MoveKind(Enum):
    PROPAGATE = "propagate"
    RELOCATE = "relocate"

    @staticmethod
    def for_distance(distance: int) -> "MoveKind":
        if distance == 1:
            return MoveKind.PROPAGATE
        if distance == 2:
            return MoveKind.RELOCATE
        raise ValueError(f"No move kind spans distance {distance}.")

    @property
    def distance(self) -> int:
        return 1 if self is MoveKind.PROPAGATE else 2


@dataclass(frozen=True)
class Move:
    from_cell: Cell
    to_cell: Cell
    kind: MoveKind

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.from_cell[0], self.from_cell[1], self.to_cell[0], self.to_cell[1])


@dataclass(frozen=True)
class MoveRecord:
    move: Move
    side: Side
    converted: Tuple[Cell, ...] = ()


# ----------------------------------------------------------------------
# Initial placement
# ----------------------------------------------------------------------
def corner_cells(side: Side, radius: int) -> Tuple[Cell, ...]:
    corners = ((-radius, 0), (0, -radius), (-radius, radius))
    if Side(side) is Side.B:
        return tuple((-q, -r) for q, r in corners)
    return corners


def initial_placement(side: Side, board_radius: int, multiplier: int = 1) -> List[Cell]:
    """Starting cells for ``side``: three alternating corners, ``multiplier`` pieces each.

    Extra pieces go to the corner's neighbours, rim cells first. Side B's
    cells are the point reflection of Side A's, so equal multipliers give
    mirrored openings.
    """
    if board_radius < 1:
        raise ValueError("Board radius must be >= 1.")
    if not 1 <= multiplier <= MAX_MULTIPLIER:
        raise ValueError(f"Multiplier must be between 1 and {MAX_MULTIPLIER}, got {multiplier}.")
    hexagon = set(hexagon_cells(board_radius))
    cells: List[Cell] = []
    for corner in corner_cells(Side.A, board_radius):
        neighbours = [(corner[0] + dq, corner[1] + dr) for dq, dr in NEIGHBOR_OFFSETS]
        around = sorted(
            (cell for cell in neighbours if cell in hexagon),
            key=lambda cell: (-hex_distance(cell, (0, 0)), cell),
        )
        for cell in [corner] + around[: multiplier - 1]:
            if cell not in cells:
                cells.append(cell)
    if Side(side) is Side.B:
        return [(-q, -r) for q, r in cells]
    return cells


def seeding_cells(radius: int) -> List[Cell]:
    cells: List[Cell] = []
    for side in Side:
        cells.extend(initial_placement(side, radius, MAX_MULTIPLIER))
    return cells


def setup_board(grid: HexGrid, multipliers: Optional[Mapping[Side, int]] = None) -> BoardState:
    """Seed both sides onto an empty board; Side A is placed first.

    Cells that are blocked or already taken (possible on very small boards
    or with large multipliers) are skipped.
    """
    multipliers = multipliers or {}
    state = BoardState(grid)
    for side in Side:
        for cell in initial_placement(side, grid.radius, multipliers.get(side, 1)):
            try:
                state.place(cell, side)
            except (OccupiedCellError, InvalidCellError):
                logger.debug("Skipping starting cell %s for side %s", cell, side.label)
    return state


# ----------------------------------------------------------------------
# Move generation
# ----------------------------------------------------------------------
def legal_moves_for(state: BoardState, cell: Cell) -> List[Move]:
    grid = state.grid
    idx = grid.index_of(cell)
    if state.cells[idx] == EMPTY:
        raise EmptyCellError(f"No piece at {cell}.")
    origin = grid.cell_at(idx)
    moves: List[Move] = []
    for target in grid.reach_ids(idx):
        if state.cells[target] == EMPTY:
            to_cell = grid.cell_at(target)
            moves.append(Move(origin, to_cell, MoveKind.for_distance(hex_distance(origin, to_cell))))
    return moves


def has_any_legal_move(state: BoardState, side: Side) -> bool:
    grid = state.grid
    cells = state.cells
    for idx in state.piece_ids(side):
        for target in grid.reach_ids(int(idx)):
            if cells[target] == EMPTY:
                return True
    return False


def all_legal_moves(state: BoardState, side: Side) -> List[Move]:
    moves: List[Move] = []
    for cell in state.occupied_positions(side):
        moves.extend(legal_moves_for(state, cell))
    return moves


def count_legal_moves(state: BoardState, side: Side) -> int:
    grid = state.grid
    cells = state.cells
    total = 0
    for idx in state.piece_ids(side):
        total += sum(1 for target in grid.reach_ids(int(idx)) if cells[target] == EMPTY)
    return total


# ----------------------------------------------------------------------
# Move execution
# ----------------------------------------------------------------------
def execute_move(state: BoardState, move: Move, side: Side) -> MoveRecord:
    """Apply ``move`` for ``side`` in place and report the converted cells.

    All checks run before the first write, so a rejected move leaves the
    board exactly as it was.
    """
    side = Side(side)
    _validate_move(state, move, side)

    if move.kind is MoveKind.RELOCATE:
        state.remove(move.from_cell)
    elif move.kind is not MoveKind.PROPAGATE:
        raise IllegalMoveError(f"Unsupported move kind {move.kind!r}.")
    state.place(move.to_cell, side)

    grid = state.grid
    enemy = int(side.opponent)
    converted: List[Cell] = []
    for neighbour in grid.neighbor_ids(grid.index_of(move.to_cell)):
        if state.cells[neighbour] == enemy:
            cell = grid.cell_at(neighbour)
            state.reassign(cell, side)
            converted.append(cell)
    return MoveRecord(move=move, side=side, converted=tuple(sorted(converted)))


def apply_move(state: BoardState, move: Move, side: Side, *, in_place: bool = False) -> BoardState:
    target = state if in_place else state.clone()
    execute_move(target, move, side)
    return target


def _validate_move(state: BoardState, move: Move, side: Side) -> None:
    if not isinstance(move, Move) or not isinstance(move.kind, MoveKind):
        raise IllegalMoveError(f"Not a move: {move!r}.")
    grid = state.grid
    try:
        from_idx = grid.index_of(move.from_cell)
        to_idx = grid.index_of(move.to_cell)
    except InvalidCellError as exc:
        raise IllegalMoveError(str(exc)) from exc
    if state.cells[from_idx] != int(side):
        raise IllegalMoveError(f"No piece of side {side.label} at {move.from_cell}.")
    if state.cells[to_idx] != EMPTY:
        raise IllegalMoveError(f"Destination {move.to_cell} is not empty.")
    if move not in legal_moves_for(state, move.from_cell):
        raise IllegalMoveError(f"{move} is not a legal move.")


# ----------------------------------------------------------------------
# Flat action encoding
# ----------------------------------------------------------------------
def action_space_size(grid: HexGrid) -> int:
    return grid.num_cells * len(REACH_OFFSETS)


def encode_move(grid: HexGrid, move: Move) -> int:
    from_idx = grid.index_of(move.from_cell)
    offset = (move.to_cell[0] - move.from_cell[0], move.to_cell[1] - move.from_cell[1])
    if offset not in REACH_INDEX:
        raise ValueError(f"{move} does not span distance 1 or 2.")
    return from_idx * len(REACH_OFFSETS) + REACH_INDEX[offset]


def decode_move(grid: HexGrid, index: int) -> Move:
    if not 0 <= index < action_space_size(grid):
        raise ValueError("Action index out of range.")
    from_idx, offset_idx = divmod(int(index), len(REACH_OFFSETS))
    origin = grid.cell_at(from_idx)
    dq, dr = REACH_OFFSETS[offset_idx]
    to_cell = (origin[0] + dq, origin[1] + dr)
    return Move(origin, to_cell, MoveKind.for_distance(hex_distance(origin, to_cell)))

