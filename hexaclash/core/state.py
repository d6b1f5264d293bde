from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, List, Optional

import numpy as np
from numpy.typing import NDArray

from .errors import EmptyCellError, InvalidCellError, OccupiedCellError
from .grid import Cell, HexGrid

BoardArray = NDArray[np.int8]

EMPTY = 0


class Side(IntEnum):
    A = 1
    B = 2

    @property
    def opponent(self) -> "Side":
        return Side.B if self is Side.A else Side.A

    @property
    def label(self) -> str:
        return self.name

    @staticmethod
    def from_label(label: str) -> "Side":
        try:
            return Side[label.upper()]
        except (KeyError, AttributeError):
            raise ValueError(f"Unknown side label {label!r}.") from None


@dataclass(frozen=True)
class Piece:
    cell: Cell
    side: Side


class BoardState:
    """Cell-to-piece mapping for one board.

    Contents live in a flat ``int8`` array indexed by the grid's cell index:
    ``0`` is empty, otherwise the value of the owning :class:`Side`. Blocked
    cells always stay empty.
    """

    __slots__ = ("grid", "cells")

    def __init__(self, grid: HexGrid, cells: Optional[BoardArray] = None) -> None:
        self.grid = grid
        if cells is None:
            cells = np.zeros(grid.num_cells, dtype=np.int8)
        elif cells.shape != (grid.num_cells,):
            raise ValueError(f"Board array must have shape ({grid.num_cells},), got {cells.shape}.")
        self.cells: BoardArray = cells

    @classmethod
    def empty(cls, radius: int, blocked=()) -> "BoardState":
        return cls(HexGrid(radius, blocked))

    def clone(self) -> "BoardState":
        return BoardState(self.grid, self.cells.copy())

    # ------------------------------------------------------------------
    def _playable_index(self, cell: Cell) -> int:
        idx = self.grid.index_of(cell)
        if not self.grid.playable_mask[idx]:
            raise InvalidCellError(f"Cell {cell} is blocked.")
        return idx

    def side_at(self, cell: Cell) -> Optional[Side]:
        value = int(self.cells[self.grid.index_of(cell)])
        return Side(value) if value != EMPTY else None

    def get(self, cell: Cell) -> Optional[Piece]:
        side = self.side_at(cell)
        if side is None:
            return None
        return Piece(self.grid.cell_at(self.grid.index_of(cell)), side)

    def is_empty(self, cell: Cell) -> bool:
        return self.side_at(cell) is None

    def place(self, cell: Cell, side: Side) -> None:
        idx = self._playable_index(cell)
        if self.cells[idx] != EMPTY:
            raise OccupiedCellError(f"Cell {cell} is already occupied.")
        self.cells[idx] = int(Side(side))

    def remove(self, cell: Cell) -> None:
        idx = self._playable_index(cell)
        if self.cells[idx] == EMPTY:
            raise EmptyCellError(f"No piece at {cell}.")
        self.cells[idx] = EMPTY

    def reassign(self, cell: Cell, new_side: Side) -> None:
        idx = self._playable_index(cell)
        if self.cells[idx] == EMPTY:
            raise EmptyCellError(f"No piece at {cell}.")
        self.cells[idx] = int(Side(new_side))

    # ------------------------------------------------------------------
    def count_by_side(self, side: Side) -> int:
        return int(np.count_nonzero(self.cells == int(side)))

    def is_full(self) -> bool:
        return not np.any((self.cells == EMPTY) & self.grid.playable_mask)

    def piece_ids(self, side: Side) -> NDArray[np.intp]:
        return np.flatnonzero(self.cells == int(side))

    def pieces(self, side: Optional[Side] = None) -> Iterator[Piece]:
        if side is None:
            ids = np.flatnonzero(self.cells != EMPTY)
        else:
            ids = self.piece_ids(side)
        for idx in ids:
            yield Piece(self.grid.cell_at(int(idx)), Side(int(self.cells[idx])))

    def occupied_positions(self, side: Side) -> Iterator[Cell]:
        for idx in self.piece_ids(side):
            yield self.grid.cell_at(int(idx))

    def empty_cells(self) -> List[Cell]:
        ids = np.flatnonzero((self.cells == EMPTY) & self.grid.playable_mask)
        return [self.grid.cell_at(int(idx)) for idx in ids]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoardState):
            return NotImplemented
        return self.grid == other.grid and bool(np.array_equal(self.cells, other.cells))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        symbols = {EMPTY: ".", int(Side.A): "A", int(Side.B): "B"}
        radius = self.grid.radius
        rows = []
        for r in range(-radius, radius + 1):
            row = []
            for q in range(-radius, radius + 1):
                if not self.grid.contains((q, r)):
                    continue
                if self.grid.is_blocked((q, r)):
                    row.append("#")
                else:
                    row.append(symbols[int(self.cells[self.grid.index_of((q, r))])])
            rows.append(" " * abs(r) + " ".join(row))
        return (
            f"BoardState(radius={radius}, A={self.count_by_side(Side.A)}, B={self.count_by_side(Side.B)})\n"
            + "\n".join(rows)
        )
