from __future__ import annotations

from numbers import Integral
from typing import Dict, FrozenSet, Iterable, List, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from .errors import InvalidCellError

Cell = Tuple[int, int]

NEIGHBOR_OFFSETS: Tuple[Cell, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1), (1, -1), (-1, 1))
# Every displacement at distance 1 or 2, ordered by (dq, dr) so that targets come out sorted by (q, r).
REACH_OFFSETS: Tuple[Cell, ...] = tuple(
    sorted(
        (dq, dr)
        for dq in range(-2, 3)
        for dr in range(-2, 3)
        if 1 <= max(abs(dq), abs(dr), abs(dq + dr)) <= 2
    )
)
CENTER: Cell = (0, 0)


def hex_distance(a: Cell, b: Cell) -> int:
    """Cube-coordinate distance between two axial cells (x=q, z=r, y=-x-z)."""
    dq = a[0] - b[0]
    dr = a[1] - b[1]
    return max(abs(dq), abs(dr), abs(dq + dr))


def hexagon_cells(radius: int) -> List[Cell]:
    cells: List[Cell] = []
    for q in range(-radius, radius + 1):
        for r in range(max(-radius, -q - radius), min(radius, -q + radius) + 1):
            cells.append((q, r))
    return cells


def generate_blocked_cells(
    radius: int,
    seed: int,
    density: float,
    protected: Iterable[Cell] = (),
) -> FrozenSet[Cell]:
    """Draw a point-symmetric set of blocked cells from ``seed``.

    Cells are blocked in pairs ``(q, r)`` / ``(-q, -r)`` so that mirrored
    starting corners see the same terrain. The centre and any ``protected``
    cell (and its mirror) are never blocked. The same arguments always give
    the same set, which lets two peers agree on a board by exchanging only
    the seed.
    """
    if not 0.0 <= density < 1.0:
        raise ValueError("Blocked density must be in [0, 1).")
    guarded = set(protected)
    guarded.update((-q, -r) for q, r in list(guarded))
    candidates = [
        (q, r)
        for q, r in hexagon_cells(radius)
        if (q > 0 or (q == 0 and r > 0)) and (q, r) not in guarded
    ]
    total = len(hexagon_cells(radius))
    pairs = min(len(candidates), int(round(density * total / 2)))
    if pairs == 0:
        return frozenset()
    rng = np.random.default_rng(seed)
    chosen = sorted(int(i) for i in rng.choice(len(candidates), size=pairs, replace=False))
    blocked = set()
    for i in chosen:
        q, r = candidates[i]
        blocked.add((q, r))
        blocked.add((-q, -r))
    return frozenset(blocked)


def _require_int(q: object, r: object) -> None:
    for value in (q, r):
        if isinstance(value, bool) or not isinstance(value, Integral):
            raise TypeError(f"Cell coordinates must be integers, got {value!r}.")


class HexGrid:
    """Hexagonal board of a fixed radius with an optional set of blocked cells.

    Every cell of the hexagon gets a stable integer index (ascending by ``q``
    then ``r``); board states store their contents in arrays of that length,
    and the neighbour and reach tables below are expressed in those indices.
    """

    def __init__(self, radius: int, blocked: Iterable[Cell] = ()) -> None:
        if isinstance(radius, bool) or not isinstance(radius, Integral) or radius < 1:
            raise ValueError(f"Board radius must be an integer >= 1, got {radius!r}.")
        self.radius = int(radius)
        self._all_cells: Tuple[Cell, ...] = tuple(hexagon_cells(self.radius))
        self._index: Dict[Cell, int] = {cell: i for i, cell in enumerate(self._all_cells)}

        blocked_set = set()
        for cell in blocked:
            key = (int(cell[0]), int(cell[1]))
            if key not in self._index:
                raise InvalidCellError(f"Blocked cell {key} lies outside a radius-{self.radius} board.")
            blocked_set.add(key)
        self.blocked: FrozenSet[Cell] = frozenset(blocked_set)

        playable = np.ones(len(self._all_cells), dtype=bool)
        for cell in self.blocked:
            playable[self._index[cell]] = False
        playable.setflags(write=False)
        self.playable_mask: NDArray[np.bool_] = playable
        self._cells: Tuple[Cell, ...] = tuple(c for c in self._all_cells if c not in self.blocked)

        self._neighbor_ids = tuple(self._offset_ids(cell, NEIGHBOR_OFFSETS) for cell in self._all_cells)
        self._reach_ids = tuple(self._offset_ids(cell, REACH_OFFSETS) for cell in self._all_cells)
        center_distance = np.array([hex_distance(cell, CENTER) for cell in self._all_cells], dtype=np.int16)
        center_distance.setflags(write=False)
        self.center_distance: NDArray[np.int16] = center_distance

    def _offset_ids(self, cell: Cell, offsets: Sequence[Cell]) -> Tuple[int, ...]:
        ids = []
        for dq, dr in offsets:
            idx = self._index.get((cell[0] + dq, cell[1] + dr))
            if idx is not None and self.playable_mask[idx]:
                ids.append(idx)
        return tuple(ids)

    # ------------------------------------------------------------------
    @classmethod
    def regenerate(
        cls,
        radius: int,
        seed: int,
        density: float,
        protected: Iterable[Cell] = (),
    ) -> "HexGrid":
        return cls(radius, generate_blocked_cells(radius, seed, density, protected))

    def with_blocked(self, cells: Iterable[Cell]) -> "HexGrid":
        return HexGrid(self.radius, cells)

    @property
    def num_cells(self) -> int:
        return len(self._all_cells)

    @property
    def all_cells(self) -> Tuple[Cell, ...]:
        return self._all_cells

    @property
    def cells(self) -> Tuple[Cell, ...]:
        return self._cells

    def contains(self, cell: Cell) -> bool:
        return cell in self._index

    def index_of(self, cell: Cell) -> int:
        try:
            return self._index[(cell[0], cell[1])]
        except (KeyError, TypeError, IndexError):
            raise InvalidCellError(f"{cell!r} is not a cell of a radius-{self.radius} board.") from None

    def cell_at(self, index: int) -> Cell:
        return self._all_cells[index]

    def is_blocked(self, cell: Cell) -> bool:
        return cell in self.blocked

    def is_valid_cell(self, q: int, r: int) -> bool:
        _require_int(q, r)
        idx = self._index.get((int(q), int(r)))
        return idx is not None and bool(self.playable_mask[idx])

    def is_valid(self, cell: Cell) -> bool:
        return self.is_valid_cell(cell[0], cell[1])

    @staticmethod
    def distance(a: Cell, b: Cell) -> int:
        return hex_distance(a, b)

    def cells_within_radius(self, center: Cell, k: int) -> List[Cell]:
        _require_int(*center)
        if k < 0:
            raise ValueError("Radius must be non-negative.")
        q0, r0 = center
        result: List[Cell] = []
        for dq in range(-k, k + 1):
            for dr in range(max(-k, -dq - k), min(k, -dq + k) + 1):
                if self.is_valid_cell(q0 + dq, r0 + dr):
                    result.append((q0 + dq, r0 + dr))
        return result

    def neighbors(self, cell: Cell) -> List[Cell]:
        idx = self.index_of(cell)
        return [self._all_cells[i] for i in self._neighbor_ids[idx]]

    def neighbor_ids(self, index: int) -> Tuple[int, ...]:
        return self._neighbor_ids[index]

    def reach_ids(self, index: int) -> Tuple[int, ...]:
        return self._reach_ids[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HexGrid):
            return NotImplemented
        return self.radius == other.radius and self.blocked == other.blocked

    def __hash__(self) -> int:
        return hash((self.radius, self.blocked))

    def __repr__(self) -> str:
        return f"HexGrid(radius={self.radius}, blocked={len(self.blocked)})"
