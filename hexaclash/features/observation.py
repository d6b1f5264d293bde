from __future__ import annotations

from typing import Tuple

import numpy as np

from hexaclash.core import BoardState, Side

BOARD_CHANNELS = 3  # side A, side B, playable cells
AUX_VECTOR_SIZE = 2  # side-to-move one-hot


def board_dim(radius: int) -> int:
    return 2 * radius + 1


def build_board_tensor(state: BoardState) -> np.ndarray:
    """Return board tensor with shape (3, 2R+1, 2R+1), cell (q, r) at [q + R, r + R]."""
    grid = state.grid
    radius = grid.radius
    dim = board_dim(radius)
    tensor = np.zeros((BOARD_CHANNELS, dim, dim), dtype=np.float32)
    for idx, (q, r) in enumerate(grid.all_cells):
        row, col = q + radius, r + radius
        value = int(state.cells[idx])
        if value:
            tensor[value - 1, row, col] = 1.0
        if grid.playable_mask[idx]:
            tensor[2, row, col] = 1.0
    return tensor


def build_aux_vector(current_side: Side) -> np.ndarray:
    aux = np.zeros((AUX_VECTOR_SIZE,), dtype=np.float32)
    aux[int(current_side) - 1] = 1.0
    return aux


def state_to_numpy(state: BoardState, current_side: Side) -> Tuple[np.ndarray, np.ndarray]:
    return build_board_tensor(state), build_aux_vector(current_side)
