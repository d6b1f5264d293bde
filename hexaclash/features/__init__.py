"""Feature extraction helpers for Hexaclash."""

from .observation import (
    AUX_VECTOR_SIZE,
    BOARD_CHANNELS,
    board_dim,
    build_aux_vector,
    build_board_tensor,
    state_to_numpy,
)

__all__ = [
    "AUX_VECTOR_SIZE",
    "BOARD_CHANNELS",
    "board_dim",
    "build_board_tensor",
    "build_aux_vector",
    "state_to_numpy",
]
