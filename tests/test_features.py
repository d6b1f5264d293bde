import numpy as np

from hexaclash.core import BoardState, HexGrid, MatchConfig, MatchController, Side
from hexaclash.features import build_board_tensor, state_to_numpy


def test_state_to_numpy_initial_board_counts():
    controller = MatchController(MatchConfig(radius=4))
    board, aux = state_to_numpy(controller.state, controller.current_side)

    assert board.shape == (3, 9, 9)
    assert aux.shape == (2,)
    assert board[0].sum() == 3
    assert board[1].sum() == 3
    # 61 playable cells, the rest of the square is outside the hexagon.
    assert board[2].sum() == 61
    # Side A's first corner (-4, 0) sits at [0, 4].
    assert board[0, 0, 4] == 1.0
    assert aux.tolist() == [1.0, 0.0]


def test_blocked_cells_are_absent_from_playable_channel():
    state = BoardState(HexGrid(2, blocked=[(1, 0), (-1, 0)]))
    state.place((0, 0), Side.B)
    board = build_board_tensor(state)

    assert board[2, 3, 2] == 0.0
    assert board[2, 1, 2] == 0.0
    assert board[1, 2, 2] == 1.0
    assert np.count_nonzero(board[2]) == 17
