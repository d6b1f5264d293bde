import pytest

from hexaclash.core import (
    BoardState,
    EmptyCellError,
    HexGrid,
    IllegalMoveError,
    Move,
    MoveKind,
    Side,
    all_legal_moves,
    apply_move,
    decode_move,
    encode_move,
    execute_move,
    hex_distance,
    initial_placement,
    legal_moves_for,
    setup_board,
)


def board(radius, a=(), b=(), blocked=()):
    state = BoardState(HexGrid(radius, blocked))
    for cell in a:
        state.place(cell, Side.A)
    for cell in b:
        state.place(cell, Side.B)
    return state


def test_single_empty_cell_gives_single_move():
    grid = HexGrid(2)
    others = [cell for cell in grid.cells if cell not in {(0, 0), (1, 0)}]
    state = board(2, a=[(0, 0)], b=others)

    assert legal_moves_for(state, (0, 0)) == [Move((0, 0), (1, 0), MoveKind.PROPAGATE)]


def test_legal_moves_cover_every_empty_cell_in_reach():
    state = board(3, a=[(0, 0)], b=[(1, 0)], blocked=[(0, 2), (0, -2)])
    moves = legal_moves_for(state, (0, 0))
    targets = {move.to_cell for move in moves}

    expected = {
        cell
        for cell in state.grid.cells_within_radius((0, 0), 2)
        if cell != (0, 0) and state.is_empty(cell)
    }
    assert targets == expected
    assert len(moves) == len(targets)
    for move in moves:
        assert move.kind.distance == hex_distance(move.from_cell, move.to_cell)


def test_legal_moves_require_a_piece():
    state = board(2)
    with pytest.raises(EmptyCellError):
        legal_moves_for(state, (0, 0))


def test_relocate_vacates_origin_and_converts():
    state = board(2, a=[(0, 0)], b=[(1, 0)])
    record = execute_move(state, Move((0, 0), (2, 0), MoveKind.RELOCATE), Side.A)

    assert state.is_empty((0, 0))
    assert state.side_at((2, 0)) == Side.A
    assert state.side_at((1, 0)) == Side.A
    assert record.converted == ((1, 0),)
    assert state.count_by_side(Side.A) == 2
    assert state.count_by_side(Side.B) == 0


def test_propagate_keeps_origin():
    state = board(2, a=[(0, 0)], b=[(2, -2)])
    execute_move(state, Move((0, 0), (1, 0), MoveKind.PROPAGATE), Side.A)

    assert state.side_at((0, 0)) == Side.A
    assert state.side_at((1, 0)) == Side.A
    assert state.side_at((2, -2)) == Side.B


def test_conversion_touches_only_adjacent_enemies():
    state = board(3, a=[(0, 0), (2, 0)], b=[(1, -1), (2, -1), (3, -1), (-1, 0)])
    record = execute_move(state, Move((0, 0), (1, 0), MoveKind.PROPAGATE), Side.A)

    assert set(record.converted) == {(1, -1), (2, -1)}
    assert state.side_at((3, -1)) == Side.B
    assert state.side_at((-1, 0)) == Side.B
    assert state.side_at((2, 0)) == Side.A
    for neighbour in state.grid.neighbors((1, 0)):
        assert state.side_at(neighbour) in (None, Side.A)


@pytest.mark.parametrize(
    "move, side",
    [
        (Move((0, 0), (0, 3), MoveKind.RELOCATE), Side.A),
        (Move((0, 0), (1, 0), MoveKind.RELOCATE), Side.A),
        (Move((0, 0), (2, 0), MoveKind.PROPAGATE), Side.A),
        (Move((0, 0), (-1, 0), MoveKind.PROPAGATE), Side.A),
        (Move((0, 0), (0, 1), MoveKind.PROPAGATE), Side.A),
        (Move((0, 0), (1, 0), MoveKind.PROPAGATE), Side.B),
        (Move((1, 1), (1, 0), MoveKind.PROPAGATE), Side.A),
        (Move((0, 0), (5, 0), MoveKind.RELOCATE), Side.A),
    ],
)
def test_illegal_moves_leave_board_untouched(move, side):
    state = board(3, a=[(0, 0)], b=[(-1, 0)], blocked=[(0, 1), (0, -1)])
    before = state.clone()

    with pytest.raises(IllegalMoveError):
        execute_move(state, move, side)
    assert state == before


def test_apply_move_returns_new_state_unless_in_place():
    state = board(2, a=[(0, 0)], b=[(2, 0)])
    move = Move((0, 0), (1, 0), MoveKind.PROPAGATE)

    result = apply_move(state, move, Side.A)
    assert result is not state
    assert state.is_empty((1, 0))

    same = apply_move(state, move, Side.A, in_place=True)
    assert same is state
    assert state.side_at((2, 0)) == Side.A


def test_initial_placement_is_mirrored_between_sides():
    a_cells = initial_placement(Side.A, 4)
    b_cells = initial_placement(Side.B, 4)

    assert a_cells == [(-4, 0), (0, -4), (-4, 4)]
    assert b_cells == [(4, 0), (0, 4), (4, -4)]
    assert not set(a_cells) & set(b_cells)


def test_multiplier_adds_rim_neighbours():
    cells = initial_placement(Side.A, 4, multiplier=2)
    grid = HexGrid(4)

    assert len(cells) == 6
    assert all(grid.is_valid(cell) for cell in cells)
    assert all(hex_distance(cell, (0, 0)) == 4 for cell in cells)
    with pytest.raises(ValueError):
        initial_placement(Side.A, 4, multiplier=5)


def test_setup_board_applies_handicap():
    state = setup_board(HexGrid(4), {Side.B: 2})
    assert state.count_by_side(Side.A) == 3
    assert state.count_by_side(Side.B) == 6


def test_action_encoding_matches_legal_moves():
    state = setup_board(HexGrid(3))
    grid = state.grid
    moves = all_legal_moves(state, Side.A)
    indices = [encode_move(grid, move) for move in moves]

    assert len(set(indices)) == len(moves)
    assert [decode_move(grid, index) for index in indices] == moves
    with pytest.raises(ValueError):
        decode_move(grid, -1)


def test_move_with_unknown_kind_is_rejected():
    state = board(2, a=[(0, 0)])
    before = state.clone()

    with pytest.raises(IllegalMoveError):
        execute_move(state, Move((0, 0), (1, 0), "propagate"), Side.A)
    assert state == before
