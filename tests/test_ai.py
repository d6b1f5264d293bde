import numpy as np
import pytest

from hexaclash.ai import (
    DIFFICULTY_ORDER,
    DIFFICULTY_PROFILES,
    AIEngine,
    HeuristicWeights,
    RandomAI,
    get_profile,
    load_profiles,
)
from hexaclash.core import BoardState, HexGrid, Move, MoveKind, Side, all_legal_moves


def corridor_state():
    # Only (-1, 0) and (1, 0) are open around a lone Side A piece.
    state = BoardState(HexGrid(1, blocked=[(0, 1), (0, -1), (1, -1), (-1, 1)]))
    state.place((0, 0), Side.A)
    return state


def test_jitter_varies_choice_between_equal_moves():
    state = corridor_state()
    engine = AIEngine("normal", rng=np.random.default_rng(0))
    chosen = {engine.decide_move(state, Side.A).to_cell for _ in range(200)}
    assert chosen == {(-1, 0), (1, 0)}


def test_without_jitter_ties_keep_generation_order():
    state = corridor_state()
    engine = AIEngine(HeuristicWeights(jitter=0.0), rng=np.random.default_rng(0))
    for _ in range(20):
        assert engine.decide_move(state, Side.A) == Move((0, 0), (-1, 0), MoveKind.PROPAGATE)


def test_prefers_converting_propagation():
    state = BoardState(HexGrid(2))
    state.place((-2, 0), Side.A)
    state.place((0, 0), Side.B)
    engine = AIEngine(HeuristicWeights(jitter=0.0))

    assert engine.decide_move(state, Side.A) == Move((-2, 0), (-1, 0), MoveKind.PROPAGATE)


def test_returns_none_without_pieces_or_moves():
    engine = AIEngine()
    empty = BoardState(HexGrid(2))
    empty.place((0, 0), Side.B)
    assert engine.decide_move(empty, Side.A) is None

    full = BoardState(HexGrid(1))
    for cell in full.grid.cells:
        full.place(cell, Side.A)
    assert engine.decide_move(full, Side.A) is None


def test_decide_move_leaves_state_untouched():
    state = BoardState(HexGrid(3))
    state.place((-3, 0), Side.A)
    state.place((-1, 0), Side.B)
    state.place((2, 0), Side.B)
    before = state.clone()

    move = AIEngine("hard", rng=np.random.default_rng(3)).decide_move(state, Side.A)

    assert move in all_legal_moves(state, Side.A)
    assert state == before


def test_max_candidates_limits_search():
    state = corridor_state()
    engine = AIEngine(HeuristicWeights(jitter=0.0), max_candidates=1)
    assert len(engine.score_moves(state, Side.A)) == 1
    with pytest.raises(ValueError):
        AIEngine(max_candidates=0)


def test_evaluate_counts_pieces_mobility_and_risk():
    state = BoardState(HexGrid(2))
    state.place((0, 0), Side.A)
    state.place((1, 0), Side.B)
    weights = HeuristicWeights(piece_diff=0.0, opp_mobility=0.0, center_control=0.0, risk=1.0, jitter=0.0)
    assert AIEngine(weights).evaluate(state, Side.A) == -1.0

    weights = HeuristicWeights(piece_diff=0.0, opp_mobility=1.0, center_control=0.0, risk=0.0, jitter=0.0)
    # (1, 0) reaches every other playable cell within two steps except (0, 0).
    expected = len(state.grid.cells_within_radius((1, 0), 2)) - 2
    assert AIEngine(weights).evaluate(state, Side.A) == -float(expected)


def test_stronger_profiles_weigh_material_more_and_noise_less():
    profiles = [DIFFICULTY_PROFILES[name] for name in DIFFICULTY_ORDER]
    for weaker, stronger in zip(profiles, profiles[1:]):
        assert stronger.piece_diff > weaker.piece_diff
        assert stronger.opp_mobility > weaker.opp_mobility
        assert stronger.center_control > weaker.center_control
        assert stronger.risk < weaker.risk
        assert stronger.jitter < weaker.jitter
    assert get_profile("normal") == HeuristicWeights()
    with pytest.raises(ValueError):
        get_profile("grandmaster")


def test_load_profiles_from_yaml(tmp_path):
    path = tmp_path / "profiles.yaml"
    path.write_text("profiles:\n  custom:\n    piece_diff: 9\n    jitter: 0\n  easy:\n    risk: 3.5\n")

    profiles = load_profiles(path)

    assert profiles["custom"].piece_diff == 9.0
    assert profiles["custom"].jitter == 0.0
    assert profiles["custom"].opp_mobility == HeuristicWeights().opp_mobility
    assert profiles["easy"].risk == 3.5
    assert profiles["expert"] == DIFFICULTY_PROFILES["expert"]

    path.write_text("profiles:\n  broken:\n    aggression: 1\n")
    with pytest.raises(ValueError):
        load_profiles(path)


def test_random_ai_picks_legal_moves():
    state = corridor_state()
    agent = RandomAI(np.random.default_rng(1))
    for _ in range(10):
        assert agent.decide_move(state, Side.A) in all_legal_moves(state, Side.A)
    assert agent.decide_move(state, Side.B) is None
