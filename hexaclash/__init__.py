"""Hexaclash rule engine and computer opponents."""

from . import ai, core, env, evaluation, features
from .ai import AIEngine, HeuristicWeights, RandomAI, get_profile, load_profiles
from .core import (
    BoardState,
    HexGrid,
    MatchConfig,
    MatchController,
    Move,
    MoveKind,
    Outcome,
    Side,
)
from .env import HexaclashEnv
from .evaluation import EvaluationResult, evaluate_agents, play_match
from .features import build_aux_vector, build_board_tensor, state_to_numpy

__all__ = [
    "ai",
    "core",
    "env",
    "evaluation",
    "features",
    "AIEngine",
    "HeuristicWeights",
    "RandomAI",
    "get_profile",
    "load_profiles",
    "BoardState",
    "HexGrid",
    "MatchConfig",
    "MatchController",
    "Move",
    "MoveKind",
    "Outcome",
    "Side",
    "HexaclashEnv",
    "EvaluationResult",
    "evaluate_agents",
    "play_match",
    "build_aux_vector",
    "build_board_tensor",
    "state_to_numpy",
]
