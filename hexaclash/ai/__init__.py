"""Computer opponents for Hexaclash."""

from .heuristic import (
    DIFFICULTY_ORDER,
    DIFFICULTY_PROFILES,
    AIEngine,
    HeuristicWeights,
    ScoredMove,
    get_profile,
    load_profiles,
)
from .random_ai import RandomAI

__all__ = [
    "AIEngine",
    "HeuristicWeights",
    "ScoredMove",
    "DIFFICULTY_ORDER",
    "DIFFICULTY_PROFILES",
    "get_profile",
    "load_profiles",
    "RandomAI",
]
