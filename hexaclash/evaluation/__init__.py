"""Evaluation helpers for Hexaclash."""

from .match import EvaluationResult, evaluate_agents, play_match

__all__ = ["EvaluationResult", "evaluate_agents", "play_match"]
