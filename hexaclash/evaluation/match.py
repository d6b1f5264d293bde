from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from hexaclash.core import Agent, MatchConfig, MatchController, MoveRecord, Outcome, Side


@dataclass
class EvaluationResult:
    games_played: int
    side_a_wins: int
    side_b_wins: int
    draws: int
    average_length: float

    def winrate_side_a(self) -> float:
        return self.side_a_wins / max(1, self.games_played)

    def winrate_side_b(self) -> float:
        return self.side_b_wins / max(1, self.games_played)


def play_match(
    agent_a: Agent,
    agent_b: Agent,
    config: Optional[MatchConfig] = None,
    *,
    max_turns: int = 2000,
) -> Tuple[Outcome, Tuple[MoveRecord, ...]]:
    """Play one computer-vs-computer match to completion.

    Both sides are treated as computer-controlled, so a side without a move
    passes. ``max_turns`` only guards against agents that keep passing.
    """
    config = replace(config or MatchConfig(), ai_sides=frozenset(Side))
    controller = MatchController(config)
    agents = {Side.A: agent_a, Side.B: agent_b}
    outcome = controller.outcome()
    for _ in range(max_turns):
        if outcome.ended:
            break
        outcome = controller.play_ai_turn(agents[controller.current_side])
    return outcome, controller.history


def evaluate_agents(
    agent_a: Agent,
    agent_b: Agent,
    *,
    episodes: int,
    config: Optional[MatchConfig] = None,
) -> EvaluationResult:
    side_a_wins = 0
    side_b_wins = 0
    draws = 0
    total_ply = 0

    for _ in range(episodes):
        outcome, history = play_match(agent_a, agent_b, config)
        total_ply += len(history)
        if outcome.winner is Side.A:
            side_a_wins += 1
        elif outcome.winner is Side.B:
            side_b_wins += 1
        else:
            draws += 1

    average_length = total_ply / max(1, episodes)
    return EvaluationResult(
        games_played=episodes,
        side_a_wins=side_a_wins,
        side_b_wins=side_b_wins,
        draws=draws,
        average_length=average_length,
    )
