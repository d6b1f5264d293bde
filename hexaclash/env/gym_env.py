from __future__ import annotations

from dataclasses import replace
from typing import Dict, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from hexaclash.core import (
    BoardState,
    HexGrid,
    MatchConfig,
    MatchController,
    Move,
    Outcome,
    Side,
    action_space_size,
    decode_move,
    encode_move,
    has_any_legal_move,
)
from hexaclash.features import (
    AUX_VECTOR_SIZE,
    BOARD_CHANNELS,
    board_dim,
    build_aux_vector,
    build_board_tensor,
)


class _Pass:
    def decide_move(self, state: BoardState, side: Side) -> Optional[Move]:
        return None


class HexaclashEnv(gym.Env):
    metadata = {"render_modes": ["ansi"], "render_fps": 4}

    def __init__(
        self,
        *,
        config: Optional[MatchConfig] = None,
        enforce_legal_actions: bool = True,
        render_mode: Optional[str] = None,
    ) -> None:
        super().__init__()
        self._config = config or MatchConfig()
        self._enforce_legal = enforce_legal_actions
        self.render_mode = render_mode

        dim = board_dim(self._config.radius)
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0.0, high=1.0, shape=(BOARD_CHANNELS, dim, dim), dtype=np.float32),
                "aux": spaces.Box(low=0.0, high=1.0, shape=(AUX_VECTOR_SIZE,), dtype=np.float32),
            }
        )
        self.action_space = spaces.Discrete(action_space_size(HexGrid(self._config.radius)))

        self._controller = MatchController(self._config)

    @property
    def controller(self) -> MatchController:
        return self._controller

    @property
    def state(self) -> BoardState:
        return self._controller.state

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        config = self._config
        if seed is not None and config.seed is None:
            config = replace(config, seed=int(self.np_random.integers(0, 2**31 - 1)))
        self._controller = MatchController(config)
        if options and options.get("board_seed") is not None:
            self._controller.regenerate_board(int(options["board_seed"]), options.get("blocked_density"))
        return self._build_observation(), self._build_info()

    def step(self, action_index: int):
        if not self.action_space.contains(action_index):
            raise ValueError(f"Action index {action_index} out of bounds.")

        legal_mask = self.legal_action_mask()
        if self._enforce_legal and not legal_mask[action_index]:
            raise ValueError("Illegal action provided and enforce_legal_actions=True.")

        move = decode_move(self.state.grid, int(action_index))
        outcome = self._controller.submit_move(move)
        if not outcome.ended and not has_any_legal_move(self.state, self._controller.current_side):
            outcome = self._controller.play_ai_turn(_Pass())

        observation = self._build_observation()
        info = self._build_info()
        reward = self._compute_reward(outcome)
        return observation, reward, outcome.ended, False, info

    def legal_action_mask(self) -> np.ndarray:
        mask = np.zeros(self.action_space.n, dtype=np.int8)
        if self._controller.is_ended:
            return mask
        grid = self.state.grid
        for move in self._controller.legal_moves():
            mask[encode_move(grid, move)] = 1
        return mask

    def render(self):
        if self.render_mode != "ansi":
            raise NotImplementedError("Only 'ansi' render mode is supported.")
        return repr(self.state)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _build_observation(self) -> Dict[str, np.ndarray]:
        board = build_board_tensor(self.state)
        aux = build_aux_vector(self._controller.current_side)
        return {"board": board, "aux": aux}

    def _build_info(self) -> Dict[str, object]:
        return {
            "legal_action_mask": self.legal_action_mask(),
            "current_side": self._controller.current_side.label,
            "outcome": self._controller.outcome().as_dict(),
        }

    def _compute_reward(self, outcome: Outcome) -> float:
        if outcome.winner is Side.A:
            return 1.0
        if outcome.winner is Side.B:
            return -1.0
        return 0.0
