from __future__ import annotations

from typing import Any, Dict, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from morris.config import GameConfig
from morris.core import Action, Owner, Phase, RulesEngine
from morris.features import AUX_VECTOR_SIZE, BOARD_CHANNELS, build_aux_vector, build_board_tensor


def action_space_size(cell_count: int) -> int:
    return cell_count + cell_count * cell_count


def encode_action(action: Action, cell_count: int) -> int:
    """Cell actions (place/remove) map to ``[0, C)``, moves to ``C + from*C + to``."""
    if action.kind == "move":
        assert action.source is not None
        return cell_count + action.source * cell_count + action.target
    return action.target


def decode_action(index: int, cell_count: int, phase: Phase) -> Action:
    if not 0 <= index < action_space_size(cell_count):
        raise ValueError("Action index out of range.")
    if index >= cell_count:
        source, target = divmod(index - cell_count, cell_count)
        return Action.move(source, target)
    if phase == Phase.AWAITING_REMOVAL:
        return Action.remove(index)
    return Action.place(index)


class MorrisEnv(gym.Env):
    """Both sides of a game behind the Gymnasium API.

    Rewards are from player A's point of view.
    """

    metadata = {"render_modes": ["ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        *,
        max_ply: int = 200,
        enforce_legal_actions: bool = True,
        first_player: Optional[Owner] = Owner.PLAYER_A,
        render_mode: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self._max_ply = max_ply
        self._enforce_legal = enforce_legal_actions
        self._first_player = first_player
        self.render_mode = render_mode

        cells = self.config.cell_count
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0.0, high=1.0, shape=(BOARD_CHANNELS, cells), dtype=np.float32),
                "aux": spaces.Box(low=0.0, high=1.0, shape=(AUX_VECTOR_SIZE,), dtype=np.float32),
            }
        )
        self.action_space = spaces.Discrete(action_space_size(cells))

        self.engine = RulesEngine.new_game(self.config, self._first_player)
        self._ply = 0

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        self._max_ply = options.get("max_ply", self._max_ply) if options else self._max_ply
        self.engine = RulesEngine.new_game(self.config, self._first_player, rng=self.np_random)
        self._ply = 0
        return self._build_observation(), self._build_info()

    def step(self, action_index: int):
        if not self.action_space.contains(action_index):
            raise ValueError(f"Action index {action_index} out of bounds.")

        legal_mask = self.legal_action_mask()
        if self._enforce_legal and not legal_mask[action_index]:
            raise ValueError("Illegal action provided and enforce_legal_actions=True.")

        action = decode_action(int(action_index), self.config.cell_count, self.engine.phase)
        result = self.engine.apply(action)
        if result.ok:
            self._ply += 1

        observation = self._build_observation()
        info = self._build_info()
        info["mills"] = result.mills
        if not result.ok:
            info["failure"] = result.failure

        reward = self._compute_reward(self.engine.winner)
        terminated = self.engine.is_over
        truncated = not terminated and self._ply >= self._max_ply
        return observation, reward, terminated, truncated, info

    def legal_action_mask(self) -> np.ndarray:
        mask = np.zeros(self.action_space.n, dtype=np.int8)
        for action in self.engine.legal_actions():
            mask[encode_action(action, self.config.cell_count)] = 1
        return mask

    def render(self):
        if self.render_mode != "ansi":
            raise NotImplementedError("Only 'ansi' render mode is supported.")
        return self.engine.board.render()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _build_observation(self) -> Dict[str, np.ndarray]:
        return {"board": build_board_tensor(self.engine), "aux": build_aux_vector(self.engine)}

    def _build_info(self) -> Dict[str, Any]:
        return {"legal_action_mask": self.legal_action_mask(), "phase": self.engine.phase}

    def _compute_reward(self, winner: Optional[Owner]) -> float:
        if winner == Owner.PLAYER_A:
            return 1.0
        if winner == Owner.PLAYER_B:
            return -1.0
        return 0.0
