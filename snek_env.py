from typing import Optional

import gymnasium as gym
import numpy as np

from snek_game import DOWN, LEFT, RIGHT, UP, GameState, SnekConfig


# 0=up,1=down,2=left,3=right
ACTION_DIRS = {
    0: UP,
    1: DOWN,
    2: LEFT,
    3: RIGHT,
}

BG_COLOR = (255, 255, 255)
HEAD_COLOR = (0, 100, 0)
SNAKE_COLOR = (144, 238, 144)
FOOD_COLOR = (255, 0, 0)


class SnekEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 12}

    def __init__(
        self,
        config: Optional[SnekConfig] = None,
        render_mode: Optional[str] = None,
        max_steps: Optional[int] = None,
        cell: int = 16,
    ):
        super().__init__()
        self.config = config or SnekConfig()
        self.render_mode = render_mode
        self.max_steps = max_steps
        self.cell = cell

        self.action_space = gym.spaces.Discrete(4)
        # Channels-first: 3 x H x W
        self.observation_space = gym.spaces.Box(
            low=0.0,
            high=1.0,
            shape=(3, self.config.grid_h, self.config.grid_w),
            dtype=np.float32,
        )

        self.game = GameState(self.config)
        self._steps = 0

    def reset(self, *, seed: Optional[int] = None, options=None):
        super().reset(seed=seed)
        if seed is not None:
            self.game.seed(seed)
        self.game.reset(self.config.grid_w, self.config.grid_h)
        self._steps = 0
        return self._get_obs(), {"score": 0, "length": self.game.length}

    def step(self, action: int):
        if action not in ACTION_DIRS:
            raise ValueError(f"invalid action: {action}")

        before = self.game.score
        self.game.set_direction(*ACTION_DIRS[action])
        snap = self.game.tick()
        self._steps += 1

        reward = float(snap.score - before)
        terminated = snap.game_over
        truncated = (
            not terminated
            and self.max_steps is not None
            and self.max_steps > 0
            and self._steps >= self.max_steps
        )
        info = {"score": snap.score, "length": len(snap.snake)}
        return self._get_obs(), reward, terminated, truncated, info

    def _get_obs(self):
        h, w = self.config.grid_h, self.config.grid_w
        obs = np.zeros((3, h, w), dtype=np.float32)

        snake = self.game.snake
        for (x, y) in snake[1:]:
            if 0 <= x < w and 0 <= y < h:
                obs[0, y, x] = 1.0

        head_x, head_y = snake[0]
        if 0 <= head_x < w and 0 <= head_y < h:
            obs[1, head_y, head_x] = 1.0

        if self.game.food is not None:
            food_x, food_y = self.game.food
            obs[2, food_y, food_x] = 1.0

        return obs

    def render(self):
        if self.render_mode != "rgb_array":
            return None

        cell = self.cell
        h, w = self.config.grid_h, self.config.grid_w
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        img[:] = BG_COLOR

        if self.game.food is not None:
            fx, fy = self.game.food
            img[fy * cell : (fy + 1) * cell, fx * cell : (fx + 1) * cell] = FOOD_COLOR

        # Body first so the head stays on top after a self collision.
        for (x, y) in self.game.snake[1:]:
            img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell] = SNAKE_COLOR

        hx, hy = self.game.snake[0]
        if 0 <= hx < w and 0 <= hy < h:
            img[hy * cell : (hy + 1) * cell, hx * cell : (hx + 1) * cell] = HEAD_COLOR

        if self.game.game_over:
            # Darken the frame like the game-over overlay.
            img = (img.astype(np.uint16) // 4).astype(np.uint8)

        return img
