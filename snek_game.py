import enum
import random
import threading
from dataclasses import dataclass
from typing import List, Optional, Tuple


UP = (0, -1)
DOWN = (0, 1)
LEFT = (-1, 0)
RIGHT = (1, 0)
DIRECTIONS = (UP, DOWN, LEFT, RIGHT)

FOOD_REWARD = 10


@dataclass
class SnekConfig:
    canvas_w: int = 400
    canvas_h: int = 400
    tile: int = 20
    speed_ms: int = 150

    @property
    def grid_w(self) -> int:
        return self.canvas_w // self.tile

    @property
    def grid_h(self) -> int:
        return self.canvas_h // self.tile


class Phase(enum.Enum):
    RUNNING = "running"
    GAME_OVER = "game_over"


class TurnLatch(enum.Enum):
    """One direction change per tick.

    ``set_direction`` moves OPEN -> CLOSED, ``tick`` moves it back to OPEN.
    """

    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class Snapshot:
    snake: Tuple[Tuple[int, int], ...]
    food: Optional[Tuple[int, int]]
    direction: Tuple[int, int]
    score: int
    game_over: bool
    grid_w: int
    grid_h: int

    @property
    def head(self) -> Tuple[int, int]:
        return self.snake[0]


class GameState:
    def __init__(self, config: Optional[SnekConfig] = None, seed: Optional[int] = None):
        self.config = config or SnekConfig()
        self._rng = random.Random(seed)
        self._lock = threading.Lock()
        self.grid_w = 0
        self.grid_h = 0
        self.snake: List[Tuple[int, int]] = []
        self.food: Optional[Tuple[int, int]] = None
        self.direction: Tuple[int, int] = RIGHT
        self.score = 0
        self.phase = Phase.RUNNING
        self.latch = TurnLatch.OPEN

    @classmethod
    def new(cls, config: Optional[SnekConfig] = None, seed: Optional[int] = None) -> "GameState":
        state = cls(config, seed)
        state.reset(state.config.grid_w, state.config.grid_h)
        return state

    def seed(self, seed: Optional[int] = None) -> None:
        self._rng.seed(seed)

    @property
    def game_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    @property
    def length(self) -> int:
        return len(self.snake)

    def reset(self, grid_w: int, grid_h: int) -> Snapshot:
        if grid_w < 4 or grid_h < 1:
            raise ValueError(f"grid too small for the starting snake: {grid_w}x{grid_h}")
        with self._lock:
            self.grid_w, self.grid_h = int(grid_w), int(grid_h)
            start = (self.grid_w // 2, self.grid_h // 2)
            self.snake = [start, (start[0] - 1, start[1]), (start[0] - 2, start[1])]
            self.direction = RIGHT
            self.score = 0
            self.phase = Phase.RUNNING
            self.latch = TurnLatch.OPEN
            self._place_food()
            return self.snapshot()

    def set_direction(self, dx: int, dy: int) -> bool:
        requested = (dx, dy)
        if requested not in DIRECTIONS:
            raise ValueError(f"invalid direction: {requested}")
        with self._lock:
            if self.game_over or self.latch is TurnLatch.CLOSED:
                return False
            # No reversing into the neck.
            if requested == (-self.direction[0], -self.direction[1]):
                return False
            self.direction = requested
            self.latch = TurnLatch.CLOSED
            return True

    def tick(self) -> Snapshot:
        with self._lock:
            if self.game_over:
                return self.snapshot()

            head_x, head_y = self.snake[0]
            new_head = (head_x + self.direction[0], head_y + self.direction[1])
            self.snake.insert(0, new_head)

            if new_head == self.food:
                self.score += FOOD_REWARD
                self._place_food()
            else:
                self.snake.pop()

            hit_wall = (
                new_head[0] < 0
                or new_head[0] >= self.grid_w
                or new_head[1] < 0
                or new_head[1] >= self.grid_h
            )
            hit_self = new_head in self.snake[1:]
            if hit_wall or hit_self:
                self.phase = Phase.GAME_OVER

            self.latch = TurnLatch.OPEN
            return self.snapshot()

    def _place_food(self) -> Optional[Tuple[int, int]]:
        occupied = set(self.snake)
        if len(occupied) >= self.grid_w * self.grid_h:
            self.food = None
            return None
        while True:
            pos = (self._rng.randrange(self.grid_w), self._rng.randrange(self.grid_h))
            if pos not in occupied:
                self.food = pos
                return pos

    def snapshot(self) -> Snapshot:
        return Snapshot(
            snake=tuple(self.snake),
            food=self.food,
            direction=self.direction,
            score=self.score,
            game_over=self.game_over,
            grid_w=self.grid_w,
            grid_h=self.grid_h,
        )
