"""
Game state for a single run, and the render-ready snapshot derived from it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .constants import BASE_SPEED_MS, DEFAULT_DIRECTION
from .food import Food
from .grid import Grid
from .snake import Snake


class GamePhase(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    GAME_OVER = "game_over"


class GameState:
    """
    The mutable state of one run. Owned by the SnakeGame controller.

    Attributes:
        grid: board dimensions
        snake: the snake entity
        direction: heading of the last committed move
        pending_direction: heading the next tick will commit
        food: current food item, or None when the board is full
        phase: IDLE, PLAYING or GAME_OVER
        speed_ms: current tick interval
        growth_count: number of food items eaten this run
        tick_count: ticks resolved this run
    """

    def __init__(
        self,
        grid: Grid,
        snake: Snake,
        direction: str = DEFAULT_DIRECTION,
        food: Optional[Food] = None,
        phase: GamePhase = GamePhase.IDLE,
        speed_ms: int = BASE_SPEED_MS,
    ):
        self.grid = grid
        self.snake = snake
        self.direction = direction
        self.pending_direction = direction
        self.food = food
        self.phase = phase
        self.speed_ms = speed_ms
        self.growth_count = 0
        self.tick_count = 0

    @property
    def score(self) -> int:
        return len(self.snake) - 1

    def snapshot(self) -> "GameSnapshot":
        return GameSnapshot(
            snake=list(self.snake.positions),
            food=self.food,
            score=self.score,
            phase=self.phase,
            direction=self.direction,
            speed_ms=self.speed_ms,
            tick=self.tick_count,
            width=self.grid.width,
            height=self.grid.height,
            death_reason=self.snake.death_reason,
        )

    def __repr__(self):
        return (
            f"<GameState phase={self.phase.value}, tick={self.tick_count}, "
            f"score={self.score}, speed_ms={self.speed_ms}>"
        )


@dataclass(frozen=True)
class GameSnapshot:
    """A read-only view of the game handed to players after every change."""

    snake: List[Tuple[int, int]]
    food: Optional[Food]
    score: int
    phase: GamePhase
    direction: str
    speed_ms: int
    tick: int
    width: int
    height: int
    death_reason: Optional[str] = None

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        F = food
        H = snake head
        o = snake body
        Row 0 is printed first, matching screen coordinates.
        """
        board = [['.' for _ in range(self.width)] for _ in range(self.height)]

        if self.food is not None:
            fx, fy = self.food.cell
            board[fy][fx] = 'F'

        for idx, (x, y) in enumerate(self.snake):
            if not (0 <= x < self.width and 0 <= y < self.height):
                continue
            board[y][x] = 'H' if idx == 0 else 'o'

        result = [f"{y:2d} {' '.join(row)}" for y, row in enumerate(board)]
        result.append("   " + " ".join(str(x % 10) for x in range(self.width)))
        return "\n".join(result)
