"""
Per-tick collision resolution and scoring.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .constants import BASE_SPEED_MS, MIN_SPEED_MS, SPEED_DECREMENT_MS
from .food import FoodSpawner
from .game_state import GameState

logger = logging.getLogger(__name__)


class TickOutcome(str, Enum):
    MOVED = "moved"
    ATE = "ate"
    OUT_OF_BOUNDS = "out_of_bounds"
    SELF_COLLISION = "self_collision"

    @property
    def is_terminal(self) -> bool:
        return self in (TickOutcome.OUT_OF_BOUNDS, TickOutcome.SELF_COLLISION)


@dataclass(frozen=True)
class SpeedRamp:
    """Linear speed ramp: the tick interval shrinks per growth event down to a floor."""

    base_ms: int = BASE_SPEED_MS
    decrement_ms: int = SPEED_DECREMENT_MS
    min_ms: int = MIN_SPEED_MS

    def __post_init__(self):
        if self.min_ms <= 0 or self.base_ms < self.min_ms or self.decrement_ms < 0:
            raise ValueError(
                f"Invalid speed ramp: base={self.base_ms} "
                f"decrement={self.decrement_ms} min={self.min_ms}"
            )

    def speed_for(self, growth_count: int) -> int:
        return compute_speed(growth_count, self.base_ms, self.decrement_ms, self.min_ms)


def compute_speed(
    growth_count: int,
    base_ms: int = BASE_SPEED_MS,
    decrement_ms: int = SPEED_DECREMENT_MS,
    min_ms: int = MIN_SPEED_MS,
) -> int:
    """max(base - growth_count * decrement, min)"""
    return max(base_ms - growth_count * decrement_ms, min_ms)


@dataclass(frozen=True)
class TickResult:
    outcome: TickOutcome
    head: Tuple[int, int]
    speed_changed: bool = False


def classify(state: GameState, head: Tuple[int, int]) -> TickOutcome:
    """
    Decide what moving the head to `head` would do, without changing anything.

    The tail is excluded from the self check because it is vacated by the
    same move. Food never overlaps the snake, so eating never keeps a tail
    that the head lands on.
    """
    if not state.grid.contains(head):
        return TickOutcome.OUT_OF_BOUNDS

    body = list(state.snake.positions)[:-1]
    if head in body:
        return TickOutcome.SELF_COLLISION

    if state.food is not None and head == state.food.cell:
        return TickOutcome.ATE

    return TickOutcome.MOVED


def resolve_tick(
    state: GameState,
    spawner: FoodSpawner,
    ramp: SpeedRamp,
    head: Optional[Tuple[int, int]] = None,
) -> TickResult:
    """
    Apply one tick to `state` and return what happened.

    Terminal outcomes mark the snake dead but leave its body untouched.
    Phase changes and clock control belong to the caller.
    """
    if head is None:
        head = state.snake.advance(state.direction)

    outcome = classify(state, head)

    if outcome.is_terminal:
        state.snake.die(outcome.value, state.tick_count)
        logger.info(
            "Snake died (%s) at tick %d with head %s, score %d",
            outcome.value, state.tick_count, head, state.score,
        )
        return TickResult(outcome=outcome, head=head)

    state.tick_count += 1

    if outcome is TickOutcome.MOVED:
        state.snake.move_without_growth(head)
        return TickResult(outcome=outcome, head=head)

    state.snake.grow(head)
    state.growth_count += 1
    state.food = spawner.place(state.snake.cells())

    previous = state.speed_ms
    state.speed_ms = ramp.speed_for(state.growth_count)
    logger.debug(
        "Ate food at %s; length=%d speed=%dms",
        head, len(state.snake), state.speed_ms,
    )
    return TickResult(outcome=outcome, head=head, speed_changed=state.speed_ms != previous)
