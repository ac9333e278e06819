"""
Snake entity for the game engine.
"""

from collections import deque
from typing import List, Optional, Set, Tuple

from .constants import DIRECTION_VECTORS


class Snake:
    """
    Represents the snake on the board.

    Attributes:
        positions: deque of (x, y) from head at index 0 to tail at the end
        alive: whether the snake is still alive
        death_reason: e.g., 'out_of_bounds', 'self_collision'
        death_tick: The tick number when the snake died
    """

    def __init__(self, positions: List[Tuple[int, int]]):
        if not positions:
            raise ValueError("A snake needs at least one segment.")
        self.positions = deque(positions)
        self.alive = True
        self.death_reason: Optional[str] = None
        self.death_tick: Optional[int] = None

    @property
    def head(self) -> Tuple[int, int]:
        """Return the head position (first element)."""
        return self.positions[0]

    @property
    def tail(self) -> Tuple[int, int]:
        """Return the tail position (last element)."""
        return self.positions[-1]

    def __len__(self) -> int:
        return len(self.positions)

    def __contains__(self, cell) -> bool:
        return cell in self.positions

    def cells(self) -> Set[Tuple[int, int]]:
        return set(self.positions)

    def advance(self, direction: str) -> Tuple[int, int]:
        """
        Return the cell one step from the head in `direction`.

        The snake itself is not modified; bounds are not checked.
        """
        dx, dy = DIRECTION_VECTORS[direction]
        hx, hy = self.head
        return (hx + dx, hy + dy)

    def grow(self, cell: Tuple[int, int]) -> None:
        """Prepend `cell` and keep the tail: length grows by one."""
        self.positions.appendleft(cell)

    def move_without_growth(self, cell: Tuple[int, int]) -> None:
        """Prepend `cell` and drop the tail: length is unchanged."""
        self.positions.appendleft(cell)
        self.positions.pop()

    def die(self, reason: str, tick: int) -> None:
        self.alive = False
        self.death_reason = reason
        self.death_tick = tick
