"""
Food placement.
"""

import logging
import random
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .constants import FOOD_SPRITES
from .grid import Grid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Food:
    """A food item: the cell it sits on and a cosmetic sprite index."""

    cell: Tuple[int, int]
    sprite: int = 0

    @property
    def sprite_name(self) -> str:
        return FOOD_SPRITES[self.sprite % len(FOOD_SPRITES)]


class FoodSpawner:
    """
    Places food uniformly at random on free cells.

    Random sampling is retried at most `max_attempts` times; after that the
    grid is scanned in row-major order for the first free cell, so placement
    always terminates. Returns None when every cell is occupied.
    """

    def __init__(
        self,
        grid: Grid,
        rng: Optional[random.Random] = None,
        max_attempts: int = 100,
        palette_size: int = len(FOOD_SPRITES),
    ):
        self.grid = grid
        self.rng = rng or random.Random()
        self.max_attempts = max_attempts
        self.palette_size = palette_size

    def place(self, excluding: Iterable[Tuple[int, int]]) -> Optional[Food]:
        occupied = set(excluding)
        sprite = self.rng.randrange(self.palette_size)

        for _ in range(self.max_attempts):
            cell = (
                self.rng.randrange(self.grid.width),
                self.rng.randrange(self.grid.height),
            )
            if cell not in occupied:
                return Food(cell=cell, sprite=sprite)

        logger.debug(
            "Random food placement failed %d times, scanning for a free cell",
            self.max_attempts,
        )
        for cell in self.grid.cells():
            if cell not in occupied:
                return Food(cell=cell, sprite=sprite)

        logger.info("No free cell left for food (%d occupied)", len(occupied))
        return None
