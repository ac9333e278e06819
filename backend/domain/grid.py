"""
Board geometry.
"""

from dataclasses import dataclass
from typing import Iterator, Tuple

Cell = Tuple[int, int]


@dataclass(frozen=True)
class Grid:
    """
    A fixed board of width x height cells.

    Cells are (x, y) pairs with (0, 0) in the top-left corner.
    """

    width: int
    height: int

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise ValueError(
                f"Grid must be at least 1x1, got {self.width}x{self.height}."
            )

    @property
    def size(self) -> int:
        return self.width * self.height

    def contains(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.width and 0 <= y < self.height

    def cells(self) -> Iterator[Cell]:
        """Yield every cell in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield (x, y)
