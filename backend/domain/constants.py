"""
Game constants for Snake Arcade.
"""

from typing import Dict, Tuple

# Movement directions
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

# Unit vectors in screen coordinates: (0, 0) is the top-left cell
DIRECTION_VECTORS: Dict[str, Tuple[int, int]] = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

OPPOSITES: Dict[str, str] = {
    UP: DOWN,
    DOWN: UP,
    LEFT: RIGHT,
    RIGHT: LEFT,
}

# Board and run defaults
GRID_WIDTH = 20
GRID_HEIGHT = 20
START_CELL = (5, 5)
DEFAULT_DIRECTION = RIGHT

# Speed ramp (tick interval in milliseconds)
BASE_SPEED_MS = 100
SPEED_DECREMENT_MS = 2
MIN_SPEED_MS = 50

# Cosmetic food sprites; Food.sprite is an index into this palette
FOOD_SPRITES = ("apple", "cherry", "grape", "banana", "strawberry")

# Leaderboard
MAX_HIGH_SCORES = 10
