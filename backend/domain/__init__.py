"""
Domain entities for the Snake Arcade game engine.

This module contains the core game entities that are independent of
infrastructure concerns (clocks, HTTP calls, terminals, etc.).
"""

from .constants import UP, DOWN, LEFT, RIGHT, VALID_MOVES, OPPOSITES, MAX_HIGH_SCORES
from .grid import Grid
from .snake import Snake
from .food import Food, FoodSpawner
from .game_state import GamePhase, GameState, GameSnapshot
from .collision import SpeedRamp, TickOutcome, TickResult, classify, compute_speed, resolve_tick

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES', 'OPPOSITES', 'MAX_HIGH_SCORES',
    'Grid',
    'Snake',
    'Food', 'FoodSpawner',
    'GamePhase', 'GameState', 'GameSnapshot',
    'SpeedRamp', 'TickOutcome', 'TickResult', 'classify', 'compute_speed', 'resolve_tick',
]
