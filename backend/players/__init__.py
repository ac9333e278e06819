"""
Player implementations for Snake Arcade.

Players drive the game from outside: they receive snapshots, steer the
snake and answer the high-score name prompt.
"""

from .base import Player
from .random_player import RandomPlayer
from .console_player import ConsolePlayer

__all__ = [
    'Player',
    'RandomPlayer',
    'ConsolePlayer',
]
