"""
Autopilot player - picks random safe moves, optionally steering for food.
"""

import random
from typing import List, Optional, Tuple

from domain.constants import DIRECTION_VECTORS, OPPOSITES, UP, DOWN, LEFT, RIGHT
from domain.game_state import GamePhase, GameSnapshot
from .base import Player


def moves_toward(head: Tuple[int, int], target: Tuple[int, int]) -> List[str]:
    """Directions that reduce the Manhattan distance from head to target."""
    hx, hy = head
    tx, ty = target
    prefs: List[str] = []
    if tx < hx:
        prefs.append(LEFT)
    elif tx > hx:
        prefs.append(RIGHT)
    if ty < hy:
        prefs.append(UP)
    elif ty > hy:
        prefs.append(DOWN)
    return prefs


def safe_moves(snapshot: GameSnapshot) -> List[str]:
    """
    Moves that neither reverse the heading, hit a wall, nor hit the body
    (the tail is allowed since it moves away).
    """
    head_x, head_y = snapshot.snake[0]
    body = snapshot.snake[:-1]

    valid_moves: List[str] = []
    for move, (dx, dy) in DIRECTION_VECTORS.items():
        if move == OPPOSITES[snapshot.direction]:
            continue
        new_x, new_y = head_x + dx, head_y + dy
        if (new_x < 0 or new_x >= snapshot.width or
                new_y < 0 or new_y >= snapshot.height):
            continue
        if (new_x, new_y) in body:
            continue
        valid_moves.append(move)
    return valid_moves


class RandomPlayer(Player):
    """
    Steers the snake on every snapshot.

    With greedy=True, safe moves toward the food win; otherwise (or when no
    such move is safe) a random safe move is taken. When boxed in, the
    current heading is kept.
    """

    def __init__(self, greedy: bool = True, rng: Optional[random.Random] = None):
        super().__init__()
        self.greedy = greedy
        self.rng = rng or random.Random()

    def choose_move(self, snapshot: GameSnapshot) -> str:
        valid_moves = safe_moves(snapshot)
        if not valid_moves:
            return snapshot.direction

        if self.greedy and snapshot.food is not None:
            for move in moves_toward(snapshot.snake[0], snapshot.food.cell):
                if move in valid_moves:
                    return move

        return self.rng.choice(valid_moves)

    def on_state_change(self, snapshot: GameSnapshot) -> None:
        if self.game is None or snapshot.phase is not GamePhase.PLAYING:
            return
        self.game.set_direction(self.choose_move(snapshot))
