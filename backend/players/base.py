"""
Base player interface for the game engine.

A player is the driver around the simulation: it receives snapshots and
game-over events, supplies direction input and, when a score qualifies,
the name to submit.
"""

from typing import List, Optional

from domain.game_state import GameSnapshot


class Player:
    """
    Base class/interface for player logic.

    Every hook is optional; the defaults ignore events and decline to
    submit a name.
    """

    def __init__(self):
        self.game = None

    def attach(self, game) -> None:
        """Give the player a handle to the game for set_direction()/start()."""
        self.game = game

    def on_state_change(self, snapshot: GameSnapshot) -> None:
        """Called after every tick and on start."""

    def on_game_over(self, score: int, reason: Optional[str]) -> None:
        """Called once per run when the snake dies."""

    def prompt_for_name(self, score: int) -> Optional[str]:
        """
        Return the name to submit for a qualifying score.

        None or a whitespace-only string declines the submission.
        """
        return None

    def on_leaderboard(self, entries: List) -> None:
        """Called with the latest top scores after each fetch."""

    def notify(self, message: str) -> None:
        """Non-fatal messages, e.g. leaderboard failures."""
