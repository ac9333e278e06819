"""
Console player - prints the board and asks for a name on a high score.

Movement is left to the autopilot it inherits from; keyboard steering is
not wired up.
"""

from typing import Callable, List, Optional

from domain.game_state import GameSnapshot
from .random_player import RandomPlayer


class ConsolePlayer(RandomPlayer):

    def __init__(
        self,
        show_frames: bool = True,
        input_func: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.show_frames = show_frames
        self.input_func = input_func
        self.output = output

    def on_state_change(self, snapshot: GameSnapshot) -> None:
        if self.show_frames:
            self.output("\n" + snapshot.print_board())
            self.output(f"Your Score: {snapshot.score}   speed: {snapshot.speed_ms}ms")
        super().on_state_change(snapshot)

    def on_game_over(self, score: int, reason: Optional[str]) -> None:
        self.output(f"\nGame Over! ({reason}) Final score: {score}")

    def prompt_for_name(self, score: int) -> Optional[str]:
        try:
            return self.input_func(f"New High Score ({score})! Enter your name: ")
        except EOFError:
            return None

    def on_leaderboard(self, entries: List) -> None:
        self.output("\n=== High Scores ===")
        if not entries:
            self.output("No high scores yet.")
            return
        for i, entry in enumerate(entries, 1):
            self.output(f"{i:>2}. {entry.name}: {entry.score}")

    def notify(self, message: str) -> None:
        self.output(message)
