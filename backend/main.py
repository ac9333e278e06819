import argparse
import json
import logging
import random
import uuid
from typing import Any, Dict, List, Optional, Tuple

from config import GameSettings
from domain.collision import SpeedRamp, TickOutcome, TickResult, resolve_tick
from domain.constants import DEFAULT_DIRECTION, OPPOSITES, START_CELL, VALID_MOVES
from domain.food import FoodSpawner
from domain.game_state import GamePhase, GameSnapshot, GameState
from domain.grid import Grid
from domain.snake import Snake
from players import ConsolePlayer, Player
from services.clock import ManualClock, ScheduleClock, SimulationClock
from services.leaderboard_client import (
    HighScoreEntry,
    LeaderboardClient,
    LeaderboardError,
    qualifies,
)

logger = logging.getLogger(__name__)


class SnakeGame:
    """
    Manages:
      - The GameState of the current run
      - The tick clock and its speed ramp
      - Phase transitions (Idle -> Playing -> GameOver -> Playing)
      - The leaderboard exchange after each run
    """

    def __init__(
        self,
        width: int,
        height: int,
        clock: Optional[SimulationClock] = None,
        player: Optional[Player] = None,
        leaderboard: Optional[LeaderboardClient] = None,
        ramp: Optional[SpeedRamp] = None,
        spawner: Optional[FoodSpawner] = None,
        start_cell: Tuple[int, int] = START_CELL,
        game_id: Optional[str] = None,
    ):
        self.grid = Grid(width, height)
        if not self.grid.contains(start_cell):
            raise ValueError(f"Start cell {start_cell} is outside a {width}x{height} grid.")

        self.clock = clock or ManualClock()
        self.player = player or Player()
        self.player.attach(self)
        self.leaderboard = leaderboard
        self.ramp = ramp or SpeedRamp()
        self.spawner = spawner or FoodSpawner(self.grid)
        self.start_cell = start_cell
        self.game_id = game_id or str(uuid.uuid4())

        self.state = GameState(
            grid=self.grid,
            snake=Snake([start_cell]),
            speed_ms=self.ramp.base_ms,
        )
        self.runs_started = 0
        self.high_scores: List[HighScoreEntry] = []

    # -- queries ----------------------------------------------------------

    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    @property
    def is_over(self) -> bool:
        return self.state.phase is GamePhase.GAME_OVER

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def board_full(self) -> bool:
        """In play with no free cell left for food."""
        return self.state.phase is GamePhase.PLAYING and self.state.food is None

    def get_current_state(self) -> GameSnapshot:
        return self.state.snapshot()

    # -- transitions ------------------------------------------------------

    def start(self) -> None:
        """
        Begin a fresh run from any phase.

        The first start also fetches the leaderboard; later runs reuse the
        fetch made when the previous run ended.
        """
        if self.runs_started == 0:
            self.refresh_leaderboard()

        state = GameState(
            grid=self.grid,
            snake=Snake([self.start_cell]),
            direction=DEFAULT_DIRECTION,
            phase=GamePhase.PLAYING,
            speed_ms=self.ramp.base_ms,
        )
        state.food = self.spawner.place(state.snake.cells())
        self.state = state
        self.runs_started += 1

        logger.info(
            "Run %d of game %s started on %dx%d, food at %s",
            self.runs_started, self.game_id, self.grid.width, self.grid.height,
            state.food.cell if state.food else None,
        )
        self.clock.start(state.speed_ms, self.tick)
        self.player.on_state_change(state.snapshot())

    def set_direction(self, direction: str) -> bool:
        """
        Queue a heading for the next tick.

        Ignored outside of play, for unknown names, and for 180 degree turns
        relative to the last committed move.
        """
        if self.state.phase is not GamePhase.PLAYING:
            return False
        if direction not in VALID_MOVES:
            logger.debug("Ignoring unknown direction %r", direction)
            return False
        if direction == OPPOSITES[self.state.direction]:
            return False
        self.state.pending_direction = direction
        return True

    def tick(self) -> Optional[TickResult]:
        """Advance the snake one cell. Does nothing unless a run is in play."""
        state = self.state
        if state.phase is not GamePhase.PLAYING:
            return None

        state.direction = state.pending_direction
        result = resolve_tick(state, self.spawner, self.ramp)

        if result.outcome.is_terminal:
            self._end_run(result.outcome)
            return result

        if result.outcome is TickOutcome.ATE:
            self.clock.reschedule(state.speed_ms)

        self.player.on_state_change(state.snapshot())
        return result

    def _end_run(self, outcome: TickOutcome) -> None:
        self.clock.stop()
        self.state.phase = GamePhase.GAME_OVER
        snapshot = self.state.snapshot()
        self.player.on_state_change(snapshot)
        self.player.on_game_over(snapshot.score, outcome.value)
        self.handle_game_over(snapshot.score)

    # -- leaderboard ------------------------------------------------------

    def refresh_leaderboard(self) -> Optional[List[HighScoreEntry]]:
        """Fetch the top scores and hand them to the player. None on failure."""
        if self.leaderboard is None:
            return None
        try:
            entries = self.leaderboard.fetch_high_scores()
        except LeaderboardError as e:
            logger.warning("Could not fetch high scores: %s", e)
            self.player.notify("Failed to fetch high scores.")
            return None
        self.high_scores = entries
        self.player.on_leaderboard(entries)
        return entries

    def handle_game_over(self, score: int) -> bool:
        """
        Offer the final score to the leaderboard.

        Returns True if a score was submitted successfully. Failures are
        reported to the player and never change the phase.
        """
        entries = self.refresh_leaderboard()
        if entries is None:
            return False

        if not qualifies(score, entries):
            logger.info("Score %d does not reach the top %d", score, len(entries))
            return False

        name = self.player.prompt_for_name(score)
        if name is None or not name.strip():
            logger.info("Player declined to submit score %d", score)
            return False
        name = name.strip()

        try:
            result = self.leaderboard.submit_score(name, score)
        except LeaderboardError as e:
            logger.warning("Could not submit score: %s", e)
            self.player.notify("Failed to submit score due to network error. Please try again.")
            return False

        if not result.ok:
            self.player.notify(f"Error submitting score: {result.message}")
            return False

        self.player.notify("Score submitted successfully!")
        self.refresh_leaderboard()
        return True


# -------------------------------
# Session Function
# -------------------------------

def play_run(game: SnakeGame, max_ticks: Optional[int] = None) -> None:
    """
    Tick the current run until it ends.

    A run also stops, without a game over, after `max_ticks` ticks or once
    the snake fills the board and no food can be placed.
    """
    clock = game.clock

    def should_stop() -> bool:
        if game.is_over or game.board_full:
            return True
        return max_ticks is not None and game.state.tick_count >= max_ticks

    if isinstance(clock, ManualClock):
        while not should_stop():
            if not clock.fire():
                break
    elif isinstance(clock, ScheduleClock):
        clock.run_until(should_stop)

    if not game.is_over:
        clock.stop()
        logger.info(
            "Run stopped after %d ticks (board full: %s)",
            game.state.tick_count, game.board_full,
        )


def run_session(
    settings: GameSettings,
    player: Player,
    games: int = 1,
    headless: bool = False,
    max_ticks: Optional[int] = None,
    use_leaderboard: bool = True,
    seed: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Play `games` runs back to back and return a summary of each.

    Headless runs tick as fast as possible on a ManualClock; otherwise a
    ScheduleClock paces ticks in real time.
    """
    rng = random.Random(seed)
    clock: SimulationClock = ManualClock() if headless else ScheduleClock()
    leaderboard = None
    if use_leaderboard:
        leaderboard = LeaderboardClient(
            base_url=settings.leaderboard_url,
            timeout=settings.leaderboard_timeout,
        )

    grid = Grid(settings.grid_width, settings.grid_height)
    game = SnakeGame(
        width=grid.width,
        height=grid.height,
        clock=clock,
        player=player,
        leaderboard=leaderboard,
        ramp=SpeedRamp(
            base_ms=settings.base_speed_ms,
            decrement_ms=settings.speed_decrement_ms,
            min_ms=settings.min_speed_ms,
        ),
        spawner=FoodSpawner(grid, rng=rng),
    )

    results = []
    for _ in range(games):
        game.start()
        play_run(game, max_ticks)

        results.append({
            "game_id": game.game_id,
            "run": game.runs_started,
            "score": game.score,
            "ticks": game.state.tick_count,
            "death_reason": game.state.snake.death_reason,
            "final_speed_ms": game.state.speed_ms,
        })

    return results


# -------------------------------
# Main Entry Point
# -------------------------------
def main():
    settings = GameSettings.from_env()

    parser = argparse.ArgumentParser(description="Play Snake with an autopilot in the terminal.")
    parser.add_argument("--width", type=int, default=settings.grid_width,
                        help="Board width in cells")
    parser.add_argument("--height", type=int, default=settings.grid_height,
                        help="Board height in cells")
    parser.add_argument("--games", type=int, default=1,
                        help="Number of runs to play back to back")
    parser.add_argument("--headless", action="store_true",
                        help="Tick as fast as possible instead of in real time")
    parser.add_argument("--max-ticks", type=int, default=None,
                        help="Stop a run after this many ticks")
    parser.add_argument("--no-leaderboard", action="store_true",
                        help="Skip fetching and submitting high scores")
    parser.add_argument("--quiet", action="store_true",
                        help="Do not print the board every tick")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for food placement and the autopilot")
    args = parser.parse_args()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    settings.grid_width = args.width
    settings.grid_height = args.height

    player = ConsolePlayer(show_frames=not args.quiet, rng=random.Random(args.seed))
    results = run_session(
        settings,
        player,
        games=max(1, args.games),
        headless=args.headless,
        max_ticks=args.max_ticks,
        use_leaderboard=not args.no_leaderboard,
        seed=args.seed,
    )

    print("\nSession Summary:")
    print(json.dumps(results, indent=2))


if __name__ == "__main__":
    main()
