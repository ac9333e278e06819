"""
Tests for main.py - the Snake game state machine.

Food placement is pinned with a scripted spawner so runs are deterministic;
the clock is a ManualClock so ticks only happen when a test calls them.
"""

import pytest
import sys
import os
from unittest.mock import MagicMock, Mock

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from main import SnakeGame, play_run, run_session
from config import GameSettings
from domain import (
    UP, DOWN, LEFT, RIGHT,
    Food,
    FoodSpawner,
    GamePhase,
    Grid,
    Snake,
    SpeedRamp,
    TickOutcome,
)
from players import Player, RandomPlayer
from services.clock import ManualClock
from services.leaderboard_client import (
    HighScoreEntry,
    LeaderboardClient,
    NetworkError,
    ProtocolError,
    SubmissionResult,
)


class ScriptedSpawner(FoodSpawner):
    """Places food on a fixed list of cells, then falls back to a corner."""

    def __init__(self, grid, cells=None, fallback=(0, 19)):
        super().__init__(grid)
        self.cells = list(cells or [])
        self.fallback = fallback
        self.calls = []

    def place(self, excluding):
        excluding = set(excluding)
        self.calls.append(excluding)
        cell = self.cells.pop(0) if self.cells else self.fallback
        if cell is None:
            return None
        return Food(cell=cell, sprite=0)


class RecordingPlayer(Player):
    """Records every hook call; answers the name prompt with `name`."""

    def __init__(self, name=None):
        super().__init__()
        self.name = name
        self.snapshots = []
        self.game_overs = []
        self.prompts = []
        self.leaderboards = []
        self.messages = []

    def on_state_change(self, snapshot):
        self.snapshots.append(snapshot)

    def on_game_over(self, score, reason):
        self.game_overs.append((score, reason))

    def prompt_for_name(self, score):
        self.prompts.append(score)
        return self.name

    def on_leaderboard(self, entries):
        self.leaderboards.append(list(entries))

    def notify(self, message):
        self.messages.append(message)


def make_game(width=20, height=20, food=None, start_cell=(5, 5), player=None,
              leaderboard=None, ramp=None):
    grid = Grid(width, height)
    clock = ManualClock()
    game = SnakeGame(
        width=width,
        height=height,
        clock=clock,
        player=player or RecordingPlayer(),
        leaderboard=leaderboard,
        ramp=ramp,
        spawner=ScriptedSpawner(grid, cells=food, fallback=(0, height - 1)),
        start_cell=start_cell,
    )
    return game, clock


def top_ten(min_score=8):
    scores = [min_score + i for i in range(9, -1, -1)]
    return [HighScoreEntry(name=f"P{i}", score=s) for i, s in enumerate(scores)]


class TestSnakeGameLifecycle:
    """Tests for phase transitions."""

    def test_new_game_is_idle(self):
        """A game starts in IDLE with a single-cell snake."""
        game, clock = make_game()
        assert game.phase is GamePhase.IDLE
        assert list(game.state.snake.positions) == [(5, 5)]
        assert clock.is_running is False

    def test_start_enters_playing(self):
        """start() resets the run, places food and arms the clock at base speed."""
        game, clock = make_game(food=[(10, 10)])
        game.start()

        assert game.phase is GamePhase.PLAYING
        assert list(game.state.snake.positions) == [(5, 5)]
        assert game.state.direction == RIGHT
        assert game.state.food.cell == (10, 10)
        assert game.state.speed_ms == 100
        assert clock.period_ms == 100
        assert game.score == 0

    def test_start_emits_snapshot(self):
        """The player receives a snapshot on start."""
        player = RecordingPlayer()
        game, _ = make_game(player=player)
        game.start()

        assert len(player.snapshots) == 1
        assert player.snapshots[0].phase is GamePhase.PLAYING
        assert player.snapshots[0].snake == [(5, 5)]

    def test_tick_ignored_when_idle(self):
        """tick() does nothing before the first start."""
        game, _ = make_game()
        assert game.tick() is None
        assert list(game.state.snake.positions) == [(5, 5)]

    def test_invalid_start_cell_raises(self):
        """The start cell must lie on the grid."""
        with pytest.raises(ValueError):
            make_game(width=5, height=5, start_cell=(5, 5))

    def test_restart_after_game_over(self):
        """start() from GAME_OVER begins a fresh run."""
        game, clock = make_game(start_cell=(19, 5))
        game.start()
        game.tick()
        assert game.is_over

        game.start()
        assert game.phase is GamePhase.PLAYING
        assert list(game.state.snake.positions) == [(19, 5)]
        assert game.state.snake.alive is True
        assert game.state.speed_ms == 100
        assert clock.is_running is True
        assert game.runs_started == 2

    def test_start_while_playing_restarts(self):
        """start() mid-run resets the run."""
        game, _ = make_game()
        game.start()
        game.tick()
        game.tick()
        game.start()
        assert list(game.state.snake.positions) == [(5, 5)]
        assert game.state.tick_count == 0


class TestMovement:
    """Tests for ticking and direction input."""

    def test_five_ticks_right(self):
        """From (5,5) heading right, five ticks land the head on (10,5)."""
        game, clock = make_game()
        game.start()
        for _ in range(5):
            assert clock.fire() is True

        assert game.state.snake.head == (10, 5)
        assert len(game.state.snake) == 1
        assert game.phase is GamePhase.PLAYING

    def test_plain_move_preserves_length(self):
        """A tick that neither eats nor collides keeps the length."""
        game, _ = make_game()
        game.start()
        game.state.snake = Snake([(5, 5), (4, 5), (3, 5)])
        result = game.tick()

        assert result.outcome is TickOutcome.MOVED
        assert list(game.state.snake.positions) == [(6, 5), (5, 5), (4, 5)]

    def test_reversal_rejected(self):
        """Moving right, LEFT is ignored."""
        game, _ = make_game()
        game.start()
        assert game.set_direction(LEFT) is False
        game.tick()
        assert game.state.snake.head == (6, 5)

    def test_non_reversal_accepted(self):
        """Moving right, UP and DOWN are accepted."""
        game, _ = make_game()
        game.start()
        assert game.set_direction(UP) is True
        assert game.set_direction(DOWN) is True
        game.tick()
        assert game.state.snake.head == (5, 6)
        assert game.state.direction == DOWN

    def test_reversal_checked_against_committed_heading(self):
        """Two quick turns cannot add up to a reversal before the next tick."""
        game, _ = make_game()
        game.start()
        assert game.set_direction(UP) is True
        assert game.set_direction(LEFT) is False
        game.tick()
        assert game.state.snake.head == (5, 4)
        assert game.set_direction(LEFT) is True

    def test_unknown_direction_ignored(self):
        """Names outside the four directions are ignored."""
        game, _ = make_game()
        game.start()
        assert game.set_direction("SIDEWAYS") is False

    def test_direction_ignored_when_not_playing(self):
        """set_direction() does nothing outside of play."""
        game, _ = make_game()
        assert game.set_direction(UP) is False

    def test_snapshot_after_every_tick(self):
        """Each tick produces one snapshot for the player."""
        player = RecordingPlayer()
        game, clock = make_game(player=player)
        game.start()
        clock.fire()
        clock.fire()
        assert len(player.snapshots) == 3
        assert player.snapshots[-1].tick == 2


class TestEating:
    """Tests for growth, food placement and speed."""

    def test_eating_grows_by_one(self):
        """Landing on food grows the snake and scores a point."""
        game, _ = make_game(food=[(6, 5), (15, 15)])
        game.start()
        result = game.tick()

        assert result.outcome is TickOutcome.ATE
        assert list(game.state.snake.positions) == [(6, 5), (5, 5)]
        assert game.score == 1
        assert game.state.food.cell == (15, 15)

    def test_new_food_excludes_snake(self):
        """The spawner is told about every cell of the grown snake."""
        game, _ = make_game(food=[(6, 5)])
        game.start()
        game.tick()

        assert game.spawner.calls[-1] == {(6, 5), (5, 5)}

    def test_eating_rearms_clock_faster(self):
        """Growth shortens the tick period and re-arms the clock."""
        game, clock = make_game(food=[(6, 5), (7, 5), (12, 12)])
        game.start()
        assert clock.arm_count == 1

        game.tick()
        assert game.state.speed_ms == 98
        assert clock.period_ms == 98
        assert clock.arm_count == 2

        game.tick()
        assert clock.period_ms == 96

    def test_speed_floor(self):
        """Speed never drops below the ramp minimum."""
        ramp = SpeedRamp(base_ms=100, decrement_ms=30, min_ms=50)
        game, clock = make_game(food=[(6, 5), (7, 5), (8, 5), (12, 12)], ramp=ramp)
        game.start()
        speeds = []
        for _ in range(3):
            game.tick()
            speeds.append(game.state.speed_ms)

        assert speeds == [70, 50, 50]
        assert clock.period_ms == 50


class TestCollisions:
    """Tests for terminal outcomes."""

    def test_wall_collision(self):
        """Head at (19,5) moving right on a 20-wide grid goes out of bounds."""
        player = RecordingPlayer()
        game, clock = make_game(start_cell=(19, 5), player=player)
        game.start()
        result = game.tick()

        assert result.outcome is TickOutcome.OUT_OF_BOUNDS
        assert game.phase is GamePhase.GAME_OVER
        assert clock.is_running is False
        assert game.state.snake.alive is False
        assert game.state.snake.death_reason == "out_of_bounds"
        assert player.game_overs == [(0, "out_of_bounds")]

    def test_dead_snake_keeps_body(self):
        """The fatal move is not committed to the snake."""
        game, _ = make_game(start_cell=(19, 5))
        game.start()
        game.tick()
        assert list(game.state.snake.positions) == [(19, 5)]

    def test_self_collision(self):
        """A coiled snake turning into its own body dies."""
        game, clock = make_game()
        game.start()
        game.state.snake = Snake([(5, 5), (6, 5), (6, 6), (5, 6), (4, 6)])
        game.state.direction = LEFT
        game.state.pending_direction = LEFT

        assert game.set_direction(DOWN) is True
        result = game.tick()

        assert result.outcome is TickOutcome.SELF_COLLISION
        assert game.phase is GamePhase.GAME_OVER
        assert clock.is_running is False

    def test_moving_into_vacated_tail_is_safe(self):
        """The tail cell is free on the tick it moves away."""
        game, _ = make_game()
        game.start()
        game.state.snake = Snake([(5, 5), (6, 5), (6, 6), (5, 6)])
        game.state.direction = LEFT
        game.state.pending_direction = LEFT

        game.set_direction(DOWN)
        result = game.tick()

        assert result.outcome is TickOutcome.MOVED
        assert list(game.state.snake.positions) == [(5, 6), (5, 5), (6, 5), (6, 6)]

    def test_ticks_after_game_over_ignored(self):
        """No further ticks run once the game is over."""
        game, clock = make_game(start_cell=(19, 5))
        game.start()
        game.tick()
        assert game.tick() is None
        assert clock.fire() is False


class TestGameOverLeaderboard:
    """Tests for the leaderboard exchange after a run."""

    def _leaderboard(self, fetches, submit_result=None):
        client = MagicMock(spec=LeaderboardClient)
        client.fetch_high_scores.side_effect = fetches
        client.submit_score.return_value = submit_result or SubmissionResult(
            ok=True, status_code=200, message="ok"
        )
        return client

    def _die_with_score(self, game, score):
        """Lay a snake of score+1 cells along row 0 with the head at the right wall."""
        game.start()
        game.state.snake = Snake([(19 - i, 0) for i in range(score + 1)])
        game.tick()

    def test_qualifying_score_submitted_and_refetched(self):
        """Score 12 beats a full board with minimum 8; submit, then re-fetch."""
        before = top_ten(min_score=8)
        after = sorted(before[:9] + [HighScoreEntry("Ada", 12)], key=lambda e: e.score, reverse=True)
        client = self._leaderboard([before, before, after])
        player = RecordingPlayer(name="  Ada  ")
        game, _ = make_game(player=player, leaderboard=client)

        self._die_with_score(game, 12)

        assert game.phase is GamePhase.GAME_OVER
        assert player.game_overs == [(12, "out_of_bounds")]
        assert player.prompts == [12]
        client.submit_score.assert_called_once_with("Ada", 12)
        assert client.fetch_high_scores.call_count == 3
        assert player.leaderboards[-1] == after
        assert len(game.high_scores) == 10
        assert [e.score for e in game.high_scores] == sorted(
            (e.score for e in game.high_scores), reverse=True
        )
        assert "Score submitted successfully!" in player.messages

    def test_non_qualifying_score_not_prompted(self):
        """A score at or below the lowest of a full board is not offered."""
        client = self._leaderboard([top_ten(min_score=8)])
        player = RecordingPlayer(name="Ada")
        game, _ = make_game(player=player, leaderboard=client)

        assert game.handle_game_over(8) is False
        assert player.prompts == []
        client.submit_score.assert_not_called()

    def test_partial_board_needs_positive_score(self):
        """With room on the board, any score above zero qualifies."""
        entries = [HighScoreEntry("A", 30)]
        client = self._leaderboard([entries, entries, entries])
        player = RecordingPlayer(name="Ada")
        game, _ = make_game(player=player, leaderboard=client)

        assert game.handle_game_over(0) is False
        assert game.handle_game_over(1) is True

    def test_declined_name_not_submitted(self):
        """None or whitespace from the prompt declines the submission."""
        for answer in (None, "   "):
            client = self._leaderboard([top_ten(min_score=1)])
            player = RecordingPlayer(name=answer)
            game, _ = make_game(player=player, leaderboard=client)

            assert game.handle_game_over(50) is False
            assert player.prompts == [50]
            client.submit_score.assert_not_called()

    def test_fetch_failure_is_reported(self):
        """A failed fetch notifies the player and leaves the phase alone."""
        client = self._leaderboard([NetworkError("down"), NetworkError("down")])
        player = RecordingPlayer(name="Ada")
        game, _ = make_game(player=player, leaderboard=client)

        self._die_with_score(game, 3)

        assert game.phase is GamePhase.GAME_OVER
        assert player.messages == ["Failed to fetch high scores."] * 2
        assert player.prompts == []

    def test_submit_network_failure_is_reported(self):
        """A transport failure on submit is reported, not raised."""
        client = self._leaderboard([top_ten(min_score=1)])
        client.submit_score.side_effect = NetworkError("reset")
        player = RecordingPlayer(name="Ada")
        game, _ = make_game(player=player, leaderboard=client)

        assert game.handle_game_over(50) is False
        assert "network error" in player.messages[-1]
        assert client.fetch_high_scores.call_count == 1

    def test_rejected_submission_is_reported(self):
        """A non-2xx submission reports the server's message."""
        client = self._leaderboard(
            [top_ten(min_score=1)],
            submit_result=SubmissionResult(ok=False, status_code=400, message="bad name"),
        )
        player = RecordingPlayer(name="Ada")
        game, _ = make_game(player=player, leaderboard=client)

        assert game.handle_game_over(50) is False
        assert player.messages == ["Error submitting score: bad name"]

    def test_refetch_failure_after_submit(self):
        """A failed re-fetch still counts the submission as done."""
        client = self._leaderboard([top_ten(min_score=1), ProtocolError("HTTP 500")])
        player = RecordingPlayer(name="Ada")
        game, _ = make_game(player=player, leaderboard=client)

        assert game.handle_game_over(50) is True
        assert player.messages[-1] == "Failed to fetch high scores."

    def test_no_leaderboard_configured(self):
        """Without a gateway, game over only notifies the player of the score."""
        player = RecordingPlayer(name="Ada")
        game, _ = make_game(player=player, start_cell=(19, 5))
        game.start()
        game.tick()

        assert player.game_overs == [(0, "out_of_bounds")]
        assert player.prompts == []

    def test_first_start_fetches_leaderboard(self):
        """The board is shown when the first run starts, not only after it ends."""
        entries = top_ten(min_score=8)
        client = self._leaderboard([entries, entries])
        player = RecordingPlayer()
        game, _ = make_game(player=player, leaderboard=client)

        game.start()
        assert client.fetch_high_scores.call_count == 1
        assert player.leaderboards == [entries]
        assert game.high_scores == entries

        game.start()
        assert client.fetch_high_scores.call_count == 1

    def test_non_finite_remote_score_does_not_crash(self):
        """An infinite score from the server is repaired to 0 on game over."""
        response = Mock(status_code=200)
        response.json.return_value = {"highScores": [{"name": "A", "score": float("inf")}]}
        session = Mock()
        session.get.return_value = response
        client = LeaderboardClient(base_url="http://scores.test", session=session)
        player = RecordingPlayer()
        game, _ = make_game(player=player, leaderboard=client, start_cell=(19, 5))

        game.start()
        game.tick()

        assert game.phase is GamePhase.GAME_OVER
        assert player.leaderboards[-1] == [HighScoreEntry("A", 0)]
        assert player.prompts == []


class TestPlayRun:
    """Tests for play_run stopping conditions."""

    def test_full_board_stops_run(self):
        """With no room left for food the run stops instead of looping."""
        game, clock = make_game(width=2, height=1, start_cell=(0, 0), food=[(1, 0), None])
        game.start()
        assert game.tick().outcome is TickOutcome.ATE
        assert game.board_full is True

        play_run(game)

        assert game.phase is GamePhase.PLAYING
        assert clock.is_running is False
        assert game.state.tick_count == 1

    def test_max_ticks_stops_run(self):
        game, clock = make_game()
        game.start()

        play_run(game, max_ticks=3)

        assert game.state.tick_count == 3
        assert game.state.snake.head == (8, 5)
        assert clock.is_running is False

    def test_game_over_ends_run(self):
        game, clock = make_game(start_cell=(17, 5))
        game.start()

        play_run(game, max_ticks=50)

        assert game.is_over
        assert game.state.tick_count == 2
        assert game.board_full is False


class TestRunSession:
    """Tests for the session runner."""

    def test_headless_session_terminates(self):
        """Headless runs finish on game over or the tick limit."""
        settings = GameSettings(grid_width=8, grid_height=8)
        player = RandomPlayer()

        results = run_session(
            settings,
            player,
            games=2,
            headless=True,
            max_ticks=300,
            use_leaderboard=False,
            seed=7,
        )

        assert len(results) == 2
        for i, result in enumerate(results, 1):
            assert result["run"] == i
            assert result["ticks"] <= 300
            assert result["score"] >= 0
            assert result["final_speed_ms"] >= settings.min_speed_ms
