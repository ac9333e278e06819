"""
Leaderboard gateway for the remote high-score service.

This module only fetches and submits data. It never decides whether a
score qualifies and never talks to the player directly.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from domain.constants import MAX_HIGH_SCORES


logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://ls4eez6wgb.execute-api.us-east-2.amazonaws.com/prod"


class LeaderboardError(Exception):
    """Base class for leaderboard failures. Never fatal to a game."""


class NetworkError(LeaderboardError):
    """The service could not be reached."""


class ProtocolError(LeaderboardError):
    """The service answered with a non-2xx status or an unreadable body."""


@dataclass(frozen=True)
class HighScoreEntry:
    name: str
    score: int


@dataclass(frozen=True)
class SubmissionResult:
    ok: bool
    status_code: int
    message: str


def _parse_score(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            return 0


def is_success(response) -> bool:
    """Only 2xx counts; requests' Response.ok also accepts 3xx."""
    return 200 <= response.status_code < 300


def parse_entry(raw: Any) -> HighScoreEntry:
    """
    Build an entry from one element of the `highScores` array.

    Missing or blank names become "Unknown"; scores that are missing or not
    numeric become 0.
    """
    if not isinstance(raw, dict):
        return HighScoreEntry(name="Unknown", score=0)

    name = raw.get("name")
    if name is None:
        name = raw.get("playerName")
    if name is None or not str(name).strip():
        name = "Unknown"

    score = raw.get("score")
    if score is None:
        score = raw.get("Score")

    return HighScoreEntry(name=str(name), score=_parse_score(score))


def parse_high_scores(data: Any, limit: int = MAX_HIGH_SCORES) -> List[HighScoreEntry]:
    """Turn a response body into a descending, capped list of entries."""
    if not isinstance(data, dict) or not isinstance(data.get("highScores"), list):
        raise ProtocolError("Response has no 'highScores' array")

    entries = [parse_entry(item) for item in data["highScores"]]
    entries.sort(key=lambda e: e.score, reverse=True)
    return entries[:limit]


def qualifying_threshold(entries: List[HighScoreEntry], capacity: int = MAX_HIGH_SCORES) -> int:
    """Lowest score on a full board, or 0 while the board has room."""
    if len(entries) < capacity:
        return 0
    return min(e.score for e in entries[:capacity])


def qualifies(score: int, entries: List[HighScoreEntry], capacity: int = MAX_HIGH_SCORES) -> bool:
    return score > qualifying_threshold(entries, capacity)


class LeaderboardClient:
    """
    Fetches and submits high scores over HTTP.

    Args:
        base_url: Service root; endpoints are /highscores (GET) and /score (POST)
        timeout: Request timeout in seconds, or None to wait indefinitely
        session: Optional requests.Session to reuse connections
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def high_scores_url(self) -> str:
        return f"{self.base_url}/highscores"

    @property
    def submit_url(self) -> str:
        return f"{self.base_url}/score"

    def fetch_high_scores(self) -> List[HighScoreEntry]:
        """
        GET the current top scores.

        Raises:
            NetworkError: If the request could not be made
            ProtocolError: On a non-2xx status or a malformed body
        """
        try:
            response = self.session.get(self.high_scores_url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to fetch high scores from {self.high_scores_url}: {e}")
            raise NetworkError(str(e)) from e

        if not is_success(response):
            logger.error(f"High score fetch failed with HTTP {response.status_code}")
            raise ProtocolError(f"HTTP error! Status: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"High score response was not valid JSON: {e}")
            raise ProtocolError("Invalid JSON response") from e

        entries = parse_high_scores(data)
        logger.info("Fetched %d high scores", len(entries))
        return entries

    def submit_score(self, player_name: str, score: int) -> SubmissionResult:
        """
        POST a score.

        A non-2xx answer is a failed submission, not an exception.

        Raises:
            NetworkError: If the request could not be made
        """
        payload: Dict[str, Any] = {"playerName": player_name, "score": score}
        logger.debug("Submitting score payload: %s", payload)

        try:
            response = self.session.post(
                self.submit_url,
                json=payload,
                timeout=self.timeout,
                headers={'Content-Type': 'application/json'},
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error submitting score: {e}")
            raise NetworkError(str(e)) from e

        try:
            body = response.json()
            message = body.get("message", "") if isinstance(body, dict) else ""
        except ValueError:
            message = "Invalid JSON response"

        ok = is_success(response)
        if ok:
            logger.info(f"Score submitted successfully! Status: {response.status_code}")
        else:
            logger.error(f"Error submitting score (Status {response.status_code}): {message}")

        return SubmissionResult(ok=ok, status_code=response.status_code, message=message)
