#!/usr/bin/env python3
"""
Show the remote Snake leaderboard.

Usage:
    python backend/cli/show_leaderboard.py
    python backend/cli/show_leaderboard.py --submit "Ada" 12
"""

import argparse
import logging
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import GameSettings  # noqa: E402
from services.leaderboard_client import LeaderboardClient, LeaderboardError  # noqa: E402

logger = logging.getLogger(__name__)


def print_high_scores(entries) -> None:
    print("\n  === HIGH SCORES ===")
    if not entries:
        print("  No high scores yet.\n")
        return
    for i, entry in enumerate(entries, 1):
        print(f"  {i:>2}. {entry.score:>5}  {entry.name}")
    print()


def main() -> int:
    settings = GameSettings.from_env()

    parser = argparse.ArgumentParser(description="Show (and optionally submit to) the Snake leaderboard")
    parser.add_argument("--url", type=str, default=settings.leaderboard_url,
                        help="Leaderboard API root (default: LEADERBOARD_API_URL)")
    parser.add_argument("--submit", nargs=2, metavar=("NAME", "SCORE"),
                        help="Submit a score before listing")
    args = parser.parse_args()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    client = LeaderboardClient(base_url=args.url, timeout=settings.leaderboard_timeout)

    try:
        if args.submit:
            name, raw_score = args.submit
            try:
                score = int(raw_score)
            except ValueError:
                parser.error(f"SCORE must be an integer, got {raw_score!r}")
            if not name.strip():
                parser.error("NAME must not be blank")
            result = client.submit_score(name.strip(), score)
            if not result.ok:
                print(f"✗ Error submitting score: {result.message}")
                return 1
            print("✓ Score submitted successfully!")

        print_high_scores(client.fetch_high_scores())
    except LeaderboardError as e:
        logger.error("Leaderboard request failed: %s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
