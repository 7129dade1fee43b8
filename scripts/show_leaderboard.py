"""
Show Season Standings

Prints the golf-score leaderboard (with week-over-week movement) for a season,
or one player's week-by-week history.

USAGE:
    export SUPABASE_URL=https://xxxxx.supabase.co
    export SUPABASE_KEY=eyJhbGc...
    python scripts/show_leaderboard.py                      # latest season
    python scripts/show_leaderboard.py --season <season-id>
    python scripts/show_leaderboard.py --season <season-id> --user <user-id>
    python scripts/show_leaderboard.py --as-of 2026-03-01T00:00:00Z
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cja_picks.persistence import DataFetchError
from cja_picks.pipelines import StandingsPipeline
from cja_picks.utils.standings_frames import (
    leaderboard_to_frame,
    predictions_to_frame,
    weekly_scores_to_frame,
)

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Show prediction game standings")
    parser.add_argument("--season", help="Season id (defaults to the latest season)")
    parser.add_argument("--user", help="Show this player's history instead of the leaderboard")
    parser.add_argument(
        "--as-of",
        type=datetime.fromisoformat,
        help="Ignore results for races after this ISO-8601 timestamp",
    )
    args = parser.parse_args()

    pipeline = StandingsPipeline()

    try:
        season_id = args.season
        if season_id is None:
            season = pipeline.repository.fetch_latest_season()
            if season is None:
                logger.error("No seasons found")
                return 1
            season_id = season["id"]
            logger.info(f"Using latest season: {season.get('name') or season_id}")

        if args.user:
            history = pipeline.compute_user_history(args.user, season_id, as_of=args.as_of)
            for warning in history["warnings"]:
                logger.warning(warning)
            if not history["weekly_scores"]:
                print("No scored weeks yet.")
                return 0
            print(predictions_to_frame(history["per_prediction_results"]).to_string(index=False))
            print()
            print(weekly_scores_to_frame(history["weekly_scores"]).to_string(index=False))
            print(f"\nTotal: {history['total_score']}")
            return 0

        leaderboard = pipeline.compute_leaderboard(season_id, as_of=args.as_of)
    except DataFetchError as e:
        logger.error(f"Failed to load standings: {e}")
        return 1

    if not leaderboard:
        print("No scored weeks yet.")
        return 0

    print(leaderboard_to_frame(leaderboard).to_string())
    return 0


if __name__ == "__main__":
    sys.exit(main())
