"""Tabular views of standings for reports and scripts."""

import pandas as pd

from cja_picks.types import LeaderboardEntry, PredictionResult, WeeklyScore
from cja_picks.utils.formatting import format_driver_name

LEADERBOARD_COLUMNS = [
    "rank",
    "display_name",
    "total_points",
    "weeks_participated",
    "average_points",
    "change",
    "is_new",
]
WEEKLY_COLUMNS = ["week", "track_name", "total_points", "prediction_count", "race_date"]
PREDICTION_COLUMNS = ["week", "track_name", "division", "split", "driver", "finish_position", "points"]


def leaderboard_to_frame(entries: list[LeaderboardEntry]) -> pd.DataFrame:
    """
    Flatten leaderboard entries into a DataFrame.

    Columns: rank, display_name, total_points, weeks_participated, average_points,
    change, is_new. Indexed by user_id.
    """
    rows = []
    for entry in entries:
        movement = entry.get("position_change") or {"change": 0, "is_new": True}
        rows.append(
            {
                "user_id": entry["user_id"],
                "rank": entry["rank"],
                "display_name": entry["display_name"],
                "total_points": entry["total_points"],
                "weeks_participated": entry["weeks_participated"],
                "average_points": round(entry["average_points"], 2),
                "change": movement["change"],
                "is_new": movement["is_new"],
            }
        )

    frame = pd.DataFrame(rows, columns=["user_id", *LEADERBOARD_COLUMNS])
    return frame.set_index("user_id")


def weekly_scores_to_frame(weekly_scores: list[WeeklyScore]) -> pd.DataFrame:
    """Weekly scores as a DataFrame with a running season total."""
    frame = pd.DataFrame(weekly_scores, columns=WEEKLY_COLUMNS)
    frame["cumulative_points"] = frame["total_points"].cumsum()
    return frame


def predictions_to_frame(results: list[PredictionResult]) -> pd.DataFrame:
    """One row per scored slot, with the predicted driver formatted for display."""
    rows = [
        {
            "week": result["week"],
            "track_name": result["track_name"],
            "division": result["division"],
            "split": result["split"],
            "driver": format_driver_name(result["predicted_driver"]),
            "finish_position": result["finish_position"],
            "points": result["points"],
        }
        for result in results
        if result["outcome"] != "uncontested"
    ]
    return pd.DataFrame(rows, columns=PREDICTION_COLUMNS)
