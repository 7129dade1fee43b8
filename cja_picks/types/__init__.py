"""Standings domain type definitions."""

from .standings_types import (
    DriverRow,
    LeaderboardEntry,
    PositionChange,
    PredictedDriver,
    PredictionResult,
    PredictionRow,
    RaceResultRow,
    ScheduleRow,
    UserHistory,
    WeeklyScore,
)

__all__ = [
    "DriverRow",
    "LeaderboardEntry",
    "PositionChange",
    "PredictedDriver",
    "PredictionResult",
    "PredictionRow",
    "RaceResultRow",
    "ScheduleRow",
    "UserHistory",
    "WeeklyScore",
]
