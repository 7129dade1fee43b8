"""
Prediction deadlines.

Week 1 picks freeze at their own deadline, which can fall before the season's
general deadline. Picks for later weeks stay editable until the general deadline.
"""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from cja_picks.utils.constants import FIRST_WEEK
from cja_picks.utils.dates import to_utc_datetime

logger = logging.getLogger(__name__)


class PredictionLockedError(ValueError):
    """Raised when a prediction is changed after its deadline."""


def _deadline_passed(deadline: Any, now: datetime) -> bool:
    parsed = to_utc_datetime(deadline)
    return parsed is not None and now > parsed


def _now(now: datetime | None) -> datetime:
    return to_utc_datetime(now) if now is not None else datetime.now(UTC)


def is_week_1_locked(season: Mapping[str, Any], now: datetime | None = None) -> bool:
    """Check if the season's week 1 prediction deadline has passed."""
    return _deadline_passed(season.get("week_1_prediction_deadline"), _now(now))


def is_season_locked(season: Mapping[str, Any], now: datetime | None = None) -> bool:
    """Check if the season's general prediction deadline has passed."""
    return _deadline_passed(season.get("prediction_deadline"), _now(now))


def check_prediction_editable(
    season: Mapping[str, Any], week: int, now: datetime | None = None
) -> None:
    """
    Ensure a prediction for the given week may still be inserted, changed or removed.

    Args:
        season: Season row with prediction_deadline / week_1_prediction_deadline
        week: Week number of the schedule the prediction belongs to
        now: Current time (defaults to the wall clock)

    Raises:
        PredictionLockedError: If the applicable deadline has passed
    """
    now = _now(now)

    if week == FIRST_WEEK and is_week_1_locked(season, now):
        logger.warning(f"Rejected week 1 prediction change for season {season.get('id')}")
        raise PredictionLockedError(
            f"Week 1 predictions are locked since {season.get('week_1_prediction_deadline')}"
        )

    if is_season_locked(season, now):
        logger.warning(f"Rejected week {week} prediction change for season {season.get('id')}")
        raise PredictionLockedError(
            f"Predictions are locked since {season.get('prediction_deadline')}"
        )
