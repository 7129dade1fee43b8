"""
Constants for the CJA race prediction game

All league-shape values and display placeholders live here.
"""

from typing import Literal

# League shape
DIVISIONS = (1, 2, 3, 4, 5, 6)
SPLITS: tuple[str, ...] = ("Gold", "Silver")
Split = Literal["Gold", "Silver"]

# First race week of a season (has its own prediction deadline)
FIRST_WEEK = 1

# Display placeholders
ANONYMOUS_LABEL = "Anonymous"
NO_PREDICTION_LABEL = "No Prediction"
UNKNOWN_TRACK_LABEL = "Unknown"
UNKNOWN_DRIVER_LABEL = "Unknown Driver"

# Penalty rows have no prediction id, so one is synthesised from the slot
MISSING_PREDICTION_PREFIX = "missing"

# Supabase responses are capped, reads are paged in chunks of this size
DEFAULT_PAGE_SIZE = 1000
