"""
Persistence layer for the prediction game.

Thin access to the Supabase table store; scoring itself never does I/O.
"""

from .config import SUPABASE_KEY, SUPABASE_URL
from .race_data import DataFetchError, RaceDataRepository

__all__ = ["DataFetchError", "RaceDataRepository", "SUPABASE_URL", "SUPABASE_KEY"]
