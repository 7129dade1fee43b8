"""
Supabase client for the league's table store.

RaceDataRepository builds every query on the client returned here: seasons,
schedule, predictions, race_results_public, drivers_public and
user_profiles_public (names configurable under ``tables`` in the YAML config).
The client is created on first use, so importing the scoring engine or building
a StandingsPipeline never needs credentials.
"""

import logging

from supabase import Client, create_client

from .config import SUPABASE_KEY, SUPABASE_URL

logger = logging.getLogger(__name__)

# Shared by every RaceDataRepository in the process
_supabase_client: Client | None = None


def get_supabase_client() -> Client:
    """
    Return the process-wide Supabase client, creating it on first call.

    Credentials come from SUPABASE_URL / SUPABASE_KEY; with the public anon key
    only the public views and the caller's own predictions are readable.

    Raises:
        RuntimeError: If credentials are missing or the client cannot be created
    """
    global _supabase_client

    if _supabase_client is None:
        if not SUPABASE_URL or not SUPABASE_KEY:
            raise RuntimeError("SUPABASE_URL and SUPABASE_KEY environment variables must be set")

        try:
            _supabase_client = create_client(SUPABASE_URL, SUPABASE_KEY)
            logger.info(f"Supabase client initialized: {SUPABASE_URL}")
        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {e}")
            raise RuntimeError(f"Failed to connect to Supabase: {e}") from e

    return _supabase_client


def check_connection(table: str = "seasons") -> tuple[bool, str]:
    """
    Read one row from a league table to confirm credentials and network access.

    Used by scripts/check_supabase_connection.py before it reads the latest
    season. Never raises; failures come back as (False, reason).
    """
    try:
        client = get_supabase_client()
        result = client.table(table).select("id").limit(1).execute()
        return True, f"Supabase connection healthy ({len(result.data)} row(s) in {table})"
    except Exception as e:
        return False, f"Supabase connection failed: {e}"


def close_client() -> None:
    """Forget the shared client so the next repository read reconnects."""
    global _supabase_client
    if _supabase_client is not None:
        _supabase_client = None
        logger.info("Supabase client closed")
