"""
Configuration for the persistence layer.

Environment variables:
- SUPABASE_URL: Supabase project URL (https://xxx.supabase.co)
- SUPABASE_KEY: Supabase anon public key
"""

import os

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")


def is_db_configured() -> bool:
    """Check if Supabase credentials are present."""
    return bool(SUPABASE_URL and SUPABASE_KEY)
