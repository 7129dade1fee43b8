#!/usr/bin/env python3
"""
Check the Supabase connection and the tables the standings read from.

Usage:
    export SUPABASE_URL=https://xxxxx.supabase.co
    export SUPABASE_KEY=eyJhbGc...
    python scripts/check_supabase_connection.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cja_picks.persistence.config import is_db_configured
from cja_picks.persistence.db import check_connection
from cja_picks.persistence.race_data import DataFetchError, RaceDataRepository


def main():
    print("=" * 60)
    print("Supabase Connection Check")
    print("=" * 60)

    if not is_db_configured():
        print("   ❌ SUPABASE_URL and SUPABASE_KEY must be set")
        return 1

    # Step 1: Health check
    print("\n1. Testing Supabase connection...")
    healthy, message = check_connection()
    if healthy:
        print(f"   ✅ {message}")
    else:
        print(f"   ❌ {message}")
        return 1

    # Step 2: Latest season and its schedule
    print("\n2. Reading latest season...")
    repository = RaceDataRepository()
    try:
        season = repository.fetch_latest_season()
        if season is None:
            print("   ⚠️  No seasons found")
            return 0
        schedules = repository.fetch_schedules(season["id"])
        print(f"   ✅ Season {season.get('season_number')}: {len(schedules)} race week(s)")

        # Step 3: Rows the standings are computed from
        print("\n3. Reading predictions and results...")
        schedule_ids = [s["id"] for s in schedules]
        predictions = repository.fetch_predictions(season["id"], schedule_ids)
        results = repository.fetch_results(schedule_ids)
        print(f"   ✅ {len(predictions)} prediction(s), {len(results)} result row(s)")
    except DataFetchError as e:
        print(f"   ❌ {e}")
        return 1

    print("\n" + "=" * 60)
    print("All checks passed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
