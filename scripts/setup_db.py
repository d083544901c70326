"""
Setup script for the Supabase profile table
"""
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import argparse
from neuronote.db.profile_store import TABLE
from neuronote.utils.logger import get_logger

logger = get_logger(__name__)

PROFILE_TABLE_SQL = f"""
create table if not exists public.{TABLE} (
    user_id text primary key,
    streak integer not null default 0,
    last_active_date date,
    xp integer not null default 0,
    badges jsonb not null default '[]'::jsonb,
    analytics jsonb not null default '{{"flashcards_learned": 0, "quiz_attempts": 0, "total_quiz_score": 0}}'::jsonb,
    updated_at timestamptz not null default now()
);
"""


def check_table() -> bool:
    """Check that the profile table is reachable"""
    try:
        from neuronote.db.supabase_client import get_supabase_client

        logger.info(f"Checking table {TABLE}...")
        result = get_supabase_client().table(TABLE).select("user_id").limit(1).execute()
        logger.info(f"Table {TABLE} reachable ({len(result.data or [])} sample rows)")
        return True

    except Exception as e:
        logger.error(f"Error checking table {TABLE}: {e}")
        return False


def main():
    parser = argparse.ArgumentParser(description="Setup NeuroNote profile storage")
    parser.add_argument("--sql", action="store_true", help="Print the table DDL to run in the Supabase SQL editor")
    parser.add_argument("--check", action="store_true", help="Verify the table is reachable")

    args = parser.parse_args()

    if args.sql:
        print(PROFILE_TABLE_SQL.strip())
    elif args.check:
        if check_table():
            print("✅ Profile table is ready!")
        else:
            print("❌ Profile table is not reachable")
            sys.exit(1)
    else:
        print("Usage: python setup_db.py --sql | --check")


if __name__ == "__main__":
    main()
