"""
Seed Sample Magic Tricks Script
Inserts the built-in sample tricks for a user so a fresh project has
something to show on the magic tricks page.

Usage: python -m app.scripts.seed_sample_tricks <user_id>
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.config.tricks_config import SAMPLE_MAGIC_TRICKS
from app.database.supabase_client import SupabaseClient
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_sample_tricks(supabase: Client, user_id: str) -> int:
    """Insert each sample trick for user_id, skipping titles the user already has"""
    logger.info(f"Seeding sample tricks for user {user_id}...")

    created_count = 0
    skipped_count = 0

    for trick in SAMPLE_MAGIC_TRICKS:
        try:
            existing = supabase.table("magic_tricks")\
                .select("id")\
                .eq("user_id", user_id)\
                .eq("title", trick["title"])\
                .execute()

            if existing.data:
                skipped_count += 1
                logger.debug(f"Skipped existing trick: {trick['title']}")
                continue

            supabase.table("magic_tricks").insert({
                "user_id": user_id,
                "title": trick["title"],
                "description": trick["description"],
                "instructions": trick["instructions"],
                "difficulty": trick["difficulty"],
                "overall_rating": trick["overall_rating"]
            }).execute()
            created_count += 1
            logger.debug(f"Created trick: {trick['title']}")
        except Exception as e:
            logger.error(f"Error processing trick {trick['title']}: {e}")

    logger.info(f"Sample tricks seeded: {created_count} created, {skipped_count} skipped")
    return created_count


def main(argv=None):
    """Main function to seed sample tricks"""
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        logger.error("Usage: python -m app.scripts.seed_sample_tricks <user_id>")
        sys.exit(2)

    try:
        supabase = SupabaseClient.get_service_client()
        seed_sample_tricks(supabase, args[0])
        logger.info("Seeding completed successfully!")
    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
