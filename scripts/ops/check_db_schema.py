"""
Check that the production database schema matches the Tortoise models.

Usage:
    python -m scripts.ops.check_db_schema

AICODE-NOTE: Catches missing migrations before a sweep crashes on them.
"""

import asyncio
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tortoise import Tortoise

from src.database.config import TORTOISE_ORM
from src.database.models import (
    Challenge,
    ChallengeParticipant,
    Notification,
    StreakRecord,
    User,
)

# Columns the sweeps and conditional updates rely on
CRITICAL_COLUMNS = {
    StreakRecord: ("id", "version", "is_frozen", "freezes_available", "last_activity_date"),
    Challenge: ("id", "winners_announced", "ending_soon_notified_at"),
    ChallengeParticipant: ("id", "version", "current_progress", "last_updated"),
    Notification: ("id", "dedupe_key"),
    User: ("id", "name", "username"),
}


async def check_model(model, columns: tuple[str, ...]) -> tuple[bool, str]:
    table = model._meta.db_table
    try:
        await model.all().limit(1).values(*columns)
        return True, f"✅ Table '{table}' has {', '.join(columns)}"
    except Exception as e:
        return False, f"❌ Table '{table}' error: {e}"


async def main() -> int:
    await Tortoise.init(config=TORTOISE_ORM)
    ok = True
    try:
        for model, columns in CRITICAL_COLUMNS.items():
            passed, message = await check_model(model, columns)
            print(message)
            ok = ok and passed
    finally:
        await Tortoise.close_connections()

    print("\nSchema OK" if ok else "\nSchema mismatch: run `aerich upgrade`")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
