"""
Run the daily sweeps once, by hand.

Usage:
    python -m scripts.ops.run_sweeps            # as of now
    python -m scripts.ops.run_sweeps 2026-03-05 # as of that day, 00:00 canonical tz

AICODE-NOTE: Same code path as /api/cron/tick. Safe to run any number of
times: each sweep is idempotent through its own query predicate.
"""

import asyncio
import json
import sys
from datetime import date
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tortoise import Tortoise

from src.core.domain.calendar import start_of_day
from src.database.config import TORTOISE_ORM
from src.services import scheduler


async def run(as_of: str | None) -> None:
    await Tortoise.init(config=TORTOISE_ORM)
    try:
        now = start_of_day(date.fromisoformat(as_of)) if as_of else scheduler.current_time()
        print(f"Running sweeps as of {now.isoformat()}")
        stats = await scheduler.run_all_sweeps(now)
        print(json.dumps(stats, indent=2))
    finally:
        await Tortoise.close_connections()
    print("\nDone!")


if __name__ == "__main__":
    asyncio.run(run(sys.argv[1] if len(sys.argv) > 1 else None))
