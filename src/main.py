"""
FitStreak engine entry point: database + daily sweep scheduler.
"""

import asyncio
import logging

from tortoise import Tortoise

from src.config import config
from src.database.config import TORTOISE_ORM
from src.services import scheduler

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


async def on_startup() -> None:
    await Tortoise.init(config=TORTOISE_ORM)
    if config.ENVIRONMENT != "production":
        # Production schema is managed by aerich migrations
        await Tortoise.generate_schemas()
    logger.info("Database initialized")

    await scheduler.start()


async def on_shutdown() -> None:
    await scheduler.stop()
    await Tortoise.close_connections()
    logger.info("Database connections closed")


async def main() -> None:
    logger.info(f"Starting FitStreak engine in {config.ENVIRONMENT} mode...")
    await on_startup()
    try:
        await asyncio.Event().wait()
    finally:
        await on_shutdown()


if __name__ == "__main__":
    asyncio.run(main())
