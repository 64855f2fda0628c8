"""
Tortoise ORM settings shared by the engine, the API and aerich.
SQLite in development, PostgreSQL in production (see Settings.database_url).
"""

import logging

from src.config import config

logger = logging.getLogger(__name__)

DB_URL = config.database_url
logger.info(f"Database backend: {DB_URL.partition('://')[0]}")

TORTOISE_ORM = {
    "connections": {"default": DB_URL},
    "apps": {
        "models": {
            "models": ["src.database.models", "aerich.models"],
            "default_connection": "default",
        },
    },
}
