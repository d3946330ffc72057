# init_db.py
import asyncio
import logging

from bjjconnect.core.logging import configure_logging
from bjjconnect.db.sql import engine, init_db

logger = logging.getLogger("bjjconnect.init_db")


async def init_models():
    # Drops every table first: local development only
    await init_db(engine, drop=True)
    await engine.dispose()
    logger.info("database_schema_recreated")


if __name__ == "__main__":
    configure_logging()
    asyncio.run(init_models())
