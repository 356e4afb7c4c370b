import logging

import fastapi
from sqlalchemy import text

from src.repository.database import async_db

logger = logging.getLogger(__name__)


async def initialize_db_connection(backend_app: fastapi.FastAPI) -> None:
    logger.info("Database Connection --- Establishing . . .")

    backend_app.state.db = async_db

    # Schema is owned by Alembic; only verify the server is reachable here
    async with async_db.async_engine.connect() as connection:
        await connection.execute(text("SELECT 1"))

    logger.info("Database Connection --- Successfully Established!")


async def dispose_db_connection(backend_app: fastapi.FastAPI) -> None:
    logger.info("Database Connection --- Disposing . . .")

    await backend_app.state.db.async_engine.dispose()

    logger.info("Database Connection --- Successfully Disposed!")
