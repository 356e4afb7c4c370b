import contextlib
import logging
import typing

import fastapi

from src.config.manager import settings
from src.repository.events import dispose_db_connection, initialize_db_connection


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOGGING_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    for logger_name in settings.LOGGERS:
        logging.getLogger(logger_name).setLevel(settings.LOGGING_LEVEL)


def execute_backend_server_event_handler(backend_app: fastapi.FastAPI) -> typing.Any:
    async def launch_backend_server_events() -> None:
        configure_logging()
        await initialize_db_connection(backend_app=backend_app)

    return launch_backend_server_events


def terminate_backend_server_event_handler(backend_app: fastapi.FastAPI) -> typing.Any:
    async def stop_backend_server_events() -> None:
        await dispose_db_connection(backend_app=backend_app)

    return stop_backend_server_events


@contextlib.asynccontextmanager
async def backend_lifespan(backend_app: fastapi.FastAPI) -> typing.AsyncIterator[None]:
    await execute_backend_server_event_handler(backend_app=backend_app)()
    try:
        yield
    finally:
        await terminate_backend_server_event_handler(backend_app=backend_app)()
