import fastapi

from src.utilities.messages.exceptions.http.exc_details import (
    http_401_refresh_details,
    http_401_unauthorized_details,
)


async def http_exc_401_unauthorized_request() -> Exception:
    return fastapi.HTTPException(
        status_code=fastapi.status.HTTP_401_UNAUTHORIZED,
        detail=http_401_unauthorized_details(),
        headers={"WWW-Authenticate": "Bearer"},
    )


async def http_exc_401_invalid_refresh_request() -> Exception:
    return fastapi.HTTPException(
        status_code=fastapi.status.HTTP_401_UNAUTHORIZED,
        detail=http_401_refresh_details(),
    )
