import fastapi

from src.utilities.messages.exceptions.http.exc_details import http_400_wrong_credentials_details


async def http_exc_400_credentials_bad_signin_request() -> Exception:
    return fastapi.HTTPException(
        status_code=fastapi.status.HTTP_400_BAD_REQUEST,
        detail=http_400_wrong_credentials_details(),
    )


async def http_400_exc_bad_request(detail: str) -> Exception:
    return fastapi.HTTPException(
        status_code=fastapi.status.HTTP_400_BAD_REQUEST,
        detail=detail,
    )
