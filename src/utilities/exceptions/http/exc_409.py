import fastapi

from src.utilities.messages.exceptions.http.exc_details import http_409_session_state_details


async def http_409_exc_session_state_conflict(session_id: str, status: str) -> Exception:
    return fastapi.HTTPException(
        status_code=fastapi.status.HTTP_409_CONFLICT,
        detail=http_409_session_state_details(session_id=session_id, status=status),
    )
