import fastapi

from src.utilities.messages.exceptions.http.exc_details import http_404_id_details


async def http_404_exc_id_not_found_request(entity: str, id: int | str) -> Exception:
    return fastapi.HTTPException(
        status_code=fastapi.status.HTTP_404_NOT_FOUND,
        detail=http_404_id_details(entity=entity, id=id),
    )
