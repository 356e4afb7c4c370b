import datetime
import secrets

import sqlalchemy

from src.models.db.auth_session import AuthSession
from src.repository.crud.base import BaseCRUDRepository
from src.services.session_lifecycle import as_utc, utc_now


class AuthSessionCRUDRepository(BaseCRUDRepository):
    async def create_session(self, *, account_id: int, expiry_minutes: int = 60) -> AuthSession:
        token = secrets.token_urlsafe(48)
        expiry = utc_now() + datetime.timedelta(minutes=expiry_minutes)

        new_session = AuthSession(account_id=account_id, token=token, expiry=expiry)
        self.async_session.add(new_session)
        await self.async_session.commit()
        await self.async_session.refresh(new_session)
        return new_session

    async def get_session_by_token(self, *, token: str) -> AuthSession | None:
        stmt = sqlalchemy.select(AuthSession).where(AuthSession.token == token)
        query = await self.async_session.execute(statement=stmt)
        return query.scalar()  # type: ignore

    async def get_valid_session_by_token(self, *, token: str) -> AuthSession | None:
        """Return the session when it exists and has not expired, touching `last_active`."""
        entity = await self.get_session_by_token(token=token)
        if entity is None:
            return None
        now = utc_now()
        if as_utc(entity.expiry) <= now:
            return None
        entity.last_active = now
        await self.async_session.commit()
        await self.async_session.refresh(entity)
        return entity

    async def delete_session_by_token(self, *, token: str) -> bool:
        """Delete a session row by its token. Returns True if a row was deleted."""
        entity = await self.get_session_by_token(token=token)
        if not entity:
            return False
        await self.async_session.delete(entity)
        await self.async_session.commit()
        return True
