import logging
import re

import sqlalchemy
from sqlalchemy.exc import IntegrityError

from src.models.db.candidate import Candidate
from src.models.db.evaluation_session import EvaluationSession
from src.repository.crud.base import BaseCRUDRepository
from src.utilities.exceptions.database import EntityAlreadyExists, EntityDoesNotExist, EntityInUse

logger = logging.getLogger(__name__)

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")


def candidate_id_from_email(email: str) -> str:
    """`jane.doe@example.com` -> `jane_doe_example_com`"""
    return _NON_ALPHANUMERIC.sub("_", email)


class CandidateCRUDRepository(BaseCRUDRepository):
    async def _email_taken(self, *, email: str, exclude_id: str | None = None) -> bool:
        stmt = sqlalchemy.select(Candidate.id).where(Candidate.email == email)
        if exclude_id is not None:
            stmt = stmt.where(Candidate.id != exclude_id)
        return (await self.async_session.execute(statement=stmt)).first() is not None

    async def _commit_unique(self) -> None:
        try:
            await self.async_session.commit()
        except IntegrityError as e:
            # Lost a race to a concurrent write of the same id or email
            await self.async_session.rollback()
            raise EntityAlreadyExists("Candidate with this email already exists") from e

    async def create_candidate(self, *, email: str, name: str, admin_id: int | None) -> Candidate:
        candidate_id = candidate_id_from_email(email)
        existing = await self.async_session.get(Candidate, candidate_id)
        if existing is not None or await self._email_taken(email=email):
            raise EntityAlreadyExists("Candidate with this email already exists")

        candidate = Candidate(id=candidate_id, email=email, name=name, admin_id=admin_id)
        self.async_session.add(candidate)
        await self._commit_unique()
        await self.async_session.refresh(candidate)
        logger.info(f"Candidate '{candidate.id}' created by admin {admin_id}")
        return candidate

    async def list_candidates(self) -> list[Candidate]:
        stmt = sqlalchemy.select(Candidate).order_by(Candidate.created_at.desc(), Candidate.id.asc())
        query = await self.async_session.execute(statement=stmt)
        return list(query.scalars().all())

    async def get_by_id(self, *, candidate_id: str) -> Candidate:
        candidate = await self.async_session.get(Candidate, candidate_id)
        if candidate is None:
            raise EntityDoesNotExist(f"Candidate {candidate_id} does not exist!")
        return candidate

    async def update_candidate(self, *, candidate_id: str, email: str | None = None, name: str | None = None) -> Candidate:
        """Only non-None fields are applied. The id stays tied to the original email."""
        candidate = await self.get_by_id(candidate_id=candidate_id)
        if email is not None and email != candidate.email:
            if await self._email_taken(email=email, exclude_id=candidate_id):
                raise EntityAlreadyExists("Candidate with this email already exists")
            candidate.email = email
        if name is not None:
            candidate.name = name
        await self._commit_unique()
        await self.async_session.refresh(candidate)
        logger.info(f"Candidate '{candidate.id}' updated")
        return candidate

    async def delete_candidate(self, *, candidate_id: str) -> None:
        candidate = await self.get_by_id(candidate_id=candidate_id)

        stmt = (
            sqlalchemy.select(sqlalchemy.func.count())
            .select_from(EvaluationSession)
            .where(EvaluationSession.candidate_id == candidate_id)
        )
        sessions_count = (await self.async_session.execute(statement=stmt)).scalar_one()
        if sessions_count:
            raise EntityInUse(f"Candidate has {sessions_count} evaluation session(s)")

        await self.async_session.delete(candidate)
        await self.async_session.commit()
        logger.info(f"Candidate '{candidate_id}' deleted")

    async def count(self) -> int:
        stmt = sqlalchemy.select(sqlalchemy.func.count()).select_from(Candidate)
        return (await self.async_session.execute(statement=stmt)).scalar_one()
