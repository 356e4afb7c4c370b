import datetime
import logging
import typing

import sqlalchemy

from src.models.db.candidate import Candidate
from src.models.db.evaluation_session import EvaluationSession, SessionStatusEnum
from src.models.db.template import Template
from src.repository.crud.base import BaseCRUDRepository
from src.services.session_lifecycle import (
    build_question_snapshot,
    compute_expiry,
    effective_status,
    ensure_active,
    generate_session_id,
    utc_now,
)
from src.utilities.exceptions.database import EntityDoesNotExist
from src.utilities.exceptions.evaluation import SessionStateConflict

logger = logging.getLogger(__name__)

SessionRow = typing.Tuple[EvaluationSession, str | None, str | None]


class EvaluationSessionCRUDRepository(BaseCRUDRepository):
    async def create_session(
        self,
        *,
        candidate: Candidate,
        template: Template,
        questions: list[typing.Any],
        admin_id: int | None,
    ) -> EvaluationSession:
        """Start a session for `candidate` with a snapshot of `questions` in the given order."""
        snapshot = build_question_snapshot(questions)
        started_at = utc_now()
        session = EvaluationSession(
            id=generate_session_id(),
            admin_id=admin_id,
            candidate_id=candidate.id,
            template_id=template.id,
            questions=snapshot,
            status=SessionStatusEnum.ACTIVE,
            started_at=started_at,
            expires_at=compute_expiry(started_at),
        )
        self.async_session.add(session)
        await self.async_session.commit()
        await self.async_session.refresh(session)
        logger.info(
            f"Session {session.id} started for candidate '{candidate.id}' from template {template.id} "
            f"with {len(snapshot)} question(s), expires {session.expires_at}"
        )
        return session

    async def expire_overdue(self, *, now: datetime.datetime | None = None) -> int:
        """Persist `expired` on active sessions whose time box has passed. Returns the number of rows changed."""
        now = now or utc_now()
        overdue_stmt = (
            sqlalchemy.select(EvaluationSession.id)
            .where(EvaluationSession.status == SessionStatusEnum.ACTIVE)
            .where(EvaluationSession.expires_at < now)
        )
        overdue_ids = list((await self.async_session.execute(statement=overdue_stmt)).scalars().all())
        if not overdue_ids:
            return 0

        stmt = (
            sqlalchemy.update(EvaluationSession)
            .where(EvaluationSession.id.in_(overdue_ids))
            .values(status=SessionStatusEnum.EXPIRED)
            .execution_options(synchronize_session="evaluate")
        )
        await self.async_session.execute(statement=stmt)
        await self.async_session.commit()
        logger.info(f"Marked {len(overdue_ids)} overdue session(s) as expired")
        return len(overdue_ids)

    def _select_with_names(self) -> sqlalchemy.Select:
        return (
            sqlalchemy.select(EvaluationSession, Candidate.name, Template.name)
            .outerjoin(Candidate, Candidate.id == EvaluationSession.candidate_id)
            .outerjoin(Template, Template.id == EvaluationSession.template_id)
        )

    async def list_sessions(self) -> list[SessionRow]:
        stmt = self._select_with_names().order_by(EvaluationSession.started_at.desc(), EvaluationSession.id.asc())
        query = await self.async_session.execute(statement=stmt)
        return [(row[0], row[1], row[2]) for row in query.all()]

    async def get_with_names(self, *, session_id: str) -> SessionRow:
        stmt = self._select_with_names().where(EvaluationSession.id == session_id)
        row = (await self.async_session.execute(statement=stmt)).first()
        if row is None:
            raise EntityDoesNotExist(f"Session {session_id} does not exist!")
        return row[0], row[1], row[2]

    async def get_by_id(self, *, session_id: str) -> EvaluationSession:
        session = await self.async_session.get(EvaluationSession, session_id)
        if session is None:
            raise EntityDoesNotExist(f"Session {session_id} does not exist!")
        return session

    async def _leave_active(self, *, session_id: str, status: SessionStatusEnum, **values: typing.Any) -> EvaluationSession:
        """Move an effectively active session to `status` with a conditional UPDATE.

        Concurrent transitions race on the `status = 'active'` guard; the loser gets `SessionStateConflict`.
        """
        session = await self.get_by_id(session_id=session_id)
        now = utc_now()
        ensure_active(session, now)

        stmt = (
            sqlalchemy.update(EvaluationSession)
            .where(EvaluationSession.id == session_id)
            .where(EvaluationSession.status == SessionStatusEnum.ACTIVE)
            .where(EvaluationSession.expires_at >= now)
            .values(status=status, **values)
            .execution_options(synchronize_session=False)
        )
        result = await self.async_session.execute(statement=stmt)
        if result.rowcount != 1:
            await self.async_session.rollback()
            await self.async_session.refresh(session)
            current = effective_status(session, now)
            raise SessionStateConflict(f"Session {session_id} is {current.value}", status=current.value)

        await self.async_session.commit()
        await self.async_session.refresh(session)
        logger.info(f"Session {session_id} {status.value}")
        return session

    async def terminate_session(self, *, session_id: str) -> EvaluationSession:
        return await self._leave_active(session_id=session_id, status=SessionStatusEnum.TERMINATED)

    async def complete_session(self, *, session_id: str) -> EvaluationSession:
        return await self._leave_active(
            session_id=session_id, status=SessionStatusEnum.COMPLETED, completed_at=utc_now()
        )

    async def delete_session(self, *, session_id: str) -> None:
        session = await self.get_by_id(session_id=session_id)
        await self.async_session.delete(session)
        await self.async_session.commit()
        logger.info(f"Session {session_id} deleted")

    async def count_active(self, *, now: datetime.datetime | None = None) -> int:
        now = now or utc_now()
        stmt = (
            sqlalchemy.select(sqlalchemy.func.count())
            .select_from(EvaluationSession)
            .where(EvaluationSession.status == SessionStatusEnum.ACTIVE)
            .where(EvaluationSession.expires_at >= now)
        )
        return (await self.async_session.execute(statement=stmt)).scalar_one()
