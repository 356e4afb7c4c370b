import logging

import sqlalchemy

from src.models.db.question import Question
from src.models.db.template import Template
from src.repository.crud.base import BaseCRUDRepository
from src.utilities.exceptions.database import EntityDoesNotExist

logger = logging.getLogger(__name__)


class QuestionCRUDRepository(BaseCRUDRepository):
    async def create_question(self, *, title: str, content: str, admin_id: int | None) -> Question:
        question = Question(title=title, content=content, admin_id=admin_id)
        self.async_session.add(question)
        await self.async_session.commit()
        await self.async_session.refresh(question)
        logger.info(f"Question {question.id} created by admin {admin_id}")
        return question

    async def list_questions(self) -> list[Question]:
        stmt = sqlalchemy.select(Question).order_by(Question.id.desc())
        query = await self.async_session.execute(statement=stmt)
        return list(query.scalars().all())

    async def get_by_id(self, *, question_id: int) -> Question:
        question = await self.async_session.get(Question, question_id)
        if question is None:
            raise EntityDoesNotExist(f"Question {question_id} does not exist!")
        return question

    async def get_many_by_ids(self, *, question_ids: list[int]) -> dict[int, Question]:
        """Fetch the given questions keyed by id. Unknown ids are simply absent."""
        if not question_ids:
            return {}
        stmt = sqlalchemy.select(Question).where(Question.id.in_(question_ids))
        query = await self.async_session.execute(statement=stmt)
        return {question.id: question for question in query.scalars().all()}

    async def update_question(self, *, question_id: int, title: str | None = None, content: str | None = None) -> Question:
        question = await self.get_by_id(question_id=question_id)
        if title is not None:
            question.title = title
        if content is not None:
            question.content = content
        await self.async_session.commit()
        await self.async_session.refresh(question)
        logger.info(f"Question {question_id} updated")
        return question

    async def delete_question(self, *, question_id: int) -> None:
        """Delete a question and drop it from every template that lists it.

        Session snapshots are left alone.
        """
        question = await self.get_by_id(question_id=question_id)

        templates = (await self.async_session.execute(sqlalchemy.select(Template))).scalars().all()
        detached = 0
        for template in templates:
            if question_id in (template.question_ids or []):
                template.question_ids = [qid for qid in template.question_ids if qid != question_id]
                detached += 1

        await self.async_session.delete(question)
        await self.async_session.commit()
        logger.info(f"Question {question_id} deleted, removed from {detached} template(s)")

    async def count(self) -> int:
        stmt = sqlalchemy.select(sqlalchemy.func.count()).select_from(Question)
        return (await self.async_session.execute(statement=stmt)).scalar_one()
