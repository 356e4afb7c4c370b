import logging

import sqlalchemy

from src.models.db.question import Question
from src.models.db.template import Template
from src.repository.crud.base import BaseCRUDRepository
from src.utilities.exceptions.database import EntityDoesNotExist
from src.utilities.exceptions.evaluation import InvalidTemplate

logger = logging.getLogger(__name__)


class TemplateCRUDRepository(BaseCRUDRepository):
    async def _validate_question_ids(self, question_ids: list[int]) -> list[int]:
        if not question_ids:
            raise InvalidTemplate("Select at least one question")
        if len(set(question_ids)) != len(question_ids):
            raise InvalidTemplate("A question can appear only once in a template")

        stmt = sqlalchemy.select(Question.id).where(Question.id.in_(question_ids))
        found = set((await self.async_session.execute(statement=stmt)).scalars().all())
        missing = [qid for qid in question_ids if qid not in found]
        if missing:
            raise InvalidTemplate(f"Unknown question ids: {missing}", missing_question_ids=missing)
        return list(question_ids)

    async def create_template(
        self,
        *,
        name: str,
        description: str,
        question_ids: list[int],
        admin_id: int | None,
    ) -> Template:
        question_ids = await self._validate_question_ids(question_ids)
        template = Template(name=name, description=description, question_ids=question_ids, admin_id=admin_id)
        self.async_session.add(template)
        await self.async_session.commit()
        await self.async_session.refresh(template)
        logger.info(f"Template {template.id} created with {len(question_ids)} question(s)")
        return template

    async def list_templates(self) -> list[Template]:
        stmt = sqlalchemy.select(Template).order_by(Template.id.desc())
        query = await self.async_session.execute(statement=stmt)
        return list(query.scalars().all())

    async def get_by_id(self, *, template_id: int) -> Template:
        template = await self.async_session.get(Template, template_id)
        if template is None:
            raise EntityDoesNotExist(f"Template {template_id} does not exist!")
        return template

    async def update_template(
        self,
        *,
        template_id: int,
        name: str | None = None,
        description: str | None = None,
        question_ids: list[int] | None = None,
    ) -> Template:
        template = await self.get_by_id(template_id=template_id)
        if question_ids is not None:
            template.question_ids = await self._validate_question_ids(question_ids)
        if name is not None:
            template.name = name
        if description is not None:
            template.description = description
        await self.async_session.commit()
        await self.async_session.refresh(template)
        logger.info(f"Template {template_id} updated")
        return template

    async def delete_template(self, *, template_id: int) -> None:
        template = await self.get_by_id(template_id=template_id)
        await self.async_session.delete(template)
        await self.async_session.commit()
        logger.info(f"Template {template_id} deleted")

    async def count(self) -> int:
        stmt = sqlalchemy.select(sqlalchemy.func.count()).select_from(Template)
        return (await self.async_session.execute(statement=stmt)).scalar_one()
