import datetime

import pydantic

from src.models.schemas.base import BaseSchemaModel, RequiredText


class CandidateCreate(BaseSchemaModel):
    email: pydantic.EmailStr
    name: RequiredText


class CandidateUpdate(BaseSchemaModel):
    email: pydantic.EmailStr | None = None
    name: RequiredText | None = None


class CandidateOut(BaseSchemaModel):
    id: str = pydantic.Field(description="Identifier derived from the candidate's email")
    email: str
    name: str
    admin_id: int | None = None
    created_at: datetime.datetime
    updated_at: datetime.datetime


class CandidatesListResponse(BaseSchemaModel):
    items: list[CandidateOut]
    count: int
