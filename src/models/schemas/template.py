import datetime

import pydantic

from src.models.schemas.base import BaseSchemaModel, RequiredText


class TemplateCreate(BaseSchemaModel):
    name: RequiredText
    description: str = ""
    question_ids: list[int] = pydantic.Field(description="Question ids in the order they are asked")

    model_config = BaseSchemaModel.model_config.copy()
    model_config["json_schema_extra"] = {
        "examples": [
            {"name": "JavaScript Basics", "description": "Warm-up round", "questionIds": [3, 1, 7]}
        ]
    }


class TemplateUpdate(BaseSchemaModel):
    name: RequiredText | None = None
    description: str | None = None
    question_ids: list[int] | None = None


class TemplateOut(BaseSchemaModel):
    id: int
    name: str
    description: str
    question_ids: list[int]
    question_count: int = pydantic.Field(default=0, ge=0)
    admin_id: int | None = None
    created_at: datetime.datetime
    updated_at: datetime.datetime


class TemplatesListResponse(BaseSchemaModel):
    items: list[TemplateOut]
    count: int
