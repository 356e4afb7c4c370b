import datetime

import pydantic

from src.models.schemas.base import BaseSchemaModel, RequiredText


class QuestionCreate(BaseSchemaModel):
    title: RequiredText
    content: RequiredText = pydantic.Field(description="Question body in markdown")

    model_config = BaseSchemaModel.model_config.copy()
    model_config["json_schema_extra"] = {
        "examples": [
            {"title": "Reverse a linked list", "content": "Write a function that reverses a **singly** linked list."}
        ]
    }


class QuestionUpdate(BaseSchemaModel):
    title: RequiredText | None = None
    content: RequiredText | None = None


class QuestionOut(BaseSchemaModel):
    id: int
    title: str
    content: str
    admin_id: int | None = None
    created_at: datetime.datetime
    updated_at: datetime.datetime


class QuestionsListResponse(BaseSchemaModel):
    items: list[QuestionOut]
    count: int
