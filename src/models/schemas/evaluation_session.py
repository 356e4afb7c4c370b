import datetime

import pydantic

from src.models.schemas.base import BaseSchemaModel


class SessionCreate(BaseSchemaModel):
    candidate_id: str
    template_id: int

    model_config = BaseSchemaModel.model_config.copy()
    model_config["json_schema_extra"] = {
        "examples": [
            {"candidateId": "jane_doe_example_com", "templateId": 4}
        ]
    }


class SessionQuestionOut(BaseSchemaModel):
    id: int
    title: str
    content: str
    order: int


class SessionOut(BaseSchemaModel):
    id: str
    admin_id: int | None = None
    candidate_id: str
    candidate_name: str | None = None
    template_id: int
    template_name: str | None = None
    questions: list[SessionQuestionOut]
    status: str = pydantic.Field(description="Effective status: active sessions past expiry report 'expired'")
    started_at: datetime.datetime
    expires_at: datetime.datetime
    completed_at: datetime.datetime | None = None
    link: str | None = pydantic.Field(default=None, description="Candidate link, only while the session is active")
    created_at: datetime.datetime
    updated_at: datetime.datetime


class SessionsListResponse(BaseSchemaModel):
    items: list[SessionOut]
    count: int
