from src.models.schemas.base import BaseSchemaModel


class DashboardStats(BaseSchemaModel):
    candidates: int
    questions: int
    templates: int
    active_sessions: int
