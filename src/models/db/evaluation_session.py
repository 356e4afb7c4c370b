import datetime

import sqlalchemy
from sqlalchemy.orm import Mapped as SQLAlchemyMapped, mapped_column as sqlalchemy_mapped_column
from sqlalchemy.sql import functions as sqlalchemy_functions

from src.repository.table import Base, JSONDocument

from enum import Enum as _Enum


class SessionStatusEnum(str, _Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    EXPIRED = "expired"
    TERMINATED = "terminated"


class EvaluationSession(Base):  # type: ignore
    __tablename__ = "evaluation_session"

    # Random document-style id; it ends up in the link handed to the candidate
    id: SQLAlchemyMapped[str] = sqlalchemy_mapped_column(sqlalchemy.String(length=32), primary_key=True)
    admin_id: SQLAlchemyMapped[int | None] = sqlalchemy_mapped_column(
        sqlalchemy.ForeignKey("account.id", ondelete="SET NULL"), nullable=True, index=True
    )
    candidate_id: SQLAlchemyMapped[str] = sqlalchemy_mapped_column(
        sqlalchemy.ForeignKey("candidate.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    # Kept for history only; no FK so template deletes leave sessions intact
    template_id: SQLAlchemyMapped[int] = sqlalchemy_mapped_column(sqlalchemy.Integer, nullable=False, index=True)
    questions: SQLAlchemyMapped[list] = sqlalchemy_mapped_column(
        JSONDocument, nullable=False, doc="Snapshot of [{id, title, content, order}] taken at creation"
    )
    status: SQLAlchemyMapped[SessionStatusEnum] = sqlalchemy_mapped_column(
        sqlalchemy.Enum(
            SessionStatusEnum,
            name="session_status_enum",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=SessionStatusEnum.ACTIVE,
        index=True,
    )
    started_at: SQLAlchemyMapped[datetime.datetime] = sqlalchemy_mapped_column(sqlalchemy.DateTime(timezone=True), nullable=False)
    expires_at: SQLAlchemyMapped[datetime.datetime] = sqlalchemy_mapped_column(
        sqlalchemy.DateTime(timezone=True), nullable=False, index=True
    )
    completed_at: SQLAlchemyMapped[datetime.datetime | None] = sqlalchemy_mapped_column(
        sqlalchemy.DateTime(timezone=True), nullable=True
    )
    created_at: SQLAlchemyMapped[datetime.datetime] = sqlalchemy_mapped_column(
        sqlalchemy.DateTime(timezone=True), nullable=False, server_default=sqlalchemy_functions.now()
    )
    updated_at: SQLAlchemyMapped[datetime.datetime] = sqlalchemy_mapped_column(
        sqlalchemy.DateTime(timezone=True),
        nullable=False,
        server_default=sqlalchemy_functions.now(),
        onupdate=sqlalchemy_functions.now(),
    )

    __mapper_args__ = {"eager_defaults": True}
