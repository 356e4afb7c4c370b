import datetime

import sqlalchemy
from sqlalchemy.orm import Mapped as SQLAlchemyMapped, mapped_column as sqlalchemy_mapped_column, relationship
from sqlalchemy.sql import functions as sqlalchemy_functions

from src.repository.table import Base


class AuthSession(Base):  # type: ignore
    """Refresh-token session for a signed-in account."""

    __tablename__ = "auth_session"

    id: SQLAlchemyMapped[int] = sqlalchemy_mapped_column(primary_key=True, autoincrement="auto")
    account_id: SQLAlchemyMapped[int] = sqlalchemy_mapped_column(
        sqlalchemy.ForeignKey("account.id", ondelete="CASCADE"), nullable=False, index=True
    )
    token: SQLAlchemyMapped[str] = sqlalchemy_mapped_column(sqlalchemy.String(length=512), nullable=False, unique=True)
    expiry: SQLAlchemyMapped[datetime.datetime] = sqlalchemy_mapped_column(sqlalchemy.DateTime(timezone=True), nullable=False)
    last_active: SQLAlchemyMapped[datetime.datetime] = sqlalchemy_mapped_column(
        sqlalchemy.DateTime(timezone=True), nullable=False, server_default=sqlalchemy_functions.now()
    )

    account = relationship("Account", back_populates="auth_sessions")

    __mapper_args__ = {"eager_defaults": True}
