import datetime

import sqlalchemy
from sqlalchemy.orm import Mapped as SQLAlchemyMapped, mapped_column as sqlalchemy_mapped_column, relationship
from sqlalchemy.sql import functions as sqlalchemy_functions

from src.repository.table import Base

# ----------------------------------
# Enum for account roles
# ----------------------------------
from enum import Enum as _Enum


class AccountRoleEnum(str, _Enum):
    """Role claim carried by every account. Only admins may use this API."""

    ADMIN = "admin"
    CANDIDATE = "candidate"


class Account(Base):  # type: ignore
    __tablename__ = "account"

    id: SQLAlchemyMapped[int] = sqlalchemy_mapped_column(primary_key=True, autoincrement="auto")
    email: SQLAlchemyMapped[str] = sqlalchemy_mapped_column(
        sqlalchemy.String(length=254), nullable=False, unique=True, index=True
    )
    display_name: SQLAlchemyMapped[str] = sqlalchemy_mapped_column(sqlalchemy.String(length=128), nullable=False)
    password_hash: SQLAlchemyMapped[str] = sqlalchemy_mapped_column(sqlalchemy.String(length=1024), nullable=False)
    role: SQLAlchemyMapped[AccountRoleEnum] = sqlalchemy_mapped_column(
        sqlalchemy.Enum(
            AccountRoleEnum,
            name="account_role_enum",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=AccountRoleEnum.ADMIN,
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

    auth_sessions = relationship(
        "AuthSession", back_populates="account", cascade="all, delete-orphan", passive_deletes=True
    )

    __mapper_args__ = {"eager_defaults": True}

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRoleEnum.ADMIN
