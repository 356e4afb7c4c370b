import datetime

import pydantic

from src.models.schemas.base import BaseSchemaModel


class AccountLogin(BaseSchemaModel):
    email: pydantic.EmailStr
    password: str


class RefreshTokenRequest(BaseSchemaModel):
    refresh_token: str


class AdminOut(BaseSchemaModel):
    account_id: int = pydantic.Field(description="Unique identifier for the admin account")
    email: pydantic.EmailStr
    display_name: str
    role: str
    created_at: datetime.datetime


class AdminWithToken(BaseSchemaModel):
    token: str
    refresh_token: str | None = None
    admin: AdminOut


class AccessTokenOut(BaseSchemaModel):
    token: str
