import logging

import fastapi

from src.api.dependencies.auth import get_current_admin
from src.api.dependencies.repository import get_repository
from src.config.manager import settings
from src.models.db.account import Account
from src.models.schemas.account import AccessTokenOut, AccountLogin, AdminOut, AdminWithToken, RefreshTokenRequest
from src.repository.crud.account import AccountCRUDRepository
from src.repository.crud.auth_session import AuthSessionCRUDRepository
from src.securities.authorizations.jwt import jwt_generator
from src.utilities.exceptions.database import EntityDoesNotExist
from src.utilities.exceptions.http.exc_400 import http_exc_400_credentials_bad_signin_request
from src.utilities.exceptions.http.exc_401 import http_exc_401_invalid_refresh_request
from src.utilities.exceptions.http.exc_403 import http_403_exc_forbidden_request
from src.utilities.exceptions.password import PasswordDoesNotMatch

logger = logging.getLogger(__name__)


router = fastapi.APIRouter(prefix="/auth", tags=["auth"])


def _admin_out(account: Account) -> AdminOut:
    return AdminOut(
        account_id=account.id,
        email=account.email,
        display_name=account.display_name,
        role=account.role.value,
        created_at=account.created_at,
    )


@router.post(
    path="/login",
    name="auth:login",
    response_model=AdminWithToken,
    status_code=fastapi.status.HTTP_202_ACCEPTED,
    summary="Sign in as an admin",
    description="Exchanges email and password for an access token and a refresh token. Only accounts with the admin role are accepted.",
)
async def login(
    payload: AccountLogin,
    account_repo: AccountCRUDRepository = fastapi.Depends(get_repository(repo_type=AccountCRUDRepository)),
    session_repo: AuthSessionCRUDRepository = fastapi.Depends(get_repository(repo_type=AuthSessionCRUDRepository)),
) -> AdminWithToken:
    try:
        account = await account_repo.verify_password(email=payload.email, password=payload.password)
    except (EntityDoesNotExist, PasswordDoesNotMatch):
        logger.warning(f"Failed sign-in for {payload.email}")
        raise await http_exc_400_credentials_bad_signin_request()

    if not account.is_admin:
        logger.warning(f"Sign-in refused for non-admin {account.email}")
        raise await http_403_exc_forbidden_request()

    token = jwt_generator.generate_access_token(account=account)
    refresh = await session_repo.create_session(account_id=account.id, expiry_minutes=settings.REFRESH_TOKEN_EXPIRY_MINUTES)
    logger.info(f"Admin {account.email} signed in")

    return AdminWithToken(token=token, refresh_token=refresh.token, admin=_admin_out(account))


@router.post(
    path="/refresh",
    name="auth:refresh",
    response_model=AccessTokenOut,
    status_code=fastapi.status.HTTP_200_OK,
)
async def refresh_access_token(
    payload: RefreshTokenRequest,
    account_repo: AccountCRUDRepository = fastapi.Depends(get_repository(repo_type=AccountCRUDRepository)),
    session_repo: AuthSessionCRUDRepository = fastapi.Depends(get_repository(repo_type=AuthSessionCRUDRepository)),
) -> AccessTokenOut:
    auth_session = await session_repo.get_valid_session_by_token(token=payload.refresh_token)
    if auth_session is None:
        raise await http_exc_401_invalid_refresh_request()

    account = await account_repo.get_account_by_id(account_id=auth_session.account_id)
    if not account.is_admin:
        raise await http_403_exc_forbidden_request()

    return AccessTokenOut(token=jwt_generator.generate_access_token(account=account))


@router.post(
    path="/logout",
    name="auth:logout",
    status_code=fastapi.status.HTTP_204_NO_CONTENT,
)
async def logout(
    payload: RefreshTokenRequest,
    session_repo: AuthSessionCRUDRepository = fastapi.Depends(get_repository(repo_type=AuthSessionCRUDRepository)),
) -> None:
    # Unknown tokens are fine: the client is signed out either way
    await session_repo.delete_session_by_token(token=payload.refresh_token)


@router.get(
    path="/me",
    name="auth:me",
    response_model=AdminWithToken,
    status_code=fastapi.status.HTTP_200_OK,
)
async def get_me(current_admin: Account = fastapi.Depends(get_current_admin)) -> AdminWithToken:
    token = jwt_generator.generate_access_token(account=current_admin)
    return AdminWithToken(token=token, refresh_token=None, admin=_admin_out(current_admin))
