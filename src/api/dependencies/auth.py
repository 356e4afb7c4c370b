import logging

import fastapi
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from src.api.dependencies.repository import get_repository
from src.config.manager import settings
from src.models.db.account import Account, AccountRoleEnum
from src.repository.crud.account import AccountCRUDRepository
from src.securities.authorizations.jwt import jwt_generator
from src.utilities.exceptions.database import EntityDoesNotExist
from src.utilities.exceptions.http.exc_401 import http_exc_401_unauthorized_request
from src.utilities.exceptions.http.exc_403 import http_403_exc_forbidden_request

logger = logging.getLogger(__name__)

# Create HTTPBearer security scheme for Swagger UI
security = HTTPBearer()


async def get_current_admin(
    credentials: HTTPAuthorizationCredentials = fastapi.Depends(security),
    account_repo: AccountCRUDRepository = fastapi.Depends(get_repository(repo_type=AccountCRUDRepository)),
) -> Account:
    token = credentials.credentials
    try:
        details = jwt_generator.retrieve_details_from_token(token=token, secret_key=settings.JWT_SECRET_KEY)
    except ValueError:
        logger.warning("Rejected request with an undecodable bearer token")
        raise await http_exc_401_unauthorized_request()

    try:
        account = await account_repo.get_account_by_email(email=details.email)
    except EntityDoesNotExist:
        logger.warning(f"Token for unknown account {details.email}")
        raise await http_exc_401_unauthorized_request()

    # Both the stored role and the token claim must be admin
    if account.role != AccountRoleEnum.ADMIN or details.role != AccountRoleEnum.ADMIN.value:
        logger.warning(f"Non-admin account {account.email} denied")
        raise await http_403_exc_forbidden_request()

    return account
