import typing

import fastapi
from sqlalchemy.ext.asyncio import AsyncSession as SQLAlchemyAsyncSession

from src.api.dependencies.session import get_async_session
from src.repository.crud.base import BaseCRUDRepository

RepositoryT = typing.TypeVar("RepositoryT", bound=BaseCRUDRepository)


def get_repository(
    repo_type: typing.Type[RepositoryT],
) -> typing.Callable[[SQLAlchemyAsyncSession], RepositoryT]:
    def _get_repo(
        async_session: SQLAlchemyAsyncSession = fastapi.Depends(get_async_session),
    ) -> RepositoryT:
        return repo_type(async_session=async_session)

    return _get_repo
