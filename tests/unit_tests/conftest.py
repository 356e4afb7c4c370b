import os

# Settings are read at import time, so the environment has to be in place before `src` is imported
for key, value in {
    "ENVIRONMENT": "DEV",
    "BACKEND_SERVER_HOST": "127.0.0.1",
    "BACKEND_SERVER_PORT": "8000",
    "BACKEND_SERVER_WORKERS": "1",
    "POSTGRES_HOST": "localhost",
    "POSTGRES_PORT": "5432",
    "POSTGRES_DB": "interview_portal_test",
    "POSTGRES_USERNAME": "postgres",
    "POSTGRES_PASSWORD": "postgres",
    "DB_POOL_SIZE": "5",
    "DB_POOL_OVERFLOW": "5",
    "DB_TIMEOUT": "5",
    "IS_DB_ECHO_LOG": "False",
    "IS_DB_EXPIRE_ON_COMMIT": "False",
    "IS_ALLOWED_CREDENTIALS": "True",
    "JWT_SECRET_KEY": "unit-test-secret",
    "JWT_SUBJECT": "access",
    "JWT_ALGORITHM": "HS256",
    "JWT_MIN": "60",
    "JWT_HOUR": "24",
    "JWT_DAY": "1",
    "HASHING_ALGORITHM_LAYER_1": "pbkdf2_sha256",
    "HASHING_ALGORITHM_LAYER_2": "pbkdf2_sha256",
    "HASHING_SALT": "unit-test-salt",
    "PORTAL_BASE_URL": "https://portal.example.com",
}.items():
    os.environ.setdefault(key, value)

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import src.models.db  # noqa: F401
from src.api.dependencies.session import get_async_session
from src.main import initialize_backend_application
from src.models.db.account import Account, AccountRoleEnum
from src.repository.crud.account import AccountCRUDRepository
from src.repository.table import Base

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-battery"


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'portal.db'}")
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=db_engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def admin_account(db_session) -> Account:
    repo = AccountCRUDRepository(async_session=db_session)
    return await repo.create_account(email=ADMIN_EMAIL, password=ADMIN_PASSWORD, display_name="Ada Admin")


@pytest_asyncio.fixture
async def candidate_account(db_session) -> Account:
    repo = AccountCRUDRepository(async_session=db_session)
    return await repo.create_account(
        email="someone@example.com",
        password="not-an-admin",
        display_name="Sam Someone",
        role=AccountRoleEnum.CANDIDATE,
    )


@pytest_asyncio.fixture
async def client(session_factory):
    app = initialize_backend_application()

    async def override_get_async_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as test_client:
        yield test_client


@pytest_asyncio.fixture
async def admin_headers(client, admin_account) -> dict[str, str]:
    resp = await client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 202, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}
