from typing import AsyncGenerator, Dict

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import botguard.models  # noqa: F401
from botguard.core.config import get_settings
from botguard.core.db import Base, get_session
from botguard.core.security import create_access_token, hash_password
from botguard.main import create_app
from botguard.models.user import User
from botguard.repositories.setting_repo import SettingRepository

ADMIN_EMAIL = "admin@botguard.io"
USER_EMAIL = "user@botguard.io"
PASSWORD = "s3cret-pass"

_CONFIGURED = object()


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
async def engine():
    """SQLite in-memory, dùng chung một connection cho cả test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(session_factory) -> FastAPI:
    """Create app instance for testing."""
    app = create_app()

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    return app


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Return an async client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def put_settings(session_factory, settings):
    """Ghi các setting key/value cho company cấu hình sẵn (hoặc company chỉ định)."""

    async def _put(values: Dict[str, str], company_id=_CONFIGURED):
        if company_id is _CONFIGURED:
            company_id = settings.CAPTCHA_COMPANY_ID
        async with session_factory() as session:
            await SettingRepository(session).upsert_many(values, company_id)

    return _put


@pytest.fixture
def create_user(session_factory):
    async def _create(
        email: str = USER_EMAIL,
        password: str = PASSWORD,
        is_admin: bool = False,
        is_active: bool = True,
    ) -> User:
        async with session_factory() as session:
            user = User(
                email=email,
                name=email.split("@")[0],
                password_hash=hash_password(password),
                is_active=is_active,
                is_admin=is_admin,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _create


@pytest.fixture
async def admin_headers(create_user) -> Dict[str, str]:
    admin = await create_user(email=ADMIN_EMAIL, is_admin=True)
    return {"Authorization": f"Bearer {create_access_token(admin.id)}"}


@pytest.fixture
async def user_headers(create_user) -> Dict[str, str]:
    user = await create_user()
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}
