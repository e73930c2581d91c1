import os
import tempfile

# Settings are read at import time, so configure the environment before importing the app.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="baanboard-uploads-")
os.environ["MEDIA_BASE_URL"] = "http://test"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from baanboard.core.permissions import Role
from baanboard.db.base import Base
from baanboard.db.session import get_db
from baanboard.main import app
from baanboard.schemas.user import UserCreate
from baanboard.services.auth_service import register_user

PASSWORD = "secret-pass"


@pytest.fixture
async def engine():
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
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def register(client, email: str, password: str = PASSWORD, fullname: str = "Test User", tel: str = "0812345678", files=None):
    data = {"fullname": fullname, "email": email, "tel": tel, "password": password}
    return await client.post("/register", data=data, files=files)


async def login(client, email: str, password: str = PASSWORD) -> str:
    resp = await client.post("/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


async def signup(client, email: str, fullname: str = "Test User") -> str:
    """Register then log in; returns the bearer token."""
    resp = await register(client, email, fullname=fullname)
    assert resp.status_code == 201, resp.text
    return await login(client, email)


async def create_admin(session_maker, email: str = "admin@example.com") -> None:
    async with session_maker() as session:
        data = UserCreate(fullname="Admin", email=email, tel="0800000000", password=PASSWORD)
        await register_user(session, data, role=Role.ADMIN)
        await session.commit()


async def new_post(client, token: str, title: str = "Morning run", content: str = "5km along the river", tag: str = "Sport", files=None):
    resp = await client.post(
        "/post",
        data={"title": title, "content": content, "tag": tag},
        files=files,
        headers=auth(token),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()
