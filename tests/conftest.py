import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret"
# cheap hash so the suite stays fast
os.environ["PASSWORD_HASH_METHOD"] = "pbkdf2:sha256:1000"

import pytest
from httpx import ASGITransport, AsyncClient

from alatmon.db import Base, get_db, make_engine, make_sessionmaker
from alatmon.main import app


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def session_factory(tmp_path):
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'alatmon.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield make_sessionmaker(engine)
    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    # Starlette re-raises after the catch-all 500 handler has answered
    async with AsyncClient(transport=ASGITransport(app=app, raise_app_exceptions=False), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def token(client):
    await client.post("/auth/register", json={
        "username": "budi", "email": "budi@example.com", "no_telp": "0812", "password": "rahasia",
    })
    resp = await client.post("/auth/login", json={"email": "budi@example.com", "password": "rahasia"})
    return resp.json()["token"]


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
