from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from joint_portfolio.config import Settings
from joint_portfolio.database import create_engine
from joint_portfolio.main import create_app
from joint_portfolio.repository import MemoryRepository, SqlRepository
from joint_portfolio.services.seed import seed_default_data

ADMIN_PASSWORD = "admin123"


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        app_env="testing",
        debug=False,
        secret_key="test-secret-key-that-is-long-enough-for-hs256",
        storage_backend="memory",
        seed_default_data=False,
        admin_password=ADMIN_PASSWORD,
    )


@pytest.fixture()
def memory_repo() -> MemoryRepository:
    return MemoryRepository()


@pytest.fixture(params=["memory", "sql"])
async def repo(request, tmp_path, settings):
    """以兩種儲存後端執行同一組測試"""
    if request.param == "memory":
        yield MemoryRepository()
        return

    db_settings = settings.model_copy(
        update={"database_url": f"sqlite+aiosqlite:///{tmp_path / 'repo.db'}"}
    )
    sql = SqlRepository(create_engine(db_settings))
    await sql.init_schema()
    yield sql
    await sql.close()


@pytest.fixture()
async def seeded_repo(repo, settings):
    """寫入預設資料；隨 repo 參數化，API 測試在兩種後端各跑一次"""
    await seed_default_data(repo, settings)
    return repo


@pytest.fixture()
def app(seeded_repo, settings) -> FastAPI:
    return create_app(settings=settings, repository=seeded_repo)


@pytest.fixture()
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _login(client: AsyncClient, username: str, password: str | None = None) -> dict:
    body = {"username": username}
    if password is not None:
        body["password"] = password
    response = await client.post("/api/auth/login", json=body)
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


@pytest.fixture()
async def admin_headers(client) -> dict:
    return await _login(client, "alle", ADMIN_PASSWORD)


@pytest.fixture()
async def viewer_headers(client) -> dict:
    return await _login(client, "ali")
