from __future__ import annotations

from typing import Any, AsyncIterator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from publicconnect.config.database import init_models
from publicconnect.config.settings import Settings
from publicconnect.main import create_app
from publicconnect.services.storage import DatabaseStorage

TEST_SECRET = "test-secret-key"
PASSWORD = "secret-password"


def registration_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "fullName": "John Doe",
        "email": "john@example.com",
        "phone": "9876543210",
        "password": PASSWORD,
        "confirmPassword": PASSWORD,
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        environment="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        upload_dir=tmp_path / "uploads",
        max_upload_bytes=1024,
        create_tables=False,
    )


@pytest_asyncio.fixture()
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    application = create_app(settings)
    await init_models(application.state.engine)
    yield application
    await application.state.engine.dispose()


@pytest_asyncio.fixture()
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


@pytest_asyncio.fixture()
async def storage(app: FastAPI) -> AsyncIterator[DatabaseStorage]:
    async with app.state.session_factory() as session:
        yield DatabaseStorage(session)


async def register(client: httpx.AsyncClient, **overrides: Any) -> httpx.Response:
    return await client.post("/api/auth/register", json=registration_payload(**overrides))


async def register_admin(
    client: httpx.AsyncClient, app: FastAPI, **overrides: Any
) -> httpx.Response:
    """Register a user through the API, then flip the admin flag in the store."""
    response = await register(client, **overrides)
    assert response.status_code == 201
    async with app.state.session_factory() as session:
        await DatabaseStorage(session).set_user_as_admin(response.json()["user"]["id"])
    return response
