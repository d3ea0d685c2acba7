from __future__ import annotations

import httpx
from sqlalchemy import func, select

from conftest import PASSWORD, register, registration_payload
from publicconnect.config.database import init_models
from publicconnect.main import create_app
from publicconnect.models.user import User


async def _user_count(app, email: str) -> int:
    async with app.state.session_factory() as session:
        result = await session.execute(select(func.count(User.id)).where(User.email == email))
        return result.scalar_one()


async def test_register_returns_user_and_sets_cookie(client, app, storage):
    response = await register(client)

    assert response.status_code == 201
    user = response.json()["user"]
    assert user["email"] == "john@example.com"
    assert user["fullName"] == "John Doe"
    assert user["isAdmin"] is False
    assert "password" not in user

    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith("token=")
    assert "HttpOnly" in set_cookie
    assert "Max-Age=604800" in set_cookie
    assert "Secure" not in set_cookie

    stored = await storage.get_user_by_email("john@example.com")
    assert stored.password != PASSWORD
    assert app.state.hasher.verify(PASSWORD, stored.password)


async def test_production_cookie_is_secure(settings):
    app = create_app(settings.model_copy(update={"environment": "production"}))
    await init_models(app.state.engine)
    try:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="https://testserver") as c:
            response = await register(c)
    finally:
        await app.state.engine.dispose()

    assert response.status_code == 201
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith("token=")
    assert "Secure" in set_cookie
    assert "HttpOnly" in set_cookie
    assert "samesite=lax" in set_cookie.lower()


async def test_register_ignores_admin_flag_in_payload(client):
    response = await client.post(
        "/api/auth/register", json=registration_payload(isAdmin=True)
    )

    assert response.status_code == 201
    assert response.json()["user"]["isAdmin"] is False


async def test_register_password_mismatch(client, app):
    response = await register(client, confirmPassword="different-password")

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation error"
    assert body["errors"] == [{"path": ["confirmPassword"], "message": "Passwords don't match"}]
    assert await _user_count(app, "john@example.com") == 0


async def test_register_lists_every_invalid_field(client, app):
    response = await client.post(
        "/api/auth/register",
        json={
            "fullName": "John Doe",
            "email": "not-an-email",
            "phone": "12345",
            "password": "short",
            "confirmPassword": "short",
        },
    )

    assert response.status_code == 400
    paths = {tuple(err["path"]) for err in response.json()["errors"]}
    assert paths == {("email",), ("phone",), ("password",)}
    assert await _user_count(app, "not-an-email") == 0


async def test_register_missing_fields(client):
    response = await client.post("/api/auth/register", json={"email": "a@b.co"})

    assert response.status_code == 400
    paths = {tuple(err["path"]) for err in response.json()["errors"]}
    assert {("fullName",), ("phone",), ("password",), ("confirmPassword",)} <= paths


async def test_register_twice_with_same_email(client, app):
    first = await register(client)
    second = await register(client, phone="1112223333")

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json() == {"message": "Email already in use"}
    assert await _user_count(app, "john@example.com") == 1


async def test_register_duplicate_phone_is_generic_server_error(client, app):
    await register(client)

    response = await register(client, email="jane@example.com")

    assert response.status_code == 500
    assert response.json() == {"message": "Failed to register user"}
    assert await _user_count(app, "jane@example.com") == 0


async def test_login_with_correct_credentials(client, app):
    registered = (await register(client)).json()["user"]
    client.cookies.clear()

    response = await client.post(
        "/api/auth/login", json={"email": "john@example.com", "password": PASSWORD}
    )

    assert response.status_code == 200
    assert response.json()["user"]["id"] == registered["id"]
    claims = app.state.tokens.verify(response.cookies["token"])
    assert claims is not None
    assert claims.user_id == registered["id"]


async def test_login_failures_share_one_message(client):
    await register(client)
    client.cookies.clear()

    wrong_password = await client.post(
        "/api/auth/login", json={"email": "john@example.com", "password": "wrong-password"}
    )
    unknown_email = await client.post(
        "/api/auth/login", json={"email": "nobody@example.com", "password": PASSWORD}
    )

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"message": "Invalid email or password"}
    assert "set-cookie" not in wrong_password.headers
    assert "set-cookie" not in unknown_email.headers


async def test_login_validation(client):
    response = await client.post("/api/auth/login", json={"email": "bad", "password": ""})

    assert response.status_code == 400
    paths = {tuple(err["path"]) for err in response.json()["errors"]}
    assert paths == {("email",), ("password",)}


async def test_logout_is_idempotent(client):
    for _ in range(2):
        response = await client.post("/api/auth/logout")
        assert response.status_code == 200
        assert response.json() == {"message": "Logged out successfully"}
        assert response.headers["set-cookie"].startswith("token=")


async def test_logout_then_current_user_is_unauthorized(client):
    await register(client)
    assert (await client.get("/api/auth/user")).status_code == 200

    await client.post("/api/auth/logout")

    assert (await client.get("/api/auth/user")).status_code == 401


async def test_register_then_fetch_current_user(client):
    response = await register(client, email="john@example.com", phone="0123456789")
    assert response.status_code == 201
    token = response.cookies["token"]
    client.cookies.clear()

    me = await client.get("/api/auth/user", headers={"Cookie": f"token={token}"})

    assert me.status_code == 200
    assert me.json()["email"] == "john@example.com"
    assert me.json()["phone"] == "0123456789"
