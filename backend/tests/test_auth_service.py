from __future__ import annotations

from types import SimpleNamespace
from typing import Optional

import pytest
from sqlalchemy.exc import IntegrityError

from publicconnect.models.auth_schema import LoginRequest, RegisterRequest
from publicconnect.services.auth_service import (
    EMAIL_IN_USE,
    INVALID_CREDENTIALS,
    REGISTER_FAILED,
    AuthService,
)
from publicconnect.services.security import PasswordHasher, TokenService
from publicconnect.utils.errors import ErrorKind

PASSWORD = "password123"


class InMemoryStorage:
    def __init__(self) -> None:
        self.users: dict[int, SimpleNamespace] = {}
        self._seq = 1
        self.fail_on_create = False

    async def get_user_by_id(self, user_id: int) -> Optional[SimpleNamespace]:
        return self.users.get(user_id)

    async def get_user_by_email(self, email: str) -> Optional[SimpleNamespace]:
        return next((u for u in self.users.values() if u.email == email), None)

    async def create_user(self, full_name, email, phone, password_hash, is_admin=False):
        if self.fail_on_create or any(u.phone == phone for u in self.users.values()):
            raise IntegrityError("INSERT INTO users", {}, Exception("UNIQUE constraint failed"))
        user = SimpleNamespace(
            id=self._seq,
            full_name=full_name,
            email=email,
            phone=phone,
            password=password_hash,
            is_admin=is_admin,
        )
        self.users[user.id] = user
        self._seq += 1
        return user


class CountingHasher(PasswordHasher):
    def __init__(self) -> None:
        super().__init__(rounds=4)
        self.verifications = 0

    def verify(self, password: str, hashed_password: str) -> bool:
        self.verifications += 1
        return super().verify(password, hashed_password)

    def dummy_verify(self) -> bool:
        self.verifications += 1
        return super().dummy_verify()


def _register_request(**overrides) -> RegisterRequest:
    data = {
        "fullName": "Jane Roe",
        "email": "jane@example.com",
        "phone": "5551234567",
        "password": PASSWORD,
        "confirmPassword": PASSWORD,
    }
    data.update(overrides)
    return RegisterRequest.model_validate(data)


@pytest.fixture()
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture()
def hasher() -> CountingHasher:
    return CountingHasher()


@pytest.fixture()
def tokens() -> TokenService:
    return TokenService("service-secret")


@pytest.fixture()
def service(storage, hasher, tokens) -> AuthService:
    return AuthService(storage, hasher, tokens)


async def test_register_creates_non_admin_with_hashed_password(service, storage, hasher, tokens):
    outcome = await service.register(_register_request())

    assert outcome.ok
    assert len(storage.users) == 1
    user = storage.users[outcome.user.id]
    assert user.is_admin is False
    assert user.password != PASSWORD
    assert hasher.verify(PASSWORD, user.password)
    assert tokens.verify(outcome.token).user_id == user.id


async def test_register_duplicate_email_is_conflict(service, storage):
    await service.register(_register_request())

    outcome = await service.register(_register_request(phone="5550000000"))

    assert not outcome.ok
    assert outcome.error is ErrorKind.CONFLICT
    assert outcome.message == EMAIL_IN_USE
    assert len(storage.users) == 1


async def test_register_store_failure_is_unexpected(service, storage):
    storage.fail_on_create = True

    outcome = await service.register(_register_request())

    assert outcome.error is ErrorKind.UNEXPECTED
    assert outcome.message == REGISTER_FAILED
    assert storage.users == {}


async def test_register_duplicate_phone_surfaces_as_unexpected(service, storage):
    await service.register(_register_request())

    outcome = await service.register(_register_request(email="other@example.com"))

    assert outcome.error is ErrorKind.UNEXPECTED
    assert len(storage.users) == 1


async def test_login_success_returns_token_for_user(service, tokens):
    registered = await service.register(_register_request())

    outcome = await service.login(LoginRequest(email="jane@example.com", password=PASSWORD))

    assert outcome.ok
    assert outcome.user.id == registered.user.id
    assert tokens.verify(outcome.token).user_id == registered.user.id


async def test_login_failures_are_indistinguishable(service, hasher):
    await service.register(_register_request())
    hasher.verifications = 0

    wrong_password = await service.login(LoginRequest(email="jane@example.com", password="nope-nope"))
    unknown_email = await service.login(LoginRequest(email="ghost@example.com", password=PASSWORD))

    assert wrong_password.error is unknown_email.error is ErrorKind.AUTHENTICATION
    assert wrong_password.message == unknown_email.message == INVALID_CREDENTIALS
    assert wrong_password.user is None and unknown_email.user is None
    # both paths run exactly one bcrypt computation
    assert hasher.verifications == 2
