from __future__ import annotations

import asyncio

import pytest
from telethon import errors

from core.errors import AuthorizationError
from fakes import FakeAudit
from get_session import (
    ConsoleCredentials,
    NoCredentials,
    StaticCredentials,
    authorize,
    build_credentials,
    save_session_if_changed,
)


class DummySession:
    def __init__(self, value: str) -> None:
        self._value = value

    def save(self) -> str:
        return self._value


class DummyClient:
    def __init__(self, authorized: bool = False, needs_password: bool = False, session: str = "") -> None:
        self._authorized = authorized
        self._needs_password = needs_password
        self.session = DummySession(session)
        self.calls: list[tuple] = []

    async def is_user_authorized(self) -> bool:
        return self._authorized

    async def send_code_request(self, phone: str) -> None:
        self.calls.append(("send_code_request", phone))

    async def sign_in(self, phone=None, code=None, password=None) -> None:
        self.calls.append(("sign_in", phone, code, password))
        if code is not None and self._needs_password:
            raise errors.SessionPasswordNeededError(request=None)
        self._authorized = True


def test_authorized_session_is_left_alone() -> None:
    client = DummyClient(authorized=True)
    asyncio.run(authorize(client, NoCredentials()))
    assert client.calls == []


def test_phone_and_code_login() -> None:
    client = DummyClient()
    asyncio.run(authorize(client, StaticCredentials(phone="+15550100", code="12345")))
    assert client.calls == [
        ("send_code_request", "+15550100"),
        ("sign_in", "+15550100", "12345", None),
    ]


def test_two_factor_password_is_requested_when_needed() -> None:
    client = DummyClient(needs_password=True)
    asyncio.run(authorize(client, StaticCredentials(phone="+15550100", code="12345", password="hunter2")))
    assert client.calls[-1] == ("sign_in", None, None, "hunter2")


def test_missing_password_raises_authorization_error() -> None:
    client = DummyClient(needs_password=True)
    with pytest.raises(AuthorizationError):
        asyncio.run(authorize(client, StaticCredentials(phone="+15550100", code="12345")))


def test_no_credentials_refuses_unauthorized_session() -> None:
    with pytest.raises(AuthorizationError):
        asyncio.run(authorize(DummyClient(), NoCredentials()))


def test_console_credentials_prefer_preset_values(monkeypatch) -> None:
    monkeypatch.setattr("builtins.input", lambda prompt: " 424242 ")
    credentials = ConsoleCredentials(phone="+15550100", password="hunter2")
    assert credentials.phone() == "+15550100"
    assert credentials.code() == "424242"
    assert credentials.password() == "hunter2"


def test_build_credentials_from_method(monkeypatch) -> None:
    monkeypatch.setenv("PHONE", "+15550100")
    monkeypatch.setenv("LOGIN_CODE", "12345")
    assert isinstance(build_credentials("console"), ConsoleCredentials)
    assert isinstance(build_credentials("env"), StaticCredentials)
    assert isinstance(build_credentials("NONE"), NoCredentials)
    with pytest.raises(ValueError):
        build_credentials("qr")


def test_env_method_requires_phone_and_code(monkeypatch) -> None:
    monkeypatch.delenv("PHONE", raising=False)
    monkeypatch.delenv("LOGIN_CODE", raising=False)
    with pytest.raises(AuthorizationError):
        build_credentials("env")


def test_unchanged_session_is_not_written(tmp_path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text("SESSION=same\n", encoding="utf-8")
    audit = FakeAudit()

    changed = save_session_if_changed(DummyClient(session="same"), "same", str(env_path), audit)

    assert changed is False
    assert audit.lines == []
    assert env_path.read_text(encoding="utf-8") == "SESSION=same\n"


def test_new_session_is_persisted(tmp_path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text("API_ID=1\nSESSION=\n", encoding="utf-8")
    audit = FakeAudit()

    changed = save_session_if_changed(DummyClient(session="fresh"), "", str(env_path), audit)

    assert changed is True
    assert env_path.read_text(encoding="utf-8").splitlines() == ["API_ID=1", "SESSION=fresh"]
    assert audit.lines == ["New session string generated and saved"]
