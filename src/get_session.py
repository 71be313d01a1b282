"""Telegram authorization and session persistence.

Credentials are requested through a small provider interface so the login
flow can run interactively, from pre-supplied values, or not at all.
"""

from __future__ import annotations

import logging
import os
from getpass import getpass
from typing import Optional, Protocol

from telethon import TelegramClient, errors

from adapters.env_file import update_env_key
from core.errors import AuthorizationError
from core.ports import AuditLogPort

LOGGER = logging.getLogger(__name__)

SESSION_KEY = "SESSION"


class CredentialProvider(Protocol):
    """Source of the values Telegram asks for during login."""

    def phone(self) -> str:
        ...

    def code(self) -> str:
        ...

    def password(self) -> str:
        ...


class ConsoleCredentials:
    """Prompt on the console, preferring values preset in the environment."""

    def __init__(self, phone: Optional[str] = None, password: Optional[str] = None) -> None:
        self._phone = phone
        self._password = password

    def phone(self) -> str:
        return self._phone or input("Please enter your phone number: ").strip()

    def code(self) -> str:
        return input("Please enter the code you received: ").strip()

    def password(self) -> str:
        return self._password or getpass("Please enter your 2FA password: ")


class StaticCredentials:
    """Pre-supplied answers, for unattended logins and tests."""

    def __init__(self, phone: str, code: str, password: Optional[str] = None) -> None:
        self._phone = phone
        self._code = code
        self._password = password

    def phone(self) -> str:
        return self._phone

    def code(self) -> str:
        return self._code

    def password(self) -> str:
        if self._password is None:
            raise AuthorizationError("A 2FA password is required but none was supplied")
        return self._password


class NoCredentials:
    """Refuse to log in; the stored session must already be authorized."""

    def _refuse(self) -> str:
        raise AuthorizationError("Session is not authorized and interactive login is disabled")

    def phone(self) -> str:
        return self._refuse()

    def code(self) -> str:
        return self._refuse()

    def password(self) -> str:
        return self._refuse()


def build_credentials(method: Optional[str] = None) -> CredentialProvider:
    """Pick a provider from LOGIN_METHOD: console (default), env, or none."""

    method = (method or os.getenv("LOGIN_METHOD") or "console").strip().lower()
    if method == "console":
        return ConsoleCredentials(phone=os.getenv("PHONE"), password=os.getenv("2FA"))
    if method == "env":
        phone = os.getenv("PHONE")
        code = os.getenv("LOGIN_CODE")
        if not phone or not code:
            raise AuthorizationError("LOGIN_METHOD=env requires PHONE and LOGIN_CODE")
        return StaticCredentials(phone=phone, code=code, password=os.getenv("2FA"))
    if method == "none":
        return NoCredentials()
    raise ValueError(f"Unsupported LOGIN_METHOD: {method}")


async def authorize(client: TelegramClient, credentials: CredentialProvider) -> None:
    """Log in with phone, code and, when asked for, the 2FA password.

    Already-authorized sessions are left untouched. There is no retry loop.
    """

    if await client.is_user_authorized():
        return

    phone = credentials.phone()
    await client.send_code_request(phone)
    try:
        await client.sign_in(phone=phone, code=credentials.code())
    except errors.SessionPasswordNeededError:
        await client.sign_in(password=credentials.password())


def save_session_if_changed(
    client: TelegramClient,
    previous: str,
    env_path: str,
    audit: AuditLogPort,
) -> bool:
    """Persist the client's session string when it differs from ``previous``."""

    current = client.session.save()
    if current == (previous or ""):
        return False

    LOGGER.info("New session string generated. Saving to %s", env_path)
    update_env_key(env_path, SESSION_KEY, current)
    audit.record("New session string generated and saved")
    return True
