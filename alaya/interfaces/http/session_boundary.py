# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Cookie handling and per-request identity resolution.

Every handler that mutates state asks :meth:`SessionBoundary.current_user`
first. Resolution never raises: a missing cookie, an unknown token and a
storage failure all read as anonymous.
"""

from __future__ import annotations

from collections.abc import Mapping

from alaya.domain.users.entities import User
from alaya.domain.users.repositories import SessionRepository
from alaya.shared.logging import logger

SESSION_COOKIE_NAME = "session_token"
SESSION_COOKIE_MAX_AGE = 60 * 60 * 24 * 7


def extract_token(headers: Mapping[str, str]) -> str | None:
    cookie_header = headers.get("Cookie")
    if not cookie_header:
        return None

    prefix = f"{SESSION_COOKIE_NAME}="
    for cookie in cookie_header.split(";"):
        trimmed = cookie.strip()
        if trimmed.startswith(prefix):
            return trimmed[len(prefix):] or None
    return None


def extract_bearer_token(headers: Mapping[str, str]) -> str | None:
    auth = headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        return auth[7:].strip() or None
    return None


def session_cookie(token: str, *, secure: bool = False) -> str:
    cookie = (
        f"{SESSION_COOKIE_NAME}={token}; HttpOnly; Path=/; SameSite=Lax; "
        f"Max-Age={SESSION_COOKIE_MAX_AGE}"
    )
    return f"{cookie}; Secure" if secure else cookie


def clear_session_cookie(*, secure: bool = False) -> str:
    cookie = f"{SESSION_COOKIE_NAME}=; Max-Age=0; Path=/; HttpOnly; SameSite=Lax"
    return f"{cookie}; Secure" if secure else cookie


class SessionBoundary:
    def __init__(
        self,
        *,
        sessions: SessionRepository,
        signups_disabled: bool = False,
        cookie_secure: bool = False,
    ) -> None:
        self._sessions = sessions
        self.signups_disabled = signups_disabled
        self.cookie_secure = cookie_secure

    def request_token(self, headers: Mapping[str, str]) -> str | None:
        return extract_token(headers) or extract_bearer_token(headers)

    def current_user(self, headers: Mapping[str, str]) -> User | None:
        token = self.request_token(headers)
        if not token:
            return None
        try:
            return self._sessions.validate_session(token)
        except Exception:
            logger.exception("session_boundary: session lookup failed, treating as anonymous")
            return None

    def session_cookie(self, token: str) -> str:
        return session_cookie(token, secure=self.cookie_secure)

    def clear_cookie(self) -> str:
        return clear_session_cookie(secure=self.cookie_secure)
