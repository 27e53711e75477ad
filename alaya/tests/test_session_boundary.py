from __future__ import annotations

from datetime import UTC, datetime

from alaya.domain.users.entities import User
from alaya.interfaces.http.session_boundary import (
    SessionBoundary,
    clear_session_cookie,
    extract_bearer_token,
    extract_token,
    session_cookie,
)
from alaya.shared.errors import StorageError


class StubSessions:
    def __init__(self, tokens: dict[str, User] | None = None, *, fail: bool = False) -> None:
        self._tokens = tokens or {}
        self._fail = fail

    def create_session(self, user_id: str) -> str:
        raise NotImplementedError

    def validate_session(self, token: str) -> User | None:
        if self._fail:
            raise StorageError("validate_session")
        return self._tokens.get(token)

    def delete_session(self, token: str) -> None:
        self._tokens.pop(token, None)


ALICE = User(id="u-1", username="alice", password_hash="x", created_at=datetime.now(UTC))


def test_extract_token_picks_session_cookie_among_others() -> None:
    headers = {"Cookie": "foo=bar; session_token=abc123; baz=qux"}

    assert extract_token(headers) == "abc123"


def test_extract_token_trims_segments_and_takes_first_match() -> None:
    headers = {"Cookie": "  session_token=first ;session_token=second"}

    assert extract_token(headers) == "first"


def test_extract_token_absent_or_unmatched() -> None:
    assert extract_token({}) is None
    assert extract_token({"Cookie": ""}) is None
    assert extract_token({"Cookie": "foo=bar; xsession_token=abc"}) is None
    assert extract_token({"Cookie": "session_token="}) is None


def test_extract_bearer_token() -> None:
    assert extract_bearer_token({"Authorization": "Bearer abc123"}) == "abc123"
    assert extract_bearer_token({"Authorization": "Basic abc123"}) is None
    assert extract_bearer_token({}) is None


def test_session_cookie_attributes() -> None:
    assert session_cookie("abc123") == (
        "session_token=abc123; HttpOnly; Path=/; SameSite=Lax; Max-Age=604800"
    )
    assert session_cookie("abc123", secure=True).endswith("; Secure")


def test_clear_cookie_expires_immediately() -> None:
    cookie = clear_session_cookie()

    assert cookie.startswith("session_token=;")
    assert "Max-Age=0" in cookie
    assert "Path=/" in cookie


def test_current_user_resolves_cookie_token() -> None:
    boundary = SessionBoundary(sessions=StubSessions({"abc123": ALICE}))

    user = boundary.current_user({"Cookie": "session_token=abc123"})

    assert user == ALICE


def test_current_user_falls_back_to_bearer_token() -> None:
    boundary = SessionBoundary(sessions=StubSessions({"abc123": ALICE}))

    assert boundary.current_user({"Authorization": "Bearer abc123"}) == ALICE


def test_current_user_is_anonymous_without_token_or_for_unknown_token() -> None:
    boundary = SessionBoundary(sessions=StubSessions({"abc123": ALICE}))

    assert boundary.current_user({}) is None
    assert boundary.current_user({"Cookie": "session_token=nope"}) is None


def test_current_user_collapses_storage_failure_to_anonymous() -> None:
    boundary = SessionBoundary(sessions=StubSessions(fail=True))

    assert boundary.current_user({"Cookie": "session_token=abc123"}) is None
