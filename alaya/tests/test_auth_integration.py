from __future__ import annotations

from unittest.mock import MagicMock

from argon2.exceptions import HashingError
from flask import Flask
from loguru import logger as loguru_logger
from sqlalchemy import func, select

from alaya.infrastructure.container import Container
from alaya.infrastructure.db.models import SessionRow
from alaya.shared.errors import StorageError


def _session_count(container: Container) -> int:
    with container.session_factory() as session:
        return session.execute(select(func.count(SessionRow.id))).scalar_one()


def _signup(client, username: str = "alice", password: str = "longenough1", confirm=None):
    return client.post(
        "/signup",
        data={
            "username": username,
            "password": password,
            "confirm_password": password if confirm is None else confirm,
        },
    )


def test_signup_issues_cookie_and_resolves_identity(app: Flask, container: Container) -> None:
    with app.test_client() as client:
        response = _signup(client, "  alice ")

        assert response.status_code == 303
        assert response.headers["Location"].endswith("/")
        cookie = response.headers["Set-Cookie"]
        assert cookie.startswith("session_token=")
        for attribute in ("HttpOnly", "Path=/", "SameSite=Lax", "Max-Age=604800"):
            assert attribute in cookie

        token = client.get_cookie("session_token").value
        assert container.session_repository.validate_session(token).username == "alice"

        profile = client.get("/profile")
        assert profile.status_code == 200
        assert profile.get_json()["username"] == "alice"
        assert profile.get_json()["is_authenticated"] is True


def test_signup_short_password_is_rejected(app: Flask, container: Container) -> None:
    with app.test_client() as client:
        response = _signup(client, password="short")

    assert response.status_code == 200
    body = response.get_json()
    assert body["page"] == "signup"
    assert body["form_username"] == "alice"
    assert "at least 8 characters" in body["error_message"]
    assert "Set-Cookie" not in response.headers
    assert container.user_repository.get_user_count() == 0


def test_signup_mismatch_and_duplicate(app: Flask, container: Container) -> None:
    with app.test_client() as client:
        mismatch = _signup(client, confirm="longenough2")
        assert mismatch.get_json()["error_message"] == "Passwords do not match"

        assert _signup(client).status_code == 303

    with app.test_client() as other:
        duplicate = _signup(other)

    assert duplicate.get_json()["error_message"] == "Username already exists"
    assert container.user_repository.get_user_count() == 1


def test_login_unknown_user_is_rejected(app: Flask, container: Container) -> None:
    with app.test_client() as client:
        response = client.post("/login", data={"username": "bob", "password": "longenough1"})

        assert response.status_code == 200
        assert response.get_json()["error_message"] == "Invalid username or password"
        assert "Set-Cookie" not in response.headers
        assert client.get_cookie("session_token") is None

    assert _session_count(container) == 0


def test_login_after_signup(app: Flask, container: Container) -> None:
    with app.test_client() as client:
        _signup(client)

    with app.test_client() as client:
        wrong = client.post("/login", data={"username": "alice", "password": "nope-nope"})
        assert wrong.get_json()["error_message"] == "Invalid username or password"

        response = client.post("/login", data={"username": "alice", "password": "longenough1"})
        assert response.status_code == 303

        token = client.get_cookie("session_token").value
        assert container.session_repository.validate_session(token).username == "alice"
        assert client.get("/login").status_code == 303


def test_logout_clears_cookie_and_server_session(app: Flask, container: Container) -> None:
    with app.test_client() as client:
        _signup(client)
        token = client.get_cookie("session_token").value

        response = client.post("/logout")

        assert response.status_code == 303
        assert response.headers["Location"].endswith("/login")
        assert "Max-Age=0" in response.headers["Set-Cookie"]
        assert container.session_repository.validate_session(token) is None

        assert client.get("/profile").status_code == 303


def test_unknown_cookie_is_anonymous(app: Flask) -> None:
    with app.test_client() as client:
        client.set_cookie("session_token", "forged")

        response = client.get("/")

    assert response.status_code == 200
    assert response.get_json()["is_authenticated"] is False


def test_signups_disabled(make_app) -> None:
    app = make_app(signups_disabled=True)

    with app.test_client() as client:
        page = client.get("/signup")
        submit = _signup(client)
        login_page = client.get("/login")

    assert page.status_code == 403
    assert page.get_data(as_text=True) == "signups are disabled."
    assert submit.status_code == 403
    assert login_page.get_json()["signups_disabled"] is True


def test_infrastructure_failures_render_generic_messages(app: Flask, container: Container) -> None:
    def _fail(user_id: str) -> str:
        raise StorageError("create_session")

    container.session_repository.create_session = _fail

    with app.test_client() as client:
        response = _signup(client)

    assert response.status_code == 200
    assert response.get_json()["error_message"] == "Could not create session. Please try again."
    assert "Set-Cookie" not in response.headers


def test_hashing_failure_renders_generic_signup_message(app: Flask, container: Container) -> None:
    failing = MagicMock()
    failing.hash.side_effect = HashingError("argon2 ran out of memory")
    container.password_hasher._ph = failing

    with app.test_client() as client:
        response = _signup(client)

    assert response.status_code == 200
    assert response.get_json()["error_message"] == "Could not create account. Please try again."
    assert "Set-Cookie" not in response.headers
    assert container.user_repository.get_user_count() == 0


def test_rejected_login_renders_anonymous_page_for_signed_in_caller(app: Flask) -> None:
    with app.test_client() as client:
        _signup(client)

        response = client.post("/login", data={"username": "bob", "password": "longenough1"})
        body = response.get_json()

        assert body["error_message"] == "Invalid username or password"
        assert body["form_username"] == "bob"
        assert body["is_authenticated"] is False
        assert body["username"] == ""

        rejected_signup = _signup(client, "carol", password="short")
        assert rejected_signup.get_json()["is_authenticated"] is False

        assert client.get("/profile").get_json()["username"] == "alice"


def test_request_log_names_the_signed_in_user(app: Flask, container: Container) -> None:
    messages: list[str] = []
    sink_id = loguru_logger.add(messages.append, format="{message}", level="INFO")
    try:
        with app.test_client() as client:
            _signup(client)
            client.get("/profile")
    finally:
        loguru_logger.remove(sink_id)

    user = container.user_repository.verify_credentials("alice", "longenough1")
    signed_in = [m for m in messages if f"user={user.id}" in m]
    assert any(m.startswith("POST /signup -> 303") for m in signed_in)
    assert any(m.startswith("GET /profile -> 200") for m in signed_in)
