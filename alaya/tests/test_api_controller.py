from __future__ import annotations

from unittest.mock import MagicMock

from flask import Flask

from alaya.infrastructure.container import Container
from alaya.shared.errors import InfrastructureError, StorageError


def _register(client, username: str = "alice", password: str = "longenough1"):
    return client.post("/api/register", json={"username": username, "password": password})


def test_register_and_login_return_token(app: Flask, container: Container) -> None:
    with app.test_client() as client:
        register = _register(client)
        assert register.status_code == 200
        assert register.get_json() == {}

        login = client.post("/api/login", json={"username": "alice", "password": "longenough1"})

    assert login.status_code == 200
    token = login.get_json()["token"]
    assert container.session_repository.validate_session(token).username == "alice"


def test_register_rejections(app: Flask) -> None:
    with app.test_client() as client:
        _register(client)
        duplicate = _register(client)
        empty = _register(client, username="   ")
        missing = client.post("/api/register", json={"username": "carol"})

    assert duplicate.status_code == 409
    assert duplicate.get_json()["error"] == "username_taken"
    assert empty.status_code == 400
    assert empty.get_json()["message"] == "Username cannot be empty"
    assert missing.status_code == 422
    assert missing.get_json()["error"] == "validation_error"


def test_login_invalid_credentials_is_401(app: Flask) -> None:
    with app.test_client() as client:
        response = client.post("/api/login", json={"username": "bob", "password": "longenough1"})

    assert response.status_code == 401
    assert response.get_json()["message"] == "Invalid username or password"


def test_me_and_users_require_a_session(app: Flask) -> None:
    with app.test_client() as client:
        assert client.get("/api/me").status_code == 401
        assert client.get("/api/users").status_code == 401

        _register(client, "alice")
        _register(client, "bob")
        token = client.post(
            "/api/login", json={"username": "alice", "password": "longenough1"}
        ).get_json()["token"]
        headers = {"Authorization": f"Bearer {token}"}

        me = client.get("/api/me", headers=headers)
        users = client.get("/api/users", headers=headers)

    assert me.status_code == 200
    assert me.get_json()["username"] == "alice"
    assert "password_hash" not in me.get_json()
    body = users.get_json()
    assert body["count"] == 2
    assert [u["username"] for u in body["users"]] == ["bob", "alice"]
    assert all("password_hash" not in u for u in body["users"])


def test_storage_failure_maps_to_generic_500(app: Flask, container: Container) -> None:
    failing = MagicMock(side_effect=StorageError("create_user"))
    container.user_repository.create_user = failing

    with app.test_client() as client:
        response = _register(client)

    assert response.status_code == 500
    assert response.get_json() == {"error": "storage_error"}


def test_register_applies_signup_rules(app: Flask, make_app) -> None:
    with app.test_client() as client:
        short = _register(client, password="short")

    with make_app(signups_disabled=True).test_client() as client:
        disabled = _register(client)

    assert short.status_code == 400
    assert short.get_json()["error"] == "password_too_short"
    assert disabled.status_code == 403
    assert disabled.get_json()["message"] == "signups are disabled."


def test_hashing_failure_maps_to_generic_500(app: Flask, container: Container) -> None:
    container.password_hasher.hash = MagicMock(
        side_effect=InfrastructureError("hashing_error", context={"operation": "hash_password"})
    )

    with app.test_client() as client:
        response = _register(client)

    assert response.status_code == 500
    assert response.get_json() == {"error": "hashing_error"}
