from __future__ import annotations

from collections.abc import Iterator

import pytest
from flask import Flask
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from alaya.app import create_app
from alaya.application.services.password_hashing import Argon2PasswordHasher
from alaya.infrastructure.container import Container
from alaya.infrastructure.db import create_db_engine, create_session_factory, init_db
from alaya.shared.config import AppConfig, DatabaseConfig


@pytest.fixture(autouse=True)
def _log_to_tmp(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "alaya.log"))


@pytest.fixture()
def fast_hasher() -> Argon2PasswordHasher:
    return Argon2PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture()
def engine() -> Iterator[Engine]:
    eng = create_db_engine(DatabaseConfig(url="sqlite://"))
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker:
    return create_session_factory(engine)


def _config(**overrides) -> AppConfig:
    return AppConfig(database=DatabaseConfig(url="sqlite://"), **overrides)


@pytest.fixture()
def make_app(fast_hasher: Argon2PasswordHasher):
    def factory(**overrides) -> Flask:
        config = _config(**overrides)
        return create_app(container=Container(config, password_hasher=fast_hasher))

    return factory


@pytest.fixture()
def app(make_app) -> Flask:
    return make_app()


@pytest.fixture()
def container(app: Flask) -> Container:
    return app.extensions["alaya.container"]
