# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from alaya.application.services.password_hashing import Argon2PasswordHasher
from alaya.application.use_cases.users.list_users import ListUsersUseCase
from alaya.application.use_cases.users.login_user import LoginUserUseCase
from alaya.application.use_cases.users.logout_user import LogoutUserUseCase
from alaya.application.use_cases.users.signup_user import SignupUserUseCase
from alaya.domain.users.repositories import PasswordHasher
from alaya.infrastructure.db import create_db_engine, create_session_factory
from alaya.infrastructure.repositories.users import (
    SqlAlchemySessionRepository,
    SqlAlchemyUserRepository,
)
from alaya.interfaces.http.controllers.api_controller import ApiController
from alaya.interfaces.http.controllers.auth_controller import AuthController
from alaya.interfaces.http.rendering import JsonPageRenderer, PageRenderer
from alaya.interfaces.http.session_boundary import SessionBoundary
from alaya.shared.config import AppConfig


class Container:
    """Wires one engine, one set of repositories and the controllers per app."""

    def __init__(
        self,
        config: AppConfig,
        *,
        engine: Engine | None = None,
        password_hasher: PasswordHasher | None = None,
        renderer: PageRenderer | None = None,
    ) -> None:
        self.config = config
        self._engine = engine
        self._password_hasher = password_hasher
        self._renderer = renderer

    @cached_property
    def engine(self) -> Engine:
        return self._engine or create_db_engine(self.config.database)

    @cached_property
    def session_factory(self) -> sessionmaker:
        return create_session_factory(self.engine)

    @cached_property
    def password_hasher(self) -> PasswordHasher:
        return self._password_hasher or Argon2PasswordHasher()

    @cached_property
    def renderer(self) -> PageRenderer:
        return self._renderer or JsonPageRenderer()

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(
            self.session_factory, password_hasher=self.password_hasher
        )

    @cached_property
    def session_repository(self) -> SqlAlchemySessionRepository:
        max_age = self.config.session_max_age_seconds
        return SqlAlchemySessionRepository(
            self.session_factory,
            max_age=timedelta(seconds=max_age) if max_age else None,
        )

    @cached_property
    def session_boundary(self) -> SessionBoundary:
        return SessionBoundary(
            sessions=self.session_repository,
            signups_disabled=self.config.signups_disabled,
            cookie_secure=self.config.security.cookie_secure,
        )

    @cached_property
    def signup_user_use_case(self) -> SignupUserUseCase:
        return SignupUserUseCase(
            users=self.user_repository,
            sessions=self.session_repository,
            signups_disabled=self.config.signups_disabled,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(users=self.user_repository, sessions=self.session_repository)

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(sessions=self.session_repository)

    @cached_property
    def list_users_use_case(self) -> ListUsersUseCase:
        return ListUsersUseCase(users=self.user_repository)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            boundary=self.session_boundary,
            signup_use_case=self.signup_user_use_case,
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            renderer=self.renderer,
        )

    @cached_property
    def api_controller(self) -> ApiController:
        return ApiController(
            boundary=self.session_boundary,
            signup_use_case=self.signup_user_use_case,
            login_use_case=self.login_user_use_case,
            list_users_use_case=self.list_users_use_case,
        )
