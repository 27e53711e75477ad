# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from alaya.domain.users.entities import User
from alaya.domain.users.exceptions import (
    EmptyPasswordError,
    EmptyUsernameError,
    InvalidCredentialsError,
)
from alaya.domain.users.repositories import SessionRepository, UserRepository


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        sessions: SessionRepository,
    ) -> None:
        self._users = users
        self._sessions = sessions

    def authenticate(self, username: str, password: str) -> User:
        if not username:
            raise EmptyUsernameError()
        if not password:
            raise EmptyPasswordError()

        user = self._users.verify_credentials(username, password)
        if user is None:
            raise InvalidCredentialsError()
        return user

    def execute(self, username: str, password: str) -> tuple[User, str]:
        user = self.authenticate(username, password)
        token = self._sessions.create_session(user.id)
        return user, token
