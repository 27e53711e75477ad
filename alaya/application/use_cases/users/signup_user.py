# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from alaya.domain.users.entities import User
from alaya.domain.users.exceptions import (
    EmptyUsernameError,
    PasswordMismatchError,
    PasswordTooShortError,
    SignupsDisabledError,
)
from alaya.domain.users.repositories import SessionRepository, UserRepository
from alaya.shared.errors import StorageError

MIN_PASSWORD_LENGTH = 8


class SignupUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        sessions: SessionRepository,
        signups_disabled: bool = False,
    ) -> None:
        self._users = users
        self._sessions = sessions
        self.signups_disabled = signups_disabled

    def validate(self, username: str, password: str, confirm_password: str | None) -> None:
        if self.signups_disabled:
            raise SignupsDisabledError()
        if not username:
            raise EmptyUsernameError()
        if len(password) < MIN_PASSWORD_LENGTH:
            raise PasswordTooShortError(context={"min_length": MIN_PASSWORD_LENGTH})
        if confirm_password is not None and password != confirm_password:
            raise PasswordMismatchError()

    def create_account(
        self, username: str, password: str, confirm_password: str | None = None
    ) -> User:
        """Validate and persist a new user without opening a session."""
        self.validate(username, password, confirm_password)
        user_id = self._users.create_user(username, password)
        user = self._users.find_by_id(user_id)
        if user is None:
            raise StorageError("create_user")
        return user

    def execute(
        self, username: str, password: str, confirm_password: str | None = None
    ) -> tuple[User, str]:
        user = self.create_account(username, password, confirm_password)
        token = self._sessions.create_session(user.id)
        return user, token
