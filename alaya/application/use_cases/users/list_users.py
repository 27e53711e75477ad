# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from alaya.domain.users.entities import User
from alaya.domain.users.repositories import UserRepository


class ListUsersUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self) -> list[User]:
        return self._users.get_all_users()

    def count(self) -> int:
        return self._users.get_user_count()
