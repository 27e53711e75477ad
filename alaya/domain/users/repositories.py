# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import User


class PasswordHasher(Protocol):
    def hash(self, password: str | bytes) -> str: ...
    def verify(self, password: str | bytes, hashed: str) -> bool: ...


class UserRepository(Protocol):
    def create_user(self, username: str, password: str) -> str: ...
    def verify_credentials(self, username: str, password: str) -> User | None: ...
    def find_by_id(self, user_id: str) -> User | None: ...
    def get_all_users(self) -> list[User]: ...
    def get_user_count(self) -> int: ...


class SessionRepository(Protocol):
    def create_session(self, user_id: str) -> str: ...
    def validate_session(self, token: str) -> User | None: ...
    def delete_session(self, token: str) -> None: ...
