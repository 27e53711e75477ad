# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from alaya.domain.users.entities import Session as DomainSession
from alaya.domain.users.entities import User as DomainUser
from alaya.domain.users.exceptions import DuplicateUsernameError
from alaya.domain.users.repositories import PasswordHasher, SessionRepository, UserRepository
from alaya.infrastructure.db.models import SessionRow, UserRow
from alaya.infrastructure.unit_of_work import unit_of_work_scope
from alaya.shared.errors import StorageError
from alaya.shared.logging import logger


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _to_domain(row: UserRow) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        created_at=_as_utc(row.created_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(
        self,
        session_factory: sessionmaker,
        *,
        password_hasher: PasswordHasher,
    ) -> None:
        self._session_factory = session_factory
        self._password_hasher = password_hasher

    def _username_taken(self, username: str) -> bool:
        with unit_of_work_scope(self._session_factory, "username_lookup") as session:
            stmt = select(UserRow.id).where(UserRow.username == username)
            return session.execute(stmt).first() is not None

    def create_user(self, username: str, password: str) -> str:
        if self._username_taken(username):
            raise DuplicateUsernameError()

        password_hash = self._password_hasher.hash(password)
        user_id = str(uuid.uuid4())

        try:
            with unit_of_work_scope(self._session_factory, "create_user") as session:
                session.add(
                    UserRow(
                        id=user_id,
                        username=username,
                        password_hash=password_hash,
                        created_at=datetime.now(UTC),
                    )
                )
                session.flush()
        except StorageError as exc:
            # A concurrent signup won the race between the check and the insert.
            if isinstance(exc.__cause__, IntegrityError) and self._username_taken(username):
                raise DuplicateUsernameError() from exc.__cause__
            raise

        logger.info(f"users.create: ok user_id={user_id}")
        return user_id

    def verify_credentials(self, username: str, password: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory, "verify_credentials") as session:
            stmt = select(UserRow).where(UserRow.username == username)
            row = session.execute(stmt).scalar_one_or_none()
            user = _to_domain(row) if row else None

        if user is None:
            return None
        if not self._password_hasher.verify(password, user.password_hash):
            return None
        return user

    def find_by_id(self, user_id: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory, "find_by_id") as session:
            row = session.get(UserRow, user_id)
            return _to_domain(row) if row else None

    def get_all_users(self) -> list[DomainUser]:
        with unit_of_work_scope(self._session_factory, "get_all_users") as session:
            stmt = select(UserRow).order_by(UserRow.created_at.desc())
            return [_to_domain(row) for row in session.execute(stmt).scalars()]

    def get_user_count(self) -> int:
        with unit_of_work_scope(self._session_factory, "get_user_count") as session:
            return int(session.execute(select(func.count(UserRow.id))).scalar_one())


class SqlAlchemySessionRepository(SessionRepository):
    def __init__(
        self,
        session_factory: sessionmaker,
        *,
        max_age: timedelta | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._max_age = max_age

    def create_session(self, user_id: str) -> str:
        record = DomainSession(
            id=str(uuid.uuid4()),
            user_id=user_id,
            token=str(uuid.uuid4()),
            created_at=datetime.now(UTC),
        )
        with unit_of_work_scope(self._session_factory, "create_session") as session:
            session.add(
                SessionRow(
                    id=record.id,
                    user_id=record.user_id,
                    token=record.token,
                    created_at=record.created_at,
                )
            )

        logger.info(f"sessions.create: ok user_id={user_id} tok={record.token[:8]}…")
        return record.token

    def validate_session(self, token: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory, "validate_session") as session:
            stmt = (
                select(SessionRow.created_at, UserRow)
                .join(UserRow, SessionRow.user_id == UserRow.id)
                .where(SessionRow.token == token)
            )
            result = session.execute(stmt).first()
            if result is None:
                return None
            created_at, row = result
            user = _to_domain(row)

        if self._max_age is not None and datetime.now(UTC) - _as_utc(created_at) > self._max_age:
            logger.debug(f"sessions.validate: expired session for user_id={user.id}")
            return None
        return user

    def delete_session(self, token: str) -> None:
        with unit_of_work_scope(self._session_factory, "delete_session") as session:
            deleted = session.execute(delete(SessionRow).where(SessionRow.token == token)).rowcount

        logger.info(f"sessions.delete: removed={deleted}")
