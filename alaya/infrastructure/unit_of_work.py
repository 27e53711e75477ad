# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Transaction scope shared by the SQLAlchemy repositories."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from alaya.shared.errors import StorageError
from alaya.shared.logging import logger


@contextmanager
def unit_of_work_scope(session_factory: sessionmaker, operation: str) -> Iterator[Session]:
    """Run one repository operation in its own transaction.

    Commits when the block exits cleanly and rolls back otherwise. Any
    ``SQLAlchemyError`` is logged and re-raised as ``StorageError`` tagged
    with ``operation``; the original error stays available as ``__cause__``.
    Domain errors raised inside the block pass through untouched.
    """
    try:
        with session_factory.begin() as session:
            yield session
    except SQLAlchemyError as exc:
        logger.exception(f"{operation}: storage failure ({type(exc).__name__})")
        raise StorageError(operation) from exc
