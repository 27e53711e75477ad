"""Use-case for revoking sessions."""

from __future__ import annotations

from alaya.domain.users.repositories import SessionRepository
from alaya.shared.errors import StorageError
from alaya.shared.logging import logger


class LogoutUserUseCase:
    def __init__(self, *, sessions: SessionRepository) -> None:
        self._sessions = sessions

    def execute(self, token: str | None) -> None:
        if not token:
            return
        try:
            self._sessions.delete_session(token)
        except StorageError:
            # The client cookie is cleared regardless.
            logger.error("auth.logout: failed to delete session")
