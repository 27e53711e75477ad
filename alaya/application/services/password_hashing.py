"""Password hashing strategies."""

from __future__ import annotations

from argon2 import PasswordHasher as _Argon2
from argon2 import Type
from argon2.exceptions import (
    HashingError,
    InvalidHashError,
    VerificationError,
    VerifyMismatchError,
)

from alaya.domain.users.repositories import PasswordHasher
from alaya.shared.errors import InfrastructureError
from alaya.shared.logging import logger


class Argon2PasswordHasher(PasswordHasher):
    """Argon2id hashing; every hash carries its own random salt and parameters.

    ``verify`` fails closed: a wrong password and an unparsable stored hash
    both come back as ``False``. Only the log tells them apart.
    """

    def __init__(
        self,
        *,
        time_cost: int = 2,
        memory_cost: int = 19456,
        parallelism: int = 1,
    ) -> None:
        self._ph = _Argon2(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            type=Type.ID,
        )

    def hash(self, password: str | bytes) -> str:
        try:
            return self._ph.hash(password)
        except HashingError as exc:
            logger.exception("password_hashing: argon2 failed to hash")
            raise InfrastructureError(
                "hashing_error", context={"operation": "hash_password"}
            ) from exc

    def verify(self, password: str | bytes, hashed: str) -> bool:
        if not hashed:
            return False
        try:
            return self._ph.verify(hashed, password)
        except VerifyMismatchError:
            return False
        except InvalidHashError:
            logger.warning("password_hashing: stored hash could not be parsed")
            return False
        except VerificationError:
            logger.warning("password_hashing: verification failed inside argon2")
            return False
