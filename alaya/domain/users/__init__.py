from .entities import Session, User
from .exceptions import (
    DuplicateUsernameError,
    EmptyPasswordError,
    EmptyUsernameError,
    InvalidCredentialsError,
    PasswordMismatchError,
    PasswordTooShortError,
    SignupsDisabledError,
)
from .repositories import PasswordHasher, SessionRepository, UserRepository

__all__ = [
    "DuplicateUsernameError",
    "EmptyPasswordError",
    "EmptyUsernameError",
    "InvalidCredentialsError",
    "PasswordHasher",
    "PasswordMismatchError",
    "PasswordTooShortError",
    "Session",
    "SessionRepository",
    "SignupsDisabledError",
    "User",
    "UserRepository",
]
