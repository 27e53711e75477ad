# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from alaya.shared.errors.base import DomainError


class DuplicateUsernameError(DomainError):
    code = "username_taken"
    status = HTTPStatus.CONFLICT
    message = "Username already exists"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid username or password"


class EmptyUsernameError(DomainError):
    code = "username_empty"
    message = "Username cannot be empty"


class EmptyPasswordError(DomainError):
    code = "password_empty"
    message = "Password cannot be empty"


class PasswordTooShortError(DomainError):
    code = "password_too_short"
    message = "Password must be at least 8 characters long"


class PasswordMismatchError(DomainError):
    code = "password_mismatch"
    message = "Passwords do not match"


class SignupsDisabledError(DomainError):
    code = "signups_disabled"
    status = HTTPStatus.FORBIDDEN
    message = "signups are disabled."
