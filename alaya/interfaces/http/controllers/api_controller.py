# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, g, jsonify, request
from pydantic import ValidationError

from alaya.application.use_cases.users.list_users import ListUsersUseCase
from alaya.application.use_cases.users.login_user import LoginUserUseCase
from alaya.application.use_cases.users.signup_user import SignupUserUseCase
from alaya.domain.users.entities import User
from alaya.interfaces.http.dto.auth import (
    CredentialsRequestDTO,
    LoginResponseDTO,
    UserInfoDTO,
    UserListDTO,
)
from alaya.interfaces.http.session_boundary import SessionBoundary
from alaya.shared.errors import AppError
from alaya.shared.errors.validation import raise_validation_error
from alaya.shared.logging import logger


class UnauthorizedError(AppError):
    def __init__(self) -> None:
        super().__init__(code="unauthorized", status=HTTPStatus.UNAUTHORIZED)


class ApiController:
    def __init__(
        self,
        *,
        boundary: SessionBoundary,
        signup_use_case: SignupUserUseCase,
        login_use_case: LoginUserUseCase,
        list_users_use_case: ListUsersUseCase,
    ) -> None:
        self._boundary = boundary
        self._signup_use_case = signup_use_case
        self._login_use_case = login_use_case
        self._list_users_use_case = list_users_use_case

    @staticmethod
    def _credentials() -> CredentialsRequestDTO:
        try:
            return CredentialsRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

    def _require_user(self) -> User:
        user = self._boundary.current_user(request.headers)
        if user is None:
            raise UnauthorizedError()
        g.user = user
        return user

    def register(self) -> tuple[Response, int]:
        dto = self._credentials()
        user = self._signup_use_case.create_account(dto.username, dto.password)
        logger.info(f"api.register: ok user_id={user.id}")
        return jsonify({}), HTTPStatus.OK

    def login(self) -> tuple[Response, int]:
        dto = self._credentials()
        user, token = self._login_use_case.execute(dto.username, dto.password)
        g.user = user
        logger.info(f"api.login: ok user_id={user.id}")
        return jsonify(LoginResponseDTO(token=token).model_dump()), HTTPStatus.OK

    def me(self) -> tuple[Response, int]:
        user = self._require_user()
        return jsonify(UserInfoDTO.from_user(user).model_dump(mode="json")), HTTPStatus.OK

    def users(self) -> tuple[Response, int]:
        self._require_user()
        users = self._list_users_use_case.execute()
        payload = UserListDTO(
            count=self._list_users_use_case.count(),
            users=[UserInfoDTO.from_user(u) for u in users],
        )
        return jsonify(payload.model_dump(mode="json")), HTTPStatus.OK

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("api", __name__, url_prefix="/api")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/me", view_func=self.me, methods=["GET"])
        bp.add_url_rule("/users", view_func=self.users, methods=["GET"])
        return bp
