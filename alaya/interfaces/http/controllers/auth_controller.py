# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, g, redirect, request

from alaya.application.use_cases.users.login_user import LoginUserUseCase
from alaya.application.use_cases.users.logout_user import LogoutUserUseCase
from alaya.application.use_cases.users.signup_user import SignupUserUseCase
from alaya.domain.users.entities import User
from alaya.domain.users.exceptions import SignupsDisabledError
from alaya.interfaces.http.rendering import PageContext, PageRenderer
from alaya.interfaces.http.session_boundary import SessionBoundary
from alaya.shared.errors import AppError, DomainError
from alaya.shared.logging import logger

GENERIC_SIGNUP_ERROR = "Could not create account. Please try again."
GENERIC_LOGIN_ERROR = "Authentication failed"
SESSION_ERROR = "Could not create session. Please try again."


def _failure_message(exc: AppError, default: str) -> str:
    if exc.context and exc.context.get("operation") == "create_session":
        return SESSION_ERROR
    return default


class AuthController:
    """Form-based signup, login and logout plus the pages that depend on identity."""

    def __init__(
        self,
        *,
        boundary: SessionBoundary,
        signup_use_case: SignupUserUseCase,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        renderer: PageRenderer,
    ) -> None:
        self._boundary = boundary
        self._signup_use_case = signup_use_case
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._renderer = renderer

    def _current_user(self) -> User | None:
        if "user" not in g:
            g.user = self._boundary.current_user(request.headers)
        return g.user

    def _render(
        self,
        page: str,
        *,
        form_username: str = "",
        error_message: str | None = None,
        anonymous: bool = False,
    ) -> Response:
        user = None if anonymous else self._current_user()
        return self._renderer.render(
            PageContext(
                page=page,
                is_authenticated=user is not None,
                username=user.username if user else "",
                signups_disabled=self._boundary.signups_disabled,
                form_username=form_username,
                error_message=error_message,
            )
        )

    def _rejected(self, page: str, username: str, message: str) -> Response:
        # Failed submissions render as anonymous whatever cookie came with them.
        return self._render(page, form_username=username, error_message=message, anonymous=True)

    def _signed_in(self, user: User, token: str) -> Response:
        g.user = user
        response = redirect("/", code=303)
        response.headers.add("Set-Cookie", self._boundary.session_cookie(token))
        return response

    @staticmethod
    def _signups_disabled_response() -> tuple[str, int]:
        return SignupsDisabledError.message, SignupsDisabledError.status

    def index(self) -> Response:
        return self._render("index")

    def login_page(self) -> Response:
        if self._current_user() is not None:
            return redirect("/", code=303)
        return self._render("login")

    def login_submit(self) -> Response:
        username = request.form.get("username", "").strip()
        password = request.form.get("password", "")

        try:
            user, token = self._login_use_case.execute(username, password)
        except DomainError as exc:
            logger.info(f"auth.login: rejected ({exc.code}) username={username!r}")
            return self._rejected("login", username, exc.message)
        except AppError as exc:
            logger.exception(f"auth.login: error username={username!r}")
            message = _failure_message(exc, GENERIC_LOGIN_ERROR)
            return self._rejected("login", username, message)

        logger.info(f"auth.login: ok user_id={user.id}")
        return self._signed_in(user, token)

    def signup_page(self) -> Response | tuple[str, int]:
        if self._current_user() is not None:
            return redirect("/", code=303)
        if self._boundary.signups_disabled:
            return self._signups_disabled_response()
        return self._render("signup")

    def signup_submit(self) -> Response | tuple[str, int]:
        if self._boundary.signups_disabled:
            return self._signups_disabled_response()

        username = request.form.get("username", "").strip()
        password = request.form.get("password", "")
        confirm_password = request.form.get("confirm_password", "")

        try:
            user, token = self._signup_use_case.execute(username, password, confirm_password)
        except DomainError as exc:
            logger.info(f"auth.signup: rejected ({exc.code}) username={username!r}")
            return self._rejected("signup", username, exc.message)
        except AppError as exc:
            logger.exception(f"auth.signup: error username={username!r}")
            message = _failure_message(exc, GENERIC_SIGNUP_ERROR)
            return self._rejected("signup", username, message)

        logger.info(f"auth.signup: ok user_id={user.id}")
        return self._signed_in(user, token)

    def logout(self) -> Response:
        self._logout_use_case.execute(self._boundary.request_token(request.headers))
        g.user = None

        response = redirect("/login", code=303)
        response.headers.add("Set-Cookie", self._boundary.clear_cookie())
        logger.info("auth.logout: ok")
        return response

    def profile(self) -> Response:
        if self._current_user() is None:
            return redirect("/login", code=303)
        return self._render("profile")

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__)
        bp.add_url_rule("/", view_func=self.index, methods=["GET"])
        bp.add_url_rule("/login", view_func=self.login_page, methods=["GET"])
        bp.add_url_rule(
            "/login", endpoint="login_submit", view_func=self.login_submit, methods=["POST"]
        )
        bp.add_url_rule("/signup", view_func=self.signup_page, methods=["GET"])
        bp.add_url_rule(
            "/signup", endpoint="signup_submit", view_func=self.signup_submit, methods=["POST"]
        )
        bp.add_url_rule("/logout", view_func=self.logout, methods=["GET", "POST"])
        bp.add_url_rule("/profile", view_func=self.profile, methods=["GET"])
        return bp
