# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Hand-off point to the page rendering layer."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Protocol

from flask import Response, jsonify


@dataclass(slots=True, frozen=True)
class PageContext:
    page: str
    is_authenticated: bool
    username: str
    signups_disabled: bool
    form_username: str = ""
    error_message: str | None = None


class PageRenderer(Protocol):
    def render(self, context: PageContext) -> Response: ...


class JsonPageRenderer(PageRenderer):
    """Default renderer: the page context serialised as JSON."""

    def render(self, context: PageContext) -> Response:
        return jsonify(asdict(context))
