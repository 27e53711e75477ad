# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import os

from flask import Flask

from alaya.infrastructure.container import Container
from alaya.infrastructure.db import init_db
from alaya.shared.config import AppConfig, load_config
from alaya.shared.logging import logger, setup_logging
from alaya.shared.middleware import configure_error_handling, configure_request_logging


def create_app(config: AppConfig | None = None, *, container: Container | None = None) -> Flask:
    config = config or (container.config if container else load_config())
    container = container or Container(config)

    setup_logging(debug_mode=config.debug_logging)
    init_db(container.engine)

    app = Flask(__name__)
    app.config.update(SECRET_KEY=config.secret_key)
    app.extensions["alaya.container"] = container

    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)

    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.api_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains",
            )

        return resp

    if config.session_max_age_seconds is None:
        logger.warning("Server-side sessions never expire; cookies carry a 7-day Max-Age only")
    logger.info(f"Flask app initialized (signups_disabled={config.signups_disabled})")
    return app


if __name__ == "__main__":
    create_app().run(
        host=os.getenv("ALAYA_HOST", "0.0.0.0"),
        port=int(os.getenv("ALAYA_PORT", "5000")),
        threaded=True,
    )
