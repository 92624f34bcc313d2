"""
SomaText — Flask Web Application

Teacher/student dashboards over a small SQLite store, with an AI-backed quiz
generator and lesson viewer.
"""

from __future__ import annotations

import os
from typing import Any

from flask import Flask, Response

import database
from blueprints import register_blueprints


def create_app(test_config: dict[str, Any] | None = None) -> Flask:
    app = Flask(__name__)

    # Load config
    from config import config_by_name
    if test_config is not None:
        app.config.from_object(config_by_name["testing"])
        app.config.update(test_config)
    else:
        env = os.environ.get("FLASK_ENV", "development")
        cfg = config_by_name.get(env, config_by_name["development"])
        app.config.from_object(cfg)
        if hasattr(cfg, "validate"):
            cfg.validate()

    app.secret_key = app.config.get("SECRET_KEY", os.environ.get("SECRET_KEY", "dev-key-change-in-production"))

    # Server-side sessions keep the running quiz out of the cookie.
    # Tests use Flask's default signed-cookie sessions.
    if not app.config.get("TESTING"):
        from flask_session import Session
        Session(app)

    # Structured logging
    from logging_config import init_logging
    init_logging(app)

    # Register database teardown, schema creation and seeding
    database.init_app(app)

    register_blueprints(app)

    @app.after_request
    def set_security_headers(response: Response) -> Response:
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

    return app


if __name__ == "__main__":
    application = create_app()
    application.run(
        host=application.config.get("HOST", "0.0.0.0"),
        port=application.config.get("PORT", 3000),
        debug=application.config.get("DEBUG", False),
    )
