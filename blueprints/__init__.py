"""
Blueprint registration for SomaText.

The JSON API blueprint is built with the connection provider it should use;
everything else is a module-level blueprint.
"""

from __future__ import annotations


def register_blueprints(app):
    from database import get_db
    from blueprints.api import create_blueprint as create_api_blueprint
    from blueprints.ai import bp as ai_bp
    from blueprints.core import bp as core_bp
    from blueprints.pages import bp as pages_bp

    app.register_blueprint(create_api_blueprint(get_db))
    app.register_blueprint(ai_bp)
    app.register_blueprint(core_bp)
    app.register_blueprint(pages_bp)
