"""Application factory and app-wide configuration."""

from typing import Optional

from flask import Flask
from flask_cors import CORS

from wealthplan.app.api.routes import api_bp
from wealthplan.config import Settings, settings as default_settings
from wealthplan.domain.goal_store import GoalStore
from wealthplan.log_config import setup_logging


def create_app(settings: Optional[Settings] = None, store: Optional[GoalStore] = None) -> Flask:
    """Build the Flask app instance."""
    settings = settings or default_settings
    setup_logging(settings.log_level)

    app = Flask(__name__)
    app.extensions["goal_store"] = store or GoalStore()

    CORS(
        app,
        resources={r"/api/*": {"origins": settings.cors_origins}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
