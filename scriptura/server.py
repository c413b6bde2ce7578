import logging
import threading

from flask import Flask

from scriptura.routes.status_api import status_bp
from scriptura.routes.verses_api import verses_bp

logger = logging.getLogger(__name__)


def create_app(resolver, store=None, daily_verses=None) -> Flask:
    """Build the status/lookup app around already-constructed services."""
    app = Flask(__name__)

    app.config["RESOLVER"] = resolver
    app.config["PREFERENCE_STORE"] = store
    app.config["DAILY_VERSES"] = daily_verses

    # Register blueprints
    app.register_blueprint(status_bp)
    app.register_blueprint(verses_bp)

    return app


def run_in_background(app: Flask, host: str, port: int) -> threading.Thread:
    """Serve the app from a daemon thread next to the bot."""
    thread = threading.Thread(
        target=lambda: app.run(host=host, port=port, use_reloader=False),
        name="scriptura-status",
        daemon=True,
    )
    thread.start()
    logger.info(f"Status server listening on http://{host}:{port}")
    return thread
