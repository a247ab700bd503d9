# webapp/__init__.py

import atexit
import os
import time

from flask import Flask, abort, jsonify, request, send_from_directory
from flask_cors import CORS

from .config import Config
from .routes.admin import admin_bp
from .routes.league import league_bp
from .routes.meta import meta_bp
from .routes.stats import stats_bp
from .services.document_store import DocumentStore
from .services.errors import VolleyError
from .services.live_state import LiveLeagueState
from .services.subscription_hub import SubscriptionHub


def _resolve_static_folder() -> str:
    """
    Point Flask at the SPA build output: frontend/dist
    """
    here = os.path.dirname(__file__)
    return os.path.abspath(os.path.join(here, "..", "frontend", "dist"))


def create_app(test_config=None) -> Flask:
    # static_url_path="/" so "/" serves index.html nicely
    app = Flask(
        "webapp",
        static_folder=_resolve_static_folder(),
        static_url_path="/",
    )

    # Core config, then per-instance overrides (tests)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    # CORS: allow the dev frontend to hit /api/*
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    # Store -> hub -> live state, torn down in reverse order
    store = DocumentStore.from_url(app.config["DATABASE_URL"])
    hub = SubscriptionHub(store)
    state = LiveLeagueState(hub)
    app.extensions["volley"] = {"store": store, "hub": hub, "state": state, "last_poll": 0.0}

    def shutdown() -> None:
        state.close()
        hub.close()
        store.close()

    app.extensions["volley"]["shutdown"] = shutdown
    if not app.config.get("TESTING"):
        atexit.register(shutdown)

    # Register blueprints
    app.register_blueprint(meta_bp)
    app.register_blueprint(league_bp)
    app.register_blueprint(stats_bp)
    app.register_blueprint(admin_bp)

    @app.before_request
    def refresh_live_queries():
        """
        Pick up writes made by other processes (admin scripts) at most once
        every LIVE_POLL_SECONDS.
        """
        if not request.path.startswith("/api/"):
            return None
        ext = app.extensions["volley"]
        now = time.monotonic()
        if now - ext["last_poll"] >= float(app.config["LIVE_POLL_SECONDS"]):
            ext["last_poll"] = now
            store.poll()
        return None

    @app.errorhandler(VolleyError)
    def handle_volley_error(err: VolleyError):
        if err.status_code >= 500:
            app.logger.error("request failed: %s", err)
        return jsonify({"error": str(err)}), err.status_code

    # ---------- SPA routes (prod build) ----------

    @app.route("/")
    def spa_index():
        """
        Serve the built frontend (frontend/dist/index.html).
        """
        if not os.path.exists(os.path.join(app.static_folder, "index.html")):
            abort(404)
        return send_from_directory(app.static_folder, "index.html")

    @app.route("/<path:path>")
    def spa_app(path: str):
        """
        For any non-API path, serve index.html and let the client router handle it.
        """
        if path.startswith("api/"):
            abort(404)
        # Try to serve static file first (js/css/assets)
        full_path = os.path.join(app.static_folder, path)
        if os.path.exists(full_path):
            return send_from_directory(app.static_folder, path)
        if not os.path.exists(os.path.join(app.static_folder, "index.html")):
            abort(404)
        # Fallback to SPA index
        return send_from_directory(app.static_folder, "index.html")

    return app
