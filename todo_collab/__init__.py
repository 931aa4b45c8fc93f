"""Backend package initialization.

Key concepts:
- create_app(): Flask application factory used by run.py.
- Socket events: todo comment add/edit/delete plus user/team room joins, installed
  from api.events.EVENT_HANDLERS onto the shared SocketIO instance.
- Extensions: SocketIO + CORS initialized via extensions.init_extensions.
- Database: MongoDB handle (db.DataStore) created per app, connected lazily on
  the first socket connection.
"""

from datetime import datetime
from flask import Flask, jsonify
from . import config
from .extensions import init_extensions, socketio
from .db import DataStore
from .models import Stores
from .api.events import STORES_KEY, register_socket_events
from .api.home import home_bp


def create_app(config_overrides=None, data_store=None):
    """Application factory.

    Responsibilities:
    1. Instantiate Flask app & copy settings from config.py (overridable for tests).
    2. Initialise extensions (CORS + SocketIO binding) with the configured origin.
    3. Build the entity stores on a DataStore (not connected yet).
    4. Register the HTTP blueprint and a /api/health route for readiness probes.

    Returns: Configured Flask application instance.
    """
    app = Flask(__name__)
    app.config.update(
        MONGODB_URI=config.MONGODB_URI,
        MONGODB_DB_NAME=config.MONGODB_DB_NAME,
        CORS_ORIGIN=config.CORS_ORIGIN,
        EXPOSE_ERROR_DETAILS=config.EXPOSE_ERROR_DETAILS,
    )
    if config_overrides:
        app.config.update(config_overrides)

    init_extensions(app)
    if data_store is None:
        data_store = DataStore(app.config["MONGODB_URI"], app.config["MONGODB_DB_NAME"])
    app.extensions[STORES_KEY] = Stores(data_store)
    app.register_blueprint(home_bp)

    @app.route("/api/health")
    def health():
        return jsonify({
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "database": data_store.state.value,
        })

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "not found"}), 404

    return app


# Socket.IO event handlers (installed before any init_app so every server gets them)
register_socket_events(socketio)
