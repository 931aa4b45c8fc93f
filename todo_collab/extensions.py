from flask_socketio import SocketIO
from flask_cors import CORS

# Global extension instances (imported in app factory and entrypoints)
# SocketIO: todo comment events, team/user rooms.
# CORS: allow the front-end origin for plain HTTP calls too.
socketio = SocketIO()

def init_extensions(app):
    """Bind global extension objects to the Flask app instance."""
    origin = app.config.get("CORS_ORIGIN", "*")
    CORS(app, origins=origin)
    socketio.init_app(app, cors_allowed_origins=origin)
