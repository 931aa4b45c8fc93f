import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# MongoDB (required on first connect, not at import)
MONGODB_URI = os.getenv("MONGODB_URI")
MONGODB_DB_NAME = os.getenv("MONGODB_DB_NAME")
DEFAULT_DB_NAME = "todo_collab"
DB_SERVER_SELECTION_TIMEOUT_MS = int(os.getenv("DB_SERVER_SELECTION_TIMEOUT_MS", "5000"))

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5000"))
FLASK_DEBUG = _flag("FLASK_DEBUG")

# Socket.IO + Flask-CORS allowed origin ("*" for any)
CORS_ORIGIN = os.getenv("CORS_ORIGIN", "http://localhost:3000")

# Include the raw exception text in socket error payloads
EXPOSE_ERROR_DETAILS = _flag("EXPOSE_ERROR_DETAILS")
