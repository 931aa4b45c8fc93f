"""Application entrypoint for running the SocketIO server.

Usage (dev):
  python -m todo_collab.run
  # or the installed script
  todo-collab

This wraps create_app() and exposes SocketIO.run for unified server startup.
"""
import logging
from . import create_app, config
from .extensions import socketio


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = create_app()
    logging.info(f"Server running at http://{config.HOST}:{config.PORT}")
    socketio.run(app, host=config.HOST, port=config.PORT, debug=config.FLASK_DEBUG,
                 allow_unsafe_werkzeug=config.FLASK_DEBUG)


if __name__ == '__main__':
    main()
