"""Socket.IO event dispatcher for todo comments.

EVENT_HANDLERS maps each inbound event name to its handler; the app package
installs the table on the shared SocketIO instance with
register_socket_events(). Rooms:
  <userId>        per-user room (label only, never validated)
  team:<teamId>   team room receiving every comment broadcast
CRUD results go to the team room, the acknowledgement to the sender only.
"""
import logging
from typing import Any, Callable, Dict
from flask import current_app, request
from flask_socketio import emit, join_room
from ..errors import CommentError, ConfigurationError, DatabaseConnectionError
from ..services import comments

STORES_KEY = "todo_collab"


def get_stores():
    return current_app.extensions[STORES_KEY]


def _room_id(data, key: str):
    # clients send either the bare id or {"userId": ...} / {"teamId": ...}
    if isinstance(data, dict):
        return data.get(key)
    return data


def on_connect(auth=None):
    logging.info(f"New client connected: {request.sid}")
    try:
        get_stores().data_store.ensure_connected()
        logging.info("DB connected for socket event")
    except (ConfigurationError, DatabaseConnectionError) as e:
        logging.error(f"DB connection error on socket connect: {e}")


def on_disconnect(reason=None):
    logging.info(f"Client disconnected: {request.sid}")


def join_user_room(data):
    user_id = _room_id(data, "userId")
    if user_id:
        join_room(str(user_id))
        logging.info(f"User {user_id} joined their room")


def join_team_room(data):
    team_id = _room_id(data, "teamId")
    if team_id:
        join_room(comments.team_room(team_id))
        logging.info(f"Socket {request.sid} joined team room {team_id}")


def _crud_handler(operation: Callable, broadcast_event: str, ack_event: str,
                  ack_message: str, failure_message: str) -> Callable:
    """Wrap a comments.* operation with emission and the error boundary."""

    def handler(data):
        payload: Dict[str, Any] = data if isinstance(data, dict) else {}
        try:
            result = operation(get_stores(), payload)
            emit(broadcast_event, result, to=comments.team_room(payload.get("teamId")))
            emit(ack_event, {"success": True, "message": ack_message})
        except CommentError as e:
            logging.warning(f"{operation.__name__} rejected: {e.message}")
            emit("error", {"success": False, "message": e.message})
        except Exception as e:
            logging.exception(f"{operation.__name__} failed")
            body = {"success": False, "message": failure_message}
            if current_app.config.get("EXPOSE_ERROR_DETAILS"):
                body["error"] = str(e)
            emit("error", body)

    handler.__name__ = f"handle_{operation.__name__}"
    return handler


EVENT_HANDLERS: Dict[str, Callable] = {
    "connect": on_connect,
    "disconnect": on_disconnect,
    "joinUserRoom": join_user_room,
    "joinTeamRoom": join_team_room,
    "addCommentToTodo": _crud_handler(
        comments.add_comment, "commenttodoAdded", "commentAdded",
        "Comment added successfully", "Failed to add comment"),
    "editTodoComment": _crud_handler(
        comments.edit_comment, "todoCommentEdited", "TodocommentEditSuccess",
        "Comment edited successfully", "Failed to edit comment"),
    "deleteTodoComment": _crud_handler(
        comments.delete_comment, "todoCommentDeleted", "commentDeleteSuccess",
        "Comment deleted successfully", "Failed to delete comment"),
}


def register_socket_events(socketio):
    """Install EVENT_HANDLERS on a SocketIO instance (before init_app)."""
    for name, handler in EVENT_HANDLERS.items():
        socketio.on_event(name, handler)
