"""Todo comment operations: add, edit, delete.

Transport-agnostic; the socket layer in api/events.py owns emission. Every
function takes the ``Stores`` bundle plus the raw inbound payload and returns
the broadcast payload for the team room. Recoverable failures raise the
CommentError family from errors.py before anything is written, except where
noted: add does not roll back a saved comment if a later step fails.
"""
from __future__ import annotations
import logging
from typing import Any, Dict
from ..errors import AuthorizationError, NotFoundError, ValidationError
from ..models import Stores, serialize, utcnow

EDIT_FIELDS = ("todoId", "editContent", "teamId", "userId", "commentId")
DELETE_FIELDS = ("todoId", "teamId", "userId", "commentId")


def team_room(team_id) -> str:
    return f"team:{team_id}"


def require_fields(data: Dict[str, Any], fields) -> None:
    if any(not data.get(f) for f in fields):
        raise ValidationError("Missing required fields")


def _load_own_comment(stores: Stores, comment_id, user_id) -> Dict[str, Any]:
    comment = stores.comments.find_by_id(comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    if str(comment.get("author")) != str(user_id):
        raise AuthorizationError("You are not the author of this comment")
    return comment


def add_comment(stores: Stores, data: Dict[str, Any]) -> Dict[str, Any]:
    """Create a comment on a todo and append it to the todo's comment list.

    Fields are not checked for presence here; a missing or unknown todoId
    surfaces as "Todo not found".
    """
    todo_id = data.get("todoId")
    team_id = data.get("teamId")
    todo = stores.todos.find_by_id(todo_id)
    if todo is None:
        raise NotFoundError("Todo not found")

    comment = stores.comments.save(
        stores.comments.new(todo["_id"], data.get("userId"), data.get("comment"))
    )
    stores.todos.append_comment(todo["_id"], comment["_id"])

    # existence check only, the team document itself is not used
    if stores.teams.find_by_id(team_id) is None:
        logging.warning(f"addCommentToTodo: team {team_id} not found, broadcasting anyway")

    populated = stores.comments.find_populated(comment["_id"])
    return {"success": True, "comment": serialize(populated), "todoId": todo_id}


def edit_comment(stores: Stores, data: Dict[str, Any]) -> Dict[str, Any]:
    require_fields(data, EDIT_FIELDS)
    comment = _load_own_comment(stores, data["commentId"], data["userId"])
    if stores.todos.find_by_id(data["todoId"]) is None:
        raise NotFoundError("Todo not found")

    comment["content"] = data["editContent"]
    comment["updatedAt"] = utcnow()
    stores.comments.save(comment)

    populated = stores.comments.find_populated(comment["_id"])
    return {"success": True, "comment": serialize(populated), "todoId": data["todoId"]}


def delete_comment(stores: Stores, data: Dict[str, Any]) -> Dict[str, Any]:
    """Delete a comment and detach it from its todo.

    Detaching is idempotent: a comment id that is no longer in the todo's list
    is not an error, the comment record is still removed.
    """
    require_fields(data, DELETE_FIELDS)
    comment = _load_own_comment(stores, data["commentId"], data["userId"])
    todo = stores.todos.find_by_id(data["todoId"])
    if todo is None:
        raise NotFoundError("Todo not found")

    comment_id = str(comment["_id"])
    if any(str(c) == comment_id for c in todo.get("comments", [])):
        stores.todos.remove_comment(todo["_id"], comment["_id"])
    stores.comments.delete_by_id(comment["_id"])

    return {"success": True, "commentId": data["commentId"], "todoId": data["todoId"]}
