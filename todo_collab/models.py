"""Entity stores over the MongoDB collections.

Documents are plain dicts straight from pymongo. Each store exposes the same
identifier contract: ``find_by_id``, ``save`` and ``delete_by_id``. Ids may be
passed as ObjectId or hex string; anything that is not a valid ObjectId is
treated as a record that does not exist.
"""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from bson import ObjectId
from bson.errors import InvalidId

AUTHOR_FIELDS = ("username", "fullName", "email")


def as_object_id(value) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    if not value:
        return None
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def serialize(value):
    """JSON-safe copy of a document: ObjectId -> str, datetime -> ISO string."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize(v) for v in value]
    return value


class BaseStore:
    collection_name: str = ""

    def __init__(self, data_store):
        self._data_store = data_store

    @property
    def collection(self):
        return self._data_store.database[self.collection_name]

    def find_by_id(self, record_id) -> Optional[Dict[str, Any]]:
        oid = as_object_id(record_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def save(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        if doc.get("_id") is None:
            doc.pop("_id", None)
            result = self.collection.insert_one(doc)
            doc["_id"] = result.inserted_id
        else:
            self.collection.replace_one({"_id": doc["_id"]}, doc, upsert=True)
        return doc

    def delete_by_id(self, record_id) -> bool:
        oid = as_object_id(record_id)
        if oid is None:
            return False
        return self.collection.delete_one({"_id": oid}).deleted_count > 0


class TodoStore(BaseStore):
    collection_name = "todos"

    def append_comment(self, todo_id, comment_id) -> bool:
        """Atomically push a comment id onto the end of the todo's list."""
        result = self.collection.update_one(
            {"_id": as_object_id(todo_id)},
            {"$push": {"comments": as_object_id(comment_id)}},
        )
        return result.matched_count > 0

    def remove_comment(self, todo_id, comment_id) -> bool:
        """Atomically pull every occurrence of a comment id from the todo's list.

        Matches both the ObjectId and its hex string form.
        """
        oid = as_object_id(comment_id)
        result = self.collection.update_one(
            {"_id": as_object_id(todo_id)},
            {"$pull": {"comments": {"$in": [oid, str(oid)]}}},
        )
        return result.modified_count > 0


class TeamStore(BaseStore):
    collection_name = "teams"


class UserStore(BaseStore):
    collection_name = "users"


class CommentStore(BaseStore):
    collection_name = "comments"

    def __init__(self, data_store, users: UserStore):
        super().__init__(data_store)
        self._users = users

    @staticmethod
    def new(todo_id, author_id, content: str) -> Dict[str, Any]:
        return {
            "taskRef": as_object_id(todo_id) or todo_id,
            "onModel": "Todo",
            "author": as_object_id(author_id) or author_id,
            "content": content,
        }

    def save(self, doc):
        now = utcnow()
        doc.setdefault("createdAt", now)
        doc["updatedAt"] = now
        return super().save(doc)

    def find_populated(self, comment_id) -> Optional[Dict[str, Any]]:
        """Comment with ``author`` resolved to the user's display fields (or None)."""
        comment = self.find_by_id(comment_id)
        if comment is None:
            return None
        author = self._users.collection.find_one(
            {"_id": comment.get("author")}, {f: 1 for f in AUTHOR_FIELDS}
        )
        comment["author"] = author
        return comment


class Stores:
    """The four entity stores bound to one DataStore."""

    def __init__(self, data_store):
        self.data_store = data_store
        self.todos = TodoStore(data_store)
        self.teams = TeamStore(data_store)
        self.users = UserStore(data_store)
        self.comments = CommentStore(data_store, self.users)
