from datetime import datetime, timezone
from bson import ObjectId
from todo_collab.models import as_object_id, serialize


def test_as_object_id():
    oid = ObjectId()
    assert as_object_id(oid) is oid
    assert as_object_id(str(oid)) == oid
    assert as_object_id("") is None
    assert as_object_id(None) is None
    assert as_object_id("U1") is None


def test_serialize_nested():
    oid = ObjectId()
    ts = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    doc = {"_id": oid, "comments": [oid], "author": {"_id": oid}, "createdAt": ts, "n": 1}
    assert serialize(doc) == {
        "_id": str(oid), "comments": [str(oid)], "author": {"_id": str(oid)},
        "createdAt": "2024-01-02T03:04:05+00:00", "n": 1,
    }


def test_populate_missing_author_is_none(stores, seed):
    comment = stores.comments.save(stores.comments.new(seed["todo"], str(ObjectId()), "x"))
    assert stores.comments.find_populated(comment["_id"])["author"] is None


def test_populate_excludes_private_fields(stores, seed):
    comment = stores.comments.save(stores.comments.new(seed["todo"], seed["u1"], "x"))
    author = stores.comments.find_populated(comment["_id"])["author"]
    assert "password" not in author
    assert author["email"] == "u1@example.com"


def test_remove_comment_is_idempotent(stores, seed):
    cid = ObjectId()
    assert stores.todos.append_comment(seed["todo"], cid)
    assert stores.todos.remove_comment(seed["todo"], cid)
    assert not stores.todos.remove_comment(seed["todo"], cid)
    assert stores.todos.find_by_id(seed["todo"])["comments"] == []


def test_remove_comment_matches_string_and_object_id(stores, seed):
    cid = ObjectId()
    stores.todos.collection.update_one(
        {"_id": ObjectId(seed["todo"])}, {"$set": {"comments": [str(cid), cid, ObjectId()]}}
    )
    assert stores.todos.remove_comment(seed["todo"], str(cid))
    assert len(stores.todos.find_by_id(seed["todo"])["comments"]) == 1
