import uuid
import mongomock
import pytest
from todo_collab import create_app
from todo_collab.db import DataStore
from todo_collab.extensions import socketio
from todo_collab.api.events import STORES_KEY


@pytest.fixture
def data_store():
    # unique db per test: mongomock clients may share one in-memory server
    store = DataStore("mongodb://localhost:27017", db_name=f"test_{uuid.uuid4().hex}",
                      client_factory=mongomock.MongoClient)
    store.ensure_connected()
    yield store
    store.close()


@pytest.fixture
def app(data_store):
    return create_app({"TESTING": True, "CORS_ORIGIN": "*"}, data_store=data_store)


@pytest.fixture
def stores(app):
    return app.extensions[STORES_KEY]


@pytest.fixture
def seed(stores):
    """A user, a second user, a team and an empty todo."""
    u1 = stores.users.save({"username": "u1", "fullName": "User One", "email": "u1@example.com", "password": "x"})
    u2 = stores.users.save({"username": "u2", "fullName": "User Two", "email": "u2@example.com"})
    team = stores.teams.save({"name": "G1"})
    todo = stores.todos.save({"title": "T1", "comments": []})
    return {
        "u1": str(u1["_id"]),
        "u2": str(u2["_id"]),
        "team": str(team["_id"]),
        "todo": str(todo["_id"]),
    }


@pytest.fixture
def sio_client(app):
    """Factory for connected Socket.IO test clients."""
    clients = []

    def make():
        c = socketio.test_client(app)
        clients.append(c)
        return c

    yield make
    for c in clients:
        if c.is_connected():
            c.disconnect()
