"""MongoDB connection handle.

One ``DataStore`` per process, created by ``create_app`` and shared by every
socket handler. ``ensure_connected()`` is idempotent: once connected it only
logs and returns. Driver heartbeats keep ``state`` in sync afterwards
(connected <-> disconnected) without the handlers polling anything.
"""
from __future__ import annotations
import logging
import threading
from enum import Enum
from typing import Callable, Optional
from pymongo import MongoClient, monitoring
from pymongo.errors import PyMongoError
from . import config
from .errors import ConfigurationError, DatabaseConnectionError


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERRORED = "errored"


class _StateListener(monitoring.ServerHeartbeatListener):
    """Mirrors driver heartbeats into the owning DataStore's state."""

    def __init__(self, store: "DataStore"):
        self._store = store

    def started(self, event):
        pass

    def succeeded(self, event):
        self._store._mark(ConnectionState.CONNECTED)

    def failed(self, event):
        self._store._mark(ConnectionState.DISCONNECTED, event.reply)


class DataStore:
    def __init__(self, uri: Optional[str] = None, db_name: Optional[str] = None,
                 client_factory: Callable[..., MongoClient] = MongoClient,
                 timeout_ms: int = config.DB_SERVER_SELECTION_TIMEOUT_MS):
        self.uri = uri
        self.db_name = db_name
        self.state = ConnectionState.DISCONNECTED
        self._client_factory = client_factory
        self._timeout_ms = timeout_ms
        self._client = None
        self._listeners = []
        self._lock = threading.Lock()
        # guards state writes; the monitor thread must not wait on a ping
        self._state_lock = threading.Lock()

    @property
    def connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    def ensure_connected(self) -> ConnectionState:
        """Connect once; later calls are no-ops while the connection is up.

        Raises ConfigurationError without a URI and DatabaseConnectionError
        when the server cannot be reached. No retry is attempted.
        """
        with self._lock:
            if self.state is ConnectionState.CONNECTED:
                logging.info("Already connected to the database")
                return self.state
            if not self.uri:
                raise ConfigurationError("Please define the MONGODB_URI environment variable")
            self._set_state(ConnectionState.CONNECTING)
            logging.info("Connecting to the database...")
            try:
                if self._client is None:
                    self._client = self._client_factory(
                        self.uri,
                        serverSelectionTimeoutMS=self._timeout_ms,
                        event_listeners=self._install_listeners(),
                    )
                self._client.admin.command("ping")
            except PyMongoError as e:
                self._set_state(ConnectionState.ERRORED)
                logging.error(f"Database connection failed: {e}")
                raise DatabaseConnectionError(f"Database connection failed: {e}", cause=e) from e
            self._set_state(ConnectionState.CONNECTED)
            logging.info("Database connected successfully")
            return self.state

    def _install_listeners(self):
        # a client only ever gets one state listener
        if not self._listeners:
            self._listeners.append(_StateListener(self))
        return list(self._listeners)

    def _set_state(self, state: ConnectionState):
        with self._state_lock:
            self.state = state

    def _mark(self, state: ConnectionState, err=None):
        with self._state_lock:
            if state is self.state:
                return
            if self.state is ConnectionState.CONNECTING:
                # ensure_connected owns the transition out of CONNECTING
                return
            self.state = state
        if state is ConnectionState.CONNECTED:
            logging.info("Connected to MongoDB")
        else:
            logging.warning(f"MongoDB disconnected: {err}")

    @property
    def database(self):
        if self._client is None or not self.connected:
            self.ensure_connected()
        if self.db_name:
            return self._client[self.db_name]
        return self._client.get_default_database(default=config.DEFAULT_DB_NAME)

    def close(self):
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None
            self._set_state(ConnectionState.DISCONNECTED)
            logging.info("Database connection closed")
