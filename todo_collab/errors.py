"""Error taxonomy for the comment backend.

ConfigurationError and DatabaseConnectionError come from the data store
adapter and propagate to the caller. The CommentError family is raised by the
comment operations and converted into an ``error`` emission to the sender.
"""


class ConfigurationError(RuntimeError):
    """Required setting (e.g. MONGODB_URI) is missing."""


class DatabaseConnectionError(ConnectionError):
    """The document database could not be reached."""

    def __init__(self, message, cause=None):
        super().__init__(message)
        self.cause = cause


class CommentError(Exception):
    """Recoverable failure reported to the sender only."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ValidationError(CommentError):
    pass


class NotFoundError(CommentError):
    pass


class AuthorizationError(CommentError):
    pass
