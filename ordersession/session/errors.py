"""
Session error types.

NotFound conditions are fatal for a session and raised to the caller.
Validation, persistence and lookup failures are never raised; they come
back as results or False returns.
"""


class SessionError(Exception):
    """Base class for order session errors."""


class NotFoundError(SessionError):
    """A record, requirements set or page required by the session does not exist."""

    kind = "resource"

    def __init__(self, identifier: str, message: str | None = None):
        self.identifier = identifier
        super().__init__(message or f"{self.kind} '{identifier}' not found")


class OrderNotFoundError(NotFoundError):
    kind = "order"


class RequirementsNotFoundError(NotFoundError):
    kind = "requirements"


class PageNotFoundError(NotFoundError):
    kind = "page"


class SessionNotLoadedError(SessionError):
    """An operation needing a loaded record ran before load()."""
