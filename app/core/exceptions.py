"""
Domain errors.
Every InformatchError is rendered as {"error": message} with status 400.
"""


class InformatchError(Exception):
    """Base class for errors surfaced to the client as a plain message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthError(InformatchError):
    """Missing or invalid caller identity."""


class NotFoundError(InformatchError):
    """A record the operation depends on does not exist."""


class DataAccessError(InformatchError):
    """A read or write against the database failed."""
