"""
Error taxonomy of the data-access layer.

Session-level failures are not wrapped: whatever SQLAlchemy raises while a
statement is built or executed reaches the caller as-is, and ``QueryFailure``
is simply the name callers catch it by.
"""

from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError

QueryFailure = SQLAlchemyError


class RepositoryError(Exception):
    """Base class for errors raised by the repository layer itself."""


class InvalidArgument(RepositoryError, ValueError):
    """A required collaborator or argument is missing or malformed."""

    def __init__(self, argument: str, message: str = None):
        self.argument = argument
        super().__init__(message or f"Argument '{argument}' must not be None")


class InvalidRelationPath(InvalidRequestError):
    """An include path does not name a relationship of the entity."""

    def __init__(self, entity: type, path: str, reason: str):
        self.entity = entity
        self.path = path
        super().__init__(f"Invalid include path '{path}' for {entity.__name__}: {reason}")
