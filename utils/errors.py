"""
utils/errors.py
---------------
Error taxonomy shared by every layer.

Repositories raise these; the HTTP layer translates them to a status code
exactly once (see handlers/error_handler.py).
"""

from typing import Optional


class ServiceError(Exception):
    """Base class for all errors the service reports to callers."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ── Caller errors ─────────────────────────────────────────

class InvalidArgumentError(ServiceError):
    """The caller supplied missing or malformed input."""

    status_code = 400


class NotFoundError(ServiceError):
    """A referenced entity does not exist."""

    status_code = 404


class EmployeeNotFoundError(NotFoundError):
    def __init__(self, message: str = "Employee not found"):
        super().__init__(message)


class DealNotFoundError(NotFoundError):
    def __init__(self, message: str = "Deal not found"):
        super().__init__(message)


class BarrierNotFoundError(NotFoundError):
    def __init__(self, message: str = "Barrier not found"):
        super().__init__(message)


class MembershipNotFoundError(NotFoundError):
    def __init__(self, message: str = "Member not found"):
        super().__init__(message)


class ConflictError(ServiceError):
    """A uniqueness constraint would be violated."""

    status_code = 409


# ── Infrastructure errors ─────────────────────────────────

class InfrastructureError(ServiceError):
    """The database could not serve the request."""

    status_code = 500


class DatabaseConnectionError(InfrastructureError):
    """The database is unreachable or the connection broke mid-call."""


class StatementError(InfrastructureError):
    """
    The database rejected a statement.

    Attributes:
        pgcode: SQLSTATE reported by PostgreSQL, if any.
        constraint: Name of the violated constraint, if any.
    """

    def __init__(self, message: str, pgcode: Optional[str] = None, constraint: Optional[str] = None):
        super().__init__(message)
        self.pgcode = pgcode
        self.constraint = constraint

    @property
    def is_unique_violation(self) -> bool:
        return self.pgcode == "23505"

    @property
    def is_foreign_key_violation(self) -> bool:
        return self.pgcode == "23503"
