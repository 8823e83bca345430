# backend/app/core/errors.py
"""
Error taxonomy for the board services.

Services raise these; main.py maps each class to an HTTP status so routers
never build error responses by hand.
"""
from typing import Optional


class BoardError(Exception):
    """Base class for every error the board services raise on purpose."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        body = {"detail": self.message}
        if self.field:
            body["field"] = self.field
        return body


class ValidationFailed(BoardError):
    """Malformed or missing input. Raised before anything is written."""

    status_code = 400


class UnresolvableStatus(ValidationFailed):
    """A status value that matches none of the owner's columns."""

    def __init__(self, status: str):
        super().__init__(f"Unknown status '{status}'", field="status")
        self.status = status


class NotFound(BoardError):
    status_code = 404


class InvariantViolation(BoardError):
    """The request would break a board invariant (e.g. removing the last column)."""

    status_code = 400


class Conflict(BoardError):
    status_code = 409


class SummaryUnavailable(BoardError):
    """The summarizer could not produce a summary. Never fatal to the board."""

    status_code = 503
