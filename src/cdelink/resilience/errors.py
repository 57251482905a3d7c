"""Error taxonomy and store-error classification.

Classifies store exceptions by category. Repositories turn a
uniqueness violation into the recoverable UniqueConstraintError and
everything else into a StoreError tagged with its class, which the
HTTP layer maps to a status code.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    OperationalError,
    ProgrammingError,
)

from cdelink.constants import PG_UNIQUE_VIOLATION, SQLITE_UNIQUE_MARKER

if TYPE_CHECKING:
    from cdelink.services.attachment_service import AttachmentResult


class ErrorClass(Enum):
    CONFLICT = "conflict"  # unique violation, absorbed by callers
    TRANSIENT = "transient"  # locked / connection dropped
    CLIENT = "client"  # malformed query, other constraint failures
    UNKNOWN = "unknown"


class CdeLinkError(Exception):
    """Base for all errors raised by this package."""


class ValidationError(CdeLinkError):
    """Caller input rejected before any store call."""


class StoreError(CdeLinkError):
    """Store failure, tagged with its ErrorClass.

    The class decides how the failure reaches a caller: TRANSIENT is
    worth retrying, CLIENT means the request itself was rejected.
    """

    def __init__(
        self,
        message: str,
        error_class: ErrorClass = ErrorClass.UNKNOWN,
    ) -> None:
        super().__init__(message)
        self.error_class = error_class

    @property
    def retryable(self) -> bool:
        return self.error_class is ErrorClass.TRANSIENT


class UniqueConstraintError(StoreError):
    """Expected, recoverable conflict on a uniqueness constraint."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorClass.CONFLICT)


class AttachmentError(StoreError):
    """Bulk attach aborted by a store failure.

    Carries the structured result so callers keep the skip counts
    computed before the failure.
    """

    def __init__(
        self,
        message: str,
        result: AttachmentResult,
        error_class: ErrorClass = ErrorClass.UNKNOWN,
    ) -> None:
        super().__init__(message, error_class)
        self.result = result


def _sqlstate(error: DBAPIError) -> str | None:
    orig = error.orig
    for attr in ("sqlstate", "pgcode"):
        code = getattr(orig, attr, None)
        if isinstance(code, str):
            return code
    return None


def classify_error(error: Exception) -> ErrorClass:
    """Classify a store exception.

    Checks structured SQLSTATE codes first, falls back to message
    matching for drivers that only report text (sqlite3).
    """
    if isinstance(error, IntegrityError):
        if _sqlstate(error) == PG_UNIQUE_VIOLATION:
            return ErrorClass.CONFLICT
        if SQLITE_UNIQUE_MARKER in str(error.orig).lower():
            return ErrorClass.CONFLICT
        return ErrorClass.CLIENT

    if isinstance(error, OperationalError):
        return ErrorClass.TRANSIENT
    if isinstance(error, ProgrammingError):
        return ErrorClass.CLIENT

    msg = str(error).lower()
    if "locked" in msg or "connection" in msg:
        return ErrorClass.TRANSIENT

    return ErrorClass.UNKNOWN


def is_conflict(error: Exception) -> bool:
    """Return True if the error is a uniqueness violation."""
    return classify_error(error) is ErrorClass.CONFLICT


def to_store_error(error: Exception) -> StoreError:
    """Translate a store exception into this package's taxonomy.

    DBAPI wrappers are reduced to the driver message; the full SQL
    statement stays on the chained exception.
    """
    message = str(getattr(error, "orig", None) or error)
    error_class = classify_error(error)
    if error_class is ErrorClass.CONFLICT:
        return UniqueConstraintError(message)
    return StoreError(message, error_class)
