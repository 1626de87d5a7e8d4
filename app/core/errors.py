# Domain errors

from fastapi import status


class LifecycleError(Exception):
    """Base class for failures reported back to the caller"""

    kind = "internal"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": {"kind": self.kind, "message": self.message}}


class Unauthorized(LifecycleError):
    kind = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Sign in required"


class Forbidden(LifecycleError):
    kind = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not allowed"


class NotFound(LifecycleError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class BadRequest(LifecycleError):
    kind = "bad_request"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class Conflict(LifecycleError):
    kind = "conflict"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


UNIQUE_VIOLATION = "unique"
CHECK_VIOLATION = "check"
FOREIGN_KEY_VIOLATION = "foreign_key"

# Postgres SQLSTATE codes (psycopg exposes them as ``sqlstate``)
_SQLSTATE_KINDS = {
    "23505": UNIQUE_VIOLATION,
    "23514": CHECK_VIOLATION,
    "23503": FOREIGN_KEY_VIOLATION,
}

# SQLite only reports the constraint type in the message
_SQLITE_MESSAGE_KINDS = {
    "UNIQUE constraint failed": UNIQUE_VIOLATION,
    "CHECK constraint failed": CHECK_VIOLATION,
    "FOREIGN KEY constraint failed": FOREIGN_KEY_VIOLATION,
}


def integrity_kind(exc: Exception) -> str | None:
    """
    Classify an IntegrityError by the constraint type the driver reported.

    Returns one of UNIQUE_VIOLATION, CHECK_VIOLATION, FOREIGN_KEY_VIOLATION,
    or None for anything else (NOT NULL and the like), which callers re-raise.
    """
    orig = getattr(exc, "orig", None) or exc
    sqlstate = getattr(orig, "sqlstate", None)
    if sqlstate in _SQLSTATE_KINDS:
        return _SQLSTATE_KINDS[sqlstate]

    message = str(orig)
    for prefix, kind in _SQLITE_MESSAGE_KINDS.items():
        if prefix in message:
            return kind
    return None
