# file: errors.py

import logging  # logging
import sqlite3  # sqlite integrity errors
from contextlib import contextmanager  # guard

from fastapi import HTTPException  # base


class ApiError(HTTPException):  # base of all handled errors
    status_code = 400
    message = "Bad request"

    def __init__(self, message: str = None):
        super().__init__(status_code=self.status_code, detail=message or self.message)


class ValidationError(ApiError):  # missing/malformed fields
    status_code = 400
    message = "Missing or invalid fields"


class InvalidCredentialError(ApiError):  # wrong or expired code
    status_code = 400
    message = "Invalid or expired code"


class UnauthenticatedError(ApiError):  # no session
    status_code = 401
    message = "Not logged in"


class ForbiddenError(ApiError):  # wrong role
    status_code = 403
    message = "Forbidden"


class NotFoundError(ApiError):  # no matching record
    status_code = 404
    message = "Not found"


class ConflictError(ApiError):  # uniqueness violation
    status_code = 400
    message = "Already exists"


class InternalError(ApiError):  # unexpected persistence failure
    status_code = 500
    message = "Internal server error"


SQLITE_UNIQUE_ERRORS = ("SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY")


def is_unique_violation(exc: Exception) -> bool:  # driver-independent check
    if getattr(exc, "sqlstate", None) == "23505":  # asyncpg
        return True
    if getattr(exc, "pgcode", None) == "23505":  # psycopg2
        return True
    if isinstance(exc, sqlite3.IntegrityError):  # sqlite / aiosqlite
        name = getattr(exc, "sqlite_errorname", None)  # python 3.11+
        return name is None or name in SQLITE_UNIQUE_ERRORS
    return False


@contextmanager
def internal_errors(message: str, logger: logging.Logger):  # map unexpected failures to 500
    try:
        yield
    except ApiError:
        raise
    except Exception:
        logger.exception(message)
        raise InternalError(message)
