"""
Custom Exceptions

Centralized exception definitions. Every error is an HTTPException
subclass, so controllers raise them and FastAPI renders the response.

Taxonomy:
- AuthenticationError (401): missing or invalid credentials
- PermissionDenied (403): authenticated but not allowed
- ValidationError (422): required field or enum constraint violated
- ConflictError (409): unique constraint violated
- *NotFoundError (404): unknown id in the path
"""
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError


class TenantNotFoundError(HTTPException):
    """Raised when tenant cannot be found."""

    def __init__(self, tenant_id: str = ""):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tenant not found: {tenant_id}" if tenant_id else "Tenant not found"
        )


class UserNotFoundError(HTTPException):
    """Raised when user cannot be found."""

    def __init__(self, user_id: str = ""):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User not found: {user_id}" if user_id else "User not found"
        )


class ProjectNotFoundError(HTTPException):
    """Raised when project cannot be found."""

    def __init__(self, project_id: str = ""):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Project not found: {project_id}" if project_id else "Project not found"
        )


class AuthenticationError(HTTPException):
    """Raised when authentication fails."""

    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class PermissionDenied(HTTPException):
    """Raised when an authenticated user lacks the role for an action."""

    def __init__(self, detail: str = "Permission denied"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail
        )


class ValidationError(HTTPException):
    """Raised when a required field is missing or a value is outside its enumeration."""

    def __init__(self, detail: str = "Invalid input"):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail
        )


class ConflictError(HTTPException):
    """Raised when a write would violate a uniqueness constraint."""

    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail
        )


class RateLimitExceeded(HTTPException):
    """Raised when rate limit is exceeded."""

    def __init__(self, retry_after: int = 60):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded. Please try again later.",
            headers={"Retry-After": str(retry_after)}
        )


# SQLSTATE codes (PostgreSQL)
_UNIQUE_VIOLATION = "23505"
_NOT_NULL_VIOLATION = "23502"
_FOREIGN_KEY_VIOLATION = "23503"


def integrity_error(exc: IntegrityError) -> HTTPException:
    """
    Translate a database IntegrityError into Conflict or Validation.

    psycopg exposes the SQLSTATE, SQLite only the message text, so both
    are checked.
    """
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    message = str(orig).lower()

    if code == _UNIQUE_VIOLATION or "unique" in message or "duplicate" in message:
        return ConflictError("Resource already exists")
    if code == _NOT_NULL_VIOLATION or "not null" in message:
        return ValidationError(f"Missing required field: {_column_hint(message)}")
    if code == _FOREIGN_KEY_VIOLATION or "foreign key" in message:
        return ValidationError("Referenced record does not exist")
    return ValidationError("Constraint violation")


def _column_hint(message: str) -> str:
    # sqlite: "not null constraint failed: projects.tenant_id"
    # postgres: 'null value in column "tenant_id" of relation ...'
    if "failed:" in message:
        return message.split("failed:", 1)[1].strip().split()[0]
    if 'column "' in message:
        return message.split('column "', 1)[1].split('"', 1)[0]
    return "unknown"
