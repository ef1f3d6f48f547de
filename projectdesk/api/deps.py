"""
API Dependencies

Reusable FastAPI dependencies. protect is the authentication gate:
routers that need it declare it as a router-level dependency so no
route handler in them runs for an unauthenticated request.
"""
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from projectdesk.config import Settings
from projectdesk.database import get_db
from projectdesk.models.user import User
from projectdesk.core.security import decode_access_token
from projectdesk.core.exceptions import AuthenticationError
from projectdesk.utils.logging import get_logger, log_security_event

logger = get_logger(__name__)

# auto_error=False: a missing header must produce our 401, not FastAPI's default
bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def protect(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
) -> User:
    """
    Authenticate the request and attach the user to request.state.

    Rejects with 401 when:
    1. No bearer token is present
    2. The token is invalid, expired or tampered with
    3. The user no longer exists or moved tenant since the token was issued
    4. The user is inactive
    5. The user's tenant has been deactivated
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authenticated")

    payload = decode_access_token(credentials.credentials, settings)
    if not payload:
        log_security_event("invalid_token", {"path": request.url.path}, logger)
        raise AuthenticationError("Invalid or expired token")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.warning(f"Token for unknown user: {user_id}")
        raise AuthenticationError("User not found")

    if user.tenant_id != payload.get("tenant_id"):
        log_security_event(
            "invalid_token",
            {"reason": "tenant_mismatch", "user_id": user.id, "tenant_id": user.tenant_id},
            logger
        )
        raise AuthenticationError("Invalid token payload")

    if not user.is_active:
        raise AuthenticationError("User account is inactive")

    if user.tenant_id is not None and not user.tenant.is_active:
        log_security_event(
            "inactive_tenant_access",
            {"user_id": user.id, "tenant_id": user.tenant_id, "path": request.url.path},
            logger
        )
        raise AuthenticationError("Tenant account is inactive")

    request.state.user = user
    request.state.tenant_id = user.tenant_id
    return user


def get_current_user(request: Request) -> User:
    """
    The user attached by protect.

    Only valid on routers that declare protect as a dependency. FastAPI
    caches protect per request, so depending on it again is free; this
    reads request.state instead to keep handler signatures short.
    """
    user = getattr(request.state, "user", None)
    if user is None:
        raise AuthenticationError("Not authenticated")
    return user
