"""
Auth Controller

Self-registration, login and token issuance.

Login failures all report "Invalid credentials" to the client and log
the real reason as a security event.
"""
from typing import Optional, Tuple
from sqlalchemy.orm import Session

from projectdesk.config import Settings
from projectdesk.database import commit
from projectdesk.models.tenant import Tenant
from projectdesk.models.user import User, UserRole
from projectdesk.schemas.auth import LoginRequest, RegisterRequest
from projectdesk.core.exceptions import AuthenticationError
from projectdesk.core.security import create_access_token, get_password_hash, verify_password
from projectdesk.controllers.tenant_controller import create_tenant
from projectdesk.utils.logging import get_logger, log_security_event

logger = get_logger(__name__)


def issue_token(user: User, settings: Settings) -> str:
    return create_access_token(
        {"sub": user.id, "tenant_id": user.tenant_id, "email": user.email},
        settings
    )


def register(db: Session, data: RegisterRequest) -> Tuple[Tenant, User]:
    """Create a tenant and its first tenant admin in one transaction."""
    tenant = create_tenant(db, data.tenant_name, data.tenant_slug)

    admin = User(
        tenant=tenant,
        email=data.email.lower(),
        password_hash=get_password_hash(data.password),
        full_name=data.full_name,
        role=UserRole.TENANT_ADMIN,
        is_active=True
    )
    db.add(admin)
    commit(db)
    db.refresh(tenant)
    db.refresh(admin)

    logger.info(f"Tenant registered: {tenant.slug} ({tenant.id}) with admin {admin.id}")
    return tenant, admin


def _find_login_user(db: Session, email: str, tenant_slug: Optional[str]) -> Optional[User]:
    if tenant_slug is None:
        return db.query(User).filter(
            User.email == email,
            User.tenant_id.is_(None),
            User.role == UserRole.SUPER_ADMIN
        ).first()

    tenant = db.query(Tenant).filter(Tenant.slug == tenant_slug).first()
    if not tenant:
        log_security_event("failed_login", {"reason": "tenant_not_found", "tenant_slug": tenant_slug}, logger)
        return None
    if not tenant.is_active:
        log_security_event("failed_login", {"reason": "tenant_inactive", "tenant_id": tenant.id}, logger)
        return None

    return db.query(User).filter(
        User.tenant_id == tenant.id,
        User.email == email
    ).first()


def login(db: Session, credentials: LoginRequest, settings: Settings) -> str:
    """Authenticate and return a JWT access token."""
    email = credentials.email.lower()
    user = _find_login_user(db, email, credentials.tenant_slug)

    if not user:
        log_security_event("failed_login", {"reason": "user_not_found", "email": email}, logger)
        raise AuthenticationError("Invalid credentials")

    if not verify_password(credentials.password, user.password_hash):
        log_security_event("failed_login", {"reason": "invalid_password", "user_id": user.id}, logger)
        raise AuthenticationError("Invalid credentials")

    if not user.is_active:
        log_security_event("failed_login", {"reason": "user_inactive", "user_id": user.id}, logger)
        raise AuthenticationError("User account is inactive")

    logger.info(f"Successful login: user={user.id}, tenant={user.tenant_id}")
    return issue_token(user, settings)


def ensure_super_admin(db: Session, settings: Settings) -> Optional[User]:
    """Create the bootstrap super-admin from settings if it does not exist yet."""
    if not settings.SUPERADMIN_EMAIL or not settings.SUPERADMIN_PASSWORD:
        return None

    email = settings.SUPERADMIN_EMAIL.lower()
    existing = db.query(User).filter(User.email == email, User.tenant_id.is_(None)).first()
    if existing:
        return existing

    admin = User(
        tenant_id=None,
        email=email,
        password_hash=get_password_hash(settings.SUPERADMIN_PASSWORD),
        full_name="Super Admin",
        role=UserRole.SUPER_ADMIN,
        is_active=True
    )
    db.add(admin)
    commit(db)
    logger.info(f"Bootstrap super admin created: {admin.id}")
    return admin
