"""
User Controller

Create, list, read and update users inside a tenant. Reached both from
/api/users (caller's own tenant) and from /api/tenants/{tenant_id}/users.

Email is unique per tenant. The pre-check gives a clean Conflict; the
database constraint catches concurrent inserts that slip past it.
"""
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from projectdesk.database import commit
from projectdesk.models.user import User, UserRole
from projectdesk.schemas.user import UserCreate, UserUpdate
from projectdesk.core.exceptions import ConflictError, PermissionDenied, UserNotFoundError, ValidationError
from projectdesk.core.permissions import can_modify_user, require_tenant_access, require_tenant_admin
from projectdesk.core.security import get_password_hash
from projectdesk.controllers.tenant_controller import load_tenant
from projectdesk.utils.logging import get_logger, log_security_event

logger = get_logger(__name__)


def _email_taken(db: Session, email: str, tenant_id: Optional[str], exclude_id: Optional[str] = None) -> bool:
    query = db.query(User).filter(User.email == email)
    if tenant_id is None:
        query = query.filter(User.tenant_id.is_(None))
    else:
        query = query.filter(User.tenant_id == tenant_id)
    if exclude_id:
        query = query.filter(User.id != exclude_id)
    return db.query(query.exists()).scalar()


def create_user(db: Session, current_user: User, tenant_id: str, data: UserCreate) -> User:
    """Create a user in the given tenant. Tenant admins and super-admins only."""
    require_tenant_admin(current_user, tenant_id)
    load_tenant(db, tenant_id)

    if data.role == UserRole.SUPER_ADMIN:
        raise ValidationError("Super admins cannot belong to a tenant")

    email = data.email.lower()
    if _email_taken(db, email, tenant_id):
        raise ConflictError("User with this email already exists in this tenant")

    new_user = User(
        tenant_id=tenant_id,
        email=email,
        password_hash=get_password_hash(data.password),
        full_name=data.full_name,
        role=data.role,
        is_active=True
    )

    db.add(new_user)
    commit(db)
    db.refresh(new_user)

    logger.info(f"User created: {new_user.id} in tenant {tenant_id} by {current_user.id}")
    return new_user


def list_users(
    db: Session,
    current_user: User,
    tenant_id: str,
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
    page: int = 1,
    page_size: int = 20,
) -> Tuple[List[User], int]:
    """List one tenant's users, optionally filtered. Returns (users, total)."""
    require_tenant_access(current_user, tenant_id)
    load_tenant(db, tenant_id)

    query = db.query(User).filter(User.tenant_id == tenant_id)
    if role:
        query = query.filter(User.role == role)
    if is_active is not None:
        query = query.filter(User.is_active == is_active)

    total = query.count()
    users = query.order_by(User.created_at, User.email).offset((page - 1) * page_size).limit(page_size).all()

    logger.debug(f"Listed {len(users)} users for tenant {tenant_id}")
    return users, total


def get_user(db: Session, current_user: User, tenant_id: str, user_id: str) -> User:
    require_tenant_access(current_user, tenant_id)

    user = db.query(User).filter(
        User.id == user_id,
        User.tenant_id == tenant_id
    ).first()
    if not user:
        raise UserNotFoundError(user_id)
    return user


def update_user(db: Session, current_user: User, tenant_id: str, user_id: str, changes: UserUpdate) -> User:
    """
    Update a user's profile, role or active flag.

    Permissions:
    - Self: name, email, password
    - Tenant admin / super-admin: everything, including role and is_active
    """
    user = get_user(db, current_user, tenant_id, user_id)

    if not can_modify_user(current_user, user):
        raise PermissionDenied("Not authorized to modify this user")

    update_data = changes.model_dump(exclude_unset=True)

    privileged = {"role", "is_active"} & update_data.keys()
    if privileged and not current_user.is_admin_of(tenant_id):
        log_security_event(
            "privilege_escalation",
            {"user_id": current_user.id, "target_user_id": user.id, "fields": sorted(privileged)},
            logger
        )
        raise PermissionDenied("Only admins can change roles or activation")

    if update_data.get("role") == UserRole.SUPER_ADMIN:
        raise ValidationError("Super admins cannot belong to a tenant")

    if update_data.get("email"):
        update_data["email"] = update_data["email"].lower()
        if update_data["email"] != user.email and _email_taken(db, update_data["email"], tenant_id, exclude_id=user.id):
            raise ConflictError("User with this email already exists in this tenant")

    password = update_data.pop("password", None)
    if password:
        user.password_hash = get_password_hash(password)

    for field, value in update_data.items():
        if value is not None:
            setattr(user, field, value)

    commit(db)
    db.refresh(user)

    logger.info(f"User updated: {user.id} by {current_user.id}")
    return user
