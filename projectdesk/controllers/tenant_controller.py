"""
Tenant Controller

Business logic behind the tenant routes. Super-admins see every
tenant; everyone else only sees their own.
"""
from typing import List
from sqlalchemy.orm import Session

from projectdesk.database import commit
from projectdesk.models.tenant import Tenant
from projectdesk.models.user import User
from projectdesk.schemas.tenant import TenantUpdate
from projectdesk.core.exceptions import ConflictError, TenantNotFoundError
from projectdesk.core.permissions import require_tenant_access, require_tenant_admin
from projectdesk.utils.logging import get_logger

logger = get_logger(__name__)


def load_tenant(db: Session, tenant_id: str) -> Tenant:
    tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
    if not tenant:
        raise TenantNotFoundError(tenant_id)
    return tenant


def list_tenants(db: Session, current_user: User) -> List[Tenant]:
    query = db.query(Tenant)
    if not current_user.is_super_admin:
        query = query.filter(Tenant.id == current_user.tenant_id)
    return query.order_by(Tenant.created_at, Tenant.name).all()


def get_tenant(db: Session, current_user: User, tenant_id: str) -> Tenant:
    require_tenant_access(current_user, tenant_id)
    return load_tenant(db, tenant_id)


def create_tenant(db: Session, name: str, slug: str) -> Tenant:
    """
    Add a new tenant to the session.

    Neither flushed nor committed here: registration creates the tenant
    and its first admin in one transaction.
    """
    if db.query(Tenant).filter(Tenant.slug == slug).first():
        raise ConflictError(f"Tenant slug already taken: {slug}")

    tenant = Tenant(name=name, slug=slug, is_active=True)
    db.add(tenant)
    return tenant


def update_tenant(db: Session, current_user: User, tenant_id: str, changes: TenantUpdate) -> Tenant:
    """Rename, re-slug or (de)activate a tenant. Tenant admins and super-admins only."""
    require_tenant_admin(current_user, tenant_id)
    tenant = load_tenant(db, tenant_id)

    update_data = changes.model_dump(exclude_unset=True)

    new_slug = update_data.get("slug")
    if new_slug and new_slug != tenant.slug:
        taken = db.query(Tenant).filter(Tenant.slug == new_slug, Tenant.id != tenant.id).first()
        if taken:
            raise ConflictError(f"Tenant slug already taken: {new_slug}")

    for field, value in update_data.items():
        if value is not None:
            setattr(tenant, field, value)

    commit(db)
    db.refresh(tenant)

    logger.info(f"Tenant updated: {tenant.id} by {current_user.id}")
    return tenant
