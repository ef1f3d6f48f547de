"""
Permission Checks

Three roles, scoped by tenant:
- super_admin: everything, in every tenant
- tenant_admin: manage their own tenant and its users
- user: read their own tenant, manage projects, edit their own profile

Checks raise PermissionDenied, or TenantNotFoundError when the caller
has no business knowing the tenant exists.
"""
from projectdesk.models.user import User
from projectdesk.core.exceptions import PermissionDenied, TenantNotFoundError
from projectdesk.utils.logging import get_logger, log_security_event

logger = get_logger(__name__)


def require_tenant_access(user: User, tenant_id: str) -> None:
    """Members of the tenant and super-admins only."""
    if not user.can_access_tenant(tenant_id):
        log_security_event(
            "cross_tenant_access",
            {"user_id": user.id, "user_tenant_id": user.tenant_id, "requested_tenant_id": tenant_id},
            logger
        )
        # 404 instead of 403 so tenant ids cannot be enumerated
        raise TenantNotFoundError(tenant_id)


def require_tenant_admin(user: User, tenant_id: str) -> None:
    """Super-admins, or tenant-admins of this tenant."""
    require_tenant_access(user, tenant_id)
    if not user.is_admin_of(tenant_id):
        raise PermissionDenied("Tenant admin privileges required")


def can_modify_user(current_user: User, target_user: User) -> bool:
    """
    Check if current_user can modify target_user's profile.

    Admins of the target's tenant can modify anyone there. Everyone can
    modify themselves.
    """
    if current_user.id == target_user.id:
        return True
    return current_user.is_admin_of(target_user.tenant_id)
