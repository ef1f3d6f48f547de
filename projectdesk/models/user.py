"""
User Model

Users belong to a tenant and carry one of three roles. Super-admins
operate across tenants and have no tenant_id.

IMPORTANT: email is unique per tenant, not globally. The same address
may exist once in every tenant.
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Index, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship, validates
from datetime import datetime
from projectdesk.database import Base
from projectdesk.core.exceptions import ValidationError
import uuid
import enum


class UserRole(str, enum.Enum):
    """
    User roles.

    SUPER_ADMIN: Operates across all tenants, has no tenant of its own
    TENANT_ADMIN: Manages the tenant and its users
    USER: Regular member of a tenant
    """
    SUPER_ADMIN = "super_admin"
    TENANT_ADMIN = "tenant_admin"
    USER = "user"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    role = Column(
        SQLEnum(UserRole, name="user_role", native_enum=False, length=20, values_callable=_enum_values),
        default=UserRole.USER,
        nullable=False,
        index=True
    )

    # Soft deactivation; users are never hard-deleted
    is_active = Column(Boolean, default=True, nullable=False)

    # NULL for super-admins
    tenant_id = Column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    tenant = relationship("Tenant", back_populates="users")
    projects = relationship("Project", back_populates="created_by")

    __table_args__ = (
        UniqueConstraint("email", "tenant_id", name="uq_users_email_tenant"),
        Index("idx_user_tenant_role", "tenant_id", "role"),
    )

    @validates("role")
    def validate_role(self, key, value):
        if value is None or isinstance(value, UserRole):
            return value
        try:
            return UserRole(value)
        except ValueError:
            raise ValidationError(
                f"Invalid role '{value}'. Must be one of: {', '.join(_enum_values(UserRole))}"
            )

    def __repr__(self):
        return f"<User {self.email} (tenant={self.tenant_id})>"

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN

    def is_admin_of(self, tenant_id: str) -> bool:
        """True for super-admins and for tenant-admins of the given tenant."""
        if self.is_super_admin:
            return True
        return self.role == UserRole.TENANT_ADMIN and self.tenant_id == tenant_id

    def can_access_tenant(self, tenant_id: str) -> bool:
        return self.is_super_admin or self.tenant_id == tenant_id
