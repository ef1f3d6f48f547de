"""
Tenant Model

The tenant is the isolation boundary. Every user (except super-admins)
and every project belongs to exactly one tenant, and all of them live
in shared tables filtered by tenant_id.
"""
from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from projectdesk.database import Base
import uuid


class Tenant(Base):
    __tablename__ = "tenants"

    # UUIDs avoid enumeration and stay unique across systems
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = Column(String(255), nullable=False)
    slug = Column(String(100), unique=True, nullable=False, index=True)

    is_active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    users = relationship("User", back_populates="tenant")
    projects = relationship("Project", back_populates="tenant")

    def __repr__(self):
        return f"<Tenant {self.slug}>"
