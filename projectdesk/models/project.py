"""
Project Model

Projects are tenant-scoped. Each one belongs to exactly one tenant and
records the user who created it. Neither reference changes after
creation.
"""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index, Enum as SQLEnum
from sqlalchemy.orm import relationship, validates
from datetime import datetime
from projectdesk.database import Base
from projectdesk.core.exceptions import ValidationError
import uuid
import enum


class ProjectStatus(str, enum.Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"
    COMPLETED = "completed"


class Project(Base):
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        SQLEnum(
            ProjectStatus,
            name="project_status",
            native_enum=False,
            length=20,
            values_callable=lambda e: [member.value for member in e],
        ),
        default=ProjectStatus.ACTIVE,
        nullable=False,
    )

    tenant_id = Column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Mapped to the "created_by" column
    created_by_id = Column(
        "created_by",
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    tenant = relationship("Tenant", back_populates="projects")
    created_by = relationship("User", back_populates="projects")

    __table_args__ = (
        Index("idx_project_tenant_status", "tenant_id", "status"),
    )

    @validates("status")
    def validate_status(self, key, value):
        if value is None or isinstance(value, ProjectStatus):
            return value
        try:
            return ProjectStatus(value)
        except ValueError:
            raise ValidationError(
                f"Invalid status '{value}'. Must be one of: active, archived, completed"
            )

    def __repr__(self):
        return f"<Project {self.name} (tenant={self.tenant_id})>"
