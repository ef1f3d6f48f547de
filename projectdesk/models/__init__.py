"""
Database Models

Users and projects carry tenant_id for row-level multi-tenant isolation.
"""
from projectdesk.models.tenant import Tenant
from projectdesk.models.user import User, UserRole
from projectdesk.models.project import Project, ProjectStatus

__all__ = ["Tenant", "User", "UserRole", "Project", "ProjectStatus"]
