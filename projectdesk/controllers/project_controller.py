"""
Project Controller

Projects are created in the caller's tenant with the caller as
creator. Any member of the tenant can read and edit them. tenant_id and
created_by_id never change after creation.
"""
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from projectdesk.database import commit
from projectdesk.models.project import Project, ProjectStatus
from projectdesk.models.user import User
from projectdesk.schemas.project import ProjectCreate, ProjectUpdate
from projectdesk.core.exceptions import ProjectNotFoundError, ValidationError
from projectdesk.utils.logging import get_logger

logger = get_logger(__name__)


def create_project(db: Session, current_user: User, data: ProjectCreate) -> Project:
    if current_user.tenant_id is None:
        raise ValidationError("Projects must belong to a tenant; super admins have none")

    project = Project(
        tenant_id=current_user.tenant_id,
        created_by_id=current_user.id,
        name=data.name,
        description=data.description,
        status=data.status,
    )

    db.add(project)
    commit(db)
    db.refresh(project)

    logger.info(f"Project created: {project.id} in tenant {project.tenant_id} by {current_user.id}")
    return project


def list_projects(
    db: Session,
    current_user: User,
    status: Optional[ProjectStatus] = None,
    tenant_id: Optional[str] = None,
    page: int = 1,
    page_size: int = 20,
) -> Tuple[List[Project], int]:
    """
    List projects visible to the caller. Returns (projects, total).

    tenant_id only narrows the listing for super-admins; for everyone
    else the caller's tenant is always applied.
    """
    query = db.query(Project)
    if current_user.is_super_admin:
        if tenant_id:
            query = query.filter(Project.tenant_id == tenant_id)
    else:
        query = query.filter(Project.tenant_id == current_user.tenant_id)

    if status:
        query = query.filter(Project.status == status)

    total = query.count()
    projects = query.order_by(
        Project.created_at.desc()
    ).offset((page - 1) * page_size).limit(page_size).all()

    return projects, total


def get_project(db: Session, current_user: User, project_id: str) -> Project:
    query = db.query(Project).filter(Project.id == project_id)
    if not current_user.is_super_admin:
        query = query.filter(Project.tenant_id == current_user.tenant_id)

    project = query.first()
    if not project:
        raise ProjectNotFoundError(project_id)
    return project


def update_project(db: Session, current_user: User, project_id: str, changes: ProjectUpdate) -> Project:
    project = get_project(db, current_user, project_id)

    update_data = changes.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        # name and status are NOT NULL; description may be cleared
        if value is None and field != "description":
            continue
        setattr(project, field, value)

    commit(db)
    db.refresh(project)

    logger.info(f"Project updated: {project.id} by {current_user.id}")
    return project
