"""
Project Management Endpoints

Projects in the caller's tenant. Super-admins can read across tenants
but cannot create projects, since they have no tenant of their own.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from projectdesk.database import get_db
from projectdesk.models.user import User
from projectdesk.models.project import ProjectStatus
from projectdesk.schemas.project import (
    ProjectResponse,
    ProjectCreate,
    ProjectUpdate,
    ProjectListResponse
)
from projectdesk.api.deps import protect, get_current_user
from projectdesk.controllers import project_controller

router = APIRouter(prefix="/projects", tags=["projects"], dependencies=[Depends(protect)])


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: Optional[ProjectStatus] = Query(None),
    tenant_id: Optional[str] = Query(None, description="Super admins only"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    projects, total = project_controller.list_projects(
        db, current_user, status=status, tenant_id=tenant_id, page=page, page_size=page_size
    )
    return ProjectListResponse(projects=projects, total=total, page=page, page_size=page_size)


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return project_controller.create_project(db, current_user, project_data)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return project_controller.get_project(db, current_user, project_id)


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    project_data: ProjectUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return project_controller.update_project(db, current_user, project_id, project_data)
