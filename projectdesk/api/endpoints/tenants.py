"""
Tenant Endpoints

Mounted at /api/tenants. Every route passes the protect gate.

The /{tenant_id}/users routes are aliases of the /api/users routes:
same controller, tenant taken from the path instead of the caller.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from projectdesk.database import get_db
from projectdesk.models.user import User, UserRole
from projectdesk.schemas.tenant import TenantListResponse, TenantResponse, TenantUpdate
from projectdesk.schemas.user import UserCreate, UserListResponse, UserResponse
from projectdesk.api.deps import protect, get_current_user
from projectdesk.controllers import tenant_controller, user_controller

router = APIRouter(prefix="/tenants", tags=["tenants"], dependencies=[Depends(protect)])


@router.get("/", response_model=TenantListResponse)
async def list_tenants(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    tenants = tenant_controller.list_tenants(db, current_user)
    return TenantListResponse(tenants=tenants, total=len(tenants))


@router.get("/{tenant_id}", response_model=TenantResponse)
async def get_tenant(
    tenant_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return tenant_controller.get_tenant(db, current_user, tenant_id)


@router.put("/{tenant_id}", response_model=TenantResponse)
async def update_tenant(
    tenant_id: str,
    changes: TenantUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return tenant_controller.update_tenant(db, current_user, tenant_id, changes)


@router.post("/{tenant_id}/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_tenant_user(
    tenant_id: str,
    user_data: UserCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return user_controller.create_user(db, current_user, tenant_id, user_data)


@router.get("/{tenant_id}/users", response_model=UserListResponse)
async def list_tenant_users(
    tenant_id: str,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    role: Optional[UserRole] = Query(None),
    is_active: Optional[bool] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    users, total = user_controller.list_users(
        db, current_user, tenant_id,
        role=role, is_active=is_active, page=page, page_size=page_size
    )
    return UserListResponse(users=users, total=total, page=page, page_size=page_size)
