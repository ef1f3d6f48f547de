"""
User Management Endpoints

Users of the caller's own tenant. The same operations are reachable for
an explicit tenant under /api/tenants/{tenant_id}/users.

RBAC:
- List/get users: any member of the tenant
- Create user: tenant admin
- Update user: tenant admin, or the user themselves (profile fields only)
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from projectdesk.database import get_db
from projectdesk.models.user import User, UserRole
from projectdesk.schemas.user import UserCreate, UserListResponse, UserResponse, UserUpdate
from projectdesk.api.deps import protect, get_current_user
from projectdesk.controllers import user_controller
from projectdesk.core.exceptions import ValidationError

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(protect)])


def _own_tenant(current_user: User) -> str:
    if current_user.tenant_id is None:
        raise ValidationError("Super admins must use /api/tenants/{tenant_id}/users")
    return current_user.tenant_id


@router.get("", response_model=UserListResponse)
async def list_users(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    role: Optional[UserRole] = Query(None),
    is_active: Optional[bool] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    users, total = user_controller.list_users(
        db, current_user, _own_tenant(current_user),
        role=role, is_active=is_active, page=page, page_size=page_size
    )
    return UserListResponse(users=users, total=total, page=page, page_size=page_size)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return user_controller.create_user(db, current_user, _own_tenant(current_user), user_data)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return user_controller.get_user(db, current_user, _own_tenant(current_user), user_id)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    user_data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return user_controller.update_user(db, current_user, _own_tenant(current_user), user_id, user_data)
