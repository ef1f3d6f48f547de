"""
Authentication Endpoints

Self-registration of a tenant, login, and the current principal.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from projectdesk.config import Settings
from projectdesk.database import get_db
from projectdesk.models.user import User
from projectdesk.schemas.auth import LoginRequest, RegisterRequest, Token
from projectdesk.schemas.user import UserResponse
from projectdesk.api.deps import get_app_settings, protect
from projectdesk.controllers import auth_controller

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    registration: RegisterRequest,
    db: Session = Depends(get_db)
):
    """
    Register a new tenant and its first admin.

    Returns the admin user; log in afterwards to get a token.
    """
    _, admin = auth_controller.register(db, registration)
    return admin


@router.post("/login", response_model=Token)
async def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
):
    """
    Authenticate and return a JWT.

    Tenant users pass tenant_slug; super-admins omit it.
    """
    access_token = auth_controller.login(db, credentials, settings)
    return Token(access_token=access_token, token_type="bearer")


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(protect)):
    return current_user
