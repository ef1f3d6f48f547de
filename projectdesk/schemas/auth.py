"""
Authentication Schemas

Request/response models for authentication endpoints.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class Token(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    """
    Login request body.

    Tenant users log in with their tenant's slug. Super-admins have no
    tenant and leave it out.
    """
    email: EmailStr
    password: str = Field(..., min_length=1)
    tenant_slug: Optional[str] = Field(None, min_length=1)


class RegisterRequest(BaseModel):
    """Self-registration: a new tenant plus its first admin."""
    tenant_name: str = Field(..., min_length=1, max_length=255)
    tenant_slug: str = Field(..., min_length=1, max_length=100, pattern="^[a-z0-9][a-z0-9-]*$")
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)

    class Config:
        json_schema_extra = {
            "example": {
                "tenant_name": "Acme Corp",
                "tenant_slug": "acme-corp",
                "full_name": "Jane Doe",
                "email": "jane@acme.io",
                "password": "securepassword123"
            }
        }
