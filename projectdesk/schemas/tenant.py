"""
Tenant Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class TenantUpdate(BaseModel):
    """Schema for updating a tenant. All fields optional; id is not updatable."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, min_length=1, max_length=100, pattern="^[a-z0-9][a-z0-9-]*$")
    is_active: Optional[bool] = None


class TenantResponse(BaseModel):
    id: str
    name: str
    slug: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TenantListResponse(BaseModel):
    tenants: list[TenantResponse]
    total: int
