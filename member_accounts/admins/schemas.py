"""
Admin Schemas - Pydantic models for administrator requests and responses.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .models import AdminRole


class AdminCreate(BaseModel):
    """
    Admin Creation Schema

    Fields:
    - full_name, email, role: required
    - password: optional; when omitted a default password is generated
      and returned once in the response
    """
    full_name: str = Field(..., min_length=1)
    email: EmailStr
    password: Optional[str] = Field(None, min_length=8)
    role: AdminRole = AdminRole.ADMIN


class AdminLogin(BaseModel):
    email: EmailStr
    password: str


class AdminProfileUpdate(BaseModel):
    full_name: str = Field(None, min_length=1)


class AdminRoleUpdate(BaseModel):
    role: AdminRole


class AdminResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    email: str
    role: AdminRole
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
