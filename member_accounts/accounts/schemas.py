"""
Account Schemas - Pydantic models for request validation and response serialization.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .models import Role


class RegistrationRequest(BaseModel):
    """
    Registration Schema - raw signup payload

    Fields:
    - email, password, full_name, role: always required
    - admission_year, year_of_study: required for students
    - license_number, specialty: required for doctors and global network members
    - phone, gender, institution, country, bio: optional profile fields

    Role-specific completeness is checked by the registration validator,
    not here, so that the error names the missing pair.
    """
    email: EmailStr
    password: str = Field(..., min_length=8)
    full_name: str = Field(..., min_length=1)
    role: Role

    admission_year: Optional[int] = Field(None, ge=1900, le=2100)
    year_of_study: Optional[int] = Field(None, ge=1, le=10)
    license_number: Optional[str] = None
    specialty: Optional[str] = None

    phone: Optional[str] = None
    gender: Optional[str] = None
    institution: Optional[str] = None
    country: Optional[str] = None
    bio: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class ProfileUpdate(BaseModel):
    """
    Profile Update Schema - only the self-service editable fields.
    Unknown keys (role, email, password, ...) are ignored.
    """
    # Omit to keep the current name; null is rejected
    full_name: str = Field(None, min_length=1)
    phone: Optional[str] = None
    gender: Optional[str] = None
    institution: Optional[str] = None
    country: Optional[str] = None
    bio: Optional[str] = None


class EmailRequest(BaseModel):
    """Used by forgot-password and resend-verification."""
    email: EmailStr


class VerifyEmailRequest(BaseModel):
    email: EmailStr
    code: str


class ResetPasswordRequest(BaseModel):
    token: str
    new_password: str = Field(..., min_length=8)
    confirm_password: str


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str = Field(..., min_length=8)
    confirm_password: str


class AccountResponse(BaseModel):
    """
    Account Response Schema - never exposes password, code or token fields
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    membership_id: str
    full_name: str
    role: Role
    admission_year: Optional[int] = None
    year_of_study: Optional[int] = None
    license_number: Optional[str] = None
    specialty: Optional[str] = None
    phone: Optional[str] = None
    gender: Optional[str] = None
    institution: Optional[str] = None
    country: Optional[str] = None
    bio: Optional[str] = None
    email_verified: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
