"""
Account Model - Stores member identities with role-specific fields.
"""
from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String
import enum

from ..database import Base, utcnow


class Role(str, enum.Enum):
    """
    Enumeration for member roles.

    Roles:
    - STUDENT: Student members, require admission_year and year_of_study
    - DOCTOR: Practising doctors, require license_number and specialty
    - GLOBAL_NETWORK: Global network members, require license_number and specialty
    - MEMBER: Members without role-specific fields
    """
    STUDENT = "Student"
    DOCTOR = "Doctor"
    GLOBAL_NETWORK = "GlobalNetwork"
    MEMBER = "Member"


class Account(Base):
    """
    Account Model - Stores member account information

    Fields:
    - id: Primary key for account identification
    - email: Unique, lower-cased email address used for login
    - membership_id: Sequential membership number, assigned at registration
    - full_name: Member's complete name
    - password_hash: bcrypt hash (raw passwords are never stored)
    - role: Member role, decides which professional fields are set
    - admission_year, year_of_study: Student-only fields
    - license_number, specialty: Doctor and GlobalNetwork fields
    - phone, gender, institution, country, bio: Editable profile fields
    - email_verified: Whether the email has been verified
    - verification_code, verification_code_expires: Pending email verification
    - reset_token_hash, reset_token_expires: Pending password reset
    - password_changed_at: When the password was last set through a password flow
    - created_at, updated_at: Timestamps
    """
    __tablename__ = "accounts"
    # Ids of deleted rows are never handed out again
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    membership_id = Column(String, unique=True, nullable=False)
    full_name = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(Enum(Role), nullable=False)

    admission_year = Column(Integer, nullable=True)
    year_of_study = Column(Integer, nullable=True)
    license_number = Column(String, nullable=True)
    specialty = Column(String, nullable=True)

    phone = Column(String, nullable=True)
    gender = Column(String, nullable=True)
    institution = Column(String, nullable=True)
    country = Column(String, nullable=True)
    bio = Column(String, nullable=True)

    email_verified = Column(Boolean, default=False, nullable=False)
    verification_code = Column(String, nullable=True)
    verification_code_expires = Column(DateTime(timezone=True), nullable=True)
    reset_token_hash = Column(String, nullable=True, index=True)
    reset_token_expires = Column(DateTime(timezone=True), nullable=True)
    password_changed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Account(id={self.id}, email='{self.email}', role='{self.role}')>"
