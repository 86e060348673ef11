"""
Admin Model - Stores administrator identities, kept apart from member accounts.
"""
from sqlalchemy import Column, DateTime, Enum, Integer, String
import enum

from ..database import Base, utcnow


class AdminRole(str, enum.Enum):
    """
    Enumeration for administrator roles.

    Roles:
    - SUPER_ADMIN: Manages other admins and removes accounts
    - ADMIN: Day-to-day administration
    - MODERATOR: Read-mostly administration
    """
    SUPER_ADMIN = "SuperAdmin"
    ADMIN = "Admin"
    MODERATOR = "Moderator"


class Admin(Base):
    """
    Admin Model

    Fields:
    - id: Primary key
    - full_name: Administrator's name
    - email: Unique, lower-cased login email
    - password_hash: bcrypt hash of the supplied or generated default password
    - role: Administrator role
    - created_at, updated_at: Timestamps
    """
    __tablename__ = "admins"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(Enum(AdminRole), nullable=False, default=AdminRole.ADMIN)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Admin(id={self.id}, email='{self.email}', role='{self.role}')>"
