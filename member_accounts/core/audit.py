from sqlalchemy import Column, DateTime, Integer, JSON, String
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional

from ..database import Base, utcnow


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    actor_id = Column(Integer, nullable=True, index=True)
    action = Column(String, nullable=False, index=True)
    details = Column(JSON, nullable=True)  # Additional context, never secrets
    timestamp = Column(DateTime(timezone=True), default=utcnow, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, actor_id={self.actor_id}, action='{self.action}', timestamp='{self.timestamp}')>"


def create_audit_log(
    db: Session,
    action: str,
    actor_id: Optional[int] = None,
    details: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """
    Creates an audit log entry.

    The entry is committed immediately, together with anything already
    pending in ``db``.

    Args:
        db: The database session.
        action: A string describing the action performed (e.g. 'ACCOUNT_LOGIN_SUCCESS').
        actor_id: The id of the account or admin the action concerns (if known).
        details: A dictionary containing additional context.

    Returns:
        The created AuditLog object.
    """
    audit_entry = AuditLog(actor_id=actor_id, action=action, details=details)
    db.add(audit_entry)
    db.commit()
    return audit_entry
