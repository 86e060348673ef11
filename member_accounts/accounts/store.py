"""
Identity store: persistence of member accounts and administrators.

Uniqueness of email is enforced by the unique index, never by a lookup
before insert. Generic updates go through an allow-list; password,
verification and reset fields are only written by the dedicated methods
of ``AccountStore``.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import utcnow
from ..exceptions import ConflictError, NotFoundError
from .models import Account

# Set up logging
logger = logging.getLogger(__name__)

ACCOUNT_EDITABLE_FIELDS = ("full_name", "phone", "gender", "institution", "country", "bio")


def normalize_email(email: str) -> str:
    return email.strip().lower()


class IdentityStore:
    """
    Access layer over one identity table (accounts or admins).
    """

    def __init__(self, db: Session, model, editable_fields: Iterable[str], label: str = "Account"):
        self.db = db
        self.model = model
        self.editable_fields = frozenset(editable_fields)
        self.label = label

    def create(self, **columns: Any):
        """
        Insert a new record.

        Raises:
            ConflictError: If the email is already taken
        """
        columns["email"] = normalize_email(columns["email"])
        record = self.model(**columns)
        self.db.add(record)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"{self.label} creation rejected: {columns['email']} already exists")
            raise ConflictError("Email already exists")
        self.db.refresh(record)
        return record

    def find_by_email(self, email: str):
        return self.db.query(self.model).filter(self.model.email == normalize_email(email)).first()

    def find_by_id(self, record_id: int):
        return self.db.get(self.model, record_id)

    def get_by_id(self, record_id: int):
        """Like ``find_by_id`` but raises ``NotFoundError``."""
        record = self.find_by_id(record_id)
        if record is None:
            raise NotFoundError(f"{self.label} with id {record_id} does not exist")
        return record

    def list_all(self) -> List:
        return self.db.query(self.model).order_by(self.model.created_at.desc(), self.model.id.desc()).all()

    def update_by_id(self, record_id: int, changes: Dict[str, Any]):
        """
        Apply a self-service profile update.

        Only allow-listed fields are written; identifiers, email, role,
        password and managed fields are silently dropped.
        """
        applied = {key: value for key, value in changes.items() if key in self.editable_fields}
        ignored = sorted(set(changes) - set(applied))
        if ignored:
            logger.info(f"{self.label} {record_id} profile update ignored fields: {ignored}")

        record = self.get_by_id(record_id)
        for key, value in applied.items():
            setattr(record, key, value)
        self.db.commit()
        self.db.refresh(record)
        return record

    def update_role(self, record_id: int, role):
        """Privileged role change."""
        record = self.get_by_id(record_id)
        record.role = role
        self.db.commit()
        self.db.refresh(record)
        return record

    def delete_by_id(self, record_id: int):
        """Privileged hard delete; returns the removed record."""
        record = self.get_by_id(record_id)
        self.db.delete(record)
        self.db.commit()
        return record


class AccountStore(IdentityStore):
    """
    Member accounts, plus the writes owned by the password lifecycle.
    """

    def __init__(self, db: Session):
        super().__init__(db, Account, ACCOUNT_EDITABLE_FIELDS, label="Account")

    def set_password_hash(self, account: Account, password_hash: str) -> None:
        account.password_hash = password_hash
        account.password_changed_at = utcnow()
        self.db.commit()

    def set_reset_token(self, account: Account, token_hash: str, expires_at: datetime) -> None:
        account.reset_token_hash = token_hash
        account.reset_token_expires = expires_at
        self.db.commit()

    def find_by_reset_token(self, token_hash: str, now: Optional[datetime] = None) -> Optional[Account]:
        """Account holding ``token_hash`` whose token has not yet expired."""
        now = now or utcnow()
        return (
            self.db.query(Account)
            .filter(Account.reset_token_hash == token_hash, Account.reset_token_expires > now)
            .first()
        )

    def consume_reset_token(self, account_id: int, token_hash: str, password_hash: str,
                            now: Optional[datetime] = None) -> bool:
        """
        Store the new password hash and clear the token, only if the token
        is still held and unexpired. Returns False when another request
        consumed it first.
        """
        now = now or utcnow()
        result = self.db.execute(
            update(Account)
            .where(
                Account.id == account_id,
                Account.reset_token_hash == token_hash,
                Account.reset_token_expires > now,
            )
            .values(
                password_hash=password_hash,
                reset_token_hash=None,
                reset_token_expires=None,
                password_changed_at=now,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        self.db.expire_all()
        return result.rowcount == 1

    def set_verification_code(self, account: Account, code: str, expires_at: datetime) -> None:
        account.verification_code = code
        account.verification_code_expires = expires_at
        self.db.commit()

    def mark_email_verified(self, account_id: int, code: str, now: Optional[datetime] = None) -> bool:
        """
        Mark the account verified and clear the code, only if ``code`` is
        the stored, unexpired one.
        """
        now = now or utcnow()
        result = self.db.execute(
            update(Account)
            .where(
                Account.id == account_id,
                Account.verification_code == code,
                Account.verification_code_expires > now,
            )
            .values(
                email_verified=True,
                verification_code=None,
                verification_code_expires=None,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        self.db.expire_all()
        return result.rowcount == 1
