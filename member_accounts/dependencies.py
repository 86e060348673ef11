"""
FastAPI dependencies: service construction from ``app.state`` and
bearer-token authentication for members and administrators.
"""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from .accounts.models import Account, Role
from .accounts.passwords import PasswordLifecycleManager
from .accounts.service import AccountService
from .accounts.store import AccountStore
from .admins.models import Admin, AdminRole
from .admins.service import AdminService, AdminStore
from .core.security import CredentialService, TokenClaims
from .database import get_db
from .exceptions import AuthenticationError, PermissionDeniedError

# Tokens are read from the Authorization header; missing tokens are
# reported through AuthenticationError so they share the error envelope.
account_token = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)
admin_token = OAuth2PasswordBearer(tokenUrl="/api/v1/admins/login", auto_error=False)

ACCOUNT_ROLES = {role.value for role in Role}
ADMIN_ROLES = {role.value for role in AdminRole}


def get_credentials(request: Request) -> CredentialService:
    return request.app.state.credentials


def get_account_service(request: Request, db: Session = Depends(get_db)) -> AccountService:
    state = request.app.state
    return AccountService(AccountStore(db), state.credentials, state.sequences, state.email_sender, state.settings)


def get_password_manager(request: Request, db: Session = Depends(get_db)) -> PasswordLifecycleManager:
    state = request.app.state
    return PasswordLifecycleManager(AccountStore(db), state.credentials, state.email_sender, state.settings)


def get_admin_service(request: Request, db: Session = Depends(get_db)) -> AdminService:
    state = request.app.state
    return AdminService(AdminStore(db), AccountStore(db), state.credentials, state.sequences)


def _claims(token: Optional[str], credentials: CredentialService, allowed_roles: set) -> TokenClaims:
    claims = credentials.verify_token(token)
    if claims.role not in allowed_roles:
        raise AuthenticationError("Invalid or expired token")
    return claims


def _subject(db: Session, model, claims: TokenClaims):
    """
    Load the token's subject. The record must still carry the email and
    role the token was issued for.
    """
    record = db.get(model, claims.id)
    if record is None or record.email != claims.email or record.role.value != claims.role:
        raise AuthenticationError("Invalid or expired token")
    return record


def get_current_account(
    token: Optional[str] = Depends(account_token),
    credentials: CredentialService = Depends(get_credentials),
    db: Session = Depends(get_db),
) -> Account:
    """
    Get the authenticated member account.

    Raises:
        AuthenticationError: If the token is invalid or no longer matches an account
    """
    return _subject(db, Account, _claims(token, credentials, ACCOUNT_ROLES))


def get_current_admin(
    token: Optional[str] = Depends(admin_token),
    credentials: CredentialService = Depends(get_credentials),
    db: Session = Depends(get_db),
) -> Admin:
    return _subject(db, Admin, _claims(token, credentials, ADMIN_ROLES))


def require_super_admin(current_admin: Admin = Depends(get_current_admin)) -> Admin:
    if current_admin.role != AdminRole.SUPER_ADMIN:
        raise PermissionDeniedError(
            f"Access denied. Required role: {AdminRole.SUPER_ADMIN.value}. Your role: {current_admin.role.value}"
        )
    return current_admin
