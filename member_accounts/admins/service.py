"""
Admin service layer: administrator creation and the privileged operations.
"""
import logging
from typing import Any, Dict, List, Optional

from ..accounts.schemas import AccountResponse
from ..accounts.store import AccountStore, IdentityStore
from ..core.audit import create_audit_log
from ..core.security import CredentialService
from ..core.sequences import ADMIN_DEFAULT_PASSWORD, SequenceGenerator
from ..exceptions import AuthenticationError
from .models import Admin, AdminRole
from .schemas import AdminResponse

# Set up logging
logger = logging.getLogger(__name__)

ADMIN_EDITABLE_FIELDS = ("full_name",)
DEFAULT_PASSWORD_PREFIX = "Password#"


class AdminStore(IdentityStore):
    def __init__(self, db):
        super().__init__(db, Admin, ADMIN_EDITABLE_FIELDS, label="Admin")


class AdminService:
    def __init__(
        self,
        store: AdminStore,
        account_store: AccountStore,
        credentials: CredentialService,
        sequences: SequenceGenerator,
    ):
        self.store = store
        self.account_store = account_store
        self.credentials = credentials
        self.sequences = sequences

    def _token_for(self, admin: Admin) -> str:
        return self.credentials.issue_token(admin.id, admin.email, admin.role.value)

    def create(self, full_name: str, email: str, role: AdminRole = AdminRole.ADMIN,
               password: Optional[str] = None, created_by: Optional[int] = None) -> Dict[str, Any]:
        """
        Create an administrator.

        Without a password, a default ``Password#<n>`` is derived from the
        admin default password sequence and returned instead of a token.

        Raises:
            ConflictError: If the email is already used by another admin
            SequenceUnavailableError: If no atomic sequence is available
        """
        default_password = None
        if not password:
            default_password = f"{DEFAULT_PASSWORD_PREFIX}{self.sequences.next(ADMIN_DEFAULT_PASSWORD)}"

        admin = self.store.create(
            full_name=full_name,
            email=email,
            role=role,
            password_hash=self.credentials.hash_password(password or default_password),
        )
        logger.info(f"Admin created: {admin.id} ({admin.role.value})")
        create_audit_log(self.store.db, action="ADMIN_CREATED", actor_id=created_by,
                         details={"admin_id": admin.id, "role": admin.role.value,
                                  "default_password": default_password is not None})

        data: Dict[str, Any] = {"admin": AdminResponse.model_validate(admin)}
        if default_password:
            data["default_password"] = default_password
        else:
            data["access_token"] = self._token_for(admin)
            data["token_type"] = "bearer"
        return data

    def login(self, email: str, password: str) -> Dict[str, Any]:
        admin = self.store.find_by_email(email)
        if admin is None:
            self.credentials.dummy_verify()
        if admin is None or not self.credentials.verify_password(password, admin.password_hash):
            logger.warning(f"Admin login failed for {email}")
            create_audit_log(self.store.db, action="ADMIN_LOGIN_FAILED", details={"email": email})
            raise AuthenticationError("Invalid login credentials")

        logger.info(f"Admin login successful: {admin.id}")
        create_audit_log(self.store.db, action="ADMIN_LOGIN_SUCCESS", actor_id=admin.id)
        return {
            "admin": AdminResponse.model_validate(admin),
            "access_token": self._token_for(admin),
            "token_type": "bearer",
        }

    def list_all(self) -> List[AdminResponse]:
        return [AdminResponse.model_validate(admin) for admin in self.store.list_all()]

    def get_profile(self, admin_id: int) -> AdminResponse:
        return AdminResponse.model_validate(self.store.get_by_id(admin_id))

    def update_profile(self, admin_id: int, changes: Dict[str, Any]) -> AdminResponse:
        return AdminResponse.model_validate(self.store.update_by_id(admin_id, changes))

    def update_role(self, admin_id: int, role: AdminRole, changed_by: Optional[int] = None) -> AdminResponse:
        admin = self.store.update_role(admin_id, role)
        logger.info(f"Admin {admin_id} role changed to {role.value}")
        create_audit_log(self.store.db, action="ADMIN_ROLE_CHANGED", actor_id=changed_by,
                         details={"admin_id": admin_id, "role": role.value})
        return AdminResponse.model_validate(admin)

    def remove(self, admin_id: int, removed_by: Optional[int] = None) -> AdminResponse:
        admin = AdminResponse.model_validate(self.store.get_by_id(admin_id))
        self.store.delete_by_id(admin_id)
        logger.info(f"Admin {admin_id} removed")
        create_audit_log(self.store.db, action="ADMIN_REMOVED", actor_id=removed_by,
                         details={"admin_id": admin_id})
        return admin

    def remove_account(self, account_id: int, removed_by: Optional[int] = None) -> AccountResponse:
        account = AccountResponse.model_validate(self.account_store.get_by_id(account_id))
        self.account_store.delete_by_id(account_id)
        logger.info(f"Account {account_id} removed")
        create_audit_log(self.store.db, action="ACCOUNT_REMOVED", actor_id=removed_by,
                         details={"account_id": account_id})
        return account
