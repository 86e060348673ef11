"""
Account service layer: registration, login and profile management.
"""
import logging
from typing import Any, Dict

from ..config import Settings
from ..core.audit import create_audit_log
from ..core.email import EmailSender
from ..core.security import CredentialService, expiry_from_now, generate_verification_code
from ..core.sequences import MEMBERSHIP_ID, SequenceGenerator
from ..exceptions import AuthenticationError
from .models import Account
from .registration import validate_registration
from .schemas import AccountResponse, RegistrationRequest
from .store import AccountStore

# Set up logging
logger = logging.getLogger(__name__)


def format_membership_id(value: int) -> str:
    return f"MBR-{value:06d}"


class AccountService:
    def __init__(
        self,
        store: AccountStore,
        credentials: CredentialService,
        sequences: SequenceGenerator,
        email_sender: EmailSender,
        settings: Settings,
    ):
        self.store = store
        self.credentials = credentials
        self.sequences = sequences
        self.email_sender = email_sender
        self.settings = settings

    def _token_for(self, account: Account) -> str:
        return self.credentials.issue_token(account.id, account.email, account.role.value)

    def register(self, payload: RegistrationRequest) -> Dict[str, Any]:
        """
        Register a new member account.

        Args:
            payload: Raw signup payload

        Returns:
            Dict with the created account and an access token

        Raises:
            ValidationError: If role-specific fields are missing
            ConflictError: If the email is already registered
        """
        record = validate_registration(payload)
        logger.info(f"Registration attempt for {record.email} as {record.role.value}")

        membership_id = format_membership_id(self.sequences.next(MEMBERSHIP_ID))
        verification_code = generate_verification_code()

        account = self.store.create(
            email=record.email,
            membership_id=membership_id,
            full_name=record.full_name,
            password_hash=self.credentials.hash_password(record.password),
            role=record.role,
            email_verified=False,
            verification_code=verification_code,
            verification_code_expires=expiry_from_now(self.settings.verification_code_expire_minutes),
            **record.role_columns(),
            **record.profile,
        )
        logger.info(f"Account created: {account.id} ({membership_id})")
        create_audit_log(self.store.db, action="ACCOUNT_REGISTERED", actor_id=account.id,
                         details={"email": account.email, "role": account.role.value})

        try:
            self.email_sender.send_verification_code(account.email, account.full_name, verification_code)
        except Exception as e:
            # The account exists; the member can ask for a new code
            logger.error(f"Failed to send verification email to {account.email}: {str(e)}")

        return {
            "account": AccountResponse.model_validate(account),
            "access_token": self._token_for(account),
            "token_type": "bearer",
        }

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Authenticate a member and issue an access token.

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong
        """
        account = self.store.find_by_email(email)
        if account is None:
            self.credentials.dummy_verify()
        if account is None or not self.credentials.verify_password(password, account.password_hash):
            logger.warning(f"Login failed for {email}")
            create_audit_log(self.store.db, action="ACCOUNT_LOGIN_FAILED",
                             actor_id=account.id if account else None, details={"email": email})
            raise AuthenticationError("Invalid email or password")

        logger.info(f"Login successful: account {account.id}")
        create_audit_log(self.store.db, action="ACCOUNT_LOGIN_SUCCESS", actor_id=account.id)
        return {
            "account": AccountResponse.model_validate(account),
            "access_token": self._token_for(account),
            "token_type": "bearer",
        }

    def get_profile(self, account_id: int) -> AccountResponse:
        return AccountResponse.model_validate(self.store.get_by_id(account_id))

    def update_profile(self, account_id: int, changes: Dict[str, Any]) -> AccountResponse:
        account = self.store.update_by_id(account_id, changes)
        logger.info(f"Profile updated for account {account_id}")
        return AccountResponse.model_validate(account)
