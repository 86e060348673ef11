"""
Password lifecycle: forgot / reset / change password and email verification.

Every password written here goes through ``CredentialService.hash_password``.
Reset tokens are stored as SHA-256 hashes with an expiry and are consumed by
a conditional update, so a token can be used once.
"""
import logging
from typing import Any, Dict

from ..config import Settings
from ..core.audit import create_audit_log
from ..core.email import EmailSender
from ..core.security import (
    CredentialService,
    expiry_from_now,
    generate_reset_token,
    generate_verification_code,
    hash_token,
)
from ..exceptions import AuthenticationError, NotFoundError, ValidationError
from .store import AccountStore

# Set up logging
logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If the email is registered, a password reset link has been sent"
RESEND_VERIFICATION_MESSAGE = "If the email is registered and unverified, a new verification code has been sent"
INVALID_VERIFICATION_CODE = "Email verification code is invalid"
INVALID_RESET_TOKEN = "Password reset token is invalid or has expired"


def _check_confirmation(new_password: str, confirm_password: str) -> None:
    if new_password != confirm_password:
        raise ValidationError("confirm_password does not match new_password")


class PasswordLifecycleManager:
    def __init__(
        self,
        store: AccountStore,
        credentials: CredentialService,
        email_sender: EmailSender,
        settings: Settings,
    ):
        self.store = store
        self.credentials = credentials
        self.email_sender = email_sender
        self.settings = settings

    def forgot_password(self, email: str) -> Dict[str, Any]:
        """
        Issue a reset token for the account, if there is one.

        The response is the same whether or not the email is registered.
        """
        account = self.store.find_by_email(email)
        if account is None:
            logger.info("Password reset requested for an unknown email")
            return {"message": FORGOT_PASSWORD_MESSAGE}

        reset_token = generate_reset_token()
        expires_at = expiry_from_now(self.settings.reset_token_expire_minutes)
        self.store.set_reset_token(account, hash_token(reset_token), expires_at)
        create_audit_log(self.store.db, action="PASSWORD_RESET_REQUESTED", actor_id=account.id)

        reset_url = f"{self.settings.frontend_url}/reset-password?token={reset_token}"
        try:
            self.email_sender.send_password_reset(account.email, account.full_name, reset_url, expires_at)
            logger.info(f"Password reset email sent for account {account.id}")
        except Exception as e:
            logger.error(f"Failed to send password reset email for account {account.id}: {str(e)}")

        return {"message": FORGOT_PASSWORD_MESSAGE}

    def reset_password(self, token: str, new_password: str, confirm_password: str) -> Dict[str, Any]:
        """
        Set a new password using a reset token.

        Raises:
            ValidationError: If the confirmation does not match
            NotFoundError: If no account holds the unexpired token
        """
        _check_confirmation(new_password, confirm_password)

        token_hash = hash_token(token)
        account = self.store.find_by_reset_token(token_hash)
        if account is None:
            logger.warning("Password reset failed: invalid or expired token")
            raise NotFoundError(INVALID_RESET_TOKEN)

        password_hash = self.credentials.hash_password(new_password)
        if not self.store.consume_reset_token(account.id, token_hash, password_hash):
            logger.warning(f"Password reset failed: token for account {account.id} already used")
            raise NotFoundError(INVALID_RESET_TOKEN)

        logger.info(f"Password reset successful for account {account.id}")
        create_audit_log(self.store.db, action="PASSWORD_RESET_COMPLETED", actor_id=account.id)
        self._notify_password_changed(account)
        return {"message": "Password reset successful"}

    def change_password(self, account_id: int, old_password: str, new_password: str,
                        confirm_password: str) -> Dict[str, Any]:
        """
        Change the password of an authenticated account.

        Raises:
            ValidationError: If the confirmation does not match
            NotFoundError: If the account no longer exists
            AuthenticationError: If the old password is wrong
        """
        _check_confirmation(new_password, confirm_password)

        account = self.store.get_by_id(account_id)
        if not self.credentials.verify_password(old_password, account.password_hash):
            logger.warning(f"Password change failed for account {account_id}: wrong old password")
            create_audit_log(self.store.db, action="PASSWORD_CHANGE_FAILED", actor_id=account_id)
            raise AuthenticationError("Invalid credentials")

        self.store.set_password_hash(account, self.credentials.hash_password(new_password))
        logger.info(f"Password changed for account {account_id}")
        create_audit_log(self.store.db, action="PASSWORD_CHANGED", actor_id=account_id)
        self._notify_password_changed(account)
        return {"message": "Password changed successfully"}

    def verify_email(self, email: str, code: str) -> Dict[str, Any]:
        """
        Confirm an email address with the code that was mailed to it.

        Raises:
            ValidationError: If the code is wrong or expired, or the email is unknown
        """
        account = self.store.find_by_email(email)
        if account is None or account.email_verified:
            # A verified account holds no code, so nothing matches
            raise ValidationError(INVALID_VERIFICATION_CODE)

        if not self.store.mark_email_verified(account.id, code):
            logger.warning(f"Email verification failed for account {account.id}")
            raise ValidationError(INVALID_VERIFICATION_CODE)

        logger.info(f"Email verified for account {account.id}")
        create_audit_log(self.store.db, action="EMAIL_VERIFIED", actor_id=account.id)
        return {"message": "Email verified successfully"}

    def resend_verification(self, email: str) -> Dict[str, Any]:
        account = self.store.find_by_email(email)
        if account is None or account.email_verified:
            return {"message": RESEND_VERIFICATION_MESSAGE}

        code = generate_verification_code()
        self.store.set_verification_code(
            account, code, expiry_from_now(self.settings.verification_code_expire_minutes)
        )
        try:
            self.email_sender.send_verification_code(account.email, account.full_name, code)
            logger.info(f"Verification code resent for account {account.id}")
        except Exception as e:
            logger.error(f"Failed to resend verification code for account {account.id}: {str(e)}")
        return {"message": RESEND_VERIFICATION_MESSAGE}

    def _notify_password_changed(self, account) -> None:
        try:
            self.email_sender.send_password_changed(account.email, account.full_name)
        except Exception as e:
            logger.error(f"Failed to send password changed notification for account {account.id}: {str(e)}")
