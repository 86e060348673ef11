"""
Core security utilities: password hashing, signed session tokens and the
one-time secrets used by the password lifecycle.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import hashlib
import logging
import secrets
import string

from jose import jwt, JWTError
from passlib.context import CryptContext

from ..config import Settings
from ..exceptions import AuthenticationError

# Set up logging
logger = logging.getLogger(__name__)

TOKEN_CLAIMS = ("id", "email", "role")


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a session token."""
    id: int
    email: str
    role: str


class CredentialService:
    """
    Hashes and verifies passwords, issues and verifies session tokens.

    Verification is stateless: a token stays valid until it expires.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 60 * 24,
        bcrypt_rounds: int = 12,
    ):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_expire_minutes = access_token_expire_minutes
        # Password hashing context
        self._pwd_context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=bcrypt_rounds
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialService":
        return cls(
            secret_key=settings.secret_key,
            algorithm=settings.algorithm,
            access_token_expire_minutes=settings.access_token_expire_minutes,
            bcrypt_rounds=settings.bcrypt_rounds,
        )

    def hash_password(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            str: Salted bcrypt hash
        """
        return self._pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        """
        Verify a password against a hash.

        Args:
            plain_password: Plain text password
            hashed_password: Hashed password to compare against

        Returns:
            bool: True if password matches hash; False for a missing or
            unrecognized hash
        """
        if not hashed_password:
            return False
        try:
            return self._pwd_context.verify(plain_password, hashed_password)
        except ValueError:
            logger.warning("Stored password hash is not a recognized bcrypt hash")
            return False

    def dummy_verify(self) -> None:
        """Spend the time of a real verification when no account matched."""
        self._pwd_context.dummy_verify()

    def issue_token(
        self,
        id: int,
        email: str,
        role: str,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """
        Create a signed access token.

        Args:
            id: Account or admin id
            email: Normalized email
            role: Role value
            expires_delta: Token lifetime (default: configured minutes)

        Returns:
            str: Encoded JWT
        """
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=self.access_token_expire_minutes)
        )
        to_encode: Dict[str, Any] = {"id": id, "email": email, "role": role, "exp": expire}
        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def verify_token(self, token: Optional[str]) -> TokenClaims:
        """
        Verify and decode an access token.

        Raises:
            AuthenticationError: On bad signature, expiry, malformed token
            or missing claims
        """
        if not token:
            raise AuthenticationError("Invalid or expired token")
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise AuthenticationError("Invalid or expired token")

        if any(claim not in payload for claim in TOKEN_CLAIMS):
            raise AuthenticationError("Invalid token payload")
        if not isinstance(payload["id"], int) or not isinstance(payload["email"], str) \
                or not isinstance(payload["role"], str):
            raise AuthenticationError("Invalid token payload")
        return TokenClaims(id=payload["id"], email=payload["email"], role=payload["role"])


def generate_reset_token() -> str:
    """
    Generate a secure token for password reset.

    Returns:
        str: URL-safe random token
    """
    return secrets.token_urlsafe(32)


def hash_token(token: str) -> str:
    """
    Hash a token for storage; only the hash is persisted.

    Args:
        token: Token to hash

    Returns:
        str: SHA-256 hex digest
    """
    return hashlib.sha256(token.encode()).hexdigest()


def generate_verification_code(length: int = 6) -> str:
    """
    Generate a random email verification code of uppercase letters and digits.
    """
    alphabet = string.ascii_uppercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def expiry_from_now(minutes: int) -> datetime:
    """
    Get an expiration time.

    Args:
        minutes: Minutes until expiration

    Returns:
        datetime: Expiration time in UTC
    """
    return datetime.now(timezone.utc) + timedelta(minutes=minutes)
