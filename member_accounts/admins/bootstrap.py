"""
First SuperAdmin creation from environment configuration.
"""
import logging

from sqlalchemy.orm import sessionmaker

from ..config import Settings
from ..core.security import CredentialService
from ..exceptions import ConflictError
from .models import Admin, AdminRole
from .service import AdminStore

# Set up logging
logger = logging.getLogger(__name__)


def bootstrap_admin_if_needed(session_factory: sessionmaker, credentials: CredentialService,
                              settings: Settings) -> bool:
    """
    Create a SuperAdmin from BOOTSTRAP_ADMIN_EMAIL / BOOTSTRAP_ADMIN_PASSWORD
    when both are set and no admin exists yet.

    Returns:
        bool: True if an admin was created
    """
    if not settings.bootstrap_admin_email or not settings.bootstrap_admin_password:
        logger.info("Bootstrap admin not configured; skipping")
        return False

    with session_factory() as db:
        if db.query(Admin).first() is not None:
            logger.info("Admin accounts already exist; skipping bootstrap")
            return False
        try:
            admin = AdminStore(db).create(
                full_name=settings.bootstrap_admin_name,
                email=settings.bootstrap_admin_email,
                role=AdminRole.SUPER_ADMIN,
                password_hash=credentials.hash_password(settings.bootstrap_admin_password),
            )
        except ConflictError:
            # Another worker bootstrapped concurrently
            logger.info("Bootstrap admin already created by another process")
            return False

    logger.info(f"Bootstrap admin created: {admin.id}")
    return True
