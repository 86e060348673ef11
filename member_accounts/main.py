"""
FastAPI application factory.

Run with ``uvicorn member_accounts.main:create_app --factory``.
"""
from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .accounts.router import router as accounts_router
from .admins.bootstrap import bootstrap_admin_if_needed
from .admins.router import router as admins_router
from .config import Settings, get_settings
from .core.email import EmailSender, build_email_sender
from .core.middleware import setup_middlewares
from .core.security import CredentialService
from .core.sequences import SequenceGenerator
from .database import Base, create_db_engine, create_session_factory
from .exceptions import register_exception_handlers

# Import models so their tables are registered on Base.metadata
from .accounts import models as account_models  # noqa: F401
from .admins import models as admin_models  # noqa: F401
from .core import audit  # noqa: F401

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, email_sender: Optional[EmailSender] = None) -> FastAPI:
    """
    Build the application and its collaborators from explicit settings.

    Args:
        settings: Configuration (default: loaded from the environment)
        email_sender: Email delivery (default: SMTP if configured, else log only)

    Returns:
        FastAPI: The configured application
    """
    logging.basicConfig(level=logging.INFO)
    settings = settings or get_settings()

    engine = create_db_engine(settings)
    session_factory = create_session_factory(engine)
    credentials = CredentialService.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Member Accounts API...")
        Base.metadata.create_all(bind=engine)
        try:
            bootstrap_admin_if_needed(session_factory, credentials, settings)
        except Exception as e:
            logger.error(f"Bootstrap process failed: {str(e)}")
        yield
        logger.info("Shutting down Member Accounts API...")
        engine.dispose()

    app = FastAPI(
        title="Member Accounts API",
        description="Registration, authentication and password lifecycle for association members",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.credentials = credentials
    app.state.sequences = SequenceGenerator(session_factory)
    app.state.email_sender = email_sender or build_email_sender(settings)

    # Register exception handlers
    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_middlewares(app)

    app.include_router(accounts_router)
    app.include_router(admins_router)

    @app.get("/")
    def root():
        """
        Root endpoint for API health check.

        Returns:
            dict: Simple welcome message
        """
        return {"message": "Welcome to Member Accounts API", "version": __version__}

    @app.get("/health")
    def health_check():
        return {"status": "healthy", "version": __version__}

    return app
