"""
Test configuration for the member accounts backend.
"""
import pytest
from fastapi.testclient import TestClient

from member_accounts.accounts.store import AccountStore
from member_accounts.config import Settings
from member_accounts.core.security import CredentialService
from member_accounts.core.sequences import SequenceGenerator
from member_accounts.database import Base, create_db_engine, create_session_factory
from member_accounts.main import create_app
from tests.helpers import RecordingEmailSender


@pytest.fixture
def settings(tmp_path):
    """
    Settings pointing at a fresh SQLite file; bcrypt rounds lowered for speed.
    """
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        secret_key="test-secret-key",
        bcrypt_rounds=4,
        frontend_url="http://frontend.test",
    )


@pytest.fixture
def engine(settings):
    engine = create_db_engine(settings)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db(session_factory):
    """
    Create a database session for each test.
    """
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return AccountStore(db)


@pytest.fixture
def credentials(settings):
    return CredentialService.from_settings(settings)


@pytest.fixture
def sequences(session_factory):
    return SequenceGenerator(session_factory)


@pytest.fixture
def email_sender():
    return RecordingEmailSender()


@pytest.fixture
def app(settings, email_sender):
    return create_app(settings, email_sender=email_sender)


@pytest.fixture
def client(app):
    """
    Create a test client; entering it runs the lifespan, which creates tables.
    """
    with TestClient(app) as client:
        yield client
