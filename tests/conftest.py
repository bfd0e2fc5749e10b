# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from plikeme.core.security import create_access_token, hash_password
from plikeme.core.settings import Settings
from plikeme.db.session import Base
from plikeme.db.session import get_db as app_get_session
from plikeme.main import app as fastapi_app
from plikeme.models import Community, Thread, ThreadCommunity, User

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "Secret123!"

_TEST_SETTINGS_INSTANCE = Settings()

DIABETES_DIMENSIONS = {
    "stage": {"label": "Stage", "values": ["Newly diagnosed", "Stable"]},
    "type": {"label": "Type", "values": ["Type 1", "Type 2"]},
}


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    session.begin_nested()

    @event.listens_for(session, "after_transaction_end")
    def restart_savepoint(sess: Session, trans) -> None:  # pragma: no cover - SQLAlchemy internals
        if trans.nested and not getattr(trans._parent, "nested", False):
            session.begin_nested()

    try:
        yield session
    finally:
        event.remove(session, "after_transaction_end", restart_savepoint)
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide a Settings instance aligned with runtime configuration."""
    return _TEST_SETTINGS_INSTANCE


def make_user(db: Session, username: str, **fields) -> User:
    """Persist a user whose password is ``TEST_PASSWORD``."""
    user = User(username=username, password_hash=hash_password(TEST_PASSWORD), **fields)
    db.add(user)
    db.flush()
    db.refresh(user)
    return user


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.username)}"}


@pytest.fixture()
def test_user(db_session: Session) -> Iterator[User]:
    """Create and return a persisted test user."""
    yield make_user(db_session, "alice")


@pytest.fixture()
def other_user(db_session: Session) -> Iterator[User]:
    """Create and return a second persisted user."""
    yield make_user(db_session, "bob")


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return bearer(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return bearer(other_user)


@pytest.fixture()
def community(db_session: Session) -> Iterator[Community]:
    """Create a community with stage and type dimensions."""
    community = Community(
        name="Diabetes",
        description="Blood sugar management",
        keywords="diabetes insulin glucose",
        member_count=0,
        dimensions=DIABETES_DIMENSIONS,
    )
    db_session.add(community)
    db_session.flush()
    db_session.refresh(community)
    yield community


@pytest.fixture()
def plain_community(db_session: Session) -> Iterator[Community]:
    """Create a community without dimensions."""
    community = Community(
        name="Asthma",
        description="Breathing easier together",
        keywords="asthma inhaler",
        member_count=0,
    )
    db_session.add(community)
    db_session.flush()
    db_session.refresh(community)
    yield community


@pytest.fixture()
def thread(db_session: Session, test_user: User, community: Community) -> Iterator[Thread]:
    """Create a thread by the primary user linked to the community at Level I."""
    thread = Thread(user_id=test_user.id, title="First week on insulin", content="Notes so far")
    thread.community_links.append(ThreadCommunity(community_id=community.id))
    db_session.add(thread)
    db_session.flush()
    db_session.refresh(thread)
    yield thread
