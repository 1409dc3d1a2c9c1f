import os

# Settings are read at import time; point them at throwaway locations before importing the app.
os.environ.setdefault("SQLITE_DATABASE_URL", "sqlite://")
os.environ.setdefault("BLOB_STORE_BACKEND", "local")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from manupedia.core.db import get_db
from manupedia.core.object_storage import LocalBlobStore, get_blob_store
from manupedia.main import app
from manupedia.models import Base, User
from manupedia.services.manuscript_service import ManuscriptService
from manupedia.services.moderation_service import ModerationService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def blob_store(tmp_path):
    store = LocalBlobStore(tmp_path / "uploads" / "manuscripts")
    store.ensure_ready()
    return store


def _add_user(db, user_id, username, display_name, role="user"):
    user = User(
        id=user_id,
        username=username,
        email=f"{username}@example.com",
        display_name=display_name,
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def owner(db):
    return _add_user(db, 42, "eleanor", "Eleanor Vance")


@pytest.fixture
def other_user(db):
    return _add_user(db, 99, "marcus", "Marcus Reid")


@pytest.fixture
def admin_user(db):
    return _add_user(db, 1, "curator", "Head Curator", role="admin")


@pytest.fixture
def manuscript_service(db, blob_store):
    return ManuscriptService(db=db, blob_store=blob_store)


@pytest.fixture
def moderation_service(db, blob_store):
    return ModerationService(db=db, blob_store=blob_store)


@pytest.fixture
def client(session_factory, blob_store):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    yield TestClient(app)
    app.dependency_overrides.clear()
