"""Pytest fixtures for zoovie-social tests."""

import os

# Settings are read at import time; point them at SQLite before importing the package
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite://"
os.environ["DEBUG"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.orm import sessionmaker

from zoovie_social.core.security import create_access_token
from zoovie_social.database import build_engine, get_db, init_db
from zoovie_social.main import create_app
from zoovie_social.models.user import UserProfile
from zoovie_social.services.relationship_service import RelationshipService

USER_PROFILES = [
    ("u-1", "alice", "Alice", "https://cdn.example.com/a.png"),
    ("u-2", "bob", "Bob", None),
    ("u-3", "carol", "Carol", "https://cdn.example.com/c.png"),
    ("u-4", "dave", "Dave", None),
]


def auth_headers(user_id: str) -> dict:
    """Bearer header for a user, as issued by the identity provider"""
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite engine with the schema and four user profiles.

    A file (not :memory:) so that several sessions and threads share data.
    """
    engine = build_engine(f"sqlite:///{tmp_path / 'friends.db'}")
    init_db(engine)

    Session = sessionmaker(bind=engine)
    with Session() as session:
        for user_id, username, display_name, avatar_url in USER_PROFILES:
            session.add(UserProfile(
                id=user_id,
                username=username,
                display_name=display_name,
                avatar_url=avatar_url,
            ))
        session.commit()

    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def service(db_session):
    return RelationshipService(db_session)


@pytest.fixture
def app(engine, session_factory):
    """Application wired to the test database, rate limiting off"""
    app = create_app(
        engine=engine,
        limiter=Limiter(key_func=get_remote_address, enabled=False),
    )

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
