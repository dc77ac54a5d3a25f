from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api import analytics as analytics_api
from app.api import auth as auth_api
from app.api import deps
from app.api import trades as trades_api
from app.db import base  # noqa: F401
from app.models.base import Base
from app.models.users import User


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    try:
        yield TestingSessionLocal
    finally:
        engine.dispose()


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def _add_user(db, email: str) -> str:
    user = User(email=email, username=email.split("@")[0], password_hash="x")
    db.add(user)
    db.commit()
    return user.id


@pytest.fixture()
def user_id(db_session) -> str:
    return _add_user(db_session, "alice@example.com")


@pytest.fixture()
def other_user_id(db_session) -> str:
    return _add_user(db_session, "bob@example.com")


@pytest.fixture()
def make_client(session_factory):
    """Build a TestClient whose requests run as ``user_id``."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    def factory(user_id: str | None = None) -> TestClient:
        app = FastAPI()
        app.include_router(auth_api.router)
        app.include_router(trades_api.router)
        app.include_router(analytics_api.router)
        app.dependency_overrides[deps.get_db] = override_get_db
        if user_id is not None:
            app.dependency_overrides[deps.get_current_user_id] = lambda: user_id
        return TestClient(app)

    return factory


@pytest.fixture()
def client(make_client, user_id) -> TestClient:
    return make_client(user_id)
