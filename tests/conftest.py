"""
UGP — Shared pytest fixtures.
"""

from __future__ import annotations

import os
import secrets
from typing import Dict, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# ─── Environment setup (before any app imports) ───────────────────────────────

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", secrets.token_hex(32))
os.environ.setdefault("ENVIRONMENT", "development")

# ─── App imports (after env is set) ───────────────────────────────────────────

from app.database import Base  # noqa: E402
from app.models import content, localization, permissions, users  # noqa: E402,F401
from app.models.content import ContentNode  # noqa: E402
from app.models.localization import LocalizedText  # noqa: E402
from app.models.users import User, UserType  # noqa: E402

# ─────────────────────────────────────────────────────────────────────────────
# DATABASE FIXTURES
# ─────────────────────────────────────────────────────────────────────────────


def _make_engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def set_pragmas(dbapi_conn, _):
        dbapi_conn.isolation_level = None
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    return engine


@pytest.fixture(scope="function")
def session_factory():
    """In-memory SQLite sessionmaker, fresh for every test function."""
    engine = _make_engine()
    factory = sessionmaker(
        bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
    )
    yield factory
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


# ─────────────────────────────────────────────────────────────────────────────
# CONTENT TREE / USER TYPE FIXTURES
# ─────────────────────────────────────────────────────────────────────────────
#
#   -1 (virtual root)
#    └── 1 Home
#         ├── 5 News
#         │    └── 6 Article
#         └── 7 About


@pytest.fixture(scope="function")
def seeded(db_session: Session) -> Dict[str, object]:
    roles = {
        "system": UserType(id=0, name="System", alias="system"),
        "admin": UserType(id=1, name="Administrators", alias="admin"),
        "writer": UserType(id=2, name="Writer", alias="writer"),
        "editor": UserType(id=3, name="Editor", alias="editor"),
        "translator": UserType(id=4, name="translator", alias="translator"),
    }
    db_session.add_all(roles.values())
    db_session.flush()

    people = {
        "admin": User(id=10, name="Admin", user_type_id=1, culture="en-US"),
        "writer": User(id=20, name="Wren", user_type_id=2),
        "editor_a": User(id=30, name="Eddie", user_type_id=3, culture="en-US"),
        "editor_b": User(id=31, name="Ezra", user_type_id=3, culture="da-DK"),
        "translator": User(id=40, name="Tove", user_type_id=4),
    }
    db_session.add_all(people.values())

    home = ContentNode.create(1, "Home")
    news = ContentNode.create(5, "News", parent=home)
    article = ContentNode.create(6, "Article", parent=news)
    about = ContentNode.create(7, "About", parent=home)
    nodes = {"home": home, "news": news, "article": article, "about": about}
    db_session.add_all(nodes.values())

    db_session.add_all(
        [
            LocalizedText(key="actions/browse", culture="en-US", value="Browse Node"),
            LocalizedText(key="actions/create", culture="en-US", value="Create"),
            LocalizedText(key="actions/update", culture="en-US", value="Update"),
            LocalizedText(key="actions/delete", culture="en-US", value="Delete"),
            LocalizedText(key="actions/publish", culture="en-US", value="Publish"),
            LocalizedText(key="actions/rights", culture="en-US", value="[rights]"),
            LocalizedText(key="actions/move", culture="en-US", value="  "),
        ]
    )
    db_session.commit()

    return {"roles": roles, "users": people, "nodes": nodes}


# ─────────────────────────────────────────────────────────────────────────────
# FASTAPI CLIENT FIXTURE
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(scope="function")
def client(session_factory, seeded) -> Generator[TestClient, None, None]:
    """FastAPI TestClient with overridden DB dependency."""
    from app.database import get_db
    from app.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


# ─────────────────────────────────────────────────────────────────────────────
# JWT TOKEN FIXTURES
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def admin_token() -> str:
    from app.core.security import create_access_token

    return create_access_token(10, "admin")


@pytest.fixture(scope="session")
def editor_token() -> str:
    from app.core.security import create_access_token

    return create_access_token(30, "editor")
