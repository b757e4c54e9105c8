import os
from decimal import Decimal

# Keep the import-time engine off the filesystem
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import cafe_pos.config as config_mod
import cafe_pos.db as db
from cafe_pos.main import app
from cafe_pos.models import MenuCategory, MenuItem
from cafe_pos.routes.bills import limiter
from cafe_pos.seed_menu import seed_menu


@pytest.fixture(autouse=True)
def no_receipt_generator(monkeypatch):
    """Never reach OpenAI from tests; receipts use the local template unless a test opts in."""
    monkeypatch.setattr(config_mod, "RECEIPT_GENERATION_ENABLED", False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


@pytest.fixture
def session_factory():
    """Session factory bound to a fresh in-memory SQLite database.

    Uses StaticPool so all connections share the same in-memory database.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db.init_db(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    """A session over the seeded default menu and tables."""
    session = session_factory()
    seed_menu(session)
    yield session
    session.close()


@pytest.fixture
def client(session_factory, monkeypatch):
    """Shared FastAPI TestClient over the seeded in-memory database."""
    monkeypatch.setattr(db, "SessionLocal", session_factory)

    session = session_factory()
    seed_menu(session)
    session.close()

    # Override FastAPI DB dependency
    def override_get_db():
        db_sess = session_factory()
        try:
            yield db_sess
        finally:
            db_sess.close()

    app.dependency_overrides[db.get_db] = override_get_db

    limiter.enabled = False
    limiter.reset()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def breakfast_latte(client, session_factory):
    """Put a second "Latte" on the menu, under All Day Breakfast."""
    session = session_factory()
    try:
        breakfast = session.query(MenuCategory).filter_by(name="All Day Breakfast").one()
        session.add(MenuItem(category=breakfast, name="Latte", price=Decimal("149"), position=99))
        session.commit()
    finally:
        session.close()
