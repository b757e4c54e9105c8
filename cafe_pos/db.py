"""
Database engine and session handling for Cafe POS.

The till runs against a local SQLite file by default; any SQLAlchemy URL
works through DATABASE_URL. SQLite connections are shared across FastAPI's
worker threads, so its same-thread check is turned off.

Tables are created on import. Services never commit implicitly: each
write path (order submission, settlement, stock flags) commits once itself.
"""

from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .config import DATABASE_URL
from .models import Base


def _connect_args(url: str) -> Dict[str, Any]:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args(DATABASE_URL),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Optional[Engine] = None) -> None:
    """Create any missing tables on ``bind`` (the default engine when omitted)."""
    Base.metadata.create_all(bind=bind or engine)


init_db()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request, always closed."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
