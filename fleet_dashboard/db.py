"""
Database connection management.

Environment variables:
    - DATABASE_URL: SQLAlchemy connection URL (see config.py for the default)

Schema changes are applied with Alembic (`alembic upgrade head`).
`init_db()` creates any missing tables directly and is used by the seed
script and the test suite.
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from .config import DATABASE_URL
from .models import Base


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # FastAPI runs sync handlers in a threadpool
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(
    DATABASE_URL,
    echo=False,
    **_engine_kwargs(DATABASE_URL),
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a SQLAlchemy Session.

    Usage:
        @router.get("/vehicles")
        def list_vehicles(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(bind=engine)
