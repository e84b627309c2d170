# app/core/database.py
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.core.config import DATABASE_URL, DB_ECHO

logger = logging.getLogger("itemvault.db")
logger.setLevel(logging.INFO)


def make_engine(url: str, echo: bool = False):
    kwargs = {"echo": echo, "pool_pre_ping": True}
    if url.startswith("sqlite"):
        # FastAPI serves sync routes from a threadpool
        kwargs["connect_args"] = {"check_same_thread": False}
    return create_engine(url, **kwargs)


engine = make_engine(DATABASE_URL, DB_ECHO)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

Base = declarative_base()


def init_db(bind=None) -> None:
    """Create every table registered on Base (dev/test; production uses Alembic)."""
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables created (if not already present).")


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """
    One atomic unit against the store: commit when the block finishes,
    roll back and re-raise on any exception so no partial mutation survives.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
