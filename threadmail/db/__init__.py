"""Database package: engine, session factory, init_db(), get_session()."""

import threading
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from threadmail.config import DATABASE_URL, SEED_DEMO_DATA
from threadmail.db.base import Base

# Import all models so Base.metadata has all tables
from threadmail.db.models import (  # noqa: F401
    Email,
    Folder,
    Template,
    Thread,
    ThreadFolder,
    User,
)

_init_lock = threading.Lock()
_engine = None
_SessionLocal: sessionmaker | None = None


def _get_engine():
    """Create engine with check_same_thread=False for use from executor threads."""
    url = DATABASE_URL
    if not url.startswith("sqlite"):
        return create_engine(url, echo=False)
    kwargs = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url or url.rstrip("/") == "sqlite:":
        # One shared connection, otherwise every pooled connection sees its own empty database
        kwargs["poolclass"] = StaticPool
    return create_engine(url, echo=False, **kwargs)


def init_db() -> None:
    """Create engine and tables; ensure folders and the current user exist. Seed demo data on first creation."""
    global _engine, _SessionLocal
    with _init_lock:
        if _SessionLocal is not None:
            return
        _engine = _get_engine()
        fresh = not inspect(_engine).has_table("threads")
        Base.metadata.create_all(bind=_engine)

        from threadmail.db.seed_data import ensure_reference_data, seed_demo_data

        with Session(bind=_engine) as session:
            ensure_reference_data(session)
            if fresh and SEED_DEMO_DATA:
                seed_demo_data(session)
            session.commit()
        _SessionLocal = sessionmaker(bind=_engine, autocommit=False, autoflush=False, expire_on_commit=False)


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Context manager yielding a DB session. Calls init_db() on first use."""
    init_db()
    session = _SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
