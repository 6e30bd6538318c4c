"""Translate SQLAlchemy failures into StoreError."""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy.exc import SQLAlchemyError

from threadmail.errors import StoreError
from threadmail.utils.logger import get_logger

logger = get_logger("threadmail.db.repositories")


@contextmanager
def store_errors(action: str, **context) -> Generator[None, None, None]:
    """Wrap a block of DB work; SQLAlchemy errors become StoreError("Failed to <action>.")."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("repository.store_error", action=action, error=str(e), **context)
        raise StoreError(f"Failed to {action}.") from e
