"""User repository: the recipient directory."""

from sqlalchemy import select

from threadmail.db import get_session
from threadmail.db.models.mail import User
from threadmail.db.repositories._errors import store_errors
from threadmail.models.recipient import Recipient


def list_directory() -> list[Recipient]:
    """All directory users as recipients, ordered by id."""
    with store_errors("fetch users"):
        with get_session() as session:
            rows = session.scalars(select(User).order_by(User.id)).all()
            return [
                Recipient(
                    id=r.id,
                    first_name=r.first_name,
                    last_name=r.last_name,
                    company=r.company,
                    job_title=r.job_title,
                    email=r.email,
                )
                for r in rows
            ]


def find_by_email(email: str) -> list[User]:
    """Users whose address matches ``email`` (case-insensitive). Empty list when none."""
    with store_errors("fetch users"):
        with get_session() as session:
            rows = list(session.scalars(select(User).where(User.email == (email or "").strip().lower())).all())
            session.expunge_all()
            return rows
