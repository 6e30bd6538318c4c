"""Template repository: list, get, create, update, delete templates owned by a user."""

from typing import Optional

from sqlalchemy import delete as sa_delete
from sqlalchemy import select

from threadmail.db import get_session
from threadmail.db.base import utcnow
from threadmail.db.models.template import Template
from threadmail.db.repositories._errors import store_errors
from threadmail.errors import NotFoundError, ValidationError
from threadmail.utils.logger import get_logger

logger = get_logger("threadmail.db.template_repo")


def _require_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise ValidationError("Template name is required")
    return name


def list_templates(user_id: int) -> list[Template]:
    """Return the user's templates ordered by name (empty list when none)."""
    with store_errors("load templates", user_id=user_id):
        with get_session() as session:
            q = select(Template).where(Template.user_id == user_id).order_by(Template.name.asc(), Template.id.asc())
            rows = list(session.scalars(q).all())
            session.expunge_all()
            return rows


def get_by_id(template_id: int, user_id: int) -> Template:
    """Return the template matching id and owner. Raises NotFoundError otherwise (foreign ids look missing)."""
    with store_errors("load template", template_id=template_id, user_id=user_id):
        with get_session() as session:
            row = session.scalars(
                select(Template).where(Template.id == template_id).where(Template.user_id == user_id)
            ).first()
            if row is None:
                raise NotFoundError("Template not found.")
            session.expunge(row)
            return row


def create(user_id: int, name: str, subject: Optional[str] = "", body: Optional[str] = "") -> Template:
    """Insert a template. Blank names are rejected; subject/body default to ""."""
    _require_name(name)
    with store_errors("create template", user_id=user_id):
        with get_session() as session:
            row = Template(user_id=user_id, name=name, subject=subject or "", body=body or "")
            session.add(row)
            session.flush()
            session.refresh(row)
            session.expunge(row)
    logger.info("template_repo.created", template_id=row.id, user_id=user_id, name=name)
    return row


def update(
    template_id: int,
    user_id: int,
    name: str,
    subject: Optional[str],
    body: Optional[str],
) -> Template:
    """Replace name, subject and body of the matching template and bump updated_at."""
    _require_name(name)
    with store_errors("update template", template_id=template_id, user_id=user_id):
        with get_session() as session:
            row = session.scalars(
                select(Template).where(Template.id == template_id).where(Template.user_id == user_id)
            ).first()
            if row is None:
                raise NotFoundError("Template not found.")
            row.name = name
            row.subject = subject or ""
            row.body = body or ""
            row.updated_at = utcnow()
            session.flush()
            session.refresh(row)
            session.expunge(row)
    logger.info("template_repo.updated", template_id=template_id, user_id=user_id)
    return row


def delete(template_id: int, user_id: int) -> None:
    """Delete the matching template. Deleting a missing id is not an error."""
    with store_errors("delete template", template_id=template_id, user_id=user_id):
        with get_session() as session:
            result = session.execute(
                sa_delete(Template).where(Template.id == template_id).where(Template.user_id == user_id)
            )
    logger.info("template_repo.deleted", template_id=template_id, user_id=user_id, rows=result.rowcount)


def save(
    user_id: int,
    name: str,
    subject: Optional[str],
    body: Optional[str],
    template_id: Optional[int] = None,
) -> Template:
    """Update when an id is given, otherwise create."""
    if template_id:
        return update(template_id, user_id, name, subject, body)
    return create(user_id, name, subject, body)
