"""Seed reference data (folders, current user) and demo mailbox data from CSV files."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from threadmail.config import DEFAULT_USER_EMAIL, DEFAULT_USER_ID
from threadmail.db.models import Email, Folder, Template, Thread, ThreadFolder, User
from threadmail.utils.csv_loader import load_emails, load_templates, load_users
from threadmail.utils.logger import get_logger

logger = get_logger("threadmail.db.seed_data")

DEFAULT_FOLDERS = ("Inbox", "Starred", "Drafts", "Sent", "Archive", "Trash")


def _clean(val: Any) -> str:
    return (str(val) if val is not None else "").strip()


def _parse_datetime(val: Any) -> datetime | None:
    s = _clean(val)
    if not s:
        return None
    try:
        parsed = datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def ensure_reference_data(session: Session) -> None:
    """Create missing default folders and the current user row. Safe to run on every start."""
    existing = set(session.scalars(select(Folder.name)).all())
    missing = [name for name in DEFAULT_FOLDERS if name not in existing]
    for name in missing:
        session.add(Folder(name=name))
    if missing:
        session.flush()
        logger.info("seed_data.folders", created=missing)

    if session.get(User, DEFAULT_USER_ID) is None:
        session.add(User(id=DEFAULT_USER_ID, first_name="Me", email=DEFAULT_USER_EMAIL))
        session.flush()
        logger.info("seed_data.current_user", user_id=DEFAULT_USER_ID, email=DEFAULT_USER_EMAIL)


def _get_or_create_user(session: Session, email: str, cache: dict[str, int]) -> int:
    if email in cache:
        return cache[email]
    row = session.scalars(select(User).where(User.email == email)).first()
    if row is None:
        row = User(email=email)
        session.add(row)
        session.flush()
    cache[email] = row.id
    return row.id


def seed_demo_data(session: Session) -> None:
    """Read demo data under data/ and insert it. FK order: users, threads, emails, thread_folders, templates."""
    # 1) Directory users
    user_rows = load_users()
    email_to_user_id: dict[str, int] = {
        email: user_id for user_id, email in session.execute(select(User.id, User.email)).all()
    }
    created_users = 0
    for r in user_rows:
        email = _clean(r.get("email")).lower()
        if not email or email in email_to_user_id:
            continue
        user = User(
            first_name=_clean(r.get("first_name")),
            last_name=_clean(r.get("last_name")),
            company=_clean(r.get("company")),
            job_title=_clean(r.get("job_title")),
            email=email,
        )
        session.add(user)
        session.flush()
        email_to_user_id[email] = user.id
        created_users += 1
    if user_rows:
        logger.info("seed_data.users", count=created_users)

    # 2) Threads + emails + folder membership, grouped by thread_key
    folder_ids = dict(session.execute(select(Folder.name, Folder.id)).all())
    email_rows = load_emails()
    key_to_thread: dict[str, Thread] = {}
    for r in email_rows:
        key = _clean(r.get("thread_key"))
        sender = _clean(r.get("sender_email")).lower()
        recipient = _clean(r.get("recipient_email")).lower() or DEFAULT_USER_EMAIL
        if not key or not sender:
            continue
        sent = _parse_datetime(r.get("sent_date")) or datetime.now(timezone.utc)
        subject = _clean(r.get("subject")) or None
        thread = key_to_thread.get(key)
        if thread is None:
            thread = Thread(subject=subject, last_activity_date=sent)
            session.add(thread)
            session.flush()
            key_to_thread[key] = thread
            folder_id = folder_ids.get(_clean(r.get("folder")) or "Inbox")
            if folder_id is not None:
                session.add(ThreadFolder(thread_id=thread.id, folder_id=folder_id))
        elif sent > thread.last_activity_date:
            thread.last_activity_date = sent
        session.add(
            Email(
                thread_id=thread.id,
                sender_id=_get_or_create_user(session, sender, email_to_user_id),
                recipient_id=_get_or_create_user(session, recipient, email_to_user_id),
                subject=subject,
                body=r.get("body") or "",
                sent_date=sent,
            )
        )
    if email_rows:
        session.flush()
        logger.info("seed_data.threads", count=len(key_to_thread), emails=len(email_rows))

    # 3) Starter templates for the current user
    template_rows = load_templates()
    for r in template_rows:
        name = _clean(r.get("name"))
        if not name:
            continue
        session.add(
            Template(
                user_id=DEFAULT_USER_ID,
                name=name,
                subject=r.get("subject") or "",
                body=r.get("body") or "",
            )
        )
    if template_rows:
        session.flush()
        logger.info("seed_data.templates", count=len(template_rows))
