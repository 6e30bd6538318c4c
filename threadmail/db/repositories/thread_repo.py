"""Thread repository: send a single email, move threads between folders, list and read threads."""

from typing import Optional

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import delete, func, or_, select
from sqlalchemy.orm import Session, selectinload

from threadmail.db import get_session
from threadmail.db.base import utcnow
from threadmail.db.models.mail import Email, Folder, Thread, ThreadFolder, User
from threadmail.db.repositories._errors import store_errors
from threadmail.errors import NotConfiguredError, NotFoundError, ValidationError
from threadmail.models.mail import EmailOut, FolderOut, ThreadDetail, ThreadSummary
from threadmail.utils.logger import get_logger
from threadmail.utils.tracing import get_tracer

logger = get_logger("threadmail.db.thread_repo")

SENT_FOLDER = "Sent"
ARCHIVE_FOLDER = "Archive"
TRASH_FOLDER = "Trash"


def _validate_send(subject: Optional[str], body: Optional[str], recipient_email: Optional[str]) -> str:
    """Check inputs in form order and return the normalized recipient address."""
    if not subject or not subject.strip():
        raise ValidationError("Subject is required")
    if not body or not body.strip():
        raise ValidationError("Body is required")
    addr = (recipient_email or "").strip()
    try:
        validate_email(addr, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError("Invalid email address") from e
    return addr.lower()


def _folder_by_name(session: Session, name: str) -> Optional[Folder]:
    return session.scalars(select(Folder).where(func.lower(Folder.name) == name.strip().lower())).first()


def send_single(subject: str, body: str, recipient_email: str, sender_id: int) -> Thread:
    """Create a thread with one email from ``sender_id`` to ``recipient_email`` and file it under Sent.

    The recipient user row is created when no user has that address.
    """
    addr = _validate_send(subject, body, recipient_email)
    tracer = get_tracer()
    with tracer.start_as_current_span("thread_repo.send_single"):
        with store_errors("send email", sender_id=sender_id):
            with get_session() as session:
                sent_folder = _folder_by_name(session, SENT_FOLDER)
                if sent_folder is None:
                    raise NotConfiguredError("Sent folder not found")

                recipient = session.scalars(select(User).where(User.email == addr)).first()
                if recipient is None:
                    recipient = User(email=addr)
                    session.add(recipient)
                    session.flush()
                    logger.info("thread_repo.recipient_created", user_id=recipient.id, email=addr)

                now = utcnow()
                thread = Thread(subject=subject, last_activity_date=now)
                session.add(thread)
                session.flush()
                session.add(
                    Email(
                        thread_id=thread.id,
                        sender_id=sender_id,
                        recipient_id=recipient.id,
                        subject=subject,
                        body=body,
                        sent_date=now,
                    )
                )
                session.add(ThreadFolder(thread_id=thread.id, folder_id=sent_folder.id))
                session.flush()
                session.refresh(thread)
                session.expunge(thread)
    logger.info("thread_repo.sent", thread_id=thread.id, sender_id=sender_id, recipient=addr)
    return thread


def move_thread(thread_id: int, target_folder_name: str) -> None:
    """Replace the thread's folder membership with a single row for the target folder."""
    tracer = get_tracer()
    with tracer.start_as_current_span("thread_repo.move_thread", attributes={"thread.id": thread_id}):
        with store_errors("move thread", thread_id=thread_id, folder=target_folder_name):
            with get_session() as session:
                folder = _folder_by_name(session, target_folder_name)
                if folder is None:
                    raise NotFoundError(f"{target_folder_name} folder not found")
                if session.get(Thread, thread_id) is None:
                    raise NotFoundError("Thread not found.")
                session.execute(delete(ThreadFolder).where(ThreadFolder.thread_id == thread_id))
                session.add(ThreadFolder(thread_id=thread_id, folder_id=folder.id))
    logger.info("thread_repo.moved", thread_id=thread_id, folder=folder.name)


def move_to_archive(thread_id: int) -> None:
    move_thread(thread_id, ARCHIVE_FOLDER)


def move_to_trash(thread_id: int) -> None:
    move_thread(thread_id, TRASH_FOLDER)


def thread_folder_names(thread_id: int) -> list[str]:
    """Names of every folder the thread has a membership row in (normally exactly one)."""
    with store_errors("load thread folders", thread_id=thread_id):
        with get_session() as session:
            q = (
                select(Folder.name)
                .join(ThreadFolder, ThreadFolder.folder_id == Folder.id)
                .where(ThreadFolder.thread_id == thread_id)
                .order_by(ThreadFolder.id)
            )
            return list(session.scalars(q).all())


def list_folders() -> list[FolderOut]:
    """All folders in seed order with the number of threads filed under each."""
    with store_errors("load folders"):
        with get_session() as session:
            q = (
                select(Folder.id, Folder.name, func.count(ThreadFolder.id))
                .outerjoin(ThreadFolder, ThreadFolder.folder_id == Folder.id)
                .group_by(Folder.id, Folder.name)
                .order_by(Folder.id)
            )
            return [FolderOut(id=i, name=n, thread_count=c) for i, n, c in session.execute(q).all()]


def folder_counts() -> dict[str, int]:
    """Folder name -> number of threads filed under it."""
    return {f.name: f.thread_count for f in list_folders()}


def list_threads(folder_name: str, search: Optional[str] = None) -> list[ThreadSummary]:
    """Threads filed under ``folder_name`` (case-insensitive), most recent activity first.

    ``search`` filters on subject, email bodies and sender name/address (case-insensitive substring).
    """
    with store_errors("load threads", folder=folder_name):
        with get_session() as session:
            folder = _folder_by_name(session, folder_name)
            if folder is None:
                raise NotFoundError("Folder not found.")
            q = (
                select(Thread)
                .join(ThreadFolder, ThreadFolder.thread_id == Thread.id)
                .where(ThreadFolder.folder_id == folder.id)
                .options(
                    selectinload(Thread.emails).selectinload(Email.sender),
                    selectinload(Thread.emails).selectinload(Email.recipient),
                )
                .order_by(Thread.last_activity_date.desc(), Thread.id.desc())
            )
            if search and search.strip():
                pattern = f"%{search.strip()}%"
                q = q.where(
                    or_(
                        Thread.subject.ilike(pattern),
                        Thread.emails.any(
                            or_(
                                Email.body.ilike(pattern),
                                Email.sender.has(
                                    or_(
                                        User.first_name.ilike(pattern),
                                        User.last_name.ilike(pattern),
                                        User.email.ilike(pattern),
                                    )
                                ),
                            )
                        ),
                    )
                )
            threads = list(session.scalars(q).unique().all())
            return [
                ThreadSummary(
                    id=t.id,
                    subject=t.subject,
                    last_activity_date=t.last_activity_date,
                    email_count=len(t.emails),
                    latest_email=EmailOut.model_validate(t.emails[-1]) if t.emails else None,
                )
                for t in threads
            ]


def get_thread(thread_id: int) -> ThreadDetail:
    """Thread with its emails oldest-first. Raises NotFoundError when missing or empty."""
    with store_errors("load thread", thread_id=thread_id):
        with get_session() as session:
            thread = session.scalars(
                select(Thread)
                .where(Thread.id == thread_id)
                .options(
                    selectinload(Thread.emails).selectinload(Email.sender),
                    selectinload(Thread.emails).selectinload(Email.recipient),
                )
            ).first()
            if thread is None or not thread.emails:
                raise NotFoundError("Thread not found.")
            folder = session.scalars(
                select(Folder.name)
                .join(ThreadFolder, ThreadFolder.folder_id == Folder.id)
                .where(ThreadFolder.thread_id == thread_id)
            ).first()
            return ThreadDetail(
                id=thread.id,
                subject=thread.subject,
                last_activity_date=thread.last_activity_date,
                folder=folder,
                emails=[EmailOut.model_validate(e) for e in thread.emails],
            )
