"""ORM models for the mailbox: User, Folder, Thread, Email, ThreadFolder."""

from datetime import datetime

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from threadmail.db.base import Base, TimestampMixin, utcnow


class User(Base, TimestampMixin):
    """Directory entry; also the sender/recipient of emails."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    company: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    job_title: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(256), unique=True, nullable=False, index=True)


class Folder(Base):
    """Mailbox folder (Inbox, Sent, Archive, ...)."""

    __tablename__ = "folders"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)


class Thread(Base):
    """Conversation: a subject plus emails ordered by sent date."""

    __tablename__ = "threads"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    subject: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    last_activity_date: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, index=True)

    emails: Mapped[list["Email"]] = relationship(
        "Email", back_populates="thread", order_by="Email.sent_date"
    )


class Email(Base):
    """Single message inside a thread."""

    __tablename__ = "emails"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    thread_id: Mapped[int] = mapped_column(ForeignKey("threads.id"), nullable=False, index=True)
    sender_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    recipient_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    subject: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    sent_date: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)

    thread: Mapped["Thread"] = relationship("Thread", back_populates="emails")
    sender: Mapped["User"] = relationship("User", foreign_keys=[sender_id])
    recipient: Mapped["User"] = relationship("User", foreign_keys=[recipient_id])


class ThreadFolder(Base):
    """Folder membership edge. One row per thread; replaced on move."""

    __tablename__ = "thread_folders"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    thread_id: Mapped[int] = mapped_column(ForeignKey("threads.id"), nullable=False, index=True)
    folder_id: Mapped[int] = mapped_column(ForeignKey("folders.id"), nullable=False, index=True)
