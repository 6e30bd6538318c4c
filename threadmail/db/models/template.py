"""ORM model for saved email templates."""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from threadmail.db.base import Base, TimestampMixin


class Template(Base, TimestampMixin):
    """Named subject+body pair owned by a user. Placeholders are kept verbatim."""

    __tablename__ = "templates"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    subject: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")
