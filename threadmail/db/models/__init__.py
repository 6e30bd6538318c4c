"""Re-export all ORM models so Base.metadata has all tables."""

from threadmail.db.models.mail import Email, Folder, Thread, ThreadFolder, User
from threadmail.db.models.template import Template

__all__ = [
    "User",
    "Folder",
    "Thread",
    "Email",
    "ThreadFolder",
    "Template",
]
