"""Pydantic models for the mail client."""

from threadmail.models.compose import (
    ComposeState,
    ContentMode,
    CountMode,
    EmailContent,
    RecipientSource,
    RenderedEmail,
    Variable,
)
from threadmail.models.inputs import PreviewIn, SendIn, TemplateIn
from threadmail.models.mail import (
    EmailOut,
    FolderOut,
    TemplateOut,
    ThreadDetail,
    ThreadSummary,
    UserOut,
)
from threadmail.models.recipient import Recipient

__all__ = [
    "Recipient",
    "ComposeState",
    "ContentMode",
    "CountMode",
    "EmailContent",
    "RecipientSource",
    "RenderedEmail",
    "Variable",
    "PreviewIn",
    "SendIn",
    "TemplateIn",
    "EmailOut",
    "FolderOut",
    "TemplateOut",
    "ThreadDetail",
    "ThreadSummary",
    "UserOut",
]
