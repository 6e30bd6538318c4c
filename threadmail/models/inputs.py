"""Request bodies accepted by the HTTP API. Required fields are validated by the handlers so they can answer 400."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from threadmail.models.compose import CountMode
from threadmail.models.recipient import Recipient

# Largest row id the store accepts (SQLite INTEGER is signed 64-bit)
MAX_ID = 2**63 - 1


class _ApiInput(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class TemplateIn(_ApiInput):
    """Create/update body: {name, subject, body, userId}."""

    name: Optional[str] = None
    subject: Optional[str] = None
    body: Optional[str] = None
    user_id: Optional[int] = Field(None, le=MAX_ID)


class SendIn(_ApiInput):
    """Single send: {subject, body, recipientEmail}."""

    subject: Optional[str] = None
    body: Optional[str] = None
    recipient_email: Optional[str] = None


class PreviewIn(_ApiInput):
    """Stateless compose preview request.

    With ``useDirectory``, ``selected`` lists the directory positions to include in bulk mode
    (omitted means everyone) and ``selectedIndex`` picks the single-mode recipient.
    """

    mode: CountMode = CountMode.SINGLE
    template_id: Optional[int] = Field(None, le=MAX_ID)
    subject: str = ""
    body: str = ""
    signature: str = ""
    recipients: list[Recipient] = Field(default_factory=list)
    variables: dict[str, Optional[str]] = Field(default_factory=dict)
    use_directory: bool = False
    selected: Optional[list[int]] = None
    selected_index: int = 0
    rich: bool = False
