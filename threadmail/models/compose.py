"""Compose flow models: content being edited and rendered output."""

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from threadmail.models.recipient import Recipient


class CountMode(str, enum.Enum):
    SINGLE = "single"
    BULK = "bulk"


class ContentMode(str, enum.Enum):
    TEMPLATE = "template"
    CUSTOM = "custom"
    BLANK = "blank"


class RecipientSource(str, enum.Enum):
    DIRECTORY = "db"
    MANUAL = "manual"


class ComposeState(str, enum.Enum):
    CHOOSING_MODE = "choosing_mode"
    CHOOSING_RECIPIENTS = "choosing_recipients"
    EDITING_CONTENT = "editing_content"
    PREVIEWING = "previewing"
    COPYING = "copying"
    SENDING = "sending"


class EmailContent(BaseModel):
    """Subject, body and signature as typed by the operator, tokens included."""

    subject: str = ""
    body: str = ""
    signature: str = ""


class Variable(BaseModel):
    """A placeholder offered in the editor."""

    key: str
    label: str
    placeholder: str
    value: Optional[str] = None


class RenderedEmail(BaseModel):
    """One personalised email produced for one recipient."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    recipient: Recipient
    subject: str
    body: str
    signature: str = ""

    def to_text(self) -> str:
        parts = [f"Subject: {self.subject}", "", self.body]
        if self.signature:
            parts += ["", self.signature]
        return "\n".join(parts)
