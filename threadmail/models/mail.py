"""API response models for folders, threads, emails and templates."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class UserOut(_ApiModel):
    id: int
    first_name: str = ""
    last_name: str = ""
    company: str = ""
    job_title: str = ""
    email: str


class FolderOut(_ApiModel):
    id: int
    name: str
    thread_count: int = 0


class EmailOut(_ApiModel):
    id: int
    subject: Optional[str] = None
    body: Optional[str] = None
    sent_date: datetime
    sender: UserOut
    recipient: Optional[UserOut] = None


class ThreadSummary(_ApiModel):
    """Thread row in a folder listing: subject plus its latest email."""

    id: int
    subject: Optional[str] = None
    last_activity_date: datetime
    email_count: int
    latest_email: Optional[EmailOut] = None


class ThreadDetail(_ApiModel):
    id: int
    subject: Optional[str] = None
    last_activity_date: datetime
    folder: Optional[str] = None
    emails: list[EmailOut]


class TemplateOut(_ApiModel):
    id: int
    user_id: int
    name: str
    subject: str = ""
    body: str = ""
    created_at: datetime
    updated_at: datetime
