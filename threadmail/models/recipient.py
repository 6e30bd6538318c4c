"""Recipient record used by the compose flow (directory row, manual entry or imported row)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Recipient(BaseModel):
    """One recipient. None means the field is unknown; an empty string means it is known to be blank."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    email: Optional[str] = None

    def replace(self, **changes) -> "Recipient":
        """Return a copy with the given fields changed (recipients are never mutated in place)."""
        return self.model_copy(update=changes)

    @classmethod
    def blank(cls) -> "Recipient":
        return cls(first_name="", last_name="", company="", job_title="", email="")
