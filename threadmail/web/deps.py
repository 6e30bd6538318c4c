"""Request dependencies."""

from typing import Annotated, Optional

from fastapi import Header, Path

from threadmail.config import DEFAULT_USER_ID
from threadmail.models.inputs import MAX_ID

# Path id bounded to the store's integer range; larger values answer 422 instead of reaching the driver
RowId = Annotated[int, Path(le=MAX_ID)]


async def current_user_id(
    x_user_id: Optional[int] = Header(None, alias="X-User-Id", le=MAX_ID),
) -> int:
    """The acting user: X-User-Id header, else the configured default user."""
    return x_user_id if x_user_id is not None else DEFAULT_USER_ID
