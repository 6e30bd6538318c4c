"""Recipient directory API."""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from threadmail.db.repositories import user_repo
from threadmail.errors import StoreError
from threadmail.utils.logger import get_logger

logger = get_logger("threadmail.web.users")

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("")
async def list_users() -> Any:
    """Directory users: [{id, firstName, lastName, company, jobTitle, email}]."""
    try:
        recipients = user_repo.list_directory()
    except StoreError:
        logger.exception("users.list_failed")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch users"})
    return [r.model_dump(by_alias=True) for r in recipients]
