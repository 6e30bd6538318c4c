"""Mailbox API: folders, thread listing and detail, single send, archive/trash moves."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from threadmail.config import is_production
from threadmail.db.repositories import thread_repo
from threadmail.errors import NotConfiguredError, NotFoundError, StoreError, ValidationError
from threadmail.models.inputs import SendIn
from threadmail.utils.logger import get_logger
from threadmail.web.deps import RowId, current_user_id

logger = get_logger("threadmail.web.mail")

router = APIRouter(prefix="/api", tags=["mail"])

PRODUCTION_REFUSAL = "Only works on localhost for now"


@router.get("/folders")
async def list_folders() -> list[dict[str, Any]]:
    return [f.model_dump(by_alias=True) for f in thread_repo.list_folders()]


@router.get("/folders/{name}/threads")
async def list_threads(
    name: str,
    q: Optional[str] = Query(None, description="Case-insensitive search over subject, body and sender"),
) -> dict[str, Any]:
    threads = thread_repo.list_threads(name, search=q)
    return {
        "folder": name,
        "count": len(threads),
        "threads": [t.model_dump(by_alias=True, mode="json") for t in threads],
    }


@router.get("/threads/{thread_id}")
async def get_thread(thread_id: RowId) -> dict[str, Any]:
    return thread_repo.get_thread(thread_id).model_dump(by_alias=True, mode="json")


@router.post("/send")
async def send_email(body: SendIn, user_id: int = Depends(current_user_id)) -> Any:
    """Send a single email: {subject, body, recipientEmail} -> {success, threadId}. Refused in production."""
    previous = {
        "recipientEmail": body.recipient_email or "",
        "subject": body.subject or "",
        "body": body.body or "",
    }
    if is_production():
        return JSONResponse(status_code=403, content={"error": PRODUCTION_REFUSAL, "previous": previous})
    try:
        thread = thread_repo.send_single(body.subject, body.body, body.recipient_email, sender_id=user_id)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"error": e.message, "previous": previous})
    except (StoreError, NotConfiguredError) as e:
        logger.error("mail.send_failed", error=str(e), user_id=user_id)
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to send email. Please try again.", "previous": previous},
        )
    return {"success": True, "threadId": thread.id, "redirect": f"/f/sent/{thread.id}"}


def _move(thread_id: int, folder: str, label: str) -> Any:
    if is_production():
        return JSONResponse(status_code=403, content={"error": PRODUCTION_REFUSAL})
    try:
        thread_repo.move_thread(thread_id, folder)
    except NotFoundError as e:
        return JSONResponse(status_code=404, content={"success": False, "error": e.message})
    except StoreError as e:
        logger.error("mail.move_failed", thread_id=thread_id, folder=folder, error=str(e))
        return JSONResponse(status_code=500, content={"success": False, "error": f"Failed to move thread to {label}"})
    return {"success": True, "error": None}


@router.post("/threads/{thread_id}/archive")
async def move_thread_to_done(thread_id: RowId) -> Any:
    return _move(thread_id, thread_repo.ARCHIVE_FOLDER, "Done")


@router.post("/threads/{thread_id}/trash")
async def move_thread_to_trash(thread_id: RowId) -> Any:
    return _move(thread_id, thread_repo.TRASH_FOLDER, "Trash")
