"""Compose API: personalised previews, clipboard text, recipient import and send from a compose request."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request

from threadmail.compose.recipients import format_from_filename, parse_upload
from threadmail.compose.session import ComposeSession
from threadmail.config import DEPLOYMENT_ENVIRONMENT
from threadmail.db.repositories import template_repo, thread_repo, user_repo
from threadmail.models.compose import ContentMode, EmailContent
from threadmail.models.inputs import PreviewIn
from threadmail.utils.logger import get_logger
from threadmail.utils.tracing import get_tracer
from threadmail.web.deps import current_user_id

logger = get_logger("threadmail.web.compose")

router = APIRouter(prefix="/api", tags=["compose"])


def build_session(body: PreviewIn, user_id: int) -> ComposeSession:
    """Replay a compose request onto a fresh session: mode, template, content, recipients, variables."""
    session = ComposeSession(EmailContent(subject=body.subject, body=body.body, signature=body.signature))
    if body.template_id is not None:
        template = template_repo.get_by_id(body.template_id, user_id)
        session.choose_mode(body.mode, ContentMode.TEMPLATE, template=template)
    else:
        session.choose_mode(body.mode, ContentMode.CUSTOM)
    if body.use_directory:
        session.use_directory(user_repo.list_directory())
        if session.is_bulk:
            if body.selected is not None:
                session.deselect_all()
                for index in dict.fromkeys(body.selected):
                    session.toggle(index)
        elif session.directory or body.selected_index:
            session.select_recipient(body.selected_index)
    else:
        session.use_manual(body.recipients)
    known = {v.key for v in session.variables}
    for key, value in body.variables.items():
        if key not in known:
            session.add_variable(key, key=key)
        session.set_variable_value(key, value)
    return session


@router.post("/compose/preview")
async def preview(body: PreviewIn, user_id: int = Depends(current_user_id)) -> dict[str, Any]:
    """One rendered email per selected recipient, plus the plain-text clipboard version."""
    with get_tracer().start_as_current_span("compose.preview", attributes={"compose.mode": body.mode.value}):
        session = build_session(body, user_id)
        emails = session.preview(rich=body.rich)
        clipboard = session.clipboard_text()
    logger.info("compose.preview", user_id=user_id, mode=body.mode.value, count=len(emails))
    return {
        "emails": [e.model_dump(by_alias=True) for e in emails],
        "clipboardText": clipboard,
        "canSend": session.can_send(DEPLOYMENT_ENVIRONMENT),
    }


@router.post("/compose/send")
async def send(body: PreviewIn, user_id: int = Depends(current_user_id)) -> dict[str, Any]:
    """Render the single-recipient email and file it under Sent."""
    session = build_session(body, user_id)
    subject, text, recipient_email = session.send_payload(DEPLOYMENT_ENVIRONMENT)
    thread = thread_repo.send_single(subject, text, recipient_email, sender_id=user_id)
    return {"success": True, "threadId": thread.id, "redirect": f"/f/sent/{thread.id}"}


@router.post("/recipients/import")
async def import_recipients(
    request: Request,
    format: Optional[str] = Query(None, description="csv or xlsx"),
    filename: Optional[str] = Query(None, description="Used to infer the format when format is omitted"),
) -> dict[str, Any]:
    """Parse a raw CSV/XLSX request body into normalized recipients."""
    fmt = format or format_from_filename(filename or "")
    data = await request.body()
    recipients = parse_upload(data, fmt)
    logger.info("compose.recipients_imported", format=fmt, count=len(recipients))
    return {"count": len(recipients), "recipients": [r.model_dump(by_alias=True) for r in recipients]}
