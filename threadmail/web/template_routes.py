"""Template API: list, create, read, update, delete the current user's templates."""

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from threadmail.db.repositories import template_repo
from threadmail.errors import StoreError, ValidationError
from threadmail.models.inputs import TemplateIn
from threadmail.models.mail import TemplateOut
from threadmail.utils.logger import get_logger
from threadmail.web.deps import RowId, current_user_id

logger = get_logger("threadmail.web.templates")

router = APIRouter(prefix="/api/templates", tags=["templates"])


def _dump(row) -> dict[str, Any]:
    return TemplateOut.model_validate(row).model_dump(by_alias=True, mode="json")


@router.get("")
async def list_templates(user_id: int = Depends(current_user_id)) -> list[dict[str, Any]]:
    """Templates of the current user ordered by name."""
    return [_dump(row) for row in template_repo.list_templates(user_id)]


@router.post("")
async def create_template(body: TemplateIn, user_id: int = Depends(current_user_id)) -> Any:
    """Create a template: {name, subject, body, userId} -> {success, id}."""
    owner = body.user_id if body.user_id is not None else user_id
    if not body.name or not body.name.strip() or not owner:
        return JSONResponse(status_code=400, content={"error": "Missing name or userId"})
    try:
        row = template_repo.create(owner, body.name, body.subject, body.body)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"error": e.message})
    except StoreError:
        logger.exception("templates.create_failed", user_id=owner)
        return JSONResponse(status_code=500, content={"error": "Failed to create template"})
    return {"success": True, "id": row.id}


@router.get("/{template_id}")
async def get_template(template_id: RowId, user_id: int = Depends(current_user_id)) -> dict[str, Any]:
    return _dump(template_repo.get_by_id(template_id, user_id))


@router.put("/{template_id}")
async def update_template(
    template_id: RowId,
    body: TemplateIn,
    user_id: int = Depends(current_user_id),
) -> dict[str, Any]:
    """Full replace of name, subject and body."""
    row = template_repo.update(template_id, user_id, body.name, body.subject, body.body)
    return {"success": True, "template": _dump(row)}


@router.delete("/{template_id}")
async def delete_template(template_id: RowId, user_id: int = Depends(current_user_id)) -> dict[str, bool]:
    template_repo.delete(template_id, user_id)
    return {"success": True}
