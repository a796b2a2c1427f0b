"""Template resource endpoints."""

from typing import List

from fastapi import APIRouter, HTTPException, Response, status

from template_store.dependencies import TemplateStore
from template_store.schemas.template import (
    SaveTemplateInput,
    SendTestRequest,
    SendTestResult,
    TemplateMeta,
    TemplateMetaPatch,
    TemplateRecord,
    UpdateTemplateMetaInput,
)

router = APIRouter()


def _not_found(template_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Template {template_id} not found",
    )


@router.get("", response_model=List[TemplateMeta])
async def list_templates(store: TemplateStore) -> List[TemplateMeta]:
    """List template metadata, most recently updated first."""
    return await store.list()


@router.post("", response_model=TemplateRecord, status_code=status.HTTP_201_CREATED)
async def create_template(template_in: SaveTemplateInput, store: TemplateStore) -> TemplateRecord:
    """Create a template with its first version."""
    return await store.save(template_in)


@router.get("/{template_id}", response_model=TemplateRecord)
async def get_template(template_id: str, store: TemplateStore) -> TemplateRecord:
    """Get a template with its design and version history."""
    record = await store.get(template_id)
    if record is None:
        raise _not_found(template_id)
    return record


@router.put("/{template_id}", response_model=TemplateRecord)
async def save_template(
    template_id: str,
    template_in: SaveTemplateInput,
    store: TemplateStore,
) -> TemplateRecord:
    """Save a new version of a template."""
    payload = template_in.model_copy(update={"id": template_id})
    return await store.save(payload)


@router.patch("/{template_id}", response_model=TemplateRecord)
async def update_template_meta(
    template_id: str,
    meta_in: TemplateMetaPatch,
    store: TemplateStore,
) -> TemplateRecord:
    """Update template metadata without creating a version."""
    payload = UpdateTemplateMetaInput(
        id=template_id,
        **meta_in.model_dump(exclude_unset=True),
    )
    record = await store.update_meta(payload)
    if record is None:
        raise _not_found(template_id)
    return record


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(template_id: str, store: TemplateStore) -> Response:
    """Delete a template. Unknown ids are ignored."""
    await store.remove(template_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{template_id}/clone", response_model=TemplateRecord, status_code=status.HTTP_201_CREATED)
async def clone_template(template_id: str, store: TemplateStore) -> TemplateRecord:
    """Copy a template into a new one with a fresh history."""
    record = await store.clone(template_id)
    if record is None:
        raise _not_found(template_id)
    return record


@router.post("/{template_id}/send-test", response_model=SendTestResult, status_code=status.HTTP_202_ACCEPTED)
async def send_test_template(
    template_id: str,
    request_in: SendTestRequest,
    store: TemplateStore,
) -> SendTestResult:
    """Send a test rendering of a template."""
    return await store.send_test(template_id, request_in.email)
