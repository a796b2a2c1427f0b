"""Stateful template manager used by gallery and editor code."""

from typing import List, Optional

from template_store.schemas.template import (
    SaveTemplateInput,
    SendTestResult,
    TemplateMeta,
    TemplateRecord,
    UpdateTemplateMetaInput,
)
from template_store.services.templates_backend import TemplatesBackend, get_templates_backend


class TemplateManager:
    """
    Keeps the template list and the template being edited in sync with a backend.

    Every mutation refreshes the cached list. ``visible_templates`` applies
    the free-text and tag filters to that list.
    """

    def __init__(self, backend: TemplatesBackend = None):
        self.backend = backend or get_templates_backend()
        self.templates: List[TemplateMeta] = []
        self.current: Optional[TemplateRecord] = None
        self.filter_text = ""
        self.tag_filter: List[str] = []

    def set_filter(self, text: str) -> None:
        self.filter_text = text or ""

    def set_tag_filter(self, tags: List[str]) -> None:
        self.tag_filter = list(tags or [])

    @property
    def visible_templates(self) -> List[TemplateMeta]:
        needle = self.filter_text.lower()
        visible = []
        for meta in self.templates:
            haystack = f"{meta.name} {meta.subject} {' '.join(meta.tags)}".lower()
            if needle and needle not in haystack:
                continue
            if not all(tag in meta.tags for tag in self.tag_filter):
                continue
            visible.append(meta)
        return visible

    async def refresh(self) -> List[TemplateMeta]:
        self.templates = await self.backend.list()
        return self.templates

    async def load(self, template_id: str) -> Optional[TemplateRecord]:
        self.current = await self.backend.get(template_id)
        return self.current

    async def save(self, payload: SaveTemplateInput) -> TemplateRecord:
        record = await self.backend.save(payload)
        await self.refresh()
        self.current = record
        return record

    async def update_meta(self, payload: UpdateTemplateMetaInput) -> Optional[TemplateRecord]:
        record = await self.backend.update_meta(payload)
        await self.refresh()
        if record is not None and self.current is not None and self.current.id == record.id:
            # Keep the loaded design and history, take the new metadata
            self.current = self.current.model_copy(update=record.to_meta().model_dump())
        return record

    async def remove(self, template_id: str) -> None:
        await self.backend.remove(template_id)
        await self.refresh()
        if self.current is not None and self.current.id == template_id:
            self.current = None

    async def clone(self, template_id: str) -> Optional[TemplateRecord]:
        record = await self.backend.clone(template_id)
        await self.refresh()
        return record

    async def send_test(self, template_id: str, email: str) -> SendTestResult:
        return await self.backend.send_test(template_id, email)
