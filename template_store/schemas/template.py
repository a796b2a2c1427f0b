"""Template schemas for records, versions and store requests.

Attribute names are snake_case; the persisted and wire formats use the
camelCase aliases (``updatedAt``, ``createdAt``, ``htmlSnippet``).
"""

from datetime import datetime, timezone
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from template_store.models.enums import TemplateStatus


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self, **kwargs) -> dict:
        """Dump to a JSON-compatible dict using wire field names."""
        return self.model_dump(mode="json", by_alias=True, **kwargs)


def _unique_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    return list(dict.fromkeys(tags))


def _assume_utc(value: datetime) -> datetime:
    # Timestamps stored without an offset are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class TemplateVersion(CamelModel):
    """Immutable snapshot of a template design."""

    model_config = ConfigDict(frozen=True)

    id: str
    created_at: datetime
    design: Any = None
    html_snippet: Optional[str] = None

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v):
        return _assume_utc(v)


class TemplateMeta(CamelModel):
    """Listable, design-free identity of a template."""

    id: str
    name: str = ""
    subject: str = ""
    preheader: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    status: TemplateStatus = TemplateStatus.DRAFT
    updated_at: datetime
    thumbnail: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def default_tags(cls, v):
        return [] if v is None else v

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v):
        return _unique_tags(v)

    @field_validator("updated_at")
    @classmethod
    def updated_at_utc(cls, v):
        return _assume_utc(v)


class TemplateRecord(TemplateMeta):
    """Full template: metadata, current design and version history (newest first)."""

    design: Any = None
    versions: List[TemplateVersion] = Field(default_factory=list)

    @field_validator("versions", mode="before")
    @classmethod
    def default_versions(cls, v):
        # Records written before history existed carry no versions
        return [] if v is None else v

    def to_meta(self) -> TemplateMeta:
        """Strip the design and history."""
        return TemplateMeta.model_validate(self.model_dump(exclude={"design", "versions"}))


class SaveTemplateInput(CamelModel):
    """Request to create a template or save a new version of it."""

    id: Optional[str] = None
    name: str
    subject: str
    preheader: Optional[str] = None
    tags: Optional[List[str]] = None
    design: Any
    html: Optional[str] = None

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v):
        return _unique_tags(v)


class UpdateTemplateMetaInput(CamelModel):
    """Metadata-only update. Only the fields explicitly set are applied."""

    id: str
    name: Optional[str] = None
    subject: Optional[str] = None
    preheader: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[TemplateStatus] = None

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v):
        return _unique_tags(v)

    def changes(self) -> dict:
        """
        Fields to apply to the stored record.

        An explicit ``None`` clears ``preheader``; for every other field it
        is ignored since those fields are never empty on a record.
        """
        values = self.model_dump(exclude_unset=True, exclude={"id"})
        return {
            field: value
            for field, value in values.items()
            if value is not None or field == "preheader"
        }


class TemplateMetaPatch(CamelModel):
    """PATCH body for the metadata endpoint (id comes from the path)."""

    name: Optional[str] = None
    subject: Optional[str] = None
    preheader: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[TemplateStatus] = None


class SendTestRequest(BaseModel):
    """Body of a send-test request."""

    email: str = Field(..., min_length=3, max_length=320)


class SendTestResult(BaseModel):
    """Confirmation returned by send-test."""

    ok: Literal[True] = True
