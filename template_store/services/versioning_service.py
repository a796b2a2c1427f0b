"""Versioning and metadata rules for template records.

The service works on in-memory collections only. Persistence is left to
the backend that calls it, so the same rules apply to any local store.
"""

import copy
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from template_store.models.enums import TemplateStatus
from template_store.schemas.template import (
    SaveTemplateInput,
    TemplateMeta,
    TemplateRecord,
    TemplateVersion,
    UpdateTemplateMetaInput,
)
from template_store.utils.thumbnail import derive_thumbnail

MAX_VERSIONS = 25
HTML_SNIPPET_LENGTH = 500
RECORD_ID_LENGTH = 10
VERSION_ID_LENGTH = 8
CLONE_NAME_SUFFIX = " Copy"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id(length: int, taken: Iterable[str] = ()) -> str:
    """Mint a random hex id not present in ``taken``."""
    taken = set(taken)
    while True:
        candidate = uuid.uuid4().hex[:length]
        if candidate not in taken:
            return candidate


class VersioningService:
    """
    Applies save, metadata-update and clone semantics to template records.

    Provides methods for:
    - Creating records and appending capped version history on save
    - Metadata-only updates that leave design and history alone
    - Listing metadata newest first
    - Building the save request for a clone
    """

    def __init__(
        self,
        max_versions: int = MAX_VERSIONS,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.max_versions = max_versions
        self.clock = clock

    @staticmethod
    def find(records: List[TemplateRecord], template_id: str) -> Optional[TemplateRecord]:
        for record in records:
            if record.id == template_id:
                return record
        return None

    def list_meta(self, records: List[TemplateRecord]) -> List[TemplateMeta]:
        """Metadata of every record, most recently updated first."""
        ordered = sorted(records, key=lambda r: r.updated_at, reverse=True)
        return [record.to_meta() for record in ordered]

    def build_version(
        self,
        design,
        html: Optional[str],
        created_at: datetime,
        taken_ids: Iterable[str] = (),
    ) -> TemplateVersion:
        """Snapshot a design. The design is copied so later edits cannot reach it."""
        return TemplateVersion(
            id=new_id(VERSION_ID_LENGTH, taken_ids),
            created_at=created_at,
            design=copy.deepcopy(design),
            html_snippet=html[:HTML_SNIPPET_LENGTH] if html else None,
        )

    def apply_save(
        self, records: List[TemplateRecord], payload: SaveTemplateInput
    ) -> TemplateRecord:
        """
        Create or update a record in ``records`` and prepend a new version.

        An unknown ``payload.id`` creates a record under that id; a missing
        id mints a fresh one.

        Args:
            records: The whole collection, mutated in place
            payload: Save request

        Returns:
            The created or updated record
        """
        now = self.clock()
        record = self.find(records, payload.id) if payload.id else None

        if record is None:
            record = TemplateRecord(
                id=payload.id or new_id(RECORD_ID_LENGTH, (r.id for r in records)),
                name=payload.name,
                subject=payload.subject,
                preheader=payload.preheader,
                tags=payload.tags or [],
                status=TemplateStatus.DRAFT,
                updated_at=now,
                design=copy.deepcopy(payload.design),
                versions=[],
            )
            records.append(record)
        else:
            record.name = payload.name
            record.subject = payload.subject
            record.preheader = payload.preheader
            record.tags = list(payload.tags or [])
            record.design = copy.deepcopy(payload.design)
            record.updated_at = now

        version = self.build_version(
            payload.design, payload.html, now, (v.id for v in record.versions)
        )
        record.versions = [version, *record.versions][: self.max_versions]

        if not record.thumbnail and payload.html:
            record.thumbnail = derive_thumbnail(payload.html)

        return record

    def apply_meta_update(
        self, records: List[TemplateRecord], payload: UpdateTemplateMetaInput
    ) -> Optional[TemplateRecord]:
        """Apply the set metadata fields. Returns None if the record is unknown."""
        record = self.find(records, payload.id)
        if record is None:
            return None

        for field, value in payload.changes().items():
            setattr(record, field, value)
        record.updated_at = self.clock()
        return record

    @staticmethod
    def clone_input(record: TemplateRecord) -> SaveTemplateInput:
        """Save request that copies ``record`` into a new, independent template."""
        return SaveTemplateInput(
            name=record.name + CLONE_NAME_SUFFIX,
            subject=record.subject,
            preheader=record.preheader,
            tags=list(record.tags),
            design=copy.deepcopy(record.design),
        )


versioning_service = VersioningService()
