"""Local templates backend: the whole collection lives in one byte store entry."""

import asyncio
import enum
import json
from dataclasses import dataclass, field
from typing import Any, List, Optional

from pydantic import TypeAdapter, ValidationError

from template_store.config import settings
from template_store.models.enums import TemplatesBackendKind
from template_store.schemas.template import (
    SaveTemplateInput,
    SendTestResult,
    TemplateMeta,
    TemplateRecord,
    UpdateTemplateMetaInput,
)
from template_store.services.byte_store import ByteStore, FileByteStore
from template_store.services.templates_backend import TemplatesBackend
from template_store.services.versioning_service import VersioningService, versioning_service
from template_store.utils.logger import logger

_records_adapter = TypeAdapter(List[TemplateRecord])


class LoadStatus(str, enum.Enum):
    """Outcome of reading the stored collection."""

    DATA = "data"
    MISSING = "missing"
    MALFORMED = "malformed"


@dataclass
class LoadResult:
    """
    Collection read from the byte store. MISSING and MALFORMED carry no records.

    ``rejected`` holds stored entries that failed validation, kept verbatim
    so that writing the collection back does not lose them.
    """

    status: LoadStatus
    records: List[TemplateRecord] = field(default_factory=list)
    rejected: List[Any] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.status is not LoadStatus.DATA


def decode_collection(raw: Optional[bytes]) -> LoadResult:
    """
    Parse a stored collection.

    Records without a ``versions`` field are upgraded to an empty history.
    Anything that is not a JSON array degrades to an empty collection.
    Entries that fail validation are set aside in ``rejected``.
    """
    if raw is None:
        return LoadResult(LoadStatus.MISSING)

    try:
        data = json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        return LoadResult(LoadStatus.MALFORMED)

    if not isinstance(data, list):
        return LoadResult(LoadStatus.MALFORMED)

    records = []
    rejected = []
    for entry in data:
        try:
            records.append(TemplateRecord.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Skipping unreadable template entry: {e.error_count()} validation errors")
            rejected.append(entry)

    return LoadResult(LoadStatus.DATA, records, rejected)


def encode_collection(records: List[TemplateRecord], rejected: Optional[List[Any]] = None) -> bytes:
    """Serialize records, followed by any rejected entries carried over unchanged."""
    if not rejected:
        return _records_adapter.dump_json(records, by_alias=True)
    entries = _records_adapter.dump_python(records, mode="json", by_alias=True)
    return json.dumps(entries + list(rejected)).encode("utf-8")


def _drop_rejected(rejected: List[Any], template_id: str) -> List[Any]:
    return [
        entry
        for entry in rejected
        if not (isinstance(entry, dict) and entry.get("id") == template_id)
    ]


class LocalTemplatesBackend(TemplatesBackend):
    """
    Templates backend over a local byte store.

    Every mutation reads the whole collection, changes it in memory and
    writes it back. There is no lock: no await happens between the read
    and the write, so the event loop serializes mutations.
    """

    kind = TemplatesBackendKind.LOCAL

    def __init__(
        self,
        store: ByteStore = None,
        storage_key: str = None,
        engine: VersioningService = None,
        send_test_delay: float = None,
    ):
        """
        Initialize the local backend.

        Args:
            store: Byte store holding the collection. Defaults to a FileByteStore on settings.data_path
            storage_key: Key of the collection entry. Defaults to settings.storage_key
            engine: Versioning rules. Defaults to the shared VersioningService
            send_test_delay: Seconds send_test waits before confirming
        """
        self.store = store if store is not None else FileByteStore()
        self.storage_key = storage_key or settings.storage_key
        self.engine = engine or versioning_service
        self.send_test_delay = (
            settings.send_test_delay if send_test_delay is None else send_test_delay
        )

    def load(self) -> LoadResult:
        """Read the collection; never raises for missing or corrupt data."""
        result = decode_collection(self.store.read(self.storage_key))
        if result.status is LoadStatus.MALFORMED:
            logger.warning(
                f"Stored templates under {self.storage_key!r} are unreadable, treating as empty"
            )
        return result

    def persist(self, records: List[TemplateRecord], rejected: Optional[List[Any]] = None) -> None:
        self.store.write(self.storage_key, encode_collection(records, rejected))

    async def list(self) -> List[TemplateMeta]:
        return self.engine.list_meta(self.load().records)

    async def get(self, template_id: str) -> Optional[TemplateRecord]:
        return self.engine.find(self.load().records, template_id)

    async def save(self, payload: SaveTemplateInput) -> TemplateRecord:
        loaded = self.load()
        records = loaded.records
        record = self.engine.apply_save(records, payload)
        # A valid save replaces an unreadable entry with the same id
        self.persist(records, _drop_rejected(loaded.rejected, record.id))
        logger.info(f"Saved template {record.id} ({len(record.versions)} versions)")
        return record

    async def update_meta(self, payload: UpdateTemplateMetaInput) -> Optional[TemplateRecord]:
        loaded = self.load()
        records = loaded.records
        record = self.engine.apply_meta_update(records, payload)
        if record is None:
            return None
        self.persist(records, loaded.rejected)
        logger.info(f"Updated metadata of template {record.id}")
        return record

    async def remove(self, template_id: str) -> None:
        loaded = self.load()
        records = loaded.records
        remaining = [r for r in records if r.id != template_id]
        self.persist(remaining, _drop_rejected(loaded.rejected, template_id))
        if len(remaining) != len(records):
            logger.info(f"Deleted template {template_id}")

    async def clone(self, template_id: str) -> Optional[TemplateRecord]:
        source = await self.get(template_id)
        if source is None:
            return None
        record = await self.save(self.engine.clone_input(source))
        logger.info(f"Cloned template {template_id} into {record.id}")
        return record

    async def send_test(self, template_id: str, email: str) -> SendTestResult:
        # No mail transport locally; the request is only logged
        logger.info(f"Pretend sending test email for template {template_id} to {email}")
        if self.send_test_delay:
            await asyncio.sleep(self.send_test_delay)
        return SendTestResult()
