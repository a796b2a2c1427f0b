"""Services for Template Store."""

from .byte_store import ByteStore, FileByteStore, MemoryByteStore
from .versioning_service import VersioningService
from .templates_backend import (
    TemplatesBackend,
    create_templates_backend,
    get_templates_backend,
    reset_templates_backend,
)
from .local_backend import LocalTemplatesBackend, LoadResult, LoadStatus
from .rest_backend import RestTemplatesBackend
from .template_manager import TemplateManager

__all__ = [
    "ByteStore",
    "FileByteStore",
    "MemoryByteStore",
    "VersioningService",
    "TemplatesBackend",
    "create_templates_backend",
    "get_templates_backend",
    "reset_templates_backend",
    "LocalTemplatesBackend",
    "LoadResult",
    "LoadStatus",
    "RestTemplatesBackend",
    "TemplateManager",
]
