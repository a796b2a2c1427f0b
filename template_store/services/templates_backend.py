"""Templates backend contract and the provider that selects one."""

from abc import ABC, abstractmethod
from functools import lru_cache
from typing import List, Optional, Union, TYPE_CHECKING

from template_store.models.enums import TemplatesBackendKind
from template_store.schemas.template import (
    SaveTemplateInput,
    SendTestResult,
    TemplateMeta,
    TemplateRecord,
    UpdateTemplateMetaInput,
)
from template_store.utils.logger import logger

if TYPE_CHECKING:
    from template_store.services.local_backend import LocalTemplatesBackend
    from template_store.services.rest_backend import RestTemplatesBackend


class TemplatesBackend(ABC):
    """Abstract base class for template persistence backends.

    Every method is a coroutine so local and remote backends are
    interchangeable. Not-found is reported as None, never raised.
    """

    kind: TemplatesBackendKind

    @abstractmethod
    async def list(self) -> List[TemplateMeta]:
        """
        List template metadata.

        Returns:
            Metadata of all templates, most recently updated first
        """
        pass

    @abstractmethod
    async def get(self, template_id: str) -> Optional[TemplateRecord]:
        """
        Get a full template record.

        Args:
            template_id: Template id

        Returns:
            The record including design and versions, or None if not found
        """
        pass

    @abstractmethod
    async def save(self, payload: SaveTemplateInput) -> TemplateRecord:
        """
        Create a template or save a new version of an existing one.

        Args:
            payload: Save request; without an id a new template is created

        Returns:
            The full updated record
        """
        pass

    @abstractmethod
    async def update_meta(self, payload: UpdateTemplateMetaInput) -> Optional[TemplateRecord]:
        """
        Update metadata fields without creating a version.

        Returns:
            The updated record, or None if not found
        """
        pass

    @abstractmethod
    async def remove(self, template_id: str) -> None:
        """Delete a template. Unknown ids are ignored."""
        pass

    @abstractmethod
    async def clone(self, template_id: str) -> Optional[TemplateRecord]:
        """
        Copy a template into a new record with its own id and history.

        Returns:
            The new record, or None if the source is not found
        """
        pass

    @abstractmethod
    async def send_test(self, template_id: str, email: str) -> SendTestResult:
        """Send a test rendering of a template to an email address."""
        pass


def create_templates_backend(
    kind: Union[TemplatesBackendKind, str],
) -> Union["LocalTemplatesBackend", "RestTemplatesBackend"]:
    """
    Build the backend for a backend kind.

    Returns RestTemplatesBackend for TEMPLATES_BACKEND=rest and
    LocalTemplatesBackend for everything else.
    """
    if not isinstance(kind, TemplatesBackendKind):
        resolved = TemplatesBackendKind.from_setting(kind)
        if resolved.value != (kind or "").strip().lower():
            logger.warning(f"Unknown templates backend {kind!r}, using {resolved.value}")
        kind = resolved

    if kind is TemplatesBackendKind.REST:
        from template_store.services.rest_backend import RestTemplatesBackend
        return RestTemplatesBackend()

    from template_store.services.local_backend import LocalTemplatesBackend
    return LocalTemplatesBackend()


@lru_cache(maxsize=1)
def get_templates_backend() -> TemplatesBackend:
    """
    Get the configured templates backend.

    The configuration flag is read on first use and the backend is reused
    for the rest of the process.
    """
    from template_store.config import settings

    backend = create_templates_backend(settings.templates_backend)
    logger.info(f"Using {backend.kind.value} templates backend")
    return backend


def reset_templates_backend() -> None:
    """Forget the resolved backend. Useful for testing."""
    get_templates_backend.cache_clear()
