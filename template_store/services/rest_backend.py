"""REST templates backend: relays the store contract to a remote template service.

Versioning and thumbnails are the server's job; this client only maps
responses onto the contract.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter

from template_store.config import settings
from template_store.exceptions import (
    RemoteBackendError,
    TemplateSaveError,
    TemplateUpdateError,
)
from template_store.models.enums import TemplatesBackendKind
from template_store.schemas.template import (
    SaveTemplateInput,
    SendTestResult,
    TemplateMeta,
    TemplateRecord,
    UpdateTemplateMetaInput,
)
from template_store.services.templates_backend import TemplatesBackend
from template_store.utils.logger import logger

_meta_list_adapter = TypeAdapter(List[TemplateMeta])


def _template_path(template_id: str, action: str = "") -> str:
    path = f"/templates/{quote(template_id, safe='')}"
    return f"{path}/{action}" if action else path


class RestTemplatesBackend(TemplatesBackend):
    """
    Templates backend over HTTP.

    Concurrent calls are not sequenced: for two saves of the same template
    the last response wins.
    """

    kind = TemplatesBackendKind.REST

    def __init__(
        self,
        base_url: str = None,
        api_key: Optional[str] = None,
        timeout: float = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the REST backend.

        Args:
            base_url: API base the /templates paths are relative to. Defaults to settings.api_base_url
            api_key: Bearer token. Defaults to settings.api_key
            timeout: Request timeout in seconds. Defaults to settings.request_timeout
            transport: Optional httpx transport (used to target an in-process app in tests)
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = settings.request_timeout if timeout is None else timeout
        self.transport = transport
        self.headers = {"Content-Type": "application/json"}
        api_key = api_key if api_key is not None else settings.api_key
        if api_key:
            self.headers["Authorization"] = f"Bearer {api_key}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            transport=self.transport,
        )

    async def _request(
        self, method: str, path: str, json: Optional[Dict[str, Any]] = None
    ) -> httpx.Response:
        """Issue a request, mapping transport errors to RemoteBackendError."""
        logger.debug(f"{method} {self.base_url}{path}")
        try:
            async with self._client() as client:
                return await client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"Templates service request failed: {method} {path}: {e}")
            raise RemoteBackendError(f"Templates service unreachable: {e}") from e

    async def list(self) -> List[TemplateMeta]:
        response = await self._request("GET", "/templates")
        if not response.is_success:
            raise RemoteBackendError("List failed", status_code=response.status_code)
        return _meta_list_adapter.validate_python(response.json())

    async def get(self, template_id: str) -> Optional[TemplateRecord]:
        response = await self._request("GET", _template_path(template_id))
        if response.status_code == 404:
            return None
        if not response.is_success:
            raise RemoteBackendError("Get failed", status_code=response.status_code)
        return TemplateRecord.model_validate(response.json())

    async def save(self, payload: SaveTemplateInput) -> TemplateRecord:
        body = {
            key: value
            for key, value in payload.to_wire().items()
            if value is not None or key == "design"
        }
        try:
            if payload.id:
                response = await self._request("PUT", _template_path(payload.id), json=body)
            else:
                response = await self._request("POST", "/templates", json=body)
        except RemoteBackendError as e:
            raise TemplateSaveError(e.message) from e

        if not response.is_success:
            raise TemplateSaveError(status_code=response.status_code)
        return TemplateRecord.model_validate(response.json())

    async def update_meta(self, payload: UpdateTemplateMetaInput) -> Optional[TemplateRecord]:
        body = payload.to_wire(exclude_unset=True)
        try:
            response = await self._request("PATCH", _template_path(payload.id), json=body)
        except RemoteBackendError as e:
            raise TemplateUpdateError(e.message) from e

        if response.status_code == 404:
            return None
        if not response.is_success:
            raise TemplateUpdateError(status_code=response.status_code)
        return TemplateRecord.model_validate(response.json())

    async def remove(self, template_id: str) -> None:
        # Best effort: the outcome is not inspected
        try:
            await self._request("DELETE", _template_path(template_id))
        except RemoteBackendError as e:
            logger.warning(f"Delete of template {template_id} not confirmed: {e.message}")

    async def clone(self, template_id: str) -> Optional[TemplateRecord]:
        try:
            response = await self._request("POST", _template_path(template_id, "clone"))
        except RemoteBackendError:
            return None
        if not response.is_success:
            logger.warning(f"Clone of template {template_id} failed: HTTP {response.status_code}")
            return None
        return TemplateRecord.model_validate(response.json())

    async def send_test(self, template_id: str, email: str) -> SendTestResult:
        # Reported as sent once issued, whatever the service answers
        try:
            await self._request(
                "POST", _template_path(template_id, "send-test"), json={"email": email}
            )
        except RemoteBackendError as e:
            logger.warning(f"Send-test for template {template_id} not confirmed: {e.message}")
        return SendTestResult()
