"""Tests for the REST backend's request mapping and failure handling."""

import json

import httpx
import pytest

from template_store.exceptions import RemoteBackendError, TemplateSaveError, TemplateUpdateError
from template_store.schemas.template import SaveTemplateInput, UpdateTemplateMetaInput
from template_store.services.rest_backend import RestTemplatesBackend

BASE = "http://templates.test/api"

RECORD = {
    "id": "abc123",
    "name": "Welcome",
    "subject": "Hi",
    "tags": [],
    "status": "DRAFT",
    "updatedAt": "2024-01-01T00:00:00Z",
    "design": {"a": 1},
    "versions": [],
}


def _backend(handler, **kwargs):
    return RestTemplatesBackend(base_url=BASE, transport=httpx.MockTransport(handler), **kwargs)


def _status(code, body=None):
    def handler(request):
        return httpx.Response(code, json=body)
    return handler


def _unreachable(request):
    raise httpx.ConnectError("connection refused", request=request)


class TestRequests:
    """Test the requests issued for each operation."""

    @pytest.mark.asyncio
    async def test_save_without_id_posts_collection(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(201, json=RECORD)

        record = await _backend(handler).save(
            SaveTemplateInput(name="Welcome", subject="Hi", design={"a": 1}, html="<p>Hi</p>")
        )

        assert record.id == "abc123"
        assert seen[0].method == "POST"
        assert seen[0].url.path == "/api/templates"
        body = json.loads(seen[0].content)
        assert body == {"name": "Welcome", "subject": "Hi", "design": {"a": 1}, "html": "<p>Hi</p>"}

    @pytest.mark.asyncio
    async def test_save_with_id_puts_item(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=RECORD)

        await _backend(handler).save(SaveTemplateInput(id="abc123", name="W", subject="S", design=None))

        assert seen[0].method == "PUT"
        assert seen[0].url.path == "/api/templates/abc123"
        assert json.loads(seen[0].content)["design"] is None

    @pytest.mark.asyncio
    async def test_update_meta_patches_only_set_fields(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=RECORD)

        await _backend(handler).update_meta(UpdateTemplateMetaInput(id="abc123", name="X"))

        assert seen[0].method == "PATCH"
        assert json.loads(seen[0].content) == {"id": "abc123", "name": "X"}

    @pytest.mark.asyncio
    async def test_ids_are_path_encoded(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(404)

        await _backend(handler).get("a/b c")

        assert seen[0].url.raw_path == b"/api/templates/a%2Fb%20c"

    @pytest.mark.asyncio
    async def test_send_test_body(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(202, json={"ok": True})

        await _backend(handler).send_test("abc123", "qa@example.com")

        assert seen[0].url.path == "/api/templates/abc123/send-test"
        assert json.loads(seen[0].content) == {"email": "qa@example.com"}

    @pytest.mark.asyncio
    async def test_bearer_header_when_api_key_set(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[])

        await _backend(handler, api_key="secret").list()

        assert seen[0].headers["Authorization"] == "Bearer secret"


class TestFailures:
    """Test which failures are raised and which are absorbed."""

    @pytest.mark.asyncio
    async def test_get_404_is_none(self):
        assert await _backend(_status(404)).get("abc123") is None

    @pytest.mark.asyncio
    async def test_get_server_error_raises(self):
        with pytest.raises(RemoteBackendError) as exc_info:
            await _backend(_status(500)).get("abc123")
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_list_server_error_raises(self):
        with pytest.raises(RemoteBackendError):
            await _backend(_status(503)).list()

    @pytest.mark.asyncio
    async def test_save_failure_raises(self):
        with pytest.raises(TemplateSaveError, match="Save failed") as exc_info:
            await _backend(_status(400, {"detail": "bad"})).save(
                SaveTemplateInput(name="W", subject="S", design={})
            )
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_save_unreachable_raises(self):
        with pytest.raises(TemplateSaveError):
            await _backend(_unreachable).save(SaveTemplateInput(name="W", subject="S", design={}))

    @pytest.mark.asyncio
    async def test_update_meta_404_is_none(self):
        result = await _backend(_status(404)).update_meta(UpdateTemplateMetaInput(id="x", name="X"))
        assert result is None

    @pytest.mark.asyncio
    async def test_update_meta_failure_raises(self):
        with pytest.raises(TemplateUpdateError, match="Update failed"):
            await _backend(_status(500)).update_meta(UpdateTemplateMetaInput(id="x", name="X"))

    @pytest.mark.asyncio
    async def test_remove_absorbs_failures(self):
        assert await _backend(_status(500)).remove("abc123") is None
        assert await _backend(_unreachable).remove("abc123") is None

    @pytest.mark.asyncio
    async def test_clone_failure_is_none(self):
        assert await _backend(_status(500)).clone("abc123") is None
        assert await _backend(_unreachable).clone("abc123") is None

    @pytest.mark.asyncio
    async def test_send_test_always_ok(self):
        assert (await _backend(_status(500)).send_test("abc123", "qa@example.com")).ok is True
        assert (await _backend(_unreachable).send_test("abc123", "qa@example.com")).ok is True
