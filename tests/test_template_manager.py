"""Tests for the template manager."""

import pytest

from template_store.schemas.template import SaveTemplateInput, UpdateTemplateMetaInput
from template_store.services.template_manager import TemplateManager


@pytest.fixture
def manager(local_backend):
    return TemplateManager(backend=local_backend)


class TestTemplateManager:
    """Test list caching, current record tracking and filters."""

    @pytest.mark.asyncio
    async def test_create_update_and_version(self, manager):
        saved = await manager.save(SaveTemplateInput(name="Welcome", subject="Hi", design={"body": {}}))
        assert saved.id
        assert len(manager.templates) == 1
        assert manager.current.id == saved.id

        await manager.update_meta(
            UpdateTemplateMetaInput(id=saved.id, name="Welcome Updated", tags=["onboarding", "welcome"])
        )
        updated = manager.templates[0]
        assert updated.name == "Welcome Updated"
        assert "onboarding" in updated.tags
        assert manager.current.name == "Welcome Updated"
        assert manager.current.design == {"body": {}}

        await manager.save(
            SaveTemplateInput(
                id=saved.id,
                name=updated.name,
                subject=updated.subject,
                design={"body": {"rows": 1}},
                tags=updated.tags,
            )
        )
        await manager.load(saved.id)
        assert len(manager.current.versions) == 2

    @pytest.mark.asyncio
    async def test_filters_by_search_and_tags(self, manager):
        await manager.save(SaveTemplateInput(name="Promo", subject="Sale", design={}, tags=["promo"]))
        await manager.save(SaveTemplateInput(name="Newsletter", subject="Month", design={}, tags=["news"]))
        assert len(manager.visible_templates) == 2

        manager.set_filter("PROMO")
        assert [t.name for t in manager.visible_templates] == ["Promo"]

        manager.set_filter("month")
        assert [t.name for t in manager.visible_templates] == ["Newsletter"]

        manager.set_filter("")
        manager.set_tag_filter(["news"])
        assert [t.name for t in manager.visible_templates] == ["Newsletter"]

        manager.set_tag_filter(["news", "promo"])
        assert manager.visible_templates == []

    @pytest.mark.asyncio
    async def test_remove_clears_current(self, manager):
        saved = await manager.save(SaveTemplateInput(name="Gone", subject="S", design={}))

        await manager.remove(saved.id)

        assert manager.current is None
        assert manager.templates == []

    @pytest.mark.asyncio
    async def test_clone_refreshes_without_changing_current(self, manager):
        saved = await manager.save(SaveTemplateInput(name="Base", subject="S", design={}))

        clone = await manager.clone(saved.id)

        assert clone.name == "Base Copy"
        assert len(manager.templates) == 2
        assert manager.current.id == saved.id

    @pytest.mark.asyncio
    async def test_load_missing(self, manager):
        assert await manager.load("missing") is None
        assert manager.current is None

    @pytest.mark.asyncio
    async def test_send_test(self, manager):
        assert (await manager.send_test("any", "qa@example.com")).ok is True
