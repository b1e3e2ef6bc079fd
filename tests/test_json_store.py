from __future__ import annotations

import asyncio
import json

import pytest

from adapters.content_stores import JsonFileContentStore
from core.domain.errors import PersistError


@pytest.fixture
def store_file(tmp_path, product_docs):
    path = tmp_path / "content.json"
    path.write_text(json.dumps(product_docs), encoding="utf-8")
    return path


@pytest.mark.asyncio
async def test_list_and_get(store_file):
    store = JsonFileContentStore(store_file)

    entities = await store.list("products")
    entity = await store.get_by_id("products", "calacatta")

    assert [e.id for e in entities] == ["saint-laurent", "calacatta"]
    assert entity is not None
    assert entity.label == "Calacatta"
    assert await store.get_by_id("products", "missing") is None
    assert await store.list("unknown") == []


@pytest.mark.asyncio
async def test_missing_file_is_an_empty_store(tmp_path):
    store = JsonFileContentStore(tmp_path / "nope.json")

    assert await store.list("products") == []


@pytest.mark.asyncio
async def test_update_merges_and_keeps_other_fields(store_file):
    store = JsonFileContentStore(store_file)

    await store.update("products", "saint-laurent", {"descriptionTranslations": {"en": "Sintered stone"}})

    saved = json.loads(store_file.read_text(encoding="utf-8"))["products"]["saint-laurent"]
    assert saved["descriptionTranslations"] == {"en": "Sintered stone"}
    assert saved["priceVIP"] == 700
    assert saved["description"] == "Piedra sinterizada de gran formato"


@pytest.mark.asyncio
async def test_update_unknown_entity_raises_persist_error(store_file):
    store = JsonFileContentStore(store_file)

    with pytest.raises(PersistError):
        await store.update("products", "missing", {"x": 1})


@pytest.mark.asyncio
async def test_written_file_keeps_unicode(store_file):
    store = JsonFileContentStore(store_file)

    await store.update("products", "calacatta", {"nameTranslations": {"fr": "Marbré"}})

    assert "Marbré" in store_file.read_text(encoding="utf-8")


@pytest.mark.asyncio
async def test_file_io_runs_in_worker_thread(store_file, monkeypatch):
    offloaded: list[str] = []
    real_to_thread = asyncio.to_thread

    async def recording_to_thread(func, /, *args, **kwargs):
        offloaded.append(func.__name__)
        return await real_to_thread(func, *args, **kwargs)

    monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)
    store = JsonFileContentStore(store_file)

    await store.list("products")
    await store.update("products", "calacatta", {"nameTranslations": {"en": "Calacatta"}})

    assert offloaded == ["load_documents", "load_documents", "dump_documents"]
