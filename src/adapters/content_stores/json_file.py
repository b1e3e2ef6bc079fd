"""Content store backed by a single UTF-8 JSON file.

Layout: `{"<collection>": {"<id>": {<field>: <value>, ...}}}`.

Writes are read-then-merge-write with no concurrency check: an external
edit between our read and our write is lost.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from core.domain.errors import PersistError
from core.domain.models import ContentEntity
from core.interfaces.content_store import ContentStore


def load_documents(path: Path) -> dict[str, dict[str, dict[str, Any]]]:
    if not path.exists():
        return {}
    raw = path.read_text(encoding="utf-8")
    if not raw.strip():
        return {}
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object of collections")
    return data


def dump_documents(path: Path, data: dict[str, Any]) -> Path:
    """Write with a stable format (sorted keys, 2-space indent)."""

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(
        json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    tmp.replace(path)
    return path


class JsonFileContentStore(ContentStore):
    """File reads and writes run in a worker thread (`asyncio.to_thread`)."""

    def __init__(self, path: Path) -> None:
        self.path = path

    async def _load(self) -> dict[str, dict[str, dict[str, Any]]]:
        return await asyncio.to_thread(load_documents, self.path)

    async def list(self, collection: str) -> list[ContentEntity]:
        docs = (await self._load()).get(collection) or {}
        return [
            ContentEntity(id=str(doc_id), data=data)
            for doc_id, data in docs.items()
            if isinstance(data, dict)
        ]

    async def get_by_id(self, collection: str, entity_id: str) -> ContentEntity | None:
        docs = (await self._load()).get(collection) or {}
        data = docs.get(entity_id)
        if not isinstance(data, dict):
            return None
        return ContentEntity(id=entity_id, data=data)

    async def update(self, collection: str, entity_id: str, partial_fields: dict[str, Any]) -> None:
        try:
            data = await self._load()
        except (OSError, ValueError) as exc:
            raise PersistError(collection, entity_id, str(exc)) from exc

        docs = data.get(collection) or {}
        current = docs.get(entity_id)
        if not isinstance(current, dict):
            raise PersistError(collection, entity_id, "document does not exist")

        current.update(partial_fields)
        try:
            await asyncio.to_thread(dump_documents, self.path, data)
        except OSError as exc:
            raise PersistError(collection, entity_id, str(exc)) from exc
