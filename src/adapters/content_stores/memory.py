"""In-memory content store.

Entities are copied on the way in and out so callers never share mutable
state with the store.
"""

from __future__ import annotations

import copy
from typing import Any

from core.domain.errors import PersistError
from core.domain.models import ContentEntity
from core.interfaces.content_store import ContentStore


class InMemoryContentStore(ContentStore):
    def __init__(self, collections: dict[str, dict[str, dict[str, Any]]] | None = None) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = copy.deepcopy(collections or {})
        self.writes: list[tuple[str, str, dict[str, Any]]] = []

    async def list(self, collection: str) -> list[ContentEntity]:
        docs = self._collections.get(collection, {})
        return [ContentEntity(id=doc_id, data=copy.deepcopy(data)) for doc_id, data in docs.items()]

    async def get_by_id(self, collection: str, entity_id: str) -> ContentEntity | None:
        data = self._collections.get(collection, {}).get(entity_id)
        if data is None:
            return None
        return ContentEntity(id=entity_id, data=copy.deepcopy(data))

    async def update(self, collection: str, entity_id: str, partial_fields: dict[str, Any]) -> None:
        docs = self._collections.get(collection, {})
        if entity_id not in docs:
            raise PersistError(collection, entity_id, "document does not exist")
        docs[entity_id].update(copy.deepcopy(partial_fields))
        self.writes.append((collection, entity_id, copy.deepcopy(partial_fields)))

    def snapshot(self) -> dict[str, dict[str, dict[str, Any]]]:
        return copy.deepcopy(self._collections)
