"""Contrato del almacén de documentos.

The content store owns entity lifecycles; the pipeline only lists, reads one
document, and merge-writes partial fields.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from core.domain.models import ContentEntity


@runtime_checkable
class ContentStore(Protocol):
    async def list(self, collection: str) -> list[ContentEntity]:
        """Every entity of `collection`, in store order."""

        ...

    async def get_by_id(self, collection: str, entity_id: str) -> ContentEntity | None:
        ...

    async def update(self, collection: str, entity_id: str, partial_fields: dict[str, Any]) -> None:
        """Merge `partial_fields` into the entity.

        Must not remove fields outside `partial_fields`. Raises
        `core.domain.errors.PersistError` when the write fails.
        """

        ...
