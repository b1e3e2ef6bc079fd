"""Errores del dominio.

Only errors that cross a layer boundary live here. Provider failures never
do: the translator adapter fails open and returns the source text.
"""

from __future__ import annotations


class EntityNotFound(LookupError):
    """A single-entity migration target does not exist in the content store."""

    def __init__(self, collection: str, entity_id: str) -> None:
        super().__init__(f"Entity {entity_id!r} not found in collection {collection!r}")
        self.collection = collection
        self.entity_id = entity_id


class PersistError(RuntimeError):
    """Writing an entity back to the content store failed."""

    def __init__(self, collection: str, entity_id: str, reason: str) -> None:
        super().__init__(f"Could not persist {collection}/{entity_id}: {reason}")
        self.collection = collection
        self.entity_id = entity_id
        self.reason = reason
