"""Batch translation of stored content.

The engine walks a collection one entity at a time, asks the translator for
every missing (field, language) pair under the rate limiter, and merge-writes
the resulting translations maps back to the content store. Side-effects for
UI layers (progress bars, warnings) go through `MigrationHooks`; the engine
itself only logs and returns `MigrationRunStats`.

Per entity: pending -> skipped | translating -> success | failed.
A failure never stops the run; only `EntityNotFound` on the single-entity
variant is raised to the caller.
"""

from __future__ import annotations

import asyncio
import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from core.domain.errors import EntityNotFound
from core.domain.models import (
    ContentEntity,
    EntityOutcome,
    EntityStatus,
    FieldSpec,
    MigrationEvent,
    MigrationRunStats,
    is_blank,
    iter_slots,
)
from core.interfaces.content_store import ContentStore
from core.interfaces.rate_limiter import RateLimiter
from core.interfaces.translator import Translator
from core.log import get_logger

logger = get_logger(__name__)


@dataclass
class MigrationOptions:
    """Parameters that control one run."""

    force: bool = False
    cancel_event: asyncio.Event | None = None


@dataclass
class MigrationHooks:
    """Optional callbacks for UI layers (progress, warnings)."""

    on_event: Callable[[MigrationEvent], None] | None = None
    warning: Callable[[str], None] | None = None


@dataclass
class _EntityRun:
    collection: str
    entity: ContentEntity
    index: int
    total: int
    touched: list[str] = field(default_factory=list)


class TranslationMigrationEngine:
    def __init__(
        self,
        *,
        store: ContentStore,
        translator: Translator,
        rate_limiter: RateLimiter,
        default_language: str,
        hooks: MigrationHooks | None = None,
    ) -> None:
        self._store = store
        self._translator = translator
        self._rate_limiter = rate_limiter
        self._default_language = default_language
        self._hooks = hooks or MigrationHooks()

    async def migrate_collection(
        self,
        collection: str,
        field_specs: Sequence[FieldSpec],
        target_languages: Sequence[str],
        options: MigrationOptions | None = None,
    ) -> MigrationRunStats:
        """Translate every entity of `collection` that is missing translations."""

        options = options or MigrationOptions()
        targets = self._check_inputs(field_specs, target_languages)
        entities = await self._store.list(collection)
        stats = MigrationRunStats()

        logger.info(
            "migration_started",
            collection=collection,
            entities=len(entities),
            fields=[spec.source_key for spec in field_specs],
            languages=targets,
            force=options.force,
        )

        for index, entity in enumerate(entities):
            if options.cancel_event is not None and options.cancel_event.is_set():
                stats.cancelled = True
                logger.warning("migration_cancelled", collection=collection, processed=index)
                break
            run = _EntityRun(collection=collection, entity=entity, index=index, total=len(entities))
            stats.record(await self._process(run, field_specs, targets, force=options.force))

        logger.info(
            "migration_finished",
            collection=collection,
            success=stats.success,
            failed=stats.failed,
            skipped=stats.skipped,
            cancelled=stats.cancelled,
        )
        return stats

    async def retranslate_collection(
        self,
        collection: str,
        field_specs: Sequence[FieldSpec],
        target_languages: Sequence[str],
        options: MigrationOptions | None = None,
    ) -> MigrationRunStats:
        """Same traversal with the skip check disabled; overwrites translations."""

        options = options or MigrationOptions()
        forced = MigrationOptions(force=True, cancel_event=options.cancel_event)
        return await self.migrate_collection(collection, field_specs, target_languages, forced)

    async def migrate_entity(
        self,
        collection: str,
        entity_id: str,
        field_specs: Sequence[FieldSpec],
        target_languages: Sequence[str],
        options: MigrationOptions | None = None,
    ) -> MigrationRunStats:
        """Translate one entity. Raises `EntityNotFound` for an unknown id.

        Forced by default: asking for one entity means "translate it now".
        """

        options = options or MigrationOptions(force=True)
        targets = self._check_inputs(field_specs, target_languages)
        entity = await self._store.get_by_id(collection, entity_id)
        if entity is None:
            raise EntityNotFound(collection, entity_id)

        stats = MigrationRunStats()
        run = _EntityRun(collection=collection, entity=entity, index=0, total=1)
        stats.record(await self._process(run, field_specs, targets, force=options.force))
        return stats

    def _check_inputs(self, field_specs: Sequence[FieldSpec], target_languages: Sequence[str]) -> list[str]:
        if not field_specs:
            raise ValueError("At least one field spec is required")
        targets = [lang for lang in target_languages if lang != self._default_language]
        if not targets:
            raise ValueError("At least one target language other than the default is required")
        return targets

    def _emit(self, run: _EntityRun, status: EntityStatus, detail: str | None = None) -> None:
        if self._hooks.on_event is None:
            return
        self._hooks.on_event(
            MigrationEvent(
                collection=run.collection,
                entity_id=run.entity.id,
                status=status,
                index=run.index,
                total=run.total,
                detail=detail,
            )
        )

    def _warn(self, message: str) -> None:
        if self._hooks.warning:
            self._hooks.warning(message)

    async def _process(
        self,
        run: _EntityRun,
        field_specs: Sequence[FieldSpec],
        targets: Sequence[str],
        *,
        force: bool,
    ) -> EntityOutcome:
        entity = run.entity
        self._emit(run, EntityStatus.PENDING)

        if not force and is_translated(entity, field_specs[0], targets[0]):
            logger.info("entity_skipped", collection=run.collection, entity_id=entity.id, reason="translated")
            self._emit(run, EntityStatus.SKIPPED, "already translated")
            return EntityOutcome(entity_id=entity.id, status=EntityStatus.SKIPPED)

        self._emit(run, EntityStatus.TRANSLATING)
        try:
            updates = await self._translate_entity(run, field_specs, targets)
            if updates:
                await self._store.update(run.collection, entity.id, updates)
        except Exception as exc:
            message = f"{type(exc).__name__}: {exc}"
            logger.error("entity_failed", collection=run.collection, entity_id=entity.id, error=message)
            self._warn(f"{run.collection}/{entity.id}: {message}")
            self._emit(run, EntityStatus.FAILED, message)
            return EntityOutcome(
                entity_id=entity.id,
                status=EntityStatus.FAILED,
                fields=run.touched,
                error=message,
            )

        if not updates:
            logger.info("entity_skipped", collection=run.collection, entity_id=entity.id, reason="no_source_text")
            self._emit(run, EntityStatus.SKIPPED, "nothing to translate")
            return EntityOutcome(entity_id=entity.id, status=EntityStatus.SKIPPED)

        logger.info("entity_migrated", collection=run.collection, entity_id=entity.id, fields=run.touched)
        self._emit(run, EntityStatus.SUCCESS)
        return EntityOutcome(entity_id=entity.id, status=EntityStatus.SUCCESS, fields=run.touched)

    async def _translate_entity(
        self,
        run: _EntityRun,
        field_specs: Sequence[FieldSpec],
        targets: Sequence[str],
    ) -> dict[str, Any]:
        # Slots write into a private copy; updates carry whole top-level keys.
        document = copy.deepcopy(run.entity.data)
        updates: dict[str, Any] = {}
        for spec in field_specs:
            for slot in iter_slots(document, spec):
                if is_blank(slot.value):
                    continue

                translations: dict[str, Any] = (
                    dict(slot.translations) if isinstance(slot.translations, dict) else {}
                )
                translations[self._default_language] = slot.value
                for language in targets:
                    await self._rate_limiter.acquire()
                    translations[language] = await self._translator.translate(slot.value, language)

                slot.write(translations)
                updates[slot.root_key] = document[slot.root_key]
                run.touched.append(slot.map_path)
        return updates


def is_translated(entity: ContentEntity, spec: FieldSpec, language: str) -> bool:
    """Skip predicate: every occurrence of the primary field has `language`.

    Only the primary (field, language) pair is checked; other fields may
    still be missing translations.
    """

    slots = list(iter_slots(entity.data, spec))
    return bool(slots) and all(slot.field().translation(language) is not None for slot in slots)
