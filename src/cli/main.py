"""Operator CLI.

Commands:
- `migrate`: fill missing translations for a collection (or one entity).
- `collections`: list the field presets.
- `resolve-text`: show which text a visitor would see for a field.
- `price`: show the personalized price of a stored product.
- `doctor`: environment diagnostics.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from adapters.content_stores import JsonFileContentStore
from adapters.mymemory_translator import MyMemoryTranslator
from cli import doctor
from cli.ui_components import (
    build_outcomes_table,
    build_price_panel,
    build_stats_table,
    print_banner,
)
from core.collections import COLLECTION_PRESETS, field_specs_for
from core.config import AppSettings
from core.domain.errors import EntityNotFound
from core.domain.language import Language
from core.domain.models import (
    FieldSpec,
    MigrationEvent,
    MigrationRunStats,
    PriceTier,
    PricingProfile,
    UserPricingContext,
)
from core.log import configure_logging
from core.services.localization import LocaleState
from core.services.pricing import resolve_price
from core.services.rate_limiter import MinIntervalRateLimiter
from core.services.translation_migration import (
    MigrationHooks,
    MigrationOptions,
    TranslationMigrationEngine,
)

app = typer.Typer(no_args_is_help=True, help="Content localization and personalized pricing tools.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def _store(settings: AppSettings, store_path: Optional[Path]) -> JsonFileContentStore:
    return JsonFileContentStore(store_path or settings.store_path)


def _parse_languages(values: Optional[List[str]], settings: AppSettings) -> list[str]:
    codes: list[str] = []
    for value in values or []:
        try:
            lang = Language.parse(value)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--lang") from exc
        if lang not in settings.supported_languages:
            raise typer.BadParameter(f"{lang.value!r} is not a supported language", param_hint="--lang")
        codes.append(lang.value)
    if not values:
        codes = settings.target_languages()
    if all(code == settings.default_language.value for code in codes):
        raise typer.BadParameter(
            f"{settings.default_language.value!r} is the source language; pick another target",
            param_hint="--lang",
        )
    return codes


def _field_specs(collection: str, field_names: Optional[List[str]], preset: Optional[str]) -> list[FieldSpec]:
    try:
        return field_specs_for(collection, field_names, preset=preset)
    except KeyError as exc:
        raise typer.BadParameter(str(exc.args[0]), param_hint="--preset/--field") from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--field") from exc


async def _run_migration(
    *,
    settings: AppSettings,
    store: JsonFileContentStore,
    collection: str,
    entity_id: Optional[str],
    specs: list[FieldSpec],
    languages: list[str],
    force: bool,
    delay: float,
    show_progress: bool,
) -> MigrationRunStats:
    with Progress(
        TextColumn("[cyan]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=_err_console,
        disable=not show_progress,
        transient=True,
    ) as progress:
        task_id = progress.add_task(collection, total=None)

        def on_event(event: MigrationEvent) -> None:
            progress.update(task_id, total=event.total, description=f"{collection}/{event.entity_id}")
            if event.status.is_terminal:
                progress.advance(task_id)

        hooks = MigrationHooks(
            on_event=on_event,
            warning=lambda message: progress.console.print(f"[yellow]Warning:[/yellow] {message}"),
        )

        async with MyMemoryTranslator(settings) as translator:
            engine = TranslationMigrationEngine(
                store=store,
                translator=translator,
                rate_limiter=MinIntervalRateLimiter(delay),
                default_language=settings.default_language.value,
                hooks=hooks,
            )
            if entity_id:
                return await engine.migrate_entity(
                    collection, entity_id, specs, languages, MigrationOptions(force=True)
                )
            if force:
                return await engine.retranslate_collection(collection, specs, languages)
            return await engine.migrate_collection(collection, specs, languages)


@app.command()
def migrate(
    collection: str = typer.Argument(..., help="Collection name, e.g. products."),
    force: bool = typer.Option(False, "--force", help="Re-translate entities that already have translations."),
    entity_id: Optional[str] = typer.Option(None, "--id", help="Only migrate this entity."),
    preset: Optional[str] = typer.Option(None, "--preset", help="Field preset (defaults to the collection name)."),
    fields: Optional[List[str]] = typer.Option(
        None, "--field", "-f", help="Source field or path (repeatable); first is primary."
    ),
    languages: Optional[List[str]] = typer.Option(None, "--lang", "-l", help="Target language (repeatable); first is primary."),
    delay: Optional[float] = typer.Option(None, "--delay", min=0.0, help="Seconds between provider calls."),
    store_path: Optional[Path] = typer.Option(None, "--store", help="JSON content store."),
    json_output: bool = typer.Option(False, "--json", help="Print stats as JSON."),
) -> None:
    """Populate missing translations for stored content."""

    settings = AppSettings()
    configure_logging(settings)
    targets = _parse_languages(languages, settings)
    specs = _field_specs(collection, fields, preset)
    if not json_output:
        print_banner(_console)

    try:
        stats = asyncio.run(
            _run_migration(
                settings=settings,
                store=_store(settings, store_path),
                collection=collection,
                entity_id=entity_id,
                specs=specs,
                languages=targets,
                force=force,
                delay=settings.translation_delay_seconds if delay is None else delay,
                show_progress=not json_output,
            )
        )
    except EntityNotFound as exc:
        _err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    if json_output:
        typer.echo(json.dumps(stats.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return

    _console.print(build_stats_table(stats, collection=collection))
    if stats.outcomes:
        _console.print(build_outcomes_table(stats))


@app.command(name="collections")
def list_collections() -> None:
    """Show the known collections and their localizable fields."""

    table = Table(title="Collection presets")
    table.add_column("Preset", style="cyan", no_wrap=True)
    table.add_column("Fields (primary first)")
    for name, specs in COLLECTION_PRESETS.items():
        table.add_row(name, ", ".join(f"{spec.source_key} -> {spec.map_key}" for spec in specs))
    _console.print(table)


@app.command(name="resolve-text")
def resolve_text_command(
    collection: str = typer.Argument(...),
    entity_id: str = typer.Argument(...),
    field: str = typer.Argument(..., help="Source field or path, e.g. description or mantenimiento.limpieza."),
    language: str = typer.Option(..., "--lang", "-l", help="Active display language."),
    store_path: Optional[Path] = typer.Option(None, "--store"),
) -> None:
    """Print the text a visitor using LANG would see for FIELD."""

    settings = AppSettings()
    configure_logging(settings)
    try:
        active = Language.parse(language)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--lang") from exc

    entity = asyncio.run(_store(settings, store_path).get_by_id(collection, entity_id))
    if entity is None:
        _err_console.print(f"[red]Error:[/red] {EntityNotFound(collection, entity_id)}")
        raise typer.Exit(code=1)

    locale = LocaleState(settings.language_codes, settings.default_language.value)
    if active.value in locale.supported_languages:
        locale.set_language(active.value)
    spec = _field_specs(collection, [field], None)[0]
    if not spec.is_nested:
        localizable = entity.field(spec)
        typer.echo(locale.resolve(localizable.translations, localizable.value))
        return
    for localizable in entity.fields(spec):
        typer.echo(f"{localizable.name}: {locale.resolve(localizable.translations, localizable.value)}")


@app.command()
def price(
    collection: str = typer.Argument(..., help="Product collection, e.g. products."),
    entity_id: str = typer.Argument(...),
    user_id: Optional[str] = typer.Option(None, "--user", help="Signed-in user id (omit for anonymous)."),
    tier: PriceTier = typer.Option(PriceTier.NONE, "--tier", case_sensitive=False),
    discount: Optional[float] = typer.Option(None, "--discount", min=0.0, max=100.0, help="Percent, for --tier custom."),
    store_path: Optional[Path] = typer.Option(None, "--store"),
    json_output: bool = typer.Option(False, "--json"),
) -> None:
    """Resolve the personalized price of a stored product."""

    settings = AppSettings()
    configure_logging(settings)
    entity = asyncio.run(_store(settings, store_path).get_by_id(collection, entity_id))
    if entity is None:
        _err_console.print(f"[red]Error:[/red] {EntityNotFound(collection, entity_id)}")
        raise typer.Exit(code=1)

    context = None
    if user_id:
        context = UserPricingContext(user_id=user_id, tier=tier, discount_percent=discount)
    result = resolve_price(PricingProfile.from_document(entity.data), context)

    if json_output:
        typer.echo(json.dumps(result.model_dump(mode="json"), ensure_ascii=False))
        return
    _console.print(build_price_panel(result, title=entity.label))


def run() -> None:
    app()
