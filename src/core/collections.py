"""Known content collections and their localizable fields.

The first field of each preset is the primary field used by the skip
predicate. Presets are keyed by collection name; `datosTecnicos` describes
the single technical-data document stored in the `content` collection.
"""

from __future__ import annotations

from core.domain.models import FieldSpec

COLLECTION_PRESETS: dict[str, tuple[FieldSpec, ...]] = {
    "products": (
        FieldSpec(source_key="description"),
        FieldSpec(source_key="seoTitle"),
        FieldSpec(source_key="seoDescription"),
    ),
    "galleryImages": (
        FieldSpec(source_key="title"),
        FieldSpec(source_key="description"),
        FieldSpec(source_key="project"),
        FieldSpec(source_key="location"),
    ),
    "galleryCategories": (
        FieldSpec(source_key="name"),
        FieldSpec(source_key="description"),
    ),
    "datosTecnicos": (
        FieldSpec(source_key="acabadosSuperficie[].descripcion"),
        FieldSpec(source_key="acabadosSuperficie[].alt"),
        FieldSpec(source_key="fichasTecnicas[].descripcion"),
        FieldSpec(source_key="especificacionesTecnicas.*"),
        FieldSpec(source_key="acabadosBordes[].descripcion"),
        FieldSpec(source_key="acabadosBordes[].alt"),
        FieldSpec(source_key="fijacionesFachada.descripcion"),
        FieldSpec(source_key="mantenimiento.limpieza"),
        FieldSpec(source_key="mantenimiento.frecuencia"),
        FieldSpec(source_key="testResults[].nombre"),
        FieldSpec(source_key="packingDescripcion"),
    ),
}


def field_specs_for(
    collection: str,
    fields: list[str] | None = None,
    *,
    preset: str | None = None,
) -> list[FieldSpec]:
    """Explicit `fields` win; otherwise the named `preset` or the collection's own.

    Raises KeyError for an unknown preset and ValueError for a malformed path.
    """

    if fields:
        return [FieldSpec(source_key=name) for name in fields]
    name = preset or collection
    specs = COLLECTION_PRESETS.get(name)
    if specs is None:
        raise KeyError(f"No field preset named {name!r}; pass the fields explicitly")
    return list(specs)
