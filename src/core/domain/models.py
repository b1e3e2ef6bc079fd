"""Modelos del dominio (Pydantic v2).

Why Pydantic in the domain:
- Strict validation at the edge (stored documents, CLI input) without coupling
  the core to any I/O library.
- Self-documenting fields (`Field(description=...)`) for every concept the
  resolvers and the migration engine share.

Note:
- These models describe *what* the data is, not *how* it is stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

# language code -> text. A missing key means "not yet translated".
TranslatedText = dict[str, str]

# Path tokens: `list[]` walks every element, a trailing `.*` every map entry.
_ITEMS = "[]"
_ENTRIES = "*"


def is_blank(value: object) -> bool:
    """True for None, non-strings and whitespace-only strings."""

    return not isinstance(value, str) or not value.strip()


def parse_field_path(path: str) -> tuple[str, ...]:
    """Split `a[].b.c` into `("a", "[]", "b", "c")`.

    Raises ValueError for empty segments, a path ending in `[]`, or a `*`
    that is not the last segment after a map key.
    """

    tokens: list[str] = []
    parts = path.split(".")
    for position, part in enumerate(parts):
        last = position == len(parts) - 1
        if part == _ENTRIES:
            if not last or not tokens or tokens[-1] == _ITEMS:
                raise ValueError(f"'*' must be the last segment after a map key in {path!r}")
            tokens.append(_ENTRIES)
            continue
        is_list = part.endswith(_ITEMS)
        name = part[: -len(_ITEMS)] if is_list else part
        if not name or any(ch in name for ch in "[]*"):
            raise ValueError(f"Invalid segment {part!r} in {path!r}")
        tokens.append(name)
        if is_list:
            if last:
                raise ValueError(f"{path!r} must end with a text key, not a list")
            tokens.append(_ITEMS)
    return tuple(tokens)


def _join_path(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


class FieldSpec(BaseModel):
    """Where a localizable field lives inside a stored document.

    Top-level fields keep the authored text under `source_key` (e.g.
    `description`) and the translations map next to it under
    `<source_key>Translations`. Nested documents use a path:

    - `mantenimiento.limpieza` -> `mantenimiento.limpiezaTranslations`
    - `acabadosBordes[].alt` -> `altTranslations` inside every list element
    - `especificacionesTecnicas.*` -> one map per entry, stored under
      `especificacionesTecnicasTranslations.<entry>`
    """

    model_config = ConfigDict(frozen=True)

    source_key: str = Field(..., min_length=1, description="Key or path of the authored text.")
    translations_key: str | None = Field(
        default=None,
        description="Name of the TranslatedText map (defaults to `<last key>Translations`).",
    )

    @field_validator("source_key")
    @classmethod
    def check_path(cls, value: str) -> str:
        parse_field_path(value)
        return value

    @property
    def tokens(self) -> tuple[str, ...]:
        return parse_field_path(self.source_key)

    @property
    def is_nested(self) -> bool:
        return len(self.tokens) > 1

    @property
    def map_key(self) -> str:
        """Path of the translations map, in the same notation as `source_key`."""

        tokens = self.tokens
        entries = tokens[-1] == _ENTRIES
        if entries:
            tokens = tokens[:-1]
        name = self.translations_key or f"{tokens[-1]}Translations"

        path = ""
        for token in tokens[:-1]:
            path = path + _ITEMS if token == _ITEMS else _join_path(path, token)
        path = _join_path(path, name)
        return f"{path}.{_ENTRIES}" if entries else path


class LocalizableField(BaseModel):
    """A named field carrying its plain value and an optional translations map."""

    name: str = Field(..., min_length=1)
    value: str = Field(
        default="",
        description="Plain/fallback text used when no usable translation exists.",
    )
    translations: TranslatedText | None = Field(
        default=None,
        description="Stored translations; None when the document has no map yet.",
    )

    def translation(self, language: str) -> str | None:
        """Return the non-blank translation for `language`, if any."""

        if not self.translations:
            return None
        text = self.translations.get(language)
        if is_blank(text):
            return None
        return text


@dataclass
class FieldSlot:
    """One concrete occurrence of a FieldSpec inside a document.

    `translations` is the raw stored map (may hold non-string entries);
    `write` stores a new map in place, creating the entries container when
    needed. `root_key` is the top-level document key that contains the map.
    """

    path: str
    value: Any
    translations: Any
    root_key: str
    map_path: str
    parent: dict[str, Any]
    map_name: str
    entry: str | None = None

    def field(self) -> LocalizableField:
        translations: TranslatedText | None = None
        if isinstance(self.translations, dict):
            translations = {str(k): v for k, v in self.translations.items() if isinstance(v, str)}
        return LocalizableField(
            name=self.path,
            value=self.value if isinstance(self.value, str) else "",
            translations=translations,
        )

    def write(self, translations: dict[str, Any]) -> None:
        if self.entry is None:
            self.parent[self.map_name] = translations
            return
        container = self.parent.get(self.map_name)
        if not isinstance(container, dict):
            container = {}
            self.parent[self.map_name] = container
        container[self.entry] = translations


def iter_slots(document: dict[str, Any], spec: FieldSpec) -> Iterator[FieldSlot]:
    """Yield every occurrence of `spec` in `document`.

    A top-level spec always yields exactly one slot (value may be missing).
    Nested specs yield nothing when an intermediate key is absent or has the
    wrong shape.
    """

    yield from _walk(document, spec.tokens, spec, "", None)


def _walk(
    node: dict[str, Any],
    tokens: tuple[str, ...],
    spec: FieldSpec,
    prefix: str,
    root_key: str | None,
) -> Iterator[FieldSlot]:
    name, rest = tokens[0], tokens[1:]
    path = _join_path(prefix, name)

    if not rest or rest == (_ENTRIES,):
        map_name = spec.translations_key or f"{name}Translations"
        map_path = _join_path(prefix, map_name)
        if not rest:
            yield FieldSlot(
                path=path,
                value=node.get(name),
                translations=node.get(map_name),
                root_key=root_key or map_name,
                map_path=map_path,
                parent=node,
                map_name=map_name,
            )
            return

        entries = node.get(name)
        if not isinstance(entries, dict):
            return
        container = node.get(map_name)
        for key, value in entries.items():
            yield FieldSlot(
                path=f"{path}.{key}",
                value=value,
                translations=container.get(key) if isinstance(container, dict) else None,
                root_key=root_key or map_name,
                map_path=f"{map_path}.{key}",
                parent=node,
                map_name=map_name,
                entry=str(key),
            )
        return

    child = node.get(name)
    if rest[0] == _ITEMS:
        if not isinstance(child, list):
            return
        for index, item in enumerate(child):
            if isinstance(item, dict):
                yield from _walk(item, rest[1:], spec, f"{path}[{index}]", root_key or name)
        return
    if isinstance(child, dict):
        yield from _walk(child, rest, spec, path, root_key or name)


class ContentEntity(BaseModel):
    """An opaque stored record (id + raw document).

    The pipeline only reads it and merge-writes translations maps back; the
    content store owns its lifecycle.
    """

    id: str = Field(..., min_length=1, description="Document identifier.")
    data: dict[str, Any] = Field(default_factory=dict, description="Raw document fields.")

    @property
    def label(self) -> str:
        for key in ("name", "title"):
            value = self.data.get(key)
            if not is_blank(value):
                return str(value).strip()
        return self.id

    def fields(self, spec: FieldSpec) -> list[LocalizableField]:
        return [slot.field() for slot in iter_slots(self.data, spec)]

    def field(self, spec: FieldSpec) -> LocalizableField:
        """First occurrence of `spec` (the only one for top-level fields)."""

        for slot in iter_slots(self.data, spec):
            return slot.field()
        return LocalizableField(name=spec.source_key)


class PriceTier(str, Enum):
    """Pricing category attached to a user's pricing context."""

    NONE = "none"
    STANDARD = "standard"
    PREMIUM = "premium"
    VIP = "vip"
    CUSTOM = "custom"

    def label(self) -> str:
        return _TIER_LABELS.get(self, self.value.title())

    @property
    def is_named(self) -> bool:
        """Named tiers carry their own price on the product."""

        return self in (PriceTier.STANDARD, PriceTier.PREMIUM, PriceTier.VIP)


_TIER_LABELS: dict[PriceTier, str] = {
    PriceTier.STANDARD: "Standard",
    PriceTier.PREMIUM: "Premium",
    PriceTier.VIP: "VIP",
}

# Stored product keys for each named tier price.
TIER_PRICE_KEYS: dict[PriceTier, str] = {
    PriceTier.STANDARD: "priceStandard",
    PriceTier.PREMIUM: "pricePremium",
    PriceTier.VIP: "priceVIP",
}


def _as_price(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


class PricingProfile(BaseModel):
    """Per-product pricing inputs."""

    base_price: float | None = Field(default=None, description="List price.")
    tier_prices: dict[PriceTier, float] = Field(
        default_factory=dict,
        description="Prices for named tiers (standard/premium/vip).",
    )
    user_overrides: dict[str, float] = Field(
        default_factory=dict,
        description="Explicit per-user prices keyed by user id.",
    )

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "PricingProfile":
        """Build a profile from a stored product document.

        Non-numeric values are ignored so partially populated products still
        resolve (they fall through to the base price).
        """

        tier_prices: dict[PriceTier, float] = {}
        for tier, key in TIER_PRICE_KEYS.items():
            price = _as_price(data.get(key))
            if price is not None:
                tier_prices[tier] = price

        overrides: dict[str, float] = {}
        raw_overrides = data.get("customPrices")
        if isinstance(raw_overrides, dict):
            for user_id, raw in raw_overrides.items():
                price = _as_price(raw)
                if price is not None:
                    overrides[str(user_id)] = price

        return cls(
            base_price=_as_price(data.get("price")),
            tier_prices=tier_prices,
            user_overrides=overrides,
        )


class UserPricingContext(BaseModel):
    """Who is asking for a price. `None` in place of a context means anonymous."""

    user_id: str = Field(..., min_length=1)
    tier: PriceTier = Field(default=PriceTier.NONE)
    discount_percent: float | None = Field(
        default=None,
        ge=0.0,
        le=100.0,
        description="Only used when `tier` is `custom`.",
    )


class PricingResult(BaseModel):
    price: float
    original_price: float | None = None
    discount_amount: float | None = None
    tier_label: str | None = None

    @property
    def discount_percentage(self) -> int:
        """Rounded discount for display; 0 when there is no discount."""

        if not self.original_price or not self.discount_amount:
            return 0
        return round(self.discount_amount / self.original_price * 100)


class EntityStatus(str, Enum):
    PENDING = "pending"
    TRANSLATING = "translating"
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"

    @property
    def is_terminal(self) -> bool:
        return self in (EntityStatus.SUCCESS, EntityStatus.FAILED, EntityStatus.SKIPPED)


class EntityOutcome(BaseModel):
    entity_id: str
    status: EntityStatus
    fields: list[str] = Field(default_factory=list, description="Translations keys written.")
    error: str | None = None


class MigrationEvent(BaseModel):
    """Progress event emitted on every per-entity state transition."""

    collection: str
    entity_id: str
    status: EntityStatus
    index: int = Field(..., ge=0, description="Position of the entity in the run.")
    total: int = Field(..., ge=0)
    detail: str | None = None


class MigrationRunStats(BaseModel):
    """Summary of one migration run. Created per run, never persisted."""

    success: int = 0
    failed: int = 0
    skipped: int = 0
    cancelled: bool = False
    outcomes: list[EntityOutcome] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return self.success + self.failed + self.skipped

    def record(self, outcome: EntityOutcome) -> None:
        if outcome.status is EntityStatus.SUCCESS:
            self.success += 1
        elif outcome.status is EntityStatus.FAILED:
            self.failed += 1
        elif outcome.status is EntityStatus.SKIPPED:
            self.skipped += 1
        else:
            raise ValueError(f"Outcome must be terminal, got {outcome.status.value}")
        self.outcomes.append(outcome)
