"""Language utilities for the catalog localizer.

This module centralizes the language codes the storefront can display.
Keeping it in the domain layer allows settings, resolvers and the migration
engine to share a single source of truth without creating circular imports
with adapters.
"""

from __future__ import annotations

from enum import Enum


class Language(str, Enum):
    """Supported display languages. Declaration order is the fallback order."""

    SPANISH = "es"
    ENGLISH = "en"
    FRENCH = "fr"
    ITALIAN = "it"

    @classmethod
    def default(cls) -> "Language":
        """Return the authoring (source) language of stored content."""

        return cls.SPANISH

    @classmethod
    def codes(cls) -> list[str]:
        return [lang.value for lang in cls]

    @classmethod
    def parse(cls, value: str) -> "Language":
        """Accept `es`, `ES`, ` es ` and similar."""

        normalized = (value or "").strip().lower()
        for lang in cls:
            if lang.value == normalized:
                return lang
        raise ValueError(f"Unsupported language code: {value!r}")

    def label(self) -> str:
        """Human readable label for tables and logging."""

        return _LABELS[self]


_LABELS: dict[Language, str] = {
    Language.SPANISH: "Español",
    Language.ENGLISH: "English",
    Language.FRENCH: "Français",
    Language.ITALIAN: "Italiano",
}
