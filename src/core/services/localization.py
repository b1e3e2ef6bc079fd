"""Localized text resolution.

`resolve_text` is a pure function: callers pass the active language
explicitly instead of reading a module-wide "current language". The only
place that owns the active language is a `LocaleState` created at the
composition point (CLI command, request scope, ...), which notifies its
subscribers when the language changes.
"""

from __future__ import annotations

from typing import Callable, Iterable, Sequence

from core.domain.models import LocalizableField, TranslatedText, is_blank


def fallback_order(default_language: str, supported_languages: Iterable[str]) -> list[str]:
    """Default language first, then the remaining supported ones in declared order."""

    order = [default_language]
    for code in supported_languages:
        if code not in order:
            order.append(code)
    return order


def resolve_text(
    translations: TranslatedText | None,
    current_language: str,
    supported_languages: Sequence[str],
    default_language: str,
    fallback_text: str,
) -> str:
    """Pick the best available text for a field.

    1. No map at all -> `fallback_text`.
    2. Non-blank entry for `current_language` -> that entry.
    3. First non-blank entry following `fallback_order`.
    4. `fallback_text`.

    Entries are returned trimmed. Keys that are not supported languages are
    never consulted.
    """

    if translations is None:
        return fallback_text

    if current_language in supported_languages or current_language == default_language:
        direct = translations.get(current_language)
        if not is_blank(direct):
            return direct.strip()

    for code in fallback_order(default_language, supported_languages):
        value = translations.get(code)
        if not is_blank(value):
            return value.strip()

    return fallback_text


def resolve_field(
    field: LocalizableField,
    current_language: str,
    supported_languages: Sequence[str],
    default_language: str,
    fallback_text: str | None = None,
) -> str:
    """`resolve_text` for a `LocalizableField`; its plain value is the fallback."""

    return resolve_text(
        field.translations,
        current_language,
        supported_languages,
        default_language,
        field.value if fallback_text is None else fallback_text,
    )


LocaleListener = Callable[[str], None]


class LocaleState:
    """Owns the active display language for one composition point.

    A new subscriber is called once with the current language right away;
    after that, subscribers are called synchronously, in subscription order,
    only when the language actually changes.
    """

    def __init__(
        self,
        supported_languages: Sequence[str],
        default_language: str,
        preferred_language: str | None = None,
    ) -> None:
        if default_language not in supported_languages:
            raise ValueError(f"Default language {default_language!r} is not supported")
        self._supported = tuple(supported_languages)
        self._default = default_language
        self._listeners: list[LocaleListener] = []

        preferred = (preferred_language or "").strip().lower()
        self._current = preferred if preferred in self._supported else default_language

    @property
    def current(self) -> str:
        return self._current

    @property
    def supported_languages(self) -> tuple[str, ...]:
        return self._supported

    @property
    def default_language(self) -> str:
        return self._default

    def set_language(self, language: str) -> None:
        if language not in self._supported:
            raise ValueError(f"Unsupported language: {language!r}")
        if language == self._current:
            return
        self._current = language
        for listener in list(self._listeners):
            listener(language)

    def subscribe(self, listener: LocaleListener) -> Callable[[], None]:
        """Register `listener` and call it with the current language.

        Returns a callable that unsubscribes it.
        """

        self._listeners.append(listener)
        listener(self._current)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def resolve(self, translations: TranslatedText | None, fallback_text: str) -> str:
        return resolve_text(
            translations,
            self._current,
            self._supported,
            self._default,
            fallback_text,
        )
