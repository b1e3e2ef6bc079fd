"""Translator adapter: MyMemory (free tier, no API key).

Responsibility:
- One GET per (text, target language): `?q=<text>&langpair=<src>|<dst>`.
- Fail open: any network error, timeout, non-success status or malformed
  payload is logged and the source text is returned unchanged.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any

import httpx

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import is_blank
from core.interfaces.translator import Translator
from core.log import get_logger

logger = get_logger(__name__)


class ProviderResponseError(ValueError):
    """The provider answered but not with a usable translation."""


def _extract_translation(payload: Any) -> str:
    if not isinstance(payload, dict):
        raise ProviderResponseError("payload is not a JSON object")

    status = payload.get("responseStatus")
    # MyMemory sometimes sends the status as a string.
    if str(status) != "200":
        details = payload.get("responseDetails")
        raise ProviderResponseError(f"responseStatus={status!r} details={details!r}")

    data = payload.get("responseData")
    if not isinstance(data, dict):
        raise ProviderResponseError("missing responseData")

    translated = data.get("translatedText")
    if is_blank(translated):
        raise ProviderResponseError("empty translatedText")
    return translated


class MyMemoryTranslator(Translator):
    """Translate from the configured source language through MyMemory."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        source_language: str | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._source_language = source_language or self._settings.default_language.value
        self._client = client
        self._owns_client = client is None
        self.failures = 0

    async def __aenter__(self) -> "MyMemoryTranslator":
        if self._client is None:
            self._client = build_async_client(self._settings)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def translate(self, text: str, target_language: str) -> str:
        if is_blank(text) or target_language == self._source_language:
            return text

        params = {
            "q": text,
            "langpair": f"{self._source_language}|{target_language}",
        }
        try:
            if self._client is None:
                async with build_async_client(self._settings) as client:
                    response = await client.get(self._settings.provider_url, params=params)
            else:
                response = await self._client.get(self._settings.provider_url, params=params)
            response.raise_for_status()
            return _extract_translation(response.json())
        except Exception as exc:
            self.failures += 1
            logger.warning(
                "translation_failed",
                target_language=target_language,
                text_preview=text[:60],
                error=f"{type(exc).__name__}: {exc}",
            )
            return text
