from __future__ import annotations

from typing import Any

import pytest

from adapters.content_stores import InMemoryContentStore
from core.config import AppSettings
from core.domain.errors import PersistError
from core.log import configure_logging


class FakeTranslator:
    """Deterministic translator: `[<lang>] <text>`.

    `fail_open_for` mimics the HTTP adapter swallowing a provider error and
    returning the source text; `raise_for` makes the call blow up.
    """

    def __init__(
        self,
        *,
        fail_open_for: set[tuple[str, str]] | None = None,
        raise_for: set[str] | None = None,
    ) -> None:
        self.calls: list[tuple[str, str]] = []
        self._fail_open_for = fail_open_for or set()
        self._raise_for = raise_for or set()

    async def translate(self, text: str, target_language: str) -> str:
        self.calls.append((text, target_language))
        if text in self._raise_for:
            raise RuntimeError(f"boom: {text}")
        if (text, target_language) in self._fail_open_for:
            return text
        return f"[{target_language}] {text}"


class CountingLimiter:
    def __init__(self) -> None:
        self.acquired = 0

    async def acquire(self) -> None:
        self.acquired += 1


class FailingStore(InMemoryContentStore):
    def __init__(self, collections: dict[str, dict[str, dict[str, Any]]], fail_ids: set[str]) -> None:
        super().__init__(collections)
        self.fail_ids = fail_ids

    async def update(self, collection: str, entity_id: str, partial_fields: dict[str, Any]) -> None:
        if entity_id in self.fail_ids:
            raise PersistError(collection, entity_id, "write rejected")
        await super().update(collection, entity_id, partial_fields)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None)


@pytest.fixture
def translator() -> FakeTranslator:
    return FakeTranslator()


@pytest.fixture
def limiter() -> CountingLimiter:
    return CountingLimiter()


@pytest.fixture
def product_docs() -> dict[str, dict[str, dict[str, Any]]]:
    return {
        "products": {
            "saint-laurent": {
                "name": "Saint Laurent",
                "description": "Piedra sinterizada de gran formato",
                "seoTitle": "Saint Laurent 12mm",
                "price": 1000,
                "priceStandard": 1000,
                "pricePremium": 850,
                "priceVIP": 700,
                "customPrices": {"special-user-123": 600},
            },
            "calacatta": {
                "name": "Calacatta",
                "description": "Mármol blanco",
                "descriptionTranslations": {"es": "Mármol blanco", "en": "White marble"},
                "price": 1500,
            },
        }
    }


@pytest.fixture(autouse=True)
def _quiet_logs():
    configure_logging()
