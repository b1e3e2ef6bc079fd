"""Contrato del proveedor de traducción.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- The HTTP adapter and test doubles are interchangeable for the engine.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Translator(Protocol):
    """Minimal contract for a translation provider.

    Design rules:
    - `translate` is async because it performs I/O (HTTP).
    - Implementations fail open: on any provider failure they return `text`.
    """

    async def translate(self, text: str, target_language: str) -> str:
        """Translate `text` from the source language into `target_language`."""

        ...
