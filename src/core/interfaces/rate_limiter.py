"""Contrato del limitador de llamadas al proveedor."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class RateLimiter(Protocol):
    async def acquire(self) -> None:
        """Wait until the next outbound call is allowed."""

        ...
