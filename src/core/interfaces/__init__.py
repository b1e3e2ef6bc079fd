"""Interfaces/abstracciones del Core.

Why:
- Defines contracts (Protocol) implemented by concrete adapters.
- Inverts dependencies: the core depends on abstractions only.
"""

from core.interfaces.content_store import ContentStore
from core.interfaces.rate_limiter import RateLimiter
from core.interfaces.translator import Translator

__all__ = [
    "ContentStore",
    "RateLimiter",
    "Translator",
]
