"""Almacenes de documentos (implementaciones de `ContentStore`).

- `JsonFileContentStore`: single JSON file, used by the CLI.
- `InMemoryContentStore`: dict-backed, for tests and dry runs.
"""

from adapters.content_stores.json_file import JsonFileContentStore
from adapters.content_stores.memory import InMemoryContentStore

__all__ = [
    "InMemoryContentStore",
    "JsonFileContentStore",
]
