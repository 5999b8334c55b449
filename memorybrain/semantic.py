"""Semantic memory: facts and concepts not tied to specific events."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from .storage import Storage
from .types import MemoryItem, MemoryType


class SemanticMemory:
    """Store of facts that strengthens existing facts instead of duplicating them."""

    def __init__(self, db_path: Union[str, Path]) -> None:
        self._storage = Storage(db_path, "semantic")

    def __enter__(self) -> "SemanticMemory":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying storage."""
        self._storage.close()

    def store(self, item: MemoryItem) -> None:
        """Store a fact, or strengthen an existing one that overlaps it."""
        item.memory_type = MemoryType.SEMANTIC
        existing = self._find_similar(item.content)
        if existing is not None:
            existing.access()
            self._storage.update(existing)
        else:
            self._storage.save(item)

    def search(self, query: str, limit: int) -> list[MemoryItem]:
        """Facts matching ``query``, strongest first."""
        return self._storage.search(query, limit)

    def get_by_tag(self, tag: str) -> list[MemoryItem]:
        """Facts carrying a tag that contains ``tag``."""
        return self._storage.get_by_tag(tag)

    def _find_similar(self, content: str) -> Optional[MemoryItem]:
        results = self._storage.search(content, 1)
        if not results:
            return None
        candidate = results[0]
        new_text, old_text = content.lower(), candidate.content.lower()
        if old_text in new_text or new_text in old_text:
            return candidate
        return None