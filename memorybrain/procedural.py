"""Procedural memory: trigger/action patterns that strengthen with repetition."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional, Union

from .storage import Storage
from .types import MemoryItem, MemoryType


@dataclass
class Pattern:
    """A learned habit: when ``trigger`` is seen, ``action`` is done."""

    trigger: str
    action: str
    success_count: int = 1
    failure_count: int = 0
    tags: list[str] = field(default_factory=list)

    def confidence(self) -> float:
        """Share of successful uses; 0.5 when never used."""
        total = self.success_count + self.failure_count
        if total == 0:
            return 0.5
        return self.success_count / total

    def success(self) -> None:
        self.success_count += 1

    def failure(self) -> None:
        self.failure_count += 1


def _pattern_to_json(pattern: Pattern) -> str:
    return json.dumps(asdict(pattern), ensure_ascii=False, separators=(",", ":"))


def _is_count(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _pattern_from_json(text: str) -> Optional[Pattern]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    trigger, action = data.get("trigger"), data.get("action")
    success, failure, tags = data.get("success_count"), data.get("failure_count"), data.get("tags")
    if not (isinstance(trigger, str) and isinstance(action, str)):
        return None
    if not (_is_count(success) and _is_count(failure)):
        return None
    if not (isinstance(tags, list) and all(isinstance(t, str) for t in tags)):
        return None
    return Pattern(trigger, action, success, failure, tags)


class ProceduralMemory:
    """Store of procedural memories and trigger/action patterns."""

    def __init__(self, db_path: Union[str, Path]) -> None:
        self._storage = Storage(db_path, "procedural")

    def __enter__(self) -> "ProceduralMemory":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying storage."""
        self._storage.close()

    def store(self, item: MemoryItem) -> None:
        """Store a procedural memory."""
        item.memory_type = MemoryType.PROCEDURAL
        self._storage.save(item)

    def learn_pattern(self, pattern: Pattern) -> None:
        """Store ``pattern`` as a new procedural memory."""
        item = (
            MemoryItem(_pattern_to_json(pattern))
            .with_type(MemoryType.PROCEDURAL)
            .with_tags(pattern.tags)
        )
        self._storage.save(item)

    def search(self, query: str, limit: int) -> list[MemoryItem]:
        """Procedural memories matching ``query``."""
        return self._storage.search(query, limit)

    def find_patterns(self, trigger: str) -> list[Pattern]:
        """Confident patterns (confidence above 0.3) whose stored form matches ``trigger``."""
        patterns = (_pattern_from_json(item.content) for item in self._storage.search(trigger, 10))
        return [p for p in patterns if p is not None and p.confidence() > 0.3]

    def feedback(self, trigger: str, success: bool) -> None:
        """Record whether the best pattern matching ``trigger`` worked."""
        items = self._storage.search(trigger, 1)
        if not items:
            return
        item = items[0]
        pattern = _pattern_from_json(item.content)
        if pattern is None:
            return
        if success:
            pattern.success()
        else:
            pattern.failure()
        item.content = _pattern_to_json(pattern)
        item.access()
        self._storage.update(item)