"""Core memory data types: memory kinds, emotions, items and queries."""

from __future__ import annotations

import math
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class MemoryType(Enum):
    """Kind of memory store an item belongs to."""

    WORKING = "Working"  # short-term, volatile
    EPISODIC = "Episodic"  # events: when did what happen
    SEMANTIC = "Semantic"  # facts and concepts
    PROCEDURAL = "Procedural"  # patterns and habits


class Emotion(Enum):
    """Emotional valence; non-neutral memories are stronger."""

    NEUTRAL = "Neutral"
    POSITIVE = "Positive"
    NEGATIVE = "Negative"
    SURPRISE = "Surprise"


_FRACTION = re.compile(r"\.(\d+)")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _format_time(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_time(text: str) -> datetime:
    cleaned = text.strip()
    if cleaned.endswith(("Z", "z")):
        cleaned = cleaned[:-1] + "+00:00"
    # Sub-microsecond precision is not representable; keep six digits.
    cleaned = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), cleaned, count=1)
    moment = datetime.fromisoformat(cleaned)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass
class MemoryItem:
    """A single memory with strength, timestamps, embedding and tags."""

    content: str
    context: Optional[str] = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    memory_type: MemoryType = MemoryType.WORKING
    emotion: Emotion = Emotion.NEUTRAL
    created_at: datetime = field(default_factory=_utcnow)
    last_accessed: Optional[datetime] = None
    access_count: int = 1
    strength: float = 1.0
    embedding: Optional[list[float]] = None
    associations: list[uuid.UUID] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.last_accessed is None:
            self.last_accessed = self.created_at

    def relevance_score(self) -> float:
        """Weighted mix of strength, recency and access frequency."""
        recency = self._recency_factor()
        frequency = math.log(self.access_count) / 10.0 if self.access_count > 0 else -math.inf
        return self.strength * 0.5 + recency * 0.3 + frequency * 0.2

    def _recency_factor(self) -> float:
        elapsed = _utcnow() - self.last_accessed
        hours_since = math.trunc(elapsed.total_seconds() / 3600.0)
        return math.exp(-hours_since / 168.0)

    def access(self) -> None:
        """Record an access, which strengthens the memory up to 1.0."""
        self.last_accessed = _utcnow()
        self.access_count += 1
        self.strength = min(self.strength + 0.1, 1.0)

    def decay(self, factor: float) -> None:
        """Scale strength down by ``factor``."""
        self.strength *= factor

    def is_forgotten(self) -> bool:
        """True when the memory is too weak to keep."""
        return self.strength < 0.1

    def with_type(self, memory_type: MemoryType) -> "MemoryItem":
        self.memory_type = memory_type
        return self

    def with_emotion(self, emotion: Emotion) -> "MemoryItem":
        """Set the emotion; emotional memories get a 1.5x strength boost."""
        self.emotion = emotion
        if emotion is not Emotion.NEUTRAL:
            self.strength = min(self.strength * 1.5, 1.0)
        return self

    def with_tags(self, tags: list[str]) -> "MemoryItem":
        self.tags = list(tags)
        return self

    def associate(self, other_id: uuid.UUID) -> None:
        """Link this memory to another one, without duplicates."""
        if other_id not in self.associations:
            self.associations.append(other_id)

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible representation."""
        return {
            "id": str(self.id),
            "content": self.content,
            "context": self.context,
            "memory_type": self.memory_type.value,
            "emotion": self.emotion.value,
            "created_at": _format_time(self.created_at),
            "last_accessed": _format_time(self.last_accessed),
            "access_count": self.access_count,
            "strength": self.strength,
            "embedding": list(self.embedding) if self.embedding is not None else None,
            "associations": [str(a) for a in self.associations],
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MemoryItem":
        """Build an item from :meth:`to_dict` output; raises ValueError if malformed."""
        required = (
            "id",
            "content",
            "memory_type",
            "emotion",
            "created_at",
            "last_accessed",
            "access_count",
            "strength",
            "associations",
            "tags",
        )
        missing = [key for key in required if key not in data]
        if missing:
            raise ValueError(f"missing field(s): {', '.join(missing)}")
        try:
            embedding = data.get("embedding")
            return cls(
                id=uuid.UUID(str(data["id"])),
                content=str(data["content"]),
                context=data.get("context"),
                memory_type=MemoryType(data["memory_type"]),
                emotion=Emotion(data["emotion"]),
                created_at=_parse_time(data["created_at"]),
                last_accessed=_parse_time(data["last_accessed"]),
                access_count=int(data["access_count"]),
                strength=float(data["strength"]),
                embedding=[float(x) for x in embedding] if embedding is not None else None,
                associations=[uuid.UUID(str(a)) for a in data["associations"]],
                tags=[str(t) for t in data["tags"]],
            )
        except (TypeError, AttributeError) as exc:
            raise ValueError(f"invalid memory item: {exc}") from exc


def _default_query_types() -> list[MemoryType]:
    return [MemoryType.EPISODIC, MemoryType.SEMANTIC, MemoryType.PROCEDURAL]


@dataclass
class MemoryQuery:
    """Parameters of a memory search."""

    text: str
    memory_types: list[MemoryType] = field(default_factory=_default_query_types)
    min_strength: float = 0.1
    limit: int = 10
    tags: list[str] = field(default_factory=list)