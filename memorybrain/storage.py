"""Persistent memory storage backed by an SQLite database file."""

from __future__ import annotations

import json
import re
import sqlite3
import uuid
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Optional, Union

from .types import Emotion, MemoryItem, MemoryType

KEYSPACE = "memory_brain"

_DB_FILE = f"{KEYSPACE}.sqlite3"
_TABLE_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)
_COLUMNS = (
    "id",
    "content",
    "context",
    "memory_type",
    "emotion",
    "created_at",
    "last_accessed",
    "access_count",
    "strength",
    "embedding",
    "tags",
)


def _to_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - _EPOCH) // _MILLISECOND


def _from_millis(value: Any) -> Optional[datetime]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    try:
        return _EPOCH + value * _MILLISECOND
    except OverflowError:
        return None


def _enum_or(enum_cls, value: Any, fallback):
    if not isinstance(value, str):
        return fallback
    try:
        return enum_cls(value)
    except ValueError:
        return fallback


def _parse_strength(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 1.0
    return 1.0


def _parse_embedding(value: Any) -> Optional[list[float]]:
    if not isinstance(value, str) or not value:
        return None
    try:
        data = json.loads(value)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, list) or not all(
        isinstance(x, (int, float)) and not isinstance(x, bool) for x in data
    ):
        return None
    return [float(x) for x in data]


def _parse_tags(value: Any) -> list[str]:
    if not isinstance(value, str):
        return []
    try:
        data = json.loads(value)
    except json.JSONDecodeError:
        return []
    if not isinstance(data, list) or not all(isinstance(t, str) for t in data):
        return []
    return data


def _row_to_item(row: tuple) -> Optional[MemoryItem]:
    record = dict(zip(_COLUMNS, row))
    try:
        memory_id = uuid.UUID(str(record["id"]))
    except ValueError:
        return None
    content = record["content"]
    if not isinstance(content, str):
        return None
    context = record["context"] if isinstance(record["context"], str) and record["context"] else None
    now = datetime.now(timezone.utc)
    access_count = record["access_count"]
    return MemoryItem(
        content=content,
        context=context,
        id=memory_id,
        memory_type=_enum_or(MemoryType, record["memory_type"], MemoryType.SEMANTIC),
        emotion=_enum_or(Emotion, record["emotion"], Emotion.NEUTRAL),
        created_at=_from_millis(record["created_at"]) or now,
        last_accessed=_from_millis(record["last_accessed"]) or now,
        access_count=access_count if isinstance(access_count, int) else 0,
        strength=_parse_strength(record["strength"]),
        embedding=_parse_embedding(record["embedding"]),
        associations=[],
        tags=_parse_tags(record["tags"]),
    )


def _by_strength(items: Iterable[MemoryItem]) -> list[MemoryItem]:
    return sorted(items, key=lambda item: item.strength, reverse=True)


def _newest_first(items: Iterable[MemoryItem]) -> list[MemoryItem]:
    return sorted(items, key=lambda item: item.created_at, reverse=True)


class Storage:
    """One table of memories inside the database at ``db_path``.

    ``db_path`` is a directory; it is created when missing.
    """

    def __init__(self, db_path: Union[str, Path], table_name: str) -> None:
        if not _TABLE_NAME.match(table_name):
            raise ValueError(f"invalid table name: {table_name!r}")
        directory = Path(db_path)
        directory.mkdir(parents=True, exist_ok=True)
        self.path = directory / _DB_FILE
        self.table = table_name
        self._table = f'"{table_name}"'
        self._associations = f'"{table_name}_associations"'
        self._conn = sqlite3.connect(str(self.path), isolation_level=None)
        self._init_tables()

    def _init_tables(self) -> None:
        self._conn.execute(
            f"""CREATE TABLE IF NOT EXISTS {self._table} (
                id TEXT PRIMARY KEY,
                content TEXT,
                context TEXT,
                memory_type TEXT,
                emotion TEXT,
                created_at INTEGER,
                last_accessed INTEGER,
                access_count INTEGER,
                strength TEXT,
                embedding TEXT,
                tags TEXT
            )"""
        )
        self._conn.execute(
            f"""CREATE TABLE IF NOT EXISTS {self._associations} (
                from_id TEXT NOT NULL,
                to_id TEXT NOT NULL,
                PRIMARY KEY (from_id, to_id)
            )"""
        )

    def __enter__(self) -> "Storage":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def save(self, item: MemoryItem) -> None:
        """Insert ``item``, replacing any stored item with the same id."""
        embedding = json.dumps(list(item.embedding)) if item.embedding is not None else ""
        values = (
            str(item.id),
            item.content,
            item.context or "",
            item.memory_type.value,
            item.emotion.value,
            _to_millis(item.created_at),
            _to_millis(item.last_accessed),
            item.access_count,
            repr(float(item.strength)),
            embedding,
            json.dumps(list(item.tags), ensure_ascii=False),
        )
        updates = ", ".join(f"{col} = excluded.{col}" for col in _COLUMNS[1:])
        placeholders = ", ".join("?" for _ in _COLUMNS)
        self._conn.execute(
            f"INSERT INTO {self._table} ({', '.join(_COLUMNS)}) VALUES ({placeholders}) "
            f"ON CONFLICT(id) DO UPDATE SET {updates}",
            values,
        )

    def update(self, item: MemoryItem) -> None:
        """Store the new state of ``item``."""
        self.save(item)

    def delete(self, memory_id: uuid.UUID) -> None:
        """Remove the memory with ``memory_id`` and its associations."""
        key = str(memory_id)
        self._conn.execute(f"DELETE FROM {self._table} WHERE id = ?", (key,))
        self._conn.execute(
            f"DELETE FROM {self._associations} WHERE from_id = ? OR to_id = ?", (key, key)
        )

    def _load(self) -> list[MemoryItem]:
        cursor = self._conn.execute(
            f"SELECT {', '.join(_COLUMNS)} FROM {self._table} ORDER BY rowid"
        )
        return [item for item in map(_row_to_item, cursor) if item is not None]

    def search(self, query: str, limit: int) -> list[MemoryItem]:
        """Memories whose content or context contains ``query``, strongest first."""
        items = self._load()
        if query:
            needle = query.lower()
            items = [
                item
                for item in items
                if needle in item.content.lower()
                or (item.context is not None and needle in item.context.lower())
            ]
        return _by_strength(items)[:limit]

    def get_all(self) -> list[MemoryItem]:
        """Every stored memory."""
        return self._load()

    def get_recent(self, limit: int) -> list[MemoryItem]:
        """The ``limit`` most recently created memories, newest first."""
        return _newest_first(self._load())[:limit]

    def get_by_time_range(self, start: datetime, end: datetime) -> list[MemoryItem]:
        """Memories created within ``start``..``end`` inclusive, newest first."""
        return _newest_first(item for item in self._load() if start <= item.created_at <= end)

    def get_by_tag(self, tag: str) -> list[MemoryItem]:
        """Memories with a tag containing ``tag`` (case-insensitive), strongest first."""
        needle = tag.lower()
        return _by_strength(
            item for item in self._load() if any(needle in t.lower() for t in item.tags)
        )

    def add_association(self, from_id: uuid.UUID, to_id: uuid.UUID) -> None:
        """Record that ``from_id`` is associated with ``to_id``."""
        self._conn.execute(
            f"INSERT OR IGNORE INTO {self._associations} (from_id, to_id) VALUES (?, ?)",
            (str(from_id), str(to_id)),
        )

    def get_associated(self, memory_id: uuid.UUID) -> list[MemoryItem]:
        """Stored memories associated from ``memory_id``, in order of association."""
        cursor = self._conn.execute(
            f"SELECT to_id FROM {self._associations} WHERE from_id = ? ORDER BY rowid",
            (str(memory_id),),
        )
        wanted = [row[0] for row in cursor]
        by_id = {str(item.id): item for item in self._load()}
        return [by_id[key] for key in wanted if key in by_id]