"""Real-time monitoring dashboard of memory counts and index statistics."""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from itertools import islice
from typing import Optional

from .types import MemoryItem

_BORDER_TOP = "╔══════════════════════════════════════════════════════════════╗"
_BORDER_MID = "╠══════════════════════════════════════════════════════════════╣"
_BORDER_BOTTOM = "╚══════════════════════════════════════════════════════════════╝"
_RECENT_SHOWN = 3
_RECENT_WIDTH = 45


@dataclass
class WatchConfig:
    """Settings of the watch loop."""

    interval_ms: int = 1000
    detailed: bool = False
    clear_screen: bool = True
    max_iterations: int = 0  # 0 means run until interrupted


@dataclass
class SnapshotDiff:
    """Change in counts between two snapshots."""

    semantic_delta: int = 0
    episodic_delta: int = 0
    procedural_delta: int = 0
    keywords_delta: int = 0

    def has_changes(self) -> bool:
        """True when any count changed."""
        return any(
            (
                self.semantic_delta,
                self.episodic_delta,
                self.procedural_delta,
                self.keywords_delta,
            )
        )


@dataclass
class MemorySnapshot:
    """Memory and index counts at one moment."""

    semantic_count: int = 0
    episodic_count: int = 0
    procedural_count: int = 0
    index_keywords: int = 0
    index_docs: int = 0
    bloom_items: int = 0
    timestamp: float = field(default_factory=time.monotonic)

    def total_memories(self) -> int:
        """Sum of semantic, episodic and procedural memories."""
        return self.semantic_count + self.episodic_count + self.procedural_count

    def diff(self, other: "MemorySnapshot") -> SnapshotDiff:
        """Changes from ``other`` to this snapshot."""
        return SnapshotDiff(
            semantic_delta=self.semantic_count - other.semantic_count,
            episodic_delta=self.episodic_count - other.episodic_count,
            procedural_delta=self.procedural_count - other.procedural_count,
            keywords_delta=self.index_keywords - other.index_keywords,
        )


def truncate(s: str, max_len: int) -> str:
    """Pad ``s`` to ``max_len`` characters, or cut it with an ellipsis when longer."""
    if len(s) <= max_len:
        return s.ljust(max_len)
    return s[: max(max_len - 3, 0)] + "..."


def render_dashboard(
    snapshot: MemorySnapshot,
    previous: Optional[MemorySnapshot],
    config: WatchConfig,
    elapsed_seconds: float,
    recent: Iterable[MemoryItem] = (),
) -> str:
    """Text of one dashboard refresh.

    ``previous`` is the snapshot of the last refresh, if any; ``recent`` supplies
    memories listed when ``config.detailed`` is set.
    """
    secs = int(elapsed_seconds)
    hours, minutes, seconds = secs // 3600, (secs % 3600) // 60, secs % 60
    lines = [
        _BORDER_TOP,
        "║  🧠 Memory Brain Watch                                       ║",
        _BORDER_MID,
        f"║  ⏱️  Uptime: {hours:02}:{minutes:02}:{seconds:02}    "
        f"Refresh: {config.interval_ms}ms                     ║",
        _BORDER_MID,
        "║  📊 Memory Statistics                                        ║",
        f"║  ├─ Semantic:   {snapshot.semantic_count:>6} memories                             ║",
        f"║  ├─ Episodic:   {snapshot.episodic_count:>6} memories                             ║",
        f"║  ├─ Procedural: {snapshot.procedural_count:>6} memories                             ║",
        f"║  └─ Total:      {snapshot.total_memories():>6} memories                             ║",
        _BORDER_MID,
        "║  🔍 Index Statistics                                         ║",
        f"║  ├─ Keywords:   {snapshot.index_keywords:>6}                                      ║",
        f"║  ├─ Documents:  {snapshot.index_docs:>6}                                      ║",
        f"║  └─ Bloom:      {snapshot.bloom_items:>6} items                                ║",
    ]

    if previous is not None:
        diff = snapshot.diff(previous)
        if diff.has_changes():
            lines.append(_BORDER_MID)
            lines.append("║  📈 Changes Since Last Refresh                               ║")
            if diff.semantic_delta:
                lines.append(
                    f"║  ├─ Semantic:  {diff.semantic_delta:>+6}"
                    "                                       ║"
                )
            if diff.episodic_delta:
                lines.append(
                    f"║  ├─ Episodic:  {diff.episodic_delta:>+6}"
                    "                                       ║"
                )
            if diff.keywords_delta:
                lines.append(
                    f"║  └─ Keywords:  {diff.keywords_delta:>+6}"
                    "                                       ║"
                )

    if config.detailed:
        lines.append(_BORDER_MID)
        lines.append("║  📋 Recent Memories                                          ║")
        for number, memory in enumerate(islice(recent, _RECENT_SHOWN), start=1):
            lines.append(f"║  {number}. {truncate(memory.content, _RECENT_WIDTH)}  ║")

    lines.append(_BORDER_BOTTOM)
    lines.append("")
    lines.append("  Press Ctrl+C to exit")
    return "\n".join(lines) + "\n"