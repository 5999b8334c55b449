"""Find clusters of near-duplicate memories by embedding similarity."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional, Protocol

from .types import MemoryItem
from .vectors import cosine_similarity

_FETCH_LIMIT = 10000
_SHOWN_CLUSTERS = 5
_OVERHEAD_BYTES = 512


class MemoryStore(Protocol):
    """Anything that can return memories matching a text query."""

    def search(self, query: str, limit: int) -> list[MemoryItem]: ...


@dataclass
class MergeConfig:
    """Settings for duplicate detection and merging."""

    similarity_threshold: float = 0.85
    min_cluster_size: int = 2
    keep_newest: bool = True
    merge_tags: bool = True
    dry_run: bool = False


@dataclass
class MemoryCluster:
    """A primary memory together with the memories similar to it."""

    primary: MemoryItem
    similar: list[MemoryItem] = field(default_factory=list)
    avg_similarity: float = 1.0

    def size(self) -> int:
        """Number of memories in the cluster, primary included."""
        return 1 + len(self.similar)


def truncate(s: str, max_len: int) -> str:
    """Cut ``s`` to ``max_len`` characters, adding an ellipsis when cut."""
    if len(s) <= max_len:
        return s
    return s[:max_len] + "..."


@dataclass
class MergeResult:
    """Outcome of a duplicate analysis or merge."""

    clusters_found: int = 0
    mergeable_count: int = 0
    merged_count: int = 0
    space_saved_bytes: int = 0
    clusters: list[MemoryCluster] = field(default_factory=list)

    def __str__(self) -> str:
        lines = [
            "🔗 Merge Analysis:",
            f"  Clusters found:    {self.clusters_found}",
            f"  Mergeable items:   {self.mergeable_count}",
            f"  Actually merged:   {self.merged_count}",
            f"  Space saved:       {self.space_saved_bytes / 1024.0:.1f} KB",
        ]
        if self.clusters:
            lines.append("")
            lines.append("📦 Clusters:")
            for number, cluster in enumerate(self.clusters[:_SHOWN_CLUSTERS], start=1):
                lines.append(
                    f'  {number}. "{truncate(cluster.primary.content, 30)}..." '
                    f"({len(cluster.similar)} similar, {cluster.avg_similarity * 100.0:.0f}% avg)"
                )
            if len(self.clusters) > _SHOWN_CLUSTERS:
                lines.append(f"  ... and {len(self.clusters) - _SHOWN_CLUSTERS} more clusters")
        return "\n".join(lines) + "\n"


class MemoryMerger:
    """Groups similar memories from one or more stores and merges them."""

    def __init__(
        self, stores: Iterable[MemoryStore], config: Optional[MergeConfig] = None
    ) -> None:
        self.stores = list(stores)
        self.config = config if config is not None else MergeConfig()

    def threshold(self, threshold: float) -> "MemoryMerger":
        """Set the similarity threshold, clamped to 0.0..1.0."""
        self.config.similarity_threshold = min(max(threshold, 0.0), 1.0)
        return self

    def dry_run(self, dry_run: bool) -> "MemoryMerger":
        """Enable or disable dry-run mode."""
        self.config.dry_run = dry_run
        return self

    def find_similar(self) -> MergeResult:
        """Find clusters of similar memories and merge them unless in dry-run mode."""
        result = MergeResult()
        memories = [
            item
            for store in self.stores
            for item in store.search("", _FETCH_LIMIT)
            if item.embedding is not None
        ]
        if len(memories) < 2:
            return result

        clusters = self._cluster_similar(memories)
        result.clusters_found = len(clusters)
        result.mergeable_count = sum(len(c.similar) for c in clusters)
        result.clusters = clusters
        result.space_saved_bytes = sum(
            len(item.content.encode("utf-8")) + _OVERHEAD_BYTES
            for cluster in clusters
            for item in cluster.similar
        )

        if not self.config.dry_run:
            result.merged_count = self._execute_merge(clusters)
        return result

    def _cluster_similar(self, memories: list[MemoryItem]) -> list[MemoryCluster]:
        clusters: list[MemoryCluster] = []
        assigned: set = set()
        needed = max(self.config.min_cluster_size - 1, 0)

        for position, anchor in enumerate(memories):
            if anchor.id in assigned:
                continue
            similar: list[tuple[MemoryItem, float]] = []
            for other in memories[position + 1:]:
                if other.id in assigned or other.embedding is None:
                    continue
                score = cosine_similarity(anchor.embedding, other.embedding)
                if score >= self.config.similarity_threshold:
                    similar.append((other, score))
                    assigned.add(other.id)

            if len(similar) < needed:
                continue
            assigned.add(anchor.id)
            avg = sum(s for _, s in similar) / len(similar) if similar else 1.0
            members = sorted(
                [anchor, *(item for item, _ in similar)],
                key=lambda item: item.created_at,
                reverse=self.config.keep_newest,
            )
            clusters.append(
                MemoryCluster(primary=members[0], similar=members[1:], avg_similarity=avg)
            )
        return clusters

    def _execute_merge(self, clusters: list[MemoryCluster]) -> int:
        merged = 0
        for cluster in clusters:
            if self.config.merge_tags:
                combined = list(cluster.primary.tags)
                for item in cluster.similar:
                    combined.extend(t for t in item.tags if t not in combined)
                cluster.primary.tags = combined
            merged += len(cluster.similar)
        return merged


def analyze_duplicates(stores: Iterable[MemoryStore], threshold: float) -> MergeResult:
    """Report duplicate clusters without merging."""
    return MemoryMerger(stores).threshold(threshold).dry_run(True).find_similar()


def merge_duplicates(stores: Iterable[MemoryStore], threshold: float) -> MergeResult:
    """Find duplicate clusters and merge them."""
    return MemoryMerger(stores).threshold(threshold).dry_run(False).find_similar()