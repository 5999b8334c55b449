# memorybrain

A small memory library for language-model tools, shaped after how people
remember things. A memory has tags, an optional embedding vector, and a
strength that grows each time it is accessed and shrinks when it decays.
Memories are kept in an SQLite database file.

The package uses only the Python standard library.

## Modules

- `memorybrain.types` – `MemoryItem`, `MemoryType`, `Emotion` and
  `MemoryQuery`.
  - `access()` updates `last_accessed`, adds one to `access_count` and raises
    `strength` by 0.1, up to 1.0.
  - `decay(factor)` multiplies `strength` by `factor`; `is_forgotten()` is true
    once `strength` drops below 0.1.
  - `with_emotion(emotion)` boosts strength by 1.5× (capped at 1.0) for any
    emotion other than `Emotion.NEUTRAL`.
  - `relevance_score()` mixes strength, recency (a one-week decay) and access
    frequency.
  - `to_dict()` and `MemoryItem.from_dict(data)` convert to and from a
    JSON-compatible dictionary; `from_dict` raises `ValueError` on missing or
    malformed fields.
- `memorybrain.vectors` – `cosine_similarity`, `dot_product`, `l2_norm`,
  `batch_cosine_similarity` and `top_k_similar` on plain sequences of floats.
- `memorybrain.storage` – `Storage(db_path, table_name)`, one table of
  memories in the file `memory_brain.sqlite3` inside the directory `db_path`
  (created when missing). It offers `save`, `update`, `delete`, `search`
  (case-insensitive substring match on content or context, strongest first),
  `get_all`, `get_recent`, `get_by_time_range`, `get_by_tag`,
  `add_association`, `get_associated` and `close`, and works as a context
  manager.
- `memorybrain.semantic` – `SemanticMemory(db_path)`, a store of facts. When a
  new fact overlaps the best-matching stored fact (one text contains the
  other, ignoring case), the stored fact is accessed and strengthened instead
  of a duplicate being saved.
- `memorybrain.procedural` – `Pattern` (a trigger → action habit with success
  and failure counts) and `ProceduralMemory(db_path)`, which stores patterns
  with `learn_pattern`, returns those with confidence above 0.3 from
  `find_patterns`, and records outcomes with `feedback(trigger, success)`.
- `memorybrain.merge` – `MemoryMerger`, `MergeConfig`, `MergeResult` and
  `MemoryCluster`, plus `analyze_duplicates(stores, threshold)` and
  `merge_duplicates(stores, threshold)`. A store is any object with a
  `search(query, limit)` method, such as `SemanticMemory` or `Storage`.
- `memorybrain.watch` – `MemorySnapshot`, `SnapshotDiff`, `WatchConfig` and
  `render_dashboard(snapshot, previous, config, elapsed_seconds, recent)`,
  which returns the text of a boxed dashboard of memory and index counts and
  of what changed since the previous snapshot.

## Vector helpers

```python
from memorybrain.vectors import cosine_similarity, top_k_similar

cosine_similarity([1.0, 2.0, 3.0, 4.0], [1.0, 2.0, 3.0, 4.0])   # 1.0
cosine_similarity([1.0, 0.0], [0.0, 1.0])                       # 0.0

vectors = [[0.0, 1.0, 0.0, 0.0], [1.0, 0.0, 0.0, 0.0], [0.5, 0.5, 0.0, 0.0]]
top_k_similar([1.0, 0.0, 0.0, 0.0], vectors, 2)
# [(1, 1.0), (2, 0.707...)]
```

Vectors of different lengths, empty vectors and zero vectors have a
similarity of `0.0`.

## Storing and searching facts

```python
from memorybrain.semantic import SemanticMemory
from memorybrain.types import MemoryItem

with SemanticMemory("brain-data") as facts:
    facts.store(MemoryItem("Rust uses ownership for memory safety").with_tags(["rust"]))
    facts.store(MemoryItem("rust uses ownership"))   # strengthens the first fact
    for item in facts.search("ownership", 5):
        print(item.content, item.access_count)
```

## Procedural patterns

```python
from memorybrain.procedural import Pattern

pattern = Pattern("cargo build fails", "run cargo clean first")
pattern.confidence()   # 1.0: a new pattern starts with one success
pattern.failure()
pattern.confidence()   # 0.5
```

## Finding duplicates

`MemoryMerger(stores, config)` collects every memory with an embedding from
the given stores and groups them greedily: each memory gathers the later
memories whose cosine similarity to it is at least
`config.similarity_threshold` (0.85 by default). In each cluster the newest
memory becomes the primary (the oldest when `keep_newest` is false).
`str(result)` gives a short report.

Outside dry-run mode the merge combines the tags of a cluster onto the
primary item object and counts the other members as merged; it does not
write to or delete from any store.

## What this package does not do

- It does not compute embeddings; `MemoryItem.embedding` has to be filled in
  by the caller.
- It has no command-line program, HTTP server or interactive screen.
- `memorybrain.watch` only renders dashboard text; it has no refresh loop and
  does not take snapshots itself, so counts must be supplied by the caller.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.