import pytest

from memorybrain.semantic import SemanticMemory
from memorybrain.types import MemoryItem, MemoryType


@pytest.fixture
def memory(tmp_path):
    with SemanticMemory(tmp_path / "brain") as mem:
        yield mem


def test_store_marks_item_semantic(memory):
    memory.store(MemoryItem("Rust uses ownership for memory safety"))
    [stored] = memory.search("ownership", 5)
    assert stored.memory_type is MemoryType.SEMANTIC


def test_duplicate_strengthens_existing(memory):
    first = MemoryItem("Rust is fast")
    memory.store(first)
    memory.store(MemoryItem("rust is FAST"))
    results = memory.search("", 10)
    assert len(results) == 1
    assert results[0].id == first.id
    assert results[0].access_count == first.access_count + 1


def test_shorter_fact_merges_into_longer_one(memory):
    longer = MemoryItem("Python is a scripting language")
    memory.store(longer)
    memory.store(MemoryItem("scripting language"))
    results = memory.search("", 10)
    assert [r.id for r in results] == [longer.id]


def test_longer_fact_not_found_by_search_is_stored_separately(memory):
    memory.store(MemoryItem("Rust is fast"))
    memory.store(MemoryItem("Rust is fast and safe"))
    contents = {r.content for r in memory.search("", 10)}
    assert contents == {"Rust is fast", "Rust is fast and safe"}


def test_distinct_facts_both_kept(memory):
    memory.store(MemoryItem("Go has goroutines"))
    memory.store(MemoryItem("Haskell is lazy"))
    assert len(memory.search("", 10)) == 2


def test_get_by_tag(memory):
    memory.store(MemoryItem("Tokio is an async runtime").with_tags(["rust", "async"]))
    memory.store(MemoryItem("Flask is a web framework").with_tags(["python"]))
    found = memory.get_by_tag("ASYNC")
    assert [f.content for f in found] == ["Tokio is an async runtime"]


def test_persists_across_instances(tmp_path):
    with SemanticMemory(tmp_path) as mem:
        mem.store(MemoryItem("Water boils at 100 degrees"))
    with SemanticMemory(tmp_path) as mem:
        assert [r.content for r in mem.search("boils", 3)] == ["Water boils at 100 degrees"]