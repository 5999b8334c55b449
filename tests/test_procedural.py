import pytest

from memorybrain.procedural import Pattern, ProceduralMemory
from memorybrain.types import MemoryItem, MemoryType


@pytest.fixture
def memory(tmp_path):
    with ProceduralMemory(tmp_path / "brain") as mem:
        yield mem


def test_new_pattern_defaults():
    pattern = Pattern("compile error", "read the message")
    assert pattern.success_count == 1
    assert pattern.failure_count == 0
    assert pattern.tags == []
    assert pattern.confidence() == 1.0


def test_confidence_without_uses_is_half():
    assert Pattern("t", "a", success_count=0, failure_count=0).confidence() == 0.5


def test_success_and_failure_adjust_confidence():
    pattern = Pattern("t", "a")
    pattern.failure()
    assert pattern.confidence() == 0.5
    pattern.success()
    assert pattern.success_count == 2
    assert pattern.failure_count == 1


def test_store_marks_item_procedural(memory):
    memory.store(MemoryItem("run cargo fmt before commit"))
    [found] = memory.search("cargo fmt", 5)
    assert found.memory_type is MemoryType.PROCEDURAL


def test_learn_and_find_pattern(memory):
    pattern = Pattern("borrow checker error", "clone the value", tags=["rust"])
    memory.learn_pattern(pattern)
    assert memory.find_patterns("borrow checker") == [pattern]
    [stored] = memory.search("borrow", 5)
    assert stored.tags == ["rust"]
    assert stored.memory_type is MemoryType.PROCEDURAL


def test_find_patterns_ignores_non_pattern_items(memory):
    memory.store(MemoryItem("borrow checker notes, not json"))
    memory.learn_pattern(Pattern("borrow checker", "use references"))
    found = memory.find_patterns("borrow checker")
    assert [p.action for p in found] == ["use references"]


def test_feedback_success_increments(memory):
    memory.learn_pattern(Pattern("flaky test", "rerun"))
    memory.feedback("flaky test", True)
    [pattern] = memory.find_patterns("flaky test")
    assert pattern.success_count == 2
    assert pattern.failure_count == 0
    [item] = memory.search("flaky test", 1)
    assert item.access_count == 2


def test_repeated_failure_drops_below_confidence_threshold(memory):
    memory.learn_pattern(Pattern("slow build", "add more RAM"))
    for _ in range(3):
        memory.feedback("slow build", False)
    assert memory.find_patterns("slow build") == []
    [item] = memory.search("slow build", 1)
    assert '"failure_count":3' in item.content


def test_feedback_on_unknown_trigger_changes_nothing(memory):
    memory.learn_pattern(Pattern("deadlock", "check lock order"))
    memory.feedback("segfault", True)
    [pattern] = memory.find_patterns("deadlock")
    assert pattern.success_count == 1


def test_unicode_trigger_is_searchable(memory):
    memory.learn_pattern(Pattern("반말 요청", "반말로 답하기"))
    [pattern] = memory.find_patterns("반말 요청")
    assert pattern.action == "반말로 답하기"