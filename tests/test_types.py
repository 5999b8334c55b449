import json
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from memorybrain.types import Emotion, MemoryItem, MemoryQuery, MemoryType


def test_memory_item_creation():
    item = MemoryItem("test content", "context")
    assert item.content == "test content"
    assert item.context == "context"
    assert item.access_count == 1
    assert item.strength == 1.0
    assert item.memory_type is MemoryType.WORKING
    assert item.emotion is Emotion.NEUTRAL
    assert item.last_accessed == item.created_at


def test_memory_item_access():
    item = MemoryItem("test")
    initial = item.strength
    item.access()
    assert item.access_count == 2
    assert item.strength >= initial
    assert item.strength <= 1.0


def test_access_strengthens_weak_memory():
    item = MemoryItem("test")
    item.strength = 0.5
    item.access()
    assert item.strength == pytest.approx(0.6)


def test_memory_item_decay():
    item = MemoryItem("test")
    item.decay(0.5)
    assert item.strength == 0.5


def test_memory_forgotten():
    item = MemoryItem("test")
    item.decay(0.05)
    assert item.is_forgotten()


def test_fresh_memory_not_forgotten():
    assert MemoryItem("test").is_forgotten() is False


def test_emotional_memory_stronger():
    neutral = MemoryItem("neutral")
    neutral.strength = 0.5
    emotional = MemoryItem("emotional")
    emotional.strength = 0.5
    emotional = emotional.with_emotion(Emotion.POSITIVE)
    assert emotional.strength > neutral.strength
    assert emotional.strength == pytest.approx(0.75)
    assert emotional.emotion is Emotion.POSITIVE


def test_neutral_emotion_no_boost():
    item = MemoryItem("x")
    item.strength = 0.5
    item.with_emotion(Emotion.NEUTRAL)
    assert item.strength == 0.5


def test_emotion_boost_capped():
    item = MemoryItem("x").with_emotion(Emotion.SURPRISE)
    assert item.strength == 1.0


def test_memory_with_tags():
    item = MemoryItem("test").with_tags(["rust", "programming"])
    assert len(item.tags) == 2
    assert "rust" in item.tags


def test_with_type():
    item = MemoryItem("x").with_type(MemoryType.PROCEDURAL)
    assert item.memory_type is MemoryType.PROCEDURAL


def test_memory_association():
    item1 = MemoryItem("item 1")
    item2 = MemoryItem("item 2")
    item1.associate(item2.id)
    assert len(item1.associations) == 1
    assert item2.id in item1.associations
    item1.associate(item2.id)
    assert len(item1.associations) == 1


def test_relevance_score():
    item = MemoryItem("test")
    assert item.relevance_score() > 0.0


def test_relevance_decreases_with_age():
    fresh = MemoryItem("fresh")
    old = MemoryItem("old")
    old.last_accessed = datetime.now(timezone.utc) - timedelta(days=14)
    assert old.relevance_score() < fresh.relevance_score()


def test_round_trip_dict():
    item = MemoryItem("hello", "ctx").with_tags(["a", "b"]).with_type(MemoryType.SEMANTIC)
    item.embedding = [0.1, 0.2, 0.3]
    item.associate(uuid.uuid4())
    data = json.loads(json.dumps(item.to_dict()))
    restored = MemoryItem.from_dict(data)
    assert restored == item


def test_to_dict_uses_variant_names():
    data = MemoryItem("x").with_type(MemoryType.EPISODIC).to_dict()
    assert data["memory_type"] == "Episodic"
    assert data["emotion"] == "Neutral"
    assert data["created_at"].endswith("Z")


def test_from_dict_accepts_nanosecond_timestamps():
    data = MemoryItem("x").to_dict()
    data["created_at"] = "2024-03-05T10:20:30.123456789Z"
    data["last_accessed"] = "2024-03-05T10:20:30Z"
    item = MemoryItem.from_dict(data)
    assert item.created_at == datetime(2024, 3, 5, 10, 20, 30, 123456, tzinfo=timezone.utc)
    assert item.last_accessed == datetime(2024, 3, 5, 10, 20, 30, tzinfo=timezone.utc)


def test_from_dict_optional_fields_may_be_absent():
    data = MemoryItem("x").to_dict()
    del data["context"]
    del data["embedding"]
    item = MemoryItem.from_dict(data)
    assert item.context is None
    assert item.embedding is None


def test_from_dict_missing_required_field():
    with pytest.raises(ValueError):
        MemoryItem.from_dict({"content": "only content", "tags": []})


def test_from_dict_unknown_type():
    data = MemoryItem("x").to_dict()
    data["memory_type"] = "Dreaming"
    with pytest.raises(ValueError):
        MemoryItem.from_dict(data)


def test_memory_query_defaults():
    query = MemoryQuery("rust")
    assert query.text == "rust"
    assert query.memory_types == [
        MemoryType.EPISODIC,
        MemoryType.SEMANTIC,
        MemoryType.PROCEDURAL,
    ]
    assert query.min_strength == 0.1
    assert query.limit == 10
    assert query.tags == []