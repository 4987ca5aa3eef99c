"""
Unit tests for pool building and session prioritization.
"""

import random

import pytest

from korean_drill.core.card import Card, Quality
from korean_drill.core.errors import ContentValidationError
from korean_drill.core.pool import (
    DictContentSource,
    PoolItem,
    build_pool,
    make_item_id,
    prioritize_cards,
    shuffle,
    validate_content,
)
from korean_drill.core.scheduler import SRSEngine


class TestBuildPool:
    def test_all_categories_in_source_order(self, sample_content):
        pool = build_pool(DictContentSource(sample_content), "vocab")
        assert [item.id for item in pool] == [
            "vocab:greetings:0",
            "vocab:greetings:1",
            "vocab:greetings:2",
            "vocab:food:0",
            "vocab:food:1",
        ]
        assert pool[3].entry == {"korean": "밥", "english": "rice"}
        assert pool[3].category == "food"
        assert pool[3].type == "vocab"

    def test_single_category(self, sample_content):
        pool = build_pool(DictContentSource(sample_content), "vocab", "food")
        assert [item.id for item in pool] == ["vocab:food:0", "vocab:food:1"]

    def test_unknown_category_gives_empty_pool(self, sample_content):
        assert build_pool(DictContentSource(sample_content), "vocab", "sports") == []

    def test_missing_type_gives_empty_pool(self):
        assert build_pool(DictContentSource({}), "grammar") == []

    def test_ids_are_stable(self, sample_content):
        source = DictContentSource(sample_content)
        first = [item.id for item in build_pool(source, "grammar")]
        second = [item.id for item in build_pool(source, "grammar")]
        assert first == second == ["grammar:particles:0", "grammar:particles:1"]

    def test_make_item_id(self):
        assert make_item_id("vocab", "food", 3) == "vocab:food:3"


class TestValidation:
    def test_unknown_type(self):
        with pytest.raises(ContentValidationError, match="Unknown content type"):
            validate_content("idioms", {"x": []})

    def test_category_must_be_list(self):
        with pytest.raises(ContentValidationError, match="Bad category: greetings"):
            validate_content("vocab", {"greetings": "hello"})

    def test_entry_missing_field(self):
        with pytest.raises(ContentValidationError, match="english"):
            validate_content("vocab", {"greetings": [{"korean": "안녕"}]})

    def test_invalid_entry_aborts_pool(self):
        source = DictContentSource({"grammar": {"bad": [{"pattern": "-고"}]}})
        with pytest.raises(ContentValidationError):
            build_pool(source, "grammar")

    def test_valid_content_passes(self, sample_content):
        for content_type, data in sample_content.items():
            validate_content(content_type, data)


def _items(n):
    return [PoolItem(id=f"vocab:c:{i}", type="vocab", category="c", entry={}) for i in range(n)]


class TestShuffle:
    def test_shuffle_is_permutation(self):
        items = list(range(20))
        result = shuffle(items, random.Random(7))
        assert sorted(result) == items
        assert items == list(range(20))

    def test_shuffle_is_seedable(self):
        assert shuffle(range(10), random.Random(1)) == shuffle(range(10), random.Random(1))

    def test_shuffle_empty(self):
        assert shuffle([]) == []


class TestPrioritize:
    def test_due_items_come_first(self, memory_store, clock):
        engine = SRSEngine(memory_store, clock)
        pool = _items(6)
        # Items 0-3 reviewed and scheduled ahead; 4 and 5 stay new
        for item in pool[:4]:
            engine.record_review(item.id, Quality.EASY)
        engine.cards["vocab:c:1"].next_review = clock.now() - 1

        selected = prioritize_cards(pool, 3, engine, random.Random(3))
        assert len(selected) == 3
        assert {item.id for item in selected} == {"vocab:c:1", "vocab:c:4", "vocab:c:5"}

    def test_fills_with_not_yet_due_items(self, memory_store, clock):
        engine = SRSEngine(memory_store, clock)
        pool = _items(4)
        for item in pool[:3]:
            engine.record_review(item.id, Quality.GOOD)

        selected = prioritize_cards(pool, 4, engine, random.Random(0))
        assert selected[0].id == "vocab:c:3"
        assert {item.id for item in selected} == {item.id for item in pool}

    def test_limit_caps_due_items(self, memory_store, clock):
        engine = SRSEngine(memory_store, clock)
        selected = prioritize_cards(_items(10), 4, engine, random.Random(0))
        assert len(selected) == 4
        assert len({item.id for item in selected}) == 4

    def test_small_pool_returns_everything(self, memory_store, clock):
        engine = SRSEngine(memory_store, clock)
        assert len(prioritize_cards(_items(2), 20, engine)) == 2

    def test_ten_new_items_limit_five(self, memory_store, clock):
        engine = SRSEngine(memory_store, clock)
        pool = _items(10)

        stats = engine.get_stats()
        assert (stats.total, stats.due, stats.accuracy) == (0, 0, 0.0)

        selected = prioritize_cards(pool, 5, engine)
        assert len(selected) == 5
        assert len({item.id for item in selected}) == 5
        assert all(item in pool for item in selected)

    def test_zero_limit(self, memory_store, clock):
        assert prioritize_cards(_items(3), 0, SRSEngine(memory_store, clock)) == []

    def test_prioritizing_does_not_create_cards(self, memory_store, clock):
        engine = SRSEngine(memory_store, clock)
        prioritize_cards(_items(5), 3, engine)
        assert engine.cards == {}

    def test_existing_card_state_is_respected(self, memory_store, clock):
        engine = SRSEngine(memory_store, clock)
        engine.cards["vocab:c:0"] = Card(card_id="vocab:c:0", next_review=clock.now() + 10_000)
        selected = prioritize_cards(_items(2), 1, engine)
        assert [item.id for item in selected] == ["vocab:c:1"]
