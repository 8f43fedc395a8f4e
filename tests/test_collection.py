import pytest

from lazykv import LazyCollection
from lazykv.exceptions import ItemNotFound


class TestComposability:
    """Test chaining LazyCollection operations"""

    def test_method_chaining(self):
        result = (
            LazyCollection(range(10))
            .map(lambda x: x * 2)
            .filter(lambda x: x > 5)
            .take(3)
            .to_list()
        )
        assert result == [6, 8, 10], f"Unexpected result: {result}"

    def test_operation_order_matters(self):
        map_then_filter = LazyCollection(range(10)).map(lambda x: x * 2).filter(lambda x: x < 6).to_list()
        filter_then_map = LazyCollection(range(10)).filter(lambda x: x < 6).map(lambda x: x * 2).to_list()
        assert map_then_filter == [0, 2, 4]
        assert filter_then_map == [0, 2, 4, 6, 8, 10]

    def test_chaining_does_not_mutate(self):
        """Every operation returns a new collection"""
        base = LazyCollection([1, 2, 3])
        doubled = base.map(lambda x: x * 2)
        assert base.to_list() == [1, 2, 3]
        assert doubled.to_list() == [2, 4, 6]
        assert len(base._ops) == 0, "Base collection should not gain operations"

    def test_keys_flow_through_chain(self):
        result = (
            LazyCollection({"a": 1, "b": 2, "c": 3})
            .filter(lambda value, key: key != "b")
            .map(lambda value, key: f"{key}={value}")
            .to_array()
        )
        assert result == {"a": "a=1", "c": "c=3"}

    def test_collection_is_a_valid_input(self):
        """Collections can be passed wherever a sequence is expected"""
        evens = LazyCollection(range(4)).filter(lambda x: x % 2 == 0)
        result = LazyCollection([9]).concat(evens).to_list()
        assert result == [9, 0, 2]

    def test_every_chainable_operation(self):
        data = LazyCollection([3, 1, 2, 3])
        assert data.distinct().to_list() == [3, 1, 2]
        assert data.sort().to_list() == [1, 2, 3, 3]
        assert data.reverse().to_list() == [3, 2, 1, 3]
        assert data.drop_last(2).to_list() == [3, 1]
        assert data.interpose(0).to_list() == [3, 0, 1, 0, 2, 0, 3]
        assert data.take_nth(2).to_list() == [3, 2]
        assert data.frequencies().to_array() == {3: 2, 1: 1, 2: 1}
        assert data.partition_by(lambda v: v > 1).size() == 3
        assert data.values().to_array() == {0: 3, 1: 1, 2: 2, 3: 3}
        assert data.keys().to_list() == [0, 1, 2, 3]

    def test_chaining_pulls_nothing(self):
        """Building a chain, grouping ops included, never touches the source"""
        pulled = []
        source = LazyCollection([1, 2, 3]).each(lambda v: pulled.append(v))
        chain = source.count_by(lambda v: v % 2).map(lambda count: count * 10).values()
        assert pulled == [], f"Source pulled at construction: {pulled}"
        assert chain.to_list() == [20, 10]
        assert pulled == [1, 2, 3], f"Source should be pulled once: {pulled}"

    def test_ops_after_frequencies_on_one_shot_source(self, one_shot):
        result = LazyCollection(one_shot([3, 1, 3])).frequencies().values().to_list()
        assert result == [2, 1], f"Unexpected result: {result}"

    def test_chaining_leaves_parent_pipeline_intact(self):
        base = LazyCollection(range(5)).map(lambda x: x + 1)
        chained = base.filter(lambda x: x % 2 == 0)
        assert chained._pipeline is not base._pipeline
        assert base.to_list() == [1, 2, 3, 4, 5]
        assert chained.to_list() == [2, 4]

    def test_unknown_operation(self):
        with pytest.raises(ValueError):
            LazyCollection([1], ops=[("explode", (), {})])


class TestConstructors:
    """Test the generating class methods"""

    def test_range(self):
        assert LazyCollection.range(1, 4).to_list() == [1, 2, 3, 4]

    def test_repeat(self):
        assert LazyCollection.repeat("a", 2).to_list() == ["a", "a"]

    def test_iterate(self):
        powers = LazyCollection.iterate(1, lambda v: v * 3).take(4)
        assert powers.to_list() == [1, 3, 9, 27]

    def test_infinite_sources_stay_lazy(self):
        result = LazyCollection.range().map(lambda x: x * x).filter(lambda x: x % 2 == 1).take(3)
        assert result.to_list() == [1, 9, 25]


class TestReductions:
    """Test operations that force evaluation"""

    def test_sum_and_count(self):
        assert LazyCollection(range(1, 6)).sum() == 15
        assert LazyCollection(range(20)).filter(lambda x: x % 3 == 0).count() == 7

    def test_empty_reductions(self):
        empty = LazyCollection([])
        assert empty.sum() == 0
        assert empty.count() == 0
        assert empty.min(default=None) is None
        with pytest.raises(ValueError):
            empty.max()

    def test_min_max(self):
        data = LazyCollection({"a": 5, "b": -2, "c": 9})
        assert data.min() == -2
        assert data.max() == 9

    def test_reduce(self):
        assert LazyCollection([1, 2, 3]).reduce(lambda acc, v: acc * v, 1) == 6
        assert LazyCollection(["a", "b"]).reduce_right(lambda acc, v: acc + v, "") == "ba"

    def test_group_by(self):
        groups = LazyCollection(["apple", "avocado", "kiwi"]).group_by(lambda v: v[0])
        assert groups == {"a": ["apple", "avocado"], "k": ["kiwi"]}

    def test_positional_access(self):
        data = LazyCollection(["x", "y", "z"])
        assert data.first() == "x"
        assert data.second() == "y"
        assert data.last() == "z"
        assert data.get_nth(2) == "z"
        assert data.get(1) == "y"

    def test_defaults(self):
        empty = LazyCollection([])
        assert empty.first(default="none") == "none"
        assert empty.last(default=None) is None
        assert empty.get_or_default("missing", 0) == 0
        with pytest.raises(ItemNotFound):
            empty.first()

    def test_predicates(self):
        data = LazyCollection([2, 4, 5])
        assert data.some(lambda v: v % 2 == 1)
        assert not data.every(lambda v: v % 2 == 0)
        assert data.contains(4)
        assert data.find(lambda v: v > 3) == 4
        assert LazyCollection([]).is_empty()


class TestPagination:
    """Test paging and chunking"""

    def test_page(self):
        data = LazyCollection(range(100))
        assert data.page(1, 10).to_list() == list(range(0, 10))
        assert data.page(3, 10).to_list() == list(range(20, 30))

    def test_page_past_end(self):
        assert LazyCollection(range(5)).page(3, 10).to_list() == []

    def test_invalid_page(self):
        with pytest.raises(ValueError):
            LazyCollection(range(5)).page(0, 10)

    def test_paginate(self):
        pages = list(LazyCollection(range(7)).paginate(3))
        assert pages == [[0, 1, 2], [3, 4, 5], [6]], f"Unexpected pages: {pages}"

    def test_paginate_filtered(self):
        pages = list(LazyCollection(range(20)).filter(lambda x: x % 2 == 0).paginate(4))
        assert pages[0] == [0, 2, 4, 6]
        assert pages[-1] == [16, 18]

    def test_batch_and_chunk(self):
        batches = LazyCollection(range(8)).batch(4).to_list()
        assert [list(b.values()) for b in batches] == [[0, 1, 2, 3], [4, 5, 6, 7]]
        assert LazyCollection(range(5)).chunk(2).size() == 3

    def test_pages_of_infinite_collection(self):
        pages = LazyCollection.range().paginate(2)
        assert next(pages) == [0, 1]
        assert next(pages) == [2, 3]


class TestCaching:
    """Test cache() and realize()"""

    def test_cache_runs_pipeline_once(self):
        calls = []
        cached = LazyCollection(range(5)).map(lambda x: calls.append(x) or x * 2).cache()
        assert cached.to_list() == [0, 2, 4, 6, 8]
        assert cached.to_list() == [0, 2, 4, 6, 8]
        assert len(calls) == 5, f"Pipeline ran more than once: {calls}"

    def test_cache_extends_on_demand(self):
        calls = []
        cached = LazyCollection(range(10)).each(lambda x: calls.append(x)).cache()
        assert cached.first() == 0
        assert calls == [0], "Only the first pair should have been produced"
        assert cached.get_nth(2) == 2
        assert calls == [0, 1, 2]

    def test_cache_makes_one_shot_reusable(self, one_shot):
        cached = LazyCollection(one_shot([1, 2, 3])).cache()
        assert cached.reusable
        assert cached.sum() == 6
        assert cached.sum() == 6

    def test_uncached_one_shot_is_consumed(self, one_shot):
        collection = LazyCollection(one_shot([1, 2, 3]))
        assert not collection.reusable
        assert collection.to_list() == [1, 2, 3]
        assert collection.to_list() == [], "Second pass over a one-shot source is empty"

    def test_cache_can_be_disabled(self):
        cached = LazyCollection([1]).cache()
        assert not cached.cache(False)._cache_enabled

    def test_realize(self):
        calls = []
        realized = LazyCollection([1, 2]).map(lambda x: calls.append(x) or x).realize()
        assert calls == [1, 2], "realize() evaluates immediately"
        assert realized.map(lambda x: x + 1).to_list() == [2, 3]
        assert calls == [1, 2]
