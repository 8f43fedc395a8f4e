import pytest

from lazykv import combinators
from lazykv import utils
from lazykv.utils import TRUNCATION_MARKER


@pytest.fixture(autouse=True)
def clean_metrics():
    utils.clear_performance_metrics()
    yield
    utils.clear_performance_metrics()


class TestPerformance:
    """Test measure_performance and the metric summary"""

    def test_measure_returns_result(self):
        info = utils.measure_performance("sum", sum, [1, 2, 3])
        assert info["success"] is True
        assert info["result"] == 6
        assert info["execution_time_ms"] >= 0
        assert info["memory_usage_mb"] >= 0

    def test_result_size(self):
        info = utils.measure_performance("list", list, range(4))
        assert info["result_size"] == 4

    def test_summary(self):
        utils.measure_performance("a", sum, [1])
        utils.measure_performance("b", sum, [2])
        summary = utils.get_performance_summary()
        assert summary["total_operations"] == 2
        assert summary["avg_time_ms"] == pytest.approx(summary["total_time_ms"] / 2)

    def test_failures_propagate_and_are_recorded(self):
        def broken():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            utils.measure_performance("broken", broken)
        assert utils.get_performance_summary()["total_operations"] == 1

    def test_clear(self):
        utils.measure_performance("a", sum, [1])
        utils.clear_performance_metrics()
        assert utils.get_performance_summary()["total_operations"] == 0


class TestApplyOperations:
    """Test building pipelines from operation descriptions"""

    def test_pipeline_from_descriptions(self):
        collection = utils.apply_operations(range(20), [
            {"type": "filter", "args": [lambda x: x % 3 == 0]},
            {"type": "map", "args": [lambda x: x * 10]},
            {"type": "skip", "args": [1]},
            {"type": "take", "args": [3]},
        ])
        assert utils.validate_lazy_evaluation(collection)
        assert collection.to_list() == [30, 60, 90]

    def test_keyword_arguments(self):
        collection = utils.apply_operations({"a": 1}, [
            {"type": "append", "args": [2], "kwargs": {"key": "b"}},
        ])
        assert collection.to_array() == {"a": 1, "b": 2}

    def test_unknown_operation(self):
        with pytest.raises(ValueError):
            utils.apply_operations([1], [{"type": "explode"}])

    def test_terminal_operations_are_not_chainable(self):
        with pytest.raises(ValueError):
            utils.apply_operations([1], [{"type": "sum"}])


class TestDump:
    """Test dump() and print_dump()"""

    def test_scalar(self):
        assert utils.dump(5) == 5

    def test_nested(self):
        nested = {"a": [1, {"b": 2}]}
        assert utils.dump(nested) == {"a": {0: 1, 1: {"b": 2}}}

    def test_infinite_sequence_is_truncated(self):
        result = utils.dump(combinators.range(), max_items=3)
        assert result == {0: 0, 1: 1, 2: 2, TRUNCATION_MARKER: TRUNCATION_MARKER}

    def test_depth_limit(self):
        result = utils.dump({"a": [1, [2]]}, max_depth=1)
        assert result == {"a": {0: 1, 1: TRUNCATION_MARKER}}

    def test_print_dump_passes_through(self, capsys):
        seq = combinators.map([1, 2], lambda v: v + 1)
        assert utils.print_dump(seq) is seq
        assert capsys.readouterr().out.strip() == "{0: 2, 1: 3}"
