"""
Utility functions for lazykv

Helpers for inspecting sequences while debugging and for measuring the
time and memory a pipeline needs.
"""

import time
import gc
import logging
import tracemalloc
from typing import Any, Dict, List, Optional

from lazykv.collection import CHAINABLE_OPERATIONS, LazyCollection
from lazykv.models import SourceKind
from lazykv.sequence import Sequence, classify, to_sequence

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = ">>>"


def _empty_metrics() -> Dict[str, Any]:
    return {
        "operations": [],
        "total_time_ms": 0.0,
        "total_memory_mb": 0.0,
        "operation_count": 0
    }


# Global performance tracking
_performance_metrics = _empty_metrics()


def measure_performance(operation_name: str, func, *args, **kwargs) -> Dict[str, Any]:
    """Measure time and peak traced memory of a function call"""
    tracemalloc.start()
    gc.collect()

    start_time = time.perf_counter()
    info = {"operation": operation_name, "timestamp": time.time()}

    try:
        result = func(*args, **kwargs)
        info["success"] = True
        info["result_size"] = len(result) if hasattr(result, "__len__") else None
        info["result"] = result
        return info
    except Exception as e:
        info["success"] = False
        info["error"] = str(e)
        raise
    finally:
        info["execution_time_ms"] = (time.perf_counter() - start_time) * 1000
        _, peak = tracemalloc.get_traced_memory()
        info["memory_usage_mb"] = peak / 1024 / 1024
        tracemalloc.stop()
        _record(info)


def _record(info: Dict[str, Any]):
    _performance_metrics["operations"].append(
        {k: v for k, v in info.items() if k != "result"}
    )
    _performance_metrics["total_time_ms"] += info["execution_time_ms"]
    _performance_metrics["total_memory_mb"] += info["memory_usage_mb"]
    _performance_metrics["operation_count"] += 1
    logger.debug(
        f"{info['operation']} took {info['execution_time_ms']:.2f}ms, "
        f"peak {info['memory_usage_mb']:.3f}MB"
    )


def get_performance_summary() -> Dict[str, Any]:
    """Get summary of all performance metrics"""
    count = _performance_metrics["operation_count"]
    if count == 0:
        return {
            "total_operations": 0,
            "total_time_ms": 0.0,
            "total_memory_mb": 0.0,
            "avg_time_ms": 0.0,
            "avg_memory_mb": 0.0
        }

    return {
        "total_operations": count,
        "total_time_ms": _performance_metrics["total_time_ms"],
        "total_memory_mb": _performance_metrics["total_memory_mb"],
        "avg_time_ms": _performance_metrics["total_time_ms"] / count,
        "avg_memory_mb": _performance_metrics["total_memory_mb"] / count
    }


def clear_performance_metrics():
    """Clear all performance metrics"""
    global _performance_metrics
    _performance_metrics = _empty_metrics()


def validate_lazy_evaluation(obj) -> bool:
    """Whether obj is an unevaluated pipeline node rather than realized data"""
    return isinstance(obj, Sequence)


def apply_operations(source, operations: List[Dict[str, Any]]) -> LazyCollection:
    """
    Build a pipeline from a list of operation descriptions.

    Each entry is {"type": <LazyCollection method>, "args": [...],
    "kwargs": {...}}; only lazy (chainable) methods are allowed.
    """
    collection = LazyCollection(source)

    for op in operations:
        op_type = op.get("type")
        if op_type not in CHAINABLE_OPERATIONS:
            raise ValueError(f"Unknown op: {op_type}")

        method = getattr(collection, op_type)
        collection = method(*op.get("args", ()), **op.get("kwargs", {}))

    return collection


def dump(obj, max_items: Optional[int] = None, max_depth: Optional[int] = None):
    """
    Convert a sequence into plain dicts for inspection.

    At most `max_items` pairs are pulled per level (a TRUNCATION_MARKER key
    notes the cut), so infinite sequences are safe to dump. Nested
    collections deeper than `max_depth` are replaced by the marker.
    """
    if classify(obj) is SourceKind.SCALAR:
        return obj
    return _dump_level(to_sequence(obj), max_items, max_depth)


def _dump_level(seq, max_items, max_depth):
    result = {}
    for index, (key, value) in enumerate(seq):
        if max_items is not None and index >= max_items:
            result[TRUNCATION_MARKER] = TRUNCATION_MARKER
            break
        result[key] = _dump_value(value, max_items, max_depth)
    return result


def _dump_value(value, max_items, max_depth):
    if classify(value) is SourceKind.SCALAR:
        return value
    if max_depth is not None and max_depth <= 0:
        return TRUNCATION_MARKER
    next_depth = None if max_depth is None else max_depth - 1
    return _dump_level(to_sequence(value), max_items, next_depth)


def print_dump(obj, max_items: Optional[int] = None, max_depth: Optional[int] = None):
    """Print dump(obj) and return obj unchanged, so it can sit inside a chain"""
    print(dump(obj, max_items, max_depth))
    return obj
