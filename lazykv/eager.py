"""
Eager operations: each one consumes its input (or as much of it as it
needs) as soon as it is called and returns a plain value.
"""

import logging
from typing import Any, Dict, List

from lazykv.buffering import reverse
from lazykv.exceptions import ItemNotFound
from lazykv.sequence import (
    MISSING,
    Sequence,
    adapt_callable,
    duplicate,
    to_sequence,
)

logger = logging.getLogger(__name__)


# --------- folds ----------

def reduce(seq, function, start):
    """Fold left to right: acc = function(acc, value, key), from a copy of start"""
    call = adapt_callable(function, 3, fallback=2)
    accumulator = duplicate(start)
    for key, value in to_sequence(seq):
        accumulator = call(accumulator, value, key)
    return accumulator


def reduce_right(seq, function, start):
    """Fold right to left; buffers the whole sequence"""
    return reduce(reverse(seq), function, start)


def group_by(seq, function) -> Dict[Any, List[Any]]:
    """Group values by function(value, key), groups in first-seen order"""
    call = adapt_callable(function, 2)
    groups = {}
    for key, value in to_sequence(seq):
        group = call(value, key)
        if group not in groups:
            groups[group] = []
        groups[group].append(value)
    logger.debug(f"group_by() built {len(groups)} groups")
    return groups


def size(seq) -> int:
    """Number of pairs"""
    count = 0
    for _ in to_sequence(seq):
        count += 1
    return count


# --------- lookups ----------

def get(seq, key):
    """Value of the first pair with the given key, or ItemNotFound"""
    for item_key, value in to_sequence(seq):
        if item_key == key:
            return value
    raise ItemNotFound(f"No item with key {key!r}")


def get_or_default(seq, key, default=None):
    """Like get(), returning default instead of raising"""
    try:
        return get(seq, key)
    except ItemNotFound:
        return default


def get_nth(seq, position: int):
    """Value at the given position (0-based), or ItemNotFound"""
    if position >= 0:
        for index, (_, value) in enumerate(to_sequence(seq)):
            if index == position:
                return value
    raise ItemNotFound(f"No item at position {position}")


def first(seq):
    return get_nth(seq, 0)


def second(seq):
    return get_nth(seq, 1)


def last(seq):
    """Value of the last pair; walks the whole sequence in reverse"""
    try:
        return first(reverse(seq))
    except ItemNotFound:
        raise ItemNotFound("Cannot take the last item of an empty sequence") from None


def find(seq, predicate, default=None):
    """First value for which predicate(value, key) holds, else default"""
    call = adapt_callable(predicate, 2)
    for key, value in to_sequence(seq):
        if call(value, key):
            return value
    return default


# --------- predicates ----------

def every(seq, predicate) -> bool:
    call = adapt_callable(predicate, 2)
    for key, value in to_sequence(seq):
        if not call(value, key):
            return False
    return True


def some(seq, predicate) -> bool:
    call = adapt_callable(predicate, 2)
    for key, value in to_sequence(seq):
        if call(value, key):
            return True
    return False


def contains(seq, needle) -> bool:
    """Whether any value equals needle"""
    for _, value in to_sequence(seq):
        if value == needle:
            return True
    return False


def is_empty(seq) -> bool:
    return next(iter(to_sequence(seq)), MISSING) is MISSING


def is_not_empty(seq) -> bool:
    return not is_empty(seq)


# --------- materialization ----------

def to_list(seq) -> List[Any]:
    """The values in order, keys dropped; duplicates are kept"""
    return [value for _, value in to_sequence(seq)]


def realize(seq) -> Sequence:
    """
    Pull everything now and return a reusable sequence over the result.

    Duplicate keys collapse, last write wins. Nested values are left as
    they are.
    """
    realized = {}
    for key, value in to_sequence(seq):
        realized[key] = value
    return to_sequence(realized)


