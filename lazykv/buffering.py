"""
Combinators that hold a buffer of pairs to produce their output.

partition, partition_by and drop_last keep a bounded buffer and stay lazy.
reverse, shuffle and sort pull the whole upstream on the first request, so
they never finish on an infinite sequence.
"""

import functools
import itertools
import logging
import random
from collections import deque

from lazykv.config import get_settings
from lazykv.models import CountParams, PartitionParams
from lazykv.sequence import MISSING, adapt_callable, combinator

logger = logging.getLogger(__name__)


def partition(seq, size, step=None, padding=()):
    """
    Sliding windows of `size` pairs, starting every `step` pairs.

    step < size gives overlapping windows, step > size skips pairs between
    windows. Each window is a dict built from its pairs. A trailing partial
    window is completed from `padding` when possible, otherwise yielded
    short.
    """
    params = PartitionParams(size=size, step=step)
    return _partition(seq, padding, params.size, params.step)


@combinator(sources=2)
def _partition(seq, padding, size, step):
    buffer = []
    to_skip = 0
    index = 0

    for key, value in seq:
        if len(buffer) == size:
            yield index, dict(buffer)
            index += 1
            buffer = buffer[step:]
            to_skip = step - size

        if to_skip > 0:
            to_skip -= 1
        else:
            buffer.append((key, value))

    if buffer:
        buffer.extend(itertools.islice(padding, size - len(buffer)))
        yield index, dict(buffer)


@combinator()
def partition_by(seq, function):
    """Start a new window every time function(value, key) changes."""
    call = adapt_callable(function, 2)
    buffer = []
    marker = MISSING
    index = 0

    for key, value in seq:
        result = call(value, key)
        if buffer and result != marker:
            yield index, dict(buffer)
            index += 1
            buffer = []
        marker = result
        buffer.append((key, value))

    if buffer:
        yield index, dict(buffer)


def drop_last(seq, count=1):
    """Everything but the last `count` pairs, delayed by a FIFO of that size."""
    params = CountParams(count=count)
    return _drop_last(seq, params.count)


@combinator()
def _drop_last(seq, count):
    buffer = deque()
    for pair in seq:
        buffer.append(pair)
        if len(buffer) > count:
            yield buffer.popleft()


@combinator()
def reverse(seq):
    """The pairs in reverse order, each keeping its original key."""
    pairs = list(seq)
    logger.debug(f"reverse() buffered {len(pairs)} pairs")
    yield from reversed(pairs)


@combinator()
def shuffle(seq):
    """The pairs in random order; settings.shuffle_seed makes it repeatable."""
    pairs = list(seq)
    logger.debug(f"shuffle() buffered {len(pairs)} pairs")
    random.Random(get_settings().shuffle_seed).shuffle(pairs)
    yield from pairs


@combinator()
def sort(seq, comparator=None):
    """
    Stable sort of the pairs, keys travel with their values.

    comparator(value1, value2, key1, key2) returns true when the first item
    belongs after the second. Without one, values are compared directly.
    """
    pairs = list(seq)
    logger.debug(f"sort() buffered {len(pairs)} pairs")

    if comparator is None:
        pairs.sort(key=lambda pair: pair[1])
    else:
        call = adapt_callable(comparator, 4, fallback=2)

        def compare(a, b):
            if call(a[1], b[1], a[0], b[0]):
                return 1
            if call(b[1], a[1], b[0], a[0]):
                return -1
            return 0

        pairs.sort(key=functools.cmp_to_key(compare))

    yield from pairs
