"""
Primitive lazy combinators.

Every function here takes one (or two) sequences plus parameters and
returns a new Sequence. No upstream item is pulled until the result is
iterated, and each output pair is produced on demand.

Callbacks are called as f(value, key); a callback that only declares the
value argument works as well.
"""

import itertools
import logging

from lazykv.config import get_settings
from lazykv.exceptions import InvalidInputKind, NoMoreItems
from lazykv.models import (
    CountParams,
    FlattenParams,
    RangeParams,
    RepeatParams,
    SliceParams,
    TakeNthParams,
)
from lazykv.sequence import (
    MISSING,
    AutoIndex,
    adapt_callable,
    combinator,
    duplicate,
    is_collection,
    to_sequence,
)

logger = logging.getLogger(__name__)


# --------- per-item transforms ----------

@combinator()
def map(seq, function):
    """Yield (key, function(value, key)) for every pair."""
    call = adapt_callable(function, 2)
    for key, value in seq:
        yield key, call(value, key)


@combinator()
def filter(seq, predicate):
    """Yield the pairs for which predicate(value, key) is truthy."""
    call = adapt_callable(predicate, 2)
    for key, value in seq:
        if call(value, key):
            yield key, value


def reject(seq, predicate):
    """Yield the pairs for which predicate(value, key) is falsy."""
    call = adapt_callable(predicate, 2)
    return filter(seq, lambda value, key: not call(value, key))


@combinator()
def each(seq, function):
    """Call function(value, key) as each pair passes through, unchanged."""
    call = adapt_callable(function, 2)
    for key, value in seq:
        call(value, key)
        yield key, value


@combinator(sources=2)
def replace(seq, replacements):
    """
    Swap values that appear as keys of `replacements` for the mapped value.

    The replacements are read once per pass, before the first pair; the
    first pair carrying a key wins.
    """
    hashed = {}
    unhashable = []
    for candidate, replacement in replacements:
        try:
            hashed.setdefault(candidate, replacement)
        except TypeError:
            unhashable.append((candidate, replacement))

    for key, value in seq:
        yield key, _replacement_for(hashed, unhashable, value)


def _replacement_for(hashed, unhashable, value):
    try:
        if value in hashed:
            return hashed[value]
    except TypeError:
        pass
    for candidate, replacement in unhashable:
        if candidate == value:
            return replacement
    return value


@combinator()
def values(seq):
    """Drop the keys: yield the values keyed 0, 1, 2, ..."""
    for index, (_, value) in enumerate(seq):
        yield index, value


@combinator()
def keys(seq):
    """Yield the keys as values, keyed 0, 1, 2, ..."""
    for index, (key, _) in enumerate(seq):
        yield index, key


@combinator()
def index_by(seq, function):
    """Re-key every pair with function(value, key)."""
    call = adapt_callable(function, 2)
    for key, value in seq:
        yield call(value, key), value


@combinator()
def pluck(seq, field):
    """Replace every value with value[field]."""
    for key, value in seq:
        yield key, value[field]


@combinator()
def reductions(seq, function, start):
    """Yield a copy of `start`, then the accumulator after every step."""
    call = adapt_callable(function, 3, fallback=2)
    accumulator = duplicate(start)
    index = AutoIndex()
    yield index.next_key(), accumulator
    for key, value in seq:
        accumulator = call(accumulator, value, key)
        yield index.next_key(), accumulator


# --------- joining ----------

@combinator(sources=2)
def concat(first, second):
    """Yield every pair of `first`, then every pair of `second`, keys as-is."""
    yield from first
    yield from second


@combinator(sources=2)
def interleave(first, second):
    """Alternate pairs from both sequences until both are exhausted."""
    iterators = [iter(first), iter(second)]
    while iterators:
        for iterator in list(iterators):
            pair = next(iterator, MISSING)
            if pair is MISSING:
                iterators.remove(iterator)
            else:
                yield pair


@combinator()
def interpose(seq, separator):
    """Put `separator` (with a generated key) between consecutive pairs."""
    index = AutoIndex()
    started = False
    for key, value in seq:
        if started:
            yield index.next_key(), separator
        started = True
        yield index.observe(key), value


@combinator()
def prepend(seq, value, key=MISSING):
    """Yield (key, value) before the sequence; a missing key is generated."""
    index = AutoIndex()
    if key is MISSING:
        yield index.next_key(), value
    else:
        yield index.observe(key), value
    yield from seq


@combinator()
def append(seq, value, key=MISSING):
    """Yield (key, value) after the sequence; a missing key is generated."""
    index = AutoIndex()
    for pair_key, pair_value in seq:
        yield index.observe(pair_key), pair_value
    if key is MISSING:
        yield index.next_key(), value
    else:
        yield key, value


def flatten(seq, depth=-1):
    """
    Inline nested collections up to `depth` levels (-1 for all levels).

    Inlined pairs keep their own keys, so flattening without re-keying can
    produce duplicate keys.
    """
    params = FlattenParams(depth=depth)
    return _flatten(seq, params.depth)


@combinator()
def _flatten(seq, depth):
    yield from _flatten_pairs(seq, depth)


def _flatten_pairs(seq, depth):
    for key, value in seq:
        if depth != 0 and is_collection(value):
            yield from _flatten_pairs(to_sequence(value), depth - 1 if depth > 0 else depth)
        else:
            yield key, value


# --------- windows over positions ----------

def slice(seq, start=0, stop=-1):
    """
    Yield the pairs at positions start <= index < stop (stop=-1: no end).

    Pairs before `start` are pulled and discarded; nothing past `stop` is
    pulled.
    """
    params = SliceParams(start=start, stop=stop)
    return _slice(seq, params.start, None if params.unbounded else params.stop)


@combinator()
def _slice(seq, start, stop):
    if stop is not None and stop <= start:
        return
    for index, (key, value) in enumerate(seq):
        if index >= start:
            yield key, value
            if stop is not None and index + 1 >= stop:
                return


def take(seq, count):
    """The first `count` pairs."""
    params = CountParams(count=count)
    return _slice(seq, 0, params.count)


def drop(seq, count):
    """Everything after the first `count` pairs."""
    params = CountParams(count=count)
    return _slice(seq, params.count, None)


@combinator()
def take_while(seq, predicate):
    """Yield pairs until predicate(value, key) first fails, then stop for good."""
    call = adapt_callable(predicate, 2)
    for key, value in seq:
        if not call(value, key):
            return
        yield key, value


@combinator()
def drop_while(seq, predicate):
    """Skip pairs while predicate(value, key) holds, then yield the rest."""
    call = adapt_callable(predicate, 2)
    dropping = True
    for key, value in seq:
        if dropping and call(value, key):
            continue
        dropping = False
        yield key, value


def take_nth(seq, step):
    """Yield every `step`-th pair, starting with the first."""
    params = TakeNthParams(step=step)
    return _take_nth(seq, params.step)


@combinator()
def _take_nth(seq, step):
    for index, (key, value) in enumerate(seq):
        if index % step == 0:
            yield key, value


@combinator()
def distinct(seq):
    """
    Yield the first pair carrying each distinct value (compared with ==).

    Every value seen so far is remembered.
    """
    seen = set()
    seen_unhashable = []
    for key, value in seq:
        try:
            if value in seen:
                continue
            seen.add(value)
        except TypeError:
            if value in seen_unhashable:
                continue
            seen_unhashable.append(value)
        yield key, value


# --------- infinite producers ----------

def cycle(seq):
    """
    Repeat the sequence forever.

    A one-shot input can only be traversed once, so the result stops after
    the first pass (or is rejected when settings.strict_cycle is on). An
    empty input gives an empty result.
    """
    seq = to_sequence(seq)
    if not seq.reusable:
        if get_settings().strict_cycle:
            raise InvalidInputKind(seq, "cycle() needs a reusable sequence")
        logger.warning("cycle() over a one-shot sequence stops after a single pass")
    return _cycle(seq)


@combinator()
def _cycle(seq):
    while True:
        produced = False
        for key, value in seq:
            produced = True
            yield key, value
        if not produced:
            return


def repeat(value, times=-1):
    """Yield `value` `times` times (forever when times is negative)."""
    params = RepeatParams(times=times)
    return _repeat(value, None if params.infinite else params.times)


@combinator(sources=0)
def _repeat(value, times):
    if times is None:
        yield from enumerate(itertools.repeat(value))
    else:
        yield from enumerate(itertools.repeat(value, times))


@combinator(sources=0)
def iterate(seed, function):
    """
    Yield seed, function(seed), function(function(seed)), ...

    Infinite unless `function` raises NoMoreItems, which ends the sequence.
    """
    value = seed
    for key in itertools.count():
        yield key, value
        try:
            value = function(value)
        except NoMoreItems:
            logger.debug(f"iterate() finished after {key + 1} items")
            return


def range(start=0, end=None, step=1):
    """
    Numbers from `start` by `step` up to and including `end`.

    Infinite when end is None. Built on iterate(): the step function raises
    NoMoreItems once the next number would pass `end`.
    """
    params = RangeParams(start=start, end=end, step=step)
    if params.crosses_end(params.start):
        return to_sequence(())

    def advance(value):
        following = value + params.step
        if params.crosses_end(following):
            raise NoMoreItems()
        return following

    return iterate(params.start, advance)
