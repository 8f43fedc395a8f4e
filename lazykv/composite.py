"""
Combinators built from the primitive ones.

split_at and split_with hand out two sequences that share ONE traversal of
their input. Consume the first share before the second; any other order
gives whatever the shared cursor happens to hold.
"""

from lazykv import combinators
from lazykv.eager import group_by
from lazykv.models import CountParams
from lazykv.sequence import MISSING, Sequence, adapt_callable, combinator, to_sequence


def mapcat(seq, function):
    """map() then flatten one level. Inner keys are kept, not renumbered."""
    return combinators.flatten(combinators.map(seq, function), 1)


@combinator()
def count_by(seq, function):
    """Group by function(value, key) and count each group; groups on first pull"""
    for group, members in group_by(seq, function).items():
        yield group, len(members)


def frequencies(seq):
    """How many times each value occurs"""
    return count_by(seq, lambda value: value)


class _SharedCursor:
    """A single traversal of a sequence, pulled by several consumers."""

    def __init__(self, seq):
        self._seq = seq
        self._iterator = None
        self._pushed_back = MISSING
        self.position = 0
        self.boundary_reached = False

    def pull(self):
        if self._pushed_back is not MISSING:
            pair, self._pushed_back = self._pushed_back, MISSING
            return pair
        if self._iterator is None:
            self._iterator = iter(self._seq)
        pair = next(self._iterator, MISSING)
        if pair is not MISSING:
            self.position += 1
        return pair

    def push_back(self, pair):
        self._pushed_back = pair


def _shares(head, tail) -> Sequence:
    return Sequence.from_pairs((
        (0, Sequence(head, reusable=False)),
        (1, Sequence(tail, reusable=False)),
    ))


def split_at(seq, position):
    """[take(seq, position), drop(seq, position)] over one shared traversal"""
    count = CountParams(count=position).count
    cursor = _SharedCursor(to_sequence(seq))

    def head():
        while cursor.position < count:
            pair = cursor.pull()
            if pair is MISSING:
                return
            yield pair

    def tail():
        while True:
            pair = cursor.pull()
            if pair is MISSING:
                return
            if cursor.position > count:
                yield pair

    return _shares(head, tail)


def split_with(seq, predicate):
    """[take_while(seq, predicate), drop_while(seq, predicate)] over one shared traversal"""
    call = adapt_callable(predicate, 2)
    cursor = _SharedCursor(to_sequence(seq))

    def head():
        while not cursor.boundary_reached:
            pair = cursor.pull()
            if pair is MISSING:
                return
            key, value = pair
            if not call(value, key):
                # the tail share starts with this pair
                cursor.boundary_reached = True
                cursor.push_back(pair)
                return
            yield pair

    def tail():
        while True:
            pair = cursor.pull()
            if pair is MISSING:
                return
            if not cursor.boundary_reached:
                key, value = pair
                if call(value, key):
                    continue
                cursor.boundary_reached = True
            yield pair

    return _shares(head, tail)
