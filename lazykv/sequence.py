"""
The Sequence abstraction and the producer adapter.

A Sequence is an ordered producer of (key, value) pairs. Nothing is
computed until it is iterated. Every combinator returns a new Sequence
node that holds its upstream sequences and builds a fresh generator each
time it is iterated.

Two flavours exist:
  * reusable  - backed by a fixed container (or built only from reusable
                upstreams); every iteration starts from the beginning.
  * one-shot  - backed by an iterator; once exhausted, iterating again
                yields nothing.
"""

import copy
import functools
import inspect
import logging
from collections import abc
from typing import Any, Callable, Dict, Iterator, Tuple

from lazykv.exceptions import InvalidInputKind
from lazykv.models import SourceKind

logger = logging.getLogger(__name__)

Pair = Tuple[Any, Any]

# Sentinel for "argument not given" where None is a legitimate value.
MISSING = object()


class Sequence:
    """
    A lazily evaluated, ordered stream of (key, value) pairs.

    `factory` is called once per iteration and must return an iterator of
    pairs. Combinators never mutate a Sequence; they wrap it.
    """

    def __init__(self, factory: Callable[[], Iterator[Pair]], reusable: bool = True):
        self._factory = factory
        self._reusable = reusable

    @property
    def reusable(self) -> bool:
        """Whether every iteration replays the whole sequence"""
        return self._reusable

    @classmethod
    def from_pairs(cls, pairs) -> "Sequence":
        """Wrap an iterable of (key, value) pairs.

        An iterator (e.g. a generator) gives a one-shot sequence, any other
        iterable a reusable one.
        """
        if isinstance(pairs, abc.Iterator):
            return cls(lambda: pairs, reusable=False)
        return cls(lambda: iter(pairs), reusable=True)

    def __iter__(self) -> Iterator[Pair]:
        return iter(self._factory())

    def __repr__(self):
        flavour = "reusable" if self.reusable else "one-shot"
        return f"<{type(self).__name__} ({flavour})>"


def classify(obj) -> SourceKind:
    """Resolve what kind of input obj is. Strings are scalars."""
    if isinstance(obj, Sequence):
        return SourceKind.SEQUENCE
    if isinstance(obj, (str, bytes, bytearray)):
        return SourceKind.SCALAR
    if isinstance(obj, abc.Mapping):
        return SourceKind.MAPPING
    if isinstance(obj, abc.Sequence):
        return SourceKind.ARRAY
    if isinstance(obj, abc.Iterator):
        return SourceKind.STREAM
    if isinstance(obj, abc.Iterable):
        return SourceKind.ITERABLE
    return SourceKind.SCALAR


def is_collection(obj) -> bool:
    """True for anything to_sequence() accepts"""
    return classify(obj) is not SourceKind.SCALAR


def to_sequence(obj) -> Sequence:
    """Adapt any supported input into a Sequence.

    Sequences pass through unchanged. Mappings keep their keys; ordered
    containers, other iterables and iterators are keyed by position.
    Containers are wrapped, not copied.
    """
    kind = classify(obj)

    if kind is SourceKind.SEQUENCE:
        return obj
    if kind is SourceKind.MAPPING:
        return Sequence(lambda: iter(obj.items()))
    if kind in (SourceKind.ARRAY, SourceKind.ITERABLE):
        return Sequence(lambda: enumerate(obj))
    if kind is SourceKind.STREAM:
        logger.debug(f"Wrapping one-shot {type(obj).__name__} source")
        return Sequence.from_pairs(enumerate(obj))

    raise InvalidInputKind(obj, "expected a mapping, an ordered container or an iterator")


def combinator(sources: int = 1):
    """
    Turn a generator function over pairs into a Sequence builder.

    The first `sources` parameters of the generator are adapted with
    to_sequence() when the builder is called, whether they are passed by
    position or by name. The generator itself only runs when the returned
    Sequence is iterated, and runs again for every iteration. The node is
    reusable only if all of its upstream sequences are.
    """
    def decorate(func):
        signature = inspect.signature(func)
        upstream_names = list(signature.parameters)[:sources]

        @functools.wraps(func)
        def build(*args, **kwargs):
            bound = signature.bind(*args, **kwargs)
            upstream = []
            for name in upstream_names:
                bound.arguments[name] = to_sequence(bound.arguments[name])
                upstream.append(bound.arguments[name])
            call_args, call_kwargs = bound.args, bound.kwargs
            return Sequence(
                lambda: func(*call_args, **call_kwargs),
                reusable=all(seq.reusable for seq in upstream),
            )
        return build
    return decorate


class AutoIndex:
    """
    Hands out keys for keyless items: one more than the largest integer key
    emitted so far by the same node, starting at 0.
    """

    def __init__(self):
        self._largest = -1

    def observe(self, key):
        if isinstance(key, int) and not isinstance(key, bool) and key > self._largest:
            self._largest = key
        return key

    def next_key(self) -> int:
        self._largest += 1
        return self._largest


def to_array(obj) -> Dict[Any, Any]:
    """
    Materialize a sequence (or any supported input) into a dict.

    Nested sequences, mappings and iterators are converted too. A key seen
    again overwrites the earlier value but keeps its first position.
    """
    result = {}
    for key, value in to_sequence(obj):
        result[key] = _realize_value(value)
    return result


def _realize_value(value):
    if classify(value) in (SourceKind.SEQUENCE, SourceKind.MAPPING, SourceKind.STREAM):
        return to_array(value)
    return value


def duplicate(value):
    """Deep copy of value so a reduction never aliases caller state.

    Sequences and iterators cannot be cloned and are returned as they are.
    """
    if classify(value) in (SourceKind.SEQUENCE, SourceKind.STREAM):
        return value
    return copy.deepcopy(value)


def adapt_callable(func: Callable, arity: int, fallback: int = 1) -> Callable:
    """
    Wrap func so it can always be called with `arity` positional arguments.

    Callbacks receive (value, key) or similar, but a callback that only
    declares (value) is fine: extra trailing arguments are dropped. When the
    signature cannot be inspected, `fallback` arguments are passed.
    """
    try:
        params = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        accepted = fallback
    else:
        if any(p.kind is p.VAR_POSITIONAL for p in params):
            return func
        accepted = sum(
            1 for p in params
            if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
        )

    if accepted >= arity:
        return func

    @functools.wraps(func)
    def call(*args):
        return func(*args[:accepted])
    return call
