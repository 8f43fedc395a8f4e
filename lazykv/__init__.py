"""
lazykv - lazy combinators over ordered (key, value) sequences.

Build a pipeline on a dict, a list or any iterator; nothing runs until the
result is iterated, realized with to_array(), or reduced.
"""

from lazykv.buffering import (
    drop_last,
    partition,
    partition_by,
    reverse,
    shuffle,
    sort,
)
from lazykv.collection import LazyCollection
from lazykv.combinators import (
    append,
    concat,
    cycle,
    distinct,
    drop,
    drop_while,
    each,
    filter,
    flatten,
    index_by,
    interleave,
    interpose,
    iterate,
    keys,
    map,
    pluck,
    prepend,
    range,
    reductions,
    reject,
    repeat,
    replace,
    slice,
    take,
    take_nth,
    take_while,
    values,
)
from lazykv.composite import count_by, frequencies, mapcat, split_at, split_with
from lazykv.config import configure, get_settings
from lazykv.eager import (
    contains,
    every,
    find,
    first,
    get,
    get_nth,
    get_or_default,
    group_by,
    is_empty,
    is_not_empty,
    last,
    realize,
    reduce,
    reduce_right,
    second,
    size,
    some,
    to_list,
)
from lazykv.exceptions import InvalidInputKind, ItemNotFound, LazyKVError, NoMoreItems
from lazykv.models import EngineSettings, SourceKind
from lazykv.sequence import Sequence, classify, to_array, to_sequence

__version__ = "0.1.0"
