from lazykv import buffering, combinators, composite, eager
from lazykv.exceptions import ItemNotFound
from lazykv.sequence import MISSING, Sequence, to_array, to_sequence

# op name -> engine function taking the upstream sequence first
_OPERATIONS = {
    "map": combinators.map,
    "filter": combinators.filter,
    "reject": combinators.reject,
    "each": combinators.each,
    "replace": combinators.replace,
    "values": combinators.values,
    "keys": combinators.keys,
    "index_by": combinators.index_by,
    "pluck": combinators.pluck,
    "reductions": combinators.reductions,
    "concat": combinators.concat,
    "interleave": combinators.interleave,
    "interpose": combinators.interpose,
    "prepend": combinators.prepend,
    "append": combinators.append,
    "flatten": combinators.flatten,
    "slice": combinators.slice,
    "take": combinators.take,
    "drop": combinators.drop,
    "take_while": combinators.take_while,
    "drop_while": combinators.drop_while,
    "take_nth": combinators.take_nth,
    "distinct": combinators.distinct,
    "cycle": combinators.cycle,
    "partition": buffering.partition,
    "partition_by": buffering.partition_by,
    "drop_last": buffering.drop_last,
    "reverse": buffering.reverse,
    "shuffle": buffering.shuffle,
    "sort": buffering.sort,
    "mapcat": composite.mapcat,
    "split_at": composite.split_at,
    "split_with": composite.split_with,
    "count_by": composite.count_by,
    "frequencies": composite.frequencies,
}

CHAINABLE_OPERATIONS = frozenset(_OPERATIONS) | {"skip", "batch", "chunk", "page", "cache"}


class LazyCollection(Sequence):
    """
    A chainable, lazy collection of (key, value) pairs. Operations are
    recorded and turned into an engine pipeline; nothing runs until you
    iterate. Optionally caches realized pairs.
    """
    def __init__(self, source, ops=None, cache_enabled=False, pipeline=None):
        self._source = to_sequence(source)
        self._ops = ops or []          # sequence of ("op_name", args, kwargs)
        self._cache_enabled = cache_enabled
        self._cache = []               # realized pairs (post-ops)
        self._cache_iterator = None    # the one traversal feeding the cache
        self._exhausted = False        # whether the cached traversal has ended
        # pipeline: the already-built node for source + ops, when chained
        self._pipeline = pipeline if pipeline is not None else self._build()
        super().__init__(self._pairs)

    # --------- constructors ----------
    @classmethod
    def iterate(cls, seed, fn):
        return cls(combinators.iterate(seed, fn))

    @classmethod
    def repeat(cls, value, times=-1):
        return cls(combinators.repeat(value, times))

    @classmethod
    def range(cls, start=0, end=None, step=1):
        return cls(combinators.range(start, end, step))

    # --------- chainable operators (lazy) ----------
    def map(self, fn):
        return self._with_op("map", fn)

    def filter(self, pred):
        return self._with_op("filter", pred)

    def reject(self, pred):
        return self._with_op("reject", pred)

    def each(self, fn):
        return self._with_op("each", fn)

    def replace(self, replacements):
        return self._with_op("replace", replacements)

    def values(self):
        return self._with_op("values")

    def keys(self):
        return self._with_op("keys")

    def index_by(self, fn):
        return self._with_op("index_by", fn)

    def pluck(self, field):
        return self._with_op("pluck", field)

    def reductions(self, fn, start):
        return self._with_op("reductions", fn, start)

    def concat(self, other):
        return self._with_op("concat", other)

    def interleave(self, other):
        return self._with_op("interleave", other)

    def interpose(self, separator):
        return self._with_op("interpose", separator)

    def prepend(self, value, key=MISSING):
        return self._with_op("prepend", value, key=key)

    def append(self, value, key=MISSING):
        return self._with_op("append", value, key=key)

    def flatten(self, depth=-1):
        return self._with_op("flatten", depth)

    def slice(self, start=0, stop=-1):
        return self._with_op("slice", start, stop)

    def take(self, n):
        return self._with_op("take", n)

    def drop(self, n):
        return self._with_op("drop", n)

    def skip(self, n):
        """Alias for drop()"""
        return self.drop(n)

    def take_while(self, pred):
        return self._with_op("take_while", pred)

    def drop_while(self, pred):
        return self._with_op("drop_while", pred)

    def take_nth(self, step):
        return self._with_op("take_nth", step)

    def distinct(self):
        return self._with_op("distinct")

    def cycle(self):
        return self._with_op("cycle")

    def partition(self, size, step=None, padding=()):
        return self._with_op("partition", size, step, padding)

    def batch(self, size):
        """Non-overlapping windows of `size` pairs; the last one may be short"""
        return self.partition(size)

    def chunk(self, size):
        """Alias for batch()"""
        return self.batch(size)

    def partition_by(self, fn):
        return self._with_op("partition_by", fn)

    def drop_last(self, n=1):
        return self._with_op("drop_last", n)

    def reverse(self):
        return self._with_op("reverse")

    def shuffle(self):
        return self._with_op("shuffle")

    def sort(self, cmp=None):
        return self._with_op("sort", cmp)

    def mapcat(self, fn):
        return self._with_op("mapcat", fn)

    def split_at(self, position):
        return self._with_op("split_at", position)

    def split_with(self, pred):
        return self._with_op("split_with", pred)

    def count_by(self, fn):
        return self._with_op("count_by", fn)

    def frequencies(self):
        return self._with_op("frequencies")

    def page(self, page_number, page_size):
        """Get a specific page of results (1-indexed)"""
        if page_number < 1:
            raise ValueError("Page number must be >= 1")
        offset = (page_number - 1) * page_size
        return self.drop(offset).take(page_size)

    def cache(self, enabled=True):
        c = self._clone()
        c._cache_enabled = enabled
        return c

    # --------- forcing evaluation ----------
    def to_array(self):
        return to_array(self)

    def to_list(self):
        return eager.to_list(self)

    def realize(self):
        """Materialize now; later operations replay the realized pairs"""
        return LazyCollection(eager.realize(self))

    def paginate(self, page_size):
        """Yield lists of up to page_size values until the collection runs out"""
        for window in buffering.partition(combinators.values(self), page_size):
            yield list(window.values())

    # --------- reducing operations (force evaluation) ----------
    def reduce(self, fn, start):
        return eager.reduce(self, fn, start)

    def reduce_right(self, fn, start):
        return eager.reduce_right(self, fn, start)

    def group_by(self, key_fn):
        """Group values by key_fn(value, key)"""
        return eager.group_by(self, key_fn)

    def size(self):
        return eager.size(self)

    def count(self):
        """Alias for size()"""
        return self.size()

    def sum(self, start=0):
        """Return the sum of all values"""
        total = start
        for _, value in self:
            total += value
        return total

    def min(self, default=MISSING):
        """Return the smallest value"""
        if default is MISSING:
            return min(value for _, value in self)
        return min((value for _, value in self), default=default)

    def max(self, default=MISSING):
        """Return the largest value"""
        if default is MISSING:
            return max(value for _, value in self)
        return max((value for _, value in self), default=default)

    def first(self, default=MISSING):
        """First value; ItemNotFound when empty unless a default is given"""
        return self._or_default(eager.first, default)

    def second(self, default=MISSING):
        return self._or_default(eager.second, default)

    def last(self, default=MISSING):
        return self._or_default(eager.last, default)

    def get(self, key):
        return eager.get(self, key)

    def get_or_default(self, key, default=None):
        return eager.get_or_default(self, key, default)

    def get_nth(self, position):
        return eager.get_nth(self, position)

    def find(self, pred, default=None):
        return eager.find(self, pred, default)

    def every(self, pred):
        return eager.every(self, pred)

    def some(self, pred):
        return eager.some(self, pred)

    def contains(self, value):
        return eager.contains(self, value)

    def is_empty(self):
        return eager.is_empty(self)

    # --------- iterator protocol ----------
    @property
    def reusable(self):
        return self._cache_enabled or self._pipeline.reusable

    def _pairs(self):
        if self._cache_enabled:
            return self._cached_pairs()
        return iter(self._pipeline)

    def _cached_pairs(self):
        # Replay what is cached, then extend the cache from one shared traversal
        index = 0
        while True:
            if index < len(self._cache):
                yield self._cache[index]
                index += 1
                continue
            if self._exhausted:
                return
            if self._cache_iterator is None:
                self._cache_iterator = iter(self._pipeline)
            pair = next(self._cache_iterator, MISSING)
            if pair is MISSING:
                self._exhausted = True
                return
            self._cache.append(pair)

    # --------- helpers ----------
    def _build(self):
        seq = self._source
        for op, args, kwargs in self._ops:
            seq = self._apply(seq, op, args, kwargs)
        return seq

    @staticmethod
    def _apply(seq, op, args, kwargs):
        try:
            operation = _OPERATIONS[op]
        except KeyError:
            raise ValueError(f"Unknown op: {op}") from None
        return operation(seq, *args, **kwargs)

    def _with_op(self, op, *args, **kwargs):
        # Extend this pipeline by one node; earlier ops are not rebuilt
        pipeline = self._apply(self._pipeline, op, args, kwargs)
        return LazyCollection(
            self._source, self._ops + [(op, args, kwargs)], self._cache_enabled, pipeline
        )

    def _clone(self):
        # Caches are not shared between clones
        return LazyCollection(self._source, list(self._ops), self._cache_enabled, self._pipeline)

    def _or_default(self, lookup, default):
        try:
            return lookup(self)
        except ItemNotFound:
            if default is MISSING:
                raise
            return default
