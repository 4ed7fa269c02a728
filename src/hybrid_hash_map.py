"""
Hybrid Hash Map -- neighborhood placement with per-bucket chaining.

Every bucket of the table holds a short chain of entries. A new key is put
into the first empty bucket of the fixed-width neighborhood that starts at
its home index (hash(key) mod capacity), which keeps most entries one probe
away from home. When the whole neighborhood is occupied the entry is
appended to the home bucket's chain instead, so placement never fails.

Lookups mirror that layout in two phases: the front entry of each
neighborhood bucket is checked first, then the home chain is scanned in
full. Non-front entries only ever live in their home bucket, which is what
makes the two phases together complete.

The table doubles and re-places every live entry once the size reaches
LOAD_FACTOR * capacity. Iteration walks buckets in index order, so the order
depends on the layout and not on insertion order.
"""

import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class KeyNotFoundError(KeyError):
    """Raised by lookups that require the key to be present."""


class InvalidIteratorError(IndexError):
    """Raised when an iterator is advanced past end, dereferenced at end,
    or used after a structural change to its map."""


class Entry:
    """A stored key/value pair. The key is fixed once stored."""

    __slots__ = ("_key", "value")

    def __init__(self, key, value):
        self._key = key
        self.value = value

    @property
    def key(self):
        return self._key

    def __repr__(self):
        return f"Entry({self._key!r}, {self.value!r})"


# ---------------------------------------------------------------------------
# Iterators
# ---------------------------------------------------------------------------

class HashMapIterator:
    """Two-level cursor: a bucket index plus a position inside that chain.

    The end position is the past-the-end slot of the last bucket, whether or
    not that bucket is empty. Any structural change to the owning map (an
    insert that creates an entry, an erase, a rehash, clear, swap, assign)
    invalidates every outstanding iterator.
    """

    __slots__ = ("_owner", "_buckets", "_version", "_bucket_index", "_position")

    def __init__(self, owner, bucket_index, position):
        self._owner = owner
        self._buckets = owner._buckets
        self._version = owner._version
        self._bucket_index = bucket_index
        self._position = position

    def _check_valid(self):
        if self._owner._buckets is not self._buckets or self._owner._version != self._version:
            raise InvalidIteratorError("iterator invalidated by a structural change")

    def _is_end(self):
        last = len(self._buckets) - 1
        return self._bucket_index == last and self._position == len(self._buckets[last])

    @property
    def entry(self) -> Entry:
        self._check_valid()
        if self._is_end():
            raise InvalidIteratorError("cannot dereference end iterator")
        return self._buckets[self._bucket_index][self._position]

    @property
    def key(self):
        return self.entry.key

    @property
    def value(self):
        return self.entry.value

    @value.setter
    def value(self, value):
        self.entry.value = value

    def pair(self):
        entry = self.entry
        return entry.key, entry.value

    def advance(self):
        """Move to the next entry in bucket order; returns self."""
        self._check_valid()
        if self._is_end():
            raise InvalidIteratorError("cannot advance past end")
        buckets = self._buckets
        last = len(buckets) - 1
        self._position += 1
        if self._position != len(buckets[self._bucket_index]) or self._bucket_index == last:
            return self
        self._bucket_index += 1
        while not buckets[self._bucket_index] and self._bucket_index != last:
            self._bucket_index += 1
        self._position = 0
        return self

    def post_advance(self):
        """Advance, returning a copy of the cursor as it was before."""
        previous = self.copy()
        self.advance()
        return previous

    def copy(self):
        clone = object.__new__(type(self))
        clone._owner = self._owner
        clone._buckets = self._buckets
        clone._version = self._version
        clone._bucket_index = self._bucket_index
        clone._position = self._position
        return clone

    def __eq__(self, other):
        if not isinstance(other, HashMapIterator):
            return NotImplemented
        return (
            self._buckets is other._buckets
            and self._bucket_index == other._bucket_index
            and self._position == other._position
        )

    __hash__ = None

    def __repr__(self):
        return (
            f"{type(self).__name__}(bucket={self._bucket_index}, "
            f"position={self._position})"
        )


class ConstHashMapIterator(HashMapIterator):
    """Read-only cursor; values cannot be written through it."""

    __slots__ = ()

    @property
    def value(self):
        return self.entry.value

    @value.setter
    def value(self, value):
        raise TypeError("cannot assign a value through a const iterator")

    @property
    def entry(self):
        # Hand out a detached copy so the stored entry stays untouched.
        stored = HashMapIterator.entry.fget(self)
        return Entry(stored.key, stored.value)


# ---------------------------------------------------------------------------
# HybridHashMap
# ---------------------------------------------------------------------------

class HybridHashMap:
    """Associative container with neighborhood placement and chain fallback.

    Not thread-safe: the map must not be mutated while another thread reads
    or writes it.
    """

    NEIGHBORHOOD = 6
    INITIAL_CAPACITY = 24
    LOAD_FACTOR = 0.8

    def __init__(
        self,
        items=None,
        hash_func: Callable[[Any], int] = hash,
        *,
        neighborhood: Optional[int] = None,
        initial_capacity: Optional[int] = None,
        load_factor: Optional[float] = None,
        default_factory: Optional[Callable[[], Any]] = None,
    ):
        """
        Args:
            items: Iterable of (key, value) pairs, or any object with an
                items() method, inserted in iteration order
            hash_func: Callable mapping a key to an int
            neighborhood: Buckets eligible for direct placement, from home
            initial_capacity: Bucket count at construction and after clear()
            load_factor: Size/capacity ratio at which the next new key
                triggers a rehash
            default_factory: Produces the value stored by map[key] for a
                missing key; None stores None
        """
        if neighborhood is None:
            neighborhood = self.NEIGHBORHOOD
        if initial_capacity is None:
            initial_capacity = self.INITIAL_CAPACITY
        if load_factor is None:
            load_factor = self.LOAD_FACTOR
        if not isinstance(neighborhood, int) or neighborhood < 1:
            raise ValueError("neighborhood must be a positive integer")
        if not isinstance(initial_capacity, int) or initial_capacity < 1:
            raise ValueError("initial_capacity must be a positive integer")
        if not load_factor > 0:
            raise ValueError("load_factor must be positive")
        if not callable(hash_func):
            raise TypeError("hash_func must be callable")

        self._hash_func = hash_func
        self._neighborhood = neighborhood
        self._initial_capacity = initial_capacity
        self._max_load_factor = float(load_factor)
        self._default_factory = default_factory
        self._capacity = initial_capacity
        self._buckets = [[] for _ in range(initial_capacity)]
        self._size = 0
        self._version = 0

        if items is not None:
            if hasattr(items, "items"):
                items = items.items()
            for key, value in items:
                self.insert(key, value)

    # -- placement ---------------------------------------------------------

    def _home(self, key):
        return self._hash_func(key) % self._capacity

    def _window(self, home):
        capacity = self._capacity
        for offset in range(self._neighborhood):
            yield (home + offset) % capacity

    def _locate(self, key):
        """Return (bucket_index, position) of key's entry, or None."""
        home = self._home(key)
        buckets = self._buckets
        for index in self._window(home):
            bucket = buckets[index]
            if bucket and bucket[0].key == key:
                return index, 0
        for position, entry in enumerate(buckets[home]):
            if entry.key == key:
                return home, position
        return None

    def _place(self, buckets, entry):
        capacity = len(buckets)
        home = self._hash_func(entry.key) % capacity
        for offset in range(self._neighborhood):
            bucket = buckets[(home + offset) % capacity]
            if not bucket:
                bucket.append(entry)
                return
        buckets[home].append(entry)

    def _rehash(self):
        new_capacity = self._capacity * 2
        buckets = [[] for _ in range(new_capacity)]
        # Old bucket-then-chain order; the new table is committed only once
        # every entry has been placed.
        for bucket in self._buckets:
            for entry in bucket:
                self._place(buckets, entry)
        logger.debug(
            "rehash: capacity %d -> %d (%d entries)",
            self._capacity, new_capacity, self._size,
        )
        self._buckets = buckets
        self._capacity = new_capacity
        self._version += 1

    # -- mutation ----------------------------------------------------------

    def insert(self, key, value) -> bool:
        """Insert key if absent. An existing key keeps its value."""
        if self._locate(key) is not None:
            return False
        if self._size >= self._capacity * self._max_load_factor:
            self._rehash()
        self._place(self._buckets, Entry(key, value))
        self._size += 1
        self._version += 1
        return True

    def erase(self, key) -> bool:
        """Remove key if present. A missing key is a no-op."""
        home = self._home(key)
        buckets = self._buckets
        for index in self._window(home):
            bucket = buckets[index]
            if bucket and bucket[0].key == key:
                del bucket[0]
                break
        else:
            chain = buckets[home]
            for position, entry in enumerate(chain):
                if entry.key == key:
                    del chain[position]
                    break
            else:
                return False
        self._size -= 1
        self._version += 1
        return True

    def clear(self):
        """Drop every entry and shrink back to the initial capacity."""
        logger.debug("clear: dropping %d entries", self._size)
        self._capacity = self._initial_capacity
        self._buckets = [[] for _ in range(self._capacity)]
        self._size = 0
        self._version += 1

    def swap(self, other):
        if not isinstance(other, HybridHashMap):
            raise TypeError("can only swap with another HybridHashMap")
        for name in (
            "_hash_func", "_neighborhood", "_initial_capacity",
            "_max_load_factor", "_default_factory", "_capacity",
            "_buckets", "_size",
        ):
            mine = getattr(self, name)
            setattr(self, name, getattr(other, name))
            setattr(other, name, mine)
        version = max(self._version, other._version) + 1
        self._version = version
        other._version = version

    def assign(self, other):
        """Replace contents with a canonical rebuild of other."""
        self.swap(other.copy())
        return self

    # -- lookup ------------------------------------------------------------

    def find(self, key) -> HashMapIterator:
        location = self._locate(key)
        if location is None:
            return self.end()
        return HashMapIterator(self, *location)

    def cfind(self, key) -> ConstHashMapIterator:
        location = self._locate(key)
        if location is None:
            return self.cend()
        return ConstHashMapIterator(self, *location)

    def at(self, key):
        location = self._locate(key)
        if location is None:
            raise KeyNotFoundError(key)
        index, position = location
        return self._buckets[index][position].value

    def get(self, key, default=None):
        location = self._locate(key)
        if location is None:
            return default
        index, position = location
        return self._buckets[index][position].value

    def __getitem__(self, key):
        location = self._locate(key)
        if location is None:
            value = self._default_factory() if self._default_factory is not None else None
            self.insert(key, value)
            location = self._locate(key)
        index, position = location
        return self._buckets[index][position].value

    def __setitem__(self, key, value):
        location = self._locate(key)
        if location is None:
            self.insert(key, value)
            return
        index, position = location
        self._buckets[index][position].value = value

    def __delitem__(self, key):
        if not self.erase(key):
            raise KeyNotFoundError(key)

    def __contains__(self, key):
        return self._locate(key) is not None

    # -- iteration ---------------------------------------------------------

    def _first_bucket(self):
        index = 0
        last = self._capacity - 1
        while not self._buckets[index] and index != last:
            index += 1
        return index

    def begin(self) -> HashMapIterator:
        return HashMapIterator(self, self._first_bucket(), 0)

    def end(self) -> HashMapIterator:
        last = self._capacity - 1
        return HashMapIterator(self, last, len(self._buckets[last]))

    def cbegin(self) -> ConstHashMapIterator:
        return ConstHashMapIterator(self, self._first_bucket(), 0)

    def cend(self) -> ConstHashMapIterator:
        last = self._capacity - 1
        return ConstHashMapIterator(self, last, len(self._buckets[last]))

    def _walk(self):
        it, end = self.cbegin(), self.cend()
        while it != end:
            yield it.pair()
            it.advance()

    def __iter__(self):
        for key, _ in self._walk():
            yield key

    def keys(self):
        return [key for key, _ in self._walk()]

    def values(self):
        return [value for _, value in self._walk()]

    def items(self):
        return list(self._walk())

    # -- copying -----------------------------------------------------------

    def copy(self):
        """Rebuild into a fresh map; same hash and tuning, canonical layout."""
        clone = type(self)(
            hash_func=self._hash_func,
            neighborhood=self._neighborhood,
            initial_capacity=self._initial_capacity,
            load_factor=self._max_load_factor,
            default_factory=self._default_factory,
        )
        for key, value in self._walk():
            clone.insert(key, value)
        return clone

    __copy__ = copy

    # -- size and introspection -------------------------------------------

    def size(self):
        return self._size

    def empty(self):
        return self._size == 0

    def capacity(self):
        return self._capacity

    def hash_function(self):
        return self._hash_func

    def load_factor(self):
        return self._size / self._capacity

    def max_load_factor(self):
        return self._max_load_factor

    def chain_lengths(self):
        return [len(bucket) for bucket in self._buckets]

    def __len__(self):
        return self._size

    def __bool__(self):
        return self._size != 0

    def __eq__(self, other):
        if not isinstance(other, HybridHashMap):
            return NotImplemented
        if self._size != other._size:
            return False
        for key, value in self._walk():
            location = other._locate(key)
            if location is None:
                return False
            index, position = location
            if other._buckets[index][position].value != value:
                return False
        return True

    __hash__ = None

    def __repr__(self):
        body = ", ".join(f"{key!r}: {value!r}" for key, value in self._walk())
        return f"{type(self).__name__}({{{body}}})"
