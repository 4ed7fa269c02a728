import unittest
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from hybrid_hash_map import (
    ConstHashMapIterator,
    HashMapIterator,
    HybridHashMap,
    InvalidIteratorError,
)


def collect(m):
    pairs = []
    it, end = m.begin(), m.end()
    while it != end:
        pairs.append(it.pair())
        it.advance()
    return pairs


class TestIteratorTraversal(unittest.TestCase):
    def test_empty_map_begin_equals_end(self):
        m = HybridHashMap()
        self.assertEqual(m.begin(), m.end())
        self.assertEqual(m.cbegin(), m.cend())

    def test_collects_all_pairs(self):
        m = HybridHashMap([(1, 10), (2, 20), (3, 30)])
        self.assertEqual(set(collect(m)), {(1, 10), (2, 20), (3, 30)})

    def test_order_follows_buckets_not_insertion(self):
        m = HybridHashMap([(3, "c"), (1, "a"), (2, "b")])
        self.assertEqual([key for key, _ in collect(m)], [1, 2, 3])

    def test_only_last_bucket_occupied(self):
        m = HybridHashMap([(23, "last")])
        it = m.begin()
        self.assertNotEqual(it, m.end())
        self.assertEqual(it.pair(), (23, "last"))
        it.advance()
        self.assertEqual(it, m.end())

    def test_visits_chained_entries(self):
        m = HybridHashMap(hash_func=lambda key: 0)
        for i in range(10):
            m.insert(i, i)
        self.assertEqual(sorted(collect(m)), [(i, i) for i in range(10)])

    def test_traversal_after_many_rehashes(self):
        m = HybridHashMap((i, i) for i in range(1000))
        pairs = collect(m)
        self.assertEqual(len(pairs), 1000)
        self.assertEqual(set(pairs), {(i, i) for i in range(1000)})

    def test_advance_past_end_raises(self):
        m = HybridHashMap([(1, "a")])
        end = m.end()
        with self.assertRaises(InvalidIteratorError):
            end.advance()

    def test_advance_past_end_on_empty_map_raises(self):
        m = HybridHashMap()
        with self.assertRaises(InvalidIteratorError):
            m.begin().advance()

    def test_invalid_iterator_is_an_index_error(self):
        m = HybridHashMap()
        with self.assertRaises(IndexError):
            m.end().advance()

    def test_dereference_end_raises(self):
        m = HybridHashMap([(1, "a")])
        with self.assertRaises(InvalidIteratorError):
            m.end().key

    def test_post_advance_returns_previous_position(self):
        m = HybridHashMap([(1, "a"), (2, "b")])
        it = m.begin()
        previous = it.post_advance()
        self.assertEqual(previous.key, 1)
        self.assertEqual(it.key, 2)

    def test_copy_is_independent(self):
        m = HybridHashMap([(1, "a"), (2, "b")])
        it = m.begin()
        clone = it.copy()
        it.advance()
        self.assertEqual(clone.key, 1)
        self.assertNotEqual(clone, it)

    def test_iterators_of_different_maps_differ(self):
        a = HybridHashMap()
        b = HybridHashMap()
        self.assertNotEqual(a.end(), b.end())


class TestIteratorAccess(unittest.TestCase):
    def test_find_returns_mutable_iterator(self):
        m = HybridHashMap([("k", 1)])
        it = m.find("k")
        self.assertIsInstance(it, HashMapIterator)
        it.value = 2
        self.assertEqual(m.at("k"), 2)

    def test_key_is_read_only(self):
        m = HybridHashMap([("k", 1)])
        with self.assertRaises(AttributeError):
            m.find("k").entry.key = "other"

    def test_const_iterator_rejects_writes(self):
        m = HybridHashMap([("k", 1)])
        it = m.cfind("k")
        self.assertIsInstance(it, ConstHashMapIterator)
        self.assertEqual(it.value, 1)
        with self.assertRaises(TypeError):
            it.value = 2
        self.assertEqual(m.at("k"), 1)

    def test_const_iterator_entry_is_detached(self):
        m = HybridHashMap([("k", 1)])
        m.cfind("k").entry.value = 5
        self.assertEqual(m.at("k"), 1)

    def test_value_write_does_not_invalidate(self):
        m = HybridHashMap([(1, "a"), (2, "b")])
        it = m.begin()
        it.value = "changed"
        m[2] = "also changed"
        it.advance()
        self.assertEqual(it.value, "also changed")


class TestIteratorInvalidation(unittest.TestCase):
    def test_insert_invalidates(self):
        m = HybridHashMap([(1, "a")])
        it = m.find(1)
        m.insert(2, "b")
        with self.assertRaises(InvalidIteratorError):
            it.value

    def test_noop_insert_keeps_iterators(self):
        m = HybridHashMap([(1, "a")])
        it = m.find(1)
        m.insert(1, "ignored")
        self.assertEqual(it.value, "a")

    def test_erase_invalidates(self):
        m = HybridHashMap([(1, "a"), (2, "b")])
        it = m.find(2)
        m.erase(1)
        with self.assertRaises(InvalidIteratorError):
            it.advance()

    def test_rehash_invalidates(self):
        m = HybridHashMap((i, i) for i in range(20))
        it = m.find(5)
        m.insert(20, 20)
        self.assertEqual(m.capacity(), 48)
        with self.assertRaises(InvalidIteratorError):
            it.key

    def test_clear_invalidates(self):
        m = HybridHashMap([(1, "a")])
        it = m.begin()
        m.clear()
        with self.assertRaises(InvalidIteratorError):
            it.key

    def test_swap_invalidates(self):
        a = HybridHashMap([(1, "a")])
        b = HybridHashMap([(2, "b")])
        it = a.begin()
        a.swap(b)
        with self.assertRaises(InvalidIteratorError):
            it.key

    def test_mutation_during_iteration_raises(self):
        m = HybridHashMap((i, i) for i in range(10))
        with self.assertRaises(InvalidIteratorError):
            for key in m:
                m.erase(key)


if __name__ == '__main__':
    unittest.main()
