import unittest

from parking_lot.core.errors import InvariantViolation
from parking_lot.core.free_slots import FreeSlots


class FreeSlotsTests(unittest.TestCase):
    def test_pops_in_ascending_order(self):
        fs = FreeSlots([5, 2, 9, 1])
        self.assertEqual([fs.pop_min() for _ in range(4)], [1, 2, 5, 9])
        self.assertEqual(len(fs), 0)

    def test_from_range_and_extend(self):
        fs = FreeSlots.from_range(1, 3)
        fs.extend(4, 6)
        self.assertEqual(fs.snapshot(), [1, 2, 3, 4, 5, 6])
        self.assertTrue(fs.is_heap())
        self.assertTrue(fs.consistent())

    def test_reinserted_small_slot_comes_first(self):
        fs = FreeSlots.from_range(1, 5)
        for _ in range(3):
            fs.pop_min()
        fs.push(2)
        self.assertIn(2, fs)
        self.assertNotIn(3, fs)
        self.assertEqual(fs.pop_min(), 2)

    def test_double_free_is_internal_error(self):
        fs = FreeSlots([1])
        with self.assertRaises(InvariantViolation):
            fs.push(1)

    def test_pop_empty_is_internal_error(self):
        with self.assertRaises(InvariantViolation):
            FreeSlots().pop_min()


if __name__ == "__main__":
    unittest.main()
