import unittest

from parking_lot.core.errors import (
    AlreadyFreeError,
    AlreadyParkedError,
    DomainError,
    InvalidArgumentError,
    InvariantViolation,
    LotFullError,
    NotFoundError,
    NotInitializedError,
)
from parking_lot.core.models import CapacityChange, LotState, ParkedCar
from parking_lot.core.service import SlotAllocator


class InitializationTests(unittest.TestCase):
    def setUp(self):
        self.lot = SlotAllocator(strict=True)

    def test_initialize_returns_capacity(self):
        self.assertEqual(self.lot.initialize(3), 3)
        self.assertEqual(self.lot.current_state(), LotState(3, True, 0, 3))

    def test_initialize_rejects_bad_capacity(self):
        for bad in (0, -1, True, "3", 2.0):
            with self.assertRaises(InvalidArgumentError):
                self.lot.initialize(bad)
        self.assertEqual(self.lot.current_state(), LotState(0, False, 0, 0))

    def test_failed_reinitialize_keeps_state(self):
        self.lot.initialize(2)
        self.lot.park("A-1", "Red")
        with self.assertRaises(InvalidArgumentError):
            self.lot.initialize(0)
        self.assertEqual(self.lot.slot_by_registration("A-1"), 1)

    def test_reinitialize_resets_everything(self):
        self.lot.initialize(2)
        self.lot.park("KA-01-HH-1234", "White")
        self.lot.park("KA-01-HH-9999", "Black")
        with self.assertLogs("parking_lot.core.service", level="WARNING") as cm:
            self.lot.initialize(1)
        self.assertIn("2 parked car(s) discarded", cm.output[0])
        self.assertEqual(self.lot.current_state(), LotState(1, True, 0, 1))
        with self.assertRaises(NotFoundError):
            self.lot.slot_by_registration("KA-01-HH-1234")
        self.assertEqual(self.lot.park("KA-01-HH-9999", "Black").slot_number, 1)

    def test_expand_requires_initialization(self):
        with self.assertRaises(NotInitializedError):
            self.lot.expand(2)

    def test_expand_rejects_non_positive(self):
        self.lot.initialize(1)
        with self.assertRaises(InvalidArgumentError):
            self.lot.expand(0)
        self.assertEqual(self.lot.current_state().total_slots, 1)

    def test_expand_preserves_occupancy(self):
        self.lot.initialize(2)
        self.lot.park("A-1", "Red")
        self.lot.park("A-2", "Blue")
        change = self.lot.expand(3)
        self.assertEqual(change, CapacityChange(2, 5))
        self.assertEqual(change.added, 3)
        self.assertEqual(self.lot.current_state(), LotState(5, True, 2, 3))
        self.assertEqual(self.lot.park("A-3", "Red").slot_number, 3)

    def test_expanded_slots_come_after_smaller_free_slots(self):
        self.lot.initialize(3)
        for reg in ("A-1", "A-2", "A-3"):
            self.lot.park(reg, "Red")
        self.lot.unpark_by_slot(2)
        self.lot.expand(2)
        self.assertEqual(self.lot.park("B-1", "Red").slot_number, 2)
        self.assertEqual(self.lot.park("B-2", "Red").slot_number, 4)


class OccupancyTests(unittest.TestCase):
    def setUp(self):
        self.lot = SlotAllocator(strict=True)

    def test_scenario_fill_then_full(self):
        self.lot.initialize(2)
        self.assertEqual(self.lot.park("KA-01-HH-1234", "White"), ParkedCar(1, "KA-01-HH-1234", "White"))
        self.assertEqual(self.lot.park("KA-01-HH-9999", "Black"), ParkedCar(2, "KA-01-HH-9999", "Black"))
        with self.assertRaises(LotFullError):
            self.lot.park("KA-01-BB-0001", "Red")

    def test_full_is_checked_before_duplicate(self):
        self.lot.initialize(1)
        self.lot.park("A-1", "Red")
        with self.assertRaises(LotFullError):
            self.lot.park("A-1", "Red")

    def test_unpark_by_slot_frees_nearest(self):
        self.lot.initialize(3)
        self.lot.park("A", "White")
        self.lot.park("B", "White")
        self.assertEqual(self.lot.unpark_by_slot(1), 1)
        self.assertEqual(self.lot.current_state().available_count, 2)
        self.assertEqual(self.lot.park("C", "Red").slot_number, 1)

    def test_unpark_by_registration(self):
        self.lot.initialize(3)
        self.lot.park("A", "White")
        self.lot.park("B", "White")
        self.assertEqual(self.lot.unpark_by_registration("B"), 2)
        with self.assertRaises(NotFoundError):
            self.lot.slot_by_registration("B")
        with self.assertRaises(NotFoundError):
            self.lot.unpark_by_registration("B")

    def test_duplicate_registration_rejected_regardless_of_color(self):
        self.lot.initialize(3)
        self.lot.park("A", "White")
        with self.assertRaises(AlreadyParkedError):
            self.lot.park("A", "Black")
        self.assertEqual(self.lot.current_state(), LotState(3, True, 1, 2))

    def test_same_registration_may_return_after_leaving(self):
        self.lot.initialize(3)
        self.lot.park("A", "White")
        self.lot.park("B", "White")
        self.lot.unpark_by_registration("A")
        self.lot.park("C", "Red")
        self.assertEqual(self.lot.park("A", "White").slot_number, 3)

    def test_park_rejects_empty_values(self):
        self.lot.initialize(1)
        with self.assertRaises(InvalidArgumentError):
            self.lot.park("", "Red")
        with self.assertRaises(InvalidArgumentError):
            self.lot.park("A", "")
        self.assertEqual(self.lot.current_state().available_count, 1)

    def test_unpark_slot_out_of_range(self):
        self.lot.initialize(2)
        for bad in (0, 3, -1, True):
            with self.assertRaises(InvalidArgumentError):
                self.lot.unpark_by_slot(bad)

    def test_unpark_free_slot(self):
        self.lot.initialize(2)
        with self.assertRaises(AlreadyFreeError):
            self.lot.unpark_by_slot(2)


class QueryTests(unittest.TestCase):
    def setUp(self):
        self.lot = SlotAllocator(strict=True)
        self.lot.initialize(5)
        for reg, color in (("W-1", "White"), ("R-1", "Red"), ("W-2", "White"), ("B-1", "Blue")):
            self.lot.park(reg, color)

    def test_registrations_by_color_in_slot_order(self):
        self.assertEqual(self.lot.registrations_by_color("White"), ["W-1", "W-2"])
        self.assertEqual(self.lot.slots_by_color("Green"), [])

    def test_color_order_follows_slots_not_arrival(self):
        self.lot.unpark_by_slot(1)
        self.lot.park("W-3", "White")
        self.assertEqual(self.lot.registrations_by_color("White"), ["W-3", "W-2"])
        self.assertEqual(self.lot.slots_by_color("White"), [1, 3])

    def test_color_match_is_exact(self):
        self.assertEqual(self.lot.slots_by_color("white"), [])

    def test_status_sorted_by_slot(self):
        self.lot.unpark_by_slot(2)
        self.lot.park("G-1", "Green")
        status = self.lot.status()
        self.assertEqual([c.slot_number for c in status], [1, 2, 3, 4])
        self.assertEqual(status[1], ParkedCar(2, "G-1", "Green"))

    def test_slot_by_registration(self):
        self.assertEqual(self.lot.slot_by_registration("B-1"), 4)
        with self.assertRaises(NotFoundError):
            self.lot.slot_by_registration("NOPE")

    def test_current_state(self):
        self.assertEqual(self.lot.current_state(), LotState(5, True, 4, 1))


class UninitializedTests(unittest.TestCase):
    def test_everything_but_initialize_fails(self):
        lot = SlotAllocator()
        calls = [
            lambda: lot.expand(1),
            lambda: lot.park("A", "Red"),
            lambda: lot.unpark_by_slot(1),
            lambda: lot.unpark_by_registration("A"),
            lambda: lot.status(),
            lambda: lot.registrations_by_color("Red"),
            lambda: lot.slots_by_color("Red"),
            lambda: lot.slot_by_registration("A"),
        ]
        for call in calls:
            with self.assertRaises(NotInitializedError):
                call()
        self.assertEqual(lot.current_state(), LotState(0, False, 0, 0))
        lot.check_invariants()

    def test_domain_errors_share_base(self):
        self.assertTrue(issubclass(NotInitializedError, DomainError))
        self.assertFalse(issubclass(InvariantViolation, DomainError))


class InvariantCheckTests(unittest.TestCase):
    def test_detects_out_of_sync_reverse_index(self):
        lot = SlotAllocator()
        lot.initialize(2)
        lot.park("A", "Red")
        lot._by_registration["A"] = 2
        with self.assertRaises(InvariantViolation):
            lot.check_invariants()

    def test_detects_slot_in_both_structures(self):
        lot = SlotAllocator()
        lot.initialize(2)
        lot.park("A", "Red")
        lot._free.push(1)
        with self.assertRaises(InvariantViolation):
            lot.check_invariants()


if __name__ == "__main__":
    unittest.main()
