from __future__ import annotations

import logging
import threading
from typing import Dict, List

from parking_lot.core.errors import (
    AlreadyFreeError,
    AlreadyParkedError,
    InvalidArgumentError,
    InvariantViolation,
    LotFullError,
    NotFoundError,
    NotInitializedError,
)
from parking_lot.core.free_slots import FreeSlots
from parking_lot.core.models import CapacityChange, LotState, Occupant, ParkedCar


logger = logging.getLogger(__name__)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _require_text(value: object, field: str) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidArgumentError(f"{field} must be a non-empty string.")
    return value


class SlotAllocator:
    """Asignador de plazas en memoria (sin persistencia).

    Tres estructuras que se mueven juntas:
    - _free: plazas libres, siempre devuelve la de menor numero
    - _occupied: plaza -> ocupante
    - _by_registration: matricula -> plaza (inverso exacto de _occupied)

    Todos los metodos publicos se ejecutan bajo el mismo RLock. Con
    strict=True se comprueban los invariantes tras cada mutacion.
    """

    def __init__(self, strict: bool = False) -> None:
        self._lock = threading.RLock()
        self._strict = strict
        self._total_slots = 0
        self._initialized = False
        self._free = FreeSlots()
        self._occupied: Dict[int, Occupant] = {}
        self._by_registration: Dict[str, int] = {}

    # --------------------------
    # Inicializacion y capacidad
    # --------------------------

    def initialize(self, capacity: int) -> int:
        if not _is_int(capacity) or capacity < 1:
            raise InvalidArgumentError("Capacity must be a positive integer.")
        with self._lock:
            if self._initialized:
                logger.warning(
                    "Re-initializing parking lot with capacity %d. %d parked car(s) discarded.",
                    capacity,
                    len(self._occupied),
                )
            self._total_slots = capacity
            self._free = FreeSlots.from_range(1, capacity)
            self._occupied = {}
            self._by_registration = {}
            self._initialized = True
            logger.info("Parking lot created with %d slots.", capacity)
            self._after_mutation()
            return capacity

    def expand(self, additional: int) -> CapacityChange:
        with self._lock:
            self._check_initialized()
            if not _is_int(additional) or additional < 1:
                raise InvalidArgumentError("Additional capacity must be a positive integer.")
            old = self._total_slots
            self._free.extend(old + 1, old + additional)
            self._total_slots = old + additional
            logger.info("Parking lot expanded by %d slots. New total: %d.", additional, self._total_slots)
            self._after_mutation()
            return CapacityChange(old_capacity=old, new_capacity=self._total_slots)

    # --------------------------
    # Ocupacion
    # --------------------------

    def park(self, registration_number: str, color: str) -> ParkedCar:
        with self._lock:
            self._check_initialized()
            _require_text(registration_number, "registrationNumber")
            _require_text(color, "color")
            if not self._free:
                raise LotFullError("Sorry, parking lot is full.")
            if registration_number in self._by_registration:
                raise AlreadyParkedError(
                    f"Car with registration number {registration_number} is already parked."
                )
            # Todas las comprobaciones antes de sacar la plaza del heap
            slot = self._free.pop_min()
            self._bind(slot, Occupant(registration_number, color))
            logger.info("Car %s (%s) parked in slot %d.", registration_number, color, slot)
            self._after_mutation()
            return ParkedCar(slot, registration_number, color)

    def unpark_by_slot(self, slot_number: int) -> int:
        with self._lock:
            self._check_initialized()
            if not _is_int(slot_number) or not 1 <= slot_number <= self._total_slots:
                raise InvalidArgumentError(
                    f"Invalid slot number {slot_number}. Must be between 1 and {self._total_slots}."
                )
            if slot_number not in self._occupied:
                raise AlreadyFreeError(f"Slot number {slot_number} is already free.")
            occupant = self._unbind(slot_number)
            self._free.push(slot_number)
            logger.info("Slot %d freed. Car %s left.", slot_number, occupant.registration_number)
            self._after_mutation()
            return slot_number

    def unpark_by_registration(self, registration_number: str) -> int:
        with self._lock:
            self._check_initialized()
            slot = self._by_registration.get(registration_number)
            if slot is None:
                raise NotFoundError(f"Car with registration number {registration_number} not found.")
            return self.unpark_by_slot(slot)

    # --------------------------
    # Consultas
    # --------------------------

    def status(self) -> List[ParkedCar]:
        with self._lock:
            self._check_initialized()
            return [ParkedCar.from_occupant(s, self._occupied[s]) for s in sorted(self._occupied)]

    def registrations_by_color(self, color: str) -> List[str]:
        with self._lock:
            self._check_initialized()
            return [
                self._occupied[s].registration_number
                for s in sorted(self._occupied)
                if self._occupied[s].color == color
            ]

    def slots_by_color(self, color: str) -> List[int]:
        with self._lock:
            self._check_initialized()
            return sorted(s for s, occ in self._occupied.items() if occ.color == color)

    def slot_by_registration(self, registration_number: str) -> int:
        with self._lock:
            self._check_initialized()
            slot = self._by_registration.get(registration_number)
            if slot is None:
                raise NotFoundError(f"Car with registration number {registration_number} not found.")
            return slot

    def current_state(self) -> LotState:
        with self._lock:
            return LotState(
                total_slots=self._total_slots,
                initialized=self._initialized,
                occupied_count=len(self._occupied),
                available_count=len(self._free),
            )

    # --------------------------
    # Invariantes
    # --------------------------

    def check_invariants(self) -> None:
        """Lanza InvariantViolation si las tres estructuras no cuadran."""
        with self._lock:
            free = set(self._free.snapshot())
            occupied = set(self._occupied)
            if not self._initialized:
                if self._total_slots or free or occupied or self._by_registration:
                    raise InvariantViolation("Uninitialized lot holds state.")
                return
            both = sorted(s for s in occupied if s in self._free)
            if both:
                raise InvariantViolation(f"Slots both free and occupied: {both}")
            if free | occupied != set(range(1, self._total_slots + 1)):
                raise InvariantViolation("Free and occupied slots do not cover 1..total_slots.")
            if len(self._by_registration) != len(self._occupied):
                raise InvariantViolation("Registration index size differs from occupied slots.")
            for slot, occ in self._occupied.items():
                if self._by_registration.get(occ.registration_number) != slot:
                    raise InvariantViolation(
                        f"Registration index out of sync for slot {slot} ({occ.registration_number})."
                    )
            if not self._free.consistent() or not self._free.is_heap():
                raise InvariantViolation("Free-slot heap is corrupted.")

    # --------------------------
    # Helpers
    # --------------------------

    def _check_initialized(self) -> None:
        if not self._initialized:
            raise NotInitializedError("Parking lot has not been initialized. Please create it first.")

    def _bind(self, slot: int, occupant: Occupant) -> None:
        if slot in self._occupied or occupant.registration_number in self._by_registration:
            raise InvariantViolation(f"Slot {slot} handed out while still bound.")
        self._occupied[slot] = occupant
        self._by_registration[occupant.registration_number] = slot

    def _unbind(self, slot: int) -> Occupant:
        occupant = self._occupied[slot]
        if self._by_registration.get(occupant.registration_number) != slot:
            raise InvariantViolation(f"Registration index out of sync for slot {slot}.")
        del self._occupied[slot]
        del self._by_registration[occupant.registration_number]
        return occupant

    def _after_mutation(self) -> None:
        if self._strict:
            self.check_invariants()
