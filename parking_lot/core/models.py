from __future__ import annotations

"""Modelos del asignador (DTOs) en formato simple.

Se usan desde el servicio y desde la capa HTTP. `to_dict` produce la forma
JSON del API (claves camelCase).
"""

from dataclasses import dataclass
from typing import Dict, Any


@dataclass(frozen=True)
class Occupant:
    """Vehiculo que ocupa una plaza."""
    registration_number: str
    color: str


@dataclass(frozen=True)
class ParkedCar:
    """Plaza ocupada junto con su ocupante."""
    slot_number: int
    registration_number: str
    color: str

    @staticmethod
    def from_occupant(slot_number: int, occupant: Occupant) -> "ParkedCar":
        return ParkedCar(slot_number, occupant.registration_number, occupant.color)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slotNumber": self.slot_number,
            "registrationNumber": self.registration_number,
            "color": self.color,
        }


@dataclass(frozen=True)
class CapacityChange:
    """Resultado de ampliar el aparcamiento."""
    old_capacity: int
    new_capacity: int

    @property
    def added(self) -> int:
        return self.new_capacity - self.old_capacity


@dataclass(frozen=True)
class LotState:
    """Foto de diagnostico del aparcamiento.

    Campos:
    - total_slots: plazas numeradas 1..total_slots
    - initialized: si ya se llamo a initialize
    - occupied_count / available_count: reparto actual de plazas
    """
    total_slots: int
    initialized: bool
    occupied_count: int
    available_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalSlots": self.total_slots,
            "isInitialized": self.initialized,
            "occupiedCount": self.occupied_count,
            "availableCount": self.available_count,
        }
