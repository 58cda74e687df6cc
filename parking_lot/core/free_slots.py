"""Conjunto de plazas libres con extraccion del minimo.

Cola de prioridad sobre `heapq` mas un `set` espejo para pertenencia O(1).
El `set` permite detectar dobles liberaciones, que serian un fallo interno
del asignador y no un error del usuario.
"""

from __future__ import annotations

import heapq
from typing import Iterable

from parking_lot.core.errors import InvariantViolation


class FreeSlots:
    def __init__(self, slots: Iterable[int] = ()) -> None:
        self._heap: list[int] = []
        self._members: set[int] = set()
        for s in slots:
            self.push(s)

    @classmethod
    def from_range(cls, first: int, last: int) -> "FreeSlots":
        """Plazas first..last (ambas incluidas). Un rango ordenado ya es un heap."""
        fs = cls()
        fs._heap = list(range(first, last + 1))
        fs._members = set(fs._heap)
        return fs

    def __len__(self) -> int:
        return len(self._heap)

    def __contains__(self, slot: object) -> bool:
        return slot in self._members

    def push(self, slot: int) -> None:
        if slot in self._members:
            raise InvariantViolation(f"La plaza {slot} ya estaba libre.")
        heapq.heappush(self._heap, slot)
        self._members.add(slot)

    def extend(self, first: int, last: int) -> None:
        # Valores mayores que cualquier plaza existente: se anaden al final sin romper el heap
        for slot in range(first, last + 1):
            self.push(slot)

    def pop_min(self) -> int:
        if not self._heap:
            raise InvariantViolation("Se pidio una plaza con el conjunto de libres vacio.")
        slot = heapq.heappop(self._heap)
        self._members.discard(slot)
        return slot

    def snapshot(self) -> list[int]:
        """Plazas libres en orden ascendente (copia)."""
        return sorted(self._heap)

    def is_heap(self) -> bool:
        h = self._heap
        return all(h[(i - 1) // 2] <= h[i] for i in range(1, len(h)))

    def consistent(self) -> bool:
        return len(self._heap) == len(self._members) and set(self._heap) == self._members
