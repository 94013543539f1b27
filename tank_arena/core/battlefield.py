"""Bounded arena with a fixed grid of start slots."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from tank_arena.core.rng import RandomStream


@dataclass
class StartSlot:
    """A spawn position on the battlefield."""

    x: float
    y: float
    taken: bool = False


class Battlefield:
    """Rectangular arena that hands out free start slots."""

    def __init__(
        self,
        rng: RandomStream,
        *,
        slot_margin: float = 50.0,
        slot_spacing: float = 100.0,
    ) -> None:
        self._rng = rng
        self.slot_margin = slot_margin
        self.slot_spacing = slot_spacing
        self.width = 0.0
        self.height = 0.0
        self._slots: List[StartSlot] = []

    @property
    def is_initialized(self) -> bool:
        return self.width > 0 and self.height > 0

    @property
    def slot_count(self) -> int:
        return len(self._slots)

    @property
    def free_slot_count(self) -> int:
        return sum(1 for slot in self._slots if not slot.taken)

    @property
    def slots(self) -> Tuple[StartSlot, ...]:
        return tuple(self._slots)

    def set_size(self, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Battlefield size must be positive, got {width}x{height}")
        self.width = float(width)
        self.height = float(height)
        self._slots = self._layout_slots()

    def _layout_slots(self) -> List[StartSlot]:
        slots: List[StartSlot] = []
        y = self.slot_margin
        while y <= self.height - self.slot_margin:
            x = self.slot_margin
            while x <= self.width - self.slot_margin:
                slots.append(StartSlot(x, y))
                x += self.slot_spacing
            y += self.slot_spacing
        return slots

    def get_start_slot(self) -> Optional[StartSlot]:
        """Reserve a random free slot, or return ``None`` when all are taken."""

        free = [slot for slot in self._slots if not slot.taken]
        if not free:
            return None
        slot = free[self._rng.randrange(len(free))]
        slot.taken = True
        return slot

    def contains(self, x: float, y: float, radius: float = 0.0) -> bool:
        return (
            radius <= x <= self.width - radius
            and radius <= y <= self.height - radius
        )

    def clamp(self, x: float, y: float, radius: float = 0.0) -> Tuple[float, float]:
        return (
            max(radius, min(self.width - radius, x)),
            max(radius, min(self.height - radius, y)),
        )


__all__ = ["Battlefield", "StartSlot"]
