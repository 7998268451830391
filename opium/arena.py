"""Size-class arena built from a family of power-of-two slabs."""

from typing import List, Optional

from opium.bits import log2, round_of_two
from opium.log import Log
from opium.slab import Slab
from opium.slab_page import Slot

ARENA_MIN_SHIFT = 4
"""Smallest size class is ``1 << ARENA_MIN_SHIFT`` bytes."""

ARENA_MAX_SHIFT = 16
"""Largest size class is ``1 << ARENA_MAX_SHIFT`` bytes."""


class Arena:
    """Allocator for arbitrary sizes that routes each request to a slab.

    Requests are rounded up to a power of two and served by the slab of
    that size. The index of the serving slab is stored in the slot header,
    so a slot can be given back without searching for its slab.
    """

    def __init__(self, log: Optional[Log] = None):
        self.min_shift = ARENA_MIN_SHIFT
        self.max_shift = ARENA_MAX_SHIFT
        self.min_size = 1 << self.min_shift
        self.shift_count = self.max_shift - self.min_shift + 1
        self.slabs: List[Slab] = [
            Slab(1 << (self.min_shift + index), log) for index in range(self.shift_count)
        ]
        self.log = log
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("arena has been closed")

    @property
    def max_size(self) -> int:
        """Largest request the arena can serve."""
        return 1 << self.max_shift

    def alloc(self, size: int) -> Slot:
        """Return a slot holding at least ``size`` bytes."""
        self._check_open()
        if size <= 1:
            raise ValueError(f"allocation size must be greater than 1, got {size}")
        if size > self.max_size:
            raise ValueError(f"allocation size {size} exceeds the largest class {self.max_size}")

        rounded = max(round_of_two(size), self.min_size)
        index = log2(rounded) - self.min_shift

        slot = self.slabs[index].alloc()
        slot.header = index

        if self.log is not None:
            self.log.debug(f"Arena alloc: size: {size}, class: {rounded}, slab: {index}\n")
        return slot

    def calloc(self, size: int) -> Slot:
        """Return a slot of at least ``size`` bytes whose first ``size`` bytes are zero."""
        slot = self.alloc(size)
        slot.write(bytes(size))
        return slot

    def free(self, slot: Slot) -> None:
        """Give ``slot`` back to the slab that handed it out."""
        self._check_open()
        index = slot.header
        if not 0 <= index < self.shift_count:
            raise ValueError(f"slot header names no slab of this arena: {index}")

        if self.log is not None:
            self.log.debug(f"Arena free: slab: {index}\n")
        self.slabs[index].free(slot)

    def close(self) -> None:
        """Release every slab; the arena cannot be used afterwards."""
        for slab in self.slabs:
            slab.close()
        self.slabs = []
        self.min_size = 0
        self.shift_count = self.min_shift = self.max_shift = 0
        self.log = None
        self._closed = True