"""Slab pages, slots and slot bitmasks shared by the slab allocator."""

from dataclasses import dataclass, field
from typing import List, Optional

from opium.dlist import ListHead

MASK_BITS = 64
PAGE_FREE = 0
PAGE_BUSY = (1 << MASK_BITS) - 1
SLOT_HEADER = 1
PAGE_HEADER_SIZE = 40
"""Bytes of page bookkeeping that precede the slot data in a page."""


def page_init_mask(count: int) -> int:
    """Return the initial mask for a page of ``count`` slots.

    The low ``count`` bits are clear (free slots); every bit above them is
    set, so a page whose slots are all taken has a mask equal to PAGE_BUSY.
    """
    if not 0 <= count <= MASK_BITS:
        raise ValueError(f"slot count must be between 0 and {MASK_BITS}, got {count}")
    return PAGE_BUSY ^ ((1 << count) - 1)


def page_one_used(mask: int, count: int) -> bool:
    """Return True if exactly one of the low ``count`` slots is in use."""
    if not 0 <= count <= MASK_BITS:
        raise ValueError(f"slot count must be between 0 and {MASK_BITS}, got {count}")
    relevant = mask & ((1 << count) - 1)
    return relevant != 0 and relevant & (relevant - 1) == 0


@dataclass
class SlabStats:
    """Counters kept by a slab allocator."""

    total: int = 0
    used: int = 0
    reqs: int = 0
    fails: int = 0

    def zero(self) -> None:
        self.total = self.used = self.reqs = self.fails = 0


class SlabPage:
    """A page holding ``item_count`` fixed-size slots.

    ``item_size`` includes the one-byte slot header. A page whose
    ``refcount`` is non-zero owns its block (the boss); other pages point
    at the boss page through ``boss``.
    """

    def __init__(self, item_size: int, item_count: int, boss: Optional["SlabPage"] = None):
        if item_size < SLOT_HEADER:
            raise ValueError(f"item size must be at least {SLOT_HEADER}, got {item_size}")
        self.item_size = item_size
        self.item_count = item_count
        self.boss = boss
        self.mask = page_init_mask(item_count)
        self.refcount = 0
        self.head = ListHead(self)
        self.data = bytearray(item_size * item_count)

    def slot(self, index: int) -> "Slot":
        if not 0 <= index < self.item_count:
            raise IndexError(f"slot {index} out of range for {self.item_count} slots")
        return Slot(self, index)

    def __repr__(self) -> str:
        return (
            f"SlabPage(item_size={self.item_size}, item_count={self.item_count}, "
            f"mask={self.mask:#x}, refcount={self.refcount})"
        )


@dataclass(unsafe_hash=True)
class Slot:
    """A handle on one slot of a page: a header byte followed by the payload."""

    page: SlabPage = field(compare=True)
    index: int = field(compare=True)

    @property
    def _offset(self) -> int:
        return self.index * self.page.item_size

    @property
    def size(self) -> int:
        """Number of payload bytes the slot holds."""
        return self.page.item_size - SLOT_HEADER

    @property
    def header(self) -> int:
        return self.page.data[self._offset]

    @header.setter
    def header(self, value: int) -> None:
        self.page.data[self._offset] = value

    def read(self) -> bytes:
        start = self._offset + SLOT_HEADER
        return bytes(self.page.data[start:start + self.size])

    def write(self, data) -> None:
        """Copy ``data`` to the start of the payload."""
        payload = bytes(data)
        if len(payload) > self.size:
            raise ValueError(f"{len(payload)} bytes do not fit in a {self.size}-byte slot")
        start = self._offset + SLOT_HEADER
        self.page.data[start:start + len(payload)] = payload


def allocate_block(size: int, page_size: int, item_size: int, item_count: int) -> List[SlabPage]:
    """Carve a block of ``size`` bytes into pages of ``page_size`` bytes.

    The first page returned is the boss; the others point at it.
    """
    if page_size <= 0:
        raise ValueError(f"page size must be positive, got {page_size}")
    if size < page_size:
        raise ValueError(f"block of {size} bytes cannot hold a {page_size}-byte page")
    if PAGE_HEADER_SIZE + item_size * item_count > page_size:
        raise ValueError(f"{item_count} items of {item_size} bytes do not fit in {page_size} bytes")
    boss = SlabPage(item_size, item_count, None)
    pages = [boss]
    pages.extend(SlabPage(item_size, item_count, boss) for _ in range(size // page_size - 1))
    return pages