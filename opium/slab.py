"""Slab allocator handing out fixed-size slots from power-of-two pages."""

from typing import Callable, Dict, List, Optional

from opium.bits import round_of_two
from opium.dlist import ListHead
from opium.log import Log
from opium.slab_page import (
    MASK_BITS,
    PAGE_BUSY,
    PAGE_HEADER_SIZE,
    SLOT_HEADER,
    SlabPage,
    SlabStats,
    Slot,
    allocate_block,
    page_init_mask,
    page_one_used,
)

PAGE_SIZE = 4096
"""Smallest block of memory requested at once."""

PAGE_MIN = 8
"""Fewest items a shrunk page must still hold."""


class Slab:
    """Allocator for objects of one fixed size.

    Pages move between three lists: ``empty`` (no slot in use),
    ``partial`` (some slots in use) and ``full`` (every slot in use).
    Memory is obtained in blocks of ``pages_per_alloc`` bytes; the first
    page of a block is its boss and counts how many pages of the block
    are in use. When the last used slot of a block is freed, the whole
    block is released.
    """

    def __init__(self, item_size: int, log: Optional[Log] = None):
        if item_size < 1:
            raise ValueError(f"item size must be at least 1, got {item_size}")

        self.log = log
        self.item_size = item_size + SLOT_HEADER
        self.item_count = MASK_BITS

        needed = PAGE_HEADER_SIZE + self.item_count * self.item_size
        self.page_size = round_of_two(needed)

        if self.page_size != needed:
            shrunk_page = self.page_size >> 1
            shrunk_data = shrunk_page - PAGE_HEADER_SIZE
            if PAGE_HEADER_SIZE < shrunk_page and shrunk_data > self.item_size * PAGE_MIN:
                self.page_size = shrunk_page
                self.item_count = shrunk_data // self.item_size

        self.pages_per_alloc = max(self.page_size, PAGE_SIZE)

        self.empty = ListHead()
        self.partial = ListHead()
        self.full = ListHead()
        self.stats = SlabStats()

        self._blocks: Dict[SlabPage, List[SlabPage]] = {}
        self._closed = False

        if log is not None:
            log.debug(
                f"Slab initialization: item_size: {self.item_size}, "
                f"item_count: {self.item_count} data_offset: {PAGE_HEADER_SIZE}, "
                f"page_size: {self.page_size}\n"
            )

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("slab has been closed")

    def _new_slot(self, page: SlabPage) -> Slot:
        free_bits = ~page.mask & PAGE_BUSY
        index = (free_bits & -free_bits).bit_length() - 1
        page.mask |= 1 << index

        if page.mask == PAGE_BUSY:
            page.head.delete()
            self.full.add(page.head)

        self.stats.used += 1

        slot = page.slot(index)
        slot.header = index
        return slot

    def alloc(self) -> Slot:
        """Return a free slot, taking memory for a new block if needed."""
        self._check_open()
        self.stats.reqs += 1

        page = self.partial.first()
        if page is not None:
            return self._new_slot(page)

        page = self.empty.first()
        if page is not None:
            page.head.delete()
            self.partial.add(page.head)
            page.mask = page_init_mask(self.item_count)
            boss = page if page.refcount != 0 else page.boss
            boss.refcount += 1
            return self._new_slot(page)

        try:
            pages = allocate_block(
                self.pages_per_alloc, self.page_size, self.item_size, self.item_count
            )
        except MemoryError:
            self.stats.fails += 1
            if self.log is not None:
                self.log.err("Failed to allocate slab block!\n")
            raise

        boss = pages[0]
        boss.refcount = 1
        self.partial.add(boss.head)
        for slave in pages[1:]:
            self.empty.add(slave.head)

        self._blocks[boss] = pages
        self.stats.total += self.item_count * len(pages)

        return self._new_slot(boss)

    def calloc(self) -> Slot:
        """Return a free slot whose payload is zeroed."""
        slot = self.alloc()
        slot.write(bytes(slot.size))
        return slot

    def _block_of(self, page: SlabPage) -> List[SlabPage]:
        owner = page.boss if page.boss is not None else page
        block = self._blocks.get(owner)
        if block is None or not any(member is page for member in block):
            raise ValueError("slot does not belong to this slab")
        return block

    def free(self, slot: Slot) -> None:
        """Give ``slot`` back to the slab."""
        self._check_open()
        page = slot.page
        block = self._block_of(page)
        bit = 1 << slot.index
        if not page.mask & bit:
            raise ValueError(f"slot {slot.index} is not allocated")

        self.stats.reqs += 1
        boss = page if page.refcount != 0 else page.boss

        if page.mask == PAGE_BUSY:
            page.mask &= ~bit
            page.head.delete()
            self.partial.add(page.head)
        elif page_one_used(page.mask, self.item_count):
            page.mask &= ~bit
            if boss.refcount == 1:
                for member in block:
                    if member.head.is_linked():
                        member.head.delete()
                del self._blocks[boss]
                self.stats.total -= self.item_count * len(block)
            else:
                if page.head.is_linked():
                    page.head.delete()
                self.empty.add(page.head)
                boss.refcount -= 1
        else:
            page.mask &= ~bit

        self.stats.used -= 1

    def traverse(self, func: Callable[[Slot], object]) -> None:
        """Call ``func`` on every slot in use: partial pages first, then full ones."""
        self._check_open()
        usable = (1 << self.item_count) - 1

        for page in self.partial:
            mask = page.mask & usable
            while mask:
                index = (mask & -mask).bit_length() - 1
                func(page.slot(index))
                mask &= ~(1 << index)

        for page in self.full:
            for index in range(self.item_count):
                func(page.slot(index))

    def stats(self) -> str:
        """Return a table of counters and boss pages; also written to the debug log."""
        lines = [
            f"{'Slab Stats':>45}\n",
            f"{'':>5} {'Total':>15} {'Used':>15} {'Reqs':>10} {'Fails':>10}\n",
            f"{'':>5} {self.stats.total:>13} {self.stats.used:>16} "
            f"{self.stats.reqs:>10} {self.stats.fails:>10}\n",
            f"{'Slab Chunks':>45}\n",
            f"{'':>5} {'Schunk':>15} {'Type':>15} {'Refcount':>10} {'Used':>10} {'Free':>10}\n",
        ]

        usable = (1 << self.item_count) - 1
        for label, head in (("Empty", self.empty), ("Partial", self.partial), ("Full", self.full)):
            for page in head:
                if page.refcount == 0:
                    continue
                used = bin(page.mask & usable).count("1")
                free = self.item_count - used
                lines.append(
                    f"{'Address:':>10} {id(page):#x} {label:>12} {page.refcount:>6} "
                    f"{used:>12} {free:>10}\n"
                )

        text = "".join(lines)
        if self.log is not None:
            self.log.debug_inline(text)
        return text

    def close(self) -> None:
        """Release every block and reset the slab; it cannot be used afterwards."""
        for head in (self.empty, self.partial, self.full):
            for page in head:
                if page.head.is_linked():
                    page.head.delete()

        self._blocks.clear()
        self.page_size = self.pages_per_alloc = 0
        self.item_size = self.item_count = 0
        self.stats.zero()
        self.log = None
        self._closed = True