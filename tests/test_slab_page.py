import pytest

from opium.slab_page import (
    PAGE_BUSY,
    SLOT_HEADER,
    SlabPage,
    SlabStats,
    Slot,
    allocate_block,
    page_init_mask,
    page_one_used,
)


def test_init_mask_marks_high_bits_busy():
    mask = page_init_mask(5)
    assert mask & 0b11111 == 0
    assert mask | 0b11111 == PAGE_BUSY


def test_init_mask_extremes():
    assert page_init_mask(0) == PAGE_BUSY
    assert page_init_mask(64) == 0


@pytest.mark.parametrize("count", [-1, 65])
def test_init_mask_rejects_bad_count(count):
    with pytest.raises(ValueError):
        page_init_mask(count)


def test_one_used():
    assert page_one_used(0b100, 8) is True
    assert page_one_used(0b110, 8) is False
    assert page_one_used(0, 8) is False


def test_one_used_ignores_unavailable_bits():
    assert page_one_used(page_init_mask(8) | 1, 8) is True
    assert page_one_used(page_init_mask(8), 8) is False


def test_stats_zero():
    stats = SlabStats(total=3, used=2, reqs=9, fails=1)
    stats.zero()
    assert stats == SlabStats()


def test_new_page_state():
    page = SlabPage(17, 10, None)
    assert page.mask == page_init_mask(10)
    assert page.refcount == 0
    assert page.boss is None
    assert len(page.data) == 170
    assert page.head.owner is page


def test_slot_round_trip():
    page = SlabPage(9, 4, None)
    slot = page.slot(2)
    assert slot.size == 9 - SLOT_HEADER
    slot.write(b"abc")
    assert slot.read()[:3] == b"abc"
    assert len(slot.read()) == slot.size


def test_slots_do_not_overlap():
    page = SlabPage(5, 3, None)
    page.slot(0).write(b"\xff" * 4)
    page.slot(0).header = 7
    assert page.slot(1).read() == bytes(4)
    assert page.slot(1).header == 0
    assert page.slot(0).header == 7


def test_header_range_enforced():
    slot = SlabPage(5, 3, None).slot(1)
    slot.header = 255
    assert slot.header == 255
    with pytest.raises(ValueError):
        slot.header = 256
    assert slot.header == 255


def test_write_too_long_raises():
    slot = SlabPage(5, 3, None).slot(0)
    with pytest.raises(ValueError):
        slot.write(b"12345")


def test_slot_out_of_range():
    page = SlabPage(5, 3, None)
    with pytest.raises(IndexError):
        page.slot(3)
    with pytest.raises(IndexError):
        page.slot(-1)


def test_slot_equality_and_hash():
    page = SlabPage(5, 3, None)
    assert page.slot(1) == Slot(page, 1)
    assert len({page.slot(1), page.slot(1), page.slot(2)}) == 2


def test_item_size_must_hold_header():
    with pytest.raises(ValueError):
        SlabPage(0, 3, None)


def test_allocate_block_boss_and_slaves():
    pages = allocate_block(4096, 512, 9, 40)
    assert len(pages) == 4096 // 512
    boss = pages[0]
    assert boss.boss is None
    assert all(page.boss is boss for page in pages[1:])
    assert all(page.mask == page_init_mask(40) for page in pages)


def test_allocate_block_single_page():
    pages = allocate_block(8192, 8192, 129, 63)
    assert len(pages) == 1


@pytest.mark.parametrize(
    "size, page_size, item_size, item_count",
    [(256, 512, 9, 8), (4096, 0, 9, 8), (4096, 64, 9, 8)],
)
def test_allocate_block_errors(size, page_size, item_size, item_count):
    with pytest.raises(ValueError):
        allocate_block(size, page_size, item_size, item_count)