"""Small bit-level helpers: byte order, power-of-two rounding, integer log2."""

import sys

PTR_SIZE = 8
"""Width in bytes of the machine word the allocators model."""

RET_OK = 0
RET_ERR = -1
RET_FULL = -2


def is_little_endian() -> bool:
    """Return True when the running machine stores the low byte first."""
    return sys.byteorder == "little"


def round_of_two(x: int) -> int:
    """Round ``x`` up to the nearest power of two (``x`` itself if already one)."""
    if x < 1:
        raise ValueError(f"cannot round {x} to a power of two")
    return 1 << (x - 1).bit_length()


def log2(x: int) -> int:
    """Return the integer base-2 logarithm of ``x`` (index of its highest set bit)."""
    if x < 1:
        raise ValueError(f"log2 is undefined for {x}")
    return x.bit_length() - 1