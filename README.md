# opium

Small building blocks for code that manages its own storage.

- `opium.slab.Slab` is a slab allocator for fixed-size slots. It groups slots
  into pages and tracks them with bitmasks. It keeps `empty`, `partial` and
  `full` page lists and counts usage in a `SlabStats` (`total`, `used`,
  `reqs`, `fails`).
- `opium.slab_page` holds the pieces the slab is built from: `SlabPage`,
  `Slot` (a one-byte header followed by the payload, with `read()` and
  `write()`), `SlabStats`, `page_init_mask`, `page_one_used` and
  `allocate_block`.
- `opium.arena.Arena` is a set of slabs for the power-of-two sizes from 16
  bytes to 64 KiB. Each request is rounded up and served by the matching
  slab. The slab's index is stored in the slot header, so `free` finds the
  slab without a search.
- `opium.rbt.RedBlackTree` is an ordered map whose keys can be any
  comparable values. It offers `insert`, `delete`, `search`, `items`,
  iteration in key order, `len` and `in`. Inserting a key that is already
  present replaces its data. `delete` returns `False` for a missing key.
- `opium.dlist.ListHead` is a circular, intrusive doubly linked list.
- `opium.hashfuncs.djb2` is the 64-bit djb2 hash (xor variant) over a
  `str` or over bytes.
- `opium.bits` provides `round_of_two`, `log2` and `is_little_endian`.
- `opium.log.Log` writes debug, warning and error messages to files that are
  opened for appending. A level whose file is not given, or cannot be opened,
  writes to standard output (debug) or to standard error. `log_stdout` and
  `log_stderr` write straight to the console.

## Installation

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Examples

```python
from opium.arena import Arena
from opium.bits import log2, round_of_two
from opium.hashfuncs import djb2
from opium.log import Log
from opium.rbt import RedBlackTree
from opium.slab import Slab

print(round_of_two(33), log2(20))  # 64 4
print(djb2(b"hello"))

with Log("debug.log", "warn.log", "err.log") as log:
    slab = Slab(32, log)
    slot = slab.alloc()
    slot.write(b"hello")
    print(slot.read()[:5])       # b'hello'
    slab.free(slot)
    print(slab.stats())          # also written to the debug log
    slab.close()

    arena = Arena(log)
    block = arena.calloc(100)    # served by the 128-byte slab
    arena.free(block)
    arena.close()

tree = RedBlackTree()
for key in (5, 1, 9):
    tree.insert(key, str(key))
print(list(tree), len(tree), 9 in tree)   # [1, 5, 9] 3 True
print(tree.search(5).data)                # 5
tree.delete(1)
print(list(tree.items()))                 # [(5, '5'), (9, '9')]
tree.close()
```

`Arena.alloc` raises `ValueError` for sizes of 1 or less and for sizes above
64 KiB. `Slab.free` and `Arena.free` raise `ValueError` for a slot that is not
allocated or that does not belong to them. Once `close()` has been called,
slabs, arenas and trees raise `RuntimeError` when they are used.

## What this package does not do

The allocators model slab and arena bookkeeping: pages, bitmasks, page lists
and boss pages. Each page stores its slots in a Python `bytearray`. They do not
hand out raw machine memory or addresses, and they do not map or align memory
from the operating system. The package has no command-line program.