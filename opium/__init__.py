"""Slab and arena allocators, an intrusive list, a red-black tree, djb2 hashing and logging."""

__version__ = "0.1.0"
__all__ = ["arena", "bits", "dlist", "hashfuncs", "log", "rbt", "slab", "slab_page"]