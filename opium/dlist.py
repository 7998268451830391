"""Intrusive circular doubly linked list."""

from typing import Any, Iterator, Optional


class ListHead:
    """A list link embedded in ``owner``; a link with no owner acts as a list head.

    A freshly created link points at itself, forming an empty list. Deleting
    a link clears its pointers so it reports as unlinked.
    """

    __slots__ = ("owner", "next", "prev")

    def __init__(self, owner: Any = None):
        self.owner = owner
        self.next: Optional["ListHead"] = self
        self.prev: Optional["ListHead"] = self

    @staticmethod
    def _insert(entry: "ListHead", prev: "ListHead", nxt: "ListHead") -> None:
        if prev.next is not nxt or nxt.prev is not prev:
            return
        nxt.prev = entry
        entry.next = nxt
        entry.prev = prev
        prev.next = entry

    def _require_linked(self) -> None:
        if self.next is None or self.prev is None:
            raise ValueError("list head has been deleted")

    def add(self, entry: "ListHead") -> None:
        """Insert ``entry`` right after this link (at the front of the list)."""
        self._require_linked()
        self._insert(entry, self, self.next)

    def add_tail(self, entry: "ListHead") -> None:
        """Insert ``entry`` right before this link (at the back of the list)."""
        self._require_linked()
        self._insert(entry, self.prev, self)

    def delete(self) -> None:
        """Unlink this entry from whatever list holds it."""
        self._require_linked()
        self.next.prev = self.prev
        self.prev.next = self.next
        self.next = None
        self.prev = None

    def is_empty(self) -> bool:
        return self.next is self

    def is_linked(self) -> bool:
        return self.next is not None and self.prev is not None

    def first(self) -> Any:
        """Return the owner of the first entry, or None if the list is empty."""
        if self.next is None or self.is_empty():
            return None
        return self.next.owner

    def __iter__(self) -> Iterator[Any]:
        """Yield entry owners front to back; the current entry may be deleted."""
        node = self.next
        while node is not None and node is not self:
            following = node.next
            yield node.owner
            node = following