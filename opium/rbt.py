"""Red-black tree keyed by mutually comparable keys.

The tree keeps these rules after every insertion and deletion:

1. every node is red or black;
2. the root is black;
3. the sentinel leaf is black;
4. a red node has no red children;
5. every path from a node down to the leaves passes the same number of
   black nodes.
"""

from enum import Enum
from typing import Any, Iterator, Optional, Tuple

from opium.log import Log


class Color(Enum):
    BLACK = 0
    RED = 1


class RBNode:
    """One node of a red-black tree."""

    __slots__ = ("key", "data", "color", "parent", "left", "right")

    def __init__(self, key: Any = None, data: Any = None, color: Color = Color.BLACK):
        self.key = key
        self.data = data
        self.color = color
        self.parent: "RBNode" = self
        self.left: "RBNode" = self
        self.right: "RBNode" = self

    @property
    def is_red(self) -> bool:
        return self.color is Color.RED

    @property
    def is_black(self) -> bool:
        return self.color is Color.BLACK

    def __repr__(self) -> str:
        return f"RBNode(key={self.key!r}, data={self.data!r}, color={self.color.name})"


class RedBlackTree:
    """An ordered map from keys to data, balanced as a red-black tree.

    Inserting a key that is already present replaces its data. Every leaf
    and the parent of the root is the shared black ``sentinel`` node.
    """

    def __init__(self, log: Optional[Log] = None):
        self.sentinel = RBNode()
        self.head = self.sentinel
        self.log = log
        self._size = 0
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("tree has been closed")

    # Rotations

    def _left_rotate(self, y: RBNode) -> RBNode:
        nil = self.sentinel
        x = y.right
        if x is nil:
            return y
        y.right = x.left
        if x.left is not nil:
            x.left.parent = y
        x.parent = y.parent
        if y.parent is nil:
            self.head = x
        elif y is y.parent.left:
            y.parent.left = x
        else:
            y.parent.right = x
        x.left = y
        y.parent = x
        return x

    def _right_rotate(self, y: RBNode) -> RBNode:
        nil = self.sentinel
        x = y.left
        if x is nil:
            return y
        y.left = x.right
        if x.right is not nil:
            x.right.parent = y
        x.parent = y.parent
        if y.parent is nil:
            self.head = x
        elif y is y.parent.right:
            y.parent.right = x
        else:
            y.parent.left = x
        x.right = y
        y.parent = x
        return x

    # Lookup

    def _find(self, key: Any) -> RBNode:
        node = self.head
        while node is not self.sentinel:
            if key < node.key:
                node = node.left
            elif key > node.key:
                node = node.right
            else:
                return node
        return self.sentinel

    def search(self, key: Any) -> Optional[RBNode]:
        """Return the node holding ``key``, or None if it is absent."""
        self._check_open()
        node = self._find(key)
        return None if node is self.sentinel else node

    def __contains__(self, key: Any) -> bool:
        return self.search(key) is not None

    def __len__(self) -> int:
        return self._size

    def _nodes(self) -> Iterator[RBNode]:
        nil = self.sentinel
        stack = []
        node = self.head
        while stack or node is not nil:
            while node is not nil:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node
            node = node.right

    def __iter__(self) -> Iterator[Any]:
        """Yield keys in ascending order."""
        self._check_open()
        for node in self._nodes():
            yield node.key

    def items(self) -> Iterator[Tuple[Any, Any]]:
        """Yield ``(key, data)`` pairs in ascending key order."""
        self._check_open()
        for node in self._nodes():
            yield node.key, node.data

    # Insertion

    def insert(self, key: Any, data: Any = None) -> RBNode:
        """Store ``data`` under ``key`` and return the node holding it."""
        self._check_open()
        nil = self.sentinel
        parent = nil
        current = self.head
        while current is not nil:
            parent = current
            if key < current.key:
                current = current.left
            elif key > current.key:
                current = current.right
            else:
                current.data = data
                return current

        node = RBNode(key, data, Color.RED)
        node.parent = parent
        node.left = node.right = nil
        if parent is nil:
            self.head = node
        elif key < parent.key:
            parent.left = node
        else:
            parent.right = node

        self._insert_fixup(node)
        self._size += 1
        return node

    def _insert_fixup(self, node: RBNode) -> None:
        while node.parent.is_red:
            parent = node.parent
            grand = parent.parent
            if parent is grand.right:
                uncle = grand.left
                if uncle.is_red:
                    parent.color = uncle.color = Color.BLACK
                    grand.color = Color.RED
                    node = grand
                    continue
                if node is parent.left:
                    node = parent
                    self._right_rotate(node)
                node.parent.color = Color.BLACK
                node.parent.parent.color = Color.RED
                self._left_rotate(node.parent.parent)
            else:
                uncle = grand.right
                if uncle.is_red:
                    parent.color = uncle.color = Color.BLACK
                    grand.color = Color.RED
                    node = grand
                    continue
                if node is parent.right:
                    node = parent
                    self._left_rotate(node)
                node.parent.color = Color.BLACK
                node.parent.parent.color = Color.RED
                self._right_rotate(node.parent.parent)
        self.head.color = Color.BLACK

    # Deletion

    def _transplant(self, old: RBNode, new: RBNode) -> None:
        if old.parent is self.sentinel:
            self.head = new
        elif old is old.parent.left:
            old.parent.left = new
        else:
            old.parent.right = new
        new.parent = old.parent

    def _minimum(self, node: RBNode) -> RBNode:
        while node.left is not self.sentinel:
            node = node.left
        return node

    def delete(self, key: Any) -> bool:
        """Remove ``key``; return False if it was not in the tree."""
        self._check_open()
        nil = self.sentinel
        node = self._find(key)
        if node is nil:
            return False

        removed_color = node.color
        if node.left is nil:
            child = node.right
            self._transplant(node, node.right)
        elif node.right is nil:
            child = node.left
            self._transplant(node, node.left)
        else:
            successor = self._minimum(node.right)
            removed_color = successor.color
            child = successor.right
            if successor.parent is node:
                child.parent = successor
            else:
                self._transplant(successor, successor.right)
                successor.right = node.right
                successor.right.parent = successor
            self._transplant(node, successor)
            successor.left = node.left
            successor.left.parent = successor
            successor.color = node.color

        if removed_color is Color.BLACK:
            self._delete_fixup(child)

        # The sentinel may have been given a parent during the fix-up.
        nil.parent = nil.left = nil.right = nil
        nil.color = Color.BLACK
        self._size -= 1
        return True

    def _delete_fixup(self, node: RBNode) -> None:
        while node is not self.head and node.is_black:
            parent = node.parent
            if node is parent.left:
                sibling = parent.right
                if sibling.is_red:
                    sibling.color = Color.BLACK
                    parent.color = Color.RED
                    self._left_rotate(parent)
                    sibling = parent.right
                if sibling.left.is_black and sibling.right.is_black:
                    sibling.color = Color.RED
                    node = parent
                    continue
                if sibling.right.is_black:
                    sibling.left.color = Color.BLACK
                    sibling.color = Color.RED
                    self._right_rotate(sibling)
                    sibling = parent.right
                sibling.color = parent.color
                parent.color = Color.BLACK
                sibling.right.color = Color.BLACK
                self._left_rotate(parent)
                node = self.head
            else:
                sibling = parent.left
                if sibling.is_red:
                    sibling.color = Color.BLACK
                    parent.color = Color.RED
                    self._right_rotate(parent)
                    sibling = parent.left
                if sibling.right.is_black and sibling.left.is_black:
                    sibling.color = Color.RED
                    node = parent
                    continue
                if sibling.left.is_black:
                    sibling.right.color = Color.BLACK
                    sibling.color = Color.RED
                    self._left_rotate(sibling)
                    sibling = parent.left
                sibling.color = parent.color
                parent.color = Color.BLACK
                sibling.left.color = Color.BLACK
                self._right_rotate(parent)
                node = self.head
        node.color = Color.BLACK

    def close(self) -> None:
        """Drop every node; the tree cannot be used afterwards."""
        self.head = self.sentinel
        self._size = 0
        self.log = None
        self._closed = True