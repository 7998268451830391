import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from opium.rbt import Color, RedBlackTree


def _check(tree):
    """Verify the red-black rules and ordering; return the black height."""
    nil = tree.sentinel
    assert nil.is_black
    assert tree.head.is_black

    def walk(node, low, high):
        if node is nil:
            return 1
        if low is not None:
            assert node.key > low
        if high is not None:
            assert node.key < high
        for child in (node.left, node.right):
            if child is not nil:
                assert child.parent is node
        if node.is_red:
            assert node.left.is_black
            assert node.right.is_black
        left = walk(node.left, low, node.key)
        right = walk(node.right, node.key, high)
        assert left == right
        return left + (1 if node.is_black else 0)

    if tree.head is not nil:
        assert tree.head.parent is nil
    return walk(tree.head, None, None)


def test_empty_tree():
    tree = RedBlackTree(None)
    assert len(tree) == 0
    assert list(tree) == []
    assert tree.search(5) is None
    assert 5 not in tree


def test_insert_returns_node_with_data():
    tree = RedBlackTree(None)
    node = tree.insert(10, "ten")
    assert node.key == 10
    assert node.data == "ten"
    assert tree.search(10) is node
    assert tree.head is node
    assert node.color is Color.BLACK


def test_ascending_inserts_stay_balanced():
    tree = RedBlackTree(None)
    for key in range(200):
        tree.insert(key, key * 2)
    _check(tree)
    assert list(tree) == list(range(200))
    assert len(tree) == 200


def test_duplicate_insert_replaces_data():
    tree = RedBlackTree(None)
    first = tree.insert(7, "a")
    second = tree.insert(7, "b")
    assert first is second
    assert len(tree) == 1
    assert tree.search(7).data == "b"


def test_delete_missing_key_returns_false():
    tree = RedBlackTree(None)
    tree.insert(1, None)
    assert tree.delete(2) is False
    assert list(tree) == [1]


def test_delete_all_keys():
    tree = RedBlackTree(None)
    keys = [50, 20, 80, 10, 30, 70, 90, 25, 35, 5]
    for key in keys:
        tree.insert(key, str(key))
    for key in keys:
        assert tree.delete(key) is True
        assert key not in tree
        _check(tree)
    assert len(tree) == 0
    assert tree.head is tree.sentinel


def test_items_in_order():
    tree = RedBlackTree(None)
    for key in (3, 1, 2):
        tree.insert(key, key * 10)
    assert list(tree.items()) == [(1, 10), (2, 20), (3, 30)]


def test_closed_tree_rejects_use():
    tree = RedBlackTree(None)
    tree.insert(1, None)
    tree.close()
    assert len(tree) == 0
    with pytest.raises(RuntimeError):
        tree.insert(2, None)
    with pytest.raises(RuntimeError):
        tree.delete(1)


@settings(max_examples=60)
@given(st.lists(st.tuples(st.booleans(), st.integers(0, 60)), max_size=150))
def test_matches_dict_model(ops):
    tree = RedBlackTree(None)
    model = {}
    for is_insert, key in ops:
        if is_insert:
            tree.insert(key, -key)
            model[key] = -key
        else:
            assert tree.delete(key) is (key in model)
            model.pop(key, None)
        _check(tree)
    assert list(tree.items()) == sorted(model.items())
    assert len(tree) == len(model)