import gc
import math

import pytest
from hypothesis import given, strategies as st

from special_avl import (
    AVLNode, SpecialAVLTree, build_balanced_tree, path_found, to_tuple, upper_mid,
)

DEMO_TEN = [15, 23, 29, 33, 37, 41, 44, 49, 52, 54]


def inorder(node):
    if node is None:
        return []
    return inorder(node.left) + [node.key] + inorder(node.right)


def real_height(node):
    if node is None:
        return 0
    return 1 + max(real_height(node.left), real_height(node.right))


def check_node(node):
    if node is None:
        return
    assert node.height == real_height(node)
    assert abs(real_height(node.left) - real_height(node.right)) <= 1
    check_node(node.left)
    check_node(node.right)


unique_sorted = st.lists(st.integers(-1000, 1000), unique=True, max_size=80).map(sorted)


# ── midpoint rule ────────────────────────────────────────────

@pytest.mark.parametrize("lo, hi, mid", [
    (0, 0, 0), (0, 1, 1), (0, 3, 2), (0, 4, 2), (5, 9, 7), (11, 19, 15),
])
def test_upper_mid_examples(lo, hi, mid):
    assert upper_mid(lo, hi) == mid


@given(st.integers(0, 10_000), st.integers(0, 10_000))
def test_upper_mid_stays_in_range(a, b):
    lo, hi = min(a, b), max(a, b)
    mid = upper_mid(lo, hi)
    assert lo <= mid <= hi
    assert mid == (lo + hi + 1) // 2


# ── build_balanced_tree ──────────────────────────────────────

def test_build_empty_range_is_none():
    assert build_balanced_tree([1, 2, 3], 2, 1) is None


def test_build_picks_upper_middle_root():
    root = build_balanced_tree([1, 2, 3, 4], 0, 3)
    assert root.key == 3
    assert root.left.key == 2
    assert root.left.left.key == 1
    assert root.right.key == 4
    assert root.height == 3


def test_leaf_height_is_one():
    leaf = AVLNode(7)
    assert leaf.height == 1
    assert leaf.left is None and leaf.right is None


@given(unique_sorted)
def test_build_inorder_and_height(keys):
    root = build_balanced_tree(keys, 0, len(keys) - 1)
    assert inorder(root) == keys
    assert real_height(root) == math.ceil(math.log2(len(keys) + 1))
    check_node(root)


def test_build_subrange():
    keys = list(range(10))
    root = build_balanced_tree(keys, 3, 6)
    assert inorder(root) == [3, 4, 5, 6]


# ── insert / remove ──────────────────────────────────────────

def test_new_tree_is_empty():
    tree = SpecialAVLTree()
    assert tree.get_root() is None
    assert len(tree) == 0
    assert tree.height() == 0
    assert tree.inorder() == []
    assert tree.get_search_path(5) == []
    assert not tree.search(5)


def test_insert_keeps_sorted_keys():
    tree = SpecialAVLTree()
    for k in [5, 1, 9, 3]:
        assert tree.insert(k)
    assert tree.keys == [1, 3, 5, 9]
    assert tree.inorder() == [1, 3, 5, 9]


def test_duplicate_insert_is_silent_noop():
    tree = SpecialAVLTree([4, 8])
    before = tree.to_tuple()
    old_root = tree.get_root()
    assert tree.insert(4) is False
    assert tree.keys == [4, 8]
    assert tree.to_tuple() == before
    assert tree.get_root() is old_root


def test_insert_replaces_root_object():
    tree = SpecialAVLTree([1, 2, 3])
    old_root = tree.get_root()
    tree.insert(4)
    assert tree.get_root() is not old_root
    # the old graph is untouched
    assert inorder(old_root) == [1, 2, 3]


def test_remove_absent_is_silent_noop():
    tree = SpecialAVLTree([1, 2, 3])
    before = tree.to_tuple()
    assert tree.remove(42) is False
    assert tree.to_tuple() == before


def test_remove_last_key_empties_tree():
    tree = SpecialAVLTree([7])
    assert tree.remove(7)
    assert tree.get_root() is None
    assert len(tree) == 0


def test_remove_rebuilds_balanced():
    tree = SpecialAVLTree(range(1, 16))
    for k in [1, 2, 3, 4, 5, 6, 7]:
        tree.remove(k)
    assert tree.inorder() == list(range(8, 16))
    check_node(tree.get_root())
    assert tree.height() == 4


@given(st.lists(st.integers(-50, 50), max_size=40), st.integers(-50, 50))
def test_insert_is_idempotent(keys, k):
    once = SpecialAVLTree(keys)
    once.insert(k)
    twice = SpecialAVLTree(keys)
    twice.insert(k)
    twice.insert(k)
    assert once.keys == twice.keys
    assert once.to_tuple() == twice.to_tuple()


@given(st.lists(st.integers(-50, 50), max_size=40), st.integers(-50, 50))
def test_insert_then_remove_restores_tree(keys, k):
    tree = SpecialAVLTree(k2 for k2 in keys if k2 != k)
    keys_before, shape_before = tree.keys, tree.to_tuple()
    tree.insert(k)
    tree.remove(k)
    assert tree.keys == keys_before
    assert tree.to_tuple() == shape_before


@given(st.lists(st.tuples(st.booleans(), st.integers(0, 30)), max_size=60))
def test_random_operations_keep_invariants(ops):
    tree = SpecialAVLTree()
    model = set()
    for is_insert, k in ops:
        if is_insert:
            assert tree.insert(k) == (k not in model)
            model.add(k)
        else:
            assert tree.remove(k) == (k in model)
            model.discard(k)
        assert tree.inorder() == sorted(model)
        check_node(tree.get_root())


# ── search / search path ─────────────────────────────────────

@given(st.lists(st.integers(-100, 100), unique=True, max_size=50),
       st.integers(-120, 120))
def test_search_matches_membership(keys, target):
    tree = SpecialAVLTree(keys)
    for k in keys:
        assert tree.search(k)
        assert tree.get_search_path(k)[-1].key == k
    assert tree.search(target) == (target in keys)
    assert path_found(tree.get_search_path(target), target) == (target in keys)


def test_search_path_starts_at_root_and_follows_children():
    tree = SpecialAVLTree(range(1, 21))
    path = tree.get_search_path(2)
    assert path[0] is tree.get_root()
    for parent, child in zip(path, path[1:]):
        assert child is parent.left or child is parent.right


def test_round_trip_scenario():
    tree = SpecialAVLTree()
    for k in DEMO_TEN:
        tree.insert(k)
    assert tree.inorder() == sorted(DEMO_TEN)
    assert tree.get_root().key == 41

    assert tree.search(110) is False
    path = tree.get_search_path(110)
    assert [n.key for n in path] == [41, 52, 54]
    assert not path_found(path, 110)

    tree.insert(110)
    assert tree.search(110) is True
    assert 110 in tree
    assert tree.get_search_path(110)[-1].key == 110


def test_search_path_for_missing_left_key():
    tree = SpecialAVLTree(DEMO_TEN)
    path = tree.get_search_path(1)
    assert path[-1].key == 15


def test_string_keys():
    tree = SpecialAVLTree(["pear", "apple", "fig", "kiwi"])
    assert tree.inorder() == ["apple", "fig", "kiwi", "pear"]
    assert tree.search("fig")
    assert not tree.search("plum")


def test_print_inorder(capsys):
    tree = SpecialAVLTree([3, 1, 2])
    assert tree.print_inorder() == "1 2 3"
    assert capsys.readouterr().out == "1 2 3\n"


def test_to_tuple_of_empty_tree():
    assert to_tuple(None) is None
    assert SpecialAVLTree().to_tuple() is None


# ── step recording ───────────────────────────────────────────

def test_insert_records_steps():
    tree = SpecialAVLTree(record=True)
    tree.insert(5)
    actions = [s["action"] for s in tree.steps]
    assert actions == ["start", "locate", "insert", "rebuild", "done"]
    assert tree.steps[0]["tree_state"] is None
    assert tree.steps[-1]["tree_state"] is tree.get_root()
    assert all(s["extra"] == {"operation": "insert", "key": 5} for s in tree.steps)


def test_duplicate_and_missing_steps():
    tree = SpecialAVLTree([5], record=True)
    tree.clear_steps()
    tree.insert(5)
    tree.remove(9)
    actions = [s["action"] for s in tree.steps]
    assert actions == ["start", "locate", "duplicate", "start", "locate", "missing"]


def test_op_ids_increase_per_operation():
    tree = SpecialAVLTree(record=True)
    tree.insert(1)
    tree.insert(2)
    ids = sorted({s["op_id"] for s in tree.steps})
    assert ids == [1, 2]


def test_search_recorded_steps():
    tree = SpecialAVLTree(DEMO_TEN, record=True)
    tree.clear_steps()
    path = tree.search_recorded(110)
    compares = [s for s in tree.steps if s["action"] == "compare"]
    assert [s["highlight"] for s in compares] == [[41], [52], [54]]
    assert [len(s["path"]) for s in compares] == [1, 2, 3]
    assert tree.steps[-1]["action"] == "not-found"
    assert tree.steps[-1]["desc"] == "Not Found 110"
    assert [n.key for n in path] == [41, 52, 54]

    tree.clear_steps()
    tree.search_recorded(44)
    assert tree.steps[-1]["action"] == "found"
    assert tree.steps[-2]["desc"] == "44 == 44 → FOUND!"


def live_nodes():
    gc.collect()
    return sum(1 for obj in gc.get_objects() if type(obj) is AVLNode)


def test_plain_tree_discards_replaced_graphs():
    before = live_nodes()
    tree = SpecialAVLTree()
    for k in range(300):
        tree.insert(k)
    tree.remove(0)
    tree.search_recorded(5)
    assert tree.steps == []
    assert live_nodes() - before == len(tree) == 299


def test_recording_tree_keeps_snapshots_until_cleared():
    before = live_nodes()
    tree = SpecialAVLTree(range(20), record=True)
    assert live_nodes() - before > len(tree)
    tree.clear_steps()
    assert live_nodes() - before == len(tree)
