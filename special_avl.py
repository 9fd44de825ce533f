"""
╔══════════════════════════════════════════════════════════════════╗
║         Special AVL Visualizer v1.0 — TREE ENGINE                ║
║                                                                  ║
║  A "Special AVL" tree keeps a sorted list of unique keys and     ║
║  REBUILDS a perfectly balanced BST from that list after every    ║
║  insert or delete.  There are no rotations: balance holds by     ║
║  construction because each subtree root is the upper-middle      ║
║  element of its index range.                                     ║
║                                                                  ║
║  Trade-off: every mutation costs O(n) for the rebuild plus       ║
║  O(log n) for the sorted-position lookup, instead of the         ║
║  O(log n) incremental rotations of a classic AVL tree.           ║
║                                                                  ║
║  Architecture                                                    ║
║  ────────────                                                    ║
║   insert/remove ──► sorted_keys (bisect) ──► build_balanced_tree ║
║                                                    │             ║
║                                          fresh AVLNode graph     ║
║                                                    │             ║
║   search / get_search_path ◄── BST descent ◄───────┘             ║
║                                                                  ║
║  Node graphs are never mutated after they are built, so a root   ║
║  reference stored in a step dict is a frozen snapshot.           ║
║                                                                  ║
║  Step Dict Schema                                                ║
║  ────────────────                                                ║
║  { "action"    : str,   # start/locate/insert/duplicate/...      ║
║    "desc"      : str,   # human-readable explanation             ║
║    "highlight" : list,  # keys to highlight                      ║
║    "extra"     : dict?, # {"operation": ..., "key": ...}         ║
║    "tree_state": AVLNode?,  # root at this moment                ║
║    "path"      : list,  # AVLNodes visited so far (search only)  ║
║    "op_id"     : int }                                           ║
║                                                                  ║
║  License: MIT                                                    ║
╚══════════════════════════════════════════════════════════════════╝
"""

import logging
from bisect import bisect_left
from typing import Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K")


# ═════════════════════════════════════════════════════════════════
#  MIDPOINT RULE
#
#  Shared with binary_search.py.  Both the flat search and the
#  tree builder must pick the same element for the same range so
#  the tree's decision points match the flat search's probes.
# ═════════════════════════════════════════════════════════════════
def upper_mid(lo: int, hi: int) -> int:
    """
    Upper-middle index of the inclusive range [lo, hi].

    For an even count the higher of the two middle elements wins:
    ``upper_mid(0, 3) == 2``, ``upper_mid(0, 4) == 2``.
    """
    return (lo + hi + 1) // 2


# ═════════════════════════════════════════════════════════════════
#  AVL NODE
# ═════════════════════════════════════════════════════════════════
class AVLNode(Generic[K]):
    """
    A single tree vertex.

    Attributes:
        key    : The stored key.
        left   (AVLNode|None): Left child, exclusively owned.
        right  (AVLNode|None): Right child, exclusively owned.
        height (int)         : 1 for a leaf; absent children count as 0.
    """
    __slots__ = ('key', 'left', 'right', 'height')

    def __init__(self, key: K):
        self.key    = key
        self.left   = None
        self.right  = None
        self.height = 1

    def __repr__(self):
        return f"AVLNode({self.key!r}, h={self.height})"


def height(node: Optional[AVLNode]) -> int:
    """Stored height of ``node``; 0 for an absent child."""
    return 0 if node is None else node.height


def build_balanced_tree(sorted_keys: List[K], lo: int, hi: int) -> Optional[AVLNode]:
    """
    Build a perfectly balanced BST from ``sorted_keys[lo..hi]`` (inclusive).

    Each subtree root is ``sorted_keys[upper_mid(lo, hi)]``; the left and
    right halves are built recursively.  The in-order sequence of the result
    equals the slice and its height is ``ceil(log2(n + 1))``.

    Args:
        sorted_keys: Ascending list of unique keys.
        lo, hi:      Inclusive index range.

    Returns:
        AVLNode|None: Root of the new subtree, None for an empty range.
    """
    if lo > hi:
        return None
    mid = upper_mid(lo, hi)
    node = AVLNode(sorted_keys[mid])
    node.left  = build_balanced_tree(sorted_keys, lo, mid - 1)
    node.right = build_balanced_tree(sorted_keys, mid + 1, hi)
    node.height = 1 + max(height(node.left), height(node.right))
    return node


def path_found(path: List[AVLNode], key) -> bool:
    """True iff a search path ends on a node holding ``key``."""
    return bool(path) and path[-1].key == key


def to_tuple(node: Optional[AVLNode]):
    """Nested ``(key, height, left, right)`` tuple; None for an empty subtree."""
    if node is None:
        return None
    return (node.key, node.height, to_tuple(node.left), to_tuple(node.right))


# ═════════════════════════════════════════════════════════════════
#  SPECIAL AVL TREE
# ═════════════════════════════════════════════════════════════════
class SpecialAVLTree(Generic[K]):
    """
    Sorted key list plus a balanced tree rebuilt from it on every mutation.

    This class is PURE LOGIC — no GUI code.  Windows read ``steps`` after
    an operation to replay it.

    Recording is opt-in: each step dict holds the root of its moment, so a
    recording tree keeps every replaced node graph reachable until
    ``clear_steps()``.  A plain tree keeps only the current graph.

    Attributes:
        root   (AVLNode|None): Current root (replaced on every mutation).
        record (bool)        : Whether operations append to ``steps``.
        steps  (list)        : Recorded step dicts since the last clear.
    """

    def __init__(self, keys=None, record=False):
        self.root = None
        self._sorted_keys: List[K] = []
        self.record = record
        self.steps = []
        self._op_counter = 0
        for k in keys or ():
            self.insert(k)

    # ─────────────────────────────────────────────────────────────
    #  RECORDING
    # ─────────────────────────────────────────────────────────────

    def _record(self, action, desc, highlight=None, extra=None, path=None):
        if not self.record:
            return
        self.steps.append({
            "action":     action,
            "desc":       desc,
            "highlight":  highlight or [],
            "extra":      extra,
            "tree_state": self.root,
            "path":       list(path or []),
            "op_id":      self._op_counter,
        })

    def clear_steps(self):
        """Reset the step buffer."""
        self.steps = []

    # ─────────────────────────────────────────────────────────────
    #  REBUILD
    # ─────────────────────────────────────────────────────────────

    def _rebuild(self):
        keys = self._sorted_keys
        self.root = build_balanced_tree(keys, 0, len(keys) - 1)
        logger.debug("Rebuilt tree over %d keys (height %d)",
                     len(keys), height(self.root))

    # ─────────────────────────────────────────────────────────────
    #  MUTATIONS
    # ─────────────────────────────────────────────────────────────

    def insert(self, key: K) -> bool:
        """
        Insert ``key`` and rebuild the tree.

        Duplicates are ignored silently.  Node references obtained before
        the call become stale once the tree is rebuilt.

        Returns:
            bool: True if the key was added, False if it was already present.
        """
        self._op_counter += 1
        extra = {"operation": "insert", "key": key}
        self._record("start", f"═══ INSERT {key} ═══", extra=extra)

        keys = self._sorted_keys
        i = bisect_left(keys, key)
        self._record("locate", f"Sorted position of {key} is index {i}",
                     highlight=[key], extra=extra)
        if i < len(keys) and keys[i] == key:
            self._record("duplicate", f"{key} already present → ignored",
                         highlight=[key], extra=extra)
            logger.debug("Insert %r ignored (duplicate)", key)
            return False

        keys.insert(i, key)
        self._record("insert", f"Added {key} to sorted keys ({len(keys)} total)",
                     highlight=[key], extra=extra)
        self._rebuild()
        self._record("rebuild",
                     f"Rebuilt balanced tree, root = {self.root.key}, "
                     f"height = {self.root.height}",
                     highlight=[key], extra=extra)
        self._record("done", f"INSERT {key} complete", extra=extra)
        logger.debug("Inserted %r", key)
        return True

    def remove(self, key: K) -> bool:
        """
        Remove ``key`` and rebuild the tree; an absent key is a silent no-op.

        Returns:
            bool: True if the key was removed, False if it was absent.
        """
        self._op_counter += 1
        extra = {"operation": "delete", "key": key}
        self._record("start", f"═══ DELETE {key} ═══", extra=extra)

        keys = self._sorted_keys
        i = bisect_left(keys, key)
        self._record("locate", f"Sorted position of {key} is index {i}",
                     highlight=[key], extra=extra)
        if i == len(keys) or keys[i] != key:
            self._record("missing", f"{key} not present → nothing to delete",
                         extra=extra)
            logger.debug("Delete %r ignored (absent)", key)
            return False

        del keys[i]
        self._record("delete",
                     f"Removed {key} from sorted keys ({len(keys)} left)",
                     extra=extra)
        self._rebuild()
        if self.root is None:
            self._record("rebuild", "Tree is now empty", extra=extra)
        else:
            self._record("rebuild",
                         f"Rebuilt balanced tree, root = {self.root.key}, "
                         f"height = {self.root.height}",
                         extra=extra)
        self._record("done", f"DELETE {key} complete", extra=extra)
        logger.debug("Deleted %r", key)
        return True

    # ─────────────────────────────────────────────────────────────
    #  SEARCH
    # ─────────────────────────────────────────────────────────────

    def search(self, key: K) -> bool:
        """Standard BST descent from the root."""
        node = self.root
        while node is not None:
            if key == node.key:
                return True
            node = node.left if key < node.key else node.right
        return False

    def get_search_path(self, key: K) -> List[AVLNode]:
        """
        Nodes visited while searching for ``key``, in order.

        The path stops at the matching node (inclusive) or at the last node
        before a missing child.  It is found iff ``path[-1].key == key``.
        """
        path = []
        current = self.root
        while current is not None:
            path.append(current)
            if current.key == key:
                break
            current = current.left if key < current.key else current.right
        return path

    def search_recorded(self, key: K) -> List[AVLNode]:
        """Search that also records compare steps on a recording tree.  Returns the search path."""
        self._op_counter += 1
        extra = {"operation": "search", "key": key}
        self._record("start", f"═══ SEARCH {key} ═══", extra=extra)
        path = []
        node = self.root
        while node is not None:
            path.append(node)
            if key == node.key:
                self._record("compare", f"{key} == {node.key} → FOUND!",
                             highlight=[node.key], extra=extra, path=path)
                break
            elif key < node.key:
                self._record("compare", f"{key} < {node.key} → go LEFT",
                             highlight=[node.key], extra=extra, path=path)
                node = node.left
            else:
                self._record("compare", f"{key} > {node.key} → go RIGHT",
                             highlight=[node.key], extra=extra, path=path)
                node = node.right
        if path_found(path, key):
            self._record("found", f"Found {key}", highlight=[key],
                         extra=extra, path=path)
        else:
            self._record("not-found", f"Not Found {key}", extra=extra, path=path)
        return path

    # ─────────────────────────────────────────────────────────────
    #  ACCESSORS
    # ─────────────────────────────────────────────────────────────

    def get_root(self) -> Optional[AVLNode]:
        return self.root

    @property
    def keys(self) -> List[K]:
        """Copy of the sorted key list."""
        return list(self._sorted_keys)

    def height(self) -> int:
        return height(self.root)

    def inorder(self) -> List[K]:
        """Ascending keys collected by an in-order walk of the tree."""
        out = []
        stack = []
        node = self.root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            out.append(node.key)
            node = node.right
        return out

    def print_inorder(self):
        """Print the in-order keys on one line (debugging aid)."""
        line = " ".join(str(k) for k in self.inorder())
        print(line)
        return line

    def to_tuple(self):
        return to_tuple(self.root)

    def __len__(self):
        return len(self._sorted_keys)

    def __contains__(self, key):
        return self.search(key)

    def __repr__(self):
        return f"SpecialAVLTree({self._sorted_keys!r})"
