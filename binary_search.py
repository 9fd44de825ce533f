"""
╔══════════════════════════════════════════════════════════════════╗
║       Special AVL Visualizer v1.0 — FLAT BINARY SEARCH           ║
║                                                                  ║
║  Iterative binary search over a sorted sequence that records     ║
║  every probed index.  Probes use the same upper-middle rule as   ║
║  the tree builder, so searching DEMO_ARRAY probes exactly the    ║
║  keys a search of the balanced tree over DEMO_ARRAY visits.      ║
║                                                                  ║
║  License: MIT                                                    ║
╚══════════════════════════════════════════════════════════════════╝
"""

from special_avl import upper_mid

NOT_FOUND = -1

DEMO_ARRAY = [
    15, 23, 29, 33, 37,
    41, 44, 49, 52, 54,
    60, 62, 68, 70, 75,
    85, 90, 95, 100, 110,
]


def binary_search(seq, target):
    """
    Search ``seq`` (ascending, not re-validated) for ``target``.

    Returns:
        tuple[int, list[int]]: ``(index, probe_path)`` on success, or
        ``(NOT_FOUND, probe_path)`` once the range is exhausted.  The probe
        path lists every probed index in order, including the final match.
    """
    lo, hi = 0, len(seq) - 1
    path = []
    while lo <= hi:
        mid = upper_mid(lo, hi)
        path.append(mid)
        if seq[mid] == target:
            return mid, path
        elif seq[mid] < target:
            lo = mid + 1
        else:
            hi = mid - 1
    return NOT_FOUND, path


def binary_search_steps(seq, target):
    """
    Same search as binary_search(), returned as step dicts for playback.

    Each step: ``{"lo", "hi", "mid", "value", "action", "desc"}`` where
    ``action`` is "found", "probe-right" (moved lo up) or "probe-left"
    (moved hi down).  A final "not-found" step with ``mid`` None closes a
    failed search.
    """
    steps = []
    lo, hi = 0, len(seq) - 1
    while lo <= hi:
        mid = upper_mid(lo, hi)
        value = seq[mid]
        step = {"lo": lo, "hi": hi, "mid": mid, "value": value}
        if value == target:
            step.update(action="found",
                        desc=f"arr[{mid}] = {value} == {target} → FOUND at index {mid}")
            steps.append(step)
            return steps
        elif value < target:
            step.update(action="probe-right",
                        desc=f"arr[{mid}] = {value} < {target} → lo = {mid + 1}")
            lo = mid + 1
        else:
            step.update(action="probe-left",
                        desc=f"arr[{mid}] = {value} > {target} → hi = {mid - 1}")
            hi = mid - 1
        steps.append(step)
    steps.append({"lo": lo, "hi": hi, "mid": None, "value": None,
                  "action": "not-found",
                  "desc": f"lo = {lo} > hi = {hi} → {target} not found"})
    return steps


def format_probe_path(seq, path):
    """'Path taken: v1 v2 ...' listing the values at the probed indices."""
    return "Path taken: " + " ".join(str(seq[i]) for i in path)
