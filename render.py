"""
╔══════════════════════════════════════════════════════════════════╗
║        Special AVL Visualizer v1.0 — RENDERING                   ║
║                                                                  ║
║  Everything here is stateless: functions take a tree root (or    ║
║  an array) plus the search path and viewport, and return a list  ║
║  of draw-command dicts.  Back ends execute those commands:       ║
║                                                                  ║
║     render_tree / render_array ──► [commands] ──┬─► paint_canvas ║
║                                                 │   (tk.Canvas)  ║
║                                                 └─► TreeImage-   ║
║                                                     Renderer     ║
║                                                     (Pillow)     ║
║                                                                  ║
║  Command Schema (colours are THEME KEYS, see settings.py)        ║
║  ──────────────                                                  ║
║  {"kind": "line",   "points": [(x0,y0),(x1,y1)], "color", "width"}║
║  {"kind": "circle", "center": (x,y), "radius", "fill",           ║
║                     "outline", "width", "key"}                   ║
║  {"kind": "rect",   "box": (x0,y0,x1,y1), "fill", "outline"}     ║
║  {"kind": "text",   "pos": (x,y), "text", "color", "size",       ║
║                     "anchor"}  # anchor: "center" | "nw"         ║
║                                                                  ║
║  License: MIT                                                    ║
╚══════════════════════════════════════════════════════════════════╝
"""

import logging

from PIL import Image, ImageDraw, ImageFont

from special_avl import height

logger = logging.getLogger(__name__)

NODE_RADIUS       = 30      # px
VERTICAL_SPACING  = 100     # px between tree levels
MIN_VERTICAL_SPACING = 20   # floor when a deep tree is squeezed into a short view
MESSAGE_RESERVE   = 120     # px kept free under the tree for the status line
TOP_MARGIN        = 50      # y of the root centre
NODE_FONT_SIZE    = 24
MESSAGE_FONT_SIZE = 28


# ═════════════════════════════════════════════════════════════════
#  TREE UTILITIES
#
#  Pure read-only helpers used by the stats panel, the tests and
#  the renderers.  They walk the node graph and never cache.
# ═════════════════════════════════════════════════════════════════

def tree_height(node):
    """Height computed by walking the tree (0 for None)."""
    if node is None:
        return 0
    return 1 + max(tree_height(node.left), tree_height(node.right))


def count_nodes(node):
    if node is None:
        return 0
    return 1 + count_nodes(node.left) + count_nodes(node.right)


def collect_keys(node):
    """In-order traversal to collect all keys."""
    if node is None:
        return []
    return collect_keys(node.left) + [node.key] + collect_keys(node.right)


def validate_bst(node, lo=None, hi=None):
    """
    Validate the BST ordering property.

    Each key must satisfy ``lo < key < hi`` where None means unbounded,
    so any totally ordered key type works.

    Returns:
        tuple[bool, list[str]]: (is_valid, error_list)
    """
    if node is None:
        return True, []
    errors = []
    if lo is not None and not lo < node.key:
        errors.append(f"BST violation: node {node.key} <= {lo}")
    if hi is not None and not node.key < hi:
        errors.append(f"BST violation: node {node.key} >= {hi}")
    _, lerr = validate_bst(node.left, lo, node.key)
    _, rerr = validate_bst(node.right, node.key, hi)
    errors.extend(lerr)
    errors.extend(rerr)
    return len(errors) == 0, errors


def validate_balance(node):
    """
    Check that every node's subtree heights differ by at most one and
    that every stored ``height`` matches the real height.

    Returns:
        tuple[bool, list[str]]: (is_valid, error_list)
    """
    errors = []

    def _walk(n):
        if n is None:
            return 0
        lh = _walk(n.left)
        rh = _walk(n.right)
        if abs(lh - rh) > 1:
            errors.append(f"Balance violation at node {n.key}: "
                          f"left={lh}, right={rh}")
        real = 1 + max(lh, rh)
        if n.height != real:
            errors.append(f"Stale height at node {n.key}: "
                          f"stored={n.height}, real={real}")
        return real

    _walk(node)
    return len(errors) == 0, errors


def fit_vertical_spacing(root, view_height):
    """
    Level spacing that fits ``root`` between TOP_MARGIN and the status line.

    Never above VERTICAL_SPACING and never below MIN_VERTICAL_SPACING, so
    children always sit under their parents even in a very short view.
    """
    levels = max(height(root), 1)
    room = (view_height - TOP_MARGIN - MESSAGE_RESERVE) / max(levels - 1, 1)
    return max(MIN_VERTICAL_SPACING, min(VERTICAL_SPACING, room))


def is_node_in_path(node, path):
    """Identity test: keys are unique but paths hold node references."""
    return any(p is node for p in path)


# ═════════════════════════════════════════════════════════════════
#  DRAW COMMANDS — TREE
# ═════════════════════════════════════════════════════════════════

def render_tree(root, search_path=(), viewport=(1600, 1000),
                radius=NODE_RADIUS, h_offset=None,
                v_spacing=VERTICAL_SPACING):
    """
    Lay out the tree and return draw commands.

    The root sits at ``(width / 2, TOP_MARGIN)``; each level is
    ``v_spacing`` lower and the horizontal offset to a child halves per
    level, starting at ``h_offset`` (default ``3/16`` of the width, i.e.
    300 px on a 1600 px viewport).

    A node on ``search_path`` is filled with NODE_PATH_FILL; an edge uses
    EDGE_PATH only when both of its end points are on the path.  All edges
    are emitted before any node so circles cover line ends.

    Args:
        root        (AVLNode|None): Tree to draw.
        search_path (list)        : AVLNodes to highlight.
        viewport    (tuple)       : (width, height) in pixels.

    Returns:
        list[dict]: Draw commands (see module doc).
    """
    width, vp_height = viewport
    if root is None:
        return [{"kind": "text", "pos": (width // 2, vp_height // 2),
                 "text": "Empty Tree", "color": "FG",
                 "size": NODE_FONT_SIZE, "anchor": "center"}]
    if h_offset is None:
        h_offset = width * 3 / 16

    path = list(search_path)
    edges, nodes = [], []

    def _place(node, x, y, offset, on_path):
        for child, cx in ((node.left, x - offset), (node.right, x + offset)):
            if child is None:
                continue
            cy = y + v_spacing
            child_on_path = on_path and is_node_in_path(child, path)
            edges.append({"kind": "line",
                          "points": [(x, y + radius), (cx, cy - radius)],
                          "color": "EDGE_PATH" if child_on_path else "EDGE",
                          "width": 3 if child_on_path else 2})
            _place(child, cx, cy, offset / 2, is_node_in_path(child, path))

        nodes.append({"kind": "circle", "center": (x, y), "radius": radius,
                      "fill": "NODE_PATH_FILL" if on_path else "NODE_FILL",
                      "outline": "NODE_OUTLINE", "width": 3,
                      "key": node.key})
        nodes.append({"kind": "text", "pos": (x, y), "text": str(node.key),
                      "color": "NODE_TEXT", "size": NODE_FONT_SIZE,
                      "anchor": "center"})

    _place(root, width / 2, TOP_MARGIN, h_offset, is_node_in_path(root, path))
    return edges + nodes


def render_message(text, viewport=(1600, 1000)):
    """Status line in the bottom-left corner ("Inserting 41", "Found 110", ...)."""
    return [{"kind": "text", "pos": (10, viewport[1] - 50), "text": text,
             "color": "MESSAGE", "size": MESSAGE_FONT_SIZE, "anchor": "nw"}]


# ═════════════════════════════════════════════════════════════════
#  DRAW COMMANDS — ARRAY (binary search mode)
# ═════════════════════════════════════════════════════════════════

def render_array(seq, lo=None, hi=None, mid=None, found=None,
                 viewport=(1600, 1000), probed=()):
    """
    Draw ``seq`` as a row of cells with the current search window.

    Cells inside ``[lo, hi]`` use CELL_RANGE, the probed ``mid`` CELL_MID
    and ``found`` CELL_FOUND.  ``lo`` / ``hi`` / ``mid`` markers are drawn
    under the row, and earlier probes in ``probed`` are labelled with
    their probe order above it.
    """
    width, vp_height = viewport
    n = len(seq)
    if n == 0:
        return [{"kind": "text", "pos": (width // 2, vp_height // 2),
                 "text": "Empty Array", "color": "FG",
                 "size": NODE_FONT_SIZE, "anchor": "center"}]
    margin = 20
    cell = min(80, (width - 2 * margin) / n)
    x0 = (width - cell * n) / 2
    y0 = vp_height / 2 - cell / 2
    font = max(8, int(cell * 0.3))
    order = {idx: i + 1 for i, idx in enumerate(probed)}

    cmds = []
    for i, value in enumerate(seq):
        if found is not None and i == found:
            fill = "CELL_FOUND"
        elif mid is not None and i == mid:
            fill = "CELL_MID"
        elif lo is not None and hi is not None and lo <= i <= hi:
            fill = "CELL_RANGE"
        else:
            fill = "CELL_FILL"
        left = x0 + i * cell
        cmds.append({"kind": "rect",
                     "box": (left, y0, left + cell, y0 + cell),
                     "fill": fill, "outline": "NODE_OUTLINE"})
        cmds.append({"kind": "text", "pos": (left + cell / 2, y0 + cell / 2),
                     "text": str(value), "color": "FG", "size": font,
                     "anchor": "center"})
        cmds.append({"kind": "text", "pos": (left + cell / 2, y0 - 12),
                     "text": str(i), "color": "STATS_FG",
                     "size": max(7, font - 4), "anchor": "center"})
        if i in order:
            cmds.append({"kind": "text",
                         "pos": (left + cell / 2, y0 - 32),
                         "text": f"#{order[i]}", "color": "ACCENT",
                         "size": max(7, font - 4), "anchor": "center"})

    markers = {}
    for label, idx in (("lo", lo), ("mid", mid), ("hi", hi)):
        if idx is not None and 0 <= idx < n:
            markers.setdefault(idx, []).append(label)
    for idx, labels in markers.items():
        cmds.append({"kind": "text",
                     "pos": (x0 + idx * cell + cell / 2, y0 + cell + 16),
                     "text": "/".join(labels), "color": "ACCENT",
                     "size": max(7, font - 2), "anchor": "center"})
    return cmds


# ═════════════════════════════════════════════════════════════════
#  BACK END 1: tkinter Canvas
# ═════════════════════════════════════════════════════════════════

def paint_canvas(canvas, commands, settings, font_family="Consolas", scale=1.0):
    """Execute draw commands on a tkinter Canvas (or anything with its API)."""
    for cmd in commands:
        kind = cmd["kind"]
        if kind == "line":
            (x0, y0), (x1, y1) = cmd["points"]
            canvas.create_line(x0, y0, x1, y1, fill=settings.get(cmd["color"]),
                               width=cmd.get("width", 2))
        elif kind == "circle":
            x, y = cmd["center"]
            r = cmd["radius"]
            canvas.create_oval(x - r, y - r, x + r, y + r,
                               fill=settings.get(cmd["fill"]),
                               outline=settings.get(cmd["outline"]),
                               width=cmd.get("width", 1))
        elif kind == "rect":
            canvas.create_rectangle(*cmd["box"],
                                    fill=settings.get(cmd["fill"]),
                                    outline=settings.get(cmd["outline"]))
        elif kind == "text":
            size = max(6, int(cmd["size"] * scale))
            canvas.create_text(*cmd["pos"], text=cmd["text"],
                               fill=settings.get(cmd["color"]),
                               font=(font_family, size, "bold"),
                               anchor="nw" if cmd.get("anchor") == "nw" else "center")
        else:
            raise ValueError(f"Unknown draw command: {kind!r}")


# ═════════════════════════════════════════════════════════════════
#  BACK END 2: Pillow image renderer
#
#  Used by PNG export and by GifExporter (one frame per step).
# ═════════════════════════════════════════════════════════════════
class TreeImageRenderer:
    """
    Off-screen renderer using Pillow.

    Args:
        settings (Settings): For colour lookups.
        width    (int)     : Image width in pixels.
        height   (int)     : Image height in pixels.
    """

    FONT_CANDIDATES = [
        "ArialTh.ttf",
        "consola.ttf",                                          # Windows
        "Consolas.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", # Debian/Ubuntu
        "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",             # Arch
        "/System/Library/Fonts/Menlo.ttc",                      # macOS
    ]

    def __init__(self, settings, width=1600, height=1000):
        self.settings = settings
        self.width    = width
        self.height   = height
        self._fonts   = {}

    def _font(self, size):
        """Load (and cache) a font of ``size`` points, falling back to Pillow's default."""
        if size not in self._fonts:
            font = None
            for p in self.FONT_CANDIDATES:
                try:
                    font = ImageFont.truetype(p, size)
                    break
                except OSError:
                    continue
            if font is None:
                font = ImageFont.load_default()
            self._fonts[size] = font
        return self._fonts[size]

    def new_image(self):
        return Image.new("RGB", (self.width, self.height),
                         self.settings.get("CANVAS_BG"))

    def draw_commands(self, img, commands):
        """Execute draw commands onto ``img`` in order."""
        s = self.settings
        draw = ImageDraw.Draw(img)
        for cmd in commands:
            kind = cmd["kind"]
            if kind == "line":
                draw.line(cmd["points"], fill=s.get(cmd["color"]),
                          width=cmd.get("width", 2))
            elif kind == "circle":
                x, y = cmd["center"]
                r = cmd["radius"]
                draw.ellipse([x - r, y - r, x + r, y + r],
                             fill=s.get(cmd["fill"]),
                             outline=s.get(cmd["outline"]),
                             width=cmd.get("width", 1))
            elif kind == "rect":
                draw.rectangle(list(cmd["box"]), fill=s.get(cmd["fill"]),
                               outline=s.get(cmd["outline"]))
            elif kind == "text":
                font = self._font(cmd["size"])
                x, y = cmd["pos"]
                if cmd.get("anchor") == "center":
                    bb = draw.textbbox((0, 0), cmd["text"], font=font)
                    x -= (bb[2] - bb[0]) / 2 + bb[0]
                    y -= (bb[3] - bb[1]) / 2 + bb[1]
                draw.text((x, y), cmd["text"], fill=s.get(cmd["color"]),
                          font=font)
            else:
                raise ValueError(f"Unknown draw command: {kind!r}")
        return img

    def render(self, root, search_path=(), title="", message=""):
        """
        Render a tree to a new Pillow Image.

        Args:
            root        (AVLNode|None): Tree to draw.
            search_path (list)        : Nodes to highlight.
            title       (str)         : Drawn at the top-left.
            message     (str)         : Status line at the bottom-left.

        Returns:
            Image: Rendered RGB image.
        """
        viewport = (self.width, self.height)
        v_spacing = fit_vertical_spacing(root, self.height)
        cmds = render_tree(root, search_path, viewport, v_spacing=v_spacing)
        if message:
            cmds += render_message(message, viewport)
        img = self.new_image()
        if title:
            ImageDraw.Draw(img).text((10, 8), title,
                                     fill=self.settings.get("ACCENT"),
                                     font=self._font(16))
        return self.draw_commands(img, cmds)

    def render_array(self, seq, step=None, probed=(), title="", message=""):
        """Render the binary-search array view for one step dict (or none)."""
        viewport = (self.width, self.height)
        step = step or {}
        found = step.get("mid") if step.get("action") == "found" else None
        cmds = render_array(seq, step.get("lo"), step.get("hi"),
                            step.get("mid"), found, viewport, probed)
        if message:
            cmds += render_message(message, viewport)
        img = self.new_image()
        if title:
            ImageDraw.Draw(img).text((10, 8), title,
                                     fill=self.settings.get("ACCENT"),
                                     font=self._font(16))
        return self.draw_commands(img, cmds)


# ═════════════════════════════════════════════════════════════════
#  GIF EXPORTER
#
#  Renders recorded step dicts (from SpecialAVLTree.steps) as an
#  animated GIF, one frame per step.
# ═════════════════════════════════════════════════════════════════
class GifExporter:
    """
    Export a step history as an animated GIF.

    Attributes:
        settings (Settings)          : For colour/theme lookups.
        renderer (TreeImageRenderer) : Renders each frame.
    """

    def __init__(self, settings, width=1280, height=720):
        self.settings = settings
        self.renderer = TreeImageRenderer(settings, width, height)

    def frames(self, steps):
        out = []
        for i, st in enumerate(steps):
            out.append(self.renderer.render(
                st.get("tree_state"), st.get("path", []),
                title=f"Step {i + 1} / {len(steps)}: {st.get('action', '')}",
                message=st.get("desc", "")[:60]))
        return out

    def export(self, steps, filename, duration_ms=None):
        """
        Write ``steps`` to ``filename`` as a looping GIF.

        Returns:
            bool: True on success, False if there was nothing to export or
            the file could not be written.
        """
        if not steps:
            logger.warning("GIF export skipped: no recorded steps")
            return False
        duration = duration_ms or self.settings.anim_speed
        frames = self.frames(steps)
        try:
            frames[0].save(filename, save_all=True, append_images=frames[1:],
                           duration=duration, loop=0)
        except (OSError, ValueError):
            logger.exception("GIF export to %s failed", filename)
            return False
        logger.info("Exported %d frames to %s", len(frames), filename)
        return True
