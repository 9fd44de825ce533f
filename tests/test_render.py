import pytest
from PIL import Image

from binary_search import DEMO_ARRAY, binary_search_steps
from render import (
    MIN_VERTICAL_SPACING, VERTICAL_SPACING, GifExporter, TreeImageRenderer,
    count_nodes, fit_vertical_spacing, paint_canvas, render_array,
    render_message, render_tree, tree_height, validate_balance, validate_bst,
)
from settings import Settings
from special_avl import AVLNode, SpecialAVLTree

DEMO_TEN = DEMO_ARRAY[:10]


class FakeCanvas:
    """Records create_* calls the way a tkinter Canvas would receive them."""

    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        if not name.startswith("create_"):
            raise AttributeError(name)

        def _create(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return len(self.calls)
        return _create


@pytest.fixture
def settings(tmp_path):
    return Settings(path=str(tmp_path / "settings.json"), load=False)


@pytest.fixture
def demo_tree():
    return SpecialAVLTree(DEMO_TEN)


# ── tree utilities ───────────────────────────────────────────

def test_utilities_on_demo_tree(demo_tree):
    root = demo_tree.get_root()
    assert count_nodes(root) == 10
    assert tree_height(root) == 4
    assert validate_bst(root) == (True, [])
    assert validate_balance(root) == (True, [])


def test_validators_report_broken_trees():
    root = AVLNode(5)
    root.left = AVLNode(9)
    ok, errors = validate_bst(root)
    assert not ok
    assert "9" in errors[0]

    root = AVLNode(1)
    root.right = AVLNode(2)
    root.right.right = AVLNode(3)
    root.right.height = 2
    root.height = 3
    ok, errors = validate_balance(root)
    assert not ok
    assert any("Balance violation at node 1" in e for e in errors)


def test_validate_balance_catches_stale_height():
    root = AVLNode(1)
    root.left = AVLNode(0)
    ok, errors = validate_balance(root)
    assert not ok
    assert "Stale height" in errors[0]


# ── render_tree ──────────────────────────────────────────────

def test_empty_tree_renders_placeholder():
    cmds = render_tree(None, viewport=(800, 600))
    assert cmds == [{"kind": "text", "pos": (400, 300), "text": "Empty Tree",
                     "color": "FG", "size": 24, "anchor": "center"}]


def test_single_node_position():
    tree = SpecialAVLTree([7])
    cmds = render_tree(tree.get_root())
    circle, text = cmds
    assert circle["kind"] == "circle"
    assert circle["center"] == (800, 50)
    assert circle["radius"] == 30
    assert text["text"] == "7"


def test_command_counts_and_ordering(demo_tree):
    cmds = render_tree(demo_tree.get_root())
    kinds = [c["kind"] for c in cmds]
    assert kinds.count("line") == 9
    assert kinds.count("circle") == 10
    assert kinds.count("text") == 10
    first_circle = kinds.index("circle")
    assert all(k == "line" for k in kinds[:first_circle])
    assert "line" not in kinds[first_circle:]


def test_children_offset_halves_per_level(demo_tree):
    cmds = render_tree(demo_tree.get_root(), viewport=(1600, 1000))
    centers = {c["key"]: c["center"] for c in cmds if c["kind"] == "circle"}
    assert centers[41] == (800, 50)
    assert centers[29] == (500, 150)
    assert centers[52] == (1100, 150)
    assert centers[23] == (350, 250)
    assert centers[54] == (1250, 250)


def test_search_path_highlight(demo_tree):
    path = demo_tree.get_search_path(110)
    cmds = render_tree(demo_tree.get_root(), path)

    lit = {c["key"] for c in cmds
           if c["kind"] == "circle" and c["fill"] == "NODE_PATH_FILL"}
    assert lit == {41, 52, 54}

    path_edges = [c for c in cmds if c["kind"] == "line" and c["color"] == "EDGE_PATH"]
    assert len(path_edges) == 2
    assert all(e["width"] == 3 for e in path_edges)
    plain = [c for c in cmds if c["kind"] == "line" and c["color"] == "EDGE"]
    assert len(plain) == 7
    assert all(e["width"] == 2 for e in plain)


def test_edge_endpoints_touch_circle_rims(demo_tree):
    cmds = render_tree(demo_tree.get_root(), radius=20, v_spacing=80)
    root_edges = [c for c in cmds if c["kind"] == "line"
                  and c["points"][0] == (800, 70)]
    assert len(root_edges) == 2
    assert {e["points"][1][1] for e in root_edges} == {110}


def test_render_message():
    (cmd,) = render_message("Found 110", viewport=(800, 600))
    assert cmd["pos"] == (10, 550)
    assert cmd["anchor"] == "nw"
    assert cmd["color"] == "MESSAGE"


# ── render_array ─────────────────────────────────────────────

def test_render_array_cell_colours():
    cmds = render_array([1, 2, 3, 4, 5], lo=1, hi=3, mid=2)
    fills = [c["fill"] for c in cmds if c["kind"] == "rect"]
    assert fills == ["CELL_FILL", "CELL_RANGE", "CELL_MID", "CELL_RANGE", "CELL_FILL"]


def test_render_array_found_and_probe_labels():
    cmds = render_array([1, 2, 3], lo=2, hi=2, mid=2, found=2, probed=[1, 2])
    fills = [c["fill"] for c in cmds if c["kind"] == "rect"]
    assert fills[2] == "CELL_FOUND"
    texts = [c["text"] for c in cmds if c["kind"] == "text"]
    assert "#1" in texts and "#2" in texts
    assert "lo/mid/hi" in texts


def test_render_array_empty():
    (cmd,) = render_array([])
    assert cmd["text"] == "Empty Array"


# ── back ends ────────────────────────────────────────────────

def test_paint_canvas_resolves_theme_keys(demo_tree, settings):
    canvas = FakeCanvas()
    cmds = render_tree(demo_tree.get_root(), demo_tree.get_search_path(54))
    paint_canvas(canvas, cmds, settings)
    names = [name for name, _, _ in canvas.calls]
    assert names.count("create_line") == 9
    assert names.count("create_oval") == 10
    assert names.count("create_text") == 10
    fills = {kw["fill"] for name, _, kw in canvas.calls if name == "create_oval"}
    assert fills == {settings.get("NODE_FILL"), settings.get("NODE_PATH_FILL")}


def test_paint_canvas_rejects_unknown_command(settings):
    with pytest.raises(ValueError):
        paint_canvas(FakeCanvas(), [{"kind": "star"}], settings)


def test_image_renderer_size_and_background(settings):
    renderer = TreeImageRenderer(settings, width=400, height=300)
    img = renderer.render(None, title="empty")
    assert img.size == (400, 300)
    bg = Image.new("RGB", (1, 1), settings.get("CANVAS_BG")).getpixel((0, 0))
    assert img.getpixel((399, 299)) == bg


def test_image_renderer_draws_tree(demo_tree, settings):
    renderer = TreeImageRenderer(settings, width=800, height=500)
    img = renderer.render(demo_tree.get_root(), demo_tree.get_search_path(110),
                          message="Not Found 110")
    fill = Image.new("RGB", (1, 1), settings.get("NODE_PATH_FILL")).getpixel((0, 0))
    # root centre sits at (width / 2, 50) and is on the path; sample left of the label
    assert img.getpixel((400 - 20, 50)) == fill


def test_image_renderer_array(settings):
    renderer = TreeImageRenderer(settings, width=800, height=400)
    step = binary_search_steps(DEMO_ARRAY, 110)[-1]
    img = renderer.render_array(DEMO_ARRAY, step, probed=[10, 15, 18, 19])
    assert img.size == (800, 400)


def test_gif_export(tmp_path, settings):
    tree = SpecialAVLTree(record=True)
    for k in (3, 1, 2):
        tree.insert(k)
    target = tmp_path / "steps.gif"
    assert GifExporter(settings, 320, 240).export(tree.steps, str(target), 50)
    with Image.open(target) as gif:
        assert gif.size == (320, 240)
        assert gif.n_frames > 1


def test_gif_export_without_steps(tmp_path, settings):
    target = tmp_path / "none.gif"
    assert GifExporter(settings).export([], str(target)) is False
    assert not target.exists()


def test_gif_export_unwritable_target(tmp_path, settings):
    tree = SpecialAVLTree([1], record=True)
    assert GifExporter(settings, 100, 100).export(tree.steps, str(tmp_path)) is False


def test_vertical_spacing_fits_and_stays_positive(demo_tree):
    root = demo_tree.get_root()
    assert fit_vertical_spacing(root, 1000) == VERTICAL_SPACING
    assert fit_vertical_spacing(root, 500) == 100
    assert fit_vertical_spacing(root, 350) == 60
    assert fit_vertical_spacing(root, 120) == MIN_VERTICAL_SPACING
    assert fit_vertical_spacing(None, 50) == MIN_VERTICAL_SPACING


def test_short_image_keeps_children_below_parents(demo_tree, settings):
    v_spacing = fit_vertical_spacing(demo_tree.get_root(), 100)
    cmds = render_tree(demo_tree.get_root(), viewport=(400, 100),
                       v_spacing=v_spacing)
    ys = {c["key"]: c["center"][1] for c in cmds if c["kind"] == "circle"}
    assert ys[41] < ys[29] < ys[23] < ys[15]
    img = TreeImageRenderer(settings, width=400, height=100).render(
        demo_tree.get_root())
    assert img.size == (400, 100)
