import pytest

tkinter = pytest.importorskip("tkinter")

from settings import Settings  # noqa: E402
from tree_mode import (  # noqa: E402
    InsertStager, TreeModeWindow, next_step_index, prev_step_index,
)


# ── InsertStager ─────────────────────────────────────────────

def test_stager_announces_then_takes_in_order():
    stager = InsertStager([15, 23])
    assert stager.announce() == 15
    assert stager.announce() == 15          # stays on display until taken
    assert stager.take() == 15
    assert stager.announce() == 23
    assert stager.take() == 23
    assert stager.announce() is None


def test_stager_timing_from_settings(tmp_path):
    settings = Settings(path=str(tmp_path / "s.json"), load=False)
    stager = InsertStager.from_settings(settings, [1])
    assert (stager.announce_ms, stager.gap_ms) == (1000, 2000)
    settings.insert_delay_ms = 400
    stager = InsertStager.from_settings(settings)
    assert (stager.announce_ms, stager.gap_ms) == (400, 400)


def test_stager_clear_drops_announced_key():
    stager = InsertStager([1, 2, 3])
    stager.announce()
    stager.clear()
    assert stager.take() is None
    assert stager.announce() is None
    stager.extend([9])
    assert stager.announce() == 9


# ── playback indices ─────────────────────────────────────────

@pytest.mark.parametrize("current, count, expected", [
    (None, 0, None), (None, 5, 0), (0, 5, 1), (3, 5, 4), (4, 5, 4),
])
def test_next_step_index(current, count, expected):
    assert next_step_index(current, count) == expected


@pytest.mark.parametrize("current, count, expected", [
    (None, 0, None), (None, 5, 4), (4, 5, 3), (1, 5, 0), (0, 5, 0),
])
def test_prev_step_index(current, count, expected):
    assert prev_step_index(current, count) == expected


# ── window (withdrawn Tk) ────────────────────────────────────

@pytest.fixture
def window(tmp_path):
    try:
        root = tkinter.Tk()
    except tkinter.TclError:
        pytest.skip("no display available")
    root.withdraw()
    settings = Settings(path=str(tmp_path / "s.json"), load=False)
    win = TreeModeWindow(root, settings, initial_keys=[5, 3])
    yield win
    root.destroy()


def run_demo(win):
    while win.stager.announce() is not None:
        win._stage_next_insert()
        win._finish_staged_insert()
    win._stage_next_insert()


def test_staged_demo_announces_before_inserting(window):
    window._stage_next_insert()
    assert window.message == "Inserting 5"
    assert len(window.tree) == 0
    window._finish_staged_insert()
    assert window.tree.keys == [5]
    assert window.after_id is not None
    window._stage_next_insert()
    assert window.message == "Inserting 3"
    window._finish_staged_insert()
    window._stage_next_insert()
    assert window.tree.keys == [3, 5]
    assert window.message.startswith("Initial tree complete")


def test_interactive_insert_is_staged(window):
    run_demo(window)
    window.entries["insert"][0].set("9")
    window._on_insert()
    assert window.message == "Inserting 9"
    assert 9 not in window.tree
    window._finish_staged_insert()
    assert 9 in window.tree
    assert window.after_id is None


def test_search_message_clears_with_highlight(window):
    run_demo(window)
    window.entries["search"][0].set("3")
    window._on_search()
    assert window.message == "Found 3"
    assert [n.key for n in window.highlight_path] == [5, 3]
    window._clear_highlight()
    assert window.highlight_path == []
    assert window.message == ""


def test_clear_during_staging(window):
    window._stage_next_insert()
    window._clear_all()
    assert window.after_id is None
    assert window.stager.announce() is None
    assert len(window.tree) == 0
    assert window.tree.steps == []


def test_playback_stays_in_bounds(window):
    run_demo(window)
    count = len(window.tree.steps)
    window._prev()
    assert window.current_step == count - 1
    window._next()
    assert window.current_step == count - 1
    for _ in range(count + 3):
        window._prev()
    assert window.current_step == 0
    window._go_live()
    assert window.current_step is None
