#!/usr/bin/env python3
"""
╔══════════════════════════════════════════════════════════════════╗
║         Special AVL Visualizer v1.0 — Entry Point                ║
║                                                                  ║
║  License : MIT                                                   ║
║  Run     : python main.py            (home window)               ║
║            python main.py --console  (text demo, no GUI)         ║
║                                                                  ║
║  Architecture:                                                   ║
║    main.py  ──► ModeSelector (Home)                              ║
║                   ├──► tree_mode.py   (Tree Mode)                ║
║                   └──► search_mode.py (Binary Search)            ║
║                                                                  ║
║  Dependencies:                                                   ║
║    • tkinter (standard library)                                  ║
║    • Pillow  — PNG / GIF export                                  ║
╚══════════════════════════════════════════════════════════════════╝
"""

import logging
import sys
from tkinter import Tk, Toplevel, Frame, Label, Button, CENTER, messagebox

from binary_search import DEMO_ARRAY, NOT_FOUND, binary_search, format_probe_path
from settings import Settings, configure_logging
from special_avl import SpecialAVLTree, path_found

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  HELPER: Hex Color Utilities (button hover effects)
# ══════════════════════════════════════════════════════════

def _hex_to_rgb(h: str) -> tuple:
    """Convert hex color "#rrggbb" to (R, G, B) tuple (0–255)."""
    h = h.lstrip("#")
    return tuple(int(h[i:i+2], 16) for i in (0, 2, 4))


def _rgb_to_hex(r: float, g: float, b: float) -> str:
    """Convert (R, G, B) floats to clamped hex "#rrggbb" string."""
    return (f"#{max(0, min(255, int(r))):02x}"
            f"{max(0, min(255, int(g))):02x}"
            f"{max(0, min(255, int(b))):02x}")


def _lerp_color(c1: str, c2: str, t: float) -> str:
    """Linearly interpolate between two hex colors (t = 0 → c1, 1 → c2)."""
    r1, g1, b1 = _hex_to_rgb(c1)
    r2, g2, b2 = _hex_to_rgb(c2)
    return _rgb_to_hex(r1 + (r2 - r1) * t,
                       g1 + (g2 - g1) * t,
                       b1 + (b2 - b1) * t)


# ══════════════════════════════════════════════════════════
#  CONSOLE DEMO
# ══════════════════════════════════════════════════════════

def console_demo(target=110, out=print) -> None:
    """
    Text walkthrough of both demonstrations.

      1. Flat binary search for ``target`` over DEMO_ARRAY.
      2. Special AVL tree: insert the first ten demo keys, search for
         ``target``, insert it, search again.
    """
    index, path = binary_search(DEMO_ARRAY, target)
    out(format_probe_path(DEMO_ARRAY, path))
    if index != NOT_FOUND:
        out(f"Element {target} found at index {index}")
    else:
        out("Element not found")

    tree = SpecialAVLTree(DEMO_ARRAY[:10])
    out("In-order: " + " ".join(str(k) for k in tree.inorder()))
    for _ in range(2):
        path = tree.get_search_path(target)
        verdict = "Found" if path_found(path, target) else "Not Found"
        out(f"{verdict} {target}: path " + " -> ".join(str(n.key) for n in path))
        if tree.insert(target):
            out(f"Inserted {target} (root is now {tree.get_root().key})")


# ══════════════════════════════════════════════════════════
#  HOME SCREEN — Mode Selector
# ══════════════════════════════════════════════════════════

class ModeSelector(Toplevel):
    """
    Home screen with two mode buttons.

    Launching a mode hides this window; the mode's Home button (or
    closing it) brings it back.
    """

    def __init__(self, master, settings: Settings):
        super().__init__(master)
        self.settings = settings
        self.title("Special AVL Visualizer v1.0")
        self.geometry("560x420")
        self.resizable(False, False)
        bg = settings.get("BG")
        self.configure(bg=bg)

        content = Frame(self, bg=bg)
        content.place(relx=0.5, rely=0.5, anchor=CENTER)

        Label(content, text="🌳", font=("Segoe UI Emoji", 40),
              bg=bg, fg=settings.get("GREEN_C")).pack(pady=(0, 6))
        Label(content, text="Special AVL Visualizer",
              font=("Consolas", 20, "bold"),
              bg=bg, fg=settings.get("ACCENT")).pack(pady=(0, 2))
        Label(content, text="v1.0  ·  Tree  ·  Binary Search",
              font=("Consolas", 11),
              bg=bg, fg=settings.get("FG")).pack(pady=(0, 24))

        self._make_mode_button(
            content, "🌳  Tree Mode\nRebuild-balanced BST",
            settings.get("GREEN_C"), self._open_tree)
        self._make_mode_button(
            content, "🔍  Binary Search Mode\nUpper-middle probing",
            settings.get("ACCENT"), self._open_search)

        self.protocol("WM_DELETE_WINDOW", self._quit)

    def _make_mode_button(self, parent, text, color, command):
        frame = Frame(parent, bg=self.settings.get("BG"))
        frame.pack(pady=7)
        btn = Button(frame, text=text,
                     font=("Consolas", 13, "bold"),
                     bg=color, fg="#11111b",
                     activebackground=_lerp_color(color, "#ffffff", 0.2),
                     activeforeground="#000000",
                     bd=0, cursor="hand2", width=32, height=3,
                     relief="flat", command=command)
        btn.pack(padx=3, pady=3)
        hover_color = _lerp_color(color, "#ffffff", 0.15)
        btn.bind("<Enter>", lambda e: btn.configure(bg=hover_color))
        btn.bind("<Leave>", lambda e: btn.configure(bg=color))

    # ══════════════════════════════════════════════════════
    #  MODE LAUNCHERS
    # ══════════════════════════════════════════════════════

    def _open_tree(self) -> None:
        from tree_mode import TreeModeWindow
        self._launch(TreeModeWindow)

    def _open_search(self) -> None:
        from search_mode import SearchModeWindow
        self._launch(SearchModeWindow)

    def _launch(self, window_cls) -> None:
        self.withdraw()
        try:
            w = window_cls(self, self.settings)
        except Exception as e:
            logger.exception("Could not open %s", window_cls.__name__)
            messagebox.showerror("Error", f"Could not open mode:\n{e}")
            self.deiconify()
            return
        w.protocol("WM_DELETE_WINDOW", w._go_home)

    def _quit(self) -> None:
        self.settings.save()
        self.master.destroy()


# ══════════════════════════════════════════════════════════
#  MAIN — Application Entry Point
# ══════════════════════════════════════════════════════════

def main(argv=None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    configure_logging("DEBUG" if "--debug" in argv else None)

    if "--console" in argv:
        console_demo()
        return

    root = Tk()
    root.withdraw()   # Root window stays hidden — we use Toplevels
    ModeSelector(root, Settings())
    root.mainloop()


if __name__ == "__main__":
    main()
