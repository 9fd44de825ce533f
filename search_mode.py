#!/usr/bin/env python3
"""
╔══════════════════════════════════════════════════════════════════╗
║      Special AVL Visualizer v1.0 — BINARY SEARCH MODE            ║
║                                                                  ║
║  Description:                                                    ║
║    Shows a sorted array as a row of cells and replays an         ║
║    upper-middle binary search probe by probe: the current        ║
║    [lo, hi] window, the probed mid, and the final verdict with   ║
║    the "Path taken" line listing every probed value.             ║
║                                                                  ║
║  Architecture:                                                   ║
║    search_mode.py                                                ║
║      └── SearchModeWindow (Toplevel)                             ║
║            ├── binary_search_steps()  — probe recording          ║
║            └── render_array()         — draw commands            ║
║                                                                  ║
║  Can run standalone:                                             ║
║    python search_mode.py                                         ║
║                                                                  ║
║  License: MIT                                                    ║
╚══════════════════════════════════════════════════════════════════╝
"""

# ══════════════════════════════════════════════════════════════
#  IMPORTS
# ══════════════════════════════════════════════════════════════
import logging
from tkinter import (Tk, Toplevel, Frame, Canvas, Label, Entry, Button,
                     Listbox, Scrollbar, StringVar,
                     LEFT, RIGHT, BOTH, X, Y, END, VERTICAL,
                     messagebox, filedialog)

from binary_search import (DEMO_ARRAY, NOT_FOUND, binary_search,
                           binary_search_steps, format_probe_path)
from tree_mode import parse_keys
from render import TreeImageRenderer, paint_canvas, render_array, render_message
from settings import Settings, configure_logging

logger = logging.getLogger(__name__)


class SearchModeWindow(Toplevel):
    """
    Binary search playback window.

    Attributes:
        settings (Settings): Colours and animation speed.
        array    (list)    : Sorted values being searched.
        steps    (list)    : Step dicts from binary_search_steps().
        current  (int)     : Index of the step on screen (-1 = none yet).
        result   (tuple)   : (index, probe_path) of the last search.
    """

    def __init__(self, master, settings, array=None):
        super().__init__(master)
        self.settings = settings
        self.title("🔍 Binary Search — Upper-Middle Probing  v1.0")
        self.geometry("1400x700")
        self.minsize(900, 500)
        self.configure(bg=settings.get("BG"))

        self.array    = sorted(set(array if array is not None else DEMO_ARRAY))
        self.target   = None
        self.steps    = []
        self.current  = -1
        self.result   = None
        self.playing  = False
        self._play_id = None

        self._build_ui()
        self.protocol("WM_DELETE_WINDOW", self._on_close)

    def _on_close(self) -> None:
        self.playing = False
        if self._play_id:
            self.after_cancel(self._play_id)
        self.destroy()

    # ══════════════════════════════════════════════════════════
    #  UI CONSTRUCTION
    # ══════════════════════════════════════════════════════════

    def _build_ui(self) -> None:
        s = self.settings
        bs = {"font": ("Consolas", 10, "bold"), "bd": 0, "cursor": "hand2",
              "padx": 8}

        top = Frame(self, bg=s.get("BG2"))
        top.pack(fill=X, padx=8, pady=6)
        Label(top, text="🔍 Binary Search Mode", font=("Consolas", 14, "bold"),
              bg=s.get("BG2"), fg=s.get("ACCENT")).pack(side=LEFT, padx=10)
        Button(top, text="🏠 Home", command=self._go_home,
               bg=s.get("BTN_BG"), fg=s.get("FG"), **bs).pack(side=RIGHT, padx=4)

        # ── Array + target inputs ──
        inp = Frame(self, bg=s.get("BG"))
        inp.pack(fill=X, padx=8, pady=4)
        Label(inp, text="Array:", font=("Consolas", 10),
              bg=s.get("BG"), fg=s.get("FG")).pack(side=LEFT)
        self.array_var = StringVar(value=",".join(str(v) for v in self.array))
        Entry(inp, textvariable=self.array_var, font=("Consolas", 11),
              width=60, bg=s.get("BG2"), fg=s.get("FG"),
              insertbackground=s.get("FG")).pack(side=LEFT, padx=4)
        Button(inp, text="Load", command=self._on_load,
               bg=s.get("BTN_BG"), fg=s.get("FG"), **bs).pack(side=LEFT, padx=4)

        Label(inp, text="Target:", font=("Consolas", 10),
              bg=s.get("BG"), fg=s.get("FG")).pack(side=LEFT, padx=(16, 0))
        self.target_var = StringVar(value=str(self.array[-1]) if self.array else "")
        te = Entry(inp, textvariable=self.target_var, font=("Consolas", 11),
                   width=8, bg=s.get("BG2"), fg=s.get("FG"),
                   insertbackground=s.get("FG"))
        te.pack(side=LEFT, padx=4)
        te.bind("<Return>", lambda e: self._on_search())
        Button(inp, text="🔍 Search", command=self._on_search,
               bg=s.get("ACCENT"), fg="#11111b", **bs).pack(side=LEFT, padx=4)

        # ── Canvas + probe log ──
        body = Frame(self, bg=s.get("BG"))
        body.pack(fill=BOTH, expand=True, padx=8, pady=4)
        self.canvas = Canvas(body, bg=s.get("CANVAS_BG"), highlightthickness=0)
        self.canvas.pack(side=LEFT, fill=BOTH, expand=True)
        self.canvas.bind("<Configure>", lambda e: self._redraw())

        lf = Frame(body, bg=s.get("BG2"), width=340)
        lf.pack(side=RIGHT, fill=Y, padx=(4, 0))
        lf.pack_propagate(False)
        Label(lf, text="📋 Probes", font=("Consolas", 11, "bold"),
              bg=s.get("BG2"), fg=s.get("ACCENT")).pack(fill=X, pady=4)
        sb = Scrollbar(lf, orient=VERTICAL)
        self.log_list = Listbox(lf, font=("Consolas", 9),
                                bg=s.get("BG"), fg=s.get("FG"),
                                yscrollcommand=sb.set, activestyle="none",
                                selectbackground=s.get("ACCENT"),
                                selectforeground="#11111b")
        sb.config(command=self.log_list.yview)
        sb.pack(side=RIGHT, fill=Y)
        self.log_list.pack(side=LEFT, fill=BOTH, expand=True)

        # ── Playback controls ──
        ctrl = Frame(self, bg=s.get("BG2"))
        ctrl.pack(fill=X, padx=8, pady=6)
        Button(ctrl, text="◀ Prev", command=self._prev,
               bg=s.get("BTN_BG"), fg=s.get("FG"), **bs).pack(side=LEFT, padx=2)
        self.play_btn = Button(ctrl, text="▶ Play", command=self._toggle_play,
                               bg=s.get("GREEN_C"), fg="#11111b", **bs)
        self.play_btn.pack(side=LEFT, padx=2)
        Button(ctrl, text="Next ▶", command=self._next,
               bg=s.get("BTN_BG"), fg=s.get("FG"), **bs).pack(side=LEFT, padx=2)
        self.result_label = Label(ctrl, text="", font=("Consolas", 11, "bold"),
                                  bg=s.get("BG2"), fg=s.get("FG"), anchor="w")
        self.result_label.pack(side=LEFT, fill=X, expand=True, padx=12)
        Button(ctrl, text="📤 PNG", command=self._export_png,
               bg=s.get("ACCENT"), fg="#11111b", **bs).pack(side=RIGHT, padx=2)

    # ══════════════════════════════════════════════════════════
    #  CALLBACKS
    # ══════════════════════════════════════════════════════════

    def _on_load(self) -> None:
        """Parse the array entry; values are de-duplicated and sorted."""
        values = parse_keys(self.array_var.get())
        if not values:
            messagebox.showwarning("Warning", "No valid numbers found.", parent=self)
            return
        self.array = sorted(set(values))
        self.array_var.set(",".join(str(v) for v in self.array))
        self._reset_search()
        logger.info("Loaded array of %d values", len(self.array))

    def _on_search(self) -> None:
        values = parse_keys(self.target_var.get())
        if not values:
            messagebox.showwarning("Warning", "Enter a numeric target.", parent=self)
            return
        self._reset_search()
        self.target = values[0]
        self.steps = binary_search_steps(self.array, self.target)
        self.result = binary_search(self.array, self.target)
        for st in self.steps:
            self.log_list.insert(END, f"  {st['desc']}")
        index, path = self.result
        logger.info("Binary search for %s: index %s after %d probes",
                    self.target, index, len(path))
        self._toggle_play()

    def _reset_search(self) -> None:
        self.playing = False
        if self._play_id:
            self.after_cancel(self._play_id)
            self._play_id = None
        self.play_btn.config(text="▶ Play", bg=self.settings.get("GREEN_C"))
        self.steps, self.current, self.result = [], -1, None
        self.log_list.delete(0, END)
        self.result_label.config(text="")
        self._redraw()

    # ══════════════════════════════════════════════════════════
    #  PLAYBACK
    # ══════════════════════════════════════════════════════════

    def _next(self) -> None:
        if self.current < len(self.steps) - 1:
            self.current += 1
            self._show_current()

    def _prev(self) -> None:
        if self.current > 0:
            self.current -= 1
            self._show_current()

    def _toggle_play(self) -> None:
        if self.playing:
            self.playing = False
            self.play_btn.config(text="▶ Play", bg=self.settings.get("GREEN_C"))
            return
        if not self.steps:
            return
        if self.current >= len(self.steps) - 1:
            self.current = -1
        self.playing = True
        self.play_btn.config(text="⏸ Pause", bg=self.settings.get("RED_C"))
        self._auto_step()

    def _auto_step(self) -> None:
        self._play_id = None
        if not self.playing:
            return
        if self.current < len(self.steps) - 1:
            self._next()
            self._play_id = self.after(self.settings.anim_speed, self._auto_step)
        else:
            self.playing = False
            self.play_btn.config(text="▶ Play", bg=self.settings.get("GREEN_C"))

    def _show_current(self) -> None:
        self.log_list.selection_clear(0, END)
        self.log_list.selection_set(self.current)
        self.log_list.see(self.current)
        if self.current == len(self.steps) - 1 and self.result is not None:
            index, path = self.result
            verdict = (f"Element {self.target} found at index {index}"
                       if index != NOT_FOUND else "Element not found")
            self.result_label.config(
                text=f"{verdict}   ·   {format_probe_path(self.array, path)}")
        else:
            self.result_label.config(text="")
        self._redraw()

    # ══════════════════════════════════════════════════════════
    #  DRAWING
    # ══════════════════════════════════════════════════════════

    def _step_view(self):
        """(step dict, indices probed up to and including it)."""
        if not (0 <= self.current < len(self.steps)):
            return None, []
        step = self.steps[self.current]
        probed = [st["mid"] for st in self.steps[:self.current + 1]
                  if st["mid"] is not None]
        return step, probed

    def _redraw(self) -> None:
        c = self.canvas
        c.delete("all")
        cw = max(c.winfo_width(), 600)
        ch = max(c.winfo_height(), 300)
        step, probed = self._step_view()
        if step is None:
            cmds = render_array(self.array, viewport=(cw, ch))
        else:
            found = step["mid"] if step["action"] == "found" else None
            cmds = render_array(self.array, step["lo"], step["hi"], step["mid"],
                                found, (cw, ch), probed)
            cmds += render_message(step["desc"], (cw, ch))
        paint_canvas(c, cmds, self.settings)

    def _export_png(self) -> None:
        filename = filedialog.asksaveasfilename(
            parent=self, defaultextension=".png",
            filetypes=[("PNG image", "*.png")])
        if not filename:
            return
        step, probed = self._step_view()
        img = TreeImageRenderer(self.settings, 1400, 500).render_array(
            self.array, step, probed, title="Binary Search",
            message=step["desc"] if step else "")
        try:
            img.save(filename)
        except (OSError, ValueError) as e:
            logger.exception("PNG export to %s failed", filename)
            messagebox.showerror("PNG Error", str(e), parent=self)

    def _go_home(self) -> None:
        self._on_close()
        self.master.deiconify()


if __name__ == "__main__":
    configure_logging()
    root = Tk()
    root.withdraw()
    win = SearchModeWindow(root, Settings())
    win.protocol("WM_DELETE_WINDOW", root.destroy)
    root.mainloop()
