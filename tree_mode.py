#!/usr/bin/env python3
"""
╔══════════════════════════════════════════════════════════════════╗
║        Special AVL Visualizer v1.0 — TREE MODE                   ║
║                                                                  ║
║  Interactive window around SpecialAVLTree:                       ║
║    1. The demo array is inserted one key at a time               ║
║       (settings.insert_delay_ms apart), showing "Inserting k".   ║
║    2. Afterwards Insert / Delete / Search entries are enabled.   ║
║       A search highlights the visited path for                   ║
║       settings.search_highlight_ms and reports Found/Not Found   ║
║       from the path's last key.                                  ║
║    3. Every operation's recorded steps land in the step log and  ║
║       can be replayed (Prev / Next / Play) or exported as GIF.   ║
║                                                                  ║
║  Architecture                                                    ║
║  ────────────                                                    ║
║  ┌──────────────┐  steps   ┌───────────────┐  commands           ║
║  │ SpecialAVL-  │ ───────► │ TreeMode-     │ ─────────► Canvas   ║
║  │   Tree       │          │   Window      │   (render.py)       ║
║  └──────────────┘          └───────┬───────┘                     ║
║                                    ├── TreeImageRenderer (PNG)   ║
║                                    └── GifExporter       (GIF)   ║
║                                                                  ║
║  Run standalone:  python tree_mode.py                            ║
║  License: MIT                                                    ║
╚══════════════════════════════════════════════════════════════════╝
"""

import logging
from tkinter import (
    Tk, Toplevel, Frame, Canvas, Label, Entry, Button, Listbox,
    Scrollbar, StringVar,
    LEFT, RIGHT, BOTH, X, Y, END, VERTICAL, NORMAL, DISABLED, W, E,
    messagebox, filedialog,
)

from binary_search import DEMO_ARRAY
from render import (
    GifExporter, TreeImageRenderer, collect_keys, count_nodes,
    fit_vertical_spacing, paint_canvas, render_message, render_tree,
    tree_height, validate_balance, validate_bst, NODE_RADIUS,
)
from settings import Settings, configure_logging
from special_avl import SpecialAVLTree, path_found

logger = logging.getLogger(__name__)


def parse_keys(text):
    """
    Parse comma/space separated integers; invalid tokens are skipped.

    >>> parse_keys("7, -3 x 18")
    [7, -3, 18]
    """
    result = []
    for token in text.replace(",", " ").split():
        try:
            result.append(int(token))
        except ValueError:
            logger.info("Skipping non-integer token %r", token)
    return result


def _accept_key_chars(proposed):
    """Entry validator: only digits, '-', commas and spaces may be typed."""
    return all(c.isdigit() or c in "-, " for c in proposed)


# ═════════════════════════════════════════════════════════════════
#  STAGING & PLAYBACK HELPERS
#  Plain state, no widgets: the window drives them from after()
#  callbacks and button handlers.
# ═════════════════════════════════════════════════════════════════
class InsertStager:
    """
    Keys waiting for a staged insert.

    Each key is first announced ("Inserting k" stays on screen for
    ``announce_ms``), then taken and inserted; the next announcement
    follows ``gap_ms`` later.
    """

    def __init__(self, keys=(), announce_ms=1000, gap_ms=2000):
        self.pending     = list(keys)
        self.announce_ms = announce_ms
        self.gap_ms      = gap_ms
        self.announced   = None

    @classmethod
    def from_settings(cls, settings, keys=()):
        delay = settings.insert_delay_ms
        return cls(keys, announce_ms=min(1000, delay), gap_ms=delay)

    def extend(self, keys):
        self.pending.extend(keys)

    def announce(self):
        """Key on display until take(); None when nothing is queued."""
        if self.announced is None and self.pending:
            self.announced = self.pending.pop(0)
        return self.announced

    def take(self):
        key, self.announced = self.announced, None
        return key

    def clear(self):
        self.pending = []
        self.announced = None


def next_step_index(current, count):
    """Step after ``current`` (None = live view), stopping at the last one."""
    if count == 0:
        return None
    if current is None:
        return 0
    return min(current + 1, count - 1)


def prev_step_index(current, count):
    """Step before ``current``; from the live view this is the last step."""
    if count == 0:
        return None
    if current is None:
        return count - 1
    return max(current - 1, 0)


# ═════════════════════════════════════════════════════════════════
#  TREE MODE WINDOW
# ═════════════════════════════════════════════════════════════════
class TreeModeWindow(Toplevel):
    """Special AVL tree visualizer.

    Attributes:
        settings (Settings):        Persisted app settings.
        tree (SpecialAVLTree):      The engine; its ``steps`` feed the log.
        stager (InsertStager):      Keys still waiting for a staged insert.
        highlight_path (list):      AVLNodes currently lit on the canvas.
        message (str):              Status line drawn at the canvas bottom.
        current_step (int | None):  Step being replayed; None = live tree.
        playing (bool):             True while auto-play is active.
        after_id (str | None):      Pending ``after()`` id (staging/playback).
    """

    def __init__(self, master, settings, initial_keys=None):
        super().__init__(master)
        self.settings = settings
        self.title("🌳 Special AVL Tree — Binary Search-Like  v1.0")
        self.geometry("1600x1000")
        self.minsize(1000, 700)
        self.configure(bg=settings.get("BG"))

        self.tree           = SpecialAVLTree(record=True)
        self.stager         = InsertStager.from_settings(
            settings, DEMO_ARRAY if initial_keys is None else initial_keys)
        self._demo_done     = False
        self.highlight_path = []
        self.message        = ""
        self._search_message = ""
        self.current_step   = None
        self.playing        = False
        self.after_id       = None
        self._clear_id      = None
        self._play_id       = None

        self.gif_exporter = GifExporter(settings)

        self._build_ui()
        self._set_inputs_enabled(False)
        self.protocol("WM_DELETE_WINDOW", self._on_close)
        self.after_id = self.after(100, self._stage_next_insert)

    def _on_close(self):
        """Cancel pending callbacks before destroying the window."""
        self.playing = False
        for aid in (self.after_id, self._clear_id, self._play_id):
            if aid:
                self.after_cancel(aid)
        self.destroy()

    # ═══════════════════════════════════════════════════════════════
    #  BUILD UI
    #    1. top   — title + Home / Theme buttons
    #    2. inp   — Insert / Delete / Search entries
    #    3. body  — canvas (center) + step log & stats (right)
    #    4. ctrl  — playback + export buttons
    # ═══════════════════════════════════════════════════════════════
    def _build_ui(self):
        s = self.settings

        top = Frame(self, bg=s.get("BG2"))
        top.pack(fill=X, padx=8, pady=6)
        Label(top, text="🌳 Tree Mode — rebuild-on-every-change balanced BST",
              font=("Consolas", 14, "bold"),
              bg=s.get("BG2"), fg=s.get("ACCENT")).pack(side=LEFT, padx=10)
        for txt, cmd in [("🌓 Theme", self._toggle_theme),
                         ("🏠 Home", self._go_home)]:
            Button(top, text=txt, font=("Consolas", 11, "bold"),
                   bg=s.get("BTN_BG"), fg=s.get("FG"), bd=0, cursor="hand2",
                   padx=10, command=cmd).pack(side=RIGHT, padx=4)

        # ── Input row ──
        inp = Frame(self, bg=s.get("BG"))
        inp.pack(fill=X, padx=8, pady=4)
        vcmd = (self.register(_accept_key_chars), "%P")
        self.entries = {}
        self.buttons = []
        for name, label, color, cmd in [
            ("insert", "Insert:", "GREEN_C", self._on_insert),
            ("delete", "Delete:", "RED_C",   self._on_delete),
            ("search", "Search:", "ACCENT",  self._on_search),
        ]:
            Label(inp, text=label, font=("Consolas", 10),
                  bg=s.get("BG"), fg=s.get("FG")).pack(side=LEFT, padx=(12, 0))
            var = StringVar()
            entry = Entry(inp, textvariable=var, font=("Consolas", 11),
                          width=14, bg=s.get("BG2"), fg=s.get("FG"),
                          insertbackground=s.get("FG"),
                          validate="key", validatecommand=vcmd)
            entry.pack(side=LEFT, padx=4)
            entry.bind("<Return>", lambda e, c=cmd: c())
            btn = Button(inp, text=label.rstrip(":"),
                         font=("Consolas", 10, "bold"),
                         bg=s.get(color), fg="#11111b", bd=0, cursor="hand2",
                         padx=8, command=cmd)
            btn.pack(side=LEFT, padx=2)
            self.entries[name] = (var, entry)
            self.buttons.append(btn)

        Button(inp, text="🗑 Clear", font=("Consolas", 10, "bold"),
               bg=s.get("BTN_BG"), fg=s.get("FG"), bd=0, cursor="hand2",
               padx=8, command=self._clear_all).pack(side=RIGHT, padx=4)

        # ── Body ──
        body = Frame(self, bg=s.get("BG"))
        body.pack(fill=BOTH, expand=True, padx=8, pady=4)

        center = Frame(body, bg=s.get("CANVAS_BG"), bd=2, relief="sunken")
        center.pack(side=LEFT, fill=BOTH, expand=True, padx=(0, 4))
        self.canvas = Canvas(center, bg=s.get("CANVAS_BG"), highlightthickness=0)
        self.canvas.pack(fill=BOTH, expand=True)
        self.canvas.bind("<Configure>", lambda e: self._redraw())

        right = Frame(body, bg=s.get("BG2"), width=320, bd=1, relief="solid")
        right.pack(side=RIGHT, fill=Y)
        right.pack_propagate(False)

        Label(right, text="📋 Step Log", font=("Consolas", 11, "bold"),
              bg=s.get("BG2"), fg=s.get("ACCENT")).pack(fill=X, padx=4, pady=4)
        lf = Frame(right, bg=s.get("BG2"))
        lf.pack(fill=BOTH, expand=True, padx=4, pady=2)
        lsb = Scrollbar(lf, orient=VERTICAL)
        self.log_list = Listbox(lf, font=("Consolas", 9),
                                bg=s.get("BG"), fg=s.get("FG"),
                                yscrollcommand=lsb.set, activestyle="none",
                                selectbackground=s.get("ACCENT"),
                                selectforeground="#11111b")
        lsb.config(command=self.log_list.yview)
        lsb.pack(side=RIGHT, fill=Y)
        self.log_list.pack(side=LEFT, fill=BOTH, expand=True)
        self.log_list.bind("<<ListboxSelect>>", self._on_log_select)

        stats_f = Frame(right, bg=s.get("STATS_BG"), bd=1, relief="groove")
        stats_f.pack(fill=X, padx=4, pady=4)
        Label(stats_f, text="📊 Tree Stats", font=("Consolas", 10, "bold"),
              bg=s.get("STATS_BG"), fg=s.get("ACCENT")).pack(anchor=W, padx=4, pady=2)
        self.stats_labels = {}
        for key, txt in [("nodes", "Nodes:"), ("height", "Height:"),
                         ("root", "Root:"), ("valid", "Balanced:")]:
            row = Frame(stats_f, bg=s.get("STATS_BG"))
            row.pack(fill=X, padx=6, pady=1)
            Label(row, text=txt, font=("Consolas", 9), width=9, anchor=W,
                  bg=s.get("STATS_BG"), fg=s.get("STATS_FG")).pack(side=LEFT)
            v = Label(row, text="—", font=("Consolas", 9, "bold"), anchor=E,
                      bg=s.get("STATS_BG"), fg=s.get("FG"))
            v.pack(side=RIGHT)
            self.stats_labels[key] = v
        self.inorder_label = Label(stats_f, text="In-order: —",
                                   font=("Consolas", 9), wraplength=290,
                                   justify="left", anchor=W,
                                   bg=s.get("STATS_BG"), fg=s.get("STATS_FG"))
        self.inorder_label.pack(fill=X, padx=6, pady=(2, 4))

        # ── Controls ──
        ctrl = Frame(self, bg=s.get("BG2"))
        ctrl.pack(fill=X, padx=8, pady=6)
        self.step_label = Label(ctrl, text="Live", font=("Consolas", 12, "bold"),
                                bg=s.get("BG2"), fg=s.get("FG"), width=14)
        self.step_label.pack(side=LEFT, padx=(10, 12))
        bs = {"font": ("Consolas", 11, "bold"), "bd": 0, "cursor": "hand2",
              "padx": 8}
        Button(ctrl, text="◀ Prev", command=self._prev,
               bg=s.get("BTN_BG"), fg=s.get("FG"), **bs).pack(side=LEFT, padx=2)
        self.play_btn = Button(ctrl, text="▶ Play", command=self._toggle_play,
                               bg=s.get("GREEN_C"), fg="#11111b", **bs)
        self.play_btn.pack(side=LEFT, padx=2)
        Button(ctrl, text="Next ▶", command=self._next,
               bg=s.get("BTN_BG"), fg=s.get("FG"), **bs).pack(side=LEFT, padx=2)
        Button(ctrl, text="⏭ Live", command=self._go_live,
               bg=s.get("BTN_BG"), fg=s.get("FG"), **bs).pack(side=LEFT, padx=2)

        Button(ctrl, text="📤 PNG", font=("Consolas", 10, "bold"),
               bg=s.get("ACCENT"), fg="#11111b", bd=0, cursor="hand2",
               command=self._export_png).pack(side=RIGHT, padx=2)
        Button(ctrl, text="🎞 GIF", font=("Consolas", 10, "bold"),
               bg=s.get("GREEN_C"), fg="#11111b", bd=0, cursor="hand2",
               command=self._export_gif).pack(side=RIGHT, padx=2)

    def _set_inputs_enabled(self, enabled):
        state = NORMAL if enabled else DISABLED
        for _var, entry in self.entries.values():
            entry.config(state=state)
        for btn in self.buttons:
            btn.config(state=state)

    # ═══════════════════════════════════════════════════════════════
    #  STAGED INSERTION
    #  Demo keys and interactive inserts alike: "Inserting k" is shown
    #  for announce_ms, then the key is inserted and the next one is
    #  announced gap_ms later.
    # ═══════════════════════════════════════════════════════════════
    def _stage_next_insert(self):
        self.after_id = None
        key = self.stager.announce()
        if key is None:
            if not self._demo_done:
                self._demo_done = True
                self._set_inputs_enabled(True)
                self._show_message("Initial tree complete — try Insert / Search")
                logger.info("Initial tree complete: %d keys", len(self.tree))
            return
        self._show_message(f"Inserting {key}")
        self.after_id = self.after(self.stager.announce_ms,
                                   self._finish_staged_insert)

    def _finish_staged_insert(self):
        self._apply("insert", self.stager.take())
        if self.stager.pending or not self._demo_done:
            self.after_id = self.after(self.stager.gap_ms,
                                       self._stage_next_insert)
        else:
            self.after_id = None

    # ═══════════════════════════════════════════════════════════════
    #  OPERATIONS
    # ═══════════════════════════════════════════════════════════════
    def _take_keys(self, name):
        var, _entry = self.entries[name]
        keys = parse_keys(var.get())
        var.set("")
        if not keys:
            messagebox.showwarning("Warning", "No valid numbers found.", parent=self)
        return keys

    def _on_insert(self):
        keys = self._take_keys("insert")
        if not keys:
            return
        self.stager.extend(keys)
        if self.after_id is None:
            self._stage_next_insert()

    def _on_delete(self):
        for key in self._take_keys("delete"):
            self._apply("delete", key)

    def _on_search(self):
        keys = self._take_keys("search")
        if not keys:
            return
        key = keys[-1]
        first = len(self.tree.steps)
        path = self.tree.search_recorded(key)
        self._log_steps(first)
        found = path_found(path, key)
        logger.info("Search %s: %s after %d nodes",
                    key, "found" if found else "not found", len(path))
        self._go_live()
        self.highlight_path = path
        self._search_message = ("Found " if found else "Not Found ") + str(key)
        self._show_message(self._search_message)
        if self._clear_id:
            self.after_cancel(self._clear_id)
        self._clear_id = self.after(self.settings.search_highlight_ms,
                                    self._clear_highlight)

    def _apply(self, op, key):
        first = len(self.tree.steps)
        if op == "insert":
            changed = self.tree.insert(key)
            msg = f"Inserted {key}" if changed else f"{key} already present"
        else:
            changed = self.tree.remove(key)
            msg = f"Deleted {key}" if changed else f"{key} not in tree"
        logger.info("%s %s → %s", op.upper(), key, "ok" if changed else "no-op")
        self._log_steps(first)
        self.highlight_path = []
        self._go_live()
        self._show_message(msg)

    def _clear_highlight(self):
        self._clear_id = None
        self.highlight_path = []
        if self.message == self._search_message:
            self.message = ""
        self._redraw()

    def _clear_all(self):
        """Fresh tree, empty log; staged insertion is cancelled."""
        if self.after_id:
            self.after_cancel(self.after_id)
            self.after_id = None
        self.stager.clear()
        self._demo_done = True
        self.playing = False
        self.play_btn.config(text="▶ Play", bg=self.settings.get("GREEN_C"))
        self.tree = SpecialAVLTree(record=True)
        self.log_list.delete(0, END)
        self.highlight_path = []
        self._set_inputs_enabled(True)
        self._go_live()
        self._show_message("Cleared.")

    def _log_steps(self, first):
        for st in self.tree.steps[first:]:
            self.log_list.insert(END, f"  {st['desc']}")
        self.log_list.see(END)

    # ═══════════════════════════════════════════════════════════════
    #  DRAWING
    # ═══════════════════════════════════════════════════════════════
    def _show_message(self, text):
        self.message = text
        self._redraw()

    def _view(self):
        """(root, path, message) for the live tree or the replayed step."""
        if self.current_step is None:
            return self.tree.root, self.highlight_path, self.message
        st = self.tree.steps[self.current_step]
        return st["tree_state"], st["path"], st["desc"]

    def _redraw(self):
        c = self.canvas
        c.delete("all")
        cw = max(c.winfo_width(), 600)
        ch = max(c.winfo_height(), 400)
        root, path, message = self._view()

        levels = max(tree_height(root), 1)
        v_spacing = fit_vertical_spacing(root, ch)
        # shrink circles once the bottom level gets crowded
        leaf_gap = cw * 3 / 16 / 2 ** max(levels - 2, 0)
        radius = max(12, min(NODE_RADIUS, int(leaf_gap * 0.9)))
        cmds = render_tree(root, path, (cw, ch), radius=radius,
                           v_spacing=v_spacing)
        if message:
            cmds += render_message(message, (cw, ch))
        paint_canvas(c, cmds, self.settings, scale=radius / NODE_RADIUS)
        self._update_stats(root)

        if self.current_step is None:
            self.step_label.config(text="Live")
        else:
            self.step_label.config(
                text=f"Step {self.current_step + 1} / {len(self.tree.steps)}")

    def _update_stats(self, root):
        if root is None:
            for v in self.stats_labels.values():
                v.config(text="—")
            self.inorder_label.config(text="In-order: —")
            return
        ok_bst, _ = validate_bst(root)
        ok_bal, _ = validate_balance(root)
        self.stats_labels["nodes"].config(text=str(count_nodes(root)))
        self.stats_labels["height"].config(text=str(tree_height(root)))
        self.stats_labels["root"].config(text=str(root.key))
        self.stats_labels["valid"].config(
            text="✅ Yes" if ok_bst and ok_bal else "❌ No")
        self.inorder_label.config(
            text="In-order: " + " ".join(str(k) for k in collect_keys(root)))

    # ═══════════════════════════════════════════════════════════════
    #  PLAYBACK
    # ═══════════════════════════════════════════════════════════════
    def _on_log_select(self, event=None):
        sel = self.log_list.curselection()
        if sel and sel[0] < len(self.tree.steps):
            self.current_step = sel[0]
            self._redraw()

    def _next(self):
        self._show_step(next_step_index(self.current_step, len(self.tree.steps)))

    def _prev(self):
        self._show_step(prev_step_index(self.current_step, len(self.tree.steps)))

    def _show_step(self, idx):
        if idx is None:
            return
        self.current_step = idx
        self._select_log(idx)
        self._redraw()

    def _go_live(self):
        self.current_step = None
        if self.playing:
            self._toggle_play()
        self._redraw()

    def _select_log(self, idx):
        self.log_list.selection_clear(0, END)
        self.log_list.selection_set(idx)
        self.log_list.see(idx)

    def _toggle_play(self):
        if self.playing:
            self.playing = False
            self.play_btn.config(text="▶ Play", bg=self.settings.get("GREEN_C"))
            if self._play_id:
                self.after_cancel(self._play_id)
                self._play_id = None
            return
        if not self.tree.steps:
            messagebox.showinfo("Info", "Nothing recorded yet.", parent=self)
            return
        if self.current_step is None or self.current_step >= len(self.tree.steps) - 1:
            self.current_step = -1
        self.playing = True
        self.play_btn.config(text="⏸ Pause", bg=self.settings.get("RED_C"))
        self._auto_step()

    def _auto_step(self):
        self._play_id = None
        if not self.playing:
            return
        if self.current_step < len(self.tree.steps) - 1:
            self.current_step += 1
            self._select_log(self.current_step)
            self._redraw()
            self._play_id = self.after(self.settings.anim_speed, self._auto_step)
        else:
            self.playing = False
            self.play_btn.config(text="▶ Play", bg=self.settings.get("GREEN_C"))

    # ═══════════════════════════════════════════════════════════════
    #  EXPORT
    # ═══════════════════════════════════════════════════════════════
    def _export_png(self):
        filename = filedialog.asksaveasfilename(
            parent=self, defaultextension=".png",
            filetypes=[("PNG image", "*.png")])
        if not filename:
            return
        root, path, message = self._view()
        img = TreeImageRenderer(self.settings).render(
            root, path, title="Special AVL Tree", message=message)
        try:
            img.save(filename)
        except (OSError, ValueError) as e:
            logger.exception("PNG export to %s failed", filename)
            messagebox.showerror("PNG Error", str(e), parent=self)
            return
        logger.info("Exported PNG to %s", filename)

    def _export_gif(self):
        if not self.tree.steps:
            messagebox.showinfo("Info", "Nothing recorded yet.", parent=self)
            return
        filename = filedialog.asksaveasfilename(
            parent=self, defaultextension=".gif",
            filetypes=[("GIF animation", "*.gif")])
        if not filename:
            return
        if not self.gif_exporter.export(self.tree.steps, filename):
            messagebox.showerror("GIF Error",
                                 f"Could not write {filename} (see log).",
                                 parent=self)

    # ═══════════════════════════════════════════════════════════════
    #  NAVIGATION
    # ═══════════════════════════════════════════════════════════════
    def _toggle_theme(self):
        self.settings.theme = "light" if self.settings.theme == "dark" else "dark"
        self.settings.save()
        messagebox.showinfo("Theme",
                            "Theme saved; it applies to newly opened windows.",
                            parent=self)

    def _go_home(self):
        self._on_close()
        self.master.deiconify()


if __name__ == "__main__":
    configure_logging()
    root = Tk()
    root.withdraw()
    win = TreeModeWindow(root, Settings())
    win.protocol("WM_DELETE_WINDOW", root.destroy)
    root.mainloop()
