"""
╔══════════════════════════════════════════════════════════════════╗
║        Special AVL Visualizer v1.0 — SETTINGS & LOGGING          ║
║                                                                  ║
║  Shared by every window of the application:                      ║
║    • THEMES          — two Catppuccin-inspired palettes          ║
║    • Settings        — persisted user preferences (JSON)         ║
║    • LOGGING_CONFIG  — kwargs for logging.basicConfig()          ║
║                                                                  ║
║  License: MIT                                                    ║
╚══════════════════════════════════════════════════════════════════╝
"""

import json
import logging
import os

logger = logging.getLogger(__name__)


# ═════════════════════════════════════════════════════════════════
#  LOGGING
# ═════════════════════════════════════════════════════════════════
LOGGING_CONFIG = {
    "level": "INFO",
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}


def configure_logging(level=None):
    """Apply LOGGING_CONFIG to the root logger (optionally overriding the level)."""
    cfg = dict(LOGGING_CONFIG)
    if level is not None:
        cfg["level"] = level
    logging.basicConfig(**cfg)


# ═════════════════════════════════════════════════════════════════
#  THEME DEFINITIONS
#  Each key maps to a hex colour.  Draw commands produced by
#  render.py carry these keys, never raw colours.
# ═════════════════════════════════════════════════════════════════
THEMES = {
    # ── Dark theme (Catppuccin Mocha) ────────────────────────────
    "dark": {
        "BG": "#1e1e2e",              # Main window background
        "BG2": "#2a2a3d",             # Secondary panels
        "FG": "#cdd6f4",              # Primary foreground text
        "ACCENT": "#89b4fa",          # Buttons, headings
        "GREEN_C": "#a6e3a1",         # Success indicators
        "RED_C": "#f38ba8",           # Error indicators
        "YELLOW_C": "#f9e2af",        # Warnings
        "BTN_BG": "#45475a",          # Button face
        "CANVAS_BG": "#11111b",       # Drawing canvas
        "NODE_FILL": "#f9e2af",       # Node circle
        "NODE_PATH_FILL": "#f38ba8",  # Node on the search path
        "NODE_OUTLINE": "#ffffff",    # Node ring
        "NODE_TEXT": "#11111b",       # Key text inside nodes
        "EDGE": "#f9e2af",            # Parent → child line
        "EDGE_PATH": "#f38ba8",       # Line along the search path
        "CELL_FILL": "#313244",       # Array cell (binary search mode)
        "CELL_RANGE": "#45475a",      # Cell inside [lo, hi]
        "CELL_MID": "#89b4fa",        # Probed cell
        "CELL_FOUND": "#a6e3a1",      # Matching cell
        "MESSAGE": "#ffffff",         # Bottom status message
        "STATS_BG": "#2a2a3d",
        "STATS_FG": "#bac2de",
    },
    # ── Light theme (Catppuccin Latte) ───────────────────────────
    "light": {
        "BG": "#eff1f5",
        "BG2": "#dce0e8",
        "FG": "#4c4f69",
        "ACCENT": "#1e66f5",
        "GREEN_C": "#40a02b",
        "RED_C": "#d20f39",
        "YELLOW_C": "#df8e1d",
        "BTN_BG": "#ccd0da",
        "CANVAS_BG": "#e6e9ef",
        "NODE_FILL": "#df8e1d",
        "NODE_PATH_FILL": "#d20f39",
        "NODE_OUTLINE": "#4c4f69",
        "NODE_TEXT": "#ffffff",
        "EDGE": "#8c8fa1",
        "EDGE_PATH": "#d20f39",
        "CELL_FILL": "#ccd0da",
        "CELL_RANGE": "#bcc0cc",
        "CELL_MID": "#1e66f5",
        "CELL_FOUND": "#40a02b",
        "MESSAGE": "#4c4f69",
        "STATS_BG": "#dce0e8",
        "STATS_FG": "#5c5f77",
    },
}

DEFAULTS = {
    "theme": "dark",
    "anim_speed": 600,             # ms per playback step
    "insert_delay_ms": 2000,       # delay between staged demo inserts
    "search_highlight_ms": 2000,   # how long a search path stays lit
}


# ═════════════════════════════════════════════════════════════════
#  SETTINGS — persisted user preferences
# ═════════════════════════════════════════════════════════════════
class Settings:
    """
    Persistent user preferences manager.

    Attributes:
        theme               (str) : Active theme name ("dark" / "light").
        anim_speed          (int) : Milliseconds per playback step.
        insert_delay_ms     (int) : Delay between staged demo insertions.
        search_highlight_ms (int) : How long a search path is highlighted.
        custom_colors       (dict): Key→hex overrides on top of the theme.

    File location:  ~/.special_avl_v1.json (overridable with ``path``).
    """
    PATH = os.path.join(os.path.expanduser("~"), ".special_avl_v1.json")

    def __init__(self, path=None, load=True):
        self.path = path or self.PATH
        self.theme               = DEFAULTS["theme"]
        self.anim_speed          = DEFAULTS["anim_speed"]
        self.insert_delay_ms     = DEFAULTS["insert_delay_ms"]
        self.search_highlight_ms = DEFAULTS["search_highlight_ms"]
        self.custom_colors       = {}
        if load:
            self._load()

    # ── Load from disk ──────────────────────────────────────────
    def _load(self):
        """Read settings JSON; a corrupt or unreadable file keeps the defaults."""
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path) as f:
                d = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read settings from %s: %s", self.path, e)
            return
        if not isinstance(d, dict):
            logger.warning("Ignoring malformed settings file %s", self.path)
            return
        theme = d.get("theme", DEFAULTS["theme"])
        self.theme = theme if theme in THEMES else DEFAULTS["theme"]
        for name in ("anim_speed", "insert_delay_ms", "search_highlight_ms"):
            value = d.get(name, DEFAULTS[name])
            # JSON true/false load as bool, an int subclass
            if isinstance(value, int) and not isinstance(value, bool) and value > 0:
                setattr(self, name, value)
        colors = d.get("custom_colors", {})
        if isinstance(colors, dict):
            self.custom_colors = {k: v for k, v in colors.items()
                                  if isinstance(v, str)}
        else:
            self.custom_colors = {}

    # ── Save to disk ────────────────────────────────────────────
    def save(self):
        """Write settings JSON.  Returns False (and logs) when the write fails."""
        try:
            with open(self.path, "w") as f:
                json.dump(self.to_dict(), f, indent=2)
        except OSError as e:
            logger.warning("Could not save settings to %s: %s", self.path, e)
            return False
        return True

    def to_dict(self):
        return {"theme": self.theme,
                "anim_speed": self.anim_speed,
                "insert_delay_ms": self.insert_delay_ms,
                "search_highlight_ms": self.search_highlight_ms,
                "custom_colors": self.custom_colors}

    # ── Colour lookup ───────────────────────────────────────────
    def get(self, key):
        """
        Resolve a colour key to its hex value.

        Priority: custom_colors[key]  →  THEMES[theme][key]  →  "#ffffff"
        """
        if key in self.custom_colors:
            return self.custom_colors[key]
        return THEMES.get(self.theme, THEMES["dark"]).get(key, "#ffffff")
