"""
Calcpad Configuration Settings
"""
import os

# Application Settings
APP_NAME = "Calcpad"
VERSION = "1.0.0"

# Display Settings
WINDOW_WIDTH = 360
WINDOW_HEIGHT = 600
EXPRESSION_FONT = ("Consolas", 20)
DISPLAY_FONT = "Consolas"                 # result label family; size is fitted
BUTTON_FONT = ("Segoe UI", 16, "bold")
LABEL_FONT = ("Segoe UI", 11)

# Result text is shrunk between these sizes to fit the display width
MAX_TEXT_SIZE = 90
MIN_TEXT_SIZE = 20

# Canonical display labels
ZERO_DISPLAY = "0"
ERROR_LABEL = "Error"

# ── Neumorphic Palettes ────────────────────────────────────────────────────────

# LIGHT palette  – soft sage-green background
NEU_LIGHT = {
    "bg":           "#DDE6ED",   # base surface
    "bg_dark":      "#C8D4DF",
    "shadow_dark":  "#B2BFC8",
    "display_bg":   "#C8D4DF",
    "display_fg":   "#1A2332",   # LCD dark on light
    "btn_bg":       "#DDE6ED",
    "btn_fg":       "#2B3A4A",
    "operator_fg":  "#1E7A56",
    "equals_bg":    "#2E8B57",
    "equals_fg":    "#FFFFFF",
    "clear_fg":     "#B03A2E",
    "accent":       "#2E8B57",
    "subtext":      "#6E8090",
    "listbox_bg":   "#C8D4DF",
    "listbox_fg":   "#1A2332",
}

# DARK palette  – deep slate with green accents
NEU_DARK = {
    "bg":           "#1E2530",
    "bg_dark":      "#161C26",
    "shadow_dark":  "#10161E",
    "display_bg":   "#161C26",
    "display_fg":   "#9ADDB0",   # LCD green-on-dark
    "btn_bg":       "#1E2530",
    "btn_fg":       "#BDD0E0",
    "operator_fg":  "#4DB888",
    "equals_bg":    "#2D8A58",
    "equals_fg":    "#FFFFFF",
    "clear_fg":     "#E55A4E",
    "accent":       "#4DB888",
    "subtext":      "#4E6070",
    "listbox_bg":   "#161C26",
    "listbox_fg":   "#9ADDB0",
}


def get_theme(dark: bool) -> dict:
    """Return the active neumorphic colour palette."""
    return NEU_DARK if dark else NEU_LIGHT


# Keypad layout, row by row
KEYPAD_ROWS = [
    ["AC", "C", "(", ")"],
    ["MC", "MR", "M+", "M-"],
    ["7", "8", "9", "÷"],
    ["4", "5", "6", "×"],
    ["1", "2", "3", "-"],
    ["±", "0", ".", "+"],
    ["%", "="],
]

# History Settings (kept in memory for the running session only)
MAX_HISTORY_ITEMS = 100

# Web Portal settings
WEB_HOST = os.environ.get("CALCPAD_HOST", "0.0.0.0")
WEB_PORT = int(os.environ.get("CALCPAD_PORT", "8888"))
START_WEB_PORTAL = os.environ.get("CALCPAD_WEB", "1") not in ("0", "false", "no")
MAX_SESSIONS = int(os.environ.get("CALCPAD_MAX_SESSIONS", "100"))   # oldest idle session is dropped beyond this

# Logging
LOG_LEVEL = os.environ.get("CALCPAD_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
