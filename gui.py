"""
GUI for Calcpad
Tkinter display surface and keypad
"""
import tkinter as tk
from tkinter import font as tkfont
import logging

import config
from calculator import Calculator
from display import DisplaySurface, fit_text_size
from history_manager import HistoryManager

logger = logging.getLogger("calcpad.gui")

OPERATOR_KEYS = "+-×÷"
DISPLAY_PADX = 12


class CalculatorGUI(DisplaySurface):
    def __init__(self, root):
        self.root = root
        self.root.title(config.APP_NAME)
        self.root.geometry(f"{config.WINDOW_WIDTH}x{config.WINDOW_HEIGHT}")

        # Initialize components
        self.calculator = Calculator(display=self)
        self.history_manager = HistoryManager()

        self.dark_mode = False
        self.T = config.get_theme(self.dark_mode)
        self._result_font = tkfont.Font(family=config.DISPLAY_FONT, size=config.MAX_TEXT_SIZE, weight="bold")
        self._history_window = None

        self.create_widgets()
        self.root.bind('<Key>', self.on_key_press)
        self.root.bind('<Escape>', lambda e: self.calculator_button_click('AC'))

    # ── Display surface callbacks ────────────────────────────────────────

    def on_expression_changed(self, text):
        self.expression_display.config(text=text)

    def on_result_changed(self, text):
        self.result_display.config(text=text)
        self.adjust_text_size_to_fit()

    def adjust_text_size_to_fit(self):
        """Shrink the result font until the text fits on one line"""
        width = self.result_display.winfo_width() - 2 * DISPLAY_PADX
        if width <= 0:
            width = config.WINDOW_WIDTH
        measure_font = tkfont.Font(family=config.DISPLAY_FONT, weight="bold")

        def measure(text, size):
            measure_font.configure(size=size)
            return measure_font.measure(text)

        size = fit_text_size(self.result_display.cget("text"), width, measure)
        self._result_font.configure(size=size)

    # ── Widgets ──────────────────────────────────────────────────────────

    def create_widgets(self):
        """Create display labels and keypad"""
        T = self.T
        self.root.configure(bg=T["bg"])

        # Top bar
        self.top_frame = tk.Frame(self.root, bg=T["bg_dark"], height=36)
        self.top_frame.pack(fill=tk.X, padx=2, pady=2)
        tk.Label(
            self.top_frame, text=config.APP_NAME,
            font=(config.LABEL_FONT[0], 13, "bold"), bg=T["bg_dark"], fg=T["accent"]
        ).pack(side=tk.LEFT, padx=8)
        tk.Button(
            self.top_frame, text="History", font=config.LABEL_FONT,
            bg=T["bg_dark"], fg=T["subtext"], relief=tk.FLAT, bd=0, cursor="hand2",
            command=self.show_history_window
        ).pack(side=tk.RIGHT, padx=4)
        tk.Button(
            self.top_frame, text="☾", font=config.LABEL_FONT,
            bg=T["bg_dark"], fg=T["subtext"], relief=tk.FLAT, bd=0, cursor="hand2",
            command=self.toggle_dark_mode
        ).pack(side=tk.RIGHT, padx=4)

        # Display area: expression above, result below
        self.display_frame = tk.Frame(self.root, bg=T["display_bg"], height=180)
        self.display_frame.pack(fill=tk.X, padx=6, pady=(4, 6))
        self.display_frame.pack_propagate(False)

        self.expression_display = tk.Label(
            self.display_frame, text="", font=config.EXPRESSION_FONT,
            bg=T["display_bg"], fg=T["subtext"], anchor=tk.E, padx=DISPLAY_PADX
        )
        self.expression_display.pack(side=tk.TOP, fill=tk.X, pady=(8, 0))

        self.result_display = tk.Label(
            self.display_frame, text=config.ZERO_DISPLAY, font=self._result_font,
            bg=T["display_bg"], fg=T["display_fg"], anchor=tk.E, padx=DISPLAY_PADX
        )
        self.result_display.pack(side=tk.BOTTOM, fill=tk.X)
        self.result_display.bind("<Configure>", lambda e: self.adjust_text_size_to_fit())

        # Keypad
        self.keypad_frame = tk.Frame(self.root, bg=T["bg"])
        self.keypad_frame.pack(fill=tk.BOTH, expand=True, padx=5, pady=3)
        for r, row in enumerate(config.KEYPAD_ROWS):
            self.keypad_frame.rowconfigure(r, weight=1)
            span = 4 // len(row)
            for c, key in enumerate(row):
                self._key_button(key).grid(
                    row=r, column=c * span, columnspan=span, sticky="nsew", padx=2, pady=2
                )
        for c in range(4):
            self.keypad_frame.columnconfigure(c, weight=1)

    def _key_button(self, key):
        T = self.T
        bg, fg = T["btn_bg"], T["btn_fg"]
        if key == "=":
            bg, fg = T["equals_bg"], T["equals_fg"]
        elif key in OPERATOR_KEYS or key in "()%±":
            fg = T["operator_fg"]
        elif key in ("AC", "C"):
            fg = T["clear_fg"]
        elif key.startswith("M"):
            fg = T["subtext"]
        return tk.Button(
            self.keypad_frame, text=key, font=config.BUTTON_FONT,
            bg=bg, fg=fg, activebackground=T["shadow_dark"],
            relief=tk.FLAT, bd=0, cursor="hand2",
            command=lambda k=key: self.calculator_button_click(k)
        )

    def rebuild_widgets(self):
        for widget in self.root.winfo_children():
            if widget is not self._history_window:
                widget.destroy()
        self.create_widgets()
        self.on_expression_changed(self.calculator.current_expression)
        self.on_result_changed(self.calculator.get_result())

    def toggle_dark_mode(self):
        self.dark_mode = not self.dark_mode
        self.T = config.get_theme(self.dark_mode)
        self.rebuild_widgets()

    # ── Input ────────────────────────────────────────────────────────────

    def calculator_button_click(self, button):
        """Handle calculator button clicks"""
        if button == '=':
            expression = self.calculator.current_expression
            repeated = self.calculator.last_result_displayed
            self.calculator.evaluate()
            if not repeated and self.calculator.last_error is None:
                self.history_manager.add_calculation(expression, self.calculator.get_result())
                logger.debug("Saved %s = %s to history", expression, self.calculator.get_result())
                self._refresh_history_window()
        else:
            self.calculator.press(button)

    def on_key_press(self, event):
        """Handle keyboard input"""
        key = event.char
        if key and key in '0123456789.%()+-':
            self.calculator_button_click(key)
        elif key == '*':
            self.calculator_button_click('×')
        elif key == '/':
            self.calculator_button_click('÷')
        elif key in ['\r', '\n', '=']:
            self.calculator_button_click('=')
        elif event.keysym == 'BackSpace':
            self.calculator_button_click('C')
        elif event.keysym == 'Delete':
            self.calculator_button_click('AC')

    # ── History ──────────────────────────────────────────────────────────

    def show_history_window(self):
        """Open (or raise) the session history window"""
        if self._history_window is not None and self._history_window.winfo_exists():
            self._history_window.lift()
            return
        T = self.T
        self._history_window = tk.Toplevel(self.root, bg=T["bg"])
        self._history_window.title(f"{config.APP_NAME} History")
        self._history_list = tk.Listbox(
            self._history_window, font=config.LABEL_FONT, width=44, height=16,
            bg=T["listbox_bg"], fg=T["listbox_fg"], relief=tk.FLAT
        )
        self._history_list.pack(fill=tk.BOTH, expand=True, padx=6, pady=6)
        tk.Button(
            self._history_window, text="Clear History", font=config.LABEL_FONT,
            command=self._clear_history
        ).pack(pady=(0, 6))
        self._refresh_history_window()

    def _refresh_history_window(self):
        if self._history_window is None or not self._history_window.winfo_exists():
            return
        self._history_list.delete(0, tk.END)
        for line in self.history_manager.format_calculation_history():
            self._history_list.insert(tk.END, line)

    def _clear_history(self):
        self.history_manager.clear_calculation_history()
        self._refresh_history_window()
