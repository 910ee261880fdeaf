"""
Display surface contract for Calcpad
The calculator notifies a display of changes; rendering lives here and in gui.py
"""
import config


class DisplaySurface:
    """Receives state changes from a Calculator. Subclasses override what they render."""

    def on_expression_changed(self, text):
        pass

    def on_result_changed(self, text):
        pass


def fit_text_size(text, width, measure, max_size=config.MAX_TEXT_SIZE, min_size=config.MIN_TEXT_SIZE):
    """
    Return the largest font size that fits text into width.

    measure(text, size) returns the rendered width of text at size.
    Starts at max_size and shrinks one step at a time, stopping at min_size
    even if the text still overflows.
    """
    size = max_size
    while size > min_size and measure(text, size) > width:
        size -= 1
    return size
