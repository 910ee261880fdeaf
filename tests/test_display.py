import unittest

from display import DisplaySurface, fit_text_size


def char_width(text, size):
    """Pretend every character is as wide as the font size"""
    return len(text) * size


class TestFitTextSize(unittest.TestCase):

    def test_short_text_keeps_max_size(self):
        self.assertEqual(fit_text_size("1", 300, char_width, max_size=90, min_size=20), 90)

    def test_shrinks_until_it_fits(self):
        self.assertEqual(fit_text_size("12345", 300, char_width, max_size=90, min_size=20), 60)

    def test_stops_at_min_size(self):
        self.assertEqual(fit_text_size("1" * 100, 300, char_width, max_size=90, min_size=20), 20)

    def test_measures_with_the_given_text(self):
        seen = []

        def measure(text, size):
            seen.append(text)
            return 0

        fit_text_size("7.0", 100, measure)
        self.assertEqual(seen, ["7.0"])


class TestDisplaySurface(unittest.TestCase):

    def test_callbacks_are_noops(self):
        surface = DisplaySurface()
        self.assertIsNone(surface.on_expression_changed("1+"))
        self.assertIsNone(surface.on_result_changed("Error"))


if __name__ == '__main__':
    unittest.main()
