import unittest

from label_editor.units import (
    DISPLAY_PX_PER_MM,
    display_px_to_mm,
    mm_to_display_px,
    mm_to_print_px,
    print_size_px,
    round_half_away,
)


class UnitConversionTests(unittest.TestCase):
    def test_display_constant_is_96_per_inch(self) -> None:
        self.assertAlmostEqual(DISPLAY_PX_PER_MM, 3.7795275591, places=9)

    def test_mm_to_display_px(self) -> None:
        self.assertAlmostEqual(mm_to_display_px(25.4), 96.0)
        self.assertAlmostEqual(display_px_to_mm(mm_to_display_px(62)), 62.0)

    def test_print_size_for_62_by_30(self) -> None:
        self.assertEqual(print_size_px(62, 30), (732, 354))

    def test_print_size_for_40_by_20(self) -> None:
        self.assertEqual(print_size_px(40, 20), (472, 236))

    def test_mm_to_print_px_honours_dpi(self) -> None:
        self.assertEqual(mm_to_print_px(25.4, dpi=180), 180)
        self.assertEqual(mm_to_print_px(0), 0)

    def test_round_half_away_from_zero(self) -> None:
        self.assertEqual(round_half_away(2.5), 3)
        self.assertEqual(round_half_away(3.5), 4)
        self.assertEqual(round_half_away(-2.5), -3)
        self.assertEqual(round_half_away(2.4999), 2)


if __name__ == "__main__":
    unittest.main()
