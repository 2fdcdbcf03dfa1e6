import itertools
import unittest

from label_editor.document import Axis, LabelDocument, ViewRotation


class ContinuousFlagTests(unittest.TestCase):
    def test_at_most_one_axis_is_continuous(self) -> None:
        calls = [
            ("width", True), ("height", True), ("width", False),
            ("height", False), ("width", True), ("width", True),
        ]
        for sequence in itertools.permutations(calls, 4):
            document = LabelDocument()
            for axis, enabled in sequence:
                if axis == "width":
                    document.set_continuous_width(enabled)
                else:
                    document.set_continuous_height(enabled)
                self.assertFalse(
                    document.continuous_width and document.continuous_height)

    def test_enabling_one_axis_clears_the_other(self) -> None:
        document = LabelDocument()
        document.set_continuous_width(True)
        document.set_continuous_height(True)
        self.assertFalse(document.continuous_width)
        self.assertTrue(document.continuous_height)

    def test_both_flags_may_be_false(self) -> None:
        document = LabelDocument(continuous_width=True)
        document.set_continuous_width(False)
        self.assertFalse(document.continuous_width)
        self.assertFalse(document.continuous_height)

    def test_constructor_rejects_two_continuous_axes(self) -> None:
        with self.assertRaises(ValueError):
            LabelDocument(continuous_width=True, continuous_height=True)


class DerivedDimensionTests(unittest.TestCase):
    def test_floor_applies_only_to_continuous_axis(self) -> None:
        for value in (-5.0, 0.0, 3.0, 9.99):
            document = LabelDocument(value, value, continuous_width=True)
            self.assertEqual(document.actual_width, 10.0)
            self.assertEqual(document.actual_height, value)

    def test_floor_does_not_shrink_larger_values(self) -> None:
        document = LabelDocument(62, 30, continuous_height=True)
        self.assertEqual(document.actual_height, 30)

    def test_custom_floor(self) -> None:
        document = LabelDocument(10, 5, continuous_height=True, axis_floor_mm=20)
        self.assertEqual(document.actual_height, 20)

    def test_non_continuous_axis_has_no_lower_bound(self) -> None:
        document = LabelDocument(-1, 0)
        self.assertEqual(document.actual_width, -1)
        self.assertEqual(document.actual_height, 0)

    def test_render_dimensions_swap_when_rotated(self) -> None:
        document = LabelDocument(62, 30)
        self.assertEqual(document.render_width, document.actual_width)
        self.assertEqual(document.render_height, document.actual_height)

        document.rotation = ViewRotation.ROTATED
        self.assertEqual(document.render_width, document.actual_height)
        self.assertEqual(document.render_height, document.actual_width)
        self.assertEqual((document.actual_width, document.actual_height), (62, 30))

    def test_render_size_px(self) -> None:
        document = LabelDocument(25.4, 50.8, rotation=ViewRotation.ROTATED)
        width, height = document.render_size_px()
        self.assertAlmostEqual(width, 192.0)
        self.assertAlmostEqual(height, 96.0)


class ResizeTests(unittest.TestCase):
    def test_resize_adds_pixel_delta_in_mm(self) -> None:
        document = LabelDocument(62, 30, continuous_width=True)
        value = document.resize(Axis.WIDTH, 62, 37.8)
        self.assertAlmostEqual(value, 72, places=2)
        self.assertAlmostEqual(document.width_mm, 72, places=2)

    def test_resize_is_floored(self) -> None:
        document = LabelDocument(62, 30, continuous_height=True)
        value = document.resize(Axis.HEIGHT, 30, -1000)
        self.assertEqual(value, document.axis_floor_mm)

    def test_resize_honours_scale(self) -> None:
        document = LabelDocument(62, 30, continuous_width=True)
        value = document.resize(Axis.WIDTH, 62, 20, px_per_mm=2)
        self.assertEqual(value, 72)

    def test_resize_requires_continuous_axis(self) -> None:
        document = LabelDocument(62, 30, continuous_width=True)
        with self.assertRaises(ValueError):
            document.resize(Axis.HEIGHT, 30, 10)


if __name__ == "__main__":
    unittest.main()
