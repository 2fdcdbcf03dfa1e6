import unittest

from fonts import FontError
from label_editor.document import LabelDocument, ViewRotation
from label_editor.errors import InteractionError
from label_editor.text_boxes import ADD_OFFSET_PX, TextBoxLayout, TextStyle


def _layout(width_mm: float = 100, height_mm: float = 50) -> TextBoxLayout:
    return TextBoxLayout(LabelDocument(width_mm, height_mm))


class TextBoxIdTests(unittest.TestCase):
    def test_ids_follow_highest_existing(self) -> None:
        layout = _layout()
        self.assertEqual([layout.add().id for _ in range(3)], [1, 2, 3])

    def test_highest_id_is_reused_after_removal(self) -> None:
        layout = _layout()
        layout.add()
        layout.add()
        layout.add()
        self.assertEqual(set(layout.ids), {1, 2, 3})
        layout.remove(3)
        self.assertEqual(layout.add().id, 3)

    def test_gap_is_not_filled(self) -> None:
        layout = _layout()
        for _ in range(3):
            layout.add()
        layout.remove(2)
        self.assertEqual(layout.add().id, 4)
        self.assertEqual(layout.ids, [1, 3, 4])

    def test_remove_is_idempotent(self) -> None:
        layout = _layout()
        layout.add()
        layout.remove(7)
        layout.remove(1)
        layout.remove(1)
        self.assertEqual(len(layout), 0)
        self.assertEqual(layout.add().id, 1)


class TextBoxPlacementTests(unittest.TestCase):
    def test_add_offsets_successive_boxes(self) -> None:
        layout = _layout()
        first = layout.add()
        second = layout.add()
        self.assertEqual((first.x, first.y), (ADD_OFFSET_PX, ADD_OFFSET_PX))
        self.assertEqual((second.x, second.y), (2 * ADD_OFFSET_PX, 2 * ADD_OFFSET_PX))

    def test_move_clamps_to_container(self) -> None:
        layout = _layout()
        box = layout.add()
        container_w, container_h = layout.document.render_size_px()
        box_w, box_h = layout.footprint(box)

        layout.move(box.id, -50, -50)
        self.assertEqual((box.x, box.y), (0.0, 0.0))

        layout.move(box.id, 10_000, 10_000)
        self.assertAlmostEqual(box.x, container_w - box_w)
        self.assertAlmostEqual(box.y, container_h - box_h)

    def test_clamp_uses_rotated_container(self) -> None:
        document = LabelDocument(100, 20, rotation=ViewRotation.ROTATED)
        layout = TextBoxLayout(document)
        box = layout.add()
        layout.move(box.id, 10_000, 10_000)
        container_w, container_h = document.render_size_px()
        box_w, box_h = layout.footprint(box)
        self.assertAlmostEqual(box.x, container_w - box_w)
        self.assertAlmostEqual(box.y, container_h - box_h)

    def test_oversized_box_clamps_to_origin(self) -> None:
        layout = _layout(5, 5)
        box = layout.add("A much longer piece of text than fits")
        layout.move(box.id, 30, 30)
        self.assertEqual((box.x, box.y), (0.0, 0.0))

    def test_move_unknown_box_raises(self) -> None:
        with self.assertRaises(KeyError):
            _layout().move(9, 0, 0)

    def test_edit_accepts_any_text(self) -> None:
        layout = _layout()
        box = layout.add()
        layout.edit(box.id, "")
        self.assertEqual(box.text, "")
        layout.edit(box.id, "line one\nline two")
        self.assertEqual(layout.get(box.id).text, "line one\nline two")


class TextBoxDragTests(unittest.TestCase):
    def test_drag_keeps_pointer_offset(self) -> None:
        layout = _layout()
        box = layout.add()
        layout.start_drag(box.id, (box.x + 5, box.y + 3))
        layout.update_drag((105, 53))
        self.assertEqual((box.x, box.y), (100, 50))
        layout.end_drag()
        self.assertIsNone(layout.dragging)

    def test_drag_is_clamped(self) -> None:
        layout = _layout()
        box = layout.add()
        layout.start_drag(box.id, (box.x, box.y))
        layout.update_drag((-400, -400))
        self.assertEqual((box.x, box.y), (0.0, 0.0))

    def test_second_drag_is_rejected(self) -> None:
        layout = _layout()
        first = layout.add()
        second = layout.add()
        layout.start_drag(first.id, (first.x, first.y))
        with self.assertRaises(InteractionError):
            layout.start_drag(second.id, (second.x, second.y))
        self.assertEqual(layout.dragging, first.id)

    def test_update_without_drag_is_ignored(self) -> None:
        layout = _layout()
        self.assertIsNone(layout.update_drag((10, 10)))

    def test_removing_dragged_box_ends_drag(self) -> None:
        layout = _layout()
        box = layout.add()
        layout.start_drag(box.id, (box.x, box.y))
        layout.remove(box.id)
        self.assertIsNone(layout.dragging)


class TextStyleTests(unittest.TestCase):
    def test_style_is_shared(self) -> None:
        layout = _layout()
        layout.add()
        layout.set_style(font_size=24, font_weight="bold")
        self.assertEqual(layout.style.font_size, 24)
        self.assertEqual(layout.style.font_name, "Helvetica-Bold")

    def test_larger_font_grows_footprint(self) -> None:
        layout = _layout()
        box = layout.add()
        small = layout.footprint(box)
        layout.set_style(font_size=32)
        large = layout.footprint(box)
        self.assertGreater(large[0], small[0])
        self.assertGreater(large[1], small[1])

    def test_invalid_style_is_rejected_and_previous_kept(self) -> None:
        layout = _layout()
        with self.assertRaises(FontError):
            layout.set_style(font_family="Wingdings")
        with self.assertRaises(ValueError):
            layout.set_style(font_color="not-a-color")
        with self.assertRaises(ValueError):
            layout.set_style(font_size=0)
        self.assertEqual(layout.style, TextStyle())


if __name__ == "__main__":
    unittest.main()
