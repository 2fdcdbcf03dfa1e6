"""Free-positioned text boxes and their shared style."""

from __future__ import annotations

from dataclasses import dataclass, replace
import re
from typing import Iterator, Optional

from reportlab.lib.colors import Color, HexColor, getAllNamedColors

from fonts import box_footprint, resolve_font_name

from .document import LabelDocument
from .errors import InteractionError

# Successive boxes are offset diagonally by this many display pixels per id.
ADD_OFFSET_PX = 20.0
DEFAULT_TEXT = "Text"

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def parse_color(value: str) -> Color:
    """Accept ``#rgb``, ``#rrggbb`` or a named color."""

    text = value.strip()
    if _HEX_COLOR.match(text):
        if len(text) == 4:
            text = "#" + "".join(ch * 2 for ch in text[1:])
        return HexColor(text)
    named = getAllNamedColors().get(text.lower())
    if named is None:
        raise ValueError(f"Invalid color value '{value}'")
    return named


@dataclass(frozen=True)
class TextStyle:
    """Style shared by every box in a document."""

    font_family: str = "Helvetica"
    font_size: float = 16.0
    font_color: str = "#000000"
    font_weight: str = "normal"
    font_style: str = "normal"

    @property
    def font_name(self) -> str:
        return resolve_font_name(
            self.font_family, self.font_weight, self.font_style)


@dataclass
class TextBox:
    id: int
    x: float
    y: float
    text: str = DEFAULT_TEXT

    def to_dict(self) -> dict[str, object]:
        return {"id": self.id, "x": self.x, "y": self.y, "text": self.text}


@dataclass(frozen=True)
class _DragTarget:
    box_id: int
    offset_x: float
    offset_y: float


class TextBoxLayout:
    """Ordered text boxes placed on a label document.

    Positions are display pixels relative to the top-left corner of the
    on-screen (render) container.
    """

    def __init__(
        self,
        document: LabelDocument,
        style: Optional[TextStyle] = None,
    ) -> None:
        self.document = document
        self.style = style or TextStyle()
        self._boxes: list[TextBox] = []
        self._drag: Optional[_DragTarget] = None

    def __iter__(self) -> Iterator[TextBox]:
        return iter(list(self._boxes))

    def __len__(self) -> int:
        return len(self._boxes)

    def __contains__(self, box_id: object) -> bool:
        return any(box.id == box_id for box in self._boxes)

    @property
    def ids(self) -> list[int]:
        return [box.id for box in self._boxes]

    def get(self, box_id: int) -> TextBox:
        for box in self._boxes:
            if box.id == box_id:
                return box
        raise KeyError(box_id)

    def next_id(self) -> int:
        return max((box.id for box in self._boxes), default=0) + 1

    def footprint(self, box: TextBox) -> tuple[float, float]:
        return box_footprint(box.text, self.style.font_name, self.style.font_size)

    def clamp(self, box: TextBox, x: float, y: float) -> tuple[float, float]:
        """Clamp ``(x, y)`` so the box stays inside the container."""

        container_w, container_h = self.document.render_size_px()
        box_w, box_h = self.footprint(box)
        x = max(0.0, min(x, container_w - box_w))
        y = max(0.0, min(y, container_h - box_h))
        return x, y

    def add(self, text: str = DEFAULT_TEXT) -> TextBox:
        box_id = self.next_id()
        box = TextBox(id=box_id, x=0.0, y=0.0, text=text)
        offset = ADD_OFFSET_PX * box_id
        box.x, box.y = self.clamp(box, offset, offset)
        self._boxes.append(box)
        return box

    def remove(self, box_id: int) -> None:
        if self._drag is not None and self._drag.box_id == box_id:
            self._drag = None
        self._boxes = [box for box in self._boxes if box.id != box_id]

    def move(self, box_id: int, x: float, y: float) -> TextBox:
        box = self.get(box_id)
        box.x, box.y = self.clamp(box, x, y)
        return box

    def edit(self, box_id: int, text: str) -> TextBox:
        box = self.get(box_id)
        box.text = text
        return box

    def set_style(self, **changes: object) -> TextStyle:
        """Replace shared style attributes; the font must resolve."""

        style = replace(self.style, **changes)  # type: ignore[arg-type]
        if float(style.font_size) <= 0:
            raise ValueError("Font size must be positive.")
        parse_color(style.font_color)
        resolve_font_name(style.font_family, style.font_weight, style.font_style)
        self.style = style
        return style

    def reclamp_all(self) -> None:
        """Re-apply the bounds invariant after the container or style changed."""

        for box in self._boxes:
            box.x, box.y = self.clamp(box, box.x, box.y)

    @property
    def dragging(self) -> Optional[int]:
        return self._drag.box_id if self._drag else None

    def start_drag(self, box_id: int, pointer: tuple[float, float]) -> None:
        if self._drag is not None:
            raise InteractionError(
                f"Box {self._drag.box_id} is already being dragged.")
        box = self.get(box_id)
        self._drag = _DragTarget(
            box_id=box_id,
            offset_x=pointer[0] - box.x,
            offset_y=pointer[1] - box.y,
        )

    def update_drag(self, pointer: tuple[float, float]) -> Optional[TextBox]:
        if self._drag is None:
            return None
        return self.move(
            self._drag.box_id,
            pointer[0] - self._drag.offset_x,
            pointer[1] - self._drag.offset_y,
        )

    def end_drag(self) -> None:
        self._drag = None

    def to_list(self) -> list[dict[str, object]]:
        return [box.to_dict() for box in self._boxes]
