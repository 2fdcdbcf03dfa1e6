# pyright: reportUnknownMemberType=false, reportUnknownArgumentType=false

"""Draw the editing view of a label and rasterize it.

The view is a single PDF page sized in display pixels (one display pixel is
one PDF point), drawn with reportlab and rasterized with PyMuPDF.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from io import BytesIO
import logging
from typing import Optional, Union

import fitz
from PIL import Image
from reportlab.lib.colors import HexColor, white
from reportlab.pdfbase.pdfmetrics import getAscent
from reportlab.pdfgen import canvas

from fonts import BOX_PADDING_PX, LINE_HEIGHT, text_lines

from .document import Axis, LabelDocument
from .errors import NotReadyError, RenderContextError
from .text_boxes import TextBox, TextBoxLayout, parse_color

logger = logging.getLogger(__name__)

DELETE_CONTROL_PX = 12.0
HANDLE_THICKNESS_PX = 8.0

BOX_BORDER_COLOR = HexColor("#4a90d9")
BOX_BACKGROUND_COLOR = HexColor("#eef4fc")
DELETE_CONTROL_COLOR = HexColor("#d9534f")
HANDLE_COLOR = HexColor("#9aa5b1")


class RenderMode(str, Enum):
    """``interactive`` adds editing decoration; ``clean`` is print content."""

    INTERACTIVE = "interactive"
    CLEAN = "clean"


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in top-left-origin display pixels."""

    x: float
    y: float
    width: float
    height: float

    def contains(self, point: tuple[float, float]) -> bool:
        px, py = point
        return (
            self.x <= px <= self.x + self.width
            and self.y <= py <= self.y + self.height
        )


@dataclass(frozen=True)
class BoxHit:
    box_id: int
    on_delete: bool = False


@dataclass(frozen=True)
class HandleHit:
    axis: Axis


Hit = Union[BoxHit, HandleHit]


def box_rect(layout: TextBoxLayout, box: TextBox) -> Rect:
    width, height = layout.footprint(box)
    return Rect(box.x, box.y, width, height)


def delete_control_rect(layout: TextBoxLayout, box: TextBox) -> Rect:
    rect = box_rect(layout, box)
    return Rect(
        rect.x + rect.width - DELETE_CONTROL_PX,
        rect.y,
        DELETE_CONTROL_PX,
        DELETE_CONTROL_PX,
    )


def handle_rect(document: LabelDocument, axis: Axis) -> Optional[Rect]:
    """Return where the resize handle for ``axis`` is drawn, if it has one."""

    if not document.is_continuous(axis):
        return None
    width, height = document.render_size_px()
    # Rotation moves the width handle to the bottom edge and vice versa.
    on_right_edge = (axis is Axis.WIDTH) != document.rotated
    if on_right_edge:
        return Rect(width - HANDLE_THICKNESS_PX, 0.0, HANDLE_THICKNESS_PX, height)
    return Rect(0.0, height - HANDLE_THICKNESS_PX, width, HANDLE_THICKNESS_PX)


def hit_test(
    layout: TextBoxLayout, point: tuple[float, float]
) -> Optional[Hit]:
    """Return what the interactive view shows under ``point``."""

    for box in reversed(list(layout)):
        if delete_control_rect(layout, box).contains(point):
            return BoxHit(box.id, on_delete=True)
        if box_rect(layout, box).contains(point):
            return BoxHit(box.id)
    for axis in (Axis.WIDTH, Axis.HEIGHT):
        rect = handle_rect(layout.document, axis)
        if rect is not None and rect.contains(point):
            return HandleHit(axis)
    return None


class _ViewPainter:
    def __init__(self, layout: TextBoxLayout, mode: RenderMode) -> None:
        self.layout = layout
        self.document = layout.document
        self.mode = mode
        self.page_width, self.page_height = self.document.render_size_px()

    def _pdf_rect(self, rect: Rect) -> tuple[float, float, float, float]:
        return (
            rect.x,
            self.page_height - rect.y - rect.height,
            rect.width,
            rect.height,
        )

    def paint(self) -> bytes:
        buffer = BytesIO()
        canvas_obj = canvas.Canvas(
            buffer, pagesize=(self.page_width, self.page_height))

        canvas_obj.setFillColor(white)
        canvas_obj.rect(0, 0, self.page_width, self.page_height,
                        stroke=0, fill=1)

        for box in self.layout:
            if self.mode is RenderMode.INTERACTIVE:
                self._paint_box_decoration(canvas_obj, box)
            self._paint_text(canvas_obj, box)

        if self.mode is RenderMode.INTERACTIVE:
            self._paint_handles(canvas_obj)

        canvas_obj.showPage()
        canvas_obj.save()
        return buffer.getvalue()

    def _paint_text(self, canvas_obj: canvas.Canvas, box: TextBox) -> None:
        style = self.layout.style
        font_name = style.font_name
        size = style.font_size
        ascent = getAscent(font_name, size)
        half_leading = (LINE_HEIGHT - 1.0) * size / 2.0

        canvas_obj.setFillColor(parse_color(style.font_color))
        canvas_obj.setFont(font_name, size)
        for idx, line in enumerate(text_lines(box.text)):
            line_top = box.y + BOX_PADDING_PX + idx * size * LINE_HEIGHT
            baseline = self.page_height - (line_top + half_leading + ascent)
            canvas_obj.drawString(box.x + BOX_PADDING_PX, baseline, line)

    def _paint_box_decoration(
        self, canvas_obj: canvas.Canvas, box: TextBox
    ) -> None:
        canvas_obj.saveState()
        canvas_obj.setFillColor(BOX_BACKGROUND_COLOR)
        canvas_obj.setStrokeColor(BOX_BORDER_COLOR)
        canvas_obj.setLineWidth(1)
        canvas_obj.setDash(3, 2)
        canvas_obj.rect(*self._pdf_rect(box_rect(self.layout, box)),
                        stroke=1, fill=1)

        control = delete_control_rect(self.layout, box)
        x, y, w, h = self._pdf_rect(control)
        canvas_obj.setDash()
        canvas_obj.setFillColor(DELETE_CONTROL_COLOR)
        canvas_obj.circle(x + w / 2, y + h / 2, w / 2, stroke=0, fill=1)
        canvas_obj.setStrokeColor(white)
        inset = w * 0.3
        canvas_obj.line(x + inset, y + inset, x + w - inset, y + h - inset)
        canvas_obj.line(x + inset, y + h - inset, x + w - inset, y + inset)
        canvas_obj.restoreState()

    def _paint_handles(self, canvas_obj: canvas.Canvas) -> None:
        for axis in (Axis.WIDTH, Axis.HEIGHT):
            rect = handle_rect(self.document, axis)
            if rect is None:
                continue
            canvas_obj.saveState()
            canvas_obj.setFillColor(HANDLE_COLOR)
            canvas_obj.rect(*self._pdf_rect(rect), stroke=0, fill=1)
            canvas_obj.restoreState()


def render_view_pdf(layout: TextBoxLayout, mode: RenderMode) -> bytes:
    """Return a one-page PDF of the on-screen (render) view."""

    return _ViewPainter(layout, mode).paint()


class LabelSurface:
    """The visual surface an editor draws into.

    A surface must be attached to a document layout before it can be
    captured.
    """

    def __init__(self) -> None:
        self._layout: Optional[TextBoxLayout] = None

    @property
    def is_ready(self) -> bool:
        return self._layout is not None

    @property
    def layout(self) -> Optional[TextBoxLayout]:
        return self._layout

    def attach(self, layout: TextBoxLayout) -> None:
        self._layout = layout

    def detach(self) -> None:
        self._layout = None

    def snapshot(
        self,
        mode: RenderMode = RenderMode.INTERACTIVE,
        magnification: float = 1.0,
    ) -> Image.Image:
        """Rasterize the view at ``magnification`` pixels per display pixel."""

        if self._layout is None:
            raise NotReadyError("The label view is not attached; nothing to capture.")

        pdf_bytes = render_view_pdf(self._layout, mode)
        try:
            with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
                page = doc.load_page(0)
                pix = page.get_pixmap(
                    matrix=fitz.Matrix(magnification, magnification),
                    alpha=False,
                )
                png_bytes = pix.tobytes("png")
        except (RuntimeError, ValueError) as exc:
            raise RenderContextError(
                f"Could not rasterize the label view: {exc}") from exc

        image = Image.open(BytesIO(png_bytes))
        image.load()
        logger.debug(
            "Rasterized %s view at %.1fx: %dx%d px",
            mode.value, magnification, image.width, image.height,
        )
        return image.convert("RGB")
