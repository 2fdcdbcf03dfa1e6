"""Turn the editing view into a bitmap at the label's physical print size."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from io import BytesIO
import logging
from typing import Optional

from PIL import Image

from .document import LabelDocument
from .errors import NotReadyError, RenderContextError
from .rendering import LabelSurface, RenderMode
from .units import PRINT_DPI, print_size_px

logger = logging.getLogger(__name__)

CAPTURE_MAGNIFICATION = 4.0


@dataclass(frozen=True)
class CaptureResult:
    """Encoded raster plus the physical size it was produced for."""

    png_bytes: bytes
    width_px: int
    height_px: int
    width_mm: float
    height_mm: float
    dpi: int = PRINT_DPI

    @property
    def data_url(self) -> str:
        encoded = base64.b64encode(self.png_bytes).decode()
        return f"data:image/png;base64,{encoded}"


def allocate_output(width_px: int, height_px: int) -> Image.Image:
    """Create the white RGB buffer the final raster is drawn into."""

    if width_px <= 0 or height_px <= 0:
        raise RenderContextError(
            f"Cannot create a {width_px}x{height_px} px output raster; "
            "label dimensions must be positive."
        )
    try:
        return Image.new("RGB", (width_px, height_px), "white")
    except (MemoryError, ValueError) as exc:
        raise RenderContextError(
            f"Cannot create a {width_px}x{height_px} px output raster: {exc}"
        ) from exc


def correct_rotation(
    captured: Image.Image, output: Image.Image, rotated: bool
) -> Image.Image:
    """Draw ``captured`` into ``output``, undoing an on-screen rotation.

    A rotated view is turned back a quarter turn counter-clockwise, so the
    captured height spans the output width and the captured width spans the
    output height.
    """

    if rotated:
        captured = captured.transpose(Image.Transpose.ROTATE_90)
    scaled = captured.resize(output.size, Image.Resampling.LANCZOS)
    output.paste(scaled, (0, 0))
    return output


def encode_png(image: Image.Image, dpi: int = PRINT_DPI) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format="PNG", dpi=(dpi, dpi))
    return buffer.getvalue()


class CapturePipeline:
    """Capture a clean render of a surface and resize it for print."""

    def __init__(
        self,
        dpi: int = PRINT_DPI,
        magnification: float = CAPTURE_MAGNIFICATION,
    ) -> None:
        self.dpi = dpi
        self.magnification = magnification

    def capture(self, surface: Optional[LabelSurface]) -> CaptureResult:
        if surface is None or surface.layout is None:
            raise NotReadyError("The label view is not attached; nothing to capture.")

        document: LabelDocument = surface.layout.document
        width_mm = document.actual_width
        height_mm = document.actual_height
        rotated = document.rotated
        width_px, height_px = print_size_px(width_mm, height_mm, self.dpi)

        output = allocate_output(width_px, height_px)
        captured = surface.snapshot(RenderMode.CLEAN, self.magnification)
        logger.info(
            "Captured %dx%d px view (%s), writing %dx%d px raster for %.2fx%.2f mm",
            captured.width,
            captured.height,
            document.rotation.value,
            width_px,
            height_px,
            width_mm,
            height_mm,
        )

        correct_rotation(captured, output, rotated)
        return CaptureResult(
            png_bytes=encode_png(output, self.dpi),
            width_px=width_px,
            height_px=height_px,
            width_mm=width_mm,
            height_mm=height_mm,
            dpi=self.dpi,
        )
