"""Preview/print handoff for rendered labels.

The editor talks to a :class:`PrintDispatcher`; :class:`CupsDispatcher`
wraps the bitmap into a PDF page of the exact label size and either opens
it as a preview or sends it to a CUPS queue with ``lpr``.
"""

from __future__ import annotations

from io import BytesIO
import logging
import os
from pathlib import Path
import subprocess
import sys
import tempfile
import time
from typing import Optional, Protocol, Sequence

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from label_editor.errors import DispatchError

logger = logging.getLogger(__name__)

COMMAND_TIMEOUT_SEC = 60


class PrintDispatcher(Protocol):
    def generate_print_artifact(
        self,
        image_data: bytes,
        width_mm: float,
        height_mm: float,
        printer_name: Optional[str],
    ) -> str:
        """Preview (``printer_name is None``) or print the encoded bitmap.

        Returns the artifact reference for previews and a job
        acknowledgement for prints.
        """
        ...

    def list_printers(self) -> list[str]:
        ...


def custom_page_size(width_mm: float, height_mm: float) -> str:
    """Return the CUPS ``PageSize`` option in whole tenths of a millimeter."""

    return f"PageSize=Custom.{int(width_mm * 10)}x{int(height_mm * 10)}"


def write_label_pdf(
    output_path: Path,
    image_data: bytes,
    width_mm: float,
    height_mm: float,
) -> Path:
    """Write a single-page PDF with the bitmap drawn edge to edge."""

    page_width = width_mm * mm
    page_height = height_mm * mm
    canvas_obj = canvas.Canvas(str(output_path), pagesize=(page_width, page_height))
    canvas_obj.drawImage(
        ImageReader(BytesIO(image_data)),
        0,
        0,
        width=page_width,
        height=page_height,
        mask="auto",
    )
    canvas_obj.showPage()
    canvas_obj.save()
    return output_path


def _run(args: Sequence[str]) -> subprocess.CompletedProcess[str]:
    logger.info("Running %s", " ".join(args))
    try:
        return subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            timeout=COMMAND_TIMEOUT_SEC,
        )
    except FileNotFoundError as exc:
        raise DispatchError(f"Failed to execute {args[0]}: {exc}") from exc
    except subprocess.TimeoutExpired as exc:
        raise DispatchError(f"{args[0]} timed out after {exc.timeout}s") from exc


def open_with_system_viewer(path: Path) -> None:
    if sys.platform.startswith("win"):
        os.startfile(str(path))  # type: ignore[attr-defined]
        return
    # xdg-open and open hand the file to the viewer and exit.
    opener = "open" if sys.platform == "darwin" else "xdg-open"
    result = _run([opener, str(path)])
    if result.returncode != 0:
        raise DispatchError(f"Failed to open PDF: {result.stderr.strip()}")


class CupsDispatcher:
    """Dispatcher backed by the CUPS command line tools."""

    def __init__(
        self,
        output_dir: Optional[Path] = None,
        open_preview: bool = True,
    ) -> None:
        self.output_dir = Path(output_dir or tempfile.gettempdir())
        self.open_preview = open_preview

    def _artifact_path(self) -> Path:
        return self.output_dir / f"label_{int(time.time() * 1000)}.pdf"

    def generate_print_artifact(
        self,
        image_data: bytes,
        width_mm: float,
        height_mm: float,
        printer_name: Optional[str],
    ) -> str:
        pdf_path = self._artifact_path()
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            write_label_pdf(pdf_path, image_data, width_mm, height_mm)
        except Exception as exc:
            raise DispatchError(f"Failed to write PDF: {exc}") from exc
        logger.info("Generated PDF at %s", pdf_path)

        if printer_name is None:
            if self.open_preview:
                open_with_system_viewer(pdf_path)
            return str(pdf_path)
        return self._print(pdf_path, printer_name, width_mm, height_mm)

    def _print(
        self,
        pdf_path: Path,
        printer_name: str,
        width_mm: float,
        height_mm: float,
    ) -> str:
        page_size = custom_page_size(width_mm, height_mm)
        logger.info("Printing %s to %s (%s)", pdf_path, printer_name, page_size)
        result = _run(
            [
                "lpr",
                "-P", printer_name,
                "-o", page_size,
                "-o", "fit-to-page=false",
                "-o", "scaling=100",
                "-o", "print-scaling=none",
                str(pdf_path),
            ]
        )
        if result.returncode != 0:
            logger.error("lpr stdout: %s", result.stdout)
            logger.error("lpr stderr: %s", result.stderr)
            raise DispatchError(f"Failed to print: {result.stderr.strip()}")
        return f"Printed to {printer_name}"

    def list_printers(self) -> list[str]:
        result = _run(["lpstat", "-e"])
        if result.returncode != 0:
            raise DispatchError(
                f"Failed to get printer list: {result.stderr.strip()}")
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]


__all__ = [
    "CupsDispatcher",
    "PrintDispatcher",
    "custom_page_size",
    "open_with_system_viewer",
    "write_label_pdf",
]
