"""Conversions between millimeters, display pixels and print pixels."""

from __future__ import annotations

import math

MM_PER_INCH = 25.4
DISPLAY_DPI = 96
PRINT_DPI = 300

DISPLAY_PX_PER_MM = DISPLAY_DPI / MM_PER_INCH


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero.

    Python's ``round`` uses banker's rounding, which would make 0.5 mm steps
    land on different pixel counts depending on parity.
    """

    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def mm_to_display_px(mm: float) -> float:
    return mm * DISPLAY_PX_PER_MM


def display_px_to_mm(px: float) -> float:
    return px / DISPLAY_PX_PER_MM


def mm_to_print_px(mm: float, dpi: int = PRINT_DPI) -> int:
    """Return the whole number of pixels ``mm`` spans at ``dpi``."""

    return round_half_away(mm / MM_PER_INCH * dpi)


def print_size_px(
    width_mm: float,
    height_mm: float,
    dpi: int = PRINT_DPI,
) -> tuple[int, int]:
    """Return ``(width, height)`` in pixels, each axis rounded on its own."""

    return mm_to_print_px(width_mm, dpi), mm_to_print_px(height_mm, dpi)


__all__ = [
    "DISPLAY_DPI",
    "DISPLAY_PX_PER_MM",
    "MM_PER_INCH",
    "PRINT_DPI",
    "display_px_to_mm",
    "mm_to_display_px",
    "mm_to_print_px",
    "print_size_px",
    "round_half_away",
]
