"""Physical dimensions, continuous axes and view rotation of a label."""

from __future__ import annotations

from enum import Enum

from .units import DISPLAY_PX_PER_MM, mm_to_display_px

DEFAULT_WIDTH_MM = 100.0
DEFAULT_HEIGHT_MM = 50.0
DEFAULT_AXIS_FLOOR_MM = 10.0


class ViewRotation(str, Enum):
    NORMAL = "normal"
    ROTATED = "rotated"


class Axis(str, Enum):
    WIDTH = "width"
    HEIGHT = "height"


class LabelDocument:
    """Declared label size plus the derived sizes used downstream.

    ``actual_*`` values are what gets printed. ``render_*`` values are what
    the editing view lays out, swapped when the view is rotated.
    """

    def __init__(
        self,
        width_mm: float = DEFAULT_WIDTH_MM,
        height_mm: float = DEFAULT_HEIGHT_MM,
        *,
        continuous_width: bool = False,
        continuous_height: bool = False,
        rotation: ViewRotation = ViewRotation.NORMAL,
        axis_floor_mm: float = DEFAULT_AXIS_FLOOR_MM,
    ) -> None:
        if continuous_width and continuous_height:
            raise ValueError("Only one axis can be continuous.")
        self.width_mm = float(width_mm)
        self.height_mm = float(height_mm)
        self._continuous_width = continuous_width
        self._continuous_height = continuous_height
        self.rotation = ViewRotation(rotation)
        self.axis_floor_mm = float(axis_floor_mm)

    @property
    def continuous_width(self) -> bool:
        return self._continuous_width

    @property
    def continuous_height(self) -> bool:
        return self._continuous_height

    def set_continuous_width(self, enabled: bool) -> None:
        self._continuous_width = bool(enabled)
        if self._continuous_width:
            self._continuous_height = False

    def set_continuous_height(self, enabled: bool) -> None:
        self._continuous_height = bool(enabled)
        if self._continuous_height:
            self._continuous_width = False

    def is_continuous(self, axis: Axis) -> bool:
        if axis is Axis.WIDTH:
            return self._continuous_width
        return self._continuous_height

    @property
    def rotated(self) -> bool:
        return self.rotation is ViewRotation.ROTATED

    @property
    def actual_width(self) -> float:
        if self._continuous_width:
            return max(self.width_mm, self.axis_floor_mm)
        return self.width_mm

    @property
    def actual_height(self) -> float:
        if self._continuous_height:
            return max(self.height_mm, self.axis_floor_mm)
        return self.height_mm

    @property
    def render_width(self) -> float:
        return self.actual_height if self.rotated else self.actual_width

    @property
    def render_height(self) -> float:
        return self.actual_width if self.rotated else self.actual_height

    def render_size_px(self) -> tuple[float, float]:
        """Return the on-screen container size in display pixels."""

        return (
            mm_to_display_px(self.render_width),
            mm_to_display_px(self.render_height),
        )

    def declared(self, axis: Axis) -> float:
        return self.width_mm if axis is Axis.WIDTH else self.height_mm

    def resize(
        self,
        axis: Axis,
        start_value: float,
        pixel_delta: float,
        px_per_mm: float = DISPLAY_PX_PER_MM,
    ) -> float:
        """Apply a resize-drag delta to a continuous axis and return the value."""

        if not self.is_continuous(axis):
            raise ValueError(f"The {axis.value} axis is not continuous.")
        if px_per_mm <= 0:
            raise ValueError("px_per_mm must be positive.")
        value = max(self.axis_floor_mm, start_value + pixel_delta / px_per_mm)
        if axis is Axis.WIDTH:
            self.width_mm = value
        else:
            self.height_mm = value
        return value

    def to_dict(self) -> dict[str, object]:
        return {
            "width_mm": self.width_mm,
            "height_mm": self.height_mm,
            "continuous_width": self._continuous_width,
            "continuous_height": self._continuous_height,
            "rotation": self.rotation.value,
            "axis_floor_mm": self.axis_floor_mm,
            "actual_width_mm": self.actual_width,
            "actual_height_mm": self.actual_height,
            "render_width_mm": self.render_width,
            "render_height_mm": self.render_height,
        }
