"""Pointer interaction state machine for dragging boxes and resizing axes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Optional

from .document import Axis, LabelDocument
from .errors import InteractionError
from .text_boxes import TextBoxLayout
from .units import DISPLAY_PX_PER_MM

logger = logging.getLogger(__name__)

Point = tuple[float, float]


class InteractionState(str, Enum):
    IDLE = "idle"
    DRAGGING_BOX = "dragging_box"
    RESIZING_WIDTH = "resizing_width"
    RESIZING_HEIGHT = "resizing_height"


@dataclass(frozen=True)
class _Resize:
    axis: Axis
    start_value: float
    start_pointer: Point


class InteractionController:
    """Routes pointer events to exactly one active operation at a time.

    Pointer positions are screen pixels of the view drawn at ``zoom``. Box
    drags work in layout pixels (screen / zoom); resize deltas are converted
    to millimeters with ``DISPLAY_PX_PER_MM * zoom``.
    """

    def __init__(
        self,
        document: LabelDocument,
        layout: TextBoxLayout,
        zoom: float = 1.0,
    ) -> None:
        self.document = document
        self.layout = layout
        self.zoom = zoom
        self._state = InteractionState.IDLE
        self._resize: Optional[_Resize] = None

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def active_box(self) -> Optional[int]:
        return self.layout.dragging

    @property
    def px_per_mm(self) -> float:
        return DISPLAY_PX_PER_MM * self.zoom

    def to_layout(self, pointer: Point) -> Point:
        return pointer[0] / self.zoom, pointer[1] / self.zoom

    def _require_idle(self) -> None:
        if self._state is not InteractionState.IDLE:
            raise InteractionError(
                f"Cannot start a new interaction while {self._state.value}.")

    def press_box(self, box_id: int, pointer: Point) -> None:
        self._require_idle()
        self.layout.start_drag(box_id, self.to_layout(pointer))
        self._state = InteractionState.DRAGGING_BOX

    def press_handle(self, axis: Axis, pointer: Point) -> None:
        self._require_idle()
        if not self.document.is_continuous(axis):
            raise InteractionError(
                f"The {axis.value} axis has no resize handle.")
        self._resize = _Resize(
            axis=axis,
            start_value=self.document.declared(axis),
            start_pointer=pointer,
        )
        self._state = (
            InteractionState.RESIZING_WIDTH
            if axis is Axis.WIDTH
            else InteractionState.RESIZING_HEIGHT
        )

    def move_pointer(self, pointer: Point) -> None:
        if self._state is InteractionState.DRAGGING_BOX:
            self.layout.update_drag(self.to_layout(pointer))
        elif self._resize is not None:
            if not self.document.is_continuous(self._resize.axis):
                # The axis was fixed mid-drag; its handle is gone.
                self.release()
                return
            self.document.resize(
                self._resize.axis,
                self._resize.start_value,
                self._pointer_delta(self._resize, pointer),
                self.px_per_mm,
            )

    def _pointer_delta(self, resize: _Resize, pointer: Point) -> float:
        # A rotated view draws the width along the screen's vertical axis.
        horizontal = (resize.axis is Axis.WIDTH) != self.document.rotated
        index = 0 if horizontal else 1
        return pointer[index] - resize.start_pointer[index]

    def release(self) -> None:
        if self._state is InteractionState.IDLE:
            return
        if self._resize is not None:
            logger.debug(
                "Resized %s to %.2f mm",
                self._resize.axis.value,
                self.document.declared(self._resize.axis),
            )
            self.layout.reclamp_all()
        self.layout.end_drag()
        self._resize = None
        self._state = InteractionState.IDLE
