"""Label layout model, view rendering and print capture."""

from __future__ import annotations

from .capture import CAPTURE_MAGNIFICATION, CapturePipeline, CaptureResult
from .document import Axis, LabelDocument, ViewRotation
from .editor import LabelEditor
from .errors import (
    DispatchError,
    InteractionError,
    LabelDesignerError,
    NotReadyError,
    PipelineBusyError,
    RenderContextError,
)
from .interaction import InteractionController, InteractionState
from .rendering import LabelSurface, RenderMode
from .text_boxes import TextBox, TextBoxLayout, TextStyle

__all__ = [
    "Axis",
    "CAPTURE_MAGNIFICATION",
    "CapturePipeline",
    "CaptureResult",
    "DispatchError",
    "InteractionController",
    "InteractionError",
    "InteractionState",
    "LabelDesignerError",
    "LabelDocument",
    "LabelEditor",
    "LabelSurface",
    "NotReadyError",
    "PipelineBusyError",
    "RenderContextError",
    "RenderMode",
    "TextBox",
    "TextBoxLayout",
    "TextStyle",
    "ViewRotation",
]
