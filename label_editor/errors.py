"""Exception types raised by the label editor core."""

from __future__ import annotations


class LabelDesignerError(Exception):
    """Base class for failures reported to the user."""


class NotReadyError(LabelDesignerError):
    """The visual surface to capture is not attached."""


class RenderContextError(LabelDesignerError):
    """The output raster could not be created or drawn into."""


class DispatchError(LabelDesignerError):
    """The print/export collaborator reported a failure."""


class PipelineBusyError(LabelDesignerError):
    """A capture/dispatch run is already in flight for this editor."""


class InteractionError(LabelDesignerError):
    """A pointer interaction was started while another one is active."""


__all__ = [
    "DispatchError",
    "InteractionError",
    "LabelDesignerError",
    "NotReadyError",
    "PipelineBusyError",
    "RenderContextError",
]
