"""One editing session: document, boxes, surface and print handoff."""

from __future__ import annotations

from contextlib import contextmanager
import logging
import threading
from typing import TYPE_CHECKING, Iterator, Optional

from .capture import CapturePipeline, CaptureResult
from .document import LabelDocument
from .errors import DispatchError, LabelDesignerError, PipelineBusyError
from .interaction import InteractionController
from .rendering import LabelSurface
from .text_boxes import TextBoxLayout, TextStyle

if TYPE_CHECKING:
    from print_dispatch import PrintDispatcher

logger = logging.getLogger(__name__)


class LabelEditor:
    """Wires the label model to its view and to a print dispatcher.

    Capture and dispatch run under a single-slot guard: a second request
    while one is in flight is rejected with :class:`PipelineBusyError`.
    Edits made through :meth:`editing` wait until a running capture has
    read the label size and rendered the view.
    """

    def __init__(
        self,
        dispatcher: "PrintDispatcher",
        document: Optional[LabelDocument] = None,
        style: Optional[TextStyle] = None,
        pipeline: Optional[CapturePipeline] = None,
        initial_box: bool = True,
    ) -> None:
        self.dispatcher = dispatcher
        self.document = document or LabelDocument()
        self.layout = TextBoxLayout(self.document, style)
        self.interaction = InteractionController(self.document, self.layout)
        self.surface = LabelSurface()
        self.surface.attach(self.layout)
        self.pipeline = pipeline or CapturePipeline()
        self._busy = threading.Lock()
        self._state_lock = threading.RLock()
        if initial_box:
            self.layout.add()

    @property
    def busy(self) -> bool:
        return self._busy.locked()

    @contextmanager
    def editing(self) -> Iterator[None]:
        """Hold the label state still while a caller reads or changes it."""

        with self._state_lock:
            yield

    def _capture_locked(self) -> CaptureResult:
        with self._state_lock:
            return self.pipeline.capture(self.surface)

    def capture(self) -> CaptureResult:
        with self._guard():
            return self._capture_locked()

    def preview(self) -> str:
        return self.dispatch(None)

    def print_label(self, printer_name: str) -> str:
        return self.dispatch(printer_name)

    def dispatch(self, printer_name: Optional[str]) -> str:
        """Capture the label and hand it to the dispatcher."""

        with self._guard():
            result = self._capture_locked()
            try:
                return self.dispatcher.generate_print_artifact(
                    result.png_bytes,
                    result.width_mm,
                    result.height_mm,
                    printer_name,
                )
            except LabelDesignerError:
                raise
            except Exception as exc:
                logger.error("Dispatch failed: %s", exc)
                raise DispatchError(str(exc)) from exc

    def list_printers(self) -> list[str]:
        try:
            return self.dispatcher.list_printers()
        except LabelDesignerError:
            raise
        except Exception as exc:
            raise DispatchError(str(exc)) from exc

    def _guard(self) -> "_BusyGuard":
        return _BusyGuard(self._busy)

    def state(self) -> dict[str, object]:
        with self._state_lock:
            return self._state_dict()

    def _state_dict(self) -> dict[str, object]:
        style = self.layout.style
        return {
            "document": self.document.to_dict(),
            "boxes": self.layout.to_list(),
            "style": {
                "font_family": style.font_family,
                "font_size": style.font_size,
                "font_color": style.font_color,
                "font_weight": style.font_weight,
                "font_style": style.font_style,
            },
            "interaction": self.interaction.state.value,
            "zoom": self.interaction.zoom,
            "busy": self.busy,
        }


class _BusyGuard:
    def __init__(self, lock: threading.Lock) -> None:
        self._lock = lock

    def __enter__(self) -> None:
        if not self._lock.acquire(blocking=False):
            raise PipelineBusyError(
                "A preview or print is already in progress.")

    def __exit__(self, *exc_info: object) -> None:
        self._lock.release()
