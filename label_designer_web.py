"""Web UI for laying out and printing a text label."""

from __future__ import annotations

import argparse
from functools import wraps
from io import BytesIO
import logging
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

from dotenv import load_dotenv
from flask import Flask, jsonify, render_template, request, send_file
from werkzeug.exceptions import HTTPException
from werkzeug.wrappers import Response

from fonts import FontError, available_families
from label_editor import (
    DispatchError,
    InteractionError,
    LabelDesignerError,
    LabelDocument,
    LabelEditor,
    NotReadyError,
    PipelineBusyError,
    RenderContextError,
    RenderMode,
    ViewRotation,
)
from label_editor.rendering import BoxHit, HandleHit, hit_test
from print_dispatch import CupsDispatcher, PrintDispatcher
from settings import (
    Settings,
    configure_logging,
    load_settings,
    register_local_fonts,
)

__all__ = ["run_web_app", "create_app", "create_app_from_env"]

logger = logging.getLogger(__name__)

_ERROR_STATUS: dict[type[LabelDesignerError], int] = {
    InteractionError: 409,
    PipelineBusyError: 409,
    NotReadyError: 500,
    RenderContextError: 500,
    DispatchError: 502,
}

_TRUE_VALUES = {"1", "true", "yes", "on"}

ViewFunc = TypeVar("ViewFunc", bound=Callable[..., Any])


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _as_float(payload: dict[str, Any], name: str) -> float:
    try:
        return float(payload[name])
    except KeyError as exc:
        raise ValueError(f"'{name}' is required.") from exc
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{name}' must be a number.") from exc


def _pointer(payload: dict[str, Any]) -> tuple[float, float]:
    return _as_float(payload, "x"), _as_float(payload, "y")


def create_app(
    editor: LabelEditor,
    settings: Optional[Settings] = None,
) -> Flask:
    """Create the Flask app wired to a single editing session."""
    settings = settings or Settings()
    template_dir = Path(__file__).resolve().parent / "templates"
    app = Flask(__name__, template_folder=str(template_dir))
    app.config["SECRET_KEY"] = settings.secret_key

    def _json_payload() -> dict[str, Any]:
        payload = request.get_json(silent=True)
        return payload if isinstance(payload, dict) else {}

    def _state(**extra: Any) -> Response:
        body = editor.state()
        body.update(extra)
        return jsonify(body)

    def _holds_state(view: ViewFunc) -> ViewFunc:
        # Runs the view while no capture is reading the label.
        @wraps(view)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with editor.editing():
                return view(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    @app.errorhandler(LabelDesignerError)
    def handle_label_error(err: LabelDesignerError):  # pyright: ignore[reportUnusedFunction]
        status = _ERROR_STATUS.get(type(err), 500)
        if status >= 500:
            logger.error("%s on %s: %s", type(err).__name__, request.path, err)
        return jsonify({"error": str(err)}), status

    @app.errorhandler(ValueError)
    def handle_bad_input(err: ValueError):  # pyright: ignore[reportUnusedFunction]
        return jsonify({"error": str(err)}), 400

    @app.errorhandler(KeyError)
    def handle_unknown_box(err: KeyError):  # pyright: ignore[reportUnusedFunction]
        return jsonify({"error": f"No text box with id {err.args[0]}"}), 404

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):  # pyright: ignore[reportUnusedFunction]
        if isinstance(err, HTTPException):
            if request.path.startswith("/api/"):
                return jsonify({"error": err.description}), err.code or 500
            return err
        logger.exception("Unhandled error on %s: %s", request.path, err)
        return jsonify({"error": str(err) or "Internal Server Error"}), 500

    @app.route("/", methods=["GET"])
    def index() -> str:  # pyright: ignore[reportUnusedFunction]
        return render_template(
            "editor.html",
            state=editor.state(),
            families=available_families(),
        )

    @app.route("/api/document", methods=["GET"])
    def document_state() -> Response:  # pyright: ignore[reportUnusedFunction]
        return _state()

    @app.route("/api/document", methods=["POST"])
    @_holds_state
    def document_update() -> Response:  # pyright: ignore[reportUnusedFunction]
        payload = _json_payload()
        document = editor.document

        width = _as_float(payload, "width_mm") if "width_mm" in payload else None
        height = _as_float(payload, "height_mm") if "height_mm" in payload else None
        rotation = (
            ViewRotation(payload["rotation"]) if "rotation" in payload else None
        )
        zoom = _as_float(payload, "zoom") if "zoom" in payload else None
        if zoom is not None and zoom <= 0:
            raise ValueError("'zoom' must be positive.")
        if _as_bool(payload.get("continuous_width", False)) and _as_bool(
            payload.get("continuous_height", False)
        ):
            raise ValueError("Only one axis can be continuous.")

        if width is not None:
            document.width_mm = width
        if height is not None:
            document.height_mm = height
        if "continuous_width" in payload:
            document.set_continuous_width(_as_bool(payload["continuous_width"]))
        if "continuous_height" in payload:
            document.set_continuous_height(_as_bool(payload["continuous_height"]))
        if rotation is not None:
            document.rotation = rotation
        if zoom is not None:
            editor.interaction.zoom = zoom

        editor.layout.reclamp_all()
        return _state()

    @app.route("/api/style", methods=["POST"])
    @_holds_state
    def style_update() -> Response:  # pyright: ignore[reportUnusedFunction]
        payload = _json_payload()
        changes: dict[str, Any] = {}
        for name in ("font_family", "font_color", "font_weight", "font_style"):
            if name in payload:
                changes[name] = str(payload[name])
        if "font_size" in payload:
            changes["font_size"] = _as_float(payload, "font_size")
        editor.layout.set_style(**changes)
        editor.layout.reclamp_all()
        return _state()

    @app.route("/api/boxes", methods=["POST"])
    @_holds_state
    def box_add() -> tuple[Response, int]:  # pyright: ignore[reportUnusedFunction]
        payload = _json_payload()
        text = payload.get("text")
        box = editor.layout.add() if text is None else editor.layout.add(str(text))
        return jsonify(box.to_dict()), 201

    @app.route("/api/boxes/<int:box_id>", methods=["PATCH"])
    @_holds_state
    def box_update(box_id: int) -> Response:  # pyright: ignore[reportUnusedFunction]
        payload = _json_payload()
        layout = editor.layout
        if "text" in payload:
            layout.edit(box_id, str(payload["text"]))
        if "x" in payload or "y" in payload:
            box = layout.get(box_id)
            x = _as_float(payload, "x") if "x" in payload else box.x
            y = _as_float(payload, "y") if "y" in payload else box.y
            layout.move(box_id, x, y)
        elif "text" in payload:
            # New text can grow the footprint past the container edge.
            box = layout.get(box_id)
            layout.move(box_id, box.x, box.y)
        return jsonify(layout.get(box_id).to_dict())

    @app.route("/api/boxes/<int:box_id>", methods=["DELETE"])
    @_holds_state
    def box_remove(box_id: int) -> Response:  # pyright: ignore[reportUnusedFunction]
        editor.layout.remove(box_id)
        return _state()

    @app.route("/api/pointer/down", methods=["POST"])
    @_holds_state
    def pointer_down() -> Response:  # pyright: ignore[reportUnusedFunction]
        point = _pointer(_json_payload())
        hit = hit_test(editor.layout, editor.interaction.to_layout(point))
        if isinstance(hit, BoxHit) and hit.on_delete:
            editor.layout.remove(hit.box_id)
            return _state(hit="delete")
        if isinstance(hit, BoxHit):
            editor.interaction.press_box(hit.box_id, point)
            return _state(hit="box")
        if isinstance(hit, HandleHit):
            editor.interaction.press_handle(hit.axis, point)
            return _state(hit=f"{hit.axis.value}_handle")
        return _state(hit=None)

    @app.route("/api/pointer/move", methods=["POST"])
    @_holds_state
    def pointer_move() -> Response:  # pyright: ignore[reportUnusedFunction]
        editor.interaction.move_pointer(_pointer(_json_payload()))
        return _state()

    @app.route("/api/pointer/up", methods=["POST"])
    @_holds_state
    def pointer_up() -> Response:  # pyright: ignore[reportUnusedFunction]
        editor.interaction.release()
        return _state()

    @app.route("/api/view.png", methods=["GET"])
    @_holds_state
    def view_png() -> Response:  # pyright: ignore[reportUnusedFunction]
        mode = RenderMode(request.args.get("mode", RenderMode.INTERACTIVE.value))
        image = editor.surface.snapshot(mode, editor.interaction.zoom)
        buffer = BytesIO()
        image.save(buffer, format="PNG")
        buffer.seek(0)
        return send_file(buffer, mimetype="image/png")

    @app.route("/api/capture.png", methods=["GET"])
    def capture_png() -> Response:  # pyright: ignore[reportUnusedFunction]
        result = editor.capture()
        return send_file(
            BytesIO(result.png_bytes),
            mimetype="image/png",
            download_name="label.png",
        )

    @app.route("/api/printers", methods=["GET"])
    def printers() -> Response:  # pyright: ignore[reportUnusedFunction]
        return jsonify({"printers": editor.list_printers()})

    @app.route("/api/print", methods=["POST"])
    def print_label() -> Response:  # pyright: ignore[reportUnusedFunction]
        printer_name = _json_payload().get("printer_name") or None
        result = editor.dispatch(printer_name)
        return jsonify({
            "result": result,
            "mode": "preview" if printer_name is None else "print",
        })

    return app


def build_editor(settings: Settings, dispatcher: PrintDispatcher) -> LabelEditor:
    document = LabelDocument(
        settings.width_mm,
        settings.height_mm,
        axis_floor_mm=settings.axis_floor_mm,
    )
    return LabelEditor(dispatcher, document=document)


def create_app_from_env() -> Flask:
    """Create the Flask app using LABEL_DESIGNER_* environment variables."""
    settings = load_settings()
    register_local_fonts(settings)
    dispatcher = CupsDispatcher(
        output_dir=settings.output_dir,
        open_preview=settings.open_preview,
    )
    return create_app(build_editor(settings, dispatcher), settings)


def run_web_app(
    settings: Settings,
    dispatcher: PrintDispatcher,
    host: str,
    port: int,
) -> None:
    """Launch a lightweight Flask app for editing one label."""
    app = create_app(build_editor(settings, dispatcher), settings)
    logger.info("Label designer listening on http://%s:%d", host, port)
    app.run(host=host, port=port, debug=False, use_reloader=False)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the web UI."""
    parser = argparse.ArgumentParser(
        description="Label designer web UI"
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host/IP for the web UI (default: 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=4000,
        help="Port for the web UI (default: 4000).",
    )

    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(settings)
    try:
        register_local_fonts(settings)
    except FontError as exc:
        raise SystemExit(str(exc)) from exc
    dispatcher = CupsDispatcher(
        output_dir=settings.output_dir,
        open_preview=settings.open_preview,
    )
    run_web_app(settings, dispatcher, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    load_dotenv()
    main()
