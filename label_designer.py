#!/usr/bin/env python3
"""Build a text label from the command line and preview, print or save it."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from fonts import FontError, available_families
from label_editor import (
    LabelDesignerError,
    LabelDocument,
    LabelEditor,
    ViewRotation,
)
from print_dispatch import CupsDispatcher
from settings import (
    Settings,
    configure_logging,
    load_settings,
    register_local_fonts,
)

logger = logging.getLogger(__name__)


def build_editor(
    args: argparse.Namespace,
    settings: Settings,
    dispatcher: CupsDispatcher,
) -> LabelEditor:
    """Create an editor holding one text box per ``--text`` argument."""

    document = LabelDocument(
        args.width,
        args.height,
        continuous_width=args.continuous_width,
        continuous_height=args.continuous_height,
        rotation=ViewRotation.ROTATED if args.rotated else ViewRotation.NORMAL,
        axis_floor_mm=settings.axis_floor_mm,
    )
    editor = LabelEditor(dispatcher, document=document, initial_box=False)
    editor.layout.set_style(
        font_family=args.font_family,
        font_size=args.font_size,
        font_color=args.color,
        font_weight="bold" if args.bold else "normal",
        font_style="italic" if args.italic else "normal",
    )
    for text in args.text or ["Text"]:
        editor.layout.add(text.replace("\\n", "\n"))
    return editor


def _parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Free-form text label -> print-ready raster"
    )
    parser.add_argument(
        "--width",
        type=float,
        default=settings.width_mm,
        help=f"Label width in mm (default: {settings.width_mm:g}).",
    )
    parser.add_argument(
        "--height",
        type=float,
        default=settings.height_mm,
        help=f"Label height in mm (default: {settings.height_mm:g}).",
    )
    continuous = parser.add_mutually_exclusive_group()
    continuous.add_argument(
        "--continuous-width",
        action="store_true",
        help="Treat the width as continuous tape (floored at the axis minimum).",
    )
    continuous.add_argument(
        "--continuous-height",
        action="store_true",
        help="Treat the height as continuous tape (floored at the axis minimum).",
    )
    parser.add_argument(
        "-r", "--rotated",
        action="store_true",
        help="Lay the text out on the rotated view.",
    )
    parser.add_argument(
        "-t", "--text",
        action="append",
        metavar="TEXT",
        help="Add a text box (repeatable, '\\n' starts a new line).",
    )
    parser.add_argument(
        "--font-family",
        default="Helvetica",
        help=f"Font family ({', '.join(available_families())}).",
    )
    parser.add_argument("--font-size", type=float, default=16.0)
    parser.add_argument("--color", default="#000000")
    parser.add_argument("--bold", action="store_true")
    parser.add_argument("--italic", action="store_true")
    parser.add_argument(
        "-o", "--output",
        help="Write the PNG raster to this path instead of dispatching it.",
    )
    parser.add_argument(
        "-p", "--printer",
        help="Send the label to this printer; without it a PDF preview is generated.",
    )
    parser.add_argument(
        "--list-printers",
        action="store_true",
        help="List available printers and exit.",
    )
    parser.add_argument(
        "--web",
        action="store_true",
        help="Start the web editor instead.",
    )
    parser.add_argument("--web-host", default="127.0.0.1")
    parser.add_argument("--web-port", type=int, default=4000)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point for the label designer."""

    settings = load_settings()
    configure_logging(settings)
    try:
        register_local_fonts(settings)
    except FontError as exc:
        raise SystemExit(str(exc)) from exc
    args = _parser(settings).parse_args(argv)

    dispatcher = CupsDispatcher(
        output_dir=settings.output_dir,
        open_preview=settings.open_preview,
    )

    if args.web:
        from label_designer_web import run_web_app

        run_web_app(settings, dispatcher, host=args.web_host, port=args.web_port)
        return 0

    try:
        if args.list_printers:
            printers = dispatcher.list_printers()
            print("\n".join(printers) if printers else "No printers found.")
            return 0

        editor = build_editor(args, settings, dispatcher)
        if args.output:
            result = editor.capture()
            Path(args.output).write_bytes(result.png_bytes)
            message = (
                f"Wrote {args.output} ({result.width_px}x{result.height_px} px)"
            )
        elif args.printer:
            message = editor.print_label(args.printer)
        else:
            message = editor.preview()
    except (ValueError, LabelDesignerError) as exc:
        logger.error("%s", exc)
        raise SystemExit(str(exc)) from exc

    print(message)
    return 0


if __name__ == "__main__":

    load_dotenv()

    main()
