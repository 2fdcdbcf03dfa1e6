# pyright: reportUnknownVariableType=false, reportUnknownMemberType=false
# pyright: reportUnknownArgumentType=false, reportMissingTypeStubs=false

"""Font lookup and text measurement for the label designer."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont as ReportLabTTFont

# Face keys are (bold, italic).
Face = tuple[bool, bool]

LINE_HEIGHT = 1.2
BOX_PADDING_PX = 4.0
MIN_BOX_WIDTH_PX = 20.0


class FontError(ValueError):
    """Raised when a font family cannot be resolved."""


@dataclass(frozen=True)
class BuiltinFont:
    """One of the PDF base-14 families, always available to reportlab."""

    family_name: str
    faces: dict[Face, str]


@dataclass(frozen=True)
class LocalStaticFont:
    """TrueType files found in one family directory."""

    family_name: str
    directory: Path
    files: dict[Face, str]


FontSource = Union[BuiltinFont, LocalStaticFont]


def _font_key(name: str) -> str:
    return " ".join(name.strip().lower().split())


FONT_SOURCES: dict[str, FontSource] = {
    _font_key("Helvetica"): BuiltinFont(
        family_name="Helvetica",
        faces={
            (False, False): "Helvetica",
            (True, False): "Helvetica-Bold",
            (False, True): "Helvetica-Oblique",
            (True, True): "Helvetica-BoldOblique",
        },
    ),
    _font_key("Times"): BuiltinFont(
        family_name="Times",
        faces={
            (False, False): "Times-Roman",
            (True, False): "Times-Bold",
            (False, True): "Times-Italic",
            (True, True): "Times-BoldItalic",
        },
    ),
    _font_key("Courier"): BuiltinFont(
        family_name="Courier",
        faces={
            (False, False): "Courier",
            (True, False): "Courier-Bold",
            (False, True): "Courier-Oblique",
            (True, True): "Courier-BoldOblique",
        },
    ),
}

# Browser-style family names map onto the closest base-14 family.
FONT_ALIASES: dict[str, str] = {
    "arial": "helvetica",
    "sans-serif": "helvetica",
    "times new roman": "times",
    "serif": "times",
    "courier new": "courier",
    "monospace": "courier",
}


def is_bold(weight: str | int) -> bool:
    """Interpret a CSS-like font weight."""

    text = str(weight).strip().lower()
    if text in {"bold", "bolder"}:
        return True
    if text.isdigit():
        return int(text) >= 600
    return False


def is_italic(style: str) -> bool:
    return style.strip().lower() in {"italic", "oblique"}


class FontRegistry:
    def __init__(self) -> None:
        # map font file path -> registered font name
        self._static_registry: dict[Path, str] = {}

    def get_font_name(self, family: str, bold: bool, italic: bool) -> str:
        key = _font_key(family)
        key = FONT_ALIASES.get(key, key)
        info = FONT_SOURCES.get(key)
        if info is None:
            available = ", ".join(sorted(FONT_SOURCES))
            raise FontError(
                f"Unknown font family '{family}'. Available: {available}")

        if isinstance(info, BuiltinFont):
            return self._closest_face(info.faces, bold, italic)
        return self._get_static_font_name(info, bold, italic)

    def _closest_face(
        self, faces: dict[Face, str], bold: bool, italic: bool
    ) -> str:
        for face in ((bold, italic), (bold, False), (False, italic)):
            if face in faces:
                return faces[face]
        return faces[(False, False)]

    def _get_static_font_name(
        self, info: LocalStaticFont, bold: bool, italic: bool
    ) -> str:
        filename = self._closest_face(info.files, bold, italic)
        face = next(f for f, name in info.files.items() if name == filename)

        destination = info.directory / filename
        cached = self._static_registry.get(destination)
        if cached:
            return cached

        if not destination.exists():
            raise FontError(
                f"Font file '{destination}' for family '{info.family_name}' is missing."
            )

        font_name = f"{info.family_name.replace(' ', '')}-{_FACE_NAMES[face]}"
        try:
            pdfmetrics.registerFont(ReportLabTTFont(font_name, str(destination)))
        except TTFError as exc:
            raise FontError(f"Cannot load font file '{destination}': {exc}") from exc
        self._static_registry[destination] = font_name
        return font_name


_REGISTRY = FontRegistry()

_FACE_NAMES: dict[Face, str] = {
    (False, False): "Regular",
    (True, False): "Bold",
    (False, True): "Italic",
    (True, True): "BoldItalic",
}

_FACE_SUFFIXES: dict[str, Face] = {
    "regular": (False, False),
    "bold": (True, False),
    "italic": (False, True),
    "oblique": (False, True),
    "bolditalic": (True, True),
    "boldoblique": (True, True),
}


def register_local_family(
    family: str, directory: Path, files: dict[Face, str]
) -> None:
    """Make TrueType files in ``directory`` selectable by family name."""

    if (False, False) not in files:
        raise FontError(f"Family '{family}' needs a regular face.")
    FONT_SOURCES[_font_key(family)] = LocalStaticFont(
        family_name=family, directory=Path(directory), files=dict(files))


def _face_from_filename(path: Path) -> Optional[Face]:
    _, _, suffix = path.stem.rpartition("-")
    return _FACE_SUFFIXES.get(suffix.lower())


def register_fonts_dir(fonts_dir: Path) -> list[str]:
    """Register every ``<fonts_dir>/<Family_Name>/`` as a font family.

    Faces are picked from ``*-Regular.ttf``, ``*-Bold.ttf``, ``*-Italic.ttf``
    and ``*-BoldItalic.ttf``. Directories without a regular face are
    skipped. Returns the registered family names.
    """

    fonts_dir = Path(fonts_dir)
    if not fonts_dir.is_dir():
        raise FontError(f"Fonts directory '{fonts_dir}' does not exist.")

    registered: list[str] = []
    for family_dir in sorted(p for p in fonts_dir.iterdir() if p.is_dir()):
        files: dict[Face, str] = {}
        for path in sorted(family_dir.iterdir()):
            if path.suffix.lower() != ".ttf":
                continue
            face = _face_from_filename(path)
            if face is not None:
                files.setdefault(face, path.name)
        if (False, False) not in files:
            continue
        family = family_dir.name.replace("_", " ")
        register_local_family(family, family_dir, files)
        registered.append(family)
    return registered


def resolve_font_name(family: str, weight: str | int, style: str) -> str:
    """Return the reportlab font name for a family/weight/style triple."""

    return _REGISTRY.get_font_name(family, is_bold(weight), is_italic(style))


def text_lines(text: str) -> list[str]:
    return text.split("\n") if text else [""]


def measure_text_block(
    text: str, font_name: str, font_size: float
) -> tuple[float, float]:
    """Return the ``(width, height)`` of ``text`` without padding."""

    lines = text_lines(text)
    width = max(pdfmetrics.stringWidth(line, font_name, font_size)
                for line in lines)
    height = len(lines) * font_size * LINE_HEIGHT
    return width, height


def box_footprint(
    text: str, font_name: str, font_size: float
) -> tuple[float, float]:
    """Return the on-screen box size for ``text``, padding included."""

    width, height = measure_text_block(text, font_name, font_size)
    return (
        max(width, MIN_BOX_WIDTH_PX) + 2 * BOX_PADDING_PX,
        height + 2 * BOX_PADDING_PX,
    )


def available_families() -> list[str]:
    return sorted(source.family_name for source in FONT_SOURCES.values())


__all__ = [
    "BOX_PADDING_PX",
    "FontError",
    "LINE_HEIGHT",
    "available_families",
    "box_footprint",
    "measure_text_block",
    "register_fonts_dir",
    "register_local_family",
    "resolve_font_name",
    "text_lines",
]
