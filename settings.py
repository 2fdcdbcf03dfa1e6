"""Environment-driven settings for the label designer."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
import tempfile
from typing import Mapping, Optional

from dotenv import load_dotenv

from fonts import register_fonts_dir
from label_editor.document import (
    DEFAULT_AXIS_FLOOR_MM,
    DEFAULT_HEIGHT_MM,
    DEFAULT_WIDTH_MM,
)

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    value = env.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    value = env.get(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise SystemExit(f"{name} must be a number, got '{value}'.") from exc


def _env_path(env: Mapping[str, str], name: str) -> Optional[Path]:
    value = env.get(name)
    if value is None or not value.strip():
        return None
    return Path(value.strip()).expanduser()


@dataclass(frozen=True)
class Settings:
    width_mm: float = DEFAULT_WIDTH_MM
    height_mm: float = DEFAULT_HEIGHT_MM
    axis_floor_mm: float = DEFAULT_AXIS_FLOOR_MM
    output_dir: Path = Path(tempfile.gettempdir())
    open_preview: bool = True
    log_level: str = "INFO"
    secret_key: str = "label-designer-ui"
    fonts_dir: Optional[Path] = None


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Read ``LABEL_DESIGNER_*`` variables, loading ``.env`` first."""

    if env is None:
        load_dotenv()
        env = os.environ

    return Settings(
        width_mm=_env_float(env, "LABEL_DESIGNER_WIDTH_MM", DEFAULT_WIDTH_MM),
        height_mm=_env_float(env, "LABEL_DESIGNER_HEIGHT_MM", DEFAULT_HEIGHT_MM),
        axis_floor_mm=_env_float(
            env, "LABEL_DESIGNER_AXIS_FLOOR_MM", DEFAULT_AXIS_FLOOR_MM),
        output_dir=Path(
            env.get("LABEL_DESIGNER_OUTPUT_DIR") or tempfile.gettempdir()),
        open_preview=_env_bool(env, "LABEL_DESIGNER_OPEN_PREVIEW", True),
        log_level=(env.get("LABEL_DESIGNER_LOG_LEVEL") or "INFO").upper(),
        secret_key=env.get("FLASK_SECRET_KEY", "label-designer-ui"),
        fonts_dir=_env_path(env, "LABEL_DESIGNER_FONTS_DIR"),
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def register_local_fonts(settings: Settings) -> list[str]:
    """Register the font families under ``settings.fonts_dir``, if set."""

    if settings.fonts_dir is None:
        return []
    families = register_fonts_dir(settings.fonts_dir)
    logger.info(
        "Registered local font families from %s: %s",
        settings.fonts_dir,
        ", ".join(families) or "none",
    )
    return families


__all__ = [
    "Settings",
    "configure_logging",
    "load_settings",
    "register_local_fonts",
]
