from __future__ import annotations

from functools import lru_cache
import logging
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from linechart.commands import RGBA
from linechart.raster.canvas import blend_coverage


LOGGER = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "DejaVu Sans"
DEFAULT_FONT_SIZE_PX = 10.0
FALLBACK_FONT_FAMILIES = ("DejaVu Sans", "Liberation Sans", "Arial", "Helvetica")
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path.home() / ".local" / "share" / "fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
)
FONT_SUFFIXES = frozenset({".ttf", ".otf", ".ttc"})

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def draw_text(
    dst: np.ndarray,
    x: int,
    y: int,
    text: str,
    color: RGBA,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    rotate_deg: int = 0,
) -> None:
    """Paint anti-aliased `text` with the top-left of its (rotated) box at (x, y)."""
    if not text:
        return
    mask = _glyph_mask(text, font_family, _pixel_size(font_size_px), _quarter_turns(rotate_deg))
    blend_coverage(dst, x, y, mask, color)


def text_size(
    text: str,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    rotate_deg: int = 0,
) -> tuple[int, int]:
    w, h = _extent(_font(font_family, _pixel_size(font_size_px)), text)
    if _quarter_turns(rotate_deg) % 2 == 1:
        return (h, w)
    return (w, h)


def _extent(font: Font, text: str) -> tuple[int, int]:
    if not text:
        ascent, descent = font.getmetrics()
        return (0, max(1, int(ascent + descent)))
    left, top, right, bottom = font.getbbox(text)
    return (max(0, int(right - left)), max(1, int(bottom - top)))


@lru_cache(maxsize=256)
def _glyph_mask(text: str, font_family: str, size: int, turns: int) -> np.ndarray:
    font = _font(font_family, size)
    left, top, right, bottom = font.getbbox(text)
    image = Image.new("L", (max(1, int(right - left)), max(1, int(bottom - top))), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    mask = np.asarray(image, dtype=np.uint8)
    # np.rot90 turns counter-clockwise, matching DrawText.rotate_deg.
    return np.rot90(mask, k=turns) if turns else mask


@lru_cache(maxsize=64)
def _font(font_family: str, size: int) -> Font:
    for path in _font_files(font_family):
        try:
            return ImageFont.truetype(str(path), size=size)
        except OSError:
            LOGGER.debug("skipping unreadable font file %s", path)
    LOGGER.debug("no font file for %r; using Pillow's default font", font_family)
    return ImageFont.load_default(size=size)


@lru_cache(maxsize=16)
def _font_files(font_family: str) -> tuple[Path, ...]:
    installed = _installed_fonts()
    ordered: list[Path] = []
    for family in (font_family, *FALLBACK_FONT_FAMILIES):
        key = _font_key(family)
        if not key:
            continue
        # Shortest stem first so "DejaVuSans" wins over "DejaVuSans-Bold".
        matches = sorted((p for p in installed if key in _font_key(p.stem)), key=lambda p: (len(p.stem), p.name))
        ordered.extend(p for p in matches if p not in ordered)
    return tuple(ordered)


@lru_cache(maxsize=1)
def _installed_fonts() -> tuple[Path, ...]:
    found: list[Path] = []
    for base in FONT_DIRS:
        if base.is_dir():
            found.extend(p for p in base.rglob("*") if p.suffix.lower() in FONT_SUFFIXES)
    return tuple(sorted(found))


def _font_key(name: str) -> str:
    return "".join(ch for ch in name.lower() if ch.isalnum())


def _pixel_size(font_size_px: float) -> int:
    return max(1, int(round(font_size_px)))


def _quarter_turns(rotate_deg: int) -> int:
    if rotate_deg % 90 != 0:
        raise ValueError("rotate_deg must be a multiple of 90")
    return (rotate_deg // 90) % 4
