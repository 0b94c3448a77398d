"""
Font resolution and text measurement for summary PDFs.

Two built-in families ship with every PDF viewer, so they need no embedding:
- "serif" → Times-Roman / Times-Bold / Times-Italic / Times-BoldItalic
- "sans"  → Helvetica / Helvetica-Bold / Helvetica-Oblique / Helvetica-BoldOblique

Custom TrueType fonts can be supplied as file paths or http(s) URLs. Loading
them is the ONLY resource acquisition in the layout engine, and it always
finishes before any text is measured. If anything goes wrong (missing file,
network error, corrupt TTF) we log a warning and fall back to the built-in
family. A broken font asset must never fail a document.
"""

import hashlib
import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional

import httpx
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

logger = logging.getLogger(__name__)

FONT_FETCH_TIMEOUT_SECONDS = 10.0


class FontLoadError(Exception):
    """A custom font asset could not be read or registered."""


@dataclass(frozen=True)
class FontSet:
    """ReportLab font names for each style variant of one family."""
    regular: str
    bold: str
    italic: str
    bold_italic: str

    def face(self, bold: bool = False, italic: bool = False) -> str:
        if bold and italic:
            return self.bold_italic
        if bold:
            return self.bold
        if italic:
            return self.italic
        return self.regular


@dataclass(frozen=True)
class FontAssets:
    """Sources (file path or http(s) URL) for custom TrueType variants."""
    regular: str
    bold: str
    italic: str


BUILTIN_FAMILIES = {
    "serif": FontSet("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "sans": FontSet(
        "Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique",
    ),
}
DEFAULT_FAMILY = "serif"


def builtin_fonts(family: str) -> FontSet:
    """Return a built-in family. Unknown names get the default family."""
    return BUILTIN_FAMILIES.get(family.lower(), BUILTIN_FAMILIES[DEFAULT_FAMILY])


def load_fonts(family: str = DEFAULT_FAMILY, assets: Optional[FontAssets] = None) -> FontSet:
    """Resolve the fonts for a document.

    With no assets this is just the built-in family lookup. With assets,
    all three variants are registered; if any one fails, the whole family
    falls back so a document never mixes custom and built-in faces.
    """
    fallback = builtin_fonts(family)
    if assets is None:
        return fallback

    try:
        regular = _register_variant(assets.regular)
        bold = _register_variant(assets.bold)
        italic = _register_variant(assets.italic)
    except FontLoadError as e:
        logger.warning("Font assets unavailable, using built-in %s: %s", fallback.regular, e)
        return fallback

    # No bold-italic asset is accepted; bold carries the stronger emphasis.
    return FontSet(regular=regular, bold=bold, italic=italic, bold_italic=bold)


def _register_variant(source: str) -> str:
    """Read one TTF source and register it with ReportLab.

    The registered name is derived from the source, so registering the
    same asset twice (e.g. from concurrent documents) is harmless.
    """
    name = "SummaryFont-" + hashlib.sha1(source.encode("utf-8")).hexdigest()[:12]
    if name in pdfmetrics.getRegisteredFontNames():
        return name

    data = _read_font_bytes(source)
    try:
        pdfmetrics.registerFont(TTFont(name, BytesIO(data)))
    except Exception as e:
        raise FontLoadError(f"Could not register font from {source}: {e}") from e
    return name


def _read_font_bytes(source: str) -> bytes:
    if source.startswith(("http://", "https://")):
        try:
            response = httpx.get(source, timeout=FONT_FETCH_TIMEOUT_SECONDS, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise FontLoadError(f"Could not fetch font {source}: {e}") from e
        return response.content

    try:
        return Path(source).read_bytes()
    except OSError as e:
        raise FontLoadError(f"Could not read font {source}: {e}") from e


class TextMeasurer:
    """Measures rendered text width for one font set at one size.

    Instances are callables matching the line wrapper's measure signature:
        measure = TextMeasurer(fonts, 12)
        measure("hello", bold=False, italic=True)  # width in points
    """

    def __init__(self, fonts: FontSet, size: float):
        self.fonts = fonts
        self.size = size

    def __call__(self, text: str, bold: bool = False, italic: bool = False) -> float:
        return pdfmetrics.stringWidth(text, self.fonts.face(bold, italic), self.size)
