"""
Tests for font resolution and measurement.

Custom-font tests use the Vera TTFs that ship inside the reportlab
package, so nothing is downloaded.
"""

import logging
from pathlib import Path

import httpx
import reportlab
from reportlab.pdfbase.pdfmetrics import stringWidth

from app.services import fonts
from app.services.fonts import (
    FontAssets,
    FontSet,
    TextMeasurer,
    builtin_fonts,
    load_fonts,
)

REPORTLAB_FONTS = Path(reportlab.__file__).parent / "fonts"
VERA = FontAssets(
    regular=str(REPORTLAB_FONTS / "Vera.ttf"),
    bold=str(REPORTLAB_FONTS / "VeraBd.ttf"),
    italic=str(REPORTLAB_FONTS / "VeraIt.ttf"),
)


def test_builtin_families():
    assert builtin_fonts("serif").regular == "Times-Roman"
    assert builtin_fonts("SANS").bold == "Helvetica-Bold"
    # Unknown families fall back to serif
    assert builtin_fonts("comic") == builtin_fonts("serif")


def test_face_selection():
    serif = builtin_fonts("serif")

    assert serif.face() == "Times-Roman"
    assert serif.face(bold=True) == "Times-Bold"
    assert serif.face(italic=True) == "Times-Italic"
    assert serif.face(bold=True, italic=True) == "Times-BoldItalic"


def test_load_fonts_without_assets():
    assert load_fonts("sans") == builtin_fonts("sans")


def test_load_custom_ttf_fonts():
    loaded = load_fonts("serif", VERA)

    assert loaded.regular.startswith("SummaryFont-")
    assert len({loaded.regular, loaded.bold, loaded.italic}) == 3
    # No bold-italic asset: bold is used
    assert loaded.bold_italic == loaded.bold
    # Registering the same assets again is harmless
    assert load_fonts("serif", VERA) == loaded


def test_missing_file_falls_back(tmp_path, caplog):
    missing = str(tmp_path / "missing.ttf")

    with caplog.at_level(logging.WARNING, logger="app.services.fonts"):
        loaded = load_fonts("sans", FontAssets(VERA.regular, missing, VERA.italic))

    assert loaded == builtin_fonts("sans")
    assert "Font assets unavailable" in caplog.text


def test_corrupt_file_falls_back(tmp_path, caplog):
    corrupt = tmp_path / "corrupt.ttf"
    corrupt.write_bytes(b"definitely not a font")

    with caplog.at_level(logging.WARNING, logger="app.services.fonts"):
        loaded = load_fonts("serif", FontAssets(str(corrupt), str(corrupt), str(corrupt)))

    assert loaded == builtin_fonts("serif")
    assert "Could not register font" in caplog.text


def test_unreachable_url_falls_back(monkeypatch, caplog):
    def offline(url, **kwargs):
        raise httpx.ConnectError("network down")

    monkeypatch.setattr(fonts.httpx, "get", offline)

    with caplog.at_level(logging.WARNING, logger="app.services.fonts"):
        loaded = load_fonts("serif", FontAssets(
            "https://fonts.invalid/regular.ttf",
            "https://fonts.invalid/bold.ttf",
            "https://fonts.invalid/italic.ttf",
        ))

    assert loaded == builtin_fonts("serif")
    assert "Could not fetch font" in caplog.text


def test_font_downloaded_from_url(monkeypatch):
    ttf = Path(VERA.regular).read_bytes()
    requested = []

    def fake_get(url, **kwargs):
        requested.append(url)
        return httpx.Response(200, content=ttf, request=httpx.Request("GET", url))

    monkeypatch.setattr(fonts.httpx, "get", fake_get)

    name = fonts._register_variant("https://fonts.example/vera-download.ttf")

    assert name.startswith("SummaryFont-")
    assert requested == ["https://fonts.example/vera-download.ttf"]


def test_text_measurer_matches_reportlab():
    measure = TextMeasurer(builtin_fonts("serif"), 12)

    assert measure("Hello") == stringWidth("Hello", "Times-Roman", 12)
    assert measure("Hello", True, False) == stringWidth("Hello", "Times-Bold", 12)
    assert measure("Hello", bold=True) > measure("Hello")
    assert measure("") == 0


def test_text_measurer_custom_fonts():
    loaded = load_fonts("serif", VERA)
    measure = TextMeasurer(loaded, 10)

    assert measure("Wide text") == stringWidth("Wide text", loaded.regular, 10)
    assert isinstance(loaded, FontSet)
