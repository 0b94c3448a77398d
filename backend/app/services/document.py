"""
Page document — an ordered list of pages of recorded drawing operations.

Layout code never touches a ReportLab canvas directly. It appends text and
rules to the current page here, using top-down coordinates (y grows down
the page, like the layout cursor). Only finalize() replays everything onto
a real canvas, converting to PDF's bottom-up coordinates.

Recording first and rendering last means:
1. Footers like "Page 2 of 5" are easy — the total is known at render time.
2. Tests can inspect exactly what was drawn where, without parsing a PDF.
3. The canvas is created with invariant=1, so identical input always gives
   byte-identical PDF output (no creation timestamps, stable document id).
"""

from dataclasses import dataclass, field
from io import BytesIO
from typing import Callable, Optional, Union

from reportlab.lib import colors
from reportlab.pdfgen import canvas

BLACK = "#000000"


class ArtifactFinalizationError(Exception):
    """The document could not be turned into PDF bytes."""


@dataclass(frozen=True)
class TextOp:
    """Text with its baseline at (x, y), y measured from the page top."""
    x: float
    y: float
    text: str
    font_name: str
    font_size: float
    color: str = BLACK


@dataclass(frozen=True)
class RuleOp:
    """A horizontal line from x1 to x2 at y (from the page top)."""
    x1: float
    x2: float
    y: float
    thickness: float = 1.0
    color: str = BLACK


DrawOp = Union[TextOp, RuleOp]


@dataclass
class Page:
    index: int
    ops: list[DrawOp] = field(default_factory=list)

    @property
    def texts(self) -> list[TextOp]:
        return [op for op in self.ops if isinstance(op, TextOp)]


# stamp(document, page) -> extra ops drawn on that page at render time
PageStamp = Callable[["PageDocument", Page], list[DrawOp]]


class PageDocument:
    """A document of fixed-size pages, finalized exactly once.

    Usage:
        doc = PageDocument((595.27, 841.89), title="My Video")
        doc.draw_text(72, 90, "Hello", "Times-Roman", 12)
        doc.add_page()
        pdf_bytes = doc.finalize()
    """

    def __init__(
        self,
        page_size: tuple[float, float],
        title: str = "",
        author: str = "",
    ):
        self.width, self.height = page_size
        self.title = title
        self.author = author
        self.pages: list[Page] = [Page(index=0)]
        self._finalized = False

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def current_page(self) -> Page:
        return self.pages[-1]

    def add_page(self) -> Page:
        self._check_open()
        page = Page(index=len(self.pages))
        self.pages.append(page)
        return page

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        font_name: str,
        font_size: float,
        color: str = BLACK,
    ) -> None:
        self._check_open()
        self.current_page.ops.append(TextOp(x, y, text, font_name, font_size, color))

    def draw_rule(
        self,
        x1: float,
        x2: float,
        y: float,
        thickness: float = 1.0,
        color: str = BLACK,
    ) -> None:
        self._check_open()
        self.current_page.ops.append(RuleOp(x1, x2, y, thickness, color))

    def finalize(self, stamp: Optional[PageStamp] = None) -> bytes:
        """Render every page to PDF and return the bytes.

        Args:
            stamp: Optional callback returning extra ops per page (footers).
                Stamped ops are rendered, not recorded on the page.

        Raises:
            ArtifactFinalizationError: if already finalized, or if ReportLab
                fails to produce the PDF.
        """
        self._check_open()
        self._finalized = True

        buffer = BytesIO()
        try:
            pdf = canvas.Canvas(
                buffer,
                pagesize=(self.width, self.height),
                invariant=1,
            )
            pdf.setTitle(self.title)
            pdf.setAuthor(self.author)

            for page in self.pages:
                ops = list(page.ops)
                if stamp is not None:
                    ops.extend(stamp(self, page))
                for op in ops:
                    self._render(pdf, op)
                pdf.showPage()

            pdf.save()
        except Exception as e:
            raise ArtifactFinalizationError(f"PDF generation failed: {e}") from e

        return buffer.getvalue()

    def _render(self, pdf: canvas.Canvas, op: DrawOp) -> None:
        if isinstance(op, TextOp):
            pdf.setFillColor(colors.HexColor(op.color))
            pdf.setFont(op.font_name, op.font_size)
            pdf.drawString(op.x, self.height - op.y, op.text)
        else:
            pdf.setStrokeColor(colors.HexColor(op.color))
            pdf.setLineWidth(op.thickness)
            pdf.line(op.x1, self.height - op.y, op.x2, self.height - op.y)

    def _check_open(self) -> None:
        if self._finalized:
            raise ArtifactFinalizationError("Document has already been finalized")
