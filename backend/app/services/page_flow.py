"""
Page flow controller — places wrapped lines on pages and breaks pages.

The controller owns the Cursor: which page we're on and how far down it
we've drawn (y measured from the top edge). One controller belongs to one
document, so generating several PDFs at once never shares a cursor.

For every line the rule is the same:
    if cursor.y + line_height > page_height - margin → start a new page
    draw the line at the cursor
    cursor.y += line_height

A page break is never triggered while the cursor is still at the top
margin. That guarantees forward progress: a line taller than the whole
page body (absurd font size) is drawn alone on its page instead of
breaking pages forever.
"""

from dataclasses import dataclass

from app.services.document import BLACK, PageDocument
from app.services.fonts import FontSet
from app.services.line_wrapper import LayoutLine

ALIGN_LEFT = "left"
ALIGN_CENTER = "center"


@dataclass
class Cursor:
    page_index: int
    y: float


@dataclass(frozen=True)
class BlockStyle:
    """Vertical metrics and horizontal placement for one kind of block."""
    font_size: float
    line_height: float
    align: str = ALIGN_LEFT
    indent: float = 0.0              # offset of every line from the left margin
    first_line_indent: float = 0.0   # extra offset for the first line only
    marker: str = ""                 # glyph drawn before the first line
    marker_offset: float = 0.0       # marker x offset from the left margin
    space_before: float = 0.0
    space_after: float = 0.0
    keep_together: bool = False      # move the whole block to a fresh page if it fits there
    keep_with_next: float = 0.0      # room kept below a kept-together block for what follows
    color: str = BLACK


class PageFlowController:
    """Draws LayoutLines onto a PageDocument, page-breaking as needed.

    Usage:
        flow = PageFlowController(document, fonts, margin=72)
        flow.place_block(lines, style)
        flow.add_space(12)
    """

    def __init__(self, document: PageDocument, fonts: FontSet, margin: float):
        self.document = document
        self.fonts = fonts
        self.margin = margin
        self.cursor = Cursor(page_index=document.page_count - 1, y=margin)

    # ------------------------------------------------------------------
    # GEOMETRY
    # ------------------------------------------------------------------

    @property
    def top(self) -> float:
        return self.margin

    @property
    def bottom(self) -> float:
        return self.document.height - self.margin

    @property
    def content_width(self) -> float:
        return self.document.width - 2 * self.margin

    @property
    def body_height(self) -> float:
        return self.bottom - self.top

    @property
    def at_page_top(self) -> bool:
        return self.cursor.y <= self.top

    # ------------------------------------------------------------------
    # FLOW
    # ------------------------------------------------------------------

    def new_page(self) -> None:
        """Append a page and reset the cursor to its top margin."""
        page = self.document.add_page()
        self.cursor = Cursor(page_index=page.index, y=self.top)

    def ensure_space(self, height: float) -> bool:
        """Break to a new page if `height` doesn't fit below the cursor.

        Returns True if a page break happened.
        """
        if self.cursor.y + height > self.bottom and not self.at_page_top:
            self.new_page()
            return True
        return False

    def move_to(self, y: float) -> None:
        """Jump the cursor to an absolute y on the current page (clamped)."""
        self.cursor.y = min(max(y, self.top), self.bottom)

    def add_space(self, amount: float) -> None:
        """Move the cursor down. Gaps are swallowed at the top of a page."""
        if amount <= 0 or self.at_page_top:
            return
        self.cursor.y = min(self.cursor.y + amount, self.bottom)

    def place_block(self, lines: list[LayoutLine], style: BlockStyle) -> None:
        """Draw one block's lines in order, advancing the cursor."""
        self.add_space(style.space_before)

        if style.keep_together and lines:
            block_height = len(lines) * style.line_height
            if style.keep_with_next:
                block_height += style.space_after + style.keep_with_next
            if block_height <= self.body_height:
                self.ensure_space(block_height)

        for number, line in enumerate(lines):
            self.ensure_space(style.line_height)
            self._draw_line(line, style, first=(number == 0))
            self.cursor.y += style.line_height

        self.add_space(style.space_after)

    def _draw_line(self, line: LayoutLine, style: BlockStyle, first: bool) -> None:
        baseline = self.cursor.y + style.font_size

        if style.align == ALIGN_CENTER:
            x = (self.document.width - line.width) / 2
        else:
            x = self.margin + style.indent
            if first:
                x += style.first_line_indent

        if first and style.marker:
            self.document.draw_text(
                self.margin + style.marker_offset, baseline, style.marker,
                self.fonts.regular, style.font_size, style.color,
            )

        for fragment in line.fragments:
            self.document.draw_text(
                x + fragment.x_offset, baseline, fragment.text,
                self.fonts.face(fragment.bold, fragment.italic),
                style.font_size, style.color,
            )
