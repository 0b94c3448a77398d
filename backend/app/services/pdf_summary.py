"""
Summary PDF generator — lays out an AI video summary as a paginated PDF.

Input is just (title, body_text). The body is markdown-flavored text from
the summarizer. Output is an Artifact: the PDF bytes plus a filesystem-safe
filename derived from the title.

Document structure:
1. Cover page: the title (wrapped, centered), a subtitle, and a date stamp
2. Content pages: the title again as a running header, then the body
3. Footer "Page X of N" on every content page (the cover is not counted)

Pipeline for every body line:
    classify_line()  → Block (heading / bullet / paragraph / blank)
    parse_runs()     → bold / italic runs (done inside the classifier)
    wrap_runs()      → LayoutLines that fit the usable width
    place_block()    → drawn on the page, with page breaks as needed

We do our own layout instead of using Platypus flowables: text is
measured with ReportLab's font metrics and every line position is decided
by PageFlowController. That keeps the output deterministic — the same
input and options always produce byte-identical PDFs.
"""

import re
from dataclasses import dataclass, field, replace
from functools import partial
from datetime import date
from pathlib import Path
from typing import Optional, Union

from reportlab.lib.pagesizes import A4

from app.services.block_classifier import (
    MAX_HEADING_LEVEL,
    Block,
    BlockKind,
    classify_line,
    title_block,
)
from app.services.document import DrawOp, Page, PageDocument, TextOp
from app.services.fonts import FontAssets, FontSet, TextMeasurer, load_fonts
from app.services.line_wrapper import LayoutLine, wrap_runs
from app.services.markdown_runs import StyledRun
from app.services.page_flow import ALIGN_CENTER, ALIGN_LEFT, BlockStyle, PageFlowController

# --- Colors ---
# Body text stays black (APA style); only secondary marks use color.
MUTED_COLOR = "#718096"       # Medium gray — subtitle, date, footer
RULE_COLOR = "#cbd5e0"        # Light gray — separators

PDF_MEDIA_TYPE = "application/pdf"

_UNSAFE_FILENAME_CHARS = re.compile(r'[/\\?%*:|"<>]')


@dataclass(frozen=True)
class FontSizes:
    title: float = 18
    h1: float = 14
    h2: float = 13
    h3: float = 12
    h4: float = 12
    h5: float = 12
    h6: float = 12
    body: float = 12
    footer: float = 9

    def heading(self, level: int) -> float:
        level = min(max(level, 1), MAX_HEADING_LEVEL)
        return getattr(self, f"h{level}")


@dataclass(frozen=True)
class LayoutOptions:
    """Every layout knob, with defaults. Override only what you need:

        LayoutOptions(font_family="sans", margin_pt=54)
    """
    page_size: tuple[float, float] = A4
    margin_pt: float = 72                  # 1 inch on every side
    font_family: str = "serif"
    font_sizes: FontSizes = field(default_factory=FontSizes)
    line_height_multiplier: float = 1.5
    bullet_indent_pt: float = 24
    bullet_marker_offset_pt: float = 10
    paragraph_indent_pt: float = 36        # APA half-inch first-line indent
    heading_space_before: float = 24
    heading_space_after: float = 12
    paragraph_space_after: float = 12
    bullet_space_after: float = 6
    blank_line_space: float = 6
    font_assets: Optional[FontAssets] = None
    subtitle: str = "Video Summary"
    author: str = "Video Summary Service"
    generated_on: Optional[date] = None    # None → today


@dataclass(frozen=True)
class Artifact:
    """A finalized summary PDF."""
    filename: str
    content: bytes
    pages: tuple[Page, ...]
    first_content_page: int = 1           # pages before this one are the cover

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def save(self, directory: Union[str, Path]) -> Path:
        """Write the PDF into `directory` under its derived filename."""
        path = Path(directory) / self.filename
        path.write_bytes(self.content)
        return path


def derive_filename(title: str) -> str:
    """Make a filesystem-safe PDF filename from a video title.

    Each of / \\ ? % * : | " < > becomes a hyphen, then whitespace is trimmed:
        "My: Video?" → "My- Video-.pdf"
    """
    safe_title = _UNSAFE_FILENAME_CHARS.sub("-", title).strip()
    return f"{safe_title or 'summary'}.pdf"


def _today() -> date:
    return date.today()


def _build_styles(options: LayoutOptions) -> dict:
    """Create the BlockStyle for every kind of block.

    Returns a dict of style_name → BlockStyle. Line height is always
    font size × the line-height multiplier.
    """
    sizes = options.font_sizes
    multiplier = options.line_height_multiplier

    def metrics(size: float) -> dict:
        return {"font_size": size, "line_height": size * multiplier}

    styles = {
        "cover_title": BlockStyle(
            **metrics(sizes.title),
            align=ALIGN_CENTER,
            space_after=sizes.title,
            keep_together=True,
        ),
        "cover_subtitle": BlockStyle(
            **metrics(sizes.body),
            align=ALIGN_CENTER,
            color=MUTED_COLOR,
        ),
        "title": BlockStyle(
            **metrics(sizes.title),
            align=ALIGN_CENTER,
            space_after=12,
            keep_together=True,
        ),
        "paragraph": BlockStyle(
            **metrics(sizes.body),
            first_line_indent=options.paragraph_indent_pt,
            space_after=options.paragraph_space_after,
        ),
        "bullet": BlockStyle(
            **metrics(sizes.body),
            indent=options.bullet_indent_pt,
            marker="•",
            marker_offset=options.bullet_marker_offset_pt,
            space_after=options.bullet_space_after,
        ),
    }

    for level in range(1, MAX_HEADING_LEVEL + 1):
        styles[f"h{level}"] = BlockStyle(
            **metrics(sizes.heading(level)),
            align=ALIGN_CENTER if level == 1 else ALIGN_LEFT,
            space_before=options.heading_space_before,
            space_after=options.heading_space_after,
            keep_together=True,
            keep_with_next=sizes.body * multiplier,
        )

    return styles


class SummaryPDFGenerator:
    """Generates a summary PDF for one video.

    Usage:
        generator = SummaryPDFGenerator(LayoutOptions(font_family="sans"))
        artifact = generator.generate("Video Title", "# Intro\\nSome **bold** text.")
        artifact.save("downloads/")

    One generator owns one set of fonts and styles. Every generate() call
    builds its own document and cursor, so a generator can be reused.
    """

    def __init__(self, options: Optional[LayoutOptions] = None):
        self.options = options or LayoutOptions()
        self.fonts: FontSet = load_fonts(self.options.font_family, self.options.font_assets)
        self.styles = _build_styles(self.options)

    # ------------------------------------------------------------------
    # PUBLIC API
    # ------------------------------------------------------------------

    def generate(self, title: str, body_text: str) -> Artifact:
        """Lay out the summary and return the finished PDF.

        An empty body is fine: you get the cover plus one content page
        holding only the title header.

        Raises:
            ArtifactFinalizationError: if the PDF cannot be produced.
        """
        document = PageDocument(
            self.options.page_size,
            title=title,
            author=self.options.author,
        )
        flow = PageFlowController(document, self.fonts, self.options.margin_pt)

        self._render_cover(flow, title)

        flow.new_page()
        first_content_page = flow.cursor.page_index
        self._render_block(flow, title_block(title))
        self._render_rule(flow)
        self._render_body(flow, body_text)

        content = document.finalize(
            stamp=partial(self._stamp_footer, first_content_page=first_content_page),
        )

        return Artifact(
            filename=derive_filename(title),
            content=content,
            pages=tuple(document.pages),
            first_content_page=first_content_page,
        )

    # ------------------------------------------------------------------
    # SECTION RENDERERS
    # ------------------------------------------------------------------

    def _render_cover(self, flow: PageFlowController, title: str) -> None:
        """Title a third of the way down the page, then subtitle and date.

        Long titles start higher, up to the top margin, so the whole cover
        stays on one page whenever it can.
        """
        title_style = self.styles["cover_title"]
        subtitle = self.styles["cover_subtitle"]
        title_lines = self._wrap(flow, [StyledRun(title.strip(), bold=True)], title_style)

        cover_height = (
            len(title_lines) * title_style.line_height
            + title_style.space_after
            + 2 * subtitle.line_height
            + 12
        )
        flow.move_to(min(flow.document.height / 3, flow.bottom - cover_height))
        flow.place_block(title_lines, title_style)

        stamp = (self.options.generated_on or _today()).strftime("%B %d, %Y")
        self._place_runs(flow, [StyledRun(self.options.subtitle, italic=True)], subtitle)
        self._place_runs(flow, [StyledRun(f"Generated {stamp}")], subtitle)

        flow.add_space(12)
        self._render_rule(flow)

    def _render_body(self, flow: PageFlowController, body_text: str) -> None:
        """Feed every body line through classify → wrap → place."""
        # Summaries sometimes arrive with escaped newlines
        text = body_text.replace("\\n", "\n").strip()
        if not text:
            return

        previous_blank = True
        for raw_line in text.split("\n"):
            block = classify_line(raw_line)
            if block.kind == BlockKind.BLANK:
                # Runs of blank lines collapse into one gap
                if not previous_blank:
                    flow.add_space(self.options.blank_line_space)
                previous_blank = True
                continue

            previous_blank = False
            self._render_block(flow, block)

    def _render_block(self, flow: PageFlowController, block: Block) -> None:
        style = self._style_for(block)
        runs = list(block.runs)
        if block.kind in (BlockKind.TITLE, BlockKind.HEADING):
            runs = [replace(run, bold=True) for run in runs]
        self._place_runs(flow, runs, style)

    def _render_rule(self, flow: PageFlowController) -> None:
        flow.document.draw_rule(
            flow.margin, flow.document.width - flow.margin, flow.cursor.y,
            thickness=1, color=RULE_COLOR,
        )
        flow.add_space(12)

    # ------------------------------------------------------------------
    # HELPERS
    # ------------------------------------------------------------------

    def _place_runs(self, flow: PageFlowController, runs: list[StyledRun], style: BlockStyle) -> None:
        flow.place_block(self._wrap(flow, runs, style), style)

    def _wrap(self, flow: PageFlowController, runs: list[StyledRun], style: BlockStyle) -> list[LayoutLine]:
        """Wrap runs to the width left after indents."""
        measure = TextMeasurer(self.fonts, style.font_size)
        max_width = flow.content_width - style.indent
        first_line_width = None
        if style.first_line_indent:
            first_line_width = max_width - style.first_line_indent

        return wrap_runs(runs, max_width, measure, first_line_width)

    def _style_for(self, block: Block) -> BlockStyle:
        if block.kind == BlockKind.TITLE:
            return self.styles["title"]
        if block.kind == BlockKind.HEADING:
            return self.styles[f"h{block.level}"]
        if block.kind == BlockKind.BULLET:
            return self.styles["bullet"]
        return self.styles["paragraph"]

    def _stamp_footer(
        self,
        document: PageDocument,
        page: Page,
        first_content_page: int = 1,
    ) -> list[DrawOp]:
        """Center "Page X of N" in the bottom margin of every content page.

        X and N count content pages only, however many pages the cover took.
        """
        if page.index < first_content_page:
            return []

        size = self.options.font_sizes.footer
        number = page.index - first_content_page + 1
        total = document.page_count - first_content_page
        text = f"Page {number} of {total}"
        width = TextMeasurer(self.fonts, size)(text)

        return [TextOp(
            x=(document.width - width) / 2,
            y=document.height - self.options.margin_pt / 2,
            text=text,
            font_name=self.fonts.regular,
            font_size=size,
            color=MUTED_COLOR,
        )]


def generate_document(
    title: str,
    body_text: str,
    options: Optional[LayoutOptions] = None,
) -> Artifact:
    """Generate a summary PDF. The main entry point for callers."""
    return SummaryPDFGenerator(options).generate(title, body_text)
