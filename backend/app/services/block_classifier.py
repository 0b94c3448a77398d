"""
Block classifier — decides what kind of block each summary line is.

Detection order (first match wins):
1. "#".."######" followed by whitespace → heading (deeper levels collapse to 6)
2. "- " or "* "                          → bullet item (marker stripped)
3. empty / whitespace only               → blank (paragraph break)
4. anything else                         → paragraph

Markup tokens are stripped here, BEFORE inline parsing, so the run parser
never sees a heading hash or a bullet marker.
"""

import re
from dataclasses import dataclass, field
from enum import Enum

from app.services.markdown_runs import StyledRun, parse_runs, plain_text

MAX_HEADING_LEVEL = 6

_HEADING_RE = re.compile(r"^(#+)\s+(.*)$")
_BULLET_PREFIXES = ("- ", "* ")


class BlockKind(str, Enum):
    TITLE = "title"
    HEADING = "heading"
    BULLET = "bullet"
    PARAGRAPH = "paragraph"
    BLANK = "blank"


@dataclass(frozen=True)
class Block:
    """One classified source line. `level` is only meaningful for headings."""
    kind: BlockKind
    runs: tuple[StyledRun, ...] = field(default_factory=tuple)
    level: int = 0

    @property
    def text(self) -> str:
        return plain_text(list(self.runs))


def classify_line(line: str) -> Block:
    """Classify one raw line of body text into a Block."""
    stripped = line.strip()

    heading = _HEADING_RE.match(stripped)
    if heading:
        level = min(len(heading.group(1)), MAX_HEADING_LEVEL)
        return Block(
            BlockKind.HEADING,
            tuple(parse_runs(heading.group(2).strip())),
            level=level,
        )

    if stripped.startswith(_BULLET_PREFIXES):
        return Block(BlockKind.BULLET, tuple(parse_runs(stripped[2:].strip())))

    if not stripped:
        return Block(BlockKind.BLANK)

    return Block(BlockKind.PARAGRAPH, tuple(parse_runs(stripped)))


def title_block(title: str) -> Block:
    """Build the synthetic title block. Titles are never run-parsed."""
    return Block(BlockKind.TITLE, (StyledRun(title.strip()),))
