"""
Inline emphasis parser — splits one line of summary text into styled runs.

The summaries we render are "markdown-flavored", not real markdown. Only two
inline markers matter:
- **bold**   → one bold run
- *italic*   → one italic run

Everything else (stray asterisks, unclosed markers, underscores, backticks)
is kept as literal text. Markers don't nest: inside a bold span, a single
asterisk is just a character.

Usage:
    runs = parse_runs("Some **bold** and *italic* text.")
    # [StyledRun("Some "), StyledRun("bold", bold=True), StyledRun(" and "),
    #  StyledRun("italic", italic=True), StyledRun(" text.")]
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class StyledRun:
    """A contiguous span of text sharing one bold/italic combination."""
    text: str
    bold: bool = False
    italic: bool = False


# Bold is tried first at every position, so "**x**" never becomes two
# italic spans. Delimiters must touch non-space text on the inside,
# which keeps "2 * 3 * 4" literal.
_EMPHASIS_RE = re.compile(
    r"\*\*(?P<bold>(?!\s)[^\n]+?(?<!\s))\*\*"
    r"|\*(?P<italic>(?!\s)[^*\n]+?(?<!\s))\*"
)


def parse_runs(text: str) -> list[StyledRun]:
    """Split a line into ordered StyledRuns covering the whole input.

    Args:
        text: One logical line, already stripped of heading/bullet tokens.

    Returns:
        Runs in source order. Empty input gives an empty list.
    """
    runs: list[StyledRun] = []
    position = 0

    for match in _EMPHASIS_RE.finditer(text):
        if match.start() > position:
            _append_plain(runs, text[position:match.start()])

        if match.group("bold") is not None:
            runs.append(StyledRun(match.group("bold"), bold=True))
        else:
            runs.append(StyledRun(match.group("italic"), italic=True))
        position = match.end()

    if position < len(text):
        _append_plain(runs, text[position:])

    return runs


def _append_plain(runs: list[StyledRun], text: str) -> None:
    """Add plain text, merging with a preceding plain run."""
    if runs and not runs[-1].bold and not runs[-1].italic:
        runs[-1] = StyledRun(runs[-1].text + text)
    else:
        runs.append(StyledRun(text))


def plain_text(runs: list[StyledRun]) -> str:
    """Concatenate run text with all styling dropped."""
    return "".join(run.text for run in runs)
