"""
Line wrapper — greedy word wrap over styled runs.

Input is the ordered StyledRun sequence of one block plus a width limit.
Output is a list of LayoutLines, each holding styled fragments that fit
inside the limit. Styles may change mid-line ("Some **bold** text" wraps
as one line with three fragments).

Algorithm (word wrap, not optimal-fit):
1. Split every run into word and whitespace tokens. Each token remembers
   the style of the run it came from. Tokens that touch across a style
   change ("**bold**suffix") are grouped into one unbreakable word.
2. Walk the groups, keeping a running line width.
3. If the next group would push the line past the limit, close the line
   and start a new one with that group. Whitespace never starts a line.
4. Trailing whitespace is trimmed when a line is closed.

A single word wider than the limit is placed alone on its own line at full
length. We never drop or truncate content; a rare visual overflow is the
accepted cost.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from app.services.markdown_runs import StyledRun

# measure(text, bold, italic) -> rendered width in points
MeasureFn = Callable[[str, bool, bool], float]

_TOKEN_RE = re.compile(r"\S+|\s+")


@dataclass(frozen=True)
class Fragment:
    """A drawable piece of one line. x_offset is relative to the line start."""
    text: str
    bold: bool
    italic: bool
    x_offset: float
    width: float


@dataclass
class LayoutLine:
    """One physical line of text."""
    fragments: list[Fragment] = field(default_factory=list)

    @property
    def width(self) -> float:
        if not self.fragments:
            return 0.0
        last = self.fragments[-1]
        return last.x_offset + last.width

    @property
    def text(self) -> str:
        return "".join(fragment.text for fragment in self.fragments)


@dataclass
class _Token:
    text: str
    bold: bool
    italic: bool
    width: float

    @property
    def is_space(self) -> bool:
        return not self.text.strip()


def wrap_runs(
    runs: list[StyledRun],
    max_width: float,
    measure: MeasureFn,
    first_line_width: Optional[float] = None,
) -> list[LayoutLine]:
    """Wrap styled runs into lines no wider than `max_width`.

    Args:
        runs: Ordered runs of one block.
        max_width: Width limit for every line, in points.
        measure: Font metrics callback (text, bold, italic) -> width.
        first_line_width: Optional narrower limit for the first line only
            (used for paragraph first-line indents).

    Returns:
        Ordered LayoutLines. Runs that contain only whitespace give [].
    """
    lines: list[LayoutLine] = []
    current: list[_Token] = []
    current_width = 0.0

    def limit() -> float:
        if not lines and first_line_width is not None:
            return first_line_width
        return max_width

    def flush() -> None:
        nonlocal current, current_width
        while current and current[-1].is_space:
            current.pop()
        if current:
            lines.append(_build_line(current))
        current = []
        current_width = 0.0

    for unit in _group_words(_tokenize(runs, measure)):
        width = sum(token.width for token in unit)
        is_space = unit[0].is_space
        if not current and is_space:
            continue

        if current and current_width + width > limit():
            flush()
            if is_space:
                continue

        current.extend(unit)
        current_width += width

    flush()
    return lines


def _tokenize(runs: list[StyledRun], measure: MeasureFn) -> list[_Token]:
    """Split runs into measured word/whitespace tokens, keeping run styles."""
    tokens = []
    for run in runs:
        for piece in _TOKEN_RE.findall(run.text):
            tokens.append(_Token(
                text=piece,
                bold=run.bold,
                italic=run.italic,
                width=measure(piece, run.bold, run.italic),
            ))
    return tokens


def _group_words(tokens: list[_Token]) -> list[list[_Token]]:
    """Join tokens that touch across run boundaries ("**bold**suffix").

    Each group is one word or one stretch of whitespace, and a line
    never breaks inside a group.
    """
    groups: list[list[_Token]] = []
    for token in tokens:
        if groups and groups[-1][-1].is_space == token.is_space:
            groups[-1].append(token)
        else:
            groups.append([token])
    return groups


def _build_line(tokens: list[_Token]) -> LayoutLine:
    """Merge adjacent same-style tokens into fragments with x offsets."""
    line = LayoutLine()
    x = 0.0
    pending: Optional[_Token] = None

    for token in tokens:
        if pending and (pending.bold, pending.italic) == (token.bold, token.italic):
            pending = _Token(
                pending.text + token.text, pending.bold, pending.italic,
                pending.width + token.width,
            )
            continue
        if pending:
            line.fragments.append(Fragment(
                pending.text, pending.bold, pending.italic, x, pending.width,
            ))
            x += pending.width
        pending = token

    if pending:
        line.fragments.append(Fragment(
            pending.text, pending.bold, pending.italic, x, pending.width,
        ))

    return line
