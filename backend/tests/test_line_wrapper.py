"""
Unit tests for the greedy line wrapper.

Most tests use a fixed-width fake font (every character is 1pt wide,
bold characters 2pt) so expected breaks can be worked out by hand.
"""

from reportlab.pdfbase.pdfmetrics import stringWidth

from app.services.fonts import TextMeasurer, builtin_fonts
from app.services.line_wrapper import wrap_runs
from app.services.markdown_runs import StyledRun, parse_runs


def mono(text: str, bold: bool = False, italic: bool = False) -> float:
    return float(len(text) * (2 if bold else 1))


def test_short_text_fits_on_one_line():
    lines = wrap_runs([StyledRun("hello world")], 100, mono)

    assert len(lines) == 1
    assert lines[0].text == "hello world"
    assert lines[0].width == 11


def test_breaks_between_words():
    lines = wrap_runs([StyledRun("aaa bbb ccc ddd")], 7, mono)

    assert [line.text for line in lines] == ["aaa bbb", "ccc ddd"]


def test_lines_never_exceed_width():
    text = "the quick brown fox jumps over the lazy dog " * 5
    lines = wrap_runs([StyledRun(text)], 20, mono)

    assert len(lines) > 1
    assert all(line.width <= 20 for line in lines)
    assert " ".join(line.text for line in lines).split() == text.split()


def test_whitespace_dropped_at_line_edges():
    lines = wrap_runs([StyledRun("   aaa    bbb   ")], 5, mono)

    assert [line.text for line in lines] == ["aaa", "bbb"]


def test_whitespace_only_runs_give_no_lines():
    assert wrap_runs([StyledRun("   ")], 50, mono) == []
    assert wrap_runs([], 50, mono) == []


def test_mixed_styles_share_a_line():
    lines = wrap_runs(parse_runs("Some **bold** text"), 100, mono)

    assert len(lines) == 1
    fragments = lines[0].fragments
    assert [(f.text, f.bold) for f in fragments] == [
        ("Some ", False),
        ("bold", True),
        (" text", False),
    ]
    # x offsets accumulate widths of the fragments before
    assert [f.x_offset for f in fragments] == [0, 5, 13]
    assert lines[0].width == 18


def test_overlong_word_gets_its_own_line():
    """A 500-character word is placed unbroken; nothing is truncated."""
    word = "x" * 500
    lines = wrap_runs([StyledRun(f"before {word} after")], 50, mono)

    assert [line.text for line in lines] == ["before", word, "after"]
    assert len(lines[1].fragments) == 1
    assert lines[1].width == 500


def test_first_line_width_narrower_than_rest():
    lines = wrap_runs([StyledRun("aaa bbb ccc ddd")], 7, mono, first_line_width=3)

    assert [line.text for line in lines] == ["aaa", "bbb ccc", "ddd"]


def test_real_font_metrics_respect_width():
    fonts = builtin_fonts("serif")
    measure = TextMeasurer(fonts, 12)
    text = "Summaries wrap **with real** Times metrics, *including italics*, " * 6
    lines = wrap_runs(parse_runs(text), 200, measure)

    assert len(lines) > 3
    for line in lines:
        drawn = sum(
            stringWidth(f.text, fonts.face(f.bold, f.italic), 12) for f in line.fragments
        )
        assert drawn <= 200 + 1e-6


def test_style_change_inside_word_does_not_break_it():
    """"**bbb**ccc" is one word: it moves to a new line as a whole."""
    lines = wrap_runs(parse_runs("aaa **bbb**ccc"), 7, mono)

    assert [line.text for line in lines] == ["aaa", "bbbccc"]
    assert [(f.text, f.bold) for f in lines[1].fragments] == [("bbb", True), ("ccc", False)]
    assert lines[1].fragments[1].x_offset == 6


def test_punctuation_around_emphasis_stays_attached():
    lines = wrap_runs(parse_runs("see (*this*) now"), 8, mono)

    assert [line.text for line in lines] == ["see", "(this)", "now"]
