"""
Unit tests for the inline emphasis parser.

Pure functions, no fixtures needed.
"""

from app.services.markdown_runs import StyledRun, parse_runs, plain_text


def test_plain_text_is_one_run():
    assert parse_runs("Just words.") == [StyledRun("Just words.")]


def test_bold_and_italic_runs():
    """Runs come back in source order with their styles."""
    runs = parse_runs("Some **bold** and *italic* text.")

    assert runs == [
        StyledRun("Some "),
        StyledRun("bold", bold=True),
        StyledRun(" and "),
        StyledRun("italic", italic=True),
        StyledRun(" text."),
    ]


def test_double_asterisks_are_bold_not_two_italics():
    runs = parse_runs("**strong**")

    assert runs == [StyledRun("strong", bold=True)]


def test_single_asterisk_inside_bold_is_literal():
    runs = parse_runs("**a*b**")

    assert runs == [StyledRun("a*b", bold=True)]


def test_unclosed_markers_stay_literal():
    """Nothing is lost when a marker has no partner."""
    for text in ("**never closed", "a * b", "*dangling", "2 * 3 * 4"):
        runs = parse_runs(text)
        assert runs == [StyledRun(text)], text


def test_empty_input():
    assert parse_runs("") == []


def test_concatenation_covers_content():
    """Dropping the markers gives back the visible text."""
    text = "Mix **of** styles, *here* and **there**."

    assert plain_text(parse_runs(text)) == "Mix of styles, here and there."


def test_adjacent_emphasis():
    runs = parse_runs("**a***b*")

    assert runs == [StyledRun("a", bold=True), StyledRun("b", italic=True)]
