"""Unit tests for line classification."""

import pytest

from app.services.block_classifier import BlockKind, classify_line, title_block
from app.services.markdown_runs import StyledRun


@pytest.mark.parametrize("hashes", [1, 2, 3, 4, 5, 6])
def test_heading_levels(hashes):
    block = classify_line("#" * hashes + " Section")

    assert block.kind == BlockKind.HEADING
    assert block.level == hashes
    assert block.text == "Section"


def test_deep_headings_collapse_to_level_six():
    block = classify_line("######### Deep")

    assert block.kind == BlockKind.HEADING
    assert block.level == 6
    assert block.text == "Deep"


def test_hash_without_space_is_a_paragraph():
    block = classify_line("#hashtag")

    assert block.kind == BlockKind.PARAGRAPH
    assert block.text == "#hashtag"


def test_heading_keeps_inline_emphasis():
    block = classify_line("## The *big* idea")

    assert block.runs == (
        StyledRun("The "),
        StyledRun("big", italic=True),
        StyledRun(" idea"),
    )


@pytest.mark.parametrize("line", ["- item one", "* item one", "   - item one  "])
def test_bullets_strip_marker(line):
    block = classify_line(line)

    assert block.kind == BlockKind.BULLET
    assert block.text == "item one"


def test_bullet_with_bold_text():
    """"* **x**" is a bullet, not an italic span."""
    block = classify_line("* **Key** point")

    assert block.kind == BlockKind.BULLET
    assert block.runs[0] == StyledRun("Key", bold=True)


@pytest.mark.parametrize("line", ["", "   ", "\t"])
def test_blank_lines(line):
    block = classify_line(line)

    assert block.kind == BlockKind.BLANK
    assert block.runs == ()


def test_paragraph():
    block = classify_line("  Plain **prose**.  ")

    assert block.kind == BlockKind.PARAGRAPH
    assert block.text == "Plain prose."


def test_title_block_is_not_run_parsed():
    block = title_block("  A *starred* title  ")

    assert block.kind == BlockKind.TITLE
    assert block.runs == (StyledRun("A *starred* title"),)
