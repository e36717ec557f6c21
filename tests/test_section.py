"""Tests for periodic_para/section.py."""

from periodic_para.section import extract_section


DOC = """# Project List
1. [[Alpha|Alpha]] 1hr

2hr
# Habit
- [x] Run
## Notes
text
"""


def test_extract_between_headers():
    assert extract_section(DOC, "Project List") == ["1. [[Alpha|Alpha]] 1hr", "", "2hr"]


def test_subheader_closes_section():
    assert extract_section(DOC, "Habit") == ["- [x] Run"]


def test_missing_header():
    assert extract_section(DOC, "Nope") == []


def test_last_header_yields_nothing():
    assert extract_section("intro\n# Only\nline one\nline two\n", "Only") == []


def test_header_must_match_whole_line():
    assert extract_section("# Project List extra\nx\n# End\n", "Project List") == []
    assert extract_section("## Project List\nx\n# End\n", "Project List") == []
