import textwrap

import pytest

from patchforge.errors import ParseError
from patchforge.extract.unified import parse_unified_diff
from patchforge.models import LineKind


def test_parse_basic_hunk_with_file_headers():
    diff = textwrap.dedent("""\
        --- a/calc.py
        +++ b/calc.py
        @@ -1,3 +1,3 @@
         def add(a, b):
        -    return a - b
        +    return a + b
         print(add(1, 2))
    """)
    parsed = parse_unified_diff(diff)
    assert parsed.old_path == "calc.py"
    assert parsed.new_path == "calc.py"
    assert parsed.warnings == []
    assert len(parsed.hunks) == 1

    hunk = parsed.hunks[0]
    assert (hunk.original_start, hunk.original_count, hunk.new_start, hunk.new_count) == (1, 3, 1, 3)
    assert [ln.kind for ln in hunk.lines] == [
        LineKind.CONTEXT,
        LineKind.REMOVE,
        LineKind.ADD,
        LineKind.CONTEXT,
    ]
    assert hunk.old_lines == ["def add(a, b):", "    return a - b", "print(add(1, 2))"]
    assert hunk.new_lines == ["def add(a, b):", "    return a + b", "print(add(1, 2))"]


def test_parse_git_headers_and_section_text():
    diff = textwrap.dedent("""\
        diff --git a/src/x.py b/src/x.py
        index 1234567..89abcde 100644
        --- a/src/x.py
        +++ b/src/x.py
        @@ -10,2 +10,2 @@ def foo():
        -    a = 1
        +    a = 2
         return a
    """)
    parsed = parse_unified_diff(diff)
    assert parsed.new_path == "src/x.py"
    assert parsed.hunks[0].header == "@@ -10,2 +10,2 @@"


def test_parse_omitted_counts_default_to_one():
    parsed = parse_unified_diff("@@ -3 +3 @@\n-old\n+new\n")
    hunk = parsed.hunks[0]
    assert (hunk.original_start, hunk.original_count, hunk.new_start, hunk.new_count) == (3, 1, 3, 1)
    assert parsed.warnings == []


def test_parse_count_mismatch_is_a_warning():
    parsed = parse_unified_diff("@@ -1,5 +1,5 @@\n a\n-b\n+c\n")
    assert len(parsed.hunks) == 1
    assert len(parsed.warnings) == 2
    assert "declares 5 original line(s) but body has 2" in parsed.warnings[0]
    assert "declares 5 new line(s) but body has 2" in parsed.warnings[1]


def test_parse_raw_empty_line_is_context():
    parsed = parse_unified_diff("@@ -1,3 +1,3 @@\n a\n\n-b\n+c\n")
    hunk = parsed.hunks[0]
    assert hunk.old_lines == ["a", "", "b"]
    assert parsed.warnings == []


def test_parse_drops_trailing_padding_lines():
    parsed = parse_unified_diff("@@ -1,1 +1,1 @@\n-a\n+b\n\n\n")
    assert parsed.hunks[0].old_lines == ["a"]
    assert parsed.warnings == []


def test_parse_bare_hunk_separator_without_numbers():
    parsed = parse_unified_diff("@@\n ctx\n-a\n+b\n@@ @@\n-c\n+d\n")
    assert len(parsed.hunks) == 2
    first = parsed.hunks[0]
    assert first.original_start is None
    assert not first.has_line_numbers
    assert (first.original_count, first.new_count) == (2, 2)
    assert parsed.warnings == []


def test_parse_no_newline_markers():
    diff = "@@ -1,1 +1,1 @@\n-a\n+b\n\\ No newline at end of file\n"
    hunk = parse_unified_diff(diff).hunks[0]
    assert hunk.new_missing_newline is True
    assert hunk.old_missing_newline is False
    assert hunk.new_lines == ["b"]


def test_parse_multiple_hunks_keep_order():
    diff = "@@ -1,1 +1,1 @@\n-a\n+A\n@@ -5,1 +5,1 @@\n-e\n+E\n"
    parsed = parse_unified_diff(diff)
    assert [h.index for h in parsed.hunks] == [0, 1]
    assert [h.original_start for h in parsed.hunks] == [1, 5]


def test_parse_warns_about_multiple_files():
    diff = textwrap.dedent("""\
        --- a/one.py
        +++ b/one.py
        @@ -1 +1 @@
        -a
        +b
        --- a/two.py
        +++ b/two.py
        @@ -1 +1 @@
        -c
        +d
    """)
    parsed = parse_unified_diff(diff)
    assert len(parsed.hunks) == 2
    assert parsed.hunks[0].old_lines == ["a"]
    assert any("2 files" in w for w in parsed.warnings)


def test_parse_error_malformed_header():
    with pytest.raises(ParseError) as exc:
        parse_unified_diff("@@ -x,1 +1 @@\n-a\n+b\n")
    assert exc.value.block_index == 0


def test_parse_error_empty_hunk():
    with pytest.raises(ParseError) as exc:
        parse_unified_diff("@@ -1,1 +1,1 @@\n@@ -2,1 +2,1 @@\n-a\n+b\n")
    assert exc.value.block_index == 0


def test_parse_error_no_hunks():
    with pytest.raises(ParseError):
        parse_unified_diff("--- a/x.py\n+++ b/x.py\n")


def test_parse_unprefixed_line_inside_hunk_is_context():
    """A context line that lost its leading space does not end the hunk."""
    parsed = parse_unified_diff("@@ -1,3 +1,3 @@\n import os\nx = 1\n-y = 2\n+y = 3\n")
    hunk = parsed.hunks[0]
    assert hunk.old_lines == ["import os", "x = 1", "y = 2"]
    assert hunk.new_lines == ["import os", "x = 1", "y = 3"]
    assert parsed.warnings == []


def test_parse_unprefixed_line_after_complete_hunk_ends_it():
    parsed = parse_unified_diff("@@ -1,1 +1,1 @@\n-a\n+b\nThat fixes the typo.\n")
    assert parsed.hunks[0].lines[-1].text == "b"
    assert parsed.warnings == []


def test_parse_bare_hunk_keeps_unprefixed_line_before_changes():
    parsed = parse_unified_diff("@@\n ctx\nplain\n-a\n+b\nTrailing prose.\n")
    hunk = parsed.hunks[0]
    assert hunk.old_lines == ["ctx", "plain", "a"]
    assert hunk.new_lines == ["ctx", "plain", "b"]
