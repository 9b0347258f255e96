import textwrap

import pytest

from patchforge import ApplyOptions, ParseError
from patchforge.apply.unified import apply_hunks, apply_unified_diff
from patchforge.extract.unified import parse_unified_diff


def test_applies_hunk_at_declared_position():
    content = "def add(a, b):\n    return a - b\nprint(add(1, 2))\n"
    diff = textwrap.dedent("""\
        --- a/calc.py
        +++ b/calc.py
        @@ -1,3 +1,3 @@
         def add(a, b):
        -    return a - b
        +    return a + b
         print(add(1, 2))
    """)
    out = apply_unified_diff(content, diff, {"enableTelemetry": True})
    assert out.content == "def add(a, b):\n    return a + b\nprint(add(1, 2))\n"
    assert (out.blocks_total, out.blocks_applied, out.blocks_failed) == (1, 1, 0)
    assert out.matches[0].strategy == "declared_position"
    assert out.matches[0].position == 0


def test_drifted_hunk_found_near_declared_line():
    # The file has one more blank line above the function than the diff expects.
    content = "import os\n\n\ndef add(a, b):\n    return a - b\n"
    diff = "@@ -3,2 +3,2 @@\n def add(a, b):\n-    return a - b\n+    return a + b\n"
    out = apply_unified_diff(content, diff, {"enableTelemetry": True})
    assert out.content == "import os\n\n\ndef add(a, b):\n    return a + b\n"
    assert out.blocks_applied == 1
    assert out.matches[0].strategy == "exact"
    assert out.matches[0].position == len("import os\n\n\n")


def test_loose_anchor_reindents_added_lines():
    content = (
        "class A:\n"
        "    class B:\n"
        "        def f(self):\n"
        "            return 1\n"
    )
    diff = "@@ -1,2 +1,2 @@\n def f(self):\n-    return 1\n+    return 2\n"
    out = apply_unified_diff(content, diff, {"enableTelemetry": True})
    assert out.content == (
        "class A:\n"
        "    class B:\n"
        "        def f(self):\n"
        "            return 2\n"
    )
    assert out.matches[0].strategy == "loose"


def test_context_lines_keep_file_text_under_fuzz():
    content = "a\nb\nc\nd\ne\n"
    diff = "@@ -2,3 +2,3 @@\n B-changed\n-c\n+C\n d\n"
    out = apply_unified_diff(content, diff, {"enableTelemetry": True})
    assert out.content == "a\nb\nC\nd\ne\n"
    assert out.warnings == ["Hunk 1: applied with fuzz 1 at line 2"]
    assert out.matches[0].strategy == "fuzz_1"
    assert out.matches[0].confidence == pytest.approx(2 / 3)


def test_fuzz_disabled_fails_hunk():
    content = "a\nb\nc\nd\ne\n"
    diff = "@@ -2,3 +2,3 @@\n B-changed\n-c\n+C\n d\n"
    out = apply_unified_diff(content, diff, {"max_fuzz": 0})
    assert out.content is content
    assert out.blocks_failed == 1
    assert out.errors == [
        "Hunk 1 (@@ -2,3 +2,3 @@): could not locate 3 context/remove line(s) near line 2 (max fuzz 0)"
    ]


def test_removed_lines_must_match():
    out = apply_unified_diff("a\nb\nc\n", "@@ -1,3 +1,3 @@\n a\n-x\n+y\n c\n")
    assert out.blocks_failed == 1
    assert out.content == "a\nb\nc\n"


def test_pure_insertion_into_empty_document():
    out = apply_unified_diff("", "@@ -0,0 +1,2 @@\n+line1\n+line2\n")
    assert out.content == "line1\nline2\n"
    assert out.blocks_applied == 1


def test_pure_insertion_at_new_side_line():
    out = apply_unified_diff("a\nb\n", "@@ -0,0 +2,1 @@\n+inserted\n")
    assert out.content == "a\ninserted\nb\n"


def test_later_hunks_follow_earlier_drift():
    content = "".join(f"l{i}\n" for i in range(1, 11))
    diff = (
        "@@ -2,1 +2,2 @@\n l2\n+new\n"
        "@@ -8,1 +9,1 @@\n-l8\n+L8\n"
    )
    out = apply_unified_diff(content, diff, {"enableTelemetry": True})
    lines = out.content.splitlines()
    assert lines[:4] == ["l1", "l2", "new", "l3"]
    assert lines[8] == "L8"
    assert [m.strategy for m in out.matches] == ["declared_position", "declared_position"]


def test_bare_hunks_apply_in_sequence():
    out = apply_unified_diff("a\nb\nc\nb\n", "@@\n-b\n+B\n@@\n-b\n+D\n")
    assert out.content == "a\nB\nc\nD\n"


def test_no_newline_marker_on_new_side():
    diff = "@@ -2,1 +2,1 @@\n-b\n\\ No newline at end of file\n+B\n\\ No newline at end of file\n"
    out = apply_unified_diff("a\nb", diff)
    assert out.content == "a\nB"


def test_adding_final_newline():
    diff = "@@ -2,1 +2,1 @@\n-b\n\\ No newline at end of file\n+b\n"
    out = apply_unified_diff("a\nb", diff)
    assert out.content == "a\nb\n"


def test_equally_distant_matches_take_earliest():
    out = apply_unified_diff("dup\nmid\ndup\n", "@@ -2,1 +2,1 @@\n-dup\n+DUP\n")
    assert out.content == "DUP\nmid\ndup\n"
    assert out.warnings == [
        "Hunk 1: 2 equally good matches (exact); using the earliest at line 1"
    ]


def test_crlf_content_keeps_crlf():
    out = apply_unified_diff("a\r\nb\r\n", "@@ -1,2 +1,2 @@\n a\n-b\n+B\n")
    assert out.content == "a\r\nB\r\n"


def test_lenient_partial_application():
    content = "a\nb\nc\n"
    diff = "@@ -1,1 +1,1 @@\n-a\n+A\n@@ -2,1 +2,1 @@\n-zzz\n+q\n"
    out = apply_unified_diff(content, diff)
    assert out.content == "A\nb\nc\n"
    assert (out.blocks_applied, out.blocks_failed) == (1, 1)
    assert out.failed[0].index == 1
    assert out.failed[0].snippet == "zzz"


def test_strict_mode_rolls_back_applied_hunks():
    content = "a\nb\nc\n"
    diff = "@@ -1,1 +1,1 @@\n-a\n+A\n@@ -2,1 +2,1 @@\n-zzz\n+q\n"
    out = apply_unified_diff(content, diff, ApplyOptions(strict=True))
    assert out.content is content
    assert (out.blocks_total, out.blocks_applied, out.blocks_failed) == (2, 0, 2)
    assert out.failed[0].reason == "rolled back: strict mode aborted at hunk 2"
    assert out.errors[1] == (
        "Strict mode: aborted at hunk 2; 1 applied hunk(s) rolled back, content left unchanged"
    )


def test_parser_warnings_carried_into_outcome():
    out = apply_unified_diff("a\nb\n", "@@ -1,5 +1,5 @@\n-a\n+A\n")
    assert out.content == "A\nb\n"
    assert len(out.warnings) == 2
    assert "declares 5 original line(s)" in out.warnings[0]


def test_apply_hunks_accepts_parsed_diff():
    parsed = parse_unified_diff("@@ -1 +1 @@\n-x\n+y\n")
    assert apply_hunks("x\n", parsed).content == "y\n"


def test_parse_error_propagates():
    with pytest.raises(ParseError):
        apply_unified_diff("a\n", "@@ -1,1 +1,1 @@\n")


def test_unprefixed_context_line_still_applies_changes():
    out = apply_unified_diff("import os\nx = 1\ny = 2\n", "@@ -1,3 +1,3 @@\n import os\nx = 1\n-y = 2\n+y = 3\n")
    assert out.content == "import os\nx = 1\ny = 3\n"
    assert (out.blocks_applied, out.blocks_failed) == (1, 0)
    assert out.warnings == []


def test_hunk_without_changes_is_a_failed_unit():
    content = "a\nb\n"
    out = apply_unified_diff(content, "@@ -1,2 +1,2 @@\n a\n b\n")
    assert out.content is content
    assert (out.blocks_applied, out.blocks_failed) == (0, 1)
    assert out.failed[0].reason == "hunk has no added or removed lines"
    assert out.errors == ["Hunk 1 (@@ -1,2 +1,2 @@): hunk has no added or removed lines"]


def test_whitespace_drift_at_declared_line_beats_distant_exact_copy():
    filler = "".join(f"pad{i} = {i}\n" for i in range(10))
    content = "def f():\n\treturn 1\n" + filler + "def f():\n    return 1\n"
    diff = "@@ -1,2 +1,2 @@\n def f():\n-    return 1\n+    return 2\n"
    out = apply_unified_diff(content, diff, {"enableTelemetry": True})
    assert out.content == "def f():\n    return 2\n" + filler + "def f():\n    return 1\n"
    assert out.matches[0].strategy == "loose"
    assert out.matches[0].position == 0
