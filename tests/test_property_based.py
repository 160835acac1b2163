from __future__ import annotations

import string

from hypothesis import given
from hypothesis import strategies as st

from specmark.exceptions import DoubleStartcode, MissingEndcode, MissingStartcode
from specmark.extractor import extract_comments, strip_indent
from specmark.syntax import resolve_profile

RUST = resolve_profile("rs")

prose_strategy = st.text(alphabet=string.ascii_letters + string.digits + " .,*-_", max_size=40)

line_strategy = st.sampled_from(
    [
        "//~ prose",
        "//~~ nested prose",
        "//~ spec:startcode",
        "//~ spec:endcode",
        "let x = 1;",
        "    indented code",
        "",
        "// ordinary comment",
    ]
)


@given(st.integers(min_value=0, max_value=12), prose_strategy)
def test_marker_depth_maps_to_indentation(depth: int, text: str):
    content = f"//~{'~' * depth} {text}\n"

    assert extract_comments(content, RUST) == "\t" * depth + text + "\n"


@given(st.integers(min_value=0, max_value=20), st.integers(min_value=0, max_value=20))
def test_strip_indent_never_strips_more_than_available(available: int, indent: int):
    line = " " * available + "x"

    assert strip_indent(line, indent) == " " * max(available - indent, 0) + "x"


def _run(content: str) -> tuple[str, object]:
    try:
        return "ok", extract_comments(content, RUST)
    except (DoubleStartcode, MissingStartcode, MissingEndcode) as error:
        return type(error).__name__, error.span.offset


@given(st.lists(line_strategy, max_size=30))
def test_extraction_is_idempotent(lines: list[str]):
    content = "\n".join(lines) + "\n"

    assert _run(content) == _run(content)


@given(st.lists(line_strategy, max_size=30))
def test_unbalanced_directives_always_fail(lines: list[str]):
    expected = "ok"
    capturing = False
    for line in lines:
        if line == "//~ spec:startcode":
            if capturing:
                expected = "DoubleStartcode"
                break
            capturing = True
        elif line == "//~ spec:endcode":
            if not capturing:
                expected = "MissingStartcode"
                break
            capturing = False
    else:
        if capturing:
            expected = "MissingEndcode"

    outcome, result = _run("\n".join(lines) + "\n")

    assert outcome == expected
    if outcome == "ok":
        assert result.count("```rs\n") == lines.count("//~ spec:startcode")
        assert result.count("```\n") == lines.count("//~ spec:endcode")
