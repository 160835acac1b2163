"""Source-annotated rendering of extraction errors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .exceptions import SpanError


@dataclass(frozen=True)
class SourceSpan:
    """A labeled region of a source file.

    Offsets and lengths count characters of the decoded text, not bytes of the
    file: in `"//~ é\n//~ spec:endcode\n"` the `endcode` word starts at
    offset 15, although it sits at byte 16 of the UTF-8 encoding.

    Attributes:
        name: Name of the file the source text was read from.
        source: Full source text.
        offset: Zero-based character offset of the region start.
        length: Number of characters covered by the region.
    """

    name: str
    source: str
    offset: int
    length: int

    def location(self) -> tuple[int, int]:
        """Return the one-based line and column of the span start.

        Examples:
            SourceSpan("a.rs", "x\\ny", 2, 1).location()  # (2, 1)
        """
        preceding = self.source[: self.offset]
        line = preceding.count("\n") + 1
        column = self.offset - (preceding.rfind("\n") + 1) + 1
        return line, column

    def line_text(self) -> str:
        """Return the source line containing the span start, without its terminator."""
        start = self.source.rfind("\n", 0, self.offset) + 1
        end = self.source.find("\n", self.offset)
        if end == -1:
            end = len(self.source)
        return self.source[start:end].rstrip("\r")

    @property
    def text(self) -> str:
        return self.source[self.offset : self.offset + self.length]


def render_diagnostic(error: SpanError) -> str:
    """Render an extraction error with the offending line and a caret label.

    Args:
        error: Error carrying the span to annotate.

    Returns:
        str: Multi-line report ready to print.

    Examples:
        print(render_diagnostic(error))
    """
    span = error.span
    line, column = span.location()
    line_text = span.line_text()
    gutter = " " * len(str(line))
    # Keep tabs so the caret lines up with the rendered source line
    padding = "".join("\t" if char == "\t" else " " for char in line_text[: column - 1])
    carets = "^" * max(span.length, 1)

    return "\n".join(
        [
            f"error: {error.message}",
            f"{gutter}--> {span.name}:{line}:{column}",
            f"{gutter} |",
            f"{line} | {line_text}",
            f"{gutter} | {padding}{carets} {error.label}",
            f"{gutter} |",
            f"{gutter} = help: {error.help}",
        ]
    )
