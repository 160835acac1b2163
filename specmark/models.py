"""Data models for specmark."""

from __future__ import annotations

from dataclasses import dataclass, field

from .constants import DEFAULT_INDENT


@dataclass(frozen=True)
class SyntaxProfile:
    """Comment syntax used to find specification text in one file.

    Attributes:
        start_marker: Text opening a specification comment.
        end_marker: Text closing a block comment, or None for line comments.
        code_tag: Language tag written after the opening code fence.
    """

    start_marker: str
    end_marker: str | None
    code_tag: str

    @property
    def marker_char(self) -> str:
        """Character whose repetition after the start marker sets nesting depth."""
        return self.start_marker[-1]


@dataclass(frozen=True)
class Idle:
    """Not inside a captured code region."""


@dataclass(frozen=True)
class Capturing:
    """Inside a ``startcode``/``endcode`` region.

    Attributes:
        start_offset: Offset of the ``startcode`` token that opened the region.
    """

    start_offset: int


@dataclass(frozen=True)
class Closed:
    """Not inside a multi-line block comment."""


@dataclass(frozen=True)
class Open:
    """Inside a block comment whose end marker has not been seen yet.

    Attributes:
        indent: Leading whitespace width stripped from continuation lines.
    """

    indent: int


CaptureState = Idle | Capturing
CommentContinuation = Closed | Open

IDLE = Idle()
CLOSED = Closed()


@dataclass
class ScanCursor:
    """Running offset of the current line within the source text."""

    offset: int = 0

    def advance(self, line: str) -> None:
        """Move past `line` and the newline that ends it."""
        self.offset += len(line) + 1


@dataclass
class ExtractorContext:
    """Encapsulate extractor state while walking one source file.

    Attributes:
        profile: Comment syntax for the file.
        source_name: Name of the scanned file, used in diagnostics.
        source: Full text of the scanned file.
        indent_chars: Text emitted once per level of marker depth.
        capture: Whether raw source lines are being copied.
        continuation: Whether a block comment is still open.
        cursor: Offset of the line being scanned.
        output: Lines produced so far.
    """

    profile: SyntaxProfile
    source_name: str = "<string>"
    source: str = ""
    indent_chars: str = DEFAULT_INDENT
    capture: CaptureState = IDLE
    continuation: CommentContinuation = CLOSED
    cursor: ScanCursor = field(default_factory=ScanCursor)
    output: list[str] = field(default_factory=list)
