"""Package-specific exception types."""

from __future__ import annotations

from pathlib import Path

from .diagnostics import SourceSpan


class SpecError(ValueError):
    """Base class for errors raised while building a specification."""


class ExtractionError(SpecError):
    """Base class for errors raised while extracting comments from one file."""


class CantParseFile(ExtractionError):
    """Raised when a file has no extension to pick a comment syntax from.

    Args:
        path: Path of the offending file.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__(f"Can't parse {self.path}: file has no extension")


class SpanError(ExtractionError):
    """Extraction error located at a span of the source file.

    Subclasses set `message`, `help` and `label`, which the diagnostic
    renderer shows next to the offending line.

    Args:
        span: Location of the problem within the source text.
    """

    message = "Error parsing file"
    help = ""
    label = "This bit here"

    def __init__(self, span: SourceSpan):
        self.span = span
        line, column = span.location()
        super().__init__(f"{span.name}:{line}:{column}: {self.help}")


class MissingStartcode(SpanError):
    """Raised when `endcode` appears outside a captured code region."""

    help = "missing a startcode instruction before the endcode"


class MissingEndcode(SpanError):
    """Raised when the file ends inside a captured code region."""

    help = "missing an endcode instruction to close the last startcode instruction"


class DoubleStartcode(SpanError):
    """Raised when `startcode` appears inside a captured code region."""

    help = "we are already in a startcode instruction"


class BadInstruction(SpanError):
    """Raised when the word after `spec:` is not a known instruction.

    Args:
        span: Location of the `spec:` prefix.
        instruction: The unrecognized instruction text.
    """

    help = "unrecognized instruction"
    label = "this instruction is not recognized, try spec:startcode or spec:endcode instead"

    def __init__(self, span: SourceSpan, instruction: str):
        self.instruction = instruction
        super().__init__(span)

    def __str__(self) -> str:
        return f"{super().__str__()} {self.instruction!r}"


class ManifestError(SpecError):
    """Raised when a specification manifest cannot be read or is invalid."""


class TemplateError(SpecError):
    """Raised when the specification template cannot be read or rendered."""


class NotGitRepo(SpecError):
    """Raised when a section refers to the git root outside of a git checkout.

    Args:
        section_path: The `@/`-prefixed path from the manifest.
    """

    def __init__(self, section_path: str):
        self.section_path = section_path
        super().__init__(
            f"{section_path} is relative to the git repository root, "
            "but no git repository was found"
        )


class BadPath(SpecError):
    """Raised when a specification name cannot be derived from a path."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"cannot derive a specification name from {path}")


class SpecAlreadyExists(SpecError):
    """Raised when initializing a directory that already holds a specification."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"a specification already exists in {path}")
