"""Specification comment extraction.

Scans a source file line by line, keeping the specification comments and the
code regions wrapped in ``spec:startcode`` / ``spec:endcode`` directives, and
returns them as a single Markdown body.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from .constants import CODE_FENCE, DEFAULT_INDENT, END_CODE, INSTRUCTION_PREFIX, START_CODE
from .diagnostics import SourceSpan
from .exceptions import (
    BadInstruction,
    DoubleStartcode,
    MissingEndcode,
    MissingStartcode,
    SpecError,
)
from .filesystem import collect_file_stat, enforce_file_size, safe_read
from .models import (
    CLOSED,
    IDLE,
    Capturing,
    Closed,
    ExtractorContext,
    Idle,
    Open,
    SyntaxProfile,
)
from .syntax import profile_for_path

logger = logging.getLogger(__name__)


def iter_lines(content: str) -> Iterator[str]:
    """Yield the lines of `content` split on ``\\n`` only.

    A trailing newline does not produce an empty final line. Carriage returns
    are kept, so every yielded line plus one newline character spans exactly
    the original text.

    Examples:
        list(iter_lines("a\\nb\\n"))  # ["a", "b"]
    """
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    yield from lines


def strip_indent(line: str, indent: int) -> str:
    """Remove at most `indent` leading whitespace characters from `line`.

    Examples:
        strip_indent("      text", 4)  # "  text"
        strip_indent("  text", 4)  # "text"
    """
    stripped = 0
    while stripped < indent and stripped < len(line) and line[stripped].isspace():
        stripped += 1
    return line[stripped:]


def _span(ctx: ExtractorContext, offset: int, length: int) -> SourceSpan:
    return SourceSpan(name=ctx.source_name, source=ctx.source, offset=offset, length=length)


def _is_comment_line(ctx: ExtractorContext, line: str) -> bool:
    """Check whether `line` carries specification text.

    An open block comment owns the line even without a fresh start marker.
    """
    if isinstance(ctx.continuation, Open):
        return True
    return line.lstrip().startswith(ctx.profile.start_marker)


def _comment_body(ctx: ExtractorContext, line: str) -> tuple[str, int]:
    """Split the comment body out of a comment line.

    Returns:
        tuple[str, int]: The body and the column where it starts in `line`.
    """
    if isinstance(ctx.continuation, Open):
        body = strip_indent(line, ctx.continuation.indent)
        return body, len(line) - len(body)

    marker = ctx.profile.start_marker
    column = line.index(marker) + len(marker)
    return line[column:], column


def _try_directive(ctx: ExtractorContext, body: str, column: int) -> bool:
    """Handle a ``spec:`` directive.

    Directives are only recognized when no block comment is open.

    Args:
        ctx: Extractor context to update.
        body: Comment body of the current line.
        column: Column of `body` within the current line.

    Returns:
        bool: True when the line was a directive.

    Raises:
        DoubleStartcode: If `startcode` appears while already capturing.
        MissingStartcode: If `endcode` appears while not capturing.
        BadInstruction: If the instruction is neither `startcode` nor `endcode`.
    """
    if not isinstance(ctx.continuation, Closed):
        return False

    trimmed = body.lstrip()
    if not trimmed.startswith(INSTRUCTION_PREFIX):
        return False

    prefix_offset = ctx.cursor.offset + column + len(body) - len(trimmed)
    token_offset = prefix_offset + len(INSTRUCTION_PREFIX)
    instruction = trimmed[len(INSTRUCTION_PREFIX) :].split(" ", 1)[0]
    end_marker = ctx.profile.end_marker
    if end_marker and instruction.endswith(end_marker):
        instruction = instruction[: -len(end_marker)]

    if instruction == START_CODE:
        if isinstance(ctx.capture, Capturing):
            raise DoubleStartcode(_span(ctx, token_offset, len(START_CODE)))
        ctx.output.append(f"{CODE_FENCE}{ctx.profile.code_tag}")
        ctx.capture = Capturing(start_offset=token_offset)
        logger.debug("%s: capture started at offset %d", ctx.source_name, token_offset)
    elif instruction == END_CODE:
        if isinstance(ctx.capture, Idle):
            raise MissingStartcode(_span(ctx, token_offset, len(END_CODE)))
        ctx.output.append(CODE_FENCE)
        ctx.capture = IDLE
        logger.debug("%s: capture ended at offset %d", ctx.source_name, token_offset)
    else:
        raise BadInstruction(_span(ctx, prefix_offset, len(INSTRUCTION_PREFIX)), instruction)

    return True


def _emit_text(ctx: ExtractorContext, body: str, column: int) -> None:
    """Append a line of specification prose, tracking block comment continuation."""
    end_marker = ctx.profile.end_marker
    if end_marker is not None:
        trimmed = body.rstrip()
        if trimmed.endswith(end_marker):
            body = trimmed[: -len(end_marker)].rstrip()
            ctx.continuation = CLOSED
        elif isinstance(ctx.continuation, Closed):
            ctx.continuation = Open(indent=column)

    depth = len(body) - len(body.lstrip(ctx.profile.marker_char))
    body = body[depth:]
    if body.startswith(" "):
        body = body[1:]

    ctx.output.append(ctx.indent_chars * depth + body)


def _scan_line(ctx: ExtractorContext, line: str) -> None:
    if not _is_comment_line(ctx, line):
        if isinstance(ctx.capture, Capturing):
            ctx.output.append(line)
        return

    body, column = _comment_body(ctx, line)
    if _try_directive(ctx, body, column):
        return

    _emit_text(ctx, body, column)


def extract_comments(
    content: str,
    profile: SyntaxProfile,
    source_name: str = "<string>",
    indent_chars: str = DEFAULT_INDENT,
) -> str:
    """Extract the specification text of a source file.

    Keeps specification comments (with their marker stripped and extra marker
    characters turned into indentation) and copies code between
    ``spec:startcode`` and ``spec:endcode`` into fenced code blocks. Any
    malformed directive sequence aborts the extraction; no partial output is
    returned.

    Args:
        content: Full text of the source file.
        profile: Comment syntax of the file.
        source_name: File name shown in diagnostics.
        indent_chars: Text emitted once per extra marker character.

    Returns:
        str: Extracted lines, each terminated by a newline.

    Raises:
        DoubleStartcode: If a `startcode` directive appears while capturing.
        MissingStartcode: If an `endcode` directive appears while not capturing.
        MissingEndcode: If the file ends while capturing.
        BadInstruction: If a directive names an unknown instruction.

    Examples:
        extract_comments("//~ hello\\nfn main() {}\\n", resolve_profile("rs"))  # "hello\\n"
    """
    ctx = ExtractorContext(
        profile=profile, source_name=source_name, source=content, indent_chars=indent_chars
    )

    for line in iter_lines(content):
        _scan_line(ctx, line.removesuffix("\r"))
        ctx.cursor.advance(line)

    if isinstance(ctx.capture, Capturing):
        raise MissingEndcode(_span(ctx, ctx.capture.start_offset, len(START_CODE)))

    logger.debug("%s: extracted %d lines", source_name, len(ctx.output))
    return "".join(f"{line}\n" for line in ctx.output)


class ExtractFileError(SpecError):
    """Raised when a source file cannot be read."""


def extract_file(
    filepath: str | Path,
    indent_chars: str = DEFAULT_INDENT,
    max_file_size: int | None = None,
) -> str:
    """Read a source file and extract its specification text.

    Markdown files are returned unchanged.

    Args:
        filepath: Path to the source file.
        indent_chars: Text emitted once per extra marker character.
        max_file_size: Optional limit in bytes; larger files are refused.

    Returns:
        str: The extracted specification text.

    Raises:
        CantParseFile: If the file has no extension.
        ExtractFileError: If the file cannot be read, decoded, or is too large.
        SpanError: If the file contains a malformed directive sequence.

    Examples:
        extract_file(Path("src/overview.rs"))
    """
    filepath = Path(filepath)
    profile = profile_for_path(filepath)

    try:
        if max_file_size is not None:
            enforce_file_size(collect_file_stat(filepath), max_file_size, filepath)
        with safe_read(filepath) as file:
            content = file.read()
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise ExtractFileError(error_message) from error
    except IOError as error:
        raise ExtractFileError(str(error)) from error

    if profile is None:
        logger.debug("%s: markdown file, used as-is", filepath)
        return content

    logger.debug("%s: scanning with %s", filepath, profile)
    return extract_comments(content, profile, str(filepath), indent_chars)
