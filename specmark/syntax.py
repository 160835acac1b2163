"""Comment syntax lookup by file extension."""

from __future__ import annotations

from pathlib import Path

from .constants import (
    LINE_COMMENT_MARKER,
    MARKDOWN_EXTENSION,
    OCAML_COMMENT_END,
    OCAML_COMMENT_START,
    PYTHON_COMMENT_MARKER,
)
from .exceptions import CantParseFile
from .models import SyntaxProfile

PYTHON_PROFILE = SyntaxProfile(start_marker=PYTHON_COMMENT_MARKER, end_marker=None, code_tag="python")
OCAML_PROFILE = SyntaxProfile(
    start_marker=OCAML_COMMENT_START, end_marker=OCAML_COMMENT_END, code_tag="ocaml"
)

_PROFILES = {
    "py": PYTHON_PROFILE,
    "ml": OCAML_PROFILE,
    "mli": OCAML_PROFILE,
}


def resolve_profile(extension: str) -> SyntaxProfile | None:
    """Return the comment syntax for a file extension.

    Args:
        extension: Extension without the leading dot.

    Returns:
        SyntaxProfile | None: Profile for the extension, or None for Markdown
            files, which are used as-is without scanning.

    Examples:
        resolve_profile("py").code_tag  # "python"
        resolve_profile("rs")  # SyntaxProfile("//~", None, "rs")
    """
    if extension == MARKDOWN_EXTENSION:
        return None
    profile = _PROFILES.get(extension)
    if profile is not None:
        return profile
    return SyntaxProfile(start_marker=LINE_COMMENT_MARKER, end_marker=None, code_tag=extension)


def file_extension(path: str | Path) -> str:
    """Return the extension of `path` without its dot.

    Raises:
        CantParseFile: If the path has no extension.
    """
    suffix = Path(path).suffix
    if not suffix or suffix == ".":
        raise CantParseFile(path)
    return suffix[1:]


def profile_for_path(path: str | Path) -> SyntaxProfile | None:
    """Resolve the comment syntax of a file from its name.

    Raises:
        CantParseFile: If the path has no extension.
    """
    return resolve_profile(file_extension(path))
