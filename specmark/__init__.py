"""
specmark: build specification documents from comments in source files.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    specmark build --specification-path spec/Specification.toml
    specmark extract src/overview.rs

Library Usage:
    from pathlib import Path
    from specmark import extract_comments, extract_file, resolve_profile

    text = extract_file(Path("src/overview.rs"))
    text = extract_comments("//~ hello\\n", resolve_profile("rs"))
"""

from .builder import build
from .diagnostics import SourceSpan, render_diagnostic
from .exceptions import (
    BadInstruction,
    CantParseFile,
    DoubleStartcode,
    ExtractionError,
    ManifestError,
    MissingEndcode,
    MissingStartcode,
    SpanError,
    SpecError,
)
from .extractor import ExtractFileError, extract_comments, extract_file
from .manifest import Specification, load_manifest
from .models import SyntaxProfile
from .syntax import profile_for_path, resolve_profile
from .watch import SpecificationWatcher, watch

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "extract_comments",
    "extract_file",
    "resolve_profile",
    "profile_for_path",
    "build",
    "load_manifest",
    "render_diagnostic",
    "watch",
    "SpecificationWatcher",
    # Data models
    "SyntaxProfile",
    "SourceSpan",
    "Specification",
    # Exceptions
    "SpecError",
    "ExtractionError",
    "ExtractFileError",
    "CantParseFile",
    "SpanError",
    "DoubleStartcode",
    "MissingStartcode",
    "MissingEndcode",
    "BadInstruction",
    "ManifestError",
    # Version
    "__version__",
]
