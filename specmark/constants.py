"""Constants used across the specmark package."""

from __future__ import annotations

# Comment markers per syntax family
LINE_COMMENT_MARKER = "//~"
PYTHON_COMMENT_MARKER = "#~"
OCAML_COMMENT_START = "(*~"
OCAML_COMMENT_END = "*)"

# Files with this extension are already final text
MARKDOWN_EXTENSION = "md"

# Directives
INSTRUCTION_PREFIX = "spec:"
START_CODE = "startcode"
END_CODE = "endcode"

CODE_FENCE = "```"
DEFAULT_INDENT = "\t"

# Scaffolding and build defaults
DEFAULT_MANIFEST = "Specification.toml"
DEFAULT_TEMPLATE = "specification_template.md"
DEFAULT_OUTPUT_FILES = {
    "markdown": "specification.md",
    "html": "specification.html",
}
OUTPUT_FORMATS = tuple(DEFAULT_OUTPUT_FILES)
GIT_ROOT_PREFIX = "@/"

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
