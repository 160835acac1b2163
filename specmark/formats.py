"""Output formats for rendered specifications."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from jinja2 import Environment, PackageLoader, select_autoescape
from markdown_it import MarkdownIt
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from .constants import DEFAULT_OUTPUT_FILES
from .filesystem import write_atomic
from .manifest import Specification

logger = logging.getLogger(__name__)


def markdown_to_html(content: str) -> str:
    """Convert Markdown to an HTML fragment.

    Uses the CommonMark preset with tables, strikethrough, footnotes, task
    lists and bare URL autolinking enabled. Raw HTML in the source is passed
    through.
    """
    md = (
        MarkdownIt("commonmark", {"html": True, "linkify": True})
        .enable(["table", "strikethrough", "linkify"])
        .use(footnote_plugin)
        .use(tasklists_plugin)
    )
    return md.render(content)


def _short_name(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def render_respec(specification: Specification, content: str) -> str:
    """Wrap rendered Markdown in a ReSpec HTML page.

    Args:
        specification: Manifest providing the page title, editors and abstract.
        content: Rendered Markdown body.

    Returns:
        str: Complete HTML document.
    """
    env = Environment(
        loader=PackageLoader("specmark", "templates"),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    template = env.get_template("respec.html")
    metadata = specification.metadata
    return template.render(
        name=metadata.name,
        editors=metadata.authors,
        github="",
        short_name=_short_name(metadata.name),
        description=metadata.description or "",
        content=markdown_to_html(content),
    )


def default_output_file(output_format: str) -> Path:
    return Path(DEFAULT_OUTPUT_FILES[output_format])


def write_output(
    specification: Specification,
    content: str,
    output_format: str,
    output_file: Path | None = None,
) -> Path:
    """Write a rendered specification in the requested format.

    Args:
        specification: Manifest of the specification.
        content: Rendered Markdown document.
        output_format: ``"markdown"`` or ``"html"``.
        output_file: Destination; defaults to ``specification.md`` or
            ``specification.html`` in the current directory.

    Returns:
        Path: The file written.

    Raises:
        ValueError: If `output_format` is unknown.
        IOError: If the output cannot be written.
    """
    if output_format not in DEFAULT_OUTPUT_FILES:
        raise ValueError(f"unknown output format: {output_format}")

    output_file = output_file or default_output_file(output_format)
    if output_format == "html":
        content = render_respec(specification, content)

    write_atomic(output_file, content)
    logger.info("%s output saved at %s", output_format, output_file)
    return output_file
