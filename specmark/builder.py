"""Specification builder.

Loads a manifest, extracts every section from its source file, renders the
template and writes the result.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path

import jinja2

from .config import SpecmarkConfig
from .constants import GIT_ROOT_PREFIX
from .exceptions import NotGitRepo, TemplateError
from .extractor import extract_file
from .filesystem import safe_read
from .formats import write_output
from .git import get_local_repo_path
from .manifest import Specification, load_manifest

logger = logging.getLogger(__name__)


def resolve_section_path(filename: str, spec_dir: Path, git_root: Path | None) -> Path:
    """Resolve the source file of a section.

    Paths starting with ``@/`` are relative to the git repository root, other
    paths to the manifest directory.

    Raises:
        NotGitRepo: If the path uses ``@/`` and no repository root is known.
    """
    if filename.startswith(GIT_ROOT_PREFIX):
        if git_root is None:
            raise NotGitRepo(filename)
        return git_root / filename[len(GIT_ROOT_PREFIX) :]
    return spec_dir / filename


def render_template(template: str, specification: Specification, template_path: Path) -> str:
    """Render the specification template.

    The template sees ``metadata``, ``config`` and ``sections`` (already
    extracted). Undefined names are errors and nothing is escaped.

    Raises:
        TemplateError: If the template cannot be parsed or rendered.
    """
    env = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        autoescape=False,
        keep_trailing_newline=True,
    )
    try:
        return env.from_string(template).render(**asdict(specification))
    except jinja2.TemplateSyntaxError as error:
        raise TemplateError(f"can't parse template {template_path}: {error}") from error
    except jinja2.TemplateError as error:
        raise TemplateError(f"template file can't be rendered: {template_path}: {error}") from error


def build(
    manifest_path: Path,
    output_file: Path | None = None,
    output_format: str | None = None,
    config: SpecmarkConfig | None = None,
) -> set[Path]:
    """Build a specification document.

    Args:
        manifest_path: Path to the ``Specification.toml`` file.
        output_file: Destination file; defaults per output format.
        output_format: ``"markdown"`` or ``"html"``; defaults to the
            configured format.
        config: Tool configuration; defaults to `SpecmarkConfig()`.

    Returns:
        set[Path]: Template and section files the build read.

    Raises:
        ManifestError: If the manifest is invalid.
        TemplateError: If the template cannot be read or rendered.
        NotGitRepo: If a section uses ``@/`` outside a git repository.
        ExtractionError: If a section file cannot be scanned.
        IOError: If the output cannot be written.

    Examples:
        build(Path("Specification.toml"), output_format="html")
    """
    config = config or SpecmarkConfig()
    output_format = output_format or config.output_format
    files_to_watch: set[Path] = set()

    specification = load_manifest(manifest_path)
    spec_dir = manifest_path.resolve().parent

    template_path = spec_dir / specification.config.template
    files_to_watch.add(template_path)
    try:
        with safe_read(template_path) as file:
            template = file.read()
    except (IOError, UnicodeDecodeError) as error:
        raise TemplateError(f"could not read template {template_path}: {error}") from error

    git_root = None
    if any(name.startswith(GIT_ROOT_PREFIX) for name in specification.sections.values()):
        git_root = get_local_repo_path(spec_dir)

    for section, filename in specification.sections.items():
        path = resolve_section_path(filename, spec_dir, git_root)
        files_to_watch.add(path)
        logger.info("extracting section %s from %s", section, path)
        specification.sections[section] = extract_file(
            path, indent_chars=config.indent_chars, max_file_size=config.max_file_size
        )

    rendered = render_template(template, specification, template_path)
    write_output(specification, rendered, output_format, output_file)

    return files_to_watch
