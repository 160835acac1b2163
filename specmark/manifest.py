"""Specification manifest (``Specification.toml``) loading."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import tomlkit

from .exceptions import ManifestError

logger = logging.getLogger(__name__)


@dataclass
class Metadata:
    """Descriptive fields of a specification.

    Attributes:
        name: Name of the specification.
        description: Optional one-line description.
        version: Optional version string.
        authors: Author names.
    """

    name: str
    description: str | None = None
    version: str | None = None
    authors: list[str] = field(default_factory=list)


@dataclass
class Config:
    """Build settings of a specification.

    Attributes:
        template: Template path, relative to the manifest directory.
    """

    template: str


@dataclass
class Specification:
    """A parsed manifest.

    Attributes:
        metadata: Descriptive fields.
        config: Build settings.
        sections: Section names mapped to source file paths; paths starting
            with ``@/`` are relative to the git repository root.
    """

    metadata: Metadata
    config: Config
    sections: dict[str, str] = field(default_factory=dict)


def _table(data: dict, key: str, manifest_path: Path, required: bool = True) -> dict:
    value = data.get(key)
    if value is None and not required:
        return {}
    if not isinstance(value, dict):
        raise ManifestError(f"{manifest_path}: missing or invalid `[{key}]` table")
    return value


def _optional_string(table: dict, key: str, manifest_path: Path) -> str | None:
    value = table.get(key)
    if value is not None and not isinstance(value, str):
        raise ManifestError(f"{manifest_path}: `{key}` must be a string")
    return value


def parse_manifest(data: dict, manifest_path: Path) -> Specification:
    """Build a `Specification` from decoded TOML data.

    Args:
        data: Decoded TOML document.
        manifest_path: Path used in error messages.

    Returns:
        Specification: The validated manifest.

    Raises:
        ManifestError: If a required table or key is missing or has the wrong type.
    """
    metadata_table = _table(data, "metadata", manifest_path)
    config_table = _table(data, "config", manifest_path)
    sections_table = _table(data, "sections", manifest_path, required=False)

    name = _optional_string(metadata_table, "name", manifest_path)
    if not name:
        raise ManifestError(f"{manifest_path}: `metadata.name` is required")

    authors = metadata_table.get("authors", [])
    if not isinstance(authors, list) or not all(isinstance(author, str) for author in authors):
        raise ManifestError(f"{manifest_path}: `metadata.authors` must be a list of strings")

    template = _optional_string(config_table, "template", manifest_path)
    if not template:
        raise ManifestError(f"{manifest_path}: `config.template` is required")

    for section, filename in sections_table.items():
        if not isinstance(filename, str):
            raise ManifestError(f"{manifest_path}: section `{section}` must be a file path")

    return Specification(
        metadata=Metadata(
            name=name,
            description=_optional_string(metadata_table, "description", manifest_path),
            version=_optional_string(metadata_table, "version", manifest_path),
            authors=list(authors),
        ),
        config=Config(template=template),
        sections=dict(sections_table),
    )


def load_manifest(manifest_path: Path) -> Specification:
    """Read and validate a specification manifest.

    Args:
        manifest_path: Path to the ``Specification.toml`` file.

    Returns:
        Specification: The parsed manifest.

    Raises:
        ManifestError: If the file cannot be read, is not valid TOML, or is
            missing required fields.

    Examples:
        spec = load_manifest(Path("Specification.toml"))
        spec.sections["overview"]  # "src/overview.rs"
    """
    try:
        with open(manifest_path, "rb") as stream:
            data = tomllib.load(stream)
    except OSError as error:
        raise ManifestError(f"could not read manifest {manifest_path}: {error}") from error
    except tomllib.TOMLDecodeError as error:
        raise ManifestError(f"could not parse manifest {manifest_path}: {error}") from error

    specification = parse_manifest(data, manifest_path)
    logger.debug(
        "%s: loaded specification %r with %d sections",
        manifest_path,
        specification.metadata.name,
        len(specification.sections),
    )
    return specification


def render_manifest(specification: Specification) -> str:
    """Serialize a manifest back to TOML text.

    Only the fields a manifest can hold are written; absent optional values
    are omitted. The ``[sections]`` table always comes last.
    """
    metadata = tomlkit.table()
    metadata.add("name", specification.metadata.name)
    if specification.metadata.description is not None:
        metadata.add("description", specification.metadata.description)
    if specification.metadata.version is not None:
        metadata.add("version", specification.metadata.version)
    metadata.add("authors", list(specification.metadata.authors))

    config = tomlkit.table()
    config.add("template", specification.config.template)

    sections = tomlkit.table()
    for name, path in specification.sections.items():
        sections.add(name, path)

    doc = tomlkit.document()
    doc.add("metadata", metadata)
    doc.add(tomlkit.nl())
    doc.add("config", config)
    doc.add(tomlkit.nl())
    doc.add("sections", sections)
    return tomlkit.dumps(doc)
