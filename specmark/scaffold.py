"""Creation of new specification directories."""

from __future__ import annotations

import logging
from pathlib import Path

from .constants import DEFAULT_MANIFEST, DEFAULT_TEMPLATE
from .exceptions import BadPath, SpecAlreadyExists
from .filesystem import write_atomic
from .manifest import Config, Metadata, Specification, render_manifest

logger = logging.getLogger(__name__)


def new(name: str, base_dir: Path | None = None) -> Path:
    """Create a directory called `name` and initialize a specification in it.

    Returns:
        Path: The created specification directory.
    """
    path = (base_dir or Path.cwd()) / name
    init(path, name=name)
    return path


def init(path: Path, name: str | None = None) -> None:
    """Initialize a specification in `path`.

    Writes ``Specification.toml`` and ``specification_template.md``. The
    specification name defaults to the directory name.

    Args:
        path: Directory to initialize; created when missing.
        name: Specification name.

    Raises:
        BadPath: If no name is given and `path` has no directory name.
        SpecAlreadyExists: If `path` already holds a manifest or template.
        IOError: If the directory or files cannot be created.

    Examples:
        init(Path("spec"), name="consensus")
    """
    path = path.resolve()
    if not name:
        name = path.name
        if not name:
            raise BadPath(path)

    if path.is_dir():
        for existing in (DEFAULT_MANIFEST, DEFAULT_TEMPLATE):
            if (path / existing).exists():
                raise SpecAlreadyExists(path)
    else:
        try:
            path.mkdir(parents=True)
        except OSError as error:
            error_message = f"cannot create the specification directory {path}: {error}"
            raise IOError(error_message) from error

    specification = Specification(
        metadata=Metadata(name=name, description="some description", authors=["your name"]),
        config=Config(template=DEFAULT_TEMPLATE),
    )
    write_atomic(path / DEFAULT_MANIFEST, render_manifest(specification))

    title = name[0].upper() + name[1:]
    write_atomic(path / DEFAULT_TEMPLATE, f"# {title}\n\n My specification\n")

    logger.info("initialized specification %r in %s", name, path)
