"""Git repository helpers."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


def get_local_repo_path(cwd: Path | None = None) -> Path | None:
    """Return the root of the git repository containing `cwd`.

    Runs ``git rev-parse --show-toplevel``.

    Returns:
        Path | None: Repository root, or None when git is unavailable or
            `cwd` is not inside a repository.
    """
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as error:
        logger.debug("git unavailable: %s", error)
        return None

    if result.returncode != 0:
        return None

    root = result.stdout.strip()
    return Path(root) if root else None
