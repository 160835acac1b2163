"""Rebuild a specification whenever one of its files changes."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from .builder import build
from .config import SpecmarkConfig
from .diagnostics import render_diagnostic
from .exceptions import SpanError, SpecError

logger = logging.getLogger(__name__)

# Opened/closed events are ignored: the build itself reads every watched file
_REBUILD_EVENTS = {EVENT_TYPE_CREATED, EVENT_TYPE_DELETED, EVENT_TYPE_MODIFIED, EVENT_TYPE_MOVED}


class SpecificationWatcher(FileSystemEventHandler):
    """Rebuild a specification when the manifest, template or a section changes.

    The watched set follows each successful build: directories holding new
    files are scheduled, directories no longer needed are unscheduled. A
    failed build is reported and the previous set is kept.

    Args:
        manifest_path: Path to the ``Specification.toml`` file.
        output_file: Destination file; defaults per output format.
        output_format: ``"markdown"`` or ``"html"``.
        config: Tool configuration.
        observer: watchdog observer to schedule directories on.
        report: Callback receiving build errors; defaults to logging them.
    """

    def __init__(
        self,
        manifest_path: Path,
        output_file: Path | None = None,
        output_format: str | None = None,
        config: SpecmarkConfig | None = None,
        observer=None,
        report: Callable[[str], None] | None = None,
    ):
        super().__init__()
        self.manifest_path = manifest_path.resolve()
        self.output_file = output_file
        self.output_format = output_format
        self.config = config
        self.observer = observer if observer is not None else Observer()
        self.report = report or logger.error
        self.files: set[Path] = {self.manifest_path}
        self._watches: dict[Path, object] = {}

    def rebuild(self) -> bool:
        """Build once and refresh the watched directories.

        Returns:
            bool: True when the build succeeded.
        """
        try:
            built_from = build(self.manifest_path, self.output_file, self.output_format, self.config)
        except SpanError as error:
            self.report(render_diagnostic(error))
            return False
        except (SpecError, IOError) as error:
            self.report(f"error: {error}")
            return False

        self.files = {path.resolve() for path in built_from} | {self.manifest_path}
        self._refresh_watches()
        logger.info("rebuilt %s, watching %d files", self.manifest_path, len(self.files))
        return True

    def _refresh_watches(self) -> None:
        directories = {path.parent for path in self.files}

        for directory in sorted(directories - self._watches.keys()):
            if not directory.is_dir():
                continue
            self._watches[directory] = self.observer.schedule(self, str(directory), recursive=False)
            logger.debug("watching %s", directory)

        for directory in sorted(self._watches.keys() - directories):
            self.observer.unschedule(self._watches.pop(directory))
            logger.debug("stopped watching %s", directory)

    def is_relevant(self, event: FileSystemEvent) -> bool:
        """Check whether `event` touches one of the watched files."""
        if event.is_directory or event.event_type not in _REBUILD_EVENTS:
            return False
        paths = [event.src_path, getattr(event, "dest_path", "")]
        return any(path and Path(path).resolve() in self.files for path in paths)

    def on_any_event(self, event: FileSystemEvent) -> None:
        if self.is_relevant(event):
            logger.info("%s changed, rebuilding", event.src_path)
            self.rebuild()


def watch(
    manifest_path: Path,
    output_file: Path | None = None,
    output_format: str | None = None,
    config: SpecmarkConfig | None = None,
    report: Callable[[str], None] | None = None,
    poll_interval: float = 1.0,
) -> None:
    """Build a specification, then rebuild it on every change until interrupted.

    Build errors are reported through `report` and do not stop watching.

    Examples:
        watch(Path("Specification.toml"), output_format="html")
    """
    watcher = SpecificationWatcher(
        manifest_path, output_file, output_format, config, report=report
    )
    watcher.rebuild()
    watcher._refresh_watches()
    watcher.observer.start()
    try:
        while True:
            time.sleep(poll_interval)
    except KeyboardInterrupt:
        logger.info("stopped watching %s", manifest_path)
    finally:
        watcher.observer.stop()
        watcher.observer.join()
