"""Append-only log file with size-triggered rotation into zip archives."""

import logging
import os
import time

from logrotator.archiver import archive_file
from logrotator.config import RotatorConfig, validate_config
from logrotator.errors import RotationError, WriteError
from logrotator.paths import archive_name, ensure_directory, file_exists, file_path
from logrotator.retention import SweepResult, sweep

logger = logging.getLogger(__name__)


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class Rotator:
    """Owns the active log file and the count of bytes written to it.

    Not thread-safe: callers must serialize write_line/rotate/close.
    Every write that crosses the size threshold blocks until the archive
    is written and the retention sweep has finished.
    """

    def __init__(self, config: RotatorConfig, time_func=None):
        self._config = validate_config(config)
        self._time_func = time_func or _epoch_millis
        self._file = None
        self._size = 0
        self.last_sweep: SweepResult | None = None
        ensure_directory(self._config.directory)

    @property
    def config(self) -> RotatorConfig:
        return self._config

    @property
    def bytes_written(self) -> int:
        return self._size

    def file_path(self, file_no: int = 0) -> str:
        return file_path(self._config.directory, self._config.name, file_no)

    def file_exists(self, file_no: int = 0) -> bool:
        return file_exists(self._config.directory, self._config.name, file_no)

    def _should_rotate(self, pending: int) -> bool:
        # a handle left closed by a failed rotation forces a retry
        if self._file.closed:
            return True
        # an empty active file is never sealed, so no empty archives
        return self._size > 0 and self._size + pending >= self._config.rotate_every_bytes

    def _open_active(self, mode: str):
        path = self.file_path(0)
        self._file = open(path, mode)
        logger.debug("Opened active log %s (mode=%s)", path, mode)

    def write_line(self, line: bytes | str) -> str | None:
        """Append *line* plus a newline. Returns the archive path if this write rotated."""
        if isinstance(line, str):
            line = line.encode("utf-8")

        data = line + b"\n"
        archived = None
        if self._file is None:
            self.rotate()
        if self._should_rotate(len(data)):
            archived = self.rotate()

        try:
            self._file.write(data)
            self._file.flush()
        except (OSError, ValueError) as exc:
            raise WriteError(f"Failed to write to {self.file_path(0)}: {exc}") from exc
        self._size += len(data)
        return archived

    def rotate(self) -> str | None:
        """Seal the active file into a timestamped archive and start a fresh one.

        With no active file this only opens one and returns None: a new
        file on first use, or the existing one in append mode after close().
        Otherwise it returns the archive path. On failure the active file
        stays closed and RotationError is raised; the next write retries.
        """
        active_path = self.file_path(0)

        if self._file is None:
            try:
                self._open_active("ab" if self._size else "wb")
            except OSError as exc:
                raise RotationError(f"Failed to open {active_path}: {exc}") from exc
            return None

        dest = os.path.join(
            self._config.directory, archive_name(self._config.name, self._time_func())
        )
        try:
            self._file.close()
            copied = archive_file(active_path, dest, self._config.name)
            self._open_active("wb")
        except OSError as exc:
            logger.error("Rotation of %s failed: %s", active_path, exc)
            raise RotationError(f"Failed to rotate {active_path}: {exc}") from exc
        self._size = 0
        logger.info("Rotated %s into %s (%d bytes)", active_path, dest, copied)

        self.last_sweep = sweep(self._config.directory, self._config.keep_files)
        return dest

    def close(self):
        """Close the active file. A later write reopens it in append mode."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
