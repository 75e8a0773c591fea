"""Directory setup and file naming for the active log and its archives."""

import logging
import os

from logrotator.errors import DirectoryError

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".zip"


def ensure_directory(path: str) -> None:
    """Create *path* (with parents) if missing. Fails if it exists as a non-directory."""
    if os.path.exists(path):
        if not os.path.isdir(path):
            raise DirectoryError(f"{path} exists but it's not a directory")
        return
    try:
        os.makedirs(path, mode=0o755, exist_ok=True)
    except OSError as exc:
        raise DirectoryError(f"Failed to create directory {path}: {exc}") from exc
    logger.info("Created log directory %s", path)


def file_path(directory: str, name: str, file_no: int = 0) -> str:
    """Resolve the path for *file_no*.

    0 is the active file. Anything above 0 maps to the legacy numbered
    archive name ``<name>.<n>.zip``, which rotation never produces and is
    kept only for probing older directories.
    """
    if file_no == 0:
        return os.path.join(directory, name)
    return os.path.join(directory, f"{name}.{file_no}{ARCHIVE_SUFFIX}")


def file_exists(directory: str, name: str, file_no: int = 0) -> bool:
    return os.path.exists(file_path(directory, name, file_no))


def archive_name(name: str, epoch_millis: int) -> str:
    """Archive file name for a rotation at *epoch_millis*: ``<name>-<millis>.zip``."""
    return f"{name}-{epoch_millis}{ARCHIVE_SUFFIX}"
