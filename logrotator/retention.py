"""Retention sweep: bound the number of archives, deleting the oldest first.

Age is inferred from the file name. Archives produced by the rotator are
named ``<name>-<epoch-millis>.zip``; with a shared prefix and a fixed digit
count in the millisecond timestamp, ascending lexicographic order is
creation order. The digit count stays at 13 until the year 2286, so this is
an assumption about the clock, not something the names enforce. Other .zip
files placed in the same directory are swept too, in whatever position
their names sort to.
"""

import logging
import os
from dataclasses import dataclass, field

from logrotator.errors import RetentionError
from logrotator.paths import ARCHIVE_SUFFIX

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    deleted: list[str] = field(default_factory=list)
    errors: list[RetentionError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def list_archives(directory: str) -> list[str]:
    """List archive file names directly under *directory*, sorted oldest-first."""
    archives = []
    for name in os.listdir(directory):
        if not name.endswith(ARCHIVE_SUFFIX):
            continue
        if os.path.isfile(os.path.join(directory, name)):
            archives.append(name)
    archives.sort()
    return archives


def sweep(directory: str, keep_files: int) -> SweepResult:
    """Delete the oldest archives until fewer than *keep_files* remain.

    Failures never raise: each one is logged and recorded in the result,
    so the bound holds only when every deletion succeeds. Every candidate
    is tried at most once.
    """
    result = SweepResult()
    try:
        archives = list_archives(directory)
    except OSError as exc:
        err = RetentionError(directory, exc)
        logger.warning("Retention sweep skipped: %s", err)
        result.errors.append(err)
        return result

    while len(archives) >= keep_files:
        name = archives.pop(0)
        path = os.path.join(directory, name)
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.debug("Archive %s already removed", path)
            continue
        except OSError as exc:
            err = RetentionError(path, exc)
            logger.warning("Retention sweep: %s", err)
            result.errors.append(err)
            continue
        logger.info("Deleted archive %s", name)
        result.deleted.append(name)

    return result
