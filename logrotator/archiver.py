"""Streams a closed log file into a single-entry zip archive."""

import logging
import os
import zipfile

logger = logging.getLogger(__name__)

CHUNK_SIZE = 512 * 1024  # 512 KiB


def _discard(dest: str):
    try:
        os.remove(dest)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove incomplete archive %s: %s", dest, exc)


def archive_file(source: str, dest: str, entry_name: str, chunk_size: int = CHUNK_SIZE) -> int:
    """Deflate *source* into a new zip at *dest* holding one entry named *entry_name*.

    The file is copied in *chunk_size* reads so memory use stays bounded
    regardless of file size. An empty read marks end of input; any error
    while reading or writing removes the incomplete archive and propagates
    to the caller. Returns bytes copied.
    """
    info = zipfile.ZipInfo.from_file(source, arcname=entry_name)
    info.compress_type = zipfile.ZIP_DEFLATED

    copied = 0
    try:
        with open(source, "rb") as f_in, zipfile.ZipFile(dest, "w") as archive:
            with archive.open(info, "w") as f_out:
                while True:
                    chunk = f_in.read(chunk_size)
                    if not chunk:
                        break
                    f_out.write(chunk)
                    copied += len(chunk)
    except Exception:
        _discard(dest)
        raise

    logger.debug("Archived %d bytes from %s into %s", copied, source, dest)
    return copied
