"""Pipe already-formatted lines from a file or stdin into a size-rotated log."""

import logging
import signal
import sys
import time

from logrotator.config import build_cli_parser, load_config
from logrotator.errors import RotatorError
from logrotator.rotator import Rotator

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [log-rotator] %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

_running = True


def _stop(sig, _frame):
    global _running
    logger.info("Received signal %d, finishing current line", sig)
    _running = False


def build_parser():
    parser = build_cli_parser()
    parser.add_argument("--source", default="-",
                        help="File to read lines from ('-' reads stdin)")
    parser.add_argument("--count", type=int, default=0,
                        help="Stop after this many lines (0 = until end of input)")
    parser.add_argument("--interval", type=float, default=0.0,
                        help="Seconds to pause after each line")
    return parser


def run(rotator: Rotator, source, count: int = 0, interval: float = 0.0) -> int:
    """Copy lines from the binary stream *source* into *rotator*. Returns lines written."""
    written = 0
    for raw in source:
        if not _running or (count > 0 and written >= count):
            break
        archived = rotator.write_line(raw.rstrip(b"\r\n"))
        written += 1

        if archived:
            result = rotator.last_sweep
            logger.info("Archived %s after %d line(s)", archived, written)
            if result and result.deleted:
                logger.info("Retention removed %s", ", ".join(result.deleted))
            if result and result.errors:
                logger.warning("Retention left %d archive(s) in place", len(result.errors))

        if interval > 0:
            time.sleep(interval)
    return written


def main(argv=None) -> int:
    signal.signal(signal.SIGINT, _stop)
    signal.signal(signal.SIGTERM, _stop)

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        rotator = Rotator(load_config(argv, parser=parser))
    except RotatorError as e:
        logger.error("Invalid setup: %s", e)
        return 1

    cfg = rotator.config
    logger.info(
        "Writing %s/%s (rotate at %d bytes, keep %d archives) from %s",
        cfg.directory, cfg.name, cfg.rotate_every_bytes, cfg.keep_files,
        "stdin" if args.source == "-" else args.source,
    )

    try:
        source = sys.stdin.buffer if args.source == "-" else open(args.source, "rb")
    except OSError as e:
        logger.error("Cannot read %s: %s", args.source, e)
        return 1

    try:
        with rotator:
            written = run(rotator, source, args.count, args.interval)
    except RotatorError as e:
        logger.error("Stopping after write failure: %s", e)
        return 1
    finally:
        if source is not sys.stdin.buffer:
            source.close()

    logger.info("Done: %d line(s) written", written)
    return 0


if __name__ == "__main__":
    sys.exit(main())
