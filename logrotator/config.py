"""Configuration module: frozen dataclass loaded from CLI args, env vars, and optional YAML."""

import argparse
import dataclasses
import logging
import os
from dataclasses import dataclass

import yaml

from logrotator.errors import ConfigError

logger = logging.getLogger(__name__)

MAX_KEEP_FILES = 1024
DEFAULT_KEEP_FILES = 7
DEFAULT_ROTATE_EVERY_BYTES = 10 * 1024 * 1024  # 10 MiB


@dataclass(frozen=True)
class RotatorConfig:
    directory: str = "./logs"
    name: str = "application.log"
    rotate_every_bytes: int | None = None
    keep_files: int | None = None


def _as_int(value, field_name: str) -> int:
    # bool is an int subclass; floats must not be truncated
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ConfigError(f"{field_name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{field_name} must be an integer, got {value!r}") from None


def validate_config(config: RotatorConfig) -> RotatorConfig:
    """Return a copy of *config* with defaults filled in.

    Raises ConfigError if the name is empty, the rotation threshold is not
    positive, or keep_files falls outside [2, MAX_KEEP_FILES).
    Validating an already-validated config returns an equal config.
    """
    if not config.name:
        raise ConfigError("File logging requires a name for the file names")

    rotate_every = config.rotate_every_bytes
    if rotate_every is None:
        rotate_every = DEFAULT_ROTATE_EVERY_BYTES
    rotate_every = _as_int(rotate_every, "rotate_every_bytes")

    keep = config.keep_files
    if keep is None:
        keep = DEFAULT_KEEP_FILES
    keep = _as_int(keep, "keep_files")

    if rotate_every <= 0:
        raise ConfigError(f"rotate_every_bytes must be greater than 0, got {rotate_every}")
    if keep < 2 or keep >= MAX_KEEP_FILES:
        raise ConfigError(
            f"The number of files to keep should be between 2 and {MAX_KEEP_FILES - 1}"
        )

    return dataclasses.replace(config, rotate_every_bytes=rotate_every, keep_files=keep)


def load_yaml_config(path: str | None) -> dict:
    """Load the ``rotator`` section from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping at the top of {path}")
    section = data.get("rotator", {}) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Expected 'rotator' in {path} to be a mapping")
    logger.info("Loaded YAML config from %s", path)
    return section


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Size-rotated log file writer")
    parser.add_argument("--directory", type=str, default=None,
                        help="Directory for the active log and its archives")
    parser.add_argument("--name", type=str, default=None,
                        help="Base file name of the active log")
    parser.add_argument("--rotate-every-bytes", type=int, default=None,
                        help="Rotate once the active file reaches this size")
    parser.add_argument("--keep-files", type=int, default=None,
                        help="Number of archives to retain (2-1023)")
    parser.add_argument("--config", type=str, default=None,
                        help="Path to a YAML config file with a 'rotator' section")
    return parser


def load_config(argv=None, parser: argparse.ArgumentParser | None = None) -> RotatorConfig:
    """Build RotatorConfig from CLI args, then env vars, then YAML, then defaults.

    Extra arguments defined on a caller-supplied *parser* are ignored here.
    The result is not validated; pass it to validate_config (or a Rotator).
    """
    parser = parser or build_cli_parser()
    args, _ = parser.parse_known_args(argv)

    yaml_data = load_yaml_config(args.config or os.environ.get("CONFIG_PATH"))

    def pick(cli_value, env_key: str, yaml_key: str, default):
        if cli_value is not None:
            return cli_value
        if env_key in os.environ:
            return os.environ[env_key]
        if yaml_data.get(yaml_key) is not None:
            return yaml_data[yaml_key]
        return default

    rotate_every = pick(args.rotate_every_bytes, "ROTATE_EVERY_BYTES",
                        "rotate_every_bytes", RotatorConfig.rotate_every_bytes)
    keep = pick(args.keep_files, "KEEP_FILES", "keep_files", RotatorConfig.keep_files)

    return RotatorConfig(
        directory=str(pick(args.directory, "LOG_DIR", "directory", RotatorConfig.directory)),
        name=str(pick(args.name, "LOG_NAME", "name", RotatorConfig.name)),
        rotate_every_bytes=None if rotate_every is None else _as_int(rotate_every, "rotate_every_bytes"),
        keep_files=None if keep is None else _as_int(keep, "keep_files"),
    )
