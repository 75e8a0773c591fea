"""Error types raised by the rotator."""


class RotatorError(Exception):
    """Base class for all rotator failures."""


class ConfigError(RotatorError):
    """Raised when rotator settings are missing or out of range."""


class DirectoryError(RotatorError):
    """Raised when the log directory cannot be used or created."""


class WriteError(RotatorError):
    """Raised when a line cannot be written to the active file."""


class RotationError(RotatorError):
    """Raised when closing, archiving, or reopening the active file fails."""


class RetentionError(RotatorError):
    """A single archive could not be deleted by the retention sweep.

    Never raised out of the sweep; collected and reported instead.
    """

    def __init__(self, path: str, cause: OSError):
        super().__init__(f"Failed to delete {path}: {cause}")
        self.path = path
        self.cause = cause
