"""
Error taxonomy for refolder.

Fatal errors (DiscoveryError, InvalidConfig, DestinationConflict) are raised
before the first filesystem change and end the run. Per-file errors
(DestinationExists, MoveFailed) are recorded as failed actions by the
executor and the run continues.
"""


class RefolderError(Exception):
    """Base error for the project."""


class DiscoveryError(RefolderError):
    """Root path is missing or is not a directory."""


class InvalidConfig(RefolderError):
    """Configuration cannot produce a valid plan."""


class DestinationConflict(RefolderError):
    """A target folder path is occupied by something that is not a directory."""


class DestinationExists(RefolderError):
    """A destination file exists and overwriting was not requested."""


class MoveFailed(RefolderError):
    """Both the rename and the copy fallback failed."""
