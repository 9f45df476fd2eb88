"""
Exception hierarchy for depview.

Expected, recoverable conditions (cancelled scans, unknown roots, missing
asset data) are not exceptions; they have defined fallbacks. What remains
here are programming errors and host input errors surfaced by the CLI.
"""


class DepviewError(Exception):
    """Base class for all depview errors."""


class IndexBuildInProgressError(DepviewError):
    """Raised when the reverse index is rebuilt while a build is running."""

    def __init__(self):
        super().__init__("Reverse dependency index build already in progress")


class ManifestNotFoundError(DepviewError):
    """Raised when an asset manifest file does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Manifest not found: {path}")


class ManifestFormatError(DepviewError):
    """Raised when an asset manifest cannot be parsed."""


class ConfigError(DepviewError):
    """Raised when the configuration file is malformed."""
