"""Exception taxonomy for the build planner.

"Platform not present" and malformed manifests are not exceptions: detectors
return None and parsers degrade to an unknown value. Only the failures a
caller has to act on are raised.
"""

from typing import Sequence


class BuildPlanError(Exception):
    """Base class for errors surfaced to callers of the pipeline."""


class UnsupportedVersionError(BuildPlanError):
    """Raised when a declared version has no compatible catalog entry.

    Carries the platform name and the requested value verbatim so the CLI
    can report them without guessing at a substitute.
    """

    def __init__(self, platform: str, requested: str, supported: Sequence[str] = ()):
        self.platform = platform
        self.requested = requested
        self.supported = tuple(supported)
        message = f"Platform '{platform}' version '{requested}' is unsupported."
        if self.supported:
            message += f" Supported versions: {', '.join(self.supported)}"
        super().__init__(message)


class CatalogError(BuildPlanError):
    """Raised when the version catalog configuration is missing or invalid."""
