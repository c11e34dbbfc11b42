"""PlatformDetector protocol.

Each supported platform ships one detector class conforming to this
interface. The orchestrator holds an ordered list of detectors and never
dispatches on their concrete type.
"""

from typing import Optional, Protocol, runtime_checkable

from buildplan.detector.types import DetectionContext, PlatformDetectionResult


@runtime_checkable
class PlatformDetector(Protocol):
    """Protocol for platform detector implementations.

    Detectors must not raise when their platform is absent and must not
    modify the repository. Logging is the only permitted side effect.
    """

    name: str

    def detect(self, context: DetectionContext) -> Optional[PlatformDetectionResult]:
        """Inspect the repository and return a result, or None if absent."""
        ...  # noqa: PLR6301

    def tools_in_path(self, result: PlatformDetectionResult) -> tuple[str, ...]:
        """Return auxiliary tools the platform needs on PATH.

        A pure function of the result: it may not look at the repository
        or at other platforms' results.
        """
        ...  # noqa: PLR6301
