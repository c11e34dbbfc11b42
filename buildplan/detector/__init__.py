"""Detector module for finding the platforms present in a repository.

Public API:
    detect_all(context, detectors=None) -> list[AggregatedPlatformInfo]
"""

from buildplan.detector.base import PlatformDetector
from buildplan.detector.orchestrator import default_detectors, detect_all
from buildplan.detector.types import (
    AggregatedPlatformInfo,
    DetectionContext,
    DetectorOptions,
    PlatformDetectionResult,
)

__all__ = [
    "detect_all",
    "default_detectors",
    "AggregatedPlatformInfo",
    "DetectionContext",
    "DetectorOptions",
    "PlatformDetectionResult",
    "PlatformDetector",
]
