"""Detector orchestrator. Runs every enabled detector over one repository.

Detection flow:
1. Iterate detectors in the caller-supplied order (default: Python,
   Node.js, PHP, .NET).
2. Skip detectors whose platform is disabled in the options.
3. Run every remaining detector. Finding one platform never stops the
   search for others: an app may need several SDKs at once (e.g. an
   ASP.NET Core API with a Node.js front-end build).
4. Attach each platform's auxiliary tools and apply explicit
   platform/version overrides.

Output order always equals detector order, so identical input yields an
identical list.
"""

import dataclasses
import logging
from typing import Optional, Sequence

from buildplan.detector.base import PlatformDetector
from buildplan.detector.dotnet import DotNetDetector
from buildplan.detector.node import NodeDetector
from buildplan.detector.php import PhpDetector
from buildplan.detector.python import PythonDetector
from buildplan.detector.types import (
    AggregatedPlatformInfo,
    DetectionContext,
    PlatformDetectionResult,
)

logger = logging.getLogger(__name__)


def default_detectors() -> list[PlatformDetector]:
    """Return one instance of every built-in detector, in detection order."""
    return [PythonDetector(), NodeDetector(), PhpDetector(), DotNetDetector()]


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def detect_all(
    context: DetectionContext,
    detectors: Optional[Sequence[PlatformDetector]] = None,
) -> list[AggregatedPlatformInfo]:
    """Run all enabled detectors and aggregate their results.

    Returns an empty list when nothing is detected.
    """
    if detectors is None:
        detectors = default_detectors()

    logger.info("Detecting platforms...")
    disabled = context.options.disabled_platforms
    infos: list[AggregatedPlatformInfo] = []
    enabled: list[PlatformDetector] = []

    for detector in detectors:
        if detector.name in disabled:
            logger.info(
                "Platform '%s' has been disabled, so skipping detection for it.",
                detector.name,
            )
            continue
        enabled.append(detector)

        result = detector.detect(context)
        if result is None:
            continue
        infos.append(
            AggregatedPlatformInfo(result=result, required_tools=detector.tools_in_path(result))
        )

    infos = _apply_overrides(context, enabled, infos)
    _log_platforms(infos)
    return infos


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _apply_overrides(
    context: DetectionContext,
    enabled: Sequence[PlatformDetector],
    infos: list[AggregatedPlatformInfo],
) -> list[AggregatedPlatformInfo]:
    """Apply the explicitly requested platform and version.

    A detected platform gets its version replaced; a requested platform that
    was not detected is added at the repo root. Results are copied, never
    modified.
    """
    options = context.options
    if options.platform is None:
        if options.platform_version:
            logger.warning(
                "Ignoring platform version '%s' because no platform was specified.",
                options.platform_version,
            )
        return infos

    detector = next((d for d in enabled if d.name == options.platform), None)
    if detector is None:
        logger.warning(
            "Requested platform '%s' is unknown or disabled; ignoring it.",
            options.platform,
        )
        return infos

    overridden: list[AggregatedPlatformInfo] = []
    found = False
    for info in infos:
        if info.platform == options.platform:
            found = True
            if options.platform_version:
                result = dataclasses.replace(info.result, platform_version=options.platform_version)
                info = AggregatedPlatformInfo(result=result, required_tools=detector.tools_in_path(result))
        overridden.append(info)

    if not found:
        logger.info("Platform '%s' was requested explicitly but not detected.", options.platform)
        result = PlatformDetectionResult(
            platform=options.platform,
            platform_version=options.platform_version,
        )
        # Keep detector order: insert ahead of platforms detected later.
        order = {d.name: i for i, d in enumerate(enabled)}
        rank = order[options.platform]
        position = sum(1 for info in overridden if order.get(info.platform, len(order)) < rank)
        overridden.insert(
            position,
            AggregatedPlatformInfo(result=result, required_tools=detector.tools_in_path(result)),
        )
    return overridden


def _log_platforms(infos: list[AggregatedPlatformInfo]) -> None:
    if not infos:
        logger.info("Could not detect any platform in the source directory.")
        return
    logger.info("Detected following platforms:")
    for info in infos:
        logger.info("  %s: %s", info.platform, info.result.platform_version)
