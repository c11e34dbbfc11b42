"""Shared types for the detector module.

Every detector returns a PlatformDetectionResult (or a platform-specific
subclass) and the orchestrator wraps each one in an AggregatedPlatformInfo.
All of these are frozen: downstream stages derive new values with
dataclasses.replace instead of editing what a detector returned.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from buildplan.repo import ROOT_DIRECTORY, SourceRepo


@dataclass(frozen=True)
class DetectorOptions:
    """Global switches that apply to every detector in a run."""

    disable_recursive_lookup: bool = False
    disabled_platforms: frozenset[str] = frozenset()
    platform: Optional[str] = None
    platform_version: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Any) -> "DetectorOptions":
        return cls(
            disable_recursive_lookup=settings.disable_recursive_lookup,
            disabled_platforms=frozenset(p.lower() for p in settings.disabled_platforms),
            platform=settings.platform.lower() if settings.platform else None,
            platform_version=settings.platform_version or None,
        )


@dataclass(frozen=True)
class DetectionContext:
    """Per-run input handed to every detector."""

    repo: SourceRepo
    options: DetectorOptions = field(default_factory=DetectorOptions)


@dataclass(frozen=True)
class PlatformDetectionResult:
    """What a detector found for one platform.

    app_directory is "." for the repository root and "./a/b" otherwise.
    lock_files lists the installer marker files present in app_directory,
    in the order the detector checked them.
    """

    platform: str
    platform_version: Optional[str] = None
    app_directory: str = ROOT_DIRECTORY
    lock_files: tuple[str, ...] = ()

    def tool_version_requests(self) -> tuple[tuple[str, Optional[str]], ...]:
        """Return (tool, declared version) pairs that need resolving."""
        return ((self.platform, self.platform_version),)

    def to_dict(self) -> dict:
        return {
            "platform": self.platform,
            "platform_version": self.platform_version,
            "app_directory": self.app_directory,
            "lock_files": list(self.lock_files),
        }


@dataclass(frozen=True)
class PythonDetectionResult(PlatformDetectionResult):
    has_requirements_txt: bool = False
    has_pyproject_toml: bool = False
    has_conda_environment_file: bool = False
    has_jupyter_notebook_files: bool = False


@dataclass(frozen=True)
class NodeDetectionResult(PlatformDetectionResult):
    has_package_json: bool = False
    npm_version: Optional[str] = None

    def tool_version_requests(self) -> tuple[tuple[str, Optional[str]], ...]:
        return ((self.platform, self.platform_version), ("npm", self.npm_version))


@dataclass(frozen=True)
class PhpDetectionResult(PlatformDetectionResult):
    has_composer_json: bool = False


@dataclass(frozen=True)
class DotNetDetectionResult(PlatformDetectionResult):
    project_file: Optional[str] = None
    has_package_json: bool = False


@dataclass(frozen=True)
class AggregatedPlatformInfo:
    """A detection result plus the auxiliary tools it needs on PATH."""

    result: PlatformDetectionResult
    required_tools: tuple[str, ...] = ()

    @property
    def platform(self) -> str:
        return self.result.platform

    def to_dict(self) -> dict:
        return {**self.result.to_dict(), "required_tools": list(self.required_tools)}
