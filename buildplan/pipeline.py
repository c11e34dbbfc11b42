"""End-to-end pipeline: detect → resolve → compose.

plan_build() is the one call most callers need. Unsupported versions do not
abort the run; they are reported on the returned plan and the affected
platform is left out of the procedure.
"""

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from buildplan.config import Settings, get_settings, load_catalogs, resolve_hook_scripts
from buildplan.detector import (
    AggregatedPlatformInfo,
    DetectionContext,
    DetectorOptions,
    PlatformDetector,
    detect_all,
)
from buildplan.errors import UnsupportedVersionError
from buildplan.repo import SourceRepo
from buildplan.resolver import ResolvedVersion, VersionCatalog, resolve_all
from buildplan.script import (
    BuildProcedure,
    ComposeOptions,
    ExecProcedure,
    RepoFacts,
    compose,
    compose_exec,
)

logger = logging.getLogger(__name__)


@dataclass
class BuildPlan:
    """Everything one pipeline run produced."""

    platforms: list[AggregatedPlatformInfo] = field(default_factory=list)
    resolved: dict[str, ResolvedVersion] = field(default_factory=dict)
    failures: list[UnsupportedVersionError] = field(default_factory=list)
    procedure: BuildProcedure = field(default_factory=BuildProcedure)

    def to_dict(self) -> dict:
        return {
            "platforms": [info.to_dict() for info in self.platforms],
            "resolved": {name: rv.to_dict() for name, rv in self.resolved.items()},
            "failures": [
                {"platform": f.platform, "requested": f.requested, "message": str(f)}
                for f in self.failures
            ],
            "procedure": self.procedure.to_dict(),
        }


@dataclass
class ExecPlan:
    platforms: list[AggregatedPlatformInfo]
    resolved: dict[str, ResolvedVersion]
    failures: list[UnsupportedVersionError]
    procedure: ExecProcedure


def plan_build(
    repo: SourceRepo,
    settings: Optional[Settings] = None,
    detectors: Optional[Sequence[PlatformDetector]] = None,
    catalogs: Optional[Mapping[str, VersionCatalog]] = None,
) -> BuildPlan:
    """Run detection, version resolution and composition for repo."""
    settings = settings or get_settings()
    platforms, resolved, failures = _detect_and_resolve(repo, settings, detectors, catalogs)

    pre_build, post_build = resolve_hook_scripts(repo, settings)
    facts = RepoFacts(repo=repo, pre_build_script=pre_build, post_build_script=post_build)
    procedure = compose(platforms, resolved, facts, _compose_options(settings))
    return BuildPlan(platforms=platforms, resolved=resolved, failures=failures, procedure=procedure)


def plan_exec(
    repo: SourceRepo,
    command: str,
    settings: Optional[Settings] = None,
    detectors: Optional[Sequence[PlatformDetector]] = None,
    catalogs: Optional[Mapping[str, VersionCatalog]] = None,
) -> ExecPlan:
    """Plan running command with every detected platform's SDK staged."""
    settings = settings or get_settings()
    platforms, resolved, failures = _detect_and_resolve(repo, settings, detectors, catalogs)
    procedure = compose_exec(
        platforms, resolved, RepoFacts(repo=repo), command, _compose_options(settings)
    )
    return ExecPlan(platforms=platforms, resolved=resolved, failures=failures, procedure=procedure)


def _detect_and_resolve(
    repo: SourceRepo,
    settings: Settings,
    detectors: Optional[Sequence[PlatformDetector]],
    catalogs: Optional[Mapping[str, VersionCatalog]],
) -> tuple[list[AggregatedPlatformInfo], dict[str, ResolvedVersion], list[UnsupportedVersionError]]:
    context = DetectionContext(repo=repo, options=DetectorOptions.from_settings(settings))
    platforms = detect_all(context, detectors)

    if catalogs is None:
        catalogs = load_catalogs(settings.catalog_file, settings.default_versions)
    resolved, failures = resolve_all(platforms, catalogs)
    for name, rv in resolved.items():
        logger.info("Resolved %s to %s (%s)", name, rv.version, rv.source.value)
    return platforms, resolved, failures


def _compose_options(settings: Settings) -> ComposeOptions:
    return ComposeOptions(
        installer_priority={k: tuple(v) for k, v in settings.installer_priority.items()},
        build_script_suffix=settings.build_script_suffix,
    )
