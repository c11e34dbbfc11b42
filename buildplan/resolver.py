"""Version resolution against per-platform catalogs.

resolve() maps a declared version onto an installable catalog entry:

  1. exact match         "8.2.1" in catalog
  2. compatible match    highest entry satisfying a partial or ranged specifier
                         ("8" → highest 8.x.y, "8.2" → highest 8.2.y,
                         "^8.2", "~8.2.0", ">=6 <9", "6.x || 8.x")
  3. default             nothing declared
  4. failure             UnsupportedVersionError

Resolution is pure: no I/O, no global state. Catalogs come in as values.
"""

import logging
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Mapping, Optional, Sequence

from buildplan.detector.types import AggregatedPlatformInfo
from buildplan.errors import CatalogError, UnsupportedVersionError

logger = logging.getLogger(__name__)


class VersionSource(StrEnum):
    """How a resolved version was derived."""

    EXACT = "exact"
    COMPATIBLE = "compatible"
    DEFAULT = "default"


@dataclass(frozen=True)
class VersionCatalog:
    """Supported versions of one platform or tool plus its default."""

    name: str
    versions: tuple[str, ...]
    default: str

    def __post_init__(self) -> None:
        if self.default not in self.versions:
            raise CatalogError(
                f"Default version '{self.default}' of '{self.name}' is not one of its "
                f"supported versions: {', '.join(self.versions)}"
            )


@dataclass(frozen=True)
class ResolvedVersion:
    platform: str
    version: str
    source: VersionSource
    requested: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "platform": self.platform,
            "version": self.version,
            "source": self.source.value,
            "requested": self.requested,
        }


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def resolve(platform: str, declared: Optional[str], catalog: VersionCatalog) -> ResolvedVersion:
    """Resolve a declared version for platform against catalog.

    Raises:
        UnsupportedVersionError: declared is set but nothing in the catalog
            satisfies it.
    """
    if declared is None or not declared.strip():
        return ResolvedVersion(platform, catalog.default, VersionSource.DEFAULT, declared)

    requested = declared.strip()
    if requested in catalog.versions:
        return ResolvedVersion(platform, requested, VersionSource.EXACT, declared)

    candidates = [v for v in catalog.versions if _satisfies(v, requested)]
    if candidates:
        best = max(candidates, key=version_key)
        return ResolvedVersion(platform, best, VersionSource.COMPATIBLE, declared)

    raise UnsupportedVersionError(platform, declared, catalog.versions)


def resolve_all(
    platforms: Sequence[AggregatedPlatformInfo],
    catalogs: Mapping[str, VersionCatalog],
) -> tuple[dict[str, ResolvedVersion], list[UnsupportedVersionError]]:
    """Resolve every tool version each detected platform requests.

    The platform itself must have a catalog; companion tools (npm for
    Node.js) are resolved only when one is configured. A platform whose own
    version is unsupported is left out of the returned mapping so
    composition can continue for the others; an unsupported companion is
    only left unstaged.

    Raises:
        CatalogError: a detected platform has no catalog.
    """
    resolved: dict[str, ResolvedVersion] = {}
    failures: list[UnsupportedVersionError] = []

    for info in platforms:
        platform_resolved: dict[str, ResolvedVersion] = {}
        failed = False
        for tool, declared in info.result.tool_version_requests():
            catalog = catalogs.get(tool)
            if catalog is None:
                if tool == info.platform:
                    raise CatalogError(f"No version catalog configured for platform '{tool}'")
                continue
            try:
                platform_resolved[tool] = resolve(tool, declared, catalog)
            except UnsupportedVersionError as exc:
                if tool != info.platform:
                    logger.warning("%s Not staging '%s' for platform '%s'.", exc, tool, info.platform)
                    continue
                logger.warning("%s", exc)
                failures.append(exc)
                failed = True
        if not failed:
            resolved.update(platform_resolved)

    return resolved, failures


# ---------------------------------------------------------------------------
# Version comparison
# ---------------------------------------------------------------------------

_VERSION_RE = re.compile(r"^(\d+)(?:\.(\d+))?(?:\.(\d+))?(.*)$")
_COMPARATOR_RE = re.compile(r"^(>=|<=|==|!=|~=|>|<|=|\^|~)?\s*v?(.+)$")
_OPERATOR_SPACE_RE = re.compile(r"(>=|<=|==|!=|~=|>|<|=|\^|~)\s+")


def version_key(version: str) -> tuple:
    """Sort key: numeric components, then releases above pre-releases."""
    match = _VERSION_RE.match(version)
    if not match:
        return ((-1, -1, -1), False, version)
    major, minor, patch, suffix = match.groups()
    numbers = (int(major), int(minor or 0), int(patch or 0))
    return (numbers, suffix == "", suffix)


def _satisfies(version: str, specifier: str) -> bool:
    """Check a catalog version against a partial or ranged specifier."""
    return any(_satisfies_all(version, part.strip()) for part in specifier.split("||"))


def _satisfies_all(version: str, specifier: str) -> bool:
    # PEP 440 separates clauses with commas, npm with spaces.
    specifier = _OPERATOR_SPACE_RE.sub(r"\1", specifier)
    terms = specifier.replace(",", " ").split()
    if not terms:
        return False
    return all(_satisfies_term(version, term) for term in terms)


def _satisfies_term(version: str, term: str) -> bool:
    match = _COMPARATOR_RE.match(term)
    if not match:
        return False
    operator, operand = match.groups()
    operand = re.sub(r"(\.[x*])+$", "", operand.lower())
    if operand in ("x", "*"):
        return True
    parts = operand.split(".")
    if not all(p.isdigit() for p in parts):
        return False

    candidate = _numeric_parts(version)
    if candidate is None:
        return False
    bound = tuple(int(p) for p in parts)

    if operator in (None, "=", "=="):
        return candidate[: len(bound)] == bound
    if operator == "!=":
        return candidate[: len(bound)] != bound
    if operator == "~=":
        prefix = bound[:-1] if len(bound) > 1 else bound
        return candidate[: len(prefix)] == prefix and candidate >= _pad(bound)
    if operator == "^":
        return candidate[0] == bound[0] and candidate >= _pad(bound)
    if operator == "~":
        prefix = bound[:2] if len(bound) > 1 else bound
        return candidate[: len(prefix)] == prefix and candidate >= _pad(bound)
    padded = _pad(bound)
    if operator == ">=":
        return candidate >= padded
    if operator == ">":
        return candidate[: len(bound)] > bound
    if operator == "<=":
        return candidate[: len(bound)] <= bound
    return candidate < padded


def _numeric_parts(version: str) -> Optional[tuple[int, int, int]]:
    match = _VERSION_RE.match(version)
    if not match:
        return None
    major, minor, patch, _suffix = match.groups()
    return (int(major), int(minor or 0), int(patch or 0))


def _pad(parts: tuple[int, ...]) -> tuple[int, ...]:
    return (tuple(parts) + (0, 0, 0))[:3]
