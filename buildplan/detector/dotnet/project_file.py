"""MSBuild project file reader for the .NET detector.

Uses xml.etree.ElementTree (stdlib). SDK-style project files carry no
namespace; older ones use the MSBuild 2003 namespace, so both are tried.
"""

import logging
import re
import xml.etree.ElementTree as ET
from typing import Optional

from buildplan.repo import SourceRepo

logger = logging.getLogger(__name__)

_MSBUILD_NS = "http://schemas.microsoft.com/developer/msbuild/2003"

# netcoreapp3.1 → 3.1, net6.0 → 6.0, net8.0-windows → 8.0
_TARGET_FRAMEWORK_RE = re.compile(r"^net(?:coreapp)?(\d+\.\d+)(?:-[\w.]+)?$", re.IGNORECASE)


def read_target_framework(repo: SourceRepo, project_file: str) -> Optional[str]:
    """Return the first <TargetFramework> (or <TargetFrameworks>) moniker."""
    try:
        root = ET.fromstring(repo.read_file(project_file))
    except OSError as exc:
        logger.warning("Could not read %s: %s", project_file, exc)
        return None
    except (ET.ParseError, UnicodeDecodeError) as exc:
        logger.warning("Failed to parse %s: %s", project_file, exc)
        return None

    for tag in ("TargetFramework", "TargetFrameworks"):
        for candidate in (tag, f"{{{_MSBUILD_NS}}}{tag}"):
            value = root.findtext(f".//{candidate}")
            if value and value.strip():
                return value.strip().split(";")[0].strip()
    return None


def framework_to_version(moniker: Optional[str]) -> Optional[str]:
    """Map a target framework moniker to a runtime version, if it names one.

    netstandard and .NET Framework monikers (net48) have no runtime version.
    """
    if not moniker:
        return None
    match = _TARGET_FRAMEWORK_RE.match(moniker)
    if not match:
        return None
    return match.group(1)
