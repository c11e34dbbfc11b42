"""package.json reader shared by the Node.js detector and script generator.

Parses to a plain dict and extracts fields best-effort: any parse or shape
problem yields None / empty values. Malformed package.json files are npm's
concern, not ours.
"""

import json
import logging
from typing import Optional

from buildplan.detector.node.defaults import PACKAGE_JSON_FILE
from buildplan.repo import SourceRepo, join_relative

logger = logging.getLogger(__name__)


def load_package_json(repo: SourceRepo, directory: str = ".") -> Optional[dict]:
    """Return the parsed package.json in directory, or None."""
    path = join_relative(directory, PACKAGE_JSON_FILE)
    if not repo.file_exists(path):
        return None

    try:
        data = json.loads(repo.read_file(path))
    except OSError as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return None
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return None

    if not isinstance(data, dict):
        logger.warning("Ignoring %s: top-level value is not an object", path)
        return None
    return data


def get_engine_version(data: Optional[dict], engine: str) -> Optional[str]:
    """Return engines.<engine> as a string, e.g. engines.node."""
    if not data:
        return None
    engines = data.get("engines")
    if not isinstance(engines, dict):
        return None
    value = engines.get(engine)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def get_scripts(data: Optional[dict]) -> dict[str, str]:
    """Return the scripts block, keeping only string entries."""
    if not data:
        return {}
    scripts = data.get("scripts")
    if not isinstance(scripts, dict):
        return {}
    return {name: cmd for name, cmd in scripts.items() if isinstance(cmd, str)}
