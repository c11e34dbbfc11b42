"""composer.json reader for the PHP detector and script generator."""

import json
import logging
from typing import Optional

from buildplan.repo import SourceRepo, join_relative

logger = logging.getLogger(__name__)

COMPOSER_JSON_FILE = "composer.json"


def load_composer_json(repo: SourceRepo, directory: str = ".") -> Optional[dict]:
    """Return the parsed composer.json in directory, or None.

    Malformed files yield None and are left for Composer to report.
    """
    path = join_relative(directory, COMPOSER_JSON_FILE)
    if not repo.file_exists(path):
        return None

    try:
        data = json.loads(repo.read_file(path))
    except OSError as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return None
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.warning("Exception caught while trying to deserialize %s: %s", path, exc)
        return None

    return data if isinstance(data, dict) else None


def get_php_version(data: Optional[dict]) -> Optional[str]:
    """Return require.php, e.g. "7.3" or "^7.3"."""
    if not data:
        return None
    require = data.get("require")
    if not isinstance(require, dict):
        return None
    value = require.get("php")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def get_scripts(data: Optional[dict]) -> dict[str, object]:
    """Return the scripts block; composer allows strings or lists as values."""
    if not data:
        return {}
    scripts = data.get("scripts")
    return scripts if isinstance(scripts, dict) else {}
