"""pyproject.toml reader for the declared Python version.

Uses stdlib tomllib (Python 3.11+). Only [project] requires-python is read;
a malformed file is left for the installer to complain about.
"""

import logging
import tomllib
from typing import Optional

from buildplan.detector.python.defaults import PYPROJECT_FILE
from buildplan.repo import SourceRepo

logger = logging.getLogger(__name__)


def read_requires_python(repo: SourceRepo) -> Optional[str]:
    """Return [project] requires-python, or None when absent or unreadable."""
    try:
        data = tomllib.loads(repo.read_file(PYPROJECT_FILE))
    except OSError as exc:
        logger.warning("Could not read %s: %s", PYPROJECT_FILE, exc)
        return None
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        logger.warning("Failed to parse %s: %s", PYPROJECT_FILE, exc)
        return None

    project = data.get("project")
    if not isinstance(project, dict):
        return None
    requires = project.get("requires-python")
    if isinstance(requires, str) and requires.strip():
        return requires.strip()
    return None
