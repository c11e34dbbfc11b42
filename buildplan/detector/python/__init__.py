"""Python platform detector.

A repository is a Python app when it has requirements.txt or pyproject.toml
at the root, when any *.py file exists in the tree, or when runtime.txt at
the root pins a version ("python-3.8.6"). runtime.txt lets apps without any
.py files opt in.

When runtime.txt and pyproject.toml both declare a version, runtime.txt
wins: it names an exact runtime while requires-python is only a constraint.
"""

import logging
from typing import Optional

from buildplan.detector.python import pyproject
from buildplan.detector.python.defaults import (
    CONDA_ENVIRONMENT_FILES,
    LOCK_FILES,
    NOTEBOOK_FILE_PATTERN,
    PLATFORM_NAME,
    PYPROJECT_FILE,
    REQUIREMENTS_FILE,
    RUNTIME_FILE,
    RUNTIME_VERSION_PREFIX,
    SOURCE_FILE_PATTERN,
)
from buildplan.detector.types import (
    DetectionContext,
    PlatformDetectionResult,
    PythonDetectionResult,
)
from buildplan.repo import ROOT_DIRECTORY, SourceRepo, join_relative, relative_directory

logger = logging.getLogger(__name__)


class PythonDetector:
    name = PLATFORM_NAME

    def detect(self, context: DetectionContext) -> Optional[PythonDetectionResult]:
        repo = context.repo
        has_requirements = repo.file_exists(REQUIREMENTS_FILE)
        has_pyproject = repo.file_exists(PYPROJECT_FILE)

        app_directory: Optional[str] = None
        manifest_version: Optional[str] = None
        if has_requirements or has_pyproject:
            logger.info("Found a Python manifest at the root of the repo.")
            app_directory = ROOT_DIRECTORY
            if has_pyproject:
                manifest_version = pyproject.read_requires_python(repo)
        else:
            logger.info(
                "Could not find %s or %s at the root of the repo.",
                REQUIREMENTS_FILE,
                PYPROJECT_FILE,
            )
            app_directory = _find_source_directory(context)

        runtime_version = _read_runtime_file_version(repo)
        if app_directory is None and runtime_version is None:
            return None

        app_directory = app_directory or ROOT_DIRECTORY
        return PythonDetectionResult(
            platform=PLATFORM_NAME,
            platform_version=runtime_version or manifest_version,
            app_directory=app_directory,
            lock_files=tuple(
                name for name in LOCK_FILES
                if repo.file_exists(join_relative(app_directory, name))
            ),
            has_requirements_txt=repo.file_exists(join_relative(app_directory, REQUIREMENTS_FILE)),
            has_pyproject_toml=repo.file_exists(join_relative(app_directory, PYPROJECT_FILE)),
            has_conda_environment_file=any(
                repo.file_exists(join_relative(app_directory, name))
                for name in CONDA_ENVIRONMENT_FILES
            ),
            has_jupyter_notebook_files=bool(
                repo.enumerate_files(NOTEBOOK_FILE_PATTERN, recursive=False)
            ),
        )

    def tools_in_path(self, result: PlatformDetectionResult) -> tuple[str, ...]:
        if getattr(result, "has_conda_environment_file", False):
            return ("conda",)
        return ()


def _find_source_directory(context: DetectionContext) -> Optional[str]:
    recursive = not context.options.disable_recursive_lookup
    if not recursive:
        logger.debug("Skipping search for files in sub-directories as it has been disabled.")

    files = context.repo.enumerate_files(SOURCE_FILE_PATTERN, recursive=recursive)
    if not files:
        logger.info("Could not find any file with extension '%s' in the repo.", SOURCE_FILE_PATTERN)
        return None

    logger.info("Found files with extension '%s' in the repo.", SOURCE_FILE_PATTERN)
    return relative_directory(files[0])


def _read_runtime_file_version(repo: SourceRepo) -> Optional[str]:
    """Return the version pinned in runtime.txt, or None.

    Content without the "python-" prefix (case-insensitive) declares no
    version; it is not an error.
    """
    if not repo.file_exists(RUNTIME_FILE):
        logger.debug("Could not find file '%s' in source repo", RUNTIME_FILE)
        return None

    try:
        content = repo.read_file(RUNTIME_FILE).strip()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("An error occurred while reading file %s: %s", RUNTIME_FILE, exc)
        return None

    if not content.lower().startswith(RUNTIME_VERSION_PREFIX):
        logger.debug("Prefix %s was not found in file %s", RUNTIME_VERSION_PREFIX, RUNTIME_FILE)
        return None

    version = content[len(RUNTIME_VERSION_PREFIX):].strip()
    if not version:
        return None
    logger.debug("Found version %s in the %s file", version, RUNTIME_FILE)
    return version
