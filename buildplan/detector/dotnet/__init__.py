""".NET platform detector.

A *.csproj at the root is the manifest; otherwise the first *.csproj found
in the tree sets the app directory. The runtime version comes from the
project's TargetFramework.
"""

import logging
from typing import Optional

from buildplan.detector.dotnet.project_file import framework_to_version, read_target_framework
from buildplan.detector.types import DetectionContext, DotNetDetectionResult, PlatformDetectionResult
from buildplan.repo import ROOT_DIRECTORY, join_relative, relative_directory

logger = logging.getLogger(__name__)

PLATFORM_NAME = "dotnet"
PROJECT_FILE_PATTERN = "*.csproj"
LOCK_FILES: tuple[str, ...] = ("packages.lock.json",)


class DotNetDetector:
    name = PLATFORM_NAME

    def detect(self, context: DetectionContext) -> Optional[DotNetDetectionResult]:
        repo = context.repo

        project_files = repo.enumerate_files(PROJECT_FILE_PATTERN, recursive=False)
        if project_files:
            logger.debug("Found project file '%s' at the root of the repo.", project_files[0])
            app_directory = ROOT_DIRECTORY
        else:
            if not context.options.disable_recursive_lookup:
                project_files = repo.enumerate_files(PROJECT_FILE_PATTERN, recursive=True)
            if not project_files:
                logger.info("Could not find any '%s' file in the repo.", PROJECT_FILE_PATTERN)
                return None
            app_directory = relative_directory(project_files[0])
            logger.info("Found project file '%s' in the repo.", project_files[0])

        project_file = project_files[0]
        moniker = read_target_framework(repo, project_file)
        version = framework_to_version(moniker)
        if moniker and version is None:
            logger.debug("Target framework '%s' does not name a runtime version", moniker)

        return DotNetDetectionResult(
            platform=PLATFORM_NAME,
            platform_version=version,
            app_directory=app_directory,
            lock_files=tuple(
                name for name in LOCK_FILES
                if repo.file_exists(join_relative(app_directory, name))
            ),
            project_file=project_file,
            has_package_json=repo.file_exists(join_relative(app_directory, "package.json")),
        )

    def tools_in_path(self, result: PlatformDetectionResult) -> tuple[str, ...]:
        if getattr(result, "has_package_json", False):
            return ("node",)
        return ()
