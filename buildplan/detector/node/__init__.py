"""Node.js platform detector.

package.json at the root marks a Node.js app and may declare engines.node
and engines.npm. Without it, any *.js file in the tree does, and the app
directory is the first such file's directory.
"""

import logging
from typing import Optional

from buildplan.detector.node.defaults import (
    LOCK_FILE_TOOLS,
    LOCK_FILES,
    PACKAGE_JSON_FILE,
    PLATFORM_NAME,
    SOURCE_FILE_PATTERN,
)
from buildplan.detector.node.package_json import get_engine_version, load_package_json
from buildplan.detector.types import (
    DetectionContext,
    NodeDetectionResult,
    PlatformDetectionResult,
)
from buildplan.repo import ROOT_DIRECTORY, join_relative, relative_directory

logger = logging.getLogger(__name__)


class NodeDetector:
    name = PLATFORM_NAME

    def detect(self, context: DetectionContext) -> Optional[NodeDetectionResult]:
        repo = context.repo
        node_version: Optional[str] = None
        npm_version: Optional[str] = None

        if repo.file_exists(PACKAGE_JSON_FILE):
            logger.debug("File '%s' exists in source repo", PACKAGE_JSON_FILE)
            app_directory = ROOT_DIRECTORY
            data = load_package_json(repo)
            node_version = get_engine_version(data, "node")
            npm_version = get_engine_version(data, "npm")
            if node_version is None:
                logger.debug("Could not get a node version from %s", PACKAGE_JSON_FILE)
        else:
            logger.debug("File '%s' does not exist in source repo", PACKAGE_JSON_FILE)
            recursive = not context.options.disable_recursive_lookup
            files = repo.enumerate_files(SOURCE_FILE_PATTERN, recursive=recursive)
            if not files:
                logger.info(
                    "Could not find any file with extension '%s' in the repo.",
                    SOURCE_FILE_PATTERN,
                )
                return None
            logger.info("Found files with extension '%s' in the repo.", SOURCE_FILE_PATTERN)
            app_directory = relative_directory(files[0])

        return NodeDetectionResult(
            platform=PLATFORM_NAME,
            platform_version=node_version,
            app_directory=app_directory,
            lock_files=tuple(
                name for name in LOCK_FILES
                if repo.file_exists(join_relative(app_directory, name))
            ),
            has_package_json=repo.file_exists(join_relative(app_directory, PACKAGE_JSON_FILE)),
            npm_version=npm_version,
        )

    def tools_in_path(self, result: PlatformDetectionResult) -> tuple[str, ...]:
        return tuple(
            LOCK_FILE_TOOLS[name] for name in result.lock_files if name in LOCK_FILE_TOOLS
        )
