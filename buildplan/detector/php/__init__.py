"""PHP platform detector."""

import logging
from typing import Optional

from buildplan.detector.php.composer import COMPOSER_JSON_FILE, get_php_version, load_composer_json
from buildplan.detector.types import DetectionContext, PhpDetectionResult, PlatformDetectionResult
from buildplan.repo import ROOT_DIRECTORY, join_relative, relative_directory

logger = logging.getLogger(__name__)

PLATFORM_NAME = "php"
SOURCE_FILE_PATTERN = "*.php"
LOCK_FILES: tuple[str, ...] = ("composer.lock",)


class PhpDetector:
    name = PLATFORM_NAME

    def detect(self, context: DetectionContext) -> Optional[PhpDetectionResult]:
        repo = context.repo
        php_version: Optional[str] = None

        if repo.file_exists(COMPOSER_JSON_FILE):
            logger.debug("File '%s' exists in source repo", COMPOSER_JSON_FILE)
            app_directory = ROOT_DIRECTORY
            php_version = get_php_version(load_composer_json(repo))
            if php_version is None:
                logger.debug("Could not get version from the composer file.")
        else:
            logger.debug("File '%s' does not exist in source repo", COMPOSER_JSON_FILE)
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

        return PhpDetectionResult(
            platform=PLATFORM_NAME,
            platform_version=php_version,
            app_directory=app_directory,
            lock_files=tuple(
                name for name in LOCK_FILES
                if repo.file_exists(join_relative(app_directory, name))
            ),
            has_composer_json=repo.file_exists(join_relative(app_directory, COMPOSER_JSON_FILE)),
        )

    def tools_in_path(self, result: PlatformDetectionResult) -> tuple[str, ...]:
        return ("composer",)
