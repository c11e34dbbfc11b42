"""Tests for the PHP detector."""

import json
from pathlib import Path

from buildplan.detector.php import PhpDetector
from buildplan.detector.types import DetectionContext, DetectorOptions
from buildplan.repo import LocalSourceRepo


def _write(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _detect(tmp_path: Path, **options):
    context = DetectionContext(repo=LocalSourceRepo(tmp_path), options=DetectorOptions(**options))
    return PhpDetector().detect(context)


class TestPhpDetector:
    def test_empty_repo_returns_none(self, tmp_path):
        assert _detect(tmp_path) is None

    def test_composer_json_with_php_version(self, tmp_path):
        _write(tmp_path / "composer.json", json.dumps({"require": {"php": "7.3"}}))
        result = _detect(tmp_path)
        assert result.platform == "php"
        assert result.platform_version == "7.3"
        assert result.app_directory == "."
        assert result.has_composer_json is True

    def test_composer_json_without_require(self, tmp_path):
        _write(tmp_path / "composer.json", json.dumps({"name": "acme/site"}))
        assert _detect(tmp_path).platform_version is None

    def test_malformed_composer_json_degrades_to_unknown_version(self, tmp_path):
        _write(tmp_path / "composer.json", "{ require: php 7 ")
        result = _detect(tmp_path)
        assert result is not None
        assert result.platform_version is None

    def test_php_files_in_subdirectory(self, tmp_path):
        _write(tmp_path / "public" / "index.php", "<?php echo 1;")
        result = _detect(tmp_path)
        assert result.app_directory == "./public"

    def test_recursive_lookup_disabled(self, tmp_path):
        _write(tmp_path / "public" / "index.php")
        assert _detect(tmp_path, disable_recursive_lookup=True) is None

    def test_composer_tool_always_required(self, tmp_path):
        _write(tmp_path / "index.php")
        _write(tmp_path / "composer.lock", "{}")
        result = _detect(tmp_path)
        assert result.lock_files == ("composer.lock",)
        assert PhpDetector().tools_in_path(result) == ("composer",)
