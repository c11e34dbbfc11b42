"""Tests for the Node.js detector and the package.json reader."""

import json
from pathlib import Path

from buildplan.detector.node import NodeDetector
from buildplan.detector.node.package_json import get_engine_version, get_scripts, load_package_json
from buildplan.detector.types import DetectionContext, DetectorOptions
from buildplan.repo import LocalSourceRepo


def _write(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _write_pkg(tmp_path: Path, data: dict) -> None:
    _write(tmp_path / "package.json", json.dumps(data))


def _detect(tmp_path: Path, **options):
    context = DetectionContext(repo=LocalSourceRepo(tmp_path), options=DetectorOptions(**options))
    return NodeDetector().detect(context)


class TestNodePresence:
    def test_empty_repo_returns_none(self, tmp_path):
        assert _detect(tmp_path) is None

    def test_package_json_at_root(self, tmp_path):
        _write_pkg(tmp_path, {"name": "app"})
        result = _detect(tmp_path)
        assert result.platform == "nodejs"
        assert result.app_directory == "."
        assert result.has_package_json is True
        assert result.platform_version is None

    def test_js_file_in_subdirectory(self, tmp_path):
        _write(tmp_path / "web" / "server.js", "console.log(1)")
        result = _detect(tmp_path)
        assert result.app_directory == "./web"
        assert result.has_package_json is False

    def test_node_modules_is_not_searched(self, tmp_path):
        _write(tmp_path / "node_modules" / "left-pad" / "index.js")
        assert _detect(tmp_path) is None

    def test_recursive_lookup_disabled(self, tmp_path):
        _write(tmp_path / "web" / "server.js")
        assert _detect(tmp_path, disable_recursive_lookup=True) is None


class TestNodeVersions:
    def test_engines_node_and_npm(self, tmp_path):
        _write_pkg(tmp_path, {"engines": {"node": "6.11.0", "npm": "5.4.2"}})
        result = _detect(tmp_path)
        assert result.platform_version == "6.11.0"
        assert result.npm_version == "5.4.2"
        assert result.tool_version_requests() == (("nodejs", "6.11.0"), ("npm", "5.4.2"))

    def test_no_engines(self, tmp_path):
        _write_pkg(tmp_path, {"name": "app"})
        result = _detect(tmp_path)
        assert result.platform_version is None
        assert result.npm_version is None

    def test_malformed_package_json_still_detects(self, tmp_path):
        _write(tmp_path / "package.json", '{"scripts": {"test": "echo ,\n "start": "node server.js"}')
        result = _detect(tmp_path)
        assert result is not None
        assert result.platform_version is None

    def test_non_string_engine_is_ignored(self, tmp_path):
        _write_pkg(tmp_path, {"engines": {"node": 12}})
        assert _detect(tmp_path).platform_version is None


class TestNodeLockFiles:
    def test_yarn_lock_requires_yarn(self, tmp_path):
        _write_pkg(tmp_path, {})
        _write(tmp_path / "yarn.lock", "Yarn lock file content here")
        result = _detect(tmp_path)
        assert result.lock_files == ("yarn.lock",)
        assert NodeDetector().tools_in_path(result) == ("yarn",)

    def test_package_lock_needs_no_extra_tool(self, tmp_path):
        _write_pkg(tmp_path, {})
        _write(tmp_path / "package-lock.json", "{}")
        result = _detect(tmp_path)
        assert result.lock_files == ("package-lock.json",)
        assert NodeDetector().tools_in_path(result) == ()

    def test_lock_files_checked_in_app_directory(self, tmp_path):
        _write(tmp_path / "client" / "index.js")
        _write(tmp_path / "client" / "pnpm-lock.yaml")
        result = _detect(tmp_path)
        assert result.lock_files == ("pnpm-lock.yaml",)


class TestPackageJsonReader:
    def test_missing_file_returns_none(self, tmp_path):
        assert load_package_json(LocalSourceRepo(tmp_path)) is None

    def test_top_level_array_returns_none(self, tmp_path):
        _write(tmp_path / "package.json", "[]")
        assert load_package_json(LocalSourceRepo(tmp_path)) is None

    def test_reads_from_subdirectory(self, tmp_path):
        _write(tmp_path / "web" / "package.json", json.dumps({"scripts": {"build": "tsc"}}))
        data = load_package_json(LocalSourceRepo(tmp_path), "./web")
        assert get_scripts(data) == {"build": "tsc"}

    def test_scripts_keep_only_strings(self):
        assert get_scripts({"scripts": {"build": "tsc", "bad": 1}}) == {"build": "tsc"}

    def test_engine_version_from_none(self):
        assert get_engine_version(None, "node") is None
