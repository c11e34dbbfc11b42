"""Tests for the .NET detector and project file parsing."""

from pathlib import Path

import pytest

from buildplan.detector.dotnet import DotNetDetector
from buildplan.detector.dotnet.project_file import framework_to_version
from buildplan.detector.types import DetectionContext, DetectorOptions
from buildplan.repo import LocalSourceRepo

SDK_PROJECT = """<Project Sdk="Microsoft.NET.Sdk.Web">
  <PropertyGroup>
    <TargetFramework>{tfm}</TargetFramework>
  </PropertyGroup>
</Project>
"""


def _write(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _detect(tmp_path: Path, **options):
    context = DetectionContext(repo=LocalSourceRepo(tmp_path), options=DetectorOptions(**options))
    return DotNetDetector().detect(context)


class TestDotNetDetector:
    def test_empty_repo_returns_none(self, tmp_path):
        assert _detect(tmp_path) is None

    def test_project_at_root(self, tmp_path):
        _write(tmp_path / "Api.csproj", SDK_PROJECT.format(tfm="netcoreapp3.1"))
        result = _detect(tmp_path)
        assert result.platform == "dotnet"
        assert result.platform_version == "3.1"
        assert result.app_directory == "."
        assert result.project_file == "Api.csproj"

    def test_project_in_subdirectory(self, tmp_path):
        _write(tmp_path / "src" / "Api" / "Api.csproj", SDK_PROJECT.format(tfm="net6.0"))
        result = _detect(tmp_path)
        assert result.app_directory == "./src/Api"
        assert result.project_file == "src/Api/Api.csproj"
        assert result.platform_version == "6.0"

    def test_subdirectory_ignored_when_recursive_lookup_disabled(self, tmp_path):
        _write(tmp_path / "src" / "Api.csproj", SDK_PROJECT.format(tfm="net6.0"))
        assert _detect(tmp_path, disable_recursive_lookup=True) is None

    def test_malformed_project_file_degrades_to_unknown_version(self, tmp_path):
        _write(tmp_path / "Api.csproj", "<Project><PropertyGroup>")
        result = _detect(tmp_path)
        assert result is not None
        assert result.platform_version is None

    def test_project_file_with_invalid_utf8_degrades_to_unknown_version(self, tmp_path):
        (tmp_path / "Api.csproj").write_bytes(b"\xff\xfe\x80<Project />")
        result = _detect(tmp_path)
        assert result is not None
        assert result.platform_version is None
        assert result.project_file == "Api.csproj"

    def test_spa_project_requires_node(self, tmp_path):
        _write(tmp_path / "Web.csproj", SDK_PROJECT.format(tfm="netcoreapp3.1"))
        _write(tmp_path / "package.json", "{}")
        result = _detect(tmp_path)
        assert result.has_package_json is True
        assert DotNetDetector().tools_in_path(result) == ("node",)


class TestFrameworkToVersion:
    @pytest.mark.parametrize(
        "moniker, expected",
        [
            ("netcoreapp3.1", "3.1"),
            ("netcoreapp2.1", "2.1"),
            ("net5.0", "5.0"),
            ("net8.0-windows", "8.0"),
            ("netstandard2.0", None),
            ("net48", None),
            (None, None),
        ],
    )
    def test_monikers(self, moniker, expected):
        assert framework_to_version(moniker) == expected
