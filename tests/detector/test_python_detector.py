"""Tests for the Python platform detector.

All tests use in-memory fixtures written to tmp_path; no real repos are cloned.
"""

from pathlib import Path

import pytest

from buildplan.detector.python import PythonDetector
from buildplan.detector.types import DetectionContext, DetectorOptions, PythonDetectionResult
from buildplan.repo import LocalSourceRepo


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _write(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _detect(tmp_path: Path, **options):
    context = DetectionContext(repo=LocalSourceRepo(tmp_path), options=DetectorOptions(**options))
    return PythonDetector().detect(context)


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------

class TestPythonPresence:
    def test_empty_repo_returns_none(self, tmp_path):
        assert _detect(tmp_path) is None

    def test_requirements_only_detects_at_root(self, tmp_path):
        _write(tmp_path / "requirements.txt", "")
        result = _detect(tmp_path)
        assert isinstance(result, PythonDetectionResult)
        assert result.platform == "python"
        assert result.platform_version is None
        assert result.app_directory == "."
        assert result.has_requirements_txt is True

    def test_py_file_at_root_without_requirements(self, tmp_path):
        _write(tmp_path / "foo.py", "print('hi')")
        result = _detect(tmp_path)
        assert result is not None
        assert result.app_directory == "."
        assert result.platform_version is None

    def test_py_file_in_subdirectory_sets_app_directory(self, tmp_path):
        _write(tmp_path / "sub" / "foo.py", "foo.py content")
        result = _detect(tmp_path)
        assert result is not None
        assert result.app_directory == "./sub"
        assert result.platform_version is None

    def test_first_match_is_shallowest_then_lexicographic(self, tmp_path):
        _write(tmp_path / "b" / "app.py")
        _write(tmp_path / "a" / "deep" / "app.py")
        _write(tmp_path / "c" / "app.py")
        result = _detect(tmp_path)
        assert result.app_directory == "./b"

    def test_subdirectory_ignored_when_recursive_lookup_disabled(self, tmp_path):
        _write(tmp_path / "sub" / "foo.py", "foo.py content")
        _write(tmp_path / "sub" / "requirements.txt", "foo==1.1")
        assert _detect(tmp_path, disable_recursive_lookup=True) is None

    def test_root_requirements_found_when_recursive_lookup_disabled(self, tmp_path):
        _write(tmp_path / "requirements.txt", "foo==1.1")
        result = _detect(tmp_path, disable_recursive_lookup=True)
        assert result is not None
        assert result.app_directory == "."
        assert result.platform_version is None

    def test_pyproject_counts_as_manifest(self, tmp_path):
        _write(tmp_path / "pyproject.toml", "[project]\nname = 'demo'\n")
        result = _detect(tmp_path)
        assert result is not None
        assert result.has_pyproject_toml is True


# ---------------------------------------------------------------------------
# runtime.txt
# ---------------------------------------------------------------------------

class TestRuntimeFile:
    def test_runtime_version_with_manifest(self, tmp_path):
        _write(tmp_path / "requirements.txt", "")
        _write(tmp_path / "runtime.txt", "python-3.7.5")
        result = _detect(tmp_path)
        assert result.platform_version == "3.7.5"

    def test_runtime_file_alone_detects_platform(self, tmp_path):
        _write(tmp_path / "runtime.txt", "python-1000.1000.1000")
        result = _detect(tmp_path)
        assert result is not None
        assert result.platform_version == "1000.1000.1000"
        assert result.app_directory == "."

    @pytest.mark.parametrize("content", ["", "foo", "python", "python-"])
    def test_runtime_file_without_prefix_is_not_detected(self, tmp_path, content):
        _write(tmp_path / "runtime.txt", content)
        assert _detect(tmp_path) is None

    @pytest.mark.parametrize("version", ["3", "3.7", "3.7.5", "3.7.5b01"])
    def test_version_read_verbatim(self, tmp_path, version):
        _write(tmp_path / "requirements.txt", "")
        _write(tmp_path / "app.py", "")
        _write(tmp_path / "runtime.txt", f"python-{version}")
        assert _detect(tmp_path).platform_version == version

    def test_prefix_is_case_insensitive_and_whitespace_trimmed(self, tmp_path):
        _write(tmp_path / "runtime.txt", "Python-3.8.6\n")
        assert _detect(tmp_path).platform_version == "3.8.6"

    def test_runtime_file_wins_over_requires_python(self, tmp_path):
        _write(tmp_path / "pyproject.toml", "[project]\nrequires-python = '>=3.6'\n")
        _write(tmp_path / "runtime.txt", "python-3.7.9")
        assert _detect(tmp_path).platform_version == "3.7.9"


# ---------------------------------------------------------------------------
# pyproject.toml
# ---------------------------------------------------------------------------

class TestPyprojectVersion:
    def test_requires_python_used_as_version(self, tmp_path):
        _write(tmp_path / "pyproject.toml", "[project]\nrequires-python = '>=3.8'\n")
        assert _detect(tmp_path).platform_version == ">=3.8"

    def test_malformed_pyproject_still_detects(self, tmp_path):
        _write(tmp_path / "pyproject.toml", "[project\nthis is = = not toml")
        result = _detect(tmp_path)
        assert result is not None
        assert result.platform_version is None


# ---------------------------------------------------------------------------
# Flags and tools
# ---------------------------------------------------------------------------

class TestFlags:
    def test_lock_files_recorded_in_lookup_order(self, tmp_path):
        _write(tmp_path / "requirements.txt")
        _write(tmp_path / "poetry.lock")
        _write(tmp_path / "uv.lock")
        assert _detect(tmp_path).lock_files == ("uv.lock", "poetry.lock")

    def test_conda_environment_requires_conda_tool(self, tmp_path):
        _write(tmp_path / "requirements.txt")
        _write(tmp_path / "environment.yml", "name: demo\n")
        detector = PythonDetector()
        result = _detect(tmp_path)
        assert result.has_conda_environment_file is True
        assert detector.tools_in_path(result) == ("conda",)

    def test_no_tools_without_conda(self, tmp_path):
        _write(tmp_path / "requirements.txt")
        assert PythonDetector().tools_in_path(_detect(tmp_path)) == ()

    def test_notebook_flag(self, tmp_path):
        _write(tmp_path / "analysis.ipynb", "{}")
        _write(tmp_path / "requirements.txt")
        assert _detect(tmp_path).has_jupyter_notebook_files is True

    def test_unreadable_runtime_file_is_skipped(self, tmp_path, monkeypatch):
        _write(tmp_path / "requirements.txt")
        _write(tmp_path / "runtime.txt", "python-3.8.6")
        repo = LocalSourceRepo(tmp_path)

        def _fail(relative_path):
            raise PermissionError(relative_path)

        monkeypatch.setattr(repo, "read_file", _fail)
        result = PythonDetector().detect(DetectionContext(repo=repo))
        assert result is not None
        assert result.platform_version is None

    def test_runtime_file_with_invalid_utf8_is_skipped(self, tmp_path):
        _write(tmp_path / "requirements.txt")
        (tmp_path / "runtime.txt").write_bytes(b"\xff\xfe\x80python-3.8.6")
        result = _detect(tmp_path)
        assert result is not None
        assert result.platform_version is None

    def test_pyproject_with_invalid_utf8_still_detects(self, tmp_path):
        (tmp_path / "pyproject.toml").write_bytes(b"\xff\xfe\x80[project]\n")
        result = _detect(tmp_path)
        assert result is not None
        assert result.has_pyproject_toml is True
        assert result.platform_version is None
