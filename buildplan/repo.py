"""Read-only view over a source repository.

Detectors and script generators only ever talk to a SourceRepo. Paths are
always relative to the repository root and use forward slashes, so results
are identical across operating systems.

Enumeration order is part of the contract: "first matching file" heuristics
depend on it. Files are returned shallowest first, then in lexicographic
order of their relative path.
"""

import fnmatch
import logging
import os
from pathlib import Path, PurePosixPath
from typing import Iterable, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

ROOT_DIRECTORY = "."

# Directories never worth probing for source files.
DEFAULT_EXCLUDED_DIRS: frozenset[str] = frozenset({".git", "node_modules", "__pycache__"})


@runtime_checkable
class SourceRepo(Protocol):
    """Protocol for repository access used by the detection pipeline."""

    @property
    def root_path(self) -> Path: ...

    def file_exists(self, relative_path: str) -> bool: ...

    def read_file(self, relative_path: str) -> str:
        """Return the file's text. Raises OSError when it cannot be read."""
        ...

    def enumerate_files(self, pattern: str, recursive: bool = True) -> list[str]:
        """Return relative paths of files whose name matches a glob pattern."""
        ...


class LocalSourceRepo:
    """SourceRepo backed by a directory on the local filesystem."""

    def __init__(
        self,
        root: Path | str,
        excluded_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
    ):
        self._root = Path(root).resolve()
        self._excluded_dirs = frozenset(excluded_dirs)

    @property
    def root_path(self) -> Path:
        return self._root

    def file_exists(self, relative_path: str) -> bool:
        return (self._root / relative_path).is_file()

    def read_file(self, relative_path: str) -> str:
        return (self._root / relative_path).read_text(encoding="utf-8")

    def enumerate_files(self, pattern: str, recursive: bool = True) -> list[str]:
        matches: list[str] = []
        for dirpath, dirnames, filenames in os.walk(self._root):
            # Prune in place so os.walk skips excluded trees entirely.
            dirnames[:] = [d for d in dirnames if d not in self._excluded_dirs]
            rel_dir = Path(dirpath).relative_to(self._root)
            for name in filenames:
                if fnmatch.fnmatch(name, pattern):
                    matches.append((rel_dir / name).as_posix())
            if not recursive:
                break
        return sorted(matches, key=_enumeration_key)

    def __repr__(self) -> str:
        return f"LocalSourceRepo({str(self._root)!r})"


def relative_directory(relative_file: str) -> str:
    """Return the directory of a repo-relative file as "." or "./a/b"."""
    parent = PurePosixPath(relative_file).parent
    if str(parent) in ("", "."):
        return ROOT_DIRECTORY
    return f"{ROOT_DIRECTORY}/{parent.as_posix()}"


def join_relative(directory: str, name: str) -> str:
    """Join an app directory ("." or "./sub") with a file name."""
    if directory in ("", ROOT_DIRECTORY):
        return name
    return f"{directory.removeprefix('./')}/{name}"


def _enumeration_key(relative_path: str) -> tuple[int, str]:
    return (relative_path.count("/"), relative_path)
