"""Configuration for the build planner.

Settings are read from BUILDPLAN_* environment variables (and an optional
.env file); the CLI overrides individual fields from its flags. Version
catalogs live in YAML: buildplan/versions.yaml ships with the package and
catalog_file may point at a replacement.
"""

import io
import logging
from pathlib import Path
from typing import Mapping, Optional

import yaml
from dotenv import dotenv_values
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from buildplan.errors import CatalogError
from buildplan.repo import SourceRepo
from buildplan.resolver import VersionCatalog

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_FILE = Path(__file__).with_name("versions.yaml")

# Repository convention for hook scripts: KEY=VALUE lines in build.env.
BUILD_ENV_FILE = "build.env"
PRE_BUILD_KEY = "PRE_BUILD_SCRIPT_PATH"
POST_BUILD_KEY = "POST_BUILD_SCRIPT_PATH"


def _default_installer_priority() -> dict[str, list[str]]:
    return {
        "nodejs": ["yarn", "pnpm", "npm"],
        "python": ["uv", "poetry", "pipenv", "conda", "pip"],
    }


class Settings(BaseSettings):
    """Build planner settings.

    installer_priority decides which installer wins when lock files for
    several are present, per platform. default_versions overrides the
    catalog default of a platform, e.g. {"nodejs": "10.18.1"}.
    """

    model_config = SettingsConfigDict(
        env_prefix="BUILDPLAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Detection
    disable_recursive_lookup: bool = False
    disabled_platforms: list[str] = Field(default_factory=list)
    platform: Optional[str] = None
    platform_version: Optional[str] = None

    # Versions
    catalog_file: Optional[Path] = None
    default_versions: dict[str, str] = Field(default_factory=dict)

    # Composition
    pre_build_script_path: Optional[str] = None
    post_build_script_path: Optional[str] = None
    installer_priority: dict[str, list[str]] = Field(default_factory=_default_installer_priority)
    build_script_suffix: str = "azure"

    # App
    debug: bool = False

    @field_validator("platform", "platform_version", "pre_build_script_path", "post_build_script_path")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


def get_settings() -> Settings:
    return Settings()


# ---------------------------------------------------------------------------
# Version catalogs
# ---------------------------------------------------------------------------

def load_catalogs(
    path: Optional[Path] = None,
    default_overrides: Optional[Mapping[str, str]] = None,
) -> dict[str, VersionCatalog]:
    """Load version catalogs from YAML.

    Raises:
        CatalogError: the file is unreadable, malformed, or a default is
            not among its platform's versions.
    """
    path = Path(path) if path else DEFAULT_CATALOG_FILE
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise CatalogError(f"Could not read version catalog {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise CatalogError(f"Failed to parse version catalog {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise CatalogError(f"Version catalog {path} must be a mapping of platform to versions")

    overrides = dict(default_overrides or {})
    catalogs: dict[str, VersionCatalog] = {}
    for name, entry in raw.items():
        if not isinstance(entry, dict) or not entry.get("versions"):
            raise CatalogError(f"Catalog entry '{name}' in {path} has no versions")
        versions = tuple(str(v) for v in entry["versions"])
        default = str(overrides.pop(name, entry.get("default") or versions[-1]))
        catalogs[str(name)] = VersionCatalog(name=str(name), versions=versions, default=default)

    for name in overrides:
        logger.warning("Ignoring default version override for unknown platform '%s'", name)

    logger.debug("Loaded %d version catalogs from %s", len(catalogs), path)
    return catalogs


# ---------------------------------------------------------------------------
# Hook scripts
# ---------------------------------------------------------------------------

def resolve_hook_scripts(
    repo: SourceRepo,
    settings: Settings,
) -> tuple[Optional[str], Optional[str]]:
    """Return (pre_build, post_build) script paths.

    Explicit settings win; otherwise build.env at the repo root is
    consulted. An unreadable build.env is logged and ignored.
    """
    pre_build = settings.pre_build_script_path
    post_build = settings.post_build_script_path
    if pre_build and post_build:
        return pre_build, post_build

    env_values: dict[str, Optional[str]] = {}
    if repo.file_exists(BUILD_ENV_FILE):
        try:
            env_values = dotenv_values(stream=io.StringIO(repo.read_file(BUILD_ENV_FILE)))
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read %s: %s", BUILD_ENV_FILE, exc)

    return (
        pre_build or env_values.get(PRE_BUILD_KEY) or None,
        post_build or env_values.get(POST_BUILD_KEY) or None,
    )
