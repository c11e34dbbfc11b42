"""Per-platform build block generators.

GENERATORS maps a platform name to a function that turns one detected
platform (plus its resolved versions and the repository) into a
PlatformBuildBlock. Platforms without an entry get a placeholder block that
only activates their SDK.
"""

import logging
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Callable, Mapping, Optional, Sequence

from buildplan.detector.node.package_json import get_scripts as get_package_json_scripts
from buildplan.detector.node.package_json import load_package_json
from buildplan.detector.php.composer import get_scripts as get_composer_scripts
from buildplan.detector.php.composer import load_composer_json
from buildplan.detector.types import AggregatedPlatformInfo
from buildplan.repo import join_relative
from buildplan.resolver import ResolvedVersion
from buildplan.script.types import PlatformBuildBlock, RepoFacts

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Installer tables
# ---------------------------------------------------------------------------

# Lock/marker file → installer it selects.
NODE_INSTALLER_MARKERS: dict[str, str] = {
    "yarn.lock": "yarn",
    "pnpm-lock.yaml": "pnpm",
    "package-lock.json": "npm",
}
NODE_INSTALL_CMDS: dict[str, str] = {
    "npm": "npm install",
    "yarn": "yarn install",
    "pnpm": "pnpm install",
}
NODE_DEFAULT_INSTALLER = "npm"

PYTHON_INSTALLER_MARKERS: dict[str, str] = {
    "uv.lock": "uv",
    "poetry.lock": "poetry",
    "Pipfile.lock": "pipenv",
    "environment.yml": "conda",
    "environment.yaml": "conda",
}
PYTHON_INSTALL_CMDS: dict[str, str] = {
    "uv": "uv sync",
    "poetry": "poetry install",
    "pipenv": "pipenv install --deploy",
    "conda": "conda env update --file {environment_file}",
    "pip": "pip install -r requirements.txt",
}
PYTHON_DEFAULT_INSTALLER = "pip"
PYTHON_MANIFESTS: tuple[str, ...] = (
    "requirements.txt",
    "pyproject.toml",
    "environment.yml",
    "environment.yaml",
)

PHP_INSTALL_CMD = "composer install --ignore-platform-reqs --no-interaction"

DEFAULT_INSTALLER_PRIORITY: dict[str, tuple[str, ...]] = {
    "nodejs": ("yarn", "pnpm", "npm"),
    "python": ("uv", "poetry", "pipenv", "conda", "pip"),
}


@dataclass(frozen=True)
class ComposeOptions:
    """Configuration-driven knobs for block generation."""

    installer_priority: Mapping[str, Sequence[str]] = field(
        default_factory=lambda: dict(DEFAULT_INSTALLER_PRIORITY)
    )
    build_script_suffix: str = "azure"


def select_installer(
    lock_files: Sequence[str],
    markers: Mapping[str, str],
    priority: Sequence[str],
    default: str,
) -> str:
    """Pick exactly one installer from the lock files present.

    The first installer in priority whose marker is present wins; with no
    marker present the platform default is used.
    """
    present = {markers[name] for name in lock_files if name in markers}
    for installer in priority:
        if installer in present:
            return installer
    # Markers for installers missing from the priority list still beat the default.
    for name in lock_files:
        if name in markers:
            return markers[name]
    return default


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------

BlockGenerator = Callable[
    [AggregatedPlatformInfo, Mapping[str, ResolvedVersion], RepoFacts, ComposeOptions],
    PlatformBuildBlock,
]


def generate_node_block(
    info: AggregatedPlatformInfo,
    resolved: Mapping[str, ResolvedVersion],
    facts: RepoFacts,
    options: ComposeOptions,
) -> PlatformBuildBlock:
    directory = info.result.app_directory
    activation = [("node", resolved[info.platform].version)]

    if not facts.repo.file_exists(join_relative(directory, "package.json")):
        return PlatformBuildBlock(platform=info.platform, directory=directory, activation=tuple(activation))

    installer = select_installer(
        info.result.lock_files,
        NODE_INSTALLER_MARKERS,
        options.installer_priority.get(info.platform, DEFAULT_INSTALLER_PRIORITY["nodejs"]),
        NODE_DEFAULT_INSTALLER,
    )
    if installer == "npm" and "npm" in resolved:
        activation.append(("npm", resolved["npm"].version))

    scripts = get_package_json_scripts(load_package_json(facts.repo, directory))
    alt_script = f"build:{options.build_script_suffix}"
    return PlatformBuildBlock(
        platform=info.platform,
        directory=directory,
        installer=installer,
        install_command=NODE_INSTALL_CMDS[installer],
        build_command=f"{installer} run build" if "build" in scripts else None,
        build_alt_command=f"{installer} run {alt_script}" if alt_script in scripts else None,
        activation=tuple(activation),
    )


def generate_python_block(
    info: AggregatedPlatformInfo,
    resolved: Mapping[str, ResolvedVersion],
    facts: RepoFacts,
    options: ComposeOptions,
) -> PlatformBuildBlock:
    directory = info.result.app_directory
    activation = (("python", resolved[info.platform].version),)
    repo = facts.repo

    manifests = [m for m in PYTHON_MANIFESTS if repo.file_exists(join_relative(directory, m))]
    markers = [m for m in info.result.lock_files if m in PYTHON_INSTALLER_MARKERS]
    if not manifests and not markers:
        return PlatformBuildBlock(platform=info.platform, directory=directory, activation=activation)

    installer = select_installer(
        info.result.lock_files,
        PYTHON_INSTALLER_MARKERS,
        options.installer_priority.get(info.platform, DEFAULT_INSTALLER_PRIORITY["python"]),
        PYTHON_DEFAULT_INSTALLER,
    )
    install_command: Optional[str] = PYTHON_INSTALL_CMDS[installer]
    if installer == "conda":
        environment_file = next(
            m for m in ("environment.yml", "environment.yaml")
            if m in info.result.lock_files
        )
        install_command = install_command.format(environment_file=environment_file)
    elif installer == "pip" and "requirements.txt" not in manifests:
        install_command = "pip install ." if "pyproject.toml" in manifests else None

    return PlatformBuildBlock(
        platform=info.platform,
        directory=directory,
        installer=installer,
        install_command=install_command,
        activation=activation,
    )


def generate_php_block(
    info: AggregatedPlatformInfo,
    resolved: Mapping[str, ResolvedVersion],
    facts: RepoFacts,
    options: ComposeOptions,
) -> PlatformBuildBlock:
    directory = info.result.app_directory
    activation = (("php", resolved[info.platform].version),)

    data = load_composer_json(facts.repo, directory)
    if data is None and not facts.repo.file_exists(join_relative(directory, "composer.json")):
        return PlatformBuildBlock(platform=info.platform, directory=directory, activation=activation)

    scripts = get_composer_scripts(data)
    alt_script = f"build:{options.build_script_suffix}"
    return PlatformBuildBlock(
        platform=info.platform,
        directory=directory,
        installer="composer",
        install_command=PHP_INSTALL_CMD,
        build_command="composer run-script build" if "build" in scripts else None,
        build_alt_command=f"composer run-script {alt_script}" if alt_script in scripts else None,
        activation=activation,
    )


def generate_dotnet_block(
    info: AggregatedPlatformInfo,
    resolved: Mapping[str, ResolvedVersion],
    facts: RepoFacts,
    options: ComposeOptions,
) -> PlatformBuildBlock:
    directory = info.result.app_directory
    activation = (("dotnet", resolved[info.platform].version),)

    project_file = getattr(info.result, "project_file", None)
    if not project_file:
        return PlatformBuildBlock(platform=info.platform, directory=directory, activation=activation)

    # Commands run inside the app directory, so only the file name is needed.
    project_name = PurePosixPath(project_file).name
    return PlatformBuildBlock(
        platform=info.platform,
        directory=directory,
        installer="dotnet",
        install_command=f'dotnet restore "{project_name}"',
        build_command=f'dotnet publish "{project_name}" -c Release',
        activation=activation,
    )


def generate_placeholder_block(
    info: AggregatedPlatformInfo,
    resolved: Mapping[str, ResolvedVersion],
    facts: RepoFacts,
    options: ComposeOptions,
) -> PlatformBuildBlock:
    return PlatformBuildBlock(
        platform=info.platform,
        directory=info.result.app_directory,
        activation=((info.platform, resolved[info.platform].version),),
    )


GENERATORS: dict[str, BlockGenerator] = {
    "python": generate_python_block,
    "nodejs": generate_node_block,
    "php": generate_php_block,
    "dotnet": generate_dotnet_block,
}
