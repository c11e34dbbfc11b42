"""Types for composed build procedures.

A BuildProcedure is the logical script: one combined activation line, an
optional pre-build hook, one block per platform in detection order, and an
optional post-build hook. Rendering it to bash is a separate concern (see
buildplan.script.render).
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional

from buildplan.repo import ROOT_DIRECTORY, SourceRepo


class StepKind(StrEnum):
    ACTIVATE = "activate"
    PRE_BUILD = "pre_build"
    INSTALL = "install"
    BUILD = "build"
    BUILD_ALT = "build_alt"
    POST_BUILD = "post_build"
    RUN = "run"


@dataclass(frozen=True)
class ActivationDirective:
    """Ordered (tool, version) pairs staged together in one step."""

    entries: tuple[tuple[str, str], ...] = ()

    @property
    def line(self) -> str:
        return " ".join(f"{tool}={version}" for tool, version in self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)


@dataclass(frozen=True)
class PlatformBuildBlock:
    """Install and build commands for one platform.

    Every field but platform is optional; a block with no commands is a
    placeholder that keeps the procedure's shape uniform.
    """

    platform: str
    directory: str = ROOT_DIRECTORY
    installer: Optional[str] = None
    install_command: Optional[str] = None
    build_command: Optional[str] = None
    build_alt_command: Optional[str] = None
    activation: tuple[tuple[str, str], ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.install_command or self.build_command or self.build_alt_command)


@dataclass(frozen=True)
class BuildStep:
    kind: StepKind
    command: str
    platform: Optional[str] = None
    directory: Optional[str] = None


@dataclass(frozen=True)
class RepoFacts:
    """Repository-level inputs to composition that detection does not carry."""

    repo: SourceRepo
    pre_build_script: Optional[str] = None
    post_build_script: Optional[str] = None


@dataclass(frozen=True)
class BuildProcedure:
    activation: ActivationDirective = field(default_factory=ActivationDirective)
    pre_build_script: Optional[str] = None
    blocks: tuple[PlatformBuildBlock, ...] = ()
    post_build_script: Optional[str] = None

    def steps(self) -> list[BuildStep]:
        """Flatten the procedure into its ordered steps."""
        steps: list[BuildStep] = []
        if self.activation:
            steps.append(BuildStep(StepKind.ACTIVATE, self.activation.line))
        if self.pre_build_script:
            steps.append(BuildStep(StepKind.PRE_BUILD, self.pre_build_script))
        for block in self.blocks:
            for kind, command in (
                (StepKind.INSTALL, block.install_command),
                (StepKind.BUILD, block.build_command),
                (StepKind.BUILD_ALT, block.build_alt_command),
            ):
                if command:
                    steps.append(BuildStep(kind, command, block.platform, block.directory))
        if self.post_build_script:
            steps.append(BuildStep(StepKind.POST_BUILD, self.post_build_script))
        return steps

    def to_dict(self) -> dict:
        return {
            "activation": self.activation.line,
            "pre_build_script": self.pre_build_script,
            "blocks": [
                {
                    "platform": b.platform,
                    "directory": b.directory,
                    "installer": b.installer,
                    "install_command": b.install_command,
                    "build_command": b.build_command,
                    "build_alt_command": b.build_alt_command,
                }
                for b in self.blocks
            ],
            "post_build_script": self.post_build_script,
            "steps": [
                {
                    "kind": s.kind.value,
                    "command": s.command,
                    "platform": s.platform,
                    "directory": s.directory,
                }
                for s in self.steps()
            ],
        }


@dataclass(frozen=True)
class ExecProcedure:
    """Stage the detected SDKs, then run one command in the source directory."""

    activation: ActivationDirective
    command: str

    def steps(self) -> list[BuildStep]:
        steps: list[BuildStep] = []
        if self.activation:
            steps.append(BuildStep(StepKind.ACTIVATE, self.activation.line))
        steps.append(BuildStep(StepKind.RUN, self.command))
        return steps
