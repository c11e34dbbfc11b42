"""Script composition: from detected platforms to an ordered build procedure.

Public API:
    compose(platforms, resolved, facts, options=None) -> BuildProcedure
    compose_exec(platforms, resolved, facts, command, options=None) -> ExecProcedure
    render_build_script(procedure, source_dir=".") -> str
    render_exec_script(procedure, source_dir=".") -> str
"""

from buildplan.script.composer import compose, compose_exec
from buildplan.script.generators import ComposeOptions, select_installer
from buildplan.script.render import render_build_script, render_exec_script
from buildplan.script.types import (
    ActivationDirective,
    BuildProcedure,
    BuildStep,
    ExecProcedure,
    PlatformBuildBlock,
    RepoFacts,
    StepKind,
)

__all__ = [
    "compose",
    "compose_exec",
    "render_build_script",
    "render_exec_script",
    "select_installer",
    "ActivationDirective",
    "BuildProcedure",
    "BuildStep",
    "ComposeOptions",
    "ExecProcedure",
    "PlatformBuildBlock",
    "RepoFacts",
    "StepKind",
]
