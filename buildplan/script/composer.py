"""Build procedure composition.

Turns detected platforms and their resolved versions into one ordered
procedure:

  activation   every platform's SDK (and companion tools) on one line
  pre-build    hook script, verbatim
  blocks       install → build → alternate build, per platform, in
               detection order
  post-build   hook script, verbatim

Platforms whose versions failed to resolve are left out; the rest compose
normally.
"""

import logging
from typing import Mapping, Optional, Sequence

from buildplan.detector.types import AggregatedPlatformInfo
from buildplan.resolver import ResolvedVersion
from buildplan.script.generators import GENERATORS, ComposeOptions, generate_placeholder_block
from buildplan.script.types import (
    ActivationDirective,
    BuildProcedure,
    ExecProcedure,
    PlatformBuildBlock,
    RepoFacts,
)

logger = logging.getLogger(__name__)


def compose(
    platforms: Sequence[AggregatedPlatformInfo],
    resolved: Mapping[str, ResolvedVersion],
    facts: RepoFacts,
    options: Optional[ComposeOptions] = None,
) -> BuildProcedure:
    """Compose the build procedure for the detected platforms."""
    options = options or ComposeOptions()
    blocks = _generate_blocks(platforms, resolved, facts, options)
    procedure = BuildProcedure(
        activation=_combine_activation(blocks),
        pre_build_script=facts.pre_build_script,
        blocks=tuple(blocks),
        post_build_script=facts.post_build_script,
    )
    logger.debug(
        "Composed build procedure: activation=%r blocks=%d steps=%d",
        procedure.activation.line,
        len(procedure.blocks),
        len(procedure.steps()),
    )
    return procedure


def compose_exec(
    platforms: Sequence[AggregatedPlatformInfo],
    resolved: Mapping[str, ResolvedVersion],
    facts: RepoFacts,
    command: str,
    options: Optional[ComposeOptions] = None,
) -> ExecProcedure:
    """Compose a procedure that stages the detected SDKs and runs command."""
    options = options or ComposeOptions()
    blocks = _generate_blocks(platforms, resolved, facts, options)
    return ExecProcedure(activation=_combine_activation(blocks), command=command)


def _generate_blocks(
    platforms: Sequence[AggregatedPlatformInfo],
    resolved: Mapping[str, ResolvedVersion],
    facts: RepoFacts,
    options: ComposeOptions,
) -> list[PlatformBuildBlock]:
    blocks: list[PlatformBuildBlock] = []
    for info in platforms:
        if info.platform not in resolved:
            logger.warning("Skipping platform '%s': no resolved version", info.platform)
            continue
        generator = GENERATORS.get(info.platform, generate_placeholder_block)
        block = generator(info, resolved, facts, options)
        if block.is_empty:
            logger.debug("Platform '%s' has nothing to install or build", info.platform)
        blocks.append(block)
    return blocks


def _combine_activation(blocks: Sequence[PlatformBuildBlock]) -> ActivationDirective:
    entries: list[tuple[str, str]] = []
    seen: set[str] = set()
    for block in blocks:
        for tool, version in block.activation:
            if tool in seen:
                continue
            seen.add(tool)
            entries.append((tool, version))
    return ActivationDirective(entries=tuple(entries))
