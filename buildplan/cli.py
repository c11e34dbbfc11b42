"""
buildplan CLI
=============

Command-line interface for detecting platforms and generating build scripts.
"""

import json
from pathlib import Path
from typing import Optional

import click

from buildplan import __version__
from buildplan.config import Settings, get_settings
from buildplan.errors import BuildPlanError
from buildplan.logging import configure_logging
from buildplan.pipeline import plan_build, plan_exec
from buildplan.repo import LocalSourceRepo
from buildplan.script import render_build_script, render_exec_script

NO_PLATFORM_MESSAGE = "Could not detect any platform in the source directory."

source_argument = click.argument(
    "source",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
recursive_option = click.option(
    "--disable-recursive-lookup",
    is_flag=True,
    help="Only look at the root of the source directory for source files.",
)


@click.group()
@click.version_option(version=__version__, prog_name="buildplan")
@click.option("--debug", is_flag=True, help="Verbose console logging.")
@click.pass_context
def main(ctx: click.Context, debug: bool) -> None:
    """Detect the platforms in a source tree and plan its build."""
    settings = get_settings()
    if debug:
        settings = settings.model_copy(update={"debug": debug})
    configure_logging(settings.debug)
    ctx.obj = settings


@main.command()
@source_argument
@recursive_option
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.pass_obj
def detect(settings: Settings, source: Path, disable_recursive_lookup: bool, as_json: bool) -> None:
    """List the platforms detected in SOURCE and their resolved versions."""
    settings = _override(settings, disable_recursive_lookup=disable_recursive_lookup or None)
    plan = _run(lambda: plan_build(LocalSourceRepo(source), settings))

    if as_json:
        click.echo(json.dumps(plan.to_dict(), indent=2))
        return

    if not plan.platforms:
        click.echo(NO_PLATFORM_MESSAGE)
        return

    click.echo("Detected following platforms:")
    for info in plan.platforms:
        resolved = plan.resolved.get(info.platform)
        version = resolved.version if resolved else "unsupported"
        declared = info.result.platform_version or "not declared"
        click.echo(f"  {info.platform}: {version} (declared: {declared}, directory: {info.result.app_directory})")
        if info.required_tools:
            click.echo(f"    tools: {', '.join(info.required_tools)}")
    _echo_failures(plan.failures)


@main.command("build-script")
@source_argument
@recursive_option
@click.option("--platform", help="Build for this platform even if it is not detected.")
@click.option("--platform-version", help="Use this version of --platform.")
@click.option("--pre-build-script", help="Script to run before installing dependencies.")
@click.option("--post-build-script", help="Script to run after the build.")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Write the script to a file instead of stdout.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the plan as JSON instead of a script.")
@click.pass_obj
def build_script(
    settings: Settings,
    source: Path,
    disable_recursive_lookup: bool,
    platform: Optional[str],
    platform_version: Optional[str],
    pre_build_script: Optional[str],
    post_build_script: Optional[str],
    output: Optional[Path],
    as_json: bool,
) -> None:
    """Generate the build script for SOURCE."""
    settings = _override(
        settings,
        disable_recursive_lookup=disable_recursive_lookup or None,
        platform=platform,
        platform_version=platform_version,
        pre_build_script_path=pre_build_script,
        post_build_script_path=post_build_script,
    )
    plan = _run(lambda: plan_build(LocalSourceRepo(source), settings))

    if as_json:
        click.echo(json.dumps(plan.to_dict(), indent=2))
        return

    if not plan.platforms:
        raise click.ClickException(NO_PLATFORM_MESSAGE)
    _echo_failures(plan.failures)
    if not plan.procedure.blocks:
        raise click.ClickException("No platform could be resolved to a supported version.")

    script = render_build_script(plan.procedure, source_dir=str(source.resolve()))
    _write_script(script, output)


@main.command("exec-script")
@source_argument
@click.argument("command")
@recursive_option
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Write the script to a file instead of stdout.",
)
@click.pass_obj
def exec_script(
    settings: Settings,
    source: Path,
    command: str,
    disable_recursive_lookup: bool,
    output: Optional[Path],
) -> None:
    """Generate a script that runs COMMAND with SOURCE's SDKs staged."""
    settings = _override(settings, disable_recursive_lookup=disable_recursive_lookup or None)
    plan = _run(lambda: plan_exec(LocalSourceRepo(source), command, settings))
    _echo_failures(plan.failures)
    script = render_exec_script(plan.procedure, source_dir=str(source.resolve()))
    _write_script(script, output)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _override(settings: Settings, **values) -> Settings:
    update = {k: v for k, v in values.items() if v is not None}
    return settings.model_copy(update=update) if update else settings


def _run(action):
    try:
        return action()
    except BuildPlanError as exc:
        raise click.ClickException(str(exc)) from exc


def _echo_failures(failures) -> None:
    for failure in failures:
        click.echo(f"Error: {failure}", err=True)


def _write_script(script: str, output: Optional[Path]) -> None:
    if output is None:
        click.echo(script, nl=False)
        return
    output.write_text(script, encoding="utf-8")
    output.chmod(0o755)
    click.echo(f"Build script written to {output}", err=True)


if __name__ == "__main__":
    main()
