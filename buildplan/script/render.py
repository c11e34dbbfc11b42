"""Render composed procedures into bash scripts with Jinja templates."""

import shlex
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from buildplan.script.types import BuildProcedure, ExecProcedure

TEMPLATES_DIR = Path(__file__).with_name("templates")
BUILD_TEMPLATE = "build.sh.j2"
EXEC_TEMPLATE = "exec.sh.j2"


@lru_cache(maxsize=1)
def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["shquote"] = shlex.quote
    return env


def render_build_script(procedure: BuildProcedure, source_dir: str = ".") -> str:
    """Render a BuildProcedure as a bash script.

    The script takes the source directory as its first argument and falls
    back to source_dir.
    """
    template = _environment().get_template(BUILD_TEMPLATE)
    return template.render(procedure=procedure, source_dir=source_dir)


def render_exec_script(procedure: ExecProcedure, source_dir: str = ".") -> str:
    template = _environment().get_template(EXEC_TEMPLATE)
    return template.render(procedure=procedure, source_dir=source_dir)
