"""buildplan: detect the platforms in a source tree and plan its build.

Public API:
    plan_build(repo, settings=None) -> BuildPlan
    plan_exec(repo, command, settings=None) -> ExecPlan
"""

__version__ = "0.1.0"

from buildplan.pipeline import BuildPlan, ExecPlan, plan_build, plan_exec  # noqa: E402
from buildplan.repo import LocalSourceRepo, SourceRepo  # noqa: E402

__all__ = [
    "__version__",
    "plan_build",
    "plan_exec",
    "BuildPlan",
    "ExecPlan",
    "LocalSourceRepo",
    "SourceRepo",
]
