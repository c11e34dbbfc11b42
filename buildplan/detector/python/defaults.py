"""File names and markers for the Python platform."""

PLATFORM_NAME = "python"

REQUIREMENTS_FILE = "requirements.txt"
PYPROJECT_FILE = "pyproject.toml"
RUNTIME_FILE = "runtime.txt"
RUNTIME_VERSION_PREFIX = "python-"

SOURCE_FILE_PATTERN = "*.py"
NOTEBOOK_FILE_PATTERN = "*.ipynb"

CONDA_ENVIRONMENT_FILES: tuple[str, ...] = ("environment.yml", "environment.yaml")

# Marker files checked in the app directory, in lookup order.
LOCK_FILES: tuple[str, ...] = (
    "uv.lock",
    "poetry.lock",
    "Pipfile.lock",
) + CONDA_ENVIRONMENT_FILES
