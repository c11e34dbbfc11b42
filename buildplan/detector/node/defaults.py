"""File names and markers for the Node.js platform."""

PLATFORM_NAME = "nodejs"

PACKAGE_JSON_FILE = "package.json"
SOURCE_FILE_PATTERN = "*.js"

YARN_LOCK_FILE = "yarn.lock"
PNPM_LOCK_FILE = "pnpm-lock.yaml"
PACKAGE_LOCK_FILE = "package-lock.json"

# Marker files checked in the app directory, in lookup order.
LOCK_FILES: tuple[str, ...] = (YARN_LOCK_FILE, PNPM_LOCK_FILE, PACKAGE_LOCK_FILE)

# Lock file → tool that must be on PATH to honour it.
LOCK_FILE_TOOLS: dict[str, str] = {
    YARN_LOCK_FILE: "yarn",
    PNPM_LOCK_FILE: "pnpm",
}
