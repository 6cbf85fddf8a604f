"""
Centralized constants for lockkeeper.

This module defines immutable values used across lockkeeper, including
the recognized npm/yarn file names, dependency buckets, registry prefixes,
helper settings, and logging formats. All values are intended to be
treated as read-only.
"""

from typing import Final, Sequence

# ---------------------------------------------------------------------------
# Ecosystem
# ---------------------------------------------------------------------------

#: Package manager family reported on every dependency record.
ECOSYSTEM: Final[str] = "npm_and_yarn"

#: Manifest buckets that declare dependencies, in extraction order.
DEPENDENCY_TYPES: Final[Sequence[str]] = (
    "dependencies",
    "devDependencies",
    "optionalDependencies",
)

# ---------------------------------------------------------------------------
# Dependency files
# ---------------------------------------------------------------------------

#: Suffix identifying manifest documents.
MANIFEST_FILENAME: Final[str] = "package.json"

#: Exact name of the npm lockfile.
PACKAGE_LOCK_FILENAME: Final[str] = "package-lock.json"

#: Exact name of the yarn lockfile.
YARN_LOCK_FILENAME: Final[str] = "yarn.lock"

#: Dependency file type for manifests that must not be extracted.
PATH_DEPENDENCY_TYPE: Final[str] = "path_dependency"

#: Directories never searched when collecting manifests.
IGNORED_DIRECTORIES: Final[Sequence[str]] = ("node_modules", ".git")

# ---------------------------------------------------------------------------
# Requirements and sources
# ---------------------------------------------------------------------------

#: Requirement used in place of an empty manifest requirement.
WILDCARD_REQUIREMENT: Final[str] = "*"

#: Prefix marking a filesystem-local requirement.
LOCAL_PATH_PREFIX: Final[str] = "file:"

#: Separator marking a URL requirement.
SCHEME_SEPARATOR: Final[str] = "://"

#: Ref reported for git dependencies that do not pin one.
DEFAULT_GIT_REF: Final[str] = "master"

#: Template for the repository URL of a git dependency.
GITHUB_URL_TEMPLATE: Final[str] = "https://github.com/{username}/{repo}"

#: Registries that need no provenance annotation.
CENTRAL_REGISTRIES: Final[Sequence[str]] = (
    "https://registry.npmjs.org",
    "https://registry.yarnpkg.com",
)

#: Marker separating a registry base from a scoped tarball path.
SCOPED_TARBALL_MARKER: Final[str] = "/~/"

# ---------------------------------------------------------------------------
# Yarn helper
# ---------------------------------------------------------------------------

#: Default command used to run the yarn.lock parsing helper.
DEFAULT_YARN_HELPER_COMMAND: Final[str] = "node helpers/yarn/bin/run.js"

#: Helper function name that parses a yarn.lock.
YARN_HELPER_PARSE_FUNCTION: Final[str] = "parse"

#: Helper error raised when workspaces depend on private packages.
WORKSPACES_REQUIRE_PRIVATE_PROJECTS: Final[str] = "workspacesRequirePrivateProjects"

#: Literal substituted for ``{{ ... }}`` templating placeholders.
TEMPLATE_PLACEHOLDER_REPLACEMENT: Final[str] = "something"

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading dependency files.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
