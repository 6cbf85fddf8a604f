"""Configuration file loader for lockkeeper.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``lockkeeper.toml``: settings under ``[lockkeeper]`` table
- ``pyproject.toml``: settings under ``[tool.lockkeeper]`` table

Discovery order:

1. Explicit path from ``--config`` or ``LOCKKEEPER_CONFIG``
2. ``lockkeeper.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.lockkeeper]`` section

Example (``lockkeeper.toml``)::

    [lockkeeper]
    yarn_helper_command = "node /opt/helpers/yarn/bin/run.js"
    extra_central_registries = ["https://npm.internal.example"]
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass, field

from lockkeeper.exceptions import ConfigError
from lockkeeper.utils.logger import get_logger
from lockkeeper.constants import CENTRAL_REGISTRIES, DEFAULT_YARN_HELPER_COMMAND

logger = get_logger("config")


@dataclass
class LockKeeperConfig:
    """Parsed and validated lockkeeper configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        yarn_helper_command: Command line that starts the yarn.lock helper.
        extra_central_registries: Registry URL prefixes treated like the
            central npm registry, in addition to the built-in ones.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    yarn_helper_command: str = DEFAULT_YARN_HELPER_COMMAND
    extra_central_registries: List[str] = field(default_factory=list)

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    @property
    def central_registries(self) -> Tuple[str, ...]:
        """Built-in central registries followed by configured extras."""
        return tuple(CENTRAL_REGISTRIES) + tuple(self.extra_central_registries)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging."""
        return {
            "yarn_helper_command": self.yarn_helper_command,
            "extra_central_registries": list(self.extra_central_registries),
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    lockkeeper_toml = cwd / "lockkeeper.toml"
    if lockkeeper_toml.is_file():
        logger.debug("Found lockkeeper.toml: %s", lockkeeper_toml)
        return lockkeeper_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_lockkeeper_section(pyproject_toml):
        logger.debug("Found [tool.lockkeeper] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_lockkeeper_section(path: Path) -> bool:
    """Check if pyproject.toml contains a [tool.lockkeeper] section.

    Unreadable files count as "no section".
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return "lockkeeper" in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> LockKeeperConfig:
    """Load and validate lockkeeper configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`LockKeeperConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return LockKeeperConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("lockkeeper", {})
    else:
        section = raw.get("lockkeeper", {})

    if not section:
        logger.debug("Config file found but no lockkeeper section, using defaults")
        return LockKeeperConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is invalid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> LockKeeperConfig:
    """Parse and validate a ``[lockkeeper]`` or ``[tool.lockkeeper]`` table.

    Raises:
        ConfigError: Unknown keys or incorrect types.
    """
    config = LockKeeperConfig()

    known_top = {
        "yarn_helper_command",
        "extra_central_registries",
    }

    unknown_top = set(section.keys()) - known_top
    if unknown_top:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown_top))}",
            config_path=config_path,
        )

    if "yarn_helper_command" in section:
        val = section["yarn_helper_command"]
        if not isinstance(val, str) or not val.strip():
            raise ConfigError(
                "yarn_helper_command must be a non-empty string",
                config_path=config_path,
                option="yarn_helper_command",
            )
        config.yarn_helper_command = val

    if "extra_central_registries" in section:
        val = section["extra_central_registries"]
        if not isinstance(val, list) or not all(isinstance(v, str) for v in val):
            raise ConfigError(
                "extra_central_registries must be a list of strings",
                config_path=config_path,
                option="extra_central_registries",
            )
        config.extra_central_registries = list(val)

    return config
