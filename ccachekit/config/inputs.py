"""
Option handling for ccachekit.

Options are plain strings until they are parsed, the way a CI runner hands
them over. Values are layered, later sources winning:

1. Built-in defaults
2. YAML configuration file (``--config``)
3. Runner inputs from the environment (``INPUT_<NAME>``, e.g. ``INPUT_RESTORE-KEYS``)
4. Command-line flags

Example:
    >>> inputs = load_inputs(env={"INPUT_VARIANT": "sccache"})
    >>> inputs.variant
    <Variant.SCCACHE: 'sccache'>
    >>> inputs.max_size
    '500M'
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from ccachekit.caching.keys import parse_restore_keys
from ccachekit.core.directory import get_default_store_dir
from ccachekit.core.exceptions import ConfigError
from ccachekit.packages.catalog import Variant
from ccachekit.packages.resolver import parse_variant
from ccachekit.packages.strategy import InstallPolicy

logger = logging.getLogger(__name__)

OPTION_DEFAULTS: Dict[str, str] = {
    "variant": "ccache",
    "install": "detect",
    "key": "",
    "restore-keys": "",
    "append-timestamp": "true",
    "restore": "true",
    "save": "true",
    "max-size": "500M",
    "create-symlink": "false",
    "update-package-index": "false",
    "evict-old-files": "",
    "store-dir": "",
}

TRUE_VALUES = ("true", "True", "TRUE")
FALSE_VALUES = ("false", "False", "FALSE")


@dataclass
class ActionInputs:
    """Parsed options."""

    variant: Variant = Variant.CCACHE
    install: InstallPolicy = InstallPolicy.DETECT
    key: str = ""
    restore_keys: List[str] = field(default_factory=list)
    append_timestamp: bool = True
    restore: bool = True
    save: bool = True
    max_size: str = "500M"
    create_symlink: bool = False
    update_package_index: bool = False
    evict_old_files: str = ""
    store_dir: Optional[Path] = None


def parse_bool(value: str, name: str) -> bool:
    """
    Parse a boolean option.

    Raises:
        ConfigError: If the value is not one of the accepted spellings
    """
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigError(
        f"Option '{name}' must be a boolean (true|True|TRUE|false|False|FALSE), "
        f"got '{value}'"
    )


def _normalize_name(name: str) -> str:
    normalized = str(name).strip().lower().replace("_", "-")
    if normalized not in OPTION_DEFAULTS:
        raise ConfigError(f"Unknown option '{name}'")
    return normalized


def _to_option_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return "\n".join(str(v) for v in value)
    return str(value)


def read_config_file(config_file: Path) -> Dict[str, str]:
    """
    Read options from a YAML mapping.

    Keys may be written with hyphens or underscores; lists are accepted for
    ``restore-keys``.

    Raises:
        ConfigError: If the file is missing, not valid YAML, not a mapping,
            or names an unknown option
    """
    config_file = Path(config_file)
    if not config_file.exists():
        raise ConfigError(f"Configuration file not found: {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {config_file}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {config_file} must contain a mapping")

    values = {}
    for name, value in data.items():
        name = _normalize_name(name)
        # YAML 1.1 reads a bare yes/no as a boolean
        if name == "install" and isinstance(value, bool):
            value = "yes" if value else "no"
        values[name] = _to_option_string(value)
    return values


def read_env_inputs(env: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Read non-empty ``INPUT_<NAME>`` variables for the known options."""
    env = os.environ if env is None else env
    values = {}
    for name in OPTION_DEFAULTS:
        value = env.get(f"INPUT_{name.upper()}")
        if value:
            values[name] = value
    return values


def parse_inputs(raw: Mapping[str, str]) -> ActionInputs:
    """
    Convert raw option strings into :class:`ActionInputs`.

    Raises:
        ConfigError: If any value cannot be parsed
    """
    values = dict(OPTION_DEFAULTS)
    values.update(raw)

    store_dir = values["store-dir"].strip()

    return ActionInputs(
        variant=parse_variant(values["variant"]),
        install=InstallPolicy.parse(values["install"]),
        key=values["key"],
        restore_keys=parse_restore_keys(values["restore-keys"]),
        append_timestamp=parse_bool(values["append-timestamp"], "append-timestamp"),
        restore=parse_bool(values["restore"], "restore"),
        save=parse_bool(values["save"], "save"),
        max_size=values["max-size"].strip(),
        create_symlink=parse_bool(values["create-symlink"], "create-symlink"),
        update_package_index=parse_bool(
            values["update-package-index"], "update-package-index"
        ),
        evict_old_files=values["evict-old-files"].strip(),
        store_dir=Path(store_dir).expanduser() if store_dir else get_default_store_dir(),
    )


def load_inputs(
    config_file: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ActionInputs:
    """
    Load options from every source and parse them.

    Args:
        config_file: Optional YAML configuration file
        env: Environment mapping (defaults to ``os.environ``)
        overrides: Command-line values; None entries are ignored

    Returns:
        Parsed options

    Raises:
        ConfigError: If a source or a value is invalid
    """
    raw: Dict[str, str] = {}

    if config_file is not None:
        raw.update(read_config_file(config_file))
        logger.debug(f"Loaded options from {config_file}")

    raw.update(read_env_inputs(env))

    for name, value in (overrides or {}).items():
        if value is not None:
            raw[_normalize_name(name)] = _to_option_string(value)

    return parse_inputs(raw)


__all__ = [
    "OPTION_DEFAULTS",
    "ActionInputs",
    "parse_bool",
    "read_config_file",
    "read_env_inputs",
    "parse_inputs",
    "load_inputs",
]
