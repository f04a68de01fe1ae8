"""
spockscan.config.loader - Load ``.spockscan.toml`` with defaults and overrides.

Precedence, lowest first: DEFAULT_CONFIG, the config file, then
``SPOCKSCAN_<SECTION>_<KEY>`` environment variables.
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import ParseError
from tomlkit.toml_document import TOMLDocument

from spockscan.buildtool import BuildTool, detect_build_tool
from spockscan.config.defaults import CONFIG_FILE_NAME, DEFAULT_CONFIG, ENV_PREFIX
from spockscan.errors import ConfigError


def parse_toml_document(content: str) -> TOMLDocument:
    """Parse TOML text into a style-preserving tomlkit document.

    Raises:
        ConfigError: If the text is not valid TOML.
    """
    try:
        return tomlkit.parse(content)
    except ParseError as e:
        raise ConfigError(f"Invalid TOML: {e}") from e


def parse_toml(content: str) -> dict[str, Any]:
    """Parse TOML text into plain Python values."""
    return parse_toml_document(content).unwrap()


def find_config_file(start: Path) -> Path | None:
    """Find ``.spockscan.toml`` in ``start`` or any parent directory.

    Args:
        start: Directory to start searching from.

    Returns:
        Path to the config file, or None if not found.
    """
    current = start.resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``override`` into a copy of ``base``.

    Nested tables are merged key by key; any other value in ``override``
    replaces the base value.
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _try_parse_env_value(value: str) -> Any:
    """Parse an environment value as JSON list/object, boolean, or string."""
    stripped = value.strip()
    if stripped.startswith(("[", "{")):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            return value
    if stripped.lower() == "true":
        return True
    if stripped.lower() == "false":
        return False
    return value


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply ``SPOCKSCAN_<SECTION>_<KEY>`` variables to a config dict.

    The first segment after the prefix names the section; the rest, lower
    cased, is the key (``SPOCKSCAN_RESULTS_BUILD_TOOL`` sets
    ``results.build_tool``).
    """
    for name, raw in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        section, _, key = name[len(ENV_PREFIX) :].lower().partition("_")
        if not section or not key:
            continue
        table = config.setdefault(section, {})
        if isinstance(table, dict):
            table[key] = _try_parse_env_value(raw)
    return config


def load_config(config_path: Path) -> dict[str, Any]:
    """Load a config file merged over the defaults.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e

    config = merge_configs(DEFAULT_CONFIG, parse_toml(content))
    return _apply_env_overrides(config)


def get_config(config_path: Path | None = None, start: Path | None = None) -> dict[str, Any]:
    """Load the effective configuration.

    Args:
        config_path: Explicit config file; searched for when None.
        start: Directory to start the search from (default: cwd).

    Returns:
        Configuration dict; defaults plus env overrides when no file exists.
    """
    if config_path is None:
        config_path = find_config_file(start or Path.cwd())
    if config_path is not None:
        return load_config(config_path)
    return _apply_env_overrides(copy.deepcopy(DEFAULT_CONFIG))


def resolve_build_tool(config: dict[str, Any], workspace: Path) -> BuildTool:
    """Build tool from ``results.build_tool``, detecting it for ``auto``.

    Raises:
        ConfigError: If the configured value is not a known build tool.
    """
    value = str(config.get("results", {}).get("build_tool", "auto")).lower()
    if value == "auto":
        return detect_build_tool(workspace) or BuildTool.GRADLE
    try:
        return BuildTool(value)
    except ValueError:
        choices = ", ".join(["auto", *(tool.value for tool in BuildTool)])
        raise ConfigError(f"Unknown build tool '{value}' (expected one of: {choices})") from None
