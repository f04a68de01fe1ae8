"""
spockscan.config - Configuration loading and defaults
"""

from spockscan.config.defaults import CONFIG_FILE_NAME, DEFAULT_CONFIG
from spockscan.config.loader import (
    _apply_env_overrides,
    _try_parse_env_value,
    find_config_file,
    get_config,
    load_config,
    merge_configs,
    parse_toml,
    parse_toml_document,
    resolve_build_tool,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_CONFIG",
    "_apply_env_overrides",
    "_try_parse_env_value",
    "find_config_file",
    "get_config",
    "load_config",
    "merge_configs",
    "parse_toml",
    "parse_toml_document",
    "resolve_build_tool",
]
