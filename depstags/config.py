#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path
from typing import Optional

import logging
import sys

import yaml

from .domain.tags_spec import TagsFormatSpec, TagsKind
from .exit_codes import ConfigError

logger = logging.getLogger("depstags")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']

# Environment variables that map to a single nested setting
ENV_SHORTCUTS = {
    'DEPSTAGS_CTAGS': ('ctags', 'executable'),
    'DEPSTAGS_CACHE_DIR': ('tags', 'cache_dir'),
    'DEPSTAGS_WORKERS': ('general', 'workers'),
    'DEPSTAGS_LOG_LEVEL': ('logging', 'level'),
}


def get_config_dir() -> Path:
    return Path.home() / '.depstags'


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. DEPSTAGS_CONFIG environment variable
    2. ~/.depstags/config.{json,toml,yaml,yml}
    """
    if 'DEPSTAGS_CONFIG' in os.environ:
        path = Path(os.environ['DEPSTAGS_CONFIG']).expanduser()
        if path.exists():
            return path

    config_dir = get_config_dir()
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists() and path.stat().st_size > 0:
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def configure_logging(config: Optional[dict] = None, verbose: bool = False) -> None:
    """Configure the package logger from the ``logging`` config section."""
    section = (config or get_default_config()).get('logging', {})
    level_name = 'DEBUG' if verbose else str(section.get('level', 'INFO')).upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(section.get('format', '%(levelname)s: %(message)s')))

    logger.handlers = [handler]
    logger.setLevel(level)
    logger.propagate = False


def load_config():
    """Load configuration from file.

    Raises:
        ConfigError: if the config file exists but cannot be parsed
    """
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    if config_path.exists():
        try:
            if config_path.suffix.lower() in ['.toml']:
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                # Default to JSON format
                with open(config_path, 'r') as f:
                    file_config = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"Error loading config from {config_path}: {e}")

        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")

        config = merge_configs(config, file_config)
        logger.debug(f"Loaded configuration from {config_path}")

    return apply_env_overrides(config)


def save_config(config, config_path: Optional[Path] = None) -> Path:
    """Save configuration to file (JSON, or YAML for .yaml/.yml paths)."""
    config_path = Path(config_path) if config_path else get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    if config_path.suffix.lower() == '.toml':
        # tomllib is read-only, keep the data but write it as JSON
        logger.warning("Cannot write TOML configuration. Saving as JSON instead.")
        config_path = config_path.with_suffix('.json')

    with open(config_path, 'w') as f:
        if config_path.suffix.lower() in ['.yaml', '.yml']:
            yaml.safe_dump(config, f, default_flow_style=False)
        else:
            json.dump(config, f, indent=2)

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def get_default_config():
    """Get default configuration."""
    return {
        "general": {
            "workers": 4,
        },
        "tags": {
            "kind": "vi",
            "vi_tags": "tags.vi",
            "emacs_tags": "tags.emacs",
            "cache_dir": str(get_config_dir() / 'cache'),
        },
        "ctags": {
            "executable": "ctags",
            "options": [],
            "timeout_seconds": 600,
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s",
        },
    }


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def _typed(value: str):
    if value.lower() in ('true', 'yes', 'on'):
        return True
    if value.lower() in ('false', 'no', 'off'):
        return False
    if value.isdigit():
        return int(value)
    return value


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.

    Besides the shortcuts in ENV_SHORTCUTS, variables follow the pattern
    DEPSTAGS_SECTION_KEY, e.g. DEPSTAGS_TAGS_KIND=emacs.
    """
    env_prefix = "DEPSTAGS_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == 'DEPSTAGS_CONFIG':
            continue

        if env_key in ENV_SHORTCUTS:
            section, key = ENV_SHORTCUTS[env_key]
            config.setdefault(section, {})[key] = _typed(value)
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        current_level = config
        i = 0
        while i < len(key_parts):
            # Longest config key that is a prefix of the remaining parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i:i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key is None:
                break

            if i + best_match_len == len(key_parts):
                # Never replace a whole section with a scalar
                if not isinstance(current_level[matched_key], dict):
                    current_level[matched_key] = _typed(value)
                break

            if not isinstance(current_level[matched_key], dict):
                break
            current_level = current_level[matched_key]
            i += best_match_len

    return config


def tags_spec_from_config(config: dict, kind: Optional[str] = None) -> TagsFormatSpec:
    """
    Build the TagsFormatSpec for this run.

    Args:
        config: Loaded configuration
        kind: Tags kind from the command line, overrides the config

    Raises:
        ConfigError: for an unknown kind or identical vi/emacs names
    """
    section = config.get('tags', {})
    return TagsFormatSpec(
        kind=TagsKind.parse(kind or section.get('kind', 'vi')),
        vi_tags=str(section.get('vi_tags', 'tags.vi')),
        emacs_tags=str(section.get('emacs_tags', 'tags.emacs')),
    )


def get_cache_dir(config: dict) -> Path:
    return Path(config.get('tags', {}).get('cache_dir', get_config_dir() / 'cache')).expanduser()
