#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

from .exit_codes import ConfigError

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("synctivity")

CONFIG_FILENAMES = ['config.yaml', 'config.yml', 'config.toml', 'config.json']


def get_base_dir():
    """Get the synctivity base directory.

    Holds the configuration file and, by default, the target repository.
    SYNCTIVITY_HOME overrides the default of ~/.synctivity.
    """
    if 'SYNCTIVITY_HOME' in os.environ:
        return Path(os.environ['SYNCTIVITY_HOME']).expanduser()
    return Path.home() / '.synctivity'


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. SYNCTIVITY_CONFIG environment variable
    2. config.{yaml,yml,toml,json} in the base directory
    """
    # Check for environment variable override
    if 'SYNCTIVITY_CONFIG' in os.environ:
        path = Path(os.environ['SYNCTIVITY_CONFIG']).expanduser()
        if path.exists():
            return path

    base_dir = get_base_dir()
    for filename in CONFIG_FILENAMES:
        path = base_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path for saving
    return base_dir / 'config.yaml'


def get_target_path(config, output_dir=None):
    """Resolve where the target repository lives.

    With an explicit output directory the target is a child named after
    sync.target_name; otherwise it is the `repo` directory in the base dir.
    """
    if output_dir is not None:
        return Path(output_dir).expanduser() / config['sync']['target_name']
    return get_base_dir() / 'repo'


def load_config():
    """Load configuration from file."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    # Load from file if it exists
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
            raise ConfigError(f"Error loading config from {config_path}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")

        # Merge file config with defaults
        config = merge_configs(config, file_config)

    # Apply environment variable overrides
    config = apply_env_overrides(config)

    return config


def save_config(config, config_path=None):
    """Save configuration to file."""
    config_path = Path(config_path) if config_path else get_config_path()

    if config_path.suffix.lower() in ['.toml']:
        raise ConfigError("TOML configuration files are read-only; use YAML or JSON")

    # Create directory if it doesn't exist
    config_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        if config_path.suffix.lower() in ['.yaml', '.yml']:
            with open(config_path, 'w') as f:
                yaml.safe_dump(config, f, default_flow_style=False)
        else:
            # Default to JSON format
            with open(config_path, 'w') as f:
                json.dump(config, f, indent=2)
    except OSError as e:
        raise ConfigError(f"Error saving config to {config_path}: {e}") from e

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def get_default_config():
    """Get default configuration."""
    return {
        "author": {
            "name": "",
            "emails": []
        },
        "sync": {
            "target_name": "synctivity",  # Reserved directory name of the target repository
            "initial_branch": "main",
            "signing": "identity"  # identity | original
        },
        "git": {
            "timeout_seconds": None  # Seconds per git call; None never times out
        },
        "logging": {
            "level": "WARNING",
            "format": "%(levelname)s: %(message)s"
        }
    }


def configure_logging(config, debug=False):
    """Apply the logging section of the configuration."""
    root = logging.getLogger()
    if debug:
        level = logging.DEBUG
        fmt = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    else:
        level_name = str(config.get('logging', {}).get('level', 'WARNING')).upper()
        level = getattr(logging, level_name, None)
        if not isinstance(level, int):
            raise ConfigError(f"Unknown logging level: {level_name}")
        fmt = config.get('logging', {}).get('format', '%(levelname)s: %(message)s')

    root.setLevel(level)
    for handler in root.handlers:
        handler.setFormatter(logging.Formatter(fmt))


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
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: SYNCTIVITY_SECTION_KEY
    For example: SYNCTIVITY_SYNC_TARGET_NAME=activity
    """
    env_prefix = "SYNCTIVITY_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix):
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        # Convert value
        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts_from_key = config_key.split('_')
                if key_parts[i : i + len(config_key_parts_from_key)] == config_key_parts_from_key:
                    if len(config_key_parts_from_key) > best_match_len:
                        best_match_len = len(config_key_parts_from_key)
                        matched_key = config_key

            if matched_key:
                # If we are at the end of the env var, we have found the key to set
                if i + best_match_len == len(key_parts):
                    current_level[matched_key] = typed_value
                    break

                # Otherwise, we descend into the dictionary
                if isinstance(current_level[matched_key], dict):
                    current_level = current_level[matched_key]
                    i += best_match_len
                else:
                    # Path conflict, e.g., env var is longer but we found a non-dict value
                    break
            else:
                # No match found
                break

    return config
