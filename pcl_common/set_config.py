from __future__ import annotations

import logging
import os

import toml
import yaml

log = logging.getLogger(__name__)

ENV_PREFIX = "PCLC"


def config_to_env(config: dict):
    for parent_key, sub_config in config.items():
        for sub_key, value in sub_config.items():
            if isinstance(value, (list, dict)):
                continue
            key = f"{ENV_PREFIX}_{parent_key.upper()}_{sub_key.upper()}"
            coalesced_val = os.environ.get(key, value)
            if value != coalesced_val:
                log.info(f"Existing value for {key} found: {coalesced_val}")
            os.environ[key] = str(coalesced_val)
    return os.environ


def load_config(config_file: str, load_to_env: bool = True) -> dict:
    config = dict()
    try:
        with open(config_file) as f:
            if 'toml' in config_file:
                config = toml.load(f)
            elif 'yml' in config_file or 'yaml' in config_file:
                config = yaml.safe_load(f) or dict()
            log.info(f"Loaded config from {config_file}")
    except (OSError, toml.TomlDecodeError, yaml.YAMLError) as error:
        log.error(f"Error loading config {config_file}: {error}")
        log.error("Default values will be used")
    if load_to_env:
        config_to_env(config)
    return config


def get_setting(section: str, key: str, default=None, cast=None):
    """
    Reads a single setting, preferring the PCLC_<SECTION>_<KEY>
        environment variable over the value in the loaded config.
    """
    env_key = f"{ENV_PREFIX}_{section.upper()}_{key.upper()}"
    value = os.environ.get(env_key)
    if value is None:
        value = config.get(section, {}).get(key, default)
    if value is None or cast is None:
        return value
    if cast is bool and isinstance(value, str):
        return value.lower() in ("1", "true", "yes", "on")
    return cast(value)


package_location = os.path.dirname(__file__)
config_file = os.environ.get(f"{ENV_PREFIX}_CONFIG", f"{package_location}/package_config.toml")
log_config_file = os.environ.get(f"{ENV_PREFIX}_LOG_CONFIG", f"{package_location}/log.yml")

config = load_config(config_file)
