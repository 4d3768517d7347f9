"""
Configuration management for the Callout SDK
"""

from .settings import (
    CalloutConfig,
    RequestSettings,
    CredentialSettings,
    DEFAULT_CONFIG_PATHS,
    load_config_from_json,
    load_config_from_file,
    load_default_config,
)

__all__ = [
    'CalloutConfig',
    'RequestSettings',
    'CredentialSettings',
    'DEFAULT_CONFIG_PATHS',
    'load_config_from_json',
    'load_config_from_file',
    'load_default_config',
]
