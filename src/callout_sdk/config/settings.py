"""
Configuration loading for the Callout SDK

Reads transport, request and named-credential settings from JSON and builds
the registry, transport and request builder they describe.
"""

import os
import json
import logging
from typing import Any, Dict, Optional, Union
from dataclasses import dataclass, field
from pathlib import Path

from ..credentials.auth import create_auth_policy
from ..credentials.registry import CredentialRegistry, NamedCredential, CONFIG_FILE_ENV_VAR
from ..exceptions import CalloutSDKError, ConfigurationError
from ..request_builder import RequestBuilder
from ..transport import RequestsTransport, TransportSettings
from ..types import PatchPolicy

logger = logging.getLogger(__name__)

# Fields whose value may be read from an environment variable via "<field>_env"
SECRET_FIELDS = ('password', 'token', 'private_key')

DEFAULT_CONFIG_PATHS = [
    Path("callout-config.json"),
    Path("config/callout-config.json"),
]


@dataclass
class RequestSettings:
    """Request assembly settings"""
    patch_policy: PatchPolicy = PatchPolicy.METHOD_OVERRIDE
    default_headers: Optional[Dict[str, str]] = None


@dataclass
class CredentialSettings:
    """One named credential as written in configuration"""
    base_url: str
    auth: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CalloutConfig:
    """Complete SDK configuration"""
    transport: TransportSettings = field(default_factory=TransportSettings)
    request: RequestSettings = field(default_factory=RequestSettings)
    credentials: Dict[str, CredentialSettings] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CalloutConfig':
        """Build configuration from a parsed mapping"""
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration root must be an object", "INVALID_FORMAT")

        try:
            transport = TransportSettings(**data.get('transport', {}))

            request_data = data.get('request', {})
            request = RequestSettings(
                patch_policy=PatchPolicy(request_data.get('patch_policy', PatchPolicy.METHOD_OVERRIDE.value)),
                default_headers=request_data.get('default_headers')
            )

            credentials = {
                alias: CredentialSettings(
                    base_url=entry['base_url'],
                    auth=dict(entry.get('auth') or {})
                )
                for alias, entry in data.get('credentials', {}).items()
            }
        except CalloutSDKError as e:
            raise ConfigurationError(f"Invalid configuration: {e}", "INVALID_FORMAT")
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Invalid configuration format: {e}", "INVALID_FORMAT")

        return cls(transport=transport, request=request, credentials=credentials)

    @classmethod
    def from_json(cls, json_string: str) -> 'CalloutConfig':
        """Load configuration from a JSON string"""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Failed to parse configuration JSON: {e}", "PARSE_ERROR")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'CalloutConfig':
        """Load configuration from a JSON file"""
        try:
            with open(Path(file_path), 'r', encoding='utf-8') as f:
                json_string = f.read()
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {e}", "FILE_ERROR")
        logger.debug(f"Loaded callout configuration from {file_path}")
        return cls.from_json(json_string)

    @classmethod
    def load_default(cls) -> 'CalloutConfig':
        """Load from CALLOUT_CONFIG_FILE or the first default path that exists"""
        env_path = os.environ.get(CONFIG_FILE_ENV_VAR)
        if env_path:
            return cls.from_file(env_path)

        for path in DEFAULT_CONFIG_PATHS:
            if path.exists():
                return cls.from_file(path)

        raise ConfigurationError("Default configuration file not found", "FILE_NOT_FOUND")

    def build_registry(self) -> CredentialRegistry:
        """Create a registry holding every configured credential"""
        registry = CredentialRegistry()
        for alias, settings in self.credentials.items():
            try:
                auth = create_auth_policy(_resolve_secrets(alias, settings.auth))
                registry.register(NamedCredential(alias, settings.base_url, auth))
            except ConfigurationError:
                raise
            except CalloutSDKError as e:
                raise ConfigurationError(
                    f"Invalid credential '{alias}': {e}",
                    "INVALID_CREDENTIAL",
                    {'alias': alias}
                )
            except KeyError as e:
                raise ConfigurationError(
                    f"Credential '{alias}' is missing auth field {e}",
                    "INVALID_CREDENTIAL",
                    {'alias': alias}
                )
        return registry

    def build_transport(self) -> RequestsTransport:
        """Create a transport with the configured settings"""
        return RequestsTransport(self.transport)

    def build_request_builder(self) -> RequestBuilder:
        """Create a request builder with the configured settings"""
        return RequestBuilder(
            default_headers=self.request.default_headers,
            patch_policy=self.request.patch_policy
        )


def _resolve_secrets(alias: str, auth: Dict[str, Any]) -> Dict[str, Any]:
    """Replace '<field>_env' entries with the environment variable's value."""
    resolved = dict(auth)
    for secret in SECRET_FIELDS:
        env_name = resolved.pop(f"{secret}_env", None)
        if env_name is None:
            continue
        value = os.environ.get(env_name)
        if value is None:
            raise ConfigurationError(
                f"Environment variable {env_name} for credential '{alias}' is not set",
                "MISSING_SECRET",
                {'alias': alias, 'variable': env_name}
            )
        resolved[secret] = value
    return resolved


def load_config_from_json(json_string: str) -> CalloutConfig:
    """Load configuration from a JSON string"""
    return CalloutConfig.from_json(json_string)


def load_config_from_file(file_path: Union[str, Path]) -> CalloutConfig:
    """Load configuration from a file"""
    return CalloutConfig.from_file(file_path)


def load_default_config() -> CalloutConfig:
    """Load the default configuration"""
    return CalloutConfig.load_default()
