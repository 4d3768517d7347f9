"""
Named credentials for the Callout SDK

Resolves credential aliases to base URLs and attaches the authentication each
alias implies.
"""

from .auth import (
    AuthPolicy,
    NoAuth,
    BasicAuth,
    BearerToken,
    BearerTokenAuth,
    Ed25519JwtAuth,
    create_auth_policy,
    parse_private_key,
)
from .registry import (
    NamedCredential,
    ResolvedEndpoint,
    CredentialRegistry,
    CONFIG_FILE_ENV_VAR,
    get_default_registry,
    reset_default_registry,
)

__all__ = [
    'AuthPolicy',
    'NoAuth',
    'BasicAuth',
    'BearerToken',
    'BearerTokenAuth',
    'Ed25519JwtAuth',
    'create_auth_policy',
    'parse_private_key',
    'NamedCredential',
    'ResolvedEndpoint',
    'CredentialRegistry',
    'CONFIG_FILE_ENV_VAR',
    'get_default_registry',
    'reset_default_registry',
]
