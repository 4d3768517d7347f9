"""
Callout SDK
Authenticated REST callouts through named credentials
"""

from .version import __version__
from .types import (
    HttpVerb,
    PatchPolicy,
    OutboundRequest,
    InboundResponse,
    Callout,
    DEFAULT_HEADERS,
)
from .exceptions import (
    CalloutSDKError,
    ValidationError,
    CredentialNotFoundError,
    AuthenticationError,
    ConfigurationError,
)
from .request_builder import RequestBuilder
from .transport import (
    Transport,
    RequestsTransport,
    TransportSettings,
    get_default_transport,
)
from .credentials import (
    AuthPolicy,
    NoAuth,
    BasicAuth,
    BearerTokenAuth,
    Ed25519JwtAuth,
    NamedCredential,
    ResolvedEndpoint,
    CredentialRegistry,
    get_default_registry,
)
from .client import (
    RestClient,
    make_api_call,
    send_callout,
)
from .config import (
    CalloutConfig,
    load_config_from_json,
    load_config_from_file,
    load_default_config,
)
from .jobs import (
    WorkUnitJob,
    ScopeOutcome,
    JobSummary,
    CalloutStatusJob,
    run_job,
)

__all__ = [
    '__version__',
    # Types
    'HttpVerb',
    'PatchPolicy',
    'OutboundRequest',
    'InboundResponse',
    'Callout',
    'DEFAULT_HEADERS',
    # Exceptions
    'CalloutSDKError',
    'ValidationError',
    'CredentialNotFoundError',
    'AuthenticationError',
    'ConfigurationError',
    # Request assembly and transport
    'RequestBuilder',
    'Transport',
    'RequestsTransport',
    'TransportSettings',
    'get_default_transport',
    # Named credentials
    'AuthPolicy',
    'NoAuth',
    'BasicAuth',
    'BearerTokenAuth',
    'Ed25519JwtAuth',
    'NamedCredential',
    'ResolvedEndpoint',
    'CredentialRegistry',
    'get_default_registry',
    # Client
    'RestClient',
    'make_api_call',
    'send_callout',
    # Configuration
    'CalloutConfig',
    'load_config_from_json',
    'load_config_from_file',
    'load_default_config',
    # Jobs
    'WorkUnitJob',
    'ScopeOutcome',
    'JobSummary',
    'CalloutStatusJob',
    'run_job',
]
