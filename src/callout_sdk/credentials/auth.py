"""
Authentication policies for named credentials

Each policy turns the credential's secret material into a requests auth
handler that the transport attaches to the outgoing request. Secrets never
enter OutboundRequest.headers.
"""

import time
import uuid
import base64
import binascii
import logging
from typing import Any, Callable, Dict, Optional

import jwt
import requests
from requests.auth import AuthBase, HTTPBasicAuth
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from ..exceptions import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)

ED25519_PRIVATE_KEY_LENGTH = 32


class AuthPolicy:
    """Base class for credential auth policies"""

    auth_type = "none"

    def build_auth(self) -> Optional[AuthBase]:
        """Return a requests auth handler, or None for anonymous access."""
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class NoAuth(AuthPolicy):
    """Anonymous access"""
    pass


class BasicAuth(AuthPolicy):
    """HTTP basic authentication"""

    auth_type = "basic"

    def __init__(self, username: str, password: str):
        if not username:
            raise ValidationError("Basic auth username cannot be empty")
        self.username = username
        self._password = password

    def build_auth(self) -> AuthBase:
        return HTTPBasicAuth(self.username, self._password)

    def __repr__(self) -> str:
        return f"BasicAuth(username={self.username!r})"


class BearerToken(AuthBase):
    """Attaches an Authorization: Bearer header"""

    def __init__(self, token_source: Callable[[], str]):
        self.token_source = token_source

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        request.headers['Authorization'] = f"Bearer {self.token_source()}"
        return request


class BearerTokenAuth(AuthPolicy):
    """Static bearer token"""

    auth_type = "bearer"

    def __init__(self, token: str):
        if not token:
            raise ValidationError("Bearer token cannot be empty")
        self._token = token

    def build_auth(self) -> AuthBase:
        return BearerToken(lambda: self._token)

    def __repr__(self) -> str:
        return "BearerTokenAuth(token=***)"


def parse_private_key(value: str, key_format: str = 'hex') -> bytes:
    """
    Parse raw Ed25519 private key material.

    Args:
        value: Encoded key
        key_format: 'hex' or 'base64'

    Returns:
        bytes: 32-byte private key

    Raises:
        AuthenticationError: If the key cannot be decoded or has the wrong length
    """
    try:
        if key_format == 'hex':
            key = bytes.fromhex(value.strip())
        elif key_format == 'base64':
            key = base64.b64decode(value.strip(), validate=True)
        else:
            raise AuthenticationError(
                f"Unsupported private key format: {key_format}",
                "INVALID_KEY_FORMAT"
            )
    except (ValueError, binascii.Error) as e:
        raise AuthenticationError(f"Failed to decode private key: {e}", "INVALID_PRIVATE_KEY")

    if len(key) != ED25519_PRIVATE_KEY_LENGTH:
        raise AuthenticationError(
            f"Private key must be exactly {ED25519_PRIVATE_KEY_LENGTH} bytes",
            "INVALID_PRIVATE_KEY_LENGTH"
        )
    return key


class Ed25519JwtAuth(AuthPolicy):
    """
    JWT bearer assertion signed with an Ed25519 key.

    A fresh token is minted for every request, so long-lived clients never
    send an expired assertion.
    """

    auth_type = "ed25519_jwt"

    def __init__(
        self,
        issuer: str,
        audience: str,
        private_key: bytes,
        subject: Optional[str] = None,
        key_id: Optional[str] = None,
        lifetime_seconds: int = 300,
        clock: Callable[[], float] = time.time
    ):
        if not issuer:
            raise ValidationError("JWT issuer cannot be empty")
        if not audience:
            raise ValidationError("JWT audience cannot be empty")
        if lifetime_seconds <= 0:
            raise ValidationError("JWT lifetime must be positive")
        if not isinstance(private_key, bytes) or len(private_key) != ED25519_PRIVATE_KEY_LENGTH:
            raise AuthenticationError(
                f"Private key must be exactly {ED25519_PRIVATE_KEY_LENGTH} bytes",
                "INVALID_PRIVATE_KEY_LENGTH"
            )

        self.issuer = issuer
        self.audience = audience
        self.subject = subject or issuer
        self.key_id = key_id
        self.lifetime_seconds = lifetime_seconds
        self._clock = clock
        self._signing_key = Ed25519PrivateKey.from_private_bytes(private_key)

    def mint_token(self) -> str:
        """Create a signed compact JWS."""
        now = int(self._clock())
        claims = {
            'iss': self.issuer,
            'sub': self.subject,
            'aud': self.audience,
            'iat': now,
            'exp': now + self.lifetime_seconds,
            'jti': uuid.uuid4().hex,
        }

        headers = {'kid': self.key_id} if self.key_id else None
        token = jwt.encode(claims, self._signing_key, algorithm='EdDSA', headers=headers)
        logger.debug(f"Minted JWT assertion for issuer {self.issuer}")
        return token

    def build_auth(self) -> AuthBase:
        return BearerToken(self.mint_token)

    def __repr__(self) -> str:
        return f"Ed25519JwtAuth(issuer={self.issuer!r}, audience={self.audience!r})"


def create_auth_policy(settings: Optional[Dict[str, Any]]) -> AuthPolicy:
    """
    Build an auth policy from a configuration mapping.

    Args:
        settings: Mapping with a 'type' key ('none', 'basic', 'bearer',
            'ed25519_jwt') plus the type's fields

    Returns:
        AuthPolicy: Configured policy
    """
    if not settings:
        return NoAuth()

    auth_type = settings.get('type', 'none')
    if auth_type == 'none':
        return NoAuth()
    if auth_type == 'basic':
        return BasicAuth(settings['username'], settings.get('password', ''))
    if auth_type == 'bearer':
        return BearerTokenAuth(settings['token'])
    if auth_type == 'ed25519_jwt':
        private_key = parse_private_key(
            settings['private_key'],
            settings.get('key_format', 'hex')
        )
        return Ed25519JwtAuth(
            issuer=settings['issuer'],
            audience=settings['audience'],
            private_key=private_key,
            subject=settings.get('subject'),
            key_id=settings.get('key_id'),
            lifetime_seconds=settings.get('lifetime_seconds', 300)
        )

    raise ValidationError(f"Unsupported auth type: {auth_type}")
