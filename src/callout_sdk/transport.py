"""
HTTP transport for outbound callouts

Sends an assembled OutboundRequest with requests and returns the raw
response. The transport performs no retries and never interprets status
codes; network errors propagate as requests exceptions.
"""

import logging
import threading
from http.cookiejar import DefaultCookiePolicy
from typing import Optional, Protocol, runtime_checkable
from dataclasses import dataclass

import requests
from requests.adapters import HTTPAdapter
from requests.auth import AuthBase

from .exceptions import ValidationError
from .types import OutboundRequest, InboundResponse

logger = logging.getLogger(__name__)


@dataclass
class TransportSettings:
    """Transport-wide settings. There is no per-call override."""
    timeout: float = 10.0
    verify_ssl: bool = True
    follow_redirects: bool = False

    def __post_init__(self):
        """Validate transport settings."""
        if self.timeout is None or self.timeout <= 0:
            raise ValidationError("Timeout must be positive")


@runtime_checkable
class Transport(Protocol):
    """Protocol for anything that can send an OutboundRequest"""

    def send(self, request: OutboundRequest, auth: Optional[AuthBase] = None) -> InboundResponse:
        """Send the request and return the raw response"""
        ...


class RequestsTransport:
    """
    Transport backed by a requests session.

    Sessions hold pooled connections; close the transport (or use it as a
    context manager) when done with it.
    """

    def __init__(
        self,
        settings: Optional[TransportSettings] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the transport.

        Args:
            settings: Transport settings (defaults to TransportSettings())
            session: Optional pre-built session
        """
        self.settings = settings or TransportSettings()
        self.session = session if session is not None else self._create_session()

    def _create_session(self) -> requests.Session:
        """Create a session without retries, default headers or stored cookies."""
        session = requests.Session()

        adapter = HTTPAdapter(max_retries=0)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        # Only the request's own headers go out
        session.headers.clear()

        # Callouts are stateless; Set-Cookie from one response never rides on the next
        session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))

        return session

    def send(self, request: OutboundRequest, auth: Optional[AuthBase] = None) -> InboundResponse:
        """
        Send a request.

        Args:
            request: Assembled request
            auth: Optional auth handler from the resolved endpoint

        Returns:
            InboundResponse: Raw response

        Raises:
            requests.exceptions.RequestException: On network failures
        """
        logger.debug(f"Sending {request.method} request to {request.url}")

        response = self.session.request(
            request.method,
            request.url,
            headers=request.headers,
            data=request.body.encode('utf-8') if request.body is not None else None,
            auth=auth,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
            allow_redirects=self.settings.follow_redirects,
        )

        logger.debug(f"Received HTTP {response.status_code} from {request.url}")

        return InboundResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.text,
            reason=response.reason or ''
        )

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()
        logger.debug("Transport session closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


_default_transport: Optional[RequestsTransport] = None
_default_transport_lock = threading.Lock()


def get_default_transport() -> RequestsTransport:
    """Get the lazily created process-wide transport."""
    global _default_transport
    with _default_transport_lock:
        if _default_transport is None:
            _default_transport = RequestsTransport()
        return _default_transport
