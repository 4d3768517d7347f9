"""
REST client façade for named-credential callouts

RestClient is bound to one credential alias and exposes an omnibus call()
plus per-verb conveniences that default the trailing parameters. The static
helpers build a transient client for one-shot use.
"""

from typing import Any, Mapping, Optional, Union

from .credentials.registry import CredentialRegistry, get_default_registry
from .exceptions import ValidationError
from .request_builder import RequestBuilder
from .transport import Transport, get_default_transport
from .types import HttpVerb, Callout, InboundResponse, OutboundRequest


class RestClient:
    """
    Client bound to a single named credential.

    Instances hold no state between calls other than the alias, so one client
    can serve any number of sequential calls.

    Usage:
        client = RestClient('GoogleBooksAPI')
        response = client.get('volumes', 'q=salesforce')
        if response.ok:
            data = response.json()
    """

    def __init__(
        self,
        credential_alias: str,
        registry: Optional[CredentialRegistry] = None,
        transport: Optional[Transport] = None,
        builder: Optional[RequestBuilder] = None
    ):
        """
        Initialize the client.

        Args:
            credential_alias: Alias of a registered named credential. It is
                not checked here; an unknown alias fails on the first call.
            registry: Credential registry (defaults to the process-wide one)
            transport: Transport (defaults to the process-wide one)
            builder: Request builder (defaults to RequestBuilder())
        """
        self._credential_alias = credential_alias
        self._registry = registry
        self._transport = transport
        self._builder = builder or RequestBuilder()

    @property
    def credential_alias(self) -> str:
        """Alias of the named credential every call goes through."""
        return self._credential_alias

    def __repr__(self) -> str:
        return f"RestClient({self._credential_alias!r})"

    def build_request(
        self,
        verb: Union[HttpVerb, str],
        path: Optional[str],
        query: Optional[str] = '',
        body: Optional[str] = '',
        headers: Optional[Mapping[str, str]] = None
    ) -> OutboundRequest:
        """Resolve the alias and assemble the request without sending it."""
        endpoint = self._resolve()
        return self._builder.build(endpoint.base_url, verb, path, query, body, headers)

    def call(
        self,
        verb: Union[HttpVerb, str],
        path: Optional[str],
        query: Optional[str] = '',
        body: Optional[str] = '',
        headers: Optional[Mapping[str, str]] = None
    ) -> InboundResponse:
        """
        Make one callout.

        Args:
            verb: HTTP verb
            path: Resource path relative to the credential's base URL
            query: Opaque query string, percent-encoded as a whole
            body: Raw body; ignored for GET, HEAD and DELETE
            headers: Header mapping replacing the defaults, or None

        Returns:
            InboundResponse: Raw response, whatever its status code

        Raises:
            ValidationError: On a None path or unsupported verb
            CredentialNotFoundError: If the alias is not registered
            requests.exceptions.RequestException: On network failures
        """
        endpoint = self._resolve()
        request = self._builder.build(endpoint.base_url, verb, path, query, body, headers)
        transport = self._transport if self._transport is not None else get_default_transport()
        return transport.send(request, endpoint.auth)

    def send(self, callout: Callout) -> InboundResponse:
        """Make the callout described by a Callout structure."""
        return self.call(callout.verb, callout.path, callout.query, callout.body, callout.headers)

    def get(self, path: str, query: str = '') -> InboundResponse:
        """GET a resource."""
        _require_path(path)
        return self.call(HttpVerb.GET, path, query)

    def head(self, path: str, query: str = '') -> InboundResponse:
        """HEAD a resource; the response body is empty."""
        _require_path(path)
        return self.call(HttpVerb.HEAD, path, query)

    def delete(self, path: str, query: str = '') -> InboundResponse:
        """DELETE a resource."""
        _require_path(path)
        return self.call(HttpVerb.DELETE, path, query)

    def post(self, path: str, body: str = '', *, query: str = '') -> InboundResponse:
        """POST a raw body. The query is keyword-only."""
        _require_path(path)
        return self.call(HttpVerb.POST, path, query, body)

    def put(self, path: str, body: str = '', *, query: str = '') -> InboundResponse:
        """PUT a raw body. The query is keyword-only."""
        _require_path(path)
        return self.call(HttpVerb.PUT, path, query, body)

    def patch(self, path: str, body: str = '', *, query: str = '') -> InboundResponse:
        """PATCH a raw body, subject to the builder's patch policy. The query is keyword-only."""
        _require_path(path)
        return self.call(HttpVerb.PATCH, path, query, body)

    @staticmethod
    def make_api_call(
        credential_alias: str,
        verb: Union[HttpVerb, str],
        path: str,
        query: str = '',
        body: str = '',
        headers: Optional[Mapping[str, str]] = None,
        **client_options: Any
    ) -> InboundResponse:
        """One-shot callout through a transient client."""
        return make_api_call(credential_alias, verb, path, query, body, headers, **client_options)

    def _resolve(self):
        registry = self._registry if self._registry is not None else get_default_registry()
        return registry.resolve(self._credential_alias)


def _require_path(path: Optional[str]) -> None:
    if path is None:
        raise ValidationError("path cannot be None")


def make_api_call(
    credential_alias: str,
    verb: Union[HttpVerb, str],
    path: str,
    query: str = '',
    body: str = '',
    headers: Optional[Mapping[str, str]] = None,
    **client_options: Any
) -> InboundResponse:
    """
    Make a single callout without keeping a client around.

    Args:
        credential_alias: Alias of a registered named credential
        verb: HTTP verb
        path: Resource path
        query: Opaque query string
        body: Raw body
        headers: Header mapping replacing the defaults, or None
        **client_options: registry, transport or builder for the transient client

    Returns:
        InboundResponse: Raw response
    """
    client = RestClient(credential_alias, **client_options)
    return client.call(verb, path, query, body, headers)


def send_callout(credential_alias: str, callout: Callout, **client_options: Any) -> InboundResponse:
    """Send a Callout structure through a transient client."""
    return RestClient(credential_alias, **client_options).send(callout)
