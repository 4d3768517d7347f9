"""
Unit tests for the RestClient façade
"""

from typing import List, Optional, Tuple
from unittest.mock import Mock, patch

import pytest
import requests

from callout_sdk import (
    RestClient,
    RequestBuilder,
    CredentialRegistry,
    NamedCredential,
    BearerTokenAuth,
    Callout,
    HttpVerb,
    PatchPolicy,
    InboundResponse,
    OutboundRequest,
    Transport,
    make_api_call,
    send_callout,
    CredentialNotFoundError,
    ValidationError,
    DEFAULT_HEADERS,
)


class RecordingTransport:
    """Transport fake that records requests and replays a canned response."""

    def __init__(self, response: Optional[InboundResponse] = None):
        self.response = response or InboundResponse(status_code=200, body='{"ok": true}', reason='OK')
        self.sent: List[Tuple[OutboundRequest, object]] = []

    def send(self, request, auth=None):
        self.sent.append((request, auth))
        return self.response

    @property
    def last_request(self) -> OutboundRequest:
        return self.sent[-1][0]


@pytest.fixture
def registry():
    return CredentialRegistry([
        NamedCredential("GoogleBooksAPI", "https://www.googleapis.com/books/v1"),
        NamedCredential("Secured", "https://secure.example.com/api/", BearerTokenAuth("tok")),
    ])


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def client(registry, transport):
    return RestClient("GoogleBooksAPI", registry=registry, transport=transport)


BOOKS = "https://www.googleapis.com/books/v1/"


class TestRestClientConstruction:
    """Test façade construction"""

    def test_alias_is_stored(self, client):
        assert client.credential_alias == "GoogleBooksAPI"

    def test_alias_is_read_only(self, client):
        with pytest.raises(AttributeError):
            client.credential_alias = "Other"

    def test_unknown_alias_not_checked_at_construction(self, registry, transport):
        client = RestClient("Missing", registry=registry, transport=transport)
        assert client.credential_alias == "Missing"

    def test_recording_transport_satisfies_protocol(self, transport):
        assert isinstance(transport, Transport)


class TestOmnibusCall:
    """Test RestClient.call"""

    def test_get_scenario(self, client, transport):
        response = client.call(HttpVerb.GET, "volumes", "q=salesforce", "", {})

        request = transport.last_request
        assert request.method == "GET"
        assert request.url == BOOKS + "volumes/q%3Dsalesforce"
        assert request.body is None
        assert request.headers == {}
        assert response is transport.response

    def test_patch_scenario(self, client, transport):
        client.call(HttpVerb.PATCH, "accounts", "id=1", '{"Name":"A"}', None)

        request = transport.last_request
        assert request.method == "POST"
        assert request.url == BOOKS + "accounts/id%3D1?_HttpMethod=PATCH"
        assert request.body == '{"Name":"A"}'
        assert request.headers == dict(DEFAULT_HEADERS)

    def test_one_round_trip_per_call(self, client, transport):
        client.call("GET", "a")
        client.call("GET", "b")
        assert len(transport.sent) == 2

    def test_non_2xx_returned_unmodified(self, registry):
        failing = RecordingTransport(InboundResponse(status_code=503, body='down', reason='Service Unavailable'))
        client = RestClient("GoogleBooksAPI", registry=registry, transport=failing)

        response = client.get("volumes")

        assert response.status_code == 503
        assert response.body == 'down'
        assert not response.ok
        assert len(failing.sent) == 1

    def test_transport_errors_propagate(self, registry):
        transport = Mock()
        transport.send.side_effect = requests.exceptions.ConnectionError("refused")
        client = RestClient("GoogleBooksAPI", registry=registry, transport=transport)

        with pytest.raises(requests.exceptions.ConnectionError, match="refused"):
            client.get("volumes")
        assert transport.send.call_count == 1

    def test_unknown_alias_fails_at_call_time(self, registry, transport):
        client = RestClient("Missing", registry=registry, transport=transport)

        with pytest.raises(CredentialNotFoundError) as exc_info:
            client.get("volumes")

        assert exc_info.value.alias == "Missing"
        assert transport.sent == []

    def test_auth_passed_to_transport(self, registry, transport):
        client = RestClient("Secured", registry=registry, transport=transport)
        client.get("things")

        request, auth = transport.sent[-1]
        assert request.url == "https://secure.example.com/api/things/"
        assert auth is not None
        assert 'Authorization' not in request.headers

    def test_anonymous_credential_has_no_auth(self, client, transport):
        client.get("volumes")
        assert transport.sent[-1][1] is None

    def test_injected_builder(self, registry, transport):
        client = RestClient(
            "GoogleBooksAPI",
            registry=registry,
            transport=transport,
            builder=RequestBuilder(default_headers={'X-Test': '1'}, patch_policy=PatchPolicy.NATIVE)
        )
        client.patch("accounts", '{"a":1}')

        assert transport.last_request.method == "PATCH"
        assert transport.last_request.headers == {'X-Test': '1'}

    def test_identical_clients_build_identical_requests(self, registry, transport):
        first = RestClient("GoogleBooksAPI", registry=registry, transport=transport)
        second = RestClient("GoogleBooksAPI", registry=registry, transport=transport)

        first.call(HttpVerb.POST, "items", "a=1", '{"x":1}', {'X': 'y'})
        second.call(HttpVerb.POST, "items", "a=1", '{"x":1}', {'X': 'y'})

        assert transport.sent[0][0] == transport.sent[1][0]

    def test_build_request_does_not_send(self, client, transport):
        request = client.build_request(HttpVerb.GET, "volumes", "q=x")
        assert request.url == BOOKS + "volumes/q%3Dx"
        assert transport.sent == []


class TestConvenienceMethods:
    """Test per-verb conveniences"""

    def test_get(self, client, transport):
        client.get("volumes")
        request = transport.last_request
        assert (request.method, request.url, request.body) == ("GET", BOOKS + "volumes/", None)
        assert request.headers == dict(DEFAULT_HEADERS)

    def test_get_with_query(self, client, transport):
        client.get("volumes", "q=salesforce")
        assert transport.last_request.url == BOOKS + "volumes/q%3Dsalesforce"

    def test_head(self, client, transport):
        client.head("volumes")
        assert transport.last_request.method == "HEAD"

    def test_delete(self, client, transport):
        client.delete("volumes/1", "force=true")
        request = transport.last_request
        assert request.method == "DELETE"
        assert request.url == BOOKS + "volumes/1/force%3Dtrue"

    def test_post(self, client, transport):
        client.post("volumes", '{"title":"x"}')
        request = transport.last_request
        assert request.method == "POST"
        assert request.body == '{"title":"x"}'
        assert request.url == BOOKS + "volumes/"

    def test_post_with_query(self, client, transport):
        client.post("volumes", '{"title":"x"}', query="dry=1")
        assert transport.last_request.url == BOOKS + "volumes/dry%3D1"
        assert transport.last_request.body == '{"title":"x"}'

    @pytest.mark.parametrize("method", ["post", "put", "patch"])
    def test_body_verbs_take_query_by_keyword_only(self, client, transport, method):
        """A third positional argument is not silently taken as the query"""
        with pytest.raises(TypeError):
            getattr(client, method)("volumes", '{"title":"x"}', "dry=1")
        assert transport.sent == []

    def test_put_and_patch_with_query(self, client, transport):
        client.put("volumes/1", '{"title":"y"}', query="dry=1")
        assert transport.last_request.url == BOOKS + "volumes/1/dry%3D1"

        client.patch("volumes/1", '{"title":"z"}', query="dry=1")
        assert transport.last_request.url == BOOKS + "volumes/1/dry%3D1?_HttpMethod=PATCH"

    def test_put(self, client, transport):
        client.put("volumes/1", '{"title":"y"}')
        assert transport.last_request.method == "PUT"
        assert transport.last_request.body == '{"title":"y"}'

    def test_patch(self, client, transport):
        client.patch("volumes/1", '{"title":"z"}')
        request = transport.last_request
        assert request.method == "POST"
        assert request.url.endswith("?_HttpMethod=PATCH")
        assert request.body == '{"title":"z"}'

    def test_post_without_body(self, client, transport):
        client.post("volumes")
        assert transport.last_request.body is None

    @pytest.mark.parametrize("method", ["get", "head", "delete", "post", "put", "patch"])
    def test_none_path_rejected(self, client, transport, method):
        with pytest.raises(ValidationError):
            getattr(client, method)(None)
        assert transport.sent == []

    def test_send_callout_structure(self, client, transport):
        client.send(Callout(HttpVerb.PUT, "items", body='{"a":1}', headers={'X': '1'}))
        request = transport.last_request
        assert request.method == "PUT"
        assert request.body == '{"a":1}'
        assert request.headers == {'X': '1'}

    @pytest.mark.parametrize("name", ["credential_alias", "get", "head", "delete", "post", "put", "patch"])
    def test_public_surface_documented(self, name):
        """help(RestClient) describes every public member"""
        assert getattr(RestClient, name).__doc__


class TestStaticForms:
    """Test one-shot helpers"""

    def test_make_api_call(self, registry, transport):
        response = make_api_call(
            "GoogleBooksAPI", HttpVerb.GET, "volumes", "q=salesforce",
            registry=registry, transport=transport
        )
        assert response.status_code == 200
        assert transport.last_request.url == BOOKS + "volumes/q%3Dsalesforce"

    def test_make_api_call_with_headers(self, registry, transport):
        make_api_call(
            "GoogleBooksAPI", "POST", "volumes", "", '{"a":1}', {'X-Test': '1'},
            registry=registry, transport=transport
        )
        assert transport.last_request.headers == {'X-Test': '1'}
        assert transport.last_request.body == '{"a":1}'

    def test_static_method_matches_function(self, registry, transport):
        RestClient.make_api_call("GoogleBooksAPI", "GET", "volumes", registry=registry, transport=transport)
        make_api_call("GoogleBooksAPI", "GET", "volumes", registry=registry, transport=transport)
        assert transport.sent[0][0] == transport.sent[1][0]

    def test_send_callout(self, registry, transport):
        send_callout(
            "GoogleBooksAPI",
            Callout(HttpVerb.DELETE, "volumes/1", body="ignored"),
            registry=registry,
            transport=transport
        )
        request = transport.last_request
        assert request.method == "DELETE"
        assert request.body is None


class TestDefaultCollaborators:
    """Test fallback to process-wide registry and transport"""

    def test_uses_default_registry_and_transport(self, registry, transport):
        with patch('callout_sdk.client.get_default_registry', return_value=registry), \
                patch('callout_sdk.client.get_default_transport', return_value=transport):
            RestClient("GoogleBooksAPI").get("volumes")

        assert transport.last_request.url == BOOKS + "volumes/"
