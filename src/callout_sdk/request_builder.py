"""
Request assembly for outbound callouts

Turns a verb, path, query, body and header mapping into an OutboundRequest
against a resolved base URL.
"""

from typing import Mapping, Optional, Union
from urllib.parse import quote_plus

from .exceptions import ValidationError
from .types import (
    HttpVerb, PatchPolicy, OutboundRequest, DEFAULT_HEADERS, BODY_VERBS,
    PATCH_OVERRIDE_MARKER,
)


def coerce_verb(verb: Union[HttpVerb, str]) -> HttpVerb:
    """
    Convert a verb name to HttpVerb.

    Args:
        verb: HttpVerb member or case-insensitive verb name

    Returns:
        HttpVerb: Matching verb

    Raises:
        ValidationError: If the verb is not supported
    """
    if isinstance(verb, HttpVerb):
        return verb
    if isinstance(verb, str):
        try:
            return HttpVerb(verb.strip().upper())
        except ValueError:
            pass
    raise ValidationError(
        f"Unsupported HTTP verb: {verb!r}",
        details={'supported': [v.value for v in HttpVerb]}
    )


def normalize_path(path: Optional[str]) -> str:
    """Ensure the path ends with a separator."""
    if path is None:
        raise ValidationError("path cannot be None")
    if not path.endswith('/'):
        path += '/'
    return path


def encode_query(query: Optional[str]) -> str:
    """Percent-encode the query string as a single UTF-8 blob."""
    if not query:
        return ''
    return quote_plus(query, safe='', encoding='utf-8')


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty or whitespace-only strings."""
    return value is None or not value.strip()


class RequestBuilder:
    """
    Builds OutboundRequest objects.

    The builder holds no per-call state; one instance can be shared by any
    number of clients and threads.
    """

    def __init__(
        self,
        default_headers: Optional[Mapping[str, str]] = None,
        patch_policy: PatchPolicy = PatchPolicy.METHOD_OVERRIDE
    ):
        """
        Initialize the builder.

        Args:
            default_headers: Headers used when a call supplies none
                (defaults to DEFAULT_HEADERS)
            patch_policy: How PATCH is put on the wire
        """
        self.default_headers = dict(DEFAULT_HEADERS if default_headers is None else default_headers)
        self.patch_policy = PatchPolicy(patch_policy)

    def build(
        self,
        base_url: str,
        verb: Union[HttpVerb, str],
        path: Optional[str],
        query: Optional[str] = '',
        body: Optional[str] = '',
        headers: Optional[Mapping[str, str]] = None
    ) -> OutboundRequest:
        """
        Assemble a request.

        Args:
            base_url: Resolved base URL, ending with a separator
            verb: HTTP verb
            path: Resource path; a trailing separator is appended if missing
            query: Opaque query string
            body: Raw body, only attached for POST/PUT/PATCH when non-blank
            headers: Replacement header mapping, or None for the defaults

        Returns:
            OutboundRequest: Assembled request

        Raises:
            ValidationError: On a None path or unsupported verb
        """
        verb = coerce_verb(verb)
        normalized_path = normalize_path(path)
        encoded_query = encode_query(query)

        method = verb.value
        if verb is HttpVerb.PATCH and self.patch_policy is PatchPolicy.METHOD_OVERRIDE:
            method = HttpVerb.POST.value
            encoded_query += PATCH_OVERRIDE_MARKER

        request_headers = dict(self.default_headers if headers is None else headers)

        request_body = None
        if verb in BODY_VERBS and not is_blank(body):
            request_body = body

        return OutboundRequest(
            method=method,
            url=base_url + normalized_path + encoded_query,
            headers=request_headers,
            body=request_body
        )
