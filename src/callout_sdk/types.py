"""
Type definitions for outbound callouts

This module provides the verb enumeration, request/response data classes and
the process-wide default header table shared by every call site.
"""

import json
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Any
from dataclasses import dataclass, field
from enum import Enum


class HttpVerb(str, Enum):
    """HTTP verbs a callout may use"""
    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    PUT = "PUT"
    HEAD = "HEAD"
    DELETE = "DELETE"


class PatchPolicy(str, Enum):
    """How PATCH callouts are put on the wire"""
    METHOD_OVERRIDE = "method_override"  # POST plus _HttpMethod=PATCH marker
    NATIVE = "native"                    # literal PATCH method


# Verbs that may carry a request body
BODY_VERBS = frozenset({HttpVerb.POST, HttpVerb.PUT, HttpVerb.PATCH})

PATCH_OVERRIDE_MARKER = "?_HttpMethod=PATCH"

DEFAULT_HEADERS: Mapping[str, str] = MappingProxyType({
    'Content-Type': 'application/json',
    'Accept': 'application/json',
})


@dataclass(frozen=True)
class OutboundRequest:
    """
    Fully assembled request ready for the transport

    Attributes:
        method: Wire method string (GET, POST, ...)
        url: Complete endpoint URL
        headers: Headers exactly as the caller supplied them (or the defaults)
        body: Raw body, or None when no body is attached
    """
    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[str] = None


@dataclass
class InboundResponse:
    """
    Raw response handed back to the caller

    Attributes:
        status_code: HTTP status code
        headers: Response headers
        body: Response body as text
        reason: HTTP reason phrase
    """
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""
    reason: str = ""

    @property
    def ok(self) -> bool:
        """Check if the status is 2xx"""
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Parse the body as JSON"""
        return json.loads(self.body)


@dataclass(frozen=True)
class Callout:
    """
    One logical callout, with everything but verb and path defaulted

    Attributes:
        verb: HTTP verb
        path: Resource path relative to the credential's base URL
        query: Opaque query string, percent-encoded as a whole
        body: Raw, pre-serialized body
        headers: Header mapping replacing the defaults, or None for defaults
    """
    verb: HttpVerb
    path: str
    query: str = ""
    body: str = ""
    headers: Optional[Mapping[str, str]] = None
