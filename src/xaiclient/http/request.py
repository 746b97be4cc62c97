"""Outbound request descriptors.

:func:`build_request` composes the URL, headers, body and timeout of one call
into an immutable :class:`OutboundRequest` that the transport consumes once.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal

import httpx

from xaiclient.errors import InvalidURLError

Verb = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

_JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class OutboundRequest:
    """Everything the transport needs to perform one HTTP call.

    Attributes:
        method: HTTP verb.
        url: Absolute request URL.
        headers: Read-only header mapping.  Excluded from ``repr`` because it
            may carry a credential.
        body: Serialized request body, or ``None``.
        timeout: Seconds the transport may wait for the provider.  Advisory
            here; enforced by the transport.
    """

    method: Verb
    url: str
    headers: Mapping[str, str] = field(repr=False)
    body: bytes | None = field(default=None, repr=False)
    timeout: float = 60.0


def compose_url(base_url: str, path: str) -> str:
    """Join *base_url* and *path* into an absolute http(s) URL.

    Raises:
        InvalidURLError: If the result is not an absolute http(s) URL with a host.
    """
    joined = base_url.rstrip("/") + "/" + path.lstrip("/")
    try:
        url = httpx.URL(joined)
    except httpx.InvalidURL as exc:
        raise InvalidURLError(f"Invalid URL {joined!r}: {exc}", original_error=exc) from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidURLError(f"Not an absolute http(s) URL: {joined!r}")
    return str(url)


def build_request(
    base_url: str,
    path: str,
    verb: Verb,
    body: bytes | None = None,
    headers: Mapping[str, str] | None = None,
    timeout: float = 60.0,
) -> OutboundRequest:
    """Build an :class:`OutboundRequest`.

    ``Content-Type: application/json`` is set whenever *body* is given, unless
    *headers* already names a content type.

    Raises:
        InvalidURLError: If *base_url* and *path* do not compose into an
            absolute http(s) URL.
    """
    url = compose_url(base_url, path)
    merged: dict[str, str] = dict(headers or {})
    if body is not None and not any(k.lower() == "content-type" for k in merged):
        merged["Content-Type"] = _JSON_CONTENT_TYPE
    return OutboundRequest(
        method=verb,
        url=url,
        headers=MappingProxyType(merged),
        body=body,
        timeout=float(timeout),
    )


def build_direct_request(
    base_url: str,
    path: str,
    verb: Verb,
    api_key: str,
    body: bytes | None = None,
    headers: Mapping[str, str] | None = None,
    timeout: float = 60.0,
) -> OutboundRequest:
    """Build a request authenticated with a caller-supplied bearer key.

    The key only ends up in the returned descriptor's headers; it is never
    logged or stored elsewhere.
    """
    return build_request(
        base_url,
        path,
        verb,
        body=body,
        headers={**(headers or {}), "Authorization": f"Bearer {api_key}"},
        timeout=timeout,
    )
