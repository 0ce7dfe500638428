"""
Unbound Python SDK - HTTP Fallback

Native HTTPS execution used when no transport plugin is available, when a
transport fails, or when a caller forces a plain fetch. This is the only
place that knows header names, credential attachment and how HTTP failures
are turned into structured errors.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type
from urllib.parse import quote, urlencode

import httpx

from unbound.environment import Environment
from unbound.exceptions import (
    APIError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    RateLimitError,
    ServerError,
)
from unbound.multipart import MultipartBody
from unbound.types import Envelope, RequestContext

logger = logging.getLogger("unbound.http")


GENERIC_ERROR_MESSAGE = "API Error occurred."

BINARY_TYPES = (bytes, bytearray, memoryview)


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def serialize_query(query: Optional[Mapping[str, Any]]) -> str:
    """
    URL-encode a flat query mapping.

    Spaces become ``%20``, list values become repeated keys and None values
    are dropped.

    Example:
        >>> serialize_query({"q": "ab cd", "k": 2})
        'q=ab%20cd&k=2'
    """
    if not query:
        return ""
    pairs: List[Tuple[str, str]] = []
    for key, value in query.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _query_value(item)) for item in value if item is not None)
        else:
            pairs.append((key, _query_value(value)))
    return urlencode(pairs, quote_via=quote)


def build_url(base_url: str, endpoint: str, query: Optional[Mapping[str, Any]] = None) -> str:
    url = f"{base_url}{endpoint}"
    query_string = serialize_query(query)
    if query_string:
        url = f"{url}?{query_string}"
    return url


def is_passthrough_body(body: Any) -> bool:
    """Multipart payloads and raw bytes are sent without JSON encoding."""
    return isinstance(body, MultipartBody) or isinstance(body, BINARY_TYPES)


def _has_header(headers: Mapping[str, str], name: str) -> bool:
    name = name.lower()
    return any(key.lower() == name for key in headers)


def compose_headers(envelope: Envelope, context: RequestContext) -> Dict[str, str]:
    headers: Dict[str, str] = dict(envelope.headers or {})
    body = envelope.body

    if not _has_header(headers, "Content-Type"):
        if isinstance(body, MultipartBody):
            headers.update(body.headers)
        elif not is_passthrough_body(body):
            headers["Content-Type"] = "application/json"

    if context.token:
        headers["Authorization"] = f"Bearer {context.token}"
    if context.fw_request_id:
        headers["x-request-id-fw"] = context.fw_request_id
    if context.call_id:
        headers["x-call-id"] = context.call_id

    return headers


def encode_json(body: Any) -> bytes:
    return json.dumps(body, separators=(",", ":")).encode("utf-8")


def encode_body(method: str, body: Any) -> Dict[str, Any]:
    """Return the httpx keyword arguments that carry the request body."""
    if method.upper() == "GET" or body is None:
        return {}
    if isinstance(body, MultipartBody):
        if body.is_native:
            return {"files": body.files, "data": body.data}
        return {"content": body.content}
    if isinstance(body, BINARY_TYPES):
        return {"content": bytes(body)}
    return {"content": encode_json(body)}


def decode_body(response: httpx.Response) -> Any:
    """
    Decode a response body by its content type.

    JSON decode errors propagate unchanged.
    """
    if response.status_code == 204 or not response.content:
        return {}
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        return response.json()
    if "text/" in content_type:
        return response.text
    return response.content


def _error_class(status: int) -> Type[APIError]:
    if status in (401, 403):
        return AuthenticationError
    if status == 404:
        return NotFoundError
    if status == 409:
        return ConflictError
    if status == 429:
        return RateLimitError
    if status >= 500:
        return ServerError
    return APIError


def build_api_error(response: httpx.Response, method: str, endpoint: str) -> APIError:
    """Turn a non-OK response into a structured APIError."""
    try:
        body = decode_body(response)
    except ValueError:
        body = response.text or f"HTTP {response.status_code} {response.reason_phrase}"

    message = GENERIC_ERROR_MESSAGE
    if isinstance(body, Mapping) and body.get("message"):
        message = str(body["message"])

    kwargs: Dict[str, Any] = dict(
        method=method,
        endpoint=endpoint,
        status=response.status_code,
        status_text=response.reason_phrase,
        request_id=response.headers.get("x-request-id"),
        body=body,
    )
    error_class = _error_class(response.status_code)
    if error_class is RateLimitError:
        kwargs["retry_after"] = response.headers.get("Retry-After")
    return error_class(message, **kwargs)


class HTTPFallback:
    """
    Executes envelopes over HTTPS with httpx.

    The underlying ``httpx.AsyncClient`` is created on first use unless one
    is supplied, and is closed by ``aclose()`` only when it was created here.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._timeout = timeout
        self._http_client = http_client
        self._owns_client = http_client is None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
            )
        return self._http_client

    async def execute(
        self,
        endpoint: str,
        method: str,
        envelope: Envelope,
        context: RequestContext,
        with_status: bool = False,
    ) -> Any:
        method = method.upper()
        url = build_url(context.base_url, endpoint, envelope.query)
        headers = compose_headers(envelope, context)

        extensions: Dict[str, Any] = {}
        if context.environment == Environment.BROWSER.value:
            extensions["credentials"] = "include"

        client = self._get_client()
        response = await client.request(
            method,
            url,
            headers=headers,
            extensions=extensions or None,
            **encode_body(method, envelope.body),
        )

        logger.debug(f"API :: https :: {method} :: {endpoint} :: {response.status_code}")

        if not response.is_success:
            raise build_api_error(response, method, endpoint)

        body = decode_body(response)
        return (body, response.status_code) if with_status else body

    async def aclose(self) -> None:
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None
