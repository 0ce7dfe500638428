"""
Unbound Python SDK - Request Dispatcher

Validates an envelope, offers it to the best available transport plugin and
falls back to HTTP when there is none or when the transport mechanism fails.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Union

from unbound.http_fallback import HTTPFallback
from unbound.transports import TransportRegistry
from unbound.types import Envelope, RequestContext
from unbound.utils import maybe_await
from unbound.validation import validate

logger = logging.getLogger("unbound")


ENVELOPE_SCHEMA = {
    "endpoint": {"type": "string", "required": True},
    "method": {"type": "string", "required": True},
    "body": {"type": ["object", "array"], "required": False},
    "query": {"type": "object", "required": False},
    "headers": {"type": "object", "required": False},
}


class Dispatcher:
    """
    The request pipeline behind every operation.

    A transport failure is never retried on the next transport in priority
    order; the dispatcher goes straight to HTTP.
    """

    def __init__(self, registry: TransportRegistry, http: HTTPFallback) -> None:
        self.registry = registry
        self.http = http

    async def dispatch(
        self,
        endpoint: str,
        method: str,
        envelope: Union[Envelope, Mapping[str, Any], None],
        context: RequestContext,
        force_fetch: bool = False,
        with_status: bool = False,
    ) -> Any:
        """Run one request. With ``with_status`` the result is a ``(body, status)`` pair."""
        envelope = Envelope.coerce(envelope)
        validate(
            {
                "endpoint": endpoint or None,
                "method": method or None,
                "body": envelope.body,
                "query": envelope.query,
                "headers": envelope.headers,
            },
            ENVELOPE_SCHEMA,
        )

        record = await self.registry.pick(force_fetch)
        if record is not None:
            try:
                result = await maybe_await(
                    record.transport.request(endpoint, method, envelope, context)
                )
                status = result.get("status", 200) if isinstance(result, Mapping) else 200
                logger.debug(f"API :: {record.name} :: {method.upper()} :: {endpoint} :: {status}")
                return (result, status) if with_status else result
            except Exception as e:
                logger.debug(
                    f"API :: Transport {record.name} failure :: {method.upper()} :: {endpoint} :: {e}"
                )
                logger.warning(f"Transport {record.name} mechanism failed, falling back to HTTP: {e}")

        return await self.http.execute(endpoint, method, envelope, context, with_status=with_status)
