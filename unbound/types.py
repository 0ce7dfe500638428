"""
Unbound Python SDK - Request Types

Neutral request records shared by the dispatcher and transport plugins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union


@dataclass
class Envelope:
    """
    What a resource asks the dispatcher to send.

    Attributes:
        body: Mapping (JSON-encoded), MultipartBody, or raw bytes passed through
        query: Flat mapping serialized into the query string
        headers: Extra request headers
    """
    body: Any = None
    query: Optional[Mapping[str, Any]] = None
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def coerce(cls, value: Union["Envelope", Mapping[str, Any], None]) -> "Envelope":
        if value is None:
            return cls()
        if isinstance(value, Envelope):
            return value
        return cls(
            body=value.get("body"),
            query=value.get("query"),
            headers=value.get("headers") or {},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"body": self.body, "query": self.query, "headers": self.headers}


@dataclass(frozen=True)
class RequestContext:
    """
    Snapshot of the client identity taken once per dispatch.

    Mutating the client after a dispatch starts does not affect it.
    """
    namespace: Optional[str]
    token: Optional[str]
    call_id: Optional[str]
    fw_request_id: Optional[str]
    base_url: str
    environment: str = "server"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "namespace": self.namespace,
            "token": self.token,
            "callId": self.call_id,
            "fwRequestId": self.fw_request_id,
            "baseUrl": self.base_url,
        }
