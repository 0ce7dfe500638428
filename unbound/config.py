"""
Unbound Python SDK - Configuration

This module contains configuration classes and defaults for the SDK.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from unbound.environment import DEFAULT_DOMAIN, Environment


@dataclass
class ClientConfig:
    """
    Configuration for the Unbound client.

    Attributes:
        namespace: Tenant the client talks to
        call_id: Call correlation ID forwarded as ``x-call-id``
        token: Bearer credential
        fw_request_id: Request correlation ID forwarded as ``x-request-id-fw``
        environment: ``"server"``, ``"browser"`` or None to auto-detect
        domain: API domain the namespace is prefixed to
        timeout: HTTP request timeout in seconds
        debug: Enable debug logging
    """
    namespace: Optional[str] = None
    call_id: Optional[str] = None
    token: Optional[str] = None
    fw_request_id: Optional[str] = None
    environment: Optional[Union[str, Environment]] = None
    domain: Optional[str] = None
    timeout: float = 30.0
    debug: bool = False

    def resolved_domain(self) -> str:
        return self.domain or os.environ.get("API_BASE_URL") or DEFAULT_DOMAIN

    def resolved_namespace(self) -> Optional[str]:
        return self.namespace or os.environ.get("UNBOUND_NAMESPACE")

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> "ClientConfig":
        """
        Build a config from a mapping.

        Both snake_case keys and the legacy camelCase keys are recognized.
        Unknown keys are ignored.
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in options.items():
            key = OPTION_ALIASES.get(key, key)
            if key in known:
                values[key] = value
        return cls(**values)


# Default configuration
DEFAULT_CONFIG = ClientConfig()


OPTION_ALIASES = {
    "callId": "call_id",
    "fwRequestId": "fw_request_id",
    "url": "domain",
    "baseUrl": "domain",
}

# Order of the legacy positional constructor arguments after the namespace
LEGACY_POSITIONAL = ("call_id", "token", "fw_request_id", "domain")


def coerce_options(
    options: Union[ClientConfig, Mapping[str, Any], str, None] = None,
    legacy: Sequence[Any] = (),
    overrides: Optional[Mapping[str, Any]] = None,
) -> ClientConfig:
    """
    Turn any accepted constructor form into a ClientConfig.

    ``Unbound("acme", "call-1", "token", "req-1")`` is the legacy positional
    form; it is adapted here so the client itself only knows ClientConfig.
    """
    if legacy and not isinstance(options, str):
        raise TypeError("Positional arguments are only accepted after a namespace string")

    if isinstance(options, ClientConfig):
        config = options
    elif isinstance(options, str):
        if len(legacy) > len(LEGACY_POSITIONAL):
            raise TypeError(
                f"Expected at most {len(LEGACY_POSITIONAL) + 1} positional arguments, "
                f"got {len(legacy) + 1}"
            )
        values = dict(zip(LEGACY_POSITIONAL, legacy))
        config = ClientConfig(namespace=options or None, **values)
    elif options is None:
        config = ClientConfig()
    elif isinstance(options, Mapping):
        config = ClientConfig.from_dict(options)
    else:
        raise TypeError(
            f"Client options must be a ClientConfig, mapping or namespace string, "
            f"not {type(options).__name__}"
        )

    if overrides:
        known = {f.name for f in fields(ClientConfig)}
        changes: Dict[str, Any] = {}
        for key, value in overrides.items():
            key = OPTION_ALIASES.get(key, key)
            if key not in known:
                raise TypeError(f"Unknown client option '{key}'")
            changes[key] = value
        config = replace(config, **changes)

    return config


# Endpoints
class Endpoints:
    """API endpoint paths used by the built-in resources."""

    # Client
    HEALTH = "/health"
    GET_IP = "/get-ip"

    # AI
    AI_CHAT = "/ai/generative/chat"
    AI_PLAYBOOK = "/ai/generative/playbook"
    AI_TTS = "/ai/tts"
    AI_STT_STREAM = "/ai/stt/stream"
    AI_STT_SESSION = "/ai/stt/{session_id}"

    # Messaging
    SMS = "/messaging/sms"
    SMS_MESSAGE = "/messaging/sms/{message_id}"

    # Storage
    STORAGE_UPLOAD = "/storage/upload"
    STORAGE_FILES = "/storage/files"
    STORAGE_FILE = "/storage/file/{storage_id}"
    STORAGE_FILE_INFO = "/storage/file/{storage_id}/info"
    STORAGE_FILE_METADATA = "/storage/file/{storage_id}/metadata"
    STORAGE_CLASSIFICATIONS = "/storage/classifications"
