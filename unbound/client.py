"""
Unbound Python SDK - Main Client

This module provides the main Unbound client class that serves as the entry
point for all API interactions.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional, Union

import httpx

from unbound.config import ClientConfig, Endpoints, coerce_options
from unbound.dispatcher import Dispatcher
from unbound.environment import build_base_url, resolve_environment
from unbound.exceptions import ExtensionError, UnboundError
from unbound.http_fallback import HTTPFallback
from unbound.resources.ai import AIResource
from unbound.resources.messaging import MessagingResource
from unbound.resources.storage import StorageResource
from unbound.transports import TransportRegistry
from unbound.types import Envelope, RequestContext
from unbound.validation import Schema, validate

logger = logging.getLogger("unbound")


class Unbound:
    """
    Main client for interacting with the Unbound API.

    Every operation goes through one pipeline: arguments are validated, the
    request is offered to the best available transport plugin, and plain
    HTTPS is used when there is none or when the transport fails.

    Args:
        options: A ClientConfig, a mapping of options, or a namespace string
            followed by the legacy positional arguments
            ``(call_id, token, fw_request_id, url)``
        http_client: Optional ``httpx.AsyncClient`` used by the HTTP fallback
        **overrides: Individual options (``namespace``, ``token``, ``call_id``,
            ``fw_request_id``, ``environment``, ``domain``, ``timeout``, ``debug``)

    Example:
        >>> async with Unbound(namespace="acme", token="secret") as client:
        ...     await client.messaging.sms.send(to="+15550001111", message="hi")

    Attributes:
        ai: Generative AI, text-to-speech and speech-to-text
        messaging: SMS/MMS messaging
        storage: File storage
    """

    def __init__(
        self,
        options: Union[ClientConfig, Mapping, str, None] = None,
        *legacy: Any,
        http_client: Optional[httpx.AsyncClient] = None,
        **overrides: Any,
    ) -> None:
        self._config = coerce_options(options, legacy, overrides)

        self.namespace = self._config.resolved_namespace()
        self.token = self._config.token
        self.call_id = self._config.call_id
        self.fw_request_id = self._config.fw_request_id
        self.environment = resolve_environment(self._config.environment)
        self.domain = self._config.resolved_domain()
        self.base_url = build_base_url(self.namespace, self.domain, self.environment)

        self.debug_mode = False
        if self._config.debug:
            self.debug(True)

        self._registry = TransportRegistry()
        self._http = HTTPFallback(timeout=self._config.timeout, http_client=http_client)
        self._dispatcher = Dispatcher(self._registry, self._http)

        self._init_resources()

        logger.debug(f"Unbound client initialized with base URL: {self.base_url}")

    def _init_resources(self) -> None:
        """Initialize all API resources."""
        self.ai = AIResource(self)
        self.messaging = MessagingResource(self)
        self.storage = StorageResource(self)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def transports(self) -> TransportRegistry:
        """Registered transport plugins."""
        return self._registry

    def validate(self, values: Mapping, schema: Schema) -> None:
        """
        Check call arguments against a parameter schema.

        Raises:
            MissingRequiredParameterError: A required parameter is absent
            InvalidParameterTypeError: A present parameter has the wrong type
        """
        validate(values, schema)

    def _context(self) -> RequestContext:
        return RequestContext(
            namespace=self.namespace,
            token=self.token,
            call_id=self.call_id,
            fw_request_id=self.fw_request_id,
            base_url=self.base_url,
            environment=self.environment.value,
        )

    async def dispatch(
        self,
        endpoint: str,
        method: str,
        envelope: Union[Envelope, Mapping, None] = None,
        force_fetch: bool = False,
    ) -> Any:
        """
        Send a request through the transport pipeline.

        Args:
            endpoint: API path, e.g. ``/messaging/sms``
            method: HTTP method
            envelope: Body, query and headers
            force_fetch: Skip transport plugins and use HTTPS directly

        Returns:
            The decoded response (or whatever the transport returned)

        Raises:
            ValidationError: If the envelope is malformed
            APIError: If the HTTP fallback receives a non-2xx response
        """
        return await self._dispatcher.dispatch(
            endpoint,
            method,
            envelope,
            self._context(),
            force_fetch=force_fetch,
        )

    def set_token(self, token: Optional[str]) -> None:
        self.token = token

    def set_namespace(self, namespace: Optional[str]) -> None:
        """Switch tenants; the base URL follows the new namespace."""
        self.namespace = namespace
        self.base_url = build_base_url(namespace, self.domain, self.environment)

    def debug(self, enabled: bool = True) -> "Unbound":
        """Toggle debug logging of every request."""
        self.debug_mode = enabled
        if enabled:
            logging.basicConfig(level=logging.DEBUG)
            logger.setLevel(logging.DEBUG)
        else:
            logger.setLevel(logging.NOTSET)
        return self

    def add_transport(self, transport: Any) -> "Unbound":
        """
        Register a transport plugin.

        A transport exposes ``request(endpoint, method, envelope, context)``
        and optionally ``name``, ``get_priority()`` (lower runs first) and
        ``is_available()``. It must return API responses, error
        statuses included, and raise only when its own mechanism fails.
        An unnamed transport is given a generated ``name`` so it can be
        passed to ``remove_transport`` later.
        """
        self._registry.add(transport)
        return self

    def remove_transport(self, name: str) -> "Unbound":
        self._registry.remove(name)
        return self

    def use(self, plugin: Any) -> "Unbound":
        """Install a plugin: a callable taking the client, or an object with ``install``."""
        if callable(plugin):
            plugin(self)
        elif plugin is not None and callable(getattr(plugin, "install", None)):
            plugin.install(self)
        else:
            raise ExtensionError("Plugin must be a function or have an install method")
        return self

    def extend(self, extension: Any) -> "Unbound":
        """
        Mount extra capabilities on the client.

        A class (or factory) is called with the client and the public
        attributes of the result are copied onto the client; a mapping's
        items are copied directly.
        """
        if isinstance(extension, Mapping):
            members: Dict[str, Any] = dict(extension)
        elif callable(extension):
            instance = extension(self)
            members = {
                key: value
                for key, value in vars(instance).items()
                if not key.startswith("_") and value is not None
            }
        else:
            raise ExtensionError("Extension must be a class, factory or mapping")

        for key, value in members.items():
            setattr(self, key, value)
        logger.debug(f"Extension mounted: {', '.join(members) or '(nothing)'}")
        return self

    async def build_master_auth(
        self,
        namespace: Optional[str] = None,
        account_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Any:
        raise ExtensionError(
            "build_master_auth is only available with the internal SDK extension. "
            "Please use: client.use(InternalExtension)"
        )

    async def status(self) -> Dict[str, Any]:
        """
        Check configuration and API connectivity.

        Never raises for API or network errors; ``healthy`` is False instead.

        Returns:
            Health summary with ``healthy``, ``has_authorization``,
            ``auth_type``, ``namespace``, ``environment``, ``transport``,
            ``timestamp``, ``url`` and ``status_code``
        """
        try:
            health, status_code = await self._dispatcher.dispatch(
                Endpoints.HEALTH, "GET", None, self._context(), with_status=True
            )
        except (UnboundError, httpx.HTTPError) as e:
            logger.debug(f"Health check failed: {e}")
            return {
                "healthy": False,
                "has_authorization": False,
                "auth_type": None,
                "namespace": self.namespace,
                "environment": self.environment.value,
                "error": getattr(e, "message", None) or str(e),
                "status_code": getattr(e, "status", None),
            }

        if not isinstance(health, Mapping):
            health = {}
        return {
            "healthy": True,
            "has_authorization": health.get("hasAuthorization", False),
            "auth_type": health.get("authType"),
            "namespace": self.namespace,
            "environment": self.environment.value,
            "transport": health.get("transport", "unknown"),
            "timestamp": health.get("timestamp"),
            "url": health.get("url"),
            "status_code": status_code,
        }

    async def get_ip(self) -> Any:
        """Return the caller's IP address as seen by the API; always over HTTPS."""
        return await self.dispatch(Endpoints.GET_IP, "GET", force_fetch=True)

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self._http.aclose()
        logger.debug("Unbound client closed")

    aclose = close

    async def __aenter__(self) -> "Unbound":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"Unbound(namespace='{self.namespace}', base_url='{self.base_url}')"


def create_client(options: Union[ClientConfig, Mapping, str, None] = None, **overrides: Any) -> Unbound:
    """Factory for the common construction patterns."""
    return Unbound(options, **overrides)
