"""
Unbound Python SDK - Base Resource

This module contains the base class for all service resources.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

if TYPE_CHECKING:
    from unbound.client import Unbound


class BaseResource:
    """
    Base class for all service resources.

    A resource only composes envelopes: it validates its arguments with the
    client and hands the request to the client's dispatcher.
    """

    def __init__(self, client: "Unbound") -> None:
        """
        Initialize the resource.

        Args:
            client: The Unbound client instance
        """
        self._client = client

    def _validate(self, values: Mapping[str, Any], schema: Mapping[str, Mapping[str, Any]]) -> None:
        self._client.validate(values, schema)

    async def _get(
        self,
        path: str,
        query: Optional[Dict[str, Any]] = None,
        force_fetch: bool = False,
    ) -> Any:
        """Make a GET request."""
        return await self._client.dispatch(path, "GET", {"query": query}, force_fetch=force_fetch)

    async def _post(
        self,
        path: str,
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make a POST request."""
        return await self._client.dispatch(path, "POST", {"body": body, "headers": headers})

    async def _put(self, path: str, body: Any = None) -> Any:
        """Make a PUT request."""
        return await self._client.dispatch(path, "PUT", {"body": body})

    async def _delete(self, path: str, query: Optional[Dict[str, Any]] = None) -> Any:
        """Make a DELETE request."""
        return await self._client.dispatch(path, "DELETE", {"query": query})

    @staticmethod
    def _compact(**values: Any) -> Dict[str, Any]:
        """Drop unset fields so they are not sent."""
        return {key: value for key, value in values.items() if value is not None}
