"""
Unbound Python SDK - Transport Plugins

A transport is any object with a ``request(endpoint, method, envelope,
context)`` callable. It may also provide ``name``, ``get_priority()`` and
``is_available()``; each callable may be a plain function or a coroutine
function. Lower priority numbers win.

Transports must RETURN API responses normally, including error statuses,
and only RAISE when the transport mechanism itself fails. A raised error
makes the client fall back to plain HTTP.
"""

from __future__ import annotations

import inspect
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Dict, Iterator, List, Optional

from unbound.types import Envelope, RequestContext
from unbound.utils import maybe_await

logger = logging.getLogger("unbound.transports")


DEFAULT_PRIORITY = 50


class Transport:
    """
    Optional base class for transport plugins.

    Example:
        >>> class SocketTransport(Transport):
        ...     name = "socket"
        ...
        ...     def get_priority(self):
        ...         return 10
        ...
        ...     async def is_available(self):
        ...         return self.socket.connected
        ...
        ...     async def request(self, endpoint, method, envelope, context):
        ...         return await self.socket.call(method, endpoint, envelope.body)
    """

    name: Optional[str] = None

    def get_priority(self) -> int:
        return DEFAULT_PRIORITY

    def is_available(self) -> bool:
        return True

    def request(
        self,
        endpoint: str,
        method: str,
        envelope: Envelope,
        context: RequestContext,
    ) -> Any:
        raise NotImplementedError


@dataclass
class TransportRecord:
    """
    A registered transport with its resolved name and priority.

    A coroutine ``get_priority`` leaves ``pending_priority`` set until the
    next ``pick`` awaits it; until then the record sorts at the default
    priority.
    """
    name: str
    priority: int
    transport: Any
    pending_priority: Optional[Awaitable[Any]] = field(default=None, repr=False)


class TransportRegistry:
    """
    Named transports ordered by priority at pick time.

    Re-adding a name replaces the earlier binding. Transports with equal
    priority are tried in insertion order.
    """

    def __init__(self) -> None:
        self._records: Dict[str, TransportRecord] = {}

    def add(self, transport: Any) -> TransportRecord:
        request = getattr(transport, "request", None)
        if transport is None or not callable(request):
            raise TypeError("Transport must have a request method")

        name = getattr(transport, "name", None)
        if not name:
            name = f"transport_{uuid.uuid4().hex[:12]}"
            try:
                transport.name = name
            except AttributeError:
                logger.debug(f"Transport {name} does not accept a name attribute")

        get_priority = getattr(transport, "get_priority", None)
        priority = get_priority() if callable(get_priority) else DEFAULT_PRIORITY

        record = TransportRecord(name=name, priority=DEFAULT_PRIORITY, transport=transport)
        if inspect.isawaitable(priority):
            record.pending_priority = priority
        else:
            record.priority = priority

        self._discard(self._records.get(name))
        self._records[name] = record
        logger.debug(f"Registered transport {name} with priority {record.priority}")
        return record

    def remove(self, name: str) -> None:
        record = self._records.pop(name, None)
        if record is not None:
            self._discard(record)
            logger.debug(f"Removed transport {name}")

    @staticmethod
    def _discard(record: Optional[TransportRecord]) -> None:
        if record is not None and inspect.iscoroutine(record.pending_priority):
            record.pending_priority.close()

    async def resolve_priorities(self) -> None:
        """Await any priorities still pending from coroutine ``get_priority`` calls."""
        for record in list(self._records.values()):
            pending = record.pending_priority
            if pending is None:
                continue
            record.pending_priority = None
            try:
                record.priority = await pending
            except Exception as e:
                logger.debug(f"Transport {record.name} priority failed, using default: {e}")
                record.priority = DEFAULT_PRIORITY

    def ordered(self) -> List[TransportRecord]:
        """Records sorted by ascending priority; ties keep insertion order."""
        return sorted(self._records.values(), key=lambda record: record.priority)

    async def pick(self, force_fetch: bool = False) -> Optional[TransportRecord]:
        """
        Return the first available transport, or None to use HTTP.

        A probe that raises counts as "not available". A transport without
        an ``is_available`` probe is never picked.
        """
        if force_fetch:
            return None

        await self.resolve_priorities()
        for record in self.ordered():
            probe = getattr(record.transport, "is_available", None)
            if not callable(probe):
                continue
            try:
                if await maybe_await(probe()):
                    return record
            except Exception as e:
                logger.debug(f"Transport {record.name} not available: {e}")

        return None

    def get(self, name: str) -> Optional[Any]:
        record = self._records.get(name)
        return record.transport if record else None

    def names(self) -> List[str]:
        return [record.name for record in self.ordered()]

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __iter__(self) -> Iterator[TransportRecord]:
        return iter(self.ordered())

    def __len__(self) -> int:
        return len(self._records)
